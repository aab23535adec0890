"""Startup wiring from app configuration to a ready-to-serve pomodoro runtime."""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from app_config_schema import AppConfig
from notifications import NotificationConfig, PhaseNotifier
from pomodoro import PomodoroStateMachine, StatsTracker, store_defaults
from pomodoro.contracts import KeyValueStore, Notifier
from store import BACKEND_JSON, StoreConfig, open_store

from .commands import CommandDispatcher
from .ui import RuntimeUIPublisher


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


@dataclass(frozen=True)
class PomodoroRuntime:
    """Dependency bundle shared by the UI server and command handling."""
    store: KeyValueStore
    stats: StatsTracker
    machine: PomodoroStateMachine
    dispatcher: CommandDispatcher
    publisher: RuntimeUIPublisher


def create_runtime(
    app_config: AppConfig,
    *,
    now_fn: Callable[[], dt.datetime] = _utc_now,
    notifier: Optional[Notifier] = None,
    logger: Optional[logging.Logger] = None,
) -> PomodoroRuntime:
    """Open the store, roll stats over, and build the state machine.

    The stat rollover check runs here, once, before any command can reach the
    machine. Store and record errors propagate to the caller.
    """
    logger = logger or logging.getLogger("runtime")

    store_config = StoreConfig.from_settings(app_config.store)
    store = open_store(
        store_config,
        defaults=store_defaults(now_fn()),
        logger=logging.getLogger("store"),
    )
    if store_config.backend == BACKEND_JSON:
        logger.info("Store opened: %s", store_config.store_file)
    else:
        logger.info("Store opened: in-memory")

    stats = StatsTracker(
        store,
        now_fn=now_fn,
        logger=logging.getLogger("pomodoro.stats"),
    )
    stats.check_stat_reset()

    if notifier is None and app_config.notifications.enabled:
        notifier = PhaseNotifier(
            NotificationConfig.from_settings(app_config.notifications),
            logger=logging.getLogger("notifications"),
        )

    publisher = RuntimeUIPublisher()
    machine = PomodoroStateMachine(
        store=store,
        events=publisher,
        stats=stats,
        notifier=notifier,
        logger=logging.getLogger("pomodoro"),
    )
    dispatcher = CommandDispatcher(
        machine=machine,
        logger=logging.getLogger("runtime.commands"),
    )
    return PomodoroRuntime(
        store=store,
        stats=stats,
        machine=machine,
        dispatcher=dispatcher,
        publisher=publisher,
    )
