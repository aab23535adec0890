"""Thread-safe in-memory phase/session state machine backed by persisted settings."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from contracts.ui_protocol import (
    EVENT_REMAINING,
    EVENT_SESSION_NUMBER,
    EVENT_SETTINGS,
    EVENT_STATS,
    EVENT_SWITCH_PHASE,
    PAYLOAD_KEY,
)

from .constants import (
    BREAK_PHASES,
    COMMAND_GET_SETTINGS,
    COMMAND_GET_STATS,
    COMMAND_RESET_PHASE,
    COMMAND_RESTORE_STATE,
    COMMAND_SWITCH_PHASE,
    COMMAND_UPDATE_SETTINGS,
    NOTIFICATION_BODIES,
    NOTIFICATION_TITLE,
    PHASE_WORK,
    REASON_ADVANCED,
    REASON_RESET,
    REASON_RESTORED,
    REASON_REVERTED,
    REASON_SETTINGS_SENT,
    REASON_SETTINGS_UPDATED,
    REASON_STATS_SENT,
    STORE_KEY_SETTINGS,
)
from .contracts import EventSink, KeyValueStore, Notifier
from .errors import NotificationError
from .phases import next_session_number, phase_for_session
from .records import Settings
from .stats import StatsTracker


@dataclass(frozen=True)
class PomodoroSnapshot:
    """Immutable view of where the cycle currently is."""
    phase: str
    session_number: int

    @property
    def is_break(self) -> bool:
        return self.phase in BREAK_PHASES


@dataclass(frozen=True)
class CommandResult:
    """Result envelope returned after applying a front-end command."""
    command: str
    accepted: bool
    reason: str
    snapshot: PomodoroSnapshot


class PomodoroStateMachine:
    """Owns the current phase and session counter.

    Phase and counter are held only in memory and start at `Work` / 0 on every
    process start; settings and statistics are read from the store on each
    command. All commands run under one lock so overlapping transitions are
    applied one after another and their events go out in state order.
    """

    def __init__(
        self,
        *,
        store: KeyValueStore,
        events: EventSink,
        stats: Optional[StatsTracker] = None,
        notifier: Optional[Notifier] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._store = store
        self._events = events
        self._stats = stats or StatsTracker(store)
        self._notifier = notifier
        self._logger = logger or logging.getLogger("pomodoro")
        self._lock = threading.Lock()

        self._phase: str = PHASE_WORK
        self._session_number: int = 0

    def snapshot(self) -> PomodoroSnapshot:
        with self._lock:
            return self._snapshot_locked()

    def settings(self) -> Settings:
        return Settings.from_dict(self._store.get(STORE_KEY_SETTINGS))

    def switch_phase(self, *, is_previous: bool, is_user: bool) -> CommandResult:
        with self._lock:
            settings = self.settings()
            if self._phase == PHASE_WORK and not (is_user or is_previous):
                stats = self._stats.record_session(settings.duration_for(self._phase))
                self._events.publish(EVENT_STATS, **{PAYLOAD_KEY: stats.to_dict()})

            session_number = next_session_number(
                self._session_number,
                is_previous=is_previous,
            )
            previous_phase = self._phase
            self._session_number = session_number
            self._phase = phase_for_session(session_number, settings.long_break_interval)
            self._logger.info(
                "Phase switched: %s -> %s session=%s user=%s previous=%s",
                previous_phase,
                self._phase,
                self._session_number,
                is_user,
                is_previous,
            )

            self._publish_phase_locked()
            self._publish_session_number_locked()
            self._notify_phase_locked()
            self._publish_remaining_locked(settings)
            reason = REASON_REVERTED if is_previous else REASON_ADVANCED
            return self._result_locked(COMMAND_SWITCH_PHASE, reason)

    def reset_phase(self) -> CommandResult:
        with self._lock:
            self._publish_remaining_locked(self.settings())
            return self._result_locked(COMMAND_RESET_PHASE, REASON_RESET)

    def restore_state(self) -> CommandResult:
        with self._lock:
            settings = self.settings()
            self._publish_phase_locked()
            self._publish_session_number_locked()
            self._publish_remaining_locked(settings)
            return self._result_locked(COMMAND_RESTORE_STATE, REASON_RESTORED)

    def update_settings(self, settings: Settings) -> CommandResult:
        """Replace the stored settings record as a whole; no field is merged."""
        with self._lock:
            self._store.set(STORE_KEY_SETTINGS, settings.to_dict())
            self._logger.info("Settings updated: %s", settings)
            self._events.publish(EVENT_SETTINGS, **{PAYLOAD_KEY: settings.to_dict()})
            return self._result_locked(COMMAND_UPDATE_SETTINGS, REASON_SETTINGS_UPDATED)

    def publish_settings(self) -> CommandResult:
        with self._lock:
            self._events.publish(EVENT_SETTINGS, **{PAYLOAD_KEY: self.settings().to_dict()})
            return self._result_locked(COMMAND_GET_SETTINGS, REASON_SETTINGS_SENT)

    def publish_stats(self) -> CommandResult:
        with self._lock:
            self._events.publish(EVENT_STATS, **{PAYLOAD_KEY: self._stats.load().to_dict()})
            return self._result_locked(COMMAND_GET_STATS, REASON_STATS_SENT)

    def _publish_phase_locked(self) -> None:
        self._events.publish(EVENT_SWITCH_PHASE, **{PAYLOAD_KEY: self._phase})

    def _publish_session_number_locked(self) -> None:
        self._events.publish(EVENT_SESSION_NUMBER, **{PAYLOAD_KEY: self._session_number})

    def _publish_remaining_locked(self, settings: Settings) -> None:
        self._events.publish(
            EVENT_REMAINING,
            **{PAYLOAD_KEY: settings.duration_for(self._phase)},
        )

    def _notify_phase_locked(self) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.notify(NOTIFICATION_TITLE, NOTIFICATION_BODIES[self._phase])
        except NotificationError as error:
            self._logger.warning("Phase notification failed: %s", error)

    def _result_locked(self, command: str, reason: str) -> CommandResult:
        return CommandResult(
            command=command,
            accepted=True,
            reason=reason,
            snapshot=self._snapshot_locked(),
        )

    def _snapshot_locked(self) -> PomodoroSnapshot:
        return PomodoroSnapshot(phase=self._phase, session_number=self._session_number)
