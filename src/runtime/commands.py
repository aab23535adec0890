"""Dispatcher that executes front-end commands against the pomodoro state machine."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from contracts.ui_protocol import (
    COMMAND_KEY,
    EVENT_COMMAND_RESULT,
    EVENT_ERROR,
    PAYLOAD_KEY,
)
from pomodoro import (
    CommandResult,
    CorruptRecordError,
    InvalidCommandError,
    PomodoroStateMachine,
    Settings,
    StoreUnavailableError,
)
from pomodoro.constants import (
    COMMAND_GET_SETTINGS,
    COMMAND_GET_STATS,
    COMMAND_RESET_PHASE,
    COMMAND_RESTORE_STATE,
    COMMAND_SWITCH_PHASE,
    COMMAND_UPDATE_SETTINGS,
    REASON_CORRUPT_RECORD,
    REASON_STORE_UNAVAILABLE,
    REASON_UNSUPPORTED_COMMAND,
)

CommandReply = tuple[str, dict[str, Any]]


class CommandDispatcher:
    """Routes decoded front-end commands to state machine operations."""
    def __init__(
        self,
        *,
        machine: PomodoroStateMachine,
        logger: logging.Logger,
    ):
        self._machine = machine
        self._logger = logger

    def handle_message(self, raw: str) -> list[CommandReply]:
        """Run one raw websocket message and build the replies for its sender.

        Failures never escape: they are logged and reported back as an
        `error` event so the front-end sees why a command had no effect.
        """
        command = ""
        try:
            command, arguments = _decode_command(raw)
            result = self.dispatch(command, arguments)
        except InvalidCommandError as error:
            self._logger.warning("Rejected command %r: %s", command, error)
            return [_error_reply(command, error.reason, str(error))]
        except StoreUnavailableError as error:
            self._logger.error("Command %s failed, store unavailable: %s", command, error)
            return [_error_reply(command, REASON_STORE_UNAVAILABLE, str(error))]
        except CorruptRecordError as error:
            self._logger.error("Command %s failed, corrupt record: %s", command, error)
            return [_error_reply(command, REASON_CORRUPT_RECORD, str(error))]

        return [
            (
                EVENT_COMMAND_RESULT,
                {
                    PAYLOAD_KEY: {
                        "command": result.command,
                        "accepted": result.accepted,
                        "reason": result.reason,
                        "phase": result.snapshot.phase,
                        "session_number": result.snapshot.session_number,
                        "is_break": result.snapshot.is_break,
                    }
                },
            )
        ]

    def dispatch(self, command: str, arguments: Mapping[str, Any]) -> CommandResult:
        if command == COMMAND_SWITCH_PHASE:
            return self._machine.switch_phase(
                is_previous=_required_bool(arguments, "is_previous"),
                is_user=_required_bool(arguments, "is_user"),
            )
        if command == COMMAND_RESET_PHASE:
            return self._machine.reset_phase()
        if command == COMMAND_RESTORE_STATE:
            return self._machine.restore_state()
        if command == COMMAND_UPDATE_SETTINGS:
            try:
                settings = Settings.from_dict(arguments.get("settings"))
            except CorruptRecordError as error:
                raise InvalidCommandError(str(error)) from error
            return self._machine.update_settings(settings)
        if command == COMMAND_GET_SETTINGS:
            return self._machine.publish_settings()
        if command == COMMAND_GET_STATS:
            return self._machine.publish_stats()

        raise InvalidCommandError(
            f"Unsupported command: {command!r}",
            reason=REASON_UNSUPPORTED_COMMAND,
        )


def _decode_command(raw: str) -> tuple[str, Mapping[str, Any]]:
    try:
        message = json.loads(raw)
    except json.JSONDecodeError as error:
        raise InvalidCommandError(f"Command is not valid JSON: {error}") from error

    if not isinstance(message, dict):
        raise InvalidCommandError("Command must be a JSON object.")

    command = message.get(COMMAND_KEY)
    if not isinstance(command, str) or not command.strip():
        raise InvalidCommandError(f"Command object requires a '{COMMAND_KEY}' string.")
    return command.strip(), message


def _required_bool(arguments: Mapping[str, Any], field: str) -> bool:
    value = arguments.get(field)
    if not isinstance(value, bool):
        raise InvalidCommandError(f"{field} must be a boolean.")
    return value


def _error_reply(command: str, kind: str, message: str) -> CommandReply:
    return (
        EVENT_ERROR,
        {PAYLOAD_KEY: {"command": command, "kind": kind, "message": message}},
    )
