from __future__ import annotations

from typing import Any, Optional, Protocol


class UIServerLike(Protocol):
    def publish(self, event_type: str, **payload: Any) -> None:
        ...


class RuntimeUIPublisher:
    """Event sink handed to the state machine; drops events while no UI server is attached."""
    def __init__(self, ui_server: Optional[UIServerLike] = None):
        self._ui_server = ui_server

    def attach(self, ui_server: Optional[UIServerLike]) -> None:
        self._ui_server = ui_server

    def publish(self, event_type: str, **payload: Any) -> None:
        if self._ui_server:
            self._ui_server.publish(event_type, **payload)
