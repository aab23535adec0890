import asyncio
import datetime as dt
import json
import socket
import unittest
import urllib.error
import urllib.request

from websockets.asyncio.client import connect

from app_config_schema import AppConfig, NotificationSettings, StoreSettings
from runtime import create_runtime
from server import UIServer, UIServerConfig

NOW = dt.datetime(2024, 3, 6, 9, 0, tzinfo=dt.timezone.utc)
TIMEOUT_SECONDS = 5.0


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


async def _receive(websocket) -> dict:
    return json.loads(await asyncio.wait_for(websocket.recv(), timeout=TIMEOUT_SECONDS))


async def _receive_count(websocket, count: int) -> list[dict]:
    return [await _receive(websocket) for _ in range(count)]


async def _receive_until(websocket, event_type: str) -> list[dict]:
    events = []
    while True:
        event = await _receive(websocket)
        events.append(event)
        if event["type"] == event_type:
            return events


def _types(events: list[dict]) -> list[str]:
    return [event["type"] for event in events]


class UIServerRoundTripTests(unittest.TestCase):
    def setUp(self) -> None:
        config = AppConfig(
            store=StoreSettings(backend="memory", data_dir=""),
            notifications=NotificationSettings(enabled=False),
        )
        self.runtime = create_runtime(config, now_fn=lambda: NOW)
        self.port = _free_port()
        self.server = UIServer(
            config=UIServerConfig(port=self.port, command_workers=2),
            command_handler=self.runtime.dispatcher.handle_message,
        )
        self.runtime.publisher.attach(self.server)
        self.runtime.machine.restore_state()
        self.server.start(timeout_seconds=TIMEOUT_SECONDS)
        self.addCleanup(self.server.stop, TIMEOUT_SECONDS)

    @property
    def uri(self) -> str:
        return f"ws://127.0.0.1:{self.port}/ws"

    def test_new_client_gets_hello_and_current_state(self) -> None:
        async def scenario() -> list[dict]:
            async with connect(self.uri) as websocket:
                return await _receive_count(websocket, 4)

        events = asyncio.run(scenario())

        self.assertEqual(
            ["hello", "switch-phase", "session-number", "remaining"],
            _types(events),
        )
        self.assertEqual(["Work", 0, 25], [event["payload"] for event in events[1:]])

    def test_switch_phase_reply_follows_its_events(self) -> None:
        async def scenario() -> list[dict]:
            async with connect(self.uri) as websocket:
                await _receive_count(websocket, 4)
                await websocket.send(
                    json.dumps(
                        {"command": "switch_phase", "is_previous": False, "is_user": False}
                    )
                )
                return await _receive_until(websocket, "command_result")

        events = asyncio.run(scenario())

        self.assertEqual(
            ["stats", "switch-phase", "session-number", "remaining", "command_result"],
            _types(events),
        )
        self.assertEqual({"minutes": 25, "sessions": 1}, events[0]["payload"]["total"])
        self.assertEqual(["ShortBreak", 1, 5], [event["payload"] for event in events[1:4]])
        result = events[-1]["payload"]
        self.assertEqual("switch_phase", result["command"])
        self.assertTrue(result["accepted"])
        self.assertEqual("ShortBreak", result["phase"])
        self.assertEqual(1, result["session_number"])
        self.assertTrue(result["is_break"])
        self.assertEqual(1, self.runtime.machine.snapshot().session_number)

    def test_late_client_replays_latest_state(self) -> None:
        async def scenario() -> list[dict]:
            async with connect(self.uri) as first:
                await _receive_count(first, 4)
                await first.send(
                    json.dumps(
                        {"command": "switch_phase", "is_previous": False, "is_user": False}
                    )
                )
                await _receive_until(first, "command_result")

            async with connect(self.uri) as late:
                return await _receive_count(late, 5)

        events = asyncio.run(scenario())

        self.assertEqual(
            ["hello", "switch-phase", "session-number", "remaining", "stats"],
            _types(events),
        )
        self.assertEqual(["ShortBreak", 1, 5], [event["payload"] for event in events[1:4]])

    def test_command_reply_only_reaches_sender(self) -> None:
        async def scenario() -> tuple[list[dict], list[dict]]:
            async with connect(self.uri) as sender, connect(self.uri) as observer:
                await _receive_count(sender, 4)
                await _receive_count(observer, 4)

                await sender.send(
                    json.dumps({"command": "switch_phase", "is_previous": False, "is_user": True})
                )
                sender_events = await _receive_until(sender, "command_result")

                await observer.send(json.dumps({"command": "reset_phase"}))
                observer_events = await _receive_until(observer, "command_result")
                return sender_events, observer_events

        sender_events, observer_events = asyncio.run(scenario())

        self.assertEqual(
            ["switch-phase", "session-number", "remaining", "command_result"],
            _types(sender_events),
        )
        self.assertEqual(
            ["switch-phase", "session-number", "remaining", "remaining", "command_result"],
            _types(observer_events),
        )
        self.assertEqual("reset_phase", observer_events[-1]["payload"]["command"])

    def test_invalid_command_gets_error_reply(self) -> None:
        async def scenario() -> dict:
            async with connect(self.uri) as websocket:
                await _receive_count(websocket, 4)
                await websocket.send(json.dumps({"command": "self_destruct"}))
                return await _receive(websocket)

        event = asyncio.run(scenario())

        self.assertEqual("error", event["type"])
        self.assertEqual("unsupported_command", event["payload"]["kind"])

    def test_healthz_answers_ok(self) -> None:
        url = f"http://127.0.0.1:{self.port}/healthz"
        with urllib.request.urlopen(url, timeout=TIMEOUT_SECONDS) as response:
            self.assertEqual(200, response.status)
            self.assertEqual(b"ok\n", response.read())

    def test_unknown_http_path_is_not_found(self) -> None:
        url = f"http://127.0.0.1:{self.port}/missing"
        with self.assertRaises(urllib.error.HTTPError) as raised:
            urllib.request.urlopen(url, timeout=TIMEOUT_SECONDS)
        self.assertEqual(404, raised.exception.code)
        raised.exception.close()


if __name__ == "__main__":
    unittest.main()
