from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

import websockets
from websockets.asyncio.server import ServerConnection
from websockets.datastructures import Headers
from websockets.http11 import Request, Response

from contracts.ui_protocol import EVENT_HELLO

from .config import HEALTHZ_PATH, UIServerConfig
from .events import StickyEventStore, enqueue_all, make_event

CommandReply = tuple[str, dict[str, Any]]
CommandHandler = Callable[[str], list[CommandReply]]


class UIServer:
    """Threaded asyncio websocket server carrying front-end commands and events."""

    def __init__(
        self,
        config: UIServerConfig,
        command_handler: Optional[CommandHandler] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._command_handler = command_handler
        self._logger = logger or logging.getLogger("ui_server")
        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stop_async: Optional[asyncio.Event] = None
        self._executor: Optional[ThreadPoolExecutor] = None
        self._started = threading.Event()
        self._startup_error: Optional[Exception] = None
        self._connected_clients: set[ServerConnection] = set()
        self._sticky_events = StickyEventStore()

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        return self._config.port

    @property
    def websocket_path(self) -> str:
        return self._config.websocket_path

    @property
    def is_running(self) -> bool:
        return (
            self._thread is not None
            and self._thread.is_alive()
            and self._startup_error is None
        )

    def start(self, timeout_seconds: float = 5.0) -> None:
        if self.is_running:
            self._logger.warning("UI server is already running")
            return

        self._startup_error = None
        self._started.clear()
        self._executor = ThreadPoolExecutor(
            max_workers=self._config.command_workers,
            thread_name_prefix="ui-command",
        )
        self._thread = threading.Thread(
            target=self._run_loop,
            daemon=True,
            name="ui-server",
        )
        self._thread.start()

        if not self._started.wait(timeout_seconds):
            raise RuntimeError(
                f"UI server did not start within {timeout_seconds:.1f}s"
            )

        if self._startup_error is not None:
            raise RuntimeError(f"UI server startup failed: {self._startup_error}")

    def stop(self, timeout_seconds: float = 5.0) -> None:
        if self._thread is None:
            return

        if self._loop and self._stop_async:
            self._loop.call_soon_threadsafe(self._stop_async.set)

        self._thread.join(timeout=timeout_seconds)
        if self._thread.is_alive():
            self._logger.error(
                "UI server thread did not stop within %.1fs",
                timeout_seconds,
            )

        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)

        self._thread = None
        self._loop = None
        self._stop_async = None
        self._executor = None

    def publish(self, event_type: str, **payload: Any) -> None:
        message = make_event(event_type, **payload)
        loop = self._loop
        if not self.is_running or loop is None:
            self._sticky_events.remember(event_type, message)
            return

        try:
            loop.call_soon_threadsafe(self._sticky_events.dispatch, event_type, message)
        except RuntimeError:
            # Loop closed between the check and the call.
            self._sticky_events.remember(event_type, message)

    def _run_loop(self) -> None:
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)
        self._stop_async = asyncio.Event()

        try:
            self._loop.run_until_complete(self._serve())
        except Exception as error:  # pragma: no cover - exercised manually
            self._startup_error = error
            self._logger.error("UI server failed: %s", error, exc_info=True)
            self._started.set()
        finally:
            if self._loop is not None:
                pending = asyncio.all_tasks(self._loop)
                for task in pending:
                    task.cancel()
                with contextlib.suppress(Exception):
                    self._loop.run_until_complete(
                        asyncio.gather(*pending, return_exceptions=True)
                    )
                self._loop.close()

    async def _serve(self) -> None:
        async with websockets.serve(
            self._handler,
            host=self._config.host,
            port=self._config.port,
            process_request=self._process_request,
            logger=self._logger,
        ):
            self._logger.info(
                "UI server running at ws://%s:%d%s",
                self._config.host,
                self._config.port,
                self._config.websocket_path,
            )
            self._started.set()
            await self._stop_async.wait()
            await self._close_clients()

    async def _handler(self, websocket: ServerConnection) -> None:
        request_path = (
            urlsplit(websocket.request.path).path
            if websocket.request is not None
            else ""
        )
        if request_path != self._config.websocket_path:
            await websocket.close(code=1008, reason="Invalid websocket path")
            return

        outbox: asyncio.Queue[str] = asyncio.Queue()
        outbox.put_nowait(make_event(EVENT_HELLO, message="UI websocket connected"))
        self._sticky_events.subscribe(outbox)
        self._connected_clients.add(websocket)
        sender = asyncio.create_task(self._drain(websocket, outbox))
        self._logger.info("Client connected: %s", websocket.remote_address)
        try:
            async for message in websocket:
                self._logger.debug("Received from UI: %s", message)
                await self._handle_command(outbox, message)
        except websockets.exceptions.ConnectionClosed:
            self._logger.info("Client disconnected: %s", websocket.remote_address)
        finally:
            self._sticky_events.unsubscribe(outbox)
            self._connected_clients.discard(websocket)
            sender.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sender

    async def _drain(self, websocket: ServerConnection, outbox: asyncio.Queue[str]) -> None:
        while True:
            message = await outbox.get()
            try:
                await websocket.send(message)
            except websockets.exceptions.ConnectionClosed:
                return

    async def _handle_command(
        self,
        outbox: asyncio.Queue[str],
        message: str | bytes,
    ) -> None:
        handler = self._command_handler
        loop = self._loop
        if handler is None or loop is None:
            return

        text = message.decode("utf-8", errors="replace") if isinstance(message, bytes) else message

        def run_command() -> None:
            replies = [make_event(event_type, **payload) for event_type, payload in handler(text)]
            # Queued behind the events the command published from this thread.
            loop.call_soon_threadsafe(enqueue_all, outbox, replies)

        await loop.run_in_executor(self._executor, run_command)

    async def _process_request(
        self,
        connection: ServerConnection,
        request: Request,
    ) -> Response | None:
        del connection  # Unused in static routing.
        path = urlsplit(request.path).path

        if path == self._config.websocket_path:
            return None

        if path == HEALTHZ_PATH:
            return self._response(
                200,
                "OK",
                b"ok\n",
                "text/plain; charset=utf-8",
            )

        return self._response(
            404,
            "Not Found",
            b"not found\n",
            "text/plain; charset=utf-8",
        )

    def _response(
        self,
        status_code: int,
        reason_phrase: str,
        body: bytes,
        content_type: str,
    ) -> Response:
        headers = Headers()
        headers["Content-Type"] = content_type
        headers["Content-Length"] = str(len(body))
        headers["Cache-Control"] = "no-store"
        return Response(status_code, reason_phrase, headers, body)

    async def _close_clients(self) -> None:
        if not self._connected_clients:
            return

        tasks = [
            client.close(code=1001, reason="Server shutting down")
            for client in tuple(self._connected_clients)
        ]
        await asyncio.gather(*tasks, return_exceptions=True)
        self._connected_clients.clear()
