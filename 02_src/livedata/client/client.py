"""Reusable STOMP client for subscribing to the broadcaster over WebSocket."""

import asyncio
from typing import Awaitable, Callable
from urllib.parse import urlparse

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from ..logging_config import get_logger
from ..models import StompCommand, StompFrame
from ..stomp import HEARTBEAT, StompProtocolError, decode_frames, encode_frame

logger = get_logger(__name__)

DEFAULT_BROKER_URL = "ws://localhost:8080/ws"
SUBPROTOCOLS = ["v12.stomp", "v11.stomp", "v10.stomp"]

MessageCallback = Callable[[StompFrame], Awaitable[None] | None]


class ClientSubscription:
    """Handle returned by LiveDataClient.subscribe()."""

    def __init__(
        self,
        client: "LiveDataClient",
        sub_id: str,
        destination: str,
        callback: MessageCallback,
    ):
        self._client = client
        self.id = sub_id
        self.destination = destination
        self.callback = callback
        self.active = False  # SUBSCRIBE sent on the current connection

    async def unsubscribe(self) -> None:
        await self._client._unsubscribe(self)


class LiveDataClient:
    """
    STOMP web client: connect, subscribe to destinations, disconnect.

    Subscriptions may be registered before connecting; they are (re)applied
    every time the server answers CONNECTED, so they survive reconnects.
    """

    def __init__(
        self,
        broker_url: str = DEFAULT_BROKER_URL,
        reconnect_delay: float = 3.0,
        heartbeat: tuple[int, int] = (10000, 10000),
        on_connect: Callable[[], None] | None = None,
        on_error: Callable[[str], None] | None = None,
        on_disconnect: Callable[[], None] | None = None,
    ):
        self._broker_url = broker_url
        self._reconnect_delay = reconnect_delay
        self._heartbeat = heartbeat
        self._on_connect = on_connect
        self._on_error = on_error
        self._on_disconnect = on_disconnect

        self._subscriptions: dict[str, ClientSubscription] = {}
        self._next_sub_id = 0
        self._ws = None
        self._connected = False
        self._active = False
        self._task: asyncio.Task | None = None
        self._heartbeat_task: asyncio.Task | None = None
        self._pending: set[asyncio.Task] = set()

    @property
    def broker_url(self) -> str:
        return self._broker_url

    def is_connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        """Start the connection loop. Idempotent."""
        if self._active:
            return
        self._active = True
        self._task = asyncio.create_task(self._run())

    async def disconnect(self) -> None:
        """Drop all subscriptions and stop the connection loop."""
        if not self._active:
            return
        self._active = False

        for sub in list(self._subscriptions.values()):
            await sub.unsubscribe()
        self._subscriptions.clear()

        if self._ws is not None and self._connected:
            try:
                await self._send(StompFrame(command=StompCommand.DISCONNECT))
            except ConnectionClosed:
                pass

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    def subscribe(self, destination: str, callback: MessageCallback) -> ClientSubscription:
        """
        Subscribe to a STOMP destination (e.g. '/topic/live-data').

        Sent immediately when connected, otherwise on the next CONNECTED.
        The callback receives the MESSAGE frame; its body is the raw JSON string.
        """
        sub_id = f"sub-{self._next_sub_id}"
        self._next_sub_id += 1
        sub = ClientSubscription(self, sub_id, destination, callback)
        self._subscriptions[sub_id] = sub

        if self._connected:
            task = asyncio.create_task(self._apply_subscriptions())
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

        return sub

    async def _unsubscribe(self, sub: ClientSubscription) -> None:
        self._subscriptions.pop(sub.id, None)
        if sub.active and self._connected:
            try:
                await self._send(
                    StompFrame(command=StompCommand.UNSUBSCRIBE, headers={"id": sub.id})
                )
            except ConnectionClosed:
                pass
        sub.active = False

    async def _run(self) -> None:
        """Connect, read frames, reconnect after reconnect_delay while active."""
        while self._active:
            try:
                async with websockets.connect(
                    self._broker_url, subprotocols=SUBPROTOCOLS
                ) as ws:
                    self._ws = ws
                    await self._send(self._connect_frame())
                    async for raw in ws:
                        await self.handle_data(raw)
            except asyncio.CancelledError:
                break
            except (OSError, WebSocketException) as e:
                logger.warning("Connection to %s failed: %s", self._broker_url, e)
            except Exception as e:
                logger.error(
                    "Connection to %s dropped: %s", self._broker_url, e, exc_info=True
                )
            finally:
                self._handle_close()

            if self._active:
                try:
                    await asyncio.sleep(self._reconnect_delay)
                except asyncio.CancelledError:
                    break

    def _connect_frame(self) -> StompFrame:
        host = urlparse(self._broker_url).hostname or "localhost"
        return StompFrame(
            command=StompCommand.CONNECT,
            headers={
                "accept-version": "1.2,1.1,1.0",
                "host": host,
                "heart-beat": f"{self._heartbeat[0]},{self._heartbeat[1]}",
            },
        )

    async def handle_data(self, data: str | bytes) -> None:
        """Handle raw data read from the WebSocket."""
        try:
            frames = decode_frames(data)
        except StompProtocolError as e:
            self._report_error(str(e))
            return

        for frame in frames:
            await self._handle_frame(frame)

    async def _handle_frame(self, frame: StompFrame) -> None:
        if frame.command == StompCommand.CONNECTED:
            self._connected = True
            self._start_heartbeat(frame.headers.get("heart-beat", "0,0"))
            logger.info(
                "Connected to %s (version %s)",
                self._broker_url,
                frame.headers.get("version", "1.0"),
            )
            await self._apply_subscriptions()
            if self._on_connect:
                self._on_connect()
        elif frame.command == StompCommand.MESSAGE:
            sub = self._subscriptions.get(frame.headers.get("subscription", ""))
            if sub is None:
                logger.debug("Dropping message for unknown subscription")
                return
            try:
                result = sub.callback(frame)
                if asyncio.iscoroutine(result):
                    await result
            except Exception as e:
                logger.error(
                    "Error in callback for %s: %s", sub.destination, e, exc_info=True
                )
        elif frame.command == StompCommand.ERROR:
            self._report_error(frame.headers.get("message") or frame.body)
        elif frame.command == StompCommand.RECEIPT:
            logger.debug("Receipt %s", frame.headers.get("receipt-id"))

    async def _apply_subscriptions(self) -> None:
        if not self._connected:
            return
        for sub in list(self._subscriptions.values()):
            if sub.active:
                continue
            sub.active = True
            await self._send(
                StompFrame(
                    command=StompCommand.SUBSCRIBE,
                    headers={"id": sub.id, "destination": sub.destination},
                )
            )

    def _start_heartbeat(self, server_heartbeat: str) -> None:
        try:
            _, server_incoming = (int(v) for v in server_heartbeat.split(","))
        except ValueError:
            server_incoming = 0
        client_outgoing = self._heartbeat[0]
        if not client_outgoing or not server_incoming:
            return
        interval = max(client_outgoing, server_incoming) / 1000
        self._heartbeat_task = asyncio.create_task(self._send_heartbeats(interval))

    async def _send_heartbeats(self, interval: float) -> None:
        try:
            while self._connected and self._ws is not None:
                await asyncio.sleep(interval)
                await self._ws.send(HEARTBEAT)
        except (asyncio.CancelledError, ConnectionClosed):
            pass

    def _handle_close(self) -> None:
        was_connected = self._connected
        self._connected = False
        self._ws = None
        if self._heartbeat_task:
            self._heartbeat_task.cancel()
            self._heartbeat_task = None
        for sub in self._subscriptions.values():
            sub.active = False
        if was_connected:
            logger.info("Disconnected from %s", self._broker_url)
            if self._on_disconnect:
                self._on_disconnect()

    def _report_error(self, message: str) -> None:
        logger.error("STOMP error from %s: %s", self._broker_url, message)
        if self._on_error:
            self._on_error(message or "Connection error")

    async def _send(self, frame: StompFrame) -> None:
        if self._ws is None:
            raise RuntimeError("Client not connected")
        await self._ws.send(encode_frame(frame))
