"""Server side of one STOMP over WebSocket connection."""

import asyncio
import uuid
from typing import Awaitable, Callable

from ..broker import IMessageBroker
from ..logging_config import get_logger
from ..models import BrokerMessage, StompCommand, StompFrame
from .codec import StompProtocolError, decode_frames, encode_frame

logger = get_logger(__name__)

SUPPORTED_VERSIONS = ("1.2", "1.1", "1.0")  # preference order
SERVER_NAME = "livedata/0.1.0"
RELAY_PREFIX = "/topic/"

SendText = Callable[[str], Awaitable[None]]


def select_subprotocol(offered: list[str]) -> str | None:
    """Pick the best vXY.stomp subprotocol offered by the client."""
    for version in SUPPORTED_VERSIONS:
        name = f"v{version.replace('.', '')}.stomp"
        if name in offered:
            return name
    return None


class StompSession:
    """Translates client frames into broker calls and broker messages into MESSAGE frames."""

    def __init__(
        self,
        broker: IMessageBroker,
        send: SendText,
        session_id: str | None = None,
    ):
        self._broker = broker
        self._send_text = send
        self._session_id = session_id or uuid.uuid4().hex[:12]
        self._send_lock = asyncio.Lock()
        self._connected = False
        self._closed = False
        self._version: str | None = None
        # client subscription id -> broker subscription id
        self._subscriptions: dict[str, str] = {}

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def version(self) -> str | None:
        return self._version

    @property
    def subscription_ids(self) -> list[str]:
        return list(self._subscriptions)

    async def handle_text(self, data: str | bytes) -> None:
        """Handle raw data received from the WebSocket."""
        if self._closed:
            return
        try:
            frames = decode_frames(data)
        except StompProtocolError as e:
            await self._fail(str(e))
            return

        for frame in frames:
            await self.handle_frame(frame)
            if self._closed:
                break

    async def handle_frame(self, frame: StompFrame) -> None:
        """Dispatch a single decoded client frame."""
        if self._closed:
            return

        try:
            if frame.command in (StompCommand.CONNECT, StompCommand.STOMP):
                await self._on_connect(frame)
                return
            if not self._connected:
                raise StompProtocolError(
                    f"Expected CONNECT frame, got {frame.command.value}"
                )

            if frame.command == StompCommand.SUBSCRIBE:
                self._on_subscribe(frame)
            elif frame.command == StompCommand.UNSUBSCRIBE:
                self._on_unsubscribe(frame)
            elif frame.command == StompCommand.SEND:
                await self._on_send(frame)
            elif frame.command == StompCommand.DISCONNECT:
                await self._send_receipt(frame)
                logger.info(
                    "STOMP session %s disconnected",
                    self._session_id,
                    extra={"context": self._context()},
                )
                self.close()
                return
            elif frame.command in (StompCommand.ACK, StompCommand.NACK):
                pass  # auto ack only
            else:
                raise StompProtocolError(
                    f"Unsupported frame {frame.command.value}"
                )
        except StompProtocolError as e:
            await self._fail(str(e), frame)
            return

        await self._send_receipt(frame)

    def close(self) -> None:
        """Drop all broker subscriptions of this session."""
        for broker_id in self._subscriptions.values():
            self._broker.unsubscribe(broker_id)
        self._subscriptions.clear()
        self._connected = False
        self._closed = True

    async def _on_connect(self, frame: StompFrame) -> None:
        if self._connected:
            raise StompProtocolError("Already connected")

        accepted = frame.headers.get("accept-version", "1.0").split(",")
        accepted = [v.strip() for v in accepted]
        version = next((v for v in SUPPORTED_VERSIONS if v in accepted), None)
        if version is None:
            await self._fail(
                "Supported protocol versions are " + " ".join(SUPPORTED_VERSIONS),
                frame,
                headers={"version": ",".join(SUPPORTED_VERSIONS)},
            )
            return

        self._version = version
        self._connected = True
        await self._send_frame(
            StompFrame(
                command=StompCommand.CONNECTED,
                headers={
                    "version": version,
                    "heart-beat": "0,0",
                    "server": SERVER_NAME,
                    "session": self._session_id,
                },
            )
        )
        logger.info(
            "STOMP session %s connected (version %s)",
            self._session_id,
            version,
            extra={"context": self._context(version=version)},
        )

    def _on_subscribe(self, frame: StompFrame) -> None:
        destination = frame.headers.get("destination")
        sub_id = frame.headers.get("id")
        if not destination:
            raise StompProtocolError("SUBSCRIBE requires a destination header")
        if sub_id is None:
            raise StompProtocolError("SUBSCRIBE requires an id header")
        if sub_id in self._subscriptions:
            raise StompProtocolError(f"Duplicate subscription id {sub_id!r}")

        async def deliver(message: BrokerMessage) -> None:
            await self._deliver(sub_id, message)

        self._subscriptions[sub_id] = self._broker.subscribe(destination, deliver)
        logger.info(
            "STOMP session %s subscribed to %s as %s",
            self._session_id,
            destination,
            sub_id,
            extra={
                "context": self._context(destination=destination, subscription=sub_id)
            },
        )

    def _on_unsubscribe(self, frame: StompFrame) -> None:
        sub_id = frame.headers.get("id")
        if sub_id is None:
            raise StompProtocolError("UNSUBSCRIBE requires an id header")
        broker_id = self._subscriptions.pop(sub_id, None)
        if broker_id is None:
            raise StompProtocolError(f"Unknown subscription id {sub_id!r}")
        self._broker.unsubscribe(broker_id)

    async def _on_send(self, frame: StompFrame) -> None:
        destination = frame.headers.get("destination")
        if not destination:
            raise StompProtocolError("SEND requires a destination header")
        if not destination.startswith(RELAY_PREFIX):
            raise StompProtocolError(f"No handler for destination {destination!r}")
        await self._broker.send(
            destination,
            frame.body,
            content_type=frame.headers.get("content-type", "text/plain"),
        )

    async def _deliver(self, sub_id: str, message: BrokerMessage) -> None:
        if self._closed:
            return
        await self._send_frame(
            StompFrame(
                command=StompCommand.MESSAGE,
                headers={
                    "destination": message.destination,
                    "subscription": sub_id,
                    "message-id": message.id,
                    "content-type": message.content_type,
                },
                body=message.body,
            )
        )

    async def _send_receipt(self, frame: StompFrame) -> None:
        receipt = frame.headers.get("receipt")
        if receipt is None:
            return
        await self._send_frame(
            StompFrame(command=StompCommand.RECEIPT, headers={"receipt-id": receipt})
        )

    async def _fail(
        self,
        message: str,
        frame: StompFrame | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        logger.warning(
            "STOMP session %s error: %s",
            self._session_id,
            message,
            extra={"context": self._context(error=message)},
        )
        error_headers = {"message": message}
        if headers:
            error_headers.update(headers)
        if frame is not None and "receipt" in frame.headers:
            error_headers["receipt-id"] = frame.headers["receipt"]
        await self._send_frame(
            StompFrame(command=StompCommand.ERROR, headers=error_headers)
        )
        self.close()

    def _context(self, **fields) -> dict:
        context = {"session": self._session_id}
        context.update(fields)
        return context

    async def _send_frame(self, frame: StompFrame) -> None:
        async with self._send_lock:
            await self._send_text(encode_frame(frame))
