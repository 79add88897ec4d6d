"""Fixed-rate live data broadcaster."""

import asyncio
import math
from typing import Protocol

from ..broker import IMessageBroker
from ..config import DEFAULT_TOPIC
from ..generator import ISampleGenerator
from ..logging_config import get_logger
from ..models import LiveDataMessage

logger = get_logger(__name__)

LIVE_DATA_TOPIC = DEFAULT_TOPIC


class ILiveDataService(Protocol):
    """Publishes one sample to the live data topic per tick."""

    async def start(self) -> None:
        """Start the fixed-rate schedule."""
        ...

    async def stop(self) -> None:
        """Stop the schedule."""
        ...

    async def broadcast_live_data(self) -> LiveDataMessage:
        """Generate one sample and publish it."""
        ...


class LiveDataService:
    """Generates a sample every interval and sends it to the topic."""

    def __init__(
        self,
        broker: IMessageBroker,
        generator: ISampleGenerator,
        topic: str = LIVE_DATA_TOPIC,
        interval: float = 1.0,
    ):
        if not math.isfinite(interval) or interval <= 0:
            raise ValueError("interval must be a positive finite number")
        self._broker = broker
        self._generator = generator
        self._topic = topic
        self._interval = interval
        self._running = False
        self._task: asyncio.Task | None = None
        self._latest: LiveDataMessage | None = None
        self._published_count = 0

    @property
    def topic(self) -> str:
        return self._topic

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._running

    @property
    def latest(self) -> LiveDataMessage | None:
        """Most recently published sample."""
        return self._latest

    @property
    def published_count(self) -> int:
        return self._published_count

    async def start(self) -> None:
        """Start the fixed-rate schedule."""
        if self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self._run_schedule())
        logger.info(
            "Live data broadcaster started on %s every %ss",
            self._topic,
            self._interval,
            extra={"context": {"topic": self._topic, "interval": self._interval}},
        )

    async def stop(self) -> None:
        """Stop the schedule."""
        if not self._running and not self._task:
            return
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info(
            "Live data broadcaster stopped after %s messages",
            self._published_count,
            extra={
                "context": {
                    "topic": self._topic,
                    "published_count": self._published_count,
                }
            },
        )

    async def broadcast_live_data(self) -> LiveDataMessage:
        """Generate one sample and publish it."""
        message = self._generator.next_sample()
        payload = message.to_payload()
        await self._broker.convert_and_send(self._topic, payload)
        self._latest = message
        self._published_count += 1
        logger.debug(
            "Published %.4f to %s",
            message.value,
            self._topic,
            extra={
                "context": {
                    "topic": self._topic,
                    "tick": self._published_count,
                    **payload,
                }
            },
        )
        return message

    async def _run_schedule(self) -> None:
        """Fire broadcast_live_data() at start + n * interval."""
        loop = asyncio.get_running_loop()
        next_run = loop.time()

        while self._running:
            try:
                await self.broadcast_live_data()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Live data broadcast failed: %s", e, exc_info=True)

            next_run += self._interval
            delay = next_run - loop.time()
            if delay < 0:
                # Overran the slot: re-anchor instead of bursting catch-up ticks
                logger.warning(
                    "Broadcast tick overran interval by %.3fs",
                    -delay,
                    extra={"context": {"topic": self._topic, "overrun": -delay}},
                )
                next_run = loop.time()
                delay = 0

            try:
                await asyncio.sleep(delay)
            except asyncio.CancelledError:
                break
