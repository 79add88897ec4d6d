"""Application bootstrap and lifecycle management."""

from typing import Protocol

from .broadcaster import LiveDataService
from .broker import MessageBroker
from .config import Settings
from .generator import SampleGenerator
from .logging_config import get_logger

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    @property
    def broker(self) -> MessageBroker:
        ...

    @property
    def live_data_service(self) -> LiveDataService:
        ...


class Application:
    """Main application bootstrap."""

    def __init__(self, settings: Settings | None = None):
        self._settings = settings or Settings.from_env()

        # Components (will be initialized in start())
        self._broker: MessageBroker | None = None
        self._generator: SampleGenerator | None = None
        self._live_data_service: LiveDataService | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Broker (no dependencies)
        self._broker = MessageBroker()

        # 2. Generator (no dependencies)
        self._generator = SampleGenerator(
            minimum=self._settings.minimum,
            maximum=self._settings.maximum,
        )

        # 3. LiveDataService (depends on Broker + Generator)
        self._live_data_service = LiveDataService(
            broker=self._broker,
            generator=self._generator,
            topic=self._settings.topic,
            interval=self._settings.interval_seconds,
        )
        await self._live_data_service.start()
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._live_data_service:
            await self._live_data_service.stop()
        if self._broker:
            self._broker.clear()
        logger.info("Application stopped")

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def broker(self) -> MessageBroker:
        """Get broker instance."""
        if not self._broker:
            raise RuntimeError("Application not started")
        return self._broker

    @property
    def live_data_service(self) -> LiveDataService:
        """Get live data service instance."""
        if not self._live_data_service:
            raise RuntimeError("Application not started")
        return self._live_data_service
