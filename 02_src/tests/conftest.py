"""Pytest configuration and fixtures."""

import random
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

FIXED_TS = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def broker():
    """Create an empty MessageBroker."""
    from livedata.broker import MessageBroker

    return MessageBroker()


@pytest.fixture
def generator():
    """Seeded generator with a fixed clock."""
    from livedata.generator import SampleGenerator

    return SampleGenerator(
        minimum=90.0,
        maximum=100.0,
        rng=random.Random(42),
        clock=lambda: FIXED_TS,
    )


@pytest.fixture
async def live_data_service(broker, generator):
    """LiveDataService with a short interval, stopped on teardown."""
    from livedata.broadcaster import LiveDataService

    service = LiveDataService(broker=broker, generator=generator, interval=0.05)
    yield service
    await service.stop()


class FrameSink:
    """Collects text sent by a StompSession."""

    def __init__(self):
        self.sent: list[str] = []

    async def __call__(self, text: str) -> None:
        self.sent.append(text)

    def frames(self):
        from livedata.stomp import decode_frames

        frames = []
        for text in self.sent:
            frames.extend(decode_frames(text))
        return frames


@pytest.fixture
def sink():
    return FrameSink()


@pytest.fixture
def stomp_session(broker, sink):
    """StompSession writing into a FrameSink."""
    from livedata.stomp import StompSession

    return StompSession(broker, send=sink, session_id="test-session")
