"""Print live data as it arrives: python -m livedata.client"""

import asyncio
import json
import os

from dotenv import load_dotenv

from ..config import DEFAULT_TOPIC
from ..logging_config import get_logger, setup_logging
from ..models import LiveDataMessage, StompFrame
from .client import DEFAULT_BROKER_URL, LiveDataClient

logger = get_logger(__name__)


async def run() -> None:
    """Subscribe to the live data topic until interrupted."""
    client = LiveDataClient(
        broker_url=os.getenv("LIVE_DATA_BROKER_URL", DEFAULT_BROKER_URL),
        on_error=lambda err: print(f"Error: {err}"),
    )

    def show(frame: StompFrame) -> None:
        sample = LiveDataMessage.from_payload(json.loads(frame.body))
        print(
            f"Live value: {sample.value:.2f} "
            f"({sample.timestamp.astimezone().strftime('%H:%M:%S')})"
        )

    client.subscribe(os.getenv("LIVE_DATA_TOPIC", DEFAULT_TOPIC), show)
    await client.connect()
    try:
        await asyncio.Event().wait()
    finally:
        await client.disconnect()


def main() -> None:
    load_dotenv()
    setup_logging(log_level=os.getenv("LOG_LEVEL", "WARNING"))
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
