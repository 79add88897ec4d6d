"""Broadcaster module."""

from .service import LIVE_DATA_TOPIC, ILiveDataService, LiveDataService

__all__ = ["LIVE_DATA_TOPIC", "ILiveDataService", "LiveDataService"]
