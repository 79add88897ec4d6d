"""STOMP subscriber client."""

from .client import DEFAULT_BROKER_URL, ClientSubscription, LiveDataClient

__all__ = ["DEFAULT_BROKER_URL", "ClientSubscription", "LiveDataClient"]
