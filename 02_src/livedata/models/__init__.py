"""Core data models for the live data broadcaster."""

from .live_data import LiveDataMessage
from .messages import BrokerMessage
from .frames import StompCommand, StompFrame

__all__ = [
    # Live data
    "LiveDataMessage",
    # Broker
    "BrokerMessage",
    # STOMP
    "StompCommand",
    "StompFrame",
]
