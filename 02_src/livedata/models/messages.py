"""Broker message model."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class BrokerMessage:
    """A message fanned out by the MessageBroker to a destination's subscribers."""

    id: str
    destination: str  # e.g. "/topic/live-data"
    body: str  # already serialized
    content_type: str
    timestamp: datetime
