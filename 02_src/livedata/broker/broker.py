"""In-memory topic broker for fanning messages out to subscribers."""

import asyncio
import json
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable, Protocol

from ..logging_config import get_logger
from ..models import BrokerMessage

logger = get_logger(__name__)


MessageHandler = Callable[[BrokerMessage], Awaitable[None]]


@dataclass
class Subscription:
    """A handler registered for one destination."""

    id: str
    destination: str
    handler: MessageHandler


class IMessageBroker(Protocol):
    """Pub/sub keyed by destination string."""

    def subscribe(self, destination: str, handler: MessageHandler) -> str:
        """Register handler for destination. Returns subscription id."""
        ...

    def unsubscribe(self, subscription_id: str) -> bool:
        """Remove a subscription. Returns False if it was unknown."""
        ...

    def subscriber_count(self, destination: str | None = None) -> int:
        """Number of subscriptions, optionally for a single destination."""
        ...

    async def send(
        self, destination: str, body: str, content_type: str = "application/json"
    ) -> BrokerMessage:
        """Deliver an already serialized body to every subscriber of destination."""
        ...

    async def convert_and_send(self, destination: str, payload: dict) -> BrokerMessage:
        """JSON-encode payload and send it."""
        ...


class MessageBroker:
    """In-memory pub/sub broker."""

    def __init__(self):
        self._subscriptions: dict[str, Subscription] = {}

    def subscribe(self, destination: str, handler: MessageHandler) -> str:
        """Register handler for destination. Returns subscription id."""
        subscription = Subscription(
            id=str(uuid.uuid4()), destination=destination, handler=handler
        )
        self._subscriptions[subscription.id] = subscription
        logger.debug("Subscribed %s to %s", subscription.id, destination)
        return subscription.id

    def unsubscribe(self, subscription_id: str) -> bool:
        """Remove a subscription. Returns False if it was unknown."""
        removed = self._subscriptions.pop(subscription_id, None)
        if removed:
            logger.debug("Unsubscribed %s from %s", subscription_id, removed.destination)
        return removed is not None

    def subscriber_count(self, destination: str | None = None) -> int:
        """Number of subscriptions, optionally for a single destination."""
        if destination is None:
            return len(self._subscriptions)
        return sum(
            1 for s in self._subscriptions.values() if s.destination == destination
        )

    def clear(self) -> None:
        """Drop all subscriptions."""
        self._subscriptions.clear()

    async def send(
        self, destination: str, body: str, content_type: str = "application/json"
    ) -> BrokerMessage:
        """Deliver an already serialized body to every subscriber of destination."""
        message = BrokerMessage(
            id=str(uuid.uuid4()),
            destination=destination,
            body=body,
            content_type=content_type,
            timestamp=datetime.now(timezone.utc),
        )

        # Snapshot: handlers may unsubscribe while being called
        handlers = [
            s.handler
            for s in list(self._subscriptions.values())
            if s.destination == destination
        ]

        if handlers:
            results = await asyncio.gather(
                *[handler(message) for handler in handlers],
                return_exceptions=True,
            )

            for i, result in enumerate(results):
                if isinstance(result, Exception):
                    logger.error(
                        "Error in handler %s for %s: %s", i, destination, result
                    )

        return message

    async def convert_and_send(self, destination: str, payload: dict) -> BrokerMessage:
        """JSON-encode payload and send it."""
        return await self.send(destination, json.dumps(payload))
