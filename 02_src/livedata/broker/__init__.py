"""Message broker module."""

from .broker import IMessageBroker, MessageBroker, MessageHandler, Subscription

__all__ = ["IMessageBroker", "MessageBroker", "MessageHandler", "Subscription"]
