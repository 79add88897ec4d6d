"""Live data broadcaster."""

from .app import Application, IApplication
from .broadcaster import LIVE_DATA_TOPIC, ILiveDataService, LiveDataService
from .broker import IMessageBroker, MessageBroker
from .config import Settings
from .generator import ISampleGenerator, SampleGenerator
from .models import BrokerMessage, LiveDataMessage, StompCommand, StompFrame

__all__ = [
    # Application
    "Application",
    "IApplication",
    "Settings",
    # Models
    "LiveDataMessage",
    "BrokerMessage",
    "StompCommand",
    "StompFrame",
    # Components
    "IMessageBroker",
    "MessageBroker",
    "ISampleGenerator",
    "SampleGenerator",
    "ILiveDataService",
    "LiveDataService",
    "LIVE_DATA_TOPIC",
]
