"""STOMP frame models."""

from dataclasses import dataclass, field
from enum import Enum


class StompCommand(str, Enum):
    """STOMP 1.2 frame commands."""

    # Client frames
    CONNECT = "CONNECT"
    STOMP = "STOMP"
    SEND = "SEND"
    SUBSCRIBE = "SUBSCRIBE"
    UNSUBSCRIBE = "UNSUBSCRIBE"
    ACK = "ACK"
    NACK = "NACK"
    BEGIN = "BEGIN"
    COMMIT = "COMMIT"
    ABORT = "ABORT"
    DISCONNECT = "DISCONNECT"
    # Server frames
    CONNECTED = "CONNECTED"
    MESSAGE = "MESSAGE"
    RECEIPT = "RECEIPT"
    ERROR = "ERROR"


@dataclass
class StompFrame:
    """A single STOMP frame."""

    command: StompCommand
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""
