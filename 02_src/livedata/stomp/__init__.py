"""STOMP over WebSocket module."""

from .codec import HEARTBEAT, StompProtocolError, decode_frames, encode_frame
from .session import SUPPORTED_VERSIONS, StompSession, select_subprotocol

__all__ = [
    "HEARTBEAT",
    "StompProtocolError",
    "decode_frames",
    "encode_frame",
    "SUPPORTED_VERSIONS",
    "StompSession",
    "select_subprotocol",
]
