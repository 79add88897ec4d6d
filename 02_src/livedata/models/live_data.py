"""Live data sample model."""

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True)
class LiveDataMessage:
    """One generated sample: a value and the instant it was created."""

    value: float
    timestamp: datetime

    def to_payload(self) -> dict:
        """JSON-ready representation, timestamp as ISO-8601 UTC with a Z suffix."""
        ts = self.timestamp.astimezone(timezone.utc).isoformat()
        if ts.endswith("+00:00"):
            ts = ts[: -len("+00:00")] + "Z"
        return {"value": self.value, "timestamp": ts}

    @classmethod
    def from_payload(cls, payload: dict) -> "LiveDataMessage":
        """Build a message from a decoded JSON payload."""
        raw_ts = payload["timestamp"]
        # fromisoformat() only accepts the Z suffix from Python 3.11 on
        if isinstance(raw_ts, str) and raw_ts.endswith("Z"):
            raw_ts = raw_ts[:-1] + "+00:00"
        return cls(
            value=float(payload["value"]),
            timestamp=datetime.fromisoformat(raw_ts),
        )
