"""Project-level configuration and path helpers."""

import math
import os
from dataclasses import dataclass, field
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

LOGS_DIR.mkdir(parents=True, exist_ok=True)

DEFAULT_TOPIC = "/topic/live-data"
DEFAULT_CORS_ORIGINS = ("http://localhost:5173", "http://localhost:5174")  # Vite default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {raw!r}")
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass
class Settings:
    """Runtime settings for the broadcaster and its API."""

    api_host: str = "localhost"
    api_port: int = 8080
    topic: str = DEFAULT_TOPIC
    interval_seconds: float = 1.0
    minimum: float = 90.0
    maximum: float = 100.0
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    def __post_init__(self):
        for name in ("interval_seconds", "minimum", "maximum"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be a finite number")
        if self.interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        if self.minimum >= self.maximum:
            raise ValueError(
                f"minimum ({self.minimum}) must be lower than maximum ({self.maximum})"
            )

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        origins = os.getenv("CORS_ORIGINS")
        return cls(
            api_host=os.getenv("API_HOST", "localhost"),
            api_port=_env_int("API_PORT", 8080),
            topic=os.getenv("LIVE_DATA_TOPIC", DEFAULT_TOPIC),
            interval_seconds=_env_float("LIVE_DATA_INTERVAL_SECONDS", 1.0),
            minimum=_env_float("LIVE_DATA_MIN", 90.0),
            maximum=_env_float("LIVE_DATA_MAX", 100.0),
            cors_origins=(
                [o.strip() for o in origins.split(",") if o.strip()]
                if origins
                else list(DEFAULT_CORS_ORIGINS)
            ),
        )
