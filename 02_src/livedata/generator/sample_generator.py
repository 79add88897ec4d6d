"""Bounded random sample generator."""

import math
import random
from datetime import datetime, timezone
from typing import Callable, Protocol

from ..models import LiveDataMessage

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ISampleGenerator(Protocol):
    """Produces one LiveDataMessage per call."""

    def next_sample(self) -> LiveDataMessage:
        """Draw a value and stamp it with the current time."""
        ...


class SampleGenerator:
    """Uniform random doubles in [minimum, maximum)."""

    def __init__(
        self,
        minimum: float = 90.0,
        maximum: float = 100.0,
        rng: random.Random | None = None,
        clock: Clock | None = None,
    ):
        if not (math.isfinite(minimum) and math.isfinite(maximum)):
            raise ValueError("minimum and maximum must be finite numbers")
        if minimum >= maximum:
            raise ValueError(
                f"minimum ({minimum}) must be lower than maximum ({maximum})"
            )
        self._minimum = minimum
        self._maximum = maximum
        self._rng = rng or random.Random()
        self._clock = clock or utc_now

    @property
    def minimum(self) -> float:
        return self._minimum

    @property
    def maximum(self) -> float:
        return self._maximum

    def next_value(self) -> float:
        """Uniform double in [minimum, maximum)."""
        value = self._minimum + (self._maximum - self._minimum) * self._rng.random()
        # Rounding can land exactly on the upper bound
        if value >= self._maximum:
            value = math.nextafter(self._maximum, self._minimum)
        return value

    def next_sample(self) -> LiveDataMessage:
        """Draw a value and stamp it with the current time."""
        return LiveDataMessage(value=self.next_value(), timestamp=self._clock())
