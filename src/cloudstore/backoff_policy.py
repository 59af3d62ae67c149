"""Backoff policies: how long to wait between attempts."""

from __future__ import annotations

import abc
import random
from datetime import timedelta


def _seconds(value: float | timedelta) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


class BackoffPolicy(abc.ABC):
    """Compute the delay before the next attempt.

    Like retry policies, a configured instance is a prototype; each call
    works on its own :meth:`clone`.
    """

    @abc.abstractmethod
    def clone(self) -> BackoffPolicy: ...

    @abc.abstractmethod
    def on_completion(self) -> float:
        """Return the delay, in seconds, before the next attempt."""


class ExponentialBackoffPolicy(BackoffPolicy):
    """Randomized exponential backoff.

    Each delay is drawn uniformly from ``[0, current]``.  ``current`` starts at
    *initial_delay* and is multiplied by *scaling* after every attempt, capped
    at *maximum_delay*.
    """

    def __init__(
        self,
        initial_delay: float | timedelta,
        maximum_delay: float | timedelta,
        scaling: float = 2.0,
    ) -> None:
        initial = _seconds(initial_delay)
        maximum = _seconds(maximum_delay)
        if initial < 0:
            raise ValueError("initial_delay must be non-negative")
        if maximum < initial:
            raise ValueError("maximum_delay must be greater than or equal to initial_delay")
        if scaling < 1.0:
            raise ValueError("scaling must be >= 1.0")
        self._initial_delay = initial
        self._maximum_delay = maximum
        self._scaling = scaling
        self._current_delay_range = initial
        self._rng = random.Random()

    def clone(self) -> ExponentialBackoffPolicy:
        return ExponentialBackoffPolicy(self._initial_delay, self._maximum_delay, self._scaling)

    def on_completion(self) -> float:
        delay = self._rng.uniform(0.0, self._current_delay_range)
        self._current_delay_range = min(self._current_delay_range * self._scaling, self._maximum_delay)
        return delay
