"""Retry policies: how many failures, or how much time, a call may spend."""

from __future__ import annotations

import abc
import time
from datetime import timedelta
from typing import Callable

from .status import Status


class RetryPolicy(abc.ABC):
    """Decide whether a failed attempt should be retried.

    Policies are stateful.  A configured instance acts as a prototype and is
    never used directly: every call works on a fresh :meth:`clone`.
    """

    @abc.abstractmethod
    def clone(self) -> RetryPolicy:
        """Return a new policy with the same configuration and no history."""

    @abc.abstractmethod
    def on_failure(self, status: Status) -> bool:
        """Record a failed attempt; return ``True`` if another one is allowed."""

    @abc.abstractmethod
    def is_exhausted(self) -> bool: ...

    def is_permanent_failure(self, status: Status) -> bool:
        return status.is_permanent


class LimitedErrorCountRetryPolicy(RetryPolicy):
    """Allow up to *maximum_failures* transient failures.

    With ``maximum_failures=N`` a call makes at most ``N + 1`` attempts.
    """

    def __init__(self, maximum_failures: int) -> None:
        if maximum_failures < 0:
            raise ValueError("maximum_failures must be non-negative")
        self._maximum_failures = maximum_failures
        self._failure_count = 0

    @property
    def maximum_failures(self) -> int:
        return self._maximum_failures

    def clone(self) -> LimitedErrorCountRetryPolicy:
        return LimitedErrorCountRetryPolicy(self._maximum_failures)

    def on_failure(self, status: Status) -> bool:
        if self.is_permanent_failure(status):
            return False
        self._failure_count += 1
        return self._failure_count <= self._maximum_failures

    def is_exhausted(self) -> bool:
        return self._failure_count > self._maximum_failures


class LimitedTimeRetryPolicy(RetryPolicy):
    """Retry transient failures until *maximum_duration* has elapsed.

    The clock starts when the policy (or a clone of it) is created.
    """

    def __init__(
        self,
        maximum_duration: float | timedelta,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if isinstance(maximum_duration, timedelta):
            maximum_duration = maximum_duration.total_seconds()
        if maximum_duration < 0:
            raise ValueError("maximum_duration must be non-negative")
        self._maximum_duration = float(maximum_duration)
        self._clock = clock
        self._deadline = clock() + self._maximum_duration

    @property
    def maximum_duration(self) -> float:
        return self._maximum_duration

    def clone(self) -> LimitedTimeRetryPolicy:
        return LimitedTimeRetryPolicy(self._maximum_duration, clock=self._clock)

    def on_failure(self, status: Status) -> bool:
        if self.is_permanent_failure(status):
            return False
        return not self.is_exhausted()

    def is_exhausted(self) -> bool:
        return self._clock() >= self._deadline
