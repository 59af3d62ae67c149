"""Shared fixtures for the cloudstore test-suite."""

from __future__ import annotations

from unittest.mock import create_autospec

import pytest

from cloudstore import ExponentialBackoffPolicy, RawClient, Status, StatusCode


@pytest.fixture
def mock_client() -> RawClient:
    """A raw client whose every operation is a ``MagicMock``."""
    return create_autospec(RawClient, instance=True)


@pytest.fixture
def transient_error() -> Status:
    return Status(StatusCode.UNAVAILABLE, "try-again")


@pytest.fixture
def permanent_error() -> Status:
    return Status(StatusCode.NOT_FOUND, "not found")


@pytest.fixture
def no_backoff() -> ExponentialBackoffPolicy:
    """Backoff policy that never waits."""
    return ExponentialBackoffPolicy(0.0, 0.0)
