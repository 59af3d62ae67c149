"""Domain-specific exceptions for cloudstore."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .status import Status


class CloudStoreError(Exception):
    """Base exception for cloudstore errors."""
    pass


class UndeclaredParameterError(CloudStoreError, TypeError):
    """Raised when a request receives a parameter kind it does not declare."""
    def __init__(self, request_type: str, parameter: object) -> None:
        self.request_type = request_type
        self.parameter = parameter
        super().__init__(
            f"{type(parameter).__name__} is not a valid parameter for {request_type}"
        )


class StatusError(CloudStoreError, RuntimeError):
    """Raised when an operation terminates with a failed status."""
    def __init__(self, message: str, operation: str, status: Status) -> None:
        self.operation = operation
        self.status = status
        super().__init__(message)


class PermanentError(StatusError):
    """Raised when an operation fails with an error that retrying cannot fix."""
    def __init__(self, operation: str, status: Status) -> None:
        super().__init__(f"Permanent error in {operation}: {status}", operation, status)


class RetryPolicyExhaustedError(StatusError):
    """Raised when transient failures outlast the retry policy."""
    def __init__(self, operation: str, status: Status) -> None:
        super().__init__(f"Retry policy exhausted in {operation}: {status}", operation, status)


def raise_for_status(status: Status, operation: str) -> None:
    """Raise the error matching a failed *status*; do nothing when it is OK.

    Parameters
    ----------
    status : Status
        Status returned by a raw client.
    operation : str
        Name of the operation, included in the error message.

    Raises
    ------
    PermanentError
        If the status is a permanent failure.
    StatusError
        If the status is a transient failure nobody retried.
    """
    if status.ok:
        return
    if status.is_permanent:
        raise PermanentError(operation, status)
    raise StatusError(f"Error in {operation}: {status}", operation, status)
