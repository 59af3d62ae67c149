"""Operation status values returned by every raw client call."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class StatusCode(enum.Enum):
    """Canonical status codes."""

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    UNAUTHENTICATED = 16


class StatusKind(enum.Enum):
    """How the retry machinery treats a status."""

    OK = "ok"
    TRANSIENT = "transient"
    PERMANENT = "permanent"


_TRANSIENT_CODES = frozenset(
    {
        StatusCode.UNAVAILABLE,
        StatusCode.DEADLINE_EXCEEDED,
        StatusCode.RESOURCE_EXHAUSTED,
        StatusCode.INTERNAL,
    }
)

_HTTP_STATUS_CODES: dict[int, StatusCode] = {
    400: StatusCode.INVALID_ARGUMENT,
    401: StatusCode.UNAUTHENTICATED,
    403: StatusCode.PERMISSION_DENIED,
    404: StatusCode.NOT_FOUND,
    408: StatusCode.DEADLINE_EXCEEDED,
    409: StatusCode.ALREADY_EXISTS,
    412: StatusCode.FAILED_PRECONDITION,
    416: StatusCode.OUT_OF_RANGE,
    429: StatusCode.RESOURCE_EXHAUSTED,
    500: StatusCode.INTERNAL,
    501: StatusCode.UNIMPLEMENTED,
    502: StatusCode.UNAVAILABLE,
    503: StatusCode.UNAVAILABLE,
    504: StatusCode.DEADLINE_EXCEEDED,
}


@dataclass(frozen=True)
class Status:
    """A (code, message) pair describing the outcome of one call."""

    code: StatusCode = StatusCode.OK
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.code is StatusCode.OK

    @property
    def kind(self) -> StatusKind:
        if self.ok:
            return StatusKind.OK
        if self.code in _TRANSIENT_CODES:
            return StatusKind.TRANSIENT
        return StatusKind.PERMANENT

    @property
    def is_transient(self) -> bool:
        return self.kind is StatusKind.TRANSIENT

    @property
    def is_permanent(self) -> bool:
        return self.kind is StatusKind.PERMANENT

    @classmethod
    def from_http_status(cls, http_status: int, message: str = "") -> Status:
        """Map an HTTP response status onto a :class:`Status`.

        Parameters
        ----------
        http_status : int
            HTTP status code of the response.
        message : str
            Error message from the service, if any.

        Returns
        -------
        Status
        """
        if 200 <= http_status < 300:
            return cls(StatusCode.OK, message)
        code = _HTTP_STATUS_CODES.get(http_status)
        if code is None:
            if 500 <= http_status < 600:
                code = StatusCode.UNAVAILABLE
            elif 400 <= http_status < 500:
                code = StatusCode.FAILED_PRECONDITION
            else:
                code = StatusCode.UNKNOWN
        return cls(code, message)

    def __str__(self) -> str:
        return f"{self.message} [{self.code.name}]"
