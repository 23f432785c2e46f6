"""
Error taxonomy shared by the data-access layer and the HTTP boundary.

The set of runtime kinds is closed: callers branch on `kind` (or the
subclass), never on a particular instance. HTTP status mapping lives in
`api/main.py`; nothing here knows about HTTP.
"""

from __future__ import annotations

import enum


class ErrorKind(str, enum.Enum):
    INVALID_PARAMETER = "invalid_parameter"
    NOT_FOUND = "not_found"
    STORE_ERROR = "store_error"
    CANCELLED = "cancelled"


class ProvinceApiError(Exception):
    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidParameter(ProvinceApiError):
    kind = ErrorKind.INVALID_PARAMETER

    def __init__(self, name: str, value: str | None = None) -> None:
        super().__init__(f"param: '{name}' cannot be applied because the value is not a number")
        self.name = name
        self.value = value


class NotFound(ProvinceApiError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, key: object) -> None:
        super().__init__(f"unknown {entity}")
        self.entity = entity
        self.key = key


class StoreError(ProvinceApiError):
    """
    Execution, mapping or connectivity failure.

    `cause` is kept for logging only; it must not reach a response body.
    """

    kind = ErrorKind.STORE_ERROR

    def __init__(self, cause: BaseException, message: str = "store operation failed") -> None:
        super().__init__(message)
        self.cause = cause


class Cancelled(ProvinceApiError):
    kind = ErrorKind.CANCELLED

    def __init__(self, reason: str = "cancelled") -> None:
        super().__init__(f"operation {reason}")
        self.reason = reason


class BuildError(ValueError):
    """
    Raised by the query builder for malformed input. A programmer error,
    not a runtime condition.
    """
