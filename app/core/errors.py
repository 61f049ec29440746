"""
Domain errors raised by the CRUD layer and the SQL helpers.

A single exception type carries an ErrorKind discriminant. The HTTP boundary
(see main.py) is the only place that turns a kind into a status code.
"""

import enum
from typing import Any, Dict, Optional


class ErrorKind(str, enum.Enum):
    """
    Error categories surfaced to API clients.

    - INVALID_INPUT: malformed filter or update arguments
    - NOT_FOUND: the requested key does not exist
    - CONFLICT: a unique key already exists
    """
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


class ApiError(Exception):
    """Error with a kind, a human readable message and optional detail."""

    def __init__(self, kind: ErrorKind, message: str, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.detail = detail or {}

    @classmethod
    def invalid_input(cls, message: str, **detail: Any) -> "ApiError":
        return cls(ErrorKind.INVALID_INPUT, message, detail)

    @classmethod
    def not_found(cls, message: str, **detail: Any) -> "ApiError":
        return cls(ErrorKind.NOT_FOUND, message, detail)

    @classmethod
    def conflict(cls, message: str, **detail: Any) -> "ApiError":
        return cls(ErrorKind.CONFLICT, message, detail)

    def __repr__(self):
        return f"<ApiError(kind={self.kind.value}, message='{self.message}')>"
