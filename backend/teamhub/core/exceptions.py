"""Domain errors raised by services and mapped to HTTP responses in main.py."""
from typing import Optional


class TeamhubError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthenticated(TeamhubError):
    """No valid requester identity is attached to the request."""

    status_code = 401

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class PermissionDenied(TeamhubError):
    """The requester is known but no role predicate allows the operation."""

    status_code = 403


class NotFoundError(TeamhubError):
    """A named entity is absent.

    ``integrity`` is set when the missing entity is an intermediate link of an
    ownership chain (e.g. the project of an existing task).
    """

    status_code = 404

    def __init__(self, kind: str, message: Optional[str] = None, integrity: bool = False):
        super().__init__(message or f"{kind.capitalize()} not found")
        self.kind = kind
        self.integrity = integrity


class ValidationError(TeamhubError):
    status_code = 400
