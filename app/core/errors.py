"""Error taxonomy shared by services and the HTTP layer."""

from __future__ import annotations


class InventoryError(Exception):
    """Base class for errors surfaced to API callers as ``{success: false, error}``."""

    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthFailure(InventoryError):
    """Bad credentials. Never says whether the username or the password was wrong."""

    status_code = 401
    default_message = "Invalid credentials"


class Unauthenticated(InventoryError):
    """Missing, expired or otherwise unresolvable session."""

    status_code = 401
    default_message = "Authentication required"


class NotFound(InventoryError):
    status_code = 404
    default_message = "Not found"


class Conflict(InventoryError):
    status_code = 409
    default_message = "Conflict"


class ValidationError(InventoryError):
    status_code = 400
    default_message = "Invalid request"


class StorageFailure(InventoryError):
    status_code = 500
    default_message = "Storage failure"
