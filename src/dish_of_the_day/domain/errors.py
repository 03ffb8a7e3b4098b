"""Errors raised by dish operations."""


class DishError(Exception):
    """Base error for dish operations, carrying a suggested HTTP status."""

    http_status = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DishError):
    """Raised when required input is missing or malformed."""

    http_status = 400


class ConflictError(DishError):
    """Raised when a dish name is already taken."""

    http_status = 409


class NotFoundError(DishError):
    """Raised when no dish matches the requested name."""

    http_status = 404
