"""Custom exceptions for ticket creation."""

from typing import Optional


class TicketingError(Exception):
    """Raised when the issue tracker request fails or returns garbage."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        if original_error:
            message = f"{message}: {original_error}"
        super().__init__(message)
