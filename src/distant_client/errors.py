"""Exception types for the distant client.

Callback completions receive errors as plain strings. Exceptions are only
raised for programmer errors and on the awaitable request surface.
"""

from __future__ import annotations


class DistantClientError(Exception):
    """Base class for all client errors."""


class DuplicateCallError(DistantClientError):
    """Raised when a correlation id is registered while still outstanding."""

    def __init__(self, call_id: str):
        super().__init__(f"Call {call_id} is already pending")
        self.call_id = call_id


class TransportError(DistantClientError):
    """Raised by a transport when an envelope cannot be sent."""


class RequestError(DistantClientError):
    """Raised when an awaited request completes with an error."""

    def __init__(self, message: str, call_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.call_id = call_id
