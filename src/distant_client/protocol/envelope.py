"""Envelope definitions for the protocol layer.

Every unit exchanged with the remote peer is an Envelope:
- Requests carry a correlation `id` and a request type
- Responses carry the `id` of the request they answer and an `ok`/`error` type
- Authentication messages are session-scoped and carry no id

The serialized byte layout is owned by the transport; this module only
defines the logical shape.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class RequestType(str, Enum):
    """All supported remote operation request types."""

    CAPABILITIES = "capabilities"

    # Files
    FILE_APPEND = "file_append"
    FILE_APPEND_TEXT = "file_append_text"
    FILE_READ = "file_read"
    FILE_READ_TEXT = "file_read_text"
    FILE_WRITE = "file_write"
    FILE_WRITE_TEXT = "file_write_text"

    # Filesystem
    COPY = "copy"
    DIR_CREATE = "dir_create"
    DIR_READ = "dir_read"
    EXISTS = "exists"
    METADATA = "metadata"
    REMOVE = "remove"
    RENAME = "rename"
    WATCH = "watch"

    # Processes
    PROC_SPAWN = "proc_spawn"
    PROC_SPAWN_WAIT = "proc_spawn_wait"

    # System
    SYSTEM_INFO = "system_info"


class ResponseType(str, Enum):
    """Response types accepted for a pending request."""

    OK = "ok"
    ERROR = "error"


class AuthMessageType(str, Enum):
    """Authentication message types, inbound and outbound."""

    # Peer -> client
    INITIALIZATION = "auth_initialization"
    START_METHOD = "auth_start_method"
    CHALLENGE = "auth_challenge"
    VERIFICATION = "auth_verification"
    INFO = "auth_info"
    ERROR = "auth_error"
    FINISHED = "auth_finished"

    # Client -> peer
    INITIALIZATION_RESPONSE = "auth_initialization_response"
    CHALLENGE_RESPONSE = "auth_challenge_response"
    VERIFICATION_RESPONSE = "auth_verification_response"


# Types the client routes to the authentication handler
INBOUND_AUTH_TYPES: frozenset[str] = frozenset(
    t.value
    for t in (
        AuthMessageType.INITIALIZATION,
        AuthMessageType.START_METHOD,
        AuthMessageType.CHALLENGE,
        AuthMessageType.VERIFICATION,
        AuthMessageType.INFO,
        AuthMessageType.ERROR,
        AuthMessageType.FINISHED,
    )
)


def _type_value(value: str | Enum) -> str:
    return value.value if isinstance(value, Enum) else value


class Envelope(BaseModel):
    """A message exchanged with the remote peer.

    Envelopes are immutable. The shape of `data` depends on `type`:
    request payloads are opaque to this layer, response payloads are
    interpreted by the classifier, and authentication payloads are
    validated against the models in `protocol.auth`.

    Example (request):
        {
            "id": "req_abc123def456",
            "type": "file_write_text",
            "data": {"path": "some/path", "text": "some text"}
        }

    Example (response):
        {"id": "req_abc123def456", "type": "ok", "data": {}}
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    type: str
    data: Any = None

    @property
    def is_auth(self) -> bool:
        """Check if this envelope belongs to the authentication handshake."""
        return self.type in INBOUND_AUTH_TYPES

    @classmethod
    def create(
        cls,
        envelope_type: str | Enum,
        data: Any = None,
        call_id: str | None = None,
    ) -> Envelope:
        """Factory method for creating envelopes."""
        return cls(id=call_id, type=_type_value(envelope_type), data=data)

    @classmethod
    def request(
        cls,
        request_type: str | RequestType,
        data: Any,
        call_id: str,
    ) -> Envelope:
        """Create a request envelope."""
        return cls.create(request_type, data=data, call_id=call_id)

    @classmethod
    def ok(cls, call_id: str | None, data: Any = None) -> Envelope:
        """Create a successful response envelope."""
        return cls.create(ResponseType.OK, data=data, call_id=call_id)

    @classmethod
    def error(cls, call_id: str | None, description: str) -> Envelope:
        """Create an error response envelope."""
        return cls.create(
            ResponseType.ERROR,
            data={"description": description},
            call_id=call_id,
        )
