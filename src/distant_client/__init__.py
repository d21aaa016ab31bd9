"""distant client core.

Request/response correlation and the authentication handshake for talking
to a remote distant peer over any duplex envelope transport.

- AsyncRequestClient: issues requests, correlates responses, routes auth
- RemoteApi: typed remote operations on top of the client
- AuthHandler: authentication handshake responder with overridable hooks
- Envelope, classify: the logical message shape and response outcomes
- Transport, MockTransport: the transport contract and an in-memory double
"""

from .api import OPERATIONS, Operation, RemoteApi
from .auth import AuthHandler, ConsolePrompter, Prompter
from .client import AsyncRequestClient, ClientState
from .config import ClientConfig
from .errors import DistantClientError, DuplicateCallError, RequestError, TransportError
from .protocol import (
    AuthMessageType,
    Envelope,
    Err,
    Ok,
    Outcome,
    RequestType,
    ResponseType,
    classify,
)
from .registry import Completion, PendingCallRegistry
from .transport import MockTransport, ReceiveCallback, Transport

__all__ = [
    # Client
    "AsyncRequestClient",
    "ClientState",
    "ClientConfig",
    "PendingCallRegistry",
    "Completion",
    # Operations
    "RemoteApi",
    "Operation",
    "OPERATIONS",
    # Authentication
    "AuthHandler",
    "Prompter",
    "ConsolePrompter",
    # Protocol
    "Envelope",
    "RequestType",
    "ResponseType",
    "AuthMessageType",
    "Ok",
    "Err",
    "Outcome",
    "classify",
    # Transport
    "Transport",
    "ReceiveCallback",
    "MockTransport",
    # Errors
    "DistantClientError",
    "DuplicateCallError",
    "RequestError",
    "TransportError",
]

__version__ = "0.1.0"
