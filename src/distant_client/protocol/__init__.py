"""Protocol layer.

Defines the logical messages exchanged with a remote distant peer:
- Envelope: id + type tag + payload, shared by requests, responses and auth
- Request/response/auth type tags as closed str enums
- Auth payload schemas
- The response classifier turning `ok`/`error` envelopes into outcomes
"""

from .auth import (
    AuthChallenge,
    AuthError,
    AuthFinished,
    AuthInfo,
    AuthInitialization,
    AuthQuestion,
    AuthStartMethod,
    AuthVerification,
)
from .classifier import Err, Ok, Outcome, classify
from .envelope import (
    INBOUND_AUTH_TYPES,
    AuthMessageType,
    Envelope,
    RequestType,
    ResponseType,
)

__all__ = [
    "Envelope",
    "RequestType",
    "ResponseType",
    "AuthMessageType",
    "INBOUND_AUTH_TYPES",
    "AuthInitialization",
    "AuthStartMethod",
    "AuthQuestion",
    "AuthChallenge",
    "AuthVerification",
    "AuthInfo",
    "AuthError",
    "AuthFinished",
    "Ok",
    "Err",
    "Outcome",
    "classify",
]
