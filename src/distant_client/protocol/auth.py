"""Authentication payload schemas.

Payloads travel in `Envelope.data` of the authentication message types.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class AuthInitialization(BaseModel):
    """auth_initialization: methods offered by the peer."""

    methods: list[str] = Field(default_factory=list)


class AuthStartMethod(BaseModel):
    """auth_start_method: the peer began a method."""

    method: str = ""


class AuthQuestion(BaseModel):
    """A single question within a challenge."""

    text: str = ""
    extra: dict[str, Any] | None = None

    @property
    def echo(self) -> bool:
        """Whether the answer may be shown while typed."""
        return bool(self.extra) and self.extra.get("echo") == "true"


class AuthChallenge(BaseModel):
    """auth_challenge: questions to answer, plus shared context."""

    questions: list[AuthQuestion] = Field(default_factory=list)
    extra: dict[str, Any] | None = None


class AuthVerification(BaseModel):
    """auth_verification: information to confirm, e.g. a host key."""

    kind: str = "unknown"
    text: str = ""


class AuthInfo(BaseModel):
    """auth_info: informational text."""

    text: str = ""


class AuthError(BaseModel):
    """auth_error: `fatal` ends the handshake, any other kind is recoverable."""

    kind: str = "error"
    text: str = ""

    @property
    def is_fatal(self) -> bool:
        return self.kind == "fatal"


class AuthFinished(BaseModel):
    """auth_finished carries no payload."""


def payload_of(data: Any) -> dict[str, Any]:
    """Normalize an envelope payload for model validation."""
    return data if isinstance(data, dict) else {}
