"""Response classification.

Maps the raw envelope matched to a pending call onto an Ok or Err outcome.
The error messages are relied upon by dependents and must not change.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .envelope import Envelope, ResponseType

NIL_RESPONSE = "Nil response received"
MISSING_PAYLOAD = "Error response received without data payload"
MISSING_DESCRIPTION = "Error response received without description"
INVALID_TYPE = "Received invalid response of type {type}"


@dataclass(frozen=True)
class Ok:
    """Successful outcome carrying the response payload."""

    data: Any = None

    @property
    def is_error(self) -> bool:
        return False


@dataclass(frozen=True)
class Err:
    """Failed outcome carrying a human-readable message."""

    message: str

    @property
    def is_error(self) -> bool:
        return True


Outcome = Ok | Err


def classify(envelope: Envelope | None) -> Outcome:
    """Classify a response envelope.

    Args:
        envelope: The response matched to a pending call, or None when the
            transport could not produce one

    Returns:
        Ok with the payload for `ok` responses, Err otherwise
    """
    if envelope is None:
        return Err(NIL_RESPONSE)

    if envelope.type == ResponseType.OK.value:
        return Ok(envelope.data)

    if envelope.type == ResponseType.ERROR.value:
        data = envelope.data
        if data is None:
            return Err(MISSING_PAYLOAD)
        description = data.get("description") if isinstance(data, Mapping) else None
        if description is None:
            return Err(MISSING_DESCRIPTION)
        return Err(str(description))

    return Err(INVALID_TYPE.format(type=envelope.type))
