"""Transport contract for the request client.

The transport owns connection establishment, framing and encoding. The
client only needs three things from it:
- send: hand over an envelope, raising on failure
- on_receive: register the callback invoked for every inbound envelope
- close: release the connection

MockTransport implements the contract in memory for tests and embedding.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from .errors import TransportError
from .protocol.envelope import Envelope

logger = logging.getLogger(__name__)


class ReceiveCallback(Protocol):
    """Callback invoked for every inbound envelope.

    Transports pass `envelope=None` with the `call_id` read from the frame
    header when a response payload could not be decoded.
    """

    def __call__(self, envelope: Envelope | None, call_id: str | None = None) -> None: ...


@runtime_checkable
class Transport(Protocol):
    """Protocol for duplex envelope transports."""

    def send(self, envelope: Envelope) -> None:
        """Send an envelope to the remote peer.

        Raises:
            TransportError: If the envelope could not be handed to the wire
        """
        ...

    def on_receive(self, callback: ReceiveCallback) -> None:
        """Register the callback for inbound envelopes."""
        ...

    def close(self) -> None:
        """Close the connection."""
        ...


class MockTransport:
    """In-memory transport for testing.

    Records sent envelopes and lets tests deliver inbound envelopes.
    Canned responses can be configured per request type; they are
    delivered synchronously from within send(), re-addressed to the
    request's id.

    Usage:
        transport = MockTransport()
        transport.set_response("file_write_text", Envelope.ok(None, {}))

        client = AsyncRequestClient(transport)
        client.call("file_write_text", {"path": "a", "text": "b"}, done)

        assert transport.sent[0].type == "file_write_text"
    """

    def __init__(self) -> None:
        self._callback: ReceiveCallback | None = None
        self._responses: dict[str, Envelope | None] = {}
        self._sent: list[Envelope] = []
        self._fail_with: str | None = None
        self.closed = False

    @property
    def sent(self) -> list[Envelope]:
        """All envelopes sent through this transport."""
        return self._sent.copy()

    @property
    def last_sent(self) -> Envelope | None:
        return self._sent[-1] if self._sent else None

    def set_response(self, request_type: Any, response: Envelope | None) -> None:
        """Set a canned response for a request type.

        A None response is delivered as an undecodable frame for the
        request's id, so the client sees a nil response.
        """
        key = getattr(request_type, "value", request_type)
        self._responses[key] = response

    def fail_sends(self, reason: str | None) -> None:
        """Make every subsequent send raise TransportError (None to reset)."""
        self._fail_with = reason

    def clear(self) -> None:
        """Clear recorded envelopes and canned responses."""
        self._sent.clear()
        self._responses.clear()

    def send(self, envelope: Envelope) -> None:
        if self.closed:
            raise TransportError("Transport closed")
        if self._fail_with is not None:
            raise TransportError(self._fail_with)

        self._sent.append(envelope)
        logger.debug(f"Mock transport sent {envelope.type} (id={envelope.id})")

        if envelope.type in self._responses:
            response = self._responses[envelope.type]
            if response is None:
                self.deliver(None, call_id=envelope.id)
            else:
                self.deliver(response.model_copy(update={"id": envelope.id}))

    def on_receive(self, callback: ReceiveCallback) -> None:
        self._callback = callback

    def deliver(self, envelope: Envelope | None, call_id: str | None = None) -> None:
        """Deliver an inbound envelope to the registered callback."""
        if self._callback is None:
            logger.warning("Mock transport has no receive callback, dropping envelope")
            return
        self._callback(envelope, call_id)

    def close(self) -> None:
        self.closed = True
