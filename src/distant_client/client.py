"""Asynchronous request client.

Issues requests over a Transport and correlates the out-of-order responses
back to their completions:

    client = AsyncRequestClient(transport, auth_handler=AuthHandler())
    sent = client.call("file_write_text", {"path": "a", "text": "b"}, done)
    if sent.is_error:
        print(sent.message)

    # or, from a coroutine
    data = await client.request("system_info")

Inbound envelopes are routed by type: authentication messages go to the
AuthHandler, everything else is matched against the pending-call registry
by correlation id and classified into an outcome.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import uuid
from enum import Enum
from typing import TYPE_CHECKING, Any

from .config import ClientConfig
from .errors import RequestError
from .protocol.classifier import Err, Ok, Outcome, classify
from .protocol.envelope import Envelope, RequestType
from .registry import Completion, PendingCallRegistry
from .transport import Transport

if TYPE_CHECKING:
    from .auth.handler import AuthHandler

logger = logging.getLogger(__name__)

NOT_CONNECTED = "Not connected"
TIMED_OUT = "Request timed out"
CANCELLED = "Request cancelled"

_DEFAULT = object()


class ClientState(str, Enum):
    """Connection state of the client."""

    CONNECTED = "connected"
    CLOSED = "closed"


class AsyncRequestClient:
    """Request/response correlation over a duplex transport.

    The client is the session object: it owns the pending-call registry for
    one connection and is passed explicitly to whatever issues requests.

    Completions are invoked exactly once, with `(error, None)` or
    `(None, data)`. Responses whose id is not pending are dropped.
    """

    def __init__(
        self,
        transport: Transport | None,
        auth_handler: AuthHandler | None = None,
        config: ClientConfig | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        self._transport = transport
        self._auth_handler = auth_handler
        self._registry = PendingCallRegistry()
        self._state = ClientState.CONNECTED if transport is not None else ClientState.CLOSED
        self._auth_failed = False
        # Orders call() registration against close() draining
        self._lock = threading.Lock()

        if transport is not None:
            transport.on_receive(self.receive)

    @property
    def state(self) -> ClientState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state == ClientState.CONNECTED

    @property
    def transport(self) -> Transport | None:
        return self._transport

    @property
    def auth_handler(self) -> AuthHandler | None:
        return self._auth_handler

    @property
    def auth_failed(self) -> bool:
        """True once the auth handler reported an error or unknown message."""
        return self._auth_failed

    @property
    def pending_count(self) -> int:
        return len(self._registry)

    def is_pending(self, call_id: str) -> bool:
        return call_id in self._registry

    # =========================================================================
    # Outbound
    # =========================================================================

    def call(
        self,
        request_type: str | RequestType,
        request_data: Any,
        completion: Completion,
    ) -> Outcome:
        """Send a request and register its completion.

        Args:
            request_type: Remote operation type tag
            request_data: Operation payload, passed through untouched
            completion: Invoked once with (error, None) or (None, data)

        Returns:
            Ok(call_id) once the request is on the transport, or Err when
            the client is not connected or the send failed. On Err the
            completion is never invoked.
        """
        with self._lock:
            if not self.is_connected or self._transport is None:
                return Err(NOT_CONNECTED)
            transport = self._transport

            call_id = self._next_id()
            envelope = Envelope.request(request_type, request_data, call_id)

            # Register first: the response may arrive before send() returns
            self._registry.register(call_id, completion)

        try:
            transport.send(envelope)
        except Exception as e:
            if not self._registry.discard(call_id):
                # Already completed by close() or a response
                logger.debug(f"Send of {envelope.type} failed after completion (id={call_id})")
                return Ok(call_id)
            logger.warning(f"Failed to send {envelope.type} (id={call_id}): {e}")
            return Err(f"Failed to send request: {e}")

        logger.debug(f"Sent {envelope.type} (id={call_id})")
        return Ok(call_id)

    async def request(
        self,
        request_type: str | RequestType,
        request_data: Any = None,
        timeout: Any = _DEFAULT,
    ) -> Any:
        """Send a request and wait for its outcome.

        Args:
            request_type: Remote operation type tag
            request_data: Operation payload
            timeout: Seconds to wait (default: config.timeout, None = forever)

        Returns:
            The success payload

        Raises:
            RequestError: On send failure, error response or timeout
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Any] = loop.create_future()
        call_id: str | None = None

        def settle(error: str | None, data: Any) -> None:
            if future.done():
                return
            if error is not None:
                future.set_exception(RequestError(error, call_id))
            else:
                future.set_result(data)

        def complete(error: str | None, data: Any) -> None:
            # May run on a transport thread
            loop.call_soon_threadsafe(settle, error, data)

        sent = self.call(request_type, request_data, complete)
        if isinstance(sent, Err):
            raise RequestError(sent.message)
        call_id = sent.data

        wait = self.config.timeout if timeout is _DEFAULT else timeout
        try:
            return await asyncio.wait_for(future, wait)
        except TimeoutError:
            self.abandon(call_id, TIMED_OUT)
            raise RequestError(TIMED_OUT, call_id) from None
        except asyncio.CancelledError:
            self.abandon(call_id, CANCELLED)
            raise

    # =========================================================================
    # Inbound
    # =========================================================================

    def receive(self, envelope: Envelope | None, call_id: str | None = None) -> None:
        """Transport callback for every inbound envelope.

        Args:
            envelope: The decoded envelope, or None if the frame was unreadable
            call_id: Correlation id from the frame header, when the transport
                knows it independently of the payload
        """
        if envelope is not None and envelope.is_auth:
            self._route_auth(envelope)
            return

        if envelope is None and call_id is None:
            logger.debug("Dropping unidentifiable inbound frame")
            return

        self.resolve(call_id if call_id is not None else envelope.id, envelope)

    def resolve(self, call_id: str | None, envelope: Envelope | None) -> bool:
        """Complete the pending call for an id with a response envelope.

        Returns:
            True if a pending call was completed
        """
        completion = self._registry.take(call_id)
        if completion is None:
            logger.debug(f"No pending call for response (id={call_id}), dropping")
            return False

        outcome = classify(envelope)
        if isinstance(outcome, Ok):
            self._invoke(call_id, completion, None, outcome.data)
        else:
            logger.debug(f"Call {call_id} failed: {outcome.message}")
            self._invoke(call_id, completion, outcome.message, None)
        return True

    # =========================================================================
    # Abandonment and teardown
    # =========================================================================

    def abandon(self, call_id: str, reason: str) -> bool:
        """Stop waiting for a call and complete it with an error.

        Returns:
            True if the call was still pending
        """
        completion = self._registry.take(call_id)
        if completion is None:
            return False
        logger.debug(f"Abandoned call {call_id}: {reason}")
        self._invoke(call_id, completion, reason, None)
        return True

    def close(self, reason: str | None = None) -> int:
        """Close the client, failing every pending call.

        Args:
            reason: Error delivered to pending completions
                (default: config.closed_reason)

        Returns:
            Number of pending calls that were failed
        """
        with self._lock:
            if self._state == ClientState.CLOSED:
                return 0
            self._state = ClientState.CLOSED
            drained = self._registry.take_all()

        reason = reason or self.config.closed_reason
        for call_id, completion in drained:
            self._invoke(call_id, completion, reason, None)

        if self._transport is not None:
            try:
                self._transport.close()
            except Exception as e:
                logger.warning(f"Error closing transport: {e}")

        logger.info(f"Client closed ({len(drained)} pending calls failed)")
        return len(drained)

    # =========================================================================
    # Internals
    # =========================================================================

    def _next_id(self) -> str:
        while True:
            call_id = f"{self.config.id_prefix}{uuid.uuid4().hex[:12]}"
            if call_id not in self._registry:
                return call_id

    def _invoke(
        self,
        call_id: str | None,
        completion: Completion,
        error: str | None,
        data: Any,
    ) -> None:
        try:
            completion(error, data)
        except Exception:
            logger.exception(f"Completion for call {call_id} raised")

    def _route_auth(self, envelope: Envelope) -> None:
        if self._auth_handler is None:
            logger.warning(f"No authentication handler, dropping {envelope.type}")
            return

        if not self._auth_handler.handle_msg(envelope, self._reply):
            self._auth_failed = True
            logger.warning(f"Authentication failed on {envelope.type}")

    def _reply(self, envelope: Envelope) -> None:
        if not self.is_connected or self._transport is None:
            logger.warning(f"Not connected, dropping reply {envelope.type}")
            return
        try:
            self._transport.send(envelope)
        except Exception as e:
            logger.error(f"Failed to send {envelope.type}: {e}")
