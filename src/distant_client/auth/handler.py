"""Authentication handshake handler.

Reacts to the authentication messages a remote peer sends before normal
traffic starts. Dispatch and reply shaping live in `handle_msg`; the
user-facing behaviour lives in the `on_*` hooks, which subclasses override:

    class EditorAuthHandler(AuthHandler):
        def on_info(self, text: str) -> None:
            editor.notify(text)

The handler does not enforce the order of messages; it answers whatever
arrives and trusts the peer to sequence the handshake. Missing payload
fields take empty defaults, so a recognized type always reaches its hook.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import final

from pydantic import ValidationError

from ..protocol.auth import (
    AuthChallenge,
    AuthError,
    AuthInfo,
    AuthInitialization,
    AuthStartMethod,
    AuthVerification,
    payload_of,
)
from ..protocol.envelope import INBOUND_AUTH_TYPES, AuthMessageType, Envelope
from .prompt import ConsolePrompter, Prompter

logger = logging.getLogger(__name__)

Reply = Callable[[Envelope], None]

_AFFIRMATIVE = frozenset({"y", "yes"})


class AuthHandler:
    """Stateful responder for one authentication exchange.

    `finished` starts False and becomes True on `auth_finished` or a fatal
    `auth_error`. It never reverts.
    """

    def __init__(self, prompter: Prompter | None = None) -> None:
        self.prompter = prompter or ConsolePrompter()
        self._finished = False

    @property
    def finished(self) -> bool:
        """True once authentication has completed or fatally failed."""
        return self._finished

    @staticmethod
    def is_auth_msg(envelope: Envelope | None) -> bool:
        """Check if an envelope is an inbound authentication message."""
        return envelope is not None and envelope.type in INBOUND_AUTH_TYPES

    @final
    def handle_msg(self, envelope: Envelope, reply: Reply) -> bool:
        """Process an authentication message.

        Args:
            envelope: Inbound authentication message
            reply: Sends a response envelope back to the peer

        Returns:
            True to continue the handshake. False for `auth_error` and for
            unrecognized or malformed messages; the caller must treat the
            handshake as failed.
        """
        msg_type = envelope.type
        payload = payload_of(envelope.data)

        try:
            if msg_type == AuthMessageType.INITIALIZATION.value:
                methods = self.on_initialization(AuthInitialization.model_validate(payload))
                reply(
                    Envelope.create(
                        AuthMessageType.INITIALIZATION_RESPONSE,
                        {"methods": list(methods)},
                    )
                )
                return True

            if msg_type == AuthMessageType.START_METHOD.value:
                self.on_start_method(AuthStartMethod.model_validate(payload).method)
                return True

            if msg_type == AuthMessageType.CHALLENGE.value:
                answers = self.on_challenge(AuthChallenge.model_validate(payload))
                reply(
                    Envelope.create(
                        AuthMessageType.CHALLENGE_RESPONSE,
                        {"answers": list(answers)},
                    )
                )
                return True

            if msg_type == AuthMessageType.VERIFICATION.value:
                valid = self.on_verification(AuthVerification.model_validate(payload))
                reply(
                    Envelope.create(
                        AuthMessageType.VERIFICATION_RESPONSE,
                        {"valid": bool(valid)},
                    )
                )
                return True

            if msg_type == AuthMessageType.INFO.value:
                self.on_info(AuthInfo.model_validate(payload).text)
                return True

            if msg_type == AuthMessageType.ERROR.value:
                err = AuthError.model_validate(payload)
                self.on_error(err)
                if not self._finished and err.is_fatal:
                    self._finished = True
                return False

            if msg_type == AuthMessageType.FINISHED.value:
                self.on_finished()
                self._finished = True
                return True

        except ValidationError as e:
            logger.error(f"Malformed {msg_type} payload: {e}")

        self.on_unknown(envelope)
        return False

    # =========================================================================
    # Hooks
    # =========================================================================

    def on_initialization(self, msg: AuthInitialization) -> list[str]:
        """Choose which of the offered methods to use, in order."""
        return msg.methods

    def on_start_method(self, method: str) -> None:
        """Invoked when the peer begins an authentication method."""
        logger.debug(f"Beginning authentication method: {method}")

    def on_challenge(self, msg: AuthChallenge) -> list[str]:
        """Answer each question, in order.

        Answers are read with echo only when the question sets
        `extra.echo == "true"`; everything else is read masked.
        """
        if msg.extra:
            username = msg.extra.get("username")
            if username:
                self.prompter.display(f"Authentication for {username}")
            instructions = msg.extra.get("instructions")
            if instructions:
                self.prompter.display(str(instructions))

        answers = []
        for question in msg.questions:
            if question.echo:
                answers.append(self.prompter.input(question.text))
            else:
                answers.append(self.prompter.input_secret(question.text))
        return answers

    def on_verification(self, msg: AuthVerification) -> bool:
        """Ask the user to confirm something, such as a host key."""
        answer = self.prompter.input(f"{msg.text}\nEnter [y/N]> ")
        return (answer or "").strip().lower() in _AFFIRMATIVE

    def on_info(self, text: str) -> None:
        """Invoked with informational text from the peer."""
        self.prompter.display(text)

    def on_error(self, err: AuthError) -> None:
        """Invoked on an authentication error; `fatal` ends the handshake."""
        logger.error(f"Authentication error ({err.kind}): {err.text}")

    def on_finished(self) -> None:
        """Invoked when authentication completes."""
        logger.debug("Authentication finished")

    def on_unknown(self, envelope: Envelope) -> None:
        """Invoked for unrecognized authentication messages."""
        logger.error(f"Unknown authentication event received: {envelope.type}")
