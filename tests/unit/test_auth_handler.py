"""Unit tests for AuthHandler dispatch and default hooks."""

from __future__ import annotations

import logging

import pytest

from distant_client import AuthHandler, Envelope
from distant_client.protocol import AuthChallenge, AuthInitialization


@pytest.fixture
def replies() -> list[Envelope]:
    return []


def msg(msg_type: str, **data) -> Envelope:
    return Envelope(type=msg_type, data=data)


# =============================================================================
# Recognition
# =============================================================================


class TestIsAuthMsg:
    """Test recognition of authentication messages."""

    @pytest.mark.parametrize(
        "msg_type",
        [
            "auth_initialization",
            "auth_start_method",
            "auth_challenge",
            "auth_verification",
            "auth_info",
            "auth_error",
            "auth_finished",
        ],
    )
    def test_recognized(self, msg_type):
        assert AuthHandler.is_auth_msg(Envelope(type=msg_type)) is True

    @pytest.mark.parametrize("msg_type", ["ok", "auth_challenge_response", "auth"])
    def test_not_recognized(self, msg_type):
        assert AuthHandler.is_auth_msg(Envelope(type=msg_type)) is False

    def test_none_is_not_auth(self):
        assert AuthHandler.is_auth_msg(None) is False


# =============================================================================
# Dispatch
# =============================================================================


class TestInitialization:
    """auth_initialization replies with the chosen methods."""

    def test_default_echoes_methods(self, make_prompter, replies):
        handler = AuthHandler(prompter=make_prompter())

        ok = handler.handle_msg(msg("auth_initialization", methods=["a", "b"]), replies.append)

        assert ok is True
        assert replies == [
            Envelope(type="auth_initialization_response", data={"methods": ["a", "b"]})
        ]

    def test_override_chooses_methods(self, make_prompter, replies):
        class OnlyStatic(AuthHandler):
            def on_initialization(self, msg: AuthInitialization) -> list[str]:
                return [m for m in msg.methods if m == "static_key"]

        handler = OnlyStatic(prompter=make_prompter())
        handler.handle_msg(
            msg("auth_initialization", methods=["none", "static_key"]), replies.append
        )

        assert replies[0].data == {"methods": ["static_key"]}


class TestStartMethodAndInfo:
    """Informational messages produce no reply."""

    def test_start_method(self, make_prompter, replies, caplog):
        handler = AuthHandler(prompter=make_prompter())

        with caplog.at_level(logging.DEBUG, logger="distant_client.auth.handler"):
            ok = handler.handle_msg(msg("auth_start_method", method="password"), replies.append)

        assert ok is True
        assert replies == []
        assert "Beginning authentication method: password" in caplog.text

    def test_info_is_displayed(self, make_prompter, replies):
        prompter = make_prompter()
        handler = AuthHandler(prompter=prompter)

        ok = handler.handle_msg(msg("auth_info", text="Welcome"), replies.append)

        assert ok is True
        assert replies == []
        assert prompter.displayed == ["Welcome"]

    def test_info_without_text(self, make_prompter, replies):
        prompter = make_prompter()
        handler = AuthHandler(prompter=prompter)

        ok = handler.handle_msg(msg("auth_info"), replies.append)

        assert ok is True
        assert prompter.displayed == [""]

    def test_start_method_without_method(self, make_prompter, replies):
        handler = AuthHandler(prompter=make_prompter())

        assert handler.handle_msg(Envelope(type="auth_start_method"), replies.append) is True


class TestChallenge:
    """auth_challenge collects one answer per question, in order."""

    def test_echo_question_uses_plain_prompt(self, make_prompter, replies):
        prompter = make_prompter(["alice"])
        handler = AuthHandler(prompter=prompter)

        challenge = msg("auth_challenge", questions=[{"text": "Name?", "extra": {"echo": "true"}}])
        ok = handler.handle_msg(challenge, replies.append)

        assert ok is True
        assert prompter.prompts == [("input", "Name?")]
        assert replies == [Envelope(type="auth_challenge_response", data={"answers": ["alice"]})]

    @pytest.mark.parametrize(
        "extra",
        [None, {}, {"echo": "false"}, {"echo": "yes"}, {"echo": True}, {"echo": 1}],
    )
    def test_other_questions_are_masked(self, make_prompter, replies, extra):
        prompter = make_prompter(["hunter2"])
        handler = AuthHandler(prompter=prompter)

        question = {"text": "Password:"}
        if extra is not None:
            question["extra"] = extra
        handler.handle_msg(msg("auth_challenge", questions=[question]), replies.append)

        assert prompter.prompts == [("secret", "Password:")]
        assert replies[0].data == {"answers": ["hunter2"]}

    def test_answers_keep_question_order(self, make_prompter, replies):
        prompter = make_prompter(["one", "two", "three"])
        handler = AuthHandler(prompter=prompter)

        questions = [
            {"text": "First?", "extra": {"echo": "true"}},
            {"text": "Second?"},
            {"text": "Third?", "extra": {"echo": "true"}},
        ]
        handler.handle_msg(msg("auth_challenge", questions=questions), replies.append)

        assert [kind for kind, _ in prompter.prompts] == ["input", "secret", "input"]
        assert replies[0].data == {"answers": ["one", "two", "three"]}

    def test_extra_banner_is_displayed(self, make_prompter, replies):
        prompter = make_prompter()
        handler = AuthHandler(prompter=prompter)

        challenge = msg(
            "auth_challenge",
            questions=[],
            extra={"username": "bob", "instructions": "Use your key"},
        )
        handler.handle_msg(challenge, replies.append)

        assert prompter.displayed == ["Authentication for bob", "Use your key"]
        assert replies[0].data == {"answers": []}

    def test_override_challenge(self, replies):
        class Scripted(AuthHandler):
            def on_challenge(self, msg: AuthChallenge) -> list[str]:
                return ["secret"] * len(msg.questions)

        handler = Scripted(prompter=object())
        handler.handle_msg(
            msg("auth_challenge", questions=[{"text": "a"}, {"text": "b"}]), replies.append
        )

        assert replies[0].data == {"answers": ["secret", "secret"]}


class TestVerification:
    """auth_verification replies with the user's yes/no."""

    @pytest.mark.parametrize("answer", ["y", "Y", "yes", "YES", "Yes", "  y  "])
    def test_affirmative(self, make_prompter, replies, answer):
        prompter = make_prompter([answer])
        handler = AuthHandler(prompter=prompter)

        ok = handler.handle_msg(
            msg("auth_verification", kind="host", text="Trust host?"), replies.append
        )

        assert ok is True
        assert replies == [
            Envelope(type="auth_verification_response", data={"valid": True})
        ]
        assert prompter.prompts == [("input", "Trust host?\nEnter [y/N]> ")]

    @pytest.mark.parametrize("answer", ["", "n", "no", "yep", "nope"])
    def test_negative(self, make_prompter, replies, answer):
        handler = AuthHandler(prompter=make_prompter([answer]))

        handler.handle_msg(msg("auth_verification", kind="host", text="Trust?"), replies.append)

        assert replies[0].data == {"valid": False}

    def test_verification_without_text(self, make_prompter, replies):
        prompter = make_prompter(["y"])
        handler = AuthHandler(prompter=prompter)

        ok = handler.handle_msg(Envelope(type="auth_verification"), replies.append)

        assert ok is True
        assert prompter.prompts == [("input", "\nEnter [y/N]> ")]
        assert replies[0].data == {"valid": True}


class TestErrorAndFinished:
    """Terminal state transitions."""

    def test_finished_starts_false(self, make_prompter):
        assert AuthHandler(prompter=make_prompter()).finished is False

    def test_auth_finished_sets_finished(self, make_prompter, replies):
        handler = AuthHandler(prompter=make_prompter())

        ok = handler.handle_msg(Envelope(type="auth_finished"), replies.append)

        assert ok is True
        assert handler.finished is True
        assert replies == []

    def test_fatal_error_sets_finished(self, make_prompter, replies):
        handler = AuthHandler(prompter=make_prompter())

        ok = handler.handle_msg(msg("auth_error", kind="fatal", text="denied"), replies.append)

        assert ok is False
        assert handler.finished is True

    def test_non_fatal_error_leaves_finished(self, make_prompter, replies):
        handler = AuthHandler(prompter=make_prompter())

        ok = handler.handle_msg(msg("auth_error", kind="error", text="retry"), replies.append)

        assert ok is False
        assert handler.finished is False

    def test_fatal_error_without_text(self, make_prompter, replies):
        handler = AuthHandler(prompter=make_prompter())

        ok = handler.handle_msg(msg("auth_error", kind="fatal"), replies.append)

        assert ok is False
        assert handler.finished is True

    def test_non_fatal_error_without_text(self, make_prompter, replies):
        handler = AuthHandler(prompter=make_prompter())

        ok = handler.handle_msg(msg("auth_error", kind="error"), replies.append)

        assert ok is False
        assert handler.finished is False

    def test_finished_is_monotonic(self, make_prompter, replies):
        handler = AuthHandler(prompter=make_prompter())
        handler.handle_msg(Envelope(type="auth_finished"), replies.append)

        handler.handle_msg(msg("auth_error", kind="fatal", text="late"), replies.append)
        handler.handle_msg(msg("auth_error", kind="error", text="later"), replies.append)

        assert handler.finished is True

    def test_error_is_logged(self, make_prompter, replies, caplog):
        handler = AuthHandler(prompter=make_prompter())

        with caplog.at_level(logging.ERROR, logger="distant_client.auth.handler"):
            handler.handle_msg(msg("auth_error", kind="error", text="bad key"), replies.append)

        assert "Authentication error (error): bad key" in caplog.text


class TestUnknown:
    """Unrecognized or malformed messages go to on_unknown."""

    def test_unknown_type(self, make_prompter, replies):
        seen: list[Envelope] = []

        class Tracking(AuthHandler):
            def on_unknown(self, envelope: Envelope) -> None:
                seen.append(envelope)

        handler = Tracking(prompter=make_prompter())
        env = Envelope(type="auth_mystery")

        ok = handler.handle_msg(env, replies.append)

        assert ok is False
        assert seen == [env]
        assert replies == []
        assert handler.finished is False

    def test_wrongly_typed_payload(self, make_prompter, replies):
        """A payload whose structure cannot be read is treated as unknown."""
        handler = AuthHandler(prompter=make_prompter())

        ok = handler.handle_msg(msg("auth_challenge", questions="none"), replies.append)

        assert ok is False
        assert replies == []

    def test_missing_payload_for_initialization(self, make_prompter, replies):
        """Methods default to an empty list."""
        handler = AuthHandler(prompter=make_prompter())

        ok = handler.handle_msg(Envelope(type="auth_initialization"), replies.append)

        assert ok is True
        assert replies[0].data == {"methods": []}
