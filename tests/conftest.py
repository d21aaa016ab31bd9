"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from distant_client import AsyncRequestClient, MockTransport


@pytest.fixture(scope="module")
def anyio_backend():
    """Configure anyio to use asyncio backend."""
    return "asyncio"


class Recorder:
    """Completion that records every invocation."""

    def __init__(self) -> None:
        self.calls: list[tuple[str | None, Any]] = []

    def __call__(self, error: str | None, data: Any) -> None:
        self.calls.append((error, data))

    @property
    def count(self) -> int:
        return len(self.calls)

    @property
    def error(self) -> str | None:
        return self.calls[-1][0]

    @property
    def data(self) -> Any:
        return self.calls[-1][1]


class FakePrompter:
    """Prompter with scripted answers that records what was asked."""

    def __init__(self, answers: list[str] | None = None) -> None:
        self.answers = list(answers or [])
        self.prompts: list[tuple[str, str]] = []
        self.displayed: list[str] = []

    def _next(self) -> str:
        return self.answers.pop(0) if self.answers else ""

    def input(self, prompt: str) -> str:
        self.prompts.append(("input", prompt))
        return self._next()

    def input_secret(self, prompt: str) -> str:
        self.prompts.append(("secret", prompt))
        return self._next()

    def display(self, text: str) -> None:
        self.displayed.append(text)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
def client(transport: MockTransport) -> AsyncRequestClient:
    return AsyncRequestClient(transport)


@pytest.fixture
def make_recorder():
    """Factory for additional completion recorders."""
    return Recorder


@pytest.fixture
def make_prompter():
    """Factory for scripted prompters."""
    return FakePrompter
