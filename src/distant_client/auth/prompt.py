"""User interaction for the authentication handshake.

The handler never talks to a terminal directly; it goes through a Prompter
so embedding applications can route prompts to their own UI.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import click


@runtime_checkable
class Prompter(Protocol):
    """Protocol for collecting answers and showing text to the user."""

    def input(self, prompt: str) -> str:
        """Read a line with the answer echoed."""
        ...

    def input_secret(self, prompt: str) -> str:
        """Read a line without echoing it."""
        ...

    def display(self, text: str) -> None:
        """Show text to the user."""
        ...


class ConsolePrompter:
    """Prompter for the controlling terminal.

    Prompts go to stderr so stdout stays free for a stdio transport.
    Empty input is accepted and returned as an empty string.
    """

    def __init__(self, err: bool = True) -> None:
        self._err = err

    def input(self, prompt: str) -> str:
        return click.prompt(
            prompt,
            default="",
            show_default=False,
            prompt_suffix="",
            err=self._err,
        )

    def input_secret(self, prompt: str) -> str:
        return click.prompt(
            prompt,
            default="",
            show_default=False,
            prompt_suffix="",
            hide_input=True,
            err=self._err,
        )

    def display(self, text: str) -> None:
        click.echo(text, err=self._err)
