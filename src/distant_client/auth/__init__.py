"""Authentication handshake support."""

from .handler import AuthHandler, Reply
from .prompt import ConsolePrompter, Prompter

__all__ = [
    "AuthHandler",
    "Reply",
    "Prompter",
    "ConsolePrompter",
]
