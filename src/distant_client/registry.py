"""Pending-call registry.

Tracks outstanding requests by correlation id until a response arrives or
the call is abandoned. `take` is the single extraction point, which is what
guarantees a completion runs at most once.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from .errors import DuplicateCallError

logger = logging.getLogger(__name__)

# completion(error, data): exactly one of the two slots is set
Completion = Callable[[str | None, Any], None]


class PendingCallRegistry:
    """Registry of completions awaiting a correlated response.

    Mutation is guarded by a lock so transports that deliver envelopes from
    an I/O thread cannot extract the same completion twice.
    """

    def __init__(self) -> None:
        self._pending: dict[str, Completion] = {}
        self._lock = threading.Lock()

    def register(self, call_id: str, completion: Completion) -> None:
        """Store a completion under an outstanding id.

        Raises:
            DuplicateCallError: If the id is already outstanding
        """
        with self._lock:
            if call_id in self._pending:
                raise DuplicateCallError(call_id)
            self._pending[call_id] = completion
        logger.debug(f"Registered pending call {call_id}")

    def take(self, call_id: str | None) -> Completion | None:
        """Remove and return the completion for an id, if present."""
        if call_id is None:
            return None
        with self._lock:
            return self._pending.pop(call_id, None)

    def discard(self, call_id: str) -> bool:
        """Drop a registration without invoking it.

        Returns:
            True if the id was registered
        """
        return self.take(call_id) is not None

    def take_all(self) -> list[tuple[str, Completion]]:
        """Atomically remove every pending completion."""
        with self._lock:
            drained = list(self._pending.items())
            self._pending.clear()
        return drained

    def ids(self) -> list[str]:
        """Snapshot of outstanding ids."""
        with self._lock:
            return list(self._pending)

    def __contains__(self, call_id: object) -> bool:
        with self._lock:
            return call_id in self._pending

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)
