"""Client configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ClientConfig:
    """Configuration for AsyncRequestClient."""

    # Seconds to wait in AsyncRequestClient.request(); None waits forever
    timeout: float | None = 30.0

    # Prefix for generated correlation ids
    id_prefix: str = "req_"

    # Error delivered to pending calls when the client is closed
    closed_reason: str = "Connection closed"
