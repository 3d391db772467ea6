"""Failure taxonomy for dropi-mcp.

Every error the adapter can observe is classified into one of these kinds at
the point where it happens. The kind never reaches the host: it only lets
the MCP layer decide whether a failure should be error-flagged.
"""

from __future__ import annotations

from enum import Enum


class FailureKind(str, Enum):
    """Where a failure originated."""

    CONFIGURATION = "configuration"
    TRANSPORT = "transport"
    REMOTE = "remote"
    PROTOCOL = "protocol"
    VALIDATION = "validation"

    @property
    def is_protocol(self) -> bool:
        """Failures the host caused by asking for something we do not expose."""

        return self is FailureKind.PROTOCOL
