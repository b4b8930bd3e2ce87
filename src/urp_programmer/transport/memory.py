"""In-memory transport with scripted device responses.

Everything written is recorded; reads are served from a queue of bytes fed
in advance. Running out of queued bytes behaves like a serial read timeout.
"""

from __future__ import annotations

import logging

from ..config import DEFAULT_TIMEOUT_S
from .base import require_exact

logger = logging.getLogger(__name__)


class MemoryTransport:
    """Deterministic stand-in for :class:`SerialConnection`."""

    def __init__(self, responses: bytes = b"", timeout: float = DEFAULT_TIMEOUT_S) -> None:
        self.timeout = timeout
        self._rx = bytearray(responses)
        self.written = bytearray()
        self.writes: list[bytes] = []
        self.read_sizes: list[int] = []
        self.closed = False

    def feed(self, data: bytes) -> None:
        """Queue bytes for the host to read."""
        self._rx += data

    @property
    def pending(self) -> bytes:
        """Queued bytes not yet consumed by a read."""
        return bytes(self._rx)

    def write(self, data: bytes) -> int:
        data = bytes(data)
        self.writes.append(data)
        self.written += data
        return len(data)

    def close(self) -> None:
        self.closed = True

    def read_exact(self, size: int) -> bytes:
        self.read_sizes.append(size)
        data = bytes(self._rx[:size])
        del self._rx[:size]
        if len(data) < size:
            logger.debug("Short read: wanted %d, had %d", size, len(data))
        return require_exact(size, data)
