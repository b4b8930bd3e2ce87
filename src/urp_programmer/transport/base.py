"""Transport interface the protocol engine talks through."""

from __future__ import annotations

from typing import Protocol

from ..errors import DeviceTimeoutError, TruncatedError


class Transport(Protocol):
    """A blocking, half-duplex byte stream with a read deadline."""

    timeout: float

    def write(self, data: bytes) -> int:
        """Write all of ``data``; return the number of bytes written."""
        ...

    def read_exact(self, size: int) -> bytes:
        """Read exactly ``size`` bytes or raise before the deadline passes.

        Raises:
            DeviceTimeoutError: If no byte arrived.
            TruncatedError: If only some of the bytes arrived.
        """
        ...

    def close(self) -> None:
        """Release the underlying link."""
        ...


def require_exact(expected: int, data: bytes) -> bytes:
    """Check a short read result against the requested size."""
    if len(data) == expected:
        return data
    if not data:
        raise DeviceTimeoutError(expected)
    raise TruncatedError(expected, len(data))
