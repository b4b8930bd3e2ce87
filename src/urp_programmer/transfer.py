"""Chunked EEPROM transfers on top of the protocol engine.

The device accepts at most ``CHUNK_SIZE`` bytes per operation, so longer
reads and writes are split into sequential chunks in address order.
After each chunk the progress sink is told how many bytes were done
*before* that chunk, so the first report is always 0 and completion is
implied by the call returning.

Nothing is retried or rolled back: the first failing chunk aborts the
transfer and its exception reaches the caller.
"""

from __future__ import annotations

import logging
from typing import Iterator, Protocol

from .errors import VerifyError
from .protocol.engine import ProtocolEngine
from .protocol.framing import CHUNK_SIZE, check_span

logger = logging.getLogger(__name__)

ERASED_BYTE = 0xFF  # EEPROM cell value after erase


class ProgressSink(Protocol):
    def on_progress(self, done: int, total: int) -> None:
        ...


def percent(done: int, total: int) -> int:
    """Whole percent complete, rounded down."""
    if total <= 0:
        return 100
    return done * 100 // total


class LoggingProgress:
    """Progress sink that logs whole-percent steps at INFO."""

    def __init__(self, label: str = "transfer") -> None:
        self.label = label
        self._last: int | None = None

    def on_progress(self, done: int, total: int) -> None:
        pct = percent(done, total)
        if pct != self._last:
            self._last = pct
            logger.info("%s: %d%%", self.label, pct)

    def finish(self) -> None:
        self.on_progress(1, 1)


def iter_chunks(base: int, total: int) -> Iterator[tuple[int, int, int]]:
    """Yield ``(address, offset, length)`` for each chunk of a transfer."""
    offset = 0
    while offset < total:
        length = min(CHUNK_SIZE, total - offset)
        yield base + offset, offset, length
        offset += length


def read_bytes(
    engine: ProtocolEngine,
    base: int,
    total: int,
    progress: ProgressSink | None = None,
) -> bytes:
    """Read ``total`` bytes of EEPROM starting at ``base``.

    Raises:
        ValueError: If the span leaves the 24-bit address space.
        ProgrammerError: On the first chunk the device fails to deliver.
    """
    check_span(base, total)
    data = bytearray(total)
    for address, offset, length in iter_chunks(base, total):
        data[offset : offset + length] = engine.read_chunk(address, length)
        if progress is not None:
            progress.on_progress(offset, total)
    logger.debug("Read %d byte(s) from 0x%06X", total, base)
    return bytes(data)


def write_bytes(
    engine: ProtocolEngine,
    base: int,
    data: bytes,
    progress: ProgressSink | None = None,
) -> None:
    """Write ``data`` to EEPROM starting at ``base``, committing each chunk.

    Raises:
        ValueError: If the span leaves the 24-bit address space.
        ProgrammerError: If the transport fails mid-transfer.
    """
    total = len(data)
    check_span(base, total)
    for address, offset, length in iter_chunks(base, total):
        engine.write_chunk(address, data[offset : offset + length])
        if progress is not None:
            progress.on_progress(offset, total)
    logger.debug("Wrote %d byte(s) to 0x%06X", total, base)


def first_mismatch(expected: bytes, actual: bytes) -> int | None:
    """Offset of the first differing byte, or None if the buffers match."""
    for offset, (a, b) in enumerate(zip(expected, actual)):
        if a != b:
            return offset
    if len(expected) != len(actual):
        return min(len(expected), len(actual))
    return None


def verify_bytes(
    engine: ProtocolEngine,
    base: int,
    expected: bytes,
    progress: ProgressSink | None = None,
) -> None:
    """Read back ``expected`` from ``base`` and compare.

    Raises:
        VerifyError: With the address of the first differing byte.
    """
    actual = read_bytes(engine, base, len(expected), progress)
    offset = first_mismatch(expected, actual)
    if offset is not None:
        raise VerifyError(base + offset)
    logger.info("Verified %d byte(s) at 0x%06X", len(expected), base)
