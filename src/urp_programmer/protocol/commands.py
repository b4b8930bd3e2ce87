"""Opcode constants and the command variants sent to the programmer.

Each command serializes to a fixed-size, opcode-prefixed frame and knows
how many payload bytes the device answers with after its ACK.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Union

from .framing import NAME_SIZE, build_frame, check_chunk

ACK = 0x06
NAK = 0x15


class Opcode(IntEnum):
    """Command opcodes."""

    NOP = 0x00
    QUERY_NAME = 0x03
    READ_N = 0x0A
    WRITE_N = 0x0D
    EXEC = 0x0F


@dataclass(frozen=True)
class Nop:
    """No-op; the device answers with a bare ACK."""

    opcode: ClassVar[Opcode] = Opcode.NOP

    def to_bytes(self) -> bytes:
        return build_frame(self.opcode)

    @property
    def response_length(self) -> int:
        return 0


@dataclass(frozen=True)
class QueryName:
    """Request the 16-byte programmer identity string."""

    opcode: ClassVar[Opcode] = Opcode.QUERY_NAME

    def to_bytes(self) -> bytes:
        return build_frame(self.opcode)

    @property
    def response_length(self) -> int:
        return NAME_SIZE


@dataclass(frozen=True)
class ReadChunk:
    """Read ``length`` bytes starting at ``address``.

    Wire order is address first, then length.
    """

    address: int
    length: int
    opcode: ClassVar[Opcode] = Opcode.READ_N

    def __post_init__(self) -> None:
        check_chunk(self.length)

    def to_bytes(self) -> bytes:
        return build_frame(self.opcode, self.address, self.length)

    @property
    def response_length(self) -> int:
        return self.length


@dataclass(frozen=True)
class WriteChunkHeader:
    """Stage ``length`` bytes for writing at ``address``.

    Wire order is length first, then address: the mirror image of
    :class:`ReadChunk`. The raw data follows the header on the wire.
    """

    length: int
    address: int
    opcode: ClassVar[Opcode] = Opcode.WRITE_N

    def __post_init__(self) -> None:
        check_chunk(self.length)

    def to_bytes(self) -> bytes:
        return build_frame(self.opcode, self.length, self.address)

    @property
    def response_length(self) -> int | None:
        return None


@dataclass(frozen=True)
class Execute:
    """Commit the most recently staged write into EEPROM."""

    opcode: ClassVar[Opcode] = Opcode.EXEC

    def to_bytes(self) -> bytes:
        return build_frame(self.opcode)

    @property
    def response_length(self) -> int | None:
        return None


Command = Union[Nop, QueryName, ReadChunk, WriteChunkHeader, Execute]
