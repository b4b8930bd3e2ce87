"""Frame builder and field codec for the programmer's serial protocol.

Every host-to-device frame is an opcode byte optionally followed by 24-bit
little-endian fields::

    +---------+-----------+-----------+
    | Opcode  |  Field 1  |  Field 2  |
    | 1 byte  |  3 bytes  |  3 bytes  |
    +---------+-----------+-----------+

- READ_N:  opcode, address, length
- WRITE_N: opcode, length, address (then raw data, then EXEC)
- NOP / QUERY_NAME / EXEC: opcode only

Responses are an ACK/NAK byte followed by a payload whose size is known
from the request; they carry no length or checksum of their own.
"""

from __future__ import annotations

FIELD_SIZE = 3
ADDRESS_MAX = 0xFFFFFF  # 24-bit address space
CHUNK_SIZE = 64  # device buffer capacity per read/write operation
NAME_SIZE = 16


def encode_u24(value: int) -> bytes:
    """Encode an unsigned 24-bit integer as 3 little-endian bytes.

    Raises:
        ValueError: If ``value`` does not fit in 24 bits.
    """
    if not 0 <= value <= ADDRESS_MAX:
        raise ValueError(f"Value must be 0-0x{ADDRESS_MAX:06X}, got {value:#x}")
    return value.to_bytes(FIELD_SIZE, "little")


def check_span(address: int, length: int) -> None:
    """Validate that ``length`` bytes starting at ``address`` stay in range.

    Raises:
        ValueError: If the span leaves the 24-bit address space.
    """
    if length < 0:
        raise ValueError(f"Length must not be negative, got {length}")
    if not 0 <= address <= ADDRESS_MAX:
        raise ValueError(f"Address must be 0-0x{ADDRESS_MAX:06X}, got {address:#x}")
    if length and address + length - 1 > ADDRESS_MAX:
        raise ValueError(
            f"{length} byte(s) at 0x{address:06X} run past 0x{ADDRESS_MAX:06X}"
        )


def check_chunk(length: int) -> None:
    """Validate a single device operation's payload length."""
    if not 0 <= length <= CHUNK_SIZE:
        raise ValueError(f"Chunk length must be 0-{CHUNK_SIZE}, got {length}")


def build_frame(opcode: int, *fields: int) -> bytes:
    """Build a frame from an opcode and its 24-bit fields, in wire order.

    Args:
        opcode: Single-byte command opcode.
        fields: 24-bit values appended little-endian after the opcode.

    Returns:
        The exact bytes to write to the transport.
    """
    return bytes([opcode]) + b"".join(encode_u24(f) for f in fields)


def decode_name(data: bytes) -> str:
    """Decode the 16-byte programmer name field.

    Non-ASCII bytes are replaced one-for-one rather than rejected, and NUL
    padding is kept, so this never fails and keeps the field's length.
    """
    return data.decode("ascii", errors="replace")
