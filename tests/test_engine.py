"""Tests for the protocol engine against an in-memory transport."""

import pytest

from urp_programmer.errors import DeviceTimeoutError, NakError, TruncatedError
from urp_programmer.protocol.commands import ACK, NAK
from urp_programmer.protocol.engine import EngineState, ProtocolEngine
from urp_programmer.transport.memory import MemoryTransport


def _engine(responses: bytes = b"") -> tuple[ProtocolEngine, MemoryTransport]:
    transport = MemoryTransport(responses)
    return ProtocolEngine(transport), transport


def test_query_name():
    """ACK plus 16 name bytes decodes to the name string."""
    engine, transport = _engine(bytes([ACK]) + b"URP-PROGRAMMER\x00\x00")
    assert engine.query_name() == "URP-PROGRAMMER\x00\x00"
    assert transport.written == b"\x03"
    assert transport.read_sizes == [1, 16]


def test_query_name_invalid_bytes():
    """Arbitrary name bytes still decode to 16 characters."""
    engine, _ = _engine(bytes([ACK]) + bytes(range(0x80, 0x90)))
    assert len(engine.query_name()) == 16


def test_query_name_nak():
    engine, _ = _engine(bytes([NAK]))
    with pytest.raises(NakError) as exc_info:
        engine.query_name()
    assert exc_info.value.ack == NAK


def test_query_name_truncated():
    """Fewer than 16 name bytes is a truncated response."""
    engine, _ = _engine(bytes([ACK]) + b"URP")
    with pytest.raises(TruncatedError) as exc_info:
        engine.query_name()
    assert exc_info.value.expected == 16
    assert exc_info.value.received == 3


def test_query_name_timeout():
    """No reply at all is a timeout."""
    engine, _ = _engine()
    with pytest.raises(DeviceTimeoutError):
        engine.query_name()


def test_nak_leaves_payload_unread():
    """A NAK aborts before the would-be payload is consumed."""
    payload = b"\xaa" * 8
    engine, transport = _engine(bytes([NAK]) + payload)
    with pytest.raises(NakError):
        engine.read_chunk(0, 8)
    assert transport.read_sizes == [1]
    assert transport.pending == payload


def test_unexpected_ack_byte_is_nak():
    """Anything other than ACK counts as a rejection."""
    engine, _ = _engine(b"\x42")
    with pytest.raises(NakError):
        engine.recv_with_ack(4)


def test_read_chunk_frame_and_payload():
    data = bytes(range(64))
    engine, transport = _engine(bytes([ACK]) + data)
    assert engine.read_chunk(0, 64) == data
    assert transport.writes == [bytes([0x0A, 0x00, 0x00, 0x00, 0x40, 0x00, 0x00])]


def test_read_chunk_encodes_address():
    engine, transport = _engine(bytes([ACK]) + b"\x00" * 5)
    engine.read_chunk(0x123456, 5)
    assert transport.written == bytes([0x0A, 0x56, 0x34, 0x12, 0x05, 0x00, 0x00])


def test_read_chunk_rejects_oversize():
    """Chunks beyond 64 bytes never reach the transport."""
    engine, transport = _engine()
    with pytest.raises(ValueError):
        engine.read_chunk(0, 65)
    assert transport.written == b""


def test_read_chunk_rejects_address_overflow():
    engine, transport = _engine()
    with pytest.raises(ValueError):
        engine.read_chunk(0xFFFFF0, 64)
    assert transport.written == b""


def test_write_chunk_wire_sequence():
    """Header (length first), raw data, then EXEC."""
    data = bytes(range(10))
    engine, transport = _engine()
    engine.write_chunk(0x001000, data)
    assert transport.writes == [
        bytes([0x0D, 0x0A, 0x00, 0x00, 0x00, 0x10, 0x00]),
        data,
        b"\x0f",
    ]


def test_write_chunk_reads_nothing():
    """The write/execute pair expects no reply."""
    engine, transport = _engine(bytes([ACK]))
    engine.write_chunk(0, b"\x01\x02")
    assert transport.read_sizes == []
    assert transport.pending == bytes([ACK])


def test_write_chunk_rejects_oversize():
    engine, transport = _engine()
    with pytest.raises(ValueError):
        engine.write_chunk(0, b"\x00" * 65)
    assert transport.written == b""


def test_nop():
    engine, transport = _engine(bytes([ACK]))
    engine.nop()
    assert transport.written == b"\x00"
    assert transport.read_sizes == [1]


def test_state_returns_to_idle():
    """The engine is idle after success and after failure."""
    engine, transport = _engine(bytes([ACK]) + b"\x00" * 4)
    assert engine.state is EngineState.IDLE
    engine.read_chunk(0, 4)
    assert engine.state is EngineState.IDLE

    transport.feed(bytes([NAK]))
    with pytest.raises(NakError):
        engine.read_chunk(0, 4)
    assert engine.state is EngineState.IDLE

    with pytest.raises(DeviceTimeoutError):
        engine.read_chunk(0, 4)
    assert engine.state is EngineState.IDLE


def test_transport_is_exposed_read_only():
    engine, transport = _engine()
    assert engine.transport is transport
    with pytest.raises(AttributeError):
        engine.transport = MemoryTransport()
