"""Protocol engine: sends command frames and validates ACK-framed replies.

The engine owns its transport exclusively and keeps exactly one command in
flight. A command moves through ``IDLE -> FRAME_SENT -> AWAITING_ACK ->
AWAITING_PAYLOAD -> IDLE``; any failure drops straight back to ``IDLE``
and the error propagates to the caller without a retry.
"""

from __future__ import annotations

import logging
from enum import Enum

from ..errors import NakError
from ..transport.base import Transport
from .commands import ACK, Command, Execute, Nop, QueryName, ReadChunk, WriteChunkHeader
from .framing import NAME_SIZE, check_chunk, check_span, decode_name

logger = logging.getLogger(__name__)


class EngineState(Enum):
    IDLE = "idle"
    FRAME_SENT = "frame_sent"
    AWAITING_ACK = "awaiting_ack"
    AWAITING_PAYLOAD = "awaiting_payload"


class ProtocolEngine:
    """Turns programmer operations into wire frames.

    Usage::

        engine = ProtocolEngine(SerialConnection(settings))
        name = engine.query_name()
        data = engine.read_chunk(0x1000, 64)
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport
        self.state = EngineState.IDLE

    @property
    def transport(self) -> Transport:
        return self._transport

    def send(self, command: Command) -> None:
        """Write a command frame to the transport."""
        frame = command.to_bytes()
        logger.debug("-> %s", frame.hex(" "))
        self._transport.write(frame)
        self.state = EngineState.FRAME_SENT

    def recv_with_ack(self, expected_length: int) -> bytes:
        """Read the ack byte, then exactly ``expected_length`` payload bytes.

        Raises:
            NakError: If the ack byte is not ACK. The payload is left unread.
            DeviceTimeoutError: If nothing arrived before the deadline.
            TruncatedError: If the payload arrived incomplete.
        """
        try:
            self.state = EngineState.AWAITING_ACK
            ack = self._transport.read_exact(1)[0]
            if ack != ACK:
                logger.debug("<- NAK (0x%02X)", ack)
                raise NakError(ack)

            if not expected_length:
                return b""

            self.state = EngineState.AWAITING_PAYLOAD
            payload = self._transport.read_exact(expected_length)
            logger.debug("<- ACK + %d byte(s)", len(payload))
            return payload
        finally:
            self.state = EngineState.IDLE

    def _transact(self, command: Command) -> bytes:
        try:
            self.send(command)
        except Exception:
            self.state = EngineState.IDLE
            raise
        return self.recv_with_ack(command.response_length)

    def nop(self) -> None:
        """Send a no-op and wait for the bare ACK."""
        self._transact(Nop())

    def query_name(self) -> str:
        """Ask the programmer for its 16-character identity string."""
        raw = self._transact(QueryName())
        return decode_name(raw[:NAME_SIZE])

    def read_chunk(self, address: int, length: int) -> bytes:
        """Read up to one chunk of EEPROM.

        Raises:
            ValueError: If ``length`` exceeds the chunk size or the span
                leaves the 24-bit address space.
        """
        check_chunk(length)
        check_span(address, length)
        return self._transact(ReadChunk(address=address, length=length))

    def write_chunk(self, address: int, data: bytes) -> None:
        """Stage up to one chunk of data and commit it to EEPROM.

        The device sends nothing back for the write/execute pair.

        Raises:
            ValueError: If ``data`` exceeds the chunk size or the span
                leaves the 24-bit address space.
        """
        check_chunk(len(data))
        check_span(address, len(data))
        header = WriteChunkHeader(length=len(data), address=address)
        try:
            self.send(header)
            logger.debug("-> %d data byte(s)", len(data))
            self._transport.write(bytes(data))
            self.send(Execute())
        finally:
            self.state = EngineState.IDLE
