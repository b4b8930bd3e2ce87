"""Serial connection to the URP programmer.

The programmer enumerates as a USB-serial adapter running the firmware's
UART at 38400 8N1. Reads block for at most the configured timeout.
"""

from __future__ import annotations

import logging

import serial

from ..config import SerialSettings
from ..errors import TransportUnavailableError
from .base import require_exact

logger = logging.getLogger(__name__)


class SerialConnection:
    """Manages the serial link to the programmer.

    Usage::

        conn = SerialConnection(SerialSettings(port="/dev/ttyUSB0"))
        conn.open()
        conn.write(frame_bytes)
        response = conn.read_exact(17)
        conn.close()
    """

    def __init__(self, settings: SerialSettings | None = None) -> None:
        self._settings = settings or SerialSettings()
        self._port: serial.Serial | None = None

    @property
    def connected(self) -> bool:
        return self._port is not None and self._port.is_open

    @property
    def settings(self) -> SerialSettings:
        return self._settings

    @property
    def timeout(self) -> float:
        return self._settings.timeout

    def open(self) -> None:
        """Open the serial port.

        Raises:
            TransportUnavailableError: If the port cannot be opened.
        """
        if self.connected:
            return
        try:
            self._port = serial.Serial(
                self._settings.port,
                self._settings.baudrate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=self._settings.timeout,
            )
        except (serial.SerialException, ValueError) as e:
            raise TransportUnavailableError(
                f"Could not open serial port {self._settings.port} "
                f"at {self._settings.baudrate} baud: {e}"
            ) from e

        logger.info(
            "Opened %s at %d baud", self._settings.port, self._settings.baudrate
        )

    def close(self) -> None:
        """Close the serial port."""
        if self._port is None:
            return

        try:
            self._port.close()
        except serial.SerialException as e:
            logger.warning("Error closing port: %s", e)
        finally:
            self._port = None
            logger.info("Closed %s", self._settings.port)

    def __enter__(self) -> SerialConnection:
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _require_port(self) -> serial.Serial:
        if self._port is None or not self._port.is_open:
            raise TransportUnavailableError("Serial port is not open")
        return self._port

    def write(self, data: bytes) -> int:
        """Write raw bytes to the programmer.

        Raises:
            TransportUnavailableError: If the port is closed or the write fails.
        """
        port = self._require_port()
        try:
            written = port.write(data)
            port.flush()
        except serial.SerialException as e:
            raise TransportUnavailableError(f"Serial write failed: {e}") from e
        return written

    def read_exact(self, size: int) -> bytes:
        """Read exactly ``size`` bytes within the port timeout.

        Raises:
            DeviceTimeoutError: If nothing arrived before the timeout.
            TruncatedError: If only part of the data arrived.
            TransportUnavailableError: If the port is closed or the read fails.
        """
        port = self._require_port()
        if size == 0:
            return b""
        try:
            data = port.read(size)
        except serial.SerialException as e:
            raise TransportUnavailableError(f"Serial read failed: {e}") from e
        return require_exact(size, bytes(data))
