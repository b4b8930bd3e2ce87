"""Exception types raised by the programmer driver.

Every error the driver raises derives from :class:`ProgrammerError`, so
callers that only care about "the operation failed" can catch one type.
"""

from __future__ import annotations


class ProgrammerError(Exception):
    """Base class for all programmer driver errors."""


class TransportUnavailableError(ProgrammerError, ConnectionError):
    """The serial transport could not be opened or is not open."""


class NakError(ProgrammerError):
    """The device answered a command with something other than ACK."""

    def __init__(self, ack: int) -> None:
        self.ack = ack
        super().__init__(f"Device rejected command (ack byte 0x{ack:02X})")


class DeviceTimeoutError(ProgrammerError, TimeoutError):
    """No byte arrived from the device before the read deadline."""

    def __init__(self, expected: int, received: int = 0) -> None:
        self.expected = expected
        self.received = received
        super().__init__(
            f"Timed out waiting for {expected} byte(s) from device"
        )


class TruncatedError(ProgrammerError):
    """The device sent fewer bytes than the protocol promised."""

    def __init__(self, expected: int, received: int) -> None:
        self.expected = expected
        self.received = received
        super().__init__(
            f"Expected {expected} byte(s) from device, got {received}"
        )


class FileIoError(ProgrammerError):
    """A local dump file could not be opened, read or written."""


class VerifyError(ProgrammerError):
    """Data read back from the EEPROM differs from what was written."""

    def __init__(self, address: int) -> None:
        self.address = address
        super().__init__(f"Verification failed at address 0x{address:06X}")
