"""Serial link defaults."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_PORT = "/dev/ttyUSB0"
DEFAULT_BAUDRATE = 38400  # firmware UART rate
DEFAULT_TIMEOUT_S = 5.0


@dataclass
class SerialSettings:
    """How to open the serial link to the programmer."""

    port: str = DEFAULT_PORT
    baudrate: int = DEFAULT_BAUDRATE
    timeout: float = DEFAULT_TIMEOUT_S

    def __post_init__(self) -> None:
        if self.baudrate <= 0:
            raise ValueError(f"Baud rate must be positive, got {self.baudrate}")
        if self.timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {self.timeout}")
