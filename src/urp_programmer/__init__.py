"""Host-side driver for the URP serial EEPROM programmer."""

from .errors import (
    DeviceTimeoutError,
    FileIoError,
    NakError,
    ProgrammerError,
    TransportUnavailableError,
    TruncatedError,
    VerifyError,
)
from .protocol.engine import ProtocolEngine
from .transfer import LoggingProgress, ProgressSink, read_bytes, write_bytes

__version__ = "0.1.0"
