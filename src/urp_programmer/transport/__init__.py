"""Transports: the serial link and an in-memory test double."""

from .base import Transport
from .memory import MemoryTransport
from .serial_connection import SerialConnection
