"""Protocol layer: opcodes, frame building, and the ACK/NAK engine."""

from .commands import ACK, NAK, Command, Opcode
from .engine import EngineState, ProtocolEngine
from .framing import CHUNK_SIZE, build_frame
