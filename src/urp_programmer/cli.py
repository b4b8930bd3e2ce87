"""Command-line interface for the URP EEPROM programmer."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import DEFAULT_BAUDRATE, DEFAULT_PORT, DEFAULT_TIMEOUT_S, SerialSettings
from .errors import FileIoError, ProgrammerError
from .protocol.engine import ProtocolEngine
from .transfer import ERASED_BYTE, LoggingProgress, read_bytes, verify_bytes, write_bytes
from .transport.base import Transport
from .transport.serial_connection import SerialConnection

logger = logging.getLogger(__name__)


def _parse_int(value: str) -> int:
    """Parse a decimal, 0x-hex, 0o-octal or 0b-binary integer argument."""
    try:
        number = int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer '{value}'")
    if number < 0:
        raise argparse.ArgumentTypeError(f"'{value}' must not be negative")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="urp-programmer",
        description="CLI for the URP EEPROM programmer",
    )
    parser.add_argument(
        "-p", "--port", default=DEFAULT_PORT,
        help=f"serial port device (default: {DEFAULT_PORT})",
    )
    parser.add_argument(
        "-b", "--baudrate", type=_parse_int, default=DEFAULT_BAUDRATE,
        help=f"serial port baud rate (default: {DEFAULT_BAUDRATE})",
    )
    parser.add_argument(
        "-t", "--timeout", type=float, default=DEFAULT_TIMEOUT_S,
        help=f"read timeout in seconds (default: {DEFAULT_TIMEOUT_S:g})",
    )
    parser.add_argument("-s", "--size", type=_parse_int, help="size in bytes")
    parser.add_argument(
        "-a", "--addr", type=_parse_int, default=0,
        help="starting address (default: 0)",
    )
    parser.add_argument("-r", "--read", metavar="FILE", help="read EEPROM to file")
    parser.add_argument("-w", "--write", metavar="FILE", help="write file to EEPROM")
    parser.add_argument(
        "-e", "--erase", action="store_true",
        help="erase EEPROM (write 0xFF) and blank check; runs first",
    )
    parser.add_argument(
        "--verify", action="store_true",
        help="read back and compare after --write",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="log protocol traffic and dump read data",
    )
    return parser


def hexdump(data: bytes, base: int = 0) -> list[str]:
    """Format ``data`` as 16-byte rows prefixed with their address."""
    lines = []
    for offset in range(0, len(data), 16):
        row = data[offset : offset + 16]
        lines.append(f"{base + offset:06X} {row.hex(' ').upper()}")
    return lines


def _open_transport(settings: SerialSettings) -> Transport:
    conn = SerialConnection(settings)
    conn.open()
    return conn


def _load(path: str, size: int) -> bytes:
    """Read the first ``size`` bytes of a dump file."""
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise FileIoError(f"cannot open input file {path}: {e}") from e
    if len(data) < size:
        raise FileIoError(
            f"input file {path} holds {len(data)} byte(s), {size} requested"
        )
    return data[:size]


def _save(path: str, data: bytes) -> None:
    try:
        Path(path).write_bytes(data)
    except OSError as e:
        raise FileIoError(f"cannot write output file {path}: {e}") from e


def run(args: argparse.Namespace) -> None:
    """Carry out the operations requested on the command line.

    Raises:
        ProgrammerError: On any transport, protocol or file failure.
    """
    image = None
    if args.write:
        image = _load(args.write, args.size)

    settings = SerialSettings(
        port=args.port, baudrate=args.baudrate, timeout=args.timeout
    )
    transport = _open_transport(settings)
    try:
        engine = ProtocolEngine(transport)
        name = engine.query_name()
        logger.info("Connected to: %s", name.rstrip("\x00"))

        if args.erase:
            logger.info("Erasing %d byte(s) at 0x%06X", args.size, args.addr)
            blank = bytes([ERASED_BYTE]) * args.size
            progress = LoggingProgress("erase")
            write_bytes(engine, args.addr, blank, progress)
            progress.finish()
            progress = LoggingProgress("blank check")
            verify_bytes(engine, args.addr, blank, progress)
            progress.finish()

        if args.read:
            logger.info("Reading %d byte(s) into %s", args.size, args.read)
            progress = LoggingProgress("read")
            data = read_bytes(engine, args.addr, args.size, progress)
            progress.finish()
            for line in hexdump(data, args.addr):
                logger.debug(line)
            _save(args.read, data)

        if image is not None:
            logger.info("Writing %d byte(s) from %s", args.size, args.write)
            progress = LoggingProgress("write")
            write_bytes(engine, args.addr, image, progress)
            progress.finish()
            if args.verify:
                progress = LoggingProgress("verify")
                verify_bytes(engine, args.addr, image, progress)
                progress.finish()
    finally:
        transport.close()


def main(argv: list[str] | None = None) -> int:
    """Entry point for the programmer CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if (args.read or args.write or args.erase) and args.size is None:
        parser.error("--size is required with --read, --write and --erase")
    if args.verify and not args.write:
        parser.error("--verify requires --write")
    if args.timeout <= 0:
        parser.error("--timeout must be positive")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        run(args)
    except (ProgrammerError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
