"""Byte source adapters for Zeo streams.

Every adapter honours the same contract: ``read(n)`` returns exactly *n*
bytes or raises.  The decoder never retries a failed read.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Protocol

logger = logging.getLogger(__name__)

DEFAULT_DEVICE = "/dev/zeo"
DEFAULT_BAUDRATE = 38400


class ByteSource(Protocol):
    """Anything that can hand out an exact number of bytes."""

    def read(self, n: int) -> bytes: ...
    def close(self) -> None: ...


class SerialTransport:
    """UART / serial port transport (requires pyserial).

    With ``timeout=None`` reads block until *n* bytes arrive.  With a
    numeric timeout a read that comes back short raises TimeoutError.
    """

    def __init__(self, port: str = DEFAULT_DEVICE,
                 baudrate: int = DEFAULT_BAUDRATE,
                 timeout: float | None = None):
        import serial
        logger.info("opening %s at %d baud", port, baudrate)
        self._ser = serial.Serial(port, baudrate, timeout=timeout)

    def read(self, n: int) -> bytes:
        data = self._ser.read(n)
        if len(data) != n:
            raise TimeoutError(
                f"serial read timed out after {len(data)} of {n} bytes"
            )
        return data

    def close(self) -> None:
        self._ser.close()

    def __repr__(self) -> str:
        return f"SerialTransport({self._ser.port!r})"


class StreamTransport:
    """Wrap an already-open binary file-like object (BytesIO, pipe, socket file)."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream

    def read(self, n: int) -> bytes:
        data = self._stream.read(n) or b""
        if len(data) != n:
            raise EOFError(
                f"stream ended after {len(data)} of {n} bytes"
            )
        return data

    def close(self) -> None:
        self._stream.close()

    def __repr__(self) -> str:
        return f"StreamTransport({self._stream!r})"


class FileTransport(StreamTransport):
    """Read from a raw binary capture file (for replay)."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(open(path, "rb"))

    def __enter__(self) -> FileTransport:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"FileTransport({self.path!r})"
