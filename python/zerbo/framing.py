"""Frame synchronisation and validation for the Zeo serial protocol.

Wire format (little-endian):
  [sync 'A'][version][checksum][length: u16][~length: u16]
  [time][subtime: u16][sequence][payload × length]

The checksum is the byte sum of the payload modulo 256.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass

from .exceptions import InvalidChecksum, InvalidLength, UnsupportedVersion
from .transport import ByteSource

logger = logging.getLogger(__name__)

# Wire format constants
SYNC_BYTE = b"A"
SUPPORTED_VERSION = ord("4")

LENGTH_FMT = "<BHH"
LENGTH_SIZE = struct.calcsize(LENGTH_FMT)  # 5

TIMING_FMT = "<BHB"
TIMING_SIZE = struct.calcsize(TIMING_FMT)  # 4


@dataclass(frozen=True)
class RawFrame:
    version: int
    checksum: int
    length: int
    time: int
    subtime: int
    sequence: int
    payload: bytes


def payload_checksum(payload: bytes) -> int:
    return sum(payload) % 256


def read_frame(source: ByteSource) -> RawFrame:
    """Block until the next complete, validated frame has been read.

    Bytes ahead of the sync marker are discarded.  Validation failures raise
    a ProtocolError; the stream is left positioned after the bad frame and
    no attempt is made to resynchronise.
    """
    skipped = 0
    while source.read(1) != SYNC_BYTE:
        skipped += 1
    if skipped:
        logger.debug("discarded %d bytes before sync marker", skipped)

    version = source.read(1)[0]
    if version != SUPPORTED_VERSION:
        raise UnsupportedVersion(version)

    checksum, length, inverse = struct.unpack(LENGTH_FMT, source.read(LENGTH_SIZE))
    if length ^ inverse != 0xFFFF:
        raise InvalidLength(
            f"Invalid length {length:#06x} (inverse {inverse:#06x})"
        )

    time, subtime, sequence = struct.unpack(TIMING_FMT, source.read(TIMING_SIZE))
    payload = source.read(length)

    if payload_checksum(payload) != checksum:
        raise InvalidChecksum(
            f"Invalid checksum: header {checksum:#04x}, "
            f"payload sums to {payload_checksum(payload):#04x}"
        )

    return RawFrame(version, checksum, length, time, subtime, sequence, payload)


def build_frame(payload: bytes, *, time: int = 0, subtime: int = 0,
                sequence: int = 0, version: int = SUPPORTED_VERSION) -> bytes:
    """Encode *payload* as a complete frame, sync byte included."""
    length = len(payload)
    header = SYNC_BYTE + bytes([version])
    header += struct.pack(LENGTH_FMT, payload_checksum(payload),
                          length, length ^ 0xFFFF)
    header += struct.pack(TIMING_FMT, time, subtime, sequence)
    return header + bytes(payload)
