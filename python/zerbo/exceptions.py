"""Exception types raised while decoding a Zeo byte stream.

Transport failures (short reads, serial errors) are not wrapped here; they
propagate from the byte source unchanged.
"""

from __future__ import annotations


class ZerboError(Exception):
    """Base class for decoder errors."""


class ProtocolError(ZerboError):
    """A frame violated the wire format."""


class InvalidLength(ProtocolError):
    """Length and inverse length fields disagree, or payload is too short."""


class InvalidChecksum(ProtocolError):
    """Payload byte sum does not match the header checksum."""


class UnsupportedVersion(ProtocolError):
    """Frame version byte is not the one this decoder understands."""

    def __init__(self, version: int):
        super().__init__(f"Unsupported version {version:#04x}")
        self.version = version


class UnknownTypeError(ZerboError):
    """Payload type id has no registered packet kind."""

    def __init__(self, type_id: int):
        super().__init__(f"Unknown packet type {type_id:#04x}")
        self.type_id = type_id
