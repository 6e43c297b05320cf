"""Typed packet values and the type-id registry that builds them."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from functools import cached_property
from types import MappingProxyType
from typing import Any, ClassVar, Iterable, Iterator

import numpy as np

from .exceptions import InvalidLength, UnknownTypeError
from .filters import fir_filter
from .framing import RawFrame, SYNC_BYTE


class PacketType(IntEnum):
    EVENT = 0x00
    SLICE_END = 0x02
    VERSION = 0x03
    NIGHT_START = 0x05
    SLEEP_ONSET = 0x07
    HEADBAND_DOCKED = 0x0E
    HEADBAND_UNDOCKED = 0x0F
    ALARM_OFF = 0x10
    ALARM_SNOOZE = 0x11
    ALARM_PLAY = 0x13
    NIGHT_END = 0x15
    NEW_HEADBAND = 0x24
    WAVEFORM = 0x80
    FREQUENCY_BINS = 0x83
    SQI = 0x84
    ZEO_TIMESTAMP = 0x8A
    IMPEDENCE = 0x97
    BAD_SIGNAL = 0x9C
    SLEEP_STAGE = 0x9D


# Leading payload byte that defers the type id to the following byte.
TYPE_ESCAPE = 0x00

WAVEFORM_SAMPLES = 128
WAVEFORM_TRIM = 90
FREQUENCY_BIN_COUNT = 7

SLEEP_STAGE_LABELS = ("Undefined", "Awake", "REM", "Light", "Deep")


# ---------------------------------------------------------------------------
# Packet kinds
# ---------------------------------------------------------------------------

@dataclass(frozen=True, repr=False)
class Packet:
    """A decoded frame.  ``payload`` excludes the leading type id byte(s)."""

    TYPE: ClassVar[PacketType]

    owner: Any = field(compare=False)
    time: int
    subtime: int
    sequence: int
    payload: bytes

    @property
    def type_id(self) -> int:
        return int(self.TYPE)

    def guess_length(self) -> int | None:
        """Offset of the first sync byte inside the payload, if any."""
        idx = self.payload.find(SYNC_BYTE)
        return None if idx < 0 else idx

    def _describe(self) -> str:
        return self.payload.hex(" ")

    def __repr__(self) -> str:
        return f"<{type(self).__name__}({self.sequence}) {self._describe()}>"


class NumericPacket(Packet):
    """Packet whose payload is a single little-endian unsigned integer."""

    def to_int(self) -> int:
        if len(self.payload) == 2:
            return struct.unpack("<H", self.payload)[0]
        if len(self.payload) == 4:
            return struct.unpack("<I", self.payload)[0]
        raise NotImplementedError(
            f"no integer decoding for {len(self.payload)}-byte payload"
        )

    def _describe(self) -> str:
        try:
            return str(self.to_int())
        except NotImplementedError:
            return super()._describe()


class SliceEnd(NumericPacket):
    TYPE = PacketType.SLICE_END


class Version(NumericPacket):
    TYPE = PacketType.VERSION


class SQI(NumericPacket):
    TYPE = PacketType.SQI


class Impedence(NumericPacket):
    TYPE = PacketType.IMPEDENCE


class Waveform(Packet):
    TYPE = PacketType.WAVEFORM

    def raw(self) -> np.ndarray:
        """The 128 signed 16-bit samples as sent by the headband."""
        return np.frombuffer(self.payload, dtype="<i2",
                             count=WAVEFORM_SAMPLES).astype(np.int64)

    @cached_property
    def _filtered(self) -> np.ndarray:
        return fir_filter(self.raw())

    def filtered(self) -> np.ndarray:
        """FIR-filtered signal (178 samples), computed once per packet."""
        return self._filtered

    def samples(self) -> np.ndarray:
        """Filtered signal with the leading edge transient dropped."""
        return self.filtered()[WAVEFORM_TRIM:WAVEFORM_TRIM + WAVEFORM_SAMPLES]

    def _describe(self) -> str:
        return ", ".join(str(v) for v in self.raw())


class FrequencyBins(Packet):
    TYPE = PacketType.FREQUENCY_BINS

    def bins(self) -> tuple[int, ...]:
        return struct.unpack_from(f"<{FREQUENCY_BIN_COUNT}H", self.payload)

    def _describe(self) -> str:
        return ", ".join(str(v) for v in self.bins())


class ZeoTimeStamp(NumericPacket):
    TYPE = PacketType.ZEO_TIMESTAMP

    def to_timestamp(self) -> datetime:
        return datetime.fromtimestamp(self.to_int(), tz=timezone.utc)

    def __str__(self) -> str:
        return self.to_timestamp().strftime("%Y-%m-%dT%H:%M:%S")

    def _describe(self) -> str:
        return str(self)


class BadSignal(NumericPacket):
    TYPE = PacketType.BAD_SIGNAL

    def to_bool(self) -> bool:
        return self.to_int() != 0

    def _describe(self) -> str:
        return str(self.to_bool())


class SleepStage(NumericPacket):
    TYPE = PacketType.SLEEP_STAGE

    @property
    def label(self) -> str | None:
        """Stage name, or None for a value outside the known range."""
        index = self.to_int()
        if index < len(SLEEP_STAGE_LABELS):
            return SLEEP_STAGE_LABELS[index]
        return None

    @property
    def is_awake(self) -> bool:
        return self.label == "Awake"

    @property
    def is_rem(self) -> bool:
        return self.label == "REM"

    @property
    def is_light(self) -> bool:
        return self.label == "Light"

    @property
    def is_deep(self) -> bool:
        return self.label == "Deep"

    @property
    def is_asleep(self) -> bool:
        return self.is_rem or self.is_light or self.is_deep

    def __str__(self) -> str:
        return str(self.label)

    def _describe(self) -> str:
        return str(self)


class Event(NumericPacket):
    """Base for base-station event markers."""

    TYPE = PacketType.EVENT


class NightStart(Event):
    TYPE = PacketType.NIGHT_START


class SleepOnset(Event):
    TYPE = PacketType.SLEEP_ONSET


class HeadbandDocked(Event):
    TYPE = PacketType.HEADBAND_DOCKED


class HeadbandUnDocked(Event):
    TYPE = PacketType.HEADBAND_UNDOCKED


class AlarmOff(Event):
    TYPE = PacketType.ALARM_OFF


class AlarmSnooze(Event):
    TYPE = PacketType.ALARM_SNOOZE


class AlarmPlay(Event):
    TYPE = PacketType.ALARM_PLAY


class NightEnd(Event):
    TYPE = PacketType.NIGHT_END


class NewHeadband(Event):
    TYPE = PacketType.NEW_HEADBAND


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

def split_type_id(payload: bytes) -> tuple[int, bytes]:
    """Return (type_id, remaining payload), resolving the 0x00 escape."""
    if not payload:
        raise InvalidLength("empty payload has no type id")
    type_id, rest = payload[0], payload[1:]
    if type_id == TYPE_ESCAPE:
        if not rest:
            raise InvalidLength("escaped type id is missing")
        type_id, rest = rest[0], rest[1:]
    return type_id, rest


class TypeRegistry:
    """Immutable mapping from type id to packet kind."""

    def __init__(self, kinds: Iterable[type[Packet]]):
        table: dict[int, type[Packet]] = {}
        for kind in kinds:
            type_id = int(kind.TYPE)
            if type_id in table:
                raise ValueError(
                    f"type id {type_id:#04x} registered twice "
                    f"({table[type_id].__name__}, {kind.__name__})"
                )
            table[type_id] = kind
        self._kinds = MappingProxyType(table)

    def lookup(self, type_id: int) -> type[Packet]:
        kind = self._kinds.get(type_id)
        if kind is None:
            raise UnknownTypeError(type_id)
        return kind

    def instantiate(self, owner: Any, frame: RawFrame) -> Packet:
        type_id, rest = split_type_id(frame.payload)
        kind = self.lookup(type_id)
        return kind(owner, frame.time, frame.subtime, frame.sequence, rest)

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._kinds

    def __iter__(self) -> Iterator[type[Packet]]:
        return iter(self._kinds.values())

    def __len__(self) -> int:
        return len(self._kinds)


PACKET_KINDS: tuple[type[Packet], ...] = (
    SliceEnd, Version, Waveform, FrequencyBins, SQI, ZeoTimeStamp,
    Impedence, BadSignal, SleepStage,
    Event, NightStart, SleepOnset, HeadbandDocked, HeadbandUnDocked,
    AlarmOff, AlarmSnooze, AlarmPlay, NightEnd, NewHeadband,
)

DEFAULT_REGISTRY = TypeRegistry(PACKET_KINDS)
