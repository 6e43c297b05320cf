"""zerbo - Zeo sleep monitor serial stream decoder."""

from .exceptions import (
    ZerboError, ProtocolError, InvalidLength, InvalidChecksum,
    UnsupportedVersion, UnknownTypeError,
)
from .framing import RawFrame, read_frame, build_frame
from .filters import FIR_KERNEL, fir_filter
from .packets import (
    PacketType, Packet, NumericPacket, TypeRegistry, DEFAULT_REGISTRY,
    SliceEnd, Version, Waveform, FrequencyBins, SQI, ZeoTimeStamp,
    Impedence, BadSignal, SleepStage, Event, NightStart, SleepOnset,
    HeadbandDocked, HeadbandUnDocked, AlarmOff, AlarmSnooze, AlarmPlay,
    NightEnd, NewHeadband,
)
from .decoder import Decoder, connect
from .transport import SerialTransport, StreamTransport, FileTransport

__all__ = [
    "ZerboError", "ProtocolError", "InvalidLength", "InvalidChecksum",
    "UnsupportedVersion", "UnknownTypeError",
    "RawFrame", "read_frame", "build_frame",
    "FIR_KERNEL", "fir_filter",
    "PacketType", "Packet", "NumericPacket", "TypeRegistry", "DEFAULT_REGISTRY",
    "SliceEnd", "Version", "Waveform", "FrequencyBins", "SQI", "ZeoTimeStamp",
    "Impedence", "BadSignal", "SleepStage", "Event", "NightStart", "SleepOnset",
    "HeadbandDocked", "HeadbandUnDocked", "AlarmOff", "AlarmSnooze",
    "AlarmPlay", "NightEnd", "NewHeadband",
    "Decoder", "connect",
    "SerialTransport", "StreamTransport", "FileTransport",
]
