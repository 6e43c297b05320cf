"""Stream decoder and callback dispatcher for a single Zeo byte stream."""

from __future__ import annotations

import io
import logging
from typing import Any, Callable, Iterator, Union

from .framing import read_frame
from .packets import DEFAULT_REGISTRY, Event, Packet, SleepStage, TypeRegistry
from .transport import (
    DEFAULT_BAUDRATE, DEFAULT_DEVICE, ByteSource, SerialTransport,
    StreamTransport,
)

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]
PacketFilter = Union[type, Callable[[Packet], bool]]


def _matches(packet_filter: PacketFilter, packet: Packet) -> bool:
    if isinstance(packet_filter, type):
        return isinstance(packet, packet_filter)
    return bool(packet_filter(packet))


class Decoder:
    """Pulls frames from one byte source and hands packets to handlers.

    Handlers run synchronously on the caller's thread, in the order they
    were registered.  Any exception raised while reading, decoding or
    inside a handler propagates out of ``run()``.
    """

    def __init__(self, source: ByteSource,
                 registry: TypeRegistry = DEFAULT_REGISTRY):
        self.source = source
        self.registry = registry
        self._callbacks: list[tuple[PacketFilter, Handler]] = []

    def register(self, packet_filter: PacketFilter, handler: Handler) -> Decoder:
        """Call *handler* for packets matching *packet_filter*.

        The filter is either a packet class (matched with isinstance) or a
        predicate taking the packet.
        """
        self._callbacks.append((packet_filter, handler))
        return self

    def on_packet(self, handler: Handler) -> Decoder:
        return self.register(Packet, handler)

    def on_event(self, handler: Handler) -> Decoder:
        return self.register(Event, handler)

    def on_sleep_stage(self, handler: Handler) -> Decoder:
        return self.register(SleepStage, handler)

    def next_packet(self) -> Packet:
        """Block until the next frame arrives and return it decoded."""
        frame = read_frame(self.source)
        packet = self.registry.instantiate(self, frame)
        logger.debug("decoded %r", packet)
        return packet

    def __iter__(self) -> Iterator[Packet]:
        while True:
            yield self.next_packet()

    def dispatch(self, packet: Packet) -> None:
        for packet_filter, handler in self._callbacks:
            if _matches(packet_filter, packet):
                handler(packet)

    def run(self) -> None:
        """Decode and dispatch until an error propagates."""
        for packet in self:
            self.dispatch(packet)

    def close(self) -> None:
        self.source.close()

    def __repr__(self) -> str:
        return f"<Decoder {self.source!r}>"


def connect(device: Any = DEFAULT_DEVICE, *,
            baudrate: int = DEFAULT_BAUDRATE,
            timeout: float | None = None,
            registry: TypeRegistry = DEFAULT_REGISTRY) -> Decoder:
    """Open *device* and return a Decoder bound to it.

    *device* may be a serial port path, a binary file object (any
    io.IOBase, wrapped in a StreamTransport), or a ByteSource, which is
    used as is.
    """
    if isinstance(device, io.IOBase):
        source = StreamTransport(device)
    elif hasattr(device, "read"):
        source = device
    else:
        source = SerialTransport(device, baudrate=baudrate, timeout=timeout)
    return Decoder(source, registry)
