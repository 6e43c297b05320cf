"""zerbo command-line tool."""

from __future__ import annotations

import argparse
import logging
import sys

from .decoder import Decoder, connect
from .packets import Event, Packet, SleepStage
from .transport import DEFAULT_BAUDRATE, DEFAULT_DEVICE, FileTransport


def _format_packet(packet: Packet) -> str:
    return f"[{packet.time:3d} {packet.subtime:5d}] {packet!r}"


def _print_packet(packet: Packet) -> None:
    print(_format_packet(packet), flush=True)


def cmd_live(args: argparse.Namespace) -> None:
    """Live decode from a serial port."""
    decoder = connect(args.serial, baudrate=args.baud, timeout=args.timeout)

    if args.events:
        decoder.register(Event, _print_packet)
    elif args.stages:
        decoder.register(SleepStage, _print_packet)
    else:
        decoder.on_packet(_print_packet)

    try:
        decoder.run()
    except KeyboardInterrupt:
        pass
    except TimeoutError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        decoder.close()


def cmd_dump(args: argparse.Namespace) -> None:
    """Decode a raw byte capture and print every packet."""
    with FileTransport(args.file) as transport:
        decoder = Decoder(transport).on_packet(_print_packet)
        try:
            decoder.run()
        except EOFError:
            pass


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="zerbo",
                                     description="Zeo serial stream decoder")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    # live
    p_live = sub.add_parser("live", help="Live decode from a serial port")
    p_live.add_argument("--serial", default=DEFAULT_DEVICE,
                        help=f"Serial port (default {DEFAULT_DEVICE})")
    p_live.add_argument("--baud", type=int, default=DEFAULT_BAUDRATE,
                        help="Baud rate")
    p_live.add_argument("--timeout", type=float, default=None,
                        help="Read timeout in seconds (default: block)")
    only = p_live.add_mutually_exclusive_group()
    only.add_argument("--events", action="store_true",
                      help="Only print event packets")
    only.add_argument("--stages", action="store_true",
                      help="Only print sleep stage packets")

    # dump
    p_dump = sub.add_parser("dump", help="Decode a raw capture file")
    p_dump.add_argument("file", help="Path to raw byte capture")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "live":
        cmd_live(args)
    elif args.command == "dump":
        cmd_dump(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
