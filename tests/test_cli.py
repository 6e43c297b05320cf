"""Test the zerbo command-line tool: capture replay and live serial mode.

Run from the repo root:
    python3 tests/test_cli.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "python"))

import contextlib
import io
import struct
import tempfile
from unittest import mock

from zerbo.cli import main
from zerbo.framing import build_frame

STAGE_REM = bytes([0x9D]) + struct.pack("<H", 2)
BAD_SIGNAL = bytes([0x9C]) + struct.pack("<H", 1)
NIGHT_START = bytes([0x00, 0x05]) + struct.pack("<H", 0)


def write_capture(path, payloads):
    with open(path, "wb") as f:
        f.write(b"\x00\x00")  # partial trailing bytes from a previous frame
        for i, payload in enumerate(payloads):
            f.write(build_frame(payload, time=i, subtime=250, sequence=i))


def test_dump_capture():
    """dump prints one line per packet and stops cleanly at end of file."""
    print("test_dump_capture...", end="")

    with tempfile.NamedTemporaryFile(suffix=".bin", delete=False) as f:
        tmppath = f.name

    try:
        write_capture(tmppath, [
            bytes([0x9D]) + struct.pack("<H", 3),
            bytes([0x8A]) + struct.pack("<I", 0),
            bytes([0x00, 0x15]) + struct.pack("<H", 0),
        ])

        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            main(["dump", tmppath])

        lines = out.getvalue().splitlines()
        assert lines == [
            "[  0   250] <SleepStage(0) Light>",
            "[  1   250] <ZeoTimeStamp(1) 1970-01-01T00:00:00>",
            "[  2   250] <NightEnd(2) 0>",
        ]
    finally:
        os.unlink(tmppath)

    print(" OK")


def test_no_command():
    print("test_no_command...", end="")

    out = io.StringIO()
    try:
        with contextlib.redirect_stdout(out):
            main([])
    except SystemExit as exc:
        assert exc.code == 1
    else:
        raise AssertionError("missing command accepted")
    assert "usage: zerbo" in out.getvalue()

    print(" OK")


def replay_then_interrupt(data):
    """Serial read() stand-in: serve *data*, then act like Ctrl-C."""
    buf = io.BytesIO(data)

    def read(n):
        chunk = buf.read(n)
        if not chunk:
            raise KeyboardInterrupt
        return chunk

    return read


def run_live(argv, data):
    """Run ``zerbo live`` over a patched serial port; return (stdout, port)."""
    out = io.StringIO()
    with mock.patch("serial.Serial") as serial_cls:
        serial_cls.return_value.read.side_effect = replay_then_interrupt(data)
        with contextlib.redirect_stdout(out):
            main(["live", "--serial", "/dev/ttyUSB0"] + argv)
    return out.getvalue().splitlines(), serial_cls


def mixed_stream():
    return b"".join(
        build_frame(payload, sequence=i)
        for i, payload in enumerate([NIGHT_START, STAGE_REM, BAD_SIGNAL, STAGE_REM])
    )


def test_live_ctrl_c_closes_port():
    """Ctrl-C ends live mode without an error and closes the port."""
    print("test_live_ctrl_c_closes_port...", end="")

    lines, serial_cls = run_live([], b"")
    assert lines == []
    serial_cls.assert_called_once_with("/dev/ttyUSB0", 38400, timeout=None)
    serial_cls.return_value.close.assert_called_once_with()

    print(" OK")


def test_live_stages_only():
    print("test_live_stages_only...", end="")

    lines, serial_cls = run_live(["--stages"], mixed_stream())
    assert lines == [
        "[  0     0] <SleepStage(1) REM>",
        "[  0     0] <SleepStage(3) REM>",
    ]
    serial_cls.return_value.close.assert_called_once_with()

    print(" OK")


def test_live_events_only():
    print("test_live_events_only...", end="")

    lines, _ = run_live(["--events"], mixed_stream())
    assert lines == ["[  0     0] <NightStart(0) 0>"]

    print(" OK")


def test_live_timeout_reports_error():
    """A quiet port with --timeout exits with a one-line error."""
    print("test_live_timeout_reports_error...", end="")

    err = io.StringIO()
    with mock.patch("serial.Serial") as serial_cls:
        serial_cls.return_value.read.return_value = b""
        try:
            with contextlib.redirect_stderr(err):
                main(["live", "--serial", "/dev/ttyUSB0", "--timeout", "0.5"])
        except SystemExit as exc:
            assert exc.code == 1
        else:
            raise AssertionError("timeout did not stop live mode")
        serial_cls.assert_called_once_with("/dev/ttyUSB0", 38400, timeout=0.5)
        serial_cls.return_value.close.assert_called_once_with()

    assert err.getvalue().startswith("Error: serial read timed out")
    assert len(err.getvalue().splitlines()) == 1

    print(" OK")


if __name__ == "__main__":
    print("zerbo cli tests")
    print("===============\n")

    test_dump_capture()
    test_no_command()
    test_live_ctrl_c_closes_port()
    test_live_stages_only()
    test_live_events_only()
    test_live_timeout_reports_error()

    print("\nAll tests passed.")
