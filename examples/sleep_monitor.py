#!/usr/bin/env python3
"""Print sleep stages and base-station events from a Zeo on a serial port.

Plug in the Zeo serial cable, then:
    python examples/sleep_monitor.py /dev/ttyUSB0
"""

import sys

import zerbo


def show_stage(stage):
    state = "asleep" if stage.is_asleep else "not asleep"
    print(f"#{stage.sequence:3d} stage={stage.label} ({state})")


def show_event(event):
    print(f"#{event.sequence:3d} event={type(event).__name__}")


device = sys.argv[1] if len(sys.argv) > 1 else "/dev/zeo"
decoder = zerbo.connect(device).on_sleep_stage(show_stage).on_event(show_event)

try:
    decoder.run()
except KeyboardInterrupt:
    pass
finally:
    decoder.close()
