#!/usr/bin/env python3
"""Headless command line host for the CHIP-8 interpreter.

Usage::

    python -m chip8 <rom> [--quirks jmsr] [--speed 500] [--ticks 60]

Quirk letters: ``j`` jumping, ``m`` memory, ``s`` shifting, ``r`` VF reset.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from typing import List, Optional

from .config import Settings, cycles_for_speed
from .constants import DEFAULT_SPEED_HZ
from .debug import DisplayRenderer
from .emulator import Chip8Emulator
from .errors import Chip8Error
from .scheduler import TickScheduler

logger = logging.getLogger("chip8")

LOG_LEVEL_ENV = "CHIP8_LOG_LEVEL"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chip8", description="Run a CHIP-8 ROM without a window"
    )
    parser.add_argument("rom", help="Path to the ROM file")
    parser.add_argument(
        "--quirks", default="", help="Quirk letters: j=jumping m=memory s=shifting r=vf reset"
    )
    parser.add_argument(
        "--speed",
        type=int,
        default=None,
        help=f"Instructions per second (default {DEFAULT_SPEED_HZ})",
    )
    parser.add_argument(
        "--config", type=str, help="Load settings from a JSON file before applying flags"
    )
    parser.add_argument(
        "--ticks", type=int, default=60, help="Number of 60 Hz ticks to run"
    )
    parser.add_argument(
        "--realtime", action="store_true", help="Pace ticks at 60 Hz wall clock"
    )
    parser.add_argument(
        "--press",
        action="append",
        default=[],
        metavar="KEY",
        help="Hold a keypad key (0-F) for the whole run; may repeat",
    )
    parser.add_argument("--seed", type=int, help="Seed for the CXNN random source")
    parser.add_argument(
        "--dump", action="store_true", help="Print the display and registers on exit"
    )
    parser.add_argument("--png", type=str, help="Save the display as a PNG on exit")
    parser.add_argument("--scale", type=int, default=8, help="PNG pixel scale")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="More logging (-vv traces cycles)"
    )
    return parser


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"Invalid {LOG_LEVEL_ENV} level: {name!r}")
    logging.basicConfig(level=level, format="[%(name)s] %(levelname)s: %(message)s")


def _settings_from_args(args: argparse.Namespace) -> Settings:
    settings = Settings.load(args.config) if args.config else Settings()
    quirks = Settings.from_quirks(args.quirks)
    for attr in ("jumping", "memory", "shifting", "vf_reset"):
        if getattr(quirks, attr):
            setattr(settings, attr, True)
    if args.speed is not None:
        settings.cycles = cycles_for_speed(args.speed)
    return settings


def run(args: argparse.Namespace) -> Chip8Emulator:
    """Load the ROM and run ``args.ticks`` ticks. Errors propagate."""
    emu = Chip8Emulator(_settings_from_args(args), seed=args.seed)
    emu.load_rom_file(args.rom)
    for key in args.press:
        emu.press_key(key)

    if args.realtime:
        scheduler = TickScheduler()
        remaining = args.ticks
        while remaining > 0:
            now = time.monotonic()
            for _ in range(min(scheduler.due(now), remaining)):
                emu.tick()
                remaining -= 1
            time.sleep(scheduler.seconds_until_next(time.monotonic()))
    else:
        emu.run(args.ticks)

    logger.info("Ran %d ticks (%d cycles)", emu.tick_count, emu.cycle_count)
    return emu


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        _configure_logging(args.verbose)
        emu = run(args)
    except (Chip8Error, ValueError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    if args.dump:
        print(emu.dump_state())
    if args.png:
        DisplayRenderer(scale=args.scale).save_display(emu.display, args.png)
        logger.info("Saved display to %s", args.png)
    return 0


if __name__ == "__main__":
    sys.exit(main())
