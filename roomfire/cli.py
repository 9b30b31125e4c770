"""Headless runner: play one session and print what happened.

Run:
    python -m roomfire [OPTIONS]

Options:
    --config     JSON config file (default: built-in 20x12 room)
    --seed       RNG seed (overrides the config)
    --seconds    Simulated seconds to run (default: 300)
    --hose       Seconds between water hits on the hottest fire (0 = no hose)
    --start      Initial fire position, e.g. --start 10 6 (default: room centre)
    --json       Print the final snapshot as JSON instead of a summary
    --log-level  Logging level (default: WARNING)
"""
from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from typing import Sequence

from roomfire import signals
from roomfire.config import SessionConfig, load_config
from roomfire.room import RectRoom
from roomfire.session import FireSession
from roomfire.systems import System
from roomfire.types import ConfigError, FireState, RoomFireError, TickContext

DEFAULT_ROOM = RectRoom(0.0, 0.0, 20.0, 12.0)


def make_hose_system(interval_ticks: int) -> System:
    """Stand-in water actor: every interval, hit the most intense fire."""
    remaining = [interval_ticks]

    def hose_system(session: FireSession, ctx: TickContext) -> None:
        remaining[0] -= 1
        if remaining[0] > 0:
            return
        remaining[0] = interval_ticks
        burning = [f for f in session.fires() if f.state is not FireState.SPAWNING]
        if not burning:
            return
        target = max(burning, key=lambda f: f.intensity)
        session.extinguish_at(target.position)

    return hose_system


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roomfire", description="Run a headless room fire session")
    parser.add_argument("--config", help="JSON config file")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed")
    parser.add_argument("--seconds", type=float, default=300.0,
                        help="Simulated seconds to run (default: 300)")
    parser.add_argument("--hose", type=float, default=0.0,
                        help="Seconds between water hits (default: 0, no hose)")
    parser.add_argument("--start", type=float, nargs=2, metavar=("X", "Y"),
                        help="Initial fire position")
    parser.add_argument("--json", action="store_true",
                        help="Print the final snapshot as JSON")
    parser.add_argument("--log-level", default="WARNING",
                        help="Logging level (default: WARNING)")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config) if args.config else SessionConfig(room=DEFAULT_ROOM)
        if config.room is None:
            config = dataclasses.replace(config, room=DEFAULT_ROOM)
        if args.seed is not None:
            config = dataclasses.replace(config, seed=args.seed)
        session = FireSession(config)
    except (ConfigError, OSError) as exc:
        print(f"roomfire: {exc}", file=sys.stderr)
        return 2

    if args.start is not None:
        start = (args.start[0], args.start[1])
    else:
        (lo_x, lo_y), (hi_x, hi_y) = session.policy.room.bounds()
        start = ((lo_x + hi_x) / 2, (lo_y + hi_y) / 2)
    try:
        session.spawn_fire(start)
    except (RoomFireError, ValueError) as exc:
        print(f"roomfire: cannot start fire: {exc}", file=sys.stderr)
        return 2

    if args.hose > 0:
        session.add_system(make_hose_system(session.clock.ticks(args.hose)))

    peak = [session.active_fire_count()]

    def track_peak(signal_name: str, data: dict) -> None:
        peak[0] = max(peak[0], session.active_fire_count())

    session.subscribe(signals.FIRE_SPAWNED, track_peak)
    session.run_for(args.seconds)

    if args.json:
        print(json.dumps(session.snapshot(), indent=2))
        return 0

    chronicle = session.chronicle
    outcome = session.outcome.value if session.outcome is not None else "still burning"
    print(f"seed           {session.seed}")
    print(f"elapsed        {session.clock.elapsed:.1f}s ({session.clock.tick_number} ticks)")
    print(f"outcome        {outcome}")
    print(f"phase          {session.evacuation_phase().name}")
    print(f"temperature    {session.temperature():.1f}")
    print(f"fires spawned  {chronicle.count(signals.FIRE_SPAWNED)}")
    print(f"extinguished   {chronicle.count(signals.FIRE_EXTINGUISHED)}")
    print(f"peak fires     {peak[0]}")
    print(f"burning now    {session.active_fire_count()}")
    return 0
