# Copyright (C) 2025 Richard Owen
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""Headless entry point replaying a match log with the ambient layer running."""
import argparse
import random
import threading
import time
from typing import List, Optional

from gridpitch.engine.config import EngineConfig
from gridpitch.engine.replay_engine import ReplayEngine
from gridpitch.utils.debug import MatchDebugger
from gridpitch.utils.roster import default_teams, load_match_log, load_roster_from_json


def format_status(engine: ReplayEngine) -> str:
    """Summarise the latest frame on one line.

    Parameters
    ----------
    engine : ReplayEngine
        Running replay engine.

    Returns
    -------
    str
        Step, ball and overlay summary.
    """
    frame = engine.last_frame or engine.tick()
    ball = frame.ball
    owner = f"{frame.possession.team}{frame.possession.actor_id}" if frame.possession else "-"
    line = (
        f"[{frame.now:6.2f}s] step {frame.step + 1}/{len(engine.events)} | "
        f"ball ({ball.position.x:.2f}, {ball.position.y:.2f}) {ball.motion} | possession {owner}"
    )
    if frame.overlay_path is not None:
        source, destination, success = frame.overlay_path
        line += f" | ambient pass {source}->{destination} {'ok' if success else 'lost'}"
    return line


def print_replay_status(engine: ReplayEngine, interval: float = 1.0) -> None:
    """Print the replay status from a separate thread.

    Parameters
    ----------
    engine : ReplayEngine
        Running replay engine.
    interval : float
        Seconds between status lines.
    """
    while engine.is_running:
        print(format_status(engine))
        time.sleep(interval)


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns
    -------
    argparse.ArgumentParser
        Parser for the demo entry point.
    """
    parser = argparse.ArgumentParser(description="Replay a grid-soccer match log with ambient positioning")
    parser.add_argument("log", help="Path to the match log JSON")
    parser.add_argument("--roster", help="Optional roster JSON; defaults to the 2-2-2 layout")
    parser.add_argument("--step-interval", type=float, default=None, help="Seconds between log steps")
    parser.add_argument("--tick-interval", type=float, default=None, help="Seconds between ambient ticks")
    parser.add_argument("--freeze", action="store_true", help="Freeze all micro-movement")
    parser.add_argument("--pressing", action="store_true", help="Enable pressing mode")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the ambient random source")
    parser.add_argument("--debug-dir", default=None, help="Write a debug session log into this directory")
    return parser


def build_config(args: argparse.Namespace) -> EngineConfig:
    """Apply command-line overrides to a fresh configuration.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed arguments.

    Returns
    -------
    EngineConfig
        Configuration for this run.
    """
    config = EngineConfig()
    if args.step_interval is not None:
        config.replay.step_interval = args.step_interval
    if args.tick_interval is not None:
        config.replay.tick_interval = args.tick_interval
    config.positioning.freeze_micro_movement = args.freeze
    config.positioning.pressing_mode = args.pressing
    return config


def main(argv: Optional[List[str]] = None) -> None:
    """Replay a log from the command line until it ends or is interrupted.

    Parameters
    ----------
    argv : List[str] | None
        Arguments to parse; ``sys.argv`` when omitted.
    """
    args = build_parser().parse_args(argv)
    config = build_config(args)

    events = load_match_log(args.log)
    home_team, away_team = load_roster_from_json(args.roster) if args.roster else default_teams()
    debugger = MatchDebugger(args.debug_dir) if args.debug_dir else None

    engine = ReplayEngine(
        events,
        home_team,
        away_team,
        config=config,
        rng=random.Random(args.seed),
        debugger=debugger,
    )

    print(f"Loaded {len(events)} events. Freeze={args.freeze} Pressing={args.pressing}")
    engine.start()
    status_thread = threading.Thread(target=print_replay_status, args=(engine,))
    status_thread.start()
    engine.reset()
    engine.play()

    try:
        while engine.is_playing:
            time.sleep(0.1)
        # Let the ambient layer run briefly past the final event.
        time.sleep(config.replay.step_interval)
    except KeyboardInterrupt:
        print("\nReplay interrupted.")
    finally:
        engine.stop()
        status_thread.join(timeout=3.0)
        if debugger:
            debugger.close()

    print(format_status(engine))


if __name__ == "__main__":
    main()
