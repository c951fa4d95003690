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
"""Run a replay headlessly on a fixed timestep and write a debug log."""
import argparse
import random
from pathlib import Path

from gridpitch.engine.replay_engine import ReplayEngine
from gridpitch.utils.debug import MatchDebugger
from gridpitch.utils.roster import default_teams, load_match_log


def run_short_replay(log_path: str, timestep: float = 1.0 / 30.0, seed: int = 0, debug_dir: str = "debug_logs") -> None:
    """Replay a log deterministically without threads or wall-clock sleeps.

    Parameters
    ----------
    log_path : str
        Match log JSON.
    timestep : float
        Ambient tick length in seconds (default 1/30, same as the live engine).
    seed : int
        Seed for the ambient random source.
    debug_dir : str
        Directory that receives the debug session file.
    """
    events = load_match_log(log_path)
    home, away = default_teams()
    debugger = MatchDebugger(debug_dir)
    now = 0.0
    engine = ReplayEngine(events, home, away, rng=random.Random(seed), debugger=debugger, clock=lambda: now)

    step_interval = engine.config.replay.step_interval
    next_step = 0.0
    # Run one extra step interval past the last event so the final overlay can finish.
    end_time = step_interval * (len(events) + 1)
    while now < end_time:
        if now >= next_step:
            engine.step_forward()
            next_step += step_interval
        engine.tick(now)
        now += timestep

    debugger.close()
    print(f"Done replaying {len(events)} events ({end_time:.1f}s) -> {debugger.log_path}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("log", type=Path)
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()
    run_short_replay(str(args.log), seed=args.seed)
