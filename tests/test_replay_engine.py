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
"""Tests for the replay engine and display-state merging."""
import random
import time

import pytest

from gridpitch.engine.ball_state import BallOwner, BallState
from gridpitch.engine.config import EngineConfig, ReplayConfig
from gridpitch.engine.events import LogEvent
from gridpitch.engine.geometry import Pitch, Vector2D
from gridpitch.engine.intents import INTENTS
from gridpitch.engine.pass_decision import PassOverlay
from gridpitch.engine.replay_engine import ReplayEngine, merge_display_state
from gridpitch.utils.debug import MatchDebugger
from gridpitch.utils.roster import default_teams

LOG = [
    LogEvent(0, "move", "A", 3, (1, 2), (2, 2)),
    LogEvent(1, "pass", "A", 4, (2, 2), (3, 1), "success"),
    LogEvent(2, "pass", "A", 4, (3, 1), (4, 2), "fail"),
    LogEvent(3, "move", "B", 6, (2, 1), (4, 2)),
    LogEvent(4, "shoot", "B", 6, (4, 2), (5, 2), "goal"),
]


@pytest.fixture
def debugger():
    return MatchDebugger(output_dir=None)


@pytest.fixture
def engine(debugger):
    home, away = default_teams()
    return ReplayEngine(LOG, home, away, rng=random.Random(0), debugger=debugger, clock=lambda: 0.0)


def _cell_of(engine, team, actor_id):
    return next(a.base_cell for a in engine.roster if a.team == team and a.actor_id == actor_id)


class TestReplayCadence:
    """Tests for seeking and stepping through the log."""

    def test_starts_before_kickoff(self, engine) -> None:
        assert engine.step == -1
        assert engine.log_ball == BallState.loose_at((3, 2))
        assert len(engine.roster) == 14

    def test_pitch_built_from_engine_config(self) -> None:
        """Field dimensions come from the config handed to the engine."""
        config = EngineConfig()
        config.pitch.width = 9
        home, away = default_teams()
        engine = ReplayEngine([], home, away, config=config, clock=lambda: 0.0)
        assert engine.pitch.width == 9
        assert engine.log_ball == BallState.loose_at((4, 2))

    def test_explicit_pitch_overrides_config(self) -> None:
        home, away = default_teams()
        engine = ReplayEngine([], home, away, pitch=Pitch(width=8), clock=lambda: 0.0)
        assert engine.pitch.width == 8

    def test_seek_is_clamped(self, engine) -> None:
        assert engine.seek(99) == len(LOG) - 1
        assert engine.at_end
        assert engine.seek(-7) == -1

    def test_step_forward_and_backward(self, engine) -> None:
        assert engine.step_forward()
        assert engine.step == 0
        assert engine.step_backward()
        assert engine.step == -1
        assert not engine.step_backward()
        engine.seek(len(LOG) - 1)
        assert not engine.step_forward()

    def test_reset_goes_to_first_event(self, engine) -> None:
        engine.seek(3)
        assert engine.reset() == 0

    def test_reset_on_empty_log(self) -> None:
        home, away = default_teams()
        engine = ReplayEngine([], home, away, clock=lambda: 0.0)
        assert engine.reset() == -1

    def test_ball_follows_log(self, engine) -> None:
        engine.seek(1)
        assert engine.log_ball == BallState.owned_by(BallOwner("A", 4), (3, 1))
        engine.seek(2)
        assert engine.log_ball.motion == "moving"
        assert engine.log_ball.owner is None

    def test_base_cells_follow_log_both_ways(self, engine) -> None:
        assert _cell_of(engine, "A", 3) == (1, 2)
        engine.seek(0)
        assert _cell_of(engine, "A", 3) == (2, 2)
        engine.seek(3)
        assert _cell_of(engine, "A", 4) == (4, 2)
        assert _cell_of(engine, "B", 6) == (4, 2)
        engine.seek(-1)
        assert _cell_of(engine, "A", 3) == (1, 2)
        assert _cell_of(engine, "A", 4) == (2, 0)

    def test_seek_clears_overlay_and_override(self, engine) -> None:
        engine.seek(1)
        engine.overlay = PassOverlay((3, 1), (2, 3), 0.0, 0.4, True, BallOwner("A", 4), BallOwner("A", 5))
        engine.local_ball = BallState.loose_at((2, 3))
        engine.seek(1)
        assert engine.overlay is None
        assert engine.local_ball is None
        assert engine.current_ball() == engine.log_ball

    def test_seek_is_logged(self, engine, debugger) -> None:
        engine.seek(0)
        events = debugger.get_recent_events()
        assert any("REPLAY_STEP" in line and "step=0" in line for line in events)
        assert any("BALL_STATE" in line for line in events)
        assert sum("ACTOR_STATE" in line for line in events) == 14

    def test_play_reaches_end_and_stops(self) -> None:
        home, away = default_teams()
        config = EngineConfig(replay=ReplayConfig(step_interval=0.01))
        engine = ReplayEngine(LOG, home, away, config=config, clock=lambda: 0.0)
        engine.play()
        deadline = time.monotonic() + 5.0
        while engine.is_playing and time.monotonic() < deadline:
            time.sleep(0.01)
        engine.pause()
        assert engine.step == len(LOG) - 1
        assert not engine.is_playing

    def test_pause_cancels_pending_step(self, engine) -> None:
        engine.play()
        engine.pause()
        assert not engine.is_playing
        assert engine._timer is None
        assert engine.step == -1


class TestAmbientTick:
    """Tests for the ambient layer driven by tick()."""

    def test_frame_covers_every_actor(self, engine) -> None:
        engine.seek(1)
        frame = engine.tick(0.5)
        pitch = Pitch()
        assert len(frame.actors) == 14
        assert frame.step == 1
        for actor in frame.actors:
            assert actor.intent in INTENTS
            assert 0 <= actor.position.x <= pitch.width - 1
            assert 0 <= actor.position.y <= pitch.height - 1
        assert engine.last_frame is frame

    def test_ticks_never_move_base_cells(self, engine) -> None:
        engine.seek(1)
        cells = [a.base_cell for a in engine.roster]
        for tick in range(20):
            engine.tick(tick / 30)
        assert [a.base_cell for a in engine.roster] == cells

    def test_no_pass_evaluation_on_loose_ball(self, engine) -> None:
        for tick in range(20):
            frame = engine.tick(tick * 0.1)
        assert frame.overlay is None
        assert engine.pass_engine.last_evaluation_time is None

    def test_pass_engine_evaluated_with_owned_ball(self, engine) -> None:
        engine.seek(1)
        engine.tick(1.0)
        assert engine.pass_engine.last_evaluation_time == 1.0

    def test_overlay_shows_moving_ball_owned_by_passer(self, engine) -> None:
        engine.seek(1)
        engine.overlay = PassOverlay((3, 1), (2, 3), 0.0, 0.4, True, BallOwner("A", 4), BallOwner("A", 5))
        frame = engine.tick(0.2)
        assert frame.ball.motion == "moving"
        assert frame.ball.position == Vector2D(2.5, 2.0)
        assert frame.possession == BallOwner("A", 4)
        assert frame.overlay_path == ((3, 1), (2, 3), True)

    def test_completed_overlay_becomes_local_ball(self, engine, debugger) -> None:
        engine.seek(1)
        engine.overlay = PassOverlay((3, 1), (2, 3), 0.0, 0.4, True, BallOwner("A", 4), BallOwner("A", 5))
        engine.pass_engine.last_evaluation_time = 0.5
        frame = engine.tick(0.5)
        assert engine.overlay is None
        assert engine.local_ball == BallState.owned_by(BallOwner("A", 5), (2, 3))
        assert frame.possession == BallOwner("A", 5)
        assert engine.current_ball() == engine.local_ball
        assert any("AMBIENT_PASS_END" in line for line in debugger.get_recent_events())

    def test_failed_overlay_leaves_ball_loose(self, engine) -> None:
        engine.seek(1)
        engine.overlay = PassOverlay((3, 1), (2, 3), 0.0, 0.4, False, BallOwner("A", 4), BallOwner("A", 5))
        frame = engine.tick(1.0)
        assert frame.ball == BallState.loose_at((2, 3))
        assert frame.possession is None
        assert frame.overlay is None

    def test_start_and_stop_ambient_thread(self, engine) -> None:
        thread = engine.start()
        deadline = time.monotonic() + 5.0
        while engine.last_frame is None and time.monotonic() < deadline:
            time.sleep(0.01)
        engine.stop()
        assert engine.last_frame is not None
        assert not engine.is_running
        assert not thread.is_alive()


class TestMergeDisplayState:
    """Tests for merge_display_state."""

    def test_local_override_wins_over_log(self) -> None:
        log_ball = BallState.owned_by(BallOwner("A", 4), (3, 1))
        local = BallState.loose_at((2, 3))
        frame = merge_display_state(log_ball, local, None, [], Pitch(), 1.0, 1)
        assert frame.ball == local
        assert frame.possession is None
        assert frame.overlay_path is None

    def test_log_ball_without_override(self) -> None:
        log_ball = BallState.owned_by(BallOwner("B", 6), (4, 2))
        frame = merge_display_state(log_ball, None, None, [], Pitch(), 1.0, 3)
        assert frame.ball == log_ball
        assert frame.possession == BallOwner("B", 6)
