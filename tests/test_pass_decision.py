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
"""Tests for autonomous pass decisions and pass overlays."""
import random
from dataclasses import replace
from types import SimpleNamespace

import pytest

from gridpitch.engine.actor_state import ActorState
from gridpitch.engine.ball_state import BallOwner, BallState
from gridpitch.engine.config import PassDecisionConfig
from gridpitch.engine.geometry import Pitch, Vector2D
from gridpitch.engine.intents import idle_intent_for
from gridpitch.engine.pass_decision import (
    PassCandidate,
    PassDecision,
    PassDecisionEngine,
    PassOverlay,
    calculate_pass_success_probability,
    calculate_pressure,
    decide_pass,
    find_decision_maker,
    find_pass_candidates,
    is_shootable,
)
from gridpitch.utils.debug import MatchDebugger


def _actor(team, actor_id, role, cell, offset=None):
    actor = ActorState(team=team, actor_id=actor_id, role=role, base_cell=cell, intent=idle_intent_for(role))
    return replace(actor, micro_offset=offset) if offset is not None else actor


def _draws(*values):
    """Return an rng stand-in yielding ``values`` in order."""
    return SimpleNamespace(random=iter(values).__next__)


def _owned(team, actor_id, cell):
    return BallState.owned_by(BallOwner(team, actor_id), cell)


HOLDER = _actor("A", 2, "DF", (1, 1))


class TestPressureAndShooting:
    """Tests for pressure counting and the shoot window."""

    def test_pressure_counts_only_close_opponents(self) -> None:
        roster = [HOLDER, _actor("B", 6, "FW", (1, 0)), _actor("B", 7, "FW", (2, 2)), _actor("B", 4, "CM", (4, 1))]
        assert calculate_pressure(HOLDER, roster, 1.5) == 2

    def test_teammates_do_not_count_as_pressure(self) -> None:
        roster = [HOLDER, _actor("A", 3, "DF", (1, 2))]
        assert calculate_pressure(HOLDER, roster, 1.5) == 0

    def test_shooting_lane_near_attacking_goal(self) -> None:
        pitch = Pitch()
        assert is_shootable(_actor("A", 6, "FW", (4, 1)), pitch)
        assert not is_shootable(_actor("A", 6, "FW", (4, 0)), pitch)
        assert not is_shootable(_actor("A", 6, "FW", (2, 1)), pitch)
        assert is_shootable(_actor("B", 6, "FW", (1, 2)), pitch)


class TestDecisionMaker:
    """Tests for find_decision_maker."""

    def test_nearest_midfielder_to_ball(self) -> None:
        near = _actor("A", 4, "CM", (2, 1))
        far = _actor("A", 5, "CM", (2, 3))
        assert find_decision_maker("A", [far, near], Vector2D(2, 0), Pitch()) is near

    def test_tie_broken_by_proximity_to_centre(self) -> None:
        wide = _actor("A", 4, "CM", (1, 1))
        central = _actor("A", 5, "CM", (3, 1))
        assert find_decision_maker("A", [wide, central], Vector2D(2, 1), Pitch()) is central

    def test_no_midfielder(self) -> None:
        roster = [HOLDER, _actor("B", 4, "CM", (2, 2))]
        assert find_decision_maker("A", roster, Vector2D(1, 1), Pitch()) is None


class TestCandidates:
    """Tests for candidate filtering and scoring."""

    def test_scores_follow_weights(self) -> None:
        cm = _actor("A", 4, "CM", (2, 2))
        df = _actor("A", 3, "DF", (1, 2))
        candidates = find_pass_candidates(HOLDER, [HOLDER, df, cm], Pitch())
        assert [c.actor for c in candidates] == [cm, df]
        # CM: role 30 + attack 20 + free 25 - close 10
        assert candidates[0].score == 65
        assert candidates[0].is_attacking
        # DF: role 15 + free 25 - close 10
        assert candidates[1].score == 30
        assert not candidates[1].is_attacking

    def test_pressure_lowers_score(self) -> None:
        cm = _actor("A", 4, "CM", (3, 2))
        marker = _actor("B", 4, "CM", (3, 3))
        [candidate] = find_pass_candidates(HOLDER, [HOLDER, cm, marker], Pitch())
        assert candidate.pressure == 1
        # role 30 + attack 20 - 1 marker 10 + ideal 15
        assert candidate.score == 55

    def test_equal_scores_keep_roster_order(self) -> None:
        upper = _actor("A", 5, "CM", (2, 2))
        lower = _actor("A", 4, "CM", (2, 0))
        candidates = find_pass_candidates(HOLDER, [HOLDER, upper, lower], Pitch())
        assert candidates[0].score == candidates[1].score
        assert [c.actor for c in candidates] == [upper, lower]

    def test_distance_and_view_filters(self) -> None:
        holder = _actor("A", 2, "DF", (1, 0))
        too_close = _actor("A", 3, "DF", (1, 0))
        outside_view = _actor("A", 4, "CM", (1, 3))
        too_far = _actor("A", 6, "FW", (5, 1))
        opponent = _actor("B", 4, "CM", (2, 1))
        roster = [holder, too_close, outside_view, too_far, opponent]
        assert find_pass_candidates(holder, roster, Pitch()) == []

    def test_right_to_left_team_attacks_towards_zero(self) -> None:
        holder = _actor("B", 2, "DF", (4, 1))
        forward = _actor("B", 6, "FW", (2, 1))
        [candidate] = find_pass_candidates(holder, [holder, forward], Pitch())
        assert candidate.is_attacking


class TestSuccessProbability:
    """Tests for calculate_pass_success_probability."""

    def _candidate(self, distance, pressure=0, offset=None):
        return PassCandidate(_actor("A", 4, "CM", (2, 2), offset), distance, 0, True, pressure)

    def test_short_free_pass_uses_base(self) -> None:
        assert calculate_pass_success_probability(self._candidate(1.4)) == pytest.approx(0.75)

    def test_distance_penalties(self) -> None:
        assert calculate_pass_success_probability(self._candidate(2.2)) == pytest.approx(0.65)
        assert calculate_pass_success_probability(self._candidate(3.0)) == pytest.approx(0.60)

    def test_markers_and_movement(self) -> None:
        assert calculate_pass_success_probability(self._candidate(1.4, pressure=2)) == pytest.approx(0.59)
        moving = self._candidate(1.4, offset=Vector2D(0.4, 0.3))
        assert calculate_pass_success_probability(moving) == pytest.approx(0.70)

    def test_clamped_to_bounds(self) -> None:
        assert calculate_pass_success_probability(self._candidate(3.0, pressure=10)) == pytest.approx(0.30)
        generous = PassDecisionConfig(base_success=1.4)
        assert calculate_pass_success_probability(self._candidate(1.0), generous) == pytest.approx(0.95)

    @pytest.mark.parametrize("distance", [1.0, 1.5, 2.1, 2.6, 3.5])
    @pytest.mark.parametrize("pressure", [0, 1, 3, 7])
    def test_always_within_bounds(self, distance: float, pressure: int) -> None:
        probability = calculate_pass_success_probability(self._candidate(distance, pressure))
        assert 0.30 <= probability <= 0.95


class TestDecidePass:
    """Tests for the reason codes produced by decide_pass."""

    def _decide(self, roster, ball, rng=None, config=None):
        return decide_pass("A", roster, ball, Pitch(), rng or _draws(0.99, 0.99, 0.99), config)

    def test_loose_ball(self) -> None:
        decision = self._decide([HOLDER], BallState.loose_at((2, 2)))
        assert decision == PassDecision(False, "ball_moving")

    def test_opponent_possession(self) -> None:
        decision = self._decide([HOLDER], _owned("B", 4, (3, 1)))
        assert decision.reason == "not_in_possession"
        assert not decision.should_pass

    def test_holder_missing(self) -> None:
        assert self._decide([HOLDER], _owned("A", 9, (1, 1))).reason == "holder_not_found"

    def test_no_decision_maker(self) -> None:
        roster = [HOLDER, _actor("A", 6, "FW", (2, 1))]
        assert self._decide(roster, _owned("A", 2, (1, 1))).reason == "no_decision_maker"

    def test_shoot_window(self) -> None:
        holder = _actor("A", 6, "FW", (4, 1))
        roster = [holder, _actor("A", 4, "CM", (2, 2))]
        decision = self._decide(roster, _owned("A", 6, (4, 1)))
        assert decision.reason == "shoot_window"
        assert decision.decision_maker is roster[1]

    def test_no_candidate(self) -> None:
        roster = [HOLDER, _actor("A", 4, "CM", (5, 3))]
        decision = self._decide(roster, _owned("A", 2, (1, 1)))
        assert decision.reason == "no_candidate"
        assert decision.candidate is None

    def test_heavy_pressure_always_passes(self) -> None:
        roster = [HOLDER, _actor("A", 4, "CM", (2, 2)), _actor("B", 6, "FW", (1, 0)), _actor("B", 7, "FW", (2, 1))]
        decision = self._decide(roster, _owned("A", 2, (1, 1)))
        assert decision.should_pass
        assert decision.reason == "heavy_pressure"
        assert decision.pressure == 2

    def test_pressured_release(self) -> None:
        roster = [HOLDER, _actor("A", 4, "CM", (2, 3)), _actor("B", 6, "FW", (1, 0))]
        decision = self._decide(roster, _owned("A", 2, (1, 1)))
        assert decision.reason == "pressured_release"
        assert decision.success_probability == pytest.approx(0.65)

    def test_attacking_opportunity(self) -> None:
        roster = [HOLDER, _actor("A", 4, "CM", (2, 2))]
        config = PassDecisionConfig(base_success=0.9)
        decision = self._decide(roster, _owned("A", 2, (1, 1)), config=config)
        assert decision.reason == "attacking_opportunity"

    def test_opportunistic(self) -> None:
        roster = [HOLDER, _actor("A", 4, "CM", (2, 2))]
        decision = self._decide(roster, _owned("A", 2, (1, 1)), rng=_draws(0.05))
        assert decision.reason == "opportunistic"
        assert decision.should_pass

    def test_midfield_link(self) -> None:
        roster = [HOLDER, _actor("A", 4, "CM", (2, 2))]
        decision = self._decide(roster, _owned("A", 2, (1, 1)), rng=_draws(0.5, 0.1))
        assert decision.reason == "midfield_link"

    def test_forward_release(self) -> None:
        holder = _actor("A", 4, "CM", (2, 1))
        roster = [holder, _actor("A", 6, "FW", (3, 1))]
        decision = self._decide(roster, _owned("A", 4, (2, 1)), rng=_draws(0.5, 0.1))
        assert decision.reason == "forward_release"
        assert decision.decision_maker is holder

    def test_hold_possession(self) -> None:
        roster = [HOLDER, _actor("A", 4, "CM", (2, 2))]
        decision = self._decide(roster, _owned("A", 2, (1, 1)))
        assert decision.reason == "hold_possession"
        assert not decision.should_pass
        assert decision.candidate is not None


class TestPassOverlay:
    """Tests for the local pass animation."""

    def _overlay(self, success=True, duration=0.4):
        return PassOverlay((1, 1), (3, 1), 10.0, duration, success, BallOwner("A", 2), BallOwner("A", 4))

    def test_progress_and_interpolation(self) -> None:
        overlay = self._overlay()
        assert overlay.progress(9.0) == 0.0
        assert overlay.progress(10.2) == pytest.approx(0.5)
        assert overlay.ball_position(10.2).x == pytest.approx(2.0)
        assert not overlay.is_complete(10.3)
        assert overlay.is_complete(10.4)
        assert overlay.progress(12.0) == 1.0

    def test_in_flight_ball_is_moving(self) -> None:
        ball = self._overlay().in_flight_state(10.1)
        assert ball.motion == "moving"
        assert ball.owner is None
        assert (ball.moving_from, ball.moving_to) == ((1, 1), (3, 1))

    def test_resolve(self) -> None:
        assert self._overlay(success=True).resolve() == _owned("A", 4, (3, 1))
        assert self._overlay(success=False).resolve() == BallState.loose_at((3, 1))

    def test_zero_duration_completes_immediately(self) -> None:
        assert self._overlay(duration=0.0).is_complete(10.0)


class TestPassDecisionEngine:
    """Tests for the cadence-limited engine."""

    PRESSED = [HOLDER, _actor("A", 4, "CM", (2, 2)), _actor("B", 6, "FW", (1, 0)), _actor("B", 7, "FW", (2, 1))]

    def test_cadence(self) -> None:
        engine = PassDecisionEngine(Pitch(), rng=random.Random(1))
        ball = _owned("A", 2, (1, 1))
        assert engine.is_due(0.0, ball, None)
        engine.evaluate([HOLDER], ball, 0.0)
        assert not engine.is_due(0.3, ball, None)
        assert engine.is_due(0.5, ball, None)
        engine.reset()
        assert engine.is_due(0.1, ball, None)

    def test_not_due_without_owned_ball_or_with_overlay(self) -> None:
        engine = PassDecisionEngine(Pitch())
        overlay = PassOverlay((1, 1), (2, 2), 0.0, 0.4, True, BallOwner("A", 2), BallOwner("A", 4))
        assert not engine.is_due(1.0, BallState.loose_at((1, 1)), None)
        assert not engine.is_due(1.0, _owned("A", 2, (1, 1)), overlay)

    def test_evaluate_opens_overlay_and_logs(self) -> None:
        debugger = MatchDebugger(output_dir=None)
        engine = PassDecisionEngine(Pitch(), rng=_draws(0.1), debugger=debugger)
        overlay = engine.evaluate(self.PRESSED, _owned("A", 2, (1, 1)), 3.0)
        assert overlay is not None
        assert overlay.success
        assert overlay.passer == BallOwner("A", 2)
        assert overlay.receiver == BallOwner("A", 4)
        assert (overlay.source_cell, overlay.destination_cell) == ((1, 1), (2, 2))
        assert overlay.start_time == 3.0
        assert overlay.duration == pytest.approx(0.4)
        events = debugger.get_recent_events()
        assert any("PASS_DECISION" in line and "heavy_pressure" in line for line in events)
        assert any("AMBIENT_PASS" in line for line in events)

    def test_failed_sample(self) -> None:
        engine = PassDecisionEngine(Pitch(), rng=_draws(0.99))
        overlay = engine.evaluate(self.PRESSED, _owned("A", 2, (1, 1)), 0.0)
        assert overlay is not None
        assert not overlay.success

    def test_no_pass_returns_none(self) -> None:
        engine = PassDecisionEngine(Pitch(), rng=_draws(0.99, 0.99))
        assert engine.evaluate([HOLDER, _actor("A", 4, "CM", (2, 2))], _owned("A", 2, (1, 1)), 0.0) is None
        assert engine.last_evaluation_time == 0.0

    def test_execute_requires_candidate(self) -> None:
        engine = PassDecisionEngine(Pitch())
        with pytest.raises(ValueError):
            engine.execute(PassDecision(True, "heavy_pressure", holder=HOLDER), 0.0)
