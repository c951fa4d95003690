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
"""Autonomous, team-level pass decisions that keep idle replays moving.

The authority to pass belongs to a midfielder (the decision-maker), not to
the ball holder. Evaluations are cheap and purely functional; the only state
is the cadence clock in :class:`PassDecisionEngine` and the overlay that the
replay engine owns while a pass is animating.
"""
from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Literal, Optional, Sequence

from .actor_state import ActorState
from .ball_state import BallOwner, BallState
from .config import ENGINE_CONFIG, PassDecisionConfig
from .geometry import Cell, Pitch, Vector2D

if TYPE_CHECKING:
    from gridpitch.utils.debug import MatchDebugger

PassReason = Literal[
    "ball_moving",
    "not_in_possession",
    "holder_not_found",
    "no_decision_maker",
    "shoot_window",
    "no_candidate",
    "heavy_pressure",
    "pressured_release",
    "attacking_opportunity",
    "opportunistic",
    "midfield_link",
    "forward_release",
    "hold_possession",
]


@dataclass(frozen=True, slots=True)
class PassCandidate:
    """Teammate considered as a pass target.

    Parameters
    ----------
    actor : ActorState
        The teammate.
    distance : float
        Distance from the ball holder in cells.
    score : float
        Additive desirability; higher wins.
    is_attacking : bool
        Whether the teammate is further advanced than the holder.
    pressure : int
        Opponents within the pressure radius of the teammate.
    """

    actor: ActorState
    distance: float
    score: float
    is_attacking: bool
    pressure: int


@dataclass(frozen=True, slots=True)
class PassDecision:
    """Outcome of one pass evaluation.

    Parameters
    ----------
    should_pass : bool
        Whether a pass is triggered.
    reason : PassReason
        Machine-readable reason code.
    candidate : PassCandidate | None, optional
        Best candidate, when one was found.
    success_probability : float, optional
        Computed odds for ``candidate``; ``0.0`` when there is none.
    pressure : int, optional
        Opponents close to the ball holder.
    holder : ActorState | None, optional
        Ball holder that would execute the pass.
    decision_maker : ActorState | None, optional
        Midfielder that took the decision.
    """

    should_pass: bool
    reason: PassReason
    candidate: Optional[PassCandidate] = None
    success_probability: float = 0.0
    pressure: int = 0
    holder: Optional[ActorState] = None
    decision_maker: Optional[ActorState] = None


@dataclass(frozen=True, slots=True)
class PassOverlay:
    """A locally simulated pass animating between two cells.

    Parameters
    ----------
    source_cell : Tuple[int, int]
        Holder's cell when the pass started.
    destination_cell : Tuple[int, int]
        Receiver's cell when the pass started.
    start_time : float
        Engine clock at kick.
    duration : float
        Animation length in seconds.
    success : bool
        Outcome sampled once at kick.
    passer : BallOwner
        Actor credited with the ball until completion.
    receiver : BallOwner
        Actor who gains the ball on success.
    """

    source_cell: Cell
    destination_cell: Cell
    start_time: float
    duration: float
    success: bool
    passer: BallOwner
    receiver: BallOwner

    def progress(self, now: float) -> float:
        """Return the completed fraction of the animation.

        Parameters
        ----------
        now : float
            Engine clock in seconds.

        Returns
        -------
        float
            Value in ``[0, 1]``.
        """
        if self.duration <= 0:
            return 1.0
        return max(0.0, min(1.0, (now - self.start_time) / self.duration))

    def is_complete(self, now: float) -> bool:
        """Return ``True`` once the animation has run its full duration.

        Parameters
        ----------
        now : float
            Engine clock in seconds.

        Returns
        -------
        bool
            Whether the overlay should be resolved.
        """
        return self.progress(now) >= 1.0

    def ball_position(self, now: float) -> Vector2D:
        """Interpolate the ball between source and destination.

        Parameters
        ----------
        now : float
            Engine clock in seconds.

        Returns
        -------
        Vector2D
            Displayed ball position.
        """
        start = Vector2D.from_cell(self.source_cell)
        return start.lerp(Vector2D.from_cell(self.destination_cell), self.progress(now))

    def in_flight_state(self, now: float) -> BallState:
        """Return the ball state shown while the pass is animating.

        Parameters
        ----------
        now : float
            Engine clock in seconds.

        Returns
        -------
        BallState
            Moving ball at the interpolated position.
        """
        return BallState(
            position=self.ball_position(now),
            motion="moving",
            moving_from=self.source_cell,
            moving_to=self.destination_cell,
        )

    def resolve(self) -> BallState:
        """Return the ball state once the animation has finished.

        Returns
        -------
        BallState
            Owned by the receiver on success, otherwise loose at the
            destination.
        """
        if self.success:
            return BallState.owned_by(self.receiver, self.destination_cell)
        return BallState.loose_at(self.destination_cell)


def calculate_pressure(actor: ActorState, roster: Sequence[ActorState], radius: float) -> int:
    """Count opponents within ``radius`` of ``actor``.

    Parameters
    ----------
    actor : ActorState
        Reference actor.
    roster : Sequence[ActorState]
        Every actor on the field.
    radius : float
        Inclusive radius in cells.

    Returns
    -------
    int
        Number of nearby opponents.
    """
    return sum(1 for other in roster if other.team != actor.team and actor.distance_to(other) <= radius)


def is_shootable(holder: ActorState, pitch: Pitch) -> bool:
    """Return ``True`` when ``holder`` stands in a shooting lane.

    Parameters
    ----------
    holder : ActorState
        Ball holder.
    pitch : Pitch
        Field geometry.

    Returns
    -------
    bool
        Whether shooting, not passing, is the natural next action.
    """
    return pitch.is_shooting_lane(holder.team, holder.base_cell)


def find_decision_maker(
    team: str,
    roster: Sequence[ActorState],
    ball_position: Vector2D,
    pitch: Pitch,
) -> Optional[ActorState]:
    """Return the midfielder authorised to trigger passes for ``team``.

    Parameters
    ----------
    team : str
        Team in possession.
    roster : Sequence[ActorState]
        Every actor on the field.
    ball_position : Vector2D
        Current ball position.
    pitch : Pitch
        Field geometry providing the centre point.

    Returns
    -------
    ActorState | None
        The nearest midfielder to the ball, ties broken by proximity to the
        field centre; ``None`` when the team fields no midfielder.
    """
    midfielders = [a for a in roster if a.team == team and a.role == "CM"]
    if not midfielders:
        return None
    if len(midfielders) == 1:
        return midfielders[0]

    centre = pitch.centre()
    best: Optional[ActorState] = None
    best_distance = math.inf
    for cm in midfielders:
        distance = cm.position.distance_to(ball_position)
        if distance < best_distance:
            best, best_distance = cm, distance
        elif distance == best_distance and best is not None:
            if cm.position.distance_to(centre) < best.position.distance_to(centre):
                best = cm
    return best


def find_pass_candidates(
    holder: ActorState,
    roster: Sequence[ActorState],
    pitch: Pitch,
    config: Optional[PassDecisionConfig] = None,
) -> List[PassCandidate]:
    """Filter and score the holder's teammates as pass targets.

    Parameters
    ----------
    holder : ActorState
        Actor on the ball.
    roster : Sequence[ActorState]
        Every actor on the field.
    pitch : Pitch
        Field geometry for the attack direction.
    config : PassDecisionConfig | None, optional
        Weights and filters; defaults to configuration.

    Returns
    -------
    List[PassCandidate]
        Candidates by descending score; equal scores keep roster order.
    """
    cfg = config or ENGINE_CONFIG.passing
    low, high = cfg.ideal_band
    candidates: List[PassCandidate] = []
    for mate in roster:
        if mate.team != holder.team or mate.actor_id == holder.actor_id:
            continue
        distance = holder.distance_to(mate)
        if distance < cfg.min_distance or distance > cfg.max_distance:
            continue
        dx = abs(mate.base_cell[0] - holder.base_cell[0])
        dy = abs(mate.base_cell[1] - holder.base_cell[1])
        if dx > cfg.view_dx or dy > cfg.view_dy:
            continue

        pressure = calculate_pressure(mate, roster, cfg.pressure_radius)
        attacking = pitch.is_further_advanced(holder.team, mate.base_cell[0], holder.base_cell[0])

        score = cfg.role_weights.get(mate.role, 0)
        if attacking:
            score += cfg.attack_bonus
        if pressure == 0:
            score += cfg.free_bonus
        else:
            score -= pressure * cfg.pressure_penalty
        if low <= distance <= high:
            score += cfg.ideal_bonus
        elif distance < low:
            score -= cfg.close_penalty
        else:
            score -= cfg.far_penalty

        candidates.append(PassCandidate(mate, distance, score, attacking, pressure))

    # sorted() is stable, so ties keep roster order.
    return sorted(candidates, key=lambda c: c.score, reverse=True)


def calculate_pass_success_probability(candidate: PassCandidate, config: Optional[PassDecisionConfig] = None) -> float:
    """Estimate how likely a pass to ``candidate`` is to arrive.

    Parameters
    ----------
    candidate : PassCandidate
        Scored pass target.
    config : PassDecisionConfig | None, optional
        Penalties and bounds; defaults to configuration.

    Returns
    -------
    float
        Probability clamped to ``[min_success, max_success]``.
    """
    cfg = config or ENGINE_CONFIG.passing
    probability = cfg.base_success
    if candidate.distance > cfg.long_distance:
        probability -= cfg.long_penalty
    elif candidate.distance > cfg.medium_distance:
        probability -= cfg.medium_penalty
    probability -= candidate.pressure * cfg.marker_penalty
    if candidate.actor.micro_offset.manhattan() > cfg.movement_threshold:
        probability -= cfg.movement_penalty
    return max(cfg.min_success, min(cfg.max_success, probability))


def decide_pass(
    team: str,
    roster: Sequence[ActorState],
    ball: BallState,
    pitch: Pitch,
    rng: random.Random,
    config: Optional[PassDecisionConfig] = None,
) -> PassDecision:
    """Decide whether ``team`` should play a supplemental pass now.

    Parameters
    ----------
    team : str
        Team being evaluated.
    roster : Sequence[ActorState]
        Every actor on the field.
    ball : BallState
        Merged ball state.
    pitch : Pitch
        Field geometry.
    rng : random.Random
        Source for the low-weight random triggers.
    config : PassDecisionConfig | None, optional
        Thresholds; defaults to configuration.

    Returns
    -------
    PassDecision
        Decision with a reason code; negative results are never raised.
    """
    cfg = config or ENGINE_CONFIG.passing
    if ball.motion != "owned" or ball.owner is None:
        return PassDecision(False, "ball_moving")
    if ball.owner.team != team:
        return PassDecision(False, "not_in_possession")

    holder = next((a for a in roster if a.key == ball.owner), None)
    if holder is None:
        return PassDecision(False, "holder_not_found")

    decision_maker = find_decision_maker(team, roster, ball.position, pitch)
    if decision_maker is None:
        return PassDecision(False, "no_decision_maker", holder=holder)

    if is_shootable(holder, pitch):
        return PassDecision(False, "shoot_window", holder=holder, decision_maker=decision_maker)

    pressure = calculate_pressure(holder, roster, cfg.pressure_radius)
    candidates = find_pass_candidates(holder, roster, pitch, cfg)
    if not candidates:
        return PassDecision(False, "no_candidate", pressure=pressure, holder=holder, decision_maker=decision_maker)

    best = candidates[0]
    probability = calculate_pass_success_probability(best, cfg)
    keep_alive = cfg.keep_alive_chance if decision_maker is not None else cfg.keep_alive_chance_without_maker

    reason: PassReason = "hold_possession"
    if pressure >= 2:
        reason = "heavy_pressure"
    elif pressure == 1 and probability > cfg.pressured_release_threshold:
        reason = "pressured_release"
    elif pressure == 0 and probability > cfg.attacking_threshold and best.is_attacking:
        reason = "attacking_opportunity"
    elif pressure == 0 and rng.random() < keep_alive:
        reason = "opportunistic"
    elif (
        best.actor.role == "CM"
        and probability > cfg.midfield_link_threshold
        and rng.random() < cfg.midfield_link_chance
    ):
        reason = "midfield_link"
    elif (
        best.actor.role == "FW"
        and probability > cfg.forward_release_threshold
        and rng.random() < cfg.forward_release_chance
    ):
        reason = "forward_release"

    return PassDecision(
        should_pass=reason != "hold_possession",
        reason=reason,
        candidate=best,
        success_probability=probability,
        pressure=pressure,
        holder=holder,
        decision_maker=decision_maker,
    )


class PassDecisionEngine:
    """Cadence-limited driver around :func:`decide_pass`.

    Parameters
    ----------
    pitch : Pitch
        Field geometry.
    rng : random.Random | None, optional
        Random source shared by triggers and outcome sampling.
    config : PassDecisionConfig | None, optional
        Tuning; defaults to configuration.
    debugger : MatchDebugger | None, optional
        Receives one line per evaluation.
    """

    def __init__(
        self,
        pitch: Pitch,
        rng: Optional[random.Random] = None,
        config: Optional[PassDecisionConfig] = None,
        debugger: Optional["MatchDebugger"] = None,
    ) -> None:
        """Store collaborators and reset the cadence clock.

        Parameters
        ----------
        pitch : Pitch
            Field geometry.
        rng : random.Random | None
            Random source; a fresh one when omitted.
        config : PassDecisionConfig | None
            Tuning; defaults to configuration.
        debugger : MatchDebugger | None
            Optional observability channel.
        """
        self.pitch = pitch
        self.rng = rng or random.Random()
        self.config = config or ENGINE_CONFIG.passing
        self.debugger = debugger
        self.last_evaluation_time: Optional[float] = None

    def reset(self) -> None:
        """Forget the cadence clock so the next eligible tick evaluates."""
        self.last_evaluation_time = None

    def is_due(self, now: float, ball: BallState, overlay: Optional[PassOverlay]) -> bool:
        """Return ``True`` when an evaluation may run this tick.

        Parameters
        ----------
        now : float
            Engine clock in seconds.
        ball : BallState
            Merged ball state.
        overlay : PassOverlay | None
            Active overlay, if any.

        Returns
        -------
        bool
            Ball owned, no overlay live and the interval has elapsed.
        """
        if overlay is not None or ball.motion != "owned":
            return False
        if self.last_evaluation_time is None:
            return True
        return now - self.last_evaluation_time >= self.config.evaluation_interval

    def evaluate(self, roster: Sequence[ActorState], ball: BallState, now: float) -> Optional[PassOverlay]:
        """Run one evaluation and open an overlay when a pass triggers.

        Parameters
        ----------
        roster : Sequence[ActorState]
            Every actor on the field.
        ball : BallState
            Merged ball state; must be owned.
        now : float
            Engine clock in seconds.

        Returns
        -------
        PassOverlay | None
            New overlay, or ``None`` when no pass is played.
        """
        self.last_evaluation_time = now
        if ball.owner is None:
            return None
        decision = decide_pass(ball.owner.team, roster, ball, self.pitch, self.rng, self.config)
        if self.debugger:
            self.debugger.log_pass_decision(now, ball.owner.team, decision)
        if not decision.should_pass or decision.candidate is None or decision.holder is None:
            return None
        return self.execute(decision, now)

    def execute(self, decision: PassDecision, now: float) -> PassOverlay:
        """Sample the outcome once and build the overlay for ``decision``.

        Parameters
        ----------
        decision : PassDecision
            Triggered decision with holder and candidate set.
        now : float
            Engine clock in seconds.

        Returns
        -------
        PassOverlay
            Overlay carrying the pre-sampled outcome.

        Raises
        ------
        ValueError
            If ``decision`` has no holder or candidate.
        """
        if decision.holder is None or decision.candidate is None:
            raise ValueError("Cannot execute a pass without a holder and a candidate")
        success = self.rng.random() < decision.success_probability
        overlay = PassOverlay(
            source_cell=decision.holder.base_cell,
            destination_cell=decision.candidate.actor.base_cell,
            start_time=now,
            duration=self.config.pass_duration,
            success=success,
            passer=decision.holder.key,
            receiver=decision.candidate.actor.key,
        )
        if self.debugger:
            self.debugger.log_match_event(
                now,
                "AMBIENT_PASS",
                f"{overlay.passer.team}{overlay.passer.actor_id} -> "
                f"{overlay.receiver.team}{overlay.receiver.actor_id} "
                f"p={decision.success_probability:.2f} success={success} reason={decision.reason}",
            )
        return overlay
