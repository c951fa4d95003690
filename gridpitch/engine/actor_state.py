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
"""Actor-specific state carried between ambient ticks."""

from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from gridpitch.models.player import Actor, Role

from .ball_state import BallOwner, BallState
from .config import ENGINE_CONFIG, PositioningConfig
from .events import LogEvent
from .geometry import ZERO, Cell, Pitch, Vector2D, ZoneBand, cell_distance
from .intents import Intent

if TYPE_CHECKING:
    from gridpitch.utils.debug import MatchDebugger


@dataclass(frozen=True, slots=True)
class HysteresisSnapshot:
    """Situation an actor last evaluated its intent against.

    Parameters
    ----------
    ball_owner_team : str | None
        Team in possession at the time, if any.
    ball_zone_band : ZoneBand
        Third of the field the ball was in.
    pressure_flag : bool
        Whether the ball holder had an opponent within the pressure radius.
    """

    ball_owner_team: Optional[str]
    ball_zone_band: ZoneBand
    pressure_flag: bool


@dataclass(frozen=True, slots=True)
class ActorState:
    """Runtime state for one roster slot.

    ``base_cell`` only ever changes through log replay and ``micro_offset``
    only through the positioning function; they meet at display time.

    Parameters
    ----------
    team : str
        Team identifier.
    actor_id : int
        Identifier unique within the team.
    role : Role
        Positional role code.
    base_cell : Tuple[int, int]
        Authoritative cell from the log or the initial layout.
    intent : Intent
        Current behavioural intent.
    micro_offset : Vector2D, optional
        Cosmetic displacement layered on ``base_cell``.
    last_update_time : float, optional
        Engine clock of the last positioning update.
    last_intent_change_time : float, optional
        Engine clock of the last intent change.
    snapshot : HysteresisSnapshot | None, optional
        Situation at the last update; ``None`` forces a re-evaluation.
    """

    team: str
    actor_id: int
    role: Role
    base_cell: Cell
    intent: Intent
    micro_offset: Vector2D = ZERO
    last_update_time: float = 0.0
    last_intent_change_time: float = 0.0
    snapshot: Optional[HysteresisSnapshot] = None

    @property
    def key(self) -> BallOwner:
        """Return the ``(team, actor_id)`` identity of the actor."""
        return BallOwner(self.team, self.actor_id)

    @property
    def position(self) -> Vector2D:
        """Return the base cell as a continuous vector."""
        return Vector2D.from_cell(self.base_cell)

    @property
    def last_ball_owner_team(self) -> Optional[str]:
        """Return the possessing team seen at the last update."""
        return self.snapshot.ball_owner_team if self.snapshot else None

    @property
    def last_ball_zone_band(self) -> Optional[ZoneBand]:
        """Return the ball's field third seen at the last update."""
        return self.snapshot.ball_zone_band if self.snapshot else None

    @property
    def last_pressure_flag(self) -> Optional[bool]:
        """Return the holder-under-pressure flag seen at the last update."""
        return self.snapshot.pressure_flag if self.snapshot else None

    def display_position(self, pitch: Pitch) -> Vector2D:
        """Return ``base_cell + micro_offset`` clamped to the field.

        Parameters
        ----------
        pitch : Pitch
            Field whose bounds apply.

        Returns
        -------
        Vector2D
            Position to draw the actor at.
        """
        return pitch.clamp(self.position + self.micro_offset)

    def distance_to(self, other: "ActorState") -> float:
        """Return the distance between the two actors' base cells.

        Parameters
        ----------
        other : ActorState
            Actor to measure against.

        Returns
        -------
        float
            Distance in cells.
        """
        return cell_distance(self.base_cell, other.base_cell)


@dataclass
class PositioningContext:
    """Snapshot of shared state used while classifying every actor in a tick.

    Instances are short lived; they capture the ball, the roster and cached
    holder information so repeated per-actor decisions avoid recomputing the
    same lookups.

    Parameters
    ----------
    ball : BallState
        Merged ball state for the tick.
    pitch : Pitch
        Field geometry.
    roster : Sequence[ActorState]
        All fourteen actors as of the start of the tick.
    now : float
        Engine clock in seconds.
    config : PositioningConfig, optional
        Intent machine switches; defaults to configuration.
    rng : random.Random, optional
        Random source for the forward's coin flip.
    debugger : MatchDebugger | None, optional
        Observability channel for anomalies.
    """

    ball: BallState
    pitch: Pitch
    roster: Sequence[ActorState]
    now: float
    config: PositioningConfig = field(default_factory=lambda: ENGINE_CONFIG.positioning)
    rng: random.Random = field(default_factory=random.Random)
    debugger: Optional["MatchDebugger"] = None
    holder: Optional[ActorState] = field(init=False)
    holder_pressure: int = field(init=False)

    def __post_init__(self) -> None:
        """Resolve the ball holder and the pressure on them once per tick."""
        self.holder = self.find(self.ball.owner) if self.ball.motion == "owned" else None
        self.holder_pressure = self.pressure_on(self.holder) if self.holder else 0

    @property
    def attacking_team(self) -> Optional[str]:
        """Return the team currently owning the ball, if any."""
        return self.ball.owner.team if self.ball.owner else None

    @property
    def ball_zone_band(self) -> ZoneBand:
        """Return the field third the ball is in."""
        return self.pitch.zone_band(self.ball.position.x)

    @property
    def holder_under_pressure(self) -> bool:
        """Return ``True`` when at least one opponent is close to the holder."""
        return self.holder_pressure >= 1

    def find(self, key: Optional[BallOwner]) -> Optional[ActorState]:
        """Return the roster entry matching ``key``.

        Parameters
        ----------
        key : BallOwner | None
            ``(team, actor_id)`` identity to look up.

        Returns
        -------
        ActorState | None
            Matching actor or ``None``.
        """
        if key is None:
            return None
        return next((a for a in self.roster if a.team == key.team and a.actor_id == key.actor_id), None)

    def opponents(self, team: str) -> List[ActorState]:
        """Return every actor not on ``team``.

        Parameters
        ----------
        team : str
            Reference team.

        Returns
        -------
        List[ActorState]
            Opposing actors in roster order.
        """
        return [a for a in self.roster if a.team != team]

    def pressure_on(self, actor: ActorState) -> int:
        """Count opponents within the pressure radius of ``actor``.

        Parameters
        ----------
        actor : ActorState
            Actor under consideration.

        Returns
        -------
        int
            Number of nearby opponents.
        """
        radius = self.config.pressure_radius
        return sum(1 for opp in self.opponents(actor.team) if actor.distance_to(opp) <= radius)

    def holds_ball(self, actor: ActorState) -> bool:
        """Return ``True`` when ``actor`` is the current ball holder.

        Parameters
        ----------
        actor : ActorState
            Actor to test.

        Returns
        -------
        bool
            Whether the actor owns the ball.
        """
        return self.holder is not None and self.holder.key == actor.key

    def team_in_possession(self, actor: ActorState) -> bool:
        """Return ``True`` when the actor's team owns the ball.

        Parameters
        ----------
        actor : ActorState
            Actor whose team is checked.

        Returns
        -------
        bool
            Whether the team holds an owned ball.
        """
        return self.ball.motion == "owned" and self.attacking_team == actor.team

    def opponent_in_possession(self, actor: ActorState) -> bool:
        """Return ``True`` when the other team owns the ball.

        Parameters
        ----------
        actor : ActorState
            Actor whose team is checked.

        Returns
        -------
        bool
            Whether the opposition holds an owned ball.
        """
        return self.ball.motion == "owned" and self.attacking_team not in (None, actor.team)

    def snapshot(self) -> HysteresisSnapshot:
        """Return the situation actors record after this tick.

        Returns
        -------
        HysteresisSnapshot
            Owner team, ball band and pressure flag.
        """
        return HysteresisSnapshot(self.attacking_team, self.ball_zone_band, self.holder_under_pressure)

    def has_significant_change(self, actor: ActorState) -> bool:
        """Return ``True`` when ``actor`` should re-evaluate its intent.

        Parameters
        ----------
        actor : ActorState
            Actor whose last snapshot is compared.

        Returns
        -------
        bool
            Owner team, ball band or pressure changed, or the re-evaluation
            interval elapsed since the last intent change.
        """
        if actor.snapshot is None:
            return True
        if actor.snapshot != self.snapshot():
            return True
        return self.now - actor.last_intent_change_time >= self.config.reevaluate_after


def initial_roster(
    actors: Iterable[Actor],
    default_intents: Mapping[str, Intent],
    now: float = 0.0,
) -> Tuple[ActorState, ...]:
    """Create runtime states for a static roster.

    Parameters
    ----------
    actors : Iterable[Actor]
        Roster slots for both teams.
    default_intents : Mapping[str, Intent]
        Idle-safe intent per role used before the first tick.
    now : float, optional
        Engine clock stamped on the new states.

    Returns
    -------
    Tuple[ActorState, ...]
        One state per actor, in input order.
    """
    return tuple(
        ActorState(
            team=actor.team,
            actor_id=actor.actor_id,
            role=actor.role,
            base_cell=actor.start_cell,
            intent=default_intents[actor.role],
            last_update_time=now,
            last_intent_change_time=now,
        )
        for actor in actors
    )


def resolve_base_cells(
    events: Sequence[LogEvent],
    step: int,
    start_cells: Mapping[BallOwner, Cell],
) -> Dict[BallOwner, Cell]:
    """Replay ``events[0..step]`` and return every actor's authoritative cell.

    ``move`` and ``pass`` events relocate the acting actor to the event
    destination; shots leave actors where they are.

    Parameters
    ----------
    events : Sequence[LogEvent]
        Full authoritative log.
    step : int
        Inclusive, 0-based index of the last applied event.
    start_cells : Mapping[BallOwner, Tuple[int, int]]
        Initial layout keyed by ``(team, actor_id)``.

    Returns
    -------
    Dict[BallOwner, Tuple[int, int]]
        Cell per actor after the truncated log.
    """
    cells: Dict[BallOwner, Cell] = dict(start_cells)
    if step < 0:
        return cells
    for event in events[: step + 1]:
        if event.event_type in ("move", "pass"):
            cells[BallOwner(event.team, event.actor_id)] = event.to_cell
    return cells


def apply_log_positions(roster: Sequence[ActorState], cells: Mapping[BallOwner, Cell]) -> Tuple[ActorState, ...]:
    """Return ``roster`` with base cells replaced by the log-derived ones.

    Parameters
    ----------
    roster : Sequence[ActorState]
        Current runtime states.
    cells : Mapping[BallOwner, Tuple[int, int]]
        Output of :func:`resolve_base_cells`.

    Returns
    -------
    Tuple[ActorState, ...]
        Updated states; intents and offsets are untouched.
    """
    updated = []
    for actor in roster:
        cell = cells.get(actor.key, actor.base_cell)
        updated.append(actor if cell == actor.base_cell else replace(actor, base_cell=cell))
    return tuple(updated)
