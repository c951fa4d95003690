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
"""Ball possession derived from the authoritative log.

The resolver is a pure fold: every call replays the log from the first event
up to the requested step, so seeking backwards or jumping ahead needs no
incremental bookkeeping.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, NamedTuple, Optional, Sequence

from .events import LogEvent
from .geometry import Cell, Pitch, Vector2D

BallMotion = Literal["free", "owned", "moving"]


class BallOwner(NamedTuple):
    """Identity of the actor controlling the ball.

    Parameters
    ----------
    team : str
        Team identifier.
    actor_id : int
        Actor identifier within the team.
    """

    team: str
    actor_id: int


@dataclass(frozen=True, slots=True)
class BallState:
    """Possession, position and motion of the ball for one frame.

    Parameters
    ----------
    position : Vector2D
        Ball location in cells.
    motion : BallMotion
        ``"free"``, ``"owned"`` or ``"moving"``.
    owner : BallOwner | None, optional
        Controlling actor; set exactly when ``motion`` is ``"owned"``.
    moving_from : Tuple[int, int] | None, optional
        Flight origin; set exactly when ``motion`` is ``"moving"``.
    moving_to : Tuple[int, int] | None, optional
        Flight destination; set exactly when ``motion`` is ``"moving"``.
    """

    position: Vector2D
    motion: BallMotion
    owner: Optional[BallOwner] = None
    moving_from: Optional[Cell] = None
    moving_to: Optional[Cell] = None

    def __post_init__(self) -> None:
        """Enforce the owner/motion and flight/motion pairings."""
        if (self.owner is not None) != (self.motion == "owned"):
            raise ValueError(f"owner must be set iff motion is 'owned' (motion={self.motion}, owner={self.owner})")
        moving = self.motion == "moving"
        if (self.moving_from is not None) != moving or (self.moving_to is not None) != moving:
            raise ValueError(f"moving_from/moving_to must be set iff motion is 'moving' (motion={self.motion})")

    @classmethod
    def kickoff(cls, pitch: Pitch) -> "BallState":
        """Return the loose ball on the centre cell.

        Parameters
        ----------
        pitch : Pitch
            Field whose centre cell holds the ball.

        Returns
        -------
        BallState
            Free ball without owner.
        """
        return cls(position=Vector2D.from_cell(pitch.centre_cell()), motion="free")

    @classmethod
    def owned_by(cls, owner: BallOwner, cell: Cell) -> "BallState":
        """Return a ball controlled by ``owner`` at ``cell``.

        Parameters
        ----------
        owner : BallOwner
            Controlling actor.
        cell : Tuple[int, int]
            Cell the ball sits on.

        Returns
        -------
        BallState
            Owned ball.
        """
        return cls(position=Vector2D.from_cell(cell), motion="owned", owner=owner)

    @classmethod
    def loose_at(cls, cell: Cell) -> "BallState":
        """Return a free ball resting on ``cell``.

        Parameters
        ----------
        cell : Tuple[int, int]
            Cell the ball sits on.

        Returns
        -------
        BallState
            Free ball without owner.
        """
        return cls(position=Vector2D.from_cell(cell), motion="free")

    @property
    def cell(self) -> Cell:
        """Return the nearest grid cell to the ball position."""
        return (int(round(self.position.x)), int(round(self.position.y)))


def _apply_event(ball: BallState, event: LogEvent) -> BallState:
    """Fold one log event into the running ball state.

    Parameters
    ----------
    ball : BallState
        State before ``event``.
    event : LogEvent
        Event to apply.

    Returns
    -------
    BallState
        State after ``event``.
    """
    actor = BallOwner(event.team, event.actor_id)

    if event.event_type == "move":
        return BallState.owned_by(actor, event.to_cell)

    moving_from = event.from_cell if event.from_cell is not None else ball.cell

    if event.event_type == "pass":
        if event.outcome == "success":
            # The log credits the acting actor, not a separate receiver.
            return BallState.owned_by(actor, event.to_cell)
        return BallState(position=ball.position, motion="moving", moving_from=moving_from, moving_to=event.to_cell)

    # Shots resolve within their own step; the ball always ends up loose.
    if event.outcome == "goal":
        return BallState(position=ball.position, motion="free")
    return BallState.loose_at(event.to_cell)


def resolve_ball_state(events: Sequence[LogEvent], step: int, pitch: Optional[Pitch] = None) -> BallState:
    """Replay ``events[0..step]`` and return the resulting ball state.

    Parameters
    ----------
    events : Sequence[LogEvent]
        Full authoritative log.
    step : int
        Inclusive, 0-based index of the last applied event; negative means
        nothing has been replayed yet.
    pitch : Pitch | None, optional
        Field used for the kick-off position; defaults to configuration.

    Returns
    -------
    BallState
        Ball state after the truncated log.
    """
    pitch = pitch or Pitch()
    ball = BallState.kickoff(pitch)
    if step < 0:
        return ball
    for event in events[: step + 1]:
        ball = _apply_event(ball, event)
    return ball
