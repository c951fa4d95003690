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
"""Event domain models for the authoritative match log."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, get_args

from .geometry import Cell

EventType = Literal["move", "pass", "shoot"]
Outcome = Literal["success", "fail", "goal", "miss"]

EVENT_TYPES = frozenset(get_args(EventType))
OUTCOMES = frozenset(get_args(Outcome))


@dataclass(frozen=True, slots=True)
class LogEvent:
    """One authoritative action produced by the match-simulation backend.

    Parameters
    ----------
    t : int
        Backend timestamp of the action.
    event_type : EventType
        ``"move"``, ``"pass"`` or ``"shoot"``.
    team : str
        Acting team identifier.
    actor_id : int
        Acting actor, unique within ``team``.
    from_cell : Tuple[int, int] | None
        Source cell; may be absent for passes, which then start at the ball.
    to_cell : Tuple[int, int]
        Destination cell.
    outcome : Outcome | None, optional
        ``"success"``, ``"fail"``, ``"goal"``, ``"miss"`` or ``None`` for moves.
    """

    t: int
    event_type: EventType
    team: str
    actor_id: int
    from_cell: Optional[Cell]
    to_cell: Cell
    outcome: Optional[Outcome] = None

    def __post_init__(self) -> None:
        """Reject event types and outcomes outside the log vocabulary."""
        if self.event_type not in EVENT_TYPES:
            raise ValueError(f"Unknown event type '{self.event_type}'")
        if self.outcome is not None and self.outcome not in OUTCOMES:
            raise ValueError(f"Unknown outcome '{self.outcome}'")
