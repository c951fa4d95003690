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
"""Roster entries for the 7-a-side grid game."""
from dataclasses import dataclass
from typing import Literal, Tuple, get_args

Role = Literal["GK", "DF", "CM", "FW"]
ROLES: Tuple[Role, ...] = get_args(Role)


@dataclass(frozen=True)
class Actor:
    """Static roster slot for one of the fourteen on-field actors.

    Parameters
    ----------
    team : str
        Team identifier (``"A"`` or ``"B"``).
    actor_id : int
        Identifier unique within the team.
    role : Role
        Positional role code: ``"GK"``, ``"DF"``, ``"CM"`` or ``"FW"``.
    start_cell : Tuple[int, int]
        Cell occupied before the log moves the actor.
    name : str, optional
        Display label; defaults to ``"<team><id>"``.
    """

    team: str
    actor_id: int
    role: Role
    start_cell: Tuple[int, int]
    name: str = ""

    def __post_init__(self) -> None:
        """Validate the role code and fill in the default label."""
        if self.role not in ROLES:
            raise ValueError(f"Unknown role '{self.role}'. Known roles: {', '.join(ROLES)}")
        if not self.name:
            object.__setattr__(self, "name", f"{self.team}{self.actor_id}")
