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
"""Team and formation domain models."""
from dataclasses import dataclass
from typing import Dict, List

from gridpitch.models.player import Actor

TEAM_SIZE = 7


@dataclass
class Formation:
    """Description of a 7-a-side shape including the goalkeeper.

    Parameters
    ----------
    name : str
        Human-readable name of the formation (for example ``"2-2-2"``).
    role_counts : Dict[str, int]
        Mapping of role codes to the number of actors in that role.
    """

    name: str  # e.g., "2-2-2"
    role_counts: Dict[str, int]  # e.g., {"GK": 1, "DF": 2, "CM": 2, "FW": 2}

    def __post_init__(self) -> None:
        """Ensure the formation fields seven actors with a single goalkeeper."""
        if sum(self.role_counts.values()) != TEAM_SIZE:
            raise ValueError(f"Formation must have exactly {TEAM_SIZE} actors")
        if self.role_counts.get("GK", 0) != 1:
            raise ValueError("Formation must have exactly one goalkeeper")


@dataclass
class Team:
    """One side of the match and its actors.

    Parameters
    ----------
    team_id : str
        Identifier used by the match log (``"A"`` or ``"B"``).
    name : str
        Display name for the side.
    actors : List[Actor]
        The seven actors on the field.
    formation : Formation
        Shape the actors were laid out in.
    """

    team_id: str
    name: str
    actors: List[Actor]
    formation: Formation

    def __post_init__(self) -> None:
        """Validate the roster against the formation."""
        if len(self.actors) != TEAM_SIZE:
            raise ValueError(f"Team must have exactly {TEAM_SIZE} actors")
        if any(actor.team != self.team_id for actor in self.actors):
            raise ValueError(f"All actors must belong to team '{self.team_id}'")
        ids = [actor.actor_id for actor in self.actors]
        if len(set(ids)) != len(ids):
            raise ValueError("Actor ids must be unique within a team")
        for role, count in self.formation.role_counts.items():
            if len(self.get_actors_by_role(role)) != count:
                raise ValueError(f"Formation '{self.formation.name}' expects {count} {role} actor(s)")

    def get_actors_by_role(self, role: str) -> List[Actor]:
        """Get all actors playing a given role.

        Parameters
        ----------
        role : str
            Role code to filter by (for example ``"CM"``).

        Returns
        -------
        List[Actor]
            Actors whose role matches ``role``.
        """
        return [a for a in self.actors if a.role == role]
