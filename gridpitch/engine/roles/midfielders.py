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
"""Role behaviour for the two central midfielders."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from gridpitch.engine.intents import idle_intent_for

from .base import RoleBehaviour

if TYPE_CHECKING:
    from gridpitch.engine.actor_state import ActorState, PositioningContext
    from gridpitch.engine.intents import Intent


class MidfielderRoleBehaviour(RoleBehaviour):
    """Midfielder that offers the ball holder a passing option.

    The classification asks one question: can the holder pass to me right
    now? It is only recomputed when the situation changes significantly.
    """

    def __init__(self) -> None:
        """Instantiate the midfielder behaviour."""
        super().__init__(
            role="CM",
            idle_intent=idle_intent_for("CM"),
            possession_intent="maintain_triangle",
            intents=("create_passing_angle", "maintain_triangle", "cover_opposite_space"),
        )

    def classify(self, actor: "ActorState", context: "PositioningContext") -> Optional["Intent"]:
        """Pick between supporting the holder and covering space.

        Parameters
        ----------
        actor : ActorState
            Midfielder being classified.
        context : PositioningContext
            Shared state for the current tick.

        Returns
        -------
        Optional[Intent]
            The kept or recomputed intent; ``None`` when the team owns the
            ball but the holder is missing from the roster.
        """
        if not self.should_reevaluate(actor, context):
            return actor.intent

        if not context.team_in_possession(actor):
            return "cover_opposite_space"

        holder = context.holder
        if holder is None:
            return None
        if context.holder_under_pressure:
            return "create_passing_angle"
        if self.has_good_passing_angle(actor, holder, context):
            return "maintain_triangle"
        return "create_passing_angle"

    def has_good_passing_angle(self, actor: "ActorState", holder: "ActorState", context: "PositioningContext") -> bool:
        """Return ``True`` when ``actor`` sits at a comfortable passing distance.

        Parameters
        ----------
        actor : ActorState
            Midfielder offering the option.
        holder : ActorState
            Teammate on the ball.
        context : PositioningContext
            Shared state providing the distance band.

        Returns
        -------
        bool
            Whether the distance lies within the configured band, inclusive.
        """
        distance = actor.distance_to(holder)
        return context.config.passing_angle_min <= distance <= context.config.passing_angle_max
