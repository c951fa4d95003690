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
"""Role behaviour for the goalkeeper."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from gridpitch.engine.intents import idle_intent_for

from .base import RoleBehaviour

if TYPE_CHECKING:
    from gridpitch.engine.actor_state import ActorState, PositioningContext
    from gridpitch.engine.intents import Intent


class GoalkeeperRoleBehaviour(RoleBehaviour):
    """Goalkeeper that always guards its goal, with or without the ball."""

    presses = False

    def __init__(self) -> None:
        """Instantiate the goalkeeper behaviour."""
        super().__init__(
            role="GK",
            idle_intent=idle_intent_for("GK"),
            possession_intent="hold_goal",
            intents=("hold_goal",),
        )

    def classify(self, actor: "ActorState", context: "PositioningContext") -> Optional["Intent"]:
        """Keep the goalkeeper on ``hold_goal``.

        Parameters
        ----------
        actor : ActorState
            Goalkeeper being classified.
        context : PositioningContext
            Shared state for the current tick.

        Returns
        -------
        Optional[Intent]
            Always ``"hold_goal"``.
        """
        return "hold_goal"
