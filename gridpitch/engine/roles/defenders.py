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
"""Role behaviour for the two defenders."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from gridpitch.engine.intents import idle_intent_for

from .base import RoleBehaviour

if TYPE_CHECKING:
    from gridpitch.engine.actor_state import ActorState, PositioningContext
    from gridpitch.engine.intents import Intent


class DefenderRoleBehaviour(RoleBehaviour):
    """Defender that holds the back line and slides with the ball.

    ``slide`` shares the line-holding oscillation; the classifier itself only
    ever returns ``hold_line``.
    """

    def __init__(self) -> None:
        """Instantiate the defender behaviour."""
        super().__init__(
            role="DF",
            idle_intent=idle_intent_for("DF"),
            possession_intent="hold_line",
            intents=("hold_line", "slide"),
        )

    def classify(self, actor: "ActorState", context: "PositioningContext") -> Optional["Intent"]:
        """Keep the defender on ``hold_line``.

        Parameters
        ----------
        actor : ActorState
            Defender being classified.
        context : PositioningContext
            Shared state for the current tick.

        Returns
        -------
        Optional[Intent]
            Always ``"hold_line"``.
        """
        return "hold_line"
