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
"""Role behaviour for the two forwards."""
from __future__ import annotations

from typing import TYPE_CHECKING, Literal, Optional

from gridpitch.engine.intents import idle_intent_for

from .base import RoleBehaviour

if TYPE_CHECKING:
    from gridpitch.engine.actor_state import ActorState, PositioningContext
    from gridpitch.engine.intents import Intent

LineHeight = Literal["high", "medium", "low"]


class ForwardRoleBehaviour(RoleBehaviour):
    """Forward that tries to unsettle the opposing defensive line."""

    def __init__(self) -> None:
        """Instantiate the forward behaviour."""
        super().__init__(
            role="FW",
            idle_intent=idle_intent_for("FW"),
            possession_intent="hold_up_play",
            intents=("make_forward_run", "hold_up_play", "press_forward"),
        )

    def classify(self, actor: "ActorState", context: "PositioningContext") -> Optional["Intent"]:
        """Choose between running in behind, holding up play and pressing.

        Parameters
        ----------
        actor : ActorState
            Forward being classified.
        context : PositioningContext
            Shared state for the current tick.

        Returns
        -------
        Optional[Intent]
            The kept or recomputed intent.
        """
        if not self.should_reevaluate(actor, context):
            return actor.intent

        if not context.team_in_possession(actor):
            return "press_forward"

        line = self.defensive_line_height(actor, context)
        if line == "high":
            return "make_forward_run"
        if line == "low":
            return "hold_up_play"
        if context.rng.random() < context.config.forward_run_probability:
            return "make_forward_run"
        return "hold_up_play"

    def defensive_line_height(self, actor: "ActorState", context: "PositioningContext") -> LineHeight:
        """Classify how far the opposing defenders have stepped up.

        Parameters
        ----------
        actor : ActorState
            Forward whose opponents are inspected.
        context : PositioningContext
            Shared state providing the roster and the field.

        Returns
        -------
        LineHeight
            ``"high"`` when the defenders' average column lies beyond two
            thirds of the field width, ``"low"`` inside the first third, else
            ``"medium"`` (also used when the opponents field no defenders).
        """
        defenders = [opp for opp in context.opponents(actor.team) if opp.role == "DF"]
        if not defenders:
            return "medium"

        pitch = context.pitch
        avg_x = sum(d.base_cell[0] for d in defenders) / len(defenders)
        third = pitch.width / 3
        if avg_x > third * 2:
            return "high"
        if avg_x < third:
            return "low"
        return "medium"
