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
"""Shared role behaviour scaffolding for the intent state machine."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Tuple

from gridpitch.engine.intents import Intent, is_intent

if TYPE_CHECKING:
    from gridpitch.engine.actor_state import ActorState, PositioningContext
    from gridpitch.utils.debug import MatchDebugger


class RoleBehaviour:
    """Base intent classifier for every positional role.

    Subclasses provide :meth:`classify`; the base class applies the rules
    every role shares (ball holder, pressing mode) and guarantees a concrete
    intent even when a subclass cannot decide.

    Parameters
    ----------
    role : str
        Positional role code controlled by this behaviour instance.
    idle_intent : Intent
        Position-appropriate intent used before the first tick and as the
        fallback for unclassifiable states.
    possession_intent : Intent
        Intent adopted while the actor holds the ball.
    intents : Tuple[Intent, ...]
        Role-specific intents the hysteresis rule may keep.
    """

    # Goalkeepers override this; they never leave goal to press.
    presses: bool = True

    def __init__(
        self,
        role: str,
        idle_intent: Intent,
        possession_intent: Intent,
        intents: Tuple[Intent, ...],
    ) -> None:
        """Store metadata describing the role being controlled.

        Parameters
        ----------
        role : str
            Positional role code controlled by this behaviour instance.
        idle_intent : Intent
            Fallback intent for the role.
        possession_intent : Intent
            Intent adopted while holding the ball.
        intents : Tuple[Intent, ...]
            Role-specific intents the hysteresis rule may keep.
        """
        self.role = role
        self.idle_intent = idle_intent
        self.possession_intent = possession_intent
        self.intents = intents

    def _player_debugger(self, context: "PositioningContext") -> Optional["MatchDebugger"]:
        """Return the debugger attached to the tick context when available.

        Parameters
        ----------
        context : PositioningContext
            Shared state for the current tick.

        Returns
        -------
        Optional[MatchDebugger]
            Debugger bound to the context or ``None`` when absent.
        """
        return context.debugger

    def _player_label(self, actor: "ActorState") -> str:
        """Return a compact label used in debug output for the actor.

        Parameters
        ----------
        actor : ActorState
            Actor whose identifying label should be constructed.

        Returns
        -------
        str
            Human-readable identifier combining team, id, and role.
        """
        return f"{actor.team}{actor.actor_id} {actor.role}"

    def _log_player_event(
        self,
        actor: "ActorState",
        context: "PositioningContext",
        event_type: str,
        details: str,
    ) -> None:
        """Emit a structured debug line for the provided actor.

        Parameters
        ----------
        actor : ActorState
            Actor whose decision should be recorded in the debug log.
        context : PositioningContext
            Shared state for the current tick.
        event_type : str
            Short category label (for example ``"intent"``).
        details : str
            Free-form description that supplies event context.
        """
        debugger = self._player_debugger(context)
        if not debugger:
            return
        prefix = self._player_label(actor)
        debugger.log_match_event(context.now, event_type, f"{prefix} {details}")

    def _log_decision(
        self,
        actor: "ActorState",
        context: "PositioningContext",
        intent: Intent,
        **details: object,
    ) -> None:
        """Log an intent change along with optional key-value pairs.

        Parameters
        ----------
        actor : ActorState
            Actor whose intent is being documented.
        context : PositioningContext
            Shared state for the current tick.
        intent : Intent
            Newly selected intent.
        **details : object
            Keyword arguments containing structured telemetry to append.
        """
        if intent == actor.intent:
            return
        if not details:
            detail = f"{actor.intent}->{intent}"
        else:
            kv = " ".join(f"{key}={value}" for key, value in details.items())
            detail = f"{actor.intent}->{intent} {kv}"
        self._log_player_event(actor, context, "intent", detail)

    def decide_intent(self, actor: "ActorState", context: "PositioningContext") -> Intent:
        """Return the intent ``actor`` should hold for this tick.

        Parameters
        ----------
        actor : ActorState
            Actor being classified.
        context : PositioningContext
            Shared state for the current tick.

        Returns
        -------
        Intent
            Always a member of the closed intent set.
        """
        if context.holds_ball(actor):
            self._log_decision(actor, context, self.possession_intent, reason="holds_ball")
            return self.possession_intent

        pressing = self.pressing_intent(actor, context)
        if pressing is not None:
            self._log_decision(actor, context, pressing, reason="pressing")
            return pressing

        intent = self.classify(actor, context)
        if intent is None or not is_intent(intent):
            debugger = self._player_debugger(context)
            if debugger:
                debugger.log_error(
                    "INTENT_FALLBACK",
                    f"{self._player_label(actor)} could not be classified; using {self.idle_intent}",
                )
            return self.idle_intent
        self._log_decision(actor, context, intent)
        return intent

    def pressing_intent(self, actor: "ActorState", context: "PositioningContext") -> Optional[Intent]:
        """Return ``tackle`` or ``press`` when pressing mode draws the actor in.

        Parameters
        ----------
        actor : ActorState
            Actor being classified.
        context : PositioningContext
            Shared state for the current tick.

        Returns
        -------
        Optional[Intent]
            Pressing intent, or ``None`` when the branch does not apply.
        """
        config = context.config
        if not config.pressing_mode or not self.presses:
            return None
        if not context.opponent_in_possession(actor) or context.holder is None:
            return None
        distance = actor.distance_to(context.holder)
        if distance < config.tackle_distance:
            return "tackle"
        if distance < config.press_distance:
            return "press"
        return None

    def should_reevaluate(self, actor: "ActorState", context: "PositioningContext") -> bool:
        """Return ``True`` when the hysteresis rule allows a fresh classification.

        Parameters
        ----------
        actor : ActorState
            Actor being classified.
        context : PositioningContext
            Shared state for the current tick.

        Returns
        -------
        bool
            ``False`` only when nothing significant changed and the current
            intent already belongs to this role.
        """
        if actor.intent not in self.intents:
            return True
        return context.has_significant_change(actor)

    def classify(self, actor: "ActorState", context: "PositioningContext") -> Optional[Intent]:
        """Role-specific classification for actors not holding the ball.

        Parameters
        ----------
        actor : ActorState
            Actor being classified.
        context : PositioningContext
            Shared state for the current tick.

        Returns
        -------
        Optional[Intent]
            Selected intent, or ``None`` when the state cannot be classified.
        """
        return None
