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
"""Intent assignment and cosmetic micro-positioning for every actor.

Each ambient tick classifies all fourteen actors against one shared
:class:`~gridpitch.engine.actor_state.PositioningContext`, then derives a small
sinusoidal offset per intent. Offsets are display-only: base cells belong to
the log and are never touched here.
"""
from __future__ import annotations

import math
from dataclasses import replace
from typing import Dict, Mapping, Optional, Sequence, Tuple, assert_never

from .actor_state import ActorState, PositioningContext
from .config import ENGINE_CONFIG, MicroMovementConfig
from .geometry import ZERO, Vector2D, sign
from .intents import Intent
from .roles import ROLE_BEHAVIOUR_CLASSES, RoleBehaviour, create_role_behaviour


def build_role_behaviours() -> Dict[str, RoleBehaviour]:
    """Instantiate one behaviour per registered role.

    Returns
    -------
    Dict[str, RoleBehaviour]
        Behaviour keyed by role code.
    """
    return {role: create_role_behaviour(role) for role in ROLE_BEHAVIOUR_CLASSES}


def decide_intent(
    actor: ActorState,
    context: PositioningContext,
    behaviour: Optional[RoleBehaviour] = None,
) -> Intent:
    """Classify one actor for the current tick.

    Parameters
    ----------
    actor : ActorState
        Actor being classified.
    context : PositioningContext
        Shared state for the current tick.
    behaviour : RoleBehaviour | None, optional
        Behaviour to use; a fresh one for ``actor.role`` when omitted.

    Returns
    -------
    Intent
        Concrete intent, never unset.
    """
    behaviour = behaviour or create_role_behaviour(actor.role)
    return behaviour.decide_intent(actor, context)


def _towards(origin: Vector2D, target: Vector2D) -> Tuple[float, float]:
    """Return the per-axis sign of the direction from ``origin`` to ``target``.

    Parameters
    ----------
    origin : Vector2D
        Starting point.
    target : Vector2D
        Reference point.

    Returns
    -------
    Tuple[float, float]
        ``(sign(dx), sign(dy))``.
    """
    return sign(target.x - origin.x), sign(target.y - origin.y)


def calculate_micro_offset(
    actor: ActorState,
    context: PositioningContext,
    elapsed: float,
    config: Optional[MicroMovementConfig] = None,
) -> Vector2D:
    """Compute the display-only offset for ``actor`` at ``elapsed`` seconds.

    Parameters
    ----------
    actor : ActorState
        Actor carrying the already resolved intent.
    context : PositioningContext
        Shared state for the current tick.
    elapsed : float
        Seconds since the actor adopted its current intent.
    config : MicroMovementConfig | None, optional
        Oscillation table; defaults to configuration.

    Returns
    -------
    Vector2D
        Offset such that ``base_cell + offset`` stays on the field; always
        zero while micro-movement is frozen.
    """
    if context.config.freeze_micro_movement:
        return ZERO

    cfg = config or ENGINE_CONFIG.micro_movement
    amp_x, amp_y, freq = cfg.patterns[actor.intent]
    wave = math.sin(elapsed * freq)
    base = actor.position
    ball = context.ball.position
    holder = context.holder.position if context.holder is not None else None
    forward = context.pitch.attack_direction(actor.team)

    offset_x = 0.0
    offset_y = 0.0
    intent = actor.intent
    match intent:
        case "hold_goal":
            offset_y = wave * amp_y
        case "hold_line" | "slide":
            offset_x = wave * sign(ball.x - base.x) * amp_x
            offset_y = math.sin(elapsed * freq * 0.6) * amp_y
        case "create_passing_angle":
            if holder is not None:
                dir_x, dir_y = _towards(base, holder)
                distance = base.distance_to(holder)
                if distance < context.config.passing_angle_min:
                    offset_x, offset_y = -wave * dir_x * amp_x, -wave * dir_y * amp_x
                elif distance > context.config.passing_angle_max:
                    offset_x, offset_y = wave * dir_x * amp_x, wave * dir_y * amp_x
                else:
                    offset_x = wave * amp_x
                    offset_y = math.cos(elapsed * freq) * amp_y
        case "maintain_triangle":
            if holder is not None:
                dir_x, dir_y = _towards(base, holder)
                away = -1.0 if base.distance_to(holder) < cfg.triangle_distance else 1.0
                offset_x = wave * away * dir_x * amp_x
                offset_y = wave * away * dir_y * amp_y
        case "cover_opposite_space":
            opposite_x = context.pitch.width - 1 - ball.x
            offset_x = wave * (1.0 if opposite_x > base.x else -1.0) * amp_x
            offset_y = math.sin(elapsed * freq * 1.2) * amp_y
        case "make_forward_run":
            offset_x = wave * forward * amp_x
            offset_y = math.cos(elapsed * freq) * amp_y
        case "hold_up_play":
            if holder is not None:
                target = Vector2D(holder.x + forward * cfg.hold_up_lead, holder.y)
                dir_x, dir_y = _towards(base, target)
                offset_x = wave * dir_x * amp_x
                offset_y = wave * dir_y * amp_y
        case "press_forward":
            dir_x, dir_y = _towards(base, ball)
            offset_x = wave * (dir_x + forward * cfg.press_forward_bias) * amp_x
            offset_y = wave * dir_y * amp_y
        case "press" | "tackle":
            dir_x, dir_y = _towards(base, holder if holder is not None else ball)
            offset_x = wave * dir_x * amp_x
            offset_y = wave * dir_y * amp_y
        case _:
            assert_never(intent)

    display = context.pitch.clamp(Vector2D(base.x + offset_x, base.y + offset_y))
    return display - base


def update_positioning(
    roster: Sequence[ActorState],
    context: PositioningContext,
    behaviours: Optional[Mapping[str, RoleBehaviour]] = None,
    config: Optional[MicroMovementConfig] = None,
) -> Tuple[ActorState, ...]:
    """Advance every actor's intent and micro-offset by one tick.

    Parameters
    ----------
    roster : Sequence[ActorState]
        Actors as of the start of the tick.
    context : PositioningContext
        Shared state built from the same roster.
    behaviours : Mapping[str, RoleBehaviour] | None, optional
        Behaviour per role code; built on demand when omitted.
    config : MicroMovementConfig | None, optional
        Oscillation table; defaults to configuration.

    Returns
    -------
    Tuple[ActorState, ...]
        New actor states in roster order, each carrying the tick's snapshot.
    """
    behaviours = behaviours or build_role_behaviours()
    snapshot = context.snapshot()
    now = context.now

    updated = []
    for actor in roster:
        intent = behaviours[actor.role].decide_intent(actor, context)
        changed_at = now if intent != actor.intent else actor.last_intent_change_time
        classified = replace(actor, intent=intent, last_intent_change_time=changed_at)
        offset = calculate_micro_offset(classified, context, now - changed_at, config)
        updated.append(replace(classified, micro_offset=offset, last_update_time=now, snapshot=snapshot))
    return tuple(updated)
