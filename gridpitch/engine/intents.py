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
"""Closed vocabulary of behavioural intents."""

from __future__ import annotations

from typing import Literal, Tuple, assert_never, get_args

from gridpitch.models.player import Role

Intent = Literal[
    "hold_goal",
    "hold_line",
    "slide",
    "create_passing_angle",
    "maintain_triangle",
    "cover_opposite_space",
    "make_forward_run",
    "hold_up_play",
    "press_forward",
    "press",
    "tackle",
]

INTENTS: Tuple[Intent, ...] = get_args(Intent)

# Only reachable while pressing mode is switched on.
PRESSING_INTENTS: Tuple[Intent, ...] = ("press", "tackle")


def is_intent(value: object) -> bool:
    """Return ``True`` when ``value`` belongs to the closed intent set.

    Parameters
    ----------
    value : object
        Candidate intent.

    Returns
    -------
    bool
        Membership of :data:`INTENTS`.
    """
    return value in INTENTS


def idle_intent_for(role: Role) -> Intent:
    """Return the idle-safe default intent for ``role``.

    Parameters
    ----------
    role : Role
        Role code.

    Returns
    -------
    Intent
        Intent a fresh or unclassifiable actor of that role holds.
    """
    match role:
        case "GK":
            return "hold_goal"
        case "DF":
            return "hold_line"
        case "CM":
            return "cover_opposite_space"
        case "FW":
            return "press_forward"
        case _:
            assert_never(role)
