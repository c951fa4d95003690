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
from __future__ import annotations

from typing import Dict, Type

from gridpitch.engine.intents import Intent, idle_intent_for

from .base import RoleBehaviour
from .defenders import DefenderRoleBehaviour
from .forwards import ForwardRoleBehaviour
from .goalkeeper import GoalkeeperRoleBehaviour
from .midfielders import MidfielderRoleBehaviour

ROLE_BEHAVIOUR_CLASSES: Dict[str, Type[RoleBehaviour]] = {
    "GK": GoalkeeperRoleBehaviour,
    "DF": DefenderRoleBehaviour,
    "CM": MidfielderRoleBehaviour,
    "FW": ForwardRoleBehaviour,
}


def create_role_behaviour(role: str) -> RoleBehaviour:
    """Instantiate the behaviour registered for ``role``.

    Parameters
    ----------
    role : str
        Role code such as ``"CM"``.

    Returns
    -------
    RoleBehaviour
        Fresh behaviour instance.

    Raises
    ------
    ValueError
        If no behaviour is registered for ``role``.
    """
    try:
        behaviour_cls = ROLE_BEHAVIOUR_CLASSES[role]
    except KeyError as exc:
        known_roles = ", ".join(sorted(ROLE_BEHAVIOUR_CLASSES))
        raise ValueError(f"Unknown role '{role}'. Known roles: {known_roles}") from exc
    return behaviour_cls()


DEFAULT_INTENTS: Dict[str, Intent] = {role: idle_intent_for(role) for role in ROLE_BEHAVIOUR_CLASSES}

__all__ = [
    "RoleBehaviour",
    "GoalkeeperRoleBehaviour",
    "DefenderRoleBehaviour",
    "MidfielderRoleBehaviour",
    "ForwardRoleBehaviour",
    "ROLE_BEHAVIOUR_CLASSES",
    "DEFAULT_INTENTS",
    "create_role_behaviour",
    "idle_intent_for",
]
