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
"""Utilities for loading match logs and rosters from serialized data.

The match-simulation backend writes plain JSON; these helpers translate it
into :class:`~gridpitch.engine.events.LogEvent` and
:class:`~gridpitch.models.team.Team` instances. Key aliases used by older
backend payloads (``player_id``, ``from_zone``/``to_zone``, ``result``) are
accepted so that logs can be replayed without preprocessing. Roster sections
that are missing fall back to the default 7-a-side layout.
"""
import json
from pathlib import Path
from typing import List, Optional, Tuple

from gridpitch.engine.config import ENGINE_CONFIG, FormationConfig
from gridpitch.engine.events import LogEvent
from gridpitch.engine.geometry import Cell, Pitch
from gridpitch.models.player import Actor
from gridpitch.models.team import Formation, Team


def _cell(value: object) -> Optional[Cell]:
    """Convert a JSON ``[x, y]`` pair into a cell tuple.

    Parameters
    ----------
    value : object
        Two-element sequence or ``None``.

    Returns
    -------
    Optional[Tuple[int, int]]
        Integer cell, or ``None`` when ``value`` is ``None``.
    """
    if value is None:
        return None
    x, y = value  # type: ignore[misc]
    return (int(x), int(y))


def event_from_dict(d: dict) -> LogEvent:
    """Build a ``LogEvent`` from one serialized log entry.

    Parameters
    ----------
    d
        Mapping with ``t``, ``type``, ``team``, ``actor_id`` (or
        ``player_id``), ``from_cell`` (or ``from_zone``), ``to_cell`` (or
        ``to_zone``) and ``outcome`` (or ``result``).

    Returns
    -------
    LogEvent
        Validated event.
    """
    actor_id = d.get("actor_id", d.get("player_id"))
    from_value = d.get("from_cell", d.get("from_zone"))
    to_value = d.get("to_cell", d.get("to_zone"))
    outcome = d.get("outcome", d.get("result"))
    return LogEvent(
        t=int(d.get("t", 0)),
        event_type=d["type"],
        team=str(d["team"]),
        actor_id=int(actor_id),
        from_cell=_cell(from_value),
        to_cell=_cell(to_value),
        outcome=outcome,
    )


def load_match_log(path: str) -> List[LogEvent]:
    """Load an ordered match log from JSON.

    Parameters
    ----------
    path
        File holding either a list of events or ``{"events": [...]}``.

    Returns
    -------
    List[LogEvent]
        Events in file order.

    Raises
    ------
    FileNotFoundError
        Raised when ``path`` does not exist.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Match log not found: {path}")

    with p.open("r", encoding="utf-8") as fh:
        data = json.load(fh)

    entries = data["events"] if isinstance(data, dict) else data
    return [event_from_dict(entry) for entry in entries]


def actor_from_dict(d: dict, team: str) -> Actor:
    """Build an ``Actor`` from a roster entry.

    Parameters
    ----------
    d
        Mapping with ``id``, ``role``, ``cell`` and an optional ``name``.
    team
        Team identifier the actor belongs to.

    Returns
    -------
    Actor
        Roster slot.
    """
    return Actor(
        team=team,
        actor_id=int(d["id"]),
        role=d.get("role", "CM"),
        start_cell=_cell(d["cell"]),
        name=d.get("name", ""),
    )


def default_team(team_id: str, pitch: Optional[Pitch] = None, formation: Optional[FormationConfig] = None) -> Team:
    """Lay out a team in the default 2-2-2 shape.

    Parameters
    ----------
    team_id : str
        Team identifier.
    pitch : Pitch | None, optional
        Field geometry; the team defending the right-hand goal gets mirrored
        cells.
    formation : FormationConfig | None, optional
        Layout to use; defaults to configuration.

    Returns
    -------
    Team
        Seven actors with ids ``1..7``.
    """
    pitch = pitch or Pitch()
    formation = formation or ENGINE_CONFIG.formation
    mirrored = pitch.attack_direction(team_id) < 0
    actors = []
    for index, (role, cell) in enumerate(formation.cells, start=1):
        start = pitch.mirror_cell(cell) if mirrored else cell
        actors.append(Actor(team=team_id, actor_id=index, role=role, start_cell=start))
    return Team(
        team_id=team_id,
        name=f"Team {team_id}",
        actors=actors,
        formation=Formation(name="2-2-2", role_counts=dict(formation.role_counts)),
    )


def default_teams(pitch: Optional[Pitch] = None) -> Tuple[Team, Team]:
    """Return both teams in the default layout.

    Parameters
    ----------
    pitch : Pitch | None, optional
        Field geometry.

    Returns
    -------
    Tuple[Team, Team]
        ``(left_to_right, right_to_left)`` teams, ``"A"`` and ``"B"`` by default.
    """
    pitch = pitch or Pitch()
    home_id = pitch.left_to_right_team
    away_id = "B" if home_id == "A" else "A"
    return default_team(home_id, pitch), default_team(away_id, pitch)


def load_roster_from_json(path: str, pitch: Optional[Pitch] = None) -> Tuple[Team, Team]:
    """Load both rosters, falling back to the default layout per missing team.

    Parameters
    ----------
    path
        JSON document keyed by team id, each section holding ``actors`` and
        an optional ``formation`` (``name`` and ``roles``).
    pitch : Pitch | None, optional
        Field geometry for the fallback layout.

    Returns
    -------
    Tuple[Team, Team]
        ``(left_to_right, right_to_left)`` teams.

    Raises
    ------
    FileNotFoundError
        Raised when ``path`` does not exist.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Roster JSON not found: {path}")

    with p.open("r", encoding="utf-8") as fh:
        data = json.load(fh)

    pitch = pitch or Pitch()
    defaults = default_teams(pitch)

    def build_team(fallback: Team) -> Team:
        tdata = data.get(fallback.team_id)
        if not tdata:
            return fallback
        actors = [actor_from_dict(entry, fallback.team_id) for entry in tdata.get("actors", [])]
        formation_data = tdata.get("formation", {}) or {}
        formation = Formation(
            name=formation_data.get("name", fallback.formation.name),
            role_counts=formation_data.get("roles", dict(fallback.formation.role_counts)),
        )
        return Team(
            team_id=fallback.team_id,
            name=tdata.get("name", fallback.name),
            actors=actors,
            formation=formation,
        )

    home, away = defaults
    return build_team(home), build_team(away)
