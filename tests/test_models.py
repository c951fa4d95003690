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
"""Tests for actor, formation, and team models."""

import pytest

from gridpitch.engine.events import LogEvent
from gridpitch.models.player import ROLES, Actor
from gridpitch.models.team import TEAM_SIZE, Formation, Team
from gridpitch.utils.roster import default_team


def _actors(team="A", roles=("GK", "DF", "DF", "CM", "CM", "FW", "FW")):
    return [Actor(team=team, actor_id=i, role=role, start_cell=(i % 6, i % 4)) for i, role in enumerate(roles, start=1)]


def _formation():
    return Formation(name="2-2-2", role_counts={"GK": 1, "DF": 2, "CM": 2, "FW": 2})


class TestActor:
    """Tests for Actor class."""

    def test_create_actor(self) -> None:
        actor = Actor(team="A", actor_id=4, role="CM", start_cell=(2, 0))
        assert actor.role == "CM"
        assert actor.start_cell == (2, 0)
        assert actor.name == "A4"

    def test_explicit_name_is_kept(self) -> None:
        assert Actor(team="B", actor_id=1, role="GK", start_cell=(5, 2), name="Keeper").name == "Keeper"

    def test_unknown_role_rejected(self) -> None:
        """Only the four grid roles are accepted."""
        with pytest.raises(ValueError):
            Actor(team="A", actor_id=1, role="ST", start_cell=(0, 0))

    def test_roles_are_closed(self) -> None:
        assert ROLES == ("GK", "DF", "CM", "FW")


class TestFormation:
    """Tests for Formation class."""

    def test_create_formation(self) -> None:
        formation = _formation()
        assert formation.name == "2-2-2"
        assert sum(formation.role_counts.values()) == TEAM_SIZE

    def test_wrong_size_rejected(self) -> None:
        with pytest.raises(ValueError):
            Formation(name="bad", role_counts={"GK": 1, "DF": 2, "CM": 2, "FW": 1})

    def test_goalkeeper_required(self) -> None:
        with pytest.raises(ValueError):
            Formation(name="bad", role_counts={"DF": 3, "CM": 2, "FW": 2})


class TestTeam:
    """Tests for Team class."""

    def test_create_team(self) -> None:
        team = Team(team_id="A", name="Team A", actors=_actors(), formation=_formation())
        assert len(team.actors) == TEAM_SIZE
        assert [a.actor_id for a in team.get_actors_by_role("CM")] == [4, 5]

    def test_wrong_actor_count(self) -> None:
        with pytest.raises(ValueError):
            Team(team_id="A", name="Team A", actors=_actors()[:6], formation=_formation())

    def test_foreign_actor_rejected(self) -> None:
        actors = _actors()
        actors[3] = Actor(team="B", actor_id=4, role="CM", start_cell=(3, 0))
        with pytest.raises(ValueError):
            Team(team_id="A", name="Team A", actors=actors, formation=_formation())

    def test_duplicate_ids_rejected(self) -> None:
        actors = _actors()
        actors[6] = Actor(team="A", actor_id=6, role="FW", start_cell=(3, 2))
        with pytest.raises(ValueError):
            Team(team_id="A", name="Team A", actors=actors, formation=_formation())

    def test_roles_must_match_formation(self) -> None:
        actors = _actors(roles=("GK", "DF", "DF", "DF", "CM", "FW", "FW"))
        with pytest.raises(ValueError):
            Team(team_id="A", name="Team A", actors=actors, formation=_formation())

    def test_default_layout(self) -> None:
        """The default 2-2-2 layout mirrors for the right-to-left side."""
        home = default_team("A")
        away = default_team("B")
        assert [a.actor_id for a in home.actors] == list(range(1, 8))
        assert home.actors[0].start_cell == (0, 2)
        assert away.actors[0].start_cell == (5, 2)
        assert away.actors[5].start_cell == (2, 1)


class TestLogEvent:
    """Tests for LogEvent validation."""

    def test_create_event(self) -> None:
        event = LogEvent(3, "pass", "A", 4, (2, 2), (3, 1), "success")
        assert event.to_cell == (3, 1)
        assert LogEvent(0, "move", "A", 4, (2, 2), (3, 2)).outcome is None

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ValueError):
            LogEvent(0, "dribble", "A", 4, (2, 2), (3, 2))

    def test_unknown_outcome_rejected(self) -> None:
        with pytest.raises(ValueError):
            LogEvent(0, "shoot", "A", 6, (4, 2), (5, 2), "saved")
