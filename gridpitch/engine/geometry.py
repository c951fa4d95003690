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
"""Grid geometry primitives shared by the replay engine.

The field is a small grid of integer cells. Authoritative positions are cells;
everything displayed on top of them (micro-offsets, an in-flight ball) is a
continuous :class:`Vector2D` measured in cells. The :class:`Pitch` knows the
grid bounds, the three vertical bands used for tactical zoning, and which way
each team attacks.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal, Optional, Tuple

from .config import ENGINE_CONFIG

Cell = Tuple[int, int]
ZoneBand = Literal["defense", "midfield", "attack"]


@dataclass(frozen=True)
class Vector2D:
    """Two-dimensional vector with convenience operations.

    Parameters
    ----------
    x : float
        Horizontal component measured in cells.
    y : float
        Vertical component measured in cells.
    """

    x: float
    y: float

    @classmethod
    def from_cell(cls, cell: Cell) -> "Vector2D":
        """Build a vector pointing at the centre of ``cell``.

        Parameters
        ----------
        cell : Tuple[int, int]
            Integer grid coordinate.

        Returns
        -------
        Vector2D
            Continuous equivalent of the cell.
        """
        return cls(float(cell[0]), float(cell[1]))

    def __add__(self, other: "Vector2D") -> "Vector2D":
        """Return the vector sum of ``self`` and ``other``."""
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2D") -> "Vector2D":
        """Return the vector difference ``self - other``."""
        return Vector2D(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vector2D":
        """Scale the vector by ``scalar`` while preserving direction."""
        return Vector2D(self.x * scalar, self.y * scalar)

    def magnitude(self) -> float:
        """Return the Euclidean length of the vector.

        Returns
        -------
        float
            Scalar magnitude measured in cells.
        """
        return math.sqrt(self.x * self.x + self.y * self.y)

    def manhattan(self) -> float:
        """Return the sum of absolute components.

        Returns
        -------
        float
            L1 norm of the vector.
        """
        return abs(self.x) + abs(self.y)

    def distance_to(self, other: "Vector2D") -> float:
        """Return the straight-line distance between ``self`` and ``other``.

        Parameters
        ----------
        other : Vector2D
            Vector whose separation from ``self`` should be measured.

        Returns
        -------
        float
            Euclidean distance in cells between the two points.
        """
        return (other - self).magnitude()

    def lerp(self, other: "Vector2D", fraction: float) -> "Vector2D":
        """Linearly interpolate towards ``other``.

        Parameters
        ----------
        other : Vector2D
            End point of the interpolation.
        fraction : float
            Progress in ``[0, 1]``; values outside are clamped.

        Returns
        -------
        Vector2D
            Point ``fraction`` of the way from ``self`` to ``other``.
        """
        fraction = max(0.0, min(1.0, fraction))
        return self + (other - self) * fraction


ZERO = Vector2D(0.0, 0.0)


def cell_distance(a: Cell, b: Cell) -> float:
    """Return the Euclidean distance between two grid cells.

    Parameters
    ----------
    a : Tuple[int, int]
        First cell.
    b : Tuple[int, int]
        Second cell.

    Returns
    -------
    float
        Distance in cells.
    """
    return math.hypot(a[0] - b[0], a[1] - b[1])


def sign(value: float) -> float:
    """Return ``-1``, ``0`` or ``1`` following the sign of ``value``.

    Parameters
    ----------
    value : float
        Number to inspect.

    Returns
    -------
    float
        Sign of ``value`` as a float.
    """
    if value > 0:
        return 1.0
    if value < 0:
        return -1.0
    return 0.0


class Pitch:
    """Rectangular grid with team orientation metadata.

    Parameters
    ----------
    width : int | None, optional
        Number of columns; defaults to configuration.
    height : int | None, optional
        Number of rows; defaults to configuration.
    left_to_right_team : str | None, optional
        Team attacking towards increasing x; defaults to configuration.
    shoot_lane_depth : int | None, optional
        Depth of the shooting lane in columns; defaults to configuration.
    """

    def __init__(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        left_to_right_team: Optional[str] = None,
        shoot_lane_depth: Optional[int] = None,
    ) -> None:
        """Initialise the grid from explicit values or the engine configuration.

        Parameters
        ----------
        width : int | None, optional
            Number of columns; defaults to configuration.
        height : int | None, optional
            Number of rows; defaults to configuration.
        left_to_right_team : str | None, optional
            Team attacking towards increasing x; defaults to configuration.
        shoot_lane_depth : int | None, optional
            Depth of the shooting lane in columns; defaults to configuration.
        """
        cfg = ENGINE_CONFIG.pitch
        self.width = width if width is not None else cfg.width
        self.height = height if height is not None else cfg.height
        self.left_to_right_team = left_to_right_team if left_to_right_team is not None else cfg.left_to_right_team
        self.shoot_lane_depth = shoot_lane_depth if shoot_lane_depth is not None else cfg.shoot_lane_depth

    def __repr__(self) -> str:
        """Return a compact debug representation."""
        return f"Pitch({self.width}x{self.height}, ltr={self.left_to_right_team!r})"

    def centre_cell(self) -> Cell:
        """Return the cell where the ball sits before kick-off.

        Returns
        -------
        Tuple[int, int]
            ``(width // 2, height // 2)``.
        """
        return (self.width // 2, self.height // 2)

    def centre(self) -> Vector2D:
        """Return the geometric centre of the field.

        Returns
        -------
        Vector2D
            ``(width / 2, height / 2)``.
        """
        return Vector2D(self.width / 2, self.height / 2)

    def zone_band(self, x: float) -> ZoneBand:
        """Classify an x coordinate into one of three equal vertical bands.

        Parameters
        ----------
        x : float
            Horizontal coordinate in cells.

        Returns
        -------
        ZoneBand
            ``"defense"``, ``"midfield"`` or ``"attack"`` (absolute, left to right).
        """
        third = self.width / 3
        if x < third:
            return "defense"
        if x < third * 2:
            return "midfield"
        return "attack"

    def attack_direction(self, team: str) -> int:
        """Return ``+1`` when ``team`` attacks towards increasing x, else ``-1``.

        Parameters
        ----------
        team : str
            Team identifier.

        Returns
        -------
        int
            Unit step along x towards the team's attacking goal.
        """
        return 1 if team == self.left_to_right_team else -1

    def attacking_goal_x(self, team: str) -> int:
        """Return the goal-line column that ``team`` attacks.

        Parameters
        ----------
        team : str
            Team identifier.

        Returns
        -------
        int
            ``width - 1`` or ``0``.
        """
        return self.width - 1 if self.attack_direction(team) > 0 else 0

    def is_further_advanced(self, team: str, x: float, reference_x: float) -> bool:
        """Return ``True`` when ``x`` is closer to the attacking goal than ``reference_x``.

        Parameters
        ----------
        team : str
            Team whose attacking direction applies.
        x : float
            Coordinate being compared.
        reference_x : float
            Coordinate it is compared against.

        Returns
        -------
        bool
            Whether ``x`` is strictly further up the field.
        """
        return (x - reference_x) * self.attack_direction(team) > 0

    def is_shooting_lane(self, team: str, cell: Cell) -> bool:
        """Return ``True`` when ``cell`` lets ``team`` shoot at goal.

        The lane covers the ``shoot_lane_depth`` columns nearest the attacking
        goal line, excluding the two touchline rows.

        Parameters
        ----------
        team : str
            Team in possession.
        cell : Tuple[int, int]
            Ball holder's cell.

        Returns
        -------
        bool
            Whether the holder is in a shooting position.
        """
        x, y = cell
        goal_x = self.attacking_goal_x(team)
        near_goal = abs(goal_x - x) < self.shoot_lane_depth
        central = 1 <= y <= self.height - 2
        return near_goal and central

    def mirror_cell(self, cell: Cell) -> Cell:
        """Reflect ``cell`` across the vertical centre line.

        Parameters
        ----------
        cell : Tuple[int, int]
            Cell expressed for the left-to-right team.

        Returns
        -------
        Tuple[int, int]
            Equivalent cell for the opposing team.
        """
        return (self.width - 1 - cell[0], cell[1])

    def clamp(self, position: Vector2D) -> Vector2D:
        """Clamp a continuous position to ``[0, width-1] x [0, height-1]``.

        Parameters
        ----------
        position : Vector2D
            Position to clamp.

        Returns
        -------
        Vector2D
            Position inside the grid.
        """
        x = max(0.0, min(float(self.width - 1), position.x))
        y = max(0.0, min(float(self.height - 1), position.y))
        return Vector2D(x, y)
