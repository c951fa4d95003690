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
"""Central configuration for engine tuning parameters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple


@dataclass(slots=True)
class PitchConfig:
    """Grid dimensions and the orientation of the two teams.

    Parameters
    ----------
    width : int, default=6
        Number of grid columns.
    height : int, default=4
        Number of grid rows.
    left_to_right_team : str, default="A"
        Team identifier that attacks towards increasing x.
    shoot_lane_depth : int, default=2
        Columns in front of the attacking goal line that count as a shooting lane.
    """

    width: int = 6
    height: int = 4
    left_to_right_team: str = "A"
    shoot_lane_depth: int = 2


@dataclass(slots=True)
class ReplayConfig:
    """Timing for the two independent cadences driving a replay.

    Parameters
    ----------
    step_interval : float, default=0.5
        Seconds between authoritative log steps while playing.
    tick_interval : float, default=1/30
        Seconds between ambient positioning ticks.
    """

    step_interval: float = 0.5
    tick_interval: float = 1.0 / 30.0


@dataclass(slots=True)
class PositioningConfig:
    """Switches and thresholds for the intent state machine.

    Parameters
    ----------
    pressing_mode : bool, default=False
        Drive the side without the ball into ``press``/``tackle`` intents.
    freeze_micro_movement : bool, default=False
        Force every micro-offset to zero while intents keep updating.
    pressure_radius : float, default=1.5
        Radius (cells) within which an opponent counts as pressure.
    tackle_distance : float, default=1.5
        Distance to the holder below which pressing turns into a tackle.
    press_distance : float, default=2.5
        Distance to the holder below which pressing mode applies.
    passing_angle_min : float, default=1.5
        Lower bound of the "good passing angle" distance band.
    passing_angle_max : float, default=2.5
        Upper bound of the "good passing angle" distance band.
    reevaluate_after : float, default=3.0
        Seconds after the last intent change that force a re-evaluation.
    forward_run_probability : float, default=0.5
        Chance of a forward run when the opposing line sits in midfield.
    """

    pressing_mode: bool = False
    freeze_micro_movement: bool = False
    pressure_radius: float = 1.5
    tackle_distance: float = 1.5
    press_distance: float = 2.5
    passing_angle_min: float = 1.5
    passing_angle_max: float = 2.5
    reevaluate_after: float = 3.0
    forward_run_probability: float = 0.5


@dataclass(slots=True)
class MicroMovementConfig:
    """Amplitude and angular frequency of each intent's oscillation.

    Each entry maps an intent to ``(amplitude_x, amplitude_y, frequency)``
    where amplitudes are in cells and frequency in radians per second.

    Parameters
    ----------
    patterns : Dict[str, Tuple[float, float, float]]
        Oscillation parameters keyed by intent.
    triangle_distance : float, default=2.0
        Distance to the holder that ``maintain_triangle`` oscillates around.
    hold_up_lead : float, default=1.5
        Cells ahead of the holder that ``hold_up_play`` drifts towards.
    press_forward_bias : float, default=0.3
        Extra forward push added to ``press_forward`` along the attack direction.
    """

    patterns: Dict[str, Tuple[float, float, float]] = field(
        default_factory=lambda: {
            "hold_goal": (0.0, 0.2, 0.5),
            "hold_line": (0.4, 0.2, 0.5),
            "slide": (0.4, 0.2, 0.5),
            "create_passing_angle": (0.5, 0.4, 0.6),
            "maintain_triangle": (0.4, 0.4, 0.5),
            "cover_opposite_space": (0.5, 0.4, 0.6),
            "make_forward_run": (0.6, 0.4, 0.7),
            "hold_up_play": (0.5, 0.4, 0.6),
            "press_forward": (0.5, 0.5, 0.7),
            "press": (0.6, 0.6, 0.8),
            "tackle": (0.7, 0.7, 1.0),
        }
    )
    triangle_distance: float = 2.0
    hold_up_lead: float = 1.5
    press_forward_bias: float = 0.3


@dataclass(slots=True)
class PassDecisionConfig:
    """Cadence, filters, weights and trigger thresholds for autonomous passes.

    Parameters
    ----------
    evaluation_interval : float, default=0.5
        Minimum seconds between two evaluations.
    pass_duration : float, default=0.4
        Seconds an autonomous pass overlay stays on screen.
    pressure_radius : float, default=1.5
        Radius (cells) used to count opponents around holder and candidates.
    min_distance : float, default=1.0
        Closest a candidate may stand to the holder.
    max_distance : float, default=3.5
        Farthest a candidate may stand from the holder.
    view_dx : int, default=3
        Horizontal half-width of the candidate view box.
    view_dy : int, default=2
        Vertical half-height of the candidate view box.
    role_weights : Dict[str, int]
        Score added per candidate role.
    attack_bonus : int, default=20
        Score for candidates further advanced than the holder.
    free_bonus : int, default=25
        Score for candidates with no opponent nearby.
    pressure_penalty : int, default=10
        Score removed per opponent near the candidate.
    ideal_band : Tuple[float, float], default=(1.5, 2.5)
        Distance band rewarded by ``ideal_bonus``.
    ideal_bonus : int, default=15
        Score for candidates inside ``ideal_band``.
    close_penalty : int, default=10
        Score removed when the candidate is closer than the band.
    far_penalty : int, default=5
        Score removed when the candidate is further than the band.
    base_success : float, default=0.75
        Starting pass success probability.
    long_distance : float, default=2.5
        Distance above which ``long_penalty`` applies.
    long_penalty : float, default=0.15
        Probability removed for long passes.
    medium_distance : float, default=2.0
        Distance above which ``medium_penalty`` applies.
    medium_penalty : float, default=0.10
        Probability removed for medium passes.
    marker_penalty : float, default=0.08
        Probability removed per opponent near the candidate.
    movement_threshold : float, default=0.5
        Receiver micro-offset (L1 norm) above which ``movement_penalty`` applies.
    movement_penalty : float, default=0.05
        Probability removed for a receiver on the move.
    min_success : float, default=0.30
        Lower clamp for the success probability.
    max_success : float, default=0.95
        Upper clamp for the success probability.
    pressured_release_threshold : float, default=0.6
        Probability needed to pass with one opponent on the holder.
    attacking_threshold : float, default=0.8
        Probability needed for an unpressured forward pass.
    keep_alive_chance : float, default=0.15
        Draw threshold for an opportunistic pass when a decision-maker exists.
    keep_alive_chance_without_maker : float, default=0.10
        Draw threshold for an opportunistic pass without a decision-maker.
    midfield_link_threshold : float, default=0.7
        Probability needed for a midfielder-to-midfielder nudge.
    midfield_link_chance : float, default=0.3
        Draw threshold for the midfielder nudge.
    forward_release_threshold : float, default=0.65
        Probability needed for a pass into a forward.
    forward_release_chance : float, default=0.25
        Draw threshold for the forward nudge.
    """

    evaluation_interval: float = 0.5
    pass_duration: float = 0.4
    pressure_radius: float = 1.5
    min_distance: float = 1.0
    max_distance: float = 3.5
    view_dx: int = 3
    view_dy: int = 2
    role_weights: Dict[str, int] = field(default_factory=lambda: {"GK": 5, "DF": 15, "CM": 30, "FW": 30})
    attack_bonus: int = 20
    free_bonus: int = 25
    pressure_penalty: int = 10
    ideal_band: Tuple[float, float] = (1.5, 2.5)
    ideal_bonus: int = 15
    close_penalty: int = 10
    far_penalty: int = 5
    base_success: float = 0.75
    long_distance: float = 2.5
    long_penalty: float = 0.15
    medium_distance: float = 2.0
    medium_penalty: float = 0.10
    marker_penalty: float = 0.08
    movement_threshold: float = 0.5
    movement_penalty: float = 0.05
    min_success: float = 0.30
    max_success: float = 0.95
    pressured_release_threshold: float = 0.6
    attacking_threshold: float = 0.8
    keep_alive_chance: float = 0.15
    keep_alive_chance_without_maker: float = 0.10
    midfield_link_threshold: float = 0.7
    midfield_link_chance: float = 0.3
    forward_release_threshold: float = 0.65
    forward_release_chance: float = 0.25


@dataclass(slots=True)
class FormationConfig:
    """Default 7-a-side layout, expressed for the left-to-right team.

    The opposing side mirrors these cells across the vertical centre line.

    Parameters
    ----------
    role_counts : Dict[str, int]
        Number of actors per role.
    cells : Tuple[Tuple[str, Tuple[int, int]], ...]
        Ordered ``(role, cell)`` slots; the 1-based position becomes the actor id.
    """

    role_counts: Dict[str, int] = field(default_factory=lambda: {"GK": 1, "DF": 2, "CM": 2, "FW": 2})
    cells: Tuple[Tuple[str, Tuple[int, int]], ...] = (
        ("GK", (0, 2)),
        ("DF", (1, 1)),
        ("DF", (1, 2)),
        ("CM", (2, 0)),
        ("CM", (2, 3)),
        ("FW", (3, 1)),
        ("FW", (3, 2)),
    )


@dataclass(slots=True)
class EngineConfig:
    """Top-level container for all engine tuning structures.

    Parameters
    ----------
    pitch : PitchConfig, default=PitchConfig()
        Grid dimensions and team orientation.
    replay : ReplayConfig, default=ReplayConfig()
        Replay and ambient tick cadences.
    positioning : PositioningConfig, default=PositioningConfig()
        Intent state machine switches.
    micro_movement : MicroMovementConfig, default=MicroMovementConfig()
        Oscillation patterns per intent.
    passing : PassDecisionConfig, default=PassDecisionConfig()
        Autonomous pass engine tuning.
    formation : FormationConfig, default=FormationConfig()
        Default roster layout.
    """

    pitch: PitchConfig = field(default_factory=PitchConfig)
    replay: ReplayConfig = field(default_factory=ReplayConfig)
    positioning: PositioningConfig = field(default_factory=PositioningConfig)
    micro_movement: MicroMovementConfig = field(default_factory=MicroMovementConfig)
    passing: PassDecisionConfig = field(default_factory=PassDecisionConfig)
    formation: FormationConfig = field(default_factory=FormationConfig)


ENGINE_CONFIG = EngineConfig()
"""Singleton-style access to the engine configuration."""
