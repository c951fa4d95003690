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
"""Tick controller merging the authoritative log with the ambient layer.

Two cadences drive a replay: a ``threading.Timer`` chain advances the log
step while playing, and an ambient loop calls :meth:`ReplayEngine.tick` at a
fixed interval. Either can run while the other is paused. All mutable state
(roster, overlay, local ball override) is only touched under the engine lock.
"""
import random
import threading
import time
from dataclasses import asdict, dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple

from gridpitch.engine.actor_state import (
    ActorState,
    PositioningContext,
    apply_log_positions,
    initial_roster,
    resolve_base_cells,
)
from gridpitch.engine.ball_state import BallOwner, BallState, resolve_ball_state
from gridpitch.engine.config import ENGINE_CONFIG, EngineConfig
from gridpitch.engine.events import LogEvent
from gridpitch.engine.geometry import Cell, Pitch, Vector2D
from gridpitch.engine.intents import Intent
from gridpitch.engine.pass_decision import PassDecisionEngine, PassOverlay
from gridpitch.engine.positioning import build_role_behaviours, update_positioning
from gridpitch.engine.roles import DEFAULT_INTENTS
from gridpitch.models.team import Team
from gridpitch.utils.debug import MatchDebugger


@dataclass(frozen=True, slots=True)
class DisplayActor:
    """Render-ready view of one actor.

    Parameters
    ----------
    team : str
        Team identifier.
    actor_id : int
        Identifier within the team.
    role : str
        Role code.
    base_cell : Tuple[int, int]
        Log-derived cell.
    position : Vector2D
        Base cell plus micro-offset, clamped to the field.
    intent : Intent
        Current intent, for debug labels.
    """

    team: str
    actor_id: int
    role: str
    base_cell: Cell
    position: Vector2D
    intent: Intent


@dataclass(frozen=True, slots=True)
class DisplayState:
    """Everything the rendering collaborator needs for one frame.

    Parameters
    ----------
    step : int
        Current replay step (``-1`` before kick-off).
    now : float
        Engine clock in seconds.
    actors : Tuple[DisplayActor, ...]
        All actors in roster order.
    ball : BallState
        Merged ball state.
    possession : BallOwner | None
        Actor credited with the ball; during an overlay this is the passer
        even though the ball itself is moving.
    overlay : PassOverlay | None
        Active pass animation, if any.
    """

    step: int
    now: float
    actors: Tuple[DisplayActor, ...]
    ball: BallState
    possession: Optional[BallOwner]
    overlay: Optional[PassOverlay]

    @property
    def overlay_path(self) -> Optional[Tuple[Cell, Cell, bool]]:
        """Return ``(source, destination, success)`` for the path indicator."""
        if self.overlay is None:
            return None
        return self.overlay.source_cell, self.overlay.destination_cell, self.overlay.success


def merge_display_state(
    log_ball: BallState,
    local_ball: Optional[BallState],
    overlay: Optional[PassOverlay],
    roster: Sequence[ActorState],
    pitch: Pitch,
    now: float,
    step: int,
) -> DisplayState:
    """Combine log, local override and overlay into one frame.

    Parameters
    ----------
    log_ball : BallState
        Resolver output for the current step.
    local_ball : BallState | None
        Result of the last completed overlay, valid until the step changes.
    overlay : PassOverlay | None
        Active pass animation.
    roster : Sequence[ActorState]
        Actors after this tick's positioning update.
    pitch : Pitch
        Field geometry for clamping.
    now : float
        Engine clock in seconds.
    step : int
        Current replay step.

    Returns
    -------
    DisplayState
        Frame for the renderer.
    """
    ball = local_ball or log_ball
    possession = ball.owner
    if overlay is not None:
        ball = overlay.in_flight_state(now)
        possession = overlay.passer

    actors = tuple(
        DisplayActor(
            team=a.team,
            actor_id=a.actor_id,
            role=a.role,
            base_cell=a.base_cell,
            position=a.display_position(pitch),
            intent=a.intent,
        )
        for a in roster
    )
    return DisplayState(step=step, now=now, actors=actors, ball=ball, possession=possession, overlay=overlay)


class ReplayEngine:
    """Replays a match log and keeps the field alive between its events.

    Parameters
    ----------
    events : Sequence[LogEvent]
        Authoritative log, treated as immutable.
    home_team : Team
        Team attacking left to right.
    away_team : Team
        Team attacking right to left.
    pitch : Pitch | None, optional
        Field geometry; defaults to configuration.
    config : EngineConfig | None, optional
        Tuning blocks; defaults to ``ENGINE_CONFIG``.
    rng : random.Random | None, optional
        Random source for forward runs and pass triggers.
    debugger : MatchDebugger | None, optional
        Observability channel.
    clock : Callable[[], float] | None, optional
        Monotonic clock; ``time.monotonic`` when omitted.
    """

    def __init__(
        self,
        events: Sequence[LogEvent],
        home_team: Team,
        away_team: Team,
        pitch: Optional[Pitch] = None,
        config: Optional[EngineConfig] = None,
        rng: Optional[random.Random] = None,
        debugger: Optional[MatchDebugger] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        """Build the initial roster and park the replay before kick-off.

        Parameters
        ----------
        events : Sequence[LogEvent]
            Authoritative log.
        home_team : Team
            Team attacking left to right.
        away_team : Team
            Team attacking right to left.
        pitch : Pitch | None
            Field geometry.
        config : EngineConfig | None
            Tuning blocks.
        rng : random.Random | None
            Random source.
        debugger : MatchDebugger | None
            Observability channel.
        clock : Callable[[], float] | None
            Monotonic clock.
        """
        self.events: Tuple[LogEvent, ...] = tuple(events)
        self.home_team = home_team
        self.away_team = away_team
        self.config = config or ENGINE_CONFIG
        self.pitch = pitch or Pitch(**asdict(self.config.pitch))
        self.rng = rng or random.Random()
        self.debugger = debugger
        self._clock = clock or time.monotonic
        self._origin = self._clock()
        self._lock = threading.RLock()

        actors = list(home_team.actors) + list(away_team.actors)
        self._start_cells: Dict[BallOwner, Cell] = {BallOwner(a.team, a.actor_id): a.start_cell for a in actors}
        self.roster: Tuple[ActorState, ...] = initial_roster(actors, DEFAULT_INTENTS)
        self.behaviours = build_role_behaviours()
        self.pass_engine = PassDecisionEngine(self.pitch, self.rng, self.config.passing, debugger)

        self.step = -1
        self.log_ball = resolve_ball_state(self.events, self.step, self.pitch)
        self.local_ball: Optional[BallState] = None
        self.overlay: Optional[PassOverlay] = None
        self.last_frame: Optional[DisplayState] = None

        self.is_playing = False
        self.is_running = False
        self._timer: Optional[threading.Timer] = None
        self._ambient_thread: Optional[threading.Thread] = None

    # ==================== REPLAY CADENCE ====================

    @property
    def at_end(self) -> bool:
        """Return ``True`` when the last log event has been applied."""
        return self.step >= len(self.events) - 1

    def now(self) -> float:
        """Return seconds elapsed on the engine clock.

        Returns
        -------
        float
            Time since the engine was created.
        """
        return self._clock() - self._origin

    def seek(self, step: int) -> int:
        """Jump to ``step`` and rebuild everything derived from the log.

        Pending timers, the active overlay and the local ball override are
        cleared before the new position takes effect.

        Parameters
        ----------
        step : int
            Requested step; clamped to ``[-1, len(events) - 1]``.

        Returns
        -------
        int
            The step actually applied.
        """
        with self._lock:
            self._cancel_timer()
            self.step = max(-1, min(step, len(self.events) - 1))
            self.overlay = None
            self.local_ball = None
            self.pass_engine.reset()
            self.log_ball = resolve_ball_state(self.events, self.step, self.pitch)
            cells = resolve_base_cells(self.events, self.step, self._start_cells)
            self.roster = apply_log_positions(self.roster, cells)
            self._log_step()
            if self.is_playing:
                self._schedule_next_step()
            return self.step

    def step_forward(self) -> bool:
        """Apply the next log event.

        Returns
        -------
        bool
            ``False`` when the replay was already at the end.
        """
        with self._lock:
            if self.at_end:
                return False
            self.seek(self.step + 1)
            return True

    def step_backward(self) -> bool:
        """Undo the most recent log event.

        Returns
        -------
        bool
            ``False`` when the replay was already before kick-off.
        """
        with self._lock:
            if self.step < 0:
                return False
            self.seek(self.step - 1)
            return True

    def reset(self) -> int:
        """Return to the first log event.

        Returns
        -------
        int
            The step applied (``0``, or ``-1`` for an empty log).
        """
        return self.seek(0)

    def play(self) -> None:
        """Advance the log on its own timer until paused or finished."""
        with self._lock:
            if self.is_playing:
                return
            self.is_playing = True
            self._schedule_next_step()

    def pause(self) -> None:
        """Stop advancing the log; ambient ticks are unaffected."""
        with self._lock:
            self.is_playing = False
            self._cancel_timer()

    def _schedule_next_step(self) -> None:
        """Arm the timer for the next log step."""
        if self.at_end:
            self.is_playing = False
            return
        self._timer = threading.Timer(self.config.replay.step_interval, self._on_step_timer)
        self._timer.daemon = True
        self._timer.start()

    def _cancel_timer(self) -> None:
        """Cancel the pending log step, if any."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_step_timer(self) -> None:
        """Timer callback advancing the log by one step."""
        with self._lock:
            # A timer cancelled while waiting for the lock must not advance.
            if not self.is_playing or threading.current_thread() is not self._timer:
                return
            self._timer = None
            self.step_forward()

    def _log_step(self) -> None:
        """Report the new replay position to the debugger."""
        if not self.debugger:
            return
        now = self.now()
        if self.step >= 0:
            event = self.events[self.step]
            detail = (
                f"step={self.step} {event.event_type} {event.team}{event.actor_id} "
                f"-> {event.to_cell} {event.outcome}"
            )
        else:
            detail = "step=-1 kick-off"
        self.debugger.log_match_event(now, "REPLAY_STEP", detail)
        owner = tuple(self.log_ball.owner) if self.log_ball.owner else None
        position = (self.log_ball.position.x, self.log_ball.position.y)
        self.debugger.log_ball_state(now, position, self.log_ball.motion, owner)
        for actor in self.roster:
            display = actor.display_position(self.pitch)
            self.debugger.log_actor_state(
                now, actor.team, actor.actor_id, actor.role, actor.base_cell, (display.x, display.y), actor.intent
            )

    # ==================== AMBIENT CADENCE ====================

    def current_ball(self) -> BallState:
        """Return the ball state the ambient layer reasons about.

        Returns
        -------
        BallState
            The local override when present, otherwise the resolver output.
        """
        with self._lock:
            return self.local_ball or self.log_ball

    def tick(self, now: Optional[float] = None) -> DisplayState:
        """Run one ambient tick and return the merged frame.

        The order is fixed: close a finished overlay, update intents and
        micro-offsets for every actor, then evaluate the pass engine at most
        once.

        Parameters
        ----------
        now : float | None, optional
            Engine clock in seconds; read from the clock when omitted.

        Returns
        -------
        DisplayState
            Frame for the renderer.
        """
        with self._lock:
            now = self.now() if now is None else now

            if self.overlay is not None and self.overlay.is_complete(now):
                self.local_ball = self.overlay.resolve()
                if self.debugger:
                    self.debugger.log_match_event(
                        now,
                        "AMBIENT_PASS_END",
                        f"success={self.overlay.success} ball={self.local_ball.motion} "
                        f"at {self.overlay.destination_cell}",
                    )
                self.overlay = None

            # Possession stays with the passer until the overlay resolves.
            ball = self.local_ball or self.log_ball
            context = PositioningContext(
                ball=ball,
                pitch=self.pitch,
                roster=self.roster,
                now=now,
                config=self.config.positioning,
                rng=self.rng,
                debugger=self.debugger,
            )
            self.roster = update_positioning(self.roster, context, self.behaviours, self.config.micro_movement)

            if self.pass_engine.is_due(now, ball, self.overlay):
                self.overlay = self.pass_engine.evaluate(self.roster, ball, now)

            self.last_frame = merge_display_state(
                self.log_ball, self.local_ball, self.overlay, self.roster, self.pitch, now, self.step
            )
            return self.last_frame

    def _run_ambient(self) -> None:
        """Call :meth:`tick` at the configured interval until stopped."""
        while self.is_running:
            self.tick()
            time.sleep(self.config.replay.tick_interval)

    def start(self) -> threading.Thread:
        """Start the ambient loop in a background thread.

        Returns
        -------
        threading.Thread
            The running ambient thread.
        """
        if self._ambient_thread is None or not self._ambient_thread.is_alive():
            self.is_running = True
            self._ambient_thread = threading.Thread(target=self._run_ambient, daemon=True)
            self._ambient_thread.start()
        return self._ambient_thread

    def stop(self) -> None:
        """Stop both cadences and wait for the ambient thread to exit."""
        self.pause()
        self.is_running = False
        if self._ambient_thread is not None:
            self._ambient_thread.join(timeout=1.0)
            self._ambient_thread = None
