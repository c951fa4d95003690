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
"""Structured logging utilities used to trace replays and ambient decisions."""
import time
from collections import deque
from pathlib import Path
from threading import Lock
from typing import TYPE_CHECKING, Deque, List, Optional, TextIO, Tuple

if TYPE_CHECKING:
    from gridpitch.engine.pass_decision import PassDecision


class MatchDebugger:
    """Helper object that streams structured replay telemetry.

    Every entry lands in a bounded in-memory ring; when an output directory is
    given the entries are also appended to a per-session text file.

    Parameters
    ----------
    output_dir : str | None, default="debug_logs"
        Directory where new session logs are created; created automatically
        when missing. ``None`` keeps the debugger memory-only.
    """

    def __init__(self, output_dir: Optional[str] = "debug_logs") -> None:
        """Initialise the debugger and start the first logging session.

        Parameters
        ----------
        output_dir : str | None
            Filesystem directory where log files are created, or ``None``.
        """
        self.output_dir = Path(output_dir) if output_dir is not None else None
        self.log_file: Optional[TextIO] = None
        self.session_start = time.strftime("%Y%m%d_%H%M%S")
        self._lock = Lock()
        self._line_number = 1
        self._recent_events: Deque[Tuple[int, str]] = deque(maxlen=200)
        if self.output_dir is not None:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            self.start_new_session()

    @property
    def log_path(self) -> Optional[Path]:
        """Return the path of the current session file, if any."""
        if self.output_dir is None:
            return None
        return self.output_dir / f"replay_debug_{self.session_start}.txt"

    def start_new_session(self) -> None:
        """Start a new debug logging session."""
        if self.log_path is None:
            return
        if self.log_file:
            self.log_file.close()

        self.log_file = open(self.log_path, "w", encoding="utf-8")
        self.log_file.write(f"=== Replay Debug Session: {time.strftime('%Y-%m-%d %H:%M:%S')} ===\n\n")

    def log_ball_state(
        self,
        now: float,
        position: tuple[float, float],
        motion: str,
        owner: tuple[str, int] | None = None,
    ) -> None:
        """Log the merged state of the ball.

        Parameters
        ----------
        now : float
            Engine clock in seconds.
        position : tuple[float, float]
            Ball coordinates in cells (x, y).
        motion : str
            ``"free"``, ``"owned"`` or ``"moving"``.
        owner : tuple[str, int] | None
            ``(team, actor_id)`` of the holder, when owned.
        """
        owner_str = f" | Owner: {owner[0]}{owner[1]}" if owner else ""
        self._write_log(
            "BALL_STATE",
            f"Time: {now:.2f}s | Pos: ({position[0]:.2f}, {position[1]:.2f}) | Motion: {motion}{owner_str}",
        )

    def log_actor_state(
        self,
        now: float,
        team: str,
        actor_id: int,
        role: str,
        base_cell: tuple[int, int],
        display: tuple[float, float],
        intent: str,
    ) -> None:
        """Log the positioning state of one actor.

        Parameters
        ----------
        now : float
            Engine clock in seconds.
        team : str
            Team identifier.
        actor_id : int
            Identifier within the team.
        role : str
            Role code such as ``"CM"``.
        base_cell : tuple[int, int]
            Log-derived cell.
        display : tuple[float, float]
            Base cell plus micro-offset, clamped to the field.
        intent : str
            Current behavioural intent.
        """
        self._write_log(
            "ACTOR_STATE",
            f"Time: {now:.2f}s | Actor {team}{actor_id} ({role}) | "
            f"Cell: ({base_cell[0]}, {base_cell[1]}) | "
            f"Display: ({display[0]:.2f}, {display[1]:.2f}) | Intent: {intent}",
        )

    def log_pass_decision(self, now: float, team: str, decision: "PassDecision") -> None:
        """Log the outcome of one autonomous pass evaluation.

        Parameters
        ----------
        now : float
            Engine clock in seconds.
        team : str
            Team whose possession was evaluated.
        decision : PassDecision
            Result returned by the pass engine.
        """
        target = ""
        if decision.candidate is not None:
            target = f" | Target: {decision.candidate.actor.team}{decision.candidate.actor.actor_id}"
        self._write_log(
            "PASS_DECISION",
            f"Time: {now:.2f}s | Team: {team} | Pass: {decision.should_pass} | "
            f"Reason: {decision.reason} | P: {decision.success_probability:.2f} | "
            f"Pressure: {decision.pressure}{target}",
        )

    def log_match_event(self, now: float, event_type: str, description: str) -> None:
        """Log a replay event (log step, overlay, seek).

        Parameters
        ----------
        now : float
            Engine clock in seconds.
        event_type : str
            Short label identifying the event category.
        description : str
            Human-readable summary of the event.
        """
        self._write_log("MATCH_EVENT", f"Time: {now:.2f}s | Event: {event_type} | Details: {description}")

    def log_error(self, error_type: str, description: str) -> None:
        """Log an error or warning.

        Parameters
        ----------
        error_type : str
            Label describing the error classification.
        description : str
            Human-readable explanation of the issue.
        """
        self._write_log("ERROR", f"Type: {error_type} | Details: {description}")

    def _write_log(self, event_type: str, details: str) -> None:
        """Write a log entry to the ring and, when open, the session file.

        Parameters
        ----------
        event_type : str
            Category label for the log entry.
        details : str
            Formatted message body to persist.
        """
        timestamp = time.strftime("%H:%M:%S")
        log_entry = f"[{timestamp}] {event_type}: {details}"

        with self._lock:
            line_no = self._line_number
            self._line_number += 1
            self._recent_events.append((line_no, log_entry))

            if self.log_file:
                self.log_file.write(f"{log_entry}\n")
                self.log_file.flush()

    def get_recent_events(self, limit: int = 20) -> List[str]:
        """Return the latest debug entries with line numbers for live displays.

        Parameters
        ----------
        limit : int
            Maximum number of entries to return.

        Returns
        -------
        List[str]
            Up to ``limit`` most recent log lines with prefixed line numbers.
        """
        with self._lock:
            selected = list(self._recent_events)[-limit:]
        return [f"{line_no:05d} {entry}" for line_no, entry in selected]

    def close(self) -> None:
        """Close the log file."""
        with self._lock:
            if self.log_file:
                self.log_file.close()
                self.log_file = None
