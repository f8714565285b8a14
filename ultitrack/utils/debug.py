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
"""Structured logging utilities used to trace scorekeeping sessions."""
import time
from collections import deque
from pathlib import Path
from threading import Lock
from typing import Deque, List, Optional, TextIO, Tuple


class GameDebugger:
    """Helper object that records structured game telemetry.

    Every entry is kept in a bounded in-memory buffer so the visualizer can
    show a live tail. When ``output_dir`` is given, entries are also streamed
    to a session file inside that directory.

    Parameters
    ----------
    output_dir : str | None, default=None
        Directory where session logs are created; created automatically when
        missing. ``None`` keeps the log in memory only.
    buffer_size : int, default=200
        Number of recent entries retained for :meth:`get_recent_events`.
    """

    def __init__(self, output_dir: Optional[str] = None, buffer_size: int = 200) -> None:
        """Initialise the debugger and start the first logging session.

        Parameters
        ----------
        output_dir : str | None
            Filesystem directory where log files are created, or ``None``.
        buffer_size : int
            Number of recent entries retained in memory.
        """
        self.output_dir = Path(output_dir) if output_dir is not None else None
        self.log_file: Optional[TextIO] = None
        self.session_start = time.strftime("%Y%m%d_%H%M%S")
        self._lock = Lock()
        self._line_number = 1
        self._recent_events: Deque[Tuple[int, str]] = deque(maxlen=buffer_size)
        if self.output_dir is not None:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            self.start_new_session()

    def start_new_session(self) -> None:
        """Start a new debug logging session file."""
        if self.output_dir is None:
            return
        if self.log_file:
            self.log_file.close()

        filename = f"game_debug_{self.session_start}.txt"
        self.log_file = open(self.output_dir / filename, "w", encoding="utf-8")
        self.log_file.write(f"=== Game Debug Session: {time.strftime('%Y-%m-%d %H:%M:%S')} ===\n\n")

    def log_game_event(self, event_type: str, description: str) -> None:
        """Log a recorded game event (catch, goal, etc.).

        Parameters
        ----------
        event_type : str
            Short label identifying the event category.
        description : str
            Human-readable summary of the event.
        """
        self._write_log("GAME_EVENT", f"Event: {event_type} | Details: {description}")

    def log_state(
        self,
        score: Tuple[int, int],
        possession: Optional[str],
        has_disc: Optional[str],
        event_count: int,
    ) -> None:
        """Log the derived game state after a transition.

        Parameters
        ----------
        score : tuple[int, int]
            ``(home, away)`` score.
        possession : str | None
            Side entitled to the disc, when known.
        has_disc : str | None
            Id of the player holding the disc, when any.
        event_count : int
            Length of the event log.
        """
        self._write_log(
            "GAME_STATE",
            f"Score: {score[0]}-{score[1]} | "
            f"Possession: {possession or '-'} | "
            f"Disc: {has_disc or '-'} | "
            f"Events: {event_count}",
        )

    def log_rejection(self, action: str, reason: str) -> None:
        """Log an input that left the game state unchanged.

        Parameters
        ----------
        action : str
            Name of the rejected operation.
        reason : str
            Why the input was ignored.
        """
        self._write_log("REJECTED", f"Action: {action} | Reason: {reason}")

    def log_warning(self, warning_type: str, description: str) -> None:
        """Log a soft-boundary violation that was accepted anyway.

        Parameters
        ----------
        warning_type : str
            Label describing the warning classification.
        description : str
            Human-readable explanation of the issue.
        """
        self._write_log("WARNING", f"Type: {warning_type} | Details: {description}")

    def _write_log(self, category: str, details: str) -> None:
        """Write a log entry to the buffer and, when open, the session file.

        Parameters
        ----------
        category : str
            Category label for the log entry.
        details : str
            Formatted message body to persist.
        """
        timestamp = time.strftime("%H:%M:%S")
        log_entry = f"[{timestamp}] {category}: {details}"

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
            selected = list(self._recent_events)[-limit:] if limit > 0 else []
        return [f"{line_no:05d} {entry}" for line_no, entry in selected]

    def close(self) -> None:
        """Close the log file."""
        if self.log_file:
            self.log_file.close()
            self.log_file = None
