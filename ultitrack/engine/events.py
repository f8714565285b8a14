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
"""Event domain models for the scorekeeping engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ultitrack.engine.field import Coordinate
from ultitrack.models.team import TeamSide, as_side


class EventType(str, Enum):
    """Closed set of things a scorekeeper can record."""

    PULL = "PULL"
    PICKUP = "PICKUP"
    CATCH = "CATCH"
    DROP = "DROP"
    THROWAWAY = "THROWAWAY"
    GOAL = "GOAL"
    D_BLOCK = "D_BLOCK"
    CALLAHAN = "CALLAHAN"
    TURNOVER = "TURNOVER"
    END_OF_QUARTER = "END_OF_QUARTER"

    @property
    def label(self) -> str:
        """Display form, for example ``"D BLOCK"``."""
        return self.value.replace("_", " ")


# Recorded at the last known disc location when no fresh tap was made.
LOCATION_OPTIONAL_EVENTS = frozenset({EventType.DROP, EventType.THROWAWAY})


@dataclass(frozen=True)
class GameEvent:
    """Immutable entry in the game log.

    Parameters
    ----------
    event_id : str
        Unique identifier generated when the event was recorded.
    event_type : EventType
        What happened.
    location : Coordinate
        Where it happened, in normalised field space.
    timestamp : float
        Wall-clock seconds since the epoch when the event was recorded.
    possession_side : TeamSide
        Side that held possession when the event was recorded.
    thrower_id : str | None, optional
        Player holding the disc when the event was recorded.
    receiver_id : str | None, optional
        Player selected for the event (catcher, scorer or pickup player).
    defender_id : str | None, optional
        Defensive player credited with the event, when named.
    """

    event_id: str
    event_type: EventType
    location: Coordinate
    timestamp: float
    possession_side: TeamSide
    thrower_id: Optional[str] = None
    receiver_id: Optional[str] = None
    defender_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the event into JSON-compatible primitives.

        The timestamp is written in whole epoch milliseconds.

        Returns
        -------
        Dict[str, Any]
            Mapping using the keys understood by :meth:`from_dict`.
        """
        return {
            "id": self.event_id,
            "type": self.event_type.value,
            "throwerId": self.thrower_id,
            "receiverId": self.receiver_id,
            "defenderId": self.defender_id,
            "location": {"x": self.location.x, "y": self.location.y},
            "timestamp": int(round(self.timestamp * 1000)),
            "possessionSide": self.possession_side.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameEvent":
        """Build an event from a mapping produced by :meth:`to_dict`.

        Parameters
        ----------
        data : Dict[str, Any]
            Serialised event with its timestamp in epoch milliseconds. Optional
            player keys may be missing or ``None``.

        Returns
        -------
        GameEvent
            Reconstructed immutable event.

        Raises
        ------
        ValueError
            If the event type or possession side is not recognised.
        KeyError
            If a required key is missing.
        """
        try:
            event_type = EventType(data["type"])
        except ValueError:
            raise ValueError(f"Unknown event type: {data['type']!r}") from None

        location = data["location"]
        return cls(
            event_id=str(data["id"]),
            event_type=event_type,
            location=Coordinate(float(location["x"]), float(location["y"])),
            timestamp=float(data["timestamp"]) / 1000.0,
            possession_side=as_side(data["possessionSide"]),
            thrower_id=data.get("throwerId"),
            receiver_id=data.get("receiverId"),
            defender_id=data.get("defenderId"),
        )

    def describe(self) -> str:
        """Return a one-line summary for logs.

        Returns
        -------
        str
            Event label, possession side and the players involved.
        """
        parts = [f"{self.event_type.label} ({self.possession_side.value})"]
        if self.thrower_id:
            parts.append(f"from {self.thrower_id}")
        if self.receiver_id:
            parts.append(f"to {self.receiver_id}")
        if self.defender_id:
            parts.append(f"by {self.defender_id}")
        parts.append(f"at ({self.location.x:.1f}, {self.location.y:.1f})")
        return " ".join(parts)
