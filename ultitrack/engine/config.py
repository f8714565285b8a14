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
"""Central configuration for field geometry and scorekeeping rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(slots=True)
class FieldConfig:
    """Physical dimensions of an ultimate field (WFDF standard).

    Parameters
    ----------
    width : float, default=37.0
        Total field width in metres.
    length : float, default=100.0
        Total field length in metres, both endzones included.
    endzone_depth : float, default=18.0
        Depth of each endzone measured from the back line.
    """

    width: float = 37.0
    length: float = 100.0
    endzone_depth: float = 18.0

    def __post_init__(self) -> None:
        """Reject geometry where the two endzones would overlap."""
        if self.width <= 0 or self.length <= 0:
            raise ValueError("field dimensions must be positive")
        if not 0 <= self.endzone_depth * 2 < self.length:
            raise ValueError("endzones must fit inside the field length")

    @property
    def endzone_percent(self) -> float:
        """Endzone depth expressed as a percentage of the field length."""
        return self.endzone_depth / self.length * 100


@dataclass(slots=True)
class GameConfig:
    """Game-format constants consumed by the engine.

    Parameters
    ----------
    lineup_size : int, default=7
        Players on the field per side. Collaborators cap lineup selection at
        this size; the engine only warns when it is exceeded.
    starting_side : str, default="home"
        Side that receives possession when a game starts.
    default_location : Tuple[float, float], default=(50.0, 50.0)
        Field-centre fallback used when an event has no tap and no history.
    undo_mode : str, default="replay"
        ``"replay"`` rebuilds score and possession from the truncated log,
        ``"legacy"`` only restores the disc holder.
    """

    lineup_size: int = 7
    starting_side: str = "home"
    default_location: Tuple[float, float] = (50.0, 50.0)
    undo_mode: str = "replay"

    def __post_init__(self) -> None:
        """Validate enumerated settings."""
        if self.starting_side not in {"home", "away"}:
            raise ValueError("starting_side must be either 'home' or 'away'")
        if self.undo_mode not in {"replay", "legacy"}:
            raise ValueError("undo_mode must be either 'replay' or 'legacy'")
        if self.lineup_size < 1:
            raise ValueError("lineup_size must be at least 1")


@dataclass(slots=True)
class DisplayConfig:
    """Window and trail settings for the pygame scorekeeper.

    Parameters
    ----------
    screen_size : Tuple[int, int], default=(480, 900)
        Initial window size in pixels.
    fps : int, default=30
        Frame cap for the render loop.
    visible_history : int, default=6
        Number of recent events drawn as the disc trail.
    """

    screen_size: Tuple[int, int] = (480, 900)
    fps: int = 30
    visible_history: int = 6


@dataclass(slots=True)
class EngineConfig:
    """Top-level container for all configuration blocks.

    Parameters
    ----------
    dimensions : FieldConfig, default=FieldConfig()
        Field dimension configuration.
    game : GameConfig, default=GameConfig()
        Scorekeeping rules and defaults.
    display : DisplayConfig, default=DisplayConfig()
        Visualizer settings.
    """

    dimensions: FieldConfig = field(default_factory=FieldConfig)
    game: GameConfig = field(default_factory=GameConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)


ENGINE_CONFIG = EngineConfig()
"""Singleton-style access to the engine configuration."""
