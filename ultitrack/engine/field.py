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
"""Normalised field space and the geometry helpers built on it.

Taps are recorded as percentages of the field rather than metres so the
engine never needs to know how large the rendered field is. ``x`` runs across
the width and ``y`` along the length, with ``y = 0`` at the top back line.
:class:`FieldGeometry` converts those percentages back to metres and answers
the one spatial question the scorekeeping rules care about: whether a catch
landed in an endzone.
"""
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import ENGINE_CONFIG, FieldConfig


@dataclass(frozen=True)
class Coordinate:
    """Point in normalised field space.

    Parameters
    ----------
    x : float
        Percentage of field width, nominally ``0`` to ``100``.
    y : float
        Percentage of field length, nominally ``0`` to ``100``.
    """

    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        """Return the coordinate as a plain ``(x, y)`` pair.

        Returns
        -------
        Tuple[float, float]
            Width and length percentages.
        """
        return (self.x, self.y)


class FieldGeometry:
    """Converts normalised coordinates into real field measurements.

    Parameters
    ----------
    config : FieldConfig | None, optional
        Field dimensions; defaults to ``ENGINE_CONFIG.dimensions``.
    """

    def __init__(self, config: Optional[FieldConfig] = None) -> None:
        """Bind the geometry to a set of field dimensions.

        Parameters
        ----------
        config : FieldConfig | None, optional
            Field dimensions; defaults to ``ENGINE_CONFIG.dimensions``.
        """
        cfg = config if config is not None else ENGINE_CONFIG.dimensions
        self.width = cfg.width
        self.length = cfg.length
        self.endzone_depth = cfg.endzone_depth
        self.endzone_percent = cfg.endzone_percent

    def is_in_endzone(self, position: Coordinate) -> bool:
        """Check whether ``position`` lies in either endzone band.

        Parameters
        ----------
        position : Coordinate
            Tap location to classify.

        Returns
        -------
        bool
            ``True`` when the length coordinate is strictly inside the top or
            bottom endzone.
        """
        return position.y < self.endzone_percent or position.y > 100 - self.endzone_percent

    def is_in_bounds(self, position: Coordinate) -> bool:
        """Check if ``position`` falls on the field.

        Parameters
        ----------
        position : Coordinate
            Location to check.

        Returns
        -------
        bool
            ``True`` when both components are within ``[0, 100]``.
        """
        return 0 <= position.x <= 100 and 0 <= position.y <= 100

    def to_metres(self, position: Coordinate) -> Tuple[float, float]:
        """Convert a normalised coordinate to metres from the top-left corner.

        Parameters
        ----------
        position : Coordinate
            Location in percentage space.

        Returns
        -------
        Tuple[float, float]
            ``(across, along)`` offsets in metres.
        """
        return (position.x * self.width / 100, position.y * self.length / 100)

    def distance(self, start: Coordinate, end: Coordinate) -> float:
        """Return the straight-line distance between two taps in metres.

        Parameters
        ----------
        start : Coordinate
            Where the throw was released.
        end : Coordinate
            Where the throw ended.

        Returns
        -------
        float
            Euclidean distance in metres.
        """
        dx = (end.x - start.x) * self.width / 100
        dy = (end.y - start.y) * self.length / 100
        return math.sqrt(dx * dx + dy * dy)

    def gain(self, start: Coordinate, end: Coordinate) -> float:
        """Return the signed length-axis progress between two taps in metres.

        Parameters
        ----------
        start : Coordinate
            Where the throw was released.
        end : Coordinate
            Where the throw ended.

        Returns
        -------
        float
            Positive when the disc moved towards the bottom back line.
        """
        return (end.y - start.y) * self.length / 100
