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
"""Domain models representing ultimate players on a roster."""
from dataclasses import dataclass
from enum import Enum


class Gender(str, Enum):
    """Gender-matching category printed on the roster."""

    MALE = "M"
    FEMALE = "F"
    OPEN = "Matching"


@dataclass(frozen=True)
class Player:
    """Immutable roster entry for a single player.

    Parameters
    ----------
    player_id : str
        Unique identifier for the player, for example ``"h1"``.
    name : str
        Human-readable player name.
    number : str
        Jersey number. Kept as text so leading zeros and placeholders such as
        ``"??"`` survive untouched.
    gender : Gender
        Gender-matching category used for mixed-division lines.
    """

    player_id: str
    name: str
    number: str
    gender: Gender = Gender.OPEN

    def __post_init__(self) -> None:
        """Ensure the player can be looked up by id."""
        if not self.player_id:
            raise ValueError("player_id must not be empty")

    @property
    def label(self) -> str:
        """Short ``#number name`` label used by menus and logs."""
        return f"#{self.number} {self.name}"
