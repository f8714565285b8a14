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
"""Utilities that synthesise placeholder rosters for quick sessions."""
import random
from typing import List, Optional

from ultitrack.models.player import Gender, Player
from ultitrack.models.team import Team, TeamSide, as_side

FIRST_NAMES = ["Alex", "Sam", "Jordan", "Casey", "Riley", "Quinn", "Avery", "Rowan", "Sage", "Morgan"]
LAST_INITIALS = "ABCDEFGHJKLMNPRSTW"


def generate_random_player(player_id: str, name: Optional[str] = None, gender: Optional[Gender] = None) -> Player:
    """Generate a roster entry with a random name and gender category.

    Parameters
    ----------
    player_id : str
        Unique identifier assigned to the created player.
    name : Optional[str]
        Human-readable name to apply; a pseudo-random name is chosen when omitted.
    gender : Optional[Gender]
        Gender-matching category; random when ``None``.

    Returns
    -------
    Player
        A player whose jersey number is the ``"??"`` placeholder.
    """
    if name is None:
        name = f"{random.choice(FIRST_NAMES)} {random.choice(LAST_INITIALS)}."

    if gender is None:
        gender = random.choice([Gender.MALE, Gender.FEMALE])

    return Player(player_id=player_id, name=name, number="??", gender=gender)


def generate_team(side: str = "home", name: Optional[str] = None, size: int = 21) -> Team:
    """Generate a placeholder roster for one side.

    Parameters
    ----------
    side : {"home", "away"}
        Side the roster plays on; ids are prefixed with ``h`` or ``a``.
    name : Optional[str]
        Squad name to apply; defaults to the side name.
    size : int
        Number of players on the roster.

    Returns
    -------
    Team
        Roster alternating male and female matching players.
    """
    team_side = as_side(side)
    if size < 1:
        raise ValueError("size must be at least 1")

    prefix = "h" if team_side is TeamSide.HOME else "a"
    players: List[Player] = []
    for index in range(1, size + 1):
        gender = Gender.MALE if index % 2 else Gender.FEMALE
        players.append(generate_random_player(f"{prefix}{index}", gender=gender))

    return Team(side=team_side, name=name or team_side.value.title(), players=players)
