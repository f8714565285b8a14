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
"""Team sides and roster containers."""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Union

from ultitrack.models.player import Player


class TeamSide(str, Enum):
    """Binary team attribution used for possession and scoring."""

    HOME = "home"
    AWAY = "away"

    @property
    def opponent(self) -> "TeamSide":
        """The other side of the field."""
        return TeamSide.AWAY if self is TeamSide.HOME else TeamSide.HOME


def as_side(side: Union[TeamSide, str]) -> TeamSide:
    """Coerce ``"home"``/``"away"`` strings into :class:`TeamSide`.

    Parameters
    ----------
    side : TeamSide | str
        Side value as supplied by a caller.

    Returns
    -------
    TeamSide
        Matching enumeration member.

    Raises
    ------
    ValueError
        If ``side`` names neither team.
    """
    if isinstance(side, TeamSide):
        return side
    try:
        return TeamSide(str(side).lower())
    except ValueError:
        raise ValueError("side must be either 'home' or 'away'") from None


@dataclass
class Team:
    """Static roster for one side of a game.

    Parameters
    ----------
    side : TeamSide
        Which side of the scoreboard the team occupies.
    name : str
        Display name for the squad.
    players : List[Player]
        Complete roster, in the order the roster was supplied.
    """

    side: TeamSide
    name: str
    players: List[Player]

    def __post_init__(self) -> None:
        """Normalise the side and reject duplicate player ids."""
        self.side = as_side(self.side)
        seen = set()
        for player in self.players:
            if player.player_id in seen:
                raise ValueError(f"Duplicate player id on {self.name}: {player.player_id}")
            seen.add(player.player_id)

    def get_player(self, player_id: str) -> Optional[Player]:
        """Return the roster entry for ``player_id``.

        Parameters
        ----------
        player_id : str
            Identifier to look up.

        Returns
        -------
        Player | None
            The matching player, or ``None`` when the id is not on this roster.
        """
        return next((p for p in self.players if p.player_id == player_id), None)

    def default_lineup(self, size: int) -> List[str]:
        """Return the ids of the first ``size`` players on the roster.

        Parameters
        ----------
        size : int
            Number of players to put on the field.

        Returns
        -------
        List[str]
            Player ids in roster order.
        """
        return [p.player_id for p in self.players[:size]]


def build_player_index(*teams: Team) -> Dict[str, Player]:
    """Build an id lookup spanning every roster supplied.

    Parameters
    ----------
    *teams : Team
        Rosters to merge.

    Returns
    -------
    Dict[str, Player]
        Mapping from player id to roster entry.

    Raises
    ------
    ValueError
        If the same id appears on more than one roster.
    """
    index: Dict[str, Player] = {}
    for team in teams:
        for player in team.players:
            if player.player_id in index:
                raise ValueError(f"Player id {player.player_id} appears on more than one roster")
            index[player.player_id] = player
    return index
