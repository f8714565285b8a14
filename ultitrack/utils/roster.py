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
"""Utilities for constructing team rosters from serialized data sources.

The helpers in this module translate plain dictionaries or JSON payloads into
the roster objects the engine understands. They are used by the entry point,
the replay tool and the test fixtures. Missing optional values fall back to
placeholders so hand-edited roster files stay usable.
"""
import json
from pathlib import Path
from typing import Tuple, Union

from ultitrack.models.player import Gender, Player
from ultitrack.models.team import Team, TeamSide


def player_from_dict(d: dict) -> Player:
    """Build a ``Player`` from a plain dictionary payload.

    Parameters
    ----------
    d
        A mapping containing the serialized player information. Supported keys
        are ``id``, ``name``, ``number`` and ``gender`` (``"M"``, ``"F"`` or
        ``"Matching"``).

    Returns
    -------
    Player
        A roster entry with placeholders for any missing optional value.

    Raises
    ------
    KeyError
        Raised when the payload has no ``id``.
    ValueError
        Raised when ``gender`` is not a recognised category.
    """
    player_id = str(d["id"])
    return Player(
        player_id=player_id,
        name=d.get("name", f"player_{player_id}"),
        number=str(d.get("number", "??")),
        gender=Gender(d.get("gender", Gender.OPEN.value)),
    )


def load_teams_from_json(path: Union[str, Path]) -> Tuple[Team, Team]:
    """Load home and away rosters from the repository's JSON schema.

    Parameters
    ----------
    path
        The filesystem path to the JSON document following the
        ``data/players.json`` schema.

    Returns
    -------
    tuple[Team, Team]
        A pair of ``Team`` objects in ``(home, away)`` order.

    Raises
    ------
    FileNotFoundError
        Raised when ``path`` does not exist.
    KeyError
        Raised when the JSON payload is missing required top-level sections.

    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Players JSON not found: {path}")

    with p.open("r", encoding="utf-8") as fh:
        data = json.load(fh)

    def build_team(side: TeamSide) -> Team:
        tdata = data[side.value]
        players = [player_from_dict(pl) for pl in tdata.get("players", [])]
        return Team(side=side, name=tdata.get("name", side.value.title()), players=players)

    return build_team(TeamSide.HOME), build_team(TeamSide.AWAY)
