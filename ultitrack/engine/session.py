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
"""Interaction state that sits between the field surface and the engine.

A tap does not record anything on its own: it leaves a pending location and
opens a player menu whose meaning depends on whether someone holds the disc.
That transient state lives here so :class:`~ultitrack.engine.game_engine.GameState`
only ever contains what was actually recorded.
"""
from typing import List, Optional, Sequence, Union

from ultitrack.engine.events import EventType
from ultitrack.engine.field import Coordinate
from ultitrack.engine.game_engine import GameEngine, SelectionRole
from ultitrack.models.player import Player
from ultitrack.models.team import TeamSide


class ScorekeeperSession:
    """Translate taps and button presses into engine calls.

    Parameters
    ----------
    engine : GameEngine
        Engine receiving the resolved intents.
    """

    def __init__(self, engine: GameEngine) -> None:
        """Attach the session to ``engine`` with nothing pending.

        Parameters
        ----------
        engine : GameEngine
            Engine receiving the resolved intents.
        """
        self.engine = engine
        self.pending_location: Optional[Coordinate] = None
        self.selection_role: Optional[SelectionRole] = None
        self.menu_open = False

    @property
    def last_known_location(self) -> Optional[Coordinate]:
        """Pending tap, else the location of the last recorded event."""
        return self.engine.last_known_location(self.pending_location)

    def start_game(self) -> bool:
        """Start the game.

        Returns
        -------
        bool
            ``False`` when the game was already running.
        """
        return self.engine.start_game()

    def new_game(self) -> None:
        """Reset the engine and drop any pending interaction."""
        self.engine.new_game()
        self._clear()

    def tap_field(self, coordinate: Coordinate) -> Optional[SelectionRole]:
        """Register a tap and open the matching player selection.

        Parameters
        ----------
        coordinate : Coordinate
            Tap position in normalised field space.

        Returns
        -------
        SelectionRole | None
            ``THROWER`` when nobody holds the disc, ``RECEIVER`` otherwise,
            ``None`` when the game has not started and the tap was ignored.
        """
        if not self.engine.state.is_game_active:
            return None

        self.pending_location = coordinate
        self.selection_role = SelectionRole.RECEIVER if self.engine.state.has_disc else SelectionRole.THROWER
        self.menu_open = True
        return self.selection_role

    def selectable_players(self) -> List[Player]:
        """Return the players the open menu should list.

        Returns
        -------
        List[Player]
            Empty when no selection is open.
        """
        if not self.menu_open or self.selection_role is None:
            return []
        return self.engine.available_targets(self.selection_role)

    def select_player(self, player: Player) -> bool:
        """Resolve the open selection with ``player``.

        Parameters
        ----------
        player : Player
            Player picked from the menu.

        Returns
        -------
        bool
            ``False`` when no selection was open or there was no pending tap.
        """
        if self.selection_role is None:
            return False
        recorded = self.engine.select_target(self.selection_role, player, self.pending_location)
        if recorded:
            self._clear()
        return recorded

    def record_event(self, event_type: Union[EventType, str], player: Optional[Player] = None) -> bool:
        """Record a button-triggered event at the pending tap, if any.

        Parameters
        ----------
        event_type : EventType | str
            Event to record, typically throwaway, drop, pull or block.
        player : Player | None, optional
            Player to attach to the event.

        Returns
        -------
        bool
            ``False`` when the engine rejected the event.
        """
        recorded = self.engine.record_event(event_type, player, self.pending_location)
        if recorded:
            self._clear()
        return recorded

    def cancel_selection(self) -> None:
        """Close the player menu, keeping the pending tap."""
        self.menu_open = False

    def undo_last(self) -> bool:
        """Undo the last event and drop the pending tap.

        Returns
        -------
        bool
            ``False`` when there was nothing to undo.
        """
        undone = self.engine.undo_last()
        self.pending_location = None
        return undone

    def update_lineup(self, side: Union[TeamSide, str], player_ids: Sequence[str]) -> None:
        """Replace a side's lineup.

        Parameters
        ----------
        side : TeamSide | str
            Side whose lineup changes.
        player_ids : Sequence[str]
            New active player ids.
        """
        self.engine.update_lineup(side, player_ids)

    def _clear(self) -> None:
        """Drop the pending tap and close the selection."""
        self.pending_location = None
        self.selection_role = None
        self.menu_open = False
