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
"""Tests for the tap-and-select scorekeeping session."""

from __future__ import annotations

from pathlib import Path

from ultitrack.engine.events import EventType
from ultitrack.engine.field import Coordinate
from ultitrack.engine.game_engine import GameEngine, Score, SelectionRole
from ultitrack.engine.session import ScorekeeperSession
from ultitrack.models.team import TeamSide
from ultitrack.utils.roster import load_teams_from_json


def _build_session() -> ScorekeeperSession:
    """Create a started session over the fixture rosters."""
    data_file = Path(__file__).resolve().parents[1] / "data" / "players.json"
    home, away = load_teams_from_json(data_file)
    session = ScorekeeperSession(GameEngine(home, away))
    session.start_game()
    return session


def _pick(session: ScorekeeperSession, player_id: str) -> bool:
    player = session.engine.get_player(player_id)
    assert player is not None
    return session.select_player(player)


def test_tap_ignored_before_start() -> None:
    """Test taps do nothing before the game starts."""
    data_file = Path(__file__).resolve().parents[1] / "data" / "players.json"
    home, away = load_teams_from_json(data_file)
    session = ScorekeeperSession(GameEngine(home, away))

    assert session.tap_field(Coordinate(50, 50)) is None
    assert session.pending_location is None
    assert not session.menu_open


def test_tap_without_holder_selects_thrower() -> None:
    """Test a tap with no holder asks for a thrower."""
    session = _build_session()
    assert session.tap_field(Coordinate(40, 60)) is SelectionRole.THROWER
    assert session.menu_open
    assert session.pending_location == Coordinate(40, 60)
    assert [p.player_id for p in session.selectable_players()][0] == "h1"


def test_full_scenario_through_taps() -> None:
    """Pickup, goal in the endzone, then a throwaway at the last location."""
    session = _build_session()
    engine = session.engine

    session.tap_field(Coordinate(40, 60))
    assert _pick(session, "h1")
    assert engine.state.has_disc == "h1"
    assert engine.state.current_possession is TeamSide.HOME
    assert not session.menu_open
    assert session.pending_location is None

    assert session.tap_field(Coordinate(50, 10)) is SelectionRole.RECEIVER
    assert "h1" not in [p.player_id for p in session.selectable_players()]
    assert _pick(session, "h2")
    assert engine.state.events[-1].event_type is EventType.GOAL
    assert engine.state.score == Score(1, 0)
    assert engine.state.has_disc is None
    assert engine.state.current_possession is TeamSide.AWAY

    assert session.record_event(EventType.THROWAWAY)
    assert engine.state.events[-1].location == Coordinate(50, 10)
    assert engine.state.current_possession is TeamSide.HOME
    assert engine.state.has_disc is None


def test_midfield_receiver_is_a_catch() -> None:
    """Test a receiver picked at midfield records a catch."""
    session = _build_session()
    session.tap_field(Coordinate(40, 60))
    _pick(session, "h1")
    session.tap_field(Coordinate(55, 45))
    _pick(session, "h3")

    event = session.engine.state.events[-1]
    assert event.event_type is EventType.CATCH
    assert event.thrower_id == "h1"
    assert event.receiver_id == "h3"


def test_button_event_uses_pending_tap() -> None:
    """Test action buttons use the pending tap location."""
    session = _build_session()
    session.tap_field(Coordinate(50, 95))
    assert session.record_event(EventType.PULL)
    assert session.engine.state.events[-1].location == Coordinate(50, 95)
    assert session.pending_location is None
    assert not session.menu_open


def test_button_event_without_tap_is_rejected() -> None:
    """Test a pull without a tap is refused."""
    session = _build_session()
    assert not session.record_event(EventType.PULL)
    assert session.engine.state.events == ()


def test_select_without_tap_is_rejected() -> None:
    """Test picking a player without a tap is refused."""
    session = _build_session()
    assert not _pick(session, "h1")
    assert session.engine.state.events == ()


def test_cancel_keeps_pending_location() -> None:
    """Test cancelling closes the menu but keeps the tap."""
    session = _build_session()
    session.tap_field(Coordinate(20, 30))
    session.cancel_selection()
    assert not session.menu_open
    assert session.selectable_players() == []
    assert session.last_known_location == Coordinate(20, 30)


def test_undo_clears_pending_tap() -> None:
    """Test undo drops the pending tap."""
    session = _build_session()
    session.tap_field(Coordinate(40, 60))
    _pick(session, "h1")
    session.tap_field(Coordinate(45, 50))

    assert session.undo_last()
    assert session.pending_location is None
    assert session.engine.state.events == ()
    assert session.engine.state.has_disc is None
    assert not session.undo_last()


def test_new_game_drops_interaction_state() -> None:
    """Test a new game clears the selection state."""
    session = _build_session()
    session.tap_field(Coordinate(40, 60))
    session.new_game()
    assert session.pending_location is None
    assert session.selection_role is None
    assert session.engine.state.is_game_active


def test_update_lineup_passthrough() -> None:
    """Test lineup changes reach the engine."""
    session = _build_session()
    session.update_lineup("away", ["a10", "a11", "a12"])
    assert session.engine.state.active_lineup.away == ("a10", "a11", "a12")
