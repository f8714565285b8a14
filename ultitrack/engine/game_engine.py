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
"""Possession and scoring state machine for a live ultimate game.

The engine owns a single immutable :class:`GameState` value. Every operation
derives a new value from the old one plus one input and swaps it in, so the
presentation layer can hold on to a snapshot without it changing underneath
it. Transitions are expressed by the pure :func:`apply_event`, which is also
what undo replays when rebuilding a truncated log.

Input that cannot be applied (no location for a catch, nothing to undo, a
second start) leaves the state object untouched and is reported by a
``False`` return and a ``REJECTED`` debug line rather than an exception.
"""
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union
from uuid import uuid4

from ultitrack.engine.config import ENGINE_CONFIG, EngineConfig
from ultitrack.engine.events import LOCATION_OPTIONAL_EVENTS, EventType, GameEvent
from ultitrack.engine.field import Coordinate, FieldGeometry
from ultitrack.models.player import Player
from ultitrack.models.team import Team, TeamSide, as_side, build_player_index
from ultitrack.utils.debug import GameDebugger

DISC_TAKING_EVENTS = frozenset({EventType.PICKUP, EventType.CATCH})
TURNOVER_EVENTS = frozenset({EventType.DROP, EventType.THROWAWAY, EventType.D_BLOCK})


class SelectionRole(str, Enum):
    """Which player the scorekeeper is being asked to pick after a tap."""

    THROWER = "THROWER"
    RECEIVER = "RECEIVER"


@dataclass(frozen=True)
class Score:
    """Running score tally.

    Parameters
    ----------
    home : int, default=0
        Goals scored by the home side.
    away : int, default=0
        Goals scored by the away side.
    """

    home: int = 0
    away: int = 0

    def for_side(self, side: TeamSide) -> int:
        """Return the goals scored by ``side``.

        Parameters
        ----------
        side : TeamSide
            Side to read.

        Returns
        -------
        int
            Current goal count.
        """
        return self.home if as_side(side) is TeamSide.HOME else self.away

    def incremented(self, side: TeamSide) -> "Score":
        """Return a copy with one more goal for ``side``.

        Parameters
        ----------
        side : TeamSide
            Scoring side.

        Returns
        -------
        Score
            New tally.
        """
        if as_side(side) is TeamSide.HOME:
            return Score(self.home + 1, self.away)
        return Score(self.home, self.away + 1)

    def as_tuple(self) -> Tuple[int, int]:
        """Return the score as ``(home, away)``.

        Returns
        -------
        Tuple[int, int]
            Home goals followed by away goals.
        """
        return (self.home, self.away)


@dataclass(frozen=True)
class Lineups:
    """Players currently on the field for each side.

    Parameters
    ----------
    home : Tuple[str, ...], default=()
        Active home player ids.
    away : Tuple[str, ...], default=()
        Active away player ids.
    """

    home: Tuple[str, ...] = ()
    away: Tuple[str, ...] = ()

    def for_side(self, side: TeamSide) -> Tuple[str, ...]:
        """Return the active ids for ``side``.

        Parameters
        ----------
        side : TeamSide
            Side to read.

        Returns
        -------
        Tuple[str, ...]
            Player ids in the order they were supplied.
        """
        return self.home if as_side(side) is TeamSide.HOME else self.away

    def replaced(self, side: TeamSide, player_ids: Iterable[str]) -> "Lineups":
        """Return a copy with ``side``'s lineup swapped for ``player_ids``.

        Parameters
        ----------
        side : TeamSide
            Side whose lineup changes.
        player_ids : Iterable[str]
            New active ids. Duplicates are dropped, order is kept.

        Returns
        -------
        Lineups
            Updated lineups.
        """
        ids = tuple(dict.fromkeys(player_ids))
        if as_side(side) is TeamSide.HOME:
            return Lineups(home=ids, away=self.away)
        return Lineups(home=self.home, away=ids)


@dataclass(frozen=True)
class GameState:
    """Authoritative game snapshot.

    Parameters
    ----------
    events : Tuple[GameEvent, ...], default=()
        Event log in recording order.
    score : Score, default=Score()
        Running score.
    current_possession : TeamSide | None, default=None
        Side entitled to the disc; ``None`` before the game starts.
    has_disc : str | None, default=None
        Id of the player holding the disc, ``None`` between possessions.
    is_game_active : bool, default=False
        Whether the game has been started.
    active_lineup : Lineups, default=Lineups()
        Players on the field per side.
    """

    events: Tuple[GameEvent, ...] = ()
    score: Score = Score()
    current_possession: Optional[TeamSide] = None
    has_disc: Optional[str] = None
    is_game_active: bool = False
    active_lineup: Lineups = Lineups()

    @property
    def last_event(self) -> Optional[GameEvent]:
        """Most recently recorded event, if any."""
        return self.events[-1] if self.events else None


def apply_event(state: GameState, event: GameEvent) -> GameState:
    """Append ``event`` to ``state`` and derive score, possession and holder.

    Parameters
    ----------
    state : GameState
        State before the event.
    event : GameEvent
        Fully built event. Its ``possession_side`` decides who scores on a
        goal and which side possession flips away from.

    Returns
    -------
    GameState
        New state with the event appended.
    """
    event_type = event.event_type
    score = state.score
    possession = state.current_possession
    has_disc = state.has_disc

    if event_type in DISC_TAKING_EVENTS:
        has_disc = event.receiver_id
    elif event_type is EventType.GOAL:
        # The conceding side pulls, so possession for the next point flips.
        score = score.incremented(event.possession_side)
        possession = event.possession_side.opponent
        has_disc = None
    elif event_type in TURNOVER_EVENTS:
        possession = event.possession_side.opponent
        has_disc = None
    elif event_type is EventType.PULL:
        pass
    else:
        # CALLAHAN, TURNOVER and END_OF_QUARTER are logged only.
        pass

    return replace(
        state,
        events=state.events + (event,),
        score=score,
        current_possession=possession,
        has_disc=has_disc,
    )


def replay_events(baseline: GameState, events: Iterable[GameEvent]) -> GameState:
    """Fold ``events`` onto ``baseline`` through :func:`apply_event`.

    Parameters
    ----------
    baseline : GameState
        Starting state, normally a freshly started game with an empty log.
    events : Iterable[GameEvent]
        Events to apply in order.

    Returns
    -------
    GameState
        State after every event has been applied.
    """
    state = baseline
    for event in events:
        state = apply_event(state, event)
    return state


class GameEngine:
    """Records a game from discrete scorekeeper intents.

    Parameters
    ----------
    home_team : Team
        Home roster.
    away_team : Team
        Away roster.
    config : EngineConfig | None, optional
        Configuration override; defaults to ``ENGINE_CONFIG``.
    debugger : GameDebugger | None, optional
        Log sink; an in-memory debugger is created when omitted.
    clock : Callable[[], float] | None, optional
        Source of event timestamps in seconds; defaults to ``time.time``.
    id_factory : Callable[[], str] | None, optional
        Source of unique event ids; defaults to random UUID hex strings.
    """

    def __init__(
        self,
        home_team: Team,
        away_team: Team,
        config: Optional[EngineConfig] = None,
        debugger: Optional[GameDebugger] = None,
        clock: Optional[Callable[[], float]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        """Bind rosters and configuration and create an inactive game.

        Parameters
        ----------
        home_team : Team
            Home roster.
        away_team : Team
            Away roster.
        config : EngineConfig | None
            Configuration override; defaults to ``ENGINE_CONFIG``.
        debugger : GameDebugger | None
            Log sink; an in-memory debugger is created when omitted.
        clock : Callable[[], float] | None
            Source of event timestamps in seconds.
        id_factory : Callable[[], str] | None
            Source of unique event ids.
        """
        if as_side(home_team.side) is not TeamSide.HOME or as_side(away_team.side) is not TeamSide.AWAY:
            raise ValueError("home_team and away_team must be tagged with their own sides")

        self.config = config if config is not None else ENGINE_CONFIG
        self.home_team = home_team
        self.away_team = away_team
        self.field = FieldGeometry(self.config.dimensions)
        self.debugger = debugger if debugger is not None else GameDebugger()
        self.players = build_player_index(home_team, away_team)
        self._clock = clock if clock is not None else time.time
        self._id_factory = id_factory if id_factory is not None else (lambda: uuid4().hex)
        self.state = self._initial_state()

    # -- lifecycle -----------------------------------------------------

    def _initial_state(self) -> GameState:
        """Return an inactive game with the default lineups.

        Returns
        -------
        GameState
            Empty log, zero score, no possession.
        """
        size = self.config.game.lineup_size
        return GameState(
            active_lineup=Lineups(
                home=tuple(self.home_team.default_lineup(size)),
                away=tuple(self.away_team.default_lineup(size)),
            )
        )

    @property
    def starting_side(self) -> TeamSide:
        """Side that receives possession when a game starts."""
        return as_side(self.config.game.starting_side)

    def start_game(self) -> bool:
        """Activate the game and hand possession to the starting side.

        Returns
        -------
        bool
            ``False`` when the game was already active and nothing changed.
        """
        if self.state.is_game_active:
            self.debugger.log_rejection("start_game", "game already active")
            return False

        self.state = replace(self.state, is_game_active=True, current_possession=self.starting_side)
        self.debugger.log_game_event("start", f"Game started - {self.starting_side.value} in possession")
        self._log_state()
        return True

    def new_game(self) -> None:
        """Discard the current game and start a fresh one."""
        self.state = self._initial_state()
        self.debugger.log_game_event("reset", "New game")
        self.start_game()

    # -- recording -----------------------------------------------------

    def record_event(
        self,
        event_type: Union[EventType, str],
        player: Optional[Player] = None,
        location: Optional[Coordinate] = None,
        defender: Optional[Player] = None,
    ) -> bool:
        """Record one event and derive the next state.

        Parameters
        ----------
        event_type : EventType | str
            What happened.
        player : Player | None, optional
            Player selected for the event; stored as the receiver and, for
            pickups and catches, becomes the disc holder.
        location : Coordinate | None, optional
            Tap location. Only drops and throwaways may omit it, in which case
            the last logged location (or field centre) is used.
        defender : Player | None, optional
            Defender credited with the event.

        Returns
        -------
        bool
            ``False`` when the event was rejected (game not started, or no
            location for an event that needs one) and nothing was logged.
        """
        event_type = EventType(event_type)
        if not self.state.is_game_active:
            self.debugger.log_rejection("record_event", f"{event_type.value} recorded before the game started")
            return False
        if location is None and event_type not in LOCATION_OPTIONAL_EVENTS:
            self.debugger.log_rejection("record_event", f"{event_type.value} requires a field location")
            return False

        state = self.state
        event = GameEvent(
            event_id=self._id_factory(),
            event_type=event_type,
            location=self._resolve_location(location),
            timestamp=self._clock(),
            possession_side=state.current_possession or self.starting_side,
            thrower_id=state.has_disc,
            receiver_id=player.player_id if player is not None else None,
            defender_id=defender.player_id if defender is not None else None,
        )
        self.state = apply_event(state, event)
        self.debugger.log_game_event(event_type.value.lower(), event.describe())
        self._log_state()
        return True

    def classify_target(self, role: SelectionRole, location: Coordinate) -> EventType:
        """Decide which event a player selection after a tap stands for.

        Parameters
        ----------
        role : SelectionRole
            ``THROWER`` when nobody held the disc at tap time, ``RECEIVER``
            otherwise.
        location : Coordinate
            Tap location.

        Returns
        -------
        EventType
            ``PICKUP`` for a thrower; ``GOAL`` for a receiver inside an
            endzone; ``CATCH`` for any other receiver.
        """
        if SelectionRole(role) is SelectionRole.THROWER:
            return EventType.PICKUP
        if self.field.is_in_endzone(location):
            return EventType.GOAL
        return EventType.CATCH

    def select_target(self, role: SelectionRole, player: Player, location: Optional[Coordinate]) -> bool:
        """Resolve a player picked for a pending tap into a recorded event.

        Parameters
        ----------
        role : SelectionRole
            Selection context established when the field was tapped.
        player : Player
            Player the scorekeeper picked.
        location : Coordinate | None
            Pending tap location.

        Returns
        -------
        bool
            ``False`` when there was no pending tap to resolve.
        """
        if location is None:
            self.debugger.log_rejection("select_target", "no pending field location")
            return False
        return self.record_event(self.classify_target(role, location), player, location)

    def undo_last(self) -> bool:
        """Remove the last logged event.

        In ``"replay"`` mode the remaining log is replayed from a freshly
        started game so score, possession and holder all match the truncated
        log. ``"legacy"`` mode only restores the holder from the new last
        event and leaves score and possession as they were.

        Returns
        -------
        bool
            ``False`` when the log was empty.
        """
        state = self.state
        if not state.events:
            self.debugger.log_rejection("undo_last", "nothing to undo")
            return False

        removed = state.events[-1]
        remaining = state.events[:-1]

        if self.config.game.undo_mode == "legacy":
            last = remaining[-1] if remaining else None
            restored = last.receiver_id if last is not None and last.event_type in DISC_TAKING_EVENTS else None
            self.state = replace(state, events=remaining, has_disc=restored)
        else:
            baseline = replace(
                state,
                events=(),
                score=Score(),
                current_possession=self.starting_side if state.is_game_active else None,
                has_disc=None,
            )
            self.state = replay_events(baseline, remaining)

        self.debugger.log_game_event("undo", f"Removed {removed.describe()}")
        self._log_state()
        return True

    def update_lineup(self, side: Union[TeamSide, str], player_ids: Sequence[str]) -> None:
        """Replace the active lineup for one side.

        The lineup cap is enforced by the selection UI, so oversize lineups
        and unknown ids are stored as given and only logged as warnings.

        Parameters
        ----------
        side : TeamSide | str
            Side whose lineup changes.
        player_ids : Sequence[str]
            New set of active player ids.
        """
        side = as_side(side)
        team = self.team(side)
        unknown = [pid for pid in player_ids if team.get_player(pid) is None]
        if unknown:
            self.debugger.log_warning("lineup", f"{side.value} lineup has ids not on roster: {', '.join(unknown)}")
        if len(set(player_ids)) > self.config.game.lineup_size:
            self.debugger.log_warning(
                "lineup", f"{side.value} lineup has {len(set(player_ids))} players (cap {self.config.game.lineup_size})"
            )

        self.state = replace(self.state, active_lineup=self.state.active_lineup.replaced(side, player_ids))
        self.debugger.log_game_event("lineup", f"{side.value}: {', '.join(self.state.active_lineup.for_side(side))}")

    # -- read views ----------------------------------------------------

    def team(self, side: Union[TeamSide, str]) -> Team:
        """Return the roster for ``side``.

        Parameters
        ----------
        side : TeamSide | str
            Side to look up.

        Returns
        -------
        Team
            Home or away roster.
        """
        return self.home_team if as_side(side) is TeamSide.HOME else self.away_team

    def get_player(self, player_id: Optional[str]) -> Optional[Player]:
        """Look up a player on either roster.

        Parameters
        ----------
        player_id : str | None
            Identifier to resolve.

        Returns
        -------
        Player | None
            Roster entry, or ``None`` for unknown or missing ids.
        """
        if player_id is None:
            return None
        return self.players.get(player_id)

    def current_disc_holder(self) -> Optional[Player]:
        """Return the roster entry of the player holding the disc.

        Returns
        -------
        Player | None
            Holder, or ``None`` between possessions.
        """
        return self.get_player(self.state.has_disc)

    def last_known_location(self, pending: Optional[Coordinate] = None) -> Optional[Coordinate]:
        """Return where the disc was last seen.

        Parameters
        ----------
        pending : Coordinate | None, optional
            Pending tap, which takes precedence over the log.

        Returns
        -------
        Coordinate | None
            Pending tap, else the last event's location, else ``None``.
        """
        if pending is not None:
            return pending
        last = self.state.last_event
        return last.location if last is not None else None

    def active_players(self, side: Union[TeamSide, str]) -> List[Player]:
        """Return the on-field players for ``side`` in roster order.

        Parameters
        ----------
        side : TeamSide | str
            Side to read.

        Returns
        -------
        List[Player]
            Roster entries whose ids are in the active lineup.
        """
        active = set(self.state.active_lineup.for_side(side))
        return [p for p in self.team(side).players if p.player_id in active]

    def available_targets(self, role: SelectionRole) -> List[Player]:
        """Return the players a selection menu should offer.

        Parameters
        ----------
        role : SelectionRole
            Current selection context.

        Returns
        -------
        List[Player]
            Active players of the side in possession; the current holder is
            left out when picking a receiver.
        """
        players = self.active_players(self.state.current_possession or TeamSide.HOME)
        if SelectionRole(role) is SelectionRole.RECEIVER:
            return [p for p in players if p.player_id != self.state.has_disc]
        return players

    # -- internals -----------------------------------------------------

    def _resolve_location(self, location: Optional[Coordinate]) -> Coordinate:
        """Pick the coordinate an event is stored at.

        Parameters
        ----------
        location : Coordinate | None
            Explicit tap location, if any.

        Returns
        -------
        Coordinate
            ``location``, else the last event's location, else field centre.
        """
        if location is not None:
            return location
        last = self.state.last_event
        if last is not None:
            return last.location
        return Coordinate(*self.config.game.default_location)

    def _log_state(self) -> None:
        """Write the derived state to the debugger."""
        state = self.state
        self.debugger.log_state(
            state.score.as_tuple(),
            state.current_possession.value if state.current_possession else None,
            state.has_disc,
            len(state.events),
        )
