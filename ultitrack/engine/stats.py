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
"""Match statistics derived from the event log.

Everything here is a read-only view over recorded events; nothing feeds back
into the engine.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ultitrack.engine.events import EventType, GameEvent
from ultitrack.engine.field import FieldGeometry
from ultitrack.models.team import TeamSide


@dataclass
class MatchStats:
    """Team-level totals shown on the stats card.

    Parameters
    ----------
    completions : int
        Number of catches.
    drops : int
        Number of drops.
    throwaways : int
        Number of throwaways.
    blocks : int
        Number of defensive blocks.
    completion_rate : int
        Completed passes as a whole-number percentage of pass attempts.
    possession_events : Dict[str, int]
        Events recorded while each side held possession.
    """

    completions: int
    drops: int
    throwaways: int
    blocks: int
    completion_rate: int
    possession_events: Dict[str, int]

    @property
    def turnovers(self) -> int:
        """Drops plus throwaways."""
        return self.drops + self.throwaways

    def possession_share(self, side: TeamSide) -> float:
        """Return the fraction of events recorded while ``side`` had the disc.

        Parameters
        ----------
        side : TeamSide
            Side to measure.

        Returns
        -------
        float
            Share between ``0`` and ``1``; ``0`` for an empty log.
        """
        total = sum(self.possession_events.values())
        if total == 0:
            return 0.0
        return self.possession_events.get(TeamSide(side).value, 0) / total


@dataclass
class PlayerLine:
    """Individual counting stats for one player.

    Parameters
    ----------
    player_id : str
        Player the line belongs to.
    catches : int, default=0
        Completed receptions, goals excluded.
    goals : int, default=0
        Goals caught.
    assists : int, default=0
        Throws that were caught for a goal.
    pickups : int, default=0
        Times the player picked up the disc to start a possession.
    throwaways : int, default=0
        Throws that turned the disc over.
    drops : int, default=0
        Drops where the player was named as receiver.
    blocks : int, default=0
        Defensive blocks credited to the player.
    """

    player_id: str
    catches: int = 0
    goals: int = 0
    assists: int = 0
    pickups: int = 0
    throwaways: int = 0
    drops: int = 0
    blocks: int = 0


@dataclass
class ThrowSegment:
    """Distance and timing for a throw that continued a possession.

    Parameters
    ----------
    event_id : str
        Event that ended the throw.
    distance : float
        Straight-line distance in metres, rounded to 0.1.
    gain : float
        Length-axis progress in metres, rounded to 0.1.
    hold_time : float
        Seconds since the previous event, rounded to 0.1.
    """

    event_id: str
    distance: float
    gain: float
    hold_time: float


def summarize(events: Sequence[GameEvent]) -> MatchStats:
    """Compute team-level totals for a game.

    Parameters
    ----------
    events : Sequence[GameEvent]
        Event log in recording order.

    Returns
    -------
    MatchStats
        Totals for the stats card. The completion rate is ``100`` when no pass
        has been completed yet.
    """
    completions = sum(1 for e in events if e.event_type is EventType.CATCH)
    drops = sum(1 for e in events if e.event_type is EventType.DROP)
    throwaways = sum(1 for e in events if e.event_type is EventType.THROWAWAY)
    blocks = sum(1 for e in events if e.event_type is EventType.D_BLOCK)

    completion_rate = 100
    if completions > 0:
        completion_rate = round(completions / (completions + drops + throwaways) * 100)

    possession_events = {side.value: 0 for side in TeamSide}
    for event in events:
        possession_events[event.possession_side.value] += 1

    return MatchStats(
        completions=completions,
        drops=drops,
        throwaways=throwaways,
        blocks=blocks,
        completion_rate=completion_rate,
        possession_events=possession_events,
    )


def player_lines(events: Sequence[GameEvent]) -> Dict[str, PlayerLine]:
    """Tally individual stats for every player named in the log.

    Parameters
    ----------
    events : Sequence[GameEvent]
        Event log in recording order.

    Returns
    -------
    Dict[str, PlayerLine]
        Lines keyed by player id, in order of first appearance.
    """
    lines: Dict[str, PlayerLine] = {}

    def line(player_id: str) -> PlayerLine:
        if player_id not in lines:
            lines[player_id] = PlayerLine(player_id)
        return lines[player_id]

    for event in events:
        kind = event.event_type
        if kind is EventType.CATCH and event.receiver_id:
            line(event.receiver_id).catches += 1
        elif kind is EventType.GOAL:
            if event.receiver_id:
                line(event.receiver_id).goals += 1
            if event.thrower_id:
                line(event.thrower_id).assists += 1
        elif kind is EventType.PICKUP and event.receiver_id:
            line(event.receiver_id).pickups += 1
        elif kind is EventType.THROWAWAY and event.thrower_id:
            line(event.thrower_id).throwaways += 1
        elif kind is EventType.DROP and event.receiver_id:
            line(event.receiver_id).drops += 1
        elif kind is EventType.D_BLOCK:
            blocker = event.defender_id or event.receiver_id
            if blocker:
                line(blocker).blocks += 1

    return lines


def throw_segments(events: Sequence[GameEvent], field_geometry: Optional[FieldGeometry] = None) -> List[ThrowSegment]:
    """Measure every throw made from a pickup or catch.

    Parameters
    ----------
    events : Sequence[GameEvent]
        Event log in recording order.
    field_geometry : FieldGeometry | None, optional
        Geometry used to convert percentages into metres.

    Returns
    -------
    List[ThrowSegment]
        One segment per event that directly follows a pickup or catch, pulls
        and pickups excluded, in log order.
    """
    geometry = field_geometry if field_geometry is not None else FieldGeometry()
    segments: List[ThrowSegment] = []

    for prev, current in zip(events, events[1:]):
        if prev.event_type not in {EventType.PICKUP, EventType.CATCH}:
            continue
        if current.event_type in {EventType.PULL, EventType.PICKUP}:
            continue
        segments.append(
            ThrowSegment(
                event_id=current.event_id,
                distance=round(geometry.distance(prev.location, current.location), 1),
                gain=round(geometry.gain(prev.location, current.location), 1),
                hold_time=round(current.timestamp - prev.timestamp, 1),
            )
        )

    return segments
