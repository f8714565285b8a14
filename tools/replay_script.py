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
"""Replay a scripted scorekeeping session without opening a window.

Usage:
    python tools/replay_script.py data/sample_script.json [--roster data/players.json] [--dump]

The script is a JSON list (or an object with an ``actions`` list) of steps:
``{"action": "start"}``, ``{"action": "tap", "x": 50, "y": 40}``,
``{"action": "select", "player": "h2"}``, ``{"action": "event", "type": "DROP"}``,
``{"action": "undo"}`` and ``{"action": "lineup", "side": "home", "players": [...]}``.
"""
import argparse
import json
from pathlib import Path

from ultitrack.engine.field import Coordinate
from ultitrack.engine.game_engine import GameEngine
from ultitrack.engine.session import ScorekeeperSession
from ultitrack.main import print_game_summary
from ultitrack.utils.roster import load_teams_from_json


def run_script(session: ScorekeeperSession, steps: list) -> int:
    """Feed every scripted step into ``session``.

    Parameters
    ----------
    session : ScorekeeperSession
        Session wrapping the engine to drive.
    steps : list
        Decoded script steps.

    Returns
    -------
    int
        Number of steps the engine rejected.
    """
    engine = session.engine
    rejected = 0
    for step in steps:
        action = step["action"]
        if action == "start":
            ok = session.start_game()
        elif action == "new":
            session.new_game()
            ok = True
        elif action == "tap":
            ok = session.tap_field(Coordinate(float(step["x"]), float(step["y"]))) is not None
        elif action == "select":
            player = engine.get_player(step["player"])
            if player is None:
                raise ValueError(f"Unknown player in script: {step['player']}")
            ok = session.select_player(player)
        elif action == "event":
            ok = session.record_event(step["type"], engine.get_player(step.get("player")))
        elif action == "undo":
            ok = session.undo_last()
        elif action == "lineup":
            session.update_lineup(step["side"], step["players"])
            ok = True
        else:
            raise ValueError(f"Unknown script action: {action}")
        if not ok:
            rejected += 1
    return rejected


def main() -> None:
    """Parse arguments, replay the script and print the summary."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("script", type=Path, help="JSON script to replay")
    parser.add_argument("--roster", type=Path, default=Path(__file__).parent.parent / "data" / "players.json")
    parser.add_argument("--dump", action="store_true", help="print the recorded event log as JSON")
    args = parser.parse_args()

    with args.script.open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    steps = data["actions"] if isinstance(data, dict) else data

    home, away = load_teams_from_json(args.roster)
    engine = GameEngine(home, away)
    session = ScorekeeperSession(engine)
    rejected = run_script(session, steps)

    if args.dump:
        print(json.dumps([event.to_dict() for event in engine.state.events], indent=2))
    print(f"Replayed {len(steps)} steps ({rejected} rejected)")
    print_game_summary(engine)


if __name__ == "__main__":
    main()
