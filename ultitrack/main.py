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
"""Entry point for live scorekeeping with the pygame field."""
from pathlib import Path

from ultitrack.engine.game_engine import GameEngine
from ultitrack.engine.session import ScorekeeperSession
from ultitrack.engine.stats import player_lines, summarize
from ultitrack.utils.debug import GameDebugger
from ultitrack.utils.generator import generate_team  # Fallback if no roster file
from ultitrack.utils.roster import load_teams_from_json
from ultitrack.visualizer.visualizer import pygame, start_visualizer


def print_game_summary(engine: GameEngine) -> None:
    """Print the final score line and match statistics.

    Parameters
    ----------
    engine : GameEngine
        Engine whose recorded game should be summarised.
    """
    state = engine.state
    print(
        f"\nFinal Score: {engine.home_team.name} {state.score.home} - "
        f"{state.score.away} {engine.away_team.name}"
    )

    stats = summarize(state.events)
    print("\nMatch Statistics:")
    print(f"Completion: {stats.completion_rate}% ({stats.completions} completed)")
    print(f"Turnovers: {stats.turnovers} (drops {stats.drops}, throwaways {stats.throwaways})")
    print(f"Blocks: {stats.blocks}")

    lines = player_lines(state.events)
    if lines:
        print("\nPlayers:")
    for player_id, line in lines.items():
        player = engine.get_player(player_id)
        name = player.label if player else player_id
        print(
            f"{name}: {line.goals}G {line.assists}A {line.catches} catches, "
            f"{line.throwaways} throwaways, {line.drops} drops, {line.blocks} blocks"
        )


def main() -> None:
    """Load rosters, open the scorekeeper window and print a summary on exit."""
    roster_file = Path("data/players.json")
    if roster_file.exists():
        try:
            home_team, away_team = load_teams_from_json(roster_file)
        except (KeyError, ValueError) as e:
            print(f"Error loading teams from {roster_file}: {e}")
            print("Falling back to generated teams...")
            home_team = generate_team("home")
            away_team = generate_team("away")
    else:
        print(f"No roster file found at {roster_file}")
        print("Using generated teams...")
        home_team = generate_team("home")
        away_team = generate_team("away")

    debugger = GameDebugger("debug_logs")
    engine = GameEngine(home_team, away_team, debugger=debugger)
    session = ScorekeeperSession(engine)

    if pygame is None:
        print("pygame is not installed; nothing to display.")
    else:
        try:
            start_visualizer(session)
        except KeyboardInterrupt:
            print("\nScorekeeping interrupted.")

    debugger.close()
    print_game_summary(engine)


if __name__ == "__main__":
    main()
