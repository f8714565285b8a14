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
"""Pygame scorekeeping surface: a tappable field plus a player menu."""
from typing import List, Optional, Tuple

try:
    import pygame
except Exception:
    pygame = None

from ultitrack.engine.config import ENGINE_CONFIG
from ultitrack.engine.events import EventType
from ultitrack.engine.field import Coordinate
from ultitrack.engine.game_engine import SelectionRole
from ultitrack.engine.session import ScorekeeperSession
from ultitrack.engine.stats import summarize
from ultitrack.models.player import Player
from ultitrack.models.team import TeamSide

Rect = Tuple[int, int, int, int]

KEY_ACTIONS = {
    "t": EventType.THROWAWAY,
    "d": EventType.DROP,
    "p": EventType.PULL,
    "b": EventType.D_BLOCK,
}


def field_rect(screen_size: Tuple[int, int], panel_width: int = 180, margin: int = 12) -> Rect:
    """Fit a portrait field of the configured aspect ratio into the window.

    Parameters
    ----------
    screen_size : Tuple[int, int]
        Window size in pixels.
    panel_width : int
        Width reserved on the right for the player menu.
    margin : int
        Gap kept around the field.

    Returns
    -------
    Rect
        ``(left, top, width, height)`` of the field in screen pixels.
    """
    dims = ENGINE_CONFIG.dimensions
    avail_w = max(1, screen_size[0] - panel_width - 2 * margin)
    avail_h = max(1, screen_size[1] - 2 * margin - 40)
    height = avail_h
    width = int(height * dims.width / dims.length)
    if width > avail_w:
        width = avail_w
        height = int(width * dims.length / dims.width)
    return (margin, margin + 40, width, height)


def screen_to_field(pos: Tuple[int, int], rect: Rect) -> Optional[Coordinate]:
    """Convert a click into normalised field space.

    Parameters
    ----------
    pos : Tuple[int, int]
        Pointer position in screen pixels.
    rect : Rect
        Field rectangle as returned by :func:`field_rect`.

    Returns
    -------
    Coordinate | None
        Percentages across and along the field, or ``None`` when the click
        missed the field.
    """
    left, top, width, height = rect
    if not (left <= pos[0] <= left + width and top <= pos[1] <= top + height):
        return None
    return Coordinate((pos[0] - left) / width * 100, (pos[1] - top) / height * 100)


def field_to_screen(coord: Coordinate, rect: Rect) -> Tuple[int, int]:
    """Convert a normalised coordinate into screen pixels.

    Parameters
    ----------
    coord : Coordinate
        Location in percentage space.
    rect : Rect
        Field rectangle as returned by :func:`field_rect`.

    Returns
    -------
    Tuple[int, int]
        Pixel position.
    """
    left, top, width, height = rect
    return (int(left + coord.x / 100 * width), int(top + coord.y / 100 * height))


def start_visualizer(
    session: ScorekeeperSession,
    screen_size: Optional[Tuple[int, int]] = None,
    fps: Optional[int] = None,
) -> None:
    """Run the interactive scorekeeper until the window is closed.

    Clicking the field opens a thrower or receiver menu on the right; keys
    record the button events (``t`` throwaway, ``d`` drop, ``p`` pull, ``b``
    block), ``u`` undoes, ``n`` starts a new game, ``s`` toggles the stats
    panel and ``Esc`` closes the menu. If ``pygame`` is not installed the
    function returns immediately.

    Parameters
    ----------
    session : ScorekeeperSession
        Session wired to the engine being recorded.
    screen_size : Tuple[int, int] | None
        Initial window size; defaults to the display configuration.
    fps : int | None
        Frame cap; defaults to the display configuration.
    """
    if pygame is None:
        return

    display = ENGINE_CONFIG.display
    screen_size = screen_size or display.screen_size
    fps = fps or display.fps
    engine = session.engine

    pygame.init()
    screen = pygame.display.set_mode(screen_size, pygame.RESIZABLE)
    pygame.display.set_caption("UltiTrack")
    clock = pygame.time.Clock()

    # Colors
    GRASS = (55, 139, 94)
    LINE = (235, 245, 235)
    HOME = (59, 130, 246)
    AWAY = (239, 68, 68)
    DISC = (250, 250, 250)
    PENDING = (250, 204, 21)
    TEXT = (20, 20, 20)
    PANEL = (243, 244, 246)
    ROW = (255, 255, 255)
    ROW_HOVER = (219, 234, 254)

    font = pygame.font.SysFont(None, 20)
    big_font = pygame.font.SysFont(None, 32)

    show_stats = False
    running = True

    while running:
        mouse_pos = pygame.mouse.get_pos()
        rect = field_rect(screen_size)
        panel_left = rect[0] + rect[2] + 12
        start_rect = pygame.Rect(screen_size[0] // 2 - 80, screen_size[1] // 2 - 20, 160, 40)

        menu_rows: List[Tuple[pygame.Rect, Player]] = []
        for index, player in enumerate(session.selectable_players()):
            row = pygame.Rect(panel_left, rect[1] + 30 + index * 30, screen_size[0] - panel_left - 12, 26)
            menu_rows.append((row, player))

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.VIDEORESIZE:
                screen_size = (event.w, event.h)
                screen = pygame.display.set_mode(screen_size, pygame.RESIZABLE)
            elif event.type == pygame.KEYDOWN:
                key = pygame.key.name(event.key)
                if key == "q":
                    running = False
                elif key in KEY_ACTIONS:
                    session.record_event(KEY_ACTIONS[key])
                elif key == "u":
                    session.undo_last()
                elif key == "n":
                    session.new_game()
                elif key == "s":
                    show_stats = not show_stats
                elif key == "escape":
                    session.cancel_selection()
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if not engine.state.is_game_active:
                    if start_rect.collidepoint(event.pos):
                        session.start_game()
                    continue
                picked = next((p for row, p in menu_rows if row.collidepoint(event.pos)), None)
                if picked is not None:
                    session.select_player(picked)
                    continue
                coord = screen_to_field(event.pos, rect)
                if coord is not None:
                    session.tap_field(coord)

        state = engine.state
        screen.fill(PANEL)

        # Field and endzone lines
        left, top, width, height = rect
        pygame.draw.rect(screen, GRASS, rect)
        pygame.draw.rect(screen, LINE, rect, 2)
        ez = engine.field.endzone_percent
        for pct in (ez, 100 - ez):
            y = int(top + pct / 100 * height)
            pygame.draw.line(screen, LINE, (left, y), (left + width, y), 2)

        if state.current_possession is not None:
            arrow = "^" if state.current_possession is TeamSide.HOME else "v"
            label = big_font.render(arrow, True, LINE)
            screen.blit(label, (left + width // 2 - label.get_width() // 2, top + height // 2))

        # Recent trail
        recent = state.events[-display.visible_history :]
        points = [field_to_screen(e.location, rect) for e in recent]
        if len(points) > 1:
            pygame.draw.lines(screen, LINE, False, points, 2)
        for e, point in zip(recent, points):
            color = HOME if e.possession_side is TeamSide.HOME else AWAY
            pygame.draw.circle(screen, color, point, 6)

        if state.has_disc and state.last_event is not None:
            pygame.draw.circle(screen, DISC, field_to_screen(state.last_event.location, rect), 9, 3)
        if session.pending_location is not None:
            pygame.draw.circle(screen, PENDING, field_to_screen(session.pending_location, rect), 7)

        # HUD
        holder = engine.current_disc_holder()
        possession = state.current_possession.value if state.current_possession else "-"
        hud = f"Home {state.score.home} - {state.score.away} Away   Possession: {possession}"
        screen.blit(font.render(hud, True, TEXT), (12, 10))
        holder_text = f"Disc: {holder.label}" if holder else "Tap field to select thrower"
        screen.blit(font.render(holder_text, True, TEXT), (12, 28))

        # Player menu
        if session.menu_open:
            title = "Pass To" if session.selection_role is SelectionRole.RECEIVER else "Thrower"
            screen.blit(font.render(title, True, TEXT), (panel_left, rect[1] + 8))
            for row, player in menu_rows:
                pygame.draw.rect(screen, ROW_HOVER if row.collidepoint(mouse_pos) else ROW, row, border_radius=6)
                screen.blit(font.render(player.label, True, TEXT), (row.x + 6, row.y + 5))

        if show_stats:
            stats = summarize(state.events)
            lines = [
                f"Completion: {stats.completion_rate}% ({stats.completions} completed)",
                f"Turnovers: {stats.turnovers} (drops {stats.drops}, throwaways {stats.throwaways})",
                f"Blocks: {stats.blocks}",
                f"Possession: home {stats.possession_share(TeamSide.HOME):.0%} / "
                f"away {stats.possession_share(TeamSide.AWAY):.0%}",
            ]
            overlay = pygame.Surface((screen_size[0], 24 * len(lines) + 16), pygame.SRCALPHA)
            overlay.fill((255, 255, 255, 230))
            screen.blit(overlay, (0, screen_size[1] - overlay.get_height()))
            for index, text in enumerate(lines):
                y = screen_size[1] - overlay.get_height() + 8 + index * 24
                screen.blit(font.render(text, True, TEXT), (12, y))

        if not state.is_game_active:
            overlay = pygame.Surface(screen_size, pygame.SRCALPHA)
            overlay.fill((255, 255, 255, 200))
            screen.blit(overlay, (0, 0))
            pygame.draw.rect(screen, HOME, start_rect, border_radius=8)
            label = font.render("Start New Game", True, (255, 255, 255))
            label_pos = (start_rect.centerx - label.get_width() // 2, start_rect.centery - label.get_height() // 2)
            screen.blit(label, label_pos)

        pygame.display.flip()
        clock.tick(fps)

    pygame.quit()
