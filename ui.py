# ui.py
from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass, replace
from typing import Optional, Tuple

import pygame
import pygame_gui

from game import HexBoard, Move, EMPTY, RED, BLUE, COLOR_NAMES
from config import BOARD_MAX_SIZE, BOARD_MIN_SIZE, GameConfig, Mode, new_game

logger = logging.getLogger(__name__)

SQRT3 = math.sqrt(3.0)


# ---------------- geometry helpers ----------------
def hex_corners(center, radius: float):
    cx, cy = center
    pts = []
    for i in range(6):
        ang = math.radians(60 * i - 30)  # pointy-top
        pts.append((cx + radius * math.cos(ang), cy + radius * math.sin(ang)))
    return pts


def axial_to_pixel(r: int, c: int, origin, radius: float):
    ox, oy = origin
    dx = SQRT3 * radius
    dy = 1.5 * radius
    x = ox + c * dx + r * (dx * 0.5)
    y = oy + r * dy
    return (x, y)


def point_in_poly(p, poly):
    x, y = p
    inside = False
    n = len(poly)
    for i in range(n):
        x1, y1 = poly[i]
        x2, y2 = poly[(i + 1) % n]
        cond = ((y1 > y) != (y2 > y)) and (x < (x2 - x1) * (y - y1) / (y2 - y1 + 1e-12) + x1)
        if cond:
            inside = not inside
    return inside


def fit_radius(n: int, width: float, height: float, max_radius: float = 26.0) -> float:
    """Largest hex radius so an n×n rhombus fits in width × height."""
    # rhombus spans (1.5n - 0.5) hex widths across and 1.5n + 0.5 radii down
    by_w = width / (SQRT3 * (1.5 * n - 0.5))
    by_h = height / (1.5 * n + 0.5)
    return min(max_radius, by_w, by_h)


def build_cells(n: int, origin, radius: float):
    cells = []
    for r in range(n):
        for c in range(n):
            center = axial_to_pixel(r, c, origin, radius)
            poly = hex_corners(center, radius)
            xs = [p[0] for p in poly]
            ys = [p[1] for p in poly]
            bbox = (min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))
            cells.append((r, c, poly, bbox))
    return cells


def cell_at(pos, cells) -> Optional[Move]:
    mx, my = pos
    for r, c, poly, (bx, by, bw, bh) in cells:
        if not (bx <= mx <= bx + bw and by <= my <= by + bh):
            continue
        if point_in_poly((mx, my), poly):
            return Move(r, c)
    return None


@dataclass
class Theme:
    bg: Tuple[int, int, int] = (30, 30, 35)
    panel: Tuple[int, int, int] = (24, 24, 28)
    panel_border: Tuple[int, int, int] = (60, 60, 70)

    empty: Tuple[int, int, int] = (210, 210, 210)
    grid: Tuple[int, int, int] = (70, 70, 80)
    red: Tuple[int, int, int] = (220, 70, 70)
    blue: Tuple[int, int, int] = (70, 120, 220)

    side_red: Tuple[int, int, int] = (160, 40, 40)
    side_blue: Tuple[int, int, int] = (40, 80, 160)

    text: Tuple[int, int, int] = (235, 235, 235)
    muted: Tuple[int, int, int] = (180, 180, 190)


class AppUI:
    HUD_H = 140
    MARGIN = 30

    def __init__(self, screen: pygame.Surface, config: Optional[GameConfig] = None):
        self.screen = screen
        self.clock = pygame.time.Clock()

        self.manager = pygame_gui.UIManager(screen.get_size())
        self.ui_elems = []

        self.font = pygame.font.SysFont("consolas", 18)
        self.big_font = pygame.font.SysFont("consolas", 30)

        self.theme = Theme()
        self.config = (config or GameConfig()).validate()

        self.state = "menu"  # menu/how/game
        self.board = HexBoard(self.config.size)

        self.radius = 22.0
        self.origin = (self.MARGIN, self.HUD_H + self.MARGIN)
        self.cells = []  # (r,c,poly,bbox)
        self.clicked: Optional[Move] = None

        # computer players think on a thread against a snapshot
        self.bot_thread: Optional[threading.Thread] = None
        self.bot_move: Optional[Tuple[int, Move]] = None
        self.bot_thinking = False
        self.bot_game_id: Optional[int] = None  # game the running thread belongs to
        self.game_id = 0

        self._build_cells()
        self._build_menu()

    # ---------- UI build ----------
    def _clear_ui(self):
        for el in self.ui_elems:
            el.kill()
        self.ui_elems.clear()

    def _button(self, rect, text, oid):
        self.ui_elems.append(pygame_gui.elements.UIButton(
            relative_rect=pygame.Rect(rect), text=text, manager=self.manager, object_id=oid,
        ))

    def _build_menu(self):
        self._clear_ui()
        w, _ = self.screen.get_size()
        x = w // 2 - 220

        for i, mode in enumerate(Mode):
            self._button(((x, 170 + i * 44), (440, 38)), f"{int(mode)} - {mode.label}", f"#mode_{int(mode)}")

        y = 170 + len(Mode) * 44 + 10
        self._button(((x, y), (40, 38)), "-", "#size_down")
        self.ui_elems.append(pygame_gui.elements.UILabel(
            pygame.Rect((x + 45, y), (130, 38)), f"Board: {self.config.size}x{self.config.size}", self.manager
        ))
        self._button(((x + 180, y), (40, 38)), "+", "#size_up")
        self._button(((x + 230, y), (210, 38)),
                     f"You play: {COLOR_NAMES[self.config.human_color]}", "#toggle_color")

        y += 48
        self._button(((x, y), (215, 38)), "How to play", "#btn_how")
        self._button(((x + 225, y), (215, 38)), "Exit", "#btn_exit")

    def _build_how(self):
        self._clear_ui()
        self._button(((20, 20), (120, 40)), "Back", "#btn_back")

    def _build_game(self):
        self._clear_ui()

        w, _ = self.screen.get_size()
        pad = 20
        btn_w, btn_h = 160, 40
        x = w - pad - btn_w
        y0 = 20
        gap = 10

        self._button(((x, y0), (btn_w, btn_h)), "Menu", "#btn_menu")
        self._button(((x, y0 + btn_h + gap), (btn_w, btn_h)), "New game", "#btn_new")

    # ---------- geometry ----------
    def _build_cells(self):
        n = self.board.size
        w, h = self.screen.get_size()
        self.radius = fit_radius(n, w - 2 * self.MARGIN, h - self.HUD_H - 2 * self.MARGIN)
        self.origin = (self.MARGIN + SQRT3 * self.radius / 2, self.HUD_H + self.MARGIN + self.radius)
        self.cells = build_cells(n, self.origin, self.radius)

    # ---------- game flow ----------
    def _new_game(self):
        self.game_id += 1
        self.bot_move = None
        self.clicked = None
        self.board = new_game(self.config, read_move=self._take_click)
        self._build_cells()
        logger.info("new game: %s, %dx%d", self.config.mode.label, self.board.size, self.board.size)
        self._start_bot_if_needed()

    def _take_click(self, board: HexBoard) -> Optional[Move]:
        mv, self.clicked = self.clicked, None
        return mv

    def _human_click(self, pos):
        player = self.board.active_player
        if not player.is_human:
            return
        self.clicked = cell_at(pos, self.cells)
        mv = player.select_move(self.board)
        if mv is not None and self.board.play(mv):
            logger.info("%s plays %s", player.name, mv)
            self._start_bot_if_needed()

    def _bot_busy(self) -> bool:
        """True while a computer move for the current game is being searched."""
        return self.bot_thinking and self.bot_game_id == self.game_id

    def _start_bot_if_needed(self):
        if self.board.winner != EMPTY:
            return
        if self.board.active_player.is_human:
            return
        if self._bot_busy() or self.bot_move is not None:
            return

        self.bot_thinking = True
        game_id = self.bot_game_id = self.game_id

        def worker(snapshot: HexBoard):
            try:
                mv = snapshot.active_player.select_move(snapshot)
                if self.bot_game_id == game_id:
                    self.bot_move = (game_id, mv)
            finally:
                # a newer game may own the flag by now
                if self.bot_game_id == game_id:
                    self.bot_thinking = False

        snap = self.board.clone()
        self.bot_thread = threading.Thread(target=worker, args=(snap,), daemon=True)
        self.bot_thread.start()

    def _apply_bot_move(self):
        if self.bot_move is None:
            return
        game_id, mv = self.bot_move
        self.bot_move = None
        if game_id != self.game_id or self.board.winner != EMPTY:
            return
        player = self.board.active_player
        if not self.board.play(mv):
            logger.warning("%s proposed invalid move %s, retrying", player.name, mv)
        else:
            logger.info("%s plays %s", player.name, mv)

    def _change_size(self, delta: int):
        size = max(BOARD_MIN_SIZE, min(BOARD_MAX_SIZE, self.config.size + delta))
        self.config = replace(self.config, size=size)
        self._build_menu()

    # ---------- main loop ----------
    def run(self):
        running = True
        while running:
            dt = self.clock.tick(60) / 1000.0

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                    break

                self.manager.process_events(event)

                if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    if self.state == "game" and self.board.winner == EMPTY and not self._bot_busy():
                        self._human_click(event.pos)

                if event.type == pygame_gui.UI_BUTTON_PRESSED:
                    oid = event.ui_object_id

                    if oid.endswith("#btn_exit"):
                        running = False

                    elif "#mode_" in oid:
                        mode = Mode(int(oid.rsplit("_", 1)[1]))
                        self.config = replace(self.config, mode=mode)
                        self.state = "game"
                        self._build_game()
                        self._new_game()

                    elif oid.endswith("#size_down"):
                        self._change_size(-1)
                    elif oid.endswith("#size_up"):
                        self._change_size(+1)

                    elif oid.endswith("#toggle_color"):
                        hc = BLUE if self.config.human_color == RED else RED
                        self.config = replace(self.config, human_color=hc)
                        self._build_menu()

                    elif oid.endswith("#btn_how"):
                        self.state = "how"
                        self._build_how()

                    elif oid.endswith("#btn_back") or oid.endswith("#btn_menu"):
                        self.state = "menu"
                        self.game_id += 1
                        self._build_menu()

                    elif oid.endswith("#btn_new"):
                        self._new_game()

            self.manager.update(dt)

            if self.state == "game":
                self._apply_bot_move()
                self._start_bot_if_needed()

            self._render()

        pygame.quit()

    # ---------- rendering ----------
    def _render(self):
        self.screen.fill(self.theme.bg)

        if self.state == "menu":
            title = self.big_font.render("HEX", True, self.theme.text)
            self.screen.blit(title, (self.screen.get_width() // 2 - title.get_width() // 2, 110))

        elif self.state == "how":
            lines = [
                "Hex rules:",
                "Red connects TOP and BOTTOM.",
                "Blue connects LEFT and RIGHT.",
                "Blue moves first, then players alternate,",
                "each placing one stone on an empty cell.",
                "A full board always has exactly one winner.",
            ]
            y = 80
            for s in lines:
                txt = self.font.render(s, True, self.theme.text)
                self.screen.blit(txt, (20, y))
                y += 26

        elif self.state == "game":
            self._draw_top_panel()
            self._draw_board()
            self._draw_game_hud()

        self.manager.draw_ui(self.screen)
        pygame.display.flip()

    def _draw_top_panel(self):
        panel = pygame.Rect(0, 0, self.screen.get_width(), self.HUD_H)
        pygame.draw.rect(self.screen, self.theme.panel, panel)
        pygame.draw.rect(self.screen, self.theme.panel_border, panel, 1)

    def _draw_board(self):
        for r, c, poly, _ in self.cells:
            v = self.board.get_cell_value(r, c)
            col = self.theme.empty
            if v == RED:
                col = self.theme.red
            elif v == BLUE:
                col = self.theme.blue

            pygame.draw.polygon(self.screen, col, poly)
            pygame.draw.polygon(self.screen, self.theme.grid, poly, width=1)

        if self.board.last_move:
            mv = self.board.last_move
            for r, c, poly, _ in self.cells:
                if r == mv.r and c == mv.c:
                    pygame.draw.polygon(self.screen, (245, 245, 245), poly, width=3)
                    break

        # edge cells carry the colour of the side that must reach them
        n = self.board.size
        for r, c, poly, _ in self.cells:
            if r == 0 or r == n - 1:
                pygame.draw.polygon(self.screen, self.theme.side_red, poly, width=3)
            if c == 0 or c == n - 1:
                pygame.draw.polygon(self.screen, self.theme.side_blue, poly, width=3)

    def _draw_game_hud(self):
        x = 20
        y = 70

        if self.board.winner != EMPTY:
            winner = next(p for p in self.board.players if p.color == self.board.winner)
            msg = f"Winner: {winner.name}"
        else:
            msg = f"Turn: {self.board.active_player.name}"

        self.screen.blit(self.big_font.render(msg, True, self.theme.text), (x, 18))

        legend1 = self.font.render("Red: connect TOP <-> BOTTOM", True, self.theme.red)
        legend2 = self.font.render("Blue: connect LEFT <-> RIGHT", True, self.theme.blue)
        self.screen.blit(legend1, (x, y))
        self.screen.blit(legend2, (x, y + 24))

        botmsg = "Computer is thinking..." if self._bot_busy() else self.config.mode.label
        self.screen.blit(self.font.render(botmsg, True, self.theme.muted), (x, y + 48))
