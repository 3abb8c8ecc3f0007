# ui.py
from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from typing import Optional, Tuple

import pygame
import pygame_gui

from board import Move, RED, BLUE, other
from bot import MonteCarloBot, EvaluationCancelled
from config import GameConfig
from game import HexGame, Action, AWAITING_SWAP, FINISHED

log = logging.getLogger(__name__)

MIN_SIZE, MAX_SIZE = 3, 11


# ---------------- geometry helpers ----------------
def hex_corners(center, radius: float):
    cx, cy = center
    pts = []
    for i in range(6):
        ang = math.radians(60 * i - 30)  # pointy-top
        pts.append((cx + radius * math.cos(ang), cy + radius * math.sin(ang)))
    return pts


def axial_to_pixel(r: int, c: int, origin, radius: float):
    # ряд r сдвинут на полклетки вправо: так соседи (r+1, c-1) и (r-1, c+1) касаются
    ox, oy = origin
    dx = math.sqrt(3.0) * radius
    dy = 1.5 * radius
    x = ox + c * dx + r * (dx * 0.5)
    y = oy + r * dy
    return (x, y)


def fit_radius(n: int, width: float, height: float, max_radius: float = 40.0) -> float:
    """Самый большой радиус, при котором ромб n x n влезает в width x height."""
    by_w = width / (math.sqrt(3.0) * (1.5 * n - 0.5))
    by_h = height / (1.5 * n + 0.5)
    return min(max_radius, by_w, by_h)


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


def pname(p: int) -> str:
    return "Игрок 1" if p == RED else "Игрок 2"


class AppUI:
    HUD_H = 140

    def __init__(self, screen: pygame.Surface, config: Optional[GameConfig] = None):
        self.screen = screen
        self.clock = pygame.time.Clock()

        self.manager = pygame_gui.UIManager(screen.get_size())
        self.ui_elems = []
        self.swap_elems = []

        self.font = pygame.font.SysFont("consolas", 18)
        self.big_font = pygame.font.SysFont("consolas", 30)

        self.theme = Theme()
        self.config = config or GameConfig()

        self.state = "menu"  # menu/how/settings/game
        self.game = self._new_game()

        self.radius = 22.0
        self.origin = (40, self.HUD_H + 30)
        self.cells = []  # (r,c,poly,bbox)

        # bot
        self.bot = MonteCarloBot(
            trials=self.config.trials, workers=self.config.workers, seed=self.config.seed
        )
        self.bot_thread: Optional[threading.Thread] = None
        self.bot_cancel = threading.Event()
        self.bot_gen = 0
        self.bot_move: Optional[Action] = None
        self.bot_thinking = False
        self.bot_error: Optional[str] = None

        self._build_cells()
        self._build_menu()

    def _new_game(self) -> HexGame:
        cfg = self.config
        return HexGame(cfg.size, first=cfg.first, swap_rule=cfg.swap_rule, bot_player=cfg.bot_player)

    # ---------- UI build ----------
    def _clear_ui(self):
        for el in self.ui_elems + self.swap_elems:
            el.kill()
        self.ui_elems.clear()
        self.swap_elems.clear()

    def _menu_button(self, y: int, text: str, oid: str):
        w, _ = self.screen.get_size()
        self.ui_elems.append(pygame_gui.elements.UIButton(
            relative_rect=pygame.Rect((w // 2 - 140, y), (280, 55)),
            text=text,
            manager=self.manager,
            object_id=oid,
        ))

    def _build_menu(self):
        self._clear_ui()
        self._menu_button(190, "Играть", "#btn_play")
        self._menu_button(260, "Как играть", "#btn_how")
        self._menu_button(330, "Настройки", "#btn_settings")
        self._menu_button(400, "Выход", "#btn_exit")

    def _build_how(self):
        self._clear_ui()
        self.ui_elems.append(pygame_gui.elements.UIButton(
            relative_rect=pygame.Rect((20, 20), (120, 40)),
            text="Назад",
            manager=self.manager,
            object_id="#btn_back",
        ))

    def _build_settings(self):
        self._clear_ui()
        cfg = self.config

        self.ui_elems.append(pygame_gui.elements.UIButton(
            pygame.Rect((20, 20), (120, 40)), "Назад", self.manager, object_id="#btn_back"
        ))
        self.ui_elems.append(pygame_gui.elements.UILabel(
            pygame.Rect((160, 25), (460, 30)), "Настройки партии", self.manager
        ))

        rows = [
            ("#toggle_bot", "Играть против бота: " + ("Да" if cfg.vs_bot else "Нет")),
            ("#toggle_human", "Вы играете за: " + pname(cfg.human)),
            ("#toggle_first", "Первым ходит: " + pname(cfg.first)),
            ("#toggle_swap", "Правило обмена: " + ("Да" if cfg.swap_rule else "Нет")),
        ]
        y = 90
        for oid, text in rows:
            self.ui_elems.append(pygame_gui.elements.UIButton(
                pygame.Rect((20, y), (320, 45)), text, self.manager, object_id=oid
            ))
            y += 55

        self.ui_elems.append(pygame_gui.elements.UIButton(
            pygame.Rect((20, y), (60, 45)), "-", self.manager, object_id="#size_down"
        ))
        self.ui_elems.append(pygame_gui.elements.UILabel(
            pygame.Rect((90, y), (180, 45)), f"Доска: {cfg.size} x {cfg.size}", self.manager
        ))
        self.ui_elems.append(pygame_gui.elements.UIButton(
            pygame.Rect((280, y), (60, 45)), "+", self.manager, object_id="#size_up"
        ))

    def _build_game(self):
        self._clear_ui()

        w, _ = self.screen.get_size()
        pad = 20
        btn_w, btn_h = 160, 40
        x = w - pad - btn_w
        y0 = 20
        gap = 10

        self.ui_elems.append(pygame_gui.elements.UIButton(
            pygame.Rect((x, y0), (btn_w, btn_h)),
            "Меню",
            self.manager,
            object_id="#btn_menu"
        ))
        self.ui_elems.append(pygame_gui.elements.UIButton(
            pygame.Rect((x, y0 + btn_h + gap), (btn_w, btn_h)),
            "Новая игра",
            self.manager,
            object_id="#btn_new"
        ))

        # обмен: показываем только в состоянии AWAITING_SWAP
        self.swap_elems.append(pygame_gui.elements.UIButton(
            pygame.Rect((x - btn_w - gap, y0), (btn_w, btn_h)),
            "Обмен",
            self.manager,
            object_id="#btn_swap"
        ))
        self.swap_elems.append(pygame_gui.elements.UIButton(
            pygame.Rect((x - btn_w - gap, y0 + btn_h + gap), (btn_w, btn_h)),
            "Без обмена",
            self.manager,
            object_id="#btn_decline"
        ))
        self._sync_swap_buttons()

    def _sync_swap_buttons(self):
        visible = self.state == "game" and self.game.state == AWAITING_SWAP
        for el in self.swap_elems:
            if visible and not el.visible:
                el.show()
            elif not visible and el.visible:
                el.hide()

    # ---------- geometry ----------
    def _build_cells(self):
        self.cells.clear()
        n = self.game.size
        w, h = self.screen.get_size()
        self.radius = fit_radius(n, w - 80, h - self.HUD_H - 50)
        self.origin = (40 + self.radius * math.sqrt(3.0) / 2, self.HUD_H + 20 + self.radius)
        for r in range(n):
            for c in range(n):
                center = axial_to_pixel(r, c, self.origin, self.radius)
                poly = hex_corners(center, self.radius)
                xs = [p[0] for p in poly]
                ys = [p[1] for p in poly]
                bbox = pygame.Rect(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))
                self.cells.append((r, c, poly, bbox))

    def _pick_cell(self, pos) -> Optional[Move]:
        mx, my = pos
        for r, c, poly, bbox in self.cells:
            if not bbox.collidepoint(mx, my):
                continue
            if point_in_poly((mx, my), poly):
                return Move(r, c)
        return None

    # ---------- bot async ----------
    def _stop_bot(self):
        self.bot_cancel.set()
        self.bot_gen += 1
        self.bot_move = None
        self.bot_thinking = False
        self.bot_error = None

    def _start_bot_if_needed(self):
        if not self.game.is_bot_turn():
            return
        if self.bot_thinking or self.bot_error:
            return

        self.bot_thinking = True
        self.bot_move = None
        self.bot_cancel = threading.Event()

        snap = self.game.clone()
        self.bot_thread = threading.Thread(
            target=self._think, args=(snap, self.bot_cancel, self.bot_gen), daemon=True
        )
        self.bot_thread.start()

    def _think(self, snapshot: HexGame, cancel: threading.Event, gen: int):
        try:
            mv = self.bot.choose(snapshot, cancel)
        except EvaluationCancelled:
            log.info("bot evaluation cancelled")
            return
        except Exception as e:
            # партия не должна зависнуть на "Бот думает..."
            log.exception("bot failed to choose a move")
            if gen == self.bot_gen:
                self.bot_error = str(e) or type(e).__name__
                self.bot_thinking = False
            return
        if gen == self.bot_gen:
            self.bot_move = mv
            self.bot_thinking = False

    def _new_round(self):
        self._stop_bot()
        self.game = self._new_game()
        self._build_cells()

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
                    if self.state == "game" and self.game.state != FINISHED and not self.bot_thinking:
                        if self.game.is_human(self.game.current):
                            mv = self._pick_cell(event.pos)
                            if mv and self.game.play(mv):
                                self._start_bot_if_needed()

                if event.type == pygame_gui.UI_BUTTON_PRESSED:
                    self._on_button(event.ui_object_id)
                    if self.state == "quit":
                        running = False

            self.manager.update(dt)

            if self.state == "game" and self.bot_move is not None and self.game.state != FINISHED:
                mv = self.bot_move
                self.bot_move = None
                self.game.apply(mv)
                self._start_bot_if_needed()

            self._sync_swap_buttons()
            self._render()

        self._stop_bot()
        self.bot.close()
        pygame.quit()

    def _on_button(self, oid: str):
        cfg = self.config

        if oid.endswith("#btn_exit"):
            self.state = "quit"

        elif oid.endswith("#btn_play"):
            self.state = "game"
            self._new_round()
            self._build_game()
            self._start_bot_if_needed()

        elif oid.endswith("#btn_how"):
            self.state = "how"
            self._build_how()

        elif oid.endswith("#btn_settings"):
            self.state = "settings"
            self._build_settings()

        elif oid.endswith("#btn_back") or oid.endswith("#btn_menu"):
            self._stop_bot()
            self.state = "menu"
            self._build_menu()

        elif oid.endswith("#btn_new"):
            self._new_round()
            self._start_bot_if_needed()

        elif oid.endswith("#btn_swap"):
            if self.game.swap():
                self._start_bot_if_needed()

        elif oid.endswith("#btn_decline"):
            self.game.decline_swap()

        elif oid.startswith("#toggle") or oid.startswith("#size"):
            if oid.endswith("#toggle_bot"):
                cfg.vs_bot = not cfg.vs_bot
            elif oid.endswith("#toggle_human"):
                cfg.human = other(cfg.human)
            elif oid.endswith("#toggle_first"):
                cfg.first = other(cfg.first)
            elif oid.endswith("#toggle_swap"):
                cfg.swap_rule = not cfg.swap_rule
            elif oid.endswith("#size_down"):
                cfg.size = max(MIN_SIZE, cfg.size - 1)
            elif oid.endswith("#size_up"):
                cfg.size = min(MAX_SIZE, cfg.size + 1)
            cfg.validate().check_latency()
            self._build_settings()

    # ---------- rendering ----------
    def _render(self):
        self.screen.fill(self.theme.bg)

        if self.state == "menu":
            title = self.big_font.render("HEX", True, self.theme.text)
            self.screen.blit(title, (self.screen.get_width() // 2 - title.get_width() // 2, 120))

        elif self.state == "how":
            lines = [
                "Цель игры Hex:",
                "Игрок 1 соединяет ВЕРХ и НИЗ.",
                "Игрок 2 соединяет ЛЕВО и ПРАВО.",
                "Игроки по очереди занимают клетки.",
                "Правило обмена: вторым ходом можно забрать",
                "первый камень соперника себе.",
                "Ничьи в Hex не бывает.",
            ]
            y = 80
            for s in lines:
                txt = self.font.render(s, True, self.theme.text)
                self.screen.blit(txt, (20, y))
                y += 26

        elif self.state == "settings":
            note = "Бот перебирает все клетки, доска больше 7 x 7 считается долго."
            self.screen.blit(self.font.render(note, True, self.theme.muted), (20, 420))

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
        rows = self.game.board.rows()
        n = self.game.size
        for r, c, poly, _ in self.cells:
            v = rows[r][c]
            col = self.theme.empty
            if v == RED:
                col = self.theme.red
            elif v == BLUE:
                col = self.theme.blue

            pygame.draw.polygon(self.screen, col, poly)
            pygame.draw.polygon(self.screen, self.theme.grid, poly, width=1)

        if self.game.last_move:
            mv = self.game.last_move
            for r, c, poly, _ in self.cells:
                if r == mv.r and c == mv.c:
                    pygame.draw.polygon(self.screen, (245, 245, 245), poly, width=3)
                    break

        # подсветка крайних гексов своей стороной
        for r, c, poly, _ in self.cells:
            if r == 0 or r == n - 1:
                pygame.draw.polygon(self.screen, self.theme.side_red, poly, width=3)
            if c == 0 or c == n - 1:
                pygame.draw.polygon(self.screen, self.theme.side_blue, poly, width=3)

    def _draw_game_hud(self):
        x = 20
        y = 70
        g = self.game

        if g.state == FINISHED:
            msg = f"Победил: {pname(g.winner)}"
        elif g.state == AWAITING_SWAP:
            msg = f"{pname(g.current)}: обмен?"
        else:
            msg = f"Ход: {pname(g.current)}"

        self.screen.blit(self.big_font.render(msg, True, self.theme.text), (x, 18))

        legend1 = self.font.render("Игрок 1: соединить ВЕРХ ↔ НИЗ", True, self.theme.red)
        legend2 = self.font.render("Игрок 2: соединить ЛЕВО ↔ ПРАВО", True, self.theme.blue)
        self.screen.blit(legend1, (x, y))
        self.screen.blit(legend2, (x, y + 24))

        if g.bot_player is not None:
            if self.bot_thinking:
                botmsg = "Бот думает..."
            elif self.bot_error:
                botmsg = f"Ошибка бота: {self.bot_error}"
            else:
                botmsg = f"Бот: {pname(g.bot_player)}"
            if g.swapped:
                botmsg += "  (был обмен)"
        else:
            botmsg = "Против бота: Нет"
        self.screen.blit(self.font.render(botmsg, True, self.theme.text), (x, y + 52))
