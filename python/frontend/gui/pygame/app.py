"""Pygame GUI frontend — fully self-contained.

Home screen with variant and penalty selection, the drag-and-drop game
screen, and the win / game-over overlay.  Mouse and touch both drive
the drags; cues play through ``pygame.mixer``.
"""

from __future__ import annotations

import enum
import math
import random
import time
from dataclasses import dataclass
from pathlib import Path

import pygame

from backend.engine.gamefeedback import FeedbackGate
from backend.engine.gamegenerator import Draggable
from backend.engine.gameinput import InputModality, InputSensorSelector
from backend.engine.gameplay import DropResult, PuzzleController, Route
from backend.engine.gamestate import Snapshot
from backend.models.sequence import PuzzleConfig, Variant, WrongDropPolicy
from frontend.gui.pygame.audio import create_player

# ---------------------------------------------------------------------------
# Catppuccin Mocha palette
# ---------------------------------------------------------------------------
COL_BASE = (30, 30, 46)
COL_MANTLE = (24, 24, 37)
COL_SURFACE0 = (49, 50, 68)
COL_SURFACE1 = (69, 71, 90)
COL_OVERLAY0 = (108, 112, 134)
COL_TEXT = (205, 214, 244)
COL_SUBTEXT = (166, 173, 200)
COL_BLUE = (137, 180, 250)
COL_LAVENDER = (180, 190, 254)
COL_GREEN = (166, 227, 161)
COL_PINK = (245, 194, 231)
COL_YELLOW = (249, 226, 175)
COL_RED = (243, 139, 168)
COL_TILE = (240, 240, 240)
COL_TILE_EDGE = (204, 204, 204)

CONFETTI_COLOURS = (COL_BLUE, COL_GREEN, COL_PINK, COL_YELLOW, COL_RED, COL_LAVENDER)

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
WIN_W, WIN_H = 760, 760
MARGIN = 20
SLOT_W, SLOT_H = 520, 64
SLOT_GAP = 30
SLOT_TOP = 120
TILE_H = 74
GRID_GAP = 16


# ---------------------------------------------------------------------------
# Screen enum
# ---------------------------------------------------------------------------
class _Screen(enum.Enum):
    HOME = "home"
    PLAYING = "playing"
    END = "end"


# ---------------------------------------------------------------------------
# Simple clickable button
# ---------------------------------------------------------------------------
class _Btn:
    __slots__ = ("rect", "text", "font", "bg", "hover", "fg", "radius", "_hot")

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        font: pygame.font.Font,
        *,
        bg: tuple = COL_SURFACE0,
        hover: tuple = COL_SURFACE1,
        fg: tuple = COL_TEXT,
        radius: int = 8,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.text = text
        self.font = font
        self.bg = bg
        self.hover = hover
        self.fg = fg
        self.radius = radius
        self._hot = False

    def draw(self, surf: pygame.Surface) -> None:
        c = self.hover if self._hot else self.bg
        pygame.draw.rect(surf, c, self.rect, border_radius=self.radius)
        lbl = self.font.render(self.text, True, self.fg)
        surf.blit(
            lbl,
            (
                self.rect.centerx - lbl.get_width() // 2,
                self.rect.centery - lbl.get_height() // 2,
            ),
        )

    def motion(self, pos: tuple[int, int]) -> None:
        self._hot = self.rect.collidepoint(pos)

    def hit(self, pos: tuple[int, int]) -> bool:
        return self.rect.collidepoint(pos)


@dataclass
class _Drag:
    """A tile being dragged: the grab offset keeps it under the pointer."""

    text: str
    offset: tuple[int, int]
    pos: tuple[int, int]
    origin: tuple[int, int]
    started: float = 0.0
    active: bool = False


@dataclass
class _Confetto:
    x: float
    y: float
    vy: float
    drift: float
    colour: tuple[int, int, int]


# ---------------------------------------------------------------------------
# Drawing helpers
# ---------------------------------------------------------------------------
def _cx(w: int) -> int:
    return (WIN_W - w) // 2


def _blit_center(surf: pygame.Surface, rendered: pygame.Surface, y: int) -> None:
    surf.blit(rendered, (_cx(rendered.get_width()), y))


def _wrap(font: pygame.font.Font, text: str, width: int) -> list[str]:
    """Greedy word wrap so each line renders within *width* pixels."""
    lines: list[str] = []
    line = ""
    for word in text.split():
        trial = f"{line} {word}".strip()
        if not line or font.size(trial)[0] <= width:
            line = trial
        else:
            lines.append(line)
            line = word
    if line:
        lines.append(line)
    return lines


def _blit_lines(
    surf: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    rect: pygame.Rect,
    colour: tuple,
) -> None:
    lines = _wrap(font, text, rect.width - 16)
    height = font.get_linesize()
    y = rect.centery - height * len(lines) // 2
    for line in lines:
        lbl = font.render(line, True, colour)
        surf.blit(lbl, (rect.centerx - lbl.get_width() // 2, y))
        y += height


def _draw_heart(
    surf: pygame.Surface, centre: tuple[int, int], size: int, colour: tuple
) -> None:
    x, y = centre
    r = size // 4
    pygame.draw.circle(surf, colour, (x - r, y - r // 2), r)
    pygame.draw.circle(surf, colour, (x + r, y - r // 2), r)
    pygame.draw.polygon(
        surf, colour, [(x - 2 * r, y - r // 3), (x + 2 * r, y - r // 3), (x, y + 2 * r)]
    )


def _draw_arrow(surf: pygame.Surface, x: int, y: int) -> None:
    pygame.draw.circle(surf, COL_BLUE, (x, y), 12)
    pygame.draw.polygon(
        surf, COL_BASE, [(x - 6, y - 3), (x + 6, y - 3), (x, y + 6)]
    )


# ---------------------------------------------------------------------------
# Main application
# ---------------------------------------------------------------------------
class PygameApp:
    def __init__(
        self,
        config: PuzzleConfig,
        assets_dir: Path,
        seed: int | None = None,
        cue_timeout: float | None = None,
    ) -> None:
        self._variant = Variant.SINGLE if config.part_count == 1 else Variant.TWO_PART
        self._policy = config.wrong_drop_policy
        self._lives = config.lives

        pygame.init()
        self._surf = pygame.display.set_mode((WIN_W, WIN_H))
        pygame.display.set_caption("Sequence Puzzle")
        self._clock = pygame.time.Clock()

        self._player = create_player(assets_dir / "sounds")
        self._game = PuzzleController(
            config,
            feedback=FeedbackGate(self._player, timeout=cue_timeout),
            rng=random.Random(seed),
            navigate=self._navigate,
        )
        self._sensors = InputSensorSelector()
        self._rng = random.Random(seed)

        # Fonts
        self._f_big = pygame.font.SysFont("Helvetica", 38, bold=True)
        self._f_title = pygame.font.SysFont("Helvetica", 24, bold=True)
        self._f_body = pygame.font.SysFont("Helvetica", 16)
        self._f_tile = pygame.font.SysFont("Helvetica", 15, bold=True)
        self._f_btn = pygame.font.SysFont("Helvetica", 17, bold=True)
        self._f_btn_sm = pygame.font.SysFont("Helvetica", 14, bold=True)
        self._f_small = pygame.font.SysFont("Helvetica", 13)

        self._screen = _Screen.HOME
        self._drag: _Drag | None = None
        self._shake_slot: int | None = None
        self._shake_until = 0.0
        self._confetti: list[_Confetto] = []

        self._build_home_btns()
        self._build_end_btns()

    # ── buttons ─────────────────────────────────────────────────────────────

    _VARIANTS: list[tuple[str, Variant]] = [
        ("Single part · 4 steps", Variant.SINGLE),
        ("Two parts · 8 steps", Variant.TWO_PART),
    ]
    _POLICIES: list[tuple[str, WrongDropPolicy]] = [
        ("Keep progress", WrongDropPolicy.PENALIZE_ONLY),
        ("Clear the part", WrongDropPolicy.CLEAR_CURRENT_PART),
    ]

    def _build_home_btns(self) -> None:
        bw, bh, gap = 220, 46, 12
        sx = _cx(2 * bw + gap)

        self._variant_btns: dict[Variant, _Btn] = {}
        for i, (label, v) in enumerate(self._VARIANTS):
            self._variant_btns[v] = _Btn(
                (sx + i * (bw + gap), 280, bw, bh), label, self._f_btn_sm
            )
        self._policy_btns: dict[WrongDropPolicy, _Btn] = {}
        for i, (label, p) in enumerate(self._POLICIES):
            self._policy_btns[p] = _Btn(
                (sx + i * (bw + gap), 390, bw, bh), label, self._f_btn_sm
            )

        bw_lg = 260
        self._start_btn = _Btn(
            (_cx(bw_lg), 490, bw_lg, 56),
            "G E T   S T A R T E D",
            self._f_btn,
            bg=COL_BLUE,
            hover=COL_LAVENDER,
            fg=COL_BASE,
        )
        self._quit_btn = _Btn(
            (_cx(bw_lg), 566, bw_lg, 44),
            "Q U I T",
            self._f_btn_sm,
            bg=COL_RED,
            hover=(255, 170, 185),
            fg=COL_BASE,
        )
        self._home_all: list[_Btn] = [
            *self._variant_btns.values(),
            *self._policy_btns.values(),
            self._start_btn,
            self._quit_btn,
        ]

    def _build_end_btns(self) -> None:
        bw = 220
        self._again_btn = _Btn(
            (_cx(bw), 470, bw, 50),
            "PLAY AGAIN",
            self._f_btn,
            bg=COL_GREEN,
            hover=(190, 240, 190),
            fg=COL_BASE,
        )

    # ── layout ──────────────────────────────────────────────────────────────

    @staticmethod
    def _slot_rects(snap: Snapshot) -> list[pygame.Rect]:
        x = _cx(SLOT_W)
        return [
            pygame.Rect(x, SLOT_TOP + i * (SLOT_H + SLOT_GAP), SLOT_W, SLOT_H)
            for i in range(len(snap.part_slots))
        ]

    @staticmethod
    def _tile_rects(snap: Snapshot) -> list[tuple[Draggable, pygame.Rect]]:
        """Pool tiles laid out two per row below the slots."""
        top = SLOT_TOP + len(snap.part_slots) * (SLOT_H + SLOT_GAP) + 10
        col_w = (WIN_W - 2 * MARGIN - GRID_GAP) // 2
        out: list[tuple[Draggable, pygame.Rect]] = []
        for i, tile in enumerate(snap.visible_draggables):
            r, c = divmod(i, 2)
            m = int(tile.margin)
            out.append(
                (
                    tile,
                    pygame.Rect(
                        MARGIN + c * (col_w + GRID_GAP) + m // 2,
                        top + r * (TILE_H + GRID_GAP) + m // 2,
                        col_w - 20,
                        TILE_H,
                    ),
                )
            )
        return out

    def _tile_surface(self, text: str, size: tuple[int, int], disabled: bool) -> pygame.Surface:
        surf = pygame.Surface(size, pygame.SRCALPHA)
        rect = surf.get_rect()
        pygame.draw.rect(surf, COL_SURFACE1 if disabled else COL_TILE, rect, border_radius=8)
        pygame.draw.rect(surf, COL_TILE_EDGE, rect, width=1, border_radius=8)
        _blit_lines(surf, self._f_tile, text, rect, COL_OVERLAY0 if disabled else COL_BASE)
        return surf

    # ── drawing ─────────────────────────────────────────────────────────────

    def _draw_home(self) -> None:
        self._surf.fill(COL_BASE)

        _blit_center(self._surf, self._f_big.render("SEQUENCE  PUZZLE", True, COL_TEXT), 80)
        _blit_center(
            self._surf,
            self._f_body.render(
                "Drag the process steps into the right order.", True, COL_SUBTEXT
            ),
            150,
        )
        _blit_center(
            self._surf,
            self._f_body.render(f"You have {self._lives} lives.", True, COL_PINK),
            176,
        )

        _blit_center(self._surf, self._f_body.render("Puzzle", True, COL_SUBTEXT), 250)
        for v, btn in self._variant_btns.items():
            btn.bg = COL_GREEN if v is self._variant else COL_SURFACE0
            btn.fg = COL_BASE if v is self._variant else COL_TEXT
            btn.draw(self._surf)

        _blit_center(
            self._surf, self._f_body.render("On a wrong drop", True, COL_SUBTEXT), 360
        )
        for p, btn in self._policy_btns.items():
            btn.bg = COL_YELLOW if p is self._policy else COL_SURFACE0
            btn.fg = COL_BASE if p is self._policy else COL_TEXT
            btn.draw(self._surf)

        self._start_btn.draw(self._surf)
        self._quit_btn.draw(self._surf)

    def _draw_game(self) -> None:
        self._surf.fill(COL_BASE)
        snap = self._game.snapshot()

        # lives, top-right
        lbl = self._f_btn_sm.render("Lives left", True, COL_TEXT)
        self._surf.blit(lbl, (WIN_W - MARGIN - lbl.get_width(), 16))
        for i in range(snap.max_lives):
            colour = COL_RED if i < snap.lives else COL_SURFACE1
            x = WIN_W - MARGIN - 14 - (snap.max_lives - 1 - i) * 32
            _draw_heart(self._surf, (x, 54), 26, colour)

        _blit_center(
            self._surf,
            self._f_title.render(
                f"Part {snap.current_part} of {snap.part_count}", True, COL_TEXT
            ),
            70,
        )

        # slots
        now = time.monotonic()
        shaking = self._shake_slot if now < self._shake_until else None
        rects = self._slot_rects(snap)
        for view, rect in zip(snap.part_slots, rects):
            rect = rect.copy()
            border = COL_OVERLAY0
            if view.index == shaking:
                rect.x += int(8 * math.sin(now * 60))
                border = COL_RED
            filled = view.item is not None
            pygame.draw.rect(
                self._surf, COL_GREEN if filled else COL_SURFACE0, rect, border_radius=8
            )
            pygame.draw.rect(self._surf, border, rect, width=2, border_radius=8)
            num = self._f_btn_sm.render(str(view.label), True, COL_BASE if filled else COL_SUBTEXT)
            self._surf.blit(num, (rect.x + 10, rect.y + 6))
            if filled:
                _blit_lines(self._surf, self._f_tile, view.item, rect, COL_BASE)
            else:
                _blit_lines(self._surf, self._f_body, "Drop here", rect, COL_OVERLAY0)

        for rect in rects[:-1]:
            y = rect.bottom + SLOT_GAP // 2
            _draw_arrow(self._surf, rect.x + rect.width // 10, y)
            _draw_arrow(self._surf, rect.right - rect.width // 10, y)

        # pool
        dragging = self._drag.text if self._drag and self._drag.active else None
        for tile, rect in self._tile_rects(snap):
            if tile.text == dragging:
                continue
            surf = self._tile_surface(tile.text, rect.size, snap.input_locked)
            # pygame rotates counter-clockwise; the stored angle is clockwise
            surf = pygame.transform.rotate(surf, -tile.rotation)
            self._surf.blit(surf, surf.get_rect(center=rect.center))

        # dragged tile, upright, on top
        if dragging is not None:
            assert self._drag is not None
            size = (WIN_W // 2 - MARGIN - 20, TILE_H)
            surf = self._tile_surface(dragging, size, False)
            x = self._drag.pos[0] - self._drag.offset[0]
            y = self._drag.pos[1] - self._drag.offset[1]
            self._surf.blit(surf, (x, y))

        footer = "Drag each step into the next open slot     R  restart     Esc  home"
        if self._sensors.modality is InputModality.TOUCH:
            footer = "Touch and drag each step into the next open slot"
        _blit_center(self._surf, self._f_small.render(footer, True, COL_OVERLAY0), WIN_H - 28)

    def _draw_end(self) -> None:
        self._draw_game()
        snap = self._game.snapshot()

        veil = pygame.Surface((WIN_W, WIN_H), pygame.SRCALPHA)
        veil.fill((0, 128, 0, 217) if snap.won else (128, 0, 0, 217))
        self._surf.blit(veil, (0, 0))

        if snap.won:
            self._draw_confetti()

        panel = pygame.Rect(_cx(560), 220, 560, 330)
        box = pygame.Surface(panel.size, pygame.SRCALPHA)
        pygame.draw.rect(box, (0, 0, 0, 153), box.get_rect(), border_radius=20)
        self._surf.blit(box, panel.topleft)

        if snap.won:
            title, title_col = "Congratulations!  You Won!", COL_YELLOW
            body = "You have successfully completed the puzzle! Great job!"
            self._again_btn.text = "PLAY AGAIN"
            self._again_btn.bg, self._again_btn.hover = (76, 175, 80), (56, 142, 60)
        else:
            title, title_col = "Game Over! Try Again.", (255, 87, 34)
            body = "You’ve run out of lives, but don’t give up! Try again to succeed!"
            self._again_btn.text = "TRY AGAIN"
            self._again_btn.bg, self._again_btn.hover = (211, 47, 47), (183, 28, 28)
        self._again_btn.fg = (255, 255, 255)

        _blit_center(self._surf, self._f_big.render(title, True, title_col), 270)
        _blit_lines(
            self._surf,
            self._f_body,
            body,
            pygame.Rect(panel.x + 20, 340, panel.width - 40, 80),
            (255, 255, 255),
        )
        self._again_btn.draw(self._surf)

    # ── confetti ────────────────────────────────────────────────────────────

    def _spawn_confetti(self) -> None:
        self._confetti = [
            _Confetto(
                x=self._rng.uniform(0, WIN_W),
                y=self._rng.uniform(-WIN_H, 0),
                vy=self._rng.uniform(2.0, 5.0),
                drift=self._rng.uniform(-1.0, 1.0),
                colour=self._rng.choice(CONFETTI_COLOURS),
            )
            for _ in range(150)
        ]

    def _draw_confetti(self) -> None:
        for c in self._confetti:
            c.y += c.vy
            c.x += c.drift
            if c.y > WIN_H:
                c.y = self._rng.uniform(-40, 0)
            pygame.draw.rect(self._surf, c.colour, pygame.Rect(int(c.x), int(c.y), 6, 10))

    # ── event handling ──────────────────────────────────────────────────────

    def _observe(self, ev: pygame.event.Event) -> None:
        # pygame 2 marks mouse events synthesized from touches
        touch = getattr(ev, "touch", False)
        self._sensors.observe(InputModality.TOUCH if touch else InputModality.POINTER)

    def _ev_home(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            for b in self._home_all:
                b.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            self._observe(ev)
            for v, b in self._variant_btns.items():
                if b.hit(ev.pos):
                    self._variant = v
                    return True
            for p, b in self._policy_btns.items():
                if b.hit(ev.pos):
                    self._policy = p
                    return True
            if self._start_btn.hit(ev.pos):
                self._start_game()
            elif self._quit_btn.hit(ev.pos):
                return False
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_RETURN:
                self._start_game()
            elif ev.key in (pygame.K_q, pygame.K_ESCAPE):
                return False
        return True

    def _ev_game(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            self._observe(ev)
            snap = self._game.snapshot()
            if snap.input_locked:
                return True
            for tile, rect in reversed(self._tile_rects(snap)):
                if rect.collidepoint(ev.pos):
                    self._drag = _Drag(
                        text=tile.text,
                        offset=(ev.pos[0] - rect.x, ev.pos[1] - rect.y),
                        pos=ev.pos,
                        origin=ev.pos,
                        started=time.monotonic(),
                    )
                    break
        elif ev.type == pygame.MOUSEMOTION and self._drag is not None:
            self._drag.pos = ev.pos
            dx = ev.pos[0] - self._drag.origin[0]
            dy = ev.pos[1] - self._drag.origin[1]
            held = time.monotonic() - self._drag.started
            if self._sensors.active.activates(math.hypot(dx, dy), held):
                self._drag.active = True
        elif ev.type == pygame.MOUSEBUTTONUP and ev.button == 1 and self._drag is not None:
            drag, self._drag = self._drag, None
            if drag.active:
                self._drop(drag.text, ev.pos)
        elif ev.type == pygame.KEYDOWN:
            if ev.key in (pygame.K_r, pygame.K_ESCAPE, pygame.K_m):
                self._game.reset()
        return True

    def _ev_end(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            self._again_btn.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._again_btn.hit(ev.pos):
                self._game.reset()
        elif ev.type == pygame.KEYDOWN:
            if ev.key in (pygame.K_r, pygame.K_RETURN):
                self._game.reset()
            elif ev.key == pygame.K_ESCAPE:
                return False
        return True

    # ── game actions ────────────────────────────────────────────────────────

    def _drop(self, text: str, pos: tuple[int, int]) -> None:
        snap = self._game.snapshot()
        for view, rect in zip(snap.part_slots, self._slot_rects(snap)):
            if rect.collidepoint(pos):
                self._apply(self._game.on_drop(text, view.index))
                return

    def _apply(self, result: DropResult) -> None:
        if result.shake is not None:
            self._shake_slot = result.shake.slot
            self._shake_until = time.monotonic() + result.shake.duration

    def _navigate(self, route: Route) -> None:
        self._drag = None
        self._screen = _Screen.HOME if route is Route.HOME else _Screen.PLAYING

    def _start_game(self) -> None:
        self._game.reconfigure(
            PuzzleConfig.for_variant(self._variant, self._policy, self._lives)
        )
        self._shake_slot = None
        self._navigate(Route.GAME)

    def _check_end(self) -> None:
        if self._screen is not _Screen.PLAYING:
            return
        snap = self._game.snapshot()
        if snap.won or snap.lost:
            self._drag = None
            if snap.won:
                self._spawn_confetti()
            self._screen = _Screen.END

    # ── main loop ───────────────────────────────────────────────────────────

    def run_loop(self) -> None:
        _dispatch = {
            _Screen.HOME: self._ev_home,
            _Screen.PLAYING: self._ev_game,
            _Screen.END: self._ev_end,
        }
        _draw = {
            _Screen.HOME: self._draw_home,
            _Screen.PLAYING: self._draw_game,
            _Screen.END: self._draw_end,
        }

        running = True
        while running:
            for ev in pygame.event.get():
                if ev.type == pygame.QUIT:
                    running = False
                    break
                handler = _dispatch.get(self._screen)
                if handler and not handler(ev):
                    running = False
                    break

            self._player.tick()
            self._game.poll()
            self._check_end()

            drawer = _draw.get(self._screen)
            if drawer:
                drawer()
            pygame.display.flip()
            self._clock.tick(60)

        pygame.quit()


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(
    config: PuzzleConfig,
    assets_dir: Path = Path("assets"),
    seed: int | None = None,
    cue_timeout: float | None = None,
) -> None:
    """Launch the Pygame GUI (opens on the home screen)."""
    app = PygameApp(config, assets_dir, seed, cue_timeout)
    app.run_loop()
