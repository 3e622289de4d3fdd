"""PyQt6 GUI frontend — fully self-contained.

Home screen, drag-and-drop game page and the win / game-over page.
Tiles are dragged with Qt's own drag-and-drop, so mouse and touch both
work; cues play through QSoundEffect.
"""

from __future__ import annotations

import random
import sys
import time
from pathlib import Path

from PyQt6.QtCore import (
    QMimeData,
    QPoint,
    QPropertyAnimation,
    QRectF,
    Qt,
    QTimer,
    pyqtSignal,
)
from PyQt6.QtGui import (
    QColor,
    QDrag,
    QFont,
    QInputDevice,
    QKeyEvent,
    QMouseEvent,
    QPainter,
    QPen,
)
from PyQt6.QtWidgets import (
    QApplication,
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QSpacerItem,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from backend.engine.gamefeedback import FeedbackGate
from backend.engine.gamegenerator import Draggable
from backend.engine.gameinput import InputModality, InputSensorSelector
from backend.engine.gameplay import PuzzleController, Route
from backend.engine.gamestate import SlotView, Snapshot
from backend.models.sequence import PuzzleConfig, Variant, WrongDropPolicy
from frontend.gui.pyqt.audio import QtCuePlayer

# ---------------------------------------------------------------------------
# Catppuccin Mocha CSS colours
# ---------------------------------------------------------------------------
_BASE = "#1e1e2e"
_MANTLE = "#181825"
_SURFACE0 = "#313244"
_SURFACE1 = "#45475a"
_OVERLAY0 = "#6c7086"
_TEXT = "#cdd6f4"
_SUBTEXT = "#a6adc8"
_BLUE = "#89b4fa"
_GREEN = "#a6e3a1"
_GREEN_H = "#b8ecb4"
_YELLOW = "#f9e2af"
_RED = "#f38ba8"
_RED_H = "#f5a0b8"
_LAVENDER = "#b4befe"

_GLOBAL_CSS = f"""
    QMainWindow, QWidget#page {{ background: {_BASE}; }}
    QLabel {{ color: {_TEXT}; }}
"""

_TILE_W, _TILE_H = 280, 72
_POLL_MS = 200


def _styled_btn(
    text: str,
    *,
    bg: str = _SURFACE0,
    hover: str = _SURFACE1,
    fg: str = _TEXT,
    font_size: int = 14,
    min_w: int = 0,
    min_h: int = 44,
    radius: int = 8,
) -> QPushButton:
    btn = QPushButton(text)
    btn.setFont(QFont("Helvetica", font_size, QFont.Weight.Bold))
    btn.setMinimumHeight(min_h)
    if min_w:
        btn.setMinimumWidth(min_w)
    btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
    btn.setCursor(Qt.CursorShape.PointingHandCursor)
    _paint_btn(btn, bg=bg, hover=hover, fg=fg, radius=radius)
    return btn


def _paint_btn(
    btn: QPushButton, *, bg: str, hover: str, fg: str = _TEXT, radius: int = 8
) -> None:
    btn.setStyleSheet(
        f"QPushButton {{ background:{bg}; color:{fg};"
        f" border:none; border-radius:{radius}px; padding:6px 18px; }}"
        f" QPushButton:hover {{ background:{hover}; }}"
    )


def _centered_label(text: str, size: int, colour: str = _TEXT, bold: bool = False) -> QLabel:
    lbl = QLabel(text)
    lbl.setFont(QFont("Helvetica", size, QFont.Weight.Bold if bold else QFont.Weight.Normal))
    lbl.setStyleSheet(f"color:{colour};")
    lbl.setAlignment(Qt.AlignmentFlag.AlignCenter)
    lbl.setWordWrap(True)
    return lbl


# ═══════════════════════════════════════════════════════════════════════════
# Drag source and drop target
# ═══════════════════════════════════════════════════════════════════════════


class _TileWidget(QWidget):
    """A tilted, draggable step tile."""

    def __init__(self, tile: Draggable, sensors: InputSensorSelector) -> None:
        super().__init__()
        self._tile = tile
        self._sensors = sensors
        self._press: QPoint | None = None
        self._pressed_at = 0.0
        self.setFixedSize(_TILE_W + 40, _TILE_H + 60)
        self.setCursor(Qt.CursorShape.OpenHandCursor)

    def paintEvent(self, event) -> None:  # noqa: N802
        p = QPainter(self)
        p.setRenderHint(QPainter.RenderHint.Antialiasing)
        nudge = self._tile.offset
        p.translate(self.width() / 2 + nudge, self.height() / 2 + nudge)
        p.rotate(self._tile.rotation)
        rect = QRectF(-_TILE_W / 2, -_TILE_H / 2, _TILE_W, _TILE_H)
        enabled = self.isEnabled()
        p.setPen(QPen(QColor("#cccccc"), 1))
        p.setBrush(QColor("#f0f0f0" if enabled else _SURFACE1))
        p.drawRoundedRect(rect, 8, 8)
        p.setPen(QColor(_BASE if enabled else _OVERLAY0))
        p.setFont(QFont("Helvetica", 11, QFont.Weight.Bold))
        p.drawText(
            rect.adjusted(8, 4, -8, -4),
            int(Qt.AlignmentFlag.AlignCenter | Qt.TextFlag.TextWordWrap),
            self._tile.text,
        )
        p.end()

    def mousePressEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        device = event.pointingDevice()
        touch = device is not None and device.type() == QInputDevice.DeviceType.TouchScreen
        self._sensors.observe(InputModality.TOUCH if touch else InputModality.POINTER)
        if event.button() == Qt.MouseButton.LeftButton:
            self._press = event.position().toPoint()
            self._pressed_at = time.monotonic()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if self._press is None or not self.isEnabled():
            return
        moved = (event.position().toPoint() - self._press).manhattanLength()
        if not self._sensors.active.activates(moved, time.monotonic() - self._pressed_at):
            return
        self._press = None
        mime = QMimeData()
        mime.setText(self._tile.text)
        drag = QDrag(self)
        drag.setMimeData(mime)
        drag.setPixmap(self.grab())
        drag.setHotSpot(event.position().toPoint())
        drag.exec(Qt.DropAction.MoveAction)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        self._press = None


class _SlotWidget(QFrame):
    """One ordered position; emits ``dropped(text, index)``."""

    dropped = pyqtSignal(str, int)

    def __init__(self, view: SlotView) -> None:
        super().__init__()
        self.index = view.index
        self.setAcceptDrops(True)
        self.setFixedSize(520, 70)

        row = QHBoxLayout(self)
        row.setContentsMargins(12, 4, 12, 4)
        self._num = QLabel()
        self._num.setFont(QFont("Helvetica", 13, QFont.Weight.Bold))
        self._num.setFixedWidth(28)
        row.addWidget(self._num)
        self._body = QLabel()
        self._body.setFont(QFont("Helvetica", 12))
        self._body.setWordWrap(True)
        self._body.setAlignment(Qt.AlignmentFlag.AlignCenter)
        row.addWidget(self._body, 1)

        self._anim: QPropertyAnimation | None = None
        self._shaking = False
        self.update_view(view)

    def update_view(self, view: SlotView) -> None:
        self._view = view
        self._num.setText(str(view.label))
        self._body.setText(view.item or "Drop Here")
        self._restyle()

    def _restyle(self) -> None:
        filled = self._view.item is not None
        bg = "#d4edda" if filled else "#e0e0e0"
        border = _RED if self._shaking else "#aaaaaa"
        self.setStyleSheet(
            f"QFrame {{ background:{bg}; border:2px dashed {border};"
            f" border-radius:8px; }}"
            f" QLabel {{ color:{'#000000' if filled else '#666666'}; }}"
        )

    def shake(self, duration: float) -> None:
        ms = int(duration * 1000)
        origin = self.pos()
        self._anim = QPropertyAnimation(self, b"pos", self)
        self._anim.setDuration(ms)
        for step, dx in enumerate((0, -8, 8, -6, 6, -3, 3, 0)):
            self._anim.setKeyValueAt(step / 7, origin + QPoint(dx, 0))
        self._anim.start()
        self._shaking = True
        self._restyle()
        QTimer.singleShot(ms, self._stop_shake)

    def _stop_shake(self) -> None:
        self._shaking = False
        self._restyle()

    def dragEnterEvent(self, event) -> None:  # noqa: N802
        if event.mimeData().hasText():
            event.acceptProposedAction()

    def dropEvent(self, event) -> None:  # noqa: N802
        event.acceptProposedAction()
        self.dropped.emit(event.mimeData().text(), self.index)


# ═══════════════════════════════════════════════════════════════════════════
# Pages
# ═══════════════════════════════════════════════════════════════════════════


class _HomePage(QWidget):
    """Entry screen: pick the puzzle variant and the wrong-drop rule."""

    _VARIANTS = (
        ("Single part · 4 steps", Variant.SINGLE),
        ("Two parts · 8 steps", Variant.TWO_PART),
    )
    _POLICIES = (
        ("Keep progress", WrongDropPolicy.PENALIZE_ONLY),
        ("Clear the part", WrongDropPolicy.CLEAR_CURRENT_PART),
    )

    def __init__(self, config: PuzzleConfig) -> None:
        super().__init__()
        self.setObjectName("page")
        self.variant = Variant.SINGLE if config.part_count == 1 else Variant.TWO_PART
        self.policy = config.wrong_drop_policy
        self.lives = config.lives

        root = QVBoxLayout(self)
        root.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.setSpacing(12)
        root.setContentsMargins(30, 30, 30, 30)

        root.addWidget(_centered_label("SEQUENCE  PUZZLE", 34, bold=True))
        root.addWidget(
            _centered_label("Drag the process steps into the right order.", 15, _SUBTEXT)
        )
        root.addWidget(_centered_label(f"You have {self.lives} lives.", 13, _RED))
        root.addSpacerItem(QSpacerItem(0, 18))

        root.addWidget(_centered_label("Puzzle", 13, _SUBTEXT))
        self._variant_btns = self._button_row(root, self._VARIANTS, self._pick_variant)
        root.addSpacerItem(QSpacerItem(0, 8))
        root.addWidget(_centered_label("On a wrong drop", 13, _SUBTEXT))
        self._policy_btns = self._button_row(root, self._POLICIES, self._pick_policy)
        root.addSpacerItem(QSpacerItem(0, 18))

        self.start_btn = _styled_btn(
            "G E T   S T A R T E D", bg=_BLUE, hover=_LAVENDER, fg=_BASE,
            font_size=16, min_w=260, min_h=52,
        )
        root.addWidget(self.start_btn, alignment=Qt.AlignmentFlag.AlignCenter)
        root.addSpacerItem(QSpacerItem(0, 4))
        self.quit_btn = _styled_btn(
            "Q U I T", bg=_RED, hover=_RED_H, fg=_BASE, min_w=260, font_size=13
        )
        root.addWidget(self.quit_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        self._refresh()

    @staticmethod
    def _button_row(root: QVBoxLayout, options, on_pick) -> dict:
        hbox = QHBoxLayout()
        hbox.setAlignment(Qt.AlignmentFlag.AlignCenter)
        hbox.setSpacing(10)
        btns = {}
        for label, value in options:
            btn = _styled_btn(label, min_w=200, min_h=46, font_size=13)
            btn.clicked.connect(lambda _, v=value: on_pick(v))
            hbox.addWidget(btn)
            btns[value] = btn
        root.addLayout(hbox)
        return btns

    def _pick_variant(self, variant: Variant) -> None:
        self.variant = variant
        self._refresh()

    def _pick_policy(self, policy: WrongDropPolicy) -> None:
        self.policy = policy
        self._refresh()

    def _refresh(self) -> None:
        for v, btn in self._variant_btns.items():
            if v is self.variant:
                _paint_btn(btn, bg=_GREEN, hover=_GREEN_H, fg=_BASE)
            else:
                _paint_btn(btn, bg=_SURFACE0, hover=_SURFACE1)
        for p, btn in self._policy_btns.items():
            if p is self.policy:
                _paint_btn(btn, bg=_YELLOW, hover="#fbeacc", fg=_BASE)
            else:
                _paint_btn(btn, bg=_SURFACE0, hover=_SURFACE1)

    def config(self) -> PuzzleConfig:
        return PuzzleConfig.for_variant(self.variant, self.policy, self.lives)


class _GamePage(QWidget):
    """Lives, part title, the slot column and the pool of tiles."""

    def __init__(self, game: PuzzleController, sensors: InputSensorSelector) -> None:
        super().__init__()
        self.setObjectName("page")
        self._game = game
        self._sensors = sensors

        root = QVBoxLayout(self)
        root.setSpacing(8)
        root.setContentsMargins(16, 10, 16, 10)

        self._lives = QLabel()
        self._lives.setFont(QFont("Helvetica", 18, QFont.Weight.Bold))
        self._lives.setAlignment(Qt.AlignmentFlag.AlignRight)
        root.addWidget(self._lives)

        self._title = _centered_label("", 20, bold=True)
        root.addWidget(self._title)

        self._slot_box = QVBoxLayout()
        self._slot_box.setSpacing(6)
        self._slot_box.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addLayout(self._slot_box)
        self._slots: list[_SlotWidget] = []
        self._slots_part = 0

        pool = QFrame()
        pool.setStyleSheet(f"background:{_MANTLE}; border-radius:10px;")
        self._pool = QGridLayout(pool)
        self._pool.setSpacing(8)
        self._pool.setContentsMargins(8, 8, 8, 8)
        root.addWidget(pool, alignment=Qt.AlignmentFlag.AlignCenter)

        hint = _centered_label("Drag each step into the next open slot     R  restart     Esc  home", 11, _OVERLAY0)
        root.addWidget(hint)

        game.subscribe(self.sync)
        self.sync(game.snapshot())

    # -- rendering --

    def sync(self, snap: Snapshot) -> None:
        hearts = "".join(
            f"<span style='color:{_RED if i < snap.lives else _SURFACE1}'>♥</span>"
            for i in range(snap.max_lives)
        )
        self._lives.setText(f"Lives left&nbsp;&nbsp;{hearts}")
        self._title.setText(f"Part {snap.current_part} of {snap.part_count}")

        if self._slots_part != snap.current_part or len(self._slots) != len(snap.part_slots):
            self._rebuild_slots(snap)
        else:
            for widget, view in zip(self._slots, snap.part_slots):
                widget.update_view(view)

        while self._pool.count():
            item = self._pool.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()
        for i, tile in enumerate(snap.visible_draggables):
            widget = _TileWidget(tile, self._sensors)
            widget.setEnabled(not snap.input_locked)
            self._pool.addWidget(widget, i // 2, i % 2)

    def _rebuild_slots(self, snap: Snapshot) -> None:
        while self._slot_box.count():
            item = self._slot_box.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()
        self._slots = []
        for n, view in enumerate(snap.part_slots):
            if n:
                self._slot_box.addWidget(_centered_label("⬇", 16, _BLUE))
            widget = _SlotWidget(view)
            widget.dropped.connect(self._on_dropped)
            self._slot_box.addWidget(widget, alignment=Qt.AlignmentFlag.AlignCenter)
            self._slots.append(widget)
        self._slots_part = snap.current_part

    def _on_dropped(self, text: str, index: int) -> None:
        result = self._game.on_drop(text, index)
        if result.shake is not None:
            self._slots[result.shake.slot].shake(result.shake.duration)


class _EndPage(QWidget):
    """Win or game-over screen with a single way back."""

    def __init__(self, won: bool) -> None:
        super().__init__()
        self.setObjectName("end")
        bg = "rgba(0, 128, 0, 217)" if won else "rgba(128, 0, 0, 217)"
        self.setStyleSheet(f"QWidget#end {{ background:{bg}; }}")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)

        root = QVBoxLayout(self)
        root.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.setSpacing(14)
        root.setContentsMargins(40, 40, 40, 40)

        if won:
            root.addWidget(_centered_label("\U0001f389 Congratulations!\nYou Won! \U0001f389", 30, "#ffeb3b", True))
            root.addWidget(_centered_label("You have successfully completed the puzzle! Great job!", 16, "#ffffff"))
            self.again_btn = _styled_btn("Play Again", bg="#4caf50", hover="#388e3c", fg="#ffffff", font_size=16, min_w=220)
        else:
            root.addWidget(_centered_label("Game Over! Try Again.", 30, "#ff5722", True))
            root.addWidget(
                _centered_label(
                    "You’ve run out of lives, but don’t give up! Try again to succeed!",
                    16,
                    "#ffffff",
                )
            )
            self.again_btn = _styled_btn("Try Again", bg="#d32f2f", hover="#b71c1c", fg="#ffffff", font_size=16, min_w=220)
        root.addSpacerItem(QSpacerItem(0, 16))
        root.addWidget(self.again_btn, alignment=Qt.AlignmentFlag.AlignCenter)


# ═══════════════════════════════════════════════════════════════════════════
# Main window
# ═══════════════════════════════════════════════════════════════════════════

_IDX_HOME = 0
_IDX_GAME = 1
_IDX_END = 2


class _MainWindow(QMainWindow):
    def __init__(
        self,
        config: PuzzleConfig,
        assets_dir: Path,
        seed: int | None,
        cue_timeout: float | None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Sequence Puzzle")
        self.setStyleSheet(_GLOBAL_CSS)
        self.setMinimumSize(720, 820)

        self._player = QtCuePlayer(assets_dir / "sounds", self)
        self._sensors = InputSensorSelector()
        self._game = PuzzleController(
            config,
            feedback=FeedbackGate(self._player, timeout=cue_timeout),
            rng=random.Random(seed),
            navigate=self._navigate,
        )

        self._stack = QStackedWidget()
        self.setCentralWidget(self._stack)

        self._home = _HomePage(config)
        self._home.start_btn.clicked.connect(self._on_start)
        self._home.quit_btn.clicked.connect(self.close)
        self._stack.addWidget(self._home)  # 0

        self._game_page = _GamePage(self._game, self._sensors)
        self._stack.addWidget(self._game_page)  # 1

        self._stack.addWidget(QWidget())  # 2, replaced on game end

        self._game.subscribe(self._on_snapshot)
        self._stack.setCurrentIndex(_IDX_HOME)

        # cues that never report back must not strand the game
        self._poll_timer = QTimer(self)
        self._poll_timer.timeout.connect(self._game.poll)
        self._poll_timer.start(_POLL_MS)

    # -- navigation ---

    def _navigate(self, route: Route) -> None:
        self._stack.setCurrentIndex(_IDX_HOME if route is Route.HOME else _IDX_GAME)

    def _on_start(self) -> None:
        self._game.reconfigure(self._home.config())
        self._navigate(Route.GAME)

    def _on_snapshot(self, snap: Snapshot) -> None:
        if not (snap.won or snap.lost) or self._stack.currentIndex() != _IDX_GAME:
            return
        page = _EndPage(won=snap.won)
        page.again_btn.clicked.connect(self._game.reset)
        old = self._stack.widget(_IDX_END)
        self._stack.removeWidget(old)
        old.deleteLater()
        self._stack.insertWidget(_IDX_END, page)
        self._stack.setCurrentIndex(_IDX_END)

    # -- keyboard ---

    def keyPressEvent(self, event: QKeyEvent | None) -> None:  # noqa: N802
        if event is None:
            return
        key = event.key()
        idx = self._stack.currentIndex()

        if idx == _IDX_HOME:
            if key == Qt.Key.Key_Return:
                self._on_start()
            elif key in (Qt.Key.Key_Q, Qt.Key.Key_Escape):
                self.close()
        elif idx in (_IDX_GAME, _IDX_END):
            if key in (Qt.Key.Key_R, Qt.Key.Key_Return, Qt.Key.Key_Escape, Qt.Key.Key_M):
                self._game.reset()
        else:
            super().keyPressEvent(event)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(
    config: PuzzleConfig,
    assets_dir: Path = Path("assets"),
    seed: int | None = None,
    cue_timeout: float | None = None,
) -> None:
    """Launch the PyQt6 GUI (opens on the home screen)."""
    qapp = QApplication.instance() or QApplication(sys.argv)
    window = _MainWindow(config, assets_dir, seed, cue_timeout)
    window.show()
    qapp.exec()
