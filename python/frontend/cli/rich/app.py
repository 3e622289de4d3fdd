"""Rich terminal frontend — panels, tables and keyboard drag-and-drop.

Tiles are picked with ← →, slots with ↑ ↓ (or their number), and Enter
drops the picked tile on the picked slot.  Cues ring the bell where it
makes sense and hold input for their duration, like the GUI frontends.
"""

from __future__ import annotations

import random
import time
from concurrent.futures import Future

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from backend.engine.gamefeedback import Cue, FeedbackGate, TimedCuePlayer
from backend.engine.gameplay import DropResult, PuzzleController, Route
from backend.engine.gamestate import Snapshot
from backend.engine.gamevalidator import Verdict
from backend.models.sequence import PuzzleConfig, Variant, WrongDropPolicy
from frontend.cli.input_handler import Action, KeyPress, get_key, get_key_timeout

console = Console()

_VARIANT_LABELS: dict[Variant, str] = {
    Variant.SINGLE: "Single part · 4 steps",
    Variant.TWO_PART: "Two parts · 8 steps",
}

_POLICY_LABELS: dict[WrongDropPolicy, str] = {
    WrongDropPolicy.PENALIZE_ONLY: "keep progress",
    WrongDropPolicy.CLEAR_CURRENT_PART: "clear the part",
}

_STATUS: dict[Verdict, str] = {
    Verdict.ACCEPTED: "[bold green]Correct![/bold green]",
    Verdict.REJECTED: "[bold red]Wrong step for that slot — you lose a life.[/bold red]",
}


class _TerminalCuePlayer(TimedCuePlayer):
    """Timed cues; the wrong-answer cue also rings the terminal bell."""

    def play(self, cue: Cue) -> Future[None]:
        if cue is Cue.WRONG:
            console.bell()
        return super().play(cue)


# -- rendering ----------------------------------------------------------------


def _render_lives(snap: Snapshot) -> Text:
    lives = Text("Lives left  ", style="dim")
    for i in range(snap.max_lives):
        lives.append("♥ ", style="bold red" if i < snap.lives else "grey37")
    return lives


def _render_slots(snap: Snapshot, cursor: int, shaking: int | None) -> Table:
    """Return a Rich Table with one row per slot of the current part."""
    table = Table(
        show_header=False,
        box=rich.box.HEAVY,
        border_style="bright_blue",
        padding=(0, 1),
        show_lines=True,
    )
    table.add_column(width=2, justify="right")
    table.add_column(width=3, justify="right")
    table.add_column(min_width=40)

    for view in snap.part_slots:
        marker = "[bold cyan]▶[/bold cyan]" if view.index == cursor else ""
        label = f"[bold]{view.label}[/bold]"
        if view.index == shaking:
            body = "[bold white on red] ✗ wrong step [/bold white on red]"
        elif view.item is not None:
            body = f"[bold green]{view.item}[/bold green]"
        else:
            body = "[dim]Drop here[/dim]"
        table.add_row(marker, label, body)
    return table


def _render_pool(snap: Snapshot, cursor: int) -> Group:
    """The tiles still waiting to be placed, one per line."""
    if not snap.visible_draggables:
        return Group(Text(""))
    lines: list[Text] = []
    for i, tile in enumerate(snap.visible_draggables):
        # No rotation in a terminal; the margin becomes an indent.
        line = Text(" " * int(tile.margin // 4))
        if snap.input_locked:
            line.append(f"  {tile.text}  ", style="dim")
        elif i == cursor:
            line.append(f"  {tile.text}  ", style="bold black on yellow")
        else:
            line.append(f"  {tile.text}  ", style="white on #313244")
        lines.append(line)
    return Group(*lines)


def _draw_home(variant: Variant, policy: WrongDropPolicy, lives: int) -> None:
    console.clear()

    variants = Text()
    for v in Variant:
        if v is not Variant.SINGLE:
            variants.append("   ")
        if v is variant:
            variants.append(f" {_VARIANT_LABELS[v]} ", style="bold green on #313244")
        else:
            variants.append(f" {_VARIANT_LABELS[v]} ", style="dim")

    policy_line = Text()
    policy_line.append("On a wrong drop: ", style="dim")
    policy_line.append(_POLICY_LABELS[policy], style="bold yellow")
    policy_line.append("   (P to change)", style="dim")

    opts = Text()
    opts.append("  Enter", style="bold cyan")
    opts.append("  Get started    ")
    opts.append("← →", style="bold cyan")
    opts.append("  variant    ", style="dim")
    opts.append("Q", style="dim bold")
    opts.append("  Quit", style="dim")

    body = Group(
        Text(""),
        Align.center(Text("Put the process steps in the right order.", style="italic")),
        Align.center(Text(f"You have {lives} lives.", style="dim")),
        Text(""),
        Align.center(variants),
        Align.center(policy_line),
        Text(""),
        Align.center(opts),
        Text(""),
    )
    panel = Panel(
        body,
        title="[bold]S E Q U E N C E   P U Z Z L E[/bold]",
        border_style="bright_blue",
        padding=(1, 4),
    )
    console.print()
    console.print(Align.center(panel))


def _draw_game(
    snap: Snapshot,
    tile: int,
    slot: int,
    shaking: int | None,
    status: str,
) -> None:
    console.clear()

    header = Group(
        Align.right(_render_lives(snap)),
        Align.center(
            Text(f"Part {snap.current_part} of {snap.part_count}", style="bold")
        ),
    )

    controls = Text()
    controls.append("  ←→", style="bold cyan")
    controls.append("  tile   ", style="dim")
    controls.append("↑↓", style="bold cyan")
    controls.append(" / ", style="dim")
    controls.append("1-9", style="bold cyan")
    controls.append("  slot   ", style="dim")
    controls.append("Enter", style="bold cyan")
    controls.append("  drop   ", style="dim")
    controls.append("R", style="bold cyan")
    controls.append("  restart   ", style="dim")
    controls.append("Q", style="bold cyan")
    controls.append("  back", style="dim")

    panel = Panel(
        Group(
            header,
            Text(""),
            Align.center(_render_slots(snap, slot, shaking)),
            Text(""),
            Align.center(_render_pool(snap, tile)),
        ),
        title="[bold cyan]Sequence Puzzle[/bold cyan]",
        border_style="bright_blue",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(controls))


def _draw_end(snap: Snapshot) -> None:
    console.clear()

    if snap.won:
        title = Text("\n  ★ Congratulations! You won! ★\n", style="bold yellow")
        body = Text(
            "You have successfully completed the puzzle! Great job!", style="green"
        )
        again = "Play again"
        border = "bold green"
    else:
        title = Text("\n  Game over! Try again.\n", style="bold #ff5722")
        body = Text(
            "You’ve run out of lives, but don’t give up! "
            "Try again to succeed!",
            style="red",
        )
        again = "Try again"
        border = "bold red"

    hint = Text()
    hint.append("\n  Enter", style="bold cyan")
    hint.append(f"  {again}    ", style="dim")
    hint.append("Q", style="bold cyan")
    hint.append("  quit\n", style="dim")

    panel = Panel(
        Group(Align.center(title), Align.center(body), Align.center(hint)),
        title="[bold]Sequence Puzzle[/bold]",
        border_style=border,
        padding=(1, 2),
    )
    console.print()
    console.print(Align.center(panel))


# -- application --------------------------------------------------------------


class RichApp:
    """Terminal loop: home screen, game screen and the end overlay."""

    def __init__(
        self,
        config: PuzzleConfig,
        seed: int | None = None,
        cue_timeout: float | None = None,
    ) -> None:
        self._variant = (
            Variant.SINGLE if config.part_count == 1 else Variant.TWO_PART
        )
        self._policy = config.wrong_drop_policy
        self._lives = config.lives
        self._player = _TerminalCuePlayer()
        self._game = PuzzleController(
            config,
            feedback=FeedbackGate(self._player, timeout=cue_timeout),
            rng=random.Random(seed),
            navigate=self._navigate,
        )
        self._route = Route.HOME
        self._running = True
        self._tile = 0
        self._slot = 0
        self._shake_slot: int | None = None
        self._shake_until = 0.0
        self._status = ""

    def _navigate(self, route: Route) -> None:
        self._route = route

    # -- screens --------------------------------------------------------------

    def _home(self) -> None:
        _draw_home(self._variant, self._policy, self._lives)
        action = get_key().action
        if action is Action.QUIT:
            self._running = False
        elif action in (Action.LEFT, Action.RIGHT):
            variants = list(Variant)
            step = 1 if action is Action.RIGHT else -1
            idx = (variants.index(self._variant) + step) % len(variants)
            self._variant = variants[idx]
        elif action is Action.POLICY:
            self._policy = (
                WrongDropPolicy.CLEAR_CURRENT_PART
                if self._policy is WrongDropPolicy.PENALIZE_ONLY
                else WrongDropPolicy.PENALIZE_ONLY
            )
        elif action is Action.DROP:
            self._game.reconfigure(
                PuzzleConfig.for_variant(self._variant, self._policy, self._lives)
            )
            self._tile = self._slot = 0
            self._status = ""
            self._navigate(Route.GAME)

    def _play(self) -> None:
        last: tuple[Snapshot, int | None, str] | None = None
        while self._running and self._route is Route.GAME:
            snap = self._game.snapshot()
            if snap.won or snap.lost:
                self._end(snap)
                return

            shaking = self._shake_slot if time.monotonic() < self._shake_until else None
            frame = (snap, shaking, self._status)
            if frame != last:
                self._clamp(snap)
                _draw_game(snap, self._tile, self._slot, shaking, self._status)
                last = frame

            key = get_key_timeout(0.1)
            self._player.tick()
            self._game.poll()
            if key is not None and self._handle_game_key(key, snap):
                last = None  # cursor moved: redraw

    def _handle_game_key(self, key: KeyPress, snap: Snapshot) -> bool:
        count = len(snap.visible_draggables)
        action = key.action
        if action is Action.LEFT and count:
            self._tile = (self._tile - 1) % count
        elif action is Action.RIGHT and count:
            self._tile = (self._tile + 1) % count
        elif action is Action.UP:
            self._slot = max(0, self._slot - 1)
        elif action is Action.DOWN:
            self._slot = min(len(snap.part_slots) - 1, self._slot + 1)
        elif action is Action.SLOT:
            for view in snap.part_slots:
                if view.label == key.label:
                    self._slot = view.index
        elif action is Action.DROP and count:
            tile = snap.visible_draggables[self._tile]
            self._apply(self._game.on_drop(tile.text, self._slot))
        elif action in (Action.RESTART, Action.QUIT):
            self._game.reset()
        elif action is Action.HELP:
            self._status = "[cyan]Fill the slots top to bottom; wrong steps cost a life.[/cyan]"
        else:
            return False
        return True

    def _apply(self, result: DropResult) -> None:
        if result.verdict is None:
            return
        self._status = _STATUS.get(result.verdict, "")
        if result.part_advanced:
            self._status = "[bold green]Part complete! On to the next one.[/bold green]"
            self._slot = 0
        if result.shake is not None:
            self._shake_slot = result.shake.slot
            self._shake_until = time.monotonic() + result.shake.duration

    def _end(self, snap: Snapshot) -> None:
        _draw_end(snap)
        while self._running and self._route is Route.GAME:
            key = get_key_timeout(0.1)
            self._player.tick()
            self._game.poll()
            action = key.action if key is not None else Action.NONE
            if action in (Action.DROP, Action.RESTART):
                self._game.reset()
            elif action is Action.QUIT:
                self._running = False

    # -- main loop ------------------------------------------------------------

    def _clamp(self, snap: Snapshot) -> None:
        count = len(snap.visible_draggables)
        self._tile = min(self._tile, max(0, count - 1))
        self._slot = min(self._slot, len(snap.part_slots) - 1)

    def run_loop(self) -> None:
        while self._running:
            if self._route is Route.HOME:
                self._home()
            else:
                self._play()
        console.clear()
        console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))


# -- public entry point -------------------------------------------------------


def run(
    config: PuzzleConfig,
    seed: int | None = None,
    cue_timeout: float | None = None,
) -> None:
    """Launch the Rich CLI (opens on the home screen)."""
    RichApp(config, seed, cue_timeout).run_loop()
