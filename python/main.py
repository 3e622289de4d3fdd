#!/usr/bin/env python3
"""Sequence Puzzle.

Usage::

    python main.py                      # interactive menu
    python main.py -f rich              # Rich terminal, two parts
    python main.py -f pygame -v single  # Pygame GUI, one four-step part
    python main.py -f pyqt -w clear-current-part --lives 5
"""

import importlib
import logging
import sys
from enum import StrEnum
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

ROOT = Path(__file__).resolve().parent  # python/
PROJECT_ROOT = ROOT.parent
ASSETS_DIR = PROJECT_ROOT / "assets"

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.engine.gamefeedback import DEFAULT_CUE_TIMEOUT  # noqa: E402
from backend.models.sequence import (  # noqa: E402
    DEFAULT_LIVES,
    PuzzleConfig,
    Variant,
    WrongDropPolicy,
)

logger = logging.getLogger(__name__)


# -- frontend registry -------------------------------------------------------


class Frontend(StrEnum):
    rich = "rich"
    pygame = "pygame"
    pyqt = "pyqt"


_RUNNERS = {
    Frontend.rich: "frontend.cli.rich.app",
    Frontend.pygame: "frontend.gui.pygame.app",
    Frontend.pyqt: "frontend.gui.pyqt.app",
}

_GUI = {Frontend.pygame, Frontend.pyqt}


class LogLevel(StrEnum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# -- helpers ------------------------------------------------------------------


def configure_logging(level: LogLevel) -> None:
    logging.basicConfig(
        level=level.value,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _launch(
    frontend: Frontend,
    config: PuzzleConfig,
    seed: int | None,
    cue_timeout: float | None,
) -> None:
    logger.info(
        "Launching %s frontend (%d parts, %s, %d lives)",
        frontend,
        config.part_count,
        config.wrong_drop_policy,
        config.lives,
    )
    mod = importlib.import_module(_RUNNERS[frontend])
    kwargs = {"config": config, "seed": seed, "cue_timeout": cue_timeout}
    if frontend in _GUI:
        kwargs["assets_dir"] = ASSETS_DIR
    mod.run(**kwargs)


def _menu_loop(config: PuzzleConfig, seed: int | None, cue_timeout: float | None) -> None:
    choices = {"1": Frontend.rich, "2": Frontend.pygame, "3": Frontend.pyqt}
    while True:
        print()
        print("  ====================================")
        print("     S E Q U E N C E   P U Z Z L E    ")
        print("  ====================================")
        print()
        print("  1.  Play  (Rich Terminal)")
        print("  2.  Play  (Pygame GUI)")
        print("  3.  Play  (PyQt GUI)")
        print("  0.  Quit")
        print()

        choice = input("  Select: ").strip()

        if choice == "0":
            print("\n  Goodbye!\n")
            return

        if choice in choices:
            _launch(choices[choice], config, seed, cue_timeout)
        else:
            print("  Unknown option.")


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    frontend: Optional[Frontend] = typer.Option(
        None, "-f", "--frontend",
        help="Frontend to launch. Omit for interactive menu.",
    ),
    variant: Variant = typer.Option(
        Variant.TWO_PART, "-v", "--variant",
        help="Puzzle layout: one four-step part or two parts.",
    ),
    wrong_drop: WrongDropPolicy = typer.Option(
        WrongDropPolicy.PENALIZE_ONLY, "-w", "--wrong-drop",
        help="What a wrong drop does besides costing a life.",
    ),
    lives: int = typer.Option(
        DEFAULT_LIVES, "-l", "--lives",
        min=1, max=9,
        help="Lives at the start of a game (1-9).",
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed",
        help="Seed the shuffle for a repeatable layout.",
    ),
    cue_timeout: float = typer.Option(
        DEFAULT_CUE_TIMEOUT, "--cue-timeout",
        min=0.0,
        help="Seconds before a stuck sound cue releases input (0 waits forever).",
    ),
    log_level: LogLevel = typer.Option(
        LogLevel.WARNING, "--log-level",
        case_sensitive=False,
        help="Logging level.",
    ),
) -> None:
    """Sequence Puzzle."""
    configure_logging(log_level)
    config = PuzzleConfig.for_variant(variant, wrong_drop, lives)
    timeout = cue_timeout or None

    if frontend is None:
        _menu_loop(config, seed, timeout)
        return

    _launch(frontend, config, seed, timeout)


if __name__ == "__main__":
    app()
