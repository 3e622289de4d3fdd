"""Keyboard input for the Rich frontend.

Raw keypresses are decoded into :class:`KeyPress` values: a puzzle
action plus, for digit keys, the slot label that was typed.
"""

from __future__ import annotations

import os
import sys
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import StrEnum


class Action(StrEnum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    SLOT = "slot"
    DROP = "drop"
    RESTART = "restart"
    POLICY = "policy"
    HELP = "help"
    QUIT = "quit"
    NONE = "none"


@dataclass(frozen=True)
class KeyPress:
    action: Action
    label: int | None = None  # slot label typed, for Action.SLOT


_KEYS: dict[str, Action] = {
    "w": Action.UP,
    "s": Action.DOWN,
    "a": Action.LEFT,
    "d": Action.RIGHT,
    " ": Action.DROP,
    "\r": Action.DROP,
    "\n": Action.DROP,
    "r": Action.RESTART,
    "p": Action.POLICY,
    "h": Action.HELP,
    "?": Action.HELP,
    "q": Action.QUIT,
    "\x03": Action.QUIT,  # Ctrl-C
}

# final byte of an ANSI cursor sequence (ESC [ x)
_ANSI_ARROWS: dict[str, Action] = {
    "A": Action.UP,
    "B": Action.DOWN,
    "C": Action.RIGHT,
    "D": Action.LEFT,
}

# second character after a 0x00 / 0xE0 prefix from msvcrt
_WIN_ARROWS: dict[str, Action] = {
    "H": Action.UP,
    "P": Action.DOWN,
    "M": Action.RIGHT,
    "K": Action.LEFT,
}


def decode(ch: str, follow: Callable[[], str | None]) -> KeyPress:
    """Decode one keypress starting with *ch*.

    *follow* returns the next pending character of a multi-byte
    sequence, or None when nothing else is waiting.
    """
    if ch == "\x1b":
        if follow() != "[":
            return KeyPress(Action.QUIT)
        return KeyPress(_ANSI_ARROWS.get(follow() or "", Action.NONE))
    if ch in ("\x00", "\xe0"):
        return KeyPress(_WIN_ARROWS.get(follow() or "", Action.NONE))
    if ch.isdigit() and ch != "0":
        return KeyPress(Action.SLOT, int(ch))
    return KeyPress(_KEYS.get(ch.lower(), Action.NONE))


# -- terminal reading ----------------------------------------------------------


@contextmanager
def _raw_mode(fd: int) -> Iterator[None]:
    import termios
    import tty

    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)


def _read_char(fd: int, timeout: float | None) -> str | None:
    import select

    ready, _, _ = select.select([fd], [], [], timeout)
    if not ready:
        return None
    return os.read(fd, 1).decode("utf-8", errors="ignore")


def _wait_windows(timeout: float | None) -> KeyPress | None:
    import msvcrt  # type: ignore[import-not-found]

    end = None if timeout is None else time.monotonic() + timeout
    while not msvcrt.kbhit():
        if end is not None and time.monotonic() >= end:
            return None
        time.sleep(0.02)
    return decode(
        msvcrt.getwch(), lambda: msvcrt.getwch() if msvcrt.kbhit() else None
    )


def get_key_timeout(timeout: float | None) -> KeyPress | None:
    """Wait up to *timeout* seconds for a keypress (None waits forever).

    Returns None when the time runs out.
    """
    if os.name == "nt":
        return _wait_windows(timeout)

    fd = sys.stdin.fileno()
    with _raw_mode(fd):
        ch = _read_char(fd, timeout)
        if ch is None:
            return None
        return decode(ch, lambda: _read_char(fd, 0.05))


def get_key() -> KeyPress:
    """Block until a key is pressed."""
    key = get_key_timeout(None)
    assert key is not None
    return key
