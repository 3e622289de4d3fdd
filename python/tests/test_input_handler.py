"""Keypress decoding for the terminal frontend."""

from __future__ import annotations

import pytest

from frontend.cli.input_handler import Action, KeyPress, decode


def _follow(*chars: str):
    pending = iter(chars)
    return lambda: next(pending, None)


@pytest.mark.parametrize(
    "ch, expected",
    [
        ("w", Action.UP),
        ("S", Action.DOWN),
        ("a", Action.LEFT),
        ("d", Action.RIGHT),
        (" ", Action.DROP),
        ("\r", Action.DROP),
        ("r", Action.RESTART),
        ("P", Action.POLICY),
        ("?", Action.HELP),
        ("q", Action.QUIT),
        ("\x03", Action.QUIT),
        ("0", Action.NONE),
        ("z", Action.NONE),
    ],
)
def test_single_keys(ch: str, expected: Action) -> None:
    assert decode(ch, _follow()) == KeyPress(expected)


@pytest.mark.parametrize("digit", "123456789")
def test_digits_select_slot_label(digit: str) -> None:
    assert decode(digit, _follow()) == KeyPress(Action.SLOT, int(digit))


@pytest.mark.parametrize(
    "tail, expected",
    [("A", Action.UP), ("B", Action.DOWN), ("C", Action.RIGHT), ("D", Action.LEFT), ("Z", Action.NONE)],
)
def test_ansi_arrows(tail: str, expected: Action) -> None:
    assert decode("\x1b", _follow("[", tail)).action is expected


@pytest.mark.parametrize(
    "prefix, tail, expected",
    [("\xe0", "H", Action.UP), ("\x00", "P", Action.DOWN), ("\xe0", "M", Action.RIGHT), ("\xe0", "K", Action.LEFT)],
)
def test_windows_arrows(prefix: str, tail: str, expected: Action) -> None:
    assert decode(prefix, _follow(tail)).action is expected


def test_bare_escape_quits() -> None:
    assert decode("\x1b", _follow()).action is Action.QUIT


def test_truncated_sequence_is_ignored() -> None:
    assert decode("\x1b", _follow("[")).action is Action.NONE
