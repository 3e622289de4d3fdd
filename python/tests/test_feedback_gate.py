"""FeedbackGate and the device-free cue players.

Time is driven by a fake clock, so nothing here sleeps.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future

import pytest

from backend.engine.gamefeedback import (
    Cue,
    FeedbackGate,
    SilentCuePlayer,
    TimedCuePlayer,
)


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class _ManualPlayer:
    """Hands out futures that the test settles itself."""

    def __init__(self) -> None:
        self.played: list[Cue] = []
        self.futures: list[Future[None]] = []

    def play(self, cue: Cue) -> Future[None]:
        future: Future[None] = Future()
        self.played.append(cue)
        self.futures.append(future)
        return future


class _BrokenPlayer:
    def play(self, cue: Cue) -> Future[None]:
        raise RuntimeError("no audio device")


@pytest.fixture
def clock() -> _Clock:
    return _Clock()


# -- lock lifecycle -----------------------------------------------------------


def test_lock_held_until_result(clock: _Clock) -> None:
    player = _ManualPlayer()
    gate = FeedbackGate(player, clock=clock)
    gate.play(Cue.CORRECT)
    assert gate.locked
    assert gate.pending_cue is Cue.CORRECT
    player.futures[0].set_result(None)
    assert not gate.locked
    assert gate.pending_cue is None


def test_failed_cue_releases(clock: _Clock, caplog: pytest.LogCaptureFixture) -> None:
    player = _ManualPlayer()
    gate = FeedbackGate(player, clock=clock)
    gate.play(Cue.WRONG)
    with caplog.at_level(logging.WARNING):
        player.futures[0].set_exception(RuntimeError("decoder"))
    assert not gate.locked
    assert "decoder" in caplog.text


def test_cancelled_cue_releases(clock: _Clock) -> None:
    player = _ManualPlayer()
    gate = FeedbackGate(player, clock=clock)
    gate.play(Cue.WRONG)
    player.futures[0].cancel()
    assert not gate.locked


def test_player_raising_releases(clock: _Clock) -> None:
    gate = FeedbackGate(_BrokenPlayer(), clock=clock)
    future = gate.play(Cue.CELEBRATE)
    assert future.done()
    assert isinstance(future.exception(), RuntimeError)
    assert not gate.locked


def test_silent_player_never_holds_lock() -> None:
    gate = FeedbackGate(SilentCuePlayer())
    gate.play(Cue.CORRECT)
    assert not gate.locked


# -- timeout ------------------------------------------------------------------


def test_poll_releases_after_deadline(
    clock: _Clock, caplog: pytest.LogCaptureFixture
) -> None:
    gate = FeedbackGate(_ManualPlayer(), timeout=2.0, clock=clock)
    gate.play(Cue.CORRECT)
    clock.now = 1.9
    assert not gate.poll()
    assert gate.locked
    clock.now = 2.0
    with caplog.at_level(logging.WARNING):
        assert gate.poll()
    assert not gate.locked
    assert "did not finish" in caplog.text


def test_no_timeout_waits_forever(clock: _Clock) -> None:
    gate = FeedbackGate(_ManualPlayer(), timeout=None, clock=clock)
    gate.play(Cue.CORRECT)
    clock.now = 1e6
    assert not gate.poll()
    assert gate.locked


def test_poll_when_idle(clock: _Clock) -> None:
    assert not FeedbackGate(_ManualPlayer(), clock=clock).poll()


def test_stale_future_is_ignored(clock: _Clock) -> None:
    player = _ManualPlayer()
    gate = FeedbackGate(player, timeout=1.0, clock=clock)
    gate.play(Cue.CORRECT)
    clock.now = 5.0
    gate.poll()
    gate.play(Cue.WRONG)
    # the abandoned first cue finishing late must not unlock the second
    player.futures[0].set_result(None)
    assert gate.locked
    assert gate.pending_cue is Cue.WRONG
    player.futures[1].set_result(None)
    assert not gate.locked


def test_release_abandons_pending(clock: _Clock) -> None:
    player = _ManualPlayer()
    gate = FeedbackGate(player, clock=clock)
    gate.play(Cue.CORRECT)
    gate.release()
    assert not gate.locked
    player.futures[0].set_result(None)
    assert not gate.locked


# -- listeners ----------------------------------------------------------------


def test_listener_sees_each_change_once(clock: _Clock) -> None:
    player = _ManualPlayer()
    gate = FeedbackGate(player, clock=clock)
    seen: list[bool] = []
    gate.subscribe(seen.append)
    gate.play(Cue.CORRECT)
    gate.play(Cue.WRONG)
    player.futures[1].set_result(None)
    gate.release()
    assert seen == [True, False]


# -- TimedCuePlayer -----------------------------------------------------------


def test_timed_player_settles_on_tick(clock: _Clock) -> None:
    player = TimedCuePlayer({Cue.CORRECT: 0.5, Cue.WRONG: 1.0}, clock=clock)
    gate = FeedbackGate(player, clock=clock)
    gate.play(Cue.CORRECT)
    assert player.busy
    clock.now = 0.4
    assert player.tick() == 0
    assert gate.locked
    clock.now = 0.5
    assert player.tick() == 1
    assert not gate.locked
    assert not player.busy


def test_timed_player_unknown_duration_is_instant(clock: _Clock) -> None:
    player = TimedCuePlayer({}, clock=clock)
    future = player.play(Cue.CELEBRATE)
    assert not future.done()
    assert player.tick() == 1
    assert future.done()
