"""PuzzleController — the drop state machine end to end."""

from __future__ import annotations

import random
from concurrent.futures import Future

import pytest

from backend.engine.gamefeedback import Cue, FeedbackGate
from backend.engine.gameplay import PuzzleController, Route, ShakeSignal
from backend.engine.gamestate import Phase, Snapshot
from backend.engine.gamevalidator import Verdict
from backend.models import (
    CANONICAL_SEQUENCE,
    InvariantViolation,
    PuzzleConfig,
    WrongDropPolicy,
)

ABCD = ("A", "B", "C", "D")


class _HeldPlayer:
    """Cues never finish until the test says so."""

    def __init__(self) -> None:
        self.futures: list[Future[None]] = []

    def play(self, cue: Cue) -> Future[None]:
        future: Future[None] = Future()
        self.futures.append(future)
        return future

    def finish(self) -> None:
        for future in self.futures:
            if not future.done():
                future.set_result(None)


class _RecordingPlayer:
    """Finishes every cue at once and remembers which were played."""

    def __init__(self) -> None:
        self.cues: list[Cue] = []

    def play(self, cue: Cue) -> Future[None]:
        self.cues.append(cue)
        future: Future[None] = Future()
        future.set_result(None)
        return future


def _abcd(**kwargs) -> PuzzleConfig:
    return PuzzleConfig(ABCD, (4,), **kwargs)


def _game(config: PuzzleConfig | None = None, **kwargs) -> PuzzleController:
    return PuzzleController(config, rng=random.Random(0), **kwargs)


def _solve_part(game: PuzzleController, items: tuple[str, ...]) -> None:
    for slot, item in enumerate(items):
        assert game.on_drop(item, slot).verdict is Verdict.ACCEPTED


# -- walkthrough --------------------------------------------------------------


def test_abcd_walkthrough() -> None:
    game = _game(_abcd())

    wrong = game.on_drop("B", 0)
    assert wrong.verdict is Verdict.REJECTED
    assert wrong.cue is Cue.WRONG
    assert wrong.shake == ShakeSignal(0)
    assert game.state.lives == 2

    assert game.on_drop("A", 0).cue is Cue.CORRECT
    assert game.on_drop("B", 1).cue is Cue.CORRECT
    assert game.on_drop("C", 2).cue is Cue.CORRECT
    last = game.on_drop("D", 3)
    assert last.verdict is Verdict.ACCEPTED
    assert last.cue is Cue.CELEBRATE

    snap = game.snapshot()
    assert snap.won and not snap.lost
    assert snap.phase is Phase.WON
    assert snap.lives == 2
    assert snap.placement == ABCD
    assert snap.visible_draggables == ()


def test_abcd_with_skip_ahead() -> None:
    player = _RecordingPlayer()
    game = _game(_abcd(), feedback=FeedbackGate(player))

    assert game.on_drop("A", 0).verdict is Verdict.ACCEPTED
    wrong = game.on_drop("C", 1)
    assert wrong.verdict is Verdict.REJECTED
    assert wrong.shake == ShakeSignal(1)
    assert game.on_drop("B", 1).verdict is Verdict.ACCEPTED

    before = game.snapshot()
    skipped = game.on_drop("D", 3)
    assert skipped.verdict is Verdict.IGNORED_OUT_OF_ORDER
    assert game.snapshot() == before

    assert game.on_drop("C", 2).verdict is Verdict.ACCEPTED
    assert game.on_drop("D", 3).cue is Cue.CELEBRATE

    assert player.cues == [
        Cue.CORRECT,
        Cue.WRONG,
        Cue.CORRECT,
        Cue.CORRECT,
        Cue.CELEBRATE,
    ]
    snap = game.snapshot()
    assert snap.won
    assert snap.lives == 2
    assert snap.placement == ABCD


def test_two_part_advance() -> None:
    game = _game()
    first, second = CANONICAL_SEQUENCE[:4], CANONICAL_SEQUENCE[4:]
    for slot, item in enumerate(first[:3]):
        game.on_drop(item, slot)
    result = game.on_drop(first[3], 3)
    assert result.cue is Cue.PART_COMPLETE
    assert result.part_advanced

    snap = game.snapshot()
    assert snap.current_part == 2
    assert [v.label for v in snap.part_slots] == [5, 6, 7, 8]
    assert all(v.item is None for v in snap.part_slots)
    assert sorted(d.text for d in snap.visible_draggables) == sorted(second)
    assert snap.placement[:4] == first

    _solve_part(game, second)
    assert game.snapshot().won


def test_placed_tiles_leave_the_pool() -> None:
    game = _game(_abcd())
    game.on_drop("A", 0)
    visible = [d.text for d in game.snapshot().visible_draggables]
    assert sorted(visible) == ["B", "C", "D"]


def test_presentation_is_a_permutation_of_the_part() -> None:
    game = _game()
    tiles = game.presentation(1)
    assert sorted(t.text for t in tiles) == sorted(CANONICAL_SEQUENCE[:4])


# -- ignored drops ------------------------------------------------------------


def test_out_of_order_costs_nothing() -> None:
    game = _game(_abcd())
    before = game.snapshot()
    result = game.on_drop("B", 1)
    assert result.verdict is Verdict.IGNORED_OUT_OF_ORDER
    assert result.cue is None
    assert game.snapshot() == before


def test_occupied_costs_nothing() -> None:
    game = _game(_abcd())
    game.on_drop("A", 0)
    before = game.snapshot()
    assert game.on_drop("B", 0).verdict is Verdict.IGNORED_OCCUPIED
    assert game.snapshot() == before


def test_item_from_other_part_is_rejected() -> None:
    game = _game()
    assert game.on_drop(CANONICAL_SEQUENCE[5], 0).verdict is Verdict.REJECTED
    assert game.state.lives == 2


# -- lives and policies -------------------------------------------------------


def test_losing_drop_still_plays_wrong_cue() -> None:
    player = _RecordingPlayer()
    game = _game(_abcd(lives=1), feedback=FeedbackGate(player))
    result = game.on_drop("B", 0)
    assert result.cue is Cue.WRONG
    assert player.cues == [Cue.WRONG]

    assert game.on_drop("C", 0).discarded
    snap = game.snapshot()
    assert snap.lost
    assert snap.lives == 0
    assert player.cues == [Cue.WRONG]


def test_last_life_loses() -> None:
    game = _game(_abcd(lives=1))
    result = game.on_drop("C", 0)
    assert result.verdict is Verdict.REJECTED
    snap = game.snapshot()
    assert snap.lost and not snap.won
    assert snap.lives == 0
    assert snap.phase is Phase.LOST


def test_three_strikes() -> None:
    game = _game(_abcd())
    for _ in range(3):
        game.on_drop("D", 0)
    assert game.state.lost
    assert game.state.lives == 0


def test_penalize_only_keeps_progress() -> None:
    game = _game(_abcd())
    game.on_drop("A", 0)
    game.on_drop("B", 1)
    game.on_drop("D", 2)
    assert game.snapshot().placement == ("A", "B", None, None)


def test_clear_current_part_wipes_part() -> None:
    game = _game(_abcd(wrong_drop_policy=WrongDropPolicy.CLEAR_CURRENT_PART))
    game.on_drop("A", 0)
    game.on_drop("B", 1)
    game.on_drop("D", 2)
    snap = game.snapshot()
    assert snap.placement == (None, None, None, None)
    assert snap.lives == 2
    assert len(snap.visible_draggables) == 4


def test_clear_current_part_spares_finished_parts() -> None:
    config = PuzzleConfig.default()
    config = PuzzleConfig(
        config.sequence, config.parts, WrongDropPolicy.CLEAR_CURRENT_PART
    )
    game = _game(config)
    _solve_part(game, CANONICAL_SEQUENCE[:4])
    game.on_drop(CANONICAL_SEQUENCE[4], 0)
    game.on_drop(CANONICAL_SEQUENCE[7], 1)
    placement = game.snapshot().placement
    assert placement[:4] == CANONICAL_SEQUENCE[:4]
    assert placement[4:] == (None, None, None, None)


# -- terminal states ----------------------------------------------------------


@pytest.mark.parametrize("lives, moves", [(1, [("B", 0)]), (3, [(x, i) for i, x in enumerate(ABCD)])])
def test_finished_game_discards_drops(lives: int, moves: list[tuple[str, int]]) -> None:
    game = _game(_abcd(lives=lives))
    for item, slot in moves:
        game.on_drop(item, slot)
    assert game.state.is_over
    before = game.snapshot()
    assert game.on_drop("A", 0).discarded
    assert game.on_drop("C", 1).discarded
    assert game.snapshot() == before


# -- input lock ---------------------------------------------------------------


def test_drops_discarded_while_cue_plays() -> None:
    player = _HeldPlayer()
    game = _game(_abcd(), feedback=FeedbackGate(player))
    game.on_drop("A", 0)
    locked = game.snapshot()
    assert locked.input_locked

    assert game.on_drop("B", 1).discarded
    assert game.on_drop("C", 1).discarded
    assert game.snapshot() == locked

    player.finish()
    snap = game.snapshot()
    assert not snap.input_locked
    assert game.on_drop("B", 1).verdict is Verdict.ACCEPTED


def test_ignored_drop_does_not_lock() -> None:
    player = _HeldPlayer()
    game = _game(_abcd(), feedback=FeedbackGate(player))
    game.on_drop("B", 1)
    assert not game.snapshot().input_locked
    assert player.futures == []


def test_stuck_cue_times_out() -> None:
    now = [0.0]
    player = _HeldPlayer()
    gate = FeedbackGate(player, timeout=1.0, clock=lambda: now[0])
    game = _game(_abcd(), feedback=gate)
    game.on_drop("A", 0)
    assert game.snapshot().input_locked
    now[0] = 1.5
    # the next drop polls the gate first, so it goes through
    assert game.on_drop("B", 1).verdict is Verdict.ACCEPTED


# -- programming errors -------------------------------------------------------


@pytest.mark.parametrize("item, slot", [("Z", 0), ("A", 4), ("A", -1)])
def test_invariant_violations(item: str, slot: int) -> None:
    game = _game(_abcd())
    with pytest.raises(InvariantViolation):
        game.on_drop(item, slot)


# -- reset and reconfigure ----------------------------------------------------


def test_reset_after_loss_navigates_home() -> None:
    routes: list[Route] = []
    game = _game(_abcd(lives=1), navigate=routes.append)
    game.on_drop("B", 0)
    game.reset()
    snap = game.snapshot()
    assert snap.phase is Phase.PLAYING
    assert snap.lives == 1
    assert snap.placement == (None, None, None, None)
    assert snap.current_part == 1
    assert routes == [Route.HOME]


def test_reset_after_win_reshuffles_first_part() -> None:
    game = _game()
    _solve_part(game, CANONICAL_SEQUENCE[:4])
    _solve_part(game, CANONICAL_SEQUENCE[4:])
    game.reset()
    snap = game.snapshot()
    assert not snap.won
    assert snap.current_part == 1
    assert sorted(d.text for d in snap.visible_draggables) == sorted(
        CANONICAL_SEQUENCE[:4]
    )


def test_reset_releases_lock() -> None:
    player = _HeldPlayer()
    game = _game(_abcd(), feedback=FeedbackGate(player))
    game.on_drop("A", 0)
    game.reset()
    assert not game.snapshot().input_locked
    # the abandoned cue finishing later changes nothing
    player.finish()
    assert not game.feedback.locked


def test_reconfigure_switches_puzzle() -> None:
    game = _game()
    game.on_drop(CANONICAL_SEQUENCE[0], 0)
    game.reconfigure(_abcd(lives=5))
    snap = game.snapshot()
    assert snap.part_count == 1
    assert snap.lives == snap.max_lives == 5
    assert snap.placement == (None, None, None, None)


# -- subscribers --------------------------------------------------------------


def test_subscribers_get_snapshots() -> None:
    player = _HeldPlayer()
    game = _game(_abcd(), feedback=FeedbackGate(player))
    seen: list[Snapshot] = []
    game.subscribe(seen.append)
    game.on_drop("A", 0)
    assert seen[-1].placement[0] == "A"
    assert seen[-1].input_locked
    player.finish()
    assert not seen[-1].input_locked


def test_state_to_dict() -> None:
    game = _game(_abcd())
    game.on_drop("A", 0)
    game.on_drop("C", 1)
    assert game.state.to_dict() == {
        "placement": ["A", None, None, None],
        "lives": 2,
        "current_part": 1,
        "won": False,
        "lost": False,
        "input_locked": False,
    }


def test_snapshot_to_dict() -> None:
    data = _game(_abcd()).snapshot().to_dict()
    assert data["lives"] == 3
    assert data["part_slots"][0] == {"index": 0, "label": 1, "item": None}
    assert len(data["visible_draggables"]) == 4
