"""Synthesized cue sounds used when no recorded asset is present."""

from __future__ import annotations

import io
import wave
from pathlib import Path

import pytest

from backend.engine.gamefeedback import Cue
from frontend.gui import tones


@pytest.mark.parametrize("cue", list(Cue))
def test_wav_is_mono_16bit_of_expected_length(cue: Cue) -> None:
    with wave.open(io.BytesIO(tones.wav_bytes(cue)), "rb") as wav:
        assert wav.getnchannels() == 1
        assert wav.getsampwidth() == 2
        assert wav.getframerate() == tones.SAMPLE_RATE
        seconds = wav.getnframes() / wav.getframerate()
    assert seconds == pytest.approx(tones.duration(cue), abs=0.01)


def test_samples_stay_in_range() -> None:
    data = tones.samples(Cue.CELEBRATE, volume=1.0)
    assert max(data) <= 32767
    assert min(data) >= -32768
    # faded in: the first sample is silent
    assert data[0] == 0


def test_materialize_prefers_recorded_assets(tmp_path: Path) -> None:
    sounds = tmp_path / "sounds"
    sounds.mkdir()
    recorded = sounds / f"{Cue.WRONG.value}.wav"
    recorded.write_bytes(tones.wav_bytes(Cue.CORRECT))

    files = tones.materialize(sounds, tmp_path / "cache")
    assert set(files) == set(Cue)
    assert files[Cue.WRONG] == recorded
    assert files[Cue.CORRECT].parent == tmp_path / "cache"
    assert files[Cue.CORRECT].read_bytes() == tones.wav_bytes(Cue.CORRECT)


def test_asset_path_missing_dir(tmp_path: Path) -> None:
    assert tones.asset_path(Cue.CORRECT, tmp_path / "nope") is None


def test_pygame_without_mixer_falls_back_to_timed_cues(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    pygame = pytest.importorskip("pygame")
    from backend.engine.gamefeedback import TimedCuePlayer
    from frontend.gui.pygame import audio

    def _no_device() -> None:
        raise pygame.error("no audio device")

    monkeypatch.setattr(pygame.mixer, "init", _no_device)
    player = audio.create_player(tmp_path)
    assert isinstance(player, TimedCuePlayer)
    assert not player.play(Cue.WRONG).done()
