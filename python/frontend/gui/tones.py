"""Cue sounds for the GUI frontends.

A cue plays ``assets/sounds/<cue>.wav`` when that file exists; otherwise
a short tone sequence is synthesized here so there is always something
to hear.
"""

from __future__ import annotations

import io
import math
import sys
import wave
from array import array
from pathlib import Path

from backend.engine.gamefeedback import Cue

SAMPLE_RATE = 22050
FADE = 0.01  # seconds of ramp at each note edge, avoids clicks

# (frequency Hz, duration s) per note.
_NOTES: dict[Cue, list[tuple[float, float]]] = {
    Cue.CORRECT: [(659.25, 0.12), (987.77, 0.25)],
    Cue.WRONG: [(196.00, 0.20), (155.56, 0.40)],
    Cue.PART_COMPLETE: [(523.25, 0.12), (659.25, 0.12), (783.99, 0.35)],
    Cue.CELEBRATE: [
        (523.25, 0.15),
        (659.25, 0.15),
        (783.99, 0.15),
        (1046.50, 0.25),
        (783.99, 0.15),
        (1046.50, 0.70),
    ],
}


def duration(cue: Cue) -> float:
    """Length of the synthesized tone for *cue*, in seconds."""
    return sum(d for _, d in _NOTES[cue])


def samples(cue: Cue, rate: int = SAMPLE_RATE, volume: float = 0.4) -> array:
    """Signed 16-bit mono samples for *cue*."""
    out = array("h")
    peak = 32767 * volume
    for freq, dur in _NOTES[cue]:
        n = int(rate * dur)
        ramp = max(1, min(n // 2, int(rate * FADE)))
        for i in range(n):
            env = min(1.0, i / ramp, (n - i) / ramp)
            out.append(int(peak * env * math.sin(2 * math.pi * freq * i / rate)))
    return out


def wav_bytes(cue: Cue, rate: int = SAMPLE_RATE) -> bytes:
    """A complete in-memory WAV file for *cue*."""
    data = samples(cue, rate)
    if sys.byteorder == "big":
        data.byteswap()  # WAV is little-endian
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(rate)
        wav.writeframes(data.tobytes())
    return buf.getvalue()


def asset_path(cue: Cue, sounds_dir: Path) -> Path | None:
    """The recorded sound for *cue* in *sounds_dir*, if there is one."""
    path = sounds_dir / f"{cue.value}.wav"
    return path if path.is_file() else None


def materialize(sounds_dir: Path, cache_dir: Path) -> dict[Cue, Path]:
    """Return a playable WAV file for every cue.

    Recorded assets win; missing ones are synthesized into *cache_dir*.
    """
    files: dict[Cue, Path] = {}
    for cue in Cue:
        path = asset_path(cue, sounds_dir)
        if path is None:
            cache_dir.mkdir(parents=True, exist_ok=True)
            path = cache_dir / f"{cue.value}.wav"
            path.write_bytes(wav_bytes(cue))
        files[cue] = path
    return files
