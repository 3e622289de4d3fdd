"""Cue playback on pygame.mixer."""

from __future__ import annotations

import io
import logging
from concurrent.futures import Future
from pathlib import Path

import pygame

from backend.engine.gamefeedback import Cue, TimedCuePlayer
from frontend.gui.tones import asset_path, duration, wav_bytes

logger = logging.getLogger(__name__)


class PygameCuePlayer:
    """Plays each cue on a mixer channel.

    The main loop calls ``tick()`` every frame; a cue's future is settled
    once its channel falls silent.
    """

    def __init__(self, sounds_dir: Path) -> None:
        self._sounds = {cue: self._load(cue, sounds_dir) for cue in Cue}
        self._playing: list[tuple[pygame.mixer.Channel, Future[None]]] = []

    @staticmethod
    def _load(cue: Cue, sounds_dir: Path) -> pygame.mixer.Sound:
        path = asset_path(cue, sounds_dir)
        if path is not None:
            return pygame.mixer.Sound(str(path))
        return pygame.mixer.Sound(file=io.BytesIO(wav_bytes(cue)))

    def play(self, cue: Cue) -> Future[None]:
        future: Future[None] = Future()
        channel = self._sounds[cue].play()
        if channel is None:
            future.set_exception(RuntimeError(f"No free mixer channel for {cue}"))
        else:
            self._playing.append((channel, future))
        return future

    def tick(self) -> int:
        still: list[tuple[pygame.mixer.Channel, Future[None]]] = []
        done: list[Future[None]] = []
        for channel, future in self._playing:
            if channel.get_busy():
                still.append((channel, future))
            else:
                done.append(future)
        self._playing = still
        for future in done:
            future.set_result(None)
        return len(done)


def create_player(sounds_dir: Path) -> PygameCuePlayer | TimedCuePlayer:
    """A mixer-backed player, or timed silent cues when there is no audio device."""
    try:
        pygame.mixer.init()
    except pygame.error as exc:
        logger.warning("No audio device (%s); cues will be silent", exc)
        return TimedCuePlayer({cue: duration(cue) for cue in Cue})
    return PygameCuePlayer(sounds_dir)
