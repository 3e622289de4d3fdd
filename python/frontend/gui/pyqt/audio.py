"""Cue playback through QSoundEffect."""

from __future__ import annotations

import logging
import tempfile
from concurrent.futures import Future
from pathlib import Path

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from backend.engine.gamefeedback import Cue
from frontend.gui.tones import materialize

logger = logging.getLogger(__name__)


class QtCuePlayer(QObject):
    """One QSoundEffect per cue; a cue's future settles when it stops playing."""

    def __init__(self, sounds_dir: Path, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._cache = tempfile.TemporaryDirectory(prefix="sequence-puzzle-")
        files = materialize(sounds_dir, Path(self._cache.name))
        self._effects: dict[Cue, QSoundEffect] = {}
        self._pending: dict[Cue, Future[None]] = {}
        for cue, path in files.items():
            effect = QSoundEffect(self)
            effect.setSource(QUrl.fromLocalFile(str(path)))
            effect.playingChanged.connect(lambda c=cue: self._on_playing_changed(c))
            effect.statusChanged.connect(lambda c=cue: self._on_status_changed(c))
            self._effects[cue] = effect

    def play(self, cue: Cue) -> Future[None]:
        future: Future[None] = Future()
        effect = self._effects[cue]
        if effect.status() == QSoundEffect.Status.Error:
            future.set_exception(RuntimeError(f"Sound for {cue} failed to load"))
            return future
        previous = self._pending.pop(cue, None)
        if previous is not None:
            previous.set_result(None)
        self._pending[cue] = future
        effect.play()
        return future

    def _on_playing_changed(self, cue: Cue) -> None:
        if self._effects[cue].isPlaying():
            return
        future = self._pending.pop(cue, None)
        if future is not None:
            future.set_result(None)

    def _on_status_changed(self, cue: Cue) -> None:
        if self._effects[cue].status() != QSoundEffect.Status.Error:
            return
        logger.warning("Could not load sound for %s", cue)
        future = self._pending.pop(cue, None)
        if future is not None:
            future.set_exception(RuntimeError(f"Sound for {cue} failed to load"))
