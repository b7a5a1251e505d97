from __future__ import annotations

from pathlib import Path

import pygame  # type: ignore[import-not-found]

CUES = ("flip", "match", "mismatch", "win", "lose")


class PygameAudio:
    """Fire-and-forget sound cues from assets/sfx/<cue>.wav; missing files are silent."""

    def __init__(self, sfx_dir: Path) -> None:
        self._sounds: dict[str, pygame.mixer.Sound] = {}
        try:
            pygame.mixer.init()
        except pygame.error:
            return
        for cue in CUES:
            path = sfx_dir / f"{cue}.wav"
            if not path.exists():
                continue
            try:
                self._sounds[cue] = pygame.mixer.Sound(path.as_posix())
            except pygame.error:
                continue

    def _play(self, cue: str) -> None:
        sound = self._sounds.get(cue)
        if sound is not None:
            sound.play()

    def on_flip(self) -> None:
        self._play("flip")

    def on_match(self) -> None:
        self._play("match")

    def on_mismatch(self) -> None:
        self._play("mismatch")

    def on_level_won(self) -> None:
        self._play("win")

    def on_level_lost(self) -> None:
        self._play("lose")
