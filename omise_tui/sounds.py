"""
Sound effects for Omise

Short WAV chimes played through pygame.mixer. Sounds live in
packs/core-sounds/content (generate them with scripts/generate_sounds.py)
or ~/.omise/packs/core-sounds/content.

Missing files or a missing audio device are logged once and the game
carries on silently.
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Optional

# Suppress pygame welcome message (must be set before import)
os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = '1'
import pygame.mixer

from .scores import get_data_dir

logger = logging.getLogger(__name__)


class SoundEffect(Enum):
    CORRECT = "success"
    INCORRECT = "failure"
    ITEM_SELECT = "select"
    ORDER_NEW = "order"

    @property
    def file_name(self) -> str:
        return f"{self.value}.wav"


def get_sounds_path() -> Path:
    """Find the sounds directory."""
    paths = [
        Path(__file__).parent.parent / "packs" / "core-sounds" / "content",
        get_data_dir() / "packs" / "core-sounds" / "content",
    ]
    for p in paths:
        if p.exists():
            return p
    return paths[0]


class SoundPlayer:
    """Loads every effect once and replays it from the start on demand."""

    def __init__(self, sounds_path: Optional[Path] = None, enabled: bool = True):
        self.sounds_path = sounds_path
        self.enabled = enabled
        self._sounds: dict[SoundEffect, pygame.mixer.Sound] = {}
        self._mixer_initialized = False
        self._init_failed = False

    def _init_audio(self) -> None:
        """Initialize pygame mixer and load sounds."""
        if self._mixer_initialized or self._init_failed:
            return
        try:
            if not pygame.mixer.get_init():
                # Larger buffer prevents ALSA underrun errors on slower hardware
                pygame.mixer.init(frequency=44100, size=-16, channels=2, buffer=2048)
            self._mixer_initialized = True
        except pygame.error as e:
            self._init_failed = True
            logger.info("Audio unavailable, sound effects off: %s", e)
            return
        self._load_sounds()

    def _load_sounds(self) -> None:
        sounds_path = self.sounds_path or get_sounds_path()
        for effect in SoundEffect:
            path = sounds_path / effect.file_name
            if not path.exists():
                logger.warning("Sound file %s not found in %s", effect.file_name, sounds_path)
                continue
            try:
                sound = pygame.mixer.Sound(str(path))
                sound.set_volume(0.5)
                self._sounds[effect] = sound
            except pygame.error as e:
                logger.warning("Error loading sound file %s: %s", path, e)

    def play(self, effect: SoundEffect) -> bool:
        """Play an effect from the start. Returns False if it couldn't play."""
        if not self.enabled:
            return False
        self._init_audio()
        sound = self._sounds.get(effect)
        if sound is None:
            return False
        sound.stop()
        sound.play()
        logger.debug("Playing %s sound", effect.value)
        return True

    def cleanup(self) -> None:
        """Stop all sounds and quit mixer."""
        if self._mixer_initialized:
            pygame.mixer.stop()
            pygame.mixer.quit()
            self._mixer_initialized = False
        self._sounds.clear()
