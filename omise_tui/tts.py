"""
Spoken prompts using Piper TTS

Piper is a fast, local, neural TTS system.
https://github.com/rhasspy/piper

Install with the `speech` extra. Without Piper or a voice model every call
is a quiet no-op: the prompt text is still on screen.
"""

import logging
import os
import tempfile
import threading
import wave
from pathlib import Path

# Suppress pygame welcome message
os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = '1'
import pygame.mixer

logger = logging.getLogger(__name__)

# Voice model per language: (model name, speaker id)
VOICE_MODELS = {
    "en": ("en_US-libritts-high", 166),
}


def _get_voice_search_paths() -> list[Path]:
    """Get list of paths to search for voice models."""
    return [
        Path.home() / ".local" / "share" / "piper-voices",
        Path.home() / ".cache" / "piper",
        Path("/opt/piper"),
    ]


# Loaded voices per language; False marks a language we already failed to load
_voices: dict[str, object] = {}
_voice_lock = threading.Lock()


def _get_voice(language: str):
    """Get or load the Piper voice for a language. None if unavailable."""
    with _voice_lock:
        cached = _voices.get(language)
        if cached is False:
            return None
        if cached is not None:
            return cached

        model = VOICE_MODELS.get(language)
        if model is None:
            logger.info("No voice model configured for %s", language)
            _voices[language] = False
            return None

        try:
            from piper import PiperVoice
        except ImportError:
            logger.info("Piper TTS not installed, prompts will not be spoken")
            _voices[language] = False
            return None

        model_name, _ = model
        for base_path in _get_voice_search_paths():
            candidate = base_path / f"{model_name}.onnx"
            if candidate.exists():
                try:
                    voice = PiperVoice.load(str(candidate))
                except Exception as e:
                    logger.warning("Could not load voice %s: %s", candidate, e)
                    break
                _voices[language] = voice
                return voice

        logger.info("Voice model %s not found", model_name)
        _voices[language] = False
        return None


def _ensure_mixer() -> bool:
    if pygame.mixer.get_init():
        return True
    try:
        pygame.mixer.init(frequency=44100, size=-16, channels=2, buffer=1024)
        return True
    except pygame.error:
        return False


_current_channel = None
_speech_id = 0  # Incremented on each speak() call to cancel stale requests


def stop() -> None:
    """Stop any currently playing speech and cancel pending"""
    global _current_channel, _speech_id
    _speech_id += 1
    ch = _current_channel
    if ch is not None:
        try:
            ch.stop()
        except pygame.error:
            pass
    _current_channel = None


def speak(text: str, language: str = "en") -> bool:
    """
    Speak text in a background thread, cancelling earlier speech.

    Returns True if speech was started, False otherwise.
    """
    if not text or not text.strip():
        return False

    stop()
    my_id = _speech_id
    thread = threading.Thread(target=_speak_sync, args=(text, language, my_id), daemon=True)
    thread.start()
    return True


def _speak_sync(text: str, language: str, speech_id: int) -> bool:
    """Synchronous speech - called from background thread"""
    global _current_channel

    if speech_id != _speech_id:
        return False
    voice = _get_voice(language)
    if voice is None or not _ensure_mixer():
        return False
    if speech_id != _speech_id:
        return False

    from piper.config import SynthesisConfig
    _, speaker = VOICE_MODELS[language]

    with tempfile.NamedTemporaryFile(suffix='.wav', delete=False) as f:
        wav_path = Path(f.name)

    try:
        # Pad with pauses to prevent clipping on short words
        chunks = list(voice.synthesize(f"... {text} ...", SynthesisConfig(speaker_id=speaker)))
        if not chunks or speech_id != _speech_id:
            return False

        first = chunks[0]
        with wave.open(str(wav_path), 'wb') as wav_file:
            wav_file.setnchannels(first.sample_channels)
            wav_file.setsampwidth(first.sample_width)
            wav_file.setframerate(first.sample_rate)
            for chunk in chunks:
                wav_file.writeframes(chunk.audio_int16_bytes)

        channel = pygame.mixer.Sound(str(wav_path)).play()
        _current_channel = channel
        while channel is not None and channel.get_busy():
            if speech_id != _speech_id:
                channel.stop()
                break
            pygame.time.wait(50)
        return True
    except (OSError, pygame.error) as e:
        logger.warning("Speech failed: %s", e)
        return False
    finally:
        _current_channel = None
        wav_path.unlink(missing_ok=True)

