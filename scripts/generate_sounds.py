#!/usr/bin/env python3
"""
Generate sound effects for Omise

Creates short, friendly sounds:
- success: rising three-note chime
- failure: soft falling "boop boop"
- select: quick xylophone tick
- order: two-note shop bell
"""

import math
from pathlib import Path
import wave

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
SOUNDS_DIR = PROJECT_ROOT / "packs" / "core-sounds" / "content"

SAMPLE_RATE = 44100


def write_wav(filename: str, samples: list[int], sample_rate: int = SAMPLE_RATE):
    """Write samples to a WAV file"""
    filepath = SOUNDS_DIR / filename
    with wave.open(str(filepath), 'w') as wav_file:
        wav_file.setnchannels(1)
        wav_file.setsampwidth(2)
        wav_file.setframerate(sample_rate)
        for sample in samples:
            sample = max(-32767, min(32767, sample))
            wav_file.writeframes(sample.to_bytes(2, byteorder='little', signed=True))
    print(f"  Created {filename}")


def finalize_samples(samples: list[float], peak_level: float = 0.75) -> list[int]:
    """Normalize and convert to int16."""
    peak = max(abs(s) for s in samples) or 1
    return [int(s / peak * peak_level * 32767) for s in samples]


def toy_tone(frequency: float, duration: float, decay: float = 4.0) -> list[float]:
    """
    Toy piano / xylophone note as raw floats.
    Punchy attack, bright harmonics, short fade at the end.
    """
    num_samples = int(SAMPLE_RATE * duration)
    fade_out_start = duration - 0.03
    samples = []

    for i in range(num_samples):
        t = i / SAMPLE_RATE

        if t < 0.005:
            attack = (t / 0.005) * 1.3
        elif t < 0.03:
            attack = 1.3 - 0.3 * ((t - 0.005) / 0.025)
        else:
            attack = 1.0

        sample = math.sin(2 * math.pi * frequency * t)
        sample += 0.5 * math.sin(2 * math.pi * frequency * 2 * t)
        sample += 0.3 * math.sin(2 * math.pi * frequency * 4 * t)

        sample *= attack * math.exp(-t * decay)

        if t > fade_out_start:
            sample *= 1 - (t - fade_out_start) / 0.03

        samples.append(sample)

    return samples


def soft_tone(frequency: float, duration: float) -> list[float]:
    """Round sine 'boop' with a gentle attack, no harsh harmonics."""
    num_samples = int(SAMPLE_RATE * duration)
    samples = []
    for i in range(num_samples):
        t = i / SAMPLE_RATE
        attack = min(t / 0.02, 1.0)
        release = min((duration - t) / 0.05, 1.0)
        sample = math.sin(2 * math.pi * frequency * t)
        sample += 0.2 * math.sin(2 * math.pi * frequency * 2 * t)
        samples.append(sample * attack * release)
    return samples


def sequence(notes: list[list[float]], gap: float = 0.0) -> list[float]:
    silence = [0.0] * int(SAMPLE_RATE * gap)
    samples: list[float] = []
    for note in notes:
        samples.extend(note)
        samples.extend(silence)
    return samples


def generate_success() -> list[int]:
    """C-E-G, each note ringing into the next"""
    notes = [toy_tone(523.25, 0.12, 6), toy_tone(659.25, 0.12, 6), toy_tone(783.99, 0.45, 4)]
    return finalize_samples(sequence(notes))


def generate_failure() -> list[int]:
    """Two soft falling boops. Gentle, never scary."""
    notes = [soft_tone(392.00, 0.18), soft_tone(311.13, 0.28)]
    return finalize_samples(sequence(notes, gap=0.04), peak_level=0.6)


def generate_select() -> list[int]:
    return finalize_samples(toy_tone(1046.50, 0.08, 20), peak_level=0.5)


def generate_order() -> list[int]:
    """Ding-dong, like the bell over a shop door"""
    notes = [toy_tone(880.00, 0.25, 5), toy_tone(698.46, 0.5, 3)]
    return finalize_samples(sequence(notes))


def main():
    """Generate all sounds"""
    print("Generating Omise sounds...")
    print()

    SOUNDS_DIR.mkdir(parents=True, exist_ok=True)

    sounds = [
        ("success.wav", generate_success),
        ("failure.wav", generate_failure),
        ("select.wav", generate_select),
        ("order.wav", generate_order),
    ]
    for filename, generator in sounds:
        write_wav(filename, generator())

    print()
    print(f"Done! Sounds saved to {SOUNDS_DIR}")


if __name__ == "__main__":
    main()
