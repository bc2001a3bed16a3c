from __future__ import annotations

"""Abstract-ish audio synthesis interface.

Concrete implementations provide single-note playback for clicked
fretboard cells.
"""

import threading
import time

from ..theory.note_utils import note_str_to_midi


class Synth:
    """Abstract-like synth interface for playback engines."""

    def __init__(self, sample_rate: int, gain: float) -> None:
        self.sample_rate = sample_rate
        self.gain = gain

    def select_program(self, program: int) -> None:
        """Select a General MIDI program on the playback channel."""
        raise NotImplementedError

    def note_on(self, midi: int, velocity: int = 100, dur_ms: int = 500) -> None:
        """Play a single note for a duration in milliseconds (blocking)."""
        raise NotImplementedError

    def sleep_ms(self, ms: int) -> None:
        time.sleep(ms / 1000.0)

    def close(self) -> None:
        """Release resources."""
        pass


def play_pitch(synth: Synth, pitch: str, velocity: int = 100, dur_ms: int = 500) -> threading.Thread:
    """Fire-and-forget playback of an octave-qualified pitch such as 'G#3'.

    The note sounds on a daemon thread so the caller never waits on audio.
    """
    midi = note_str_to_midi(pitch)
    t = threading.Thread(target=synth.note_on, args=(midi, velocity, dur_ms), daemon=True)
    t.start()
    return t
