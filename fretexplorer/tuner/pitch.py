from __future__ import annotations

"""Pitch estimation for the tuner.

YIN fundamental-frequency estimation in numpy, plus the frequency → note
and cents conversion shown on the tuner display.

Reference: De Cheveigné, A., & Kawahara, H. (2002).
"YIN, a fundamental frequency estimator for speech and music."
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..theory.note_utils import midi_to_note_name

YIN_THRESHOLD = 0.1
MIN_FREQ = 60.0     # below low E2 (82 Hz) with some margin
MAX_FREQ = 1200.0
SILENCE_RMS = 0.01
A4_HZ = 440.0
A4_MIDI = 69

NO_SIGNAL_NOTE = "–"


@dataclass(frozen=True)
class TunerReading:
    note: str
    cents: int
    frequency: float

    @property
    def has_signal(self) -> bool:
        return self.note != NO_SIGNAL_NOTE


NO_SIGNAL = TunerReading(note=NO_SIGNAL_NOTE, cents=0, frequency=0.0)


def yin_pitch(
    signal: np.ndarray,
    sample_rate: int,
    threshold: float = YIN_THRESHOLD,
    min_freq: float = MIN_FREQ,
    max_freq: float = MAX_FREQ,
) -> Optional[float]:
    """Estimate the fundamental frequency of `signal` in Hz, or None."""
    x = np.asarray(signal, dtype=np.float64)
    w = len(x) // 2
    tau_min = max(2, int(sample_rate / max_freq))
    tau_max = min(w, int(sample_rate / min_freq))
    if tau_max <= tau_min:
        return None

    # Difference function d(tau) = sum (x[j] - x[j + tau])^2 over the window
    d = np.zeros(tau_max)
    frame = x[:w]
    for tau in range(1, tau_max):
        diff = frame - x[tau:tau + w]
        d[tau] = np.dot(diff, diff)

    # Cumulative mean normalized difference
    cmnd = np.ones(tau_max)
    running = np.cumsum(d[1:])
    taus = np.arange(1, tau_max)
    nonzero = running > 0
    cmnd[1:][nonzero] = d[1:][nonzero] * taus[nonzero] / running[nonzero]

    # Absolute threshold, then walk down to the local minimum
    below = np.nonzero(cmnd[tau_min:] < threshold)[0]
    if below.size == 0:
        return None
    tau = int(below[0]) + tau_min
    while tau + 1 < tau_max and cmnd[tau + 1] < cmnd[tau]:
        tau += 1

    # Parabolic interpolation for sub-sample accuracy
    estimate = float(tau)
    if 0 < tau < tau_max - 1:
        s0, s1, s2 = cmnd[tau - 1], cmnd[tau], cmnd[tau + 1]
        denom = 2.0 * s1 - s2 - s0
        if denom != 0:
            estimate = tau + (s2 - s0) / (2.0 * denom)
    if estimate <= 0:
        return None
    return sample_rate / estimate


def freq_to_midi(freq: float) -> float:
    """Fractional MIDI number; A4 = 440 Hz = 69."""
    return A4_MIDI + 12.0 * math.log2(freq / A4_HZ)


def reading_from_frequency(freq: float) -> TunerReading:
    """Nearest note (sharp pitch-class name) and integer cents offset."""
    if freq <= 0:
        return NO_SIGNAL
    midi = freq_to_midi(freq)
    nearest = int(math.floor(midi + 0.5))
    cents = int(math.floor((midi - nearest) * 100 + 0.5))
    return TunerReading(note=midi_to_note_name(nearest, with_octave=False), cents=cents, frequency=freq)


def analyze_buffer(
    buffer: np.ndarray,
    sample_rate: int,
    threshold: float = YIN_THRESHOLD,
    silence_rms: float = SILENCE_RMS,
    min_freq: float = MIN_FREQ,
    max_freq: float = MAX_FREQ,
) -> TunerReading:
    """One tuner cycle over a buffer; `NO_SIGNAL` when no clear pitch."""
    x = np.asarray(buffer, dtype=np.float64)
    if x.size == 0:
        return NO_SIGNAL
    rms = float(np.sqrt(np.mean(x ** 2)))
    if rms < silence_rms:
        return NO_SIGNAL
    freq = yin_pitch(x, sample_rate, threshold, min_freq, max_freq)
    if freq is None or not (min_freq <= freq <= max_freq):
        return NO_SIGNAL
    return reading_from_frequency(freq)


def format_cents(reading: TunerReading) -> str:
    if not reading.has_signal or reading.cents == 0:
        return "–"
    return f"{reading.cents:+d}"


def tuner_bar(cents: float, width: int = 41) -> str:
    """ASCII needle over -50..+50 cents, centre mark at 0."""
    half = width // 2
    clamped = max(-50.0, min(50.0, float(cents)))
    pos = half + int(round(clamped / 50.0 * half))
    bar = ["-"] * width
    bar[half] = "|"
    bar[max(0, min(width - 1, pos))] = "^"
    return "[" + "".join(bar) + "]"
