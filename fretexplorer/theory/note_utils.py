# fretexplorer/theory/note_utils.py
from __future__ import annotations

"""Pitch names, pitch classes and the fret → note mapping.

Canonical spelling is sharps only. Flats, the edge enharmonics and stacked
accidentals are accepted on input and normalized once.
"""

from typing import Dict, Optional, Tuple

PITCH_CLASS_NAMES_SHARP = ["C","C#","D","D#","E","F","F#","G","G#","A","A#","B"]
LETTER_TO_PC: Dict[str, int] = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}
ACCIDENTAL_STEPS: Dict[str, int] = {"#": 1, "b": -1, "x": 2}

# Open strings, low string first.
STANDARD_TUNING: Tuple[str, ...] = ("E", "A", "D", "G", "B", "E")
STANDARD_TUNING_OCTAVES: Tuple[str, ...] = ("E2", "A2", "D3", "G3", "B3", "E4")


class InvalidNote(ValueError):
    """A pitch name that does not resolve to one of the 12 pitch classes."""


def split_note(name: str) -> Tuple[str, Optional[int]]:
    """Split 'C#4' into ('C#', 4) and 'Eb' into ('Eb', None).

    The letter is case-insensitive. Accidentals may be stacked, as scale
    spellers produce them: 'F##', 'Fx', 'Bbb'.
    """
    s = (name or "").strip()
    if not s or s[0].upper() not in LETTER_TO_PC:
        raise InvalidNote(f"Invalid note: {name!r}")
    idx = 1
    while idx < len(s) and s[idx] in ACCIDENTAL_STEPS:
        idx += 1
    pc_name = s[0].upper() + s[1:idx]
    rest = s[idx:]
    if not rest:
        return pc_name, None
    try:
        return pc_name, int(rest)
    except ValueError as e:
        raise InvalidNote(f"Invalid octave in note: {name!r}") from e


def _semitones_from_c(pc_name: str) -> int:
    # not reduced mod 12: 'Cb' is -1, 'B#' is 12
    return LETTER_TO_PC[pc_name[0]] + sum(ACCIDENTAL_STEPS[a] for a in pc_name[1:])


def pitch_class_index(name: str) -> int:
    """Chromatic index 0..11 of a pitch name (octave ignored)."""
    pc_name, _ = split_note(name)
    return _semitones_from_c(pc_name) % 12


def pitch_class(name: str) -> str:
    """Canonical sharp spelling of a pitch name, without octave."""
    return PITCH_CLASS_NAMES_SHARP[pitch_class_index(name)]


def note_at_fret(open_pitch: str, fret: int) -> str:
    """Pitch class sounding at `fret` on a string tuned to `open_pitch`."""
    if fret < 0:
        raise ValueError(f"fret must be >= 0, got {fret}")
    idx = pitch_class_index(open_pitch)
    return PITCH_CLASS_NAMES_SHARP[(idx + fret) % 12]


def note_at_fret_with_octave(open_pitch: str, fret: int) -> str:
    """Octave-qualified pitch at `fret`, e.g. ('B3', 1) -> 'C4'.

    The open pitch must carry an octave.
    """
    if fret < 0:
        raise ValueError(f"fret must be >= 0, got {fret}")
    pc_name, octave = split_note(open_pitch)
    if octave is None:
        raise InvalidNote(f"Open pitch needs an octave: {open_pitch!r}")
    return midi_to_note_name(note_name_to_midi(pc_name, octave) + fret)


def note_name_to_midi(name: str, octave: int) -> int:
    """Middle C (C4) -> 60."""
    pc_name, _ = split_note(name)
    return 12 * (octave + 1) + _semitones_from_c(pc_name)  # C4=60


def note_str_to_midi(note: str) -> int:
    """Parse a note string like 'C4', 'Db3', 'G#5' into a MIDI number."""
    pc_name, octave = split_note(note)
    if octave is None:
        raise InvalidNote(f"Missing octave in note string: {note!r}")
    return note_name_to_midi(pc_name, octave)


def midi_to_note_name(midi: int, with_octave: bool = True) -> str:
    name = PITCH_CLASS_NAMES_SHARP[midi % 12]
    if not with_octave:
        return name
    return f"{name}{midi // 12 - 1}"
