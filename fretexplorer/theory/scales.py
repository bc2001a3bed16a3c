from __future__ import annotations

"""Scale vocabulary and resolution of (root, scale) into pitch classes.

Two vocabularies meet here: the short ids offered to the user
(`SCALE_IDS`) and the descriptive names understood by a scale lookup
("C natural minor", "A minor pentatonic"). `scale_notes` translates between
them and never returns an empty scale.
"""

from typing import Dict, List, Optional, Protocol, Sequence

from ..app.explain import trace as xtrace
from .note_utils import ACCIDENTAL_STEPS, PITCH_CLASS_NAMES_SHARP, InvalidNote, pitch_class, pitch_class_index


SCALE_IDS = (
    "major",
    "dorian",
    "phrygian",
    "lydian",
    "mixolydian",
    "aeolian",
    "locrian",
    "minor",
    "pentatonic",
    "minor_pentatonic",
)

SCALE_LABELS: Dict[str, str] = {
    "major": "Major (Ionian)",
    "dorian": "Dorian",
    "phrygian": "Phrygian",
    "lydian": "Lydian",
    "mixolydian": "Mixolydian",
    "aeolian": "Minor (Aeolian)",
    "locrian": "Locrian",
    "minor": "Minor",
    "pentatonic": "Pentatonic",
    "minor_pentatonic": "Minor Pentatonic",
}

PENTATONIC_IDS = {"pentatonic", "minor_pentatonic"}

# Internal id -> lookup vocabulary. Ids not listed pass through unchanged.
EXTERNAL_SCALE_NAMES: Dict[str, str] = {
    "pentatonic": "major pentatonic",
    "minor_pentatonic": "minor pentatonic",
    "minor": "natural minor",
}

_SCALE_ALIASES: Dict[str, str] = {
    "ionian": "major",
    "maj": "major",
    "min": "minor",
    "natural_minor": "minor",
    "nat_minor": "minor",
    "major_pentatonic": "pentatonic",
    "pentatonic_major": "pentatonic",
    "pentatonic_minor": "minor_pentatonic",
}

# Step patterns in semitones, keyed by lookup vocabulary.
SCALE_PATTERNS: Dict[str, List[int]] = {
    "major": [2, 2, 1, 2, 2, 2, 1],
    "ionian": [2, 2, 1, 2, 2, 2, 1],
    "dorian": [2, 1, 2, 2, 2, 1, 2],
    "phrygian": [1, 2, 2, 2, 1, 2, 2],
    "lydian": [2, 2, 2, 1, 2, 2, 1],
    "mixolydian": [2, 2, 1, 2, 2, 1, 2],
    "aeolian": [2, 1, 2, 2, 1, 2, 2],
    "natural minor": [2, 1, 2, 2, 1, 2, 2],
    "locrian": [1, 2, 2, 1, 2, 2, 2],
    "harmonic minor": [2, 1, 2, 2, 1, 3, 1],
    "melodic minor": [2, 1, 2, 2, 2, 2, 1],
    "major pentatonic": [2, 2, 3, 2, 3],
    "minor pentatonic": [3, 2, 2, 3, 2],
}


class ScaleLookup(Protocol):
    """Resolve '<tonic> <scale-name>' to ordered pitch names (may be empty)."""

    def get(self, name: str) -> Sequence[str]:
        ...


class IntervalScaleLookup:
    """Scale lookup backed by the `SCALE_PATTERNS` step table."""

    def __init__(self, patterns: Optional[Dict[str, List[int]]] = None) -> None:
        self.patterns = patterns if patterns is not None else SCALE_PATTERNS

    def get(self, name: str) -> List[str]:
        tonic, _, scale_name = (name or "").strip().partition(" ")
        steps = self.patterns.get(scale_name.strip().lower())
        if steps is None or not tonic:
            return []
        try:
            pc = pitch_class_index(tonic)
        except InvalidNote:
            return []
        notes = []
        # last step closes the octave
        for step in steps:
            notes.append(PITCH_CLASS_NAMES_SHARP[pc % 12])
            pc += step
        return notes


DEFAULT_LOOKUP = IntervalScaleLookup()


def normalize_scale_id(value: str | None) -> str:
    """Map user input ('Major-Pentatonic', 'ionian', ...) to a scale id."""
    if not value:
        return "major"
    t = value.strip().lower().replace("-", "_").replace(" ", "_")
    t = _SCALE_ALIASES.get(t, t)
    if t not in SCALE_IDS:
        raise ValueError(f"Unsupported scale: {value}")
    return t


def normalize_root(root: str) -> str:
    """Uppercase letter plus its accidentals ('#', 'b', 'x').

    Anything after the accidentals (octave digits, stray text) is dropped.
    """
    s = (root or "").strip()
    if not s:
        return s
    idx = 1
    while idx < len(s) and s[idx] in ACCIDENTAL_STEPS:
        idx += 1
    return s[0].upper() + s[1:idx]


def external_scale_name(scale_id: str) -> str:
    return EXTERNAL_SCALE_NAMES.get(scale_id, scale_id)


def scale_notes(root: str, scale_id: str, lookup: Optional[ScaleLookup] = None) -> List[str]:
    """Ordered pitch classes of `root` `scale_id`, root first.

    Names come back in canonical sharp spelling, whatever the lookup's
    spelling ('F##', 'Bbb'). If the lookup returns nothing the result is
    `[root]`, so callers always get at least one note. A root that is not a
    pitch name raises `InvalidNote`.
    """
    lookup = lookup or DEFAULT_LOOKUP
    tonic = normalize_root(root)
    root_pc = pitch_class(tonic)
    query = f"{tonic} {external_scale_name(scale_id)}"
    found = list(lookup.get(query) or [])
    if not found:
        xtrace("scale_fallback", {"query": query})
        return [root_pc]
    notes = [pitch_class(n) for n in found]
    xtrace("scale_resolved", {"query": query, "notes": notes})
    return notes


def is_pentatonic(scale_id: str | None, notes: Sequence[str]) -> bool:
    return len(notes) == 5 or scale_id in PENTATONIC_IDS
