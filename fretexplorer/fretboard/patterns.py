from __future__ import annotations

"""Fingering patterns: 3-notes-per-string and pentatonic boxes.

Diatonic (7-note) scales use one fixed 3NPS degree table and rotate the
*degrees* by the offset, giving N positions. Pentatonic scales pick one of
five fixed boxes by the offset; the degrees inside a box are not shifted.
Both tables are indexed by string, low string first.
"""

from typing import List, Optional, Sequence

from ..app.explain import trace as xtrace
from ..theory.note_utils import STANDARD_TUNING, note_at_fret, pitch_class_index
from ..theory.scales import is_pentatonic

THREE_NPS_DEGREES = (
    (2, 3, 4),
    (6, 7, 1),
    (3, 4, 5),
    (7, 1, 2),
    (4, 5, 6),
    (1, 2, 3),
)

# Degree 6 in a 5-note scale wraps to the root.
PENTATONIC_BOXES = (
    ((5, 6), (1, 2), (4, 5), (1, 3), (2, 4), (5, 6)),
    ((6, 1), (2, 3), (5, 6), (2, 4), (3, 5), (6, 1)),
    ((1, 2), (3, 4), (6, 1), (3, 5), (4, 6), (1, 2)),
    ((2, 3), (4, 5), (1, 2), (4, 6), (5, 1), (2, 3)),
    ((3, 4), (5, 6), (2, 3), (5, 1), (6, 2), (3, 4)),
)

OCTAVE = 12


def box_count(scale_id: Optional[str], notes: Sequence[str]) -> int:
    """Number of distinct pattern positions; never below 1."""
    if is_pentatonic(scale_id, notes):
        return len(PENTATONIC_BOXES)
    return max(1, len(notes))


def normalize_offset(offset: int, count: int) -> int:
    count = max(1, count)
    return ((offset % count) + count) % count


def lowest_fret_for(open_pitch: str, target: str, fret_count: int) -> Optional[int]:
    """Lowest fret in [0, fret_count] sounding `target`, or None."""
    want = pitch_class_index(target)
    for f in range(fret_count + 1):
        if pitch_class_index(note_at_fret(open_pitch, f)) == want:
            return f
    return None


def _degree_rows(pentatonic: bool, norm_offset: int):
    if pentatonic:
        return PENTATONIC_BOXES[norm_offset]
    return THREE_NPS_DEGREES


def pattern_positions(
    root: str,
    scale_notes: Sequence[str],
    enabled: bool,
    offset: int,
    fret_count: int,
    scale_id: Optional[str] = None,
    tuning: Sequence[str] = STANDARD_TUNING,
) -> List[List[int]]:
    """Frets of the rotated pattern, one sorted list per string.

    `root` is part of the recomputation inputs but the pattern depends on it
    only through `scale_notes[0]`. Every list is empty when `enabled` is
    false. Degrees with no fret in range are dropped, and each resolved fret
    is repeated one octave up when that still fits on the neck.
    """
    if not enabled:
        return [[] for _ in tuning]

    n = max(1, len(scale_notes))
    pentatonic = is_pentatonic(scale_id, scale_notes)
    count = box_count(scale_id, scale_notes)
    norm = normalize_offset(offset, count)
    rows = _degree_rows(pentatonic, norm)

    positions: List[List[int]] = []
    unresolved = []
    for s_idx, open_pitch in enumerate(tuning):
        frets = set()
        for d in rows[s_idx]:
            if pentatonic:
                degree_idx = (d - 1) % n
            else:
                degree_idx = ((d - 1 + norm) % n + n) % n
            target = scale_notes[degree_idx]
            f = lowest_fret_for(open_pitch, target, fret_count)
            if f is None:
                unresolved.append((s_idx, d))
                continue
            frets.add(f)
            if f + OCTAVE <= fret_count:
                frets.add(f + OCTAVE)
        positions.append(sorted(frets))

    xtrace(
        "pattern",
        {
            "root": root,
            "pentatonic": pentatonic,
            "boxes": count,
            "offset": offset,
            "normalized": norm,
            "unresolved": unresolved,
        },
    )
    return positions
