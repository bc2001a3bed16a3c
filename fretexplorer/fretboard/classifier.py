from __future__ import annotations

"""Root / in-scale / out-of-scale classification of fretboard cells."""

from dataclasses import dataclass
from typing import Optional, Sequence

from ..theory.note_utils import STANDARD_TUNING, note_at_fret, pitch_class_index

LABEL_TYPES = ("note", "interval")


@dataclass(frozen=True)
class CellClass:
    pitch_class: str
    is_root: bool
    is_in_scale: bool


def classify(
    string_index: int,
    fret: int,
    root: str,
    scale_notes: Sequence[str],
    tuning: Sequence[str] = STANDARD_TUNING,
) -> CellClass:
    """Classify the cell at (`string_index`, `fret`).

    Membership is decided on chromatic index, so 'Db' in a scale matches a
    'C#' on the neck.
    """
    pc = note_at_fret(tuning[string_index], fret)
    sem = pitch_class_index(pc)
    scale_sems = {pitch_class_index(n) for n in scale_notes}
    return CellClass(
        pitch_class=pc,
        is_root=sem == pitch_class_index(root),
        is_in_scale=sem in scale_sems,
    )


def cell_label(cell: CellClass, scale_notes: Sequence[str], label_type: str = "note") -> Optional[str]:
    """Pitch name or 1-based scale degree for in-scale cells, else None."""
    if not cell.is_in_scale:
        return None
    if label_type == "interval":
        sem = pitch_class_index(cell.pitch_class)
        for i, n in enumerate(scale_notes):
            if pitch_class_index(n) == sem:
                return str(i + 1)
        return None
    return cell.pitch_class
