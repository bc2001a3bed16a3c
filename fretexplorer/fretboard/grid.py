from __future__ import annotations

"""Per-cell render data for one rendering cycle.

Combines scale resolution, cell classification and the pattern engine into
`CellView` records. Styling is left to the renderer; `cell_category` is the
shared rule both the text renderer and the GUI use to pick a fill.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..theory.note_utils import STANDARD_TUNING, STANDARD_TUNING_OCTAVES, note_at_fret_with_octave
from ..theory.scales import ScaleLookup, scale_notes as resolve_scale
from .classifier import cell_label, classify
from .params import FretboardParams
from .patterns import pattern_positions

CATEGORIES = ("root", "root_dim", "scale", "scale_dim", "none")


@dataclass(frozen=True)
class CellView:
    string_index: int
    fret: int
    pitch_class: str
    pitch: str
    is_root: bool
    is_in_scale: bool
    is_in_pattern: bool
    is_open_string: bool
    label: Optional[str]


@dataclass(frozen=True)
class FretboardView:
    params: FretboardParams
    scale_notes: List[str]
    pattern: List[List[int]]
    rows: List[List[CellView]]  # low string first

    def cell(self, string_index: int, fret: int) -> CellView:
        return self.rows[string_index][fret]


def build_grid(
    params: FretboardParams,
    lookup: Optional[ScaleLookup] = None,
    tuning: Sequence[str] = STANDARD_TUNING,
    tuning_octaves: Sequence[str] = STANDARD_TUNING_OCTAVES,
) -> FretboardView:
    notes = resolve_scale(params.root, params.scale, lookup)
    pattern = pattern_positions(
        params.root,
        notes,
        params.pattern_enabled,
        params.pattern_offset,
        params.frets,
        scale_id=params.scale,
        tuning=tuning,
    )
    rows: List[List[CellView]] = []
    for s_idx in range(len(tuning)):
        in_pattern = set(pattern[s_idx])
        row = []
        for fret in range(params.frets + 1):
            c = classify(s_idx, fret, params.root, notes, tuning)
            label = cell_label(c, notes, params.label_type) if params.show_labels else None
            row.append(
                CellView(
                    string_index=s_idx,
                    fret=fret,
                    pitch_class=c.pitch_class,
                    pitch=note_at_fret_with_octave(tuning_octaves[s_idx], fret),
                    is_root=c.is_root,
                    is_in_scale=c.is_in_scale,
                    is_in_pattern=params.pattern_enabled and fret in in_pattern,
                    is_open_string=fret == 0,
                    label=label,
                )
            )
        rows.append(row)
    return FretboardView(params=params, scale_notes=notes, pattern=pattern, rows=rows)


def cell_category(cell: CellView, pattern_active: bool) -> str:
    """Fill category for a cell: one of `CATEGORIES`."""
    if pattern_active:
        if cell.is_root:
            return "root" if cell.is_in_pattern else "root_dim"
        if cell.is_in_pattern:
            return "scale"
        if cell.is_in_scale and not cell.is_open_string:
            return "scale_dim"
        return "none"
    if cell.is_root:
        return "root"
    if cell.is_in_scale and not cell.is_open_string:
        return "scale"
    return "none"
