from __future__ import annotations

"""Plain-text rendering of a FretboardView for the terminal."""

from typing import List

from .grid import CellView, FretboardView, cell_category

INLAY_FRETS = {3, 5, 7, 9, 12, 15, 17, 19, 21, 24}

_MARKERS = {
    "root": ("<", ">"),
    "root_dim": ("(", ")"),
    "scale": ("[", "]"),
    "scale_dim": (" ", " "),
    "none": (" ", " "),
}

CELL_WIDTH = 4


def render_cell(cell: CellView, pattern_active: bool) -> str:
    left, right = _MARKERS[cell_category(cell, pattern_active)]
    text = cell.label or ("" if cell.is_in_scale else "-")
    return f"{left}{text:^2}{right}"


def _header(frets: int) -> str:
    cols = [f"{f:^{CELL_WIDTH}}" for f in range(frets + 1)]
    return "   " + cols[0] + "||" + "|".join(cols[1:])


def _inlays(frets: int) -> str:
    cols = []
    for f in range(frets + 1):
        mark = ":" if f == 12 or f == 24 else ("." if f in INLAY_FRETS else "")
        cols.append(f"{mark:^{CELL_WIDTH}}")
    return "   " + cols[0] + "  " + " ".join(cols[1:])


def render_text(view: FretboardView) -> str:
    """Render the board with the high string on top."""
    params = view.params
    active = params.pattern_enabled
    lines: List[str] = [
        f"Key: {params.root}  Scale: {params.scale}  Notes: {' '.join(view.scale_notes)}",
    ]
    if active:
        lines.append(f"Pattern offset: {params.pattern_offset}")
    lines.append(_header(params.frets))
    for row in reversed(view.rows):
        name = row[0].pitch_class
        cells = [render_cell(c, active) for c in row]
        lines.append(f"{name:<2} " + cells[0] + "||" + "|".join(cells[1:]))
    lines.append(_inlays(params.frets))
    return "\n".join(lines)
