"""Fretboard grid: classification, fingering patterns and rendering data."""

from .grid import CellView, FretboardView, build_grid, cell_category  # noqa: F401
from .params import FretboardParams  # noqa: F401
from .patterns import pattern_positions  # noqa: F401
