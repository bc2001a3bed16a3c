"""Pitch and scale layer.

Pure functions only; nothing here holds state between calls.
"""

from .note_utils import InvalidNote, note_at_fret, STANDARD_TUNING  # noqa: F401
from .scales import SCALE_IDS, ScaleLookup, scale_notes  # noqa: F401
