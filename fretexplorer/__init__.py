"""Fretboard Explorer package initialization.

Scale highlighting, fingering patterns and a small tuner for a six-string
guitar. The pure engine lives in `fretexplorer.theory` and
`fretexplorer.fretboard`; audio and UI layers sit on top of it.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
