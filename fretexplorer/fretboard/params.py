from __future__ import annotations

"""Pydantic model for the user-adjustable fretboard parameters."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from ..theory.note_utils import InvalidNote, pitch_class
from ..theory.scales import normalize_root, normalize_scale_id

MIN_FRETS = 1
MAX_FRETS = 24


class FretboardParams(BaseModel):
    root: str = "C"
    scale: str = "major"
    frets: int = Field(default=20, ge=MIN_FRETS, le=MAX_FRETS)
    pattern_enabled: bool = False
    pattern_offset: int = 0
    label_type: Literal["note", "interval"] = "note"
    show_labels: bool = True

    model_config = {"frozen": True}

    @field_validator("root")
    @classmethod
    def _root_pc(cls, v: str) -> str:
        try:
            return pitch_class(normalize_root(v))
        except InvalidNote as e:
            raise ValueError(f"unknown key root: {v!r}") from e

    @field_validator("scale")
    @classmethod
    def _scale_id(cls, v: str) -> str:
        return normalize_scale_id(v)

    def _with(self, **changes) -> "FretboardParams":
        return FretboardParams(**{**self.model_dump(), **changes})

    def with_root(self, root: str) -> "FretboardParams":
        """New key; the pattern starts again from position 0."""
        return self._with(root=root, pattern_offset=0)

    def with_scale(self, scale: str) -> "FretboardParams":
        return self._with(scale=scale, pattern_offset=0)

    def with_frets(self, frets: int) -> "FretboardParams":
        return self._with(frets=frets)

    def with_pattern(self, enabled: bool) -> "FretboardParams":
        return self._with(pattern_enabled=enabled)

    def with_labels(self, show: bool, label_type: str | None = None) -> "FretboardParams":
        return self._with(show_labels=show, label_type=label_type or self.label_type)

    def raised(self) -> "FretboardParams":
        return self._with(pattern_offset=self.pattern_offset + 1)

    def lowered(self) -> "FretboardParams":
        return self._with(pattern_offset=self.pattern_offset - 1)
