from __future__ import annotations

"""Configuration loading and validation for Fretboard Explorer.

This module loads YAML configuration, applies defaults, and validates
that enumerations and paths are sane before the CLI or GUI start.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import sys

import yaml
from pydantic import ValidationError

from ..fretboard.params import MAX_FRETS, MIN_FRETS, FretboardParams
from ..theory.note_utils import InvalidNote, pitch_class
from ..theory.scales import SCALE_IDS, normalize_scale_id


ALLOWED_BACKENDS = {"fluidsynth"}
ALLOWED_LABEL_TYPES = {"note", "interval"}
ALLOWED_THEMES = {"dark", "light"}


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"ERROR: Config file not found: {path}", file=sys.stderr)
        sys.exit(1)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML or defaults.

    Args:
        path: Optional path to a YAML config. If None, use package defaults.

    Returns:
        A dictionary with configuration values.
    """
    if path:
        cfg = _load_yaml(Path(path))
    else:
        default_path = Path(__file__).with_name("defaults.yml")
        cfg = _load_yaml(default_path)
    return cfg


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply defaults and validate configuration values.

    Unsupported values are reported and replaced by defaults. A missing
    SoundFont disables audio rather than aborting: the fretboard is still
    usable without playback.

    Args:
        cfg: The raw configuration dictionary.

    Returns:
        The validated and merged configuration dictionary.
    """
    # Shallow defaults for missing sections
    cfg.setdefault("fretboard", {})
    cfg.setdefault("audio", {})
    cfg.setdefault("tuner", {})
    cfg.setdefault("ui", {})

    board = cfg["fretboard"]
    audio = cfg["audio"]
    tuner = cfg["tuner"]
    ui = cfg["ui"]

    board.setdefault("key", "C")
    board.setdefault("scale", "major")
    board.setdefault("frets", 20)
    board.setdefault("pattern_enabled", False)
    board.setdefault("pattern_offset", 0)
    board.setdefault("label_type", "note")
    board.setdefault("show_labels", True)

    audio.setdefault("enabled", False)
    audio.setdefault("backend", "fluidsynth")
    audio.setdefault("soundfont_path", "./soundfonts/Guitar.sf2")
    audio.setdefault("sample_rate", 44100)
    audio.setdefault("gain", 0.5)
    audio.setdefault("program", 24)  # GM nylon guitar
    audio.setdefault("velocity", 100)
    audio.setdefault("duration_ms", 500)

    tuner.setdefault("sample_rate", 44100)
    tuner.setdefault("buffer_size", 2048)
    tuner.setdefault("threshold", 0.1)
    tuner.setdefault("silence_rms", 0.01)
    tuner.setdefault("min_freq", 60.0)
    tuner.setdefault("max_freq", 1200.0)
    tuner.setdefault("poll_ms", 50)

    ui.setdefault("theme", "dark")

    # Enum validations
    try:
        board["key"] = pitch_class(str(board.get("key")))
    except InvalidNote:
        print(f"WARNING: Unsupported key '{board.get('key')}', using 'C'.")
        board["key"] = "C"

    try:
        board["scale"] = normalize_scale_id(str(board.get("scale")))
    except ValueError:
        print(f"WARNING: Unsupported scale '{board.get('scale')}', using 'major'. Choose from: {', '.join(SCALE_IDS)}")
        board["scale"] = "major"

    try:
        frets = int(board.get("frets"))
    except (TypeError, ValueError):
        frets = 20
    if not MIN_FRETS <= frets <= MAX_FRETS:
        print(f"WARNING: Fret count {board.get('frets')} outside {MIN_FRETS}..{MAX_FRETS}, clamping.")
        frets = max(MIN_FRETS, min(MAX_FRETS, frets))
    board["frets"] = frets

    if board.get("label_type") not in ALLOWED_LABEL_TYPES:
        print(f"WARNING: Unsupported label_type '{board.get('label_type')}', using 'note'.")
        board["label_type"] = "note"

    backend = audio.get("backend")
    if backend not in ALLOWED_BACKENDS:
        print(f"WARNING: Unsupported audio backend '{backend}', falling back to 'fluidsynth'.")
        audio["backend"] = "fluidsynth"

    theme = ui.get("theme")
    if theme not in ALLOWED_THEMES:
        print(f"WARNING: Unsupported theme '{theme}', using 'dark'.")
        ui["theme"] = "dark"

    # Ensure soundfont exists when playback is requested
    if audio["enabled"] and audio["backend"] == "fluidsynth":
        sf_path = Path(audio.get("soundfont_path", ""))
        if not sf_path.exists():
            print(
                f"WARNING: SoundFont not found at '{sf_path}'. Audio disabled; place a .sf2 in ./soundfonts and update the path.",
                file=sys.stderr,
            )
            audio["enabled"] = False

    return cfg


def params_from_config(cfg: Dict[str, Any]) -> FretboardParams:
    """Build fretboard parameters from a validated config."""
    board = cfg.get("fretboard", {})
    try:
        return FretboardParams(
            root=board.get("key", "C"),
            scale=board.get("scale", "major"),
            frets=board.get("frets", 20),
            pattern_enabled=bool(board.get("pattern_enabled", False)),
            pattern_offset=int(board.get("pattern_offset", 0)),
            label_type=board.get("label_type", "note"),
            show_labels=bool(board.get("show_labels", True)),
        )
    except ValidationError as e:
        print(f"WARNING: Invalid fretboard settings, using defaults.\n{e}", file=sys.stderr)
        return FretboardParams()
