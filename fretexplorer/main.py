from __future__ import annotations

"""CLI entry point for Fretboard Explorer."""

import argparse
import sys

from pydantic import ValidationError

from . import __version__
from .app import explain
from .config.config import load_config, params_from_config, validate_config
from .fretboard.grid import build_grid
from .fretboard.render import render_text
from .theory.scales import SCALE_IDS, SCALE_LABELS


def _parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Fretboard Explorer: scales, patterns and a tuner")
    p.add_argument("--config", type=str, default=None, help="Path to YAML config")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument("--explain", action="store_true", help="Trace scale and pattern resolution")
    p.add_argument("--key", type=str, default=None, help="Root note, e.g. C, F#, Bb")
    p.add_argument("--scale", type=str, default=None, help="Scale id (see --list-scales)")
    p.add_argument("--frets", type=int, default=None, help="Number of frets to show (1-24)")
    p.add_argument("--pattern", action="store_true", help="Overlay the 3NPS / pentatonic box pattern")
    p.add_argument("--offset", type=int, default=None, help="Pattern position (wraps, negatives allowed)")
    p.add_argument("--labels", choices=["note", "interval"], default=None, help="Label cells by note or degree")
    p.add_argument("--no-labels", action="store_true", help="Hide cell labels")
    p.add_argument("--list-scales", action="store_true", help="List scale ids and exit")
    mode = p.add_mutually_exclusive_group()
    mode.add_argument("--gui", action="store_true", help="Open the desktop fretboard")
    mode.add_argument("--tuner", action="store_true", help="Run the microphone tuner in the terminal")
    return p.parse_args(argv)


def _apply_overrides(params, args: argparse.Namespace):
    changes = {}
    if args.key is not None:
        changes["root"] = args.key
    if args.scale is not None:
        changes["scale"] = args.scale
    if args.frets is not None:
        changes["frets"] = args.frets
    if args.pattern:
        changes["pattern_enabled"] = True
    if args.offset is not None:
        changes["pattern_offset"] = args.offset
    if args.labels is not None:
        changes["label_type"] = args.labels
    if args.no_labels:
        changes["show_labels"] = False
    return type(params)(**{**params.model_dump(), **changes})


def _run_tuner(cfg) -> None:
    from .tuner.capture import TunerSession
    from .tuner.pitch import format_cents, tuner_bar

    def publish(reading) -> None:
        line = f"{reading.note:>2}  {format_cents(reading):>4}¢  {tuner_bar(reading.cents)}"
        sys.stdout.write("\r" + line)
        sys.stdout.flush()

    print("Tuner running. Press Ctrl+C to stop.")
    try:
        TunerSession.from_config(cfg).run(publish, poll_ms=int(cfg["tuner"].get("poll_ms", 50)))
    except RuntimeError as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        sys.exit(1)
    print()


def cli(argv=None) -> None:
    args = _parse_args(argv)
    if args.version:
        print(f"fretexplorer {__version__}")
        sys.exit(0)
    if args.list_scales:
        for sid in SCALE_IDS:
            print(f"{sid:<18} {SCALE_LABELS[sid]}")
        sys.exit(0)

    explain.enable(args.explain)
    cfg = validate_config(load_config(args.config))

    try:
        params = _apply_overrides(params_from_config(cfg), args)
    except ValidationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(2)

    if args.tuner:
        _run_tuner(cfg)
        return
    if args.gui:
        from .app.gui import App
        App(cfg, params).mainloop()
        return

    print(render_text(build_grid(params)))


if __name__ == "__main__":
    cli()
