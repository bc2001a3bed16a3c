from __future__ import annotations

"""Tkinter GUI: fretboard explorer and tuner.

Lets users pick key and scale, toggle labels, audio and the fingering
pattern, move the pattern up or down the neck, and switch to a microphone
tuner. Every control change rebuilds the grid from `build_grid`.
"""

import tkinter as tk
from tkinter import ttk, messagebox
from typing import Any, Dict, List, Optional

from ..audio.playback import make_synth_from_config
from ..audio.synthesis import Synth, play_pitch
from ..fretboard.grid import CellView, FretboardView, build_grid, cell_category
from ..fretboard.params import MAX_FRETS, MIN_FRETS, FretboardParams
from ..fretboard.render import INLAY_FRETS
from ..theory.note_utils import PITCH_CLASS_NAMES_SHARP
from ..theory.scales import SCALE_IDS, SCALE_LABELS
from ..tuner.capture import TunerSession
from ..tuner.pitch import format_cents, tuner_bar


THEMES: Dict[str, Dict[str, str]] = {
    "dark": {
        "window": "#000000", "text": "#ffffff", "border": "#4b5563",
        "default_bg": "#111827", "default_fg": "#4b5563",
        "scale_bg": "#2563eb", "root_bg": "#dc2626",
        "root_dim_bg": "#7f1d1d", "root_dim_fg": "#f87171",
        "dim_bg": "#1f2937", "dim_fg": "#4b5563",
    },
    "light": {
        "window": "#ffffff", "text": "#111827", "border": "#d1d5db",
        "default_bg": "#f3f4f6", "default_fg": "#6b7280",
        "scale_bg": "#60a5fa", "root_bg": "#f87171",
        "root_dim_bg": "#fee2e2", "root_dim_fg": "#ef4444",
        "dim_bg": "#e5e7eb", "dim_fg": "#9ca3af",
    },
}


def cell_colors(cell: CellView, pattern_active: bool, theme: Dict[str, str]) -> tuple[str, str]:
    """(background, foreground) for a cell under a theme."""
    cat = cell_category(cell, pattern_active)
    if cat == "root":
        return theme["root_bg"], "#ffffff"
    if cat == "root_dim":
        return theme["root_dim_bg"], theme["root_dim_fg"]
    if cat == "scale":
        return theme["scale_bg"], "#ffffff"
    if cat == "scale_dim":
        return theme["dim_bg"], theme["dim_fg"]
    if cell.is_open_string:
        return theme["window"], theme["default_fg"]
    return theme["default_bg"], theme["default_fg"]


class App(tk.Tk):
    def __init__(self, cfg: Dict[str, Any], params: Optional[FretboardParams] = None) -> None:
        super().__init__()
        self.title("Fretboard Mode Explorer")
        self.geometry("1180x460")

        self.cfg = cfg
        self.params = params or FretboardParams()
        self._synth: Optional[Synth] = None
        self._tuner: Optional[TunerSession] = None
        self._tuner_job: Optional[str] = None
        self._cells: List[List[tk.Label]] = []
        self._view: Optional[FretboardView] = None

        audio = cfg.get("audio", {})
        self.mode_var = tk.StringVar(value="fretboard")
        self.key_var = tk.StringVar(value=self.params.root)
        self.scale_var = tk.StringVar(value=self.params.scale)
        self.show_labels_var = tk.BooleanVar(value=self.params.show_labels)
        self.label_type_var = tk.StringVar(value=self.params.label_type)
        self.audio_var = tk.BooleanVar(value=bool(audio.get("enabled", False)))
        self.theme_var = tk.StringVar(value=cfg.get("ui", {}).get("theme", "dark"))
        self.frets_var = tk.IntVar(value=self.params.frets)
        self.pattern_var = tk.BooleanVar(value=self.params.pattern_enabled)

        self._build_mode_bar()
        self._board_page = ttk.Frame(self)
        self._tuner_page = ttk.Frame(self)
        self._build_controls(self._board_page)
        self._grid_frame = tk.Frame(self._board_page)
        self._grid_frame.pack(side=tk.TOP, fill=tk.BOTH, expand=True, padx=10, pady=10)
        self._build_tuner(self._tuner_page)

        self.protocol("WM_DELETE_WINDOW", self.on_close)
        self._on_mode_change()
        self._rebuild_grid()

    # ---------------------------------------------------------------- layout
    def _build_mode_bar(self) -> None:
        bar = ttk.Frame(self)
        bar.pack(side=tk.TOP, fill=tk.X, padx=10, pady=(8, 0))
        ttk.Radiobutton(bar, text="Fretboard", variable=self.mode_var, value="fretboard", command=self._on_mode_change).pack(side=tk.LEFT, padx=6)
        ttk.Radiobutton(bar, text="Tuner", variable=self.mode_var, value="tuner", command=self._on_mode_change).pack(side=tk.LEFT, padx=6)

    def _build_controls(self, parent: ttk.Frame) -> None:
        frm = ttk.Frame(parent)
        frm.pack(side=tk.TOP, fill=tk.X, padx=10, pady=8)

        ttk.Label(frm, text="Key:").grid(row=0, column=0, sticky=tk.W, padx=4)
        ttk.OptionMenu(frm, self.key_var, self.key_var.get(), *PITCH_CLASS_NAMES_SHARP, command=lambda _v: self._on_key()).grid(row=0, column=1, sticky=tk.W)

        ttk.Label(frm, text="Scale:").grid(row=0, column=2, sticky=tk.W, padx=12)
        ttk.OptionMenu(frm, self.scale_var, self.scale_var.get(), *SCALE_IDS, command=lambda _v: self._on_scale()).grid(row=0, column=3, sticky=tk.W)

        ttk.Checkbutton(frm, text="Show Labels", variable=self.show_labels_var, command=self._on_labels).grid(row=0, column=4, padx=12)
        self._rb_note = ttk.Radiobutton(frm, text="Notes", variable=self.label_type_var, value="note", command=self._on_labels)
        self._rb_note.grid(row=0, column=5)
        self._rb_interval = ttk.Radiobutton(frm, text="Intervals", variable=self.label_type_var, value="interval", command=self._on_labels)
        self._rb_interval.grid(row=0, column=6)

        ttk.Checkbutton(frm, text="Audio", variable=self.audio_var, command=self._on_audio).grid(row=0, column=7, padx=12)

        ttk.Label(frm, text="Theme:").grid(row=0, column=8, sticky=tk.W)
        ttk.OptionMenu(frm, self.theme_var, self.theme_var.get(), *THEMES.keys(), command=lambda _v: self._redraw()).grid(row=0, column=9, sticky=tk.W)

        ttk.Label(frm, text="Frets:").grid(row=1, column=0, sticky=tk.W, padx=4, pady=(6, 0))
        spin = ttk.Spinbox(frm, from_=MIN_FRETS, to=MAX_FRETS, textvariable=self.frets_var, width=4, command=self._on_frets)
        spin.grid(row=1, column=1, sticky=tk.W, pady=(6, 0))
        spin.bind("<Return>", lambda _e: self._on_frets())

        ttk.Checkbutton(frm, text="3NPS Pos 1", variable=self.pattern_var, command=self._on_pattern).grid(row=1, column=2, columnspan=2, sticky=tk.W, padx=12, pady=(6, 0))
        self._btn_lower = ttk.Button(frm, text="Lower", command=self._on_lower)
        self._btn_lower.grid(row=1, column=4, pady=(6, 0))
        self._btn_raise = ttk.Button(frm, text="Raise", command=self._on_raise)
        self._btn_raise.grid(row=1, column=5, pady=(6, 0))

        self.scale_info_var = tk.StringVar(value="")
        ttk.Label(frm, textvariable=self.scale_info_var, anchor=tk.W).grid(row=1, column=6, columnspan=4, sticky=tk.W, padx=12, pady=(6, 0))

    def _build_tuner(self, parent: ttk.Frame) -> None:
        self.tuner_note_var = tk.StringVar(value="–")
        self.tuner_cents_var = tk.StringVar(value="–¢")
        self.tuner_bar_var = tk.StringVar(value=tuner_bar(0))
        self._tuner_btn = ttk.Button(parent, text="Start Tuner", command=self.toggle_tuner)
        self._tuner_btn.pack(side=tk.TOP, pady=12)
        tk.Label(parent, textvariable=self.tuner_note_var, font=("Arial", 48, "bold")).pack(side=tk.TOP)
        tk.Label(parent, textvariable=self.tuner_cents_var, font=("Arial", 16)).pack(side=tk.TOP)
        tk.Label(parent, textvariable=self.tuner_bar_var, font=("Courier", 14)).pack(side=tk.TOP, pady=6)
        tk.Label(parent, text="-50¢" + " " * 30 + "0¢" + " " * 30 + "+50¢", font=("Courier", 10)).pack(side=tk.TOP)

    def _on_mode_change(self) -> None:
        if self.mode_var.get() == "tuner":
            self._board_page.pack_forget()
            self._tuner_page.pack(side=tk.TOP, fill=tk.BOTH, expand=True)
        else:
            self.stop_tuner()
            self._tuner_page.pack_forget()
            self._board_page.pack(side=tk.TOP, fill=tk.BOTH, expand=True)

    # --------------------------------------------------------------- events
    def _set_params(self, params: FretboardParams) -> None:
        self.params = params
        self._redraw()

    def _on_key(self) -> None:
        self._set_params(self.params.with_root(self.key_var.get()))

    def _on_scale(self) -> None:
        self._set_params(self.params.with_scale(self.scale_var.get()))

    def _on_labels(self) -> None:
        self._set_params(self.params.with_labels(self.show_labels_var.get(), self.label_type_var.get()))

    def _on_pattern(self) -> None:
        self._set_params(self.params.with_pattern(self.pattern_var.get()))

    def _on_lower(self) -> None:
        self._set_params(self.params.lowered())

    def _on_raise(self) -> None:
        self._set_params(self.params.raised())

    def _on_frets(self) -> None:
        try:
            frets = int(self.frets_var.get())
        except (tk.TclError, ValueError):
            return
        frets = max(MIN_FRETS, min(MAX_FRETS, frets))
        self.params = self.params.with_frets(frets)
        self._rebuild_grid()

    def _on_audio(self) -> None:
        if not self.audio_var.get() or self._synth is not None:
            return
        try:
            self._synth = make_synth_from_config(self.cfg)
        except (RuntimeError, OSError, ValueError) as e:
            self.audio_var.set(False)
            messagebox.showwarning("Audio", f"Audio unavailable: {e}")

    def _on_cell_click(self, string_index: int, fret: int) -> None:
        if not self.audio_var.get() or self._view is None:
            return
        self._on_audio()
        if self._synth is None:
            return
        audio = self.cfg.get("audio", {})
        cell = self._view.cell(string_index, fret)
        play_pitch(self._synth, cell.pitch, int(audio.get("velocity", 100)), int(audio.get("duration_ms", 500)))

    # -------------------------------------------------------------- drawing
    def _rebuild_grid(self) -> None:
        for w in self._grid_frame.winfo_children():
            w.destroy()
        self._cells = []
        frets = self.params.frets
        for f in range(frets + 1):
            self._grid_frame.columnconfigure(f, weight=1)
        n_strings = 6
        # high string on top
        for row in range(n_strings):
            s_idx = n_strings - 1 - row
            self._grid_frame.rowconfigure(row, weight=1)
            labels = []
            for f in range(frets + 1):
                lbl = tk.Label(self._grid_frame, width=3, height=2, font=("Arial", 12, "bold"), relief="ridge", bd=1)
                lbl.grid(row=row, column=f, padx=1, pady=1, sticky="nsew")
                lbl.bind("<Button-1>", lambda _e, s=s_idx, fr=f: self._on_cell_click(s, fr))
                labels.append(lbl)
            self._cells.insert(0, labels)
        for f in range(frets + 1):
            mark = "•" if f in INLAY_FRETS else ""
            tk.Label(self._grid_frame, text=mark, font=("Arial", 10)).grid(row=n_strings, column=f)
        self._redraw()

    def _redraw(self) -> None:
        theme = THEMES.get(self.theme_var.get(), THEMES["dark"])
        view = build_grid(self.params)
        self._view = view
        active = self.params.pattern_enabled
        self._grid_frame.configure(bg=theme["window"])
        for s_idx, row in enumerate(view.rows):
            for cell in row:
                bg, fg = cell_colors(cell, active, theme)
                self._cells[s_idx][cell.fret].configure(text=cell.label or "", bg=bg, fg=fg, highlightbackground=theme["border"])
        state = tk.NORMAL if active else tk.DISABLED
        self._btn_lower.configure(state=state)
        self._btn_raise.configure(state=state)
        label_state = tk.NORMAL if self.params.show_labels else tk.DISABLED
        self._rb_note.configure(state=label_state)
        self._rb_interval.configure(state=label_state)
        self.scale_info_var.set(f"{SCALE_LABELS[self.params.scale]}: {' '.join(view.scale_notes)}")

    # ---------------------------------------------------------------- tuner
    def toggle_tuner(self) -> None:
        if self._tuner is not None:
            self.stop_tuner()
            return
        session = TunerSession.from_config(self.cfg)
        try:
            session.open()
        except RuntimeError as e:
            messagebox.showerror("Tuner", str(e))
            return
        self._tuner = session
        self._tuner_btn.configure(text="Stop Tuner")
        self._tuner_tick()

    def _tuner_tick(self) -> None:
        if self._tuner is None:
            return
        reading = self._tuner.poll()
        self.tuner_note_var.set(reading.note)
        self.tuner_cents_var.set(f"{format_cents(reading)}¢")
        self.tuner_bar_var.set(tuner_bar(reading.cents))
        poll_ms = int(self.cfg.get("tuner", {}).get("poll_ms", 50))
        self._tuner_job = self.after(poll_ms, self._tuner_tick)

    def stop_tuner(self) -> None:
        if self._tuner_job is not None:
            self.after_cancel(self._tuner_job)
            self._tuner_job = None
        session, self._tuner = self._tuner, None
        if session is not None:
            session.close()
        if hasattr(self, "_tuner_btn"):
            self._tuner_btn.configure(text="Start Tuner")

    def on_close(self) -> None:
        try:
            self.stop_tuner()
            if self._synth is not None:
                self._synth.close()
        finally:
            self.destroy()
