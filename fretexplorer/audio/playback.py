from __future__ import annotations

"""FluidSynth-based audio playback implementation."""

from typing import Dict
import sys

from .synthesis import Synth


class FluidSynthSynth(Synth):
    """Concrete Synth using pyfluidsynth."""

    def __init__(self, soundfont_path: str, sample_rate: int = 44100, gain: float = 0.5, program: int = 24) -> None:
        super().__init__(sample_rate=sample_rate, gain=gain)
        try:
            import fluidsynth  # type: ignore
        except ImportError as e:  # pragma: no cover - runtime dependency
            raise RuntimeError("pyfluidsynth is not installed") from e

        self._fs = fluidsynth.Synth(samplerate=sample_rate, gain=gain)
        # Start audio driver; prefer CoreAudio on macOS to avoid SDL warnings
        driver = None
        if sys.platform == "darwin":
            driver = "coreaudio"
        try:
            if driver:
                self._fs.start(driver=driver)
            else:
                self._fs.start()
        except Exception:
            # Fallback to default driver if preferred one fails
            self._fs.start()
        self._sfid = self._fs.sfload(soundfont_path)
        self.select_program(program)

    def select_program(self, program: int) -> None:
        self._fs.program_select(0, self._sfid, 0, int(program))

    def note_on(self, midi: int, velocity: int = 100, dur_ms: int = 500) -> None:
        self._fs.noteon(0, midi, max(0, min(127, int(velocity))))
        self.sleep_ms(dur_ms)
        self._fs.noteoff(0, midi)

    def close(self) -> None:
        self._fs.delete()


def make_synth_from_config(cfg: Dict) -> Synth:
    """Factory for Synth from config dict."""
    audio = cfg.get("audio", {})
    backend = audio.get("backend", "fluidsynth")
    if backend == "fluidsynth":
        return FluidSynthSynth(
            soundfont_path=audio.get("soundfont_path"),
            sample_rate=int(audio.get("sample_rate", 44100)),
            gain=float(audio.get("gain", 0.5)),
            program=int(audio.get("program", 24)),
        )
    raise ValueError(f"Unsupported backend: {backend}")
