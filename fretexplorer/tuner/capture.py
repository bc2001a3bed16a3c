from __future__ import annotations

"""Microphone capture and the tuner polling loop.

The audio callback only swaps in the most recent block; nothing is queued.
Each poll analyzes whatever block is newest and publishes one reading,
`NO_SIGNAL` when there is no clear pitch. Closing the session (explicitly,
via the context manager, or when `run` exits) releases the input stream.
"""

import threading
import time
from typing import Any, Callable, Dict, Optional

import numpy as np

from ..app.explain import trace as xtrace
from .pitch import (
    MAX_FREQ,
    MIN_FREQ,
    NO_SIGNAL,
    SILENCE_RMS,
    YIN_THRESHOLD,
    TunerReading,
    analyze_buffer,
)

StreamFactory = Callable[..., Any]


def _sounddevice_stream(**kwargs) -> Any:
    try:
        import sounddevice as sd  # type: ignore
    except (ImportError, OSError) as e:  # pragma: no cover - runtime dependency
        raise RuntimeError("sounddevice is not installed or PortAudio is missing") from e
    try:
        return sd.InputStream(**kwargs)
    except sd.PortAudioError as e:  # pragma: no cover - hardware
        raise RuntimeError(f"Could not open microphone: {e}") from e


class TunerSession:
    """Owns one input stream and turns its latest block into readings."""

    def __init__(
        self,
        sample_rate: int = 44100,
        buffer_size: int = 2048,
        threshold: float = YIN_THRESHOLD,
        silence_rms: float = SILENCE_RMS,
        min_freq: float = MIN_FREQ,
        max_freq: float = MAX_FREQ,
        stream_factory: Optional[StreamFactory] = None,
    ) -> None:
        self.sample_rate = int(sample_rate)
        self.buffer_size = int(buffer_size)
        self.threshold = float(threshold)
        self.silence_rms = float(silence_rms)
        self.min_freq = float(min_freq)
        self.max_freq = float(max_freq)
        self._stream_factory = stream_factory or _sounddevice_stream
        self._stream: Any = None
        self._latest: Optional[np.ndarray] = None
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, cfg: Dict, stream_factory: Optional[StreamFactory] = None) -> "TunerSession":
        t = cfg.get("tuner", {})
        return cls(
            sample_rate=int(t.get("sample_rate", 44100)),
            buffer_size=int(t.get("buffer_size", 2048)),
            threshold=float(t.get("threshold", YIN_THRESHOLD)),
            silence_rms=float(t.get("silence_rms", SILENCE_RMS)),
            min_freq=float(t.get("min_freq", MIN_FREQ)),
            max_freq=float(t.get("max_freq", MAX_FREQ)),
            stream_factory=stream_factory,
        )

    # Stream lifecycle
    def open(self) -> "TunerSession":
        if self._stream is not None:
            return self
        stream = self._stream_factory(
            samplerate=self.sample_rate,
            blocksize=self.buffer_size,
            channels=1,
            dtype="float32",
            callback=self._on_audio,
        )
        try:
            stream.start()
        except Exception:
            stream.close()
            raise
        self._stream = stream
        xtrace("tuner_open", {"sample_rate": self.sample_rate, "buffer_size": self.buffer_size})
        return self

    def close(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            stream.stop()
        finally:
            stream.close()
            with self._lock:
                self._latest = None
            xtrace("tuner_close", {})

    @property
    def active(self) -> bool:
        return self._stream is not None

    def __enter__(self) -> "TunerSession":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _on_audio(self, indata, frames, time_info, status) -> None:
        block = np.array(indata[:, 0], dtype=np.float64)
        with self._lock:
            self._latest = block

    # Polling
    def poll(self) -> TunerReading:
        """Analyze the newest block; `NO_SIGNAL` if none has arrived."""
        with self._lock:
            block = self._latest
        if block is None:
            return NO_SIGNAL
        return analyze_buffer(
            block,
            self.sample_rate,
            threshold=self.threshold,
            silence_rms=self.silence_rms,
            min_freq=self.min_freq,
            max_freq=self.max_freq,
        )

    def run(
        self,
        publish: Callable[[TunerReading], None],
        poll_ms: int = 50,
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> None:
        """Poll and publish until `should_stop` returns True or Ctrl+C."""
        self.open()
        try:
            while not (should_stop and should_stop()):
                publish(self.poll())
                time.sleep(poll_ms / 1000.0)
        except KeyboardInterrupt:
            pass
        finally:
            self.close()
