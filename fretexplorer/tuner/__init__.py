"""Live tuner: pitch estimation and microphone polling."""

from .capture import TunerSession  # noqa: F401
from .pitch import NO_SIGNAL, TunerReading, analyze_buffer, reading_from_frequency  # noqa: F401
