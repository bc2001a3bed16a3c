import unittest

import numpy as np

from fretexplorer.tuner.capture import TunerSession
from fretexplorer.tuner.pitch import (
    NO_SIGNAL,
    analyze_buffer,
    format_cents,
    freq_to_midi,
    reading_from_frequency,
    tuner_bar,
    yin_pitch,
)

SR = 44100


def sine(freq: float, n: int = 2048, amp: float = 0.5) -> np.ndarray:
    t = np.arange(n) / SR
    return amp * np.sin(2 * np.pi * freq * t)


class PitchTests(unittest.TestCase):
    def test_yin_on_sines(self) -> None:
        for freq in (82.41, 110.0, 196.0, 440.0):
            est = yin_pitch(sine(freq), SR)
            self.assertIsNotNone(est)
            self.assertAlmostEqual(est, freq, delta=freq * 0.01)

    def test_reading_from_frequency(self) -> None:
        r = reading_from_frequency(440.0)
        self.assertEqual((r.note, r.cents), ("A", 0))
        r = reading_from_frequency(445.0)
        self.assertEqual((r.note, r.cents), ("A", 20))
        r = reading_from_frequency(82.41)
        self.assertEqual(r.note, "E")
        self.assertEqual(reading_from_frequency(0.0), NO_SIGNAL)
        self.assertAlmostEqual(freq_to_midi(261.6256), 60.0, places=3)

    def test_analyze_buffer(self) -> None:
        r = analyze_buffer(sine(440.0), SR)
        self.assertEqual(r.note, "A")
        self.assertLessEqual(abs(r.cents), 5)
        self.assertTrue(r.has_signal)

    def test_silence_is_no_signal(self) -> None:
        self.assertEqual(analyze_buffer(np.zeros(2048), SR), NO_SIGNAL)
        self.assertEqual(analyze_buffer(np.array([]), SR), NO_SIGNAL)
        self.assertFalse(NO_SIGNAL.has_signal)

    def test_display_helpers(self) -> None:
        self.assertEqual(format_cents(NO_SIGNAL), "–")
        self.assertEqual(format_cents(reading_from_frequency(445.0)), "+20")
        bar = tuner_bar(0, width=11)
        self.assertEqual(bar, "[-----^-----]")
        self.assertEqual(tuner_bar(50, width=11)[-2], "^")
        self.assertEqual(tuner_bar(-80, width=11)[1], "^")


class FakeStream:
    def __init__(self, **kwargs) -> None:
        self.kwargs = kwargs
        self.callback = kwargs["callback"]
        self.started = False
        self.stopped = False
        self.closed = False

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def close(self) -> None:
        self.closed = True

    def feed(self, block: np.ndarray) -> None:
        self.callback(block.reshape(-1, 1).astype(np.float32), len(block), None, None)


class TunerSessionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.streams = []

        def factory(**kwargs):
            s = FakeStream(**kwargs)
            self.streams.append(s)
            return s

        self.factory = factory

    def test_polls_latest_block_only(self) -> None:
        with TunerSession(stream_factory=self.factory) as session:
            stream = self.streams[0]
            self.assertTrue(stream.started)
            self.assertEqual(stream.kwargs["blocksize"], 2048)
            self.assertEqual(session.poll(), NO_SIGNAL)
            stream.feed(sine(220.0))
            stream.feed(sine(440.0))
            self.assertEqual(session.poll().note, "A")
            stream.feed(np.zeros(2048))
            self.assertEqual(session.poll(), NO_SIGNAL)
        self.assertTrue(stream.stopped)
        self.assertTrue(stream.closed)
        self.assertFalse(session.active)

    def test_close_is_idempotent(self) -> None:
        session = TunerSession(stream_factory=self.factory).open()
        session.close()
        session.close()
        self.assertEqual(len(self.streams), 1)

    def test_run_releases_stream_when_publisher_fails(self) -> None:
        session = TunerSession(stream_factory=self.factory)

        def publish(reading):
            raise RuntimeError("display gone")

        with self.assertRaises(RuntimeError):
            session.run(publish, poll_ms=0)
        self.assertTrue(self.streams[0].closed)

    def test_run_stops_on_predicate(self) -> None:
        session = TunerSession(stream_factory=self.factory)
        seen = []
        session.run(seen.append, poll_ms=0, should_stop=lambda: len(seen) >= 3)
        self.assertEqual(seen, [NO_SIGNAL] * 3)
        self.assertTrue(self.streams[0].closed)

    def test_from_config(self) -> None:
        session = TunerSession.from_config({"tuner": {"sample_rate": 48000, "buffer_size": 4096}}, stream_factory=self.factory)
        self.assertEqual(session.sample_rate, 48000)
        session.open()
        self.assertEqual(self.streams[0].kwargs["samplerate"], 48000)
        session.close()


if __name__ == "__main__":
    unittest.main()
