import unittest

from fretexplorer.theory.note_utils import (
    PITCH_CLASS_NAMES_SHARP,
    InvalidNote,
    midi_to_note_name,
    note_at_fret,
    note_at_fret_with_octave,
    note_str_to_midi,
    pitch_class,
    pitch_class_index,
)


class NoteAtFretTests(unittest.TestCase):
    def test_open_and_fretted(self) -> None:
        self.assertEqual(note_at_fret("E", 0), "E")
        self.assertEqual(note_at_fret("E", 1), "F")
        self.assertEqual(note_at_fret("A", 3), "C")
        self.assertEqual(note_at_fret("B", 1), "C")

    def test_octave_periodicity(self) -> None:
        for root in PITCH_CLASS_NAMES_SHARP:
            for f in range(12):
                self.assertEqual(note_at_fret(root, f), note_at_fret(root, f + 12))
                self.assertEqual(note_at_fret(root, f), note_at_fret(root, f + 24))

    def test_flats_and_octaves_normalize(self) -> None:
        self.assertEqual(note_at_fret("Eb", 0), "D#")
        self.assertEqual(note_at_fret("E2", 5), "A")
        self.assertEqual(note_at_fret("bb", 2), "C")

    def test_invalid_open_pitch(self) -> None:
        with self.assertRaises(InvalidNote):
            note_at_fret("H", 1)
        with self.assertRaises(InvalidNote):
            note_at_fret("", 0)
        with self.assertRaises(ValueError):
            note_at_fret("E", -1)

    def test_octave_aware(self) -> None:
        self.assertEqual(note_at_fret_with_octave("E2", 0), "E2")
        self.assertEqual(note_at_fret_with_octave("E2", 3), "G2")
        self.assertEqual(note_at_fret_with_octave("B3", 1), "C4")
        self.assertEqual(note_at_fret_with_octave("E4", 12), "E5")
        with self.assertRaises(InvalidNote):
            note_at_fret_with_octave("E", 1)


class PitchNameTests(unittest.TestCase):
    def test_pitch_class(self) -> None:
        self.assertEqual(pitch_class("Db"), "C#")
        self.assertEqual(pitch_class("B#"), "C")
        self.assertEqual(pitch_class("f#3"), "F#")
        self.assertEqual(pitch_class_index("Cb"), 11)

    def test_stacked_accidentals(self) -> None:
        self.assertEqual(pitch_class("F##"), "G")
        self.assertEqual(pitch_class("Fx"), "G")
        self.assertEqual(pitch_class("Bbb"), "A")
        self.assertEqual(pitch_class("E#"), "F")
        self.assertEqual(note_str_to_midi("Cb4"), 59)
        self.assertEqual(note_str_to_midi("B#3"), 60)
        with self.assertRaises(InvalidNote):
            pitch_class("F#?")

    def test_midi(self) -> None:
        self.assertEqual(note_str_to_midi("C4"), 60)
        self.assertEqual(note_str_to_midi("A4"), 69)
        self.assertEqual(note_str_to_midi("E2"), 40)
        self.assertEqual(midi_to_note_name(61), "C#4")
        self.assertEqual(midi_to_note_name(61, with_octave=False), "C#")
        with self.assertRaises(InvalidNote):
            note_str_to_midi("C")


if __name__ == "__main__":
    unittest.main()
