import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from fretexplorer.config.config import load_config, params_from_config, validate_config


class ConfigTests(unittest.TestCase):
    def test_packaged_defaults(self) -> None:
        cfg = validate_config(load_config())
        self.assertEqual(cfg["fretboard"]["key"], "C")
        self.assertEqual(cfg["fretboard"]["scale"], "major")
        self.assertEqual(cfg["fretboard"]["frets"], 20)
        self.assertFalse(cfg["audio"]["enabled"])
        self.assertEqual(cfg["tuner"]["buffer_size"], 2048)
        params = params_from_config(cfg)
        self.assertEqual(params.frets, 20)
        self.assertFalse(params.pattern_enabled)

    def test_yaml_file_overrides(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "cfg.yml"
            path.write_text(
                "fretboard:\n  key: Eb\n  scale: minor-pentatonic\n  frets: 15\n  pattern_enabled: true\n  pattern_offset: -1\n",
                encoding="utf-8",
            )
            cfg = validate_config(load_config(str(path)))
        params = params_from_config(cfg)
        self.assertEqual(params.root, "D#")
        self.assertEqual(params.scale, "minor_pentatonic")
        self.assertEqual(params.frets, 15)
        self.assertTrue(params.pattern_enabled)
        self.assertEqual(params.pattern_offset, -1)
        # sections missing from the file get defaults
        self.assertEqual(cfg["ui"]["theme"], "dark")

    def test_invalid_values_fall_back(self) -> None:
        cfg = {
            "fretboard": {"key": "H", "scale": "bebop", "frets": 40, "label_type": "colour"},
            "ui": {"theme": "neon"},
        }
        out = io.StringIO()
        with redirect_stdout(out):
            cfg = validate_config(cfg)
        self.assertEqual(cfg["fretboard"]["key"], "C")
        self.assertEqual(cfg["fretboard"]["scale"], "major")
        self.assertEqual(cfg["fretboard"]["frets"], 24)
        self.assertEqual(cfg["fretboard"]["label_type"], "note")
        self.assertEqual(cfg["ui"]["theme"], "dark")
        self.assertIn("WARNING", out.getvalue())

    def test_missing_soundfont_disables_audio(self) -> None:
        cfg = {"audio": {"enabled": True, "soundfont_path": "/nonexistent/none.sf2"}}
        err = io.StringIO()
        with redirect_stderr(err):
            cfg = validate_config(cfg)
        self.assertFalse(cfg["audio"]["enabled"])
        self.assertIn("SoundFont not found", err.getvalue())

    def test_missing_config_file_exits(self) -> None:
        err = io.StringIO()
        with redirect_stderr(err), self.assertRaises(SystemExit) as ctx:
            load_config("/nonexistent/fretexplorer.yml")
        self.assertEqual(ctx.exception.code, 1)


if __name__ == "__main__":
    unittest.main()
