import io
import unittest
from contextlib import redirect_stderr, redirect_stdout

from fretexplorer import __version__
from fretexplorer.app import explain
from fretexplorer.main import cli
from fretexplorer.theory.scales import scale_notes


class CliTests(unittest.TestCase):
    def tearDown(self) -> None:
        explain.enable(False)

    def _run(self, argv):
        out = io.StringIO()
        with redirect_stdout(out):
            cli(argv)
        return out.getvalue()

    def test_prints_board(self) -> None:
        text = self._run(["--key", "G", "--scale", "minor_pentatonic", "--frets", "5"])
        self.assertIn("Key: G  Scale: minor_pentatonic", text)
        self.assertIn("Notes: G A# C D F", text)

    def test_pattern_flags(self) -> None:
        text = self._run(["--pattern", "--offset", "-1", "--labels", "interval"])
        self.assertIn("Pattern offset: -1", text)

    def test_version_and_list(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out), self.assertRaises(SystemExit) as ctx:
            cli(["--version"])
        self.assertEqual(ctx.exception.code, 0)
        self.assertIn(__version__, out.getvalue())
        out = io.StringIO()
        with redirect_stdout(out), self.assertRaises(SystemExit):
            cli(["--list-scales"])
        self.assertIn("minor_pentatonic", out.getvalue())

    def test_bad_key_exits_with_usage_error(self) -> None:
        err = io.StringIO()
        with redirect_stderr(err), redirect_stdout(io.StringIO()), self.assertRaises(SystemExit) as ctx:
            cli(["--key", "H"])
        self.assertEqual(ctx.exception.code, 2)
        self.assertIn("ERROR", err.getvalue())


class ExplainTests(unittest.TestCase):
    def tearDown(self) -> None:
        explain.enable(False)

    def test_trace_only_when_enabled(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out):
            scale_notes("C", "major")
        self.assertEqual(out.getvalue(), "")
        explain.enable()
        with redirect_stdout(out):
            scale_notes("C", "bogus")
        self.assertIn("[EXPLAIN] scale_fallback", out.getvalue())


if __name__ == "__main__":
    unittest.main()
