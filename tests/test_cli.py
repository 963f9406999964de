"""Tests for the cctable command-line interface."""

from __future__ import annotations

import contextlib
import io
import json
import os
import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from cctable import __version__, to_bytes
from cctable._cli import main, output_path

ORC = to_bytes({"hp": 100, "name": "Orc"})


class CliTestCase(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self._cwd = os.getcwd()
        os.chdir(self.tmp)

    def tearDown(self):
        os.chdir(self._cwd)
        self._tmp.cleanup()

    def run_cli(self, *argv):
        """Run main(); return (exit_code, stdout, stderr)."""
        out, err = io.StringIO(), io.StringIO()
        code = 0
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            try:
                main(list(argv))
            except SystemExit as e:
                code = e.code
        return code, out.getvalue(), err.getvalue()


class TestOutputPath(unittest.TestCase):
    def test_explicit_output_wins(self):
        self.assertEqual(output_path(Path("x.bin"), Path("in.lvl"), "json"), Path("x.bin"))

    def test_inferred_in_current_directory(self):
        self.assertEqual(
            output_path(None, Path("some/dir/level1.lvl"), "json"),
            Path(".") / "level1.json",
        )

    def test_inferred_without_extension(self):
        self.assertEqual(output_path(None, Path("save"), "lvl"), Path("save.lvl"))


class TestTableToJson(CliTestCase):
    def test_convert_with_inferred_output(self):
        src = self.tmp / "in" / "hero.lvl"
        src.parent.mkdir()
        src.write_bytes(ORC)

        code, _, err = self.run_cli("table-to-json", str(src))
        self.assertEqual(code, 0)
        self.assertIn("Successfully converted", err)
        doc = json.loads((self.tmp / "hero.json").read_text(encoding="utf-8"))
        self.assertEqual(doc, {"hp": 100, "name": "Orc"})

    def test_convert_with_explicit_output(self):
        src = self.tmp / "hero.lvl"
        src.write_bytes(ORC)
        code, _, _ = self.run_cli("table-to-json", str(src), "out.txt")
        self.assertEqual(code, 0)
        self.assertTrue((self.tmp / "out.txt").is_file())

    def test_bad_header_reports_offset(self):
        src = self.tmp / "bad.lvl"
        src.write_bytes(b"NOTMAP\x00\x00\x00\x00")
        code, _, err = self.run_cli("table-to-json", str(src))
        self.assertEqual(code, 1)
        self.assertIn("At offset 0: The file header is invalid", err)
        self.assertFalse((self.tmp / "bad.json").exists())

    def test_missing_input(self):
        code, _, err = self.run_cli("table-to-json", "nope.lvl")
        self.assertEqual(code, 1)
        self.assertIn("cctable: error:", err)


class TestJsonToTable(CliTestCase):
    def test_convert_with_inferred_output(self):
        src = self.tmp / "hero.json"
        src.write_text('{"hp": 100, "name": "Orc"}', encoding="utf-8")
        code, _, _ = self.run_cli("json-to-table", str(src))
        self.assertEqual(code, 0)
        self.assertEqual((self.tmp / "hero.lvl").read_bytes(), ORC)

    def test_round_trip_through_files(self):
        (self.tmp / "a.lvl").write_bytes(ORC)
        self.assertEqual(self.run_cli("table-to-json", "a.lvl", "a.json")[0], 0)
        self.assertEqual(self.run_cli("json-to-table", "a.json", "b.lvl")[0], 0)
        self.assertEqual((self.tmp / "b.lvl").read_bytes(), ORC)

    def test_unencodable_text(self):
        src = self.tmp / "bad.json"
        src.write_text('{"name": "日本"}', encoding="utf-8")
        code, _, err = self.run_cli("json-to-table", str(src))
        self.assertEqual(code, 1)
        self.assertIn("Windows-1252", err)
        self.assertNotIn("At offset", err)

    def test_non_utf8_input(self):
        src = self.tmp / "latin1.json"
        src.write_bytes(b'{"k": "caf\xe9"}')
        code, _, err = self.run_cli("json-to-table", str(src))
        self.assertEqual(code, 1)
        self.assertIn("cctable: error:", err)
        self.assertIn("JSON parse error", err)
        self.assertFalse((self.tmp / "latin1.lvl").exists())


class TestMisc(CliTestCase):
    def test_version(self):
        code, out, _ = self.run_cli("version")
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "cctable {}".format(__version__))

    def test_no_command(self):
        code, _, _ = self.run_cli()
        self.assertEqual(code, 1)

    def test_bad_arguments_use_usage_status(self):
        for argv in (["frobnicate"], ["table-to-json"], ["json-to-table", "a", "b", "c"]):
            with self.subTest(argv=argv):
                code, _, err = self.run_cli(*argv)
                self.assertEqual(code, 2)
                self.assertIn("usage:", err)

    def test_verbose_logs_under_module_logger(self):
        (self.tmp / "a.lvl").write_bytes(ORC)
        with self.assertLogs("cctable._cli", level="DEBUG") as logs:
            code, _, _ = self.run_cli("-v", "table-to-json", "a.lvl")
        self.assertEqual(code, 0)
        self.assertTrue(any("read {} bytes".format(len(ORC)) in line for line in logs.output))


if __name__ == "__main__":
    unittest.main()
