"""Round-trip suite over real hash table files.

Every file in the samples directory must decode, re-encode byte-for-byte,
and survive a trip through JSON text.  Point the suite at a directory of
.lvl files saved by the engine:

Usage:
    python tests/test_samples.py --samples-dir DIR
    CCTABLE_SAMPLES_DIR=DIR python -m pytest tests/test_samples.py -v

Without a samples directory the suite has nothing to run.
"""

from __future__ import annotations

import argparse
import os
import sys
import unittest
from pathlib import Path
from typing import List, Optional, Tuple

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from cctable import TableError, from_bytes, json_to_table, table_to_json, to_bytes

# ── Locate sample files ───────────────────────────────────────

_SAMPLES_DIR: Optional[str] = os.environ.get("CCTABLE_SAMPLES_DIR", None)


def _find_samples() -> List[Path]:
    if not _SAMPLES_DIR:
        raise FileNotFoundError("Set CCTABLE_SAMPLES_DIR or --samples-dir.")
    return sorted(p for p in Path(_SAMPLES_DIR).iterdir() if p.is_file())


def first_difference(a: bytes, b: bytes) -> Optional[str]:
    """Describe where two buffers diverge, or None if they are equal."""
    for i, (x, y) in enumerate(zip(a, b)):
        if x != y:
            return "difference at offset {}: 0x{:02x} != 0x{:02x}".format(i, x, y)
    if len(a) != len(b):
        return "input is length {}, output is length {}".format(len(a), len(b))
    return None


def _check_sample(path: Path) -> Optional[str]:
    """Return None on success, otherwise a one-line failure reason."""
    raw = path.read_bytes()
    try:
        direct = to_bytes(from_bytes(raw))
        via_json = json_to_table(table_to_json(raw))
    except TableError as e:
        return str(e)
    return first_difference(raw, direct) or first_difference(raw, via_json)


# ── unittest integration ──────────────────────────────────────

class TestFirstDifference(unittest.TestCase):
    def test_equal(self):
        self.assertIsNone(first_difference(b"MAP1.0", b"MAP1.0"))

    def test_byte_mismatch(self):
        self.assertEqual(first_difference(b"ab", b"ac"),
                         "difference at offset 1: 0x62 != 0x63")

    def test_length_mismatch(self):
        self.assertEqual(first_difference(b"ab", b"abc"),
                         "input is length 2, output is length 3")


class SampleTests(unittest.TestCase):
    """Dynamically generated: one test method per sample file."""
    pass


def _make_test(path: Path):
    def test_fn(self: unittest.TestCase) -> None:
        reason = _check_sample(path)
        self.assertIsNone(reason, "{}: {}".format(path.name, reason))
    return test_fn


# Attach test methods at import time.
try:
    for _path in _find_samples():
        _name = "test_" + "".join(c if c.isalnum() else "_" for c in _path.name)
        _fn = _make_test(_path)
        _fn.__name__ = _name
        _fn.__qualname__ = "SampleTests." + _name
        setattr(SampleTests, _name, _fn)
except FileNotFoundError:
    pass


# ── Standalone CLI runner ─────────────────────────────────────

def main() -> None:
    global _SAMPLES_DIR

    parser = argparse.ArgumentParser(description="cctable sample round-trip runner")
    parser.add_argument("--samples-dir", default=None,
                        help="Directory with hash table files")
    args, _remaining = parser.parse_known_args()

    if args.samples_dir:
        _SAMPLES_DIR = args.samples_dir

    failures: List[Tuple[str, str]] = []
    samples = _find_samples()
    for path in samples:
        reason = _check_sample(path)
        if reason is not None:
            failures.append((path.name, reason))

    print("SAMPLES: {}/{} PASS".format(len(samples) - len(failures), len(samples)))
    for name, reason in failures:
        print("  FAIL {}: {}".format(name, reason))

    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
