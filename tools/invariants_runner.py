#!/usr/bin/env python3
# tools/invariants_runner.py
#
# Round-trip invariants (property tests) for the hash table codec.
#
# This runner:
# - generates random flat documents (I64 / F64 / STRING values, cp1252 text)
# - checks encode stability, decode(encode(D)) == D,
#   encode(decode(B)) == B, and the JSON path reproducing B
#
# Exit code:
#   0 -> all checks passed
#   1 -> invariant violation

import os, sys, json, math, random, struct
from typing import Any, Dict

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

import cctable

SEED = int(os.environ.get("CCTABLE_SEED", "1337"))
TRIALS = int(os.environ.get("CCTABLE_TRIALS", "2000"))
MAX_KEYS = int(os.environ.get("CCTABLE_GEN_MAX_KEYS", "12"))
MAX_STR = int(os.environ.get("CCTABLE_GEN_MAX_STR", "24"))

random.seed(SEED)

# Every byte is valid Windows-1252 text once the C1 passthrough is applied.
CP1252_CHARS = bytes(range(1, 256)).decode("cp1252", errors="cctable-c1")

def rand_text() -> str:
    out = []
    for _ in range(random.randint(0, MAX_STR)):
        r = random.random()
        if r < 0.75:
            out.append(chr(random.randint(0x20, 0x7E)))
        else:
            out.append(random.choice(CP1252_CHARS))
    return "".join(out)

def rand_int() -> int:
    r = random.random()
    if r < 0.6:
        return random.randint(-1000, 1000)
    if r < 0.9:
        return random.randint(cctable.INT64_MIN, cctable.INT64_MAX)
    return random.choice([cctable.INT64_MIN, cctable.INT64_MAX, 0, -1])

def rand_float() -> float:
    r = random.random()
    if r < 0.7:
        return random.uniform(-1e6, 1e6)
    if r < 0.9:
        # arbitrary finite bit patterns, subnormals included
        while True:
            x = struct.unpack("<d", struct.pack("<Q", random.getrandbits(64)))[0]
            if math.isfinite(x):
                return x
    return random.choice([0.0, -0.0, 1.0, float("inf"), float("-inf")])

def gen_document() -> Dict[str, Any]:
    doc: Dict[str, Any] = {}
    for _ in range(random.randint(0, MAX_KEYS)):
        r = random.random()
        if r < 0.4:
            doc[rand_text()] = rand_int()
        elif r < 0.7:
            doc[rand_text()] = rand_float()
        else:
            doc[rand_text()] = rand_text()
    return doc

def fail(label: str, doc: Dict[str, Any], trial: int) -> int:
    print("INVARIANT FAIL:", label)
    print("CTX:", json.dumps({"trial": trial, "doc": doc}, ensure_ascii=False)[:2000])
    return 1

def same(a: Dict[str, Any], b: Dict[str, Any]) -> bool:
    # -0.0 == 0.0 in Python, so compare wire bytes for floats.
    if list(a) != list(b):
        return False
    for k in a:
        x, y = a[k], b[k]
        if type(x) is not type(y):
            return False
        if isinstance(x, float) and struct.pack("<d", x) != struct.pack("<d", y):
            return False
        if not isinstance(x, float) and x != y:
            return False
    return True

def main() -> int:
    for t in range(TRIALS):
        doc = gen_document()

        # (1) Encode stability (encode twice same bytes)
        b1 = cctable.to_bytes(doc)
        b2 = cctable.to_bytes(doc)
        if b1 != b2:
            return fail("encode stability", doc, t)

        # (2) Document round trip
        back = cctable.from_bytes(b1)
        if not same(doc, back):
            return fail("decode(encode(D)) == D", doc, t)

        # (3) Byte round trip
        if cctable.to_bytes(back) != b1:
            return fail("encode(decode(B)) == B", doc, t)

        # (4) Same bytes through JSON text
        if cctable.json_to_table(cctable.table_to_json(b1)) != b1:
            return fail("JSON round trip", doc, t)

        # (5) Lazy iteration agrees with the full decode
        if list(cctable.iter_entries(b1)) != list(back.items()):
            return fail("iter_entries order", doc, t)

    print(f"OK: invariants passed for TRIALS={TRIALS} seed={SEED}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
