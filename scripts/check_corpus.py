"""Run the generated corpus through rkn and print a hash of its canonical form.

Every program must evaluate cleanly, format idempotently and give the same
value after formatting. Pass ``--out`` to keep the programs on disk.
"""

from __future__ import annotations

import argparse
import hashlib
from pathlib import Path

from rkn import parse_source, run_source
from rkn.format import format_program
from rkn.testing import generate_programs


def check(name: str, src: str) -> str:
    out = run_source(src, file=name)
    if not out.ok:
        raise SystemExit(f"{name}: {[d.message for d in out.diagnostics]}")
    canonical = format_program(parse_source(src, file=name))
    if format_program(parse_source(canonical, file=name)) != canonical:
        raise SystemExit(f"{name}: formatting is not idempotent")
    if run_source(canonical, file=name).value != out.value:
        raise SystemExit(f"{name}: formatting changed the result")
    return canonical


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="check_corpus")
    ap.add_argument("--seed", type=int, default=1)
    ap.add_argument("--count", type=int, default=1000)
    ap.add_argument("--out", type=Path, help="directory to write case_NNNNNN.rkn files into")
    args = ap.parse_args(argv)

    if args.out is not None:
        args.out.mkdir(parents=True, exist_ok=True)

    h = hashlib.sha256()
    for i, src in enumerate(generate_programs(seed=args.seed, count=args.count)):
        name = f"case_{i:06d}.rkn"
        if args.out is not None:
            (args.out / name).write_text(src, encoding="utf-8")
        h.update(check(name, src).encode("utf-8"))
        h.update(b"\0")

    print(f"{args.count} programs ok, sha256 {h.hexdigest()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
