from __future__ import annotations

import random
import string

from ..tokens import KEYWORDS
from ..values import BUILTINS, CONSTANTS


_RESERVED = set(KEYWORDS) | {b.name for b in BUILTINS} | set(CONSTANTS)

_ARITH = ["+", "-", "*"]
_COMPARE = ["==", "!=", "<", "<=", ">", ">="]


def _ident(r: random.Random) -> str:
    head = r.choice(string.ascii_letters + "_")
    tail = "".join(r.choice(string.ascii_letters + string.digits + "_") for _ in range(r.randint(0, 8)))
    s = head + tail
    if s in _RESERVED:
        return s + "_"
    return s


def generate_programs(*, seed: int, count: int) -> list[str]:
    """Deterministic, syntactically valid programs that also evaluate cleanly.

    Every variable is assigned before it is read and no division appears, so
    the only runtime faults possible are excluded by construction.
    """
    r = random.Random(seed)
    return [_gen_program(r) for _ in range(count)]


def generate_arithmetic(*, seed: int, count: int, max_depth: int = 6) -> list[tuple[str, int]]:
    """Integer expressions paired with their value, computed independently."""
    r = random.Random(seed)
    return [_gen_int_expr(r, max_depth) for _ in range(count)]


def _gen_program(r: random.Random) -> str:
    names: list[str] = []
    lines: list[str] = []
    for _ in range(r.randint(1, 6)):
        expr, _ = _gen_int_expr(r, 4, names)
        k = r.random()
        if k < 0.5:
            name = _ident(r)
            lines.append(f"{name} = {expr}")
            names.append(name)
        elif k < 0.7:
            other, _ = _gen_int_expr(r, 3, names)
            lines.append(f"{expr} {r.choice(_COMPARE)} {other}")
        elif k < 0.8:
            lines.append(f"abs({expr})")
        else:
            lines.append(expr)
    sep = r.choice(["\n", "; "])
    return sep.join(lines) + "\n"


def _gen_int_expr(r: random.Random, depth: int, names: list[str] | None = None) -> tuple[str, int]:
    # Values of names are unknown here; callers pairing text with a value pass no names.
    if depth <= 0 or r.random() < 0.25:
        if names and r.random() < 0.4:
            return r.choice(names), 0
        n = r.randint(0, 99)
        return str(n), n

    k = r.random()
    if k < 0.15:
        inner, v = _gen_int_expr(r, depth - 1, names)
        return f"({inner})", v
    if k < 0.25:
        inner, v = _gen_int_expr(r, depth - 1, names)
        return f"-({inner})", -v
    if k < 0.3:
        base = r.randint(0, 5)
        exp = r.randint(0, 4)
        return f"{base} ^ {exp}", base**exp

    # Only additive operators once variables are involved, so values stay small.
    op = r.choice(_ARITH[:2] if names else _ARITH)
    left, lv = _gen_int_expr(r, depth - 1, names)
    right, rv = _gen_int_expr(r, depth - 1, names)
    # Operands are parenthesized so the text's structure matches the computed value.
    text = f"({left}) {op} ({right})"
    if op == "+":
        return text, lv + rv
    if op == "-":
        return text, lv - rv
    return text, lv * rv
