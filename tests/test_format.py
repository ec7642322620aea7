from __future__ import annotations

import pytest

from rkn import parse_source
from rkn.format import format_program


@pytest.mark.parametrize(
    ("src", "expected"),
    [
        ("((1)) + (2 * 3)", "1 + 2 * 3\n"),
        ("(1 + 2) * 3", "(1 + 2) * 3\n"),
        ("10 - (3 - 2)", "10 - (3 - 2)\n"),
        ("(10 - 3) - 2", "10 - 3 - 2\n"),
        ("(2 ^ 3) ^ 2", "(2 ^ 3) ^ 2\n"),
        ("2 ^ (3 ^ 2)", "2 ^ 3 ^ 2\n"),
        ("-(2 ^ 2)", "-2 ^ 2\n"),
        ("(-2) ^ 2", "(-2) ^ 2\n"),
        ("(3 + 1)!", "(3 + 1)!\n"),
        ("not (a and b)", "not (a and b)\n"),
        ("a = (b = 2)", "a = b = 2\n"),
        ("1 + (x = 2)", "1 + (x = 2)\n"),
        ("max((1), 2.5, true)", "max(1, 2.5, true)\n"),
        ("x = 1; y = 2", "x = 1\ny = 2\n"),
        ("", ""),
    ],
)
def test_format_uses_minimal_parentheses(src: str, expected: str) -> None:
    assert format_program(parse_source(src)) == expected


def test_parse_format_roundtrip() -> None:
    src = """a = 3
b = (a + 1)! / 2  # comment
max(a, b) >= 2 or not (a == b)
"""
    out = format_program(parse_source(src))
    assert format_program(parse_source(out)) == out
