from __future__ import annotations

import pytest

from rkn import run_source
from rkn.diagnostics import render, render_one, summary
from rkn.errors import Diagnostic, Label, Severity, warning
from rkn.spans import SourceText


def rendered(src: str, **kw) -> str:
    out = run_source(src)
    return render(out.source, out.diagnostics, **kw)


def test_division_by_zero_report() -> None:
    assert rendered("1 / 0") == (
        "error[E0201]: division by zero\n"
        " --> <memory>:1:1\n"
        "  |\n"
        "1 | 1 / 0\n"
        "  | ^^^^^ divisor evaluates to zero\n"
    )


def test_unclosed_paren_report_has_two_labels() -> None:
    assert rendered("(1 + 2") == (
        "error[E0102]: expected ')', found end of input\n"
        " --> <memory>:1:1\n"
        "  |\n"
        "1 | (1 + 2\n"
        "  | ^ unclosed '(' opened here\n"
        "  |       - input ends here\n"
        "  |\n"
        "  = help: close the parenthesis\n"
    )


def test_labels_on_different_lines() -> None:
    text = rendered("(1 +\n2")
    assert "1 | (1 +" in text
    assert "2 | 2" in text
    assert text.index("unclosed '(' opened here") < text.index("input ends here")


def test_end_of_input_after_final_newline_points_at_last_line() -> None:
    text = rendered("1 +\n")
    assert " --> <memory>:1:4" in text
    assert "  |    ^ input ends here" in text


def test_diagnostics_are_ordered_by_position() -> None:
    src = SourceText("a + b")
    late = warning("W9999", "late", src.span(4, 5))
    early = warning("W9998", "early", src.span(0, 1))
    text = render(src, [late, early])
    assert text.index("early") < text.index("late")


def test_severity_filter() -> None:
    out = run_source("pi = 3")
    assert "warning[W0301]" in render(out.source, out.diagnostics)
    assert render(out.source, out.diagnostics, min_severity=Severity.ERROR) == ""


def test_multiple_errors_render_in_one_report() -> None:
    text = rendered("* 1\n2 +/ 3")
    assert text.count("error[E0101]") == 2
    assert "1 | * 1" in text
    assert "2 | 2 +/ 3" in text


def test_lex_errors_render() -> None:
    text = rendered("1 $ 2")
    assert "error[E0001]: unexpected character '$'" in text
    assert "  |   ^ not recognized" in text


def test_gap_between_distant_lines() -> None:
    src = SourceText("a\nb\nc\nd")
    diag = Diagnostic(
        severity=Severity.ERROR,
        code="E9999",
        message="spread",
        primary=Label(src.span(0, 1), "here"),
        secondary=(Label(src.span(6, 7), "and here"),),
        notes=("plain note",),
    )
    text = render_one(src, diag)
    assert "  ..." in text
    assert "  = note: plain note" in text


def test_rendering_is_pure() -> None:
    out = run_source("x + 1 / 0")
    assert render(out.source, out.diagnostics) == render(out.source, out.diagnostics)


def test_span_outside_source_is_an_invariant_violation() -> None:
    src = SourceText("1 + 2")
    other = SourceText("a much longer source text")
    diag = warning("W9999", "bad", other.span(10, 20))
    with pytest.raises(AssertionError):
        render(src, [diag])


def test_summary() -> None:
    src = SourceText("x")
    w = warning("W1", "w", src.span(0, 1))
    e = Diagnostic(Severity.ERROR, "E1", "e", Label(src.span(0, 1)))
    assert summary([e, e, w]) == "2 errors, 1 warning"
    assert summary([e]) == "1 error"
    assert summary([]) == ""
