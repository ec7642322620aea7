"""Rendering of diagnostics against the source text that produced them.

Everything here is a pure function of its arguments.
"""

from __future__ import annotations

from collections.abc import Iterable

from .errors import Diagnostic, Label, Severity
from .spans import Position, SourceText, Span


def render(
    source: SourceText,
    diagnostics: Iterable[Diagnostic],
    *,
    min_severity: Severity = Severity.WARNING,
) -> str:
    """Render ``diagnostics`` in source order, dropping those below ``min_severity``."""
    kept = sorted(
        (d for d in diagnostics if d.severity.rank >= min_severity.rank),
        key=lambda d: d.span.start.offset,
    )
    if not kept:
        return ""
    return "\n\n".join(render_one(source, d) for d in kept) + "\n"


def summary(diagnostics: Iterable[Diagnostic]) -> str:
    errors = warnings = 0
    for d in diagnostics:
        if d.is_error:
            errors += 1
        else:
            warnings += 1
    parts = []
    if errors:
        parts.append(f"{errors} error{'s' if errors != 1 else ''}")
    if warnings:
        parts.append(f"{warnings} warning{'s' if warnings != 1 else ''}")
    return ", ".join(parts)


def render_one(source: SourceText, diag: Diagnostic) -> str:
    marks = [(diag.primary, "^")] + [(label, "-") for label in diag.secondary]
    anchored = [(_anchor(source, label.span), label, ch) for label, ch in marks]

    first = anchored[0][0][0]
    lines = sorted({start.line for (start, _), _, _ in anchored})
    width = len(str(lines[-1]))
    pad = " " * width

    out = [
        f"{diag.severity.value}[{diag.code}]: {diag.message}",
        f"{pad}--> {source.file}:{first.line}:{first.column}",
        f"{pad} |",
    ]
    prev: int | None = None
    for number in lines:
        if prev is not None and number > prev + 1:
            out.append(f"{pad} ...")
        text = source.line(number)
        out.append(f"{number:>{width}} | {text}".rstrip())
        for (start, end), label, ch in anchored:
            if start.line != number:
                continue
            out.append(f"{pad} | {_underline(text, start, end, ch, label)}".rstrip())
        prev = number
    if diag.notes:
        out.append(f"{pad} |")
        for note in diag.notes:
            if note.startswith("help: "):
                out.append(f"{pad} = {note}")
            else:
                out.append(f"{pad} = note: {note}")
    return "\n".join(out)


def _anchor(source: SourceText, span: Span) -> tuple[Position, Position]:
    assert span.file == source.file, f"span from {span.file} rendered against {source.file}"
    assert 0 <= span.start.offset <= span.end.offset <= len(source.text), f"span {span} outside source"
    start = source.position(span.start.offset)
    end = source.position(span.end.offset)
    # An empty span after a final line break points just past the last line.
    if (
        start.offset == end.offset == len(source.text)
        and source.text.endswith("\n")
        and start.line > 1
    ):
        start = end = Position(offset=start.offset, line=start.line - 1, column=len(source.line(start.line - 1)) + 1)
    return start, end


def _underline(text: str, start: Position, end: Position, ch: str, label: Label) -> str:
    col = start.column
    if end.line == start.line:
        stop = end.column
    else:
        stop = len(text) + 1
    count = max(1, min(stop, len(text) + 1) - col)
    marker = " " * (col - 1) + ch * count
    return f"{marker} {label.text}" if label.text else marker
