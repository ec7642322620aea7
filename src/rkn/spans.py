from __future__ import annotations

import bisect
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Position:
    """A concrete source position.

    Offsets are 0-based; line/column are 1-based for user-facing messages.
    """

    offset: int
    line: int
    column: int


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open span [start, end) in a single submission."""

    file: str
    start: Position
    end: Position

    def format(self) -> str:
        return f"{self.file}:{self.start.line}:{self.start.column}"

    def join(self, other: Span) -> Span:
        """Smallest span covering both ``self`` and ``other``."""
        start = self.start if self.start.offset <= other.start.offset else other.start
        end = self.end if self.end.offset >= other.end.offset else other.end
        return Span(file=self.file, start=start, end=end)

    def contains(self, other: Span) -> bool:
        return self.start.offset <= other.start.offset and other.end.offset <= self.end.offset

    def __len__(self) -> int:
        return self.end.offset - self.start.offset


@dataclass(frozen=True, slots=True)
class SourceText:
    """The exact text of one submission, indexed for offset -> line lookups."""

    text: str
    file: str = "<memory>"
    _line_starts: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        starts = [0]
        for i, ch in enumerate(self.text):
            if ch == "\n":
                starts.append(i + 1)
        object.__setattr__(self, "_line_starts", tuple(starts))

    def position(self, offset: int) -> Position:
        assert 0 <= offset <= len(self.text), f"offset {offset} outside source of length {len(self.text)}"
        idx = bisect.bisect_right(self._line_starts, offset) - 1
        return Position(offset=offset, line=idx + 1, column=offset - self._line_starts[idx] + 1)

    def span(self, start: int, end: int) -> Span:
        return Span(file=self.file, start=self.position(start), end=self.position(end))

    def line(self, number: int) -> str:
        """Text of 1-based line ``number`` without its line terminator."""
        begin = self._line_starts[number - 1]
        if number < len(self._line_starts):
            stop = self._line_starts[number] - 1
        else:
            stop = len(self.text)
        return self.text[begin:stop].rstrip("\r")
