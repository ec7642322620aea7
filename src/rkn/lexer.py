from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass

from .errors import LexError
from .spans import SourceText
from .tokens import KEYWORDS, SYMBOLS, Token, TokenKind


logger = logging.getLogger(__name__)

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NUMBER_RE = re.compile(r"[0-9]+(?:\.[0-9]*)?(?:[eE][+-]?[0-9]+)?")


@dataclass(frozen=True, slots=True)
class LexResult:
    tokens: tuple[Token, ...]
    errors: tuple[LexError, ...]

    @property
    def ok(self) -> bool:
        return not self.errors


def iter_tokens(source: SourceText, *, errors: list[LexError] | None = None) -> Iterator[Token]:
    """Lazily lex ``source``; the stream always ends with one EOF token.

    Unrecognized characters are skipped. When ``errors`` is given, a LexError
    for each of them is appended to it.
    """
    src = source.text
    i = 0
    n = len(src)

    while i < n:
        ch = src[i]

        if ch in " \t\r\f":
            i += 1
            continue

        if ch == "#":
            while i < n and src[i] != "\n":
                i += 1
            continue

        if ch == "\n":
            yield Token(TokenKind.NEWLINE, ch, source.span(i, i + 1))
            i += 1
            continue

        m = _NUMBER_RE.match(src, i)
        if m:
            yield Token(TokenKind.NUMBER, m.group(0), source.span(i, m.end()))
            i = m.end()
            continue

        m = _IDENT_RE.match(src, i)
        if m:
            lex = m.group(0)
            yield Token(KEYWORDS.get(lex, TokenKind.IDENT), lex, source.span(i, m.end()))
            i = m.end()
            continue

        for sym, kind in SYMBOLS:
            if src.startswith(sym, i):
                yield Token(kind, sym, source.span(i, i + len(sym)))
                i += len(sym)
                break
        else:
            if errors is not None:
                errors.append(
                    LexError(
                        span=source.span(i, i + 1),
                        message=f"unexpected character {ch!r}",
                        hint="remove the character",
                    )
                )
            i += 1

    yield Token(TokenKind.EOF, "", source.span(n, n))


def tokenize(text: str | SourceText, *, file: str = "<memory>") -> LexResult:
    source = text if isinstance(text, SourceText) else SourceText(text, file)
    errors: list[LexError] = []
    tokens = tuple(iter_tokens(source, errors=errors))
    logger.debug("lexed %s: %d tokens, %d errors", source.file, len(tokens), len(errors))
    return LexResult(tokens=tokens, errors=tuple(errors))
