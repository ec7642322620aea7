from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .spans import Span


class TokenKind(str, Enum):
    # Identifiers and literals
    IDENT = "IDENT"
    NUMBER = "NUMBER"

    # Operators
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    PERCENT = "%"
    CARET = "^"
    BANG = "!"
    EQ = "="
    EQEQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="

    # Punctuation
    LPAREN = "("
    RPAREN = ")"
    COMMA = ","
    SEMI = ";"
    NEWLINE = "NEWLINE"

    # Keywords
    TRUE = "true"
    FALSE = "false"
    NOT = "not"
    AND = "and"
    OR = "or"

    EOF = "EOF"

    def describe(self) -> str:
        """Human-readable name used in diagnostics."""
        if self is TokenKind.IDENT:
            return "identifier"
        if self is TokenKind.NUMBER:
            return "number"
        if self is TokenKind.NEWLINE:
            return "end of line"
        if self is TokenKind.EOF:
            return "end of input"
        return f"'{self.value}'"


KEYWORDS: dict[str, TokenKind] = {
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
    "not": TokenKind.NOT,
    "and": TokenKind.AND,
    "or": TokenKind.OR,
}

# Longest symbols first so that matching is maximal munch.
SYMBOLS: tuple[tuple[str, TokenKind], ...] = tuple(
    sorted(
        (
            (k.value, k)
            for k in TokenKind
            if k.value not in KEYWORDS and not k.value.isalpha()
        ),
        key=lambda item: -len(item[0]),
    )
)

# Tokens that end a statement.
SEPARATORS: frozenset[TokenKind] = frozenset({TokenKind.SEMI, TokenKind.NEWLINE, TokenKind.EOF})


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    lexeme: str
    span: Span

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.lexeme!r}, {self.span.format()})"

    def describe(self) -> str:
        if self.kind in (TokenKind.IDENT, TokenKind.NUMBER):
            return f"{self.kind.describe()} '{self.lexeme}'"
        return self.kind.describe()
