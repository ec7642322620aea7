"""Operator table driving the precedence-climbing parser.

Binding power grows with precedence. An infix operator is absorbed while its
binding power is at least the current threshold; its right operand is parsed
with the same threshold when it is right-associative and with the threshold
raised by one when it is left-associative.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from .tokens import TokenKind


class Assoc(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class Fixity(str, Enum):
    PREFIX = "prefix"
    INFIX = "infix"
    POSTFIX = "postfix"


@dataclass(frozen=True, slots=True)
class OpInfo:
    op: str
    bp: int
    fixity: Fixity
    assoc: Assoc = Assoc.LEFT

    @property
    def right_bp(self) -> int:
        """Threshold used for the operand that follows this operator."""
        if self.fixity is Fixity.INFIX and self.assoc is Assoc.LEFT:
            return self.bp + 1
        return self.bp


@dataclass(frozen=True, slots=True)
class OperatorTable:
    prefix: dict[TokenKind, OpInfo] = field(default_factory=dict)
    infix: dict[TokenKind, OpInfo] = field(default_factory=dict)
    postfix: dict[TokenKind, OpInfo] = field(default_factory=dict)

    def with_prefix(self, kind: TokenKind, op: str, bp: int) -> OperatorTable:
        return replace(self, prefix={**self.prefix, kind: OpInfo(op, bp, Fixity.PREFIX)})

    def with_infix(self, kind: TokenKind, op: str, bp: int, assoc: Assoc = Assoc.LEFT) -> OperatorTable:
        return replace(self, infix={**self.infix, kind: OpInfo(op, bp, Fixity.INFIX, assoc)})

    def with_postfix(self, kind: TokenKind, op: str, bp: int) -> OperatorTable:
        return replace(self, postfix={**self.postfix, kind: OpInfo(op, bp, Fixity.POSTFIX)})


ASSIGN_BP = 1
CALL_BP = 11


def _default_table() -> OperatorTable:
    t = OperatorTable()
    t = t.with_infix(TokenKind.EQ, "=", ASSIGN_BP, Assoc.RIGHT)
    t = t.with_infix(TokenKind.OR, "or", 2)
    t = t.with_infix(TokenKind.AND, "and", 3)
    t = t.with_prefix(TokenKind.NOT, "not", 4)
    for kind in (TokenKind.EQEQ, TokenKind.NE, TokenKind.LT, TokenKind.LE, TokenKind.GT, TokenKind.GE):
        t = t.with_infix(kind, kind.value, 5)
    t = t.with_infix(TokenKind.PLUS, "+", 6)
    t = t.with_infix(TokenKind.MINUS, "-", 6)
    t = t.with_infix(TokenKind.STAR, "*", 7)
    t = t.with_infix(TokenKind.SLASH, "/", 7)
    t = t.with_infix(TokenKind.PERCENT, "%", 7)
    t = t.with_prefix(TokenKind.MINUS, "-", 8)
    t = t.with_prefix(TokenKind.PLUS, "+", 8)
    t = t.with_infix(TokenKind.CARET, "^", 9, Assoc.RIGHT)
    t = t.with_postfix(TokenKind.BANG, "!", 10)
    t = t.with_postfix(TokenKind.LPAREN, "call", CALL_BP)
    return t


DEFAULT_OPERATORS = _default_table()
