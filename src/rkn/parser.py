from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from . import ast as A
from .errors import ParseError
from .operators import DEFAULT_OPERATORS, OperatorTable, OpInfo
from .spans import Span
from .tokens import SEPARATORS, Token, TokenKind
from .values import MAX_INT_BITS


logger = logging.getLogger(__name__)

# Deepest expression nesting accepted before reporting an error.
MAX_DEPTH = 200


@dataclass(frozen=True, slots=True)
class ParseResult:
    program: A.Program | None
    errors: tuple[ParseError, ...]

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def incomplete(self) -> bool:
        """True when every error only asks for more input."""
        return bool(self.errors) and all(e.incomplete for e in self.errors)


@dataclass(slots=True)
class Parser:
    table: OperatorTable = DEFAULT_OPERATORS

    def parse(self, tokens: Sequence[Token]) -> ParseResult:
        if not tokens or tokens[-1].kind is not TokenKind.EOF:
            raise ValueError("token stream must end with EOF")
        result = _Run(self.table, tokens).program()
        logger.debug(
            "parsed %d tokens: %s statements, %d errors",
            len(tokens),
            len(result.program.statements) if result.program else "no",
            len(result.errors),
        )
        return result


@dataclass(slots=True)
class _Run:
    """State of a single parse. A fresh one is used for every call."""

    table: OperatorTable
    tokens: Sequence[Token]
    pos: int = 0
    depth: int = 0
    opens: list[Token] = field(default_factory=list)  # unclosed '(' tokens
    ast: A.Ast = field(default_factory=A.Ast)
    errors: list[ParseError] = field(default_factory=list)

    # -- token helpers --

    def peek(self) -> Token:
        # Line breaks are insignificant inside parentheses.
        if self.opens:
            self.skip_newlines()
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.peek()
        if tok.kind is not TokenKind.EOF:
            self.pos += 1
        return tok

    def skip_newlines(self) -> None:
        while self.tokens[self.pos].kind is TokenKind.NEWLINE:
            self.pos += 1

    def span(self, nid: A.NodeId) -> Span:
        return self.ast[nid].span

    # -- errors --

    def expected(
        self,
        what: str,
        tok: Token,
        *,
        label: str = "",
        hint: str | None = None,
        code: str = "E0101",
        related: Span | None = None,
        related_label: str = "",
    ) -> ParseError:
        if tok.kind is TokenKind.EOF:
            if self.opens:
                related = self.opens[-1].span
                related_label = "unclosed '(' opened here"
            return ParseError(
                span=tok.span,
                message=f"expected {what}, found end of input",
                hint=hint,
                incomplete=True,
                related=related,
                related_label=related_label,
                label="input ends here",
                code=code,
            )
        return ParseError(
            span=tok.span,
            message=f"expected {what}, found {tok.describe()}",
            hint=hint,
            related=related,
            related_label=related_label,
            label=label or f"expected {what}",
            code=code,
        )

    def synchronize(self) -> None:
        self.opens.clear()
        while self.tokens[self.pos].kind not in SEPARATORS:
            self.pos += 1

    # -- grammar --

    def program(self) -> ParseResult:
        statements: list[A.NodeId] = []
        while True:
            while self.tokens[self.pos].kind in (TokenKind.SEMI, TokenKind.NEWLINE):
                self.pos += 1
            if self.tokens[self.pos].kind is TokenKind.EOF:
                break
            try:
                statements.append(self.statement())
            except ParseError as e:
                self.errors.append(e)
                self.synchronize()

        if self.errors:
            return ParseResult(program=None, errors=tuple(self.errors))
        whole = self.tokens[0].span.join(self.tokens[-1].span)
        return ParseResult(
            program=A.Program(span=whole, nodes=self.ast.freeze(), statements=tuple(statements)),
            errors=(),
        )

    def statement(self) -> A.NodeId:
        nid = self.expression(0)
        tok = self.peek()
        if tok.kind not in SEPARATORS:
            hint = "separate statements with ';' or a line break"
            if tok.kind is TokenKind.RPAREN:
                hint = "this ')' has no matching '('"
            raise self.expected("an operator or end of statement", tok, label="unexpected here", hint=hint, code="E0103")
        return nid

    def expression(self, min_bp: int) -> A.NodeId:
        self.depth += 1
        try:
            if self.depth > MAX_DEPTH:
                tok = self.peek()
                raise ParseError(
                    span=tok.span,
                    message="expression nested too deeply",
                    hint=f"expressions may nest at most {MAX_DEPTH} levels",
                    label="nesting limit reached here",
                    code="E0104",
                )
            left = self.prefix()
            while True:
                tok = self.peek()
                info = self.table.postfix.get(tok.kind)
                if info is not None and info.bp >= min_bp:
                    left = self.postfix(left, info)
                    continue
                info = self.table.infix.get(tok.kind)
                if info is None or info.bp < min_bp:
                    return left
                self.advance()
                right = self.expression(info.right_bp)
                left = self.infix(left, info, right)
        finally:
            self.depth -= 1

    def prefix(self) -> A.NodeId:
        # An operand is required here, so a line break cannot end the statement.
        self.skip_newlines()
        tok = self.peek()
        kind = tok.kind

        if kind is TokenKind.NUMBER:
            self.advance()
            return self.ast.add(A.Literal(span=tok.span, value=_number(tok)))

        if kind in (TokenKind.TRUE, TokenKind.FALSE):
            self.advance()
            return self.ast.add(A.Literal(span=tok.span, value=kind is TokenKind.TRUE))

        if kind is TokenKind.IDENT:
            self.advance()
            return self.ast.add(A.Identifier(span=tok.span, name=tok.lexeme))

        if kind is TokenKind.LPAREN:
            self.advance()
            self.opens.append(tok)
            inner = self.expression(0)
            close = self.close(tok)
            return self.ast.add(A.Grouping(span=tok.span.join(close.span), inner=inner))

        info = self.table.prefix.get(kind)
        if info is not None:
            self.advance()
            operand = self.expression(info.right_bp)
            return self.ast.add(A.Unary(span=tok.span.join(self.span(operand)), op=info.op, operand=operand))

        raise self.expected("expression", tok, hint="an expression starts with a number, a name, '(' or a prefix operator")

    def close(self, open_tok: Token) -> Token:
        tok = self.peek()
        if tok.kind is TokenKind.RPAREN:
            self.opens.pop()
            return self.advance()
        if tok.kind is TokenKind.EOF:
            # Point at the parenthesis that was never closed.
            raise ParseError(
                span=open_tok.span,
                message="expected ')', found end of input",
                hint="close the parenthesis",
                incomplete=True,
                related=tok.span,
                related_label="input ends here",
                label="unclosed '(' opened here",
                code="E0102",
            )
        raise self.expected(
            "')'",
            tok,
            hint="close the parenthesis",
            code="E0102",
            related=open_tok.span,
            related_label="to match this '('",
        )

    def infix(self, left: A.NodeId, info: OpInfo, right: A.NodeId) -> A.NodeId:
        span = self.span(left).join(self.span(right))
        if info.op == "=":
            target = self.ast[left]
            if not isinstance(target, A.Identifier):
                raise ParseError(
                    span=target.span,
                    message="invalid assignment target",
                    hint="only a variable name can appear on the left of '='",
                    label="cannot assign to this",
                    code="E0105",
                )
            return self.ast.add(A.Assignment(span=span, name=target.name, value=right, target=target.span))
        return self.ast.add(A.Binary(span=span, op=info.op, left=left, right=right))

    def postfix(self, left: A.NodeId, info: OpInfo) -> A.NodeId:
        tok = self.advance()
        if tok.kind is not TokenKind.LPAREN:
            return self.ast.add(A.Unary(span=self.span(left).join(tok.span), op=info.op, operand=left))

        self.opens.append(tok)
        args: list[A.NodeId] = []
        if self.peek().kind is not TokenKind.RPAREN:
            while True:
                args.append(self.expression(0))
                if self.peek().kind is TokenKind.COMMA:
                    self.advance()
                    continue
                break
        close = self.close(tok)
        return self.ast.add(A.Call(span=self.span(left).join(close.span), callee=left, args=tuple(args)))


def _number(tok: Token) -> int | float:
    lex = tok.lexeme
    try:
        if any(c in lex for c in ".eE"):
            value: int | float = float(lex)
            if value == float("inf"):
                raise OverflowError(lex)
            return value
        n = int(lex)
        if n.bit_length() > MAX_INT_BITS:
            raise OverflowError(lex)
        return n
    except (OverflowError, ValueError):
        raise ParseError(
            span=tok.span,
            message="number literal out of range",
            hint="use a smaller literal",
            label="cannot be represented",
            code="E0106",
        ) from None
