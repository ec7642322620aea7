from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .ast import Program
from .environment import Environment
from .errors import Diagnostic
from .evaluator import evaluate
from .lexer import LexResult, tokenize
from .operators import DEFAULT_OPERATORS, OperatorTable
from .parser import Parser, ParseResult
from .spans import SourceText
from .values import Value


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Outcome:
    """Result of running one submission through every stage."""

    source: SourceText
    value: Value | None
    diagnostics: tuple[Diagnostic, ...]
    env: Environment
    program: Program | None = None
    incomplete: bool = False

    @property
    def ok(self) -> bool:
        return not any(d.is_error for d in self.diagnostics)


def lex_source(text: str, *, file: str = "<memory>") -> LexResult:
    return tokenize(SourceText(text, file))


def parse_source(
    text: str,
    *,
    file: str = "<memory>",
    operators: OperatorTable = DEFAULT_OPERATORS,
) -> Program:
    """Parse ``text`` and return its program, raising the first error otherwise."""
    lexed = lex_source(text, file=file)
    if lexed.errors:
        raise lexed.errors[0]
    parsed = Parser(operators).parse(lexed.tokens)
    if parsed.program is None:
        raise parsed.errors[0]
    return parsed.program


def run_source(
    text: str,
    env: Environment | None = None,
    *,
    file: str = "<memory>",
    operators: OperatorTable = DEFAULT_OPERATORS,
) -> Outcome:
    """Lex, parse and evaluate one submission.

    Each stage runs only when the previous one reported no errors. Lexing and
    parsing report every error they find before stopping.
    """
    source = SourceText(text, file)
    env = env if env is not None else Environment.session()

    lexed = tokenize(source)
    if lexed.errors:
        return Outcome(source, None, tuple(e.to_diagnostic() for e in lexed.errors), env)

    parsed: ParseResult = Parser(operators).parse(lexed.tokens)
    if parsed.program is None:
        return Outcome(
            source,
            None,
            tuple(e.to_diagnostic() for e in parsed.errors),
            env,
            incomplete=parsed.incomplete,
        )

    result = evaluate(parsed.program, env)
    diagnostics = list(result.warnings)
    if result.error is not None:
        diagnostics.append(result.error.to_diagnostic())
    logger.debug("%s: %d statements, %d diagnostics", file, len(parsed.program.statements), len(diagnostics))
    return Outcome(source, result.value, tuple(diagnostics), result.env, program=parsed.program)


def run_file(path: str | Path, env: Environment | None = None) -> Outcome:
    p = Path(path).expanduser()
    text = p.read_text(encoding="utf-8")
    return run_source(text, env, file=str(p))
