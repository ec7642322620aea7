from __future__ import annotations

from .api import Outcome, lex_source, parse_source, run_file, run_source
from .diagnostics import render
from .environment import Environment
from .errors import (
    Diagnostic,
    DivisionByZero,
    DomainError,
    EvalError,
    LexError,
    NumericOverflow,
    ParseError,
    RknError,
    Severity,
    TypeMismatch,
    UndefinedVariable,
)
from .evaluator import Evaluation, evaluate

__all__ = [
    "Diagnostic",
    "DivisionByZero",
    "DomainError",
    "Environment",
    "EvalError",
    "Evaluation",
    "LexError",
    "NumericOverflow",
    "Outcome",
    "ParseError",
    "RknError",
    "Severity",
    "TypeMismatch",
    "UndefinedVariable",
    "evaluate",
    "lex_source",
    "parse_source",
    "render",
    "run_file",
    "run_source",
]
