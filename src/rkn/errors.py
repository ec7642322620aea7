from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .spans import Span


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"

    @property
    def rank(self) -> int:
        return 1 if self is Severity.ERROR else 0


@dataclass(frozen=True, slots=True)
class Label:
    span: Span
    text: str = ""


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A renderable error or warning anchored to one or more spans.

    Diagnostics are plain data; see ``rkn.diagnostics`` for rendering.
    """

    severity: Severity
    code: str
    message: str
    primary: Label
    secondary: tuple[Label, ...] = ()
    notes: tuple[str, ...] = ()

    @property
    def span(self) -> Span:
        return self.primary.span

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR


def warning(code: str, message: str, span: Span, *, label: str = "", notes: tuple[str, ...] = ()) -> Diagnostic:
    return Diagnostic(
        severity=Severity.WARNING,
        code=code,
        message=message,
        primary=Label(span, label),
        notes=notes,
    )


@dataclass(slots=True)
class RknError(Exception):
    span: Span
    message: str
    hint: str | None = None

    code = "E0000"

    def __str__(self) -> str:
        base = f"{self.span.format()}: {self.message}"
        if self.hint:
            return f"{base}\nhint: {self.hint}"
        return base

    def labels(self) -> tuple[Label, tuple[Label, ...]]:
        return Label(self.span), ()

    def to_diagnostic(self) -> Diagnostic:
        primary, secondary = self.labels()
        return Diagnostic(
            severity=Severity.ERROR,
            code=self.code,
            message=self.message,
            primary=primary,
            secondary=secondary,
            notes=(f"help: {self.hint}",) if self.hint else (),
        )


@dataclass(slots=True)
class LexError(RknError):
    code = "E0001"

    def labels(self) -> tuple[Label, tuple[Label, ...]]:
        return Label(self.span, "not recognized"), ()


@dataclass(slots=True)
class ParseError(RknError):
    """A syntax error.

    ``incomplete`` marks errors caused by running out of input in the middle of
    an expression; an interactive driver asks for more input instead of
    reporting them. ``related`` is a second location worth pointing at, such as
    the parenthesis left open or the point where the input ran out.
    """

    incomplete: bool = False
    related: Span | None = None
    related_label: str = ""
    label: str = ""
    code: str = "E0100"

    def labels(self) -> tuple[Label, tuple[Label, ...]]:
        secondary = (Label(self.related, self.related_label),) if self.related is not None else ()
        return Label(self.span, self.label), secondary


@dataclass(slots=True)
class EvalError(RknError):
    """Base for errors raised while evaluating a well-formed program."""

    code = "E0200"
    label = ""

    def labels(self) -> tuple[Label, tuple[Label, ...]]:
        return Label(self.span, self.label), ()


@dataclass(slots=True)
class DivisionByZero(EvalError):
    code = "E0201"
    label = "divisor evaluates to zero"


@dataclass(slots=True)
class TypeMismatch(EvalError):
    code = "E0202"
    label = "operand types do not fit this operation"


@dataclass(slots=True)
class UndefinedVariable(EvalError):
    code = "E0203"
    label = "not defined"


@dataclass(slots=True)
class NumericOverflow(EvalError):
    code = "E0204"
    label = "result is out of range"


@dataclass(slots=True)
class DomainError(EvalError):
    code = "E0205"
    label = "argument outside the function's domain"
