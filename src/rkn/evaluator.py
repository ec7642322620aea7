from __future__ import annotations

import difflib
import logging
from collections.abc import Callable
from dataclasses import dataclass

from . import ast as A
from . import values as V
from .environment import Environment
from .errors import (
    Diagnostic,
    DivisionByZero,
    DomainError,
    EvalError,
    NumericOverflow,
    TypeMismatch,
    UndefinedVariable,
    warning,
)
from .spans import Span


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Evaluation:
    """Outcome of evaluating one program.

    ``env`` is the environment to use for the next submission: the updated one
    on success, the untouched input environment on error.
    """

    value: V.Value | None
    error: EvalError | None
    env: Environment
    warnings: tuple[Diagnostic, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None


def evaluate(program: A.Program, env: Environment) -> Evaluation:
    scope = env.fork()
    warnings: list[Diagnostic] = []
    value: V.Value | None = None
    try:
        for sid in program.statements:
            value = _run(program, sid, scope, warnings)
    except EvalError as e:
        logger.debug("evaluation failed: %s", e)
        return Evaluation(value=None, error=e, env=env, warnings=tuple(warnings))
    return Evaluation(value=value, error=None, env=scope, warnings=tuple(warnings))


_FAULTS: dict[type[V.ValueFault], type[EvalError]] = {
    V.DivideFault: DivisionByZero,
    V.KindFault: TypeMismatch,
    V.OverflowFault: NumericOverflow,
    V.DomainFault: DomainError,
}


def _guard(span: Span, fn: Callable[..., V.Value], *args: object) -> V.Value:
    try:
        return fn(*args)
    except V.ValueFault as f:
        raise _FAULTS[type(f)](span=span, message=str(f)) from None


# Work-stack actions.
_VISIT = 0  # push the node's children
_APPLY = 1  # children are on the value stack, combine them
_SHORT = 2  # left operand of and/or is on the value stack
_CHECK = 3  # right operand of and/or is on the value stack


def _run(program: A.Program, root: A.NodeId, scope: Environment, warnings: list[Diagnostic]) -> V.Value:
    """Evaluate one statement without recursing per tree level."""
    values: list[V.Value] = []
    stack: list[tuple[int, A.NodeId]] = [(_VISIT, root)]

    while stack:
        action, nid = stack.pop()
        node = program[nid]

        if action == _VISIT:
            if isinstance(node, A.Literal):
                values.append(node.value)
            elif isinstance(node, A.Identifier):
                values.append(_lookup(node, scope))
            elif isinstance(node, A.Grouping):
                stack.append((_VISIT, node.inner))
            elif isinstance(node, A.Unary):
                stack.append((_APPLY, nid))
                stack.append((_VISIT, node.operand))
            elif isinstance(node, A.Binary):
                if node.op in ("and", "or"):
                    stack.append((_SHORT, nid))
                else:
                    stack.append((_APPLY, nid))
                    stack.append((_VISIT, node.right))
                stack.append((_VISIT, node.left))
            elif isinstance(node, A.Assignment):
                stack.append((_APPLY, nid))
                stack.append((_VISIT, node.value))
            elif isinstance(node, A.Call):
                stack.append((_APPLY, nid))
                stack.extend((_VISIT, a) for a in reversed(node.args))
                stack.append((_VISIT, node.callee))
            else:
                raise TypeError(f"unknown node: {type(node).__name__}")
            continue

        if action == _SHORT:
            assert isinstance(node, A.Binary)
            left = _guard(program[node.left].span, V.require_bool, node.op, values.pop())
            if left is (node.op == "or"):
                values.append(left)
            else:
                stack.append((_CHECK, nid))
                stack.append((_VISIT, node.right))
            continue

        if action == _CHECK:
            assert isinstance(node, A.Binary)
            _guard(program[node.right].span, V.require_bool, node.op, values[-1])
            continue

        if isinstance(node, A.Unary):
            values.append(_guard(node.span, V.UNARY[node.op], values.pop()))
        elif isinstance(node, A.Binary):
            right = values.pop()
            left = values.pop()
            values.append(_guard(node.span, V.BINARY[node.op], left, right))
        elif isinstance(node, A.Assignment):
            if scope.resolves_outside(node.name):
                warnings.append(
                    warning(
                        "W0301",
                        f"assignment to '{node.name}' shadows an outer binding",
                        node.target,
                        label="shadows the outer value",
                    )
                )
            scope.assign(node.name, values[-1])
        elif isinstance(node, A.Call):
            n = len(node.args)
            args = values[len(values) - n :]
            del values[len(values) - n :]
            callee = values.pop()
            values.append(_guard(node.span, V.call, callee, args))
        else:
            raise TypeError(f"cannot apply node: {type(node).__name__}")

    if len(values) != 1:
        raise RuntimeError(f"value stack holds {len(values)} values after evaluation")
    return values[0]


def _lookup(node: A.Identifier, scope: Environment) -> V.Value:
    try:
        return scope.lookup(node.name)
    except KeyError:
        close = difflib.get_close_matches(node.name, list(scope.names()), n=1)
        raise UndefinedVariable(
            span=node.span,
            message=f"undefined variable '{node.name}'",
            hint=f"did you mean '{close[0]}'?" if close else f"assign it first, e.g. {node.name} = 0",
        ) from None
