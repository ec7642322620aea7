from __future__ import annotations

from . import ast as A
from .operators import ASSIGN_BP, CALL_BP, DEFAULT_OPERATORS, Assoc, OperatorTable


_ATOM = 1 << 30


def format_program(program: A.Program, table: OperatorTable = DEFAULT_OPERATORS) -> str:
    """Canonical source for ``program``, one statement per line.

    Parentheses are emitted only where the operator table requires them, so
    formatting is stable: parse(format(p)) formats back to the same text.
    """
    ops = _Binding(table)
    out = [format_expr(program, s, ops) for s in program.statements]
    return "\n".join(out) + "\n" if out else ""


class _Binding:
    def __init__(self, table: OperatorTable) -> None:
        self.infix = {i.op: i for i in table.infix.values()}
        self.prefix = {i.op: i for i in table.prefix.values()}
        self.postfix = {i.op: i for i in table.postfix.values()}

    def of(self, node: A.Expr) -> int:
        if isinstance(node, A.Binary):
            return self.infix[node.op].bp
        if isinstance(node, A.Unary):
            info = self.postfix.get(node.op) if node.op == "!" else self.prefix.get(node.op)
            return info.bp if info is not None else _ATOM
        if isinstance(node, A.Assignment):
            return ASSIGN_BP
        if isinstance(node, A.Call):
            return CALL_BP
        return _ATOM


def format_expr(program: A.Program, nid: A.NodeId, ops: _Binding | None = None) -> str:
    ops = ops or _Binding(DEFAULT_OPERATORS)
    # Groupings are dropped; the binding table decides where parentheses go.
    strip = _strip_groups(program)

    out: dict[A.NodeId, tuple[str, int]] = {}
    stack: list[tuple[A.NodeId, bool]] = [(strip(nid), False)]
    while stack:
        cur, ready = stack.pop()
        node = program[cur]
        if not ready:
            stack.append((cur, True))
            stack.extend((strip(c), False) for c in reversed(A.children(node)))
            continue

        bp = ops.of(node)
        if isinstance(node, A.Literal):
            text = _literal(node.value)
        elif isinstance(node, A.Identifier):
            text = node.name
        elif isinstance(node, A.Unary):
            operand = _wrap(out[strip(node.operand)], bp)
            if node.op == "!":
                text = f"{operand}!"
            elif node.op == "not":
                text = f"not {operand}"
            else:
                text = f"{node.op}{operand}"
        elif isinstance(node, A.Binary):
            info = ops.infix[node.op]
            left_min = bp + 1 if info.assoc is Assoc.RIGHT else bp
            right_min = bp + 1 if info.assoc is Assoc.LEFT else bp
            left = _wrap(out[strip(node.left)], left_min)
            right = _wrap(out[strip(node.right)], right_min)
            text = f"{left} {node.op} {right}"
        elif isinstance(node, A.Assignment):
            text = f"{node.name} = {_wrap(out[strip(node.value)], ASSIGN_BP)}"
        elif isinstance(node, A.Call):
            callee = _wrap(out[strip(node.callee)], CALL_BP)
            args = ", ".join(out[strip(a)][0] for a in node.args)
            text = f"{callee}({args})"
        else:
            raise TypeError(f"unknown node: {type(node).__name__}")
        out[cur] = (text, bp)
    return out[strip(nid)][0]


def _strip_groups(program: A.Program):
    def strip(nid: A.NodeId) -> A.NodeId:
        node = program[nid]
        while isinstance(node, A.Grouping):
            nid = node.inner
            node = program[nid]
        return nid

    return strip


def _wrap(part: tuple[str, int], min_bp: int) -> str:
    text, bp = part
    return f"({text})" if bp < min_bp else text


def _literal(value: bool | int | float) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return repr(value)
