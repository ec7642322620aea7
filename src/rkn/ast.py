from __future__ import annotations

from dataclasses import dataclass, field

from .spans import Span


NodeId = int


@dataclass(frozen=True, slots=True)
class Node:
    span: Span


@dataclass(frozen=True, slots=True)
class Literal(Node):
    value: bool | int | float


@dataclass(frozen=True, slots=True)
class Identifier(Node):
    name: str


@dataclass(frozen=True, slots=True)
class Unary(Node):
    op: str  # "-", "+", "not" (prefix) or "!" (postfix)
    operand: NodeId


@dataclass(frozen=True, slots=True)
class Binary(Node):
    op: str
    left: NodeId
    right: NodeId


@dataclass(frozen=True, slots=True)
class Grouping(Node):
    inner: NodeId


@dataclass(frozen=True, slots=True)
class Assignment(Node):
    name: str
    value: NodeId
    target: Span  # span of the assigned name


@dataclass(frozen=True, slots=True)
class Call(Node):
    callee: NodeId
    args: tuple[NodeId, ...]


Expr = Literal | Identifier | Unary | Binary | Grouping | Assignment | Call


@dataclass(slots=True)
class Ast:
    """Arena of expression nodes.

    Nodes refer to their children by index. A child is always added before its
    parent, so every reference points backwards and the tree has no cycles.
    """

    nodes: list[Expr] = field(default_factory=list)

    def add(self, node: Expr) -> NodeId:
        for child in children(node):
            if not 0 <= child < len(self.nodes):
                raise ValueError(f"child {child} is not in the arena")
        self.nodes.append(node)
        return len(self.nodes) - 1

    def __getitem__(self, nid: NodeId) -> Expr:
        return self.nodes[nid]

    def __len__(self) -> int:
        return len(self.nodes)

    def freeze(self) -> tuple[Expr, ...]:
        return tuple(self.nodes)


@dataclass(frozen=True, slots=True)
class Program(Node):
    nodes: tuple[Expr, ...]
    statements: tuple[NodeId, ...]

    def __getitem__(self, nid: NodeId) -> Expr:
        return self.nodes[nid]


def children(node: Expr) -> tuple[NodeId, ...]:
    if isinstance(node, (Literal, Identifier)):
        return ()
    if isinstance(node, Unary):
        return (node.operand,)
    if isinstance(node, Binary):
        return (node.left, node.right)
    if isinstance(node, Grouping):
        return (node.inner,)
    if isinstance(node, Assignment):
        return (node.value,)
    if isinstance(node, Call):
        return (node.callee, *node.args)
    raise TypeError(f"unknown node: {type(node).__name__}")


def dump(program: Program, nid: NodeId | None = None) -> str:
    """S-expression rendering of a statement (or of every statement)."""
    if nid is None:
        return "\n".join(dump(program, s) for s in program.statements)

    # Iterative post-order so deep trees do not hit the recursion limit.
    out: dict[NodeId, str] = {}
    stack: list[tuple[NodeId, bool]] = [(nid, False)]
    while stack:
        cur, ready = stack.pop()
        node = program[cur]
        if not ready:
            stack.append((cur, True))
            stack.extend((c, False) for c in reversed(children(node)))
            continue
        if isinstance(node, Literal):
            v = node.value
            out[cur] = ("true" if v else "false") if isinstance(v, bool) else repr(v)
        elif isinstance(node, Identifier):
            out[cur] = node.name
        elif isinstance(node, Unary):
            out[cur] = f"({node.op} {out[node.operand]})"
        elif isinstance(node, Binary):
            out[cur] = f"({node.op} {out[node.left]} {out[node.right]})"
        elif isinstance(node, Grouping):
            out[cur] = out[node.inner]
        elif isinstance(node, Assignment):
            out[cur] = f"(= {node.name} {out[node.value]})"
        elif isinstance(node, Call):
            args = " ".join(out[a] for a in node.args)
            out[cur] = f"(call {out[node.callee]}{' ' + args if args else ''})"
        else:
            raise TypeError(f"unknown node: {type(node).__name__}")
    return out[nid]
