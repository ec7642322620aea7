"""Runtime values and the arithmetic defined on them.

Numbers are either exact integers (Python ``int``, unbounded apart from
``MAX_INT_BITS``) or IEEE-754 binary64 floats. Integer literals stay exact;
literals with a decimal point or exponent are floats. Mixing the two promotes
to float. Booleans are a separate kind and never take part in arithmetic.

Operations here raise ``ValueFault`` subclasses without a span; the evaluator
attaches the span of the offending expression.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass


# Largest integer accepted, in bits. Keeps `9 ^ 9 ^ 9` from hanging and stays
# under the 4300-digit limit Python puts on int to str conversion.
MAX_INT_BITS = 14_000


@dataclass(frozen=True, slots=True)
class Builtin:
    name: str
    arity: int | None  # None means one or more arguments
    fn: Callable[..., object]

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"


Value = bool | int | float | Builtin
Number = int | float


class ValueFault(Exception):
    """An operation failed; carries only a message."""


class DivideFault(ValueFault):
    pass


class KindFault(ValueFault):
    pass


class OverflowFault(ValueFault):
    pass


class DomainFault(ValueFault):
    pass


def kind_of(v: Value) -> str:
    if isinstance(v, bool):
        return "bool"
    if isinstance(v, (int, float)):
        return "number"
    if isinstance(v, Builtin):
        return "function"
    raise TypeError(f"not a runtime value: {v!r}")


def is_number(v: Value) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def format_value(v: Value) -> str:
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, float):
        if v.is_integer() and abs(v) < 1e16:
            return f"{v:.1f}"
        return repr(v)
    if isinstance(v, Builtin):
        return repr(v)
    return str(v)


def _check_int(n: int) -> int:
    if n.bit_length() > MAX_INT_BITS:
        raise OverflowFault(f"integer result exceeds {MAX_INT_BITS} bits")
    return n


def _check_float(x: float, *operands: Number) -> float:
    if math.isfinite(x) or not all(math.isfinite(o) for o in operands):
        return x
    raise OverflowFault("result is too large to represent")


def _to_float(n: Number) -> float:
    try:
        return float(n)
    except OverflowError:
        raise OverflowFault("integer is too large to convert to a float") from None


def _numbers(op: str, a: Value, b: Value) -> tuple[Number, Number]:
    if not (is_number(a) and is_number(b)):
        raise KindFault(f"cannot apply '{op}' to {kind_of(a)} and {kind_of(b)}")
    return a, b  # type: ignore[return-value]


def add(a: Value, b: Value) -> Number:
    x, y = _numbers("+", a, b)
    if isinstance(x, int) and isinstance(y, int):
        return _check_int(x + y)
    return _check_float(_to_float(x) + _to_float(y), x, y)


def sub(a: Value, b: Value) -> Number:
    x, y = _numbers("-", a, b)
    if isinstance(x, int) and isinstance(y, int):
        return _check_int(x - y)
    return _check_float(_to_float(x) - _to_float(y), x, y)


def mul(a: Value, b: Value) -> Number:
    x, y = _numbers("*", a, b)
    if isinstance(x, int) and isinstance(y, int):
        if x.bit_length() + y.bit_length() > MAX_INT_BITS + 1:
            raise OverflowFault(f"integer result exceeds {MAX_INT_BITS} bits")
        return _check_int(x * y)
    return _check_float(_to_float(x) * _to_float(y), x, y)


def div(a: Value, b: Value) -> Number:
    x, y = _numbers("/", a, b)
    if y == 0:
        raise DivideFault("division by zero")
    if isinstance(x, int) and isinstance(y, int):
        q, r = divmod(x, y)
        if r == 0:
            return q
        # Correctly rounded even when the operands do not fit in a float.
        try:
            return x / y
        except OverflowError:
            raise OverflowFault("result is too large to represent") from None
    return _check_float(_to_float(x) / _to_float(y), x, y)


def mod(a: Value, b: Value) -> Number:
    x, y = _numbers("%", a, b)
    if y == 0:
        raise DivideFault("division by zero")
    if isinstance(x, int) and isinstance(y, int):
        return x % y
    return _to_float(x) % _to_float(y)


def power(a: Value, b: Value) -> Number:
    x, y = _numbers("^", a, b)
    if isinstance(x, int) and isinstance(y, int) and y >= 0:
        if abs(x) > 1 and (abs(x).bit_length() - 1) * y > MAX_INT_BITS:
            raise OverflowFault(f"integer result exceeds {MAX_INT_BITS} bits")
        return _check_int(x**y)
    if x == 0 and y < 0:
        raise DivideFault("zero cannot be raised to a negative power")
    fx, fy = _to_float(x), _to_float(y)
    if fx < 0 and not fy.is_integer():
        raise DomainFault("negative base with a fractional exponent")
    try:
        return _check_float(fx**fy, x, y)
    except OverflowError:
        raise OverflowFault("result is too large to represent") from None


def negate(a: Value) -> Number:
    if not is_number(a):
        raise KindFault(f"cannot apply unary '-' to {kind_of(a)}")
    return -a  # type: ignore[operator]


def plus(a: Value) -> Number:
    if not is_number(a):
        raise KindFault(f"cannot apply unary '+' to {kind_of(a)}")
    return a  # type: ignore[return-value]


def factorial(a: Value) -> int:
    if not is_number(a):
        raise KindFault(f"cannot apply '!' to {kind_of(a)}")
    if isinstance(a, float):
        if not a.is_integer():
            raise DomainFault("factorial is only defined for whole numbers")
        a = int(a)
    if a < 0:
        raise DomainFault("factorial of a negative number")
    # n! has about n*log2(n) bits.
    if a > 2 and a * (a.bit_length() - 1) > MAX_INT_BITS * 2:
        raise OverflowFault(f"integer result exceeds {MAX_INT_BITS} bits")
    return _check_int(math.factorial(a))


def logical_not(a: Value) -> bool:
    if not isinstance(a, bool):
        raise KindFault(f"cannot apply 'not' to {kind_of(a)}")
    return not a


def require_bool(op: str, a: Value) -> bool:
    if not isinstance(a, bool):
        raise KindFault(f"operands of '{op}' must be bool, found {kind_of(a)}")
    return a


def equals(op: str, a: Value, b: Value) -> bool:
    if kind_of(a) != kind_of(b):
        raise KindFault(f"cannot compare {kind_of(a)} with {kind_of(b)} using '{op}'")
    return a == b


def compare(op: str, a: Value, b: Value) -> bool:
    x, y = _numbers(op, a, b)
    if op == "<":
        return x < y
    if op == "<=":
        return x <= y
    if op == ">":
        return x > y
    if op == ">=":
        return x >= y
    raise ValueError(f"unknown comparison: {op}")


BINARY: dict[str, Callable[[Value, Value], Value]] = {
    "+": add,
    "-": sub,
    "*": mul,
    "/": div,
    "%": mod,
    "^": power,
    "==": lambda a, b: equals("==", a, b),
    "!=": lambda a, b: not equals("!=", a, b),
    "<": lambda a, b: compare("<", a, b),
    "<=": lambda a, b: compare("<=", a, b),
    ">": lambda a, b: compare(">", a, b),
    ">=": lambda a, b: compare(">=", a, b),
}

UNARY: dict[str, Callable[[Value], Value]] = {
    "-": negate,
    "+": plus,
    "!": factorial,
    "not": logical_not,
}


# ---------------------------------------------------------------------------
# Builtins
# ---------------------------------------------------------------------------


def _real(name: str, fn: Callable[[float], float]) -> Callable[..., Number]:
    def call(x: Value) -> Number:
        if not is_number(x):
            raise KindFault(f"{name}() expects a number, found {kind_of(x)}")
        try:
            out = fn(_to_float(x))
        except ValueError:
            raise DomainFault(f"{name}() is not defined for {format_value(x)}") from None
        except OverflowError:
            raise OverflowFault(f"{name}() result is too large to represent") from None
        return _check_float(out, x)

    return call


def _rounding(name: str, fn: Callable[[float], int]) -> Callable[..., Number]:
    def call(x: Value) -> Number:
        if not is_number(x):
            raise KindFault(f"{name}() expects a number, found {kind_of(x)}")
        if isinstance(x, int):
            return x
        if not math.isfinite(x):
            raise OverflowFault(f"cannot {name} a non-finite number")
        return fn(x)

    return call


def _abs(x: Value) -> Number:
    if not is_number(x):
        raise KindFault(f"abs() expects a number, found {kind_of(x)}")
    return abs(x)  # type: ignore[arg-type]


def _extreme(name: str, pick: Callable[..., Number]) -> Callable[..., Number]:
    def call(*xs: Value) -> Number:
        for x in xs:
            if not is_number(x):
                raise KindFault(f"{name}() expects numbers, found {kind_of(x)}")
        return pick(xs)

    return call


BUILTINS: tuple[Builtin, ...] = (
    Builtin("abs", 1, _abs),
    Builtin("sqrt", 1, _real("sqrt", math.sqrt)),
    Builtin("exp", 1, _real("exp", math.exp)),
    Builtin("ln", 1, _real("ln", math.log)),
    Builtin("log", 1, _real("log", math.log10)),
    Builtin("sin", 1, _real("sin", math.sin)),
    Builtin("cos", 1, _real("cos", math.cos)),
    Builtin("tan", 1, _real("tan", math.tan)),
    Builtin("floor", 1, _rounding("floor", math.floor)),
    Builtin("ceil", 1, _rounding("ceil", math.ceil)),
    Builtin("round", 1, _rounding("round", round)),
    Builtin("min", None, _extreme("min", min)),
    Builtin("max", None, _extreme("max", max)),
)

CONSTANTS: dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
    "tau": math.tau,
    "inf": math.inf,
}


def call(callee: Value, args: list[Value]) -> Value:
    if not isinstance(callee, Builtin):
        raise KindFault(f"{kind_of(callee)} is not callable")
    if callee.arity is None:
        if not args:
            raise KindFault(f"{callee.name}() expects at least 1 argument, got 0")
    elif len(args) != callee.arity:
        plural = "" if callee.arity == 1 else "s"
        raise KindFault(f"{callee.name}() expects {callee.arity} argument{plural}, got {len(args)}")
    return callee.fn(*args)  # type: ignore[return-value]
