from __future__ import annotations

from collections.abc import Iterator, Mapping

from .values import BUILTINS, CONSTANTS, Value


class Environment:
    """A scope of variable bindings chained to an optional parent scope.

    Lookups fall through to the parent on a miss; assignment always binds in
    this scope, shadowing any outer binding of the same name.
    """

    __slots__ = ("_bindings", "parent")

    def __init__(self, bindings: Mapping[str, Value] | None = None, parent: Environment | None = None) -> None:
        self._bindings: dict[str, Value] = dict(bindings or {})
        self.parent = parent

    @classmethod
    def prelude(cls) -> Environment:
        bindings: dict[str, Value] = dict(CONSTANTS)
        bindings.update((b.name, b) for b in BUILTINS)
        return cls(bindings)

    @classmethod
    def session(cls) -> Environment:
        """An empty scope on top of the prelude, as used by the REPL and scripts."""
        return cls.prelude().child()

    def child(self) -> Environment:
        return Environment(parent=self)

    def fork(self) -> Environment:
        """Copy of this scope's bindings that shares the parent chain.

        Writes to the fork never show up in ``self``.
        """
        return Environment(self._bindings, self.parent)

    def lookup(self, name: str) -> Value:
        scope: Environment | None = self
        while scope is not None:
            if name in scope._bindings:
                return scope._bindings[name]
            scope = scope.parent
        raise KeyError(name)

    def get(self, name: str, default: Value | None = None) -> Value | None:
        try:
            return self.lookup(name)
        except KeyError:
            return default

    def assign(self, name: str, value: Value) -> None:
        self._bindings[name] = value

    def owns(self, name: str) -> bool:
        return name in self._bindings

    def resolves_outside(self, name: str) -> bool:
        """True when ``name`` is bound by an enclosing scope only."""
        return not self.owns(name) and self.parent is not None and name in self.parent

    def names(self) -> Iterator[str]:
        """Visible names, innermost scope first, each reported once."""
        seen: set[str] = set()
        scope: Environment | None = self
        while scope is not None:
            for name in scope._bindings:
                if name not in seen:
                    seen.add(name)
                    yield name
            scope = scope.parent

    def local_items(self) -> list[tuple[str, Value]]:
        return list(self._bindings.items())

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        try:
            self.lookup(name)
        except KeyError:
            return False
        return True

    def __repr__(self) -> str:
        depth = 0
        scope = self.parent
        while scope is not None:
            depth += 1
            scope = scope.parent
        return f"Environment({len(self._bindings)} bindings, depth={depth})"
