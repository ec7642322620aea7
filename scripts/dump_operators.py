from __future__ import annotations

from rkn.operators import DEFAULT_OPERATORS


def main() -> None:
    rows = [
        *DEFAULT_OPERATORS.prefix.values(),
        *DEFAULT_OPERATORS.infix.values(),
        *DEFAULT_OPERATORS.postfix.values(),
    ]
    print(f"operators: {len(rows)}")
    for info in sorted(rows, key=lambda i: (i.bp, i.op)):
        print(f"{info.bp:>3}: {info.op:<5} {info.fixity.value:<8} {info.assoc.value}")


if __name__ == "__main__":
    main()
