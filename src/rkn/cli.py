from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace

from .api import Outcome, run_file, run_source
from .ast import dump
from .config import Settings
from .diagnostics import render, summary
from .errors import Severity
from .repl import Repl
from .values import format_value


logger = logging.getLogger(__name__)

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="rkn", description="Scientific calculator for the terminal")
    ap.add_argument("path", nargs="?", help="Script to run; starts an interactive session when omitted")
    ap.add_argument("-e", "--expr", nargs="+", metavar="EXPR", help="Evaluate an expression and exit")
    ap.add_argument("--ast", action="store_true", help="Print the parse tree before the result")
    ap.add_argument("--no-warnings", action="store_true", help="Only report errors")
    ap.add_argument("--log-level", choices=_LEVELS, type=str.upper, help="Logging level (default: RKN_LOG_LEVEL or WARNING)")
    return ap


def main(argv: list[str] | None = None) -> int:
    ap = _parser()
    args = ap.parse_args(argv)
    if args.path is not None and args.expr is not None:
        ap.error("give either a script path or --expr, not both")

    settings = Settings.from_env()
    if args.ast:
        settings = replace(settings, show_ast=True)
    if args.no_warnings:
        settings = replace(settings, show_warnings=False)
    if args.log_level:
        settings = replace(settings, log_level=args.log_level)

    level = getattr(logging, settings.log_level, None)
    logging.basicConfig(
        level=level if isinstance(level, int) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logger.debug("settings: %s", settings)

    if args.expr is not None:
        return _finish(run_source(" ".join(args.expr), file="<expr>"), settings)

    if args.path is not None:
        try:
            outcome = run_file(args.path)
        except (OSError, UnicodeDecodeError) as e:
            print(f"rkn: cannot read {args.path}: {e}", file=sys.stderr)
            return 2
        return _finish(outcome, settings)

    return Repl(settings).run()


def _finish(outcome: Outcome, settings: Settings) -> int:
    """Report a one-shot submission and return the process exit code."""
    min_severity = Severity.WARNING if settings.show_warnings else Severity.ERROR
    rendered = render(outcome.source, outcome.diagnostics, min_severity=min_severity)
    if rendered:
        sys.stderr.write(rendered)
    if settings.show_ast and outcome.program is not None:
        print(dump(outcome.program))
    if not outcome.ok:
        shown = [d for d in outcome.diagnostics if d.severity.rank >= min_severity.rank]
        print(f"rkn: {outcome.source.file} failed with {summary(shown)}", file=sys.stderr)
        return 1
    if outcome.value is not None:
        print(format_value(outcome.value))
    return 0
