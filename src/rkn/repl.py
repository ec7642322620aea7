from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import TextIO

from .api import Outcome, run_source
from .ast import dump
from .config import Settings
from .diagnostics import render
from .environment import Environment
from .errors import Severity
from .values import format_value

try:
    import readline
except ImportError:  # not available on every platform; history is then disabled
    readline = None  # type: ignore[assignment]


logger = logging.getLogger(__name__)

STDIN = "<stdin>"


class Repl:
    """Interactive session. The environment lives as long as the session."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        read_line: Callable[[str], str] = input,
        out: TextIO | None = None,
        err: TextIO | None = None,
        env: Environment | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.read_line = read_line
        self.out = out or sys.stdout
        self.err = err or sys.stderr
        self.env = env if env is not None else Environment.session()

    def run(self) -> int:
        self._load_history()
        try:
            while True:
                try:
                    outcome = self.read_submission()
                except EOFError:
                    self.out.write("\n")
                    break
                except KeyboardInterrupt:
                    self.out.write("\n")
                    continue
                if outcome is not None:
                    self.report(outcome)
        finally:
            self._save_history()
        return 0

    def read_submission(self) -> Outcome | None:
        """Read one entry, asking for more lines while the input is incomplete."""
        text = self.read_line(self.settings.prompt)
        if not text.strip():
            return None
        while True:
            outcome = run_source(text, self.env, file=STDIN)
            if not outcome.incomplete:
                return outcome
            try:
                more = self.read_line(self.settings.continuation_prompt)
            except EOFError:
                return outcome
            if not more.strip():
                return outcome
            text = f"{text}\n{more}"
            logger.debug("continuing incomplete input (%d chars)", len(text))

    def report(self, outcome: Outcome) -> None:
        self.env = outcome.env
        min_severity = Severity.WARNING if self.settings.show_warnings else Severity.ERROR
        rendered = render(outcome.source, outcome.diagnostics, min_severity=min_severity)
        if rendered:
            self.err.write(rendered)
            self.err.flush()
        if self.settings.show_ast and outcome.program is not None:
            self.out.write(dump(outcome.program) + "\n")
        if outcome.ok and outcome.value is not None:
            self.out.write(format_value(outcome.value) + "\n")
        self.out.flush()

    def _load_history(self) -> None:
        path = self.settings.history_file
        if readline is None or path is None or self.read_line is not input:
            return
        try:
            readline.read_history_file(path.expanduser())
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("cannot read history file %s: %s", path, e)

    def _save_history(self) -> None:
        path = self.settings.history_file
        if readline is None or path is None or self.read_line is not input:
            return
        try:
            readline.write_history_file(path.expanduser())
        except OSError as e:
            logger.warning("cannot write history file %s: %s", path, e)
