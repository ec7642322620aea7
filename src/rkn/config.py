from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path


_FALSE = {"", "0", "false", "no", "off"}


@dataclass(frozen=True, slots=True)
class Settings:
    """Runtime settings for the command-line driver.

    Defaults can be overridden through environment variables:

      - RKN_PROMPT / RKN_CONTINUATION_PROMPT: interactive prompts
      - RKN_HISTORY: history file for the interactive session ("" disables it)
      - RKN_LOG_LEVEL: logging level name
      - RKN_NO_WARNINGS: any true-ish value hides warnings
    """

    prompt: str = "> "
    continuation_prompt: str = ". "
    history_file: Path | None = Path("~/.rkn_history")
    show_warnings: bool = True
    show_ast: bool = False
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        s = cls()
        if "RKN_PROMPT" in env:
            s = replace(s, prompt=env["RKN_PROMPT"])
        if "RKN_CONTINUATION_PROMPT" in env:
            s = replace(s, continuation_prompt=env["RKN_CONTINUATION_PROMPT"])
        if "RKN_HISTORY" in env:
            hist = env["RKN_HISTORY"]
            s = replace(s, history_file=Path(hist) if hist else None)
        if "RKN_LOG_LEVEL" in env:
            s = replace(s, log_level=env["RKN_LOG_LEVEL"].upper())
        if env.get("RKN_NO_WARNINGS", "").strip().lower() not in _FALSE:
            s = replace(s, show_warnings=False)
        return s
