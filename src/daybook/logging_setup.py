# src/daybook/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "daybook.log"

# Fires on every tick; only reaches the prompt when something is wrong.
_TICK_LOGGER = "daybook.clock"


class _PromptFilter(logging.Filter):
    """Decides which records are echoed next to the daybook prompt."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == _TICK_LOGGER:
            return record.levelno >= logging.WARNING
        if record.name.startswith("daybook."):
            return True
        # py.warnings and anything outside the app
        return record.levelno >= logging.ERROR


def _formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def setup_logging(
    *,
    log_dir: str | Path = ".local/daybook",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Send daybook logs to stderr (filtered) and to <log_dir>/daybook.log (everything).

    Replaces whatever handlers the root logger had. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = _formatter()

    prompt = logging.StreamHandler(sys.stderr)
    prompt.setLevel(console_level)
    prompt.setFormatter(fmt)
    prompt.addFilter(_PromptFilter())
    root.addHandler(prompt)

    journal = logging.FileHandler(str(log_file), encoding="utf-8")
    journal.setLevel(file_level)
    journal.setFormatter(fmt)
    root.addHandler(journal)

    logging.captureWarnings(True)
    return log_file
