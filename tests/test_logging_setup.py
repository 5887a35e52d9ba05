# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from daybook.logging_setup import _PromptFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_prompt_filter_hides_tick_chatter_and_foreign_noise() -> None:
    f = _PromptFilter()
    assert f.filter(_record("daybook.storage.gateway", logging.INFO))
    assert not f.filter(_record("daybook.clock", logging.DEBUG))
    assert f.filter(_record("daybook.clock", logging.WARNING))
    assert not f.filter(_record("py.warnings", logging.WARNING))
    assert not f.filter(_record("asyncio", logging.WARNING))
    assert f.filter(_record("asyncio", logging.ERROR))


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def test_setup_logging_writes_everything_to_the_log_file(tmp_path: Path, restore_root_logger) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs")
    assert log_file == tmp_path / "logs" / "daybook.log"
    assert len(logging.getLogger().handlers) == 2

    logging.getLogger("daybook.clock").debug("tick today=%s", "2026-10-18")
    for h in logging.getLogger().handlers:
        h.flush()
    assert "tick today=2026-10-18" in log_file.read_text(encoding="utf-8")
