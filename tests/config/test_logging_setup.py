from __future__ import annotations

import logging
from pathlib import Path

import pytest

from memento.core.logging import configure_from_config, configure_logging, reset_logging


def test_file_handler_receives_debug(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "memento.log"
    configure_logging(level="WARNING", log_path=log_path)

    logging.getLogger("memento.test").debug("visible in file")
    reset_logging()

    assert "visible in file" in log_path.read_text(encoding="utf-8")


def test_configure_is_idempotent(tmp_path: Path) -> None:
    root = logging.getLogger()
    before = len(root.handlers)
    configure_logging()
    configure_logging(verbose=True)
    assert len(root.handlers) == before + 1
    reset_logging()
    assert len(root.handlers) == before


def test_verbose_switches_level() -> None:
    configure_logging(level="ERROR", verbose=True, verbose_level="INFO")
    assert logging.getLogger().level == logging.INFO


def test_configure_from_config_uses_logging_section(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MEMENTO_logging__file", "memento.log")
    configure_from_config(tmp_path)
    logging.getLogger("memento.test").info("from config")
    reset_logging()
    assert "from config" in (tmp_path / "memento.log").read_text(encoding="utf-8")
