"""Process-wide logging setup for the memento CLI.

Library modules only create ``logging.getLogger(__name__)`` loggers; this
module installs the handlers. Warnings go to stderr so stdout stays clean
for ``--json`` output; an optional file handler mirrors everything.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from memento.core.utils.io import ensure_directory

_MEMENTO_HANDLERS: list[logging.Handler] = []
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    *,
    level: str = "WARNING",
    verbose: bool = False,
    verbose_level: str = "DEBUG",
    log_path: Optional[Path] = None,
) -> None:
    """Install memento's stderr (and optional file) handlers on the root logger.

    Idempotent: handlers installed by a previous call are replaced.
    """
    reset_logging()

    effective = _level_from_name(verbose_level if verbose else level)
    root = logging.getLogger()
    root.setLevel(effective)

    stream = logging.StreamHandler(sys.stderr)
    stream.setLevel(effective)
    stream.setFormatter(logging.Formatter("%(levelname)s: %(message)s" if not verbose else _FORMAT))
    root.addHandler(stream)
    _MEMENTO_HANDLERS.append(stream)

    if log_path is not None:
        resolved = Path(log_path).resolve()
        ensure_directory(resolved.parent)
        fh = logging.FileHandler(str(resolved), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(fh)
        _MEMENTO_HANDLERS.append(fh)
        # the file handler wants everything the stream handler filters out
        root.setLevel(logging.DEBUG)


def configure_from_config(repo_root: Optional[Path] = None, *, verbose: bool = False) -> None:
    """Configure logging from the ``logging`` config section."""
    from memento.core.config.domains import LoggingConfig

    cfg = LoggingConfig(repo_root=repo_root)
    configure_logging(
        level=cfg.level,
        verbose=verbose or cfg.verbose,
        verbose_level=cfg.verbose_level,
        log_path=cfg.file,
    )


def reset_logging() -> None:
    """Remove the handlers installed by :func:`configure_logging`."""
    root = logging.getLogger()
    while _MEMENTO_HANDLERS:
        handler = _MEMENTO_HANDLERS.pop()
        root.removeHandler(handler)
        handler.close()


__all__ = ["configure_logging", "configure_from_config", "reset_logging"]
