from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

# Parent logger of every module in this package.
PACKAGE_LOGGER = "bookmarkstate"


@dataclass(frozen=True)
class LogConfig:
    level: str = "INFO"
    no_color: bool = False
    # Level for the state layers only. They report skipped entries and stale
    # index keys at DEBUG, which is too noisy to enable globally.
    state_level: Optional[str] = None


def _level(name: Optional[str], default: int) -> int:
    if not name:
        return default
    value = getattr(logging, name.upper(), None)
    return value if isinstance(value, int) else default


def setup_logging(cfg: LogConfig) -> None:
    level = _level(cfg.level, logging.INFO)
    state_level = _level(cfg.state_level, level)

    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):
        root.removeHandler(h)

    package = logging.getLogger(PACKAGE_LOGGER)
    package.setLevel(state_level if cfg.state_level else logging.NOTSET)

    force_no_color = cfg.no_color or os.getenv("NO_COLOR") is not None
    # stdout carries command output; logs always go to stderr.
    if not force_no_color and sys.stderr.isatty():
        handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_time=False,
            show_level=True,
            show_path=False,
        )
        fmt = "%(message)s"
    else:
        handler = logging.StreamHandler(sys.stderr)
        fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    # Root drops records below `level`; the package logger may let lower ones through.
    handler.setLevel(min(level, state_level))
    handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
