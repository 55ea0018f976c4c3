"""
vyantra — Logging Setup

The library modules only ever call logging.getLogger(__name__); nothing
under vyantra/ installs handlers on import. Hosts (vyrun, tests, an
embedding application) call setup_logging() once.

Levels used by the machine:
  DEBUG    every executed instruction, popped values, ALU results
  INFO     halt, with the full state report
  ERROR    fatal faults
"""

from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

from .config import LOG_FORMAT, LOG_DATEFMT


def setup_logging(
    name: str = "vyantra",
    level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
    log_file: Optional[Union[str, Path]] = None,
    rich_console: bool = True,
) -> logging.Logger:
    """
    Configure and return the ``name`` logger.

    Console output goes to stderr (rich, or plain when ``rich_console`` is
    False) so stdout stays free for the run report. With ``log_file`` every
    record at ``level`` and above is also written there.

    Calling it again replaces the handlers it installed before.
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)

    # ── File handler: captures everything at `level` ──
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
        logger.addHandler(fh)

    # ── Console handler: only important stuff (WARNING+ default) ──
    if rich_console:
        ch = RichHandler(
            console=Console(stderr=True),
            level=console_level,
            show_time=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
    else:
        ch = logging.StreamHandler(sys.stderr)
        ch.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-7s | %(message)s", datefmt="%H:%M:%S",
        ))
    ch.setLevel(console_level)
    logger.addHandler(ch)

    logger.debug("Logger initialized: %s (console %s, file %s)",
                 name, logging.getLevelName(console_level), log_file or "-")
    return logger
