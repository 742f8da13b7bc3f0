"""
Package-level logging configuration.

* Rich console output (colourised, nicely formatted).
* Rotating **JSON** log file under ``./logs`` (or ``$REPORTOMATIC_LOG_DIR``
  when set) so an operator can search a finished run for skipped reports.
* Optional plain-text mirror controlled via ``--save-logfile`` on the CLI.

The public helper :func:`setup_logging` wires everything and should be the
sole entry-point used by sub-commands.
"""

from __future__ import annotations

import atexit
import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

import structlog
from rich.logging import RichHandler
from structlog.dev import ConsoleRenderer as StructlogConsoleRenderer
from structlog.stdlib import LoggerFactory

__all__ = ["setup_logging", "log_dir"]

# Libraries that are chatty at INFO/DEBUG during every Drive call.
_NOISY_LOGGERS = ("googleapiclient.discovery_cache", "googleapiclient.discovery", "urllib3")


def log_dir() -> Path:
    """Return the directory that receives the rotating JSON log."""
    env_dir = os.environ.get("REPORTOMATIC_LOG_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.cwd() / "logs"


# --------------------------------------------------------------------------- #
# Internal helpers – file-based handlers                                      #
# --------------------------------------------------------------------------- #
def _json_file_handler(level: int) -> logging.Handler:
    """Return a rotating file handler fed with JSON-rendered structlog events."""
    logdir = log_dir()
    logdir.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        filename=logdir / "reportomatic.log",
        maxBytes=5_000_000,  # ~5 MB before rollover
        backupCount=3,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_log_level,
            ],
        )
    )
    return handler


def _plain_text_file_handler(path: Optional[Path], level: int) -> logging.Handler | None:
    """Return a plain-text file handler or *None* when *path* is *None*."""
    if path is None:
        return None

    path = path.expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(path, encoding="utf-8", mode="a")
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=StructlogConsoleRenderer(colors=False),
            foreign_pre_chain=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_log_level,
            ],
        )
    )
    # Ensure the buffer is flushed on interpreter exit.
    atexit.register(handler.close)
    return handler


# --------------------------------------------------------------------------- #
# Public API – main entry-point                                               #
# --------------------------------------------------------------------------- #
def setup_logging(
    *,
    verbose: bool = False,
    debug: bool = False,
    extra_text_log: Optional[Path] = None,
) -> None:
    """Configure rich console logging and the file mirrors.

    Harvest progress is logged at INFO, so the console shows INFO by default;
    *verbose* is kept for symmetry with the other flags and *debug* lowers
    every handler to DEBUG.

    Args:
        verbose: Emit INFO-level messages to the console (default behaviour).
        debug: Emit DEBUG-level messages, including third-party libraries.
        extra_text_log: Optional path for a plain-text mirror of the console.
    """
    console_lvl = logging.DEBUG if debug else logging.INFO
    file_lvl = logging.DEBUG if debug else logging.INFO

    console = RichHandler(
        level=console_lvl,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        markup=False,
        show_path=verbose or debug,
    )
    console.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=StructlogConsoleRenderer(colors=False),
            foreign_pre_chain=[structlog.stdlib.add_log_level],
        )
    )
    handlers: list[logging.Handler] = [console, _json_file_handler(file_lvl)]

    txt_handler = _plain_text_file_handler(extra_text_log, console_lvl)
    if txt_handler:
        handlers.append(txt_handler)

    # --- Configure root logger --------------------------------------------------
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)

    # --- structlog binds --------------------------------------------------------
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(console_lvl),
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=False,
    )
