"""Centralized logging configuration using Loguru."""

from __future__ import annotations

import pathlib
import sys
from typing import Optional

from loguru import logger


def setup_logging(
    *,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    log_file: Optional[str] = None,
) -> None:
    """Configure logging sinks for a release run.

    Parameters
    ----------
    console_level:
        Minimum log level for console output.
    file_level:
        Minimum log level for file output.
    log_file:
        Optional path of a file that captures structured JSON log output.
        No file sink is added when omitted.

    Existing handlers are removed so repeated calls do not duplicate output.
    """

    logger.remove()

    logger.add(
        sys.stderr,
        level=console_level.upper(),
        backtrace=False,
        diagnose=False,
        colorize=True,
        format="<level>{level: <8}</level> | {message}",
    )

    if log_file:
        file_path = pathlib.Path(log_file).expanduser().resolve()
        file_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            file_path,
            level=file_level.upper(),
            backtrace=False,
            diagnose=False,
            serialize=True,
        )
        logger.bind(log_file=str(file_path)).debug("File logging configured")


__all__ = ["setup_logging"]
