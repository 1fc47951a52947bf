"""Logging setup for the command-line entry point"""

import logging
from pathlib import Path


def setup_logging(log_file: Path | None = None, level: int | str = logging.INFO) -> None:
    """Configure root logging to stderr and, optionally, a log file.

    Args:
        log_file: Extra file to append log records to
        level: Logging level as int or name ("DEBUG", "INFO", ...)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )
