"""Logging setup: rich console output plus a plain run log file"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: Union[str, int] = "info",
    log_file: Optional[Path] = None,
    console: Optional[Console] = None,
) -> logging.Logger:
    """Configure the ``hostkit`` logger once per process"""
    logger = logging.getLogger("hostkit")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    if not logger.handlers:
        console_handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            markup=False,
        )
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(console_handler)

        if log_file:
            log_file = Path(log_file).expanduser()
            try:
                log_file.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(log_file)
            except OSError as e:
                logger.warning("Cannot write run log %s: %s", log_file, e)
            else:
                file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
                logger.addHandler(file_handler)

        logger.propagate = False

    return logger
