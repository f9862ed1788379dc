"""
Logging setup for the memorial backend.

``setup_logging`` attaches a console handler (and optionally a file
handler) to the root logger the first time it is called.  Every
module logs through ``logging.getLogger(__name__)`` so guestbook
writes, student lookups and store faults all end up in the same
stream.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path of a file to append log records to.  Empty or ``None``
        disables the file handler.
    """
    logger = logging.getLogger()
    if logger.handlers:
        # Already configured (tests, or create_app called twice).
        return

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logfile:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # requests logs every connection at DEBUG; keep it out of INFO runs.
    logging.getLogger("urllib3").setLevel(logging.WARNING)
