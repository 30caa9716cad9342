from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

LOGGING_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure the logging module once for the whole application.

    Logs always go to the console. When ``log_file`` is set they are also
    written to a file rotated at midnight and kept for 7 days.
    """

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.TimedRotatingFileHandler(
                filename=log_file,
                when="midnight",
                interval=1,
                backupCount=7,
                encoding="utf-8",
            )
        )

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOGGING_FORMAT,
        handlers=handlers,
    )
