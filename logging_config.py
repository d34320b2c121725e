"""Console and file logging for the phonebook service.

Every request handler logs through ``logging.getLogger(__name__)``.
uvicorn is started without its own logging config (see ``main.run``),
so its ``uvicorn.error`` and ``uvicorn.access`` records reach the same
handlers and share one format.
"""

import logging
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _build_handlers(logfile: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(level: str = "INFO", logfile: Optional[str] = None, logger_name: Optional[str] = None) -> None:
    """Attach the service's handlers to a logger, the root logger by default.

    ``create_app`` calls this for every app it builds, so a logger that
    already has handlers is left alone.  Unknown level names mean ``INFO``.
    """
    logger = logging.getLogger(logger_name)
    if logger.handlers:
        return
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in _build_handlers(logfile):
        logger.addHandler(handler)
