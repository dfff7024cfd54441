"""
Logging setup for the service.

Everything is funnelled through the root logger: application modules
log via ``logging.getLogger(__name__)`` and the uvicorn loggers are
made to propagate instead of writing through their own handlers, so
one format and one destination apply to the whole process.
"""

import logging
from pathlib import Path
from typing import List, Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _build_handlers(logfile: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Attach the service's handlers to the root logger.

    Does nothing when the root logger already has handlers, so calling
    ``create_app`` repeatedly (as the tests do) never duplicates output.
    ``level`` is a level name in any case; unknown names mean ``INFO``.
    An optional ``logfile`` receives the same records as the console.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in _build_handlers(logfile):
        root.addHandler(handler)

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True
