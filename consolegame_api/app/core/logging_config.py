"""
Logging setup for the web application and the query tool.

``setup_logging`` installs a console handler (and a file handler when
``LOG_FILE`` is set) on the root logger the first time it is called.
The MongoDB driver logs every command and connection event at DEBUG
level, so its loggers are held at WARNING unless the application itself
runs at DEBUG.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DRIVER_LOGGERS = ("pymongo", "mongodb")


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    driver_loggers: Iterable[str] = DRIVER_LOGGERS,
) -> None:
    """Configure the root logger once.

    Parameters
    ----------
    level : str
        Logging level name, case insensitive.  Unknown names fall back
        to ``INFO``.
    logfile : Optional[str]
        Path of a UTF-8 log file written in addition to the console.
    driver_loggers : Iterable[str]
        Logger names of the database driver to keep at WARNING.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    if numeric_level > logging.DEBUG:
        for name in driver_loggers:
            logging.getLogger(name).setLevel(logging.WARNING)
