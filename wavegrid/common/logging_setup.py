"""
Handlers for the 'wavegrid' logger, used by scripts/. The library itself only
creates module loggers and never configures output.
"""
import logging
import sys
from typing import Optional

FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> logging.Logger:
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger("wavegrid")
    logger.setLevel(level)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    formatter = logging.Formatter(FORMAT, datefmt="%H:%M:%S")
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))
    for h in handlers:
        h.setFormatter(formatter)
        logger.addHandler(h)
    return logger
