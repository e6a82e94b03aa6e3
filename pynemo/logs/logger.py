# pynemo/logs/logger.py

"""
Logger setup for a scenario run.

Each run gets its own logger, ``pynemo.<scenario>.<run_name>``, writing to
``<log_dir>/<scenario>_<run_name>.log`` and, unless quiet, to the console.
"""

import logging
import os
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _has_handler(logger: logging.Logger, kind: type, target: Optional[str] = None) -> bool:
    for handler in logger.handlers:
        if type(handler) is not kind:
            continue
        if target is None or getattr(handler, "baseFilename", None) == target:
            return True
    return False


def get_logger(
    run_name: str,
    scenario: str,
    log_dir: str,
    level: Union[str, int] = "INFO",
    quiet: bool = False,
) -> logging.Logger:
    """
    Get (or configure) the logger for one scenario run.

    Parameters
    ----------
    run_name : str
        Name of the run, e.g. a timestamp or year group.
    scenario : str
        Scenario name.
    log_dir : str
        Directory for the log file; created if missing.
    level : str or int, optional
        Logging level (default "INFO").
    quiet : bool, optional
        If True, do not log to the console.

    Returns
    -------
    logging.Logger
        Calling this again with the same names returns the same logger
        without adding duplicate handlers.
    """
    os.makedirs(log_dir, exist_ok=True)
    logger = logging.getLogger(f"pynemo.{scenario}.{run_name}")
    logger.setLevel(level)
    logger.propagate = False
    formatter = logging.Formatter(LOG_FORMAT)

    log_path = os.path.abspath(os.path.join(log_dir, f"{scenario}_{run_name}.log"))
    if not _has_handler(logger, logging.FileHandler, log_path):
        file_handler = logging.FileHandler(log_path, mode="a")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if not quiet and not _has_handler(logger, logging.StreamHandler):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger
