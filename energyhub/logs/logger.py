# energyhub/logs/logger.py

"""
Per-run log files.

Each (run, scenario) pair logs to ``<run_name>_<scenario>.log`` in the log
directory and to the console.
"""

import logging
import os
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_logger(run_name: str, scenario: str, log_dir: Optional[str] = None,
               level: Union[int, str] = logging.INFO) -> logging.Logger:
    """
    Return a logger writing to a run/scenario log file and the console.

    Repeated calls with the same run and scenario return the same logger
    without adding handlers twice.

    Parameters
    ----------
    run_name : str
        Name of the batch run.
    scenario : str
        Scenario (or location_scenario) name.
    log_dir : str, optional
        Directory of the log file; default ``logs`` in the working directory.
    level : int or str
        Logging level, e.g. ``'INFO'``.
    """
    log_dir = log_dir or 'logs'
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.abspath(os.path.join(log_dir, f"{run_name}_{scenario}.log"))

    logger = logging.getLogger(f"energyhub.runs.{run_name}.{scenario}")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.propagate = False

    formatter = logging.Formatter(LOG_FORMAT)
    has_file = any(isinstance(h, logging.FileHandler) and h.baseFilename == log_path
                   for h in logger.handlers)
    if not has_file:
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    has_console = any(type(h) is logging.StreamHandler for h in logger.handlers)
    if not has_console:
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        logger.addHandler(console)

    return logger


def close_logger(logger: logging.Logger) -> None:
    """Close and detach every handler of a run logger, releasing its log file."""
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
