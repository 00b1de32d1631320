"""
logging_config.py — Operational Logging for the Vending Service

Sets up the process-wide Python logging used by the machine, the RabbitMQ
adapters and the transaction worker. This is the operational log; the
business journal of sales, errors and restocks lives in transaction_log.py.

Output goes to SERVICE_LOG_FILE and stdout, tagged with the process ID so
that the worker and the machine process can share one file.
"""

import logging
import sys
from typing import Iterable, Union

from .config import LOG_LEVEL, SERVICE_LOG_FILE

LOG_FORMAT = '%(asctime)s - %(levelname)s - [PID:%(process)d] - %(name)s - %(message)s'

# Chatty third-party loggers, capped at WARNING
NOISY_LOGGERS = ("pika",)


def setup_logging(log_file: str = SERVICE_LOG_FILE, level: Union[int, str] = LOG_LEVEL,
                  noisy_loggers: Iterable[str] = NOISY_LOGGERS):
    """
    Configures the root logger once per process.

    Args:
        log_file (str): Operational log file. Empty string disables file output.
        level (int | str): Root level, e.g. logging.INFO or "DEBUG".
        noisy_loggers (Iterable[str]): Loggers limited to WARNING.
    """
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.insert(0, logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)

    for name in noisy_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name):
    """Logger for a component, named after its module (`__name__`)."""
    return logging.getLogger(name)
