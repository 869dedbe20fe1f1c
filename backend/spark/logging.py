"""
Logging configuration for the Spark API.
"""

import logging
import sys


def setup_logging(debug: bool = False) -> logging.Logger:
    """
    Configure application logging.

    :param debug: Log at DEBUG level instead of INFO
    :type debug: bool
    :return: Root logger for the Spark application
    :rtype: logging.Logger
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    return logging.getLogger('spark')


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    :param name: The module name for the logger
    :type name: str
    :return: Logger instance for the specified module
    :rtype: logging.Logger
    """
    return logging.getLogger(f'spark.{name}')
