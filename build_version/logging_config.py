"""
Logging configuration for the build version resolver.

Centralized logging setup so the resolver, the configuration loader and the
command line front end all write through the same loguru sink.
"""

import sys
from loguru import logger
from rich.console import Console


def setup_logging(log_level: str = 'INFO', console: Console = None) -> None:
    """
    Set up logging configuration, optionally through a shared Rich console.

    Logs go to stderr so stdout carries only the version string.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console: Rich Console instance for coordinated output (optional)
    """
    logger.remove()

    if console:
        logger.add(
            lambda msg: console.print(msg, end='', markup=False, highlight=False),
            level=log_level,
            format='<green>{time:YYYY/MM/DD HH:mm:ss}</green> | {level: <8} - <level>{message}</level>'
        )
    else:
        logger.add(
            sys.stderr,
            level=log_level,
            format='<green>{time:YYYY/MM/DD HH:mm:ss}</green> | {level: <8} - <level>{message}</level>',
            colorize=True
        )
