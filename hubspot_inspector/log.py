"""Logging configuration for hubspot-inspector.

Verbosity levels:
- 0 (default): WARNING - ambiguous lookups and other warnings only
- 1 (-v):      INFO - directory fetches, resolutions, verdict outcomes
- 2+ (-vv):    DEBUG - every HTTP request (auth redacted) and pipeline stage

Log output goes to stderr so that ``--json`` output on stdout stays parseable.
"""

import logging
import sys

LOGGER_NAME = "hubspot_inspector"


def setup_logging(verbosity: int = 0, quiet: bool = False) -> logging.Logger:
    """Configure the package logger.

    Args:
        verbosity: Number of -v flags (0=WARNING, 1=INFO, 2+=DEBUG)
        quiet: If True, suppress everything except errors

    Returns:
        The configured ``hubspot_inspector`` logger
    """
    if quiet:
        level = logging.ERROR
    elif verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    if verbosity >= 2:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%H:%M:%S"
        )
    elif verbosity == 1:
        formatter = logging.Formatter("[%(levelname)s] %(message)s")
    else:
        formatter = logging.Formatter("%(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
