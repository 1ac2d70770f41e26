import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """CLI tests attach a stderr handler to the package logger; drop it afterwards."""
    yield
    logger = logging.getLogger("hubspot_inspector")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
