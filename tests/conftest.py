import logging

import pytest

from bigclock import cli


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("bigclock")
    for handler in list(logger.handlers):
        if handler.get_name() == cli.LOG_HANDLER_NAME:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(logging.NOTSET)
