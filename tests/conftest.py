import logging

import pytest


@pytest.fixture(autouse=True)
def reset_stencil_logger():
    """The CLI installs its own handler; undo that so caplog keeps working."""
    yield
    logger = logging.getLogger("stencil")
    logger.handlers = []
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
