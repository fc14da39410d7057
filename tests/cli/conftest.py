import logging

import pytest


@pytest.fixture(autouse=True)
def restore_root_logger():
    # The CLI reconfigures the root logger against CliRunner's temporary streams
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
