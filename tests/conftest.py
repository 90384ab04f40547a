# pylint: disable=redefined-outer-name


import logging

import pytest

import saltapi.log
from tests.support.helpers import ENDPOINT, SaltAPIServer


@pytest.fixture
def api_opts():
    return {
        "endpoint": ENDPOINT,
        "user": "saltdev",
        "pass": "saltdev",
    }


@pytest.fixture
def salt_api():
    return SaltAPIServer()


@pytest.fixture(autouse=True)
def reset_console_logging():
    root_level = logging.root.level
    try:
        yield
    finally:
        saltapi.log.shutdown_console_handler()
        logging.root.setLevel(root_level)
