import socket

import pytest
from structlog.testing import LogCapture

from gcmstub.logs import new_logger


@pytest.fixture
def capture():
    return LogCapture()


@pytest.fixture
def logger(capture):
    return new_logger(processors=[capture])


@pytest.fixture
def free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]
