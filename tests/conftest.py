import pytest

from utils.logger import setup_logger


@pytest.fixture(autouse=True)
def console_only_logging():
    """Keep log output on the captured stderr of each test and out of the home directory."""
    setup_logger(log_level="DEBUG", log_file=None)
    yield
    setup_logger(log_level="DEBUG", log_file=None)
