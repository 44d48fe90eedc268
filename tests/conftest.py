import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()
