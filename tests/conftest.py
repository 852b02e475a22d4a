import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any logging configuration a CLI test installed."""
    yield
    structlog.reset_defaults()
