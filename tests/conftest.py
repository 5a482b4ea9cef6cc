import pytest
import structlog

from service_utils.logging import DEFAULT_FILTER_ENV, reset_logging


@pytest.fixture(autouse=True)
def isolated_logging(monkeypatch):
    """
    Every test starts with structlog defaults and no installed pipeline.

    setup_logs() installs process-wide state, so it is torn down afterwards.
    """
    monkeypatch.delenv(DEFAULT_FILTER_ENV, raising=False)
    reset_logging()
    yield
    reset_logging()
    structlog.reset_defaults()
