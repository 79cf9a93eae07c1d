"""Global test configuration for threadfit tests."""

import os

import pytest
import structlog

from threadfit.core.config import SegmenterConfig
from threadfit.core.logging import configure_default_logging


@pytest.fixture
def config():
    """Default 100/280 policy."""
    return SegmenterConfig()


@pytest.fixture(autouse=True)
def reset_structlog():
    """CLI tests configure structlog against captured streams; restore the library defaults."""
    yield
    structlog.reset_defaults()
    configure_default_logging()


@pytest.fixture(autouse=True)
def isolate_settings_env(monkeypatch):
    """Keep host THREADFIT_* variables from leaking into settings tests."""
    for key in list(os.environ):
        if key.startswith("THREADFIT_") or key in ("LOG_FORMAT", "LOG_LEVEL"):
            monkeypatch.delenv(key, raising=False)
