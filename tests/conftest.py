import logging

import pytest
import structlog

import oasgen.logging
from oasgen.config import Settings, get_settings


@pytest.fixture(autouse=True)
def reset_state(monkeypatch):
    """Isolate tests from OASGEN_* variables and from each other's logging setup."""
    for name in list(Settings.model_fields):
        monkeypatch.delenv(f"OASGEN_{name.upper()}", raising=False)
    get_settings.cache_clear()
    monkeypatch.setattr(oasgen.logging, "_LOGGING_CONFIGURED", False)
    root_handlers = logging.getLogger().handlers[:]
    root_level = logging.getLogger().level

    yield

    get_settings.cache_clear()
    structlog.reset_defaults()
    logging.getLogger().handlers[:] = root_handlers
    logging.getLogger().setLevel(root_level)


@pytest.fixture
def settings():
    return Settings()
