from typing import Optional

import pytest
import structlog
from pydantic import BaseModel

from jsonvalidator.config import Settings, get_settings
from jsonvalidator.engine.validator import Validator
from jsonvalidator.logging_setup import configure_logging


class Counter(BaseModel):
    count: Optional[int] = None


@pytest.fixture
def reset_logging():
    yield
    structlog.reset_defaults()


def test_defaults(settings):
    assert settings.LOG_LEVEL == "info"
    assert settings.DEBUG is False
    assert settings.STRICT_DECODE is True
    assert settings.MAX_COMPOSITE_DEPTH == 8


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("JSONVALIDATOR_MAX_COMPOSITE_DEPTH", "3")
    monkeypatch.setenv("JSONVALIDATOR_STRICT_DECODE", "false")

    settings = Settings(_env_file=None)
    assert settings.MAX_COMPOSITE_DEPTH == 3
    assert settings.STRICT_DECODE is False


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_validator_takes_composite_depth_from_settings():
    validator = Validator(settings=Settings(_env_file=None, MAX_COMPOSITE_DEPTH=2))

    assert validator.registry.max_composite_depth == 2


def test_lax_decode_coerces_numeric_strings():
    validator = Validator(settings=Settings(_env_file=None, STRICT_DECODE=False))

    assert validator.validate('{"count": "3"}', Counter).count == 3


@pytest.mark.parametrize("debug", [True, False])
def test_configure_logging_installs_processor_chain(reset_logging, debug):
    configure_logging(Settings(_env_file=None, DEBUG=debug, LOG_LEVEL="warning"))

    processors = structlog.get_config()["processors"]
    renderer = structlog.dev.ConsoleRenderer if debug else structlog.processors.JSONRenderer
    assert isinstance(processors[-1], renderer)


def test_unknown_log_level_falls_back_to_info(reset_logging):
    configure_logging(Settings(_env_file=None, LOG_LEVEL="chatty"))

    assert structlog.get_config()["wrapper_class"] is structlog.make_filtering_bound_logger(20)
