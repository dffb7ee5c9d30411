import json
from typing import Annotated, Any

import pytest
from pydantic import create_model

from jsonvalidator.config import Settings
from jsonvalidator.engine.validator import Validator
from jsonvalidator.markers import Rules
from jsonvalidator.rules.registry import RuleRegistry


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def validator(settings) -> Validator:
    return Validator(settings=settings)


@pytest.fixture
def registry() -> RuleRegistry:
    return RuleRegistry.with_builtins(max_composite_depth=8)


@pytest.fixture
def check(validator):
    """Run one rule string against a single `value` key and return its messages."""

    def run(rule: str, value: Any) -> list[str]:
        sample = create_model("Sample", value=(Annotated[Any, Rules(rule)], None))
        errors = validator.collect_errors(json.dumps({"value": value}), sample)
        return errors.errors_for("value")

    return run
