"""jsonvalidator — declarative validation of JSON payloads against pydantic records.

Fields carry pipe-separated rule strings. A payload is checked rule by rule
before it is decoded, and every failure is reported under its JSON path.

Usage:
    class Customer(BaseModel):
        name: Annotated[str, Rules("required|string|lenBetween:1,80")]
        email: Annotated[Optional[str], Rules("nullable|email")] = None
        country: Annotated[str, Rules("required|alpha2Country")] = Field(alias="countryCode")

    try:
        customer = validate(raw_json, Customer)
    except ValidationFailedError as e:
        print(e.errors.errors_for("countryCode"))
"""

from jsonvalidator.config import Settings, get_settings
from jsonvalidator.errors import (
    CompositeCycleError,
    ConfigurationFault,
    DecodeError,
    JsonValidatorError,
    MalformedJsonError,
    NotARecordError,
    RuleParameterError,
    UnknownFieldError,
    UnknownRuleError,
    ValidationFailedError,
)
from jsonvalidator.logging_setup import configure_logging
from jsonvalidator.markers import Embedded, Rules
from jsonvalidator.models import ErrorBag, FieldKind, FieldSchema
from jsonvalidator.rules import FieldContext, RuleRegistry
from jsonvalidator.engine.validator import Validator, validator


def validate(data, target):
    """Validate and decode with the shared default validator."""
    return validator.validate(data, target)


def collect_errors(data, target) -> ErrorBag:
    """Collect rule failures with the shared default validator."""
    return validator.collect_errors(data, target)


__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "Rules",
    "Embedded",
    "ErrorBag",
    "FieldKind",
    "FieldSchema",
    "FieldContext",
    "RuleRegistry",
    "Validator",
    "validator",
    "validate",
    "collect_errors",
    "JsonValidatorError",
    "MalformedJsonError",
    "ValidationFailedError",
    "DecodeError",
    "ConfigurationFault",
    "UnknownRuleError",
    "CompositeCycleError",
    "RuleParameterError",
    "UnknownFieldError",
    "NotARecordError",
]
