"""Error types — recoverable validation outcomes vs. configuration faults.

Callers catch `JsonValidatorError` for problems with untrusted input. A
`ConfigurationFault` is a mistake in the declared rules or target types.
"""

from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from jsonvalidator.models.error_bag import ErrorBag


# ── Recoverable ──

class JsonValidatorError(Exception):
    """Base class for every error caused by the payload itself."""


class MalformedJsonError(JsonValidatorError):
    """The payload is not syntactically valid JSON (or not a JSON object)."""


class ValidationFailedError(JsonValidatorError):
    """One or more declared rules failed. The full report is in `errors`."""

    def __init__(self, errors: ErrorBag):
        super().__init__(str(errors))
        self.errors = errors


class DecodeError(JsonValidatorError):
    """Rules passed, but the payload still does not decode into the target type."""

    def __init__(self, message: str, cause: Optional[PydanticValidationError] = None):
        super().__init__(message)
        self.cause = cause


# ── Faults ──

class ConfigurationFault(Exception):
    """Programmer or configuration error. Never a property of the payload."""


class UnknownRuleError(ConfigurationFault):
    """A rule string references a name that is not registered anywhere."""


class CompositeCycleError(ConfigurationFault):
    """Composite rules expand into themselves (or nest too deeply)."""


class RuleParameterError(ConfigurationFault):
    """A rule parameter is missing or cannot be parsed as the expected type."""


class UnknownFieldError(ConfigurationFault):
    """A cross-field rule references a sibling that does not exist."""


class NotARecordError(ConfigurationFault):
    """Schema analysis was asked for something that is not a record type."""
