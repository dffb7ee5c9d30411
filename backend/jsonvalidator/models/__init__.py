"""Value types shared by the registry, the schema cache and the engine."""

from jsonvalidator.models.error_bag import ErrorBag
from jsonvalidator.models.schema import (
    ELEMENT_KEY,
    EMPTY_TAG,
    FieldKind,
    FieldSchema,
    Rule,
    RuleBinding,
    RulePredicate,
    ValidationTag,
)

__all__ = [
    "ErrorBag",
    "ELEMENT_KEY",
    "EMPTY_TAG",
    "FieldKind",
    "FieldSchema",
    "Rule",
    "RuleBinding",
    "RulePredicate",
    "ValidationTag",
]
