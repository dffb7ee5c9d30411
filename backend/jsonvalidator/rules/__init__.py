"""Rule vocabulary — the registry, the predicate contract and the built-in rules."""

from jsonvalidator.rules.registry import RuleRegistry
from jsonvalidator.rules.context import FieldContext

__all__ = ["RuleRegistry", "FieldContext"]
