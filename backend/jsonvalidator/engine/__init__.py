"""Validation engine — traversal contexts, schema analysis and the validator."""

from jsonvalidator.engine.context import JsonContext, ValidationContext
from jsonvalidator.engine.schema_cache import SchemaCache

__all__ = ["JsonContext", "ValidationContext", "SchemaCache"]
