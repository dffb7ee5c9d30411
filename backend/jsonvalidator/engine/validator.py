"""Validator — runs declared field rules over a JSON payload, then decodes it.

Each field goes through the same state machine:

    presence rules  →  absent? stop  →  null and nullable? stop
                    →  value rules   →  descend into records, lists and maps

A failing presence rule stops the field; a failing value rule stops the
descent below it. Every failure is recorded as `[ruleName]: message` under
the field's dotted JSON path.

Usage:
    validator = Validator()
    order = validator.validate(raw_json, Order)       # raises ValidationFailedError
    errors = validator.collect_errors(raw_json, Order)
"""

import json
import time
from typing import Any, Optional, TypeVar

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from jsonvalidator.config import Settings, get_settings
from jsonvalidator.engine.context import JsonContext, ValidationContext
from jsonvalidator.engine.decode import Payload, nest_embedded, parse_object, uses_embedding
from jsonvalidator.engine.introspection import normalize_type
from jsonvalidator.engine.schema_cache import SchemaCache
from jsonvalidator.errors import DecodeError, ValidationFailedError
from jsonvalidator.models.error_bag import ErrorBag
from jsonvalidator.models.schema import FieldKind, FieldSchema, Rule, RuleBinding, RulePredicate
from jsonvalidator.rules.context import FieldContext
from jsonvalidator.rules.registry import RuleRegistry

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)


class Validator:
    """Owns a rule registry and a schema cache.

    Register custom rules before the first validation. Rules registered after
    a type was analyzed do not change that type's cached schema.
    """

    def __init__(self, registry: Optional[RuleRegistry] = None, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.registry = registry or RuleRegistry.with_builtins(
            max_composite_depth=self.settings.MAX_COMPOSITE_DEPTH
        )
        self.schemas = SchemaCache(self.registry)

    # ── Vocabulary ──

    def register_rule(
        self,
        name: str,
        predicate: RulePredicate,
        is_presence: bool = False,
        is_nullable: bool = False,
    ) -> Rule:
        """Add a custom rule to this validator's vocabulary."""
        rule = self.registry.register_rule(name, predicate, is_presence=is_presence, is_nullable=is_nullable)
        logger.debug("rule_registered", rule=name, presence=is_presence, nullable=is_nullable)
        return rule

    def register_alias(self, alias: str, canonical: str) -> None:
        self.registry.register_alias(alias, canonical)
        logger.debug("rule_alias_registered", alias=alias, canonical=canonical)

    def register_composite(self, name: str, template: str) -> None:
        self.registry.register_composite(name, template)
        logger.debug("rule_composite_registered", rule=name, template=template)

    def analyze(self, target: Any) -> FieldSchema:
        """Build (or fetch) the schema graph of `target` ahead of the first payload."""
        return self.schemas.analyze(target)

    # ── Entry points ──

    def collect_errors(self, data: Payload, target: type[BaseModel]) -> ErrorBag:
        """Run every rule and return the failures without decoding.

        Raises:
            MalformedJsonError: `data` is not a JSON object
        """
        payload = parse_object(data)
        return self._check(payload, target)

    def validate(self, data: Payload, target: type[ModelT]) -> ModelT:
        """Validate `data` against the rules of `target` and decode it.

        Raises:
            MalformedJsonError: `data` is not a JSON object
            ValidationFailedError: at least one rule failed
            DecodeError: rules passed but the payload does not fit the model
        """
        start_time = time.perf_counter()
        model = normalize_type(target)

        payload = parse_object(data)
        errors = self._check(payload, model)

        duration = (time.perf_counter() - start_time) * 1000
        logger.info(
            "validation_complete",
            target=model.__name__,
            passed=errors.is_valid(),
            total_errors=errors.count_errors(),
            duration_ms=round(duration, 2),
        )

        if errors.is_invalid():
            raise ValidationFailedError(errors)

        return self._decode(data, payload, model)

    # ── Traversal ──

    def _check(self, payload: dict, target: Any) -> ErrorBag:
        schema = self.schemas.analyze(target)
        errors = ErrorBag()
        root = ValidationContext(json=JsonContext.root(payload), field=schema)
        self._walk([root.child(child) for child in schema.children], errors)
        return errors

    def validate_field(self, ctx: ValidationContext, errors: ErrorBag) -> None:
        """Run the field state machine for `ctx` and every context below it."""
        self._walk([ctx], errors)

    def _walk(self, contexts: list[ValidationContext], errors: ErrorBag) -> None:
        # Children are pushed reversed to keep depth-first declaration order
        stack = list(reversed(contexts))
        while stack:
            ctx = stack.pop()
            stack.extend(reversed(self._visit(ctx, errors)))

    def _visit(self, ctx: ValidationContext, errors: ErrorBag) -> list[ValidationContext]:
        """Run the gates for one context; return the contexts to descend into."""
        tag = ctx.validation_tag

        if self._run_rules(ctx, tag.presence_rules, errors):
            return []
        if not ctx.json.key_present:
            return []
        if ctx.json.is_null and tag.explicitly_nullable:
            return []
        if self._run_rules(ctx, tag.value_rules, errors):
            return []
        if ctx.json.is_null:
            return []

        field = ctx.field
        if field.kind is FieldKind.RECORD:
            # A non-object value still visits the children, which then see
            # themselves as absent
            return [ctx.child(child) for child in field.children]
        if field.kind is FieldKind.LIST and isinstance(ctx.json.value, list):
            return [ctx.child(field.element, str(index)) for index in range(len(ctx.json.value))]
        if field.kind is FieldKind.MAP and isinstance(ctx.json.value, dict):
            return [ctx.child(field.element, key) for key in ctx.json.value]
        return []

    @staticmethod
    def _run_rules(ctx: ValidationContext, bindings: tuple[RuleBinding, ...], errors: ErrorBag) -> bool:
        """Run `bindings` in order; True if any of them failed."""
        failed = False
        for binding in bindings:
            field_ctx = FieldContext(validation=ctx, rule_name=binding.name, params=binding.params)
            message, ok = binding.rule.predicate(field_ctx)
            if not ok:
                failed = True
                errors.add_error(ctx.json.path, f"[{binding.name}]: {message}")
        return failed

    # ── Decoding ──

    def _decode(self, data: Payload, payload: dict, model: type[ModelT]) -> ModelT:
        raw = data
        if uses_embedding(model):
            try:
                raw = json.dumps(nest_embedded(model, payload))
            except RecursionError as e:
                raise DecodeError(f"Payload is nested too deeply to decode into {model.__name__}") from e

        try:
            return model.model_validate_json(raw, strict=self.settings.STRICT_DECODE)
        except PydanticValidationError as e:
            logger.warning(
                "decode_fallback_error",
                target=model.__name__,
                error_count=e.error_count(),
                error=str(e),
            )
            raise DecodeError(
                f"Payload passed validation but could not be decoded into {model.__name__}: {e}",
                cause=e,
            ) from e


# Module-level singleton
validator = Validator()
