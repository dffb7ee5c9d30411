"""Schema Cache — analyzes record types once and shares the resulting graph.

A record type is turned into a graph of `FieldSchema` nodes: one node per
declared field, plus one synthetic `{index}` element node under every list
or map. Recursive types close into a cycle instead of expanding forever.

Usage:
    cache = SchemaCache(registry)
    root = cache.analyze(Order)
    assert cache.analyze(Order) is root
"""

import threading
import time
from typing import Any

import structlog
from pydantic import BaseModel

from jsonvalidator.engine.introspection import (
    element_type_of,
    ensure_complete,
    is_record_type,
    kind_of,
    memo_key,
    normalize_type,
)
from jsonvalidator.errors import NotARecordError
from jsonvalidator.markers import is_embedded, json_key_of, rule_string_of
from jsonvalidator.models.schema import ELEMENT_KEY, FieldKind, FieldSchema
from jsonvalidator.rules.registry import RuleRegistry

logger = structlog.get_logger()


class SchemaCache:
    """Per-validator cache of analyzed record types.

    Reads are lock-free. A miss takes the lock of that one type, so
    concurrent first uses of the same type build it exactly once while
    unrelated types build in parallel.
    """

    def __init__(self, registry: RuleRegistry):
        self.registry = registry
        self._schemas: dict[Any, FieldSchema] = {}
        self._type_locks: dict[Any, threading.Lock] = {}
        self._root_lock = threading.Lock()

    def analyze(self, target: Any) -> FieldSchema:
        """Root node of the schema graph for `target`, building it on first use."""
        target = normalize_type(target)
        if not is_record_type(target):
            raise NotARecordError(f"Cannot analyze {target!r}: validation targets must be pydantic models")

        schema = self._schemas.get(target)
        if schema is not None:
            return schema

        with self._lock_for(target):
            schema = self._schemas.get(target)
            if schema is None:
                schema = self._build(target)
                self._schemas[target] = schema
        return schema

    def __contains__(self, target: Any) -> bool:
        return normalize_type(target) in self._schemas

    def _lock_for(self, target: type[BaseModel]) -> threading.Lock:
        with self._root_lock:
            return self._type_locks.setdefault(target, threading.Lock())

    # ── Building ──

    def _build(self, target: type[BaseModel]) -> FieldSchema:
        start_time = time.perf_counter()

        root = FieldSchema(kind=FieldKind.RECORD, struct_key="", json_key="", annotation=target)
        memo: dict[Any, FieldSchema] = {target: root}
        self._expand(root, memo)

        duration = (time.perf_counter() - start_time) * 1000
        logger.info(
            "schema_built",
            target=target.__name__,
            node_count=sum(1 for _ in root.walk()),
            duration_ms=round(duration, 2),
        )
        return root

    def _expand(self, node: FieldSchema, memo: dict[Any, FieldSchema]) -> None:
        if node.kind is FieldKind.RECORD:
            self._expand_record(node, memo)
        elif node.kind in (FieldKind.LIST, FieldKind.MAP):
            self._expand_element(node, memo)

    def _expand_record(self, parent: FieldSchema, memo: dict[Any, FieldSchema]) -> None:
        model = parent.annotation
        ensure_complete(model)

        for name, info in model.model_fields.items():
            field_type = normalize_type(info.annotation)
            node = FieldSchema(
                kind=kind_of(field_type),
                struct_key=name,
                json_key=json_key_of(name, info),
                validation_tag=self.registry.resolve_tag(rule_string_of(info)),
                parent=parent,
                annotation=field_type,
                embedded=is_embedded(info),
            )

            if node.embedded and node.kind is not FieldKind.RECORD:
                raise NotARecordError(
                    f"Embedded field {model.__name__}.{name} must be a pydantic model, got {field_type!r}"
                )

            self._link(node, memo)
            if node.embedded:
                # The embedded record's fields behave as if declared here
                parent.children.extend(node.children)
            else:
                parent.children.append(node)

    def _expand_element(self, parent: FieldSchema, memo: dict[Any, FieldSchema]) -> None:
        element_type = normalize_type(element_type_of(parent.annotation, parent.kind))
        node = FieldSchema(
            kind=kind_of(element_type),
            struct_key=ELEMENT_KEY,
            json_key=ELEMENT_KEY,
            parent=parent,
            annotation=element_type,
        )
        self._link(node, memo)
        parent.children.append(node)

    def _link(self, node: FieldSchema, memo: dict[Any, FieldSchema]) -> None:
        """Expand `node`, or share the children of an earlier node of the same type."""
        if node.kind is FieldKind.LEAF:
            return

        key = memo_key(node.annotation)
        if key is None:
            self._expand(node, memo)
            return

        first = memo.get(key)
        if first is not None:
            node.children = first.children
            return

        memo[key] = node
        self._expand(node, memo)
