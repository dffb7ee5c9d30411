import threading
import time
from typing import Annotated, Any, Optional

import pytest
from pydantic import BaseModel, Field
from structlog.testing import capture_logs

from jsonvalidator.errors import NotARecordError, UnknownRuleError
from jsonvalidator.markers import Embedded, Rules
from jsonvalidator.models.schema import ELEMENT_KEY, FieldKind


class Address(BaseModel):
    street: Annotated[Optional[str], Rules("required|string")] = None
    city: Annotated[Optional[str], Rules("string")] = None


class Customer(BaseModel):
    name: Annotated[Optional[str], Rules("required")] = None
    home: Optional[Address] = None
    work: Optional[Address] = None
    tags: list[str] = []
    scores: dict[str, int] = {}
    email: Optional[str] = Field(default=None, alias="emailAddress", json_schema_extra={"validation": "email"})


class Node(BaseModel):
    data: Annotated[Optional[str], Rules("required|string")] = Field(default=None, alias="Data")
    next: Optional["Node"] = Field(default=None, alias="Next")


class Audit(BaseModel):
    created_by: Annotated[Optional[str], Rules("required")] = Field(default=None, alias="createdBy")


class Document(BaseModel):
    title: Annotated[Optional[str], Rules("required")] = None
    audit: Annotated[Audit, Embedded()]


class Broken(BaseModel):
    value: Annotated[Any, Rules("required|doesNotExist")] = None


def test_record_fields_become_children_in_declaration_order(validator):
    root = validator.analyze(Customer)

    assert root.kind is FieldKind.RECORD
    assert [child.struct_key for child in root.children] == ["name", "home", "work", "tags", "scores", "email"]
    assert root.child("email").json_key == "emailAddress"
    assert [b.name for b in root.child("email").validation_tag.value_rules] == ["email"]
    assert root.child("missing") is None


def test_lists_and_maps_get_one_element_node(validator):
    root = validator.analyze(Customer)

    tags = root.child("tags")
    assert tags.kind is FieldKind.LIST
    assert len(tags.children) == 1
    assert tags.element.struct_key == ELEMENT_KEY
    assert tags.element.json_key == ELEMENT_KEY
    assert tags.element.kind is FieldKind.LEAF
    assert not tags.element.validation_tag.has_rules()

    scores = root.child("scores")
    assert scores.kind is FieldKind.MAP
    assert scores.element.kind is FieldKind.LEAF


def test_optional_record_fields_are_records(validator):
    home = validator.analyze(Customer).child("home")

    assert home.kind is FieldKind.RECORD
    assert [child.struct_key for child in home.children] == ["street", "city"]


def test_repeated_record_type_shares_children(validator):
    root = validator.analyze(Customer)

    assert root.child("work").children is root.child("home").children


def _built(logs, name):
    return [entry for entry in logs if entry["event"] == "schema_built" and entry["target"] == name]


def test_analyze_returns_identical_cached_root(validator):
    with capture_logs() as logs:
        first = validator.analyze(Customer)

        assert validator.analyze(Customer) is first
        assert validator.analyze(Optional[Customer]) is first

    assert len(_built(logs, "Customer")) == 1
    assert Customer in validator.schemas


def test_concurrent_first_use_builds_once(validator, monkeypatch):
    build = validator.schemas._build

    def slow_build(target):
        time.sleep(0.05)
        return build(target)

    monkeypatch.setattr(validator.schemas, "_build", slow_build)

    barrier = threading.Barrier(16)
    roots = []

    def worker(target):
        barrier.wait()
        roots.append(validator.analyze(target))

    threads = [threading.Thread(target=worker, args=(Address if i % 2 else Audit,)) for i in range(16)]
    with capture_logs() as logs:
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

    assert len(roots) == 16
    assert len({id(root) for root in roots}) == 2
    assert len(_built(logs, "Address")) == 1
    assert len(_built(logs, "Audit")) == 1


def test_recursive_type_closes_into_a_cycle(validator):
    root = validator.analyze(Node)
    nested = root.child("next")

    assert nested.kind is FieldKind.RECORD
    assert nested.children is root.children
    assert sum(1 for _ in root.walk()) == 3


def test_embedded_record_is_spliced_into_parent(validator):
    root = validator.analyze(Document)

    assert [child.struct_key for child in root.children] == ["title", "created_by"]
    assert root.child("created_by").json_key == "createdBy"


def test_non_record_targets_are_rejected(validator):
    with pytest.raises(NotARecordError):
        validator.analyze(int)
    with pytest.raises(NotARecordError):
        validator.analyze(list[Address])


def test_unknown_rule_fails_schema_build(validator):
    with pytest.raises(UnknownRuleError):
        validator.analyze(Broken)
    assert Broken not in validator.schemas


def test_schema_build_is_logged(validator):
    with capture_logs() as logs:
        validator.analyze(Address)
        validator.analyze(Address)

    built = [entry for entry in logs if entry["event"] == "schema_built"]
    assert len(built) == 1
    assert built[0]["target"] == "Address"
    assert built[0]["node_count"] == 3
    assert "duration_ms" in built[0]
