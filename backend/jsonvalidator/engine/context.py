"""Traversal contexts — one per visited field, joining schema, JSON value and path."""

from dataclasses import dataclass, field
from typing import Any, Optional

from jsonvalidator.errors import UnknownFieldError
from jsonvalidator.models.schema import FieldSchema, ValidationTag


@dataclass(frozen=True)
class JsonContext:
    """What the payload holds at one path."""

    path: str
    key_present: bool
    is_null: bool
    value: Any = None

    @classmethod
    def root(cls, value: Any) -> "JsonContext":
        return cls(path="", key_present=True, is_null=value is None, value=value)

    @classmethod
    def absent(cls, path: str) -> "JsonContext":
        return cls(path=path, key_present=False, is_null=False, value=None)

    @classmethod
    def of(cls, path: str, value: Any) -> "JsonContext":
        return cls(path=path, key_present=True, is_null=value is None, value=value)

    def lookup(self, key: str) -> "JsonContext":
        """Context of `key` inside this value (object key or array index)."""
        path = f"{self.path}.{key}".lstrip(".")

        if not self.key_present:
            return JsonContext.absent(path)

        if isinstance(self.value, dict):
            if key in self.value:
                return JsonContext.of(path, self.value[key])
            return JsonContext.absent(path)

        if isinstance(self.value, list):
            if key.isdigit() and int(key) < len(self.value):
                return JsonContext.of(path, self.value[int(key)])
            return JsonContext.absent(path)

        return JsonContext.absent(path)


@dataclass
class ValidationContext:
    """A node of the traversal tree (not of the schema graph)."""

    json: JsonContext
    field: FieldSchema
    parent: Optional["ValidationContext"] = field(default=None, repr=False)
    root: Optional["ValidationContext"] = field(default=None, repr=False)

    def __post_init__(self):
        if self.root is None:
            self.root = self

    @property
    def validation_tag(self) -> ValidationTag:
        return self.field.validation_tag

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def child(self, schema: FieldSchema, key: Optional[str] = None) -> "ValidationContext":
        """Context for `schema` below this one, looked up under `key` (default: its JSON key)."""
        return ValidationContext(
            json=self.json.lookup(schema.json_key if key is None else key),
            field=schema,
            parent=self,
            root=self.root,
        )

    def neighbor(self, struct_key: str) -> "ValidationContext":
        """Sibling field by its declared (not JSON) name."""
        if self.is_root:
            raise UnknownFieldError(f"The root record has no sibling named {struct_key}")

        sibling = self.parent.field.child(struct_key)
        if sibling is None:
            raise UnknownFieldError(
                f"No such field within record: {struct_key} - "
                "cross field references must use the declared field name, not the json key"
            )
        return self.parent.child(sibling)
