"""Schema types — rules, rule bindings, validation tags and the field graph.

Everything here is built once (at registration or schema analysis time) and
then only read, so instances are safely shared across threads.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional

if TYPE_CHECKING:
    from jsonvalidator.rules.context import FieldContext

# A predicate returns (message, ok). The message is only used when ok is False.
RulePredicate = Callable[["FieldContext"], tuple[str, bool]]


@dataclass(frozen=True)
class Rule:
    """A registered predicate under its canonical name."""

    name: str
    predicate: RulePredicate
    is_presence: bool = False
    is_nullable: bool = False


@dataclass(frozen=True)
class RuleBinding:
    """A rule bound to concrete parameters and the name it was invoked by."""

    rule: Rule
    name: str
    params: tuple[str, ...] = ()

    @property
    def is_presence(self) -> bool:
        return self.rule.is_presence

    @property
    def is_nullable(self) -> bool:
        return self.rule.is_nullable

    def __str__(self) -> str:
        if not self.params:
            return self.name
        return f"{self.name}:{','.join(self.params)}"


@dataclass(frozen=True)
class ValidationTag:
    """Resolved rule string of one field, split by evaluation phase."""

    value_rules: tuple[RuleBinding, ...] = ()
    presence_rules: tuple[RuleBinding, ...] = ()
    explicitly_nullable: bool = False

    @classmethod
    def from_bindings(cls, bindings: list[RuleBinding]) -> "ValidationTag":
        return cls(
            value_rules=tuple(b for b in bindings if not b.is_presence),
            presence_rules=tuple(b for b in bindings if b.is_presence),
            explicitly_nullable=any(b.is_nullable for b in bindings),
        )

    def has_rules(self) -> bool:
        return bool(self.value_rules or self.presence_rules)

    def bindings_named(self, name: str) -> list[RuleBinding]:
        """All bindings (either phase) invoked under `name`."""
        return [b for b in (*self.presence_rules, *self.value_rules) if b.name == name]


EMPTY_TAG = ValidationTag()


class FieldKind(str, Enum):
    """Structural kind of a schema node."""

    RECORD = "record"
    LIST = "list"
    MAP = "map"
    LEAF = "leaf"


ELEMENT_KEY = "{index}"


@dataclass(eq=False)
class FieldSchema:
    """One node of the schema graph.

    `children` is owned by this node unless the node closes a recursive type,
    in which case it is the very same list object as the first node built for
    that type (a back-edge, not a copy).
    """

    kind: FieldKind
    struct_key: str
    json_key: str
    validation_tag: ValidationTag = EMPTY_TAG
    parent: Optional["FieldSchema"] = field(default=None, repr=False)
    children: list["FieldSchema"] = field(default_factory=list, repr=False)
    annotation: Any = field(default=None, repr=False)
    embedded: bool = False

    @property
    def element(self) -> Optional["FieldSchema"]:
        """The synthetic element node of a LIST or MAP."""
        if self.kind in (FieldKind.LIST, FieldKind.MAP) and self.children:
            return self.children[0]
        return None

    def child(self, struct_key: str) -> Optional["FieldSchema"]:
        for candidate in self.children:
            if candidate.struct_key == struct_key:
                return candidate
        return None

    def walk(self) -> Iterator["FieldSchema"]:
        """Yield every reachable node exactly once, following back-edges safely."""
        seen: set[int] = set()
        stack = [self]
        while stack:
            node = stack.pop()
            if id(node) in seen:
                continue
            seen.add(id(node))
            yield node
            stack.extend(reversed(node.children))
