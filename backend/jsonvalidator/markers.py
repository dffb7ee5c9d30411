"""Field markers — how record models declare rule strings and embedding.

Usage:
    class Payment(BaseModel):
        amount: Annotated[int, Rules("required|integer|min:1")]
        currency: Annotated[str, Rules("required|alpha3Currency")] = Field(alias="cur")
        audit: Annotated[AuditInfo, Embedded()]
"""

from dataclasses import dataclass
from typing import Optional

from pydantic.fields import FieldInfo

VALIDATION_EXTRA_KEY = "validation"


@dataclass(frozen=True)
class Rules:
    """Pipe-separated rule string attached to a field via `Annotated`."""

    definition: str


@dataclass(frozen=True)
class Embedded:
    """Splice the annotated record's fields into the enclosing record."""


def rule_string_of(info: FieldInfo) -> str:
    """The declared rule string of a field, or "" when it has none."""
    for meta in info.metadata:
        if isinstance(meta, Rules):
            return meta.definition
    extra = info.json_schema_extra
    if isinstance(extra, dict):
        value = extra.get(VALIDATION_EXTRA_KEY)
        if isinstance(value, str):
            return value
    return ""


def is_embedded(info: FieldInfo) -> bool:
    return any(isinstance(meta, Embedded) for meta in info.metadata)


def json_key_of(name: str, info: FieldInfo) -> str:
    """JSON key of a field: its alias when one is declared, else its name."""
    alias: Optional[str] = None
    if isinstance(info.validation_alias, str):
        alias = info.validation_alias
    elif info.alias:
        alias = info.alias
    return alias or name
