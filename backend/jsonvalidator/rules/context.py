"""Field context — the view a rule predicate gets of the field under validation.

Contract:
    - predicates receive a `FieldContext` and return `(message, ok)`
    - `message` is only shown when `ok` is False
    - parameters are author-controlled, so a bad parameter raises
      `RuleParameterError` instead of failing validation
"""

from dataclasses import dataclass
from typing import Any

from jsonvalidator.engine.context import ValidationContext
from jsonvalidator.errors import RuleParameterError


@dataclass(frozen=True)
class FieldContext:
    validation: ValidationContext
    rule_name: str
    params: tuple[str, ...] = ()

    # ── Payload facts ──

    @property
    def value(self) -> Any:
        return self.validation.json.value

    @property
    def is_null(self) -> bool:
        return self.validation.json.is_null

    @property
    def key_present(self) -> bool:
        return self.validation.json.key_present

    @property
    def path(self) -> str:
        return self.validation.json.path

    @property
    def json_key(self) -> str:
        return self.validation.field.json_key

    @property
    def struct_key(self) -> str:
        return self.validation.field.struct_key

    # ── Parameters ──

    def param(self, index: int) -> str:
        try:
            return self.params[index]
        except IndexError:
            raise RuleParameterError(
                f"Rule '{self.rule_name}' expects a parameter at position {index}, got {len(self.params)}"
            ) from None

    def int_param(self, index: int) -> int:
        raw = self.param(index)
        try:
            return int(raw.strip())
        except ValueError:
            raise RuleParameterError(
                f"Rule '{self.rule_name}' parameter {index} must be an integer, got '{raw}'"
            ) from None

    def float_param(self, index: int) -> float:
        raw = self.param(index)
        try:
            return float(raw.strip())
        except ValueError:
            raise RuleParameterError(
                f"Rule '{self.rule_name}' parameter {index} must be a number, got '{raw}'"
            ) from None

    # ── Siblings ──

    def neighbor(self, struct_key: str) -> ValidationContext:
        return self.validation.neighbor(struct_key)
