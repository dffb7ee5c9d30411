"""Presence rules — whether a key may, must or must not appear.

These run before every other rule of a field. Sibling conditions look up
neighbours by their declared field name, never by JSON key.

`requiredX` rules count a sibling as present only when it is present and
non-null. `missingX` rules count any present key, null included.
"""

from enum import Enum

from jsonvalidator.engine.context import JsonContext
from jsonvalidator.errors import RuleParameterError
from jsonvalidator.models.schema import RulePredicate
from jsonvalidator.rules.context import FieldContext
from jsonvalidator.rules.values import render_scalar


class Combinator(str, Enum):
    """How the presence of several siblings is combined."""

    SINGLE = "single"
    ANY = "any"
    ALL = "all"


# ── Basic presence ──

def present(ctx: FieldContext) -> tuple[str, bool]:
    return "Key must be present", ctx.key_present


def required(ctx: FieldContext) -> tuple[str, bool]:
    return "Is a required non-nullable field", ctx.key_present and not ctx.is_null


def nullable(ctx: FieldContext) -> tuple[str, bool]:
    return "", True


# ── Sibling helpers ──

def _is_filled(json: JsonContext, allow_null: bool) -> bool:
    if allow_null:
        return json.key_present
    return json.key_present and not json.is_null


def sibling_names(ctx: FieldContext, combinator: Combinator) -> list[str]:
    if combinator is Combinator.SINGLE:
        return [ctx.param(0)]
    names = [name for name in ctx.params if name]
    if not names:
        raise RuleParameterError(f"Rule '{ctx.rule_name}' needs at least one sibling field name")
    return names


def siblings_present(ctx: FieldContext, names: list[str], combinator: Combinator, allow_null: bool) -> bool:
    """Evaluate the presence combinator over the named siblings.

    Every name is resolved, so a misspelled sibling always raises.
    """
    flags = [_is_filled(ctx.neighbor(name).json, allow_null) for name in names]
    if combinator is Combinator.ANY:
        return any(flags)
    return all(flags)


def sibling_json_keys(ctx: FieldContext, names: list[str]) -> list[str]:
    return [ctx.neighbor(name).field.json_key for name in names]


def _describe(combinator: Combinator, keys: list[str], when_present: bool) -> str:
    verb = "is present" if when_present else "is not present"
    if combinator is Combinator.SINGLE:
        return f"{keys[0]} {verb}"
    if combinator is Combinator.ANY:
        return f"any of [{','.join(keys)}] {verb}"
    return f"all of [{','.join(keys)}] {verb}"


# ── Conditional presence ──

def required_when(combinator: Combinator, when_present: bool, phrase: Combinator) -> RulePredicate:
    """Build a `requiredWith*` / `requiredWithout*` predicate.

    `combinator` decides how sibling presence is folded; the rule fires when the
    fold equals `when_present`. `phrase` only shapes the error message.
    """

    def predicate(ctx: FieldContext) -> tuple[str, bool]:
        names = sibling_names(ctx, combinator)
        triggered = siblings_present(ctx, names, combinator, allow_null=False) == when_present
        if not triggered:
            return "", True
        if required(ctx)[1]:
            return "", True
        keys = sibling_json_keys(ctx, names)
        return f"Is required when {_describe(phrase, keys, when_present)}", False

    return predicate


def missing_when(combinator: Combinator, when_present: bool, phrase: Combinator) -> RulePredicate:
    """Build a `missingWith*` / `missingWithout*` predicate."""

    def predicate(ctx: FieldContext) -> tuple[str, bool]:
        names = sibling_names(ctx, combinator)
        triggered = siblings_present(ctx, names, combinator, allow_null=True) == when_present
        if not triggered or not ctx.key_present:
            return "", True
        keys = sibling_json_keys(ctx, names)
        return f"Must not be present when {_describe(phrase, keys, when_present)}", False

    return predicate


def missing_if(ctx: FieldContext) -> tuple[str, bool]:
    sibling = ctx.neighbor(ctx.param(0))
    expected = ctx.param(1)

    if render_scalar(sibling.json.value) != expected or not ctx.key_present:
        return "", True
    return f"Must not be present when [{sibling.field.json_key}] has value [{expected}]", False


def missing_unless(ctx: FieldContext) -> tuple[str, bool]:
    sibling = ctx.neighbor(ctx.param(0))
    expected = ctx.param(1)

    if render_scalar(sibling.json.value) == expected or not ctx.key_present:
        return "", True
    return f"Must not be present unless [{sibling.field.json_key}] has value [{expected}]", False


# ── Groups ──

def group_members(ctx: FieldContext, group: str) -> list[str]:
    """Declared names of the other fields carrying this rule with the same group."""
    members = []
    self_node = ctx.validation.field
    for node in ctx.validation.parent.field.children:
        if node is self_node or node.struct_key == self_node.struct_key:
            continue
        bindings = node.validation_tag.bindings_named(ctx.rule_name)
        if any(binding.params[:1] == (group,) for binding in bindings):
            members.append(node.struct_key)
    return members


def require_one_in_group(ctx: FieldContext) -> tuple[str, bool]:
    members = group_members(ctx, ctx.param(0))
    group_of_one = not members
    self_present = required(ctx)[1]
    any_member_present = bool(members) and siblings_present(ctx, members, Combinator.ANY, allow_null=False)

    if self_present and group_of_one:
        return "", True
    if self_present and not any_member_present:
        return "", True
    if not self_present and any_member_present and not group_of_one:
        return "", True

    keys = [*sibling_json_keys(ctx, members), ctx.json_key]
    return f"Exactly one of [{','.join(keys)}] is expected to be present and non-null", False
