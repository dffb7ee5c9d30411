"""Built-in rule vocabulary.

Usage:
    registry = RuleRegistry()
    register_builtins(registry)
"""

from jsonvalidator.models.schema import RulePredicate
from jsonvalidator.rules import formats, presence, values
from jsonvalidator.rules.presence import Combinator, missing_when, required_when
from jsonvalidator.rules.registry import RuleRegistry

PRESENCE_RULES: dict[str, RulePredicate] = {
    "present": presence.present,
    "required": presence.required,
    "requiredWith": required_when(Combinator.SINGLE, True, Combinator.SINGLE),
    "requiredWithAny": required_when(Combinator.ANY, True, Combinator.ANY),
    "requiredWithAll": required_when(Combinator.ALL, True, Combinator.ALL),
    "requiredWithout": required_when(Combinator.SINGLE, False, Combinator.SINGLE),
    "requiredWithoutAny": required_when(Combinator.ALL, False, Combinator.ANY),
    "requiredWithoutAll": required_when(Combinator.ANY, False, Combinator.ALL),
    "requireOneInGroup": presence.require_one_in_group,
    "missingIf": presence.missing_if,
    "missingUnless": presence.missing_unless,
    "missingWith": missing_when(Combinator.SINGLE, True, Combinator.SINGLE),
    "missingWithAny": missing_when(Combinator.ANY, True, Combinator.ANY),
    "missingWithAll": missing_when(Combinator.ALL, True, Combinator.ALL),
    "missingWithout": missing_when(Combinator.SINGLE, False, Combinator.SINGLE),
    "missingWithoutAny": missing_when(Combinator.ALL, False, Combinator.ANY),
    "missingWithoutAll": missing_when(Combinator.ANY, False, Combinator.ALL),
}

NULLABLE_RULES: dict[str, RulePredicate] = {
    "nullable": presence.nullable,
}

VALUE_RULES: dict[str, RulePredicate] = {
    # Types
    "array": values.is_array,
    "object": values.is_object,
    "string": values.is_string,
    "int": values.is_integer,
    "float": values.is_float,
    "bool": values.is_bool,
    "json": values.is_json,
    # Length & size
    "len": values.length_exact,
    "lenMin": values.length_min,
    "lenMax": values.length_max,
    "lenBetween": values.length_between,
    "maxSize": values.max_size,
    # Numbers
    "min": values.number_min,
    "max": values.number_max,
    "between": values.number_between,
    "intBetween": values.integer_between,
    # Sets
    "in": values.value_in,
    "notIn": values.value_not_in,
    "objectMissingKeys": values.object_missing_keys,
    # Formats
    "date": formats.is_date,
    "uuid": formats.is_uuid,
    "zeroableUuid": formats.is_zeroable_uuid,
    "regex": formats.matches_regex,
    "url": formats.is_url,
    "ip": formats.is_ip,
    "email": formats.is_email,
    "phoneNumberE164": formats.is_phone_number_e164,
    "alpha2Country": formats.is_alpha2_country,
    "alpha3Currency": formats.is_alpha3_currency,
}

ALIASES: dict[str, str] = {
    "minLen": "lenMin",
    "maxLen": "lenMax",
    "nilable": "nullable",
    "boolean": "bool",
    "integer": "int",
}


def register_builtins(registry: RuleRegistry) -> RuleRegistry:
    for name, predicate in PRESENCE_RULES.items():
        registry.register_rule(name, predicate, is_presence=True)

    for name, predicate in NULLABLE_RULES.items():
        registry.register_rule(name, predicate, is_nullable=True)

    for name, predicate in VALUE_RULES.items():
        registry.register_rule(name, predicate)

    for alias, canonical in ALIASES.items():
        registry.register_alias(alias, canonical)

    return registry
