"""Rule registry — named predicates, aliases and composite (macro) rules.

Rule strings look like `required|lenBetween:2,10|in:a,b`. Each token is
`name[:p0,p1,...]`. A name resolves, in order, through:

    alias chain  →  composite template (expanded recursively)  →  plain rule

Usage:
    registry = RuleRegistry.with_builtins()
    registry.register_alias("minLength", "lenMin")
    registry.register_composite("shortCode", "required|string|lenBetween:$0,$1")
    tag = registry.resolve_tag("shortCode:2,3")
"""

import re
from typing import Callable, Optional

from jsonvalidator.config import get_settings
from jsonvalidator.errors import CompositeCycleError, RuleParameterError, UnknownRuleError
from jsonvalidator.models.schema import Rule, RuleBinding, RulePredicate, ValidationTag, EMPTY_TAG

PLACEHOLDER = re.compile(r"\$(\d+)")


class RuleRegistry:
    """Vocabulary of one validator. Populate it before the first validation run.

    Lookups never mutate the registry, so concurrent validations may share it
    once bootstrapping is done.
    """

    def __init__(self, max_composite_depth: Optional[int] = None):
        self._rules: dict[str, Rule] = {}
        self._aliases: dict[str, str] = {}
        self._composites: dict[str, str] = {}
        self.max_composite_depth = max_composite_depth or get_settings().MAX_COMPOSITE_DEPTH

    @classmethod
    def with_builtins(cls, max_composite_depth: Optional[int] = None) -> "RuleRegistry":
        """A fresh registry holding the built-in rule vocabulary."""
        from jsonvalidator.rules.builtin import register_builtins

        registry = cls(max_composite_depth=max_composite_depth)
        register_builtins(registry)
        return registry

    # ── Registration ──

    def register_rule(
        self,
        name: str,
        predicate: RulePredicate,
        is_presence: bool = False,
        is_nullable: bool = False,
    ) -> Rule:
        """Register (or overwrite) a plain rule. Last write wins."""
        self._forget(name)
        rule = Rule(name=name, predicate=predicate, is_presence=is_presence, is_nullable=is_nullable)
        self._rules[name] = rule
        return rule

    def rule(
        self,
        name: str,
        is_presence: bool = False,
        is_nullable: bool = False,
    ) -> Callable[[RulePredicate], RulePredicate]:
        """Decorator form of `register_rule`."""

        def decorator(predicate: RulePredicate) -> RulePredicate:
            self.register_rule(name, predicate, is_presence=is_presence, is_nullable=is_nullable)
            return predicate

        return decorator

    def register_alias(self, alias: str, canonical: str) -> None:
        """Make `alias` resolve to `canonical` (which may itself be an alias)."""
        self._forget(alias)
        self._aliases[alias] = canonical

    def register_composite(self, name: str, template: str) -> None:
        """Register a macro. `$0`, `$1`, ... are replaced by the invocation params."""
        self._forget(name)
        self._composites[name] = template

    def _forget(self, name: str) -> None:
        self._rules.pop(name, None)
        self._aliases.pop(name, None)
        self._composites.pop(name, None)

    def __contains__(self, name: str) -> bool:
        return name in self._rules or name in self._aliases or name in self._composites

    def names(self) -> list[str]:
        return sorted({*self._rules, *self._aliases, *self._composites})

    # ── Parsing ──

    @staticmethod
    def split_rule_string(rule_string: str) -> list[str]:
        """Split a pipe-separated rule string into its definitions."""
        return [token.strip() for token in rule_string.strip().split("|") if token.strip()]

    @staticmethod
    def parse_definition(definition: str) -> tuple[str, tuple[str, ...]]:
        """`name:p0,p1` → ("name", ("p0", "p1")). Only the first `:` separates."""
        name, sep, raw_params = definition.partition(":")
        if not sep:
            return name.strip(), ()
        return name.strip(), tuple(raw_params.split(","))

    # ── Resolution ──

    def resolve(self, definition: str) -> list[RuleBinding]:
        """Resolve one `name[:params]` token into one or more rule bindings."""
        return self._resolve(definition, depth=0, expanding=())

    def resolve_tag(self, rule_string: str) -> ValidationTag:
        """Resolve a full rule string into a `ValidationTag`."""
        definitions = self.split_rule_string(rule_string)
        if not definitions:
            return EMPTY_TAG

        bindings: list[RuleBinding] = []
        for definition in definitions:
            bindings.extend(self.resolve(definition))
        return ValidationTag.from_bindings(bindings)

    def _resolve(self, definition: str, depth: int, expanding: tuple[str, ...]) -> list[RuleBinding]:
        name, params = self.parse_definition(definition)
        target = self._follow_aliases(name)

        if target in self._composites:
            if target in expanding:
                chain = " -> ".join((*expanding, target))
                raise CompositeCycleError(f"Composite rules expand into themselves: {chain}")
            if depth >= self.max_composite_depth:
                raise CompositeCycleError(
                    f"Composite rule '{target}' exceeds the maximum nesting depth of {self.max_composite_depth}"
                )

            template = self._substitute(target, self._composites[target], params)
            bindings: list[RuleBinding] = []
            for inner in self.split_rule_string(template):
                bindings.extend(self._resolve(inner, depth + 1, (*expanding, target)))
            return bindings

        rule = self._rules.get(target)
        if rule is None:
            raise UnknownRuleError(f"No registered rule for name {name}")

        return [RuleBinding(rule=rule, name=name, params=params)]

    def _follow_aliases(self, name: str) -> str:
        seen = {name}
        while name in self._aliases:
            name = self._aliases[name]
            if name in seen:
                raise UnknownRuleError(f"Alias cycle detected while resolving {name}")
            seen.add(name)
        return name

    @staticmethod
    def _substitute(name: str, template: str, params: tuple[str, ...]) -> str:
        def replace(match: re.Match) -> str:
            index = int(match.group(1))
            if index >= len(params):
                raise RuleParameterError(
                    f"Composite rule '{name}' uses ${index} but only {len(params)} parameter(s) were given"
                )
            return params[index]

        return PLACEHOLDER.sub(replace, template)
