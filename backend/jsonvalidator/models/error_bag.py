"""Error bag — path-keyed validation failures collected during one run.

Each entry is rendered as `[ruleName]: message`, in the order the rules were
declared. Paths are the dotted JSON location (`items.0.id`), empty for root.
"""

import json

from pydantic import BaseModel, Field


class ErrorBag(BaseModel):
    """Append-only map of JSON path → ordered list of failure messages."""

    errors: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Failure messages grouped by JSON path",
    )

    def add_error(self, path: str, text: str) -> None:
        self.errors.setdefault(path, []).append(text)

    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def is_invalid(self) -> bool:
        return not self.is_valid()

    def errors_for(self, path: str) -> list[str]:
        """Messages recorded for `path`, or an empty list."""
        return list(self.errors.get(path, []))

    def paths(self) -> list[str]:
        return list(self.errors.keys())

    def count_errors(self) -> int:
        return sum(len(messages) for messages in self.errors.values())

    def has_failed_key_and_rule(self, path: str, rule: str) -> bool:
        """True if `path` holds a failure produced by the rule invoked as `rule`."""
        prefix = f"[{rule}]: "
        return any(text.startswith(prefix) for text in self.errors.get(path, []))

    def __str__(self) -> str:
        if not self.errors:
            return "No validation errors"
        return "Validation Errors: \n" + json.dumps(self.errors, indent=2)
