"""Role inference from folder names using an ordered rule table."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from core.models import PhotoRole


@dataclass(frozen=True)
class RoleRule:
    """Assign `role` when the folder name contains any of `patterns`."""

    patterns: tuple[str, ...]
    role: PhotoRole

    def matches(self, folder_name: str) -> bool:
        name = folder_name.lower()
        return any(pattern in name for pattern in self.patterns)


# Evaluated top to bottom; the first matching rule wins regardless of where
# the substring occurs in the folder name.
DEFAULT_ROLE_RULES: tuple[RoleRule, ...] = (
    RoleRule(("damage",), PhotoRole.DAMAGE),
    RoleRule(("precondition", "before"), PhotoRole.PRECONDITION),
    RoleRule(("completion", "after"), PhotoRole.COMPLETION),
)


class RuleEngine:
    """Classifies role folders by case-insensitive substring rules."""

    def __init__(
        self,
        rules: Sequence[RoleRule] = DEFAULT_ROLE_RULES,
        default_role: PhotoRole = PhotoRole.DAMAGE,
    ) -> None:
        self._rules = tuple(rules)
        self._default_role = default_role

    @property
    def rules(self) -> tuple[RoleRule, ...]:
        return self._rules

    def classify(self, folder_name: str) -> PhotoRole:
        """Return the role for `folder_name`, falling back to the default role."""
        for rule in self._rules:
            if rule.matches(folder_name):
                return rule.role
        return self._default_role
