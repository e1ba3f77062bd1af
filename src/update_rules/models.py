"""Data models for find/replace update rules."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class RuleKind(Enum):
    """Field a rule applies to.

    Values are the spellings used in the rule table's first column.
    """
    OBJECT_TEXT = "ObjectText"
    LINK_TEXT = "LinkText"
    LINK_URL = "LinkUrl"

    @classmethod
    def parse(cls, value: str) -> Optional["RuleKind"]:
        """Case-insensitive lookup; None when the value is not a known kind."""
        wanted = value.strip().lower()
        for kind in cls:
            if kind.value.lower() == wanted:
                return kind
        return None


@dataclass(frozen=True)
class UpdateRule:
    """One find/replace directive.

    Attributes:
        kind: Field kind the rule targets
        find: Exact value to match (no partial or case-insensitive matching)
        replace: Replacement value
    """
    kind: RuleKind
    find: str
    replace: str


@dataclass
class RuleSet:
    """Rules grouped by kind, each kind a find -> replace map.

    Keying by find value means a field value matches at most one rule, so
    the outcome never depends on rule order.

    Attributes:
        object_text: ObjectText rules (shape text)
        link_text: LinkText rules (hyperlink Description)
        link_url: LinkUrl rules (hyperlink Address + ExtraInfo)
        warnings: Messages for rows that were skipped while loading
    """
    object_text: Dict[str, str] = field(default_factory=dict)
    link_text: Dict[str, str] = field(default_factory=dict)
    link_url: Dict[str, str] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    def rules_for(self, kind: RuleKind) -> Dict[str, str]:
        if kind is RuleKind.OBJECT_TEXT:
            return self.object_text
        if kind is RuleKind.LINK_TEXT:
            return self.link_text
        return self.link_url

    def add(self, rule: UpdateRule) -> bool:
        """Add a rule; returns False when its find value is already taken."""
        rules = self.rules_for(rule.kind)
        if rule.find in rules:
            return False
        rules[rule.find] = rule.replace
        return True

    @property
    def rule_count(self) -> int:
        return len(self.object_text) + len(self.link_text) + len(self.link_url)

    @property
    def is_empty(self) -> bool:
        return self.rule_count == 0
