"""Find/replace rules for bulk hyperlink and shape text updates.

This package loads the rule table consumed by update mode and exposes the
typed rules, grouped by the field they target.
"""

from .errors import RuleError, RuleFileError, RuleParseError
from .models import RuleKind, RuleSet, UpdateRule
from .rule_loader import DEFAULT_RULES_FILE, RuleLoader

__all__ = [
    'RuleKind',
    'RuleSet',
    'UpdateRule',
    'RuleLoader',
    'DEFAULT_RULES_FILE',
    'RuleError',
    'RuleFileError',
    'RuleParseError',
]
