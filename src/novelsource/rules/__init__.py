"""
Rule templates and the model that builds, hydrates and edits book sources.
"""

__all__ = [
    "RULE_GROUP_META",
    "RULE_TEMPLATES",
    "RULE_TYPE_OPTIONS",
    "RuleModel",
]

from .model import RuleModel
from .templates import RULE_GROUP_META, RULE_TEMPLATES, RULE_TYPE_OPTIONS
