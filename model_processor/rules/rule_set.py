# File: rules/rule_set.py
# Purpose: Ordered rule lists and their application to one imported model
# Notes:
# - Rules run one after another, each a full walk over the tree the previous
#   one left behind; nothing is shared between walks

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..core.schema import SceneNode
from .context import RuleContext
from .rule import Rule


@dataclass
class RuleSet:
    """Project-level rule collection; the per-model rules use the same shape"""
    enabled: bool = True
    rules: List[Rule] = field(default_factory=list)

    def apply_to_model(self, root: SceneNode, context: Optional[RuleContext] = None) -> int:
        if not self.enabled:
            return 0
        return apply_rule_set(self.rules, root, context)

    def to_dict(self) -> dict:
        return {"enabled": self.enabled, "rules": [r.to_dict() for r in self.rules]}

    @classmethod
    def from_dict(cls, data: dict) -> "RuleSet":
        return cls(enabled=bool(data.get("enabled", True)),
                   rules=[Rule.from_dict(r) for r in data.get("rules") or []])


def apply_rule_set(rules: Iterable[Rule], root: SceneNode,
                   context: Optional[RuleContext] = None) -> int:
    """
    Apply every rule, in order, to the tree under root.

    Returns how many rules matched at least one node.
    """
    context = context or RuleContext()
    matched = 0
    for index, rule in enumerate(rules):
        if rule.apply_to_model(root, context):
            matched += 1
            context.logger.info(f"Rule {index} applied", root.name)
    return matched
