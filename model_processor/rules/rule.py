# File: rules/rule.py
# Purpose: Rule = condition list + operator + action list, and its tree walk
# Notes:
# - Traversal is depth first, pre-order, PartInfo rebuilt for every node
# - A match with apply_to_children consumes the whole subtree for this rule
# - After actions run the node may be gone; it is checked before descending
#   and children are walked from a snapshot

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional

from ..core.exceptions import RuleConfigurationError
from ..core.schema import SceneNode
from .action import Action
from .condition import Condition
from .context import RuleContext
from .part_info import PartInfo


class Operator(IntEnum):
    And = 0
    Or = 1


@dataclass
class Rule:
    condition_operator: Operator = Operator.And
    conditions: List[Condition] = field(default_factory=list)
    actions: List[Action] = field(default_factory=list)
    apply_to_children: bool = False

    # ==================== evaluation ====================

    def evaluate(self, part: PartInfo, context: Optional[RuleContext] = None) -> bool:
        """Combine the conditions with the operator; no conditions means True"""
        if not self.conditions:
            return True
        if self.condition_operator == Operator.And:
            return all(c.evaluate(part, context) for c in self.conditions)
        if self.condition_operator == Operator.Or:
            return any(c.evaluate(part, context) for c in self.conditions)
        raise RuleConfigurationError(f"Unknown condition operator: {self.condition_operator}")

    # ==================== application ====================

    def apply_to_model(self, root: SceneNode, context: Optional[RuleContext] = None) -> bool:
        """Run the rule over the whole tree; True if it matched anywhere"""
        context = context or RuleContext()
        return self._apply_recursively(root, context)

    def _apply_recursively(self, node: SceneNode, context: RuleContext) -> bool:
        matched = self._apply_to_node(node, context)
        if not node.alive:
            return matched
        if matched and self.apply_to_children:
            return matched
        for child in list(node.children):
            if child.alive and self._apply_recursively(child, context):
                matched = True
        return matched

    def _apply_to_node(self, node: SceneNode, context: RuleContext) -> bool:
        if not self.evaluate(PartInfo.of(node), context):
            return False
        targets = list(node.walk()) if self.apply_to_children else [node]
        for target in targets:
            self.apply_actions(target, context)
        return True

    def apply_actions(self, node: SceneNode, context: RuleContext) -> None:
        for action in self.actions:
            if not node.alive:
                break
            action.apply(node, context)

    # ==================== persistence ====================

    def to_dict(self) -> dict:
        return {
            "conditionOperator": int(self.condition_operator),
            "conditions": [c.to_dict() for c in self.conditions],
            "actions": [a.to_dict() for a in self.actions],
            "applyToChildren": self.apply_to_children,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Rule":
        raw_operator = data.get("conditionOperator", 0)
        try:
            operator = Operator(int(raw_operator))
        except ValueError as exc:
            raise RuleConfigurationError(f"Unknown condition operator: {raw_operator}") from exc
        return cls(
            condition_operator=operator,
            conditions=[Condition.from_dict(c) for c in data.get("conditions") or []],
            actions=[Action.from_dict(a) for a in data.get("actions") or []],
            apply_to_children=bool(data.get("applyToChildren", False)),
        )
