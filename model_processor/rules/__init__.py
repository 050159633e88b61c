# -*- coding: utf-8 -*-
# File: rules/__init__.py
# Purpose: Rule engine package init

"""
Model Processor Rule Engine
Conditions, actions and the rule walk over an imported scene graph
"""

from .action import Action, ActionType
from .condition import Condition, ConditionType
from .context import RuleContext
from .part_info import PartInfo
from .rule import Operator, Rule
from .rule_set import RuleSet, apply_rule_set

__all__ = [
    'Action',
    'ActionType',
    'Condition',
    'ConditionType',
    'Operator',
    'PartInfo',
    'Rule',
    'RuleContext',
    'RuleSet',
    'apply_rule_set',
]
