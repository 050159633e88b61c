# File: rules/condition.py
# Purpose: Rule conditions, predicates over a PartInfo and the live node
# Notes:
# - Type values are the persisted ones; do not renumber
# - Predicates only read the tree
# - Unknown types: logged (RUL001) and false, or UnsupportedRuleError in strict mode

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict, Optional, Union

from ..core.exceptions import UnsupportedRuleError
from ..core.schema import SceneNode
from ..writers.audit_writer import ErrorCode
from .context import RuleContext
from .params import compile_pattern, parse_int
from .part_info import PartInfo


class ConditionType(IntEnum):
    Always = 0
    RootObject = 1

    NameStartsWith = 11
    NameEndsWith = 12
    NameContains = 13
    NameMatchesRegex = 14
    PathStartsWith = 15
    PathEndsWith = 16
    PathContains = 17
    PathMatchesRegex = 18
    NameEquals = 19
    PathEquals = 20

    ChildDepthEquals = 21
    ChildDepthGreater = 22
    ChildDepthGreaterOrEqual = 23
    ChildDepthLess = 24
    ChildDepthLessOrEqual = 25
    HasChildren = 26

    HasMesh = 31
    HasSkinnedMesh = 32
    HasCollider = 35
    HasLight = 36
    HasCamera = 37
    IsEmpty = 38
    IsEmptyWithoutChildren = 39

    GameObjectInactiveSelf = 41
    GameObjectInactiveInHierarchy = 42


def _is_skinned(node: SceneNode) -> bool:
    return node.renderer is not None and node.renderer.skinned


def _is_empty(part: PartInfo) -> bool:
    # the transform is always there
    return part.child_depth > 0 and part.node.component_count == 1


Predicate = Callable[[PartInfo, str], bool]

_PREDICATES: Dict[ConditionType, Predicate] = {
    ConditionType.Always: lambda part, p: True,
    ConditionType.RootObject: lambda part, p: part.is_root,

    ConditionType.NameStartsWith: lambda part, p: part.name.startswith(p),
    ConditionType.NameEndsWith: lambda part, p: part.name.endswith(p),
    ConditionType.NameContains: lambda part, p: p in part.name,
    ConditionType.NameEquals: lambda part, p: part.name == p,
    ConditionType.NameMatchesRegex: lambda part, p: compile_pattern(p).search(part.name) is not None,
    ConditionType.PathStartsWith: lambda part, p: part.hierarchy_path.startswith(p),
    ConditionType.PathEndsWith: lambda part, p: part.hierarchy_path.endswith(p),
    ConditionType.PathContains: lambda part, p: p in part.hierarchy_path,
    ConditionType.PathEquals: lambda part, p: part.hierarchy_path == p,
    ConditionType.PathMatchesRegex: lambda part, p: compile_pattern(p).search(part.hierarchy_path) is not None,

    ConditionType.ChildDepthEquals: lambda part, p: part.child_depth == parse_int(p),
    ConditionType.ChildDepthGreater: lambda part, p: part.child_depth > parse_int(p),
    ConditionType.ChildDepthGreaterOrEqual: lambda part, p: part.child_depth >= parse_int(p),
    ConditionType.ChildDepthLess: lambda part, p: part.child_depth < parse_int(p),
    ConditionType.ChildDepthLessOrEqual: lambda part, p: part.child_depth <= parse_int(p),
    ConditionType.HasChildren: lambda part, p: len(part.node.children) > 0,

    ConditionType.HasMesh: lambda part, p: part.node.renderer is not None or part.node.mesh is not None,
    ConditionType.HasSkinnedMesh: lambda part, p: _is_skinned(part.node),
    ConditionType.HasCollider: lambda part, p: part.node.collider is not None,
    ConditionType.HasLight: lambda part, p: part.node.light is not None,
    ConditionType.HasCamera: lambda part, p: part.node.camera is not None,
    ConditionType.IsEmpty: lambda part, p: _is_empty(part),
    ConditionType.IsEmptyWithoutChildren: lambda part, p: _is_empty(part) and not part.node.children,

    ConditionType.GameObjectInactiveSelf: lambda part, p: not part.node.active,
    ConditionType.GameObjectInactiveInHierarchy: lambda part, p: not part.node.active_in_hierarchy,
}


def condition_type_of(value: Union[ConditionType, int]) -> Optional[ConditionType]:
    """Known ConditionType for a raw tag, None when not implemented"""
    try:
        tag = ConditionType(int(value))
    except ValueError:
        return None
    return tag if tag in _PREDICATES else None


@dataclass
class Condition:
    """
    One predicate of a rule.

    type may hold a raw integer read from settings written by a newer version;
    such a condition never matches.
    """
    type: Union[ConditionType, int] = ConditionType.Always
    invert: bool = False
    parameter: str = ""

    def evaluate(self, part: PartInfo, context: Optional[RuleContext] = None) -> bool:
        tag = condition_type_of(self.type)
        if tag is None:
            message = f"Condition type not implemented: {self.type}"
            if context is not None and context.strict:
                raise UnsupportedRuleError(message)
            if context is not None:
                context.logger.error(message, part.hierarchy_path, code=ErrorCode.RUL001)
            return False
        result = _PREDICATES[tag](part, self.parameter or "")
        return not result if self.invert else result

    # ---- persistence ----

    def to_dict(self) -> dict:
        return {"type": int(self.type), "invert": self.invert, "parameter": self.parameter}

    @classmethod
    def from_dict(cls, data: dict) -> "Condition":
        raw = int(data.get("type", 0))
        tag = condition_type_of(raw)
        return cls(type=tag if tag is not None else raw,
                   invert=bool(data.get("invert", False)),
                   parameter=str(data.get("parameter") or ""))
