# File: rules/action.py
# Purpose: Rule actions, in-place mutations of one scene node
# Notes:
# - Type values are the persisted ones; do not renumber
# - Parameters are parsed before anything is touched, a bad parameter
#   raises RuleConfigurationError even when the node has nothing to change
# - Unknown types: logged (RUL002) and skipped, or UnsupportedRuleError in strict mode

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict, Optional, Union

from ..config.constants import UNTAGGED
from ..core.exceptions import UnsupportedRuleError
from ..core.schema import SceneNode, ShadowCastingMode, StaticFlags
from ..writers.audit_writer import ErrorCode
from .context import RuleContext
from .params import parse_bool, parse_enum, parse_float, parse_int


class ActionType(IntEnum):
    None_ = 0
    SetGameObjectInactive = 1
    DestroyGameObject = 2
    DestroyChildObjects = 3
    MarkStatic = 4
    SetStaticFlags = 5

    SetLayer = 10
    SetTag = 11
    SetName = 12
    PrependName = 13
    AppendName = 14

    RemoveRenderer = 101
    RemoveCollider = 102

    SetCastShadowsMode = 201
    SetReceiveShadowsMode = 202
    SetLightmapScale = 203

    AddHelperComponent = 999


# ==================== handlers ====================

def _set_inactive(node: SceneNode, param: str, context: RuleContext) -> None:
    node.active = False


def _destroy(node: SceneNode, param: str, context: RuleContext) -> None:
    node.destroy()


def _destroy_children(node: SceneNode, param: str, context: RuleContext) -> None:
    for child in list(node.children):
        child.destroy()


def _mark_static(node: SceneNode, param: str, context: RuleContext) -> None:
    node.static_flags = StaticFlags.all()


def _set_static_flags(node: SceneNode, param: str, context: RuleContext) -> None:
    node.static_flags = StaticFlags(parse_int(param) & StaticFlags.all())


def _set_layer(node: SceneNode, param: str, context: RuleContext) -> None:
    node.layer = context.resolve_layer(param)


def _set_tag(node: SceneNode, param: str, context: RuleContext) -> None:
    node.tag = param or UNTAGGED


def _set_name(node: SceneNode, param: str, context: RuleContext) -> None:
    if not param:
        context.logger.error("Empty name assigned", node.hierarchy_path, code=ErrorCode.RUL004)
    node.name = param


def _prepend_name(node: SceneNode, param: str, context: RuleContext) -> None:
    node.name = param + node.name


def _append_name(node: SceneNode, param: str, context: RuleContext) -> None:
    node.name = node.name + param


def _remove_renderer(node: SceneNode, param: str, context: RuleContext) -> None:
    # renderer and mesh filter go together
    node.renderer = None
    node.mesh = None


def _remove_collider(node: SceneNode, param: str, context: RuleContext) -> None:
    node.collider = None


def _set_cast_shadows(node: SceneNode, param: str, context: RuleContext) -> None:
    mode = parse_enum(ShadowCastingMode, param)
    if node.renderer is not None:
        node.renderer.cast_shadows = mode


def _set_receive_shadows(node: SceneNode, param: str, context: RuleContext) -> None:
    receive = parse_bool(param)
    if node.renderer is not None:
        node.renderer.receive_shadows = receive


def _set_lightmap_scale(node: SceneNode, param: str, context: RuleContext) -> None:
    scale = parse_float(param)
    if node.renderer is not None:
        node.renderer.scale_in_lightmap = scale


def _add_helper_component(node: SceneNode, param: str, context: RuleContext) -> None:
    factory = context.helper_component()
    if factory is None:
        context.logger.warning("Helper component is not available in this project",
                               node.hierarchy_path, code=ErrorCode.RUL003)
        return
    node.components.append(factory(node))


Handler = Callable[[SceneNode, str, RuleContext], None]

_HANDLERS: Dict[ActionType, Handler] = {
    ActionType.None_: lambda node, param, context: None,
    ActionType.SetGameObjectInactive: _set_inactive,
    ActionType.DestroyGameObject: _destroy,
    ActionType.DestroyChildObjects: _destroy_children,
    ActionType.MarkStatic: _mark_static,
    ActionType.SetStaticFlags: _set_static_flags,
    ActionType.SetLayer: _set_layer,
    ActionType.SetTag: _set_tag,
    ActionType.SetName: _set_name,
    ActionType.PrependName: _prepend_name,
    ActionType.AppendName: _append_name,
    ActionType.RemoveRenderer: _remove_renderer,
    ActionType.RemoveCollider: _remove_collider,
    ActionType.SetCastShadowsMode: _set_cast_shadows,
    ActionType.SetReceiveShadowsMode: _set_receive_shadows,
    ActionType.SetLightmapScale: _set_lightmap_scale,
    ActionType.AddHelperComponent: _add_helper_component,
}


def action_type_of(value: Union[ActionType, int]) -> Optional[ActionType]:
    """Known ActionType for a raw tag, None when not implemented"""
    try:
        tag = ActionType(int(value))
    except ValueError:
        return None
    return tag if tag in _HANDLERS else None


@dataclass
class Action:
    """One mutation of a rule; type may be a raw integer of an unknown action"""
    type: Union[ActionType, int] = ActionType.None_
    parameter: str = ""

    def apply(self, node: SceneNode, context: Optional[RuleContext] = None) -> None:
        context = context or RuleContext()
        tag = action_type_of(self.type)
        if tag is None:
            message = f"Action type not implemented: {self.type}"
            if context.strict:
                raise UnsupportedRuleError(message)
            context.logger.error(message, node.hierarchy_path, code=ErrorCode.RUL002)
            return
        _HANDLERS[tag](node, self.parameter or "", context)

    # ---- persistence ----

    def to_dict(self) -> dict:
        return {"type": int(self.type), "parameter": self.parameter}

    @classmethod
    def from_dict(cls, data: dict) -> "Action":
        raw = int(data.get("type", 0))
        tag = action_type_of(raw)
        return cls(type=tag if tag is not None else raw,
                   parameter=str(data.get("parameter") or ""))
