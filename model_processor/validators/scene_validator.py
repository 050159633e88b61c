# File: validators/scene_validator.py
# Purpose: Pre-flight checks on what the importer hands over, before any pass
#          mutates it
# Notes:
# - Tree: acyclic, parent links consistent
# - Mesh: normals parallel to vertices, bind poses one per bone
# - Skinned renderers: mesh present, every bone inside the same tree
# - Clips: complete position / rotation groups, equal key counts,
#   monotonic key times (warning only)
# - Rules: unknown tags and unparseable parameters (warnings)
# Every function returns (errors, warnings)

from typing import Dict, List, Optional, Set, Tuple

from ..config.constants import POSITION_PROPERTIES, ROTATION_PROPERTIES, TRANSFORM_TYPE_NAME
from ..core.exceptions import RuleConfigurationError
from ..core.schema import AnimationClip, SceneNode, ShadowCastingMode
from ..rules.action import ActionType, action_type_of
from ..rules.condition import ConditionType, condition_type_of
from ..rules.context import RuleContext
from ..rules.params import compile_pattern, parse_bool, parse_enum, parse_float, parse_int
from ..rules.rule import Rule


Report = Tuple[List[str], List[str]]


# ---------------------------
# Tree structure
# ---------------------------

def validate_hierarchy(root: SceneNode) -> List[str]:
    errors: List[str] = []
    seen: Set[int] = set()
    stack = [root]
    while stack:
        node = stack.pop()
        if id(node) in seen:
            errors.append(f"Node {node.name} is reachable twice (cycle or shared child)")
            continue
        seen.add(id(node))
        if node.destroyed:
            errors.append(f"Destroyed node {node.name} is still linked into the tree")
        for child in node.children:
            if child.parent is not node:
                errors.append(f"Child {child.name} of {node.name} has a broken parent link")
            stack.append(child)
    return errors


# ---------------------------
# Meshes / skinning
# ---------------------------

def validate_meshes(root: SceneNode) -> Report:
    errors: List[str] = []
    warnings: List[str] = []
    in_tree = {id(n) for n in root.walk()}
    checked: Set[int] = set()

    for node in root.walk():
        mesh = node.mesh
        renderer = node.renderer
        if mesh is not None and id(mesh) not in checked:
            checked.add(id(mesh))
            if mesh.normals and len(mesh.normals) != len(mesh.vertices):
                errors.append(f"Mesh {mesh.name}: {len(mesh.normals)} normals for "
                              f"{len(mesh.vertices)} vertices")
            if mesh.uvs and len(mesh.uvs) != len(mesh.vertices):
                warnings.append(f"Mesh {mesh.name}: UV count differs from vertex count, "
                                f"tangents will not be rebuilt")

        if renderer is None or not renderer.skinned:
            continue
        if mesh is None:
            errors.append(f"Skinned renderer on {node.hierarchy_path} has no mesh")
            continue
        for bone in renderer.bones:
            if id(bone) not in in_tree:
                errors.append(f"Bone {bone.name} of {node.hierarchy_path} is outside the model")
        if mesh.bind_poses and len(mesh.bind_poses) != len(renderer.bones):
            errors.append(f"Mesh {mesh.name}: {len(mesh.bind_poses)} bind poses for "
                          f"{len(renderer.bones)} bones on {node.hierarchy_path}")
    return errors, warnings


def validate_scene(root: SceneNode) -> Report:
    errors = validate_hierarchy(root)
    if errors:
        # the mesh walk would not terminate on a cycle
        return errors, []
    mesh_errors, warnings = validate_meshes(root)
    return errors + mesh_errors, warnings


# ---------------------------
# Animation clips
# ---------------------------

def validate_clip(clip: AnimationClip) -> Report:
    errors: List[str] = []
    warnings: List[str] = []
    groups: Dict[Tuple[str, Tuple[str, ...]], List[str]] = {}

    for binding in clip.bindings():
        if binding.type_name != TRANSFORM_TYPE_NAME:
            continue
        for props in (POSITION_PROPERTIES, ROTATION_PROPERTIES):
            if binding.property_name in props:
                groups.setdefault((binding.path, props), []).append(binding.property_name)

        curve = clip.get_curve(binding)
        times = [k.time for k in curve.keys]
        if any(b < a for a, b in zip(times, times[1:])):
            warnings.append(f"Clip {clip.name}: key times of {binding.path}:"
                            f"{binding.property_name} are not monotonic")

    for (path, props), present in groups.items():
        missing = [p for p in props if p not in present]
        if missing:
            errors.append(f"Clip {clip.name}: path '{path}' is missing {', '.join(missing)}")
            continue
        counts = {len(clip.get_curve(b)) for b in clip.bindings()
                  if b.path == path and b.property_name in props}
        if len(counts) > 1:
            errors.append(f"Clip {clip.name}: path '{path}' has curves with "
                          f"different key counts {sorted(counts)}")
    return errors, warnings


# ---------------------------
# Rules
# ---------------------------

_INT_CONDITIONS = {
    ConditionType.ChildDepthEquals,
    ConditionType.ChildDepthGreater,
    ConditionType.ChildDepthGreaterOrEqual,
    ConditionType.ChildDepthLess,
    ConditionType.ChildDepthLessOrEqual,
}
_REGEX_CONDITIONS = {ConditionType.NameMatchesRegex, ConditionType.PathMatchesRegex}


def validate_rule(rule: Rule, context: Optional[RuleContext] = None) -> List[str]:
    """Problems a rule would hit at apply time, as warnings"""
    context = context or RuleContext()
    warnings: List[str] = []

    for i, condition in enumerate(rule.conditions):
        tag = condition_type_of(condition.type)
        if tag is None:
            warnings.append(f"Condition {i}: type {condition.type} is not implemented")
            continue
        try:
            if tag in _INT_CONDITIONS:
                parse_int(condition.parameter)
            elif tag in _REGEX_CONDITIONS:
                compile_pattern(condition.parameter)
        except RuleConfigurationError as exc:
            warnings.append(f"Condition {i}: {exc}")

    for i, action in enumerate(rule.actions):
        tag = action_type_of(action.type)
        if tag is None:
            warnings.append(f"Action {i}: type {action.type} is not implemented")
            continue
        try:
            if tag == ActionType.SetStaticFlags:
                parse_int(action.parameter)
            elif tag == ActionType.SetLayer:
                context.resolve_layer(action.parameter)
            elif tag == ActionType.SetCastShadowsMode:
                parse_enum(ShadowCastingMode, action.parameter)
            elif tag == ActionType.SetReceiveShadowsMode:
                parse_bool(action.parameter)
            elif tag == ActionType.SetLightmapScale:
                parse_float(action.parameter)
        except RuleConfigurationError as exc:
            warnings.append(f"Action {i}: {exc}")
        if tag == ActionType.AddHelperComponent and context.helper_component() is None:
            warnings.append(f"Action {i}: helper component is not available")

    return warnings
