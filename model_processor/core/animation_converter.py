# -*- coding: utf-8 -*-
"""
Model Processor - Animation Converter

- Rewrites the transform curves of one clip so they agree with the scene
  graph after the orientation fix (core/coordinate_converter.py)
- Position: rotated by ROTATION_FIX below the top level, mirrored for match_axes
- Rotation: ROTATION_FIX @ q @ ANIM_ROTATION_FIX below the top level,
  q @ ANIM_ROTATION_FIX at the top level, then conjugated by MIRROR_ROTATION
  for match_axes; tangents go through the same (linear) mapping
- Scale: Y and Z curves trade places, values untouched; any subset of the
  three scale channels is valid
- Each clip is independent, no state is shared between calls
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from mathutils import Quaternion, Vector

from .coordinate_converter import ANIM_ROTATION_FIX, MIRROR_ROTATION, ROTATION_FIX
from .exceptions import SceneInvariantError
from .schema import AnimationClip, AnimationCurve, CurveBinding, Keyframe
from .utils import mirror_horizontal, quat_from_xyzw, quat_to_xyzw
from ..config.constants import (
    POSITION_PROPERTIES,
    ROTATION_PROPERTIES,
    SCALE_PROPERTIES,
    TRANSFORM_TYPE_NAME,
)
from ..utils.logger import Logger
from ..writers.audit_writer import ErrorCode


@dataclass
class TransformCurves:
    """Curve bindings of one animated path, by channel"""
    position: List[Optional[CurveBinding]] = field(default_factory=lambda: [None] * 3)
    rotation: List[Optional[CurveBinding]] = field(default_factory=lambda: [None] * 4)
    scale: List[Optional[CurveBinding]] = field(default_factory=lambda: [None] * 3)


def path_depth(path: str) -> int:
    """0 for top level paths ("" or "Armature"), +1 per slash"""
    return path.count("/") if path else 0


def collect_transform_curves(clip: AnimationClip, logger: Logger) -> Dict[str, TransformCurves]:
    """Group the clip's transform bindings by node path"""
    groups: Dict[str, TransformCurves] = {}
    for binding in clip.bindings():
        if binding.type_name != TRANSFORM_TYPE_NAME:
            continue
        curves = groups.setdefault(binding.path, TransformCurves())
        prop = binding.property_name
        if prop in POSITION_PROPERTIES:
            curves.position[POSITION_PROPERTIES.index(prop)] = binding
        elif prop in ROTATION_PROPERTIES:
            curves.rotation[ROTATION_PROPERTIES.index(prop)] = binding
        elif prop in SCALE_PROPERTIES:
            curves.scale[SCALE_PROPERTIES.index(prop)] = binding
        else:
            logger.error(f"Unknown binding in transform animation: {prop}",
                         binding.path, code=ErrorCode.ANM001)
    return groups


class AnimationConverter:
    """Clip counterpart of OrientationConverter"""

    def __init__(self, match_axes: bool = False, logger: Optional[Logger] = None):
        self.match_axes = match_axes
        self.logger = logger or Logger()

    def convert_clip(self, clip: AnimationClip) -> int:
        """
        Fix every animated transform of the clip.

        Returns the number of node paths that were rewritten.
        """
        groups = collect_transform_curves(clip, self.logger)
        for path, curves in groups.items():
            top_level = path_depth(path) == 0
            if any(curves.position):
                self._fix_position(clip, path, curves.position, top_level)
            if any(curves.rotation):
                self._fix_rotation(clip, path, curves.rotation, top_level)
            if any(curves.scale):
                self._fix_scale(clip, path, curves.scale)
        self.logger.info(f"Animation fix applied to {len(groups)} paths", clip.name)
        return len(groups)

    # ==================== channels ====================

    def _load_group(self, clip: AnimationClip, path: str,
                    bindings: List[Optional[CurveBinding]], label: str) -> List[AnimationCurve]:
        if not all(bindings):
            self.logger.error(f"Incomplete {label} curves", path, code=ErrorCode.ANM002)
            raise SceneInvariantError(f"Clip '{clip.name}' path '{path}': incomplete {label} curves")
        curves = [clip.get_curve(b) for b in bindings]
        counts = {len(c) for c in curves}
        if len(counts) != 1:
            self.logger.error(f"{label} curves have different key counts", path, code=ErrorCode.ANM003)
            raise SceneInvariantError(
                f"Clip '{clip.name}' path '{path}': {label} curves have different key counts")
        return curves

    def _fix_position(self, clip, path, bindings, top_level: bool) -> None:
        cx, cy, cz = self._load_group(clip, path, bindings, "position")
        fixed = ([], [], [])
        for kx, ky, kz in zip(cx.keys, cy.keys, cz.keys):
            values = [Vector((kx.value, ky.value, kz.value)),
                      Vector((kx.in_tangent, ky.in_tangent, kz.in_tangent)),
                      Vector((kx.out_tangent, ky.out_tangent, kz.out_tangent))]
            if not top_level:
                values = [ROTATION_FIX @ v for v in values]
            if self.match_axes:
                values = [mirror_horizontal(v) for v in values]
            value, tin, tout = values
            for axis in range(3):
                fixed[axis].append(Keyframe(kx.time, value[axis], tin[axis], tout[axis]))
        for binding, keys in zip(bindings, fixed):
            clip.set_curve(binding, AnimationCurve(keys))

    def _fix_rotation(self, clip, path, bindings, top_level: bool) -> None:
        curves = self._load_group(clip, path, bindings, "rotation")
        fixed = ([], [], [], [])
        for kx, ky, kz, kw in zip(*(c.keys for c in curves)):
            values = [quat_from_xyzw(kx.value, ky.value, kz.value, kw.value),
                      quat_from_xyzw(kx.in_tangent, ky.in_tangent, kz.in_tangent, kw.in_tangent),
                      quat_from_xyzw(kx.out_tangent, ky.out_tangent, kz.out_tangent, kw.out_tangent)]
            values = [self.fix_rotation(q, top_level) for q in values]
            value, tin, tout = values
            for axis, (v, ti, to) in enumerate(zip(quat_to_xyzw(value), quat_to_xyzw(tin), quat_to_xyzw(tout))):
                fixed[axis].append(Keyframe(kx.time, v, ti, to))
        for binding, keys in zip(bindings, fixed):
            clip.set_curve(binding, AnimationCurve(keys))

    def fix_rotation(self, q: Quaternion, top_level: bool) -> Quaternion:
        """Map one rotation key (or tangent) into the fixed frame"""
        if not top_level:
            q = ROTATION_FIX @ q
        q = q @ ANIM_ROTATION_FIX
        if self.match_axes:
            q = MIRROR_ROTATION @ q @ MIRROR_ROTATION.inverted()
        return q

    def _fix_scale(self, clip, path, bindings) -> None:
        """Y and Z trade places; a channel with no partner leaves its old slot empty"""
        _, by, bz = bindings
        curve_y = clip.get_curve(by) if by else None
        curve_z = clip.get_curve(bz) if bz else None
        target_y = by or CurveBinding(path, SCALE_PROPERTIES[1], TRANSFORM_TYPE_NAME)
        target_z = bz or CurveBinding(path, SCALE_PROPERTIES[2], TRANSFORM_TYPE_NAME)
        for target, curve in ((target_y, curve_z), (target_z, curve_y)):
            if curve is None:
                clip.remove_curve(target)
            else:
                clip.set_curve(target, curve)


def convert_animation_clip(clip: AnimationClip, match_axes: bool,
                           logger: Optional[Logger] = None) -> int:
    """Run the animation fix over one clip"""
    return AnimationConverter(match_axes, logger).convert_clip(clip)
