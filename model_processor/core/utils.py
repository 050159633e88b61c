# -*- coding: utf-8 -*-
# Relative path: core/utils.py
# Purpose: Shared vector / quaternion helpers used by every converter
# Notes: all axis swaps and mirrors go through these functions so the scene
#        pass and the animation pass can never disagree about conventions.

"""
Model Processor - Utils (centralized)

- Axis helpers: Y/Z swap, horizontal mirror of points and rotations
- Quaternion <-> (x, y, z, w) component tuples, as stored in animation curves
- Tangent rebuild after vertex data was rotated
"""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

from mathutils import Quaternion, Vector


# =========================
# Axis helpers (vectors)
# =========================

def swap_yz(vec3: Sequence[float]) -> Vector:
    """(x, y, z) -> (x, z, y)"""
    x, y, z = vec3
    return Vector((x, z, y))


def mirror_horizontal(vec3: Sequence[float]) -> Vector:
    """(x, y, z) -> (-x, y, -z), i.e. a 180 degree turn about the up axis"""
    x, y, z = vec3
    return Vector((-x, y, -z))


# =========================
# Axis helpers (quaternions)
# =========================

def mirror_rotation(q: Quaternion) -> Quaternion:
    """Negate the x and z components (conjugation by 180 degrees about Y)"""
    return Quaternion((q.w, -q.x, q.y, -q.z))


def quat_from_xyzw(x: float, y: float, z: float, w: float) -> Quaternion:
    return Quaternion((w, x, y, z))


def quat_to_xyzw(q: Quaternion) -> Tuple[float, float, float, float]:
    return (q.x, q.y, q.z, q.w)


def quaternions_close(a: Quaternion, b: Quaternion, tolerance: float = 1e-5) -> bool:
    """Same rotation, accepting q and -q"""
    return abs(abs(a.dot(b)) - 1.0) <= tolerance


def vectors_close(a: Sequence[float], b: Sequence[float], tolerance: float = 1e-5) -> bool:
    return all(math.isclose(x, y, abs_tol=tolerance) for x, y in zip(a, b))


# =========================
# Tangents rebuild
# =========================

def rebuild_tangents(vertices: List[Vector],
                     indices: List[int],
                     uvs: List[Tuple[float, float]],
                     normals: List[Vector] = None) -> List[Tuple[float, float, float, float]]:
    """
    Per-vertex tangents accumulated from triangle UV gradients.
    w carries the bitangent sign when normals are available, 1.0 otherwise.
    """
    count = len(vertices)
    tan = [Vector((0.0, 0.0, 0.0)) for _ in range(count)]
    bit = [Vector((0.0, 0.0, 0.0)) for _ in range(count)]

    for i in range(0, len(indices) - 2, 3):
        i0, i1, i2 = indices[i:i + 3]
        p0, p1, p2 = vertices[i0], vertices[i1], vertices[i2]
        uv0, uv1, uv2 = uvs[i0], uvs[i1], uvs[i2]

        dp1 = p1 - p0
        dp2 = p2 - p0
        du1, dv1 = uv1[0] - uv0[0], uv1[1] - uv0[1]
        du2, dv2 = uv2[0] - uv0[0], uv2[1] - uv0[1]

        denom = (du1 * dv2 - du2 * dv1) or 1.0
        r = 1.0 / denom
        t = (dp1 * dv2 - dp2 * dv1) * r
        b = (dp2 * du1 - dp1 * du2) * r

        for idx in (i0, i1, i2):
            tan[idx] += t
            bit[idx] += b

    out: List[Tuple[float, float, float, float]] = []
    for i in range(count):
        t = tan[i]
        w = 1.0
        if normals and i < len(normals):
            n = normals[i]
            # Gram-Schmidt
            t = t - n * n.dot(t)
            if n.cross(t).dot(bit[i]) < 0.0:
                w = -1.0
        if t.length > 0.0:
            t = t.normalized()
        out.append((t.x, t.y, t.z, w))
    return out


__all__ = [
    "swap_yz",
    "mirror_horizontal",
    "mirror_rotation",
    "quat_from_xyzw",
    "quat_to_xyzw",
    "quaternions_close",
    "vectors_close",
    "rebuild_tangents",
]
