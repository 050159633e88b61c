# File: core/schema.py
# Purpose: Scene graph / mesh / animation data structures (dataclass)
# Notes:
# - Mirrors what the host import pipeline hands to the processor
# - SceneNode owns its children; parent is a back-reference used for paths only
# - Mesh is a shared resource, several nodes may point at the same instance
# - Rotations are mathutils Quaternions (w, x, y, z)

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum, IntFlag
from typing import Dict, Iterator, List, Optional, Tuple

from mathutils import Matrix, Quaternion, Vector

from .utils import rebuild_tangents


# ==================== Enums ====================

class LightType(Enum):
    """Light kinds known to the engine"""
    SPOT = "Spot"
    DIRECTIONAL = "Directional"
    POINT = "Point"
    AREA = "Area"


class ShadowCastingMode(IntEnum):
    """Renderer shadow casting mode (member names are the persisted values)"""
    Off = 0
    On = 1
    TwoSided = 2
    ShadowsOnly = 3


class StaticFlags(IntFlag):
    """Static editor flags bitmask"""
    NONE = 0
    CONTRIBUTE_GI = 1
    OCCLUDER_STATIC = 2
    BATCHING_STATIC = 4
    NAVIGATION_STATIC = 8
    OCCLUDEE_STATIC = 16
    OFF_MESH_LINK_GENERATION = 32
    REFLECTION_PROBE_STATIC = 64

    @classmethod
    def all(cls) -> "StaticFlags":
        value = cls.NONE
        for member in cls:
            value |= member
        return value


class ColliderType(Enum):
    BOX = "Box"
    SPHERE = "Sphere"
    CAPSULE = "Capsule"
    MESH = "Mesh"


# ==================== Components ====================

@dataclass(eq=False)
class Mesh:
    """
    Shared geometry resource.

    normals / tangents are either empty or parallel to vertices.
    bind_poses holds one 4x4 matrix per bone of the skinned renderer using it.
    """
    name: str = "Mesh"
    vertices: List[Vector] = field(default_factory=list)
    normals: List[Vector] = field(default_factory=list)
    uvs: List[Tuple[float, float]] = field(default_factory=list)
    triangles: List[int] = field(default_factory=list)
    tangents: List[Tuple[float, float, float, float]] = field(default_factory=list)
    bind_poses: List[Matrix] = field(default_factory=list)
    bounds: Tuple[Vector, Vector] = field(default_factory=lambda: (Vector((0.0, 0.0, 0.0)), Vector((0.0, 0.0, 0.0))))

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def can_recalculate_tangents(self) -> bool:
        return bool(self.uvs) and bool(self.triangles) and len(self.uvs) == len(self.vertices)

    def recalculate_bounds(self) -> None:
        if not self.vertices:
            self.bounds = (Vector((0.0, 0.0, 0.0)), Vector((0.0, 0.0, 0.0)))
            return
        lo = Vector((min(v.x for v in self.vertices),
                     min(v.y for v in self.vertices),
                     min(v.z for v in self.vertices)))
        hi = Vector((max(v.x for v in self.vertices),
                     max(v.y for v in self.vertices),
                     max(v.z for v in self.vertices)))
        self.bounds = (lo, hi)

    def recalculate_tangents(self) -> None:
        if not self.can_recalculate_tangents:
            self.tangents = []
            return
        self.tangents = rebuild_tangents(self.vertices, self.triangles, self.uvs, self.normals)


@dataclass(eq=False)
class Renderer:
    """Mesh renderer; skinned renderers also carry their bone list"""
    skinned: bool = False
    enabled: bool = True
    cast_shadows: ShadowCastingMode = ShadowCastingMode.On
    receive_shadows: bool = True
    scale_in_lightmap: float = 1.0
    bones: List["SceneNode"] = field(default_factory=list)


@dataclass(eq=False)
class Light:
    type: LightType = LightType.POINT
    intensity: float = 1.0
    range: float = 10.0


@dataclass(eq=False)
class Camera:
    field_of_view: float = 60.0
    near_clip: float = 0.3
    far_clip: float = 1000.0


@dataclass(eq=False)
class Collider:
    type: ColliderType = ColliderType.BOX


# ==================== Scene graph ====================

@dataclass(eq=False)
class SceneNode:
    """
    SceneNode
    ---------
    One node of the imported scene graph (the engine's game object + transform).

    Children are owned by the node. Destroying a node detaches it from its
    parent and flags the whole subtree; destroyed nodes must not be used again.
    """
    name: str
    local_position: Vector = field(default_factory=lambda: Vector((0.0, 0.0, 0.0)))
    local_rotation: Quaternion = field(default_factory=lambda: Quaternion((1.0, 0.0, 0.0, 0.0)))
    local_scale: Vector = field(default_factory=lambda: Vector((1.0, 1.0, 1.0)))
    active: bool = True
    tag: str = "Untagged"
    layer: int = 0
    static_flags: StaticFlags = StaticFlags.NONE
    mesh: Optional[Mesh] = None
    renderer: Optional[Renderer] = None
    light: Optional[Light] = None
    camera: Optional[Camera] = None
    collider: Optional[Collider] = None
    components: List[object] = field(default_factory=list)
    children: List["SceneNode"] = field(default_factory=list)
    parent: Optional["SceneNode"] = field(default=None, repr=False)
    destroyed: bool = field(default=False, repr=False)

    def __post_init__(self):
        self.local_position = Vector(self.local_position)
        self.local_rotation = Quaternion(self.local_rotation)
        self.local_scale = Vector(self.local_scale)
        for child in self.children:
            child.parent = self

    # ---- hierarchy ----

    def add_child(self, child: "SceneNode") -> "SceneNode":
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    @property
    def alive(self) -> bool:
        return not self.destroyed

    def destroy(self) -> None:
        """Detach from the parent and invalidate the whole subtree"""
        if self.parent is not None and self in self.parent.children:
            self.parent.children.remove(self)
        for node in self.walk():
            node.destroyed = True
        self.parent = None

    def walk(self) -> Iterator["SceneNode"]:
        """Pre-order traversal (self first), over snapshots of the child lists"""
        yield self
        for child in list(self.children):
            yield from child.walk()

    @property
    def depth(self) -> int:
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    @property
    def hierarchy_path(self) -> str:
        names = [self.name]
        node = self.parent
        while node is not None:
            names.append(node.name)
            node = node.parent
        return "/".join(reversed(names))

    def find(self, path: str) -> Optional["SceneNode"]:
        """Resolve a relative slash path ("" is the node itself)"""
        node = self
        if not path:
            return node
        for part in path.split("/"):
            node = next((c for c in node.children if c.name == part), None)
            if node is None:
                return None
        return node

    @property
    def active_in_hierarchy(self) -> bool:
        node = self
        while node is not None:
            if not node.active:
                return False
            node = node.parent
        return True

    # ---- components ----

    @property
    def component_count(self) -> int:
        """Transform counts as one, like the engine does"""
        count = 1
        for comp in (self.mesh, self.renderer, self.light, self.camera, self.collider):
            if comp is not None:
                count += 1
        return count + len(self.components)

    @property
    def has_geometry(self) -> bool:
        return self.mesh is not None or (self.renderer is not None and self.renderer.skinned)

    # ---- transforms ----

    @property
    def local_matrix(self) -> Matrix:
        return Matrix.LocRotScale(self.local_position, self.local_rotation, self.local_scale)

    @property
    def world_matrix(self) -> Matrix:
        if self.parent is None:
            return self.local_matrix
        return self.parent.world_matrix @ self.local_matrix

    @property
    def world_rotation(self) -> Quaternion:
        rotation = self.local_rotation.copy()
        node = self.parent
        while node is not None:
            rotation = node.local_rotation @ rotation
            node = node.parent
        return rotation

    @world_rotation.setter
    def world_rotation(self, value: Quaternion) -> None:
        if self.parent is None:
            self.local_rotation = Quaternion(value)
        else:
            self.local_rotation = self.parent.world_rotation.inverted() @ value


# ==================== Animation ====================

@dataclass
class Keyframe:
    time: float
    value: float
    in_tangent: float = 0.0
    out_tangent: float = 0.0


@dataclass
class AnimationCurve:
    keys: List[Keyframe] = field(default_factory=list)

    @classmethod
    def constant(cls, value: float, start: float = 0.0, end: float = 1.0) -> "AnimationCurve":
        return cls([Keyframe(start, value), Keyframe(end, value)])

    def __len__(self) -> int:
        return len(self.keys)


@dataclass(frozen=True)
class CurveBinding:
    """(node path relative to the clip root, component type, property name)"""
    path: str
    property_name: str
    type_name: str = "Transform"


@dataclass
class AnimationClip:
    name: str = "Take 001"
    curves: Dict[CurveBinding, AnimationCurve] = field(default_factory=dict)

    def bindings(self) -> List[CurveBinding]:
        return list(self.curves.keys())

    def get_curve(self, binding: CurveBinding) -> Optional[AnimationCurve]:
        return self.curves.get(binding)

    def set_curve(self, binding: CurveBinding, curve: AnimationCurve) -> None:
        self.curves[binding] = curve

    def remove_curve(self, binding: CurveBinding) -> None:
        self.curves.pop(binding, None)


# ==================== Audit ====================

@dataclass
class AuditEntry:
    """One audit.log line"""
    code: str
    message: str
    severity: str
    object_name: Optional[str] = None
    timestamp: str = ""
