# File: core/coordinate_converter.py
# Purpose: Orientation fix (Blender Z-up export -> engine Y-up import)
# Notes:
# - The importer leaves a -90 deg X rotation on every object that came from
#   Blender; this pass bakes it into the meshes and clears it from transforms
# - match_axes additionally turns the model 180 deg about the up axis so
#   Blender's -Y forward becomes the engine's +Z forward
# - Not idempotent, run exactly once per import

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from mathutils import Matrix, Quaternion

from .exceptions import SceneInvariantError
from .schema import Mesh, SceneNode
from .utils import mirror_horizontal, mirror_rotation, swap_yz
from ..utils.logger import Logger
from ..writers.audit_writer import ErrorCode


SQRT2_HALF = math.sqrt(0.5)

# -90 deg about X; the rotation the importer puts on Blender objects
ROTATION_FIX = Quaternion((SQRT2_HALF, -SQRT2_HALF, 0.0, 0.0))
# 180 deg about Y composed with ROTATION_FIX
ROTATION_FIX_Z_FLIP = Quaternion((0.0, 0.0, SQRT2_HALF, SQRT2_HALF))
# +90 deg about X, applied on the right of animated rotations
ANIM_ROTATION_FIX = Quaternion((SQRT2_HALF, SQRT2_HALF, 0.0, 0.0))
# 180 deg about Y
MIRROR_ROTATION = Quaternion((0.0, 0.0, 1.0, 0.0))
# lights and cameras
LIGHT_CAMERA_FIX = Quaternion((1.0, 0.0, 0.0), math.radians(-90.0))
LIGHT_CAMERA_FIX_Z_FLIP = Quaternion((0.0, 0.0, 1.0), math.radians(180.0))

# the importer writes -89.98 deg instead of -90
IMPORTED_ROTATION = Quaternion((1.0, 0.0, 0.0), math.radians(-89.98))
IMPORTED_ROTATION_TOLERANCE = math.radians(0.001)


def mesh_fix_rotation(match_axes: bool) -> Quaternion:
    return ROTATION_FIX_Z_FLIP if match_axes else ROTATION_FIX


def mesh_fix_matrix(match_axes: bool) -> Matrix:
    return mesh_fix_rotation(match_axes).to_matrix().to_4x4()


@dataclass
class MeshUsage:
    """Nodes referencing one mesh, split by renderer kind"""
    nodes: List[SceneNode] = field(default_factory=list)
    skinned_nodes: List[SceneNode] = field(default_factory=list)


@dataclass
class ConversionReport:
    """What one convert_scene() call touched"""
    fixed_nodes: List[SceneNode] = field(default_factory=list)
    fixed_meshes: List[Mesh] = field(default_factory=list)
    fixed_bind_poses: List[Mesh] = field(default_factory=list)
    fixed_lights_and_cameras: List[SceneNode] = field(default_factory=list)
    deltas: Dict[SceneNode, Matrix] = field(default_factory=dict)

    @property
    def modified(self) -> bool:
        return bool(self.fixed_nodes or self.fixed_meshes)


def collect_meshes(root: SceneNode) -> Dict[Mesh, MeshUsage]:
    """Distinct meshes referenced anywhere under root, in first-seen order"""
    meshes: Dict[Mesh, MeshUsage] = {}
    for node in root.walk():
        if node.mesh is None:
            continue
        usage = meshes.setdefault(node.mesh, MeshUsage())
        if node.renderer is not None and node.renderer.skinned:
            usage.skinned_nodes.append(node)
        else:
            usage.nodes.append(node)
    return meshes


class OrientationConverter:
    """
    Orientation converter

    Per import:
        converter = OrientationConverter(match_axes=True, import_tangents=True, logger=logger)
        report = converter.convert_scene(root)

    on_mesh_fixed, when given, is called once for every mesh whose vertex data
    was rewritten.
    """

    def __init__(self, match_axes: bool = False, import_tangents: bool = True,
                 logger: Optional[Logger] = None,
                 on_mesh_fixed: Optional[Callable[[Mesh], None]] = None):
        self.match_axes = match_axes
        self.import_tangents = import_tangents
        self.logger = logger or Logger()
        self.on_mesh_fixed = on_mesh_fixed

    # ==================== Scene ====================

    def convert_scene(self, root: SceneNode) -> ConversionReport:
        report = ConversionReport()
        meshes = collect_meshes(root)
        root_has_mesh = root.has_geometry

        # 1. transforms, parents before children
        for node in list(root.walk()):
            if node is root and not root_has_mesh:
                report.deltas[node] = Matrix.Identity(4)
                continue
            report.deltas[node] = self.apply_transform_fix(node, root_has_mesh)
            report.fixed_nodes.append(node)

        # 2. geometry, once per distinct mesh
        matrix = mesh_fix_matrix(self.match_axes)
        for mesh, usage in meshes.items():
            self.apply_mesh_fix(mesh, matrix, self.import_tangents)
            report.fixed_meshes.append(mesh)
            if usage.skinned_nodes:
                self.apply_bind_pose_fix(mesh, usage.skinned_nodes, report.deltas)
                report.fixed_bind_poses.append(mesh)

        # 3. lights and cameras on top of the generic fix
        for node in report.fixed_nodes:
            if node.light is not None or node.camera is not None:
                self.apply_light_camera_fix(node)
                report.fixed_lights_and_cameras.append(node)

        self.logger.info(
            f"Axis conversion: {len(report.fixed_nodes)} transforms, "
            f"{len(report.fixed_meshes)} meshes, {len(report.fixed_bind_poses)} bind pose sets",
            root.name)
        return report

    def apply_transform_fix(self, node: SceneNode, root_has_mesh: bool) -> Matrix:
        """
        Clear the import rotation from one transform.

        Children keep their world rotation; their local position is handled
        when they are visited (parents are always fixed first).

        Returns the world matrix delta before^-1 @ after.
        """
        before = node.world_matrix

        if node.depth > 1 or root_has_mesh:
            node.local_position = ROTATION_FIX @ node.local_position

        child_rotations = [(child, child.world_rotation) for child in node.children]
        if node.local_rotation.rotation_difference(IMPORTED_ROTATION).angle < IMPORTED_ROTATION_TOLERANCE:
            node.local_rotation = Quaternion()
        else:
            node.local_rotation = node.local_rotation @ ROTATION_FIX.inverted()
        for child, rotation in child_rotations:
            child.world_rotation = rotation

        if self.match_axes:
            node.local_position = mirror_horizontal(node.local_position)
            node.local_rotation = mirror_rotation(node.local_rotation)

        node.local_scale = swap_yz(node.local_scale)

        after = node.world_matrix
        self.logger.debug(f"Fixed transform {node.hierarchy_path}")
        return before.inverted_safe() @ after

    def apply_mesh_fix(self, mesh: Mesh, matrix: Matrix, calculate_tangents: bool) -> None:
        """Rotate vertices and normals, then refresh tangents and bounds"""
        mesh.vertices = [matrix @ v for v in mesh.vertices]

        if mesh.normals:
            rotation = matrix.to_3x3()
            mesh.normals = [rotation @ n for n in mesh.normals]

        if calculate_tangents:
            mesh.recalculate_tangents()
        mesh.recalculate_bounds()

        if self.on_mesh_fixed is not None:
            self.on_mesh_fixed(mesh)
        self.logger.debug(f"Fixed mesh {mesh.name} ({mesh.vertex_count} vertices)")

    def apply_bind_pose_fix(self, mesh: Mesh, skinned_nodes: List[SceneNode],
                            deltas: Dict[SceneNode, Matrix]) -> None:
        """
        Conjugate every bind pose by the mesh fix rotation.

        Every bone of every renderer using the mesh must have been visited by
        the transform pass; anything else is a traversal bug.
        """
        for node in skinned_nodes:
            bones = node.renderer.bones
            for bone in bones:
                if bone not in deltas:
                    self.logger.error(f"Bone {bone.name} has no recorded transform delta",
                                      node.hierarchy_path, code=ErrorCode.AXS001)
                    raise SceneInvariantError(
                        f"Bone '{bone.name}' of '{node.hierarchy_path}' is not part of the converted scene")
            if mesh.bind_poses and len(mesh.bind_poses) != len(bones):
                self.logger.error(f"{len(mesh.bind_poses)} bind poses for {len(bones)} bones",
                                  node.hierarchy_path, code=ErrorCode.AXS002)
                raise SceneInvariantError(
                    f"Mesh '{mesh.name}' has {len(mesh.bind_poses)} bind poses but "
                    f"'{node.hierarchy_path}' has {len(bones)} bones")

        rotation = mesh_fix_rotation(self.match_axes)
        inverse = rotation.inverted()
        fixed = []
        for bind_pose in mesh.bind_poses:
            location, orientation, scale = bind_pose.decompose()
            fixed.append(Matrix.LocRotScale(
                rotation @ location,
                rotation @ orientation @ inverse,
                swap_yz(scale)))
        mesh.bind_poses = fixed
        self.logger.debug(f"Fixed {len(fixed)} bind poses of {mesh.name}")

    def apply_light_camera_fix(self, node: SceneNode) -> None:
        """Lights and cameras look down a different local axis than geometry"""
        rotation = node.local_rotation @ LIGHT_CAMERA_FIX
        if self.match_axes:
            rotation = rotation @ LIGHT_CAMERA_FIX_Z_FLIP
        node.local_rotation = rotation


# ==================== Convenience ====================

def convert_scene(root: SceneNode, match_axes: bool, import_tangents: bool = True,
                  logger: Optional[Logger] = None) -> ConversionReport:
    """Run the orientation fix over a whole imported scene graph"""
    return OrientationConverter(match_axes, import_tangents, logger).convert_scene(root)
