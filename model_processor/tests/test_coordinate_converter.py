import math
import sys
import unittest
from pathlib import Path


# Allow `import model_processor.*` from repo root.
_REPO_DIR = Path(__file__).resolve().parents[2]
if str(_REPO_DIR) not in sys.path:
    sys.path.insert(0, str(_REPO_DIR))

from mathutils import Matrix, Quaternion, Vector  # noqa: E402

from model_processor.core.coordinate_converter import (  # noqa: E402
    IMPORTED_ROTATION,
    OrientationConverter,
    convert_scene,
    mesh_fix_matrix,
)
from model_processor.core.exceptions import SceneInvariantError  # noqa: E402
from model_processor.core.schema import Camera, Light, Mesh, Renderer, SceneNode  # noqa: E402
from model_processor.core.utils import quaternions_close, vectors_close  # noqa: E402
from model_processor.utils.logger import null_logger  # noqa: E402


def rx(degrees):
    return Quaternion((1.0, 0.0, 0.0), math.radians(degrees))


def ry(degrees):
    return Quaternion((0.0, 1.0, 0.0), math.radians(degrees))


def rz(degrees):
    return Quaternion((0.0, 0.0, 1.0), math.radians(degrees))


def make_mesh(name="Mesh"):
    return Mesh(
        name=name,
        vertices=[Vector((0.0, 1.0, 0.0)), Vector((1.0, 0.0, 0.0)), Vector((0.0, 0.0, 1.0))],
        normals=[Vector((0.0, 1.0, 0.0))] * 3,
        uvs=[(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)],
        triangles=[0, 1, 2],
    )


def build_model():
    """Root (empty) -> Body (mesh) -> Arm (mesh) -> Hand; Root -> Lamp (light)"""
    hand = SceneNode("Hand", local_position=(0.0, 1.0, 0.0))
    arm = SceneNode("Arm", local_position=(0.0, 2.0, 0.0), local_rotation=rx(-90),
                    mesh=make_mesh("ArmMesh"), children=[hand])
    body = SceneNode("Body", local_position=(1.0, 2.0, 3.0), local_rotation=rx(-90),
                     local_scale=(1.0, 2.0, 3.0), mesh=make_mesh("BodyMesh"), children=[arm])
    root = SceneNode("Root", children=[body])
    root.add_child(SceneNode("Lamp", light=Light()))
    return root


def snapshot(root):
    nodes = []
    for node in root.walk():
        mesh = node.mesh
        nodes.append((
            node.hierarchy_path,
            tuple(node.local_position),
            tuple(node.local_rotation),
            tuple(node.local_scale),
            tuple(tuple(v) for v in mesh.vertices) if mesh else None,
            tuple(tuple(n) for n in mesh.normals) if mesh else None,
            tuple(mesh.tangents) if mesh else None,
        ))
    return nodes


class TestConvertSceneDeterminism(unittest.TestCase):
    def test_two_copies_convert_to_identical_results(self) -> None:
        for match_axes in (False, True):
            a, b = build_model(), build_model()
            convert_scene(a, match_axes, logger=null_logger())
            convert_scene(b, match_axes, logger=null_logger())
            self.assertEqual(snapshot(a), snapshot(b))

    def test_converting_twice_differs_from_converting_once(self) -> None:
        once, twice = build_model(), build_model()
        convert_scene(once, False, logger=null_logger())
        convert_scene(twice, False, logger=null_logger())
        convert_scene(twice, False, logger=null_logger())

        self.assertNotEqual(snapshot(once), snapshot(twice))
        v_once = once.find("Body").mesh.vertices[0]
        v_twice = twice.find("Body").mesh.vertices[0]
        self.assertTrue(vectors_close(v_once, (0.0, 0.0, -1.0)))
        self.assertTrue(vectors_close(v_twice, (0.0, -1.0, 0.0)))


class TestMeshFix(unittest.TestCase):
    def test_fix_then_inverse_restores_vertices(self) -> None:
        for match_axes in (False, True):
            mesh = make_mesh()
            original = [v.copy() for v in mesh.vertices]
            converter = OrientationConverter(match_axes, logger=null_logger())
            matrix = mesh_fix_matrix(match_axes)

            converter.apply_mesh_fix(mesh, matrix, calculate_tangents=False)
            converter.apply_mesh_fix(mesh, matrix.inverted(), calculate_tangents=False)

            for restored, expected in zip(mesh.vertices, original):
                self.assertTrue(vectors_close(restored, expected, 1e-5))

    def test_vertices_and_normals_are_rotated(self) -> None:
        root = SceneNode("Root", mesh=make_mesh())
        convert_scene(root, False, logger=null_logger())
        self.assertTrue(vectors_close(root.mesh.vertices[0], (0.0, 0.0, -1.0)))
        self.assertTrue(vectors_close(root.mesh.normals[0], (0.0, 0.0, -1.0)))

    def test_match_axes_also_turns_mesh_around_up_axis(self) -> None:
        root = SceneNode("Root", mesh=make_mesh())
        convert_scene(root, True, logger=null_logger())
        self.assertTrue(vectors_close(root.mesh.vertices[0], (0.0, 0.0, 1.0)))

    def test_shared_mesh_is_fixed_once(self) -> None:
        shared = make_mesh("Shared")
        root = SceneNode("Root", children=[
            SceneNode("Left", mesh=shared),
            SceneNode("Right", mesh=shared),
        ])
        fixed = []
        converter = OrientationConverter(False, logger=null_logger(), on_mesh_fixed=fixed.append)
        report = converter.convert_scene(root)

        self.assertEqual(len(fixed), 1)
        self.assertIs(fixed[0], shared)
        self.assertEqual(report.fixed_meshes, [shared])
        self.assertTrue(vectors_close(shared.vertices[0], (0.0, 0.0, -1.0)))

    def test_tangents_rebuilt_only_when_requested(self) -> None:
        with_tangents = SceneNode("Root", mesh=make_mesh())
        without_tangents = SceneNode("Root", mesh=make_mesh())
        convert_scene(with_tangents, False, import_tangents=True, logger=null_logger())
        convert_scene(without_tangents, False, import_tangents=False, logger=null_logger())

        self.assertEqual(len(with_tangents.mesh.tangents), 3)
        self.assertEqual(without_tangents.mesh.tangents, [])

    def test_bounds_follow_rotated_vertices(self) -> None:
        root = SceneNode("Root", mesh=make_mesh())
        convert_scene(root, False, logger=null_logger())
        lo, hi = root.mesh.bounds
        self.assertTrue(vectors_close(lo, (0.0, 0.0, -1.0)))
        self.assertTrue(vectors_close(hi, (1.0, 1.0, 0.0)))


class TestTransformFix(unittest.TestCase):
    def test_root_without_geometry_is_left_alone(self) -> None:
        root = build_model()
        root.local_rotation = rx(-90)
        report = convert_scene(root, False, logger=null_logger())

        self.assertTrue(quaternions_close(root.local_rotation, rx(-90)))
        self.assertNotIn(root, report.fixed_nodes)
        self.assertEqual(report.deltas[root], Matrix.Identity(4))

    def test_first_level_position_kept_when_root_has_no_mesh(self) -> None:
        root = build_model()
        convert_scene(root, False, logger=null_logger())
        body = root.find("Body")

        self.assertTrue(vectors_close(body.local_position, (1.0, 2.0, 3.0)))
        self.assertTrue(quaternions_close(body.local_rotation, Quaternion()))
        self.assertTrue(vectors_close(body.local_scale, (1.0, 3.0, 2.0)))

    def test_first_level_position_rotated_when_root_has_mesh(self) -> None:
        child = SceneNode("Child", local_position=(0.0, 1.0, 0.0))
        root = SceneNode("Root", mesh=make_mesh(), children=[child])
        convert_scene(root, False, logger=null_logger())
        self.assertTrue(vectors_close(child.local_position, (0.0, 0.0, -1.0)))

    def test_deeper_positions_are_rotated(self) -> None:
        root = build_model()
        convert_scene(root, False, logger=null_logger())
        self.assertTrue(vectors_close(root.find("Body/Arm").local_position, (0.0, 0.0, -2.0)))
        self.assertTrue(vectors_close(root.find("Body/Arm/Hand").local_position, (0.0, 0.0, -1.0)))

    def test_child_keeps_world_rotation_before_its_own_fix(self) -> None:
        root = build_model()
        convert_scene(root, False, logger=null_logger())
        # world Rx(-180) held while Body is cleared, then Arm's own fix
        self.assertTrue(quaternions_close(root.find("Body/Arm").local_rotation, rx(-90)))

    def test_imported_rotation_snaps_to_identity(self) -> None:
        node = SceneNode("Body", local_rotation=IMPORTED_ROTATION, mesh=make_mesh())
        root = SceneNode("Root", children=[node])
        convert_scene(root, False, logger=null_logger())
        self.assertEqual(tuple(node.local_rotation), (1.0, 0.0, 0.0, 0.0))

    def test_match_axes_mirrors_positions(self) -> None:
        root = build_model()
        convert_scene(root, True, logger=null_logger())
        self.assertTrue(vectors_close(root.find("Body").local_position, (-1.0, 2.0, -3.0)))

    def test_light_gets_extra_rotation(self) -> None:
        root = build_model()
        report = convert_scene(root, False, logger=null_logger())
        lamp = root.find("Lamp")

        self.assertIn(lamp, report.fixed_lights_and_cameras)
        # +90 from the generic fix, -90 from the light fix
        self.assertTrue(quaternions_close(lamp.local_rotation, Quaternion()))

    def test_camera_gets_extra_rotation(self) -> None:
        camera = SceneNode("Camera", local_position=(1.0, 2.0, 3.0), camera=Camera())
        root = SceneNode("Root", children=[camera])
        report = convert_scene(root, False, logger=null_logger())

        self.assertIn(camera, report.fixed_lights_and_cameras)
        self.assertTrue(quaternions_close(camera.local_rotation, Quaternion()))
        self.assertTrue(vectors_close(camera.local_position, (1.0, 2.0, 3.0)))

    def test_match_axes_turns_lights_and_cameras_half_way_around(self) -> None:
        lamp = SceneNode("Lamp", local_position=(1.0, 2.0, 3.0), light=Light())
        camera = SceneNode("Camera", local_position=(1.0, 2.0, 3.0), camera=Camera())
        root = SceneNode("Root", children=[lamp, camera])
        report = convert_scene(root, True, logger=null_logger())

        self.assertEqual(report.fixed_lights_and_cameras, [lamp, camera])
        for node in (lamp, camera):
            # mirrored Rx(+90), then Rx(-90) and Rz(180) on top
            self.assertTrue(quaternions_close(node.local_rotation, ry(180)))
            self.assertTrue(vectors_close(node.local_position, (-1.0, 2.0, -3.0)))


class TestBindPoseFix(unittest.TestCase):
    def _skinned_model(self, bones_in_tree=True, bind_poses=None):
        bone = SceneNode("Bone")
        mesh = make_mesh("SkinMesh")
        mesh.bind_poses = bind_poses if bind_poses is not None else [Matrix.Translation((0.0, 1.0, 0.0))]
        bones = [bone] if bones_in_tree else [SceneNode("Stray")]
        skin = SceneNode("Skin", mesh=mesh, renderer=Renderer(skinned=True, bones=bones))
        root = SceneNode("Root", children=[bone, skin])
        return root, mesh

    def test_bind_pose_position_is_rotated(self) -> None:
        root, mesh = self._skinned_model()
        report = convert_scene(root, False, logger=null_logger())

        self.assertEqual(report.fixed_bind_poses, [mesh])
        location, rotation, scale = mesh.bind_poses[0].decompose()
        self.assertTrue(vectors_close(location, (0.0, 0.0, -1.0)))
        self.assertTrue(quaternions_close(rotation, Quaternion()))
        self.assertTrue(vectors_close(scale, (1.0, 1.0, 1.0)))

    def test_match_axes_turns_bind_pose_around_up_axis(self) -> None:
        bind_pose = Matrix.LocRotScale(Vector((0.0, 1.0, 0.0)), rz(90), Vector((1.0, 2.0, 3.0)))
        root, mesh = self._skinned_model(bind_poses=[bind_pose])
        convert_scene(root, True, logger=null_logger())

        location, rotation, scale = mesh.bind_poses[0].decompose()
        self.assertTrue(vectors_close(location, (0.0, 0.0, 1.0)))
        # Z axis maps onto the up axis under both fixes
        self.assertTrue(quaternions_close(rotation, ry(90)))
        self.assertTrue(vectors_close(scale, (1.0, 3.0, 2.0)))

    def test_missing_bone_raises(self) -> None:
        root, _ = self._skinned_model(bones_in_tree=False)
        with self.assertRaises(SceneInvariantError):
            convert_scene(root, False, logger=null_logger())

    def test_bind_pose_count_mismatch_raises(self) -> None:
        root, _ = self._skinned_model(bind_poses=[Matrix.Identity(4), Matrix.Identity(4)])
        with self.assertRaises(SceneInvariantError):
            convert_scene(root, False, logger=null_logger())


if __name__ == "__main__":
    unittest.main()
