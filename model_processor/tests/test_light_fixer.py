import sys
import unittest
from pathlib import Path


# Allow `import model_processor.*` from repo root.
_REPO_DIR = Path(__file__).resolve().parents[2]
if str(_REPO_DIR) not in sys.path:
    sys.path.insert(0, str(_REPO_DIR))

from model_processor.core.light_fixer import fix_lights  # noqa: E402
from model_processor.core.schema import Light, LightType, SceneNode  # noqa: E402
from model_processor.utils.logger import Logger, null_logger  # noqa: E402
from model_processor.writers.audit_writer import AuditLogger, ErrorCode  # noqa: E402


class TestFixLights(unittest.TestCase):
    def test_point_light_is_rescaled(self) -> None:
        point = Light(LightType.POINT, intensity=1000.0, range=10.0)
        sun = Light(LightType.DIRECTIONAL, intensity=3.0, range=10.0)
        root = SceneNode("Root", children=[
            SceneNode("Point", light=point),
            SceneNode("Sun", light=sun),
        ])

        changed = fix_lights(root, 0.01, 0.1, null_logger())

        self.assertTrue(changed)
        self.assertAlmostEqual(point.intensity, 10.0)
        self.assertAlmostEqual(point.range, 1.0)
        self.assertEqual((sun.intensity, sun.range), (3.0, 10.0))

    def test_directional_light_alone_reports_no_change(self) -> None:
        sun = Light(LightType.DIRECTIONAL, intensity=3.0, range=10.0)
        root = SceneNode("Root", children=[SceneNode("Sun", light=sun)])

        self.assertFalse(fix_lights(root, 0.01, 0.1, null_logger()))
        self.assertEqual((sun.intensity, sun.range), (3.0, 10.0))

    def test_default_factors(self) -> None:
        spot = Light(LightType.SPOT, intensity=500.0, range=20.0)
        root = SceneNode("Root", light=spot)

        self.assertTrue(fix_lights(root, logger=null_logger()))
        self.assertAlmostEqual(spot.intensity, 5.0)
        self.assertAlmostEqual(spot.range, 2.0)

    def test_rescale_is_recorded_as_info(self) -> None:
        audit = AuditLogger()
        root = SceneNode("Root", light=Light(LightType.POINT, intensity=100.0, range=5.0))

        fix_lights(root, logger=Logger(audit_logger=audit, quiet=True))

        self.assertEqual([(e.severity, e.code) for e in audit.entries], [("INFO", ErrorCode.LGT001)])
        self.assertFalse(audit.has_warnings())

    def test_model_without_lights(self) -> None:
        root = SceneNode("Root", children=[SceneNode("Body")])
        self.assertFalse(fix_lights(root, logger=null_logger()))


if __name__ == "__main__":
    unittest.main()
