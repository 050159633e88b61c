# File: core/light_fixer.py
# Purpose: Rescale imported light values (Blender watts / metres -> engine units)
# Notes:
# - Directional lights are left alone, their intensity is not distance based
# - Runs after the axis conversion, before the rules

from typing import Optional

from .schema import LightType, SceneNode
from ..config.constants import DEFAULT_LIGHT_INTENSITY_FACTOR, DEFAULT_LIGHT_RANGE_FACTOR
from ..utils.logger import Logger
from ..writers.audit_writer import ErrorCode


def fix_lights(root: SceneNode,
               intensity_factor: float = DEFAULT_LIGHT_INTENSITY_FACTOR,
               range_factor: float = DEFAULT_LIGHT_RANGE_FACTOR,
               logger: Optional[Logger] = None) -> bool:
    """
    Multiply intensity and range of every non-directional light.

    Returns True when at least one light was changed.
    """
    logger = logger or Logger()
    changed = False
    for node in root.walk():
        light = node.light
        if light is None or light.type == LightType.DIRECTIONAL:
            continue
        old_intensity, old_range = light.intensity, light.range
        light.intensity *= intensity_factor
        light.range *= range_factor
        changed = True
        logger.info(
            f"Light rescaled: intensity {old_intensity:g} -> {light.intensity:g}, "
            f"range {old_range:g} -> {light.range:g}",
            node.hierarchy_path, code=ErrorCode.LGT001)
    return changed
