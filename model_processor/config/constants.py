# -*- coding: utf-8 -*-
"""
Model Processor constants
"""

# Blender detection
BLENDER_CREATOR_ID = "Blender (stable FBX IO)"
FILE_HEADER_SIZE = 512
EXT_BLEND = ".blend"
EXT_FBX = ".fbx"

# Light unit correction defaults
DEFAULT_LIGHT_INTENSITY_FACTOR = 0.01
DEFAULT_LIGHT_RANGE_FACTOR = 0.1

# Rule engine
UNTAGGED = "Untagged"
HELPER_COMPONENT_NAME = "HelperComponent"

# Built-in layers (name -> index)
DEFAULT_LAYERS = {
    "Default": 0,
    "TransparentFX": 1,
    "Ignore Raycast": 2,
    "Water": 4,
    "UI": 5,
}
MAX_LAYER = 31

# Animated transform properties
POSITION_PROPERTIES = ("m_LocalPosition.x", "m_LocalPosition.y", "m_LocalPosition.z")
ROTATION_PROPERTIES = ("m_LocalRotation.x", "m_LocalRotation.y", "m_LocalRotation.z", "m_LocalRotation.w")
SCALE_PROPERTIES = ("m_LocalScale.x", "m_LocalScale.y", "m_LocalScale.z")
TRANSFORM_TYPE_NAME = "Transform"
