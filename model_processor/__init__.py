# File: __init__.py
# Purpose: Model Processor package entry
# Notes:
# - Post-processing of Blender models at import time: axis conversion,
#   light unit fix, user rules
# - The host import pipeline builds the SceneNode tree and calls
#   ModelPostProcessor; nothing here talks to the host directly

__version__ = "1.0.0"

from .config.processor_settings import ProcessorSettings
from .core.animation_converter import AnimationConverter, convert_animation_clip
from .core.coordinate_converter import ConversionReport, OrientationConverter, convert_scene
from .core.exceptions import (
    ModelProcessorError,
    RuleConfigurationError,
    SceneInvariantError,
    SettingsError,
    UnsupportedRuleError,
)
from .core.light_fixer import fix_lights
from .core.schema import (
    AnimationClip,
    AnimationCurve,
    Camera,
    Collider,
    CurveBinding,
    Keyframe,
    Light,
    LightType,
    Mesh,
    Renderer,
    SceneNode,
    ShadowCastingMode,
    StaticFlags,
)
from .post_processor import ModelPostProcessor, is_blend_file_or_blender_export
from .rules import (
    Action,
    ActionType,
    Condition,
    ConditionType,
    Operator,
    PartInfo,
    Rule,
    RuleContext,
    RuleSet,
    apply_rule_set,
)
from .utils.logger import Logger
from .writers.audit_writer import AuditLogger, ErrorCode

__all__ = [
    'ProcessorSettings', 'ModelPostProcessor', 'is_blend_file_or_blender_export',
    'OrientationConverter', 'ConversionReport', 'convert_scene',
    'AnimationConverter', 'convert_animation_clip', 'fix_lights',
    'SceneNode', 'Mesh', 'Renderer', 'Light', 'LightType', 'Camera', 'Collider',
    'ShadowCastingMode', 'StaticFlags',
    'AnimationClip', 'AnimationCurve', 'CurveBinding', 'Keyframe',
    'Action', 'ActionType', 'Condition', 'ConditionType', 'Operator', 'PartInfo',
    'Rule', 'RuleContext', 'RuleSet', 'apply_rule_set',
    'Logger', 'AuditLogger', 'ErrorCode',
    'ModelProcessorError', 'RuleConfigurationError', 'SceneInvariantError',
    'SettingsError', 'UnsupportedRuleError',
]
