# File: post_processor.py
# Purpose: Import-time entry points; runs the passes on one model / one clip
# Notes:
# - Fixed order: validation -> axis conversion -> light fix -> model rules ->
#   project rules
# - Only the conversion and the light fix count as modifications; rules run
#   on every import and never ask for a re-import
# - One Logger per call site, quiet unless the settings ask for verbose output

import os
from typing import Optional

from .config.constants import BLENDER_CREATOR_ID, EXT_BLEND, EXT_FBX, FILE_HEADER_SIZE
from .config.processor_settings import ProcessorSettings
from .core.animation_converter import convert_animation_clip
from .core.coordinate_converter import convert_scene
from .core.exceptions import RuleConfigurationError, SceneInvariantError
from .core.light_fixer import fix_lights
from .core.schema import AnimationClip, SceneNode
from .rules.context import RuleContext
from .rules.rule_set import apply_rule_set
from .utils.logger import Logger
from .validators.scene_validator import validate_clip, validate_rule, validate_scene
from .writers.audit_writer import AuditLogger, ErrorCode


class ModelPostProcessor:
    """
    Model post-processor

    Usage:
        processor = ModelPostProcessor(ProcessorSettings.from_json(user_data))
        if processor.process_model(root):
            ...  # host saves and re-imports
        for clip in clips:
            processor.process_animation(clip)
    """

    def __init__(self, settings: ProcessorSettings, logger: Optional[Logger] = None,
                 audit: Optional[AuditLogger] = None,
                 rule_context: Optional[RuleContext] = None):
        self.settings = settings
        self.audit = audit
        self.logger = logger or Logger(audit_logger=audit, verbose=settings.verbose_logging)
        self.rule_context = rule_context or RuleContext(logger=self.logger)

    # ==================== Model ====================

    def process_model(self, root: SceneNode, import_tangents: bool = True) -> bool:
        """
        Run every enabled pass over an imported model.

        Returns True when the model data changed and the host should save
        and re-import.
        """
        settings = self.settings
        self._validate_scene(root)

        modified = False

        if settings.apply_axis_conversion:
            convert_scene(root, settings.match_axes, import_tangents, self.logger)
            modified = True

        if settings.fix_lights:
            modified |= fix_lights(root, settings.light_intensity_factor,
                                   settings.light_range_factor, self.logger)

        if settings.apply_rules:
            self._apply_rules(settings.rules, root)
            if settings.apply_project_rules:
                for rule_set in settings.external_rule_sets:
                    if rule_set.enabled:
                        self._apply_rules(rule_set.rules, root)

        self.logger.info(f"Post-processing finished (modified={modified})", root.name)
        return modified

    def _validate_scene(self, root: SceneNode) -> None:
        errors, warnings = validate_scene(root)
        for w in warnings:
            self.logger.warning(w, root.name, code=ErrorCode.SCN002)
        for e in errors:
            self.logger.error(e, root.name, code=ErrorCode.SCN001)
        if errors:
            raise SceneInvariantError(f"Model {root.name} failed validation: {errors[0]}")

    def _apply_rules(self, rules, root: SceneNode) -> int:
        for index, rule in enumerate(rules):
            for w in validate_rule(rule, self.rule_context):
                self.logger.warning(f"Rule {index}: {w}", root.name, code=ErrorCode.SCN004)
        try:
            return apply_rule_set(rules, root, self.rule_context)
        except RuleConfigurationError as exc:
            self.logger.error(str(exc), root.name, code=ErrorCode.RUL005)
            raise

    # ==================== Animation ====================

    def process_animation(self, clip: AnimationClip) -> bool:
        """Fix one clip of the model; True when the clip was rewritten"""
        if not self.settings.apply_axis_conversion:
            return False
        errors, warnings = validate_clip(clip)
        for w in warnings:
            self.logger.warning(w, clip.name, code=ErrorCode.ANM004)
        for e in errors:
            self.logger.error(e, clip.name, code=ErrorCode.SCN003)
        if errors:
            raise SceneInvariantError(f"Clip {clip.name} failed validation: {errors[0]}")
        convert_animation_clip(clip, self.settings.match_axes, self.logger)
        return True


# ==================== Source detection ====================

def is_blend_file_or_blender_export(path: str) -> bool:
    """.blend files, and .fbx files whose header names the Blender exporter"""
    ext = os.path.splitext(path)[1].lower()
    if ext == EXT_BLEND:
        return True
    if ext != EXT_FBX:
        return False
    with open(path, "rb") as f:
        header = f.read(FILE_HEADER_SIZE)
    return BLENDER_CREATOR_ID in header.decode("ascii", errors="replace")
