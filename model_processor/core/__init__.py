# -*- coding: utf-8 -*-
# File: core/__init__.py
# Purpose: Core package init

"""
Model Processor Core Module
Scene data structures, orientation conversion and light fixing
"""

from .exceptions import (
    ModelProcessorError,
    RuleConfigurationError,
    SceneInvariantError,
    SettingsError,
    UnsupportedRuleError,
)

__all__ = [
    'schema',
    'utils',
    'coordinate_converter',
    'animation_converter',
    'light_fixer',
    'ModelProcessorError',
    'RuleConfigurationError',
    'SceneInvariantError',
    'SettingsError',
    'UnsupportedRuleError',
]
