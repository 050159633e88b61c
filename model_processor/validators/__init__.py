# -*- coding: utf-8 -*-
"""
Validators module
"""

from .scene_validator import validate_clip, validate_rule, validate_scene

__all__ = ['validate_clip', 'validate_rule', 'validate_scene']
