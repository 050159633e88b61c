# -*- coding: utf-8 -*-
"""Utility module: logging"""

from .logger import Logger, null_logger

__all__ = [
    'Logger',
    'null_logger',
]
