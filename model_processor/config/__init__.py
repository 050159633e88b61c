# -*- coding: utf-8 -*-
"""
Configuration module
"""

from .processor_settings import ProcessorSettings

__all__ = ['ProcessorSettings']
