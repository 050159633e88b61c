# File: writers/__init__.py
# Purpose: Writers package init

"""
Model Processor Writers Module
Audit trail of an import pass
"""

from .audit_writer import AuditLogger, ErrorCode

__all__ = [
    'AuditLogger',
    'ErrorCode',
]
