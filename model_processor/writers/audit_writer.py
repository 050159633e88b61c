# File: writers/audit_writer.py
# Purpose: Collect an audit trail of everything one import pass did and,
#          on request, write it to an audit.log
# Notes:
# - Code families: AXS (axis conversion), ANM (animation), LGT (lights),
#   RUL (rules), SCN (scene validation)
# - Severity: ERROR / WARNING / INFO
# - Line format: timestamp | severity | code | message | object name

import time
from typing import List, Optional

from ..core.schema import AuditEntry


class AuditLogger:
    """
    AuditLogger
    -----------
    In-memory audit trail of one import pass; save() writes it out.

    Usage:
        audit = AuditLogger("Library/ModelProcessor/audit.log")
        audit.info("axis conversion applied", "Hero")
        audit.error(ErrorCode.SCN002, "normals count mismatch", "Body")
        audit.warning(ErrorCode.RUL003, "helper component missing", "Hero/Marker")
        audit.save()
    """

    def __init__(self, filepath: Optional[str] = None):
        self.filepath = filepath
        self.entries: List[AuditEntry] = []

    def _add_entry(self, severity: str, message: str,
                   code: str = "", object_name: Optional[str] = None) -> None:
        entry = AuditEntry(
            code=code,
            message=message,
            severity=severity,
            object_name=object_name,
            timestamp=time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        )
        self.entries.append(entry)

    def info(self, message: str, object_name: Optional[str] = None, code: str = "") -> None:
        self._add_entry("INFO", message, code, object_name)

    def warning(self, code: str, message: str, object_name: Optional[str] = None) -> None:
        self._add_entry("WARNING", message, code, object_name)

    def error(self, code: str, message: str, object_name: Optional[str] = None) -> None:
        self._add_entry("ERROR", message, code, object_name)

    def format_lines(self) -> List[str]:
        lines = []
        for entry in self.entries:
            line = f"[{entry.timestamp}] [{entry.severity}]"
            if entry.code:
                line += f" [{entry.code}]"
            line += f" {entry.message}"
            if entry.object_name:
                line += f" | Object: {entry.object_name}"
            lines.append(line)
        return lines

    def save(self, filepath: Optional[str] = None) -> None:
        """Write audit.log; the path given here wins over the constructor one"""
        path = filepath or self.filepath
        if not path:
            raise ValueError("AuditLogger.save() needs a file path")
        with open(path, "w", encoding="utf-8") as f:
            f.write("# Model Processor Audit Log\n")
            f.write(f"# Generated: {time.strftime('%Y-%m-%d %H:%M:%S', time.localtime())}\n")
            f.write("# Format: [Timestamp] [Severity] [Code] Message | Object\n")
            f.write("#" + "=" * 70 + "\n\n")
            for line in self.format_lines():
                f.write(line + "\n")

    def has_errors(self) -> bool:
        return any(e.severity == "ERROR" for e in self.entries)

    def has_warnings(self) -> bool:
        return any(e.severity == "WARNING" for e in self.entries)

    def get_summary(self) -> str:
        error_count = sum(1 for e in self.entries if e.severity == "ERROR")
        warning_count = sum(1 for e in self.entries if e.severity == "WARNING")
        info_count = sum(1 for e in self.entries if e.severity == "INFO")

        return f"Processing finished: {error_count} errors, {warning_count} warnings, {info_count} info"


# ==================== Error codes ====================

class ErrorCode:
    """Audit codes"""

    # Axis conversion AXS***
    AXS001 = "AXS001"  # bone without a recorded transform delta
    AXS002 = "AXS002"  # bind pose count differs from bone count

    # Animation ANM***
    ANM001 = "ANM001"  # unknown transform property in clip
    ANM002 = "ANM002"  # incomplete position / rotation curve group
    ANM003 = "ANM003"  # key counts differ inside a curve group
    ANM004 = "ANM004"  # clip validation warning (e.g. key times not monotonic)

    # Lights LGT***
    LGT001 = "LGT001"  # light intensity / range rescaled

    # Rules RUL***
    RUL001 = "RUL001"  # condition type not implemented
    RUL002 = "RUL002"  # action type not implemented
    RUL003 = "RUL003"  # helper component not registered
    RUL004 = "RUL004"  # empty name assigned
    RUL005 = "RUL005"  # parameter will not parse

    # Scene SCN***
    SCN001 = "SCN001"  # scene validation error
    SCN002 = "SCN002"  # scene validation warning
    SCN003 = "SCN003"  # clip validation error
    SCN004 = "SCN004"  # rule validation warning
