# File: utils/logger.py
# Purpose: Unified logging interface for one import invocation; console output
#          plus an optional AuditLogger binding.
# Notes:
# - Logger: DEBUG / INFO / WARNING / ERROR
# - Quiet by default, the host passes verbose=True when the user asks for it
# - One instance per import; never stored in module globals

import sys
import time
from typing import Optional, TYPE_CHECKING

# avoid circular import
if TYPE_CHECKING:
    from ..writers.audit_writer import AuditLogger


class Logger:
    """
    Logger
    ------
    Unified logging interface.
    - Levels: DEBUG / INFO / WARNING / ERROR
    - Console output (stdout/stderr); errors and warnings always print,
      INFO and DEBUG only when verbose
    - Optional AuditLogger binding that records every entry
    """

    def __init__(self, audit_logger: Optional["AuditLogger"] = None, verbose: bool = False,
                 quiet: bool = False):
        self.audit_logger = audit_logger
        self.verbose = verbose
        self.quiet = quiet

    def _log(self, level: str, message: str, context: Optional[str] = None,
             code: str = "") -> None:
        ts = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        line = f"[{ts}] [{level}] {message}"
        if context:
            line += f" | Context: {context}"

        # console
        if not self.quiet:
            if level in ("ERROR", "WARNING"):
                print(line, file=sys.stderr)
            elif self.verbose:
                print(line, file=sys.stdout)

        # audit
        if self.audit_logger:
            if level == "INFO":
                self.audit_logger.info(message, context, code)
            elif level == "WARNING":
                self.audit_logger.warning(code, message, context)
            elif level == "ERROR":
                self.audit_logger.error(code, message, context)

    def debug(self, message: str, context: Optional[str] = None) -> None:
        """DEBUG entry, console only and only when verbose"""
        if self.verbose and not self.quiet:
            self._log("DEBUG", message, context)

    def info(self, message: str, context: Optional[str] = None, code: str = "") -> None:
        """INFO entry"""
        self._log("INFO", message, context, code)

    def warning(self, message: str, context: Optional[str] = None, code: str = "") -> None:
        """WARNING entry"""
        self._log("WARNING", message, context, code)

    def error(self, message: str, context: Optional[str] = None, code: str = "") -> None:
        """ERROR entry"""
        self._log("ERROR", message, context, code)


def null_logger() -> Logger:
    """Logger that prints nothing and records nothing"""
    return Logger(verbose=False, quiet=True)
