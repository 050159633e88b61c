# File: rules/params.py
# Purpose: Strict parsing of the string parameters carried by conditions/actions
# Notes:
# - Locale invariant: period decimal, no thousands separators
# - Booleans: "0" / "1" / "true" / "false" (any case)
# - Enums: member name, or the member's integer value
# - Anything else raises RuleConfigurationError, never a silent default

import re
from enum import Enum
from typing import Type, TypeVar

from ..core.exceptions import RuleConfigurationError


_INT_RE = re.compile(r'^[+-]?\d+$')
_FLOAT_RE = re.compile(r'^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$')

E = TypeVar("E", bound=Enum)


def is_integer(text: str) -> bool:
    return bool(_INT_RE.match((text or "").strip()))


def parse_bool(text: str) -> bool:
    value = (text or "").strip().lower()
    if value in ("1", "true"):
        return True
    if value in ("0", "false"):
        return False
    raise RuleConfigurationError(f"Not a boolean parameter: {text!r}")


def parse_int(text: str) -> int:
    value = (text or "").strip()
    if not _INT_RE.match(value):
        raise RuleConfigurationError(f"Not an integer parameter: {text!r}")
    return int(value)


def parse_float(text: str) -> float:
    value = (text or "").strip()
    if not _FLOAT_RE.match(value):
        raise RuleConfigurationError(f"Not a number parameter: {text!r}")
    return float(value)


def parse_enum(enum_type: Type[E], text: str) -> E:
    """Member by name (exact, then case-insensitive) or by integer value"""
    value = (text or "").strip()
    if value in enum_type.__members__:
        return enum_type.__members__[value]
    for name, member in enum_type.__members__.items():
        if name.lower() == value.lower():
            return member
    if _INT_RE.match(value):
        try:
            return enum_type(int(value))
        except ValueError:
            pass
    raise RuleConfigurationError(f"Not a {enum_type.__name__} parameter: {text!r}")


def compile_pattern(text: str) -> "re.Pattern":
    try:
        return re.compile(text or "")
    except re.error as exc:
        raise RuleConfigurationError(f"Invalid regular expression {text!r}: {exc}") from exc
