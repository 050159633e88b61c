# -*- coding: utf-8 -*-
"""
Processor settings
Per-model options stored as JSON in the importer's user data
"""

import json
from typing import List

from ..core.exceptions import SettingsError
from ..rules.rule import Rule
from ..rules.rule_set import RuleSet
from .constants import DEFAULT_LIGHT_INTENSITY_FACTOR, DEFAULT_LIGHT_RANGE_FACTOR


class ProcessorSettings:
    """Options of one imported model"""

    # attribute -> persisted key
    _KEYS = {
        "apply_axis_conversion": "applyAxisConversion",
        "match_axes": "matchAxes",
        "fix_lights": "fixLights",
        "light_intensity_factor": "lightIntensityFactor",
        "light_range_factor": "lightRangeFactor",
        "apply_rules": "applyRules",
        "apply_project_rules": "applyProjectRules",
        "verbose_logging": "verboseLogging",
    }

    def __init__(self):
        self.apply_axis_conversion = False  # Z up -> Y up
        self.match_axes = False  # extra 180 deg turn so forward axes agree
        self.fix_lights = False
        self.light_intensity_factor = DEFAULT_LIGHT_INTENSITY_FACTOR
        self.light_range_factor = DEFAULT_LIGHT_RANGE_FACTOR
        self.apply_rules = True
        self.apply_project_rules = True
        self.rules: List[Rule] = []
        self.external_rule_sets: List[RuleSet] = []
        self.verbose_logging = False

    @classmethod
    def from_json(cls, user_data: str) -> "ProcessorSettings":
        """Defaults overwritten by whatever keys the user data carries"""
        settings = cls()
        if not user_data or not user_data.strip():
            return settings
        try:
            data = json.loads(user_data)
        except json.JSONDecodeError as exc:
            raise SettingsError(f"Processor settings are not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise SettingsError("Processor settings must be a JSON object")
        settings.load_dict(data)
        return settings

    def load_dict(self, data: dict) -> None:
        for attr, key in self._KEYS.items():
            if key in data:
                setattr(self, attr, self._coerce(key, getattr(self, attr), data[key]))
        if "rules" in data:
            self.rules = [Rule.from_dict(r) for r in data["rules"] or []]
        if "externalRuleSets" in data:
            self.external_rule_sets = [RuleSet.from_dict(s) for s in data["externalRuleSets"] or []]

    @staticmethod
    def _coerce(key: str, default, value):
        # bool is an int subclass, so flags are checked first and exactly
        if isinstance(default, bool):
            if not isinstance(value, bool):
                raise SettingsError(f"Setting '{key}' must be true or false, got {value!r}")
            return value
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SettingsError(f"Setting '{key}' must be a number, got {value!r}")
        return float(value)

    def to_dict(self) -> dict:
        data = {key: getattr(self, attr) for attr, key in self._KEYS.items()}
        data["rules"] = [r.to_dict() for r in self.rules]
        data["externalRuleSets"] = [s.to_dict() for s in self.external_rule_sets]
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict())
