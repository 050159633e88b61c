# File: rules/context.py
# Purpose: Everything a rule pass needs from the host besides the tree itself
# Notes:
# - logger: one per import, quiet unless the user asked for verbose output
# - strict: unknown condition/action tags raise instead of being logged
# - layers: layer name -> index table of the project
# - component_registry: helper components the project makes available

from typing import Callable, Dict, Optional

from ..config.constants import DEFAULT_LAYERS, HELPER_COMPONENT_NAME, MAX_LAYER
from ..core.exceptions import RuleConfigurationError
from ..core.schema import SceneNode
from ..utils.logger import Logger
from .params import is_integer


ComponentFactory = Callable[[SceneNode], object]


class RuleContext:
    """Host services handed to conditions and actions"""

    def __init__(self, logger: Optional[Logger] = None, strict: bool = False,
                 layers: Optional[Dict[str, int]] = None,
                 component_registry: Optional[Dict[str, ComponentFactory]] = None):
        self.logger = logger or Logger()
        self.strict = strict
        self.layers = dict(DEFAULT_LAYERS if layers is None else layers)
        self.component_registry = dict(component_registry or {})

    def resolve_layer(self, text: str) -> int:
        """Layer index from a layer name or an integer string"""
        value = (text or "").strip()
        if is_integer(value):
            index = int(value)
            if not 0 <= index <= MAX_LAYER:
                raise RuleConfigurationError(f"Layer index out of range: {value}")
            return index
        if value in self.layers:
            return self.layers[value]
        raise RuleConfigurationError(f"Unknown layer: {text!r}")

    def helper_component(self, name: str = HELPER_COMPONENT_NAME) -> Optional[ComponentFactory]:
        return self.component_registry.get(name)
