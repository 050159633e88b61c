"""Project-specific exception types."""


class ModelProcessorError(Exception):
    """Base class for every error raised by the processor."""


class RuleConfigurationError(ModelProcessorError, ValueError):
    """Raised when a rule parameter cannot be parsed (number, enum, regex, layer)."""


class UnsupportedRuleError(ModelProcessorError, NotImplementedError):
    """Raised in strict mode when a condition or action tag is not implemented."""


class SceneInvariantError(ModelProcessorError, AssertionError):
    """Raised when scene, mesh or clip data breaks an invariant the passes rely on."""


class SettingsError(ModelProcessorError, ValueError):
    """Raised when the stored processor settings are not valid JSON of the expected shape."""
