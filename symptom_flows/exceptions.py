"""
Engine Exceptions

Programming and configuration errors raised by the flow engine. These are
never converted into ValidationResult data: a misconfigured flow should fail
fast during development instead of degrading at runtime.
"""


class FlowConfigurationError(Exception):
    """Base class for errors caused by an invalid or inconsistent flow configuration."""
    pass


class UnknownValidationKeyError(FlowConfigurationError, KeyError):
    """Raised when a step references a validation key that is not registered."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Validation key '{key}' is not registered.")

    def __str__(self) -> str:
        return self.args[0]


class UnknownVisualizationKeyError(FlowConfigurationError, KeyError):
    """Raised when a field references a visualization key that is not registered."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Visualization key '{key}' is not registered.")

    def __str__(self) -> str:
        return self.args[0]


class UnknownActionKeyError(FlowConfigurationError, KeyError):
    """Raised when a flow references a save action that is not registered."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Action key '{key}' is not registered.")

    def __str__(self) -> str:
        return self.args[0]


class InactiveControllerError(RuntimeError):
    """Raised when a FlowController is used after it has been closed."""
    pass


class InvalidFieldValueError(ValueError):
    """Raised by a field's handler when a value does not have the shape the field writes."""
    pass
