"""
Registries - String-keyed Behavior Lookup

Immutable name -> behavior tables populated at import time. Flow
configurations store only the keys; a missing key is a configuration error.
"""

from symptom_flows.registries.actions import ActionRegistry, SaveContext, action_registry
from symptom_flows.registries.validation import (
    ValidationRegistry,
    require_non_empty,
    validation_registry,
)
from symptom_flows.registries.visualization import (
    VisualizationConfig,
    VisualizationRegistry,
    visualization_registry,
)

__all__ = [
    "ActionRegistry",
    "SaveContext",
    "ValidationRegistry",
    "VisualizationConfig",
    "VisualizationRegistry",
    "action_registry",
    "require_non_empty",
    "validation_registry",
    "visualization_registry",
]
