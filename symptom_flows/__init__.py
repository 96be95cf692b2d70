"""
Symptom Flows

A declarative engine for multi-step symptom logging wizards. Flows are
described as data (steps, typed fields, content blocks, registry keys) and
interpreted at runtime by a FlowController and a FlowRenderer.
"""

from symptom_flows.domain import (
    ContentBlock,
    DerivedLabelRule,
    FieldConfig,
    FieldType,
    FlowConfig,
    StepConfig,
    VisibilityRule,
)
from symptom_flows.state import (
    FlowSnapshot,
    FlowState,
    ValidationResult,
)
from symptom_flows.exceptions import (
    FlowConfigurationError,
    InactiveControllerError,
    InvalidFieldValueError,
    UnknownActionKeyError,
    UnknownValidationKeyError,
    UnknownVisualizationKeyError,
)
from symptom_flows.registries import (
    ValidationRegistry,
    VisualizationConfig,
    VisualizationRegistry,
    validation_registry,
    visualization_registry,
)
from symptom_flows.execution import FlowController
from symptom_flows.rendering import FlowRenderer, RenderedField, RenderedStep

__all__ = [
    # Domain Layer
    "ContentBlock",
    "DerivedLabelRule",
    "FieldConfig",
    "FieldType",
    "FlowConfig",
    "StepConfig",
    "VisibilityRule",
    # State Layer
    "FlowSnapshot",
    "FlowState",
    "ValidationResult",
    # Errors
    "FlowConfigurationError",
    "InactiveControllerError",
    "InvalidFieldValueError",
    "UnknownActionKeyError",
    "UnknownValidationKeyError",
    "UnknownVisualizationKeyError",
    # Registries
    "ValidationRegistry",
    "VisualizationConfig",
    "VisualizationRegistry",
    "validation_registry",
    "visualization_registry",
    # Execution Layer
    "FlowController",
    # Rendering Layer
    "FlowRenderer",
    "RenderedField",
    "RenderedStep",
]
