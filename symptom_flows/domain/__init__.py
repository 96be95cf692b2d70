"""
Domain Layer - Flow Configuration Schema

Defines the static, serializable description of a flow: steps, typed
fields, content blocks and the registry keys that attach behavior.
"""

from symptom_flows.domain.models import (
    ContentBlock,
    DerivedLabelRule,
    FieldConfig,
    FieldType,
    FlowConfig,
    SelectionCountNote,
    StepConfig,
    TextNote,
    VisibilityRule,
    WeatherConfirmationNote,
    WeatherSummaryBlock,
)

__all__ = [
    "ContentBlock",
    "DerivedLabelRule",
    "FieldConfig",
    "FieldType",
    "FlowConfig",
    "SelectionCountNote",
    "StepConfig",
    "TextNote",
    "VisibilityRule",
    "WeatherConfirmationNote",
    "WeatherSummaryBlock",
]
