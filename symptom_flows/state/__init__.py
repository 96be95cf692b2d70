"""
State Layer - Runtime Data Models

Defines the per-instance flow state and the validation result value.
"""

from symptom_flows.state.models import (
    FlowSnapshot,
    FlowState,
    ValidationResult,
)

__all__ = [
    "FlowSnapshot",
    "FlowState",
    "ValidationResult",
]
