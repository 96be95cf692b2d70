"""
State Layer - Runtime Data Models

This module defines the runtime state owned by a FlowController for the
lifetime of one flow instance, and the ValidationResult value that
validators return. Validation failures are plain data, never exceptions.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ValidationResult(BaseModel):
    """
    Outcome of running one or more step validators.

    `step_index` is only populated by whole-flow validation and holds the
    1-based index of the first failing step.
    """
    is_valid: bool
    errors: Dict[str, str] = Field(default_factory=dict)
    step_index: Optional[int] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def fail(cls, errors: Dict[str, str]) -> "ValidationResult":
        return cls(is_valid=False, errors=errors)


class FlowState(BaseModel):
    """
    Mutable state of a single flow instance.
    Created on mount, mutated only by the controller, discarded on teardown.
    """
    form_data: Dict[str, Any] = Field(default_factory=dict)

    # 0-based internally; the controller exposes it 1-based.
    current_step_index: int = 0

    errors: Dict[str, str] = Field(default_factory=dict)
    is_saving: bool = False


class FlowSnapshot(BaseModel):
    """Point-in-time view of a controller for the presentation layer."""
    flow_id: str
    step_id: str
    current_step: int
    total_steps: int
    form_data: Dict[str, Any]
    errors: Dict[str, str]
    is_saving: bool
    is_step_valid: bool
    can_go_next: bool
    can_go_back: bool
    is_first_step: bool
    is_last_step: bool
    revision: int
