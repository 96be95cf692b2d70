"""
API Layer - Request/Response Schemas

Pydantic models for API request and response validation.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from ..rendering.models import RenderedContent, RenderedField, RenderedStep
from ..state.models import FlowSnapshot, ValidationResult


class FlowSummary(BaseModel):
    id: str
    title: Optional[str] = None
    total_steps: int


class FieldView(BaseModel):
    id: str
    type: str
    field_key: str
    value: Any = None
    label: Optional[str] = None
    description: Optional[str] = None
    required: bool = False
    error: Optional[str] = None
    fill: bool = False
    visualization: Optional[Dict[str, Any]] = None
    props: Dict[str, Any] = Field(default_factory=dict)
    actions: List[str] = Field(default_factory=list)

    @classmethod
    def from_rendered(cls, field: RenderedField) -> "FieldView":
        return cls(
            id=field.id,
            type=field.type,
            field_key=field.field_key,
            value=field.value,
            label=field.label,
            description=field.description,
            required=field.required,
            error=field.error,
            fill=field.fill,
            visualization=field.visualization.model_dump() if field.visualization else None,
            props=field.props,
            actions=sorted(field.actions),
        )


class ContentView(BaseModel):
    type: str
    variant: Optional[str] = None
    text: str
    data: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_rendered(cls, block: RenderedContent) -> "ContentView":
        return cls(type=block.type, variant=block.variant, text=block.text, data=block.data)


class StepView(BaseModel):
    step_id: str
    step_number: int
    total_steps: int
    title: Optional[str] = None
    subtitle: Optional[str] = None
    fields: List[FieldView]
    content: List[ContentView]
    notes: List[ContentView]

    @classmethod
    def from_rendered(cls, step: RenderedStep) -> "StepView":
        return cls(
            step_id=step.step_id,
            step_number=step.step_number,
            total_steps=step.total_steps,
            title=step.title,
            subtitle=step.subtitle,
            fields=[FieldView.from_rendered(field) for field in step.fields],
            content=[ContentView.from_rendered(block) for block in step.content],
            notes=[ContentView.from_rendered(block) for block in step.notes],
        )


class SessionRead(BaseModel):
    session_id: str
    flow_id: str
    state: FlowSnapshot
    step: StepView


class FieldChange(BaseModel):
    value: Any = None


class FieldAction(BaseModel):
    args: List[Any] = Field(default_factory=list)


class NavigationRequest(BaseModel):
    action: Literal["next", "back", "goto"]
    step: Optional[int] = None


class ValidationRequest(BaseModel):
    scope: Literal["step", "all"] = "step"


class SaveRequest(BaseModel):
    early: bool = False


class SaveResponse(BaseModel):
    status: str
    validation: Optional[ValidationResult] = None
