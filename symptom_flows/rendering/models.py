"""
Rendered output handed to the presentation layer.

These are plain containers: the values a widget should display and the
callbacks it should invoke. Every callback routes through the owning
FlowController, never through the form data directly.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..domain.models import FieldType
from ..registries.visualization import VisualizationConfig


@dataclass
class RenderedField:
    """
    A field resolved against the current form data.

    Attributes:
        value: Current value; a dict for composite fields (durations, axis grid).
        on_change: Writes a new value through the controller.
        visualization: Resolved registry overrides, if the field declares a key.
        props: Kind-specific display data (options, ranges, map geometry, ...).
        actions: Extra named handlers for widgets with more than one gesture.
    """
    id: str
    type: FieldType
    field_key: str
    value: Any
    on_change: Callable[[Any], None]
    label: Optional[str] = None
    description: Optional[str] = None
    required: bool = False
    error: Optional[str] = None
    fill: bool = False
    visualization: Optional[VisualizationConfig] = None
    props: Dict[str, Any] = field(default_factory=dict)
    actions: Dict[str, Callable[..., None]] = field(default_factory=dict)

    def perform(self, action: str, *args: Any) -> None:
        """Invokes a named action; raises KeyError for actions this field does not offer."""
        self.actions[action](*args)


@dataclass
class RenderedContent:
    """A read-only content block projected from the form data."""
    type: str
    text: str
    variant: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RenderedStep:
    step_id: str
    step_number: int
    total_steps: int
    title: Optional[str] = None
    subtitle: Optional[str] = None
    fields: List[RenderedField] = field(default_factory=list)

    # Non-note blocks render above the fields, notes below them.
    content: List[RenderedContent] = field(default_factory=list)
    notes: List[RenderedContent] = field(default_factory=list)

    def get_field(self, field_id: str) -> Optional[RenderedField]:
        return next((item for item in self.fields if item.id == field_id), None)
