"""
Domain Layer - Flow Configuration Schema

This module defines the passive data model describing a symptom logging flow:
ordered steps, the typed fields each step collects, read-only content blocks,
and the registry keys (validation, visualization, save action) that connect a
configuration to behavior without embedding any code in it.

Configurations are immutable once constructed and accept both camelCase keys
(as serialized by the mobile client) and snake_case attribute names.
"""

import copy
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

"""
FieldType tags the input behavior of a field:
- stiffness / linear_scale / hero_scale: numeric scales (hero_scale also shows a derived label)
- toggle: boolean switch
- camera_capture: photo URI
- selection / segmented_selection / choice: single value from options
- joint_map: joint selection with an optional bilateral flag
- region_map / hotspot_map / anatomy_hotspot: body map selections
- swatch_selection: single colored swatch
- bubble_choice / categorized_chips / multi_select_card / icon_grid: multi-select lists
- day_part_duration: composite time-of-day + duration picker
- radial_duration: duration value in a selectable unit
- axis_grid: 2-axis selector writing two slots from one gesture
"""
FieldType = Literal[
    "stiffness",
    "linear_scale",
    "hero_scale",
    "toggle",
    "camera_capture",
    "selection",
    "segmented_selection",
    "choice",
    "joint_map",
    "region_map",
    "hotspot_map",
    "anatomy_hotspot",
    "swatch_selection",
    "bubble_choice",
    "categorized_chips",
    "multi_select_card",
    "icon_grid",
    "day_part_duration",
    "radial_duration",
    "axis_grid",
]


class ConfigModel(BaseModel):
    """Base for every schema object: frozen, camelCase aware, tolerant of presentation-only keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


# ==============================================================================
# Field building blocks
# ==============================================================================


class VisibilityRule(ConfigModel):
    """
    Render-time predicate deciding whether a field appears.

    Only one rule shape exists: the field is shown while the local hour of
    the render moment is strictly before `hour`.
    """
    type: Literal["before_hour"]
    hour: int = Field(ge=0, le=24)


class FlowOption(ConfigModel):
    value: Any
    label: str
    description: Optional[str] = None
    icon: Optional[str] = None


class RegionDefinition(ConfigModel):
    id: str
    name: str
    path: str


class RegionMapConfig(ConfigModel):
    front_silhouette: str
    back_silhouette: str
    regions: Dict[Literal["front", "back"], List[RegionDefinition]]


class Hotspot(ConfigModel):
    id: str
    label: str
    x: float
    y: float
    icon: Optional[str] = None


class AnatomyMapConfig(ConfigModel):
    image: Optional[str] = None
    regions: List[RegionDefinition]


class SwatchOption(ConfigModel):
    id: str
    label: str
    color: str
    description: Optional[str] = None


class BubbleChoiceItem(ConfigModel):
    id: str
    label: str
    icon: str
    size: float
    x: float
    y: float
    label_size: Optional[float] = None


class ChipCategory(ConfigModel):
    id: str
    label: str


class ChipItem(ConfigModel):
    id: str
    label: str
    category_id: str


class CardOption(ConfigModel):
    id: str
    label: str
    description: Optional[str] = None
    icon: Optional[str] = None


class IconGridItem(ConfigModel):
    id: str
    label: str
    icon: str


class DayPartOption(ConfigModel):
    id: str
    label: str
    icon: str


class DurationOption(ConfigModel):
    id: str
    label: str
    minutes: Optional[int] = None
    ongoing: bool = False


class DurationUnit(ConfigModel):
    """A unit of a radial duration picker; each unit stores its value in its own slot."""
    id: str
    label: str
    target_key: str
    min: float = 0
    max: float
    step: float = 1


class FieldConfig(ConfigModel):
    """
    One typed, named, user-editable slot within a step.

    Kind-specific attributes are all optional. A field whose kind needs an
    attribute it does not declare is skipped by the renderer rather than
    rejected here, because field definitions are shared across many flows.

    Attributes:
        id: Render key, unique within the step.
        type: FieldType tag selecting the input behavior.
        field_key: Name of the form-data slot this field reads and writes.
        secondary_key: Second slot for coupled fields (axis grid, hero label).
        dominant_key: Slot holding the derived dominant label of an axis grid.
        visibility: Optional render-time visibility rule.
        visualization_key: Optional Visualization Registry entry.
    """
    id: str
    type: FieldType
    field_key: str
    label: Optional[str] = None
    description: Optional[str] = None
    required: bool = False
    visibility: Optional[VisibilityRule] = None
    visualization_key: Optional[str] = None
    secondary_key: Optional[str] = None
    dominant_key: Optional[str] = None
    fill: bool = False

    # Scales
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    left_label: Optional[str] = None
    right_label: Optional[str] = None
    top_label: Optional[str] = None
    bottom_label: Optional[str] = None

    # Single selections
    options: Optional[List[FlowOption]] = None
    allow_deselect: bool = False

    # Maps
    bilateral_key: Optional[str] = None
    map_config: Optional[RegionMapConfig] = None
    hotspots: Optional[List[Hotspot]] = None
    anatomy_map_config: Optional[AnatomyMapConfig] = None
    anatomy_selection_mode: Literal["single", "multiple"] = "multiple"
    anatomy_max_selections: Optional[int] = None
    swatch_options: Optional[List[SwatchOption]] = None

    # Multi-select lists
    bubble_items: Optional[List[BubbleChoiceItem]] = None
    chip_categories: Optional[List[ChipCategory]] = None
    chip_items: Optional[List[ChipItem]] = None
    card_options: Optional[List[CardOption]] = None
    badge_template: Optional[str] = None
    badge_show_when_empty: bool = False
    clear_on_deselect: Dict[str, List[str]] = Field(default_factory=dict)
    icon_items: Optional[List[IconGridItem]] = None
    icon_value_type: Literal["string", "object"] = "string"
    none_selected_key: Optional[str] = None
    none_option_label: Optional[str] = None
    show_badge: bool = False

    # Durations
    day_parts: Optional[List[DayPartOption]] = None
    duration_options: Optional[List[DurationOption]] = None
    started_at_key: Optional[str] = None
    duration_key: Optional[str] = None
    ongoing_key: Optional[str] = None
    hint_text: Optional[str] = None
    unit_key: Optional[str] = None
    duration_units: Optional[List[DurationUnit]] = None
    duration_presets: Optional[List[float]] = None


# ==============================================================================
# Content blocks
# ==============================================================================


class WeatherSummaryBlock(ConfigModel):
    """Weather readout; its slots are lazily seeded on first render."""
    type: Literal["weather_summary"]
    pressure_key: str
    temperature_key: str
    humidity_key: str


class SelectionCountNote(ConfigModel):
    type: Literal["note"]
    variant: Literal["selection_count"]
    field_key: str
    empty_text: Optional[str] = None
    singular_label: Optional[str] = None
    plural_label: Optional[str] = None


class WeatherConfirmationNote(ConfigModel):
    type: Literal["note"]
    variant: Literal["weather_confirmation"]
    field_key: str


class TextNote(ConfigModel):
    type: Literal["note"]
    variant: Literal["text"]
    text: str


NoteBlock = Annotated[
    Union[SelectionCountNote, WeatherConfirmationNote, TextNote],
    Field(discriminator="variant"),
]

ContentBlock = Annotated[
    Union[WeatherSummaryBlock, NoteBlock],
    Field(discriminator="type"),
]


# ==============================================================================
# Steps and flows
# ==============================================================================


class LabelThreshold(ConfigModel):
    max: float
    label: str


class DerivedLabelRule(ConfigModel):
    """
    Declares a derived slot: whenever `source_key` changes, `target_key` is
    recomputed from the first threshold whose `max` is >= the source value.
    """
    source_key: str
    target_key: str
    thresholds: List[LabelThreshold]
    fallback_label: Optional[str] = None


class StepConfig(ConfigModel):
    """
    One screen's worth of fields.

    Attributes:
        id: Unique identifier within the flow.
        fields: Fields in render order.
        content: Read-only content blocks projected from form data.
        validation_key: Optional Validation Registry entry run for this step.
    """
    id: str
    title: Optional[str] = None
    subtitle: Optional[str] = None
    fields: List[FieldConfig] = Field(default_factory=list)
    content: List[ContentBlock] = Field(default_factory=list)
    validation_key: Optional[str] = None

    @model_validator(mode="after")
    def _check_unique_keys(self) -> "StepConfig":
        # Two time-gated fields may share a slot; an always-visible field may not.
        ungated = set()
        gated = set()
        for field in self.fields:
            key = field.field_key
            if key in ungated or (field.visibility is None and key in gated):
                raise ValueError(
                    f"Step '{self.id}' declares field key '{key}' more than once."
                )
            (gated if field.visibility is not None else ungated).add(key)
        return self


class FlowConfig(ConfigModel):
    """
    Complete definition of a multi-step data-entry wizard.

    The step count is fixed at load. `initial_data` is the canonical seed for
    every flow instance and is always deep-copied, never shared.

    Attributes:
        id: Unique flow identifier (also the log store bucket).
        steps: Ordered steps; order is the navigation order.
        initial_data: Seed form data.
        save_action_key: Optional Action Registry entry used on save.
        derived_labels: Declarative derived-slot rules.
    """
    id: str
    title: Optional[str] = None
    steps: List[StepConfig]
    initial_data: Dict[str, Any] = Field(default_factory=dict)
    save_action_key: Optional[str] = None
    derived_labels: List[DerivedLabelRule] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_steps(self) -> "FlowConfig":
        if not self.steps:
            raise ValueError(f"Flow '{self.id}' must declare at least one step.")
        ids = [step.id for step in self.steps]
        duplicates = sorted({step_id for step_id in ids if ids.count(step_id) > 1})
        if duplicates:
            raise ValueError(f"Flow '{self.id}' has duplicate step ids: {duplicates}")
        return self

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    def fresh_data(self) -> Dict[str, Any]:
        """Returns an independent copy of the initial data."""
        return copy.deepcopy(self.initial_data)
