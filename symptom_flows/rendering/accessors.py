"""
Field Accessors - Type Tag Dispatch

One builder per FieldType. A builder knows which form-data slot(s) its field
reads and writes, and returns a RenderedField whose callbacks write through
the controller's single mutation path (update_field / update_fields), so
derived fields are recomputed on every change.

A builder returns None when the field lacks the kind-specific configuration
it needs. Field definitions are shared across flows and a partially
specified one must not take the whole step down.

Handlers read the controller's form data when they fire, not the render
snapshot, so several gestures between two renders compose correctly.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, get_args

from ..domain.models import FieldConfig, FieldType
from ..exceptions import InvalidFieldValueError
from ..execution.controller import FlowController
from ..registries.visualization import VisualizationConfig
from .models import RenderedField

logger = logging.getLogger(__name__)

DEFAULT_DOMINANT_KEY = "dominantMood"
DEFAULT_NONE_SELECTED_KEY = "noneSelected"
DEFAULT_STARTED_AT_KEY = "startedAt"
DEFAULT_DURATION_KEY = "durationMinutes"
DEFAULT_ONGOING_KEY = "isOngoing"


@dataclass
class FieldContext:
    """Everything a builder may read while resolving one field."""
    controller: FlowController
    form_data: Mapping[str, Any]
    error: Optional[str]
    visualization: Optional[VisualizationConfig]
    now: datetime

    def latest(self, key: str, default: Any = None) -> Any:
        return self.controller.form_data.get(key, default)


FieldBuilder = Callable[[FieldConfig, FieldContext], Optional[RenderedField]]


def _rendered(
    field: FieldConfig,
    ctx: FieldContext,
    value: Any,
    on_change: Callable[[Any], None],
    actions: Optional[Dict[str, Callable[..., None]]] = None,
    **props: Any,
) -> RenderedField:
    return RenderedField(
        id=field.id,
        type=field.type,
        field_key=field.field_key,
        value=value,
        on_change=on_change,
        label=field.label,
        description=field.description,
        required=field.required,
        error=ctx.error,
        fill=field.fill,
        visualization=ctx.visualization,
        props=props,
        actions=actions or {},
    )


def _writer(field: FieldConfig, ctx: FieldContext) -> Callable[[Any], None]:
    def write(value: Any) -> None:
        ctx.controller.update_field(field.field_key, value)

    return write


def _toggled(items: List[Any], item_id: Any) -> List[Any]:
    if item_id in items:
        return [item for item in items if item != item_id]
    return [*items, item_id]


def _list_toggle(field: FieldConfig, ctx: FieldContext) -> Callable[[Any], None]:
    def toggle(item_id: Any) -> None:
        current = list(ctx.latest(field.field_key) or [])
        ctx.controller.update_field(field.field_key, _toggled(current, item_id))

    return toggle


def _dump(items: Optional[List[Any]]) -> List[Dict[str, Any]]:
    return [item.model_dump() for item in items or []]


def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


# ==============================================================================
# Scalars
# ==============================================================================


def build_scale(field: FieldConfig, ctx: FieldContext) -> RenderedField:
    return _rendered(
        field,
        ctx,
        ctx.form_data.get(field.field_key),
        _writer(field, ctx),
        min=field.min if field.min is not None else 0,
        max=field.max if field.max is not None else 10,
        step=field.step if field.step is not None else 1,
        left_label=field.left_label,
        right_label=field.right_label,
    )


def build_hero_scale(field: FieldConfig, ctx: FieldContext) -> RenderedField:
    """Scale whose derived label lives in `secondary_key` (default '<fieldKey>Label')."""
    rendered = build_scale(field, ctx)
    label_key = field.secondary_key or f"{field.field_key}Label"
    rendered.props["label_key"] = label_key
    rendered.props["value_label"] = ctx.form_data.get(label_key)
    return rendered


def build_toggle(field: FieldConfig, ctx: FieldContext) -> RenderedField:
    return _rendered(
        field, ctx, bool(ctx.form_data.get(field.field_key, False)), _writer(field, ctx)
    )


def build_camera_capture(field: FieldConfig, ctx: FieldContext) -> RenderedField:
    return _rendered(field, ctx, ctx.form_data.get(field.field_key), _writer(field, ctx))


# ==============================================================================
# Single selections
# ==============================================================================


def build_selection(field: FieldConfig, ctx: FieldContext) -> RenderedField:
    def select(value: Any) -> None:
        # Tapping the selected option again clears it when deselection is allowed.
        if field.allow_deselect and ctx.latest(field.field_key) == value:
            value = None
        ctx.controller.update_field(field.field_key, value)

    return _rendered(
        field,
        ctx,
        ctx.form_data.get(field.field_key),
        select,
        options=_dump(field.options),
        allow_deselect=field.allow_deselect,
    )


def build_plain_options(field: FieldConfig, ctx: FieldContext) -> RenderedField:
    return _rendered(
        field,
        ctx,
        ctx.form_data.get(field.field_key),
        _writer(field, ctx),
        options=_dump(field.options),
    )


def build_swatch_selection(field: FieldConfig, ctx: FieldContext) -> Optional[RenderedField]:
    if not field.swatch_options:
        return None
    return _rendered(
        field,
        ctx,
        ctx.form_data.get(field.field_key),
        _writer(field, ctx),
        options=_dump(field.swatch_options),
    )


# ==============================================================================
# Maps
# ==============================================================================


def build_joint_map(field: FieldConfig, ctx: FieldContext) -> RenderedField:
    actions = {}
    bilateral = False
    if field.bilateral_key:
        bilateral_key = field.bilateral_key
        bilateral = bool(ctx.form_data.get(bilateral_key, False))
        actions["set_bilateral"] = lambda value: ctx.controller.update_field(bilateral_key, value)

    return _rendered(
        field,
        ctx,
        ctx.form_data.get(field.field_key) or [],
        _writer(field, ctx),
        actions=actions,
        bilateral=bilateral,
        bilateral_key=field.bilateral_key,
    )


def build_region_map(field: FieldConfig, ctx: FieldContext) -> Optional[RenderedField]:
    if field.map_config is None:
        return None
    return _rendered(
        field,
        ctx,
        ctx.form_data.get(field.field_key) or [],
        _writer(field, ctx),
        actions={"toggle": _list_toggle(field, ctx)},
        map_config=field.map_config.model_dump(),
    )


def build_hotspot_map(field: FieldConfig, ctx: FieldContext) -> Optional[RenderedField]:
    if not field.hotspots:
        return None
    return _rendered(
        field,
        ctx,
        ctx.form_data.get(field.field_key) or [],
        _writer(field, ctx),
        actions={"toggle": _list_toggle(field, ctx)},
        hotspots=_dump(field.hotspots),
    )


def build_anatomy_hotspot(field: FieldConfig, ctx: FieldContext) -> Optional[RenderedField]:
    if field.anatomy_map_config is None:
        return None

    single = field.anatomy_selection_mode == "single"
    limit = field.anatomy_max_selections

    def write(value: Any) -> None:
        if not single and value is not None:
            if not isinstance(value, (list, tuple)):
                raise InvalidFieldValueError(f"Field '{field.id}' expects a list of region ids")
            if limit is not None:
                value = list(value)[:limit]
        ctx.controller.update_field(field.field_key, value)

    current = ctx.form_data.get(field.field_key)
    return _rendered(
        field,
        ctx,
        current if single else (current or []),
        write,
        map_config=field.anatomy_map_config.model_dump(),
        selection_mode=field.anatomy_selection_mode,
        max_selections=limit,
    )


# ==============================================================================
# Multi-select lists
# ==============================================================================


def build_bubble_choice(field: FieldConfig, ctx: FieldContext) -> Optional[RenderedField]:
    if not field.bubble_items:
        return None
    return _rendered(
        field,
        ctx,
        ctx.form_data.get(field.field_key) or [],
        _writer(field, ctx),
        actions={"toggle": _list_toggle(field, ctx)},
        items=_dump(field.bubble_items),
    )


def build_categorized_chips(field: FieldConfig, ctx: FieldContext) -> Optional[RenderedField]:
    if not field.chip_categories or not field.chip_items:
        return None
    return _rendered(
        field,
        ctx,
        ctx.form_data.get(field.field_key) or [],
        _writer(field, ctx),
        actions={"toggle": _list_toggle(field, ctx)},
        categories=_dump(field.chip_categories),
        items=_dump(field.chip_items),
    )


def build_multi_select_card(field: FieldConfig, ctx: FieldContext) -> Optional[RenderedField]:
    if not field.card_options:
        return None

    selected = list(ctx.form_data.get(field.field_key) or [])
    count = len(selected)

    def toggle(option_id: str) -> None:
        current = list(ctx.latest(field.field_key) or [])
        updates: Dict[str, Any] = {field.field_key: _toggled(current, option_id)}
        # Deselecting some options empties the slots that depend on them.
        if option_id in current:
            for dependent_key in field.clear_on_deselect.get(option_id, []):
                updates[dependent_key] = []
        ctx.controller.update_fields(updates)

    badge = None
    if field.badge_template:
        badge = field.badge_template.replace("{count}", str(count)).replace(
            "{plural}", "" if count == 1 else "s"
        )

    return _rendered(
        field,
        ctx,
        selected,
        _writer(field, ctx),
        actions={"toggle": toggle},
        options=_dump(field.card_options),
        badge=badge,
        show_badge=field.badge_show_when_empty or count > 0,
    )


def build_icon_grid(field: FieldConfig, ctx: FieldContext) -> Optional[RenderedField]:
    if not field.icon_items:
        return None

    none_key = field.none_selected_key or DEFAULT_NONE_SELECTED_KEY
    as_objects = field.icon_value_type == "object"

    def ids_of(items: List[Any]) -> List[str]:
        return [item["name"] if as_objects else item for item in items]

    def toggle(item_id: str) -> None:
        current = list(ctx.latest(field.field_key) or [])
        if item_id in ids_of(current):
            next_items = [item for item in current if (item["name"] if as_objects else item) != item_id]
        elif as_objects:
            next_items = [*current, {"name": item_id, "takenAt": ctx.now.isoformat()}]
        else:
            next_items = [*current, item_id]

        updates: Dict[str, Any] = {field.field_key: next_items}
        if ctx.latest(none_key):
            updates[none_key] = False
        ctx.controller.update_fields(updates)

    def toggle_none() -> None:
        selected_none = not ctx.latest(none_key)
        updates: Dict[str, Any] = {none_key: selected_none}
        if selected_none:
            updates[field.field_key] = []
        ctx.controller.update_fields(updates)

    current_list = ctx.form_data.get(field.field_key)
    current_list = current_list if isinstance(current_list, list) else []
    none_option = None
    if field.none_option_label:
        none_option = {
            "label": field.none_option_label,
            "selected": bool(ctx.form_data.get(none_key)),
        }

    return _rendered(
        field,
        ctx,
        current_list,
        _writer(field, ctx),
        actions={"toggle": toggle, "toggle_none": toggle_none},
        items=_dump(field.icon_items),
        selected_ids=ids_of(current_list),
        none_option=none_option,
        show_badge=field.show_badge,
    )


# ==============================================================================
# Composite fields
# ==============================================================================


def build_day_part_duration(field: FieldConfig, ctx: FieldContext) -> Optional[RenderedField]:
    if not field.day_parts or not field.duration_options:
        return None

    slots = {
        "time_of_day": field.field_key,
        "started_at": field.started_at_key or DEFAULT_STARTED_AT_KEY,
        "is_ongoing": field.ongoing_key or DEFAULT_ONGOING_KEY,
        "duration_minutes": field.duration_key or DEFAULT_DURATION_KEY,
    }
    durations = {option.id: option for option in field.duration_options}

    def write(parts: Mapping[str, Any]) -> None:
        if not isinstance(parts, Mapping):
            raise InvalidFieldValueError(f"Field '{field.id}' expects a mapping of duration parts")
        unknown = set(parts) - set(slots)
        if unknown:
            raise InvalidFieldValueError(f"Unknown duration parts: {sorted(unknown)}")
        ctx.controller.update_fields({slots[name]: value for name, value in parts.items()})

    def setter(name: str) -> Callable[[Any], None]:
        return lambda value: ctx.controller.update_field(slots[name], value)

    def select_duration(option_id: str) -> None:
        option = durations.get(option_id)
        if option is None:
            return
        ctx.controller.update_fields(
            {
                slots["is_ongoing"]: option.ongoing,
                slots["duration_minutes"]: option.minutes,
            }
        )

    value = {name: ctx.form_data.get(key) for name, key in slots.items()}
    return _rendered(
        field,
        ctx,
        value,
        write,
        actions={
            "set_time_of_day": setter("time_of_day"),
            "set_started_at": setter("started_at"),
            "set_ongoing": setter("is_ongoing"),
            "set_duration_minutes": setter("duration_minutes"),
            "select_duration": select_duration,
        },
        day_parts=_dump(field.day_parts),
        duration_options=_dump(field.duration_options),
        hint_text=field.hint_text,
    )


def build_radial_duration(field: FieldConfig, ctx: FieldContext) -> Optional[RenderedField]:
    if not field.unit_key or not field.duration_units:
        return None

    unit_key = field.unit_key
    units = field.duration_units

    def unit_for(unit_id: Any):
        return next((unit for unit in units if unit.id == unit_id), units[0])

    def value_in(unit, form_data: Mapping[str, Any]) -> float:
        raw = form_data.get(unit.target_key)
        return _clamp(raw, unit.min, unit.max) if _is_number(raw) else unit.min

    active = unit_for(ctx.form_data.get(unit_key))

    def write(value: float) -> None:
        if not _is_number(value):
            raise InvalidFieldValueError(f"Field '{field.id}' expects a finite number")
        unit = unit_for(ctx.latest(unit_key))
        ctx.controller.update_field(unit.target_key, _clamp(value, unit.min, unit.max))

    def set_unit(unit_id: str) -> None:
        unit = unit_for(unit_id)
        ctx.controller.update_fields(
            {unit_key: unit.id, unit.target_key: value_in(unit, ctx.controller.form_data)}
        )

    raw = ctx.form_data.get(active.target_key)
    return _rendered(
        field,
        ctx,
        raw if _is_number(raw) else active.min,
        write,
        actions={"set_unit": set_unit},
        units=_dump(units),
        selected_unit_id=active.id,
        presets=field.duration_presets or [],
    )


def build_axis_grid(field: FieldConfig, ctx: FieldContext) -> Optional[RenderedField]:
    """Two-axis selector: one gesture writes both `field_key` and `secondary_key`."""
    if not field.secondary_key:
        return None

    secondary_key = field.secondary_key
    dominant_key = field.dominant_key or DEFAULT_DOMINANT_KEY

    def write(point: Mapping[str, Any]) -> None:
        if not isinstance(point, Mapping) or not {"primary", "secondary"} <= set(point):
            raise InvalidFieldValueError(
                f"Field '{field.id}' expects a point with 'primary' and 'secondary'"
            )
        ctx.controller.update_fields(
            {field.field_key: point["primary"], secondary_key: point["secondary"]}
        )

    return _rendered(
        field,
        ctx,
        {
            "primary": ctx.form_data.get(field.field_key),
            "secondary": ctx.form_data.get(secondary_key),
        },
        write,
        dominant_label=ctx.form_data.get(dominant_key),
        left_label=field.left_label,
        right_label=field.right_label,
        top_label=field.top_label,
        bottom_label=field.bottom_label,
    )


ACCESSORS: Dict[str, FieldBuilder] = {
    "stiffness": build_scale,
    "linear_scale": build_scale,
    "hero_scale": build_hero_scale,
    "toggle": build_toggle,
    "camera_capture": build_camera_capture,
    "selection": build_selection,
    "segmented_selection": build_plain_options,
    "choice": build_plain_options,
    "joint_map": build_joint_map,
    "region_map": build_region_map,
    "hotspot_map": build_hotspot_map,
    "anatomy_hotspot": build_anatomy_hotspot,
    "swatch_selection": build_swatch_selection,
    "bubble_choice": build_bubble_choice,
    "categorized_chips": build_categorized_chips,
    "multi_select_card": build_multi_select_card,
    "icon_grid": build_icon_grid,
    "day_part_duration": build_day_part_duration,
    "radial_duration": build_radial_duration,
    "axis_grid": build_axis_grid,
}


def _validate_accessors():
    """Every FieldType must have a builder. Fails fast at import."""
    missing = set(get_args(FieldType)) - set(ACCESSORS)
    if missing:
        raise NotImplementedError(f"No accessor for field types: {sorted(missing)}")


_validate_accessors()


def build_field(field: FieldConfig, ctx: FieldContext) -> Optional[RenderedField]:
    rendered = ACCESSORS[field.type](field, ctx)
    if rendered is None:
        logger.debug(f"Skipped field '{field.id}' ({field.type}): incomplete configuration")
    return rendered
