"""
Content block projection.

Blocks are pure projections of the form data and never write to it. The
only write associated with a block (seeding weather slots) is performed by
the renderer before projection, through the controller.
"""

from typing import Any, Mapping

from ...domain.models import (
    ContentBlock,
    SelectionCountNote,
    TextNote,
    WeatherConfirmationNote,
    WeatherSummaryBlock,
)
from ..models import RenderedContent
from .loader import render
from .templates import Template

PRESSURE_LABELS = {
    "falling": "Low (Falling)",
    "rising": "High (Rising)",
}

WEATHER_CONFIRMATION_LABELS = {
    "yes": "Confirmed",
    "cold": "Cold-related",
}


def project_block(block: ContentBlock, form_data: Mapping[str, Any]) -> RenderedContent:
    if isinstance(block, WeatherSummaryBlock):
        return _weather_summary(block, form_data)
    if isinstance(block, SelectionCountNote):
        return _selection_count(block, form_data)
    if isinstance(block, WeatherConfirmationNote):
        return _weather_confirmation(block, form_data)
    if isinstance(block, TextNote):
        return RenderedContent(
            type="note", variant="text", text=render(Template.NOTE_TEXT, text=block.text).strip()
        )
    raise TypeError(f"Unsupported content block: {type(block).__name__}")


def _weather_summary(block: WeatherSummaryBlock, form_data: Mapping[str, Any]) -> RenderedContent:
    pressure = form_data.get(block.pressure_key)
    data = {
        "pressure": pressure,
        "pressure_label": PRESSURE_LABELS.get(pressure, "Stable"),
        "temperature": form_data.get(block.temperature_key),
        "humidity": form_data.get(block.humidity_key),
    }
    return RenderedContent(
        type="weather_summary",
        text=render(Template.WEATHER_SUMMARY, **data).strip(),
        data=data,
    )


def _selection_count(block: SelectionCountNote, form_data: Mapping[str, Any]) -> RenderedContent:
    count = len(form_data.get(block.field_key) or [])
    singular = block.singular_label or "item"
    plural = block.plural_label or f"{singular}s"
    text = render(
        Template.SELECTION_COUNT,
        count=count,
        unit_label=singular if count == 1 else plural,
        empty_text=block.empty_text or "No selections",
    )
    return RenderedContent(
        type="note", variant="selection_count", text=text.strip(), data={"count": count}
    )


def _weather_confirmation(
    block: WeatherConfirmationNote, form_data: Mapping[str, Any]
) -> RenderedContent:
    value = form_data.get(block.field_key)
    text = render(
        Template.WEATHER_CONFIRMATION,
        value=value,
        value_label=WEATHER_CONFIRMATION_LABELS.get(value, "Not related"),
    )
    return RenderedContent(
        type="note", variant="weather_confirmation", text=text.strip(), data={"value": value}
    )
