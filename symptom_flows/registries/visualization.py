"""
Visualization Registry.

Maps a string key to presentation overrides (variant, list style, custom
renderer, style tokens) so a field type can be drawn differently per flow
without the schema embedding rendering details. Entries are either a fixed
VisualizationConfig or a factory parameterized by a render context such as
the available card size.
"""

from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import UnknownVisualizationKeyError

DEFAULT_CARD_SIZE = 150.0


class VisualizationConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    variant: Optional[str] = None
    list_style: Optional[str] = None
    render_option: Optional[str] = None
    style: Dict[str, Any] = Field(default_factory=dict)


VisualizationFactory = Callable[[Mapping[str, Any]], VisualizationConfig]
VisualizationEntry = Union[VisualizationConfig, VisualizationFactory]


def card_size_for(viewport_width: float) -> float:
    """Two cards per row with gutters, capped at the default card size."""
    return min((viewport_width - 60) / 2, DEFAULT_CARD_SIZE)


class VisualizationRegistry:
    """
    Read-only lookup table of visualization overrides.
    """

    def __init__(self, entries: Mapping[str, VisualizationEntry]):
        self._entries: Mapping[str, VisualizationEntry] = MappingProxyType(dict(entries))

    def lookup(
        self, key: str, context: Optional[Mapping[str, Any]] = None
    ) -> VisualizationConfig:
        """
        Resolves `key` to a VisualizationConfig.
        `context` only parameterizes factory entries; it never changes the registry.
        Raises UnknownVisualizationKeyError if the key is not registered.
        """
        try:
            entry = self._entries[key]
        except KeyError:
            raise UnknownVisualizationKeyError(key) from None

        if isinstance(entry, VisualizationConfig):
            return entry
        return entry(MappingProxyType(dict(context or {})))

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def _sized_cards(list_style: str, render_option: Optional[str] = None) -> VisualizationFactory:
    def build(context: Mapping[str, Any]) -> VisualizationConfig:
        return VisualizationConfig(
            list_style=list_style,
            render_option=render_option,
            style={"card_size": context.get("card_size", DEFAULT_CARD_SIZE)},
        )

    return build


_CARD_TOGGLE_STYLE = {
    "track_off_color": "#D6DED9",
    "thumb_color_on": "#FFFFFF",
    "thumb_color_off": "#FFFFFF",
    "label_color": "#2F3A34",
    "description_color": "#6C7A72",
}

visualization_registry = VisualizationRegistry(
    {
        "selection.compact": VisualizationConfig(variant="compact"),
        "weather.pill": VisualizationConfig(list_style="pill", render_option="weather_pill"),
        "activity.pill": VisualizationConfig(list_style="pill", render_option="activity_pill"),
        "management.card": _sized_cards("card", "management_card"),
        "choice.icon-tiles": _sized_cards("grid", "icon_tile"),
        "orthostatic.hydration-cards": _sized_cards("card", "orthostatic_factor"),
        "orthostatic.position": VisualizationConfig(render_option="illustrated_option"),
        "orthostatic.segmented-duration": VisualizationConfig(
            variant="segmented",
            style={
                "accent_color": "#6C5CE7",
                "card_color": "#FFFFFF",
                "segment_surface_color": "#F3F4F6",
                "show_dividers": True,
                "container_radius": 12,
                "segment_radius": 10,
            },
        ),
        "congestion.sleep": VisualizationConfig(
            variant="card",
            style={**_CARD_TOGGLE_STYLE, "track_on_color": "#4DB6AC"},
        ),
        "skin.morning-lightness": VisualizationConfig(
            variant="card",
            style={**_CARD_TOGGLE_STYLE, "track_on_color": "#C7A17A"},
        ),
        "skin.photo": VisualizationConfig(render_option="skin_photo"),
        "migraine.severity": VisualizationConfig(variant="orb"),
        "skin.severity": VisualizationConfig(variant="orb"),
        "orthostatic.severity": VisualizationConfig(variant="orb"),
    }
)
