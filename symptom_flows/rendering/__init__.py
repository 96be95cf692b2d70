"""
Rendering Layer - Field-Type Dispatcher

Turns the controller's current step into renderable fields and content
blocks, wiring every field change back into the controller.
"""

from symptom_flows.rendering.models import RenderedContent, RenderedField, RenderedStep
from symptom_flows.rendering.renderer import FlowRenderer
from symptom_flows.rendering.weather import (
    SimulatedWeatherProvider,
    WeatherProvider,
    WeatherReading,
)

__all__ = [
    "FlowRenderer",
    "RenderedContent",
    "RenderedField",
    "RenderedStep",
    "SimulatedWeatherProvider",
    "WeatherProvider",
    "WeatherReading",
]
