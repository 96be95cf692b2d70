# tests/conftest.py
from datetime import datetime

import pytest

from symptom_flows.domain.models import FlowConfig
from symptom_flows.execution.controller import FlowController
from symptom_flows.rendering.renderer import FlowRenderer
from symptom_flows.rendering.weather import WeatherProvider, WeatherReading

# Camel-cased, as the mobile client serializes flow definitions.
JOINT_FLOW = {
    "id": "arthritis",
    "title": "Joint Pain",
    "saveActionKey": "arthritis.save",
    "initialData": {
        "stiffness": 0,
        "pain": 0,
        "painLabel": "Mild",
        "morningStiffness": False,
        "affectedJoints": [],
        "bilateralSymmetry": False,
        "barometricPressure": None,
        "temperature": None,
        "humidity": None,
        "weatherConfirmation": None,
        "activities": [],
        "managementMethods": [],
        "notes": "",
    },
    "derivedLabels": [
        {
            "sourceKey": "pain",
            "targetKey": "painLabel",
            "thresholds": [
                {"max": 3, "label": "Mild"},
                {"max": 6, "label": "Moderate"},
                {"max": 10, "label": "Severe"},
            ],
        }
    ],
    "steps": [
        {
            "id": "severity",
            "title": "How stiff are your joints?",
            "fields": [
                {"id": "stiffness", "type": "stiffness", "fieldKey": "stiffness", "min": 0, "max": 10},
                {"id": "pain", "type": "hero_scale", "fieldKey": "pain", "secondaryKey": "painLabel"},
                {
                    "id": "morning",
                    "type": "toggle",
                    "fieldKey": "morningStiffness",
                    "label": "Stiff this morning?",
                    "visibility": {"type": "before_hour", "hour": 10},
                },
            ],
        },
        {
            "id": "location",
            "title": "Where does it hurt?",
            "validationKey": "arthritis.location",
            "fields": [
                {
                    "id": "joints",
                    "type": "joint_map",
                    "fieldKey": "affectedJoints",
                    "bilateralKey": "bilateralSymmetry",
                    "required": True,
                },
            ],
        },
        {
            "id": "weather",
            "title": "Weather",
            "content": [
                {
                    "type": "weather_summary",
                    "pressureKey": "barometricPressure",
                    "temperatureKey": "temperature",
                    "humidityKey": "humidity",
                },
                {"type": "note", "variant": "weather_confirmation", "fieldKey": "weatherConfirmation"},
            ],
            "fields": [
                {
                    "id": "weather-confirmation",
                    "type": "selection",
                    "fieldKey": "weatherConfirmation",
                    "allowDeselect": True,
                    "visualizationKey": "weather.pill",
                    "options": [
                        {"value": "yes", "label": "Yes"},
                        {"value": "cold", "label": "Cold"},
                        {"value": "no", "label": "No"},
                    ],
                },
            ],
        },
        {
            "id": "context",
            "title": "What helped?",
            "content": [
                {
                    "type": "note",
                    "variant": "selection_count",
                    "fieldKey": "managementMethods",
                    "singularLabel": "method",
                },
            ],
            "fields": [
                {
                    "id": "management",
                    "type": "multi_select_card",
                    "fieldKey": "managementMethods",
                    "visualizationKey": "management.card",
                    "badgeTemplate": "{count} method{plural}",
                    "clearOnDeselect": {"medication": ["medications"]},
                    "cardOptions": [
                        {"id": "heat", "label": "Heat"},
                        {"id": "rest", "label": "Rest"},
                        {"id": "medication", "label": "Medication"},
                    ],
                },
            ],
        },
    ],
}


class FixedWeatherProvider(WeatherProvider):
    """Returns the same reading every time and counts the calls."""

    def __init__(self, reading=None):
        self.reading = reading or WeatherReading(pressure="falling", temperature=48, humidity=72)
        self.calls = 0

    def current(self) -> WeatherReading:
        self.calls += 1
        return self.reading


def clock_at(hour: int, minute: int = 0):
    moment = datetime(2024, 3, 14, hour, minute)
    return lambda: moment


@pytest.fixture
def flow_payload():
    return JOINT_FLOW


@pytest.fixture
def flow_config():
    return FlowConfig.model_validate(JOINT_FLOW)


@pytest.fixture
def saved_records():
    return []


@pytest.fixture
def controller(flow_config, saved_records, mocker):
    return FlowController(
        flow_config,
        on_save=saved_records.append,
        on_cancel=mocker.Mock(),
    )


@pytest.fixture
def weather_provider():
    return FixedWeatherProvider()


@pytest.fixture
def renderer(controller, weather_provider):
    return FlowRenderer(controller, weather_provider=weather_provider, clock=clock_at(8))


@pytest.fixture
def make_clock():
    return clock_at


@pytest.fixture
def make_weather_provider():
    return FixedWeatherProvider
