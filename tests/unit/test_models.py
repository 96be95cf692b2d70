# tests/unit/test_models.py
import pytest
from pydantic import ValidationError

from symptom_flows.domain.models import (
    FieldConfig,
    FlowConfig,
    SelectionCountNote,
    StepConfig,
    TextNote,
    WeatherSummaryBlock,
)


class TestFlowConfig:

    def test_loads_camel_case_payload(self, flow_config):
        assert flow_config.id == "arthritis"
        assert flow_config.save_action_key == "arthritis.save"
        assert flow_config.total_steps == 4
        location = flow_config.steps[1]
        assert location.validation_key == "arthritis.location"
        assert location.fields[0].bilateral_key == "bilateralSymmetry"

    def test_accepts_snake_case_names(self):
        config = FlowConfig(
            id="snake",
            steps=[StepConfig(id="one", validation_key="arthritis.location")],
            initial_data={"a": 1},
        )
        assert config.steps[0].validation_key == "arthritis.location"

    def test_ignores_presentation_only_keys(self):
        field = FieldConfig.model_validate(
            {"id": "f", "type": "toggle", "fieldKey": "f", "iconColor": "#fff"}
        )
        assert not hasattr(field, "iconColor")

    def test_config_is_immutable(self, flow_config):
        with pytest.raises(ValidationError):
            flow_config.id = "other"

    def test_requires_at_least_one_step(self):
        with pytest.raises(ValidationError, match="at least one step"):
            FlowConfig(id="empty", steps=[])

    def test_rejects_duplicate_step_ids(self):
        with pytest.raises(ValidationError, match="duplicate step ids"):
            FlowConfig(id="dupes", steps=[{"id": "a"}, {"id": "b"}, {"id": "a"}])

    def test_rejects_unknown_field_type(self):
        with pytest.raises(ValidationError):
            FieldConfig.model_validate({"id": "f", "type": "slider3d", "fieldKey": "f"})

    def test_fresh_data_is_an_independent_copy(self, flow_config):
        data = flow_config.fresh_data()
        data["activities"].append("walking")
        assert flow_config.initial_data["activities"] == []


class TestStepConfig:

    def test_rejects_duplicate_field_keys(self):
        with pytest.raises(ValidationError, match="more than once"):
            StepConfig.model_validate(
                {
                    "id": "dupes",
                    "fields": [
                        {"id": "a", "type": "toggle", "fieldKey": "same"},
                        {"id": "b", "type": "toggle", "fieldKey": "same"},
                    ],
                }
            )

    def test_time_gated_fields_may_share_a_key(self):
        step = StepConfig.model_validate(
            {
                "id": "shared",
                "fields": [
                    {
                        "id": "a",
                        "type": "toggle",
                        "fieldKey": "same",
                        "visibility": {"type": "before_hour", "hour": 10},
                    },
                    {
                        "id": "b",
                        "type": "toggle",
                        "fieldKey": "same",
                        "visibility": {"type": "before_hour", "hour": 12},
                    },
                ],
            }
        )
        assert len(step.fields) == 2

    @pytest.mark.parametrize("gated_first", [True, False])
    def test_gated_field_cannot_share_key_with_visible_field(self, gated_first):
        gated = {
            "id": "morning",
            "type": "toggle",
            "fieldKey": "same",
            "visibility": {"type": "before_hour", "hour": 10},
        }
        ungated = {"id": "always", "type": "toggle", "fieldKey": "same"}
        fields = [gated, ungated] if gated_first else [ungated, gated]

        with pytest.raises(ValidationError, match="more than once"):
            StepConfig.model_validate({"id": "clash", "fields": fields})

    def test_content_blocks_are_discriminated(self):
        step = StepConfig.model_validate(
            {
                "id": "weather",
                "content": [
                    {
                        "type": "weather_summary",
                        "pressureKey": "p",
                        "temperatureKey": "t",
                        "humidityKey": "h",
                    },
                    {"type": "note", "variant": "selection_count", "fieldKey": "items"},
                    {"type": "note", "variant": "text", "text": "Log daily."},
                ],
            }
        )
        assert [type(block) for block in step.content] == [
            WeatherSummaryBlock,
            SelectionCountNote,
            TextNote,
        ]

    def test_rejects_unknown_note_variant(self):
        with pytest.raises(ValidationError):
            StepConfig.model_validate(
                {"id": "bad", "content": [{"type": "note", "variant": "confetti"}]}
            )

    def test_visibility_hour_is_bounded(self):
        with pytest.raises(ValidationError):
            FieldConfig.model_validate(
                {
                    "id": "f",
                    "type": "toggle",
                    "fieldKey": "f",
                    "visibility": {"type": "before_hour", "hour": 25},
                }
            )
