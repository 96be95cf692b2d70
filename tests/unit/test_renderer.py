# tests/unit/test_renderer.py
from typing import get_args

import pytest

from symptom_flows.domain.models import FieldType, FlowConfig
from symptom_flows.exceptions import (
    InactiveControllerError,
    InvalidFieldValueError,
    UnknownVisualizationKeyError,
)
from symptom_flows.execution.controller import FlowController
from symptom_flows.rendering.accessors import ACCESSORS
from symptom_flows.rendering.renderer import FlowRenderer


def single_field_renderer(field, initial_data=None, clock=None, **renderer_kwargs):
    config = FlowConfig.model_validate(
        {
            "id": "single",
            "initialData": initial_data or {},
            "steps": [{"id": "only", "fields": [field]}],
        }
    )
    controller = FlowController(config, on_save=lambda data: None, on_cancel=lambda: None)
    kwargs = {"clock": clock} if clock else {}
    return FlowRenderer(controller, **kwargs, **renderer_kwargs)


def test_every_field_type_has_an_accessor():
    assert set(get_args(FieldType)) <= set(ACCESSORS)


class TestStepRendering:

    def test_renders_current_step(self, renderer):
        step = renderer.render()

        assert step.step_id == "severity"
        assert step.step_number == 1
        assert step.total_steps == 4
        assert [field.id for field in step.fields] == ["stiffness", "pain", "morning"]

    def test_scale_defaults_and_props(self, renderer):
        stiffness = renderer.render().get_field("stiffness")

        assert stiffness.value == 0
        assert stiffness.props["min"] == 0
        assert stiffness.props["max"] == 10
        assert stiffness.props["step"] == 1

    def test_hero_scale_shows_derived_label(self, renderer):
        renderer.render().get_field("pain").on_change(8)

        pain = renderer.render().get_field("pain")

        assert pain.value == 8
        assert pain.props["label_key"] == "painLabel"
        assert pain.props["value_label"] == "Severe"

    def test_field_error_comes_from_controller(self, controller, renderer):
        controller.go_to_step(2)
        controller.validate_step()

        joints = renderer.render().get_field("joints")

        assert joints.error == "Select at least one joint."
        assert joints.required is True

    def test_closed_controller_cannot_render(self, controller, renderer):
        controller.close()
        with pytest.raises(InactiveControllerError):
            renderer.render()

    def test_unknown_action_raises_key_error(self, renderer):
        stiffness = renderer.render().get_field("stiffness")
        with pytest.raises(KeyError):
            stiffness.perform("toggle", "x")


class TestVisibility:

    def test_field_shown_before_cutoff_hour(self, controller, make_clock):
        step = FlowRenderer(controller, clock=make_clock(9, 59)).render()
        assert step.get_field("morning") is not None

    @pytest.mark.parametrize("hour", [10, 14, 23])
    def test_field_hidden_from_cutoff_hour(self, controller, make_clock, hour):
        controller.update_field("morningStiffness", True)

        step = FlowRenderer(controller, clock=make_clock(hour)).render()

        assert step.get_field("morning") is None
        assert controller.form_data["morningStiffness"] is True


class TestWeatherSeeding:

    def test_seeds_weather_once_on_first_render(self, controller, renderer, weather_provider):
        controller.go_to_step(3)

        first = renderer.render()
        renderer.render()

        assert weather_provider.calls == 1
        assert controller.form_data["barometricPressure"] == "falling"
        assert controller.form_data["temperature"] == 48
        assert controller.form_data["humidity"] == 72
        assert first.content[0].type == "weather_summary"
        assert "Low (Falling)" in first.content[0].text
        assert "Temp 48°F | Humidity 72%" in first.content[0].text

    def test_existing_reading_is_kept(self, controller, renderer, weather_provider):
        controller.update_field("barometricPressure", "rising")
        controller.go_to_step(3)

        step = renderer.render()

        assert weather_provider.calls == 0
        assert "High (Rising)" in step.content[0].text

    def test_steps_without_weather_do_not_seed(self, controller, renderer, weather_provider):
        renderer.render()
        assert weather_provider.calls == 0
        assert controller.form_data["barometricPressure"] is None

    def test_no_provider_leaves_slots_unset(self, controller, make_clock):
        controller.go_to_step(3)

        step = FlowRenderer(controller, clock=make_clock(8)).render()

        assert controller.form_data["temperature"] is None
        assert "Stable" in step.content[0].text
        assert "Temp --°F" in step.content[0].text

    def test_notes_render_below_fields(self, controller, renderer):
        controller.go_to_step(3)

        step = renderer.render()

        assert [block.variant for block in step.notes] == ["weather_confirmation"]
        assert step.notes[0].text == "Select an option above"


class TestVisualization:

    def test_static_entry_is_resolved(self, controller, renderer):
        controller.go_to_step(3)
        field = renderer.render().get_field("weather-confirmation")
        assert field.visualization.list_style == "pill"
        assert field.visualization.render_option == "weather_pill"

    @pytest.mark.parametrize("width, card_size", [(390, 150), (300, 120)])
    def test_card_size_follows_viewport(self, controller, make_clock, width, card_size):
        controller.go_to_step(4)

        renderer = FlowRenderer(controller, clock=make_clock(8), viewport_width=width)
        field = renderer.render().get_field("management")

        assert field.visualization.style["card_size"] == card_size

    def test_unknown_key_is_a_configuration_error(self):
        renderer = single_field_renderer(
            {"id": "level", "type": "linear_scale", "fieldKey": "level", "visualizationKey": "no.such"}
        )
        with pytest.raises(UnknownVisualizationKeyError):
            renderer.render()


class TestSelections:

    def test_selection_can_be_deselected(self, controller, renderer):
        controller.go_to_step(3)
        field = renderer.render().get_field("weather-confirmation")

        field.on_change("yes")
        assert controller.form_data["weatherConfirmation"] == "yes"
        assert renderer.render().notes[0].text == "Weather correlation: Confirmed"

        field.on_change("yes")
        assert controller.form_data["weatherConfirmation"] is None

    def test_joint_map_bilateral_action(self, controller, renderer):
        controller.go_to_step(2)
        joints = renderer.render().get_field("joints")

        joints.on_change(["knee-left", "knee-right"])
        joints.perform("set_bilateral", True)

        rendered = renderer.render().get_field("joints")
        assert rendered.value == ["knee-left", "knee-right"]
        assert rendered.props["bilateral"] is True

    def test_multi_select_card_clears_dependents_on_deselect(self, controller, renderer):
        controller.go_to_step(4)
        field = renderer.render().get_field("management")

        field.perform("toggle", "medication")
        controller.update_field("medications", ["ibuprofen"])
        field.perform("toggle", "heat")
        field.perform("toggle", "medication")

        assert controller.form_data["managementMethods"] == ["heat"]
        assert controller.form_data["medications"] == []

    def test_multi_select_card_badge_and_count_note(self, controller, renderer):
        controller.go_to_step(4)
        empty = renderer.render()
        assert empty.get_field("management").props["show_badge"] is False
        assert empty.notes[0].text == "No selections"

        empty.get_field("management").perform("toggle", "heat")
        one = renderer.render()
        assert one.get_field("management").props["badge"] == "1 method"
        assert one.notes[0].text == "1 method selected"

        one.get_field("management").perform("toggle", "rest")
        two = renderer.render()
        assert two.get_field("management").props["badge"] == "2 methods"
        assert two.notes[0].text == "2 methods selected"


class TestIncompleteConfiguration:

    @pytest.mark.parametrize(
        "field",
        [
            {"id": "f", "type": "region_map", "fieldKey": "regions"},
            {"id": "f", "type": "swatch_selection", "fieldKey": "color"},
            {"id": "f", "type": "axis_grid", "fieldKey": "valence"},
            {"id": "f", "type": "radial_duration", "fieldKey": "duration"},
            {"id": "f", "type": "icon_grid", "fieldKey": "meds"},
        ],
    )
    def test_field_is_skipped_and_data_untouched(self, field):
        renderer = single_field_renderer(field, initial_data={"kept": 1})

        step = renderer.render()

        assert step.fields == []
        assert dict(renderer.controller.form_data) == {"kept": 1}


class TestCompositeFields:

    def test_axis_grid_writes_both_slots(self):
        renderer = single_field_renderer(
            {
                "id": "mood",
                "type": "axis_grid",
                "fieldKey": "valence",
                "secondaryKey": "energy",
                "topLabel": "Energized",
                "bottomLabel": "Drained",
            },
            initial_data={"valence": 0, "energy": 0, "dominantMood": "Calm"},
        )
        field = renderer.render().get_field("mood")
        assert field.props["dominant_label"] == "Calm"

        field.on_change({"primary": 0.4, "secondary": -0.2})

        assert renderer.controller.form_data["valence"] == 0.4
        assert renderer.controller.form_data["energy"] == -0.2
        assert renderer.render().get_field("mood").value == {"primary": 0.4, "secondary": -0.2}

    def test_icon_grid_none_option_is_exclusive(self):
        renderer = single_field_renderer(
            {
                "id": "meds",
                "type": "icon_grid",
                "fieldKey": "medications",
                "noneOptionLabel": "None taken",
                "iconItems": [
                    {"id": "ibuprofen", "label": "Ibuprofen", "icon": "pill"},
                    {"id": "naproxen", "label": "Naproxen", "icon": "pill"},
                ],
            },
            initial_data={"medications": [], "noneSelected": False},
        )
        field = renderer.render().get_field("meds")

        field.perform("toggle", "ibuprofen")
        field.perform("toggle", "naproxen")
        assert renderer.controller.form_data["medications"] == ["ibuprofen", "naproxen"]

        field.perform("toggle_none")
        assert renderer.controller.form_data["noneSelected"] is True
        assert renderer.controller.form_data["medications"] == []

        field.perform("toggle", "naproxen")
        assert renderer.controller.form_data["noneSelected"] is False
        assert renderer.controller.form_data["medications"] == ["naproxen"]

    def test_icon_grid_object_values_record_time(self, make_clock):
        renderer = single_field_renderer(
            {
                "id": "meds",
                "type": "icon_grid",
                "fieldKey": "medications",
                "iconValueType": "object",
                "iconItems": [{"id": "ibuprofen", "label": "Ibuprofen", "icon": "pill"}],
            },
            clock=make_clock(8, 30),
        )

        renderer.render().get_field("meds").perform("toggle", "ibuprofen")

        field = renderer.render().get_field("meds")
        assert field.value == [{"name": "ibuprofen", "takenAt": "2024-03-14T08:30:00"}]
        assert field.props["selected_ids"] == ["ibuprofen"]

        field.perform("toggle", "ibuprofen")
        assert renderer.controller.form_data["medications"] == []

    def test_radial_duration_clamps_to_active_unit(self):
        renderer = single_field_renderer(
            {
                "id": "duration",
                "type": "radial_duration",
                "fieldKey": "duration",
                "unitKey": "durationUnit",
                "durationUnits": [
                    {"id": "minutes", "label": "Min", "targetKey": "durationMinutes", "max": 120, "step": 5},
                    {"id": "hours", "label": "Hours", "targetKey": "durationHours", "max": 24},
                ],
            }
        )
        field = renderer.render().get_field("duration")

        field.on_change(500)
        assert renderer.controller.form_data["durationMinutes"] == 120

        field.perform("set_unit", "hours")
        assert renderer.controller.form_data["durationUnit"] == "hours"
        assert renderer.controller.form_data["durationHours"] == 0

        field.on_change(-3)
        assert renderer.controller.form_data["durationHours"] == 0
        assert renderer.render().get_field("duration").props["selected_unit_id"] == "hours"

    def test_day_part_duration_writes_named_slots(self):
        renderer = single_field_renderer(
            {
                "id": "onset",
                "type": "day_part_duration",
                "fieldKey": "timeOfDay",
                "dayParts": [{"id": "morning", "label": "Morning", "icon": "sunrise"}],
                "durationOptions": [
                    {"id": "2h", "label": "2 hours", "minutes": 120},
                    {"id": "ongoing", "label": "Still going", "ongoing": True},
                ],
            }
        )
        field = renderer.render().get_field("onset")

        field.on_change({"time_of_day": "morning", "started_at": "07:30"})
        field.perform("select_duration", "2h")
        assert renderer.controller.form_data["timeOfDay"] == "morning"
        assert renderer.controller.form_data["startedAt"] == "07:30"
        assert renderer.controller.form_data["durationMinutes"] == 120
        assert renderer.controller.form_data["isOngoing"] is False

        field.perform("select_duration", "ongoing")
        assert renderer.controller.form_data["isOngoing"] is True
        assert renderer.controller.form_data["durationMinutes"] is None

        with pytest.raises(InvalidFieldValueError):
            field.on_change({"bogus": 1})
        assert "bogus" not in renderer.controller.form_data

    def test_anatomy_multi_select_truncates_to_limit(self):
        renderer = single_field_renderer(
            {
                "id": "areas",
                "type": "anatomy_hotspot",
                "fieldKey": "areas",
                "anatomyMaxSelections": 2,
                "anatomyMapConfig": {"regions": [{"id": "a", "name": "A", "path": "M0 0"}]},
            }
        )
        field = renderer.render().get_field("areas")
        assert field.value == []

        field.on_change(["a", "b", "c"])

        assert renderer.controller.form_data["areas"] == ["a", "b"]

    @pytest.mark.parametrize("value", [None, 0.4, {"primary": 0.4}])
    def test_axis_grid_rejects_malformed_point(self, value):
        renderer = single_field_renderer(
            {"id": "mood", "type": "axis_grid", "fieldKey": "valence", "secondaryKey": "energy"},
            initial_data={"valence": 0, "energy": 0},
        )
        revision = renderer.controller.revision

        with pytest.raises(InvalidFieldValueError):
            renderer.render().get_field("mood").on_change(value)

        assert renderer.controller.revision == revision

    @pytest.mark.parametrize("value", [None, "ten", float("nan"), True])
    def test_radial_duration_rejects_non_numbers(self, value):
        renderer = single_field_renderer(
            {
                "id": "duration",
                "type": "radial_duration",
                "fieldKey": "duration",
                "unitKey": "durationUnit",
                "durationUnits": [{"id": "minutes", "label": "Min", "targetKey": "durationMinutes", "max": 120}],
            }
        )

        with pytest.raises(InvalidFieldValueError):
            renderer.render().get_field("duration").on_change(value)

        assert "durationMinutes" not in renderer.controller.form_data
