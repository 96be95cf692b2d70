# tests/unit/test_registries.py
import pytest

from symptom_flows.exceptions import (
    FlowConfigurationError,
    UnknownActionKeyError,
    UnknownValidationKeyError,
    UnknownVisualizationKeyError,
)
from symptom_flows.registries.actions import SaveContext, action_registry
from symptom_flows.registries.validation import (
    ValidationRegistry,
    require_non_empty,
    validation_registry,
)
from symptom_flows.registries.visualization import (
    DEFAULT_CARD_SIZE,
    VisualizationConfig,
    card_size_for,
    visualization_registry,
)
from symptom_flows.state.models import ValidationResult


class TestValidationRegistry:

    def test_joint_location_requires_a_selection(self):
        validate = validation_registry.lookup("arthritis.location")

        result = validate({"affectedJoints": []})

        assert result.is_valid is False
        assert result.errors == {"affectedJoints": "Select at least one joint."}

    def test_joint_location_passes_with_selection(self):
        validate = validation_registry.lookup("arthritis.location")
        assert validate({"affectedJoints": ["knee-left"]}).is_valid

    def test_validators_tolerate_unvisited_steps(self):
        validate = validation_registry.lookup("arthritis.location")
        assert validate({}).is_valid is False

    def test_unknown_key_raises(self):
        with pytest.raises(UnknownValidationKeyError) as exc_info:
            validation_registry.lookup("nope")
        assert isinstance(exc_info.value, FlowConfigurationError)
        assert "nope" in str(exc_info.value)

    def test_extend_returns_new_registry(self):
        extended = validation_registry.extend(
            {"custom.always": lambda form_data: ValidationResult.ok()}
        )

        assert "custom.always" in extended
        assert "custom.always" not in validation_registry
        assert "arthritis.location" in extended
        assert len(extended) == len(validation_registry) + 1

    def test_registry_cannot_be_mutated(self):
        registry = ValidationRegistry({"a": require_non_empty("a", "Required")})
        with pytest.raises(TypeError):
            registry._entries["b"] = require_non_empty("b", "Required")

    @pytest.mark.parametrize("value", [None, "", [], {}])
    def test_require_non_empty_rejects_empty_values(self, value):
        assert not require_non_empty("notes", "Required")({"notes": value}).is_valid

    @pytest.mark.parametrize("value", [0, False, "x", ["a"]])
    def test_require_non_empty_accepts_values(self, value):
        assert require_non_empty("notes", "Required")({"notes": value}).is_valid


class TestVisualizationRegistry:

    def test_static_entry(self):
        config = visualization_registry.lookup("selection.compact")
        assert config == VisualizationConfig(variant="compact")

    def test_severity_entries_use_orb_variant(self):
        for key in ("migraine.severity", "skin.severity", "orthostatic.severity"):
            assert visualization_registry.lookup(key).variant == "orb"

    def test_factory_entry_uses_context(self):
        config = visualization_registry.lookup("choice.icon-tiles", {"card_size": 110})
        assert config.list_style == "grid"
        assert config.style["card_size"] == 110

    def test_factory_entry_defaults_without_context(self):
        config = visualization_registry.lookup("management.card")
        assert config.style["card_size"] == DEFAULT_CARD_SIZE

    @pytest.mark.parametrize("width, expected", [(390, 150), (360, 150), (320, 130), (260, 100)])
    def test_card_size_for_viewport(self, width, expected):
        assert card_size_for(width) == expected

    def test_unknown_key_raises(self):
        with pytest.raises(UnknownVisualizationKeyError):
            visualization_registry.lookup("does.not.exist")


class TestActionRegistry:

    def test_default_save_stores_whole_form_data(self, mocker):
        context = SaveContext(add_log=mocker.Mock(), on_complete=mocker.Mock())

        action_registry.lookup("log.save")({"a": 1, "b": [2]}, context)

        context.add_log.assert_called_once_with({"a": 1, "b": [2]})
        context.on_complete.assert_called_once_with()

    def test_arthritis_save_drops_missing_weather(self, mocker):
        context = SaveContext(add_log=mocker.Mock(), on_complete=mocker.Mock())
        form_data = {
            "stiffness": 6,
            "affectedJoints": ["knee-left"],
            "barometricPressure": "falling",
            "temperature": None,
            "unrelated": "ignored",
        }

        action_registry.lookup("arthritis.save")(form_data, context)

        record = context.add_log.call_args.args[0]
        assert record["stiffness"] == 6
        assert record["barometricPressure"] == "falling"
        assert "temperature" not in record
        assert "unrelated" not in record
        assert record["activities"] == []
        context.on_complete.assert_called_once_with()

    def test_unknown_key_raises(self):
        with pytest.raises(UnknownActionKeyError):
            action_registry.lookup("log.shred")
