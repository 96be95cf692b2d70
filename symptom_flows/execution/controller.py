"""
Controller - Flow State Management Layer

The FlowController is the stateful engine behind every symptom logging
wizard. It owns the current step, the form data, the validation errors and
the save/cancel lifecycle of exactly one flow instance.
-----------------------------------------------

Conventions:
1. Steps are 0-based internally and 1-based for callers. `current_step`,
   `go_to_step()` and `ValidationResult.step_index` all speak 1-based; an
   explicit validator receives the 0-based step index.
2. Form data is never mutated in place. Every write builds a new dict, runs
   the derived-field transform over the whole object and then swaps it in,
   bumping `revision` so consumers can detect changes by identity.
3. Navigation clamps silently at the first and last step; out-of-range jumps
   are ignored.
4. Validators and transforms are trusted code. If one raises, the exception
   propagates: that is a configuration bug, not a validation failure.
"""

import copy
import inspect
import logging
from types import MappingProxyType
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Set,
    Union,
)

from ..domain.models import FlowConfig, StepConfig
from ..exceptions import InactiveControllerError
from ..registries.validation import StepValidatorFn, ValidationRegistry, validation_registry
from ..state.models import FlowSnapshot, FlowState, ValidationResult
from .transforms import FormDataTransform, build_transform

logger = logging.getLogger(__name__)

# Explicit validator: (form_data, 0-based step index) -> ValidationResult
FlowValidator = Callable[[Mapping[str, Any], int], ValidationResult]
SaveCallback = Callable[[Dict[str, Any]], Union[None, Awaitable[None]]]
CancelCallback = Callable[[], None]
FormDataUpdater = Callable[[Dict[str, Any]], Dict[str, Any]]


class FlowController:
    def __init__(
        self,
        config: FlowConfig,
        on_save: SaveCallback,
        on_cancel: CancelCallback,
        validator: Optional[FlowValidator] = None,
        on_form_data_change: Optional[FormDataTransform] = None,
        registry: ValidationRegistry = validation_registry,
    ):
        self.config = config
        self._on_save = on_save
        self._on_cancel = on_cancel
        self._validator = validator
        self._transform = (
            on_form_data_change if on_form_data_change is not None else build_transform(config)
        )

        # Resolved eagerly so a misconfigured flow fails at mount.
        self._step_validators = self._resolve_step_validators(registry)

        self._state = FlowState(form_data=config.fresh_data())
        self._revision = 0
        self._seeded: Set[str] = set()
        self._active = True

    # ==========================================================================
    # Read Model
    # ==========================================================================

    @property
    def form_data(self) -> Mapping[str, Any]:
        """Read-only deep copy of the current form data; nested values are never shared."""
        return MappingProxyType(copy.deepcopy(self._state.form_data))

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def current_step(self) -> int:
        return self._state.current_step_index + 1

    @property
    def current_step_config(self) -> StepConfig:
        return self.config.steps[self._state.current_step_index]

    @property
    def total_steps(self) -> int:
        return self.config.total_steps

    @property
    def errors(self) -> Mapping[str, str]:
        return MappingProxyType(self._state.errors)

    @property
    def is_saving(self) -> bool:
        return self._state.is_saving

    @property
    def can_go_next(self) -> bool:
        return self._state.current_step_index < self.total_steps - 1

    @property
    def can_go_back(self) -> bool:
        return self._state.current_step_index > 0

    @property
    def is_first_step(self) -> bool:
        return self._state.current_step_index == 0

    @property
    def is_last_step(self) -> bool:
        return self._state.current_step_index == self.total_steps - 1

    @property
    def is_step_valid(self) -> bool:
        """Speculatively validates the current step without storing errors."""
        return self._run_validator(self._state.current_step_index).is_valid

    @property
    def is_active(self) -> bool:
        return self._active

    def snapshot(self) -> FlowSnapshot:
        return FlowSnapshot(
            flow_id=self.config.id,
            step_id=self.current_step_config.id,
            current_step=self.current_step,
            total_steps=self.total_steps,
            form_data=copy.deepcopy(self._state.form_data),
            errors=dict(self._state.errors),
            is_saving=self.is_saving,
            is_step_valid=self.is_step_valid,
            can_go_next=self.can_go_next,
            can_go_back=self.can_go_back,
            is_first_step=self.is_first_step,
            is_last_step=self.is_last_step,
            revision=self._revision,
        )

    # ==========================================================================
    # Form Data
    # ==========================================================================

    def update_field(self, key: str, value: Any) -> None:
        self.update_fields({key: value})

    def update_fields(self, values: Mapping[str, Any]) -> None:
        """Writes several slots as one logical update (one transform pass)."""
        self._ensure_active()
        self._commit({**self._state.form_data, **copy.deepcopy(dict(values))})

    def set_form_data(
        self, data: Union[Mapping[str, Any], FormDataUpdater]
    ) -> None:
        """
        Replaces the form data, either with a whole object or with the result
        of `data(previous)`. The updater always receives the latest data, so
        several updates issued in a row are never lost.
        """
        self._ensure_active()
        if callable(data):
            updated = data(copy.deepcopy(self._state.form_data))
        else:
            updated = copy.deepcopy(dict(data))
        self._commit(updated)

    def reset_form(self) -> None:
        """Back to a fresh copy of the initial data on the first step."""
        self._ensure_active()
        self._state.form_data = self.config.fresh_data()
        self._state.current_step_index = 0
        self._state.errors = {}
        self._revision += 1
        logger.debug(f"Flow '{self.config.id}' reset to initial data")

    def seed_if_unset(
        self,
        key: str,
        factory: Callable[[], Mapping[str, Any]],
        sentinel: Any = None,
    ) -> bool:
        """
        Atomically writes `factory()` if `key` still holds `sentinel`.

        Each key is considered at most once per controller: after the first
        call, later calls are no-ops even if the slot was cleared since.
        Returns True if the slot was seeded by this call.
        """
        self._ensure_active()
        if key in self._seeded:
            return False
        self._seeded.add(key)

        if self._state.form_data.get(key, sentinel) != sentinel:
            return False

        values = factory()
        self._commit({**self._state.form_data, **copy.deepcopy(dict(values))})
        logger.debug(f"Flow '{self.config.id}' seeded {sorted(values)}")
        return True

    # ==========================================================================
    # Navigation
    # ==========================================================================

    def go_to_next_step(self) -> None:
        self._ensure_active()
        if self.can_go_next:
            self._state.current_step_index += 1
            logger.debug(f"Flow '{self.config.id}' advanced to step {self.current_step}")

    def go_to_previous_step(self) -> None:
        self._ensure_active()
        if self.can_go_back:
            self._state.current_step_index -= 1
            logger.debug(f"Flow '{self.config.id}' went back to step {self.current_step}")

    def go_to_step(self, step: int) -> None:
        """Jumps to a 1-based step number. Out-of-range requests are ignored."""
        self._ensure_active()
        if 1 <= step <= self.total_steps:
            self._state.current_step_index = step - 1
            logger.debug(f"Flow '{self.config.id}' jumped to step {step}")
        else:
            logger.debug(f"Flow '{self.config.id}' ignored jump to step {step}")

    # ==========================================================================
    # Validation
    # ==========================================================================

    def validate_step(self) -> ValidationResult:
        """Validates the current step and stores its errors."""
        self._ensure_active()
        result = self._run_validator(self._state.current_step_index)
        self._state.errors = dict(result.errors)
        return result

    def validate_all_steps(self) -> ValidationResult:
        """
        Validates steps in order from the first, stopping at the first failure.
        The failure carries the 1-based `step_index` of that step and its
        errors become the current errors.
        """
        self._ensure_active()
        for index in range(self.total_steps):
            result = self._run_validator(index)
            if not result.is_valid:
                self._state.errors = dict(result.errors)
                return result.model_copy(update={"step_index": index + 1})

        self._state.errors = {}
        return ValidationResult.ok()

    def clear_errors(self) -> None:
        self._ensure_active()
        self._state.errors = {}

    def set_field_error(self, field: str, message: str) -> None:
        self._ensure_active()
        self._state.errors = {**self._state.errors, field: message}

    # ==========================================================================
    # Lifecycle
    # ==========================================================================

    async def save(self) -> bool:
        """
        Validates the current step and hands a copy of the form data to the
        save callback. At most one save is in flight per controller; a call
        made while another is running returns False without doing anything.

        Returns True once the callback has completed.
        """
        self._ensure_active()
        if self._state.is_saving:
            logger.debug(f"Flow '{self.config.id}' save ignored: already saving")
            return False

        result = self._run_validator(self._state.current_step_index)
        if not result.is_valid:
            self._state.errors = dict(result.errors)
            logger.info(f"Flow '{self.config.id}' save blocked by validation on step {self.current_step}")
            return False

        self._state.is_saving = True
        try:
            outcome = self._on_save(copy.deepcopy(self._state.form_data))
            if inspect.isawaitable(outcome):
                await outcome
        except Exception:
            logger.exception(f"Flow '{self.config.id}' save callback failed")
            raise
        finally:
            self._state.is_saving = False

        logger.info(f"Flow '{self.config.id}' saved")
        return True

    def cancel(self) -> None:
        self._ensure_active()
        self._on_cancel()

    def close(self) -> None:
        """Tears the controller down; any later operation raises InactiveControllerError."""
        self._active = False

    # ==========================================================================
    # Helpers
    # ==========================================================================

    def _resolve_step_validators(
        self, registry: ValidationRegistry
    ) -> List[Optional[StepValidatorFn]]:
        return [
            registry.lookup(step.validation_key) if step.validation_key else None
            for step in self.config.steps
        ]

    def _run_validator(self, index: int) -> ValidationResult:
        form_data = MappingProxyType(copy.deepcopy(self._state.form_data))
        if self._validator is not None:
            return self._validator(form_data, index)

        step_validator = self._step_validators[index]
        if step_validator is None:
            return ValidationResult.ok()
        return step_validator(form_data)

    def _commit(self, updated: Dict[str, Any]) -> None:
        if self._transform is not None:
            updated = self._transform(updated)
        if updated == self._state.form_data:
            return
        self._state.form_data = updated
        self._revision += 1

    def _ensure_active(self) -> None:
        if not self._active:
            raise InactiveControllerError(
                f"FlowController for '{self.config.id}' has been closed."
            )
