"""
Validation Registry.

Maps a string validation key to a pure, synchronous step validator
`(form_data) -> ValidationResult`. Validators must be safe to call for steps
the user has not visited yet, because whole-flow validation runs all of them.
"""

from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, Mapping

from ..exceptions import UnknownValidationKeyError
from ..state.models import ValidationResult

StepValidatorFn = Callable[[Mapping[str, Any]], ValidationResult]


def require_non_empty(field_key: str, message: str) -> StepValidatorFn:
    """Builds a validator that fails while `field_key` is missing or empty."""

    def validate(form_data: Mapping[str, Any]) -> ValidationResult:
        value = form_data.get(field_key)
        if value is None or (hasattr(value, "__len__") and len(value) == 0):
            return ValidationResult.fail({field_key: message})
        return ValidationResult.ok()

    return validate


class ValidationRegistry:
    """
    Read-only lookup table of step validators.
    """

    def __init__(self, entries: Mapping[str, StepValidatorFn]):
        self._entries: Mapping[str, StepValidatorFn] = MappingProxyType(dict(entries))

    def lookup(self, key: str) -> StepValidatorFn:
        """
        Returns the validator registered under `key`.
        Raises UnknownValidationKeyError if the key is not registered.
        """
        try:
            return self._entries[key]
        except KeyError:
            raise UnknownValidationKeyError(key) from None

    def extend(self, entries: Mapping[str, StepValidatorFn]) -> "ValidationRegistry":
        """Returns a new registry with `entries` added on top of this one."""
        merged: Dict[str, StepValidatorFn] = dict(self._entries)
        merged.update(entries)
        return ValidationRegistry(merged)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


validation_registry = ValidationRegistry(
    {
        "arthritis.location": require_non_empty(
            "affectedJoints", "Select at least one joint."
        ),
    }
)
