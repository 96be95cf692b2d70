"""
Derived-field transforms.

A transform receives the complete, already updated form data and returns the
form data to store. The controller applies it inside the same logical update
as the write that triggered it, so a raw value and its derived label are
never observed out of sync.
"""

from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from ..domain.models import DerivedLabelRule, FlowConfig

FormDataTransform = Callable[[Dict[str, Any]], Dict[str, Any]]


def label_for(
    value: Any, thresholds: Sequence[Tuple[float, str]], fallback: Optional[str] = None
) -> Optional[str]:
    """Returns the label of the first threshold whose upper bound is >= value."""
    if value is None:
        return fallback
    for upper, label in thresholds:
        if value <= upper:
            return label
    return fallback


def derived_label(
    source_key: str,
    target_key: str,
    thresholds: Sequence[Tuple[float, str]],
    fallback: Optional[str] = None,
) -> FormDataTransform:
    """Builds a transform keeping `target_key` consistent with `source_key`."""
    ordered = sorted(thresholds, key=lambda item: item[0])

    def transform(form_data: Dict[str, Any]) -> Dict[str, Any]:
        label = label_for(form_data.get(source_key), ordered, fallback)
        if form_data.get(target_key) == label:
            return form_data
        return {**form_data, target_key: label}

    return transform


def chain(*transforms: FormDataTransform) -> FormDataTransform:
    """Composes transforms left to right."""

    def transform(form_data: Dict[str, Any]) -> Dict[str, Any]:
        for step in transforms:
            form_data = step(form_data)
        return form_data

    return transform


def from_rule(rule: DerivedLabelRule) -> FormDataTransform:
    return derived_label(
        rule.source_key,
        rule.target_key,
        [(threshold.max, threshold.label) for threshold in rule.thresholds],
        rule.fallback_label,
    )


def build_transform(config: FlowConfig) -> Optional[FormDataTransform]:
    """Returns the transform declared by the flow's derived label rules, if any."""
    if not config.derived_labels:
        return None
    return chain(*(from_rule(rule) for rule in config.derived_labels))
