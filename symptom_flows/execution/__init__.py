"""
Execution Layer - Flow State Controller

Defines the FlowController (stateful engine owning form data, navigation,
validation and the save/cancel lifecycle) and the derived-field transforms
it applies on every write.
"""

from symptom_flows.execution.controller import FlowController
from symptom_flows.execution.transforms import build_transform, chain, derived_label


__all__ = [
    "FlowController",
    "build_transform",
    "chain",
    "derived_label",
]
