"""
Action Registry.

Maps a save action key to a handler that turns the final form data into a
log record, hands it to the persistence collaborator and signals completion.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping

from ..exceptions import UnknownActionKeyError


@dataclass
class SaveContext:
    """
    Collaborators available to a save action.

    Attributes:
        add_log: Persists one log record.
        on_complete: Called once the record has been handed off.
    """
    add_log: Callable[[Dict[str, Any]], Any]
    on_complete: Callable[[], None]


SaveAction = Callable[[Mapping[str, Any], SaveContext], None]


def save_form_data(form_data: Mapping[str, Any], context: SaveContext) -> None:
    context.add_log(dict(form_data))
    context.on_complete()


def save_arthritis_log(form_data: Mapping[str, Any], context: SaveContext) -> None:
    record = {
        "stiffness": form_data.get("stiffness"),
        "morningStiffness": form_data.get("morningStiffness"),
        "affectedJoints": form_data.get("affectedJoints", []),
        "bilateralSymmetry": form_data.get("bilateralSymmetry"),
        "activities": form_data.get("activities", []),
        "managementMethods": form_data.get("managementMethods", []),
        "notes": form_data.get("notes", ""),
    }
    # Weather slots are optional and omitted rather than stored as null.
    for key in ("barometricPressure", "temperature", "humidity", "weatherConfirmation"):
        if form_data.get(key) is not None:
            record[key] = form_data[key]

    context.add_log(record)
    context.on_complete()


class ActionRegistry:
    """
    Read-only lookup table of save actions.
    """

    def __init__(self, entries: Mapping[str, SaveAction]):
        self._entries: Mapping[str, SaveAction] = MappingProxyType(dict(entries))

    def lookup(self, key: str) -> SaveAction:
        try:
            return self._entries[key]
        except KeyError:
            raise UnknownActionKeyError(key) from None

    def __contains__(self, key: object) -> bool:
        return key in self._entries


DEFAULT_SAVE_ACTION = "log.save"

action_registry = ActionRegistry(
    {
        DEFAULT_SAVE_ACTION: save_form_data,
        "arthritis.save": save_arthritis_log,
    }
)
