from datetime import datetime
from typing import Optional

from ..domain.models import VisibilityRule


def is_visible(rule: Optional[VisibilityRule], now: datetime) -> bool:
    """Evaluates a visibility rule against the render moment (local time)."""
    if rule is None:
        return True
    if rule.type == "before_hour":
        return now.hour < rule.hour
    return False
