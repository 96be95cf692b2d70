from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional

from ..execution.controller import FlowController
from ..rendering.renderer import FlowRenderer


@dataclass
class FlowSession:
    """
    One live flow instance: the controller that owns its state and the
    renderer bound to it.
    """
    session_id: str
    flow_id: str
    controller: FlowController
    renderer: FlowRenderer
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class SessionRepository(ABC):
    """
    Defines where live flow sessions are kept between requests.
    """

    @abstractmethod
    def get(self, session_id: str) -> Optional[FlowSession]:
        """Retrieves a session by ID."""
        pass

    @abstractmethod
    def save(self, session: FlowSession):
        """Stores the session."""
        pass

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        """Deletes a session. Returns True if found and deleted."""
        pass


class InMemorySessionRepository(SessionRepository):
    """
    Uses in-memory dictionary for session storage.
    Controllers hold callbacks, so sessions live in the serving process only.
    """

    def __init__(self):
        self._store: Dict[str, FlowSession] = {}

    def get(self, session_id: str) -> Optional[FlowSession]:
        return self._store.get(session_id)

    def save(self, session: FlowSession):
        self._store[session.session_id] = session

    def delete(self, session_id: str) -> bool:
        if session_id in self._store:
            del self._store[session_id]
            return True
        return False
