import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List

from ..domain.models import FlowConfig
from ..services.exceptions import FlowNotFoundError

logger = logging.getLogger(__name__)


# The Interface
class FlowRepository(ABC):
    """
    Defines how the application accesses flow configurations.
    This allows us change where configurations live (Memory -> Files -> API)
    later without changing the FlowService code.
    """

    @abstractmethod
    def get_flow(self, flow_id: str) -> FlowConfig:
        """
        Retrieves a flow configuration by ID.
        Raises FlowNotFoundError if not found.
        """
        pass

    @abstractmethod
    def list_flows(self) -> List[FlowConfig]:
        pass


class StaticFlowRepository(FlowRepository):
    """
    Serves flow configurations held in memory.
    """

    def __init__(self, flows: Iterable[FlowConfig] = ()):
        # Index for O(1) lookup
        self._index: Dict[str, FlowConfig] = {flow.id: flow for flow in flows}

    def get_flow(self, flow_id: str) -> FlowConfig:
        if flow_id not in self._index:
            raise FlowNotFoundError(f"Flow '{flow_id}' not found.")
        return self._index[flow_id]

    def list_flows(self) -> List[FlowConfig]:
        return list(self._index.values())


class FileFlowRepository(StaticFlowRepository):
    """
    Loads every *.json flow configuration from a directory once, at startup.
    An invalid file fails the load: a misconfigured flow must not ship.
    """

    def __init__(self, directory: str):
        paths = sorted(Path(directory).glob("*.json"))
        flows = [FlowConfig.model_validate_json(path.read_text(encoding="utf-8")) for path in paths]
        logger.info(f"Loaded {len(flows)} flow configurations from {directory}")
        super().__init__(flows)
