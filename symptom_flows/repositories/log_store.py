import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from ..infrastructure.database.connection import engine as default_engine, init_db
from ..infrastructure.database.tables import SymptomLogDBModel


class SymptomLog(BaseModel):
    log_id: str
    flow_id: str
    record: Dict[str, Any]
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class LogStore(ABC):
    """
    Receives the final record of a completed flow.
    The flow engine never persists anything itself; save actions call add_log().
    """

    @abstractmethod
    def add_log(self, flow_id: str, record: Dict[str, Any]) -> SymptomLog:
        """Stores one record and returns it with its generated id."""
        pass

    @abstractmethod
    def list_logs(self, flow_id: Optional[str] = None) -> List[SymptomLog]:
        """Returns stored logs, oldest first, optionally for one flow."""
        pass


class InMemoryLogStore(LogStore):
    """
    Keeps logs in a list for testing/dev purposes.
    """

    def __init__(self):
        self._logs: List[SymptomLog] = []

    def add_log(self, flow_id: str, record: Dict[str, Any]) -> SymptomLog:
        log = SymptomLog(
            log_id=str(uuid.uuid4()), flow_id=flow_id, record=jsonable_encoder(record)
        )
        self._logs.append(log)
        return log

    def list_logs(self, flow_id: Optional[str] = None) -> List[SymptomLog]:
        return [log for log in self._logs if flow_id is None or log.flow_id == flow_id]


class SqlLogStore(LogStore):
    """
    Stores logs in the 'symptom_logs' table (JSON column).
    """

    def __init__(self, engine: Optional[Engine] = None):
        self.engine = engine or default_engine
        init_db(self.engine)

    def add_log(self, flow_id: str, record: Dict[str, Any]) -> SymptomLog:
        # JSON columns need plain types (datetimes become ISO strings).
        db_model = SymptomLogDBModel(flow_id=flow_id, record=jsonable_encoder(record))

        with Session(self.engine) as db:
            db.add(db_model)
            db.commit()
            db.refresh(db_model)
            return self._to_domain(db_model)

    def list_logs(self, flow_id: Optional[str] = None) -> List[SymptomLog]:
        with Session(self.engine) as db:
            statement = select(SymptomLogDBModel).order_by(SymptomLogDBModel.created_at)
            if flow_id is not None:
                statement = statement.where(SymptomLogDBModel.flow_id == flow_id)
            return [self._to_domain(row) for row in db.exec(statement).all()]

    @staticmethod
    def _to_domain(row: SymptomLogDBModel) -> SymptomLog:
        return SymptomLog(
            log_id=str(row.log_id),
            flow_id=row.flow_id,
            record=row.record,
            created_at=row.created_at,
        )
