"""
Database Table Definitions.

This module defines the SQL schema using SQLModel.
We use the 'DBModel' suffix to distinguish these persistence models
from the Pydantic domain models (FlowConfig, FlowState).
"""

from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SymptomLogDBModel(SQLModel, table=True):
    """
    Persistence model for saved symptom logs.
    One row per completed flow.
    """

    __tablename__ = "symptom_logs"

    log_id: UUID = Field(default_factory=uuid4, primary_key=True)
    flow_id: str = Field(index=True)

    # The record produced by the flow's save action, stored as JSON.
    record: Dict[str, Any] = Field(sa_column=Column(JSON, nullable=False))

    created_at: datetime = Field(default_factory=_utcnow)
