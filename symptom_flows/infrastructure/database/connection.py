"""
Log database engine.

Holds the SQLModel engine for the configured DATABASE_URL (SQLite by
default). Only the SQL log store talks to it.
"""

from sqlmodel import SQLModel, create_engine

from ...config import settings

# Statement echo stays off: records contain health data.
engine = create_engine(settings.DATABASE_URL, echo=False)


def init_db(bind=None):
    """Creates the symptom log tables on `bind` (default engine) if missing."""
    SQLModel.metadata.create_all(bind or engine)
