# hostel_gate/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy (PostgreSQL by default). Documents live in a single JSON
table; see services/document_store.py for the document API on top of it.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from hostel_gate.config import settings


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,   # Auto-reconnect if DB connection drops
        "pool_size": 10,
        "max_overflow": 20,
    }


engine = create_engine(settings.DATABASE_URL, echo=False, **_engine_kwargs(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def create_tables(bind=None):
    """
    Creates all DB tables on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from hostel_gate.models.document import Document   # noqa

    Base.metadata.create_all(bind=bind or engine)
