"""
Database-backed document storage for Yahoo Fantasy data

Uses SQLAlchemy so tokens and league settings can live in SQLite or PostgreSQL
instead of JSON files. Each named document is one row.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import create_engine, Column, String, Text, DateTime
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from .storage import DocumentStore

Base = declarative_base()

TOKEN_DOCUMENT = 'tokens'
SETTINGS_DOCUMENT = 'league_settings'


def _utcnow():
    return datetime.now(timezone.utc)


class StoredDocument(Base):
    """Named JSON document"""
    __tablename__ = 'documents'

    name = Column(String(100), primary_key=True)
    body = Column(Text, nullable=False)

    # Metadata
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    def to_dict(self) -> Dict:
        """Convert to dictionary"""
        return {
            'name': self.name,
            'body': json.loads(self.body),
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class YahooDatabase:
    """Database manager for stored documents"""

    def __init__(self, database_url: str):
        """Initialize database connection"""
        self.database_url = database_url
        self.engine = create_engine(self.database_url, echo=False)

        # Create tables
        Base.metadata.create_all(self.engine)

        # Create session factory
        self.SessionLocal = sessionmaker(bind=self.engine)

    def get_session(self) -> Session:
        """Get new database session"""
        return self.SessionLocal()

    def load_document(self, name: str) -> Optional[Any]:
        """Get a document body by name, or None if it was never saved"""
        session = self.get_session()
        try:
            row = session.get(StoredDocument, name)
            if row is None:
                return None
            return json.loads(row.body)
        finally:
            session.close()

    def save_document(self, name: str, document: Any) -> None:
        """Save or replace a document in a single transaction"""
        body = json.dumps(document)
        session = self.get_session()
        try:
            row = session.get(StoredDocument, name)
            if row:
                row.body = body
                row.updated_at = _utcnow()
            else:
                session.add(StoredDocument(name=name, body=body))
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def store(self, name: str) -> 'DatabaseDocumentStore':
        return DatabaseDocumentStore(self, name)


class DatabaseDocumentStore(DocumentStore):
    """DocumentStore view over one named row"""

    def __init__(self, database: YahooDatabase, name: str):
        self.database = database
        self.name = name

    def load(self) -> Optional[Any]:
        return self.database.load_document(self.name)

    def save(self, document: Any) -> None:
        self.database.save_document(self.name, document)

    def __repr__(self):
        return f"DatabaseDocumentStore({self.name!r})"
