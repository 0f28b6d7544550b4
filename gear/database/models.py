"""SQLAlchemy ORM models for Gear."""

from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class StoredDefault(Base):
    """One key in the app's key-value defaults (JSON-encoded value)."""

    __tablename__ = "stored_defaults"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime, nullable=False, default=datetime.now, onupdate=datetime.now,
    )

    def __repr__(self) -> str:
        return f"<StoredDefault key={self.key} value={self.value}>"
