"""
SQLAlchemy ORM models for stored projects.
"""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class AuditMixin:
    """Mixin for audit fields on all models."""

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )
    is_deleted = Column(Boolean, default=False, nullable=False)


class ProjectRecord(AuditMixin, Base):
    """A serialized project blob stored under its key."""

    __tablename__ = "project_records"

    key = Column(String(255), primary_key=True)
    name = Column(String(255), nullable=True)  # Denormalized for listing

    # Serialized project JSON, opaque to the database
    data = Column(Text, nullable=False)
