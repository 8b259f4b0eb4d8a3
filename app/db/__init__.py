"""
Database configuration and models.
"""

from app.db.database import engine, SessionLocal, init_db, session_scope
from app.db.models import Base, ProjectRecord

__all__ = ["engine", "SessionLocal", "init_db", "session_scope", "Base", "ProjectRecord"]
