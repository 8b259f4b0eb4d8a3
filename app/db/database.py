"""
Database connection and session management.
"""

from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import NullPool

from app.config import get_settings
from app.db.models import Base

settings = get_settings()

# Use NullPool for serverless/Supabase compatibility
# For SQLite, use default pool
if settings.database_url.startswith("postgresql"):
    engine = create_engine(settings.database_url, poolclass=NullPool)
else:
    engine = create_engine(
        settings.database_url,
        connect_args={"check_same_thread": False},  # Needed for SQLite
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None):
    """Initialize database tables."""
    Base.metadata.create_all(bind=bind or engine)


@contextmanager
def session_scope(
    session_factory: Optional[sessionmaker] = None,
) -> Generator[Session, None, None]:
    """Transactional session: commit on success, roll back on error."""
    db = (session_factory or SessionLocal)()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
