"""
SQLAlchemy-backed project store.

Keys map to rows of project_records. Removal is a soft delete; setting a
removed key revives the row.
"""

import json
import logging
from typing import Optional, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.db.database import session_scope
from app.db.models import ProjectRecord
from app.storage.base import ProjectStore, StorageError

logger = logging.getLogger(__name__)


def _extract_name(value: str) -> str:
    """Project name for the listing column, if the value is a project."""
    try:
        payload = json.loads(value)
    except ValueError:
        return "Untitled"
    if not isinstance(payload, dict):
        return "Untitled"
    return payload.get("projectName") or payload.get("name") or "Untitled"


class SQLProjectStore(ProjectStore):

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    async def list(self, prefix: str = "") -> Set[str]:
        try:
            with session_scope(self._session_factory) as db:
                query = db.query(ProjectRecord.key).filter(
                    ProjectRecord.is_deleted == False
                )
                if prefix:
                    query = query.filter(
                        ProjectRecord.key.startswith(prefix, autoescape=True)
                    )
                return {row.key for row in query.all()}
        except SQLAlchemyError as e:
            logger.error(f"Error listing projects: {str(e)}")
            raise StorageError("Could not list stored projects") from e

    async def get(self, key: str) -> Optional[str]:
        try:
            with session_scope(self._session_factory) as db:
                record = (
                    db.query(ProjectRecord)
                    .filter(ProjectRecord.key == key, ProjectRecord.is_deleted == False)
                    .first()
                )
                return record.data if record else None
        except SQLAlchemyError as e:
            logger.error(f"Error reading project {key}: {str(e)}")
            raise StorageError(f"Could not read project {key}") from e

    async def set(self, key: str, value: str) -> None:
        try:
            with session_scope(self._session_factory) as db:
                record = db.get(ProjectRecord, key)
                if record is None:
                    record = ProjectRecord(key=key)
                    db.add(record)
                record.data = value
                record.name = _extract_name(value)
                record.is_deleted = False
        except SQLAlchemyError as e:
            logger.error(f"Error writing project {key}: {str(e)}")
            raise StorageError(f"Could not write project {key}") from e

    async def remove(self, key: str) -> None:
        try:
            with session_scope(self._session_factory) as db:
                record = db.get(ProjectRecord, key)
                if record is not None:
                    record.is_deleted = True
        except SQLAlchemyError as e:
            logger.error(f"Error removing project {key}: {str(e)}")
            raise StorageError(f"Could not remove project {key}") from e
