"""
Project persistence service.

Saves, loads, lists, deletes, exports and imports projects through an
injected ProjectStore. Projects are stored as camelCase JSON.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Callable, List, Optional, Union

from pydantic import ValidationError

from app.schemas.project import CURRENT_SCHEMA_VERSION, Project
from app.storage.base import ProjectStore

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "project:"

# A stored or imported record must carry these; defaults are for new projects
REQUIRED_FIELDS = ("inputs", "renovation_items", "financing_sources")


class ProjectNotFoundError(LookupError):
    """Raised when no project is stored under the requested id."""


class ProjectFormatError(ValueError):
    """Raised when a stored or imported project cannot be parsed."""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def slugify(name: str) -> str:
    """Lowercase a name and join its words with dashes."""
    return re.sub(r"\s+", "-", name.strip()).lower()


def parse_project(content: Union[str, bytes]) -> Project:
    """
    Parse a serialized project.

    Unlike the Project model itself, a serialized project must spell out
    its inputs, renovation items and financing sources.

    Raises:
        ProjectFormatError: If the content is not a valid project, or was
            written by a newer schema version
    """
    try:
        project = Project.model_validate_json(content)
    except ValidationError as e:
        raise ProjectFormatError(
            f"Invalid project data: {e.error_count()} error(s)"
        ) from e

    missing = [
        name for name in REQUIRED_FIELDS if name not in project.model_fields_set
    ]
    if missing:
        raise ProjectFormatError(
            f"Invalid project data: missing {', '.join(missing)}"
        )

    if project.schema_version > CURRENT_SCHEMA_VERSION:
        raise ProjectFormatError(
            f"Unsupported project schema version {project.schema_version} "
            f"(this app reads up to {CURRENT_SCHEMA_VERSION})"
        )
    return project


def serialize_project(project: Project) -> str:
    return project.model_dump_json(by_alias=True)


def export_filename(project: Project) -> str:
    """Download file name, e.g. "Terrace-Way.json"."""
    name = re.sub(r"\s+", "-", project.project_name or "") or "project"
    return f"{name}.json"


class ProjectService:
    """Project lifecycle on top of a key-value store."""

    def __init__(
        self,
        store: ProjectStore,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.key_prefix = key_prefix
        self.clock = clock or utcnow

    def _timestamp_ms(self, now: datetime) -> int:
        return int(now.timestamp() * 1000)

    def generate_id(self, name: str, now: Optional[datetime] = None) -> str:
        """Key of the form project:<slug>:<epoch-ms>."""
        slug = slugify(name) or "untitled"
        now = now or self.clock()
        return f"{self.key_prefix}{slug}:{self._timestamp_ms(now)}"

    async def list_projects(self) -> List[Project]:
        """
        All readable projects, most recently saved first.

        Records that fail to parse are logged and skipped so one bad blob
        does not hide the rest.
        """
        projects = []
        for key in sorted(await self.store.list(self.key_prefix)):
            value = await self.store.get(key)
            if value is None:
                continue
            try:
                project = parse_project(value)
            except ProjectFormatError as e:
                logger.warning(f"Skipping unreadable project {key}: {str(e)}")
                continue
            if project.id != key:
                project = project.model_copy(update={"id": key})
            projects.append(project)

        def saved_at_key(project: Project) -> float:
            if project.saved_at is None:
                return float("-inf")
            return project.saved_at.timestamp()

        return sorted(projects, key=saved_at_key, reverse=True)

    async def save(self, project: Project) -> Project:
        """
        Store a project, keeping its id or assigning a new one.

        Raises:
            ProjectFormatError: If the project carries an id outside the
                key prefix, which list_projects would never return
        """
        if project.id and not project.id.startswith(self.key_prefix):
            raise ProjectFormatError(
                f"Project id {project.id!r} must start with {self.key_prefix!r}"
            )

        now = self.clock()
        project_id = project.id or self.generate_id(project.project_name, now)
        saved = project.model_copy(
            update={
                "id": project_id,
                "saved_at": now,
                "schema_version": CURRENT_SCHEMA_VERSION,
            }
        )
        await self.store.set(project_id, serialize_project(saved))
        logger.info(f"Saved project {project_id}")
        return saved

    async def save_as(self, project: Project, name: str) -> Project:
        """Store a renamed copy under a new id."""
        renamed = project.model_copy(
            update={"project_name": name, "id": self.generate_id(name)}
        )
        return await self.save(renamed)

    async def load(self, project_id: str) -> Project:
        value = await self.store.get(project_id)
        if value is None:
            raise ProjectNotFoundError(f"Project {project_id} not found")

        project = parse_project(value)
        if project.id != project_id:
            project = project.model_copy(update={"id": project_id})
        return project

    async def delete(self, project_id: str) -> None:
        if await self.store.get(project_id) is None:
            raise ProjectNotFoundError(f"Project {project_id} not found")
        await self.store.remove(project_id)
        logger.info(f"Deleted project {project_id}")

    def export_project(self, project: Project) -> str:
        """Pretty-printed JSON for download, without the storage id."""
        exported = project.model_copy(update={"exported_at": self.clock()})
        return exported.model_dump_json(
            by_alias=True,
            indent=2,
            exclude={"id", "saved_at", "imported_at"},
        )

    async def import_project(self, content: Union[str, bytes]) -> Project:
        """Parse an exported project and save it under a fresh id."""
        project = parse_project(content)
        now = self.clock()
        imported = project.model_copy(
            update={
                "id": f"{self.key_prefix}imported:{self._timestamp_ms(now)}",
                "imported_at": now,
            }
        )
        saved = await self.save(imported)
        logger.info(f"Imported project {saved.id} ({saved.project_name})")
        return saved
