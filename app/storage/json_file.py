"""
Single-file project store.

All projects live in one JSON array of project objects, each identified
by its "id". Values that are not JSON objects are wrapped as
{"id": key, "value": value}.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Set

from app.storage.base import ProjectStore, StorageError

logger = logging.getLogger(__name__)


class JSONFileProjectStore(ProjectStore):

    def __init__(self, path):
        self.path = Path(path)

    def _read(self) -> List[Dict]:
        if not self.path.exists():
            return []
        try:
            projects = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        except (OSError, ValueError) as e:
            logger.error(f"Error reading {self.path}: {str(e)}")
            raise StorageError(f"Could not read project file {self.path}") from e
        if not isinstance(projects, list):
            raise StorageError(f"Project file {self.path} is not a JSON array")
        return [p for p in projects if isinstance(p, dict)]

    def _write(self, projects: List[Dict]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=self.path.name, suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(projects, f)
                os.replace(tmp_path, self.path)
            except BaseException:
                os.unlink(tmp_path)
                raise
        except OSError as e:
            logger.error(f"Error writing {self.path}: {str(e)}")
            raise StorageError(f"Could not write project file {self.path}") from e

    async def list(self, prefix: str = "") -> Set[str]:
        return {
            str(p["id"])
            for p in self._read()
            if "id" in p and str(p["id"]).startswith(prefix)
        }

    async def get(self, key: str) -> Optional[str]:
        for project in self._read():
            if project.get("id") == key:
                return json.dumps(project)
        return None

    async def set(self, key: str, value: str) -> None:
        try:
            project = json.loads(value)
        except ValueError:
            project = None
        if not isinstance(project, dict):
            project = {"id": key, "value": value}
        # The array is keyed by id, so the stored object must carry the key
        project = {**project, "id": key}

        projects = self._read()
        for i, existing in enumerate(projects):
            if existing.get("id") == key:
                projects[i] = project
                break
        else:
            projects.append(project)
        self._write(projects)

    async def remove(self, key: str) -> None:
        projects = self._read()
        remaining = [p for p in projects if p.get("id") != key]
        if len(remaining) != len(projects):
            self._write(remaining)
