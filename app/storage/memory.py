"""
In-process project store. Contents are lost on restart.
"""

from typing import Dict, Optional, Set

from app.storage.base import ProjectStore


class MemoryProjectStore(ProjectStore):

    def __init__(self):
        self._data: Dict[str, str] = {}

    async def list(self, prefix: str = "") -> Set[str]:
        return {key for key in self._data if key.startswith(prefix)}

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)
