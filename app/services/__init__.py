"""
Application services module.
"""

from app.services.editing import ItemNotFoundError
from app.services.projects import (
    ProjectFormatError,
    ProjectNotFoundError,
    ProjectService,
)

__all__ = [
    "ItemNotFoundError",
    "ProjectFormatError",
    "ProjectNotFoundError",
    "ProjectService",
]
