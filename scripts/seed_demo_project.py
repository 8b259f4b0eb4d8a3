#!/usr/bin/env python3
"""
Seed the configured project store with the Terrace Way demo project.

Usage:
    python scripts/seed_demo_project.py
"""
import asyncio
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import get_settings
from app.schemas.project import Project
from app.services.projects import ProjectService
from app.storage import get_project_store


async def main():
    settings = get_settings()
    service = ProjectService(get_project_store(), key_prefix=settings.project_key_prefix)

    # Check if the demo already exists
    existing = [
        p for p in await service.list_projects() if p.project_name == "Terrace Way"
    ]
    if existing:
        print(f"Project 'Terrace Way' already exists (ID: {existing[0].id})")
        return

    project = await service.save(Project(project_name="Terrace Way"))
    print(f"Created project: {project.project_name} (ID: {project.id})")
    print(f"Stored with the {settings.storage_backend} backend")


if __name__ == "__main__":
    asyncio.run(main())
