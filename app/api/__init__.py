"""
API routes for the pro forma.
"""

from fastapi import APIRouter

from app.api import calculations, projects

router = APIRouter()

# Include sub-routers
router.include_router(projects.router, prefix="/projects", tags=["projects"])
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
