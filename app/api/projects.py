"""
Project management API endpoints.

Save/load/list/delete, export/import, and copy-on-write edits of a stored
project. Every edit returns the updated project with a fresh pro forma.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from fastapi import APIRouter, Depends, Request, Response
from pydantic import FieldSerializationInfo, field_serializer

from app.api.calculations import ApiModel, ProFormaResponse, proforma_to_response
from app.calculations.formatting import finite_or_none_deep
from app.calculations.proforma import compute_proforma
from app.config import Settings, get_settings
from app.schemas.project import (
    FinancingSourceUpdate,
    MaterialUpdate,
    Project,
    PropertyInputsUpdate,
    RenovationItemUpdate,
)
from app.services import editing
from app.services.projects import ProjectService, export_filename
from app.storage import ProjectStore, get_project_store

router = APIRouter()


def get_project_service(
    store: ProjectStore = Depends(get_project_store),
    settings: Settings = Depends(get_settings),
) -> ProjectService:
    return ProjectService(store, key_prefix=settings.project_key_prefix)


class ProjectResponse(ApiModel):
    """A project together with its calculated pro forma."""

    project: Project
    proforma: ProFormaResponse

    @field_serializer("project", when_used="json")
    def serialize_project(
        self, project: Project, info: FieldSerializationInfo
    ) -> Dict[str, Any]:
        # Stored inputs may be Infinity/NaN; responses must stay strict JSON
        return finite_or_none_deep(project.model_dump(by_alias=bool(info.by_alias)))


class ProjectSummary(ApiModel):
    id: str
    project_name: str
    saved_at: Optional[datetime]
    net_profit: Optional[float]
    roi: Optional[float]


class ProjectListResponse(ApiModel):
    projects: List[ProjectSummary]
    total: int


class SaveAsRequest(ApiModel):
    name: str


class NewFinancingSource(ApiModel):
    name: str = "New Financing"


class NewRenovationItem(ApiModel):
    category: str = "New Item"


class NewMaterial(ApiModel):
    name: str = "New Material"
    cost: float = 0


def project_to_response(project: Project) -> ProjectResponse:
    result = compute_proforma(
        project.inputs, project.renovation_items, project.financing_sources
    )
    return ProjectResponse(project=project, proforma=proforma_to_response(result))


async def apply_edit(
    service: ProjectService,
    project_id: str,
    edit: Callable[[Project], Project],
) -> ProjectResponse:
    """Load, edit and save a project in one step."""
    project = await service.load(project_id)
    saved = await service.save(edit(project))
    return project_to_response(saved)


@router.get("/", response_model=ProjectListResponse)
async def list_projects(service: ProjectService = Depends(get_project_service)):
    """List saved projects, most recently saved first."""
    projects = await service.list_projects()
    summaries = []
    for project in projects:
        proforma = project_to_response(project).proforma
        summaries.append(
            ProjectSummary(
                id=project.id,
                project_name=project.project_name,
                saved_at=project.saved_at,
                net_profit=proforma.net_profit,
                roi=proforma.roi,
            )
        )
    return ProjectListResponse(projects=summaries, total=len(summaries))


@router.get("/defaults", response_model=ProjectResponse)
async def new_project():
    """An unsaved project populated with default assumptions."""
    return project_to_response(Project())


@router.post("/", response_model=ProjectResponse, status_code=201)
async def create_project(
    project: Project,
    service: ProjectService = Depends(get_project_service),
):
    """Save a project, assigning an id if it has none."""
    saved = await service.save(project)
    return project_to_response(saved)


@router.post("/import", response_model=ProjectResponse, status_code=201)
async def import_project(
    request: Request,
    service: ProjectService = Depends(get_project_service),
):
    """Import an exported project file (raw JSON body) and save it."""
    content = await request.body()
    saved = await service.import_project(content)
    return project_to_response(saved)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
):
    project = await service.load(project_id)
    return project_to_response(project)


@router.put("/{project_id}", response_model=ProjectResponse)
async def replace_project(
    project_id: str,
    project: Project,
    service: ProjectService = Depends(get_project_service),
):
    """Overwrite an existing project's contents."""
    return await apply_edit(
        service, project_id, lambda _: project.model_copy(update={"id": project_id})
    )


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
):
    await service.delete(project_id)
    return {"deleted": True, "id": project_id}


@router.post(
    "/{project_id}/save-as", response_model=ProjectResponse, status_code=201
)
async def save_project_as(
    project_id: str,
    data: SaveAsRequest,
    service: ProjectService = Depends(get_project_service),
):
    """Save a renamed copy of a project under a new id."""
    project = await service.load(project_id)
    saved = await service.save_as(project, data.name)
    return project_to_response(saved)


@router.get("/{project_id}/proforma", response_model=ProFormaResponse)
async def get_project_proforma(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
):
    project = await service.load(project_id)
    return project_to_response(project).proforma


@router.get("/{project_id}/export")
async def export_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
):
    """Download a project as a JSON file."""
    project = await service.load(project_id)
    return Response(
        content=service.export_project(project),
        media_type="application/json",
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(project)}"'
        },
    )


# ============================================================================
# EDITS
# ============================================================================


@router.patch("/{project_id}/inputs", response_model=ProjectResponse)
async def update_inputs(
    project_id: str,
    update: PropertyInputsUpdate,
    service: ProjectService = Depends(get_project_service),
):
    """Update only the provided property inputs."""
    return await apply_edit(
        service,
        project_id,
        lambda p: p.model_copy(
            update={"inputs": editing.apply_inputs_update(p.inputs, update)}
        ),
    )


def _with_sources(project: Project, sources) -> Project:
    return project.model_copy(update={"financing_sources": sources})


def _with_items(project: Project, items) -> Project:
    return project.model_copy(update={"renovation_items": items})


@router.post(
    "/{project_id}/financing-sources", response_model=ProjectResponse, status_code=201
)
async def add_financing_source(
    project_id: str,
    data: NewFinancingSource = NewFinancingSource(),
    service: ProjectService = Depends(get_project_service),
):
    return await apply_edit(
        service,
        project_id,
        lambda p: _with_sources(
            p, editing.add_financing_source(p.financing_sources, data.name)
        ),
    )


@router.patch(
    "/{project_id}/financing-sources/{source_id}", response_model=ProjectResponse
)
async def update_financing_source(
    project_id: str,
    source_id: int,
    update: FinancingSourceUpdate,
    service: ProjectService = Depends(get_project_service),
):
    return await apply_edit(
        service,
        project_id,
        lambda p: _with_sources(
            p, editing.update_financing_source(p.financing_sources, source_id, update)
        ),
    )


@router.delete(
    "/{project_id}/financing-sources/{source_id}", response_model=ProjectResponse
)
async def remove_financing_source(
    project_id: str,
    source_id: int,
    service: ProjectService = Depends(get_project_service),
):
    return await apply_edit(
        service,
        project_id,
        lambda p: _with_sources(
            p, editing.remove_financing_source(p.financing_sources, source_id)
        ),
    )


@router.post(
    "/{project_id}/renovation-items", response_model=ProjectResponse, status_code=201
)
async def add_renovation_item(
    project_id: str,
    data: NewRenovationItem = NewRenovationItem(),
    service: ProjectService = Depends(get_project_service),
):
    return await apply_edit(
        service,
        project_id,
        lambda p: _with_items(
            p, editing.add_renovation_item(p.renovation_items, data.category)
        ),
    )


@router.patch(
    "/{project_id}/renovation-items/{item_id}", response_model=ProjectResponse
)
async def update_renovation_item(
    project_id: str,
    item_id: int,
    update: RenovationItemUpdate,
    service: ProjectService = Depends(get_project_service),
):
    return await apply_edit(
        service,
        project_id,
        lambda p: _with_items(
            p, editing.update_renovation_item(p.renovation_items, item_id, update)
        ),
    )


@router.delete(
    "/{project_id}/renovation-items/{item_id}", response_model=ProjectResponse
)
async def remove_renovation_item(
    project_id: str,
    item_id: int,
    service: ProjectService = Depends(get_project_service),
):
    return await apply_edit(
        service,
        project_id,
        lambda p: _with_items(
            p, editing.remove_renovation_item(p.renovation_items, item_id)
        ),
    )


@router.post(
    "/{project_id}/renovation-items/{item_id}/materials",
    response_model=ProjectResponse,
    status_code=201,
)
async def add_material(
    project_id: str,
    item_id: int,
    data: NewMaterial = NewMaterial(),
    service: ProjectService = Depends(get_project_service),
):
    return await apply_edit(
        service,
        project_id,
        lambda p: _with_items(
            p,
            editing.add_material(p.renovation_items, item_id, data.name, data.cost),
        ),
    )


@router.patch(
    "/{project_id}/renovation-items/{item_id}/materials/{index}",
    response_model=ProjectResponse,
)
async def update_material(
    project_id: str,
    item_id: int,
    index: int,
    update: MaterialUpdate,
    service: ProjectService = Depends(get_project_service),
):
    return await apply_edit(
        service,
        project_id,
        lambda p: _with_items(
            p, editing.update_material(p.renovation_items, item_id, index, update)
        ),
    )


@router.delete(
    "/{project_id}/renovation-items/{item_id}/materials/{index}",
    response_model=ProjectResponse,
)
async def remove_material(
    project_id: str,
    item_id: int,
    index: int,
    service: ProjectService = Depends(get_project_service),
):
    """Remove a material; an item's last material is kept."""
    return await apply_edit(
        service,
        project_id,
        lambda p: _with_items(
            p, editing.remove_material(p.renovation_items, item_id, index)
        ),
    )
