from fastapi import APIRouter, Depends, HTTPException, Request

from ai_cofounder.api_models import ProjectCreateRequest, ProjectListResponse, ProjectResponse
from ai_cofounder.auth import verify_token
from ai_cofounder.dependencies import get_database
from ai_cofounder.exceptions import StorageError
from ai_cofounder.services.database import CofounderDatabase

router = APIRouter(
    prefix="/projects",
    tags=["Project Management"],
    dependencies=[Depends(verify_token)] # Secure all project endpoints
)


def _to_response(row: dict) -> ProjectResponse:
    return ProjectResponse(
        id=row["id"],
        name=row["name"],
        description=row.get("description"),
        status=row.get("status") or "active",
        created_at=str(row.get("created_at")),
    )


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(
    project_data: ProjectCreateRequest,
    request: Request,
    database: CofounderDatabase = Depends(get_database),
):
    """Creates a new startup project for the authenticated user."""
    user_id = str(request.state.user.id)
    try:
        row = database.create_project(user_id, project_data.name, project_data.description)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Database error during project creation: {e.detail}")
    return _to_response(row)


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    request: Request,
    database: CofounderDatabase = Depends(get_database),
):
    """Lists all projects belonging to the authenticated user, newest first."""
    user_id = str(request.state.user.id)
    try:
        rows = database.list_projects(user_id)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Database error listing projects: {e.detail}")
    return ProjectListResponse(projects=[_to_response(row) for row in rows])
