from fastapi import APIRouter, Depends, HTTPException, Request

from ai_cofounder.api_models import CanvasObjectListResponse, CanvasObjectMoveRequest, CanvasObjectResponse
from ai_cofounder.auth import verify_token
from ai_cofounder.dependencies import get_database
from ai_cofounder.exceptions import StorageError
from ai_cofounder.services.database import CofounderDatabase

router = APIRouter(
    prefix="/canvas",
    tags=["Canvas"],
    dependencies=[Depends(verify_token)] # Secure all canvas endpoints
)

@router.get("/objects", response_model=CanvasObjectListResponse)
async def list_canvas_objects(
    request: Request,
    database: CofounderDatabase = Depends(get_database),
):
    """Lists the caller's canvas objects in creation order."""
    owner_id = str(request.state.user.id)
    try:
        records = database.list_by_owner(owner_id)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Database error listing canvas objects: {e.detail}")
    return CanvasObjectListResponse(objects=[CanvasObjectResponse.from_record(r) for r in records])

@router.patch("/objects/{object_id}", response_model=CanvasObjectResponse)
async def move_canvas_object(
    object_id: int,
    move: CanvasObjectMoveRequest,
    request: Request,
    database: CofounderDatabase = Depends(get_database),
):
    """Repositions a canvas object after the user dragged it on the board."""
    owner_id = str(request.state.user.id)
    try:
        record = database.update_position(object_id, owner_id, move.x, move.y)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Database error moving canvas object: {e.detail}")
    if record is None:
        raise HTTPException(status_code=404, detail="Canvas object not found")
    return CanvasObjectResponse.from_record(record)

@router.delete("/objects/{object_id}", status_code=204)
async def delete_canvas_object(
    object_id: int,
    request: Request,
    database: CofounderDatabase = Depends(get_database),
):
    """Deletes one of the caller's canvas objects."""
    owner_id = str(request.state.user.id)
    try:
        deleted = database.delete(object_id, owner_id)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Database error deleting canvas object: {e.detail}")
    if not deleted:
        raise HTTPException(status_code=404, detail="Canvas object not found")
