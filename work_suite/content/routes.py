"""
Item, tag, upload and batch API routes.

Identity is optional on every route here: an authenticated caller becomes the
``owner_id`` of what they create, an anonymous caller creates unowned items.

Handlers that can reach the workspace service are plain ``def``: the client
is synchronous, so they run in the threadpool instead of on the event loop.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from ..auth import Identity, optional_user
from ..db.base import get_db
from ..errors import NotFoundError
from ..storage import normalize_folder
from .batch import (
    BatchCreateRequest,
    BatchMoveRequest,
    BatchTagRequest,
    BatchUpdateRequest,
)
from .enums import ItemStatus, Scope
from .item import ItemCreate, ItemFilters, ItemMove, ItemUpdate
from .services import BatchService, ItemService, TagService

router = APIRouter(tags=["items"])


def item_service(request: Request, db: Session = Depends(get_db)) -> ItemService:
    """Build an ItemService wired to the app's file store and workspace client."""
    return ItemService(db, request.app.state.workspace, request.app.state.files)


def item_filters(
    scope: Optional[Scope] = None,
    folder: Optional[str] = None,
    status: Optional[ItemStatus] = None,
    app: Optional[str] = None,
    workspace_id: Optional[str] = None,
    owner_id: Optional[str] = None,
    tag: Optional[str] = Query(None, description="Tag id or name"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
) -> ItemFilters:
    return ItemFilters(
        scope=scope,
        folder=folder,
        status=status,
        app=app,
        workspace_id=workspace_id,
        owner_id=owner_id,
        tag=tag,
        limit=limit,
        offset=offset,
    )


# =============================================================================
# Item Endpoints
# =============================================================================


@router.get("/items")
async def list_items(
    filters: ItemFilters = Depends(item_filters),
    service: ItemService = Depends(item_service),
) -> List[Dict[str, Any]]:
    """List items, most recently updated first."""
    return service.materialize_many(service.list(filters))


@router.get("/items/search")
async def search_items(
    q: str = Query(..., min_length=1),
    filters: ItemFilters = Depends(item_filters),
    service: ItemService = Depends(item_service),
) -> List[Dict[str, Any]]:
    """Case-insensitive substring search over name and content."""
    return service.materialize_many(service.search(q, filters))


@router.get("/items/{item_id}")
async def get_item(
    item_id: str,
    service: ItemService = Depends(item_service),
) -> Dict[str, Any]:
    return service.materialize(service.get(item_id))


@router.post("/items", status_code=201)
def create_item(
    data: ItemCreate,
    service: ItemService = Depends(item_service),
    user: Optional[Identity] = Depends(optional_user),
) -> Dict[str, Any]:
    """Create an item. ``owner_id`` comes from the caller's token, if any."""
    item = service.create(data, owner_id=user.id if user else None)
    return service.materialize(item)


@router.put("/items/{item_id}")
def update_item(
    item_id: str,
    data: ItemUpdate,
    service: ItemService = Depends(item_service),
) -> Dict[str, Any]:
    """Partially update an item. ``tags`` replaces the whole tag set."""
    return service.materialize(service.update(item_id, data))


@router.patch("/items/{item_id}/move")
def move_item(
    item_id: str,
    data: ItemMove,
    service: ItemService = Depends(item_service),
) -> Dict[str, Any]:
    return service.materialize(service.move(item_id, data))


@router.delete("/items/{item_id}")
def delete_item(
    item_id: str,
    service: ItemService = Depends(item_service),
) -> Dict[str, bool]:
    """Delete an item. Unknown ids succeed as well."""
    service.delete(item_id)
    return {"success": True}


@router.post("/items/{item_id}/sync")
def sync_item(
    item_id: str,
    service: ItemService = Depends(item_service),
) -> Dict[str, Any]:
    """Register the item with its workspace, or push its current state."""
    item, result = service.sync(item_id)
    return {
        "item": service.materialize(item),
        "linked": result.ok,
        "error": result.error,
    }


@router.get("/items/{item_id}/file")
async def download_item_file(
    item_id: str,
    request: Request,
    service: ItemService = Depends(item_service),
) -> FileResponse:
    item = service.get(item_id)
    if not item.file_path:
        raise NotFoundError("File for item", item_id)
    files = request.app.state.files
    path = files.resolve(item.file_path)
    if not path.is_file():
        raise NotFoundError("File for item", item_id)
    return FileResponse(path, filename=files.original_filename(item.file_path))


# =============================================================================
# Upload Endpoint
# =============================================================================


@router.post("/upload", status_code=201)
def upload_file(
    request: Request,
    file: UploadFile = File(...),
    scope: Scope = Form(Scope.ME),
    folder: Optional[str] = Form(None),
    name: Optional[str] = Form(None),
    app: Optional[str] = Form(None),
    service: ItemService = Depends(item_service),
    user: Optional[Identity] = Depends(optional_user),
) -> Dict[str, Any]:
    """Store an uploaded file and create a ``file`` item for it."""
    settings = request.app.state.settings
    files = request.app.state.files

    filename = file.filename or "upload"
    relative_path = files.save(
        scope.value,
        folder,
        filename,
        file.file,
        max_bytes=settings.max_upload_bytes,
    )
    try:
        item = service.create_upload(
            name=name or filename,
            file_path=relative_path,
            scope=scope.value,
            folder=normalize_folder(folder),
            app=app,
            owner_id=user.id if user else None,
        )
    except Exception:
        files.remove(relative_path)
        raise
    return service.materialize(item)


# =============================================================================
# Tag Endpoints
# =============================================================================


@router.get("/tags", tags=["tags"])
async def list_tags(db: Session = Depends(get_db)) -> List[Dict[str, Any]]:
    """All tags ordered by name."""
    return [t.to_dict() for t in TagService(db).list_all()]


@router.get("/tags/usage", tags=["tags"])
async def list_tag_usage(db: Session = Depends(get_db)) -> List[Dict[str, Any]]:
    """All tags with item counts, most used first."""
    return TagService(db).list_with_usage()


# =============================================================================
# Batch Endpoints
# =============================================================================


@router.post("/batch/create", tags=["batch"])
def batch_create(
    data: BatchCreateRequest,
    service: ItemService = Depends(item_service),
    user: Optional[Identity] = Depends(optional_user),
) -> Dict[str, Any]:
    result = BatchService(service).create(data.items, owner_id=user.id if user else None)
    return result.to_dict()


@router.post("/batch/update", tags=["batch"])
def batch_update(
    data: BatchUpdateRequest,
    service: ItemService = Depends(item_service),
) -> Dict[str, Any]:
    return BatchService(service).update(data.updates).to_dict()


@router.post("/batch/move", tags=["batch"])
def batch_move(
    data: BatchMoveRequest,
    service: ItemService = Depends(item_service),
) -> Dict[str, Any]:
    return BatchService(service).move(data).to_dict()


@router.post("/batch/tag", tags=["batch"])
def batch_tag(
    data: BatchTagRequest,
    service: ItemService = Depends(item_service),
) -> Dict[str, Any]:
    return BatchService(service).tag(data).to_dict()
