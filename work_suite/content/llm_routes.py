"""
LLM-oriented API routes.

Discovery of the content apps and their payload shapes, app-aware item
creation and markdown import. All endpoints are prefixed with /llm.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends

from ..auth import Identity, optional_user
from ..errors import NotFoundError
from .apps import get_app, list_apps, validate_content
from .item import AppItemCreate, ItemCreate, ItemFilters, MarkdownConvert, MarkdownItemCreate
from .markdown import markdown_to_content
from .routes import item_filters, item_service
from .services import ItemService

router = APIRouter(prefix="/llm", tags=["llm"])


@router.get("/apps")
async def list_content_apps() -> List[Dict[str, Any]]:
    """List the registered apps without their schemas."""
    return [spec.to_dict(include_schema=False) for spec in list_apps()]


@router.get("/apps/{app_id}")
async def get_content_app(app_id: str) -> Dict[str, Any]:
    """An app's JSON-shape descriptor and example payload."""
    spec = get_app(app_id)
    if spec is None:
        raise NotFoundError("App", app_id)
    return spec.to_dict()


@router.post("/items", status_code=201)
def create_app_item(
    data: AppItemCreate,
    service: ItemService = Depends(item_service),
    user: Optional[Identity] = Depends(optional_user),
) -> Dict[str, Any]:
    """Create an item for a registered app, checking its required fields."""
    validate_content(data.app, data.content)
    item = service.create(data, owner_id=user.id if user else None)
    return service.materialize(item)


@router.get("/items")
async def list_app_items(
    filters: ItemFilters = Depends(item_filters),
    service: ItemService = Depends(item_service),
) -> List[Dict[str, Any]]:
    """Compact listing: metadata and tags, no content."""
    return service.materialize_many(service.list(filters), include_content=False)


@router.post("/convert")
async def convert_markdown(data: MarkdownConvert) -> Dict[str, Any]:
    return {"app": data.app, "content": markdown_to_content(data.app, data.markdown)}


@router.post("/items/from-markdown", status_code=201)
def create_item_from_markdown(
    data: MarkdownItemCreate,
    service: ItemService = Depends(item_service),
    user: Optional[Identity] = Depends(optional_user),
) -> Dict[str, Any]:
    """Convert markdown for ``app`` and store the result as a new item."""
    content = markdown_to_content(data.app, data.markdown)
    create = ItemCreate(
        name=data.name,
        type=data.app,
        app=data.app,
        scope=data.scope,
        folder=data.folder,
        status=data.status,
        content=content,
        workspace_id=data.workspace_id,
        tags=data.tags,
    )
    item = service.create(create, owner_id=user.id if user else None)
    return service.materialize(item)
