"""
Work Suite MCP Server: exposes the content store to LLM clients.

Usage:
    python -m work_suite.mcp          # stdio transport
    work-suite-mcp                    # via pyproject.toml entry point

Client configuration:
    {
      "mcpServers": {
        "worksuite": {
          "command": "work-suite-mcp",
          "env": {"WORKSUITE_DATA_PATH": "/srv/worksuite/data"}
        }
      }
    }
"""
import json
import sys
from typing import Any, Dict, List, Optional

import structlog
from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from .config import get_settings
from .content.apps import get_app, list_apps, validate_content
from .content.item import AppItemCreate, ItemFilters, ItemUpdate
from .content.markdown import markdown_to_content
from .content.services import ItemService, describe_validation_error
from .db.base import Database
from .errors import SuiteError
from .logging_config import configure_logging
from .storage import FileStore
from .workspace.client import WorkspaceClient

logger = structlog.get_logger()

server = FastMCP(
    name="worksuite",
    instructions=(
        "Work Suite content store. Discover the content apps and their "
        "payload shapes with suite_list_apps and suite_get_app, then list, "
        "search, create, update and delete items. Markdown can be turned "
        "into slide decks and timelines with suite_markdown_to_content."
    ),
)


# ---------------------------------------------------------------------------
# Lazy-initialized singletons
# ---------------------------------------------------------------------------

_database: Optional[Database] = None
_workspace: Optional[WorkspaceClient] = None
_files: Optional[FileStore] = None


def _get_db():
    """Get a new DB session. Caller must close it."""
    global _database
    if _database is None:
        settings = get_settings()
        settings.data_path.mkdir(parents=True, exist_ok=True)
        _database = Database(settings.resolved_database_url)
        _database.init()
    return _database.session()


def _item_service(db) -> ItemService:
    global _workspace, _files
    settings = get_settings()
    if _workspace is None:
        _workspace = WorkspaceClient(
            settings.workspace_service_url,
            api_key=settings.workspace_service_api_key,
            timeout=settings.workspace_timeout_seconds,
        )
    if _files is None:
        _files = FileStore(settings.files_path)
    return ItemService(db, _workspace, _files)


def _success(**kwargs: Any) -> str:
    """Format a success response."""
    return json.dumps({"success": True, **kwargs}, default=str)


def _error(code: str, message: str, suggestion: str = "") -> str:
    """Format an error response."""
    err: Dict[str, str] = {"code": code, "message": message}
    if suggestion:
        err["suggestion"] = suggestion
    return json.dumps({"success": False, "error": err})


def _failure(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return _error("VALIDATION_FAILED", describe_validation_error(exc))
    suggestion = ""
    if exc.code == "NOT_FOUND":
        suggestion = "Use suite_list_items or suite_search_items to find valid item ids."
    return _error(exc.code, exc.message, suggestion)


# ---------------------------------------------------------------------------
# App registry
# ---------------------------------------------------------------------------


@server.tool(
    name="suite_list_apps",
    description=(
        "List the Work Suite content apps (notes, kanban, timeline, markdown, "
        "slides, metric, themes) and which of them accept markdown import."
    ),
)
def suite_list_apps() -> str:
    return _success(apps=[spec.to_dict(include_schema=False) for spec in list_apps()])


@server.tool(
    name="suite_get_app",
    description=(
        "Get the JSON shape and an example payload for one app. Call this "
        "before creating an item so the content matches what the editor expects."
    ),
)
def suite_get_app(app: str) -> str:
    spec = get_app(app)
    if spec is None:
        return _error(
            "NOT_FOUND",
            f"App '{app}' not found",
            "Use suite_list_apps to see the registered apps.",
        )
    return _success(app=spec.to_dict())


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


@server.tool(
    name="suite_list_items",
    description=(
        "List items, most recently updated first. Content is omitted; use "
        "suite_get_item to read one item's content."
    ),
)
def suite_list_items(
    app: Optional[str] = None,
    scope: Optional[str] = None,
    folder: Optional[str] = None,
    status: Optional[str] = None,
    tag: Optional[str] = None,
    limit: int = 20,
    offset: int = 0,
) -> str:
    db = _get_db()
    try:
        filters = ItemFilters(
            app=app, scope=scope, folder=folder, status=status, tag=tag,
            limit=limit, offset=offset,
        )
        svc = _item_service(db)
        items = svc.materialize_many(svc.list(filters), include_content=False)
        return _success(items=items, count=len(items))
    except (ValidationError, SuiteError) as exc:
        return _failure(exc)
    finally:
        db.close()


@server.tool(
    name="suite_search_items",
    description="Case-insensitive search over item names and content.",
)
def suite_search_items(
    q: str,
    app: Optional[str] = None,
    scope: Optional[str] = None,
    limit: int = 20,
) -> str:
    db = _get_db()
    try:
        filters = ItemFilters(app=app, scope=scope, limit=limit)
        svc = _item_service(db)
        items = svc.materialize_many(svc.search(q, filters), include_content=False)
        return _success(items=items, count=len(items))
    except (ValidationError, SuiteError) as exc:
        return _failure(exc)
    finally:
        db.close()


@server.tool(
    name="suite_get_item",
    description="Get one item with its tags and full content.",
)
def suite_get_item(item_id: str) -> str:
    db = _get_db()
    try:
        svc = _item_service(db)
        return _success(item=svc.materialize(svc.get(item_id)))
    except SuiteError as exc:
        return _failure(exc)
    finally:
        db.close()


@server.tool(
    name="suite_create_item",
    description=(
        "Create an item for a registered app. 'content' must follow the app's "
        "shape from suite_get_app; its required top-level keys are checked."
    ),
)
def suite_create_item(
    name: str,
    app: str,
    content: Dict[str, Any],
    scope: str = "me",
    folder: Optional[str] = None,
    status: str = "backlog",
    tags: Optional[List[str]] = None,
    workspace_id: Optional[str] = None,
) -> str:
    db = _get_db()
    try:
        data = AppItemCreate(
            name=name,
            type=app,
            app=app,
            content=content,
            scope=scope,
            folder=folder,
            status=status,
            tags=tags or [],
            workspace_id=workspace_id,
        )
        validate_content(data.app, data.content)
        svc = _item_service(db)
        item = svc.create(data)
        return _success(item=svc.materialize(item))
    except (ValidationError, SuiteError) as exc:
        return _failure(exc)
    finally:
        db.close()


@server.tool(
    name="suite_update_item",
    description=(
        "Update an item. Only the arguments you pass change; 'tags' replaces "
        "the whole tag set."
    ),
)
def suite_update_item(
    item_id: str,
    name: Optional[str] = None,
    scope: Optional[str] = None,
    folder: Optional[str] = None,
    status: Optional[str] = None,
    content: Optional[Dict[str, Any]] = None,
    tags: Optional[List[str]] = None,
) -> str:
    fields = {
        "name": name,
        "scope": scope,
        "folder": folder,
        "status": status,
        "content": content,
        "tags": tags,
    }
    db = _get_db()
    try:
        data = ItemUpdate.model_validate({k: v for k, v in fields.items() if v is not None})
        svc = _item_service(db)
        item = svc.update(item_id, data)
        return _success(item=svc.materialize(item))
    except (ValidationError, SuiteError) as exc:
        return _failure(exc)
    finally:
        db.close()


@server.tool(
    name="suite_delete_item",
    description="Delete an item, its tag links and any uploaded file.",
)
def suite_delete_item(item_id: str) -> str:
    db = _get_db()
    try:
        deleted = _item_service(db).delete(item_id)
        return _success(item_id=item_id, deleted=deleted)
    except SuiteError as exc:
        return _failure(exc)
    finally:
        db.close()


@server.tool(
    name="suite_markdown_to_content",
    description=(
        "Convert markdown into structured content for the 'slides' or "
        "'timeline' app. Slides are separated by '---' lines; timeline events "
        "are headings like '## 2024-03-01 - Launch'."
    ),
)
def suite_markdown_to_content(app: str, markdown: str) -> str:
    try:
        return _success(app=app, content=markdown_to_content(app, markdown))
    except SuiteError as exc:
        return _failure(exc)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main():
    """Run the Work Suite MCP server (stdio transport)."""
    configure_logging(get_settings(), stream=sys.stderr)
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
