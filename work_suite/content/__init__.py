"""
Work Suite content model.

Items, tags and the per-app content registry shared by the plain CRUD
routes, the LLM-oriented routes, batch operations and the MCP tools.
"""

from .apps import APPS, AppSpec, get_app, list_apps, require_app, validate_content
from .batch import (
    BatchCreateRequest,
    BatchMoveRequest,
    BatchResult,
    BatchTagRequest,
    BatchUpdateRequest,
)
from .enums import SCOPES, ItemStatus, Scope, ThemeCategory
from .item import (
    AppItemCreate,
    ItemCreate,
    ItemFilters,
    ItemMove,
    ItemUpdate,
    MarkdownConvert,
    MarkdownItemCreate,
)
from .markdown import markdown_to_content, markdown_to_slides, markdown_to_timeline
from .primitives import dump_content, generate_id, load_content, utc_now

__all__ = [
    # Registry
    "APPS",
    "AppSpec",
    "get_app",
    "list_apps",
    "require_app",
    "validate_content",
    # Enums
    "SCOPES",
    "ItemStatus",
    "Scope",
    "ThemeCategory",
    # Schemas
    "AppItemCreate",
    "BatchCreateRequest",
    "BatchMoveRequest",
    "BatchResult",
    "BatchTagRequest",
    "BatchUpdateRequest",
    "ItemCreate",
    "ItemFilters",
    "ItemMove",
    "ItemUpdate",
    "MarkdownConvert",
    "MarkdownItemCreate",
    # Markdown adapters
    "markdown_to_content",
    "markdown_to_slides",
    "markdown_to_timeline",
    # Primitives
    "dump_content",
    "generate_id",
    "load_content",
    "utc_now",
]
