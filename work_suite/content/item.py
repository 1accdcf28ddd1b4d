"""
Item request schemas.

Each operation on the Item Store takes one of these validated inputs.
Required vs optional fields are stated here so malformed bodies are rejected
before they reach persistence.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, constr, field_validator

from .enums import ItemStatus, Scope

TagName = constr(strip_whitespace=True, min_length=1, max_length=128)


class ItemCreate(BaseModel):
    """Fields accepted when creating an item."""

    model_config = ConfigDict(extra="ignore")

    name: constr(strip_whitespace=True, min_length=1, max_length=512) = Field(
        ..., description="Display label"
    )
    type: constr(min_length=1, max_length=64) = Field(
        "file", description="Free-form item type"
    )
    app: Optional[constr(min_length=1, max_length=64)] = Field(
        None, description="Editor that produced the item"
    )
    scope: Scope = Scope.ME
    folder: Optional[str] = None
    status: ItemStatus = ItemStatus.BACKLOG
    content: Any = Field(None, description="Opaque payload, shape defined per app")
    workspace_id: Optional[constr(min_length=1, max_length=128)] = None
    tags: List[TagName] = Field(default_factory=list)

    @field_validator("type", "scope", "status", "tags", mode="before")
    @classmethod
    def null_means_default(cls, value: Any, info) -> Any:
        """Treat an explicit null like an omitted field."""
        if value is None:
            return cls.model_fields[info.field_name].get_default(
                call_default_factory=True
            )
        return value


class AppItemCreate(ItemCreate):
    """App-aware create: ``name``, ``app`` and ``content`` are all required."""

    app: constr(min_length=1, max_length=64) = Field(
        ..., description="Registered app id"
    )
    content: Any = Field(..., description="Payload matching the app's shape")

    @field_validator("content")
    @classmethod
    def content_present(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("content is required")
        return value


class ItemUpdate(BaseModel):
    """Partial update. Absent fields are left unchanged.

    ``null`` counts as absent for every field except ``workspace_id``, where an
    explicit ``null`` clears the link target. ``tags``, when present, replaces
    the whole tag set (``[]`` clears it).
    """

    model_config = ConfigDict(extra="ignore")

    name: Optional[constr(strip_whitespace=True, min_length=1, max_length=512)] = None
    scope: Optional[Scope] = None
    folder: Optional[str] = None
    status: Optional[ItemStatus] = None
    content: Any = None
    workspace_id: Optional[constr(min_length=1, max_length=128)] = None
    tags: Optional[List[TagName]] = None

    def changes(self) -> Dict[str, Any]:
        """Column values to write, honoring coalesce-on-null semantics."""
        values: Dict[str, Any] = {}
        for field in self.model_fields_set:
            if field == "tags":
                continue
            value = getattr(self, field)
            if field == "workspace_id" or value is not None:
                values[field] = value.value if isinstance(value, (Scope, ItemStatus)) else value
        return values

    @property
    def replaces_tags(self) -> bool:
        return "tags" in self.model_fields_set and self.tags is not None


class ItemMove(BaseModel):
    """Placement-only update."""

    model_config = ConfigDict(extra="ignore")

    folder: Optional[str] = None
    scope: Optional[Scope] = None
    status: Optional[ItemStatus] = None

    def as_update(self) -> ItemUpdate:
        return ItemUpdate(
            **{field: getattr(self, field) for field in self.model_fields_set}
        )


class ItemFilters(BaseModel):
    """Listing filters. Every present filter is an exact-match AND."""

    scope: Optional[Scope] = None
    folder: Optional[str] = None
    status: Optional[ItemStatus] = None
    app: Optional[str] = None
    workspace_id: Optional[str] = None
    owner_id: Optional[str] = None
    tag: Optional[str] = Field(None, description="Tag id or tag name")
    limit: int = Field(100, ge=1, le=1000)
    offset: int = Field(0, ge=0)


class MarkdownConvert(BaseModel):
    """Markdown to be turned into an app's structured content."""

    app: constr(min_length=1, max_length=64)
    markdown: str


class MarkdownItemCreate(BaseModel):
    """Create an item from markdown in one step."""

    model_config = ConfigDict(extra="ignore")

    name: constr(strip_whitespace=True, min_length=1, max_length=512)
    app: constr(min_length=1, max_length=64)
    markdown: str
    scope: Scope = Scope.ME
    folder: Optional[str] = None
    status: ItemStatus = ItemStatus.BACKLOG
    workspace_id: Optional[constr(min_length=1, max_length=128)] = None
    tags: List[TagName] = Field(default_factory=list)
