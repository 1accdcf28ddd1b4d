"""
SQLAlchemy models for the Work Suite API.

Items and tags are joined through ``item_tags``; junction rows cascade when
either side is deleted and keep a ``position`` so an item's tags come back in
the order they were attached.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
)

from ..content.primitives import generate_id, isoformat, load_content, utc_now
from .base import Base


item_tags = Table(
    "item_tags",
    Base.metadata,
    Column(
        "item_id",
        String(36),
        ForeignKey("items.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        String(36),
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("position", Integer, nullable=False, default=0),
    Column("created_at", DateTime(timezone=True), nullable=False, default=utc_now),
    Index("ix_item_tags_tag_id", "tag_id"),
)


class UserModel(Base):
    """SQLAlchemy model for local accounts."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(256), nullable=False)
    display_name = Column(String(256), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary (never includes the password hash)."""
        return {
            "id": self.id,
            "email": self.email,
            "display_name": self.display_name,
            "created_at": isoformat(self.created_at),
        }


class ItemModel(Base):
    """SQLAlchemy model for content items."""

    __tablename__ = "items"

    # Primary fields
    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(512), nullable=False)
    type = Column(String(64), nullable=False, default="file")
    app = Column(String(64), nullable=True, index=True)

    # Placement
    scope = Column(String(16), nullable=False, default="me", index=True)
    folder = Column(Text, nullable=True)
    status = Column(String(32), nullable=False, default="backlog", index=True)

    # Payload
    content = Column(Text, nullable=True)  # JSON text
    file_path = Column(Text, nullable=True)

    # Ownership and external linkage
    owner_id = Column(String(36), nullable=True, index=True)
    workspace_id = Column(String(128), nullable=True, index=True)
    service0_object_id = Column(String(128), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    __table_args__ = (
        Index("ix_items_updated_at", "updated_at"),
        Index("ix_items_scope_folder", "scope", "folder"),
    )

    def to_dict(
        self,
        tags: Optional[List[Dict[str, Any]]] = None,
        include_content: bool = True,
    ) -> Dict[str, Any]:
        """Convert model to dictionary with parsed content and resolved tags."""
        data = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "app": self.app,
            "scope": self.scope,
            "folder": self.folder,
            "status": self.status,
            "file_path": self.file_path,
            "owner_id": self.owner_id,
            "workspace_id": self.workspace_id,
            "service0_object_id": self.service0_object_id,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
            "tags": tags if tags is not None else [],
        }
        if include_content:
            data["content"] = load_content(self.content, self.id)
        return data


class TagModel(Base):
    """SQLAlchemy model for tags. Names are globally unique."""

    __tablename__ = "tags"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(128), nullable=False, unique=True, index=True)
    color = Column(String(32), nullable=True)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "color": self.color}


class ThemeModel(Base):
    """SQLAlchemy model for custom themes saved from the theme designer."""

    __tablename__ = "themes"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(256), nullable=False)
    data = Column(Text, nullable=False)  # JSON text
    owner_id = Column(String(36), nullable=True, index=True)
    is_public = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "data": load_content(self.data, self.id),
            "owner_id": self.owner_id,
            "is_public": self.is_public,
            "created_at": isoformat(self.created_at),
        }
