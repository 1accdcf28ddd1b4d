"""
Content service layer.

TagService keeps the name-unique tag registry and the item/tag junction.
ItemService owns item CRUD, search and the best-effort workspace mirror.
BatchService applies one kind of mutation to many items, collecting
per-element failures without touching the siblings.

Multi-statement writes (create with tags, replace-all-tags, delete) run in a
single session transaction and are rolled back together on failure.
"""

from __future__ import annotations

from collections import defaultdict
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import structlog
from pydantic import ValidationError
from sqlalchemy import delete, desc, func, or_, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..db.models import ItemModel, TagModel, item_tags
from ..errors import NotFoundError, StorageFailure, SuiteError, ValidationFailedError
from ..storage import FileStore
from ..workspace.client import LinkResult, WorkspaceClient
from .batch import (
    BatchError,
    BatchMoveRequest,
    BatchResult,
    BatchTagRequest,
)
from .item import ItemCreate, ItemFilters, ItemMove, ItemUpdate
from .primitives import advance_timestamp, dump_content, generate_id, utc_now

logger = structlog.get_logger()


def describe_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic error into one line for batch summaries."""
    parts = []
    for err in error.errors():
        location = ".".join(str(p) for p in err.get("loc", ())) or "body"
        parts.append(f"{location}: {err.get('msg')}")
    return "; ".join(parts)


@contextmanager
def write_transaction(db: Session, action: str) -> Iterator[None]:
    """Commit on success, roll back every statement on failure."""
    try:
        yield
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Storage write failed", action=action, error=str(e))
        raise StorageFailure(f"Failed to {action}", {"reason": str(e)}) from e
    except Exception:
        db.rollback()
        raise


class TagService:
    """Service for the tag registry and item/tag links."""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def normalize_names(names: Optional[Iterable[str]]) -> List[str]:
        """Strip, drop blanks and de-duplicate while keeping order."""
        seen = set()
        result = []
        for name in names or []:
            name = name.strip()
            if name and name not in seen:
                seen.add(name)
                result.append(name)
        return result

    def _insert_ignore(self, table, values: Dict[str, Any], conflict: List[str]):
        dialect = self.db.get_bind().dialect.name
        insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
        stmt = insert(table).values(**values).on_conflict_do_nothing(index_elements=conflict)
        return self.db.execute(stmt)

    def get_by_name(self, name: str) -> Optional[TagModel]:
        return self.db.query(TagModel).filter(TagModel.name == name).first()

    def upsert_by_name(self, name: str) -> Optional[str]:
        """Return the id of the tag called ``name``, creating it if needed."""
        existing = self.db.execute(
            select(TagModel.id).where(TagModel.name == name)
        ).scalar_one_or_none()
        if existing:
            return existing

        self._insert_ignore(
            TagModel.__table__, {"id": generate_id(), "name": name}, ["name"]
        )
        return self.db.execute(
            select(TagModel.id).where(TagModel.name == name)
        ).scalar_one_or_none()

    def link(self, item_id: str, tag_id: str) -> bool:
        """Attach a tag to an item. Returns False if the link already existed."""
        position = self.db.execute(
            select(func.coalesce(func.max(item_tags.c.position), -1) + 1).where(
                item_tags.c.item_id == item_id
            )
        ).scalar_one()
        result = self._insert_ignore(
            item_tags,
            {
                "item_id": item_id,
                "tag_id": tag_id,
                "position": position,
                "created_at": utc_now(),
            },
            ["item_id", "tag_id"],
        )
        return result.rowcount == 1

    def unlink(self, item_id: str, tag_id: str) -> bool:
        """Detach a tag from an item. Returns False if there was no link."""
        result = self.db.execute(
            delete(item_tags).where(
                item_tags.c.item_id == item_id, item_tags.c.tag_id == tag_id
            )
        )
        return result.rowcount > 0

    def unlink_all(self, item_id: str) -> int:
        result = self.db.execute(delete(item_tags).where(item_tags.c.item_id == item_id))
        return result.rowcount

    def add_tags(self, item_id: str, names: Optional[Iterable[str]]) -> None:
        for name in self.normalize_names(names):
            tag_id = self.upsert_by_name(name)
            if tag_id is None:
                logger.warning("Tag vanished after upsert; skipping link", item_id=item_id, tag=name)
                continue
            self.link(item_id, tag_id)

    def remove_tags(self, item_id: str, names: Optional[Iterable[str]]) -> None:
        for name in self.normalize_names(names):
            tag = self.get_by_name(name)
            if tag is not None:
                self.unlink(item_id, tag.id)

    def replace_tags(self, item_id: str, names: Optional[Iterable[str]]) -> None:
        """Make ``names`` the item's whole tag set. Caller owns the transaction."""
        self.unlink_all(item_id)
        self.add_tags(item_id, names)

    def tags_for_items(self, item_ids: Sequence[str]) -> Dict[str, List[Dict[str, Any]]]:
        """Resolve tags for many items, each list in link order."""
        resolved: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        if not item_ids:
            return resolved

        rows = self.db.execute(
            select(item_tags.c.item_id, TagModel)
            .join(TagModel, TagModel.id == item_tags.c.tag_id)
            .where(item_tags.c.item_id.in_(list(item_ids)))
            .order_by(item_tags.c.item_id, item_tags.c.position)
        ).all()
        for item_id, tag in rows:
            resolved[item_id].append(tag.to_dict())
        return resolved

    def list_all(self) -> List[TagModel]:
        """All tags ordered by name."""
        return self.db.query(TagModel).order_by(TagModel.name).all()

    def list_with_usage(self) -> List[Dict[str, Any]]:
        """All tags with their item count, most used first."""
        usage = func.count(item_tags.c.item_id).label("count")
        rows = self.db.execute(
            select(TagModel, usage)
            .outerjoin(item_tags, item_tags.c.tag_id == TagModel.id)
            .group_by(TagModel.id)
            .order_by(desc(usage), TagModel.name)
        ).all()
        return [{**tag.to_dict(), "count": count} for tag, count in rows]


class ItemService:
    """Service for items, their tags and their workspace mirror."""

    def __init__(
        self,
        db: Session,
        workspace: Optional[WorkspaceClient] = None,
        files: Optional[FileStore] = None,
    ):
        self.db = db
        self.tags = TagService(db)
        self.workspace = workspace or WorkspaceClient(None)
        self.files = files

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _filtered(self, filters: ItemFilters) -> Query:
        query = self.db.query(ItemModel)

        if filters.scope:
            query = query.filter(ItemModel.scope == filters.scope.value)
        if filters.folder:
            query = query.filter(ItemModel.folder == filters.folder)
        if filters.status:
            query = query.filter(ItemModel.status == filters.status.value)
        if filters.app:
            query = query.filter(ItemModel.app == filters.app)
        if filters.workspace_id:
            query = query.filter(ItemModel.workspace_id == filters.workspace_id)
        if filters.owner_id:
            query = query.filter(ItemModel.owner_id == filters.owner_id)
        if filters.tag:
            tagged = (
                select(item_tags.c.item_id)
                .join(TagModel, TagModel.id == item_tags.c.tag_id)
                .where(
                    item_tags.c.item_id == ItemModel.id,
                    or_(TagModel.id == filters.tag, TagModel.name == filters.tag),
                )
            )
            query = query.filter(tagged.exists())

        return query

    def _page(self, query: Query, filters: ItemFilters) -> List[ItemModel]:
        return (
            query.order_by(
                desc(ItemModel.updated_at), desc(ItemModel.created_at), ItemModel.id
            )
            .offset(filters.offset)
            .limit(filters.limit)
            .all()
        )

    def list(self, filters: Optional[ItemFilters] = None) -> List[ItemModel]:
        """List items, most recently updated first."""
        filters = filters or ItemFilters()
        return self._page(self._filtered(filters), filters)

    def search(self, q: str, filters: Optional[ItemFilters] = None) -> List[ItemModel]:
        """Case-insensitive substring match on name or serialized content."""
        if not q:
            raise ValidationFailedError("Search query 'q' is required", {"field": "q"})
        filters = filters or ItemFilters()
        escaped = q.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        query = self._filtered(filters).filter(
            or_(
                ItemModel.name.ilike(pattern, escape="\\"),
                ItemModel.content.ilike(pattern, escape="\\"),
            )
        )
        return self._page(query, filters)

    def find(self, item_id: str) -> Optional[ItemModel]:
        return self.db.query(ItemModel).filter(ItemModel.id == item_id).first()

    def get(self, item_id: str) -> ItemModel:
        """Get an item by ID or raise NotFoundError."""
        item = self.find(item_id)
        if item is None:
            raise NotFoundError("Item", item_id)
        return item

    def materialize(self, item: ItemModel, include_content: bool = True) -> Dict[str, Any]:
        """Item as a dict with resolved tags and parsed content."""
        return self.materialize_many([item], include_content=include_content)[0]

    def materialize_many(
        self, items: Sequence[ItemModel], include_content: bool = True
    ) -> List[Dict[str, Any]]:
        tags = self.tags.tags_for_items([i.id for i in items])
        return [
            item.to_dict(tags=tags.get(item.id, []), include_content=include_content)
            for item in items
        ]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, data: ItemCreate, owner_id: Optional[str] = None) -> ItemModel:
        """Create an item with its tags, then try to mirror it to a workspace."""
        now = utc_now()
        item = ItemModel(
            id=generate_id(),
            name=data.name,
            type=data.type,
            app=data.app,
            scope=data.scope.value,
            folder=data.folder,
            status=data.status.value,
            content=dump_content(data.content),
            owner_id=owner_id,
            workspace_id=data.workspace_id,
            created_at=now,
            updated_at=now,
        )

        with write_transaction(self.db, "create item"):
            self.db.add(item)
            self.db.flush()
            self.tags.add_tags(item.id, data.tags)

        logger.info(
            "Item created",
            item_id=item.id,
            app=item.app,
            scope=item.scope,
            owner_id=owner_id,
        )

        if item.workspace_id and owner_id:
            self._register(item)
        return item

    def create_upload(
        self,
        name: str,
        file_path: str,
        scope: str,
        folder: Optional[str] = None,
        app: Optional[str] = None,
        owner_id: Optional[str] = None,
    ) -> ItemModel:
        """Create a ``file`` item pointing at an already stored upload."""
        now = utc_now()
        item = ItemModel(
            id=generate_id(),
            name=name,
            type="file",
            app=app,
            scope=scope,
            folder=folder or None,
            file_path=file_path,
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
        )
        with write_transaction(self.db, "create upload item"):
            self.db.add(item)

        logger.info("Upload item created", item_id=item.id, file_path=file_path)
        return item

    def update(self, item_id: str, data: ItemUpdate) -> ItemModel:
        """Apply a partial update; ``tags`` (when given) replaces the tag set."""
        item = self.get(item_id)
        changes = data.changes()
        previous_workspace = item.workspace_id

        with write_transaction(self.db, "update item"):
            for field, value in changes.items():
                if field == "content":
                    value = dump_content(value)
                setattr(item, field, value)
            item.updated_at = advance_timestamp(item.updated_at)
            if data.replaces_tags:
                self.tags.replace_tags(item.id, data.tags)

        logger.info(
            "Item updated",
            item_id=item.id,
            fields=sorted(changes),
            tags_replaced=data.replaces_tags,
        )

        if item.service0_object_id:
            if item.workspace_id is None:
                self._unregister(item)
            elif item.workspace_id != previous_workspace:
                # The mirror lives in the old workspace; recreate it in the new one
                self._unregister(item)
                self._register(item)
            else:
                self._push(item)
        return item

    def move(self, item_id: str, data: ItemMove) -> ItemModel:
        """Change only folder, scope and status."""
        return self.update(item_id, data.as_update())

    def tag(
        self,
        item_id: str,
        add: Optional[Iterable[str]] = None,
        remove: Optional[Iterable[str]] = None,
    ) -> ItemModel:
        """Add and remove individual tags without replacing the set."""
        item = self.get(item_id)
        with write_transaction(self.db, "tag item"):
            self.tags.add_tags(item.id, add)
            self.tags.remove_tags(item.id, remove)
            item.updated_at = advance_timestamp(item.updated_at)
        return item

    def delete(self, item_id: str) -> bool:
        """Delete an item, its links, its file and its mirror.

        Deleting an unknown id succeeds and returns False.
        """
        item = self.find(item_id)
        if item is None:
            logger.info("Delete requested for missing item", item_id=item_id)
            return False

        file_path = item.file_path
        object_id = item.service0_object_id

        with write_transaction(self.db, "delete item"):
            self.tags.unlink_all(item.id)
            self.db.delete(item)

        logger.info("Item deleted", item_id=item_id)

        if file_path and self.files is not None:
            self.files.remove(file_path)
        if object_id:
            result = self.workspace.delete_object(object_id)
            if not result.ok:
                logger.warning(
                    "Workspace object deletion failed",
                    item_id=item_id,
                    object_id=object_id,
                    error=result.error,
                )
        return True

    def sync(self, item_id: str) -> Tuple[ItemModel, LinkResult]:
        """Register the item with its workspace, or refresh an existing link."""
        item = self.get(item_id)
        if not item.workspace_id:
            raise ValidationFailedError(
                "Item has no workspace_id to sync with", {"field": "workspace_id"}
            )
        if item.service0_object_id:
            return item, self._push(item)
        return item, self._register(item)

    # ------------------------------------------------------------------
    # Workspace mirror (best-effort, never raises)
    # ------------------------------------------------------------------

    def _register(self, item: ItemModel) -> LinkResult:
        result = self.workspace.register_object(item.workspace_id, item)
        if not result.ok:
            logger.warning(
                "Workspace registration failed",
                item_id=item.id,
                workspace_id=item.workspace_id,
                error=result.error,
            )
            return result
        try:
            with write_transaction(self.db, "record workspace object id"):
                item.service0_object_id = result.value
        except StorageFailure as e:
            logger.warning("Could not record workspace object id", item_id=item.id, error=e.message)
            return LinkResult.failure(e.message)
        logger.info("Item linked to workspace", item_id=item.id, object_id=result.value)
        return result

    def _push(self, item: ItemModel) -> LinkResult:
        result = self.workspace.update_object(item.service0_object_id, item)
        if not result.ok:
            logger.warning(
                "Workspace object update failed",
                item_id=item.id,
                object_id=item.service0_object_id,
                error=result.error,
            )
        return result

    def _unregister(self, item: ItemModel) -> LinkResult:
        object_id = item.service0_object_id
        result = self.workspace.delete_object(object_id)
        if not result.ok:
            logger.warning(
                "Workspace object deletion failed",
                item_id=item.id,
                object_id=object_id,
                error=result.error,
            )
        try:
            with write_transaction(self.db, "clear workspace object id"):
                item.service0_object_id = None
        except StorageFailure as e:
            logger.warning("Could not clear workspace object id", item_id=item.id, error=e.message)
        return result


class BatchService:
    """Apply one kind of mutation to many items, independently per element."""

    def __init__(self, items: ItemService):
        self.items = items

    @staticmethod
    def _failure(result: BatchResult, index: int, error: Exception, item_id: Optional[str] = None) -> None:
        if isinstance(error, ValidationError):
            message = describe_validation_error(error)
        elif isinstance(error, SuiteError):
            message = error.message
        else:
            message = str(error)
        result.errors.append(BatchError(index=index, id=item_id, error=message))

    def create(self, bodies: Sequence[Any], owner_id: Optional[str] = None) -> BatchResult:
        result = BatchResult(verb="created")
        for index, body in enumerate(bodies):
            try:
                data = ItemCreate.model_validate(body)
                item = self.items.create(data, owner_id=owner_id)
                result.succeeded.append(self.items.materialize(item))
            except (ValidationError, SuiteError) as e:
                self._failure(result, index, e)
        logger.info("Batch create finished", created=len(result.succeeded), failed=len(result.errors))
        return result

    def update(self, bodies: Sequence[Any]) -> BatchResult:
        result = BatchResult(verb="updated")
        for index, body in enumerate(bodies):
            item_id = body.get("id") if isinstance(body, dict) else None
            try:
                if not item_id:
                    raise ValidationFailedError("id is required", {"field": "id"})
                self.items.update(item_id, ItemUpdate.model_validate(body))
                result.succeeded.append(item_id)
            except (ValidationError, SuiteError) as e:
                self._failure(result, index, e, item_id)
        logger.info("Batch update finished", updated=len(result.succeeded), failed=len(result.errors))
        return result

    def move(self, request: BatchMoveRequest) -> BatchResult:
        result = BatchResult(verb="moved")
        placement = ItemMove(
            **{
                field: getattr(request, field)
                for field in ("folder", "scope", "status")
                if field in request.model_fields_set
            }
        )
        for index, item_id in enumerate(request.ids):
            try:
                self.items.move(item_id, placement)
                result.succeeded.append(item_id)
            except SuiteError as e:
                self._failure(result, index, e, item_id)
        logger.info("Batch move finished", moved=len(result.succeeded), failed=len(result.errors))
        return result

    def tag(self, request: BatchTagRequest) -> BatchResult:
        result = BatchResult(verb="tagged")
        for index, item_id in enumerate(request.ids):
            try:
                self.items.tag(item_id, add=request.add, remove=request.remove)
                result.succeeded.append(item_id)
            except SuiteError as e:
                self._failure(result, index, e, item_id)
        logger.info("Batch tag finished", tagged=len(result.succeeded), failed=len(result.errors))
        return result
