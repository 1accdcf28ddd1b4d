"""
Batch operation schemas.

Batch create and update take raw per-element dicts so that one malformed
element is reported in ``errors`` instead of failing the whole request.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, constr

from .enums import ItemStatus, Scope
from .item import TagName


class BatchCreateRequest(BaseModel):
    items: List[Any] = Field(..., description="ItemCreate bodies")


class BatchUpdateRequest(BaseModel):
    updates: List[Any] = Field(
        ..., description="ItemUpdate bodies, each with an 'id'"
    )


class BatchMoveRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ids: List[constr(min_length=1)]
    folder: Optional[str] = None
    scope: Optional[Scope] = None
    status: Optional[ItemStatus] = None


class BatchTagRequest(BaseModel):
    ids: List[constr(min_length=1)]
    add: List[TagName] = Field(default_factory=list)
    remove: List[TagName] = Field(default_factory=list)


class BatchError(BaseModel):
    index: int
    id: Optional[str] = None
    error: str


class BatchResult(BaseModel):
    """Outcome of a batch: what succeeded plus per-element failures."""

    verb: str
    succeeded: List[Any] = Field(default_factory=list)
    errors: List[BatchError] = Field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            self.verb: self.succeeded,
            "count": len(self.succeeded),
            "errors": [e.model_dump(exclude_none=True) for e in self.errors],
        }
