"""
Saved custom themes.
"""

from typing import Any, Dict, List, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, constr
from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..content.primitives import dump_content, generate_id, utc_now
from ..content.services import write_transaction
from ..db.models import ThemeModel
from ..errors import NotFoundError

logger = structlog.get_logger()


class ThemeCreate(BaseModel):
    """A theme saved from the theme designer."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: constr(strip_whitespace=True, min_length=1, max_length=256)
    data: Dict[str, Any] = Field(default_factory=dict)
    is_public: bool = Field(False, alias="isPublic")


class ThemeService:
    """Service for saved themes."""

    def __init__(self, db: Session):
        self.db = db

    def list_visible(self, user_id: Optional[str] = None) -> List[ThemeModel]:
        """Public themes plus the caller's own."""
        visible = ThemeModel.is_public.is_(True)
        if user_id:
            visible = or_(visible, ThemeModel.owner_id == user_id)
        return (
            self.db.query(ThemeModel)
            .filter(visible)
            .order_by(ThemeModel.created_at.desc())
            .all()
        )

    def get(self, theme_id: str, user_id: Optional[str] = None) -> ThemeModel:
        """A theme the caller may see, or NotFoundError."""
        theme = self.db.query(ThemeModel).filter(ThemeModel.id == theme_id).first()
        if theme is None or not (theme.is_public or (user_id and theme.owner_id == user_id)):
            raise NotFoundError("Theme", theme_id)
        return theme

    def create(self, data: ThemeCreate, owner_id: Optional[str] = None) -> ThemeModel:
        theme = ThemeModel(
            id=generate_id(),
            name=data.name,
            data=dump_content(data.data),
            owner_id=owner_id,
            is_public=data.is_public,
            created_at=utc_now(),
        )
        with write_transaction(self.db, "save theme"):
            self.db.add(theme)

        logger.info("Theme saved", theme_id=theme.id, owner_id=owner_id, is_public=data.is_public)
        return theme
