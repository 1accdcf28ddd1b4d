"""
Theme API routes.

Presets are static and public. Saved themes are visible when public or
owned by the caller.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import Identity, optional_user
from ..content.enums import ThemeCategory
from ..db.base import get_db
from ..errors import NotFoundError
from .presets import (
    css_variables,
    font_stylesheet_url,
    get_font_presets,
    get_preset,
    get_presets,
    normalize_custom_theme,
)
from .services import ThemeCreate, ThemeService

router = APIRouter(prefix="/themes", tags=["themes"])


def _rendered(theme_id: str, theme: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": theme_id,
        "theme": theme,
        "css": css_variables(theme),
        "fonts_url": font_stylesheet_url(theme),
    }


# =============================================================================
# Presets
# =============================================================================


@router.get("/presets")
async def list_presets(category: Optional[ThemeCategory] = None) -> List[Dict[str, Any]]:
    return get_presets(category.value if category else None)


@router.get("/presets/{preset_id}")
async def get_theme_preset(preset_id: str) -> Dict[str, Any]:
    preset = get_preset(preset_id)
    if preset is None:
        raise NotFoundError("Theme preset", preset_id)
    return preset


@router.get("/presets/{preset_id}/css")
async def get_preset_css(preset_id: str) -> Dict[str, Any]:
    preset = get_preset(preset_id)
    if preset is None:
        raise NotFoundError("Theme preset", preset_id)
    return _rendered(preset_id, preset)


@router.get("/fonts")
async def list_font_presets() -> List[Dict[str, str]]:
    return get_font_presets()


# =============================================================================
# Saved themes
# =============================================================================


@router.get("")
async def list_themes(
    db: Session = Depends(get_db),
    user: Optional[Identity] = Depends(optional_user),
) -> List[Dict[str, Any]]:
    """Public themes plus the caller's own."""
    themes = ThemeService(db).list_visible(user.id if user else None)
    return [t.to_dict() for t in themes]


@router.post("", status_code=201)
async def save_theme(
    data: ThemeCreate,
    db: Session = Depends(get_db),
    user: Optional[Identity] = Depends(optional_user),
) -> Dict[str, Any]:
    theme = ThemeService(db).create(data, owner_id=user.id if user else None)
    return theme.to_dict()


@router.get("/{theme_id}/css")
async def get_theme_css(
    theme_id: str,
    db: Session = Depends(get_db),
    user: Optional[Identity] = Depends(optional_user),
) -> Dict[str, Any]:
    """Normalize a saved designer theme and render its CSS variables."""
    saved = ThemeService(db).get(theme_id, user.id if user else None)
    data = saved.to_dict()["data"]
    if isinstance(data, dict):
        data = {"name": saved.name, **data}
    else:
        data = {"name": saved.name}
    return _rendered(saved.id, normalize_custom_theme(data))
