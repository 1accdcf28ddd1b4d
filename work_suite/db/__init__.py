"""
Database package for the Work Suite API.
"""

from .base import Base, Database, get_db
from .models import ItemModel, TagModel, ThemeModel, UserModel, item_tags

__all__ = [
    "Base",
    "Database",
    "get_db",
    "ItemModel",
    "TagModel",
    "ThemeModel",
    "UserModel",
    "item_tags",
]
