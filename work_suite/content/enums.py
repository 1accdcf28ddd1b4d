"""
Canonical enums for the content model.

Scope and status are stored as plain strings; these enums define the values
accepted at the API boundary.
"""

from enum import Enum


class Scope(str, Enum):
    """Coarse visibility of an item. Advisory only, never enforced on reads."""

    ME = "me"
    US = "us"
    WE = "we"
    THERE = "there"


class ItemStatus(str, Enum):
    """Workflow status shared by every app."""

    BACKLOG = "backlog"
    IN_PROGRESS = "in-progress"
    DONE = "done"
    CLOSED = "closed"


class ThemeCategory(str, Enum):
    """Theme preset categories."""

    DARK = "dark"
    LIGHT = "light"
    CUSTOM = "custom"


SCOPES = [s.value for s in Scope]
