"""
External workspace service integration.
"""

from .client import LinkResult, WorkspaceClient

__all__ = ["LinkResult", "WorkspaceClient"]
