"""
Workspace proxy routes.

The caller is matched to a workspace-service user by email. Unlike the
item mirror, these calls have nothing local to fall back on, so a failed
call is reported to the caller as 502. Handlers are plain ``def`` so the
synchronous client runs in the threadpool.
"""

from typing import Any, Dict, List

import structlog
from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, constr

from ..auth import Identity, require_user
from ..errors import ExternalServiceUnavailable
from .client import LinkResult, WorkspaceClient

logger = structlog.get_logger()

router = APIRouter(prefix="/workspaces", tags=["workspaces"])


class WorkspaceCreate(BaseModel):
    name: constr(strip_whitespace=True, min_length=1, max_length=256)


def workspace_client(request: Request) -> WorkspaceClient:
    return request.app.state.workspace


def _unwrap(result: LinkResult, action: str) -> Any:
    if not result.ok:
        raise ExternalServiceUnavailable(
            f"Workspace service failed to {action}", {"reason": result.error}
        )
    return result.value


def _remote_user_id(client: WorkspaceClient, user: Identity) -> str:
    remote = _unwrap(client.find_user_by_email(user.email), "resolve the current user")
    return str(remote["id"])


@router.get("")
def list_workspaces(
    user: Identity = Depends(require_user),
    client: WorkspaceClient = Depends(workspace_client),
) -> List[Dict[str, Any]]:
    """Workspaces the caller belongs to."""
    remote_id = _remote_user_id(client, user)
    return _unwrap(client.list_workspaces(remote_id), "list workspaces")


@router.post("", status_code=201)
def create_workspace(
    data: WorkspaceCreate,
    user: Identity = Depends(require_user),
    client: WorkspaceClient = Depends(workspace_client),
) -> Any:
    remote_id = _remote_user_id(client, user)
    workspace = _unwrap(client.create_workspace(remote_id, data.name), "create workspace")
    logger.info("Workspace created", owner_id=user.id, name=data.name)
    return workspace


@router.get("/{workspace_id}/objects")
def list_workspace_objects(
    workspace_id: str,
    user: Identity = Depends(require_user),
    client: WorkspaceClient = Depends(workspace_client),
) -> List[Dict[str, Any]]:
    """Objects registered in a workspace, including mirrored items."""
    return _unwrap(client.list_objects(workspace_id), "list workspace objects")
