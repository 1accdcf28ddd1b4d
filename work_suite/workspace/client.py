"""
Client for the external workspace service.

Items placed in a workspace are mirrored into the service's object
directory. The mirror is best-effort: every call is bounded by a timeout and
returns a LinkResult instead of raising, so callers decide what a failure
means for them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
import structlog

logger = structlog.get_logger()

SOURCE_SERVICE = "worksuite"


@dataclass(frozen=True)
class LinkResult:
    """Outcome of one call to the workspace service."""

    ok: bool
    value: Any = None
    error: Optional[str] = None

    @classmethod
    def success(cls, value: Any = None) -> "LinkResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "LinkResult":
        return cls(ok=False, error=error)


def object_payload(item: Any) -> Dict[str, Any]:
    """Body describing an item to the object directory."""
    return {
        "name": item.name,
        "type": item.app or item.type,
        "source_service": SOURCE_SERVICE,
        "source_id": item.id,
        "metadata": {
            "app": item.app,
            "scope": item.scope,
            "folder": item.folder,
            "status": item.status,
        },
    }


class WorkspaceClient:
    """Synchronous, time-bounded client for the workspace service.

    Usage:
        client = WorkspaceClient("http://workspace:4000", timeout=5.0)
        result = client.register_object(workspace_id, item)
        if result.ok:
            item.service0_object_id = result.value
    """

    def __init__(
        self,
        base_url: Optional[str],
        api_key: Optional[str] = None,
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/") if base_url else None
        self._client: Optional[httpx.Client] = None
        if self.base_url:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=httpx.Timeout(timeout, connect=min(timeout, 2.0)),
                headers={"Authorization": f"Bearer {api_key}"} if api_key else {},
                transport=transport,
            )

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()

    def _request(
        self, method: str, path: str, json: Optional[Dict[str, Any]] = None
    ) -> LinkResult:
        if self._client is None:
            return LinkResult.failure("workspace service not configured")

        try:
            response = self._client.request(method, path, json=json)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.warning("Workspace service timed out", method=method, path=path, error=str(e))
            return LinkResult.failure(f"timeout: {e}")
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Workspace service returned an error",
                method=method,
                path=path,
                status_code=e.response.status_code,
            )
            return LinkResult.failure(f"status {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.warning("Workspace service unreachable", method=method, path=path, error=str(e))
            return LinkResult.failure(f"unreachable: {e}")

        if response.status_code == 204 or not response.content:
            return LinkResult.success(None)
        try:
            return LinkResult.success(response.json())
        except ValueError:
            logger.warning("Workspace service sent malformed JSON", method=method, path=path)
            return LinkResult.failure("malformed response")

    # Users and workspaces

    def find_user_by_email(self, email: str) -> LinkResult:
        result = self._request("GET", f"/users/by-email/{quote(email, safe='')}")
        if result.ok and not (isinstance(result.value, dict) and result.value.get("id")):
            return LinkResult.failure("malformed response")
        return result

    def list_workspaces(self, user_id: str) -> LinkResult:
        result = self._request("GET", f"/users/{quote(user_id, safe='')}/workspaces")
        if result.ok and not isinstance(result.value, list):
            return LinkResult.failure("malformed response")
        return result

    def create_workspace(self, owner_id: str, name: str) -> LinkResult:
        return self._request("POST", "/workspaces", json={"name": name, "owner_id": owner_id})

    # Objects

    def register_object(self, workspace_id: str, item: Any) -> LinkResult:
        """Register an item; on success ``value`` is the external object id."""
        result = self._request(
            "POST",
            f"/workspaces/{quote(workspace_id, safe='')}/objects",
            json=object_payload(item),
        )
        if not result.ok:
            return result
        object_id = result.value.get("id") if isinstance(result.value, dict) else None
        if not object_id:
            logger.warning("Workspace service response has no object id", item_id=item.id)
            return LinkResult.failure("malformed response")
        return LinkResult.success(str(object_id))

    def update_object(self, object_id: str, item: Any) -> LinkResult:
        return self._request(
            "PUT", f"/objects/{quote(object_id, safe='')}", json=object_payload(item)
        )

    def delete_object(self, object_id: str) -> LinkResult:
        return self._request("DELETE", f"/objects/{quote(object_id, safe='')}")

    def list_objects(self, workspace_id: str) -> LinkResult:
        result = self._request("GET", f"/workspaces/{quote(workspace_id, safe='')}/objects")
        if result.ok and not isinstance(result.value, list):
            return LinkResult.failure("malformed response")
        return result
