"""Test configuration and fixtures.

Every test gets its own data directory under ``tmp_path``: a SQLite file for
the database and a ``files/`` tree for uploads.
"""

from pathlib import Path
from typing import Callable, Dict, Generator, Optional

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from work_suite.api import create_app
from work_suite.config import Settings
from work_suite.content.services import ItemService
from work_suite.db.base import Database
from work_suite.storage import FileStore
from work_suite.workspace.client import WorkspaceClient

WORKSPACE_URL = "http://workspace.test"


def make_settings(data_path: Path, **overrides) -> Settings:
    values = dict(
        data_path=data_path,
        secret_key="test-secret-for-signing-tokens-0001",
        password_hash_iterations=1000,
        log_level="WARNING",
        log_format="console",
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Client with the lifespan running, so storage is initialized."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def database(tmp_path: Path) -> Generator[Database, None, None]:
    database = Database(f"sqlite:///{tmp_path / 'service.db'}")
    database.init()
    yield database
    database.close()


@pytest.fixture
def db(database: Database) -> Generator[Session, None, None]:
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def files(tmp_path: Path) -> FileStore:
    store = FileStore(tmp_path / "files")
    store.ensure_structure()
    return store


@pytest.fixture
def item_service(db: Session, files: FileStore) -> ItemService:
    """ItemService with workspace linkage disabled."""
    return ItemService(db, files=files)


def mock_workspace(handler: Callable[[httpx.Request], httpx.Response]) -> WorkspaceClient:
    """WorkspaceClient whose HTTP calls are answered by ``handler``."""
    return WorkspaceClient(
        WORKSPACE_URL,
        api_key="ws-key",
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


def register_user(
    client: TestClient,
    email: str = "ada@example.com",
    password: str = "correct-horse",
    display_name: Optional[str] = None,
) -> Dict[str, str]:
    """Register an account and return bearer headers for it."""
    body = {"email": email, "password": password}
    if display_name:
        body["display_name"] = display_name
    response = client.post("/auth/register", json=body)
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def auth_headers(client: TestClient) -> Dict[str, str]:
    return register_user(client)
