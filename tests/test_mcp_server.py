"""
Tests for the Work Suite MCP server tools.

Each test patches the module's lazily created database, file store and
workspace client with per-test instances, then calls the tools directly.
"""
from __future__ import annotations

import json
from unittest.mock import patch

import pytest

import work_suite.mcp as mcp_module
from work_suite.mcp import (
    suite_create_item,
    suite_delete_item,
    suite_get_app,
    suite_get_item,
    suite_list_apps,
    suite_list_items,
    suite_markdown_to_content,
    suite_search_items,
    suite_update_item,
)
from work_suite.workspace.client import WorkspaceClient


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _patch_singletons(database, files):
    with patch.object(mcp_module, "_database", database), patch.object(
        mcp_module, "_files", files
    ), patch.object(mcp_module, "_workspace", WorkspaceClient(None)):
        yield


def _call(tool, *args, **kwargs):
    return json.loads(tool(*args, **kwargs))


def _seed(name="Board", app="kanban", content=None, **kwargs):
    result = _call(
        suite_create_item,
        name=name,
        app=app,
        content=content if content is not None else {"columns": []},
        **kwargs,
    )
    assert result["success"], f"Create failed: {result}"
    return result["item"]


# ---------------------------------------------------------------------------
# TestApps
# ---------------------------------------------------------------------------


class TestApps:
    def test_list_apps(self):
        result = _call(suite_list_apps)
        assert result["success"] is True
        ids = [a["id"] for a in result["apps"]]
        assert "slides" in ids
        assert "schema" not in result["apps"][0]

    def test_get_app(self):
        result = _call(suite_get_app, "timeline")
        assert result["app"]["required"] == ["events"]
        assert result["app"]["example"]["events"]

    def test_get_unknown_app(self):
        result = _call(suite_get_app, "nope")
        assert result["success"] is False
        assert result["error"]["code"] == "NOT_FOUND"
        assert "suite_list_apps" in result["error"]["suggestion"]


# ---------------------------------------------------------------------------
# TestItems
# ---------------------------------------------------------------------------


class TestCreateItem:
    def test_create(self):
        item = _seed(tags=["mcp"], scope="us")
        assert item["app"] == "kanban"
        assert item["scope"] == "us"
        assert [t["name"] for t in item["tags"]] == ["mcp"]

    def test_missing_required_key(self):
        result = _call(suite_create_item, name="Board", app="kanban", content={})
        assert result["success"] is False
        assert result["error"]["code"] == "VALIDATION_FAILED"
        assert "columns" in result["error"]["message"]

    def test_bad_scope(self):
        result = _call(
            suite_create_item, name="x", app="notes", content={"text": ""}, scope="nowhere"
        )
        assert result["error"]["code"] == "VALIDATION_FAILED"
        assert "scope" in result["error"]["message"]


class TestReadItems:
    def test_list_omits_content(self):
        _seed(name="one")
        _seed(name="two", app="notes", content={"text": "hi"})

        result = _call(suite_list_items, app="notes")
        assert result["count"] == 1
        assert result["items"][0]["name"] == "two"
        assert "content" not in result["items"][0]

    def test_list_bad_limit(self):
        result = _call(suite_list_items, limit=0)
        assert result["success"] is False

    def test_search(self):
        _seed(name="Launch plan")
        _seed(name="Other", content={"columns": [{"title": "launch"}]})
        _seed(name="Unrelated")

        result = _call(suite_search_items, q="LAUNCH")
        assert result["count"] == 2

    def test_search_requires_query(self):
        result = _call(suite_search_items, q="")
        assert result["error"]["code"] == "VALIDATION_FAILED"

    def test_get_item(self):
        item = _seed(content={"columns": [{"id": "c", "title": "Todo", "cards": []}]})
        result = _call(suite_get_item, item["id"])
        assert result["item"]["content"]["columns"][0]["title"] == "Todo"

    def test_get_missing_item(self):
        result = _call(suite_get_item, "missing")
        assert result["error"]["code"] == "NOT_FOUND"
        assert "suite_search_items" in result["error"]["suggestion"]


class TestWriteItems:
    def test_update_only_passed_fields(self):
        item = _seed(tags=["keep"], folder="plans")
        result = _call(suite_update_item, item["id"], status="done")

        updated = result["item"]
        assert updated["status"] == "done"
        assert updated["folder"] == "plans"
        assert [t["name"] for t in updated["tags"]] == ["keep"]

    def test_update_replaces_tags(self):
        item = _seed(tags=["a", "b"])
        result = _call(suite_update_item, item["id"], tags=[])
        assert result["item"]["tags"] == []

    def test_update_missing(self):
        result = _call(suite_update_item, "missing", name="x")
        assert result["error"]["code"] == "NOT_FOUND"

    def test_delete(self):
        item = _seed()
        assert _call(suite_delete_item, item["id"]) == {
            "success": True,
            "item_id": item["id"],
            "deleted": True,
        }
        assert _call(suite_get_item, item["id"])["success"] is False

    def test_delete_missing_succeeds(self):
        result = _call(suite_delete_item, "missing")
        assert result["success"] is True
        assert result["deleted"] is False


# ---------------------------------------------------------------------------
# TestMarkdown
# ---------------------------------------------------------------------------


class TestMarkdown:
    def test_slides(self):
        result = _call(suite_markdown_to_content, "slides", "# Deck\n---\n- point")
        assert [s["layout"] for s in result["content"]["slides"]] == ["title", "bullets"]

    def test_timeline(self):
        result = _call(suite_markdown_to_content, "timeline", "## 2024-02-01 Ship\nDone")
        assert result["content"]["events"][0]["description"] == "Done"

    def test_unsupported(self):
        result = _call(suite_markdown_to_content, "metric", "# x")
        assert result["error"]["code"] == "VALIDATION_FAILED"
