"""
Tests for batch operations.

Each element succeeds or fails on its own; one bad element never rolls back
or blocks its siblings.
"""

from work_suite.content.batch import BatchMoveRequest, BatchTagRequest
from work_suite.content.item import ItemCreate
from work_suite.content.services import BatchService


class TestBatchService:
    def test_create_three_valid_one_invalid(self, item_service):
        result = BatchService(item_service).create(
            [{"name": "a"}, {"name": "b"}, {"app": "notes"}, {"name": "d"}]
        )
        data = result.to_dict()

        assert len(data["created"]) == 3
        assert data["count"] == 3
        assert len(data["errors"]) == 1
        assert data["errors"][0]["index"] == 2
        assert "name" in data["errors"][0]["error"]
        assert len(item_service.list()) == 3

    def test_create_non_object_element(self, item_service):
        data = BatchService(item_service).create(["not an item", {"name": "ok"}]).to_dict()
        assert data["count"] == 1
        assert data["errors"][0]["index"] == 0

    def test_update_collects_per_element_errors(self, item_service):
        item = item_service.create(ItemCreate(name="x"))
        data = (
            BatchService(item_service)
            .update(
                [
                    {"id": item.id, "status": "done"},
                    {"id": "missing", "status": "done"},
                    {"status": "done"},
                    {"id": item.id, "status": "not-a-status"},
                ]
            )
            .to_dict()
        )

        assert data["updated"] == [item.id]
        assert [(e["index"], e.get("id")) for e in data["errors"]] == [
            (1, "missing"),
            (2, None),
            (3, item.id),
        ]
        assert item_service.get(item.id).status == "done"

    def test_move(self, item_service):
        a = item_service.create(ItemCreate(name="a", folder="in"))
        b = item_service.create(ItemCreate(name="b", folder="in", status="done"))
        data = (
            BatchService(item_service)
            .move(BatchMoveRequest(ids=[a.id, "missing", b.id], folder="out"))
            .to_dict()
        )

        assert data["moved"] == [a.id, b.id]
        assert data["errors"] == [{"index": 1, "id": "missing", "error": "Item 'missing' not found"}]
        assert item_service.get(a.id).folder == "out"
        assert item_service.get(b.id).status == "done"

    def test_tag(self, item_service):
        a = item_service.create(ItemCreate(name="a", tags=["old"]))
        b = item_service.create(ItemCreate(name="b"))
        data = (
            BatchService(item_service)
            .tag(BatchTagRequest(ids=[a.id, b.id], add=["new"], remove=["old"]))
            .to_dict()
        )

        assert data["tagged"] == [a.id, b.id]
        for item in (a, b):
            assert [t["name"] for t in item_service.materialize(item)["tags"]] == ["new"]


class TestBatchEndpoints:
    def test_batch_create(self, client):
        response = client.post(
            "/batch/create",
            json={"items": [{"name": "a"}, {"name": "b"}, {"name": "c"}, {"scope": "me"}]},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 3
        assert [i["name"] for i in data["created"]] == ["a", "b", "c"]
        assert data["errors"][0]["index"] == 3

    def test_batch_update(self, client):
        item = client.post("/items", json={"name": "x"}).json()
        data = client.post(
            "/batch/update", json={"updates": [{"id": item["id"], "name": "y"}]}
        ).json()
        assert data == {"updated": [item["id"]], "count": 1, "errors": []}
        assert client.get(f"/items/{item['id']}").json()["name"] == "y"

    def test_batch_move_and_tag(self, client):
        ids = [client.post("/items", json={"name": n}).json()["id"] for n in ("a", "b")]

        moved = client.post("/batch/move", json={"ids": ids, "scope": "there"}).json()
        tagged = client.post("/batch/tag", json={"ids": ids, "add": ["bulk"]}).json()

        assert moved["count"] == 2
        assert tagged["count"] == 2
        items = client.get("/items", params={"tag": "bulk", "scope": "there"}).json()
        assert sorted(i["name"] for i in items) == ["a", "b"]

    def test_batch_requires_list(self, client):
        assert client.post("/batch/create", json={"items": "nope"}).status_code == 422
