"""
Tests for TagService: the name-unique registry and the item/tag junction.
"""

from sqlalchemy import func, select

from work_suite.content.item import ItemCreate
from work_suite.content.services import TagService
from work_suite.db.models import TagModel, item_tags


def _item(item_service, name="Item"):
    return item_service.create(ItemCreate(name=name))


class TestUpsertByName:
    def test_creates_once(self, db):
        tags = TagService(db)
        first = tags.upsert_by_name("finance")
        second = tags.upsert_by_name("finance")
        db.commit()

        assert first == second
        assert db.query(TagModel).count() == 1

    def test_distinct_names_get_distinct_ids(self, db):
        tags = TagService(db)
        assert tags.upsert_by_name("a") != tags.upsert_by_name("b")


class TestLinking:
    def test_link_is_idempotent(self, db, item_service):
        item = _item(item_service)
        tags = TagService(db)
        tag_id = tags.upsert_by_name("x")

        assert tags.link(item.id, tag_id) is True
        assert tags.link(item.id, tag_id) is False
        db.commit()

        count = db.execute(
            select(func.count()).select_from(item_tags).where(item_tags.c.item_id == item.id)
        ).scalar_one()
        assert count == 1

    def test_unlink_absent_is_noop(self, db, item_service):
        item = _item(item_service)
        tags = TagService(db)
        tag_id = tags.upsert_by_name("x")
        assert tags.unlink(item.id, tag_id) is False

    def test_tags_keep_link_order(self, db, item_service):
        item = _item(item_service)
        tags = TagService(db)
        tags.add_tags(item.id, ["zulu", "alpha", "mike"])
        db.commit()

        resolved = tags.tags_for_items([item.id])[item.id]
        assert [t["name"] for t in resolved] == ["zulu", "alpha", "mike"]

    def test_same_tag_on_many_items(self, db, item_service):
        one, two = _item(item_service, "one"), _item(item_service, "two")
        tags = TagService(db)
        tags.add_tags(one.id, ["shared"])
        tags.add_tags(two.id, ["shared"])
        db.commit()

        assert db.query(TagModel).count() == 1
        resolved = tags.tags_for_items([one.id, two.id])
        assert resolved[one.id][0]["id"] == resolved[two.id][0]["id"]

    def test_deleting_tag_cascades_links(self, db, item_service):
        item = _item(item_service)
        tags = TagService(db)
        tags.add_tags(item.id, ["temp"])
        db.commit()

        db.delete(tags.get_by_name("temp"))
        db.commit()

        assert tags.tags_for_items([item.id]).get(item.id, []) == []


class TestListing:
    def test_list_all_by_name(self, db):
        tags = TagService(db)
        for name in ("c", "a", "b"):
            tags.upsert_by_name(name)
        db.commit()
        assert [t.name for t in tags.list_all()] == ["a", "b", "c"]

    def test_usage_counts_unused_tags_as_zero(self, db, item_service):
        item = _item(item_service)
        tags = TagService(db)
        tags.add_tags(item.id, ["used"])
        tags.upsert_by_name("unused")
        db.commit()

        usage = {t["name"]: t["count"] for t in tags.list_with_usage()}
        assert usage == {"used": 1, "unused": 0}
