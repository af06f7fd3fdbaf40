from uuid import uuid4

import pytest

from curation.domain.entities import (
    Collaborator,
    Collection,
    CollectionItem,
    CollectionStats,
    ItemRef,
    completion_percentage,
)


@pytest.mark.parametrize(
    ("total", "completed", "expected"),
    [
        (0, 0, 0),
        (1, 0, 0),
        (1, 1, 100),
        (3, 1, 33),
        (3, 2, 67),
        (8, 1, 13),  # 12.5 rounds half-up
        (200, 1, 1),  # 0.5 rounds half-up
        (201, 1, 0),
        (4, 4, 100),
    ],
)
def test_completion_percentage(total, completed, expected):
    assert completion_percentage(total, completed) == expected


def test_completion_percentage_is_clamped():
    assert completion_percentage(-1, 5) == 0
    assert completion_percentage(2, 5) == 100


def test_stats_expose_completion_percentage():
    stats = CollectionStats(total_items=4, completed_items=1)
    assert stats.completion_percentage == 25
    assert stats.model_dump()["completion_percentage"] == 25


def _collection(**kwargs) -> Collection:
    return Collection(
        owner_id=kwargs.pop("owner_id", uuid4()),
        name="Castles",
        type="research",
        category="heritage",
        **kwargs,
    )


def test_collection_defaults():
    c = _collection()
    assert c.visibility == "private"
    assert c.version == 1
    assert c.cover.color == "#3B82F6"
    assert c.stats.total_items == 0
    assert c.completion_percentage == 0
    assert not c.is_public


def test_role_of_and_find_item():
    editor = uuid4()
    item = CollectionItem(item_type="artifact", item_id="a-1", item_title="Helmet")
    c = _collection(
        collaborators={editor: Collaborator(user_id=editor, role="editor")},
        items=[item],
    )

    assert c.role_of(editor) == "editor"
    assert c.role_of(uuid4()) is None
    assert c.find_item(ItemRef("artifact", "a-1")) == item
    assert c.find_item(ItemRef("course", "a-1")) is None


def test_item_ref_identity():
    item = CollectionItem(item_type="quiz", item_id="q9", item_title="Quiz")
    assert item.ref == ItemRef("quiz", "q9")
    assert item.ref == ("quiz", "q9")
    assert item.progress.completed is False
