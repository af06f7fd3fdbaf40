from uuid import uuid4

import pytest

from curation.components.collab import AddCollaboratorInput, run_add_collaborator
from curation.components.items import (
    AddItemInput,
    RemoveItemInput,
    ReorderItemsInput,
    UpdateProgressInput,
    run_add_item,
    run_remove_item,
    run_reorder,
    run_update_progress,
)
from curation.domain.entities import ItemRef

A1 = ItemRef("artifact", "A1")


@pytest.fixture
def add(repo, policy, rules, clock):
    def _add(actor, collection_id, item_type="artifact", item_id="A1", title="Amphora"):
        return run_add_item(
            AddItemInput(actor, collection_id, item_type, item_id, title),
            repo=repo,
            policy=policy,
            rules=rules,
            time=clock,
        )

    return _add


def test_add_then_complete_scenario(repo, policy, clock, make_collection, owner_id, add):
    c = make_collection()

    added = add(owner_id, c.id)
    assert added.success
    assert added.item.order == 0
    assert added.stats.total_items == 1
    assert added.stats.completion_percentage == 0

    done = run_update_progress(
        UpdateProgressInput(owner_id, c.id, A1, True), repo=repo, policy=policy, time=clock
    )
    assert done.success
    assert done.item.progress.completed
    assert done.item.progress.completed_at is not None
    assert done.stats.completed_items == 1
    assert done.stats.completion_percentage == 100


def test_add_duplicate_conflicts(repo, make_collection, owner_id, add):
    c = make_collection()
    assert add(owner_id, c.id).success

    again = add(owner_id, c.id, title="Different title")
    assert again.error_kind == "conflict"
    assert [e.code for e in again.errors] == ["item_exists"]

    after = repo.get_by_id(c.id)
    assert after.stats.total_items == 1
    assert after.items[0].item_title == "Amphora"


def test_add_validates_input(make_collection, owner_id, add):
    c = make_collection()
    result = add(owner_id, c.id, item_type="podcast", item_id=" ", title="")
    assert result.error_kind == "validation"
    assert {e.code for e in result.errors} == {
        "item_type_invalid",
        "item_id_required",
        "item_title_required",
    }


def test_add_permissions(repo, policy, clock, make_collection, owner_id, add):
    c = make_collection(visibility="public")
    viewer, editor = uuid4(), uuid4()
    for user, role in ((viewer, "viewer"), (editor, "editor")):
        run_add_collaborator(
            AddCollaboratorInput(owner_id, c.id, user, role), repo=repo, policy=policy, time=clock
        )

    assert add(viewer, c.id).error_kind == "permission_denied"
    assert add(uuid4(), c.id).error_kind == "permission_denied"
    assert add(editor, c.id).success

    private = make_collection("Private")
    assert add(uuid4(), private.id).error_kind == "not_found"


def test_add_to_missing_collection(owner_id, add):
    assert add(owner_id, uuid4()).error_kind == "not_found"


def test_remove_item(repo, policy, clock, make_collection, owner_id, add):
    c = make_collection()
    for item_id in ("A1", "A2", "A3"):
        add(owner_id, c.id, item_id=item_id)
    run_update_progress(
        UpdateProgressInput(owner_id, c.id, A1, True), repo=repo, policy=policy, time=clock
    )

    removed = run_remove_item(
        RemoveItemInput(owner_id, c.id, A1), repo=repo, policy=policy, time=clock
    )
    assert removed.success
    assert removed.item.item_id == "A1"
    assert removed.stats.total_items == 2
    assert removed.stats.completed_items == 0

    after = repo.get_by_id(c.id)
    assert [(i.item_id, i.order) for i in after.items] == [("A2", 0), ("A3", 1)]

    missing = run_remove_item(
        RemoveItemInput(owner_id, c.id, A1), repo=repo, policy=policy, time=clock
    )
    assert missing.error_kind == "not_found"
    assert [e.code for e in missing.errors] == ["item_not_found"]


def test_progress_is_idempotent(repo, policy, clock, make_collection, owner_id, add):
    c = make_collection()
    add(owner_id, c.id)

    first = run_update_progress(
        UpdateProgressInput(owner_id, c.id, A1, True), repo=repo, policy=policy, time=clock
    )
    second = run_update_progress(
        UpdateProgressInput(owner_id, c.id, A1, True), repo=repo, policy=policy, time=clock
    )
    assert second.success
    assert second.stats.completed_items == 1
    assert second.item.progress.completed_at == first.item.progress.completed_at

    undone = run_update_progress(
        UpdateProgressInput(owner_id, c.id, A1, False), repo=repo, policy=policy, time=clock
    )
    assert undone.stats.completed_items == 0
    assert undone.item.progress.completed_at is None


def test_progress_on_missing_item(policy, repo, clock, make_collection, owner_id):
    c = make_collection()
    result = run_update_progress(
        UpdateProgressInput(owner_id, c.id, A1, True), repo=repo, policy=policy, time=clock
    )
    assert result.error_kind == "not_found"
    assert repo.get_by_id(c.id).stats.completed_items == 0


def test_progress_does_not_bump_version(repo, policy, clock, make_collection, owner_id, add):
    c = make_collection()
    add(owner_id, c.id)
    version = repo.get_by_id(c.id).version

    run_update_progress(
        UpdateProgressInput(owner_id, c.id, A1, True), repo=repo, policy=policy, time=clock
    )
    assert repo.get_by_id(c.id).version == version


def _refs(*ids):
    return tuple(ItemRef("artifact", i) for i in ids)


def test_reorder(repo, policy, clock, make_collection, owner_id, add):
    c = make_collection()
    for item_id in ("A1", "A2", "A3"):
        add(owner_id, c.id, item_id=item_id)

    result = run_reorder(
        ReorderItemsInput(owner_id, c.id, _refs("A3", "A1", "A2")),
        repo=repo,
        policy=policy,
        time=clock,
    )
    assert result.success
    assert [(i.item_id, i.order) for i in result.items] == [("A3", 0), ("A1", 1), ("A2", 2)]
    assert [i.item_id for i in repo.get_by_id(c.id).items] == ["A3", "A1", "A2"]
    assert result.version == repo.get_by_id(c.id).version


@pytest.mark.parametrize(
    ("order", "code"),
    [
        (("A1", "A2"), "order_length_mismatch"),
        (("A1", "A2", "A3", "A4"), "order_length_mismatch"),
        (("A1", "A2", "A9"), "order_mismatch"),
        (("A1", "A1", "A2"), "order_duplicate"),
    ],
)
def test_reorder_rejects_non_permutations(
    repo, policy, clock, make_collection, owner_id, add, order, code
):
    c = make_collection()
    for item_id in ("A1", "A2", "A3"):
        add(owner_id, c.id, item_id=item_id)
    before = repo.get_by_id(c.id)

    result = run_reorder(
        ReorderItemsInput(owner_id, c.id, _refs(*order)), repo=repo, policy=policy, time=clock
    )
    assert result.error_kind == "validation"
    assert code in [e.code for e in result.errors]

    after = repo.get_by_id(c.id)
    assert [i.item_id for i in after.items] == ["A1", "A2", "A3"]
    assert after.version == before.version


def test_reorder_with_stale_version(repo, policy, clock, make_collection, owner_id, add):
    c = make_collection()
    for item_id in ("A1", "A2"):
        add(owner_id, c.id, item_id=item_id)
    seen = repo.get_by_id(c.id).version
    add(owner_id, c.id, item_id="A3")

    result = run_reorder(
        ReorderItemsInput(owner_id, c.id, _refs("A3", "A2", "A1"), expected_version=seen),
        repo=repo,
        policy=policy,
        time=clock,
    )
    assert result.error_kind == "conflict"
    assert [i.item_id for i in repo.get_by_id(c.id).items] == ["A1", "A2", "A3"]


def test_reorder_requires_permission(repo, policy, clock, make_collection, owner_id, add):
    c = make_collection(visibility="public")
    add(owner_id, c.id)
    result = run_reorder(
        ReorderItemsInput(uuid4(), c.id, _refs("A1")), repo=repo, policy=policy, time=clock
    )
    assert result.error_kind == "permission_denied"
