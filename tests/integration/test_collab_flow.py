from uuid import uuid4

import pytest

from curation.adapters.sqlite.repos import SQLiteCollectionRepo
from curation.components.collab import (
    AddCollaboratorInput,
    ListCollaboratorsInput,
    RemoveCollaboratorInput,
    run,
    run_add_collaborator,
    run_list_collaborators,
    run_remove_collaborator,
)
from curation.components.collections import GetCollectionInput, run_get
from curation.components.items import AddItemInput, run_add_item


@pytest.fixture
def grant(repo, policy, clock):
    def _grant(actor, collection_id, target, role):
        return run_add_collaborator(
            AddCollaboratorInput(actor, collection_id, target, role),
            repo=repo,
            policy=policy,
            time=clock,
        )

    return _grant


@pytest.fixture
def revoke(repo, policy):
    def _revoke(actor, collection_id, target):
        return run_remove_collaborator(
            RemoveCollaboratorInput(actor, collection_id, target), repo=repo, policy=policy
        )

    return _revoke


def test_collaboration_grant_flow(repo, policy, rules, clock, make_collection, owner_id, grant):
    c = make_collection("Secret Plans")
    editor = uuid4()

    # Not visible before the grant
    before = run_get(GetCollectionInput(editor, c.id), repo=repo, policy=policy)
    assert before.error_kind == "not_found"

    result = grant(owner_id, c.id, editor, "editor")
    assert result.success
    assert result.collaborator.role == "editor"
    assert result.collaborator.added_by == owner_id

    after = run_get(GetCollectionInput(editor, c.id), repo=repo, policy=policy)
    assert after.success
    assert after.collection.role_of(editor) == "editor"

    added = run_add_item(
        AddItemInput(editor, c.id, "lesson", "L1", "Lesson one"),
        repo=repo,
        policy=policy,
        rules=rules,
        time=clock,
    )
    assert added.success


def test_add_rejects_owner_and_duplicates(make_collection, owner_id, grant):
    c = make_collection()
    user = uuid4()

    as_owner = grant(owner_id, c.id, owner_id, "viewer")
    assert as_owner.error_kind == "conflict"
    assert [e.code for e in as_owner.errors] == ["target_is_owner"]

    assert grant(owner_id, c.id, user, "viewer").success
    duplicate = grant(owner_id, c.id, user, "editor")
    assert duplicate.error_kind == "conflict"
    assert [e.code for e in duplicate.errors] == ["collaborator_exists"]


def test_add_validates_role(make_collection, owner_id, grant):
    c = make_collection()
    result = grant(owner_id, c.id, uuid4(), "owner")
    assert result.error_kind == "validation"
    assert [e.code for e in result.errors] == ["role_invalid"]


def test_only_owner_grants_admin(make_collection, owner_id, grant):
    c = make_collection()
    admin, editor = uuid4(), uuid4()
    assert grant(owner_id, c.id, admin, "admin").success

    assert grant(admin, c.id, uuid4(), "admin").error_kind == "permission_denied"
    assert grant(admin, c.id, uuid4(), "editor").success

    assert grant(owner_id, c.id, editor, "editor").success
    assert grant(editor, c.id, uuid4(), "viewer").error_kind == "permission_denied"


def test_owner_cannot_remove_themself(make_collection, owner_id, revoke):
    c = make_collection()
    result = revoke(owner_id, c.id, owner_id)
    assert result.error_kind == "permission_denied"


def test_remove_rules(repo, make_collection, owner_id, grant, revoke):
    c = make_collection()
    admin, admin_2, editor = uuid4(), uuid4(), uuid4()
    grant(owner_id, c.id, admin, "admin")
    grant(owner_id, c.id, admin_2, "admin")
    grant(owner_id, c.id, editor, "editor")

    assert revoke(admin, c.id, admin_2).error_kind == "permission_denied"
    assert revoke(editor, c.id, admin).error_kind == "permission_denied"
    assert revoke(admin, c.id, owner_id).error_kind == "permission_denied"

    assert revoke(admin, c.id, editor).success
    assert revoke(owner_id, c.id, admin_2).success

    missing = revoke(owner_id, c.id, editor)
    assert missing.error_kind == "not_found"

    assert set(repo.get_by_id(c.id).collaborators) == {admin}


def test_revoked_collaborator_loses_access(repo, policy, make_collection, owner_id, grant, revoke):
    c = make_collection()
    viewer = uuid4()
    grant(owner_id, c.id, viewer, "viewer")
    assert run_get(GetCollectionInput(viewer, c.id), repo=repo, policy=policy).success

    revoke(owner_id, c.id, viewer)
    assert run_get(GetCollectionInput(viewer, c.id), repo=repo, policy=policy).error_kind == (
        "not_found"
    )


def test_role_change_is_remove_then_add(repo, make_collection, owner_id, grant, revoke):
    c = make_collection()
    user = uuid4()
    grant(owner_id, c.id, user, "viewer")
    revoke(owner_id, c.id, user)
    assert grant(owner_id, c.id, user, "editor").success
    assert repo.get_by_id(c.id).role_of(user) == "editor"


def test_list_collaborators(repo, policy, clock, make_collection, owner_id, grant):
    c = make_collection()
    first, second = uuid4(), uuid4()
    grant(owner_id, c.id, first, "viewer")
    grant(owner_id, c.id, second, "editor")

    listed = run_list_collaborators(
        ListCollaboratorsInput(first, c.id), repo=repo, policy=policy
    )
    assert listed.success
    assert listed.owner_id == owner_id
    assert [x.user_id for x in listed.collaborators] == [first, second]

    outsider = run_list_collaborators(
        ListCollaboratorsInput(uuid4(), c.id), repo=repo, policy=policy
    )
    assert outsider.error_kind == "not_found"

    via_run = run(ListCollaboratorsInput(owner_id, c.id), repo=repo, policy=policy)
    assert len(via_run.collaborators) == 2


def test_collaborators_disabled(repo, policy, clock, make_collection, owner_id, grant):
    c = make_collection(allow_collaborators=False)

    result = grant(owner_id, c.id, uuid4(), "viewer")
    assert result.error_kind == "permission_denied"
    assert [e.code for e in result.errors] == ["collaborators_disabled"]
    assert repo.get_by_id(c.id).collaborators == {}


class RevokeAfterLoadRepo(SQLiteCollectionRepo):
    """Drops one collaborator right after each load, as a concurrent revoke would."""

    def __init__(self, db_path, revoked_user):
        super().__init__(db_path)
        self.revoked_user = revoked_user

    def get_by_id(self, collection_id, include_items=True):
        loaded = super().get_by_id(collection_id, include_items)
        if loaded is not None and self.revoked_user in loaded.collaborators:
            super().remove_collaborator(collection_id, self.revoked_user)
        return loaded


def test_write_after_concurrent_revoke_is_refused(
    repo, db_path, policy, rules, clock, make_collection, owner_id, grant
):
    c = make_collection()
    editor = uuid4()
    grant(owner_id, c.id, editor, "editor")

    result = run_add_item(
        AddItemInput(editor, c.id, "lesson", "L1", "Lesson one"),
        repo=RevokeAfterLoadRepo(db_path, editor),
        policy=policy,
        rules=rules,
        time=clock,
    )

    assert result.error_kind == "permission_denied"
    assert [e.code for e in result.errors] == ["access_revoked"]
    after = repo.get_by_id(c.id)
    assert after.stats.total_items == 0
    assert after.collaborators == {}


def test_owner_writes_skip_collaborator_recheck(
    db_path, policy, rules, clock, make_collection, owner_id
):
    c = make_collection()
    result = run_add_item(
        AddItemInput(owner_id, c.id, "lesson", "L1", "Lesson one"),
        repo=RevokeAfterLoadRepo(db_path, uuid4()),
        policy=policy,
        rules=rules,
        time=clock,
    )
    assert result.success
