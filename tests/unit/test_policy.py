from uuid import uuid4

import pytest

from curation.domain.entities import Collaborator, Collection, ShareSettings
from curation.domain.policy import (
    COLLABORATORS_MANAGE,
    COMMENTS_ADD,
    DELETE,
    FORK,
    ITEMS_ADD,
    ITEMS_PROGRESS,
    ITEMS_REORDER,
    LIKES_TOGGLE,
    READ,
    UPDATE,
    PolicyEngine,
    WriteGrant,
)
from curation.rules.models import AccessRules

OWNER = uuid4()
VIEWER = uuid4()
EDITOR = uuid4()
ADMIN = uuid4()
ADMIN_2 = uuid4()
STRANGER = uuid4()


@pytest.fixture
def engine(rules):
    return PolicyEngine(rules.access)


def _collection(visibility="private", **kwargs) -> Collection:
    return Collection(
        owner_id=OWNER,
        name="Medieval Manuscripts",
        type="research",
        category="history",
        visibility=visibility,
        collaborators={
            VIEWER: Collaborator(user_id=VIEWER, role="viewer"),
            EDITOR: Collaborator(user_id=EDITOR, role="editor"),
            ADMIN: Collaborator(user_id=ADMIN, role="admin"),
            ADMIN_2: Collaborator(user_id=ADMIN_2, role="admin"),
        },
        **kwargs,
    )


@pytest.mark.parametrize(
    "action",
    [READ, UPDATE, DELETE, FORK, ITEMS_ADD, ITEMS_REORDER, COMMENTS_ADD, COLLABORATORS_MANAGE],
)
def test_owner_may_do_everything(engine, action):
    assert engine.check_permission(OWNER, _collection(), action) is True


def test_viewer_permissions(engine):
    c = _collection()
    assert engine.check_permission(VIEWER, c, READ)
    assert engine.check_permission(VIEWER, c, FORK)
    assert engine.check_permission(VIEWER, c, LIKES_TOGGLE)
    assert not engine.check_permission(VIEWER, c, ITEMS_ADD)
    assert not engine.check_permission(VIEWER, c, COMMENTS_ADD)


def test_editor_permissions(engine):
    c = _collection()
    assert engine.check_permission(EDITOR, c, ITEMS_ADD)
    assert engine.check_permission(EDITOR, c, ITEMS_PROGRESS)
    assert engine.check_permission(EDITOR, c, COMMENTS_ADD)
    assert not engine.check_permission(EDITOR, c, COLLABORATORS_MANAGE)


def test_owner_only_actions_never_granted_to_collaborators(engine):
    c = _collection()
    for actor in (VIEWER, EDITOR, ADMIN):
        assert not engine.check_permission(actor, c, UPDATE)
        assert not engine.check_permission(actor, c, DELETE)
    assert engine.check_permission(ADMIN, c, COLLABORATORS_MANAGE)


def test_stranger_on_private_collection(engine):
    c = _collection()
    assert not engine.can_read(STRANGER, c)
    assert not engine.check_permission(STRANGER, c, FORK)
    assert not engine.check_permission(None, c, READ)


def test_stranger_on_public_collection(engine):
    c = _collection(visibility="public")
    for action in (READ, FORK, LIKES_TOGGLE, COMMENTS_ADD):
        assert engine.check_permission(STRANGER, c, action)
    assert engine.can_read(None, c)
    assert not engine.check_permission(STRANGER, c, ITEMS_ADD)
    assert not engine.check_permission(STRANGER, c, UPDATE)


def test_can_grant_role(engine):
    c = _collection()
    assert engine.can_grant_role(OWNER, c, "admin")
    assert not engine.can_grant_role(ADMIN, c, "admin")
    assert engine.can_grant_role(ADMIN, c, "editor")
    assert not engine.can_grant_role(EDITOR, c, "viewer")


def test_can_remove_collaborator(engine):
    c = _collection()
    assert not engine.can_remove_collaborator(OWNER, c, OWNER)
    assert not engine.can_remove_collaborator(ADMIN, c, OWNER)
    assert engine.can_remove_collaborator(OWNER, c, ADMIN)
    assert engine.can_remove_collaborator(ADMIN, c, EDITOR)
    assert not engine.can_remove_collaborator(ADMIN, c, ADMIN_2)
    assert not engine.can_remove_collaborator(EDITOR, c, VIEWER)


def test_decisions_follow_current_state(engine):
    c = _collection()
    assert engine.check_permission(EDITOR, c, ITEMS_ADD)
    revoked = c.model_copy(update={"collaborators": {}})
    assert not engine.check_permission(EDITOR, revoked, ITEMS_ADD)


def test_scoped_wildcards():
    engine = PolicyEngine(
        AccessRules(roles={"curator": ["items:*"], "root": ["*"]}, public_permissions=[])
    )
    assert engine.role_allows("curator", "items:add")
    assert not engine.role_allows("curator", "comments:add")
    assert engine.role_allows("root", "anything:really")
    assert not engine.role_allows("unknown", "items:add")


def test_sharing_gates_bind_everyone_but_owner(engine):
    c = _collection(
        "public",
        share_settings=ShareSettings(allow_comments=False, allow_likes=False, allow_forks=False),
    )
    for action in (COMMENTS_ADD, LIKES_TOGGLE, FORK):
        assert engine.sharing_allows(OWNER, c, action)
        assert not engine.sharing_allows(ADMIN, c, action)
        assert not engine.sharing_allows(STRANGER, c, action)
    # Actions without a share setting are left to check_permission
    assert engine.sharing_allows(STRANGER, c, ITEMS_ADD)

    open_collection = _collection("public")
    assert engine.sharing_allows(STRANGER, open_collection, COMMENTS_ADD)


def test_write_grant(engine):
    private = _collection()
    assert engine.write_grant(OWNER, private, ITEMS_ADD) is None

    grant = engine.write_grant(EDITOR, private, ITEMS_ADD)
    assert grant == WriteGrant(user_id=EDITOR, roles=frozenset({"editor", "admin"}))
    assert engine.write_grant(ADMIN, private, COLLABORATORS_MANAGE).roles == frozenset({"admin"})

    # Rights that come from visibility do not depend on a role
    public = _collection("public")
    assert engine.write_grant(STRANGER, public, COMMENTS_ADD) is None
    assert engine.write_grant(EDITOR, public, ITEMS_PROGRESS).roles == frozenset(
        {"editor", "admin"}
    )
