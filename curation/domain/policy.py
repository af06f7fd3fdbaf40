from dataclasses import dataclass
from uuid import UUID

from curation.domain.entities import CollaboratorRole, Collection
from curation.rules.models import AccessRules

READ = "collection:read"
UPDATE = "collection:update"
DELETE = "collection:delete"
FORK = "collection:fork"
ITEMS_ADD = "items:add"
ITEMS_REMOVE = "items:remove"
ITEMS_REORDER = "items:reorder"
ITEMS_PROGRESS = "items:progress"
LIKES_TOGGLE = "likes:toggle"
COMMENTS_ADD = "comments:add"
COLLABORATORS_MANAGE = "collaborators:manage"

# Share settings that switch off an action for everyone but the owner
SHARING_GATES: dict[str, str] = {
    COMMENTS_ADD: "allow_comments",
    LIKES_TOGGLE: "allow_likes",
    FORK: "allow_forks",
}


@dataclass(frozen=True)
class WriteGrant:
    """
    Collaborator standing behind a write.

    Storage re-checks it inside the write transaction so a role revoked after
    the permission check cannot land one more write.
    """

    user_id: UUID
    roles: frozenset[str]


class PolicyEngine:
    """
    Access gate for collection operations.

    Stateless: every decision is derived from the collection passed in and the
    role matrix from rules, so callers must hand it freshly loaded state.
    """

    def __init__(self, access: AccessRules):
        self.access = access

    def check_permission(self, actor_id: UUID | None, collection: Collection, action: str) -> bool:
        """
        Check whether the actor may perform the action on the collection.

        Order of precedence:
        1. Owner (implicit, all actions)
        2. Public permissions (public collections only)
        3. Collaborator role
        """
        if actor_id is not None and collection.owner_id == actor_id:
            return True

        if action in self.access.owner_only:
            return False

        if collection.is_public and action in self.access.public_permissions:
            return True

        if actor_id is None:
            return False

        role = collection.role_of(actor_id)
        if role is None:
            return False
        return self.role_allows(role, action)

    def role_allows(self, role: str, action: str) -> bool:
        allowed_actions = self.access.roles.get(role, [])
        if "*" in allowed_actions or action in allowed_actions:
            return True
        # Scoped wildcards, e.g. "items:*" matches "items:add"
        if ":" in action:
            scope = action.split(":")[0]
            if f"{scope}:*" in allowed_actions:
                return True
        return False

    def can_read(self, actor_id: UUID | None, collection: Collection) -> bool:
        return self.check_permission(actor_id, collection, READ)

    def can_grant_role(self, actor_id: UUID, collection: Collection, role: CollaboratorRole) -> bool:
        # Only the owner hands out admin
        if role == "admin":
            return collection.owner_id == actor_id
        return self.check_permission(actor_id, collection, COLLABORATORS_MANAGE)

    def can_remove_collaborator(
        self, actor_id: UUID, collection: Collection, target_user_id: UUID
    ) -> bool:
        if target_user_id == collection.owner_id:
            return False
        if collection.owner_id == actor_id:
            return True
        if not self.check_permission(actor_id, collection, COLLABORATORS_MANAGE):
            return False
        # Admins cannot remove other admins
        return collection.role_of(target_user_id) != "admin"

    def sharing_allows(self, actor_id: UUID | None, collection: Collection, action: str) -> bool:
        """Apply the collection's share settings on top of check_permission."""
        if actor_id is not None and collection.owner_id == actor_id:
            return True
        setting = SHARING_GATES.get(action)
        if setting is None:
            return True
        return bool(getattr(collection.share_settings, setting))

    def write_grant(
        self, actor_id: UUID, collection: Collection, action: str
    ) -> WriteGrant | None:
        """
        Grant to re-check at write time, or None when the right does not hang
        on a collaborator role (owner, or a public permission).
        """
        if collection.owner_id == actor_id:
            return None
        if collection.is_public and action in self.access.public_permissions:
            return None
        roles = frozenset(role for role in self.access.roles if self.role_allows(role, action))
        return WriteGrant(user_id=actor_id, roles=roles)
