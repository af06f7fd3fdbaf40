"""
Shared access-gate plumbing for collection components.

Every mutating entry point loads the collection fresh, asks the PolicyEngine
for the action, and only then touches storage. Storage exceptions are mapped
to typed CollectionError values here so components stay free of adapter
details.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from curation.domain.entities import Collection
from curation.domain.errors import (
    CollectionError,
    conflict,
    invalid,
    not_found,
    permission_denied,
    unavailable,
)
from curation.domain.policy import READ, PolicyEngine
from curation.ports.storage import (
    AccessRevokedError,
    ConstraintViolationError,
    DuplicateKeyError,
    RecordNotFoundError,
    StorageError,
    StorageUnavailableError,
    VersionConflictError,
)


class CollectionReaderPort(Protocol):
    def get_by_id(self, collection_id: UUID, include_items: bool = True) -> Collection | None: ...


def load_for_action(
    repo: CollectionReaderPort,
    policy: PolicyEngine,
    actor_id: UUID,
    collection_id: UUID,
    action: str,
    include_items: bool = True,
) -> tuple[Collection | None, list[CollectionError]]:
    """
    Load a collection and check the actor may perform `action` on it.

    Actors without read access get not_found so private collections do not
    leak their existence; readers lacking the specific action get
    permission_denied.
    """
    try:
        collection = repo.get_by_id(collection_id, include_items=include_items)
    except StorageError as e:
        return None, [storage_error(e)]

    if collection is None or not policy.can_read(actor_id, collection):
        return None, [not_found()]

    if not policy.check_permission(actor_id, collection, action):
        return None, [permission_denied(f"Not allowed to perform {action} on this collection")]

    return collection, []


def load_readable(
    repo: CollectionReaderPort,
    policy: PolicyEngine,
    actor_id: UUID,
    collection_id: UUID,
    include_items: bool = True,
) -> tuple[Collection | None, list[CollectionError]]:
    return load_for_action(repo, policy, actor_id, collection_id, READ, include_items)


def storage_error(exc: StorageError) -> CollectionError:
    """Translate a storage exception into a typed error."""
    if isinstance(exc, RecordNotFoundError):
        return not_found(f"{exc.what} not found", code=f"{exc.what.lower()}_not_found")
    if isinstance(exc, DuplicateKeyError):
        return conflict(f"{exc.what} already exists", code=f"{exc.what.lower()}_exists")
    if isinstance(exc, VersionConflictError):
        return conflict(
            "Collection was modified by someone else; refetch and retry",
            code="version_conflict",
            field="version",
        )
    if isinstance(exc, AccessRevokedError):
        return permission_denied(
            "Access to this collection was revoked", code="access_revoked"
        )
    if isinstance(exc, ConstraintViolationError):
        return invalid("constraint_violation", f"Rejected by storage constraints: {exc}")
    if isinstance(exc, StorageUnavailableError):
        return unavailable(str(exc) or "Storage unavailable")
    return unavailable(f"Storage error: {exc}")
