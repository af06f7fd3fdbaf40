"""
Collab component - Collaborator management for collections.

Grants are keyed by (collection, user) and inserted only if absent; there is
no upsert, so a role change is a remove followed by an add. Only the owner
hands out or takes away admin. New grants need the collection's
`allow_collaborators` switch on; existing ones can always be removed.
"""

from __future__ import annotations

from curation.components._guard import load_for_action, load_readable, storage_error
from curation.domain.entities import Collaborator
from curation.domain.errors import conflict, not_found, permission_denied
from curation.domain.policy import COLLABORATORS_MANAGE, PolicyEngine
from curation.domain.registry import validate_role
from curation.ports.storage import StorageError

from .models import (
    AddCollaboratorInput,
    CollabListOutput,
    CollabOutput,
    ListCollaboratorsInput,
    RemoveCollaboratorInput,
)
from .ports import CollabRepoPort, TimePort


def run_add_collaborator(
    inp: AddCollaboratorInput,
    *,
    repo: CollabRepoPort,
    policy: PolicyEngine,
    time: TimePort,
) -> CollabOutput:
    errors = validate_role(inp.role)
    if errors:
        return CollabOutput(errors=errors, success=False)

    collection, errors = load_for_action(
        repo, policy, inp.actor_id, inp.collection_id, COLLABORATORS_MANAGE, include_items=False
    )
    if collection is None:
        return CollabOutput(errors=errors, success=False)

    if not collection.allow_collaborators:
        return CollabOutput(
            errors=[
                permission_denied(
                    "Collaboration is turned off for this collection",
                    code="collaborators_disabled",
                )
            ],
            success=False,
        )

    if not policy.can_grant_role(inp.actor_id, collection, inp.role):  # type: ignore[arg-type]
        return CollabOutput(
            errors=[permission_denied("Only the owner can grant admin", code="admin_grant_denied")],
            success=False,
        )

    if inp.target_user_id == collection.owner_id:
        return CollabOutput(
            errors=[
                conflict(
                    "The owner cannot be added as a collaborator",
                    code="target_is_owner",
                    field="target_user_id",
                )
            ],
            success=False,
        )

    collaborator = Collaborator(
        user_id=inp.target_user_id,
        role=inp.role,  # type: ignore[arg-type]
        added_at=time.now_utc(),
        added_by=inp.actor_id,
    )

    try:
        saved = repo.add_collaborator(
            inp.collection_id,
            collaborator,
            grant=policy.write_grant(inp.actor_id, collection, COLLABORATORS_MANAGE),
        )
    except StorageError as e:
        return CollabOutput(errors=[storage_error(e)], success=False)

    return CollabOutput(collaborator=saved)


def run_remove_collaborator(
    inp: RemoveCollaboratorInput,
    *,
    repo: CollabRepoPort,
    policy: PolicyEngine,
) -> CollabOutput:
    collection, errors = load_for_action(
        repo, policy, inp.actor_id, inp.collection_id, COLLABORATORS_MANAGE, include_items=False
    )
    if collection is None:
        return CollabOutput(errors=errors, success=False)

    if inp.target_user_id == collection.owner_id:
        return CollabOutput(
            errors=[permission_denied("The owner cannot be removed", code="target_is_owner")],
            success=False,
        )

    existing = collection.collaborators.get(inp.target_user_id)
    if existing is None:
        return CollabOutput(
            errors=[not_found("Collaborator not found", code="collaborator_not_found")],
            success=False,
        )

    if not policy.can_remove_collaborator(inp.actor_id, collection, inp.target_user_id):
        return CollabOutput(
            errors=[
                permission_denied("Only the owner can remove an admin", code="admin_remove_denied")
            ],
            success=False,
        )

    try:
        repo.remove_collaborator(
            inp.collection_id,
            inp.target_user_id,
            grant=policy.write_grant(inp.actor_id, collection, COLLABORATORS_MANAGE),
        )
    except StorageError as e:
        return CollabOutput(errors=[storage_error(e)], success=False)

    return CollabOutput(collaborator=existing)


def run_list_collaborators(
    inp: ListCollaboratorsInput,
    *,
    repo: CollabRepoPort,
    policy: PolicyEngine,
) -> CollabListOutput:
    collection, errors = load_readable(
        repo, policy, inp.actor_id, inp.collection_id, include_items=False
    )
    if collection is None:
        return CollabListOutput(errors=errors, success=False)

    collaborators = sorted(collection.collaborators.values(), key=lambda c: c.added_at)
    return CollabListOutput(owner_id=collection.owner_id, collaborators=collaborators)


def run(
    inp: AddCollaboratorInput | RemoveCollaboratorInput | ListCollaboratorsInput,
    *,
    repo: CollabRepoPort,
    policy: PolicyEngine,
    time: TimePort | None = None,
) -> CollabOutput | CollabListOutput:
    if isinstance(inp, AddCollaboratorInput):
        assert time
        return run_add_collaborator(inp, repo=repo, policy=policy, time=time)

    elif isinstance(inp, RemoveCollaboratorInput):
        return run_remove_collaborator(inp, repo=repo, policy=policy)

    elif isinstance(inp, ListCollaboratorsInput):
        return run_list_collaborators(inp, repo=repo, policy=policy)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
