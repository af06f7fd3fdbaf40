"""Collaborator management routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response

from curation.adapters.clock import SystemClock
from curation.adapters.sqlite.repos import SQLiteCollectionRepo
from curation.api.deps import get_actor_id, get_clock, get_policy, get_repo
from curation.api.errors import raise_for_errors
from curation.api.schemas import (
    CollaboratorAddRequest,
    CollaboratorListResponse,
    CollaboratorResponse,
)
from curation.components.collab import (
    AddCollaboratorInput,
    ListCollaboratorsInput,
    RemoveCollaboratorInput,
    run_add_collaborator,
    run_list_collaborators,
    run_remove_collaborator,
)
from curation.domain.policy import PolicyEngine

router = APIRouter()


@router.get("/{collection_id}/collaborators", response_model=CollaboratorListResponse)
def list_collaborators(
    collection_id: UUID,
    actor_id: UUID = Depends(get_actor_id),
    repo: SQLiteCollectionRepo = Depends(get_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> CollaboratorListResponse:
    result = run_list_collaborators(
        ListCollaboratorsInput(actor_id=actor_id, collection_id=collection_id),
        repo=repo,
        policy=policy,
    )
    if not result.success:
        raise_for_errors(result.errors)

    assert result.owner_id is not None
    return CollaboratorListResponse(
        owner_id=result.owner_id,
        collaborators=[CollaboratorResponse.from_collaborator(c) for c in result.collaborators],
    )


@router.post(
    "/{collection_id}/collaborators", response_model=CollaboratorResponse, status_code=201
)
def add_collaborator(
    collection_id: UUID,
    data: CollaboratorAddRequest,
    actor_id: UUID = Depends(get_actor_id),
    repo: SQLiteCollectionRepo = Depends(get_repo),
    policy: PolicyEngine = Depends(get_policy),
    clock: SystemClock = Depends(get_clock),
) -> CollaboratorResponse:
    result = run_add_collaborator(
        AddCollaboratorInput(
            actor_id=actor_id,
            collection_id=collection_id,
            target_user_id=data.user_id,
            role=data.role,
        ),
        repo=repo,
        policy=policy,
        time=clock,
    )
    if not result.success:
        raise_for_errors(result.errors)

    assert result.collaborator is not None
    return CollaboratorResponse.from_collaborator(result.collaborator)


@router.delete("/{collection_id}/collaborators/{user_id}", status_code=204)
def remove_collaborator(
    collection_id: UUID,
    user_id: UUID,
    actor_id: UUID = Depends(get_actor_id),
    repo: SQLiteCollectionRepo = Depends(get_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> Response:
    result = run_remove_collaborator(
        RemoveCollaboratorInput(
            actor_id=actor_id, collection_id=collection_id, target_user_id=user_id
        ),
        repo=repo,
        policy=policy,
    )
    if not result.success:
        raise_for_errors(result.errors)
    return Response(status_code=204)
