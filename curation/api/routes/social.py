"""Likes, comments and fork routes."""

from uuid import UUID

from fastapi import APIRouter, Depends

from curation.adapters.clock import SystemClock
from curation.adapters.sqlite.repos import SQLiteCollectionRepo
from curation.api.deps import get_actor_id, get_clock, get_policy, get_repo, get_rules
from curation.api.errors import raise_for_errors
from curation.api.schemas import (
    CollectionResponse,
    CommentCreateRequest,
    CommentListResponse,
    CommentResponse,
    ForkRequest,
    LikeResponse,
    PaginationResponse,
)
from curation.components.social import (
    AddCommentInput,
    ForkCollectionInput,
    ListCommentsInput,
    ToggleLikeInput,
    run_add_comment,
    run_fork,
    run_list_comments,
    run_toggle_like,
)
from curation.domain.policy import PolicyEngine
from curation.rules.models import Rules

router = APIRouter()


@router.post("/{collection_id}/like", response_model=LikeResponse)
def toggle_like(
    collection_id: UUID,
    actor_id: UUID = Depends(get_actor_id),
    repo: SQLiteCollectionRepo = Depends(get_repo),
    policy: PolicyEngine = Depends(get_policy),
    clock: SystemClock = Depends(get_clock),
) -> LikeResponse:
    """Like if not liked, unlike otherwise."""
    result = run_toggle_like(
        ToggleLikeInput(actor_id=actor_id, collection_id=collection_id),
        repo=repo,
        policy=policy,
        time=clock,
    )
    if not result.success:
        raise_for_errors(result.errors)
    return LikeResponse(liked=result.liked, like_count=result.like_count)


@router.post("/{collection_id}/comments", response_model=CommentResponse, status_code=201)
def add_comment(
    collection_id: UUID,
    data: CommentCreateRequest,
    actor_id: UUID = Depends(get_actor_id),
    repo: SQLiteCollectionRepo = Depends(get_repo),
    policy: PolicyEngine = Depends(get_policy),
    rules: Rules = Depends(get_rules),
    clock: SystemClock = Depends(get_clock),
) -> CommentResponse:
    result = run_add_comment(
        AddCommentInput(actor_id=actor_id, collection_id=collection_id, content=data.content),
        repo=repo,
        policy=policy,
        rules=rules,
        time=clock,
    )
    if not result.success:
        raise_for_errors(result.errors)

    assert result.comment is not None
    return CommentResponse.from_comment(result.comment)


@router.get("/{collection_id}/comments", response_model=CommentListResponse)
def list_comments(
    collection_id: UUID,
    limit: int | None = None,
    offset: int = 0,
    actor_id: UUID = Depends(get_actor_id),
    repo: SQLiteCollectionRepo = Depends(get_repo),
    policy: PolicyEngine = Depends(get_policy),
    rules: Rules = Depends(get_rules),
) -> CommentListResponse:
    result = run_list_comments(
        ListCommentsInput(
            actor_id=actor_id, collection_id=collection_id, limit=limit, offset=offset
        ),
        repo=repo,
        policy=policy,
        rules=rules,
    )
    if not result.success:
        raise_for_errors(result.errors)

    return CommentListResponse(
        comments=[CommentResponse.from_comment(c) for c in result.comments],
        pagination=PaginationResponse(
            total=result.total,
            limit=result.limit,
            offset=result.offset,
            has_next=result.offset + result.limit < result.total,
            has_prev=result.offset > 0,
        ),
    )


@router.post("/{collection_id}/fork", response_model=CollectionResponse, status_code=201)
def fork_collection(
    collection_id: UUID,
    data: ForkRequest | None = None,
    actor_id: UUID = Depends(get_actor_id),
    repo: SQLiteCollectionRepo = Depends(get_repo),
    policy: PolicyEngine = Depends(get_policy),
    rules: Rules = Depends(get_rules),
    clock: SystemClock = Depends(get_clock),
) -> CollectionResponse:
    """Copy a readable collection into a new private one owned by the caller."""
    result = run_fork(
        ForkCollectionInput(
            actor_id=actor_id,
            collection_id=collection_id,
            new_name=data.name if data else None,
        ),
        repo=repo,
        policy=policy,
        rules=rules,
        time=clock,
    )
    if not result.success:
        raise_for_errors(result.errors)

    assert result.collection is not None
    return CollectionResponse.from_collection(result.collection)
