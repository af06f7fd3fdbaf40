"""Collection lifecycle routes."""

from dataclasses import asdict
from uuid import UUID

from fastapi import APIRouter, Depends, Response

from curation.adapters.clock import SystemClock
from curation.adapters.sqlite.repos import SQLiteCollectionRepo
from curation.api.deps import get_actor_id, get_clock, get_policy, get_repo, get_rules
from curation.api.errors import raise_for_errors
from curation.api.schemas import (
    CollectionCreateRequest,
    CollectionListResponse,
    CollectionResponse,
    CollectionUpdateRequest,
    OwnerStatsResponse,
    PaginationResponse,
)
from curation.components.collections import (
    CollectionListOutput,
    CreateCollectionInput,
    DeleteCollectionInput,
    GetCollectionInput,
    ListCollectionsInput,
    ListPublicCollectionsInput,
    UpdateCollectionInput,
    run_create,
    run_delete,
    run_get,
    run_list,
    run_list_public,
    run_update,
)
from curation.domain.policy import PolicyEngine
from curation.rules.models import Rules

router = APIRouter()


def _list_response(result: CollectionListOutput) -> CollectionListResponse:
    assert result.pagination is not None
    page = result.pagination
    return CollectionListResponse(
        collections=[CollectionResponse.from_collection(c) for c in result.collections],
        pagination=PaginationResponse(
            total=page.total,
            limit=page.limit,
            offset=page.offset,
            has_next=page.has_next,
            has_prev=page.has_prev,
        ),
        stats=OwnerStatsResponse(**asdict(result.stats)) if result.stats else None,
    )


@router.post("", response_model=CollectionResponse, status_code=201)
def create_collection(
    data: CollectionCreateRequest,
    actor_id: UUID = Depends(get_actor_id),
    repo: SQLiteCollectionRepo = Depends(get_repo),
    rules: Rules = Depends(get_rules),
    clock: SystemClock = Depends(get_clock),
) -> CollectionResponse:
    """Create a collection owned by the caller."""
    inp = CreateCollectionInput(
        owner_id=actor_id,
        name=data.name,
        type=data.type,
        category=data.category,
        description=data.description,
        visibility=data.visibility,
        tags=tuple(data.tags),
        cover=data.cover.model_dump(exclude_none=True) if data.cover else None,
        share_settings=data.share_settings,
        allow_collaborators=data.allow_collaborators,
    )
    result = run_create(inp, repo=repo, rules=rules, time=clock)
    if not result.success:
        raise_for_errors(result.errors)

    assert result.collection is not None
    return CollectionResponse.from_collection(result.collection)


@router.get("", response_model=CollectionListResponse)
def list_collections(
    owner_id: UUID | None = None,
    type: str | None = None,
    category: str | None = None,
    visibility: str | None = None,
    search: str | None = None,
    sort_by: str = "updated_at",
    sort_order: str = "desc",
    limit: int | None = None,
    offset: int = 0,
    include_shared: bool = False,
    actor_id: UUID = Depends(get_actor_id),
    repo: SQLiteCollectionRepo = Depends(get_repo),
    rules: Rules = Depends(get_rules),
) -> CollectionListResponse:
    """List the caller's collections, or another owner's public ones.

    `include_shared` adds collections the caller collaborates on.
    """
    inp = ListCollectionsInput(
        actor_id=actor_id,
        owner_id=owner_id,
        type=type,
        category=category,
        visibility=visibility,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=limit,
        offset=offset,
        include_shared=include_shared,
    )
    result = run_list(inp, repo=repo, rules=rules)
    if not result.success:
        raise_for_errors(result.errors)
    return _list_response(result)


@router.get("/public", response_model=CollectionListResponse)
def list_public_collections(
    type: str | None = None,
    category: str | None = None,
    search: str | None = None,
    sort_by: str = "last_activity_at",
    sort_order: str = "desc",
    limit: int | None = None,
    offset: int = 0,
    repo: SQLiteCollectionRepo = Depends(get_repo),
    rules: Rules = Depends(get_rules),
) -> CollectionListResponse:
    """Discovery listing of public collections. No identity required."""
    inp = ListPublicCollectionsInput(
        type=type,
        category=category,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=limit,
        offset=offset,
    )
    result = run_list_public(inp, repo=repo, rules=rules)
    if not result.success:
        raise_for_errors(result.errors)
    return _list_response(result)


@router.get("/{collection_id}", response_model=CollectionResponse)
def get_collection(
    collection_id: UUID,
    include_items: bool = True,
    actor_id: UUID = Depends(get_actor_id),
    repo: SQLiteCollectionRepo = Depends(get_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> CollectionResponse:
    result = run_get(
        GetCollectionInput(
            actor_id=actor_id, collection_id=collection_id, include_items=include_items
        ),
        repo=repo,
        policy=policy,
    )
    if not result.success:
        raise_for_errors(result.errors)

    assert result.collection is not None
    return CollectionResponse.from_collection(result.collection, liked=result.liked)


@router.patch("/{collection_id}", response_model=CollectionResponse)
def update_collection(
    collection_id: UUID,
    data: CollectionUpdateRequest,
    actor_id: UUID = Depends(get_actor_id),
    repo: SQLiteCollectionRepo = Depends(get_repo),
    policy: PolicyEngine = Depends(get_policy),
    rules: Rules = Depends(get_rules),
    clock: SystemClock = Depends(get_clock),
) -> CollectionResponse:
    """Patch collection fields and share settings at `expected_version`."""
    inp = UpdateCollectionInput(
        actor_id=actor_id,
        collection_id=collection_id,
        patch=data.to_patch(),
        expected_version=data.expected_version,
    )
    result = run_update(inp, repo=repo, policy=policy, rules=rules, time=clock)
    if not result.success:
        raise_for_errors(result.errors)

    assert result.collection is not None
    return CollectionResponse.from_collection(result.collection)


@router.delete("/{collection_id}", status_code=204)
def delete_collection(
    collection_id: UUID,
    actor_id: UUID = Depends(get_actor_id),
    repo: SQLiteCollectionRepo = Depends(get_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> Response:
    result = run_delete(
        DeleteCollectionInput(actor_id=actor_id, collection_id=collection_id),
        repo=repo,
        policy=policy,
    )
    if not result.success:
        raise_for_errors(result.errors)
    return Response(status_code=204)
