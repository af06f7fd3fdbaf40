"""Item membership, progress and ordering routes."""

from uuid import UUID

from fastapi import APIRouter, Depends

from curation.adapters.clock import SystemClock
from curation.adapters.sqlite.repos import SQLiteCollectionRepo
from curation.api.deps import get_actor_id, get_clock, get_policy, get_repo, get_rules
from curation.api.errors import raise_for_errors
from curation.api.schemas import (
    ItemAddRequest,
    ItemMutationResponse,
    ItemResponse,
    ProgressUpdateRequest,
    ReorderRequest,
    ReorderResponse,
    StatsResponse,
)
from curation.components.items import (
    AddItemInput,
    ItemOutput,
    RemoveItemInput,
    ReorderItemsInput,
    UpdateProgressInput,
    run_add_item,
    run_remove_item,
    run_reorder,
    run_update_progress,
)
from curation.domain.entities import ItemRef
from curation.domain.policy import PolicyEngine
from curation.rules.models import Rules

router = APIRouter()


def _item_response(result: ItemOutput) -> ItemMutationResponse:
    if not result.success:
        raise_for_errors(result.errors)

    assert result.item is not None
    return ItemMutationResponse(
        item=ItemResponse.from_item(result.item),
        stats=StatsResponse.from_stats(result.stats) if result.stats else None,
    )


@router.post("/{collection_id}/items", response_model=ItemMutationResponse, status_code=201)
def add_item(
    collection_id: UUID,
    data: ItemAddRequest,
    actor_id: UUID = Depends(get_actor_id),
    repo: SQLiteCollectionRepo = Depends(get_repo),
    policy: PolicyEngine = Depends(get_policy),
    rules: Rules = Depends(get_rules),
    clock: SystemClock = Depends(get_clock),
) -> ItemMutationResponse:
    inp = AddItemInput(
        actor_id=actor_id,
        collection_id=collection_id,
        item_type=data.item_type,
        item_id=data.item_id,
        item_title=data.item_title,
        item_description=data.item_description,
    )
    return _item_response(run_add_item(inp, repo=repo, policy=policy, rules=rules, time=clock))


@router.put("/{collection_id}/items/order", response_model=ReorderResponse)
def reorder_items(
    collection_id: UUID,
    data: ReorderRequest,
    actor_id: UUID = Depends(get_actor_id),
    repo: SQLiteCollectionRepo = Depends(get_repo),
    policy: PolicyEngine = Depends(get_policy),
    clock: SystemClock = Depends(get_clock),
) -> ReorderResponse:
    """Replace the item order with a full permutation of the current items."""
    inp = ReorderItemsInput(
        actor_id=actor_id,
        collection_id=collection_id,
        new_order=tuple(ItemRef(r.item_type, r.item_id) for r in data.new_order),  # type: ignore[arg-type]
        expected_version=data.expected_version,
    )
    result = run_reorder(inp, repo=repo, policy=policy, time=clock)
    if not result.success:
        raise_for_errors(result.errors)

    assert result.version is not None
    return ReorderResponse(
        items=[ItemResponse.from_item(i) for i in result.items],
        version=result.version,
    )


@router.delete(
    "/{collection_id}/items/{item_type}/{item_id}", response_model=ItemMutationResponse
)
def remove_item(
    collection_id: UUID,
    item_type: str,
    item_id: str,
    actor_id: UUID = Depends(get_actor_id),
    repo: SQLiteCollectionRepo = Depends(get_repo),
    policy: PolicyEngine = Depends(get_policy),
    clock: SystemClock = Depends(get_clock),
) -> ItemMutationResponse:
    inp = RemoveItemInput(
        actor_id=actor_id,
        collection_id=collection_id,
        ref=ItemRef(item_type, item_id),  # type: ignore[arg-type]
    )
    return _item_response(run_remove_item(inp, repo=repo, policy=policy, time=clock))


@router.put(
    "/{collection_id}/items/{item_type}/{item_id}/progress",
    response_model=ItemMutationResponse,
)
def update_progress(
    collection_id: UUID,
    item_type: str,
    item_id: str,
    data: ProgressUpdateRequest,
    actor_id: UUID = Depends(get_actor_id),
    repo: SQLiteCollectionRepo = Depends(get_repo),
    policy: PolicyEngine = Depends(get_policy),
    clock: SystemClock = Depends(get_clock),
) -> ItemMutationResponse:
    inp = UpdateProgressInput(
        actor_id=actor_id,
        collection_id=collection_id,
        ref=ItemRef(item_type, item_id),  # type: ignore[arg-type]
        completed=data.completed,
    )
    return _item_response(run_update_progress(inp, repo=repo, policy=policy, time=clock))
