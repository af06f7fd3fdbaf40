"""
Items component - Item membership, ordering and progress.

Every write is one atomic store operation: insert-if-absent by ItemRef on
add, delete plus order compaction on remove, a conditional flip with a
counter delta on progress, and a version-conditional rewrite of positions on
reorder. Stats are never computed here, only re-read after the write.
"""

from __future__ import annotations

from uuid import UUID

from curation.components._guard import load_for_action, storage_error
from curation.domain.entities import CollectionItem, CollectionStats, ItemRef
from curation.domain.errors import CollectionError, conflict, invalid
from curation.domain.policy import (
    ITEMS_ADD,
    ITEMS_PROGRESS,
    ITEMS_REMOVE,
    ITEMS_REORDER,
    PolicyEngine,
)
from curation.domain.registry import parse_item_ref, validate_text
from curation.ports.storage import StorageError
from curation.rules.models import Rules

from .models import (
    AddItemInput,
    ItemOutput,
    RemoveItemInput,
    ReorderItemsInput,
    ReorderOutput,
    UpdateProgressInput,
)
from .ports import ItemRepoPort, TimePort


def _fresh_stats(repo: ItemRepoPort, collection_id: UUID) -> CollectionStats | None:
    collection = repo.get_by_id(collection_id, include_items=False)
    return collection.stats if collection else None


def validate_new_order(
    current: list[ItemRef], new_order: list[ItemRef]
) -> list[CollectionError]:
    """A reorder must name every current item exactly once and nothing else."""
    errors: list[CollectionError] = []

    if len(set(new_order)) != len(new_order):
        errors.append(
            invalid("order_duplicate", "new_order contains duplicate items", "new_order")
        )
    if len(new_order) != len(current):
        errors.append(
            invalid(
                "order_length_mismatch",
                f"new_order has {len(new_order)} items, collection has {len(current)}",
                "new_order",
            )
        )
    elif set(new_order) != set(current):
        errors.append(
            invalid(
                "order_mismatch",
                "new_order must be a permutation of the collection's items",
                "new_order",
            )
        )
    return errors


# --- Entry Points ---


def run_add_item(
    inp: AddItemInput,
    *,
    repo: ItemRepoPort,
    policy: PolicyEngine,
    rules: Rules,
    time: TimePort,
) -> ItemOutput:
    ref, errors = parse_item_ref(inp.item_type, inp.item_id)
    errors.extend(validate_text(inp.item_title, "item_title", rules.limits.item_title_max_length))
    errors.extend(
        validate_text(
            inp.item_description,
            "item_description",
            rules.limits.description_max_length,
            required=False,
        )
    )
    if errors or ref is None:
        return ItemOutput(errors=errors, success=False)

    collection, errors = load_for_action(
        repo, policy, inp.actor_id, inp.collection_id, ITEMS_ADD, include_items=False
    )
    if collection is None:
        return ItemOutput(errors=errors, success=False)

    now = time.now_utc()
    item = CollectionItem(
        item_type=ref.item_type,
        item_id=ref.item_id,
        item_title=inp.item_title.strip(),
        item_description=inp.item_description.strip() if inp.item_description else None,
        added_at=now,
    )

    try:
        added = repo.add_item(
            inp.collection_id,
            item,
            now,
            grant=policy.write_grant(inp.actor_id, collection, ITEMS_ADD),
        )
        stats = _fresh_stats(repo, inp.collection_id)
    except StorageError as e:
        return ItemOutput(errors=[storage_error(e)], success=False)

    return ItemOutput(item=added, stats=stats)


def run_remove_item(
    inp: RemoveItemInput,
    *,
    repo: ItemRepoPort,
    policy: PolicyEngine,
    time: TimePort,
) -> ItemOutput:
    ref, errors = parse_item_ref(inp.ref.item_type, inp.ref.item_id)
    if errors or ref is None:
        return ItemOutput(errors=errors, success=False)

    collection, errors = load_for_action(
        repo, policy, inp.actor_id, inp.collection_id, ITEMS_REMOVE, include_items=False
    )
    if collection is None:
        return ItemOutput(errors=errors, success=False)

    try:
        removed = repo.remove_item(
            inp.collection_id,
            ref,
            time.now_utc(),
            grant=policy.write_grant(inp.actor_id, collection, ITEMS_REMOVE),
        )
        stats = _fresh_stats(repo, inp.collection_id)
    except StorageError as e:
        return ItemOutput(errors=[storage_error(e)], success=False)

    return ItemOutput(item=removed, stats=stats)


def run_update_progress(
    inp: UpdateProgressInput,
    *,
    repo: ItemRepoPort,
    policy: PolicyEngine,
    time: TimePort,
) -> ItemOutput:
    """
    Mark an item completed or not completed.

    Setting the state an item already has succeeds without touching counters
    or `completed_at`.
    """
    ref, errors = parse_item_ref(inp.ref.item_type, inp.ref.item_id)
    if not isinstance(inp.completed, bool):
        errors.append(invalid("completed_invalid", "completed must be a boolean", "completed"))
    if errors or ref is None:
        return ItemOutput(errors=errors, success=False)

    collection, errors = load_for_action(
        repo, policy, inp.actor_id, inp.collection_id, ITEMS_PROGRESS, include_items=False
    )
    if collection is None:
        return ItemOutput(errors=errors, success=False)

    try:
        item, _changed = repo.set_item_progress(
            inp.collection_id,
            ref,
            inp.completed,
            time.now_utc(),
            grant=policy.write_grant(inp.actor_id, collection, ITEMS_PROGRESS),
        )
        stats = _fresh_stats(repo, inp.collection_id)
    except StorageError as e:
        return ItemOutput(errors=[storage_error(e)], success=False)

    return ItemOutput(item=item, stats=stats)


def run_reorder(
    inp: ReorderItemsInput,
    *,
    repo: ItemRepoPort,
    policy: PolicyEngine,
    time: TimePort,
) -> ReorderOutput:
    new_order: list[ItemRef] = []
    errors: list[CollectionError] = []
    for entry in inp.new_order:
        ref, ref_errors = parse_item_ref(entry[0], entry[1])
        if ref is None:
            errors.extend(ref_errors)
        else:
            new_order.append(ref)
    if errors:
        return ReorderOutput(errors=errors, success=False)

    collection, errors = load_for_action(
        repo, policy, inp.actor_id, inp.collection_id, ITEMS_REORDER, include_items=True
    )
    if collection is None:
        return ReorderOutput(errors=errors, success=False)

    if inp.expected_version is not None and inp.expected_version != collection.version:
        return ReorderOutput(
            errors=[
                conflict(
                    "Collection was modified by someone else; refetch and retry",
                    code="version_conflict",
                    field="version",
                )
            ],
            success=False,
        )

    errors = validate_new_order([i.ref for i in collection.items], new_order)
    if errors:
        return ReorderOutput(errors=errors, success=False)

    try:
        version = repo.reorder_items(
            inp.collection_id,
            new_order,
            collection.version,
            time.now_utc(),
            grant=policy.write_grant(inp.actor_id, collection, ITEMS_REORDER),
        )
    except StorageError as e:
        return ReorderOutput(errors=[storage_error(e)], success=False)

    by_ref = {i.ref: i for i in collection.items}
    items = [by_ref[ref].model_copy(update={"order": pos}) for pos, ref in enumerate(new_order)]
    return ReorderOutput(items=items, version=version)


def run(
    inp: AddItemInput | RemoveItemInput | UpdateProgressInput | ReorderItemsInput,
    *,
    repo: ItemRepoPort,
    policy: PolicyEngine,
    time: TimePort,
    rules: Rules | None = None,
) -> ItemOutput | ReorderOutput:
    if isinstance(inp, AddItemInput):
        assert rules
        return run_add_item(inp, repo=repo, policy=policy, rules=rules, time=time)

    elif isinstance(inp, RemoveItemInput):
        return run_remove_item(inp, repo=repo, policy=policy, time=time)

    elif isinstance(inp, UpdateProgressInput):
        return run_update_progress(inp, repo=repo, policy=policy, time=time)

    elif isinstance(inp, ReorderItemsInput):
        return run_reorder(inp, repo=repo, policy=policy, time=time)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
