"""
Collections component - Collection aggregate lifecycle.

Create, read, list (filter/sort/paginate), update and delete collections.

Guards:
- Only name, description, tags, visibility, cover and the share settings are
  client-writable; stats, counters, owner and forked_from are derived or
  immutable.
- Updates are conditional on the version the caller read. A stale version is
  reported as a conflict and nothing is written.
- Delete is owner-only and cascades to items, collaborators, likes and comments.
"""

from __future__ import annotations

from typing import Any

from curation.components._guard import load_for_action, storage_error
from curation.domain.entities import Collection, CollectionStats, Cover, ShareSettings
from curation.domain.errors import CollectionError, invalid, not_found
from curation.domain.policy import DELETE, UPDATE, PolicyEngine
from curation.domain.registry import (
    UPDATABLE_FIELDS,
    normalize_tags,
    validate_category,
    validate_collection_type,
    validate_cover,
    validate_description,
    validate_flag,
    validate_name,
    validate_share_settings,
    validate_sort,
    validate_tags,
    validate_text,
    validate_visibility,
)
from curation.ports.repo import CollectionFilter
from curation.ports.storage import StorageError
from curation.rules.models import Rules

from .models import (
    CollectionListOutput,
    CollectionOutput,
    CreateCollectionInput,
    DeleteCollectionInput,
    GetCollectionInput,
    ListCollectionsInput,
    ListPublicCollectionsInput,
    PaginationInfo,
    UpdateCollectionInput,
)
from .ports import CollectionRepoPort, TimePort

# --- Validation Functions ---


def _build_cover(cover: dict[str, Any] | None, current: Cover | None = None) -> Cover:
    base = current or Cover()
    if not cover:
        return base
    update = {k: v for k, v in cover.items() if k in ("color", "icon")}
    if update.get("color") is None:
        update.pop("color", None)
    return base.model_copy(update=update)


def _build_share_settings(
    settings: dict[str, bool] | None, current: ShareSettings | None = None
) -> ShareSettings:
    base = current or ShareSettings()
    if not settings:
        return base
    return base.model_copy(update=settings)


def _validate_create(inp: CreateCollectionInput, rules: Rules) -> list[CollectionError]:
    errors: list[CollectionError] = []
    errors.extend(validate_name(inp.name, rules.limits))
    errors.extend(validate_description(inp.description, rules.limits))
    errors.extend(validate_collection_type(inp.type))
    errors.extend(validate_category(inp.category))
    errors.extend(validate_visibility(inp.visibility))
    errors.extend(validate_tags(list(inp.tags)))
    errors.extend(validate_cover(inp.cover))
    errors.extend(validate_share_settings(inp.share_settings))
    errors.extend(validate_flag(inp.allow_collaborators, "allow_collaborators"))
    return errors


def validate_patch(patch: dict[str, Any], rules: Rules) -> list[CollectionError]:
    """Validate an update patch; unknown or derived keys are rejected."""
    errors: list[CollectionError] = []

    if not patch:
        errors.append(invalid("patch_empty", "Nothing to update", None))
        return errors

    for key in sorted(set(patch) - UPDATABLE_FIELDS):
        errors.append(invalid("field_not_updatable", f"{key} cannot be updated", key))

    if "name" in patch:
        errors.extend(validate_name(patch["name"], rules.limits))
    if "description" in patch:
        errors.extend(validate_description(patch["description"], rules.limits))
    if "visibility" in patch:
        errors.extend(validate_visibility(patch["visibility"]))
    if "tags" in patch:
        errors.extend(validate_tags(patch["tags"]))
    if "cover" in patch:
        errors.extend(validate_cover(patch["cover"]))
    if "share_settings" in patch:
        if patch["share_settings"] is None:
            errors.append(
                invalid("share_settings_invalid", "share_settings cannot be null", "share_settings")
            )
        else:
            errors.extend(validate_share_settings(patch["share_settings"]))
    if "allow_collaborators" in patch:
        errors.extend(validate_flag(patch["allow_collaborators"], "allow_collaborators"))

    return errors


def _resolve_page(
    limit: int | None, offset: int, rules: Rules
) -> tuple[int, list[CollectionError]]:
    errors: list[CollectionError] = []
    resolved = rules.pagination.default_limit if limit is None else limit
    if resolved < 1 or resolved > rules.pagination.max_limit:
        errors.append(
            invalid(
                "limit_invalid",
                f"limit must be between 1 and {rules.pagination.max_limit}",
                "limit",
            )
        )
    if offset < 0:
        errors.append(invalid("offset_invalid", "offset cannot be negative", "offset"))
    return resolved, errors


def _validate_filters(
    type_: str | None,
    category: str | None,
    visibility: str | None,
    search: str | None,
    rules: Rules,
) -> list[CollectionError]:
    errors: list[CollectionError] = []
    if type_ is not None:
        errors.extend(validate_collection_type(type_))
    if category is not None:
        errors.extend(validate_category(category))
    if visibility is not None:
        errors.extend(validate_visibility(visibility))
    if search is not None:
        errors.extend(
            validate_text(search, "search", rules.limits.search_max_length, required=False)
        )
    return errors


# --- Entry Points ---


def run_create(
    inp: CreateCollectionInput,
    *,
    repo: CollectionRepoPort,
    rules: Rules,
    time: TimePort,
) -> CollectionOutput:
    """Create a collection with zeroed stats and version 1."""
    errors = _validate_create(inp, rules)
    if errors:
        return CollectionOutput(collection=None, errors=errors, success=False)

    now = time.now_utc()
    collection = Collection(
        owner_id=inp.owner_id,
        name=inp.name.strip(),
        description=inp.description.strip() if inp.description else None,
        type=inp.type,  # type: ignore[arg-type]
        category=inp.category,  # type: ignore[arg-type]
        visibility=inp.visibility,  # type: ignore[arg-type]
        cover=_build_cover(inp.cover),
        tags=normalize_tags(inp.tags),
        share_settings=_build_share_settings(inp.share_settings),
        allow_collaborators=inp.allow_collaborators,
        stats=CollectionStats(),
        version=1,
        created_at=now,
        updated_at=now,
    )

    try:
        saved = repo.insert(collection)
    except StorageError as e:
        return CollectionOutput(collection=None, errors=[storage_error(e)], success=False)

    return CollectionOutput(collection=saved)


def run_get(
    inp: GetCollectionInput,
    *,
    repo: CollectionRepoPort,
    policy: PolicyEngine,
) -> CollectionOutput:
    """Fetch a collection the actor can read; unreadable collections are not found."""
    try:
        collection = repo.get_by_id(inp.collection_id, include_items=inp.include_items)
    except StorageError as e:
        return CollectionOutput(collection=None, errors=[storage_error(e)], success=False)

    if collection is None or not policy.can_read(inp.actor_id, collection):
        return CollectionOutput(collection=None, errors=[not_found()], success=False)

    try:
        liked = repo.has_liked(inp.collection_id, inp.actor_id)
    except StorageError as e:
        return CollectionOutput(collection=None, errors=[storage_error(e)], success=False)

    return CollectionOutput(collection=collection, liked=liked)


def run_list(
    inp: ListCollectionsInput,
    *,
    repo: CollectionRepoPort,
    rules: Rules,
) -> CollectionListOutput:
    """List collections for an owner with filter, sort and pagination."""
    limit, errors = _resolve_page(inp.limit, inp.offset, rules)
    errors.extend(validate_sort(inp.sort_by, inp.sort_order))
    errors.extend(_validate_filters(inp.type, inp.category, inp.visibility, inp.search, rules))
    if errors:
        return CollectionListOutput(errors=errors, success=False)

    owner_id = inp.owner_id or inp.actor_id
    visibility = inp.visibility
    if owner_id != inp.actor_id:
        # Other people's private collections never show up in listings
        if visibility == "private":
            return CollectionListOutput(
                collections=[],
                pagination=PaginationInfo(total=0, limit=limit, offset=inp.offset),
                stats=None,
            )
        visibility = "public"

    filters = CollectionFilter(
        owner_id=owner_id,
        shared_with=inp.actor_id if inp.include_shared and owner_id == inp.actor_id else None,
        type=inp.type,  # type: ignore[arg-type]
        category=inp.category,  # type: ignore[arg-type]
        visibility=visibility,  # type: ignore[arg-type]
        search=inp.search.strip() if inp.search and inp.search.strip() else None,
    )

    try:
        collections, total = repo.list(filters, inp.sort_by, inp.sort_order, limit, inp.offset)
        stats = repo.owner_stats(owner_id) if owner_id == inp.actor_id else None
    except StorageError as e:
        return CollectionListOutput(errors=[storage_error(e)], success=False)

    return CollectionListOutput(
        collections=collections,
        pagination=PaginationInfo(total=total, limit=limit, offset=inp.offset),
        stats=stats,
    )


def run_list_public(
    inp: ListPublicCollectionsInput,
    *,
    repo: CollectionRepoPort,
    rules: Rules,
) -> CollectionListOutput:
    """Discovery listing over every public collection."""
    limit, errors = _resolve_page(inp.limit, inp.offset, rules)
    errors.extend(validate_sort(inp.sort_by, inp.sort_order))
    errors.extend(_validate_filters(inp.type, inp.category, None, inp.search, rules))
    if errors:
        return CollectionListOutput(errors=errors, success=False)

    filters = CollectionFilter(
        type=inp.type,  # type: ignore[arg-type]
        category=inp.category,  # type: ignore[arg-type]
        visibility="public",
        search=inp.search.strip() if inp.search and inp.search.strip() else None,
    )

    try:
        collections, total = repo.list(filters, inp.sort_by, inp.sort_order, limit, inp.offset)
    except StorageError as e:
        return CollectionListOutput(errors=[storage_error(e)], success=False)

    return CollectionListOutput(
        collections=collections,
        pagination=PaginationInfo(total=total, limit=limit, offset=inp.offset),
    )


def run_update(
    inp: UpdateCollectionInput,
    *,
    repo: CollectionRepoPort,
    policy: PolicyEngine,
    rules: Rules,
    time: TimePort,
) -> CollectionOutput:
    """Apply a patch conditionally on `expected_version`."""
    errors = validate_patch(inp.patch, rules)
    if errors:
        return CollectionOutput(collection=None, errors=errors, success=False)

    collection, errors = load_for_action(
        repo, policy, inp.actor_id, inp.collection_id, UPDATE, include_items=False
    )
    if collection is None:
        return CollectionOutput(collection=None, errors=errors, success=False)

    fields: dict[str, Any] = {}
    if "name" in inp.patch:
        fields["name"] = inp.patch["name"].strip()
    if "description" in inp.patch:
        description = inp.patch["description"]
        fields["description"] = description.strip() if description else None
    if "visibility" in inp.patch:
        fields["visibility"] = inp.patch["visibility"]
    if "tags" in inp.patch:
        fields["tags"] = normalize_tags(inp.patch["tags"])
    if "cover" in inp.patch:
        fields["cover"] = _build_cover(inp.patch["cover"], collection.cover)
    if "share_settings" in inp.patch:
        fields["share_settings"] = _build_share_settings(
            inp.patch["share_settings"], collection.share_settings
        )
    if "allow_collaborators" in inp.patch:
        fields["allow_collaborators"] = inp.patch["allow_collaborators"]

    try:
        updated = repo.update_fields(
            inp.collection_id, fields, inp.expected_version, time.now_utc()
        )
    except StorageError as e:
        return CollectionOutput(collection=None, errors=[storage_error(e)], success=False)

    return CollectionOutput(collection=updated)


def run_delete(
    inp: DeleteCollectionInput,
    *,
    repo: CollectionRepoPort,
    policy: PolicyEngine,
) -> CollectionOutput:
    """Owner-only delete with cascade."""
    collection, errors = load_for_action(
        repo, policy, inp.actor_id, inp.collection_id, DELETE, include_items=False
    )
    if collection is None:
        return CollectionOutput(collection=None, errors=errors, success=False)

    try:
        repo.delete(inp.collection_id)
    except StorageError as e:
        return CollectionOutput(collection=None, errors=[storage_error(e)], success=False)

    return CollectionOutput(collection=None)


def run(
    inp: (
        CreateCollectionInput
        | GetCollectionInput
        | ListCollectionsInput
        | ListPublicCollectionsInput
        | UpdateCollectionInput
        | DeleteCollectionInput
    ),
    *,
    repo: CollectionRepoPort,
    policy: PolicyEngine | None = None,
    rules: Rules | None = None,
    time: TimePort | None = None,
) -> CollectionOutput | CollectionListOutput:
    if isinstance(inp, CreateCollectionInput):
        assert rules and time
        return run_create(inp, repo=repo, rules=rules, time=time)

    elif isinstance(inp, GetCollectionInput):
        assert policy
        return run_get(inp, repo=repo, policy=policy)

    elif isinstance(inp, ListCollectionsInput):
        assert rules
        return run_list(inp, repo=repo, rules=rules)

    elif isinstance(inp, ListPublicCollectionsInput):
        assert rules
        return run_list_public(inp, repo=repo, rules=rules)

    elif isinstance(inp, UpdateCollectionInput):
        assert policy and rules and time
        return run_update(inp, repo=repo, policy=policy, rules=rules, time=time)

    elif isinstance(inp, DeleteCollectionInput):
        assert policy
        return run_delete(inp, repo=repo, policy=policy)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
