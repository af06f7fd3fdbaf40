"""
Social component - Likes, comments and forks.

Likes are a per-(user, collection) relation toggled in one store transaction
with a counter delta. Comments are append-only. A fork is one transactional
insert of a new private collection with its items; it never writes to the
source.

The collection's share settings can switch likes, comments and forks off for
everyone but the owner. With likes off, an existing like can still be
withdrawn.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from curation.components._guard import load_for_action, load_readable, storage_error
from curation.domain.entities import (
    Collection,
    CollectionItem,
    CollectionStats,
    Comment,
    ItemProgress,
)
from curation.domain.errors import CollectionError, invalid, permission_denied
from curation.domain.policy import COMMENTS_ADD, FORK, LIKES_TOGGLE, PolicyEngine
from curation.domain.registry import validate_name, validate_text
from curation.ports.storage import StorageError
from curation.rules.models import Rules

from .models import (
    AddCommentInput,
    CommentListOutput,
    CommentOutput,
    ForkCollectionInput,
    ForkOutput,
    LikeOutput,
    ListCommentsInput,
    ToggleLikeInput,
)
from .ports import SocialRepoPort, TimePort

FORK_SUFFIX = " (Fork)"

_SHARING_LABELS = {COMMENTS_ADD: "comments", LIKES_TOGGLE: "likes", FORK: "forks"}


def fork_name(source_name: str, max_length: int) -> str:
    """Default name for a fork, shortening the source name to stay in bounds."""
    base = source_name[: max(0, max_length - len(FORK_SUFFIX))].rstrip()
    return f"{base}{FORK_SUFFIX}"


def sharing_denied(action: str) -> CollectionError:
    label = _SHARING_LABELS[action]
    return permission_denied(
        f"The owner has turned off {label} for this collection", code=f"{label}_disabled"
    )


def build_fork(source: Collection, actor_id: UUID, name: str, now: datetime) -> Collection:
    """Structural copy of `source`: same items and metadata, fresh social state."""
    items = [
        CollectionItem(
            item_type=item.item_type,
            item_id=item.item_id,
            item_title=item.item_title,
            item_description=item.item_description,
            progress=ItemProgress(),
            added_at=now,
            order=position,
        )
        for position, item in enumerate(source.items)
    ]
    return Collection(
        owner_id=actor_id,
        name=name,
        description=source.description,
        type=source.type,
        category=source.category,
        visibility="private",
        cover=source.cover.model_copy(),
        tags=list(source.tags),
        items=items,
        stats=CollectionStats(
            total_items=len(items),
            completed_items=0,
            last_activity_at=now,
        ),
        forked_from=source.id,
        version=1,
        created_at=now,
        updated_at=now,
    )


# --- Entry Points ---


def run_toggle_like(
    inp: ToggleLikeInput,
    *,
    repo: SocialRepoPort,
    policy: PolicyEngine,
    time: TimePort,
) -> LikeOutput:
    collection, errors = load_for_action(
        repo, policy, inp.actor_id, inp.collection_id, LIKES_TOGGLE, include_items=False
    )
    if collection is None:
        return LikeOutput(errors=errors, success=False)

    allow_insert = policy.sharing_allows(inp.actor_id, collection, LIKES_TOGGLE)
    try:
        if not allow_insert and not repo.has_liked(inp.collection_id, inp.actor_id):
            return LikeOutput(errors=[sharing_denied(LIKES_TOGGLE)], success=False)

        liked, like_count = repo.toggle_like(
            inp.collection_id,
            inp.actor_id,
            time.now_utc(),
            allow_insert=allow_insert,
            grant=policy.write_grant(inp.actor_id, collection, LIKES_TOGGLE),
        )
    except StorageError as e:
        return LikeOutput(errors=[storage_error(e)], success=False)

    return LikeOutput(liked=liked, like_count=like_count)


def run_add_comment(
    inp: AddCommentInput,
    *,
    repo: SocialRepoPort,
    policy: PolicyEngine,
    rules: Rules,
    time: TimePort,
) -> CommentOutput:
    errors = validate_text(inp.content, "content", rules.limits.comment_max_length)
    if errors:
        return CommentOutput(errors=errors, success=False)

    collection, errors = load_for_action(
        repo, policy, inp.actor_id, inp.collection_id, COMMENTS_ADD, include_items=False
    )
    if collection is None:
        return CommentOutput(errors=errors, success=False)

    if not policy.sharing_allows(inp.actor_id, collection, COMMENTS_ADD):
        return CommentOutput(errors=[sharing_denied(COMMENTS_ADD)], success=False)

    comment = Comment(
        collection_id=inp.collection_id,
        author_id=inp.actor_id,
        content=inp.content.strip(),
        created_at=time.now_utc(),
    )

    try:
        saved = repo.add_comment(
            comment, grant=policy.write_grant(inp.actor_id, collection, COMMENTS_ADD)
        )
    except StorageError as e:
        return CommentOutput(errors=[storage_error(e)], success=False)

    return CommentOutput(comment=saved)


def run_list_comments(
    inp: ListCommentsInput,
    *,
    repo: SocialRepoPort,
    policy: PolicyEngine,
    rules: Rules,
) -> CommentListOutput:
    limit = rules.pagination.default_limit if inp.limit is None else inp.limit
    errors: list[CollectionError] = []
    if limit < 1 or limit > rules.pagination.max_limit:
        errors.append(
            invalid(
                "limit_invalid",
                f"limit must be between 1 and {rules.pagination.max_limit}",
                "limit",
            )
        )
    if inp.offset < 0:
        errors.append(invalid("offset_invalid", "offset cannot be negative", "offset"))
    if errors:
        return CommentListOutput(errors=errors, success=False)

    collection, errors = load_readable(
        repo, policy, inp.actor_id, inp.collection_id, include_items=False
    )
    if collection is None:
        return CommentListOutput(errors=errors, success=False)

    try:
        comments, total = repo.list_comments(inp.collection_id, limit, inp.offset)
    except StorageError as e:
        return CommentListOutput(errors=[storage_error(e)], success=False)

    return CommentListOutput(comments=comments, total=total, limit=limit, offset=inp.offset)


def run_fork(
    inp: ForkCollectionInput,
    *,
    repo: SocialRepoPort,
    policy: PolicyEngine,
    rules: Rules,
    time: TimePort,
) -> ForkOutput:
    """
    Fork a readable collection.

    Items are copied with their snapshots and order, progress is reset and
    `added_at` is the fork time. Collaborators, comments and likes stay with
    the source.
    """
    if inp.new_name is not None:
        errors = validate_name(inp.new_name, rules.limits)
        if errors:
            return ForkOutput(errors=errors, success=False)

    source, errors = load_for_action(
        repo, policy, inp.actor_id, inp.collection_id, FORK, include_items=True
    )
    if source is None:
        return ForkOutput(errors=errors, success=False)

    if not policy.sharing_allows(inp.actor_id, source, FORK):
        return ForkOutput(errors=[sharing_denied(FORK)], success=False)

    if inp.new_name is not None:
        name = inp.new_name.strip()
    else:
        name = fork_name(source.name, rules.limits.name_max_length)

    fork = build_fork(source, inp.actor_id, name, time.now_utc())

    try:
        saved = repo.insert(fork)
    except StorageError as e:
        return ForkOutput(errors=[storage_error(e)], success=False)

    return ForkOutput(collection=saved)


def run(
    inp: ToggleLikeInput | AddCommentInput | ListCommentsInput | ForkCollectionInput,
    *,
    repo: SocialRepoPort,
    policy: PolicyEngine,
    rules: Rules | None = None,
    time: TimePort | None = None,
) -> LikeOutput | CommentOutput | CommentListOutput | ForkOutput:
    if isinstance(inp, ToggleLikeInput):
        assert time
        return run_toggle_like(inp, repo=repo, policy=policy, time=time)

    elif isinstance(inp, AddCommentInput):
        assert rules and time
        return run_add_comment(inp, repo=repo, policy=policy, rules=rules, time=time)

    elif isinstance(inp, ListCommentsInput):
        assert rules
        return run_list_comments(inp, repo=repo, policy=policy, rules=rules)

    elif isinstance(inp, ForkCollectionInput):
        assert rules and time
        return run_fork(inp, repo=repo, policy=policy, rules=rules, time=time)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
