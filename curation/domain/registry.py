"""
Validation & enum registry.

Canonical value sets for collection type/category, item type, collaborator
role, visibility and list sort keys, plus the boundary validators that turn
raw caller input into typed values or CollectionError lists. Unknown values
are rejected here, never passed through to storage.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Literal, get_args

from curation.domain.entities import (
    DEFAULT_COVER_COLOR,
    CollaboratorRole,
    CollectionCategory,
    CollectionType,
    ItemRef,
    ItemType,
    ShareSettings,
    Visibility,
)
from curation.domain.errors import CollectionError, invalid
from curation.rules.models import LimitsRules

SortKey = Literal["updated_at", "created_at", "name", "total_items", "last_activity_at", "like_count"]
SortOrder = Literal["asc", "desc"]

COLLECTION_TYPES: frozenset[str] = frozenset(get_args(CollectionType))
COLLECTION_CATEGORIES: frozenset[str] = frozenset(get_args(CollectionCategory))
ITEM_TYPES: frozenset[str] = frozenset(get_args(ItemType))
COLLABORATOR_ROLES: frozenset[str] = frozenset(get_args(CollaboratorRole))
VISIBILITIES: frozenset[str] = frozenset(get_args(Visibility))
SORT_KEYS: frozenset[str] = frozenset(get_args(SortKey))
SORT_ORDERS: frozenset[str] = frozenset(get_args(SortOrder))
SHARE_SETTING_KEYS: frozenset[str] = frozenset(ShareSettings.model_fields)

# Fields a client may patch on a whole collection
UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {"name", "description", "tags", "visibility", "cover", "share_settings", "allow_collaborators"}
)


def _check_enum(value: Any, allowed: frozenset[str], field: str) -> list[CollectionError]:
    if not isinstance(value, str) or value not in allowed:
        return [
            invalid(
                code=f"{field}_invalid",
                message=f"{field} must be one of: {', '.join(sorted(allowed))}",
                field=field,
            )
        ]
    return []


def validate_collection_type(value: Any) -> list[CollectionError]:
    return _check_enum(value, COLLECTION_TYPES, "type")


def validate_category(value: Any) -> list[CollectionError]:
    return _check_enum(value, COLLECTION_CATEGORIES, "category")


def validate_item_type(value: Any) -> list[CollectionError]:
    return _check_enum(value, ITEM_TYPES, "item_type")


def validate_role(value: Any) -> list[CollectionError]:
    return _check_enum(value, COLLABORATOR_ROLES, "role")


def validate_visibility(value: Any) -> list[CollectionError]:
    return _check_enum(value, VISIBILITIES, "visibility")


def validate_sort(sort_by: Any, sort_order: Any) -> list[CollectionError]:
    return _check_enum(sort_by, SORT_KEYS, "sort_by") + _check_enum(
        sort_order, SORT_ORDERS, "sort_order"
    )


def validate_text(
    value: Any,
    field: str,
    max_length: int,
    required: bool = True,
) -> list[CollectionError]:
    """Check a free-text field for type, blankness and length."""
    if value is None:
        if required:
            return [invalid(f"{field}_required", f"{field} is required", field)]
        return []
    if not isinstance(value, str):
        return [invalid(f"{field}_invalid", f"{field} must be a string", field)]
    if required and not value.strip():
        return [invalid(f"{field}_required", f"{field} is required", field)]
    if len(value.strip()) > max_length:
        return [
            invalid(
                f"{field}_too_long",
                f"{field} must be {max_length} characters or less",
                field,
            )
        ]
    return []


def validate_name(value: Any, limits: LimitsRules) -> list[CollectionError]:
    return validate_text(value, "name", limits.name_max_length)


def validate_description(value: Any, limits: LimitsRules) -> list[CollectionError]:
    return validate_text(value, "description", limits.description_max_length, required=False)


def normalize_tags(tags: Iterable[Any] | None) -> list[str]:
    """Strip, drop blanks, collapse duplicates; sorted for a stable representation."""
    if not tags:
        return []
    return sorted({t.strip() for t in tags if isinstance(t, str) and t.strip()})


def validate_tags(tags: Any) -> list[CollectionError]:
    if tags is None:
        return []
    if isinstance(tags, str) or not isinstance(tags, (list, tuple, set, frozenset)):
        return [invalid("tags_invalid", "tags must be a list of strings", "tags")]
    if any(not isinstance(t, str) for t in tags):
        return [invalid("tags_invalid", "tags must be a list of strings", "tags")]
    return []


def validate_cover(cover: Any) -> list[CollectionError]:
    if cover is None:
        return []
    if not isinstance(cover, dict) or set(cover) - {"color", "icon"}:
        return [invalid("cover_invalid", "cover accepts only 'color' and 'icon'", "cover")]
    color = cover.get("color", DEFAULT_COVER_COLOR)
    if not isinstance(color, str) or not color.strip():
        return [invalid("cover_invalid", "cover.color must be a non-empty string", "cover")]
    icon = cover.get("icon")
    if icon is not None and not isinstance(icon, str):
        return [invalid("cover_invalid", "cover.icon must be a string", "cover")]
    return []


def validate_share_settings(settings: Any) -> list[CollectionError]:
    if settings is None:
        return []
    if not isinstance(settings, dict) or set(settings) - SHARE_SETTING_KEYS:
        return [
            invalid(
                "share_settings_invalid",
                f"share_settings accepts only: {', '.join(sorted(SHARE_SETTING_KEYS))}",
                "share_settings",
            )
        ]
    for key, value in settings.items():
        if not isinstance(value, bool):
            return [
                invalid(
                    "share_settings_invalid",
                    f"share_settings.{key} must be a boolean",
                    "share_settings",
                )
            ]
    return []


def validate_flag(value: Any, field: str) -> list[CollectionError]:
    if not isinstance(value, bool):
        return [invalid(f"{field}_invalid", f"{field} must be a boolean", field)]
    return []


def parse_item_ref(item_type: Any, item_id: Any) -> tuple[ItemRef | None, list[CollectionError]]:
    """Validate and build an ItemRef."""
    errors = validate_item_type(item_type)
    if not isinstance(item_id, str) or not item_id.strip():
        errors.append(invalid("item_id_required", "item_id is required", "item_id"))
    if errors:
        return None, errors
    return ItemRef(item_type, item_id.strip()), []
