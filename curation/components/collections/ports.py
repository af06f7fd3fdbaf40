"""
Collections component port definitions.
"""

from __future__ import annotations

import builtins
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from curation.domain.entities import Collection
from curation.ports.repo import CollectionFilter, OwnerStats


class CollectionRepoPort(Protocol):
    """Repository interface for whole-collection operations."""

    def insert(self, collection: Collection) -> Collection: ...

    def get_by_id(self, collection_id: UUID, include_items: bool = True) -> Collection | None: ...

    def list(
        self,
        filters: CollectionFilter,
        sort_by: str,
        sort_order: str,
        limit: int,
        offset: int,
    ) -> tuple[builtins.list[Collection], int]: ...

    def owner_stats(self, owner_id: UUID) -> OwnerStats: ...

    def update_fields(
        self,
        collection_id: UUID,
        fields: dict[str, Any],
        expected_version: int,
        now: datetime,
    ) -> Collection: ...

    def delete(self, collection_id: UUID) -> None: ...

    def has_liked(self, collection_id: UUID, user_id: UUID) -> bool: ...


class TimePort(Protocol):
    """Port for time operations - enables deterministic testing."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
