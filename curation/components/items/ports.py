"""
Items component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from curation.domain.entities import Collection, CollectionItem, ItemRef
from curation.domain.policy import WriteGrant


class ItemRepoPort(Protocol):
    """Repository interface for item-level operations."""

    def get_by_id(self, collection_id: UUID, include_items: bool = True) -> Collection | None: ...

    def add_item(
        self,
        collection_id: UUID,
        item: CollectionItem,
        now: datetime,
        grant: WriteGrant | None = None,
    ) -> CollectionItem: ...

    def remove_item(
        self,
        collection_id: UUID,
        ref: ItemRef,
        now: datetime,
        grant: WriteGrant | None = None,
    ) -> CollectionItem: ...

    def set_item_progress(
        self,
        collection_id: UUID,
        ref: ItemRef,
        completed: bool,
        now: datetime,
        grant: WriteGrant | None = None,
    ) -> tuple[CollectionItem, bool]: ...

    def reorder_items(
        self,
        collection_id: UUID,
        new_order: list[ItemRef],
        expected_version: int,
        now: datetime,
        grant: WriteGrant | None = None,
    ) -> int: ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...
