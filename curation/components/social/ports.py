"""
Social component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from curation.domain.entities import Collection, Comment
from curation.domain.policy import WriteGrant


class SocialRepoPort(Protocol):
    """Repository interface for likes, comments and forks."""

    def get_by_id(self, collection_id: UUID, include_items: bool = True) -> Collection | None: ...

    def insert(self, collection: Collection) -> Collection: ...

    def toggle_like(
        self,
        collection_id: UUID,
        user_id: UUID,
        now: datetime,
        allow_insert: bool = True,
        grant: WriteGrant | None = None,
    ) -> tuple[bool, int]: ...

    def has_liked(self, collection_id: UUID, user_id: UUID) -> bool: ...

    def add_comment(self, comment: Comment, grant: WriteGrant | None = None) -> Comment: ...

    def list_comments(
        self, collection_id: UUID, limit: int, offset: int
    ) -> tuple[list[Comment], int]: ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...
