"""
Collab component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from curation.domain.entities import Collaborator, Collection
from curation.domain.policy import WriteGrant


class CollabRepoPort(Protocol):
    """Repository interface for collaborator grants."""

    def get_by_id(self, collection_id: UUID, include_items: bool = True) -> Collection | None: ...

    def add_collaborator(
        self,
        collection_id: UUID,
        collaborator: Collaborator,
        grant: WriteGrant | None = None,
    ) -> Collaborator: ...

    def remove_collaborator(
        self, collection_id: UUID, user_id: UUID, grant: WriteGrant | None = None
    ) -> None: ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...
