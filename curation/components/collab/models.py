"""
Collab component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from curation.domain.entities import Collaborator
from curation.domain.errors import CollectionError, OutputErrorsMixin


@dataclass(frozen=True)
class AddCollaboratorInput:
    actor_id: UUID
    collection_id: UUID
    target_user_id: UUID
    role: str


@dataclass(frozen=True)
class RemoveCollaboratorInput:
    actor_id: UUID
    collection_id: UUID
    target_user_id: UUID


@dataclass(frozen=True)
class ListCollaboratorsInput:
    actor_id: UUID
    collection_id: UUID


@dataclass(frozen=True)
class CollabOutput(OutputErrorsMixin):
    collaborator: Collaborator | None = None
    errors: list[CollectionError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class CollabListOutput(OutputErrorsMixin):
    owner_id: UUID | None = None
    collaborators: list[Collaborator] = field(default_factory=list)
    errors: list[CollectionError] = field(default_factory=list)
    success: bool = True
