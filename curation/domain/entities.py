from datetime import UTC, datetime
from typing import Literal, NamedTuple
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, computed_field

# --- Enums / Literals ---
CollectionType = Literal["learning-path", "favorites", "wishlist", "completed", "research", "custom"]
CollectionCategory = Literal[
    "heritage", "history", "culture", "artifacts", "courses", "games", "mixed"
]
ItemType = Literal[
    "artifact", "course", "quiz", "game", "flashcard", "museum", "tour", "lesson", "livesession"
]
CollaboratorRole = Literal["viewer", "editor", "admin"]
Visibility = Literal["private", "public"]

DEFAULT_COVER_COLOR = "#3B82F6"


def utcnow() -> datetime:
    return datetime.now(UTC)


def completion_percentage(total_items: int, completed_items: int) -> int:
    """Rounded share of completed items, 0 for an empty collection."""
    if total_items <= 0:
        return 0
    # Half-up rounding in integer arithmetic (12.5% -> 13)
    pct = (completed_items * 200 + total_items) // (2 * total_items)
    return max(0, min(100, pct))


class ItemRef(NamedTuple):
    """Identity of an item inside a collection: (item_type, external id)."""

    item_type: ItemType
    item_id: str


# --- Items ---

class ItemProgress(BaseModel):
    completed: bool = False
    completed_at: datetime | None = None


class CollectionItem(BaseModel):
    item_type: ItemType
    item_id: str
    # Snapshot taken at add time, never re-synced
    item_title: str
    item_description: str | None = None
    progress: ItemProgress = Field(default_factory=ItemProgress)
    added_at: datetime = Field(default_factory=utcnow)
    order: int = 0

    @property
    def ref(self) -> ItemRef:
        return ItemRef(self.item_type, self.item_id)


# --- Collection ---

class CollectionStats(BaseModel):
    total_items: int = 0
    completed_items: int = 0
    last_activity_at: datetime | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def completion_percentage(self) -> int:
        return completion_percentage(self.total_items, self.completed_items)


class Cover(BaseModel):
    color: str = DEFAULT_COVER_COLOR
    icon: str | None = None


class ShareSettings(BaseModel):
    """What non-owners may do with a collection they can read."""

    allow_comments: bool = True
    allow_likes: bool = True
    allow_forks: bool = True


class Collaborator(BaseModel):
    user_id: UUID
    role: CollaboratorRole
    added_at: datetime = Field(default_factory=utcnow)
    added_by: UUID | None = None


class Collection(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    owner_id: UUID
    name: str
    description: str | None = None
    type: CollectionType
    category: CollectionCategory
    visibility: Visibility = "private"
    cover: Cover = Field(default_factory=Cover)
    tags: list[str] = Field(default_factory=list)
    share_settings: ShareSettings = Field(default_factory=ShareSettings)
    allow_collaborators: bool = True

    items: list[CollectionItem] = Field(default_factory=list)
    collaborators: dict[UUID, Collaborator] = Field(default_factory=dict)

    stats: CollectionStats = Field(default_factory=CollectionStats)
    like_count: int = 0
    comment_count: int = 0
    fork_count: int = 0
    forked_from: UUID | None = None

    version: int = 1
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def completion_percentage(self) -> int:
        return self.stats.completion_percentage

    @property
    def is_public(self) -> bool:
        return self.visibility == "public"

    def role_of(self, user_id: UUID) -> CollaboratorRole | None:
        collaborator = self.collaborators.get(user_id)
        return collaborator.role if collaborator else None

    def find_item(self, ref: ItemRef) -> CollectionItem | None:
        for item in self.items:
            if item.ref == ref:
                return item
        return None


# --- Social ---

class Comment(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    collection_id: UUID
    author_id: UUID
    content: str
    created_at: datetime = Field(default_factory=utcnow)
    seq: int = 0

