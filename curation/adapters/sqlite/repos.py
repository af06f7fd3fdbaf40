"""
SQLite persistence engine for collections.

Each public method opens its own connection and, for writes, runs inside a
single BEGIN IMMEDIATE transaction. Counters are adjusted with SQL deltas,
whole-collection edits are conditional on `version`, and uniqueness of items,
likes and collaborators is enforced by primary keys.
"""

from __future__ import annotations

import builtins
import json
import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any
from uuid import UUID

from curation.domain.entities import (
    Collaborator,
    Collection,
    CollectionItem,
    CollectionStats,
    Comment,
    Cover,
    ItemProgress,
    ItemRef,
    ShareSettings,
)
from curation.domain.policy import WriteGrant
from curation.ports.repo import CollectionFilter, OwnerStats
from curation.ports.storage import (
    AccessRevokedError,
    ConstraintViolationError,
    DuplicateKeyError,
    RecordNotFoundError,
    StorageUnavailableError,
    VersionConflictError,
)

logger = logging.getLogger(__name__)

SORT_COLUMNS: dict[str, str] = {
    "updated_at": "updated_at",
    "created_at": "created_at",
    "name": "name COLLATE NOCASE",
    "total_items": "total_items",
    "last_activity_at": "last_activity_at",
    "like_count": "like_count",
}

_SIMPLE_COLUMNS = ("name", "description", "visibility")


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def parse_dt(s: str | None) -> datetime | None:
    return datetime.fromisoformat(s) if s else None


def _iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt else None


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLiteCollectionRepo:
    def __init__(self, db_path: str, busy_timeout: float = 5.0):
        self.db_path = db_path
        self.busy_timeout = busy_timeout

    # --- Connection handling ---

    def _get_conn(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.busy_timeout, isolation_level=None)
        except sqlite3.Error as e:
            raise StorageUnavailableError(f"Cannot open database: {e}") from e
        try:
            conn.execute("PRAGMA foreign_keys = ON;")
        except sqlite3.DatabaseError as e:
            conn.close()
            raise StorageUnavailableError(f"Cannot open database: {e}") from e
        conn.row_factory = dict_factory
        return conn

    @contextmanager
    def _read(self) -> Iterator[sqlite3.Connection]:
        conn = self._get_conn()
        try:
            yield conn
        except sqlite3.DatabaseError as e:
            logger.warning("Read failed on %s: %s", self.db_path, e)
            raise StorageUnavailableError(str(e)) from e
        finally:
            conn.close()

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        conn = self._get_conn()
        try:
            conn.execute("BEGIN IMMEDIATE")
            yield conn
            conn.commit()
        except sqlite3.IntegrityError as e:
            conn.rollback()
            logger.warning("Constraint violation on %s: %s", self.db_path, e)
            raise ConstraintViolationError(str(e)) from e
        except sqlite3.DatabaseError as e:
            conn.rollback()
            logger.warning("Write failed on %s: %s", self.db_path, e)
            raise StorageUnavailableError(str(e)) from e
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _check_grant(
        self, conn: sqlite3.Connection, collection_id: UUID, grant: WriteGrant | None
    ) -> None:
        if grant is None:
            return
        row = conn.execute(
            "SELECT role FROM collection_collaborators WHERE collection_id = ? AND user_id = ?",
            (str(collection_id), str(grant.user_id)),
        ).fetchone()
        if not row:
            self._require_collection(conn, collection_id)
        if not row or row["role"] not in grant.roles:
            logger.info(
                "Write by %s on collection %s refused: role no longer held",
                grant.user_id,
                collection_id,
            )
            raise AccessRevokedError(str(collection_id), str(grant.user_id))

    # --- Aggregate ---

    def insert(self, collection: Collection) -> Collection:
        with self._transaction() as conn:
            completed = sum(1 for i in collection.items if i.progress.completed)
            conn.execute(
                """
                INSERT INTO collections (
                    id, owner_id, name, description, type, category, visibility,
                    cover_color, cover_icon, tags_json, forked_from,
                    total_items, completed_items, last_activity_at,
                    like_count, comment_count, version, created_at, updated_at,
                    allow_comments, allow_likes, allow_forks, allow_collaborators
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 0, 0, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(collection.id),
                    str(collection.owner_id),
                    collection.name,
                    collection.description,
                    collection.type,
                    collection.category,
                    collection.visibility,
                    collection.cover.color,
                    collection.cover.icon,
                    json.dumps(collection.tags, ensure_ascii=False),
                    str(collection.forked_from) if collection.forked_from else None,
                    len(collection.items),
                    completed,
                    _iso(collection.stats.last_activity_at),
                    collection.version,
                    collection.created_at.isoformat(),
                    collection.updated_at.isoformat(),
                    int(collection.share_settings.allow_comments),
                    int(collection.share_settings.allow_likes),
                    int(collection.share_settings.allow_forks),
                    int(collection.allow_collaborators),
                ),
            )
            for position, item in enumerate(collection.items):
                self._insert_item(conn, collection.id, item, position)
            for collaborator in collection.collaborators.values():
                self._insert_collaborator(conn, collection.id, collaborator)

            loaded = self._load(conn, collection.id, include_items=True)
            assert loaded is not None
            return loaded

    def get_by_id(self, collection_id: UUID, include_items: bool = True) -> Collection | None:
        with self._read() as conn:
            return self._load(conn, collection_id, include_items=include_items)

    def list(
        self,
        filters: CollectionFilter,
        sort_by: str = "updated_at",
        sort_order: str = "desc",
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[builtins.list[Collection], int]:
        where = ["1=1"]
        params: builtins.list[Any] = []

        shared_sql = (
            "EXISTS (SELECT 1 FROM collection_collaborators cc"
            " WHERE cc.collection_id = collections.id AND cc.user_id = ?)"
        )
        if filters.owner_id and filters.shared_with:
            where.append(f"(owner_id = ? OR {shared_sql})")
            params.extend([str(filters.owner_id), str(filters.shared_with)])
        elif filters.owner_id:
            where.append("owner_id = ?")
            params.append(str(filters.owner_id))
        elif filters.shared_with:
            where.append(shared_sql)
            params.append(str(filters.shared_with))
        if filters.type:
            where.append("type = ?")
            params.append(filters.type)
        if filters.category:
            where.append("category = ?")
            params.append(filters.category)
        if filters.visibility:
            where.append("visibility = ?")
            params.append(filters.visibility)
        if filters.search:
            pattern = f"%{_escape_like(filters.search)}%"
            where.append(
                "(name LIKE ? ESCAPE '\\' OR IFNULL(description, '') LIKE ? ESCAPE '\\'"
                " OR EXISTS (SELECT 1 FROM json_each(collections.tags_json) AS t"
                " WHERE t.value LIKE ? ESCAPE '\\'))"
            )
            params.extend([pattern, pattern, pattern])

        where_sql = " AND ".join(where)
        order_col = SORT_COLUMNS[sort_by]
        direction = "ASC" if sort_order == "asc" else "DESC"

        with self._read() as conn:
            row = conn.execute(
                f"SELECT COUNT(*) AS cnt FROM collections WHERE {where_sql}", params
            ).fetchone()
            total = row["cnt"] if row else 0

            rows = conn.execute(
                f"""
                SELECT * FROM collections WHERE {where_sql}
                ORDER BY {order_col} {direction}, id ASC
                LIMIT ? OFFSET ?
                """,
                [*params, limit, offset],
            ).fetchall()
            collections = [self._map_collection(conn, r, include_items=False) for r in rows]

        return collections, total

    def owner_stats(self, owner_id: UUID) -> OwnerStats:
        with self._read() as conn:
            row = conn.execute(
                """
                SELECT COUNT(*) AS total_collections,
                       COALESCE(SUM(total_items), 0) AS total_items,
                       COALESCE(SUM(completed_items), 0) AS total_completed_items,
                       COALESCE(SUM(CASE WHEN visibility = 'public' THEN 1 ELSE 0 END), 0)
                           AS public_collections
                FROM collections WHERE owner_id = ?
                """,
                (str(owner_id),),
            ).fetchone()
        return OwnerStats(**row) if row else OwnerStats()

    def update_fields(
        self,
        collection_id: UUID,
        fields: dict[str, Any],
        expected_version: int,
        now: datetime,
    ) -> Collection:
        assignments: builtins.list[str] = []
        params: builtins.list[Any] = []
        for key in _SIMPLE_COLUMNS:
            if key in fields:
                assignments.append(f"{key} = ?")
                params.append(fields[key])
        if "tags" in fields:
            assignments.append("tags_json = ?")
            params.append(json.dumps(fields["tags"], ensure_ascii=False))
        if "cover" in fields:
            cover: Cover = fields["cover"]
            assignments.append("cover_color = ?")
            params.append(cover.color)
            assignments.append("cover_icon = ?")
            params.append(cover.icon)
        if "share_settings" in fields:
            settings: ShareSettings = fields["share_settings"]
            for key, value in settings.model_dump().items():
                assignments.append(f"{key} = ?")
                params.append(int(value))
        if "allow_collaborators" in fields:
            assignments.append("allow_collaborators = ?")
            params.append(int(fields["allow_collaborators"]))

        assignments.append("updated_at = ?")
        params.append(now.isoformat())

        with self._transaction() as conn:
            cur = conn.execute(
                f"""
                UPDATE collections SET {", ".join(assignments)}, version = version + 1
                WHERE id = ? AND version = ?
                """,
                [*params, str(collection_id), expected_version],
            )
            if cur.rowcount == 0:
                self._raise_version_miss(conn, collection_id, expected_version)

            loaded = self._load(conn, collection_id, include_items=True)
            assert loaded is not None
            return loaded

    def delete(self, collection_id: UUID) -> None:
        cid = str(collection_id)
        with self._transaction() as conn:
            # Explicit child deletes keep the cascade independent of FK enforcement
            conn.execute("DELETE FROM collection_items WHERE collection_id = ?", (cid,))
            conn.execute("DELETE FROM collection_collaborators WHERE collection_id = ?", (cid,))
            conn.execute("DELETE FROM collection_likes WHERE collection_id = ?", (cid,))
            conn.execute("DELETE FROM collection_comments WHERE collection_id = ?", (cid,))
            cur = conn.execute("DELETE FROM collections WHERE id = ?", (cid,))
            if cur.rowcount == 0:
                raise RecordNotFoundError("Collection", cid)

    # --- Items ---

    def add_item(
        self,
        collection_id: UUID,
        item: CollectionItem,
        now: datetime,
        grant: WriteGrant | None = None,
    ) -> CollectionItem:
        cid = str(collection_id)
        with self._transaction() as conn:
            self._require_collection(conn, collection_id)
            self._check_grant(conn, collection_id, grant)
            row = conn.execute(
                "SELECT COALESCE(MAX(position), -1) + 1 AS next_pos "
                "FROM collection_items WHERE collection_id = ?",
                (cid,),
            ).fetchone()
            position = row["next_pos"]

            try:
                self._insert_item(conn, collection_id, item, position)
            except sqlite3.IntegrityError as e:
                raise DuplicateKeyError("Item", f"{item.item_type}:{item.item_id}") from e

            conn.execute(
                """
                UPDATE collections
                SET total_items = total_items + 1,
                    completed_items = completed_items + ?,
                    last_activity_at = ?, updated_at = ?, version = version + 1
                WHERE id = ?
                """,
                (1 if item.progress.completed else 0, now.isoformat(), now.isoformat(), cid),
            )
            return item.model_copy(update={"order": position})

    def remove_item(
        self,
        collection_id: UUID,
        ref: ItemRef,
        now: datetime,
        grant: WriteGrant | None = None,
    ) -> CollectionItem:
        cid = str(collection_id)
        with self._transaction() as conn:
            self._check_grant(conn, collection_id, grant)
            row = conn.execute(
                "SELECT * FROM collection_items "
                "WHERE collection_id = ? AND item_type = ? AND item_id = ?",
                (cid, ref.item_type, ref.item_id),
            ).fetchone()
            if not row:
                self._require_collection(conn, collection_id)
                raise RecordNotFoundError("Item", f"{ref.item_type}:{ref.item_id}")

            conn.execute(
                "DELETE FROM collection_items "
                "WHERE collection_id = ? AND item_type = ? AND item_id = ?",
                (cid, ref.item_type, ref.item_id),
            )
            # Compact so positions stay a dense 0..N-1 run
            conn.execute(
                "UPDATE collection_items SET position = position - 1 "
                "WHERE collection_id = ? AND position > ?",
                (cid, row["position"]),
            )
            conn.execute(
                """
                UPDATE collections
                SET total_items = total_items - 1,
                    completed_items = completed_items - ?,
                    last_activity_at = ?, updated_at = ?, version = version + 1
                WHERE id = ?
                """,
                (1 if row["completed"] else 0, now.isoformat(), now.isoformat(), cid),
            )
            return self._map_item(row)

    def set_item_progress(
        self,
        collection_id: UUID,
        ref: ItemRef,
        completed: bool,
        now: datetime,
        grant: WriteGrant | None = None,
    ) -> tuple[CollectionItem, bool]:
        cid = str(collection_id)
        key = (cid, ref.item_type, ref.item_id)
        with self._transaction() as conn:
            self._check_grant(conn, collection_id, grant)
            cur = conn.execute(
                """
                UPDATE collection_items SET completed = ?, completed_at = ?
                WHERE collection_id = ? AND item_type = ? AND item_id = ? AND completed != ?
                """,
                (int(completed), now.isoformat() if completed else None, *key, int(completed)),
            )
            changed = cur.rowcount == 1
            if changed:
                conn.execute(
                    """
                    UPDATE collections
                    SET completed_items = completed_items + ?,
                        last_activity_at = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (1 if completed else -1, now.isoformat(), now.isoformat(), cid),
                )

            row = conn.execute(
                "SELECT * FROM collection_items "
                "WHERE collection_id = ? AND item_type = ? AND item_id = ?",
                key,
            ).fetchone()
            if not row:
                self._require_collection(conn, collection_id)
                raise RecordNotFoundError("Item", f"{ref.item_type}:{ref.item_id}")
            return self._map_item(row), changed

    def reorder_items(
        self,
        collection_id: UUID,
        new_order: builtins.list[ItemRef],
        expected_version: int,
        now: datetime,
        grant: WriteGrant | None = None,
    ) -> int:
        cid = str(collection_id)
        with self._transaction() as conn:
            self._check_grant(conn, collection_id, grant)
            cur = conn.execute(
                """
                UPDATE collections
                SET version = version + 1, last_activity_at = ?, updated_at = ?
                WHERE id = ? AND version = ?
                """,
                (now.isoformat(), now.isoformat(), cid, expected_version),
            )
            if cur.rowcount == 0:
                self._raise_version_miss(conn, collection_id, expected_version)

            for position, ref in enumerate(new_order):
                cur = conn.execute(
                    "UPDATE collection_items SET position = ? "
                    "WHERE collection_id = ? AND item_type = ? AND item_id = ?",
                    (position, cid, ref.item_type, ref.item_id),
                )
                if cur.rowcount == 0:
                    raise RecordNotFoundError("Item", f"{ref.item_type}:{ref.item_id}")

            return expected_version + 1

    # --- Social ---

    def toggle_like(
        self,
        collection_id: UUID,
        user_id: UUID,
        now: datetime,
        allow_insert: bool = True,
        grant: WriteGrant | None = None,
    ) -> tuple[bool, int]:
        """Flip the user's like. With `allow_insert` off only an existing like is removed."""
        cid = str(collection_id)
        with self._transaction() as conn:
            self._require_collection(conn, collection_id)
            self._check_grant(conn, collection_id, grant)
            cur = conn.execute(
                "DELETE FROM collection_likes WHERE collection_id = ? AND user_id = ?",
                (cid, str(user_id)),
            )
            if cur.rowcount == 1:
                liked = False
                conn.execute(
                    "UPDATE collections SET like_count = like_count - 1 WHERE id = ?", (cid,)
                )
            elif not allow_insert:
                liked = False
            else:
                liked = True
                conn.execute(
                    "INSERT INTO collection_likes (collection_id, user_id, liked_at) "
                    "VALUES (?, ?, ?)",
                    (cid, str(user_id), now.isoformat()),
                )
                conn.execute(
                    "UPDATE collections SET like_count = like_count + 1 WHERE id = ?", (cid,)
                )

            row = conn.execute(
                "SELECT like_count FROM collections WHERE id = ?", (cid,)
            ).fetchone()
            return liked, row["like_count"]

    def has_liked(self, collection_id: UUID, user_id: UUID) -> bool:
        with self._read() as conn:
            row = conn.execute(
                "SELECT 1 FROM collection_likes WHERE collection_id = ? AND user_id = ?",
                (str(collection_id), str(user_id)),
            ).fetchone()
            return row is not None

    def add_comment(self, comment: Comment, grant: WriteGrant | None = None) -> Comment:
        cid = str(comment.collection_id)
        with self._transaction() as conn:
            self._require_collection(conn, comment.collection_id)
            self._check_grant(conn, comment.collection_id, grant)
            cur = conn.execute(
                """
                INSERT INTO collection_comments (id, collection_id, author_id, content, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    str(comment.id),
                    cid,
                    str(comment.author_id),
                    comment.content,
                    comment.created_at.isoformat(),
                ),
            )
            conn.execute(
                "UPDATE collections SET comment_count = comment_count + 1 WHERE id = ?", (cid,)
            )
            return comment.model_copy(update={"seq": cur.lastrowid or 0})

    def list_comments(
        self, collection_id: UUID, limit: int = 50, offset: int = 0
    ) -> tuple[builtins.list[Comment], int]:
        cid = str(collection_id)
        with self._read() as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS cnt FROM collection_comments WHERE collection_id = ?", (cid,)
            ).fetchone()
            rows = conn.execute(
                """
                SELECT * FROM collection_comments WHERE collection_id = ?
                ORDER BY created_at ASC, seq ASC
                LIMIT ? OFFSET ?
                """,
                (cid, limit, offset),
            ).fetchall()
        return [self._map_comment(r) for r in rows], row["cnt"] if row else 0

    # --- Collaborators ---

    def add_collaborator(
        self,
        collection_id: UUID,
        collaborator: Collaborator,
        grant: WriteGrant | None = None,
    ) -> Collaborator:
        with self._transaction() as conn:
            self._require_collection(conn, collection_id)
            self._check_grant(conn, collection_id, grant)
            try:
                self._insert_collaborator(conn, collection_id, collaborator)
            except sqlite3.IntegrityError as e:
                raise DuplicateKeyError("Collaborator", str(collaborator.user_id)) from e
            return collaborator

    def remove_collaborator(
        self, collection_id: UUID, user_id: UUID, grant: WriteGrant | None = None
    ) -> None:
        with self._transaction() as conn:
            self._check_grant(conn, collection_id, grant)
            cur = conn.execute(
                "DELETE FROM collection_collaborators WHERE collection_id = ? AND user_id = ?",
                (str(collection_id), str(user_id)),
            )
            if cur.rowcount == 0:
                self._require_collection(conn, collection_id)
                raise RecordNotFoundError("Collaborator", str(user_id))

    # --- Internals ---

    def _require_collection(self, conn: sqlite3.Connection, collection_id: UUID) -> None:
        row = conn.execute(
            "SELECT 1 FROM collections WHERE id = ?", (str(collection_id),)
        ).fetchone()
        if not row:
            raise RecordNotFoundError("Collection", str(collection_id))

    def _raise_version_miss(
        self, conn: sqlite3.Connection, collection_id: UUID, expected_version: int
    ) -> None:
        row = conn.execute(
            "SELECT version FROM collections WHERE id = ?", (str(collection_id),)
        ).fetchone()
        if not row:
            raise RecordNotFoundError("Collection", str(collection_id))
        logger.info(
            "Version conflict on collection %s: expected %d, found %d",
            collection_id,
            expected_version,
            row["version"],
        )
        raise VersionConflictError(str(collection_id), expected_version, row["version"])

    def _insert_item(
        self, conn: sqlite3.Connection, collection_id: UUID, item: CollectionItem, position: int
    ) -> None:
        conn.execute(
            """
            INSERT INTO collection_items (
                collection_id, item_type, item_id, item_title, item_description,
                completed, completed_at, added_at, position
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                str(collection_id),
                item.item_type,
                item.item_id,
                item.item_title,
                item.item_description,
                int(item.progress.completed),
                _iso(item.progress.completed_at),
                item.added_at.isoformat(),
                position,
            ),
        )

    def _insert_collaborator(
        self, conn: sqlite3.Connection, collection_id: UUID, collaborator: Collaborator
    ) -> None:
        conn.execute(
            """
            INSERT INTO collection_collaborators (collection_id, user_id, role, added_at, added_by)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                str(collection_id),
                str(collaborator.user_id),
                collaborator.role,
                collaborator.added_at.isoformat(),
                str(collaborator.added_by) if collaborator.added_by else None,
            ),
        )

    def _load(
        self, conn: sqlite3.Connection, collection_id: UUID, include_items: bool
    ) -> Collection | None:
        row = conn.execute(
            "SELECT * FROM collections WHERE id = ?", (str(collection_id),)
        ).fetchone()
        if not row:
            return None
        return self._map_collection(conn, row, include_items=include_items)

    def _map_collection(
        self, conn: sqlite3.Connection, row: dict[str, Any], include_items: bool
    ) -> Collection:
        cid = row["id"]
        items: builtins.list[CollectionItem] = []
        if include_items:
            item_rows = conn.execute(
                "SELECT * FROM collection_items WHERE collection_id = ? ORDER BY position ASC",
                (cid,),
            ).fetchall()
            items = [self._map_item(r) for r in item_rows]

        collab_rows = conn.execute(
            "SELECT * FROM collection_collaborators WHERE collection_id = ? ORDER BY added_at",
            (cid,),
        ).fetchall()
        collaborators = {
            UUID(r["user_id"]): Collaborator(
                user_id=UUID(r["user_id"]),
                role=r["role"],
                added_at=datetime.fromisoformat(r["added_at"]),
                added_by=UUID(r["added_by"]) if r["added_by"] else None,
            )
            for r in collab_rows
        }

        fork_row = conn.execute(
            "SELECT COUNT(*) AS cnt FROM collections WHERE forked_from = ?", (cid,)
        ).fetchone()

        return Collection(
            id=UUID(cid),
            owner_id=UUID(row["owner_id"]),
            name=row["name"],
            description=row["description"],
            type=row["type"],
            category=row["category"],
            visibility=row["visibility"],
            cover=Cover(color=row["cover_color"], icon=row["cover_icon"]),
            tags=json.loads(row["tags_json"]),
            share_settings=ShareSettings(
                allow_comments=bool(row["allow_comments"]),
                allow_likes=bool(row["allow_likes"]),
                allow_forks=bool(row["allow_forks"]),
            ),
            allow_collaborators=bool(row["allow_collaborators"]),
            items=items,
            collaborators=collaborators,
            stats=CollectionStats(
                total_items=row["total_items"],
                completed_items=row["completed_items"],
                last_activity_at=parse_dt(row["last_activity_at"]),
            ),
            like_count=row["like_count"],
            comment_count=row["comment_count"],
            fork_count=fork_row["cnt"] if fork_row else 0,
            forked_from=UUID(row["forked_from"]) if row["forked_from"] else None,
            version=row["version"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def _map_item(self, row: dict[str, Any]) -> CollectionItem:
        return CollectionItem(
            item_type=row["item_type"],
            item_id=row["item_id"],
            item_title=row["item_title"],
            item_description=row["item_description"],
            progress=ItemProgress(
                completed=bool(row["completed"]),
                completed_at=parse_dt(row["completed_at"]),
            ),
            added_at=datetime.fromisoformat(row["added_at"]),
            order=row["position"],
        )

    def _map_comment(self, row: dict[str, Any]) -> Comment:
        return Comment(
            id=UUID(row["id"]),
            collection_id=UUID(row["collection_id"]),
            author_id=UUID(row["author_id"]),
            content=row["content"],
            created_at=datetime.fromisoformat(row["created_at"]),
            seq=row["seq"],
        )
