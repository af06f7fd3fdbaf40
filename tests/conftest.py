import os
from datetime import UTC, datetime, timedelta
from pathlib import Path
from uuid import UUID, uuid4

import pytest

from curation.adapters.sqlite.migrator import SQLiteMigrator
from curation.adapters.sqlite.repos import SQLiteCollectionRepo
from curation.components.collections import CreateCollectionInput, run_create
from curation.domain.entities import Collection
from curation.domain.policy import PolicyEngine
from curation.rules.loader import load_rules
from curation.rules.models import Rules

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class FixedClock:
    """Deterministic clock; `advance` moves it forward."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)

    def now(self) -> datetime:
        return self.current

    def now_utc(self) -> datetime:
        return self.current

    def advance(self, seconds: float = 1.0) -> datetime:
        self.current = self.current + timedelta(seconds=seconds)
        return self.current


class TickingClock(FixedClock):
    """Advances one second on every read so timestamps are strictly ordered."""

    def now_utc(self) -> datetime:
        return self.advance(1)


@pytest.fixture
def rules() -> Rules:
    # Load REAL rules from project root
    return load_rules(PROJECT_ROOT / "rules.yaml")


@pytest.fixture
def db_path(tmp_path) -> str:
    path = os.path.join(str(tmp_path), "curation.db")
    SQLiteMigrator(path, str(PROJECT_ROOT / "migrations")).run_migrations()
    return path


@pytest.fixture
def repo(db_path, rules) -> SQLiteCollectionRepo:
    return SQLiteCollectionRepo(db_path, busy_timeout=rules.storage.busy_timeout_seconds)


@pytest.fixture
def policy(rules) -> PolicyEngine:
    return PolicyEngine(rules.access)


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def owner_id() -> UUID:
    return uuid4()


@pytest.fixture
def make_collection(repo, rules, clock, owner_id):
    """Factory creating a collection through the component."""

    def _make(
        name: str = "Roman Britain",
        owner: UUID | None = None,
        type: str = "learning-path",
        category: str = "history",
        visibility: str = "private",
        **kwargs,
    ) -> Collection:
        result = run_create(
            CreateCollectionInput(
                owner_id=owner or owner_id,
                name=name,
                type=type,
                category=category,
                visibility=visibility,
                **kwargs,
            ),
            repo=repo,
            rules=rules,
            time=clock,
        )
        assert result.success, result.errors
        assert result.collection is not None
        return result.collection

    return _make
