import os
from functools import lru_cache
from pathlib import Path
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from curation.adapters.clock import SystemClock
from curation.adapters.sqlite.repos import SQLiteCollectionRepo
from curation.domain.policy import PolicyEngine
from curation.rules.loader import load_rules
from curation.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("CURATION_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "curation.db")
        self.rules_path = Path(os.environ.get("CURATION_RULES_PATH", self.base_dir / "rules.yaml"))
        self.migrations_dir = self.base_dir / "migrations"


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


# --- Repos ---
def get_repo(
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> SQLiteCollectionRepo:
    return SQLiteCollectionRepo(settings.db_path, busy_timeout=rules.storage.busy_timeout_seconds)


# --- Services ---
def get_policy(rules: Rules = Depends(get_rules)) -> PolicyEngine:
    return PolicyEngine(rules.access)


_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


# --- Identity ---
def get_actor_id(x_actor_id: str | None = Header(default=None)) -> UUID:
    """
    Verified actor id, set by the upstream gateway after authentication.

    Missing header -> 401, malformed id -> 400.
    """
    if not x_actor_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    try:
        return UUID(x_actor_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid actor id",
        ) from None
