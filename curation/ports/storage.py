"""
Storage error hierarchy raised by persistence adapters.

Components catch these and translate them into typed CollectionError values;
they never escape a `run_*` entry point.
"""


class StorageError(Exception):
    """Base class for storage errors."""


class RecordNotFoundError(StorageError):
    """Raised when the addressed record does not exist."""

    def __init__(self, what: str, key: str) -> None:
        self.what = what
        self.key = key
        super().__init__(f"{what} not found: {key}")


class DuplicateKeyError(StorageError):
    """Raised when an insert-if-absent finds the key already present."""

    def __init__(self, what: str, key: str) -> None:
        self.what = what
        self.key = key
        super().__init__(f"{what} already exists: {key}")


class VersionConflictError(StorageError):
    """Raised when a conditional write finds a different version than expected."""

    def __init__(self, collection_id: str, expected: int, actual: int | None) -> None:
        self.collection_id = collection_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Version conflict on collection {collection_id}: expected {expected}, found {actual}"
        )


class StorageUnavailableError(StorageError):
    """Raised when the underlying store cannot be reached or is locked."""


class ConstraintViolationError(StorageError):
    """Raised when a write breaks a schema constraint (NOT NULL, CHECK, foreign key)."""


class AccessRevokedError(StorageError):
    """Raised when a collaborator's role no longer grants a write at commit time."""

    def __init__(self, collection_id: str, user_id: str) -> None:
        self.collection_id = collection_id
        self.user_id = user_id
        super().__init__(f"User {user_id} no longer has write access to collection {collection_id}")
