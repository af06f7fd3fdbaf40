from curation.components._guard import storage_error
from curation.ports.storage import (
    AccessRevokedError,
    ConstraintViolationError,
    DuplicateKeyError,
    RecordNotFoundError,
    StorageError,
    StorageUnavailableError,
    VersionConflictError,
)


def test_record_not_found_maps_to_not_found():
    err = storage_error(RecordNotFoundError("Item", "artifact:a1"))
    assert err.kind == "not_found"
    assert err.code == "item_not_found"


def test_duplicate_maps_to_conflict():
    err = storage_error(DuplicateKeyError("Collaborator", "u1"))
    assert err.kind == "conflict"
    assert err.code == "collaborator_exists"


def test_version_conflict_maps_to_conflict():
    err = storage_error(VersionConflictError("c1", 3, 4))
    assert err.kind == "conflict"
    assert err.code == "version_conflict"
    assert err.field == "version"


def test_unavailable_and_unknown_storage_errors():
    assert storage_error(StorageUnavailableError("database is locked")).kind == (
        "dependency_unavailable"
    )
    assert storage_error(StorageError("boom")).kind == "dependency_unavailable"


def test_revoked_access_maps_to_permission_denied():
    err = storage_error(AccessRevokedError("c1", "u1"))
    assert err.kind == "permission_denied"
    assert err.code == "access_revoked"


def test_constraint_violation_maps_to_validation():
    err = storage_error(ConstraintViolationError("NOT NULL constraint failed"))
    assert err.kind == "validation"
    assert err.code == "constraint_violation"
