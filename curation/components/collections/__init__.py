"""
Collections component - Collection aggregate lifecycle.

Create, fetch, list, update and delete collections. Listing supports
filtering, sorting, pagination and per-owner aggregate stats.
"""

from .component import (
    run,
    run_create,
    run_delete,
    run_get,
    run_list,
    run_list_public,
    run_update,
    validate_patch,
)
from .models import (
    CollectionListOutput,
    CollectionOutput,
    CreateCollectionInput,
    DeleteCollectionInput,
    GetCollectionInput,
    ListCollectionsInput,
    ListPublicCollectionsInput,
    PaginationInfo,
    UpdateCollectionInput,
)
from .ports import CollectionRepoPort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_create",
    "run_delete",
    "run_get",
    "run_list",
    "run_list_public",
    "run_update",
    "validate_patch",
    # Input models
    "CreateCollectionInput",
    "DeleteCollectionInput",
    "GetCollectionInput",
    "ListCollectionsInput",
    "ListPublicCollectionsInput",
    "UpdateCollectionInput",
    # Output models
    "CollectionListOutput",
    "CollectionOutput",
    "PaginationInfo",
    # Ports
    "CollectionRepoPort",
    "TimePort",
]
