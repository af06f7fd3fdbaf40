"""
Items component - Item membership, ordering and progress tracking.
"""

from .component import (
    run,
    run_add_item,
    run_remove_item,
    run_reorder,
    run_update_progress,
    validate_new_order,
)
from .models import (
    AddItemInput,
    ItemOutput,
    RemoveItemInput,
    ReorderItemsInput,
    ReorderOutput,
    UpdateProgressInput,
)
from .ports import ItemRepoPort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_add_item",
    "run_remove_item",
    "run_reorder",
    "run_update_progress",
    "validate_new_order",
    # Input models
    "AddItemInput",
    "RemoveItemInput",
    "ReorderItemsInput",
    "UpdateProgressInput",
    # Output models
    "ItemOutput",
    "ReorderOutput",
    # Ports
    "ItemRepoPort",
    "TimePort",
]
