"""
Collab component - Collaborator management for collections.

Owners and admins grant viewer/editor/admin roles to other users; the role
matrix itself lives in rules.yaml and is enforced by the PolicyEngine.
"""

from .component import (
    run,
    run_add_collaborator,
    run_list_collaborators,
    run_remove_collaborator,
)
from .models import (
    AddCollaboratorInput,
    CollabListOutput,
    CollabOutput,
    ListCollaboratorsInput,
    RemoveCollaboratorInput,
)
from .ports import CollabRepoPort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_add_collaborator",
    "run_list_collaborators",
    "run_remove_collaborator",
    # Input models
    "AddCollaboratorInput",
    "ListCollaboratorsInput",
    "RemoveCollaboratorInput",
    # Output models
    "CollabListOutput",
    "CollabOutput",
    # Ports
    "CollabRepoPort",
    "TimePort",
]
