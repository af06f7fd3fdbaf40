"""
Social component - Likes, comments and forking.
"""

from .component import (
    build_fork,
    fork_name,
    run,
    run_add_comment,
    run_fork,
    run_list_comments,
    run_toggle_like,
)
from .models import (
    AddCommentInput,
    CommentListOutput,
    CommentOutput,
    ForkCollectionInput,
    ForkOutput,
    LikeOutput,
    ListCommentsInput,
    ToggleLikeInput,
)
from .ports import SocialRepoPort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_add_comment",
    "run_fork",
    "run_list_comments",
    "run_toggle_like",
    # Helpers
    "build_fork",
    "fork_name",
    # Input models
    "AddCommentInput",
    "ForkCollectionInput",
    "ListCommentsInput",
    "ToggleLikeInput",
    # Output models
    "CommentListOutput",
    "CommentOutput",
    "ForkOutput",
    "LikeOutput",
    # Ports
    "SocialRepoPort",
    "TimePort",
]
