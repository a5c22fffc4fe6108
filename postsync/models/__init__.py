"""
Pydantic models for postsync.

All data shapes defined here. No imports from kernel, services, or actions.
"""

from postsync.models.post import POST_DELETED, Post, PostList
from postsync.models.user import CATEGORY_FLAGGED_POST, Preference, UserProfile, UserStatus

__all__ = [
    # Post models
    "Post",
    "PostList",
    "POST_DELETED",
    # User models
    "UserProfile",
    "UserStatus",
    "Preference",
    "CATEGORY_FLAGGED_POST",
]
