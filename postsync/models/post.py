"""Post models — the wire shape of a chat message and of a page of messages."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Value of Post.state for a soft-deleted placeholder
POST_DELETED = "DELETED"


class Post(BaseModel):
    """
    A single chat message as the server returns it.

    Frozen: the reducer replaces records, it never edits them in place.
    Unknown server fields are kept so a round trip through the store
    does not lose data.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str
    channel_id: str
    user_id: str = ""
    # Thread root this post comments on; empty for top-level posts
    root_id: str = ""
    parent_id: str = ""
    # Milliseconds since epoch
    create_at: int = 0
    update_at: int = 0
    delete_at: int = 0
    message: str = ""
    type: str = ""
    props: dict[str, Any] = Field(default_factory=dict)
    file_ids: list[str] = Field(default_factory=list)
    has_reactions: bool = False
    state: str = ""

    @property
    def is_deleted(self) -> bool:
        return self.delete_at > 0 or self.state == POST_DELETED

    def as_deleted(self) -> Post:
        """Placeholder copy: same identity and timestamps, content and attachments cleared."""
        return self.model_copy(
            update={
                "message": "",
                "file_ids": [],
                "props": {k: v for k, v in self.props.items() if k != "attachments"},
                "has_reactions": False,
                "state": POST_DELETED,
            }
        )


class PostList(BaseModel):
    """A page of posts: records keyed by id plus the server's ordering."""

    posts: dict[str, Post] = Field(default_factory=dict)
    order: list[str] = Field(default_factory=list)

    def author_ids(self) -> list[str]:
        """Distinct author ids in first-seen order."""
        seen: dict[str, None] = {}
        for post in self.posts.values():
            if post.user_id:
                seen.setdefault(post.user_id, None)
        return list(seen)
