"""User-side models consumed by the post pipeline: profiles, presence, preferences."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

# Preference category under which flagged posts are stored
CATEGORY_FLAGGED_POST = "flagged_post"


class UserProfile(BaseModel):
    """Public profile of a post author."""

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str
    username: str = ""
    first_name: str = ""
    last_name: str = ""
    nickname: str = ""
    update_at: int = 0


class UserStatus(BaseModel):
    """Presence of one user."""

    model_config = ConfigDict(frozen=True, extra="allow")

    user_id: str
    status: str = "offline"
    last_activity_at: int = 0


class Preference(BaseModel):
    """One user preference. Flagging a post is a preference with value "true"."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    category: str
    name: str
    value: str = ""

    @property
    def key(self) -> str:
        return f"{self.category}--{self.name}"
