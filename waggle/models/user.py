"""User profile model for the Waggle match service."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserProfile(BaseModel):
    """Owner profile, read for its push notification address."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    display_name: Optional[str] = Field(default=None, alias="displayName")
    push_token: Optional[str] = Field(default=None, alias="pushToken")
