"""Dog profile model for the Waggle match service."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DogProfile(BaseModel):
    """
    Dog profile model.

    Owned by the profile editing flow; the match service only reads it. `name`
    and `owner_id` may be empty on a partially written profile, which is why
    they are not required here and are checked by `is_complete`.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="dogId")
    name: Optional[str] = None
    owner_id: Optional[str] = Field(default=None, alias="ownerId")
    breed: Optional[str] = None
    gender: Optional[str] = None
    photo_url: Optional[str] = Field(default=None, alias="photoURL")

    def is_complete(self) -> bool:
        """Return True if the profile carries both a display name and an owner."""
        return bool(self.name and self.name.strip()) and bool(self.owner_id and self.owner_id.strip())
