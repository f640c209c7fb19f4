"""Like record models for the Waggle match service."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LikeRecord(BaseModel):
    """
    Like record model.

    One record per dog, holding the ids of every dog it has liked. The set is
    stored as a list to keep the document shape, with duplicates dropped on
    load.
    """

    model_config = ConfigDict(populate_by_name=True)

    dog_id: Optional[str] = Field(default=None, alias="dogId")
    likes: List[str] = Field(default_factory=list)

    @field_validator("likes", mode="before")
    @classmethod
    def dedupe_likes(cls, v: Optional[List[str]]) -> List[str]:
        """Treat a missing list as empty and drop repeated ids, keeping first order."""
        if v is None:
            return []
        return list(dict.fromkeys(str(item) for item in v if item))

    def has_liked(self, dog_id: str) -> bool:
        """Return True if this record contains `dog_id`."""
        return dog_id in self.likes


class LikeChange(BaseModel):
    """
    Before/after pair of one like record mutation.

    Either snapshot may be absent (record created or deleted).
    """

    dog_id: str
    before: Optional[LikeRecord] = None
    after: Optional[LikeRecord] = None

    def new_likes(self) -> List[str]:
        """
        Ids present in the new snapshot and absent from the previous one.

        Order follows the new snapshot. A dog liking itself is never reported.
        """
        before = set(self.before.likes) if self.before else set()
        after = self.after.likes if self.after else []
        return [dog_id for dog_id in after if dog_id not in before and dog_id != self.dog_id]


class OutcomeKind(str, Enum):
    """What happened to one newly liked dog during a trigger run."""

    UNRECIPROCATED = "unreciprocated"
    ALREADY_MATCHED = "already_matched"
    MISSING_PROFILE = "missing_profile"
    INVALID_PROFILE = "invalid_profile"
    MATCHED = "matched"


class LikeOutcome(BaseModel):
    """Result for one (dog, liked dog) pair."""

    dog_id: str
    liked_dog_id: str
    kind: OutcomeKind
    match_id: Optional[str] = None
    notifications_sent: int = 0
