"""Match model for the Waggle match service."""

from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, Field


class MatchStatus(str, Enum):
    """
    Match status enumeration.

    Every match starts as PENDING when the mutual like is detected. The
    receiving owner answers it; EXPIRED and DELETED are applied from outside.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    EXPIRED = "expired"
    DELETED = "deleted"


ALLOWED_TRANSITIONS: Dict[MatchStatus, FrozenSet[MatchStatus]] = {
    MatchStatus.PENDING: frozenset(
        {
            MatchStatus.ACCEPTED,
            MatchStatus.REJECTED,
            MatchStatus.CANCELLED,
            MatchStatus.EXPIRED,
            MatchStatus.DELETED,
        }
    ),
    MatchStatus.ACCEPTED: frozenset({MatchStatus.COMPLETED, MatchStatus.EXPIRED, MatchStatus.DELETED}),
    MatchStatus.REJECTED: frozenset({MatchStatus.EXPIRED, MatchStatus.DELETED}),
    MatchStatus.CANCELLED: frozenset({MatchStatus.EXPIRED, MatchStatus.DELETED}),
    MatchStatus.COMPLETED: frozenset({MatchStatus.EXPIRED, MatchStatus.DELETED}),
    MatchStatus.EXPIRED: frozenset({MatchStatus.DELETED}),
    MatchStatus.DELETED: frozenset(),
}

# Statuses after which the match is no longer shown as active
INACTIVE_STATUSES = frozenset(
    {
        MatchStatus.REJECTED,
        MatchStatus.CANCELLED,
        MatchStatus.COMPLETED,
        MatchStatus.EXPIRED,
        MatchStatus.DELETED,
    }
)


def pair_key(dog_a_id: str, dog_b_id: str) -> str:
    """
    Canonical key of an unordered pair of dogs.

    The ids are sorted so that (a, b) and (b, a) yield the same key, and the
    first id is prefixed with its length so that ids containing the delimiter
    cannot make two different pairs collide ("a:b" + "c" vs "a" + "b:c").
    Used as the unique column that turns match creation into an
    insert-if-absent.
    """
    first, second = sorted((dog_a_id, dog_b_id))
    return f"{len(first)}:{first}:{second}"


class Match(BaseModel):
    """
    Match model.

    Persisted record of a mutual like between two dogs, with the owners of both
    dogs copied in at creation time.
    """

    id: Optional[str] = None
    participants: List[str]
    dog1_id: str
    dog2_id: str
    dog1_owner_id: str
    dog2_owner_id: str
    initiated_by: Optional[str] = None
    status: MatchStatus = MatchStatus.PENDING
    active: bool = True
    pair_key: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_activity: Optional[datetime] = None
    responded_at: Optional[datetime] = None
    responded_by: Optional[str] = None

    @classmethod
    def for_pair(cls, dog1_id: str, dog2_id: str, dog1_owner_id: str, dog2_owner_id: str) -> "Match":
        """Build a new pending match; dog1 is the dog whose like completed the pair."""
        return cls(
            participants=[dog1_id, dog2_id],
            dog1_id=dog1_id,
            dog2_id=dog2_id,
            dog1_owner_id=dog1_owner_id,
            dog2_owner_id=dog2_owner_id,
            initiated_by=dog1_owner_id,
            pair_key=pair_key(dog1_id, dog2_id),
        )

    def involves_owner(self, user_id: str) -> bool:
        """Return True if `user_id` owns either dog of the match."""
        return user_id in (self.dog1_owner_id, self.dog2_owner_id)

    def can_transition(self, new_status: MatchStatus) -> bool:
        """Return True if moving from the current status to `new_status` is allowed."""
        return new_status in ALLOWED_TRANSITIONS[self.status]


class MatchView(BaseModel):
    """
    Match as listed for one owner.

    `direction` is "sent" when the owner's dog completed the pair (dog1) and
    "received" otherwise.
    """

    match: Match
    direction: str = Field(pattern="^(sent|received)$")
