"""Collaborator interfaces used by the match services.

The coordinator and the match workflow only see these protocols. The SQL
implementations live in `waggle.services.stores`, and tests substitute
in-memory fakes.
"""

from typing import List, Optional, Protocol

from waggle.models.dog import DogProfile
from waggle.models.like import LikeChange, LikeRecord
from waggle.models.match import Match, MatchStatus
from waggle.models.user import UserProfile
from waggle.services.push_service import PushMessage


class LikeStore(Protocol):
    """Per-dog like records."""

    async def get_likes(self, dog_id: str) -> Optional[LikeRecord]:
        ...

    async def add_like(self, dog_id: str, target_id: str) -> LikeChange:
        ...


class DogStore(Protocol):
    """Read access to dog profiles."""

    async def get_dog(self, dog_id: str) -> Optional[DogProfile]:
        ...


class UserStore(Protocol):
    """Read access to owner profiles."""

    async def get_user(self, user_id: str) -> Optional[UserProfile]:
        ...


class MatchStore(Protocol):
    """Match records.

    `create_if_absent` raises `MatchExistsError` when a live match already holds
    the pair key of the new match.
    """

    async def find_between(self, dog_a_id: str, dog_b_id: str) -> Optional[Match]:
        ...

    async def create_if_absent(self, match: Match) -> Match:
        ...

    async def get_match(self, match_id: str) -> Optional[Match]:
        ...

    async def list_for_owner(self, user_id: str, status: Optional[MatchStatus], limit: int) -> List[Match]:
        ...

    async def save(self, match: Match) -> Match:
        ...


class PushSender(Protocol):
    """Push notification gateway."""

    async def send(self, message: PushMessage) -> None:
        ...
