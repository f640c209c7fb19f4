"""In-memory stand-ins for the store and push ports."""

import itertools
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from waggle.models.dog import DogProfile
from waggle.models.like import LikeChange, LikeRecord
from waggle.models.match import Match, MatchStatus, pair_key
from waggle.models.user import UserProfile
from waggle.services.push_service import PushMessage
from waggle.utils.errors import ExternalServiceError, MatchExistsError


class FakeLikeStore:
    def __init__(self) -> None:
        self.records: Dict[str, List[str]] = {}

    def seed(self, dog_id: str, *likes: str) -> None:
        self.records[dog_id] = list(likes)

    async def get_likes(self, dog_id: str) -> Optional[LikeRecord]:
        if dog_id not in self.records:
            return None
        return LikeRecord(dog_id=dog_id, likes=list(self.records[dog_id]))

    async def add_like(self, dog_id: str, target_id: str) -> LikeChange:
        before = await self.get_likes(dog_id)
        likes = list(before.likes) if before else []
        if target_id not in likes:
            likes.append(target_id)
        self.records[dog_id] = likes
        return LikeChange(dog_id=dog_id, before=before, after=LikeRecord(dog_id=dog_id, likes=likes))


class FakeDogStore:
    def __init__(self) -> None:
        self.dogs: Dict[str, DogProfile] = {}

    def seed(self, dog_id: str, name: Optional[str], owner_id: Optional[str]) -> None:
        self.dogs[dog_id] = DogProfile(id=dog_id, name=name, owner_id=owner_id)

    async def get_dog(self, dog_id: str) -> Optional[DogProfile]:
        return self.dogs.get(dog_id)


class FakeUserStore:
    def __init__(self) -> None:
        self.users: Dict[str, UserProfile] = {}

    def seed(self, user_id: str, push_token: Optional[str]) -> None:
        self.users[user_id] = UserProfile(id=user_id, push_token=push_token)

    async def get_user(self, user_id: str) -> Optional[UserProfile]:
        return self.users.get(user_id)


class FakeMatchStore:
    """Keeps matches in a dict and enforces the unique pair key like the SQL table."""

    def __init__(self) -> None:
        self.matches: Dict[str, Match] = {}
        self._ids = itertools.count(1)
        self._clock = datetime(2026, 1, 1, 12, 0, 0)

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def seed(self, dog1_id: str, dog2_id: str, owner1: str = "owner-x", owner2: str = "owner-y", **fields) -> Match:
        match = Match.for_pair(dog1_id, dog2_id, owner1, owner2).model_copy(update=fields)
        match.id = f"match-{next(self._ids)}"
        match.created_at = match.updated_at = match.last_activity = self._tick()
        self.matches[match.id] = match
        return match

    async def find_between(self, dog_a_id: str, dog_b_id: str) -> Optional[Match]:
        for match in self.matches.values():
            if match.status != MatchStatus.DELETED and {match.dog1_id, match.dog2_id} == {dog_a_id, dog_b_id}:
                return match
        return None

    async def create_if_absent(self, match: Match) -> Match:
        key = match.pair_key or pair_key(match.dog1_id, match.dog2_id)
        if any(m.pair_key == key for m in self.matches.values()):
            raise MatchExistsError("Match already exists for this pair", pair_key=key)
        stored = match.model_copy(update={"id": f"match-{next(self._ids)}", "pair_key": key})
        stored.created_at = stored.updated_at = stored.last_activity = self._tick()
        self.matches[stored.id] = stored
        return stored

    async def get_match(self, match_id: str) -> Optional[Match]:
        match = self.matches.get(match_id)
        return match.model_copy() if match else None

    async def list_for_owner(self, user_id: str, status: Optional[MatchStatus], limit: int) -> List[Match]:
        found = [
            m
            for m in self.matches.values()
            if m.involves_owner(user_id) and m.status != MatchStatus.DELETED and (status is None or m.status == status)
        ]
        found.sort(key=lambda m: m.last_activity, reverse=True)
        return found[:limit]

    async def save(self, match: Match) -> Match:
        stored = match.model_copy(update={"updated_at": self._tick()})
        self.matches[stored.id] = stored
        return stored


class FakePushSender:
    def __init__(self, fail_for: Optional[set] = None) -> None:
        self.sent: List[PushMessage] = []
        self.fail_for = fail_for or set()

    async def send(self, message: PushMessage) -> None:
        if message.to in self.fail_for:
            raise ExternalServiceError("Push gateway returned 503", service="expo_push")
        self.sent.append(message)
