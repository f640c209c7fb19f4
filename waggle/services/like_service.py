"""Like (swipe) recording for the Waggle match service."""

from typing import List

import sentry_sdk

from waggle.models.like import LikeChange, LikeOutcome
from waggle.services.match_trigger import MatchCoordinator
from waggle.services.ports import LikeStore
from waggle.utils.errors import ValidationError
from waggle.utils.logging import get_logger

logger = get_logger(__name__)


async def record_like(likes: LikeStore, dog_id: str, target_id: str) -> LikeChange:
    """
    Add `target_id` to the like record of `dog_id`.

    Args:
        likes (LikeStore): Like record store.
        dog_id (str): The dog that swiped right.
        target_id (str): The dog that was liked.

    Returns:
        LikeChange: Snapshots of the record before and after the like.

    Raises:
        ValidationError: If either id is blank or a dog likes itself.
    """
    dog_id = (dog_id or "").strip()
    target_id = (target_id or "").strip()
    if not dog_id or not target_id:
        raise ValidationError("Both dog ids are required", details={"dog_id": dog_id, "target_id": target_id})
    if dog_id == target_id:
        raise ValidationError("A dog cannot like itself", details={"dog_id": dog_id})

    with sentry_sdk.start_span(op="like.record", name=dog_id):
        change = await likes.add_like(dog_id, target_id)
    logger.debug("Like recorded", dog_id=dog_id, target_id=target_id)
    return change


class LikeService:
    """Records a like and runs match detection on the resulting change."""

    def __init__(self, likes: LikeStore, coordinator: MatchCoordinator) -> None:
        self.likes = likes
        self.coordinator = coordinator

    async def like(self, dog_id: str, target_id: str) -> List[LikeOutcome]:
        change = await record_like(self.likes, dog_id, target_id)
        return await self.coordinator.handle_like_change(change)
