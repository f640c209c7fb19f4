"""Mutual-match detection for like record changes.

`MatchCoordinator.handle_like_change` runs once per mutation of a dog's like
record. For each newly liked dog it checks whether the like is returned, makes
sure the pair has no live match yet, writes a pending match and pushes a
notification to both owners.

Delivery of the change events is at-least-once. A redelivered change is
harmless because match creation is an insert-if-absent on the canonical pair
key, so the second attempt ends as `already_matched`.
"""

import asyncio
from typing import List, Optional, Tuple

import sentry_sdk

from waggle.config import settings
from waggle.models.dog import DogProfile
from waggle.models.like import LikeChange, LikeOutcome, OutcomeKind
from waggle.models.match import Match
from waggle.services.ports import DogStore, LikeStore, MatchStore, PushSender, UserStore
from waggle.services.push_service import PushMessage
from waggle.utils.errors import MatchExistsError, NotFoundError, ValidationError
from waggle.utils.logging import bind_trigger_context, get_logger

logger = get_logger(__name__)


def match_push_body(own_dog: DogProfile, other_dog: DogProfile) -> str:
    """Notification text for the owner of `own_dog`."""
    return f"{own_dog.name} and {other_dog.name} liked each other. Say hi!"


class MatchCoordinator:
    """
    Reacts to like record changes and turns mutual likes into matches.

    Args:
        likes (LikeStore): Like records, read for reciprocity.
        dogs (DogStore): Dog profiles, read for names and owners.
        matches (MatchStore): Match records, checked and written.
        users (UserStore): Owner profiles, read for push tokens.
        push (PushSender): Push gateway.
    """

    def __init__(
        self,
        likes: LikeStore,
        dogs: DogStore,
        matches: MatchStore,
        users: UserStore,
        push: PushSender,
    ) -> None:
        self.likes = likes
        self.dogs = dogs
        self.matches = matches
        self.users = users
        self.push = push

    async def handle_like_change(self, change: LikeChange) -> List[LikeOutcome]:
        """
        Process one like record mutation.

        Newly liked dogs are handled one after the other and independently: a
        skipped pair never stops the rest. Store failures propagate so that the
        event source redelivers the change.

        Args:
            change (LikeChange): Before/after snapshots of the like record.

        Returns:
            List[LikeOutcome]: One outcome per newly liked dog, empty when the
            change added no likes.
        """
        dog_id = change.dog_id
        bind_trigger_context(dog_id)
        new_likes = change.new_likes()
        if not new_likes:
            logger.debug("No new likes in change")
            return []

        with sentry_sdk.start_span(op="match.trigger", name=dog_id) as span:
            span.set_data("new_likes", len(new_likes))
            outcomes = []
            for liked_dog_id in new_likes:
                logger.info("Dog liked another dog", liked_dog_id=liked_dog_id)
                outcomes.append(await self._process_pair(dog_id, liked_dog_id))

            span.set_data("matched", sum(1 for o in outcomes if o.kind == OutcomeKind.MATCHED))
            return outcomes

    async def _process_pair(self, dog_id: str, liked_dog_id: str) -> LikeOutcome:
        outcome = LikeOutcome(dog_id=dog_id, liked_dog_id=liked_dog_id, kind=OutcomeKind.UNRECIPROCATED)

        if not await self.is_reciprocated(dog_id, liked_dog_id):
            return outcome

        logger.info("Mutual like detected", liked_dog_id=liked_dog_id)
        if await self.match_exists(dog_id, liked_dog_id):
            logger.info("Match already exists, skipping", liked_dog_id=liked_dog_id)
            outcome.kind = OutcomeKind.ALREADY_MATCHED
            return outcome

        try:
            match, dog, liked_dog = await self.create_match(dog_id, liked_dog_id)
        except NotFoundError as e:
            logger.warning("Dog profile not found, skipping match creation", **e.details)
            outcome.kind = OutcomeKind.MISSING_PROFILE
            return outcome
        except ValidationError as e:
            logger.warning("Dog profile incomplete, skipping match creation", **e.details)
            outcome.kind = OutcomeKind.INVALID_PROFILE
            return outcome
        except MatchExistsError as e:
            # Lost the race against a concurrent invocation for the same pair
            logger.info("Match created concurrently, skipping", pair_key=e.pair_key)
            outcome.kind = OutcomeKind.ALREADY_MATCHED
            return outcome

        logger.info("Match created", match_id=match.id, liked_dog_id=liked_dog_id)
        outcome.kind = OutcomeKind.MATCHED
        outcome.match_id = match.id
        outcome.notifications_sent = await self.notify_match(match, dog, liked_dog)
        return outcome

    async def is_reciprocated(self, self_id: str, candidate_id: str) -> bool:
        """Return True if the candidate's like record already contains `self_id`."""
        record = await self.likes.get_likes(candidate_id)
        if record is None:
            return False
        return record.has_liked(self_id)

    async def match_exists(self, self_id: str, candidate_id: str) -> bool:
        """Return True if a live match already links the two dogs, in either order."""
        return await self.matches.find_between(self_id, candidate_id) is not None

    async def create_match(self, self_id: str, candidate_id: str) -> Tuple[Match, DogProfile, DogProfile]:
        """
        Load and validate both dog profiles, then persist a pending match.

        Returns:
            Tuple[Match, DogProfile, DogProfile]: The stored match and both profiles.

        Raises:
            NotFoundError: If either dog profile is missing.
            ValidationError: If either profile lacks a name or an owner.
            MatchExistsError: If a live match for the pair was written meanwhile.
        """
        dog, candidate = await asyncio.gather(self.dogs.get_dog(self_id), self.dogs.get_dog(candidate_id))
        missing = [dog_id for dog_id, profile in ((self_id, dog), (candidate_id, candidate)) if profile is None]
        if missing or dog is None or candidate is None:
            raise NotFoundError("Dog profile not found", details={"dog_ids": missing})

        incomplete = [profile.id for profile in (dog, candidate) if not profile.is_complete()]
        if incomplete:
            raise ValidationError("Dog profile is missing a name or owner", details={"dog_ids": incomplete})

        match = Match.for_pair(
            dog1_id=self_id,
            dog2_id=candidate_id,
            dog1_owner_id=dog.owner_id or "",
            dog2_owner_id=candidate.owner_id or "",
        )
        stored = await self.matches.create_if_absent(match)
        return stored, dog, candidate

    async def notify_match(self, match: Match, dog: DogProfile, other_dog: DogProfile) -> int:
        """
        Push a match notification to both owners.

        Owners without a push token are skipped. Dispatch failures are logged
        and dropped; the match stays in place.

        Returns:
            int: Number of notifications the gateway accepted.
        """
        results = await asyncio.gather(
            self._notify_owner(match, match.dog1_owner_id, dog, other_dog),
            self._notify_owner(match, match.dog2_owner_id, other_dog, dog),
        )
        return sum(1 for sent in results if sent)

    async def _notify_owner(
        self, match: Match, owner_id: str, own_dog: DogProfile, other_dog: DogProfile
    ) -> bool:
        # The match is already committed; nothing here may fail the invocation
        try:
            user = await self.users.get_user(owner_id)
            token: Optional[str] = user.push_token if user else None
            if not token:
                logger.debug("Owner has no push token, skipping notification", owner_id=owner_id)
                return False

            message = PushMessage(
                to=token,
                title=settings.MATCH_PUSH_TITLE,
                body=match_push_body(own_dog, other_dog),
                data={"matchId": match.id},
            )
            await self.push.send(message)
        except Exception as e:
            logger.warning(
                "Failed to send match notification",
                owner_id=owner_id,
                match_id=match.id,
                error_type=e.__class__.__name__,
                error=str(e),
            )
            return False

        logger.info("Match notification sent", owner_id=owner_id, match_id=match.id)
        return True
