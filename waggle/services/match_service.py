"""Match response workflow for the Waggle match service.

Covers what happens to a match after it was created: reading it, listing the
matches of an owner, answering it, and deleting it.
"""

from typing import List, Optional

import sentry_sdk

from waggle.models.match import INACTIVE_STATUSES, Match, MatchStatus, MatchView
from waggle.services.ports import MatchStore
from waggle.utils.database import utcnow
from waggle.utils.errors import AuthorizationError, NotFoundError, ValidationError
from waggle.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# Statuses the receiving owner may answer with
RESPONSE_STATUSES = frozenset(
    {
        MatchStatus.ACCEPTED,
        MatchStatus.REJECTED,
        MatchStatus.CANCELLED,
        MatchStatus.COMPLETED,
    }
)


class MatchService:
    """Operations on stored matches."""

    def __init__(self, matches: MatchStore) -> None:
        self.matches = matches

    async def get_match(self, match_id: str) -> Match:
        """
        Get a match by ID.

        Raises:
            NotFoundError: If the match does not exist.
        """
        match = await self.matches.get_match(match_id)
        if match is None:
            logger.warning("Match not found", match_id=match_id)
            raise NotFoundError(f"Match not found: {match_id}", details={"match_id": match_id})
        return match

    async def get_user_matches(
        self, user_id: str, status: Optional[MatchStatus] = None, limit: int = DEFAULT_PAGE_SIZE
    ) -> List[MatchView]:
        """
        List the live matches of an owner, most recent activity first.

        Args:
            user_id (str): Owner ID.
            status (Optional[MatchStatus]): Only return matches in this status.
            limit (int): Page size, capped at MAX_PAGE_SIZE.

        Returns:
            List[MatchView]: Matches tagged "sent" or "received" from the owner's side.
        """
        if status == MatchStatus.DELETED:
            return []
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        with sentry_sdk.start_span(op="match.list", name=user_id) as span:
            matches = await self.matches.list_for_owner(user_id, status, limit)
            span.set_data("count", len(matches))
        return [
            MatchView(match=m, direction="sent" if m.dog1_owner_id == user_id else "received") for m in matches
        ]

    async def update_match_status(self, match_id: str, user_id: str, new_status: MatchStatus) -> Match:
        """
        Answer a match as the owner of the liked dog.

        Raises:
            NotFoundError: If the match does not exist.
            AuthorizationError: If `user_id` does not own the receiving dog.
            ValidationError: If the status is not an answer or not reachable
                from the current status.
        """
        match = await self.get_match(match_id)

        if match.dog2_owner_id != user_id:
            logger.warning("Unauthorized match response", match_id=match_id, user_id=user_id)
            raise AuthorizationError(
                "Unauthorized to update this match", details={"match_id": match_id, "user_id": user_id}
            )

        if new_status not in RESPONSE_STATUSES or not match.can_transition(new_status):
            raise ValidationError(
                f"Cannot move match from {match.status.value} to {new_status.value}",
                details={"match_id": match_id, "status": match.status.value, "new_status": new_status.value},
            )

        now = utcnow()
        match.status = new_status
        match.active = new_status not in INACTIVE_STATUSES
        match.responded_at = now
        match.responded_by = user_id
        match.last_activity = now

        saved = await self.matches.save(match)
        logger.info("Match status updated", match_id=match_id, status=new_status.value)
        return saved

    async def delete_match(self, match_id: str, user_id: str) -> Match:
        """
        Soft delete a match as either owner.

        Releases the pair key, so the two dogs can match again.

        Raises:
            NotFoundError: If the match does not exist or is already deleted.
            AuthorizationError: If `user_id` owns neither dog.
        """
        match = await self.get_match(match_id)
        if match.status == MatchStatus.DELETED:
            raise NotFoundError(f"Match not found: {match_id}", details={"match_id": match_id})

        if not match.involves_owner(user_id):
            raise AuthorizationError(
                "Unauthorized to delete this match", details={"match_id": match_id, "user_id": user_id}
            )

        match.status = MatchStatus.DELETED
        match.active = False
        match.pair_key = None
        match.last_activity = utcnow()

        saved = await self.matches.save(match)
        logger.info("Match deleted", match_id=match_id, user_id=user_id)
        return saved
