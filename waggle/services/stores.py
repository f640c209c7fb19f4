"""SQLAlchemy-backed stores for likes, dogs, users and matches.

Session work is blocking, so each public coroutine runs its body with
`asyncio.to_thread`. Any SQLAlchemy failure surfaces as `DatabaseError`.
"""

import asyncio
import uuid
from typing import Callable, List, Optional, TypeVar

import sentry_sdk
from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from waggle.models.dog import DogProfile
from waggle.models.like import LikeChange, LikeRecord
from waggle.models.match import Match, MatchStatus
from waggle.models.user import UserProfile
from waggle.utils.database import DogDB, DogLikeDB, MatchDB, UserDB, get_session, utcnow
from waggle.utils.errors import DatabaseError, MatchExistsError
from waggle.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class SqlStore:
    """Common session handling for the SQL stores."""

    def __init__(self, session_factory: Callable[[], Session] = get_session) -> None:
        self._session_factory = session_factory

    async def _run(self, op: str, fn: Callable[[Session], T]) -> T:
        with sentry_sdk.start_span(op="db.query", name=op):
            return await asyncio.to_thread(self._call, op, fn)

    def _call(self, op: str, fn: Callable[[Session], T]) -> T:
        session = self._session_factory()
        try:
            return fn(session)
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Database operation failed", op=op, error=str(e))
            raise DatabaseError(f"Database operation failed: {op}", details={"error": str(e)}) from e
        finally:
            session.close()


def _match_from_row(row: MatchDB) -> Match:
    return Match(
        id=row.id,
        participants=list(row.participants or [row.dog1_id, row.dog2_id]),
        dog1_id=row.dog1_id,
        dog2_id=row.dog2_id,
        dog1_owner_id=row.dog1_owner_id,
        dog2_owner_id=row.dog2_owner_id,
        initiated_by=row.initiated_by,
        status=MatchStatus(row.status),
        active=row.active,
        pair_key=row.pair_key,
        created_at=row.created_at,
        updated_at=row.updated_at,
        last_activity=row.last_activity,
        responded_at=row.responded_at,
        responded_by=row.responded_by,
    )


class SqlLikeStore(SqlStore):
    """Like records in the `dog_likes` table."""

    async def get_likes(self, dog_id: str) -> Optional[LikeRecord]:
        def fn(session: Session) -> Optional[LikeRecord]:
            row = session.get(DogLikeDB, dog_id)
            if row is None:
                return None
            return LikeRecord(dog_id=row.dog_id, likes=list(row.likes or []))

        return await self._run("likes.get", fn)

    async def add_like(self, dog_id: str, target_id: str) -> LikeChange:
        """Append `target_id` to the dog's likes, creating the record on first like."""

        def fn(session: Session) -> LikeChange:
            row = session.get(DogLikeDB, dog_id, with_for_update=True)
            if row is None:
                before = None
                row = DogLikeDB(dog_id=dog_id, likes=[target_id])
                session.add(row)
            else:
                before = LikeRecord(dog_id=dog_id, likes=list(row.likes or []))
                if target_id not in before.likes:
                    # Assign a new list; in-place mutation of a JSON column is not tracked
                    row.likes = [*before.likes, target_id]
            session.commit()
            return LikeChange(dog_id=dog_id, before=before, after=LikeRecord(dog_id=dog_id, likes=list(row.likes)))

        return await self._run("likes.add", fn)


class SqlDogStore(SqlStore):
    """Dog profiles in the `dogs` table."""

    async def get_dog(self, dog_id: str) -> Optional[DogProfile]:
        def fn(session: Session) -> Optional[DogProfile]:
            row = session.get(DogDB, dog_id)
            if row is None:
                return None
            return DogProfile(
                id=row.id,
                name=row.name,
                owner_id=row.owner_id,
                breed=row.breed,
                gender=row.gender,
                photo_url=row.photo_url,
            )

        return await self._run("dogs.get", fn)


class SqlUserStore(SqlStore):
    """Owner profiles in the `users` table."""

    async def get_user(self, user_id: str) -> Optional[UserProfile]:
        def fn(session: Session) -> Optional[UserProfile]:
            row = session.get(UserDB, user_id)
            if row is None:
                return None
            return UserProfile(id=row.id, display_name=row.display_name, push_token=row.push_token)

        return await self._run("users.get", fn)


class SqlMatchStore(SqlStore):
    """Match records in the `matches` table."""

    async def find_between(self, dog_a_id: str, dog_b_id: str) -> Optional[Match]:
        """Live match between two dogs, in either stored order."""

        def fn(session: Session) -> Optional[Match]:
            stmt = (
                select(MatchDB)
                .where(
                    or_(
                        and_(MatchDB.dog1_id == dog_a_id, MatchDB.dog2_id == dog_b_id),
                        and_(MatchDB.dog1_id == dog_b_id, MatchDB.dog2_id == dog_a_id),
                    ),
                    MatchDB.status != MatchStatus.DELETED.value,
                )
                .limit(1)
            )
            row = session.scalars(stmt).first()
            return _match_from_row(row) if row else None

        return await self._run("matches.find_between", fn)

    async def create_if_absent(self, match: Match) -> Match:
        """
        Insert a match unless a live one already holds its pair key.

        Raises:
            MatchExistsError: If the unique pair key is already taken.
            DatabaseError: On any other database failure.
        """

        def fn(session: Session) -> Match:
            now = utcnow()
            row = MatchDB(
                id=str(uuid.uuid4()),
                pair_key=match.pair_key,
                participants=list(match.participants),
                dog1_id=match.dog1_id,
                dog2_id=match.dog2_id,
                dog1_owner_id=match.dog1_owner_id,
                dog2_owner_id=match.dog2_owner_id,
                initiated_by=match.initiated_by,
                status=match.status.value,
                active=match.active,
                created_at=now,
                updated_at=now,
                last_activity=now,
            )
            session.add(row)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise MatchExistsError(
                    "Match already exists for this pair", pair_key=match.pair_key or "", details={"error": str(e)}
                ) from e
            return _match_from_row(row)

        return await self._run("matches.create", fn)

    async def get_match(self, match_id: str) -> Optional[Match]:
        def fn(session: Session) -> Optional[Match]:
            row = session.get(MatchDB, match_id)
            return _match_from_row(row) if row else None

        return await self._run("matches.get", fn)

    async def list_for_owner(self, user_id: str, status: Optional[MatchStatus], limit: int) -> List[Match]:
        def fn(session: Session) -> List[Match]:
            stmt = select(MatchDB).where(
                or_(MatchDB.dog1_owner_id == user_id, MatchDB.dog2_owner_id == user_id),
                MatchDB.status != MatchStatus.DELETED.value,
            )
            if status is not None:
                stmt = stmt.where(MatchDB.status == status.value)
            stmt = stmt.order_by(MatchDB.last_activity.desc()).limit(limit)
            return [_match_from_row(row) for row in session.scalars(stmt)]

        return await self._run("matches.list_for_owner", fn)

    async def save(self, match: Match) -> Match:
        """Write back the mutable fields of an existing match."""

        def fn(session: Session) -> Match:
            row = session.get(MatchDB, match.id)
            if row is None:
                raise DatabaseError("Match vanished during update", details={"match_id": match.id})
            row.status = match.status.value
            row.active = match.active
            row.pair_key = match.pair_key
            row.responded_at = match.responded_at
            row.responded_by = match.responded_by
            row.last_activity = match.last_activity or utcnow()
            session.commit()
            return _match_from_row(row)

        return await self._run("matches.save", fn)
