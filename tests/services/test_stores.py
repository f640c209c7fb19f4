from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from waggle.models.match import Match, MatchStatus
from waggle.services.stores import SqlDogStore, SqlLikeStore, SqlMatchStore, SqlUserStore
from waggle.utils.database import Base, Database, DogDB, UserDB
from waggle.utils.errors import DatabaseError, MatchExistsError


@pytest.fixture
def session_factory():
    """Fresh in-memory SQLite schema per test."""
    engine = Database._create_engine("sqlite://")
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    yield factory
    engine.dispose()


@pytest.fixture
def match_store(session_factory):
    return SqlMatchStore(session_factory)


def new_match(dog1="dog-rex", dog2="dog-luna"):
    return Match.for_pair(dog1, dog2, "user-alice", "user-bob")


class TestSqlLikeStore:
    async def test_add_like_creates_then_appends(self, session_factory):
        store = SqlLikeStore(session_factory)

        first = await store.add_like("dog-rex", "dog-luna")
        second = await store.add_like("dog-rex", "dog-biscuit")
        again = await store.add_like("dog-rex", "dog-luna")

        assert first.before is None and first.after.likes == ["dog-luna"]
        assert second.new_likes() == ["dog-biscuit"]
        assert again.new_likes() == []
        record = await store.get_likes("dog-rex")
        assert record.likes == ["dog-luna", "dog-biscuit"]

    async def test_unknown_dog_has_no_record(self, session_factory):
        assert await SqlLikeStore(session_factory).get_likes("dog-ghost") is None


class TestSqlProfileStores:
    async def test_reads_dog_and_user(self, session_factory):
        with session_factory() as session:
            session.add(DogDB(id="dog-rex", name="Rex", owner_id="user-alice"))
            session.add(UserDB(id="user-alice", push_token="ExponentPushToken[alice]"))
            session.commit()

        dog = await SqlDogStore(session_factory).get_dog("dog-rex")
        user = await SqlUserStore(session_factory).get_user("user-alice")

        assert dog.name == "Rex" and dog.owner_id == "user-alice"
        assert user.push_token == "ExponentPushToken[alice]"
        assert await SqlDogStore(session_factory).get_dog("dog-ghost") is None


class TestSqlMatchStore:
    async def test_create_assigns_id_and_timestamps(self, match_store):
        match = await match_store.create_if_absent(new_match())

        assert match.id
        assert match.created_at is not None and match.updated_at is not None
        assert match.status == MatchStatus.PENDING
        assert match.participants == ["dog-rex", "dog-luna"]

    async def test_second_create_for_pair_collides(self, match_store):
        await match_store.create_if_absent(new_match("dog-rex", "dog-luna"))

        with pytest.raises(MatchExistsError):
            await match_store.create_if_absent(new_match("dog-luna", "dog-rex"))

    async def test_find_between_either_order(self, match_store):
        created = await match_store.create_if_absent(new_match())

        assert (await match_store.find_between("dog-luna", "dog-rex")).id == created.id
        assert await match_store.find_between("dog-rex", "dog-biscuit") is None

    async def test_deleted_match_releases_pair(self, match_store):
        created = await match_store.create_if_absent(new_match())
        created.status = MatchStatus.DELETED
        created.pair_key = None
        await match_store.save(created)

        assert await match_store.find_between("dog-rex", "dog-luna") is None
        recreated = await match_store.create_if_absent(new_match())
        assert recreated.id != created.id

    async def test_list_for_owner_filters_status(self, match_store):
        first = await match_store.create_if_absent(new_match())
        await match_store.create_if_absent(new_match("dog-rex", "dog-biscuit"))
        first.status = MatchStatus.ACCEPTED
        await match_store.save(first)

        accepted = await match_store.list_for_owner("user-alice", MatchStatus.ACCEPTED, 10)
        everything = await match_store.list_for_owner("user-bob", None, 10)

        assert [m.id for m in accepted] == [first.id]
        assert len(everything) == 2

    async def test_sqlalchemy_error_becomes_database_error(self):
        session = MagicMock()
        session.get.side_effect = OperationalError("SELECT", {}, Exception("db down"))
        store = SqlMatchStore(lambda: session)

        with pytest.raises(DatabaseError):
            await store.get_match("m1")
        session.rollback.assert_called_once()
        session.close.assert_called_once()
