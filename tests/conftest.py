"""pytest configuration and fixtures."""

import pytest

from tests.mocks import FakeDogStore, FakeLikeStore, FakeMatchStore, FakePushSender, FakeUserStore
from waggle.services.match_service import MatchService
from waggle.services.match_trigger import MatchCoordinator

# Dogs and owners shared by the service tests
REX = "dog-rex"
LUNA = "dog-luna"
BISCUIT = "dog-biscuit"
ALICE = "user-alice"
BOB = "user-bob"
CAROL = "user-carol"


@pytest.fixture
def like_store():
    return FakeLikeStore()


@pytest.fixture
def dog_store():
    store = FakeDogStore()
    store.seed(REX, "Rex", ALICE)
    store.seed(LUNA, "Luna", BOB)
    store.seed(BISCUIT, "Biscuit", CAROL)
    return store


@pytest.fixture
def user_store():
    store = FakeUserStore()
    store.seed(ALICE, "ExponentPushToken[alice]")
    store.seed(BOB, "ExponentPushToken[bob]")
    store.seed(CAROL, None)
    return store


@pytest.fixture
def match_store():
    return FakeMatchStore()


@pytest.fixture
def push_sender():
    return FakePushSender()


@pytest.fixture
def coordinator(like_store, dog_store, match_store, user_store, push_sender):
    """Match coordinator wired to in-memory stores."""
    return MatchCoordinator(
        likes=like_store,
        dogs=dog_store,
        matches=match_store,
        users=user_store,
        push=push_sender,
    )


@pytest.fixture
def match_service(match_store):
    return MatchService(match_store)
