import pytest

from waggle.models.dog import DogProfile
from waggle.models.like import LikeRecord
from waggle.models.match import ALLOWED_TRANSITIONS, Match, MatchStatus, pair_key


def test_pair_key_ignores_order():
    assert pair_key("dog-b", "dog-a") == pair_key("dog-a", "dog-b") == "5:dog-a:dog-b"


@pytest.mark.parametrize(
    "pair, other",
    [
        (("a_b", "c"), ("a", "b_c")),
        (("a:b", "c"), ("a", "b:c")),
        (("1:a", "b"), ("1", "a:b")),
    ],
)
def test_pair_key_distinguishes_ids_containing_delimiters(pair, other):
    assert pair_key(*pair) != pair_key(*other)


def test_for_pair_builds_pending_match():
    match = Match.for_pair("dog-rex", "dog-luna", "user-alice", "user-bob")

    assert match.participants == ["dog-rex", "dog-luna"]
    assert match.status == MatchStatus.PENDING
    assert match.active is True
    assert match.initiated_by == "user-alice"
    assert match.pair_key == pair_key("dog-luna", "dog-rex")


@pytest.mark.parametrize(
    "current, new, allowed",
    [
        (MatchStatus.PENDING, MatchStatus.ACCEPTED, True),
        (MatchStatus.PENDING, MatchStatus.REJECTED, True),
        (MatchStatus.PENDING, MatchStatus.CANCELLED, True),
        (MatchStatus.PENDING, MatchStatus.COMPLETED, False),
        (MatchStatus.ACCEPTED, MatchStatus.COMPLETED, True),
        (MatchStatus.ACCEPTED, MatchStatus.REJECTED, False),
        (MatchStatus.REJECTED, MatchStatus.EXPIRED, True),
        (MatchStatus.COMPLETED, MatchStatus.DELETED, True),
        (MatchStatus.DELETED, MatchStatus.PENDING, False),
    ],
)
def test_can_transition(current, new, allowed):
    match = Match.for_pair("a", "b", "x", "y").model_copy(update={"status": current})
    assert match.can_transition(new) is allowed


def test_every_status_has_transition_entry():
    assert set(ALLOWED_TRANSITIONS) == set(MatchStatus)
    assert ALLOWED_TRANSITIONS[MatchStatus.DELETED] == frozenset()


def test_like_record_accepts_missing_likes():
    assert LikeRecord.model_validate({"likes": None}).likes == []
    assert LikeRecord.model_validate({}).likes == []
    assert LikeRecord.model_validate({"likes": ["a", "b", "a"]}).likes == ["a", "b"]


def test_dog_profile_from_document_fields():
    dog = DogProfile.model_validate({"dogId": "dog-rex", "name": "Rex", "ownerId": "user-alice"})

    assert dog.id == "dog-rex"
    assert dog.is_complete()
    assert not DogProfile(id="dog-x", name="X").is_complete()
