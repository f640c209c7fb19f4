import pytest

from tests.conftest import LUNA, REX
from waggle.models.like import OutcomeKind
from waggle.services.like_service import LikeService, record_like
from waggle.utils.errors import ValidationError


class TestRecordLike:
    async def test_first_like_creates_record(self, like_store):
        change = await record_like(like_store, REX, LUNA)

        assert change.before is None
        assert change.after.likes == [LUNA]
        assert change.new_likes() == [LUNA]

    async def test_repeated_like_yields_no_new_likes(self, like_store):
        await record_like(like_store, REX, LUNA)
        change = await record_like(like_store, REX, LUNA)

        assert change.before.likes == [LUNA]
        assert change.new_likes() == []

    @pytest.mark.parametrize("dog_id, target_id", [("", LUNA), (REX, " "), (REX, REX)])
    async def test_invalid_ids_rejected(self, like_store, dog_id, target_id):
        with pytest.raises(ValidationError):
            await record_like(like_store, dog_id, target_id)


class TestLikeService:
    async def test_second_like_of_pair_matches(self, coordinator, like_store, match_store):
        service = LikeService(like_store, coordinator)

        first = await service.like(LUNA, REX)
        second = await service.like(REX, LUNA)

        assert [o.kind for o in first] == [OutcomeKind.UNRECIPROCATED]
        assert [o.kind for o in second] == [OutcomeKind.MATCHED]
        assert len(match_store.matches) == 1
