"""Models package for the Waggle match service."""

from waggle.models.dog import DogProfile
from waggle.models.like import LikeChange, LikeOutcome, LikeRecord, OutcomeKind
from waggle.models.match import ALLOWED_TRANSITIONS, Match, MatchStatus, MatchView, pair_key
from waggle.models.user import UserProfile

__all__ = [
    "ALLOWED_TRANSITIONS",
    "DogProfile",
    "LikeChange",
    "LikeOutcome",
    "LikeRecord",
    "Match",
    "MatchStatus",
    "MatchView",
    "OutcomeKind",
    "UserProfile",
    "pair_key",
]
