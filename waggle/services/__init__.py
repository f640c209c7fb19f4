"""Services package for the Waggle match service."""

from waggle.services.like_service import LikeService, record_like
from waggle.services.match_service import MatchService
from waggle.services.match_trigger import MatchCoordinator
from waggle.services.push_service import ExpoPushSender, PushMessage
from waggle.services.stores import SqlDogStore, SqlLikeStore, SqlMatchStore, SqlUserStore

__all__ = [
    "ExpoPushSender",
    "LikeService",
    "MatchCoordinator",
    "MatchService",
    "PushMessage",
    "SqlDogStore",
    "SqlLikeStore",
    "SqlMatchStore",
    "SqlUserStore",
    "record_like",
]
