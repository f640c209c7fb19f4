from .stores import FakeDogStore, FakeLikeStore, FakeMatchStore, FakePushSender, FakeUserStore

__all__ = ["FakeDogStore", "FakeLikeStore", "FakeMatchStore", "FakePushSender", "FakeUserStore"]
