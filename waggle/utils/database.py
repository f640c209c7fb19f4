"""Database connection utilities for the Waggle match service."""

from datetime import datetime, timezone
from typing import Any, List, Optional

from sqlalchemy import JSON, Boolean, DateTime, String, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from waggle.utils.errors import DatabaseError
from waggle.utils.logging import get_logger

logger = get_logger(__name__)


def utcnow() -> datetime:
    """Get current UTC time (naive), used as the server-assigned timestamp."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    pass


class DogLikeDB(Base):
    """Like record of one dog."""

    __tablename__ = "dog_likes"

    dog_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    likes: Mapped[List[str]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


class DogDB(Base):
    """Dog profile database model."""

    __tablename__ = "dogs"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    owner_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True, index=True)
    breed: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    photo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)


class UserDB(Base):
    """Owner profile database model."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    display_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    push_token: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)


class MatchDB(Base):
    """Match database model.

    `pair_key` is unique and nulled when the match is deleted, so at most one
    live match exists per unordered pair of dogs.
    """

    __tablename__ = "matches"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    pair_key: Mapped[Optional[str]] = mapped_column(String(300), nullable=True, unique=True)
    participants: Mapped[List[str]] = mapped_column(JSON, default=list)
    dog1_id: Mapped[str] = mapped_column(String(128), index=True)
    dog2_id: Mapped[str] = mapped_column(String(128), index=True)
    dog1_owner_id: Mapped[str] = mapped_column(String(128), index=True)
    dog2_owner_id: Mapped[str] = mapped_column(String(128), index=True)
    initiated_by: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="pending")
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
    last_activity: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    responded_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    responded_by: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)


class Database:
    """Singleton database connection manager."""

    _engine: Optional[Engine] = None
    _session_factory: Any = None

    @classmethod
    def get_engine(cls) -> Engine:
        """Get or create the database engine."""
        if cls._engine is None:
            from waggle.config import get_settings

            settings = get_settings()
            database_url = settings.DATABASE_URL

            if not database_url:
                raise DatabaseError("DATABASE_URL is not configured")

            # SQLAlchemy 1.4+ requires postgresql:// instead of postgres://
            if database_url.startswith("postgres://"):
                database_url = database_url.replace("postgres://", "postgresql://", 1)

            cls._engine = cls._create_engine(database_url, echo=settings.DEBUG)
        return cls._engine

    @staticmethod
    def _create_engine(database_url: str, echo: bool = False) -> Engine:
        """Create an engine, sharing one connection across threads for in-memory SQLite."""
        try:
            if database_url.startswith("sqlite"):
                kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
                if database_url in ("sqlite://", "sqlite:///:memory:"):
                    kwargs["poolclass"] = StaticPool
                engine = create_engine(database_url, echo=echo, **kwargs)
            else:
                engine = create_engine(database_url, pool_recycle=300, pool_pre_ping=True, echo=echo)
            logger.info("Database engine created", dialect=engine.dialect.name)
            return engine
        except Exception as e:
            safe_url = database_url
            if "@" in safe_url:
                part1, part2 = safe_url.rsplit("@", 1)
                if ":" in part1:
                    scheme_user, _ = part1.rsplit(":", 1)
                    safe_url = f"{scheme_user}:***@{part2}"

            logger.error("Failed to create database engine", error=str(e), url=safe_url)
            raise DatabaseError("Failed to connect to database", details={"error": str(e), "url": safe_url}) from e

    @classmethod
    def use_engine(cls, engine: Engine) -> None:
        """Replace the engine (tests, or a caller that manages its own)."""
        cls._engine = engine
        cls._session_factory = None

    @classmethod
    def get_session_factory(cls) -> Any:
        """Get or create the session factory."""
        if cls._session_factory is None:
            cls._session_factory = sessionmaker(bind=cls.get_engine(), expire_on_commit=False)
        return cls._session_factory

    @classmethod
    def get_session(cls) -> Session:
        """Get a new database session."""
        return cls.get_session_factory()()  # type: ignore

    @classmethod
    def create_tables(cls) -> None:
        """Create all database tables."""
        Base.metadata.create_all(cls.get_engine())
        logger.info("Database tables created")


def get_session() -> Session:
    """Get a database session."""
    return Database.get_session()


def init_database() -> None:
    """Initialize the database and create tables."""
    Database.create_tables()
