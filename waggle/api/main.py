from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Optional

import sentry_sdk
from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

from waggle import __version__
from waggle.config import settings
from waggle.models.like import LikeChange, LikeOutcome, LikeRecord
from waggle.models.match import Match, MatchStatus, MatchView
from waggle.services.like_service import LikeService
from waggle.services.match_service import DEFAULT_PAGE_SIZE, MatchService
from waggle.services.match_trigger import MatchCoordinator
from waggle.services.push_service import ExpoPushSender
from waggle.services.stores import SqlDogStore, SqlLikeStore, SqlMatchStore, SqlUserStore
from waggle.utils.database import init_database
from waggle.utils.errors import WaggleError
from waggle.utils.logging import configure_logging, get_logger, log_error

logger = get_logger(__name__)

# Initialize Sentry if DSN is provided
if settings.SENTRY_DSN:
    logger.info("Initializing Sentry...")
    try:
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            environment=settings.ENVIRONMENT,
            traces_sample_rate=1.0 if settings.ENVIRONMENT == "development" else 0.1,
            integrations=[
                FastApiIntegration(transaction_style="url"),
                SqlalchemyIntegration(),
                AsyncioIntegration(),
            ],
        )
        logger.info("Sentry initialized")
    except Exception as e:
        logger.error("Failed to initialize Sentry", error=str(e))


class LikeChangeEvent(BaseModel):
    """Document change notification for one like record."""

    before: Optional[LikeRecord] = None
    after: Optional[LikeRecord] = None


class LikeRequest(BaseModel):
    target_id: str


class MatchStatusUpdate(BaseModel):
    user_id: str
    status: MatchStatus


class OutcomesResponse(BaseModel):
    outcomes: List[LikeOutcome]


_like_store = SqlLikeStore()
_match_store = SqlMatchStore()
_coordinator = MatchCoordinator(
    likes=_like_store,
    dogs=SqlDogStore(),
    matches=_match_store,
    users=SqlUserStore(),
    push=ExpoPushSender(),
)


def get_coordinator() -> MatchCoordinator:
    return _coordinator


def get_like_service(coordinator: MatchCoordinator = Depends(get_coordinator)) -> LikeService:
    return LikeService(coordinator.likes, coordinator)


def get_match_service() -> MatchService:
    return MatchService(_match_store)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifespan."""
    configure_logging()
    logger.info("Starting Waggle match service...")

    try:
        init_database()
    except Exception as e:
        error_details = {}
        if hasattr(e, "details"):
            error_details = e.details
        logger.error("Failed to initialize database", error=str(e), details=error_details)
        raise

    yield

    logger.info("Shutting down Waggle match service...")


app = FastAPI(
    title=settings.APP_NAME,
    description="Waggle mutual-match detection and notifications",
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(WaggleError)
async def waggle_error_handler(request: Request, exc: WaggleError) -> JSONResponse:
    """Render service errors with their own status code."""
    if exc.status_code >= 500:
        log_error(logger, exc, "Request failed", {"path": request.url.path})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message, "details": exc.details})


@app.post("/events/likes/{dog_id}", response_model=OutcomesResponse)
async def like_record_changed(
    dog_id: str, event: LikeChangeEvent, coordinator: MatchCoordinator = Depends(get_coordinator)
) -> OutcomesResponse:
    """Entry point for like record change events; a non-2xx answer asks the source to redeliver."""
    change = LikeChange(dog_id=dog_id, before=event.before, after=event.after)
    outcomes = await coordinator.handle_like_change(change)
    return OutcomesResponse(outcomes=outcomes)


@app.post("/dogs/{dog_id}/likes", response_model=OutcomesResponse)
async def like_dog(
    dog_id: str, body: LikeRequest, service: LikeService = Depends(get_like_service)
) -> OutcomesResponse:
    outcomes = await service.like(dog_id, body.target_id)
    return OutcomesResponse(outcomes=outcomes)


@app.get("/matches/{match_id}", response_model=Match)
async def read_match(match_id: str, service: MatchService = Depends(get_match_service)) -> Match:
    return await service.get_match(match_id)


@app.patch("/matches/{match_id}", response_model=Match)
async def respond_to_match(
    match_id: str, body: MatchStatusUpdate, service: MatchService = Depends(get_match_service)
) -> Match:
    return await service.update_match_status(match_id, body.user_id, body.status)


@app.delete("/matches/{match_id}", response_model=Match)
async def remove_match(
    match_id: str, user_id: str = Query(...), service: MatchService = Depends(get_match_service)
) -> Match:
    return await service.delete_match(match_id, user_id)


@app.get("/users/{user_id}/matches", response_model=List[MatchView])
async def list_user_matches(
    user_id: str,
    status: Optional[MatchStatus] = None,
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    service: MatchService = Depends(get_match_service),
) -> List[MatchView]:
    return await service.get_user_matches(user_id, status=status, limit=limit)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    content: Dict[str, Any] = {
        "status": "ok",
        "app": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "version": __version__,
    }
    return JSONResponse(status_code=200, content=content)


@app.get("/")
async def root() -> JSONResponse:
    """Root endpoint."""
    return JSONResponse(
        content={
            "message": "Waggle match service is running",
            "docs_url": "/docs",
        }
    )
