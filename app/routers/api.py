"""API routes: JSON for challenges, attempts, results, streaks."""
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.security import verify_session_token
from app.db.session import get_db
from app.schemas.attempt import AttemptOutSchema, AttemptSubmitSchema
from app.schemas.challenge import ChallengeOutSchema
from app.schemas.stats import ChallengeStatsOutSchema, ResultsOutSchema, StreakOutSchema
from app.services.attempts import AttemptService
from app.services.challenges import get_challenge, get_challenge_by_date
from app.services.results import build_challenge_stats, build_results
from app.services.streaks import get_streak

router = APIRouter(prefix="/api", tags=["api"])
settings = get_settings()


def get_current_user_id(request: Request, response: Response) -> str:
    """Logged-in user from the signed auth cookie, else the guest session id."""
    token = request.cookies.get(settings.auth_cookie_name)
    if token:
        user_id = verify_session_token(token)
        if user_id is not None:
            return user_id

    sid = request.cookies.get(settings.session_cookie_name)
    if not sid:
        sid = str(uuid.uuid4())
        response.set_cookie(
            key=settings.session_cookie_name,
            value=sid,
            max_age=settings.session_cookie_max_age,
            httponly=True,
            samesite="lax",
        )
    return sid


def get_attempt_service(request: Request) -> AttemptService:
    return request.app.state.attempt_service


@router.get("/challenges/by-date/{date_key}", response_model=ChallengeOutSchema)
async def get_challenge_for_date(
    date_key: str,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get the challenge published for a day."""
    return await get_challenge_by_date(db, date_key)


@router.get("/challenges/{challenge_id}", response_model=ChallengeOutSchema)
async def get_challenge_by_id(
    challenge_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get one challenge by ID (options without their tiers)."""
    return await get_challenge(db, challenge_id)


@router.post("/attempts", response_model=AttemptOutSchema)
async def submit_attempt(
    body: AttemptSubmitSchema,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(get_current_user_id)],
    service: Annotated[AttemptService, Depends(get_attempt_service)],
):
    """Submit a ranking; return its score and grade."""
    challenge = await get_challenge(db, body.challenge_id)
    date_key = challenge.date_key
    # the workflow opens its own transaction
    await db.close()
    return await service.submit(user_id, body.challenge_id, date_key, body.ranking)


@router.get("/results/{challenge_id}", response_model=ResultsOutSchema)
async def get_results(
    challenge_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(get_current_user_id)],
    service: Annotated[AttemptService, Depends(get_attempt_service)],
):
    """Best attempt of the current user plus population comparison."""
    return await build_results(db, user_id, challenge_id, service.scoring)


@router.get("/challenges/{challenge_id}/stats", response_model=ChallengeStatsOutSchema)
async def get_challenge_stats(
    challenge_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Top-pick and top-two distribution per option."""
    return await build_challenge_stats(db, challenge_id)


@router.get("/streak", response_model=StreakOutSchema)
async def get_user_streak(
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(get_current_user_id)],
):
    streak = await get_streak(db, user_id)
    if streak is None:
        return StreakOutSchema()
    return StreakOutSchema(
        current_streak=streak.current_streak,
        longest_streak=streak.longest_streak,
        last_completed_date_key=streak.last_completed_date_key,
    )
