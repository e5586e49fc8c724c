"""Daily Decision Quiz - FastAPI app entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.config import get_settings
from app.core.errors import DomainError
from app.core.locks import KeyedLockStore
from app.core.logging import configure_logging
from app.db.base import Base
from app.db.session import engine, AsyncSessionLocal
from app.routers import api
from app.services.attempts import AttemptService
from app.services.seeding import seed_challenges

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if settings.seed_demo_data:
        async with AsyncSessionLocal() as db:
            await seed_challenges(db)

    app.state.attempt_service = AttemptService(AsyncSessionLocal, settings, KeyedLockStore())
    logger.info("%s started", settings.app_name)

    yield

    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Rank four financial decisions, get scored, compare with everyone else",
    lifespan=lifespan,
)

app.include_router(api.router)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.get("/health")
async def health():
    return {"status": "ok"}
