# goal_tracker/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import exc as sa_exc

from goal_tracker.config import settings
from goal_tracker.core.errors import register_exception_handlers
from goal_tracker.core.rate_limit import RateLimiter, RateLimitMiddleware
from goal_tracker.database import engine, Base
from goal_tracker.models.user import User  # noqa: F401  registers the table
from goal_tracker.models.goal import Goal  # noqa: F401
from goal_tracker.routers import auth, goals, admin, reminders, rewrite, pages

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


async def create_tables():
    # Demo convenience; Alembic owns the schema in prod.
    async with engine.begin() as conn:
        try:
            await conn.run_sync(Base.metadata.create_all)
        except sa_exc.IntegrityError as e:
            msg = str(getattr(e, "orig", e))
            if "duplicate key value violates unique constraint" in msg or "already exists" in msg:
                logger.warning("Ignored duplicate DDL error during create_all: %s", msg)
            else:
                raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    yield
    await engine.dispose()


rate_limiter = RateLimiter(
    limit=settings.RATE_LIMIT_REQUESTS,
    window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    max_clients=settings.RATE_LIMIT_MAX_CLIENTS,
)

app = FastAPI(title="Goal Tracker", version="1.0", lifespan=lifespan)
app.add_middleware(
    RateLimitMiddleware,
    limiter=rate_limiter,
    path_prefix=settings.RATE_LIMIT_PATH_PREFIX,
    trust_forwarded=settings.TRUST_FORWARDED_FOR,
)
register_exception_handlers(app)

# Include Routers
app.include_router(auth.router)
app.include_router(goals.router)
app.include_router(admin.router)
app.include_router(rewrite.router)
app.include_router(reminders.router)
app.include_router(pages.router)

@app.get("/")
def read_root():
    return {"message": "Welcome to Goal Tracker"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("goal_tracker.main:app", host="0.0.0.0", port=8000, reload=True)
