"""
Golf Buddy API Server

FastAPI server for golfer profiles, buddy search, buddy matches and chat.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os
import uvicorn

from golfbuddy.api.routes import router
from golfbuddy.database import db
from golfbuddy.models.schemas import HealthResponse
from golfbuddy.utils.datetime_utils import utcnow

# Set up logging
# Allow log level to be configured via environment variable (default: INFO)
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
numeric_level = getattr(logging, log_level, logging.INFO)
logging.basicConfig(
    level=numeric_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler for startup and shutdown events."""
    logger.info("Starting up Golf Buddy API...")

    if os.getenv("RUN_MIGRATIONS", "false").lower() == "true":
        from golfbuddy.alembic.env import run_migrations_online_programmatic

        try:
            await run_migrations_online_programmatic()
        except Exception as e:
            logger.error(f"Migrations failed: {e}", exc_info=True)
            raise

    # Fallback for tables that might not be in migrations yet
    try:
        await db.init_database()
        logger.info("Database initialized")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)
        # Don't raise - allow app to start so /api/health still answers

    yield  # App is running

    logger.info("Shutting down Golf Buddy API...")
    await db.engine.dispose()


app = FastAPI(
    title="Golf Buddy API",
    description="API for finding golf buddies, managing buddy requests and chatting",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware - origins configured via ALLOWED_ORIGINS env var
allowed_origins = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Error-Kind"],
)

# Include API routes
app.include_router(router)


@app.get("/api/health", response_model=HealthResponse)
async def health():
    """Liveness check."""
    return HealthResponse(status="ok", timestamp=utcnow().isoformat())


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
