from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Response
from sqlalchemy import text
from sqlalchemy.orm import Session

from leaderboard.core.config import settings
from leaderboard.core.errors import ConfigurationError
from leaderboard.core.logging import bind_correlation_id, configure_logging, get_logger
from leaderboard.core.metrics import get_counters, get_last_runs, get_metrics
from leaderboard.db.database import Base, engine, get_db
from leaderboard.routers.exceptions import register_exception_handlers
from leaderboard.routers.score import router as score_router

# registers the scores table on Base.metadata
import leaderboard.models.score  # noqa: F401


configure_logging(environment=settings.environment)
logger = get_logger("leaderboard.main", component="app")

_app_start_time = datetime.now(timezone.utc)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup unless migrations own the schema.

    Development: create_all() for convenience (RUN_STARTUP_DDL=true).
    Production: set RUN_STARTUP_DDL=false and run ``alembic upgrade head``.
    """
    if settings.default_page_size > settings.max_page_size:
        raise ConfigurationError(
            "DEFAULT_PAGE_SIZE exceeds MAX_PAGE_SIZE",
            detail={"default_page_size": settings.default_page_size, "max_page_size": settings.max_page_size},
        )
    if settings.run_startup_ddl:
        logger.info("startup_execute_ddl", extra={"structured_data": {"run_startup_ddl": True}})
        Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
register_exception_handlers(app)

# Register routers at import time so tests see routes without requiring startup
app.include_router(score_router, prefix=settings.api_prefix)


app.middleware("http")(bind_correlation_id)


@app.get("/health")
def health(db: Session = Depends(get_db)):
    """Report uptime and database connectivity for load balancer checks."""
    now = datetime.now(timezone.utc)
    uptime = (now - _app_start_time).total_seconds()

    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
        overall_status = "healthy"
    except Exception as e:
        logger.error("health_check_db_failed", extra={"structured_data": {"error": str(e)}})
        db_status = "disconnected"
        overall_status = "unhealthy"
    return {
        "status": overall_status,
        "started_at": _app_start_time.isoformat(),
        "uptime_seconds": round(uptime, 2),
        "environment": settings.environment,
        "database": {
            "status": db_status,
            "engine": engine.url.get_backend_name(),
        },
    }


@app.get("/management/metrics")
def metrics():
    return {
        "timings": get_metrics(),
        "counters": get_counters(),
        "last_runs": get_last_runs(),
    }


@app.get("/favicon.ico", include_in_schema=False)
def favicon():
    """Empty favicon to prevent 404 noise in logs."""
    return Response(status_code=204)
