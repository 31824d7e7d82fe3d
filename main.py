"""Mission Control — FastAPI application entry-point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from mission_control import __version__
from mission_control.config import settings
from mission_control.database import create_tables
from mission_control.dependencies import get_agent_service
from mission_control.exceptions import MissionControlError
from mission_control.routers import activity_router, agent_router, notification_router, task_router
from mission_control.schemas.health import HealthResponse
from mission_control.services.agent_service import AgentService
from mission_control.ws_manager import task_ws_manager

# ── Logging ─────────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
)
logger = logging.getLogger("mission_control")


# ── Lifespan ────────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Mission Control starting — database=%s", settings.DATABASE_URL)
    create_tables()
    yield
    logger.info("Mission Control shutting down")


# ── App ─────────────────────────────────────────────────────────────────────────

app = FastAPI(
    title="Mission Control",
    description=(
        "Task lifecycle, review workflow, activity feed and notifications "
        "for a small team of named agents."
    ),
    version=__version__,
    lifespan=lifespan,
    root_path=settings.ROOT_PATH,
)

app.include_router(agent_router.router, prefix="/api/agents")
app.include_router(task_router.router, prefix="/api/tasks")
app.include_router(task_router.ws_router)
app.include_router(activity_router.router, prefix="/api/activities")
app.include_router(notification_router.router, prefix="/api/notifications")


# ── Exception handlers ─────────────────────────────────────────────────────────

@app.exception_handler(MissionControlError)
async def _domain_error(request: Request, exc: MissionControlError):
    if exc.retryable:
        logger.warning("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": str(exc),
            "error": type(exc).__name__,
            "retryable": exc.retryable,
            "path": str(request.url.path),
            "method": request.method,
        },
    )


@app.exception_handler(Exception)
async def _unhandled_exception(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "detail": str(exc),
            "error": type(exc).__name__,
            "path": str(request.url.path),
            "method": request.method,
        },
    )


# ── Health ──────────────────────────────────────────────────────────────────────

@app.get("/api/health", response_model=HealthResponse, tags=["Health"])
def health(agent_service: AgentService = Depends(get_agent_service)):
    """Return database reachability, roster size, and server version."""
    try:
        agents = agent_service.list_agents()
    except MissionControlError as exc:
        return HealthResponse(
            status="degraded",
            database="unavailable",
            agents_count=0,
            ws_clients=task_ws_manager.active,
            version=__version__,
            error=str(exc),
        )
    return HealthResponse(
        status="ok",
        database="ok",
        agents_count=len(agents),
        ws_clients=task_ws_manager.active,
        version=__version__,
    )


# ── Entry-point ─────────────────────────────────────────────────────────────────

def main():
    uvicorn.run(
        "main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=True,
        log_level="info",
    )


if __name__ == "__main__":
    main()
