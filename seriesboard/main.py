"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse

from seriesboard.config import settings
from seriesboard.core.errors import SeriesboardError
from seriesboard.schemas.common import ErrorResponse
from seriesboard.api import (
    health_router,
    progress_router,
    leaderboard_router,
    normalize_router,
)

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s  %(name)-25s  %(levelname)-8s  %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("seriesboard starting (env=%s)", settings.ENV)
    yield
    logger.info("seriesboard shut down")


app = FastAPI(
    title="seriesboard API",
    description="Test-series progress and leaderboard engine",
    version="0.1.0",
    lifespan=lifespan,
)

# ── Middleware ─────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.ALLOWED_HOSTS)

# ── Errors ────────────────────────────────────────────────────────────────────


@app.exception_handler(SeriesboardError)
async def seriesboard_error_handler(request: Request, exc: SeriesboardError):
    logger.warning("%s on %s: %s", exc.error_code, request.url.path, exc.message)
    body = ErrorResponse(
        error_code=exc.error_code,
        message=exc.message,
        details=exc.details,
    )
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(body))


# ── Routers ───────────────────────────────────────────────────────────────────

app.include_router(health_router, tags=["Health"])
app.include_router(progress_router, prefix="/api/test-series", tags=["Progress"])
app.include_router(leaderboard_router, prefix="/api/test-series", tags=["Leaderboard"])
app.include_router(normalize_router, prefix="/api/leaderboard", tags=["Leaderboard"])


@app.get("/")
async def root():
    return {
        "name": "seriesboard API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
