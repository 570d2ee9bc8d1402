"""
FastAPI application entry point.

Configures logging, middleware, routes, and exception handlers.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fieldhouse.core.config import settings
from fieldhouse.core.database import engine
from fieldhouse.core.dependencies import close_redis

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("Starting Fieldhouse API in %s mode", settings.ENVIRONMENT)
    yield
    await close_redis()
    await engine.dispose()
    logger.info("Shutting down Fieldhouse API")


app = FastAPI(
    title="Fieldhouse API",
    description="Multi-tenant sports league management",
    version="1.0.0",
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url="/api/redoc" if settings.DEBUG else None,
    openapi_url="/api/openapi.json" if settings.DEBUG else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    if settings.DEBUG:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": {
                    "code": "INTERNAL_SERVER_ERROR",
                    "message": str(exc),
                    "type": type(exc).__name__,
                }
            },
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": {
                "code": "INTERNAL_SERVER_ERROR",
                "message": "An unexpected error occurred",
            }
        },
    )


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    return {
        "status": "ok",
        "environment": settings.ENVIRONMENT,
        "version": "1.0.0",
    }


from fieldhouse.routers import (
    facilities,
    invitations,
    leagues,
    organizations,
    players,
    schedules,
    teams,
)

app.include_router(organizations.router, prefix="/api/v1/organizations", tags=["Organizations"])
app.include_router(players.router, prefix="/api/v1", tags=["Players"])
app.include_router(teams.router, prefix="/api/v1", tags=["Teams"])
app.include_router(leagues.router, prefix="/api/v1", tags=["Leagues"])
app.include_router(facilities.router, prefix="/api/v1", tags=["Facilities"])
app.include_router(schedules.router, prefix="/api/v1", tags=["Schedules"])
app.include_router(invitations.router, prefix="/api/v1", tags=["Invitations"])
