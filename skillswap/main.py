"""FastAPI application entry point.

Configures CORS, structured logging, lifespan events (optional seeding of
the admin account and skill catalog), error rendering and router
registration.
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from postgrest.exceptions import APIError
from starlette.responses import JSONResponse

from skillswap.core.config import settings
from skillswap.core.errors import SkillSwapError, StorageError
from skillswap.core.logging import setup_logging
from skillswap.routers import admin, auth, health, messages, skills, swaps, users
from skillswap.services.seed import seed_default_data

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: startup and shutdown hooks."""
    setup_logging()
    logger.info("Application starting up")
    if settings.SEED_DEFAULT_DATA:
        seed_default_data()
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title="Skill Swap API",
    description="Marketplace for exchanging skills between users",
    version="0.1.0",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# CORS Configuration
# ---------------------------------------------------------------------------
_raw_origins = settings.ALLOWED_ORIGINS.strip()
if _raw_origins == "*":
    _allowed_origins: list[str] = ["*"]
else:
    _allowed_origins = [o.strip() for o in _raw_origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Error rendering
# ---------------------------------------------------------------------------

@app.exception_handler(SkillSwapError)
async def skillswap_error_handler(request: Request, exc: SkillSwapError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed", extra={"path": request.url.path, "code": exc.code})
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "error": "ValidationError",
            "code": "RequestValidationError",
            "detail": "Invalid request",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(APIError)
async def storage_error_handler(request: Request, exc: APIError) -> JSONResponse:
    logger.error(
        "storage_error",
        extra={"path": request.url.path, "pg_code": getattr(exc, "code", None)},
        exc_info=exc,
    )
    error = StorageError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# ---------------------------------------------------------------------------
# Router Registration
# ---------------------------------------------------------------------------
app.include_router(health.router, tags=["Health"])
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(skills.router, prefix="/api/v1/skills", tags=["Skills"])
app.include_router(users.router, prefix="/api/v1/users", tags=["Users"])
app.include_router(swaps.router, prefix="/api/v1/swaps", tags=["Swaps"])
app.include_router(messages.router, prefix="/api/v1/messages", tags=["Messages"])
app.include_router(admin.router, prefix="/api/v1/admin", tags=["Admin"])
