import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Rate limiting imports
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from scenebook.core.config import settings
from scenebook.db.base import engine
from scenebook.middleware.payload_size_limiter import PayloadSizeLimiter
from scenebook.models import Base
from scenebook.routers import (
    character_router,
    dashboard_router,
    health_router,
    montage_router,
    movie_router,
    scene_router,
    search_router,
    user_router,
)
from scenebook.services.exceptions import (
    NotFoundError,
    ScenebookError,
    TransactionFailure,
    ValidationError,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create limiter instance with default key function
limiter = Limiter(key_func=get_remote_address, default_limits=[settings.RATE_LIMIT])

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Screenplay breakdown API: movies, characters, scenes and montage sequences",
    version="1.0.0"
)

# Add limiter to app state
app.state.limiter = limiter

# Register rate limit exceeded handler
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


ERROR_STATUS = (
    # Most specific first; subclasses share their parent's status
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (TransactionFailure, status.HTTP_409_CONFLICT),
)


def status_for(error: ScenebookError) -> int:
    for error_class, status_code in ERROR_STATUS:
        if isinstance(error, error_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


@app.exception_handler(ScenebookError)
async def scenebook_error_handler(request: Request, exc: ScenebookError):
    status_code = status_for(exc)
    logger.info(f"[api] {request.method} {request.url.path} -> {status_code} {type(exc).__name__}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": type(exc).__name__},
    )


app.add_middleware(SlowAPIMiddleware)

# Payload size limiter middleware
app.add_middleware(
    PayloadSizeLimiter,
    path_limits={
        settings.API_PREFIX: settings.MAX_PAYLOAD_BYTES,
    }
)

# CORS middleware - add last so it's outermost and always applies headers
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Requested-With"],
    expose_headers=["Retry-After", "X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset"],
    max_age=600,
)

# Include routers
app.include_router(health_router.router, prefix=settings.API_PREFIX)
app.include_router(user_router.router, prefix=settings.API_PREFIX)
app.include_router(movie_router.router, prefix=settings.API_PREFIX)
app.include_router(character_router.router, prefix=settings.API_PREFIX)
app.include_router(scene_router.router, prefix=settings.API_PREFIX)
app.include_router(montage_router.router, prefix=settings.API_PREFIX)
app.include_router(search_router.router, prefix=settings.API_PREFIX)
app.include_router(dashboard_router.router, prefix=settings.API_PREFIX)


# Application lifecycle events
@app.on_event("startup")
async def startup_event():
    """Create missing tables for local development databases."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"✅ {settings.PROJECT_NAME} started (database: {engine.url.render_as_string(hide_password=True)})")


@app.get("/")
async def root():
    return {"message": f"Welcome to the {settings.PROJECT_NAME}"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("scenebook.main:app", host="0.0.0.0", port=8000, reload=True)
