"""FastAPI application factory.

Creates and configures the FastAPI application with all routes and middleware.

## Usage

```python
from farm_time.api import create_app

app = create_app()

# Run with uvicorn
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
```

## Errors

Every error response has the shape `{"error": <message>, "code": <code>}`.
Database failures never leak driver detail to the client.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from farm_time.auth.dependencies import get_current_user
from farm_time.auth.google import GoogleOAuth
from farm_time.config import Settings, get_settings
from farm_time.database.connection import close_db, create_tables, init_db
from farm_time.errors import FarmTimeError, StorageError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Opens the database and creates missing tables on startup, closes the
    pool on shutdown.
    """
    settings: Settings = app.state.settings

    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    await init_db(settings)
    await create_tables()

    yield

    logger.info("Shutting down")
    await close_db()


async def farm_time_error_handler(request: Request, exc: FarmTimeError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(f"Database error on {request.method} {request.url.path}")
    error = StorageError("Database error")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "code": "internal_error"},
    )


def add_timeout_middleware(app: FastAPI, timeout_seconds: float) -> None:
    """Cancel requests that run longer than `timeout_seconds` with a 504."""

    @app.middleware("http")
    async def request_timeout(request: Request, call_next):
        try:
            return await asyncio.wait_for(call_next(request), timeout=timeout_seconds)
        except asyncio.TimeoutError:
            logger.error(
                f"Request timed out after {timeout_seconds}s: "
                f"{request.method} {request.url.path}"
            )
            return JSONResponse(
                status_code=status.HTTP_504_GATEWAY_TIMEOUT,
                content={"error": "Request timed out", "code": "timeout"},
            )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Plan farm gatherings: events, attendees, meals and todos",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.google_oauth = GoogleOAuth.from_settings(settings)

    add_timeout_middleware(app, settings.request_timeout_seconds)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    app.add_exception_handler(FarmTimeError, farm_time_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Include routers
    from farm_time.api.routes import admin, attendees, auth, events, meals, todos

    protected = [Depends(get_current_user)]

    app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
    app.include_router(
        admin.router, prefix="/api/admin", tags=["Admin"], dependencies=protected
    )
    app.include_router(
        events.router, prefix="/api/events", tags=["Events"], dependencies=protected
    )
    app.include_router(
        attendees.router,
        prefix="/api/events/{event_id}/attendees",
        tags=["Attendees"],
        dependencies=protected,
    )
    app.include_router(
        meals.router,
        prefix="/api/events/{event_id}/meals",
        tags=["Meals"],
        dependencies=protected,
    )
    app.include_router(
        todos.router,
        prefix="/api/events/{event_id}/todos",
        tags=["Todos"],
        dependencies=protected,
    )

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": settings.app_version}

    return app
