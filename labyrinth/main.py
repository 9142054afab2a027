"""Labyrinth API (Daedalus) - Main FastAPI Application."""

import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from labyrinth.config import Settings, get_settings
from labyrinth.api.routes import maze
from labyrinth.core import MazeGenerator
from labyrinth.services.session_service import SessionRegistry

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("labyrinth")


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Handle rate limit exceeded errors."""
    logger.warning(
        f"Rate limit exceeded for {request.client.host if request.client else 'unknown'} "
        f"on {request.url.path}"
    )
    return JSONResponse(
        status_code=429,
        content={
            "detail": "Rate limit exceeded. Please slow down.",
            "retry_after": str(exc.detail),
        },
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging requests with correlation IDs."""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()

        request.state.request_id = request_id

        logger.info(
            f"[{request_id}] --> {request.method} {request.url.path} "
            f"from {request.client.host if request.client else 'unknown'}"
        )

        try:
            response = await call_next(request)
            process_time = (time.time() - start_time) * 1000

            logger.info(
                f"[{request_id}] <-- {response.status_code} "
                f"({process_time:.2f}ms)"
            )

            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as e:
            process_time = (time.time() - start_time) * 1000
            logger.error(
                f"[{request_id}] <-- ERROR: {type(e).__name__}: {str(e)} "
                f"({process_time:.2f}ms)"
            )
            raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Daedalus...")
    yield

    # Ctrl+C still reports the run before exiting
    count, average = app.state.registry.end_session()
    logger.info(f"Daedalus stopped after {count} solved mazes (avg {average} steps)")


def create_app(
    registry: SessionRegistry | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """
    Build the Daedalus application.

    Args:
        registry: Session registry to serve. A new one seeded from settings
            is created if omitted.
        settings: Settings to serve with instead of the environment.
    """
    if settings is None:
        settings = get_settings()
    if settings.debug:
        logger.setLevel(logging.DEBUG)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Daedalus builds labyrinths for Icarus to solve",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    if registry is None:
        registry = SessionRegistry(MazeGenerator(seed=settings.seed))
    app.state.registry = registry
    app.dependency_overrides[get_settings] = lambda: settings

    maze_router, limiter = maze.create_router(settings)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    app.add_middleware(RequestLoggingMiddleware)

    @app.get("/")
    async def root() -> dict:
        """Root endpoint with API info."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
        }

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "ok", "version": settings.app_version}

    app.include_router(maze_router)

    return app


app = create_app()
