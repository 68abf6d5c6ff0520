"""FastAPI application factory and configuration."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError, version

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from overture import FeatureWorkerPool, PreviewAnalyzer, create_orchestrator
from rich.console import Console
from rich.logging import RichHandler
from sqlalchemy import Engine

from overture_api.api.container import Services
from overture_api.api.exceptions import register_exception_handlers
from overture_api.api.routes import health, intent, playlists
from overture_api.db import PlaylistRepository, create_db_engine, init_db
from overture_api.services.intent_runner import IntentRunner
from overture_api.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    """Configure logging with Rich handler for all loggers including uvicorn."""
    console = Console(force_terminal=True)
    handler = RichHandler(
        console=console, rich_tracebacks=True, show_path=False, markup=False
    )
    handler.setFormatter(logging.Formatter("%(name)s - %(message)s", datefmt="[%X]"))

    # Configure root logger
    logging.root.handlers = [handler]
    logging.root.setLevel(level)

    # Configure uvicorn loggers to use Rich
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = [handler]
        uvicorn_logger.propagate = False


def create_services(settings: Settings, engine: Engine) -> Services:
    """Create all application services with proper dependency wiring.

    Args:
        settings: Application settings.
        engine: Database engine with tables created.

    Returns:
        Services container with all application services.
    """
    repository = PlaylistRepository(engine)

    orchestrator = create_orchestrator(
        settings.spotify,
        repository,
        match=settings.match,
        ollama=settings.ollama,
    )
    if not orchestrator.has_intent_compiler:
        logger.warning("OVERTURE_OLLAMA_HOST not set, intent pipeline disabled")

    worker_pool = FeatureWorkerPool(
        repository,
        PreviewAnalyzer(timeout=settings.preview_timeout),
        settings.worker,
    )
    intent_runner = IntentRunner(
        orchestrator, heartbeat_interval=settings.heartbeat_interval
    )

    return Services(
        repository=repository,
        orchestrator=orchestrator,
        worker_pool=worker_pool,
        intent_runner=intent_runner,
    )


def create_api_router() -> APIRouter:
    """Create the API router with all routes under /api prefix."""
    api_router = APIRouter(prefix="/api")
    api_router.include_router(health.router)
    api_router.include_router(playlists.router)
    api_router.include_router(intent.router)
    return api_router


def _app_version() -> str:
    try:
        return version("overture")
    except PackageNotFoundError:
        return "0.0.0"


def create_app(
    settings: Settings | None = None, services: Services | None = None
) -> FastAPI:
    """Create and configure the main FastAPI application.

    Args:
        settings: Settings to use. Loaded from the environment if not provided.
        services: Prebuilt services. When not provided they are created at
            startup against the SQLite database at settings.db_path.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler for startup/shutdown."""
        logger.info("Starting application...")
        active = services
        if active is None:
            engine = create_db_engine(settings.db_path)
            init_db(engine)
            logger.info("Database ready at %s", settings.db_path)
            active = create_services(settings, engine)

        app.state.services = active
        active.start()
        logger.info("Services initialized")

        yield

        await active.close()

    app = FastAPI(
        title="overture",
        description="Playlist orchestration API",
        version=_app_version(),
        lifespan=lifespan,
        debug=settings.debug,
    )

    # Register exception handlers
    register_exception_handlers(app)

    # CORS middleware (type ignore needed due to Starlette typing limitations)
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # API routes under /api prefix
    app.include_router(create_api_router())

    return app
