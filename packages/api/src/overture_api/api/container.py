"""Services container for dependency injection.

This module provides the Services container and dependency injection
utilities for accessing services from FastAPI routes via app.state.
"""

import asyncio
import logging
from dataclasses import dataclass

from fastapi import Request
from overture import FeatureWorkerPool, PlaylistOrchestrator

from overture_api.db.repository import PlaylistRepository
from overture_api.services.intent_runner import IntentRunner

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Container for application services with proper lifecycle management.

    All services are created at startup and cleaned up at shutdown.
    Stored in FastAPI's app.state for proper request scoping.
    """

    repository: PlaylistRepository
    orchestrator: PlaylistOrchestrator
    worker_pool: FeatureWorkerPool
    intent_runner: IntentRunner

    def start(self) -> None:
        """Start background workers. Called at application startup."""
        self.worker_pool.start()

    async def close(self) -> None:
        """Drain in-flight work. Called at application shutdown.

        Intent pipelines finish first since they may still queue writes,
        then the feature worker pool drains its queue and stops. Joining the
        workers runs off the event loop.
        """
        await self.intent_runner.wait_for_all()
        await asyncio.to_thread(self.worker_pool.stop)
        if self.worker_pool.dropped:
            logger.warning(
                "%d feature job(s) were dropped while running",
                self.worker_pool.dropped,
            )
        logger.info("Services cleaned up")


def get_services(request: Request) -> Services:
    """Get services from request's app state (dependency injection).

    Args:
        request: FastAPI request object.

    Returns:
        Services container.

    Raises:
        RuntimeError: If services not initialized (app not running).
    """
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Services not initialized. Is the app running?")
    return services
