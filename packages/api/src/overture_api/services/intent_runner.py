"""Background execution of the intent pipeline with SSE progress.

The pipeline is synchronous (HTTP calls and SQLite writes), so each run is
executed in a worker thread wrapped in an asyncio task. The task is owned
by the runner, not by the request: a client disconnect ends the event
stream but never cancels the run, and shutdown waits for every run to
finish before the worker pool and database go away.
"""

import asyncio
import logging
from collections.abc import AsyncIterator

from overture import IntentEventType, IntentResult, PlaylistOrchestrator
from pydantic import BaseModel

from overture_api.api.exceptions import error_code
from overture_api.schemas.intent import CompleteEvent, ErrorEvent, StatusEvent

logger = logging.getLogger(__name__)

THINKING_MESSAGE = "Overture is analyzing the vibe..."


def format_event(event: IntentEventType, payload: BaseModel) -> str:
    """Format one server-sent event frame."""
    return f"event: {event}\ndata: {payload.model_dump_json(exclude_none=True)}\n\n"


class IntentRunner:
    """Runs intent pipelines as tracked background tasks.

    Args:
        orchestrator: Orchestrator whose process_intent is executed.
        heartbeat_interval: Seconds between heartbeat events while waiting.
    """

    def __init__(
        self, orchestrator: PlaylistOrchestrator, heartbeat_interval: float = 10.0
    ) -> None:
        self._orchestrator = orchestrator
        self._heartbeat_interval = heartbeat_interval
        self._tasks: set[asyncio.Task[IntentResult]] = set()

    @property
    def active(self) -> int:
        """Number of pipelines still running."""
        return len(self._tasks)

    def start(self, playlist_id: str, message: str) -> asyncio.Task[IntentResult]:
        """Launch process_intent in a worker thread.

        Must be called from the event loop. The returned task is tracked
        until it finishes.
        """
        task = asyncio.create_task(
            asyncio.to_thread(self._orchestrator.process_intent, playlist_id, message),
            name=f"intent-{playlist_id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        logger.info("Intent pipeline started for playlist %s", playlist_id)
        return task

    def _on_done(self, task: asyncio.Task[IntentResult]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning("Intent task %s was cancelled", task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Intent task %s failed: %s", task.get_name(), exc)
            return
        result = task.result()
        logger.info("Intent task %s: %s", task.get_name(), result.summary)

    async def stream(self, task: asyncio.Task[IntentResult]) -> AsyncIterator[str]:
        """Yield SSE frames for a running pipeline.

        Sends "thinking" immediately, a heartbeat every heartbeat_interval
        while the task runs, then exactly one "complete" or "error" frame.
        asyncio.wait never cancels the task it waits on, so closing this
        generator (client disconnect) leaves the pipeline running.
        """
        yield format_event(
            IntentEventType.THINKING,
            StatusEvent(status="thinking", message=THINKING_MESSAGE),
        )

        while not task.done():
            await asyncio.wait({task}, timeout=self._heartbeat_interval)
            if not task.done():
                yield format_event(
                    IntentEventType.HEARTBEAT, StatusEvent(status="heartbeat")
                )

        if task.cancelled():
            yield format_event(
                IntentEventType.ERROR,
                ErrorEvent(error="intent processing cancelled", code="cancelled"),
            )
            return

        exc = task.exception()
        if exc is not None:
            yield format_event(
                IntentEventType.ERROR, ErrorEvent(error=str(exc), code=error_code(exc))
            )
            return

        result = task.result()
        yield format_event(
            IntentEventType.COMPLETE,
            CompleteEvent(
                data=result.intent,
                tracks_evaluated=result.tracks_evaluated,
                tracks_added=result.tracks_added,
                summary=result.summary,
            ),
        )

    async def wait_for_all(self) -> None:
        """Wait until every tracked pipeline has finished."""
        if not self._tasks:
            return
        logger.info("Waiting for %d intent pipeline(s) to finish", len(self._tasks))
        await asyncio.gather(*self._tasks, return_exceptions=True)
