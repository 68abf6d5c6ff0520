"""Background feature worker pool.

A fixed number of threads consume feature jobs from one bounded queue.
Submission never blocks: when the queue is full the job is dropped.
"""

import logging
import queue
import threading
from dataclasses import dataclass

from overture.config import WorkerConfig
from overture.exceptions import OvertureError
from overture.lib.features import features_or_fallback
from overture.models.domain import AudioFeatures
from overture.protocols import AudioAnalyzerProtocol, TrackFeatureStore

logger = logging.getLogger(__name__)

# Queue marker telling a worker thread to exit
_STOP = object()


@dataclass(frozen=True)
class FeatureJob:
    """Request to analyze one track's preview clip.

    Attributes:
        track_id: Catalog track id.
        preview_url: Preview clip URL; empty means nothing to analyze.
        features: The track's current features, used as the update base.
    """

    track_id: str
    preview_url: str = ""
    features: AudioFeatures | None = None


class FeatureWorkerPool:
    """Fire-and-forget pool that refines track energy from preview audio.

    Failures are logged and never surfaced. stop() stops accepting jobs,
    drains the queue and joins the workers.
    """

    def __init__(
        self,
        store: TrackFeatureStore,
        analyzer: AudioAnalyzerProtocol,
        config: WorkerConfig | None = None,
    ) -> None:
        self._store = store
        self._analyzer = analyzer
        self._config = config or WorkerConfig()
        self._queue: queue.Queue[object] = queue.Queue(
            maxsize=max(self._config.queue_size, 1)
        )
        self._threads: list[threading.Thread] = []
        self._lock = threading.Lock()
        self._accepting = False
        self._dropped = 0

    @property
    def dropped(self) -> int:
        """Number of jobs dropped because the queue was full or closed."""
        with self._lock:
            return self._dropped

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._accepting

    def start(self) -> None:
        """Launch the worker threads. Calling start twice is a no-op."""
        with self._lock:
            if self._accepting:
                return
            self._accepting = True
            count = max(self._config.workers, 1)
            for i in range(count):
                thread = threading.Thread(
                    target=self._run, name=f"feature-worker-{i}", daemon=True
                )
                thread.start()
                self._threads.append(thread)
        logger.info("Started %d feature worker(s)", count)

    def submit(self, job: FeatureJob) -> bool:
        """Queue a job without blocking.

        Returns:
            True if queued, False if dropped.
        """
        with self._lock:
            if not self._accepting:
                self._dropped += 1
                logger.warning(
                    "Worker pool not running, dropping job for %s", job.track_id
                )
                return False
            try:
                self._queue.put_nowait(job)
            except queue.Full:
                self._dropped += 1
                logger.warning(
                    "Feature queue full, dropping job for %s", job.track_id
                )
                return False
        return True

    def stop(self) -> None:
        """Stop accepting jobs, drain queued ones and wait for the workers."""
        with self._lock:
            if not self._accepting:
                return
            self._accepting = False
            threads = list(self._threads)
            self._threads.clear()

        for _ in threads:
            self._queue.put(_STOP)
        for thread in threads:
            thread.join()
        logger.info("Feature workers stopped")

    def _run(self) -> None:
        while True:
            job = self._queue.get()
            try:
                if not isinstance(job, FeatureJob):
                    return
                self.process_job(job)
            finally:
                self._queue.task_done()

    def process_job(self, job: FeatureJob) -> None:
        """Analyze one job and persist the refined features.

        Never raises; every failure is logged.
        """
        if not job.preview_url:
            logger.info(
                "No preview URL for track %s, skipping analysis", job.track_id
            )
            return

        try:
            energy = self._analyzer.analyze_preview(job.preview_url)
        except OvertureError as e:
            logger.warning("Analysis failed for track %s: %s", job.track_id, e)
            return
        except Exception:
            logger.exception("Unexpected analysis error for track %s", job.track_id)
            return

        base = features_or_fallback(job.track_id, job.features)
        features = base.model_copy(update={"energy": energy})

        try:
            self._store.update_track_features(job.track_id, features)
        except Exception as e:
            logger.warning("Failed to update track %s: %s", job.track_id, e)
            return

        logger.info(
            "Updated track %s with analyzed energy %.2f", job.track_id, energy
        )
