from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field, replace
from typing import Dict, Optional

from video_api.exceptions import JobNotFoundError
from video_api.utils.locks import ReadWriteLock

logger = logging.getLogger(__name__)

CANCELLED_MESSAGE = "Download cancelled"


@dataclass
class DownloadProgress:
    video_id: str
    process_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    progress: int = 0
    completed: bool = False
    error: Optional[str] = None
    created_at: float = field(default_factory=time.time)
    completed_at: Optional[float] = None


def _clamp(percent) -> int:
    return max(0, min(100, int(percent)))


class DownloadTracker:
    """In-memory registry of download jobs keyed by video ID.

    Callers only ever see copies; the records themselves never leave the
    tracker. Every method performs a single read or mutation of the map
    under the lock.
    """

    def __init__(self) -> None:
        self._jobs: Dict[str, DownloadProgress] = {}
        self._lock = ReadWriteLock()

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._jobs)

    def __contains__(self, video_id: str) -> bool:
        with self._lock.read_locked():
            return video_id in self._jobs

    def put_job(self, job: DownloadProgress) -> None:
        job = replace(job)
        with self._lock.write_locked():
            replaced = self._jobs.get(job.video_id)
            self._jobs[job.video_id] = job
        if replaced is not None:
            logger.debug(
                "Replaced job %s for %s with %s",
                replaced.process_id,
                job.video_id,
                job.process_id,
            )

    def start_job(self, video_id: str) -> DownloadProgress:
        job = DownloadProgress(video_id=video_id)
        self.put_job(job)
        return job

    def get_job(self, video_id: str) -> Optional[DownloadProgress]:
        with self._lock.read_locked():
            job = self._jobs.get(video_id)
            return replace(job) if job else None

    def serialize_job(self, video_id: str) -> Optional[Dict[str, object]]:
        job = self.get_job(video_id)
        if not job:
            return None
        return {
            "videoID": job.video_id,
            "progress": job.progress,
            "completed": job.completed,
            "error": job.error,
        }

    def _current(self, video_id: str, process_id: Optional[str]) -> DownloadProgress:
        # caller holds the write lock
        job = self._jobs.get(video_id)
        if job is None or (process_id is not None and job.process_id != process_id):
            raise JobNotFoundError()
        return job

    def update_progress(
        self, video_id: str, percent: int, process_id: Optional[str] = None
    ) -> bool:
        """Raise the job's progress to ``percent``.

        Lower values are ignored so readers never see progress go back.
        Returns False when the job has already finished.
        """
        percent = _clamp(percent)
        with self._lock.write_locked():
            job = self._current(video_id, process_id)
            if job.completed:
                return False
            if percent > job.progress:
                job.progress = percent
        return True

    def mark_completed(
        self,
        video_id: str,
        error: Optional[str] = None,
        process_id: Optional[str] = None,
    ) -> bool:
        """Move the job to its terminal state.

        Only the first call has an effect; it reports True.
        """
        with self._lock.write_locked():
            job = self._current(video_id, process_id)
            if job.completed:
                return False
            job.completed = True
            job.completed_at = time.time()
            if error:
                job.error = error
            else:
                job.progress = 100
        logger.debug("Job %s for %s completed (error=%r)", process_id, video_id, error)
        return True

    def cancel_job(self, video_id: str) -> bool:
        return self.mark_completed(video_id, error=CANCELLED_MESSAGE)

    def evict_job(self, video_id: str, process_id: str) -> bool:
        """Forget a finished job unless a newer one took its place."""
        with self._lock.write_locked():
            job = self._jobs.get(video_id)
            if job is None or job.process_id != process_id or not job.completed:
                return False
            del self._jobs[video_id]
        logger.debug("Evicted job %s for %s", process_id, video_id)
        return True


DOWNLOAD_TRACKER = DownloadTracker()
