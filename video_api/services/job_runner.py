from __future__ import annotations

import asyncio
import logging
from typing import Optional, Set

from video_api.config import JOB_RETENTION_SECONDS, MAX_CONCURRENT_DOWNLOADS
from video_api.downloaders.youtube import YOUTUBE_DOWNLOADER, BaseYouTubeDownloader
from video_api.exceptions import DownloadCancelledError, JobNotFoundError
from video_api.schemas import DownloadRequest, VideoDetails
from video_api.services.download_tracker import (
    CANCELLED_MESSAGE,
    DOWNLOAD_TRACKER,
    DownloadTracker,
)

logger = logging.getLogger(__name__)

INTERRUPTED_MESSAGE = "Download interrupted"


class DownloadRunner:
    """Runs each accepted download as a background task.

    The only thing a task shares with the rest of the process is the
    tracker entry identified by ``(video_id, process_id)``.
    """

    def __init__(
        self,
        tracker: DownloadTracker,
        downloader: BaseYouTubeDownloader,
        max_concurrent: int = MAX_CONCURRENT_DOWNLOADS,
        retention: Optional[float] = JOB_RETENTION_SECONDS,
    ) -> None:
        self.tracker = tracker
        self.downloader = downloader
        self.retention = retention
        self._slots = asyncio.Semaphore(max_concurrent)
        self._tasks: Set[asyncio.Task] = set()

    @property
    def active_tasks(self) -> int:
        return len(self._tasks)

    def start(self, request: DownloadRequest, details: VideoDetails) -> asyncio.Task:
        """Register the job and launch its task; must run inside the event loop."""
        job = self.tracker.start_job(request.video_id)
        logger.info("Starting download %s for %s", job.process_id, job.video_id)
        task = asyncio.create_task(
            self._run(job.video_id, job.process_id, request, details)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def shutdown(self) -> None:
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def _reporter(self, video_id: str, process_id: str):
        def report_progress(percent: int) -> None:
            if not self.tracker.update_progress(video_id, percent, process_id=process_id):
                raise DownloadCancelledError()

        return report_progress

    async def _run(
        self,
        video_id: str,
        process_id: str,
        request: DownloadRequest,
        details: VideoDetails,
    ) -> None:
        try:
            async with self._slots:
                report_progress = self._reporter(video_id, process_id)
                # fails fast if the job was cancelled or replaced while queued
                report_progress(0)
                await self.downloader.download(request, details, report_progress)
        except DownloadCancelledError:
            logger.info("Download %s for %s cancelled", process_id, video_id)
            self._finish(video_id, process_id, CANCELLED_MESSAGE)
        except JobNotFoundError:
            logger.info("Download %s for %s superseded, stopping", process_id, video_id)
        except asyncio.CancelledError:
            self._finish(video_id, process_id, INTERRUPTED_MESSAGE)
            raise
        except Exception as exc:
            logger.exception("Download %s for %s failed", process_id, video_id)
            self._finish(video_id, process_id, str(exc) or type(exc).__name__)
        else:
            logger.info("Download %s for %s completed", process_id, video_id)
            self._finish(video_id, process_id, None)

    def _finish(self, video_id: str, process_id: str, error: Optional[str]) -> None:
        try:
            self.tracker.mark_completed(video_id, error=error, process_id=process_id)
        except JobNotFoundError:
            return
        if self.retention is not None:
            asyncio.get_running_loop().call_later(
                self.retention, self.tracker.evict_job, video_id, process_id
            )


DOWNLOAD_RUNNER = DownloadRunner(DOWNLOAD_TRACKER, YOUTUBE_DOWNLOADER)
