import asyncio
import logging
import os
from abc import ABC, abstractmethod
from typing import Callable

from video_api.config import (
    DOWNLOAD_BACKEND,
    DOWNLOAD_FOLDER,
    SIMULATED_PROGRESS_STEP,
    SIMULATED_STEP_DELAY,
    YOUTUBE_WATCH_URL,
)
from video_api.downloaders.common import build_format_selector, download_video
from video_api.schemas import DownloadRequest, VideoDetails
from video_api.services.video_metadata import extract_video_id

logger = logging.getLogger(__name__)

ReportProgress = Callable[[int], None]


class BaseYouTubeDownloader(ABC):
    """Strategy interface for downloading YouTube videos."""

    @abstractmethod
    async def download(
        self,
        request: DownloadRequest,
        details: VideoDetails,
        report_progress: ReportProgress,
    ) -> None:
        """Transfer the video, reporting integer percentages as it goes.

        ``report_progress`` raises when the job should stop; let it
        propagate.
        """
        raise NotImplementedError


class SimulatedYouTubeDownloader(BaseYouTubeDownloader):
    """Walks progress from 0 to 100 without touching the network."""

    def __init__(
        self, step: int = SIMULATED_PROGRESS_STEP, delay: float = SIMULATED_STEP_DELAY
    ) -> None:
        if step <= 0:
            raise ValueError("step must be positive")
        self.step = step
        self.delay = delay

    async def download(self, request, details, report_progress) -> None:
        for percent in range(0, 101, self.step):
            report_progress(percent)
            await asyncio.sleep(self.delay)


class LocalYouTubeDownloader(BaseYouTubeDownloader):
    """Executes downloads with yt-dlp locally."""

    def __init__(self, download_folder: str) -> None:
        self.download_folder = download_folder
        os.makedirs(download_folder, exist_ok=True)

    async def download(self, request, details, report_progress) -> None:
        url = YOUTUBE_WATCH_URL.format(video_id=extract_video_id(request.video_id))
        output_template = os.path.join(
            self.download_folder, "%(id)s_%(title)s.%(ext)s"
        )
        custom_options = {
            "format": build_format_selector(request.audio_only, request.quality),
        }

        def hook(data):
            if data.get("status") != "downloading":
                return
            downloaded = int(data.get("downloaded_bytes") or 0)
            total = data.get("total_bytes") or data.get("total_bytes_estimate")
            if total and total > 0:
                # 100 is reserved for the completed job; merged formats
                # download twice
                report_progress(min(99, int(downloaded * 100 / total)))

        file_path = await asyncio.to_thread(
            download_video,
            url,
            output_template,
            custom_options,
            hook,
        )
        logger.info("Downloaded %r to %s", details.title, file_path)


def build_youtube_downloader(backend: str = DOWNLOAD_BACKEND) -> BaseYouTubeDownloader:
    """Factory to choose the appropriate download strategy."""
    if backend == "yt-dlp":
        return LocalYouTubeDownloader(DOWNLOAD_FOLDER)
    if backend == "simulated":
        return SimulatedYouTubeDownloader()
    raise ValueError(f"Unknown download backend: {backend!r}")


YOUTUBE_DOWNLOADER = build_youtube_downloader()
