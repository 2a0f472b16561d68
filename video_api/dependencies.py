"""FastAPI dependency providers; tests swap them via ``app.dependency_overrides``."""

from video_api.services.download_tracker import DOWNLOAD_TRACKER, DownloadTracker
from video_api.services.job_runner import DOWNLOAD_RUNNER, DownloadRunner
from video_api.services.video_metadata import VIDEO_METADATA_CLIENT, VideoMetadataClient


def get_tracker() -> DownloadTracker:
    return DOWNLOAD_TRACKER


def get_runner() -> DownloadRunner:
    return DOWNLOAD_RUNNER


def get_metadata_client() -> VideoMetadataClient:
    return VIDEO_METADATA_CLIENT
