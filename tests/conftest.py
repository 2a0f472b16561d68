import asyncio
import threading
import time

import pytest
from fastapi.testclient import TestClient

from main import app
from video_api.dependencies import get_metadata_client, get_runner, get_tracker
from video_api.downloaders.youtube import BaseYouTubeDownloader
from video_api.exceptions import InvalidVideoIdError
from video_api.schemas import Thumbnail, VideoDetails, VideoFormat
from video_api.services.download_tracker import DownloadTracker
from video_api.services.job_runner import DownloadRunner

KNOWN_VIDEOS = {
    "abc123": VideoDetails(
        title="Big Buck Bunny",
        author="Blender Foundation",
        duration="9m56s",
        thumbnails=[Thumbnail(url="https://i.ytimg.com/vi/abc123/hq.jpg", width=480, height=360)],
        formats=[
            VideoFormat(itag="18", ext="mp4", quality="360p", mime_type="video/mp4", height=360),
            VideoFormat(itag="140", ext="m4a", quality="medium", mime_type="audio/m4a", audio_only=True),
        ],
    ),
    "dQw4w9WgXcQ": VideoDetails(title="Never Gonna Give You Up", author="Rick Astley", duration="3m33s"),
}


class FakeMetadataClient:
    def __init__(self, videos=None):
        self.videos = dict(KNOWN_VIDEOS if videos is None else videos)
        self.calls = []

    def get_video_details(self, video_id):
        self.calls.append(video_id)
        try:
            return self.videos[video_id]
        except KeyError:
            raise InvalidVideoIdError() from None


class GatedDownloader(BaseYouTubeDownloader):
    """Holds every transfer in a worker thread until ``gate`` is set."""

    def __init__(self, steps=(20, 40, 60, 80, 100)):
        self.gate = threading.Event()
        self.steps = steps
        self.error = None

    async def download(self, request, details, report_progress):
        await asyncio.to_thread(self._transfer, report_progress)

    def _transfer(self, report_progress):
        if not self.gate.wait(timeout=5):
            raise RuntimeError("gate was never opened")
        for percent in self.steps:
            report_progress(percent)
            time.sleep(0.002)
        if self.error is not None:
            raise self.error


def _wait_until(predicate, timeout=5.0, interval=0.01):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        result = predicate()
        if result:
            return result
        time.sleep(interval)
    raise AssertionError("condition not met before timeout")


@pytest.fixture
def wait_until():
    return _wait_until


@pytest.fixture
def tracker():
    return DownloadTracker()


@pytest.fixture
def downloader():
    downloader = GatedDownloader()
    yield downloader
    downloader.gate.set()


@pytest.fixture
def metadata_client():
    return FakeMetadataClient()


@pytest.fixture
def runner(tracker, downloader):
    return DownloadRunner(tracker, downloader, max_concurrent=4, retention=None)


@pytest.fixture
def client(tracker, runner, metadata_client, downloader):
    app.dependency_overrides[get_tracker] = lambda: tracker
    app.dependency_overrides[get_runner] = lambda: runner
    app.dependency_overrides[get_metadata_client] = lambda: metadata_client
    try:
        with TestClient(app) as test_client:
            yield test_client
            # let background tasks drain before the event loop goes away
            downloader.gate.set()
            _wait_until(lambda: runner.active_tasks == 0)
    finally:
        app.dependency_overrides.clear()
