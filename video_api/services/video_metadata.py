"""Video metadata lookup backed by yt-dlp."""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

import yt_dlp
from yt_dlp.utils import DownloadError, ExtractorError

from video_api.config import YOUTUBE_WATCH_URL
from video_api.exceptions import InvalidVideoIdError
from video_api.schemas import Thumbnail, VideoDetails, VideoFormat

logger = logging.getLogger(__name__)

_VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")
_URL_VIDEO_ID_RE = re.compile(
    r"(?:youtube\.com/(?:watch\?(?:.*&)?v=|embed/|shorts/|v/|live/)|youtu\.be/)"
    r"([A-Za-z0-9_-]{11})"
)


def extract_video_id(value: str) -> str:
    """Return the 11 character video ID from a bare ID or a YouTube URL."""
    value = (value or "").strip()
    if _VIDEO_ID_RE.match(value):
        return value
    match = _URL_VIDEO_ID_RE.search(value)
    if match:
        return match.group(1)
    raise InvalidVideoIdError()


def format_duration(seconds: Optional[float]) -> str:
    """Render seconds the way Go prints a time.Duration ("2h45m0s")."""
    if not seconds or seconds <= 0:
        return "0s"
    # millisecond precision, so 3779.9999999 carries over to 1h3m0s
    total = round(float(seconds), 3)
    whole = int(total)
    fraction = round(total - whole, 3)
    hours, remainder = divmod(whole, 3600)
    minutes, secs = divmod(remainder, 60)
    sec_text = f"{secs + fraction:g}" if fraction else str(secs)
    if hours:
        return f"{hours}h{minutes}m{sec_text}s"
    if minutes:
        return f"{minutes}m{sec_text}s"
    return f"{sec_text}s"


def _is_audio_only(fmt: Dict) -> bool:
    return fmt.get("vcodec") == "none" and fmt.get("acodec") not in (None, "none")


def _build_format(fmt: Dict) -> VideoFormat:
    audio_only = _is_audio_only(fmt)
    ext = fmt.get("ext")
    return VideoFormat(
        itag=str(fmt.get("format_id") or "unknown"),
        ext=ext,
        quality=fmt.get("format_note") or fmt.get("resolution"),
        mime_type=f"{'audio' if audio_only else 'video'}/{ext}" if ext else None,
        width=fmt.get("width"),
        height=fmt.get("height"),
        fps=fmt.get("fps"),
        vcodec=fmt.get("vcodec"),
        acodec=fmt.get("acodec"),
        bitrate=fmt.get("tbr"),
        filesize=fmt.get("filesize") or fmt.get("filesize_approx"),
        audio_only=audio_only,
    )


def build_video_details(info: Dict) -> VideoDetails:
    """Map a yt-dlp info dict onto the public metadata record."""
    thumbnails: List[Thumbnail] = [
        Thumbnail(url=thumb["url"], width=thumb.get("width"), height=thumb.get("height"))
        for thumb in info.get("thumbnails") or []
        if thumb.get("url")
    ]
    formats = [
        _build_format(fmt)
        for fmt in info.get("formats") or []
        # storyboards are image sprites, not downloadable media
        if fmt.get("ext") != "mhtml"
    ]
    return VideoDetails(
        title=info.get("title") or "",
        author=info.get("uploader") or info.get("channel") or "",
        duration=format_duration(info.get("duration")),
        thumbnails=thumbnails,
        formats=formats,
    )


class VideoMetadataClient:
    def __init__(self, ydl_options: Optional[Dict] = None) -> None:
        self.ydl_options = {
            "quiet": True,
            "no_warnings": True,
            "skip_download": True,
            "noplaylist": True,
        }
        if ydl_options:
            self.ydl_options.update(ydl_options)

    def fetch_info(self, video_id: str) -> Dict:
        url = YOUTUBE_WATCH_URL.format(video_id=extract_video_id(video_id))
        try:
            with yt_dlp.YoutubeDL(self.ydl_options) as ydl:
                info = ydl.extract_info(url, download=False)
        except (DownloadError, ExtractorError) as exc:
            logger.info("Metadata lookup failed for %s: %s", video_id, exc)
            raise InvalidVideoIdError() from exc
        if not info:
            raise InvalidVideoIdError()
        return info

    def get_video_details(self, video_id: str) -> VideoDetails:
        """Blocking; call through ``asyncio.to_thread`` from async code."""
        return build_video_details(self.fetch_info(video_id))


VIDEO_METADATA_CLIENT = VideoMetadataClient()
