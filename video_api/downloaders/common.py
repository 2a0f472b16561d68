import os
import re
from typing import Callable, Dict, Optional

import yt_dlp

from video_api.exceptions import DownloadFailedError

DEFAULT_FORMAT = "bestvideo[ext=mp4]+bestaudio[ext=m4a]/best[ext=mp4]/best"
AUDIO_FORMAT = "bestaudio/best"

_HEIGHT_RE = re.compile(r"(\d{3,4})")


def build_format_selector(audio_only: bool = False, quality: str = "") -> str:
    """Translate the request's audio_only/quality pair into a yt-dlp format."""
    if audio_only:
        return AUDIO_FORMAT

    quality = (quality or "").strip().lower()
    if quality == "worst":
        return "worst"

    match = _HEIGHT_RE.search(quality)
    if match:
        height = int(match.group(1))
        return (
            f"bestvideo[height<={height}][ext=mp4]+bestaudio[ext=m4a]"
            f"/best[height<={height}]/best"
        )
    return DEFAULT_FORMAT


def download_video(
    url: str,
    output_template: str,
    custom_options: Optional[Dict] = None,
    progress_callback: Optional[Callable[[Dict], None]] = None,
) -> str:
    """Download remote video content to disk and return the resulting filename."""
    ydl_opts = {
        "format": DEFAULT_FORMAT,
        "outtmpl": output_template,
        "merge_output_format": "mp4",
        "noplaylist": True,
        "quiet": True,
    }

    if custom_options:
        ydl_opts.update(custom_options)

    if progress_callback:
        ydl_opts["progress_hooks"] = [progress_callback]

    audio_only = ydl_opts["format"] == AUDIO_FORMAT
    if audio_only:
        ydl_opts.pop("merge_output_format", None)

    try:
        with yt_dlp.YoutubeDL(ydl_opts) as ydl:
            info = ydl.extract_info(url)
            filename = ydl.prepare_filename(info)
    except yt_dlp.utils.DownloadError as exc:
        raise DownloadFailedError(str(exc)) from exc

    if not audio_only and not filename.lower().endswith(".mp4"):
        filename = os.path.splitext(filename)[0] + ".mp4"

    if not os.path.exists(filename):
        raise DownloadFailedError("Failed to download video.")

    return filename
