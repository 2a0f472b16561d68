from typing import List, Optional

from pydantic import BaseModel, Field


class Thumbnail(BaseModel):
    url: str
    width: Optional[int] = None
    height: Optional[int] = None


class VideoFormat(BaseModel):
    itag: str
    ext: Optional[str] = None
    quality: Optional[str] = None
    mime_type: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    fps: Optional[float] = None
    vcodec: Optional[str] = None
    acodec: Optional[str] = None
    bitrate: Optional[float] = None
    filesize: Optional[int] = None
    audio_only: bool = False


class VideoDetails(BaseModel):
    title: str
    author: str
    duration: str = Field(..., description='Human readable, e.g. "2h45m0s"')
    thumbnails: List[Thumbnail] = Field(default_factory=list)
    formats: List[VideoFormat] = Field(default_factory=list)


class DownloadRequest(BaseModel):
    video_id: str = Field(..., min_length=1, description="YouTube video ID")
    audio_only: bool = False
    quality: str = ""


class DownloadProgressResponse(BaseModel):
    videoID: str
    progress: int
    completed: bool
    error: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
