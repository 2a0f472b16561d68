import asyncio
import logging

from fastapi import APIRouter, Depends

from video_api.dependencies import get_metadata_client, get_runner
from video_api.schemas import DownloadRequest, ErrorResponse, MessageResponse
from video_api.services.job_runner import DownloadRunner
from video_api.services.video_metadata import VideoMetadataClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/download", tags=["Download"])


@router.post(
    "",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}},
)
async def start_download(
    payload: DownloadRequest,
    client: VideoMetadataClient = Depends(get_metadata_client),
    runner: DownloadRunner = Depends(get_runner),
):
    """Kick off a download; poll ``/progress/{video_id}`` for its state."""
    logger.info("POST /download endpoint hit for %s", payload.video_id)
    details = await asyncio.to_thread(client.get_video_details, payload.video_id)
    runner.start(payload, details)
    return {"message": "Download started"}


@router.delete(
    "/{video_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def cancel_download(video_id: str, runner: DownloadRunner = Depends(get_runner)):
    logger.info("DELETE /download/%s endpoint hit", video_id)
    if runner.tracker.cancel_job(video_id):
        return {"message": "Download cancelled"}
    return {"message": "Download already completed"}
