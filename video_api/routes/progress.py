import logging

from fastapi import APIRouter, Depends

from video_api.dependencies import get_tracker
from video_api.exceptions import JobNotFoundError
from video_api.schemas import DownloadProgressResponse, ErrorResponse
from video_api.services.download_tracker import DownloadTracker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/progress", tags=["Progress"])


@router.get(
    "/{video_id}",
    response_model=DownloadProgressResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_download_progress(
    video_id: str, tracker: DownloadTracker = Depends(get_tracker)
):
    logger.info("GET /progress/%s endpoint hit", video_id)
    payload = tracker.serialize_job(video_id)
    if not payload:
        raise JobNotFoundError()
    return payload
