import asyncio
import logging

from fastapi import APIRouter, Depends

from video_api.dependencies import get_metadata_client
from video_api.schemas import ErrorResponse, VideoDetails
from video_api.services.video_metadata import VideoMetadataClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/video", tags=["Video"])


@router.get(
    "/{video_id}",
    response_model=VideoDetails,
    responses={400: {"model": ErrorResponse}},
)
async def get_video_details(
    video_id: str,
    client: VideoMetadataClient = Depends(get_metadata_client),
):
    """Get title, author, duration, thumbnails and formats of a YouTube video."""
    logger.info("GET /video/%s endpoint hit", video_id)
    return await asyncio.to_thread(client.get_video_details, video_id)
