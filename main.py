import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from video_api.config import HOST, PORT
from video_api.dependencies import get_runner, get_tracker
from video_api.exceptions import InvalidPayloadError, VideoAPIError
from video_api.logging_config import setup_logging
from video_api.routes.downloads import router as downloads_router
from video_api.routes.progress import router as progress_router
from video_api.routes.video import router as video_router
from video_api.services.download_tracker import DownloadTracker

setup_logging()
logger = logging.getLogger("video_api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # running jobs are recorded as interrupted rather than left in progress
    await get_runner().shutdown()


app = FastAPI(
    title="YouTube Video Downloader API",
    description="Look up YouTube video details and track background downloads.",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(video_router)
app.include_router(downloads_router)
app.include_router(progress_router)


@app.exception_handler(VideoAPIError)
async def handle_api_error(request: Request, exc: VideoAPIError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    logger.info("Invalid request payload for %s: %s", request.url.path, exc.errors())
    error = InvalidPayloadError()
    return JSONResponse(status_code=error.status_code, content={"error": error.message})


@app.get("/health", tags=["Health"])
async def health(tracker: DownloadTracker = Depends(get_tracker)):
    return {"ok": True, "jobs": len(tracker)}


if __name__ == "__main__":
    uvicorn.run(app, host=HOST, port=PORT)
