HOST = "0.0.0.0"
PORT = 8080

LOG_LEVEL = "INFO"

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

# "simulated" reports fake progress, "yt-dlp" performs the transfer locally
DOWNLOAD_BACKEND = "simulated"
DOWNLOAD_FOLDER = "downloads"

SIMULATED_PROGRESS_STEP = 20
SIMULATED_STEP_DELAY = 0.5  # seconds

MAX_CONCURRENT_DOWNLOADS = 4
JOB_RETENTION_SECONDS = 60 * 60  # None keeps finished jobs forever
