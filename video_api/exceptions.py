"""
Errors raised by the API and its background download jobs.

Every error carries the HTTP status and the message that ends up in the
``{"error": ...}`` response body when it escapes a route.
"""


class VideoAPIError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidVideoIdError(VideoAPIError):
    """Metadata lookup failed for the given identifier."""

    status_code = 400
    message = "Invalid video ID"


class InvalidPayloadError(VideoAPIError):
    status_code = 400
    message = "Invalid request payload"


class JobNotFoundError(VideoAPIError):
    """No job is registered for the identifier (or it was replaced)."""

    status_code = 404
    message = "No progress found for the given video ID"


class DownloadFailedError(VideoAPIError):
    """The transfer itself failed after the job was accepted."""

    message = "Download failed"


class DownloadCancelledError(Exception):
    """Raised inside a runner whose job was cancelled; never reaches a client."""
