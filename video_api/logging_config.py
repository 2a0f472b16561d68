"""Root logger setup for the API process."""

import logging
import sys

from video_api.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(levelname)-8s - %(name)s - %(message)s"
HANDLER_NAME = "video_api"


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Send every record at ``level`` or above to stdout.

    Calling it again only adjusts the level, so importing the app twice
    (uvicorn reload, tests) does not duplicate handlers.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if any(h.get_name() == HANDLER_NAME for h in root_logger.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.set_name(HANDLER_NAME)
    root_logger.addHandler(handler)
