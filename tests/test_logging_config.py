import logging

from video_api.logging_config import HANDLER_NAME, setup_logging


def test_setup_logging_installs_one_handler():
    setup_logging("debug")
    setup_logging("warning")

    root_logger = logging.getLogger()
    handlers = [h for h in root_logger.handlers if h.get_name() == HANDLER_NAME]
    assert len(handlers) == 1
    assert root_logger.level == logging.WARNING

    setup_logging("info")
