from __future__ import annotations

import logging
import sys


CONSOLE_HANDLER_NAME = "lp_tracker.console"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure process-wide logging for the sync job and the API.

    Safe to call more than once; the console handler is installed only once.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not any(handler.get_name() == CONSOLE_HANDLER_NAME for handler in root_logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.set_name(CONSOLE_HANDLER_NAME)
        console_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(console_handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return root_logger
