"""
Logging utilities.

WHAT: Logging for the vending package and its bot console trail
WHY: Offers created and confirmed must be traceable per vendor
HOW: Handlers on the "vending" logger, stamped with the vendor id
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from ..core.config import Settings

PACKAGE_LOGGER = "vending"

CONSOLE_FORMAT = "%(asctime)s [%(vendor_id)s] %(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s [%(vendor_id)s] %(levelname)s %(name)s (%(filename)s:%(lineno)d): %(message)s"


class VendorContextFilter(logging.Filter):
    """Stamp every record with the vendor it belongs to."""

    def __init__(self, vendor_id: str):
        super().__init__()
        self.vendor_id = vendor_id

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "vendor_id"):
            record.vendor_id = self.vendor_id
        return True


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def setup_logging(settings: Settings, stream=None) -> logging.Logger:
    """
    Configure logging for the vending package.

    Only the "vending" logger is touched, so handlers installed by the
    host (uvicorn, pytest) are left alone. Calling this again replaces
    the handlers from the previous call.

    Args:
        settings: Source of LOG_LEVEL, LOG_FILE, DEBUG and VENDOR_ID
        stream: Console stream, stdout when omitted

    Returns:
        The configured package logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    level = logging.DEBUG if settings.DEBUG else _level(settings.LOG_LEVEL)
    package_logger.setLevel(level)

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    context = VendorContextFilter(settings.VENDOR_ID)

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setLevel(level)
    console_handler.addFilter(context)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    package_logger.addHandler(console_handler)

    log_file: Optional[Path] = Path(settings.LOG_FILE) if settings.LOG_FILE else None
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        # Offer history goes to the file even when the console is quieter
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.addFilter(context)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        package_logger.addHandler(file_handler)

    package_logger.info(
        f"Logging initialized for {settings.VENDOR_ID} "
        f"(level={logging.getLevelName(level)}, file={log_file or 'none'})"
    )
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module (typically __name__)."""
    return logging.getLogger(name)
