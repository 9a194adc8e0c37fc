"""Environment-driven settings for the canvas store."""

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()  # load environment variables from .env file

PACKAGE_LOGGER = "canvas_backbone"


class CanvasSettings(BaseModel):
    """Policy knobs for a Canvas instance."""

    # when true, adding a node with a missing prerequisite raises instead of warning
    enforce_prerequisites: bool = False
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "CanvasSettings":
        """Read settings from CANVAS_* environment variables."""
        return cls(
            enforce_prerequisites=os.getenv(
                "CANVAS_ENFORCE_PREREQUISITES", "false"
            ).lower() == "true",
            log_level=os.getenv("CANVAS_LOG_LEVEL", "WARNING").upper(),
        )


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Apply a log level to the package logger.

    Defaults to CANVAS_LOG_LEVEL. Handlers are left to the application.
    """
    if level is None:
        level = CanvasSettings.from_env().log_level
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    return logger
