"""Grading constants, default paths and logging setup."""
import logging
import os
from pathlib import Path

from rich.logging import RichHandler

PASSING_GRADE = 7.0
WARNING_GRADE = 6.0
DEFAULT_LOW_ATTENDANCE_THRESHOLD = 80.0
# Points below the low-attendance threshold before a student is critical.
ATTENDANCE_TOLERANCE = 5.0

DEFAULT_BACKUP_PATH = os.environ.get(
    "GRADEBOOK_BACKUP", str(Path.home() / ".gradebook" / "backup.json")
)

_configured = False


def configure_logging(level: str | None = None) -> None:
    """Send log records through rich. Level defaults to ``GRADEBOOK_LOG_LEVEL``."""
    global _configured
    if _configured:
        return
    level_name = (level or os.environ.get("GRADEBOOK_LOG_LEVEL", "WARNING")).upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.WARNING))
    root.handlers = [RichHandler(show_path=False, rich_tracebacks=True)]
    logging.captureWarnings(True)
    _configured = True
