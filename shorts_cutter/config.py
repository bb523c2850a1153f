"""Application-wide settings, constants and exit codes."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import IntEnum

from shorts_cutter.errors import InvalidArgument

FFMPEG_FILTER_COMPLEX = (
    "[0:v]scale=2276:1280,boxblur=4[bg];[1:v]scale=720:-1[fg];"
    "[bg][fg]overlay=(W-w)/2:(H-h)/2[tmp];[tmp]crop=720:1280:(2276-720)/2:0[out]"
)
"""Filter graph that turns a landscape video into a blurred-background vertical short."""

OUTPUT_SUFFIX = "-short"
FFMPEG_TIMEOUT = timedelta(minutes=10)
MAX_THREADS = 32
LOG_FILENAME_PATTERN = "shorts-cutter-%Y%m%d-%H%M%S.log"
FFMPEG_EXECUTABLE = "ffmpeg"
FFMPEG_VERSION_ARGS: tuple[str, ...] = ("-version",)
FFMPEG_BUFFER_SIZE = 8192
DEFAULT_INPUT_EXTENSIONS: tuple[str, ...] = ("mp4",)

FFMPEG_NOT_FOUND_MESSAGE = (
    "FFmpeg not found in PATH. Please install FFmpeg and ensure it's available "
    "in your system PATH."
)
PROCESSING_STARTED_MESSAGE = "Starting video processing..."
PROCESSING_COMPLETED_MESSAGE = "Video processing completed."
NO_FILES_FOUND_MESSAGE = "No .mp4 files found in the input directory."
GRACEFUL_SHUTDOWN_MESSAGE = "Received shutdown signal. Finishing current tasks..."


class ExitCode(IntEnum):
    """Process exit statuses."""

    SUCCESS = 0
    CRITICAL_ERROR = 1
    PARTIAL_SUCCESS = 2


@dataclass
class AppConfig:
    """Central application configuration."""

    ffmpeg_filter_complex: str = FFMPEG_FILTER_COMPLEX
    supported_extensions: list[str] = field(
        default_factory=lambda: list(DEFAULT_INPUT_EXTENSIONS)
    )
    output_suffix: str = OUTPUT_SUFFIX
    ffmpeg_timeout: timedelta = FFMPEG_TIMEOUT
    max_threads: int = MAX_THREADS
    log_filename_pattern: str = LOG_FILENAME_PATTERN
    console_log_level: str = "info"
    file_log_level: str = "debug"

    def validate(self) -> None:
        """Raise InvalidArgument if the configuration is unusable."""
        if not self.supported_extensions:
            raise InvalidArgument("No supported file extensions configured")
        if not self.output_suffix:
            raise InvalidArgument("Output suffix cannot be empty")
        if not self.ffmpeg_filter_complex:
            raise InvalidArgument("FFmpeg filter complex cannot be empty")


def default_thread_count() -> int:
    """Number of CPUs available to this process, at least one."""
    if hasattr(os, "sched_getaffinity"):
        try:
            count = len(os.sched_getaffinity(0))
        except OSError:
            count = 0
        if count > 0:
            return count
    return os.cpu_count() or 1


def generate_log_filename(now: datetime | None = None) -> str:
    """Log file name stamped with the given (or current local) time."""
    moment = now if now is not None else datetime.now()
    return moment.strftime(LOG_FILENAME_PATTERN)