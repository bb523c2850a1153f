"""Logging setup, per-file progress messages and the final report."""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass, field
from datetime import timedelta
from os import PathLike
from pathlib import Path

from shorts_cutter.config import (
    FFMPEG_FILTER_COMPLEX,
    GRACEFUL_SHUTDOWN_MESSAGE,
    NO_FILES_FOUND_MESSAGE,
    ExitCode,
)
from shorts_cutter.errors import LogFileError, LoggingInitializationFailed

_log = logging.getLogger("shorts_cutter")

_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}
_CONSOLE_FORMAT = "%(asctime)s %(levelname)5s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)5s %(name)s: %(message)s"


def _parse_level(name: str) -> int:
    try:
        return _LEVELS[name.strip().lower()]
    except KeyError:
        raise LoggingInitializationFailed() from None


def initialize_logging(
    log_file_path: str | PathLike[str],
    console_level: str = "info",
    file_level: str = "debug",
) -> None:
    """Send the application's log to the console and to an appended log file."""
    path = Path(log_file_path)
    console_threshold = _parse_level(console_level)
    file_threshold = _parse_level(file_level)

    try:
        file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    except OSError as exc:
        raise LogFileError() from exc
    file_handler.setLevel(file_threshold)
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_threshold)
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    for handler in list(_log.handlers):
        _log.removeHandler(handler)
        handler.close()
    _log.setLevel(min(console_threshold, file_threshold))
    _log.addHandler(console_handler)
    _log.addHandler(file_handler)
    _log.propagate = False

    _log.info("Logging initialized. Log file: %s", path)


class FileProcessingLogger:
    """Logs the start, command and outcome of processing one file."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        self._start = time.monotonic()
        _log.info("START processing %s", filename)

    def log_ffmpeg_command(self, command: str) -> None:
        _log.info("CMD: %s", command)
        _log.debug("FFmpeg command for %s: %s", self.filename, command)

    def log_success(
        self, input_path: str | PathLike[str], output_path: str | PathLike[str]
    ) -> None:
        duration = self.elapsed()
        source, target = Path(input_path), Path(output_path)
        _log.info(
            "SUCCESS: %s -> %s (%s)", source.name, target.name, format_duration(duration)
        )
        _log.debug(
            "File processing completed in %s: %s -> %s", duration, source, target
        )

    def log_error(
        self,
        input_path: str | PathLike[str],
        output_path: str | PathLike[str],
        error_message: str,
    ) -> None:
        duration = self.elapsed()
        source, target = Path(input_path), Path(output_path)
        _log.error(
            "ERROR: %s -> %s (%s)", source.name, target.name, format_duration(duration)
        )
        _log.error("ERRMSG: %s", error_message)
        _log.debug("File processing failed after %s: %s -> %s", duration, source, target)

    def elapsed(self) -> timedelta:
        return timedelta(seconds=time.monotonic() - self._start)


@dataclass
class ProcessingSummary:
    """Counts and per-file outcomes of a whole batch."""

    total_files: int = 0
    successful: int = 0
    failed: int = 0
    total_duration: timedelta = timedelta(0)
    successful_files: list[tuple[Path, Path, timedelta]] = field(default_factory=list)
    failed_files: list[tuple[Path, str]] = field(default_factory=list)

    def add_success(
        self,
        input_path: str | PathLike[str],
        output_path: str | PathLike[str],
        duration: timedelta,
    ) -> None:
        self.successful += 1
        self.successful_files.append((Path(input_path), Path(output_path), duration))

    def add_failure(self, input_path: str | PathLike[str], error_message: str) -> None:
        self.failed += 1
        self.failed_files.append((Path(input_path), error_message))

    def set_total_duration(self, duration: timedelta) -> None:
        """Record the batch time and settle the total file count."""
        self.total_duration = duration
        self.total_files = self.successful + self.failed

    def print_final_report(self) -> None:
        """Write the report to the log and a summary to standard output."""
        _log.info("=== PROCESSING COMPLETED ===")
        _log.info("Total files: %d", self.total_files)
        _log.info("Successful: %d", self.successful)
        _log.info("Failed: %d", self.failed)
        _log.info("Total time: %s", format_duration(self.total_duration))

        if self.successful_files:
            _log.info("Successfully processed files:")
            for source, target, duration in self.successful_files:
                _log.info(
                    "  ✓ %s -> %s (%s)", source.name, target.name, format_duration(duration)
                )

        if self.failed_files:
            _log.warning("Files with errors:")
            for source, error in self.failed_files:
                _log.error("  ✗ %s: %s", source.name, error)

        print("\n=== PROCESSING SUMMARY ===")
        print(f"Total files processed: {self.total_files}")
        print(f"Successful: {self.successful} ✓")
        print(f"Failed: {self.failed} ✗")
        print(f"Total time: {format_duration(self.total_duration)}")

        if self.failed > 0:
            print("\nFiles with errors:")
            for source, error in self.failed_files:
                print(f"  ✗ {source.name}: {error}")

        print("Log details written to file.")

    def exit_code(self) -> ExitCode:
        """Exit status for the batch outcome."""
        if self.successful == 0:
            return ExitCode.CRITICAL_ERROR
        if self.failed == 0:
            return ExitCode.SUCCESS
        return ExitCode.PARTIAL_SUCCESS


def log_startup_info(
    input_dir: str | PathLike[str], output_dir: str | PathLike[str], thread_count: int
) -> None:
    _log.info("=== SHORTS CUTTER STARTED ===")
    _log.info("Input directory: %s", Path(input_dir))
    _log.info("Output directory: %s", Path(output_dir))
    _log.info("Thread count: %d", thread_count)
    _log.info("FFmpeg filter: %s", FFMPEG_FILTER_COMPLEX)


def log_files_found(file_count: int) -> None:
    if file_count == 0:
        _log.warning("%s", NO_FILES_FOUND_MESSAGE)
    else:
        _log.info("Found %d .mp4 files for processing", file_count)


def log_shutdown_signal() -> None:
    _log.warning("%s", GRACEFUL_SHUTDOWN_MESSAGE)


def format_duration(duration: timedelta) -> str:
    """Render a duration as hours/minutes/seconds, or milliseconds when short."""
    micros = duration // timedelta(microseconds=1)
    total_seconds, remainder = divmod(micros, 1_000_000)
    millis = remainder // 1000
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    if seconds > 0:
        return f"{seconds}.{millis:03d}s"
    return f"{millis}ms"