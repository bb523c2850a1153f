"""Parallel processing of file tasks and collection of their outcomes."""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

from shorts_cutter.errors import FfmpegError, FileSystemError
from shorts_cutter.ffmpeg import (
    FfmpegCommand,
    FfmpegExecutionResult,
    execute_ffmpeg_command,
)
from shorts_cutter.ffmpeg import validate_input_file as validate_ffmpeg_input
from shorts_cutter.logger import FileProcessingLogger, ProcessingSummary
from shorts_cutter.utils import FileTask

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskResult:
    """Outcome of processing one file."""

    input: Path
    duration: timedelta

    def is_success(self) -> bool:
        return isinstance(self, TaskSuccess)


@dataclass(frozen=True)
class TaskSuccess(TaskResult):
    """A file that was converted successfully."""

    output: Path
    ffmpeg_result: FfmpegExecutionResult


@dataclass(frozen=True)
class TaskFailure(TaskResult):
    """A file whose processing failed."""

    error: str


@dataclass
class ProcessingResults:
    """All task outcomes of a batch, split by success."""

    successful: list[TaskSuccess] = field(default_factory=list)
    failed: list[TaskFailure] = field(default_factory=list)
    total_duration: timedelta = timedelta(0)

    @classmethod
    def empty(cls) -> ProcessingResults:
        return cls()

    @classmethod
    def from_task_results(
        cls, results: Iterable[TaskResult], total_duration: timedelta
    ) -> ProcessingResults:
        collected = cls(total_duration=total_duration)
        for result in results:
            if isinstance(result, TaskSuccess):
                collected.successful.append(result)
            else:
                collected.failed.append(result)
        return collected

    def total_count(self) -> int:
        return len(self.successful) + len(self.failed)

    def success_count(self) -> int:
        return len(self.successful)

    def failure_count(self) -> int:
        return len(self.failed)

    def to_processing_summary(self) -> ProcessingSummary:
        """Build the summary used for the final report."""
        summary = ProcessingSummary()
        for success in self.successful:
            summary.add_success(success.input, success.output, success.duration)
        for failure in self.failed:
            summary.add_failure(failure.input, failure.error)
        summary.set_total_duration(self.total_duration)
        return summary


class WorkerPool:
    """Runs file tasks concurrently, at most max_workers at a time."""

    def __init__(self, max_workers: int) -> None:
        _log.info("Creating worker pool with %d workers", max_workers)
        self.max_workers = max_workers
        self._active = 0

    def available_permits(self) -> int:
        """Number of worker slots not currently busy."""
        return self.max_workers - self._active

    async def execute_tasks(self, tasks: Iterable[FileTask]) -> ProcessingResults:
        """Process every task and gather the results in completion order."""
        pending = list(tasks)
        total = len(pending)
        start = time.monotonic()
        _log.info("Starting parallel processing of %d tasks", total)

        if not pending:
            return ProcessingResults.empty()

        semaphore = asyncio.Semaphore(self.max_workers)
        results: list[TaskResult] = []

        async def run_one(number: int, task: FileTask) -> None:
            async with semaphore:
                self._active += 1
                try:
                    _log.debug(
                        "Starting task %d/%d for: %s",
                        number,
                        total,
                        task.input_filename(),
                    )
                    results.append(await process_single_file(task))
                finally:
                    self._active -= 1

        outcomes = await asyncio.gather(
            *(run_one(number, task) for number, task in enumerate(pending, 1)),
            return_exceptions=True,
        )
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                _log.error("Task handle join error: %s", outcome)

        total_duration = timedelta(seconds=time.monotonic() - start)
        _log.info(
            "Completed processing %d tasks in %s",
            total,
            format_duration(total_duration),
        )
        return ProcessingResults.from_task_results(results, total_duration)


async def process_single_file(task: FileTask) -> TaskResult:
    """Validate one task, run FFmpeg on it and report the outcome."""
    start = time.monotonic()
    logger = FileProcessingLogger(task.input_filename())

    def failure(message: str) -> TaskFailure:
        duration = timedelta(seconds=time.monotonic() - start)
        logger.log_error(task.input, task.output, message)
        return TaskFailure(input=task.input, duration=duration, error=message)

    try:
        task.validate()
    except FileSystemError as exc:
        return failure(f"Task validation failed: {exc}")

    try:
        validate_ffmpeg_input(task.input)
    except FfmpegError as exc:
        return failure(f"Input file validation failed: {exc}")

    command = FfmpegCommand(task.input, task.output)
    logger.log_ffmpeg_command(command.display_string())

    try:
        ffmpeg_result = await execute_ffmpeg_command(command)
    except FfmpegError as exc:
        return failure(f"FFmpeg error: {exc}")

    if not ffmpeg_result.success:
        details = ffmpeg_result.error_details() or "Unknown error"
        return failure(f"FFmpeg execution failed: {details}")

    duration = timedelta(seconds=time.monotonic() - start)
    logger.log_success(task.input, task.output)
    return TaskSuccess(
        input=task.input,
        duration=duration,
        output=task.output,
        ffmpeg_result=ffmpeg_result,
    )


def format_duration(duration: timedelta) -> str:
    """Render a duration in whole hours, minutes and seconds."""
    total_seconds = duration // timedelta(seconds=1)
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


class ProgressMonitor:
    """Thread-safe completion counter with a time-remaining estimate."""

    def __init__(self, total_tasks: int) -> None:
        self.total_tasks = total_tasks
        self._completed = 0
        self._lock = threading.Lock()
        self._start = time.monotonic()

    @property
    def completed_tasks(self) -> int:
        with self._lock:
            return self._completed

    def increment_completed(self) -> int:
        """Count one more finished task and return the new total."""
        with self._lock:
            self._completed += 1
            return self._completed

    def progress_percentage(self) -> float:
        completed = self.completed_tasks
        if self.total_tasks == 0:
            return 100.0
        return completed / self.total_tasks * 100.0

    def estimated_time_remaining(self) -> timedelta | None:
        """Projected time to finish, or None before any task has completed."""
        completed = self.completed_tasks
        if completed == 0:
            return None
        elapsed = timedelta(seconds=time.monotonic() - self._start)
        remaining = max(self.total_tasks - completed, 0)
        if remaining == 0:
            return timedelta(0)
        return elapsed / completed * remaining