import asyncio
from datetime import timedelta
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from shorts_cutter.config import ExitCode
from shorts_cutter.ffmpeg import FfmpegExecutionResult
from shorts_cutter.utils import FileTask, create_file_tasks
from shorts_cutter.worker import (
    ProcessingResults,
    ProgressMonitor,
    TaskFailure,
    TaskSuccess,
    WorkerPool,
    format_duration,
    process_single_file,
)


def _ffmpeg_result(seconds):
    return FfmpegExecutionResult(
        success=True,
        exit_code=0,
        stdout="",
        stderr="",
        duration=timedelta(seconds=seconds),
        command="ffmpeg...",
    )


def _fake_process(returncode=0, stdout=b"", stderr=b""):
    process = MagicMock()
    process.communicate = AsyncMock(return_value=(stdout, stderr))
    process.returncode = returncode
    return process


@pytest.fixture
def dirs(tmp_path):
    source = tmp_path / "in"
    target = tmp_path / "out"
    source.mkdir()
    target.mkdir()
    return source, target


def test_worker_pool_creation():
    pool = WorkerPool(4)
    assert pool.max_workers == 4
    assert pool.available_permits() == 4


def test_processing_results():
    successful = TaskSuccess(
        input=Path("input.mp4"),
        duration=timedelta(seconds=10),
        output=Path("output.mp4"),
        ffmpeg_result=_ffmpeg_result(10),
    )
    failed = TaskFailure(
        input=Path("input2.mp4"),
        duration=timedelta(seconds=5),
        error="Test error",
    )
    results = ProcessingResults.from_task_results(
        [successful, failed], timedelta(seconds=20)
    )
    assert results.total_count() == 2
    assert results.success_count() == 1
    assert results.failure_count() == 1
    assert results.total_duration == timedelta(seconds=20)
    assert results.successful == [successful]
    assert results.failed == [failed]


def test_progress_monitor():
    monitor = ProgressMonitor(10)
    assert monitor.progress_percentage() == 0.0
    monitor.increment_completed()
    assert monitor.progress_percentage() == 10.0
    for _ in range(9):
        monitor.increment_completed()
    assert monitor.progress_percentage() == 100.0


def test_progress_monitor_empty_is_complete():
    assert ProgressMonitor(0).progress_percentage() == 100.0


def test_increment_returns_new_count():
    monitor = ProgressMonitor(3)
    assert monitor.increment_completed() == 1
    assert monitor.increment_completed() == 2


def test_eta_none_before_any_completion():
    assert ProgressMonitor(5).estimated_time_remaining() is None


def test_eta_zero_when_all_done():
    monitor = ProgressMonitor(2)
    monitor.increment_completed()
    monitor.increment_completed()
    assert monitor.estimated_time_remaining() == timedelta(0)


def test_eta_projects_average_time():
    with patch("shorts_cutter.worker.time.monotonic", return_value=100.0):
        monitor = ProgressMonitor(4)
    monitor.increment_completed()
    monitor.increment_completed()
    with patch("shorts_cutter.worker.time.monotonic", return_value=110.0):
        remaining = monitor.estimated_time_remaining()
    assert remaining == timedelta(seconds=10)


def test_task_result():
    result = TaskSuccess(
        input=Path("test.mp4"),
        duration=timedelta(seconds=5),
        output=Path("test-short.mp4"),
        ffmpeg_result=_ffmpeg_result(5),
    )
    assert result.is_success()
    assert result.duration == timedelta(seconds=5)
    assert result.input == Path("test.mp4")


def test_failure_is_not_success():
    failure = TaskFailure(input=Path("a.mp4"), duration=timedelta(0), error="boom")
    assert failure.is_success() is False


@pytest.mark.parametrize(
    "duration, expected",
    [
        (timedelta(milliseconds=500), "0s"),
        (timedelta(seconds=5), "5s"),
        (timedelta(seconds=65), "1m 5s"),
        (timedelta(seconds=3665), "1h 1m 5s"),
    ],
)
def test_format_duration(duration, expected):
    assert format_duration(duration) == expected


def test_to_processing_summary():
    results = ProcessingResults.from_task_results(
        [
            TaskSuccess(
                input=Path("test1.mp4"),
                duration=timedelta(seconds=10),
                output=Path("test1-short.mp4"),
                ffmpeg_result=_ffmpeg_result(10),
            ),
            TaskFailure(
                input=Path("test2.mp4"),
                duration=timedelta(seconds=1),
                error="FFmpeg error",
            ),
        ],
        timedelta(seconds=30),
    )
    summary = results.to_processing_summary()
    assert summary.successful == 1
    assert summary.failed == 1
    assert summary.total_files == 2
    assert summary.total_duration == timedelta(seconds=30)
    assert summary.failed_files == [(Path("test2.mp4"), "FFmpeg error")]
    assert summary.exit_code() == ExitCode.PARTIAL_SUCCESS


@pytest.mark.asyncio
async def test_execute_empty_tasks():
    results = await WorkerPool(2).execute_tasks([])
    assert results.total_count() == 0
    assert results.total_duration == timedelta(0)


@pytest.mark.asyncio
async def test_missing_input_fails_validation(dirs):
    source, target = dirs
    task = FileTask(source / "missing.mp4", target / "missing-short.mp4")
    result = await process_single_file(task)
    assert isinstance(result, TaskFailure)
    assert result.error.startswith("Task validation failed: File not found:")


@pytest.mark.asyncio
async def test_wrong_extension_fails_input_validation(dirs):
    source, target = dirs
    text_file = source / "notes.txt"
    text_file.write_text("x")
    result = await process_single_file(FileTask(text_file, target / "notes-short.txt"))
    assert isinstance(result, TaskFailure)
    assert result.error.startswith(
        "Input file validation failed: Invalid input file format:"
    )


@pytest.mark.asyncio
async def test_spawn_failure_reported(dirs):
    source, target = dirs
    video = source / "clip.mp4"
    video.write_bytes(b"")
    with patch(
        "asyncio.create_subprocess_exec", AsyncMock(side_effect=OSError("missing"))
    ):
        result = await process_single_file(FileTask(video, target / "clip-short.mp4"))
    assert isinstance(result, TaskFailure)
    assert result.error == "FFmpeg error: Cannot spawn FFmpeg process"


@pytest.mark.asyncio
async def test_nonzero_exit_reported(dirs):
    source, target = dirs
    video = source / "clip.mp4"
    video.write_bytes(b"")
    with patch(
        "asyncio.create_subprocess_exec",
        AsyncMock(return_value=_fake_process(returncode=3, stderr=b"Error: bad")),
    ):
        result = await process_single_file(FileTask(video, target / "clip-short.mp4"))
    assert isinstance(result, TaskFailure)
    assert result.error == "FFmpeg error: FFmpeg execution failed with exit code 3"


@pytest.mark.asyncio
async def test_successful_run(dirs):
    source, target = dirs
    video = source / "clip.mp4"
    video.write_bytes(b"")
    with patch(
        "asyncio.create_subprocess_exec", AsyncMock(return_value=_fake_process())
    ):
        result = await process_single_file(FileTask(video, target / "clip-short.mp4"))
    assert isinstance(result, TaskSuccess)
    assert result.output == target / "clip-short.mp4"
    assert result.ffmpeg_result.exit_code == 0


@pytest.mark.asyncio
async def test_execute_tasks_mixed(dirs):
    source, target = dirs
    good = source / "good.mp4"
    good.write_bytes(b"")
    tasks = create_file_tasks([good, source / "gone.mp4"], target)
    pool = WorkerPool(2)
    with patch(
        "asyncio.create_subprocess_exec", AsyncMock(return_value=_fake_process())
    ):
        results = await pool.execute_tasks(tasks)
    assert results.success_count() == 1
    assert results.failure_count() == 1
    assert results.successful[0].input == good
    assert results.failed[0].input == source / "gone.mp4"
    assert pool.available_permits() == 2


@pytest.mark.asyncio
async def test_concurrency_is_limited(dirs):
    source, target = dirs
    files = []
    for index in range(5):
        video = source / f"v{index}.mp4"
        video.write_bytes(b"")
        files.append(video)

    running = 0
    peak = 0

    async def communicate():
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await asyncio.sleep(0.01)
        running -= 1
        return b"", b""

    def spawn(*args, **kwargs):
        process = MagicMock()
        process.communicate = communicate
        process.returncode = 0
        return process

    pool = WorkerPool(2)
    with patch("asyncio.create_subprocess_exec", AsyncMock(side_effect=spawn)):
        results = await pool.execute_tasks(create_file_tasks(files, target))
    assert results.success_count() == 5
    assert peak == 2
    assert sorted(r.input for r in results.successful) == sorted(files)