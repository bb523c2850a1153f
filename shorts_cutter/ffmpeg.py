"""Building and running the FFmpeg command that produces a vertical short."""

from __future__ import annotations

import asyncio
import logging
import os
import time
from dataclasses import dataclass, field
from datetime import timedelta
from os import PathLike
from pathlib import Path

from shorts_cutter.config import (
    DEFAULT_INPUT_EXTENSIONS,
    FFMPEG_EXECUTABLE,
    FFMPEG_FILTER_COMPLEX,
    FFMPEG_TIMEOUT,
    FFMPEG_VERSION_ARGS,
)
from shorts_cutter.errors import (
    CannotSpawnProcess,
    ExecutionFailed,
    FfmpegTimeout,
    InvalidInputFormat,
)

_log = logging.getLogger(__name__)

_ERROR_MARKERS = ("error", "failed", "invalid", "cannot")
_TAIL_LINES_SCANNED = 10
_FALLBACK_LINES = 3


def build_ffmpeg_args(
    input_path: str | PathLike[str], output_path: str | PathLike[str]
) -> list[str]:
    """Arguments passed to FFmpeg (without the executable itself)."""
    source = os.fspath(input_path)
    target = os.fspath(output_path)
    return [
        "-i",
        source,
        "-i",
        source,
        "-filter_complex",
        FFMPEG_FILTER_COMPLEX,
        "-map",
        "[out]",
        "-map",
        "0:a",
        "-y",
        target,
    ]


def build_ffmpeg_command_string(
    input_path: str | PathLike[str], output_path: str | PathLike[str]
) -> str:
    """Whole command line as a single string, for logging."""
    args = build_ffmpeg_args(input_path, output_path)
    return f"{FFMPEG_EXECUTABLE} {' '.join(args)}"


@dataclass(frozen=True)
class FfmpegCommand:
    """An FFmpeg invocation converting one input into a vertical short."""

    input_path: Path
    output_path: Path
    command_string: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "input_path", Path(self.input_path))
        object.__setattr__(self, "output_path", Path(self.output_path))
        object.__setattr__(
            self,
            "command_string",
            build_ffmpeg_command_string(self.input_path, self.output_path),
        )

    def args(self) -> list[str]:
        return build_ffmpeg_args(self.input_path, self.output_path)

    def display_string(self) -> str:
        return self.command_string


@dataclass(frozen=True)
class FfmpegExecutionResult:
    """Outcome of one FFmpeg run."""

    success: bool
    exit_code: int
    stdout: str
    stderr: str
    duration: timedelta
    command: str

    def summary(self) -> str:
        if self.success:
            return f"Success ({format_duration(self.duration)})"
        return f"Failed (exit code: {self.exit_code})"

    def error_details(self) -> str | None:
        """Condensed error text from stderr, or None for a clean run."""
        if not self.success and self.stderr:
            return extract_ffmpeg_error(self.stderr)
        return None


def _text_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _looks_like_error(line: str) -> bool:
    lowered = line.lower()
    if any(marker in lowered for marker in _ERROR_MARKERS):
        return True
    return "no such file" in lowered and "directory" in lowered


def extract_ffmpeg_error(stderr: str) -> str:
    """Pick the error lines from the tail of FFmpeg's stderr."""
    lines = _text_lines(stderr)
    tail = lines[-_TAIL_LINES_SCANNED:]
    errors = [line for line in tail if _looks_like_error(line)]
    if errors:
        return " | ".join(errors)
    return " | ".join(lines[-_FALLBACK_LINES:])


def format_duration(duration: timedelta) -> str:
    """Render a duration as '<m>m <s>.<ms>s' or '<s>.<ms>s'."""
    micros = duration // timedelta(microseconds=1)
    total_seconds, remainder = divmod(micros, 1_000_000)
    millis = remainder // 1000
    minutes, seconds = divmod(total_seconds, 60)
    if minutes > 0:
        return f"{minutes}m {seconds}.{millis:03d}s"
    return f"{seconds}.{millis:03d}s"


async def check_ffmpeg_availability() -> str:
    """Run 'ffmpeg -version' and return the first line of its output."""
    _log.debug("Checking FFmpeg availability...")
    try:
        process = await asyncio.create_subprocess_exec(
            FFMPEG_EXECUTABLE,
            *FFMPEG_VERSION_ARGS,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, _ = await process.communicate()
    except OSError as exc:
        raise CannotSpawnProcess() from exc
    if process.returncode != 0:
        raise CannotSpawnProcess()
    lines = _text_lines(stdout.decode("utf-8", errors="replace"))
    version_line = lines[0] if lines else "Unknown version"
    _log.info("FFmpeg found: %s", version_line)
    return version_line


async def _terminate(process: asyncio.subprocess.Process) -> None:
    try:
        process.kill()
    except ProcessLookupError:
        return
    await process.wait()


async def execute_ffmpeg_command(cmd: FfmpegCommand) -> FfmpegExecutionResult:
    """Run FFmpeg for one file, raising an FfmpegError on any failure."""
    start = time.monotonic()
    name = cmd.input_path.name
    _log.debug("Starting FFmpeg execution for: %s", cmd.input_path)
    _log.debug("Command: %s", cmd.display_string())

    if not cmd.input_path.exists():
        raise InvalidInputFormat(cmd.input_path)

    try:
        cmd.output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise CannotSpawnProcess() from exc

    try:
        process = await asyncio.create_subprocess_exec(
            FFMPEG_EXECUTABLE,
            *cmd.args(),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise CannotSpawnProcess() from exc

    timeout = FFMPEG_TIMEOUT
    try:
        raw_out, raw_err = await asyncio.wait_for(
            process.communicate(), timeout=timeout.total_seconds()
        )
    except asyncio.TimeoutError:
        _log.warning("FFmpeg timeout for: %s", name)
        await _terminate(process)
        raise FfmpegTimeout(int(timeout.total_seconds())) from None
    except OSError as exc:
        _log.warning("FFmpeg process error for: %s - %s", name, exc)
        raise CannotSpawnProcess() from exc

    duration = timedelta(seconds=time.monotonic() - start)
    stdout = raw_out.decode("utf-8", errors="replace")
    stderr = raw_err.decode("utf-8", errors="replace")
    code = process.returncode

    if code == 0:
        _log.info(
            "FFmpeg completed successfully for: %s (%s)",
            name,
            format_duration(duration),
        )
        return FfmpegExecutionResult(
            success=True,
            exit_code=0,
            stdout=stdout,
            stderr=stderr,
            duration=duration,
            command=cmd.command_string,
        )

    exit_code = code if code is not None and code >= 0 else -1
    _log.warning("FFmpeg failed for: %s (exit code: %s)", name, exit_code)
    raise ExecutionFailed(exit_code, stderr, cmd.command_string)


def validate_input_file(path: str | PathLike[str]) -> None:
    """Check the file exists and has a supported video extension."""
    target = Path(path)
    if not target.exists() or not target.is_file():
        raise InvalidInputFormat(target)
    suffix = target.suffix
    if not suffix or suffix[1:].lower() not in DEFAULT_INPUT_EXTENSIONS:
        raise InvalidInputFormat(target)


def estimate_output_size(input_path: str | PathLike[str]) -> int:
    """Rough output size estimate: about the size of the input."""
    try:
        size = Path(input_path).stat().st_size
    except OSError as exc:
        raise InvalidInputFormat(input_path) from exc
    return int(size * 1.0)