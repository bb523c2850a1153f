"""Command-line interface and the top-level batch run."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from shorts_cutter import ffmpeg, logger, utils
from shorts_cutter.config import (
    FFMPEG_EXECUTABLE,
    FFMPEG_VERSION_ARGS,
    MAX_THREADS,
    NO_FILES_FOUND_MESSAGE,
    PROCESSING_COMPLETED_MESSAGE,
    PROCESSING_STARTED_MESSAGE,
    AppConfig,
    ExitCode,
    default_thread_count,
    generate_log_filename,
)
from shorts_cutter.errors import (
    FfmpegError,
    FfmpegNotFound,
    InputDirectoryNotFound,
    InvalidArgument,
    InvalidThreadCount,
    OutputDirectoryCreationFailed,
    ShortsCutterError,
)
from shorts_cutter.worker import WorkerPool

_PROGRAM = "shorts-cutter"
_VERSION = "0.1.0"

_log = logging.getLogger("shorts_cutter")


def _thread_count(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid value '{text}'") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"invalid value '{text}'")
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=_PROGRAM,
        description="Batch video processing tool for creating vertical shorts",
    )
    parser.add_argument(
        "-i",
        "--input",
        required=True,
        metavar="DIR",
        type=Path,
        help="Input directory containing .mp4 files",
    )
    parser.add_argument(
        "-o",
        "--output",
        required=True,
        metavar="DIR",
        type=Path,
        help="Output directory for processed files",
    )
    parser.add_argument(
        "-t",
        "--threads",
        metavar="COUNT",
        type=_thread_count,
        default=None,
        help="Number of parallel threads (default: CPU cores)",
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"{_PROGRAM} {_VERSION}"
    )
    return parser


@dataclass(frozen=True)
class ValidatedArgs:
    """Checked command-line settings with absolute paths."""

    input: Path
    output: Path
    threads: int

    async def check_ffmpeg_availability(self) -> None:
        """Raise FfmpegNotFound unless 'ffmpeg -version' runs successfully."""
        try:
            process = await asyncio.create_subprocess_exec(
                FFMPEG_EXECUTABLE,
                *FFMPEG_VERSION_ARGS,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            await process.communicate()
        except OSError as exc:
            raise FfmpegNotFound() from exc
        if process.returncode != 0:
            raise FfmpegNotFound()

    def log_file_path(self) -> Path:
        """Time-stamped log file inside the output directory."""
        return self.output / generate_log_filename()

    def print_config_info(self) -> None:
        print("Configuration:")
        print(f"  Input directory:  {self.input}")
        print(f"  Output directory: {self.output}")
        print(f"  Threads:          {self.threads}")
        print(f"  Log file:         {self.log_file_path()}")
        print()


@dataclass(frozen=True)
class CliArgs:
    """Raw command-line arguments."""

    input: Path
    output: Path
    threads: int | None = None

    def validate_and_normalize(self) -> ValidatedArgs:
        """Check the arguments, create the output directory and resolve paths."""
        source = Path(self.input)
        target = Path(self.output)

        if not source.exists():
            raise InputDirectoryNotFound(source)
        if not source.is_dir():
            raise InvalidArgument(f"Input path is not a directory: {source}")
        try:
            input_dir = source.resolve(strict=True)
        except OSError:
            raise InvalidArgument(f"Cannot resolve input path: {source}") from None

        if target.exists():
            if not target.is_dir():
                raise InvalidArgument(
                    f"Output path exists but is not a directory: {target}"
                )
            try:
                output_dir = target.resolve(strict=True)
            except OSError:
                raise InvalidArgument(
                    f"Cannot resolve output path: {target}"
                ) from None
        else:
            try:
                target.mkdir(parents=True, exist_ok=True)
                output_dir = target.resolve(strict=True)
            except OSError:
                raise OutputDirectoryCreationFailed(target) from None

        if self.threads is None:
            threads = default_thread_count()
        elif self.threads <= 0 or self.threads > MAX_THREADS:
            raise InvalidThreadCount(self.threads, MAX_THREADS)
        else:
            threads = self.threads

        return ValidatedArgs(input=input_dir, output=output_dir, threads=threads)


def parse_args(argv: Sequence[str] | None = None) -> CliArgs:
    """Parse the command line; exits with a usage message on bad input."""
    namespace = _build_parser().parse_args(argv)
    return CliArgs(
        input=namespace.input, output=namespace.output, threads=namespace.threads
    )


async def run(argv: Sequence[str] | None = None) -> int:
    """Process every video found in the input directory; return the exit code."""
    args = parse_args(argv)
    validated = args.validate_and_normalize()
    await validated.check_ffmpeg_availability()

    settings = AppConfig()
    logger.initialize_logging(
        validated.log_file_path(),
        settings.console_log_level,
        settings.file_log_level,
    )

    validated.print_config_info()

    try:
        version = await ffmpeg.check_ffmpeg_availability()
    except FfmpegError as exc:
        print(f"FFmpeg check failed: {exc.category}: {exc}", file=sys.stderr)
        return ExitCode.CRITICAL_ERROR
    _log.info("Using %s", version)

    logger.log_startup_info(validated.input, validated.output, validated.threads)

    video_files = utils.find_video_files(validated.input)
    logger.log_files_found(len(video_files))

    if not video_files:
        print(NO_FILES_FOUND_MESSAGE)
        return ExitCode.CRITICAL_ERROR

    tasks = utils.create_file_tasks(video_files, validated.output)

    print(PROCESSING_STARTED_MESSAGE)
    print(f"Found {len(tasks)} files to process")
    print(f"Using {validated.threads} parallel threads")
    print()

    pool = WorkerPool(validated.threads)
    _log.info("Starting parallel processing with %d workers", validated.threads)
    results = await pool.execute_tasks(tasks)

    summary = results.to_processing_summary()
    summary.print_final_report()

    print(f"\n{PROCESSING_COMPLETED_MESSAGE}")
    return summary.exit_code()


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the command; returns the process exit status."""
    try:
        return int(asyncio.run(run(argv)))
    except ShortsCutterError as exc:
        print(f"Error: {exc.category}: {exc}", file=sys.stderr)
        _log.error("Critical error: %s: %s", exc.category, exc)
        return int(ExitCode.CRITICAL_ERROR)


if __name__ == "__main__":
    sys.exit(main())