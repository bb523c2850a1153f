"""File discovery, path helpers and the per-file task description."""

from __future__ import annotations

import os
import unicodedata
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

from shorts_cutter.config import DEFAULT_INPUT_EXTENSIONS, OUTPUT_SUFFIX
from shorts_cutter.errors import (
    CannotAccessFile,
    CannotReadDirectory,
    FileNotFound,
    InsufficientSpace,
    PathPermissionDenied,
)

_DISK_SPACE_LIMIT = 10 * 1024 * 1024 * 1024
_WRITE_PROBE_NAME = ".shorts_cutter_write_test"
_FORBIDDEN_FILENAME_CHARS = frozenset('<>:"|?*')
_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def _walk_videos(directory: Path) -> Iterator[Path]:
    try:
        entries = list(directory.iterdir())
    except OSError as exc:
        raise CannotReadDirectory(directory) from exc
    for path in entries:
        if path.is_dir():
            yield from _walk_videos(path)
        elif path.is_file() and is_supported_video_file(path):
            yield path


def find_video_files(input_dir: str | PathLike[str]) -> list[Path]:
    """Recursively collect supported video files, sorted for a stable order."""
    return sorted(_walk_videos(Path(input_dir)))


def is_supported_video_file(path: str | PathLike[str]) -> bool:
    """True if the path has a supported extension (case-insensitive)."""
    suffix = Path(path).suffix
    return bool(suffix) and suffix[1:].lower() in DEFAULT_INPUT_EXTENSIONS


def generate_output_path(
    input_path: str | PathLike[str], output_dir: str | PathLike[str]
) -> Path:
    """Output file path: <stem><suffix>.<ext> inside output_dir."""
    source = Path(input_path)
    stem = source.stem or "unknown"
    extension = source.suffix[1:] or "mp4"
    return Path(output_dir) / f"{stem}{OUTPUT_SUFFIX}.{extension}"


def validate_input_file(path: str | PathLike[str]) -> None:
    """Check that the path is an existing, readable regular file."""
    target = Path(path)
    if not target.exists():
        raise FileNotFound(target)
    if not target.is_file():
        raise CannotAccessFile(target)
    try:
        mode = target.stat().st_mode
    except OSError as exc:
        raise CannotAccessFile(target) from exc
    read_only = mode & 0o222 == 0
    if read_only and os.name != "nt" and mode & 0o444 == 0:
        raise PathPermissionDenied(target)


def validate_output_directory(path: str | PathLike[str]) -> None:
    """Check that the directory exists and can be written to."""
    target = Path(path)
    if not target.exists():
        raise FileNotFound(target)
    if not target.is_dir():
        raise CannotAccessFile(target)
    probe = target / _WRITE_PROBE_NAME
    try:
        probe.write_bytes(b"test")
    except OSError as exc:
        raise PathPermissionDenied(target) from exc
    try:
        probe.unlink()
    except OSError:
        pass


def check_disk_space(
    output_path: str | PathLike[str], estimated_size: int | None = None
) -> None:
    """Reject outputs whose estimated size exceeds the 10 GiB limit."""
    if estimated_size is not None and estimated_size > _DISK_SPACE_LIMIT:
        raise InsufficientSpace()


def sanitize_filename(filename: str) -> str:
    """Replace characters unsafe in file names with underscores."""
    return "".join(
        "_"
        if ch in _FORBIDDEN_FILENAME_CHARS or unicodedata.category(ch) == "Cc"
        else ch
        for ch in filename
    )


def get_file_size(path: str | PathLike[str]) -> int:
    """Size of the file in bytes."""
    try:
        return Path(path).stat().st_size
    except OSError as exc:
        raise CannotAccessFile(path) from exc


def format_file_size(size: int) -> str:
    """Human-readable size using binary units."""
    value = float(size)
    unit = 0
    while value >= 1024.0 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024.0
        unit += 1
    if unit == 0:
        return f"{size} {_SIZE_UNITS[0]}"
    return f"{value:.1f} {_SIZE_UNITS[unit]}"


@dataclass(frozen=True)
class FileTask:
    """One input file and where its processed version goes."""

    input: Path
    output: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "input", Path(self.input))
        object.__setattr__(self, "output", Path(self.output))

    def validate(self) -> None:
        """Check the input, the destination directory and that they differ."""
        validate_input_file(self.input)
        validate_output_directory(self.output.parent)
        if self.input == self.output:
            raise CannotAccessFile(self.output)

    def input_filename(self) -> str:
        return self.input.name or "unknown"

    def output_filename(self) -> str:
        return self.output.name or "unknown"


def create_file_tasks(
    input_files: Iterable[str | PathLike[str]], output_dir: str | PathLike[str]
) -> list[FileTask]:
    """Pair every input file with its output path."""
    return [
        FileTask(Path(source), generate_output_path(source, output_dir))
        for source in input_files
    ]