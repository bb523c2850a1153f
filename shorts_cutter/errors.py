"""Exception hierarchy for the whole application."""

from __future__ import annotations

from os import PathLike
from pathlib import Path


class ShortsCutterError(Exception):
    """Base of every error the application raises."""

    category = "Error"


class ConfigError(ShortsCutterError):
    """Invalid configuration or command-line arguments."""

    category = "Configuration error"


class InputDirectoryNotFound(ConfigError):
    def __init__(self, path: str | PathLike[str]) -> None:
        self.path = Path(path)
        super().__init__(f"Input directory does not exist: {self.path}")


class OutputDirectoryCreationFailed(ConfigError):
    def __init__(self, path: str | PathLike[str]) -> None:
        self.path = Path(path)
        super().__init__(f"Cannot create output directory: {self.path}")


class InvalidThreadCount(ConfigError):
    def __init__(self, count: int, max_threads: int) -> None:
        self.count = count
        self.max_threads = max_threads
        super().__init__(
            f"Invalid thread count: {count} (must be > 0 and <= {max_threads})"
        )


class FfmpegNotFound(ConfigError):
    def __init__(self) -> None:
        super().__init__("FFmpeg not found in PATH")


class InvalidArgument(ConfigError):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Invalid argument: {message}")


class FileSystemError(ShortsCutterError):
    """Problems reading or writing files and directories."""

    category = "File system error"


class CannotReadDirectory(FileSystemError):
    def __init__(self, path: str | PathLike[str]) -> None:
        self.path = Path(path)
        super().__init__(f"Cannot read directory: {self.path}")


class CannotAccessFile(FileSystemError):
    def __init__(self, path: str | PathLike[str]) -> None:
        self.path = Path(path)
        super().__init__(f"Cannot access file: {self.path}")


class FileNotFound(FileSystemError):
    def __init__(self, path: str | PathLike[str]) -> None:
        self.path = Path(path)
        super().__init__(f"File not found: {self.path}")


class PathPermissionDenied(FileSystemError):
    def __init__(self, path: str | PathLike[str]) -> None:
        self.path = Path(path)
        super().__init__(f"Permission denied for path: {self.path}")


class InsufficientSpace(FileSystemError):
    def __init__(self) -> None:
        super().__init__("Disk full or insufficient space for output")


class FfmpegError(ShortsCutterError):
    """Failures while running FFmpeg."""

    category = "FFmpeg error"


class ExecutionFailed(FfmpegError):
    def __init__(self, code: int, stderr: str, command: str) -> None:
        self.code = code
        self.stderr = stderr
        self.command = command
        super().__init__(f"FFmpeg execution failed with exit code {code}")


class FfmpegTimeout(FfmpegError):
    def __init__(self, seconds: int) -> None:
        self.seconds = seconds
        super().__init__(f"FFmpeg process timeout after {seconds} seconds")


class InvalidInputFormat(FfmpegError):
    def __init__(self, path: str | PathLike[str]) -> None:
        self.path = Path(path)
        super().__init__(f"Invalid input file format: {self.path}")


class CannotSpawnProcess(FfmpegError):
    def __init__(self) -> None:
        super().__init__("Cannot spawn FFmpeg process")


class StderrParsingFailed(FfmpegError):
    def __init__(self) -> None:
        super().__init__("FFmpeg stderr parsing failed")


class LoggingError(ShortsCutterError):
    """Failures setting up or writing the log."""

    category = "Logging error"


class CannotCreateLogFile(LoggingError):
    def __init__(self, path: str | PathLike[str]) -> None:
        self.path = Path(path)
        super().__init__(f"Cannot create log file: {self.path}")


class CannotWriteToLogFile(LoggingError):
    def __init__(self) -> None:
        super().__init__("Cannot write to log file")


class LoggingInitializationFailed(LoggingError):
    def __init__(self) -> None:
        super().__init__("Log file initialization failed")


class LogFileError(LoggingError):
    def __init__(self) -> None:
        super().__init__("Log file error")