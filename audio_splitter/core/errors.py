from dataclasses import dataclass
from pathlib import Path


class SegmentationError(RuntimeError):
    """Base class for failures while splitting a source into segments."""


class EngineUnavailable(SegmentationError):
    """Raised when the ffmpeg/ffprobe executables cannot be invoked."""


class NoSourceData(SegmentationError):
    """Raised when an item carries no resolvable content or path."""


class ProbeError(SegmentationError):
    """Raised when ffprobe fails or returns no usable duration."""


class EngineExecutionError(SegmentationError):
    """Raised when ffmpeg exits with an error."""


class FilesystemAccessError(SegmentationError):
    """Raised when an input path is missing or unreadable."""


class SegmentOverflowError(SegmentationError):
    """Raised when a plan needs more segments than the index width allows."""


@dataclass(frozen=True)
class CleanupWarning:
    """A path that could not be removed during best-effort cleanup."""

    path: Path
    reason: str

    def __str__(self) -> str:
        return f"Failed to clean up temporary file: {self.path} ({self.reason})"
