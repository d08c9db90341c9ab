import os
from pathlib import Path

from audio_splitter.core.errors import FilesystemAccessError


class FileValidator:
    """Validate input files before processing."""

    def __init__(self, max_size_mb: int) -> None:
        """Initialize validator with size constraints."""
        self._max_size_bytes = max_size_mb * 1024 * 1024
        self._allowed_extensions = {
            ".mp3",
            ".wav",
            ".m4a",
            ".aac",
            ".ogg",
            ".flac",
        }

    def validate_size(self, size_bytes: int) -> bool:
        """Check if file size is within allowed limits."""
        return size_bytes <= self._max_size_bytes

    def validate_extension(self, file_path: Path) -> bool:
        """Check if file extension is allowed."""
        return file_path.suffix.lower() in self._allowed_extensions

    def ensure_readable(self, file_path: Path) -> Path:
        """Return the path if it is a readable regular file, else raise."""
        if not file_path.is_file() or not os.access(file_path, os.R_OK):
            raise FilesystemAccessError(
                f"Cannot access file at path: {file_path}. "
                "Please make sure the file exists and is readable."
            )
        return file_path
