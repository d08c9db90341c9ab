"""Exclusively owned temporary directories for one split invocation."""

import logging
import shutil
from collections.abc import Callable
from pathlib import Path
from uuid import uuid4

from audio_splitter.core.errors import CleanupWarning

logger = logging.getLogger(__name__)

SCRATCH_PREFIX = "split-audio-"


def uuid_token() -> str:
    return uuid4().hex


class ScratchArea:
    """A uniquely named directory whose contents are removed on release.

    Use as a context manager so release runs on every graceful exit path.
    Release failures are logged and returned, never raised.
    """

    def __init__(
        self,
        root: Path,
        token_factory: Callable[[], str] = uuid_token,
        prefix: str = SCRATCH_PREFIX,
    ) -> None:
        """Prepare an area under ``root``; nothing is created until acquire."""
        self._root = root
        self._token_factory = token_factory
        self._prefix = prefix
        self._path: Path | None = None
        self._tracked: list[Path] = []

    @property
    def path(self) -> Path:
        if self._path is None:
            raise RuntimeError("Scratch area has not been acquired")
        return self._path

    def acquire(self) -> Path:
        """Create the directory and return its path."""
        self._root.mkdir(parents=True, exist_ok=True)
        path = self._root / f"{self._prefix}{self._token_factory()}"
        # exist_ok=False so a repeated token is caught instead of shared.
        path.mkdir()
        self._path = path
        logger.debug("Acquired scratch area %s", path)
        return path

    def track(self, path: Path) -> None:
        """Register a file for removal on release."""
        self._tracked.append(path)

    def release(self) -> list[CleanupWarning]:
        """Remove tracked files and the directory itself."""
        warnings: list[CleanupWarning] = []
        for path in self._tracked:
            warning = remove_path(path)
            if warning is not None:
                warnings.append(warning)
        self._tracked.clear()

        if self._path is not None:
            warning = remove_path(self._path)
            if warning is not None:
                warnings.append(warning)
            self._path = None

        for warning in warnings:
            logger.warning(str(warning))
        return warnings

    def __enter__(self) -> "ScratchArea":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


def remove_path(path: Path) -> CleanupWarning | None:
    """Delete a file or directory tree; a path that is already gone is not an error."""
    try:
        if path.is_dir():
            shutil.rmtree(path)
        else:
            path.unlink(missing_ok=True)
    except OSError as exc:
        return CleanupWarning(path=path, reason=str(exc))
    return None
