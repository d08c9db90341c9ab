from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from audio_splitter.core.scratch import SCRATCH_PREFIX, remove_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleanupService:
    """Sweep scratch areas and uploads left behind by interrupted runs."""

    scratch_root: Path
    uploads_dir: Path
    scratch_prefix: str = SCRATCH_PREFIX

    def delete_all(self) -> int:
        """Delete every leftover and return count deleted."""
        return self._delete(self._leftovers())

    def delete_older_than_hours(self, older_than_hours: int) -> int:
        """Delete leftovers older than a given age in hours and return count."""
        if older_than_hours <= 0:
            return 0

        threshold = time.time() - older_than_hours * 3600
        stale = (p for p in self._leftovers() if p.stat().st_mtime <= threshold)
        return self._delete(stale)

    def _leftovers(self) -> Iterator[Path]:
        """Scratch directories carrying our prefix plus every materialized upload."""
        if self.scratch_root.exists():
            for item in self.scratch_root.iterdir():
                if item.is_dir() and item.name.startswith(self.scratch_prefix):
                    yield item
        if self.uploads_dir.exists():
            for item in self.uploads_dir.iterdir():
                if item.is_file():
                    yield item

    def _delete(self, paths: Iterator[Path]) -> int:
        deleted = 0
        for path in list(paths):
            warning = remove_path(path)
            if warning is None:
                deleted += 1
            else:
                logger.warning(str(warning))
        return deleted
