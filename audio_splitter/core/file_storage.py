from pathlib import Path
from uuid import uuid4

from audio_splitter.core.config import Settings


class TempFileStorage:
    """Handle temporary storage of uploaded and materialized input files."""

    def __init__(self, config: Settings) -> None:
        """Initialize storage with application configuration."""
        self._base_dir = config.temp_dir()
        self._base_dir.mkdir(parents=True, exist_ok=True)

    def save(self, filename: str, content: bytes) -> Path:
        """Save file content under a collision-free name, keeping the original name last."""
        safe_name = f"{uuid4().hex}_{Path(filename).name}"
        file_path = self._base_dir / safe_name
        file_path.write_bytes(content)
        return file_path
