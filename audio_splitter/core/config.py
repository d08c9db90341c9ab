from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "audio_splitter"
    app_title: str = "Audio Splitter"
    app_icon: str = "✂️"
    page_layout: str = "centered"
    data_dir: str = "data"
    max_upload_mb: int = 500
    log_level: str = "INFO"

    ffmpeg_executable: str = "ffmpeg"
    ffprobe_executable: str = "ffprobe"
    engine_timeout_seconds: float | None = None

    default_chunk_size_mb: float = 10
    default_output_prefix: str = "segment"
    segment_index_width: int = 3
    read_block_size: int = 64 * 1024
    stale_scratch_hours: int = 24

    def temp_dir(self) -> Path:
        """Directory holding materialized uploads."""
        return Path(self.data_dir) / "uploads"

    def scratch_root(self) -> Path:
        """Directory holding per-invocation scratch areas."""
        return Path(self.data_dir) / "scratch"


settings = Settings()
