from dataclasses import dataclass
from pathlib import Path

from audio_splitter.core.errors import FilesystemAccessError, ProbeError


@dataclass(frozen=True)
class AudioMetadata:
    """Represent audio metadata extracted from ffprobe."""

    duration_seconds: float
    codec_name: str | None
    bitrate_bps: int | None
    sample_rate_hz: int | None
    channels: int | None


def derive_bitrate(size_bytes: int, duration_seconds: float) -> int:
    """Estimate the average bitrate from file size and duration."""
    if duration_seconds <= 0:
        raise ProbeError("Cannot derive bitrate without a positive duration")
    return round(size_bytes * 8 / duration_seconds)


@dataclass(frozen=True)
class SourceMedia:
    """A probed input file ready to be split."""

    path: Path
    size_bytes: int
    duration_seconds: float
    bitrate_bps: int
    mime_type: str | None = None
    # Display name when the file on disk was materialized under a storage name.
    name: str | None = None

    @property
    def base_name(self) -> str:
        """File name without extension, used to name the segments."""
        return Path(self.name or self.path.name).stem

    @property
    def extension(self) -> str:
        """Lower-cased container extension including the dot."""
        return Path(self.name or self.path.name).suffix.lower()

    @property
    def original_name(self) -> str:
        """Base name plus lower-cased extension, as reported on each segment."""
        return f"{self.base_name}{self.extension}"

    @classmethod
    def from_metadata(
        cls,
        path: Path,
        metadata: AudioMetadata,
        mime_type: str | None = None,
        name: str | None = None,
    ) -> "SourceMedia":
        """Build a source, falling back to size*8/duration when bit_rate is absent."""
        if metadata.duration_seconds <= 0:
            raise ProbeError(f"Unknown duration for {path.name}")

        try:
            size = path.stat().st_size
        except OSError as exc:
            raise FilesystemAccessError(f"Cannot access file at path: {path}. {exc}") from exc

        bitrate = metadata.bitrate_bps or derive_bitrate(size, metadata.duration_seconds)
        if bitrate <= 0:
            raise ProbeError(f"Cannot determine bitrate for {path.name}")

        return cls(
            path=path,
            size_bytes=size,
            duration_seconds=metadata.duration_seconds,
            bitrate_bps=bitrate,
            mime_type=mime_type,
            name=name,
        )
