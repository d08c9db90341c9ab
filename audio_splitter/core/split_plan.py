import math
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from audio_splitter.core.audio_metadata import SourceMedia
from audio_splitter.core.errors import SegmentOverflowError

BYTES_PER_MB = 1024 * 1024
MIN_CHUNK_DURATION_SECONDS = 1.0


class OutputFormat(str, Enum):
    SAME = "same"
    MP3 = "mp3"
    M4A = "m4a"
    WAV = "wav"


class MemoryMode(str, Enum):
    STANDARD = "standard"
    LOW_MEMORY = "lowMemory"


class SplitOptions(BaseModel):
    """Per-item split parameters, validated once at the boundary."""

    chunk_size_mb: float = Field(default=10, gt=0)
    output_prefix: str = "segment"
    output_format: OutputFormat = OutputFormat.SAME
    memory_mode: MemoryMode = MemoryMode.STANDARD
    transcode: bool = False

    @field_validator("output_prefix")
    @classmethod
    def _prefix_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("output_prefix must not be empty")
        return value


def compute_chunk_duration(chunk_size_mb: float, bitrate_bps: int) -> float:
    """Convert a target chunk size into seconds of audio at the given bitrate.

    The result is a throughput estimate. Real segment sizes drift with variable
    bitrate and keyframe alignment. Never returns less than one second.
    """
    if bitrate_bps <= 0:
        raise ValueError("bitrate must be positive")
    chunk_size_bytes = chunk_size_mb * BYTES_PER_MB
    return max(MIN_CHUNK_DURATION_SECONDS, chunk_size_bytes * 8 / bitrate_bps)


def select_output_extension(source_extension: str, output_format: OutputFormat) -> str:
    """Reuse the source extension for ``same``, else the format's own extension."""
    if output_format is OutputFormat.SAME:
        return source_extension.lower()
    return f".{output_format.value}"


@dataclass(frozen=True)
class SplitPlan:
    """How one source is cut: segment length and output naming."""

    base_name: str
    output_prefix: str
    output_extension: str
    chunk_size_bytes: float
    chunk_duration_seconds: float
    index_width: int = 3

    @classmethod
    def build(
        cls,
        source: SourceMedia,
        options: SplitOptions,
        index_width: int = 3,
    ) -> "SplitPlan":
        """Derive segment length and naming from a probed source."""
        return cls(
            base_name=source.base_name,
            output_prefix=options.output_prefix,
            output_extension=select_output_extension(source.extension, options.output_format),
            chunk_size_bytes=options.chunk_size_mb * BYTES_PER_MB,
            chunk_duration_seconds=compute_chunk_duration(options.chunk_size_mb, source.bitrate_bps),
            index_width=index_width,
        )

    @property
    def filename_prefix(self) -> str:
        """Literal start shared by every produced segment name."""
        return f"{self.base_name}_{self.output_prefix}_"

    @property
    def output_pattern(self) -> str:
        """ffmpeg segment muxer pattern, e.g. ``track_segment_%03d.mp3``.

        Literal ``%`` in the name parts is doubled so only the index is substituted.
        """
        prefix = self.filename_prefix.replace("%", "%%")
        extension = self.output_extension.replace("%", "%%")
        return f"{prefix}%0{self.index_width}d{extension}"

    @property
    def max_segments(self) -> int:
        """Number of distinct indices the zero-padded width can hold."""
        return 10**self.index_width

    def segment_filename(self, index: int) -> str:
        """Name ffmpeg gives the segment at ``index``."""
        return f"{self.filename_prefix}{index:0{self.index_width}d}{self.output_extension}"

    def estimated_segment_count(self, duration_seconds: float) -> int:
        """Expected number of segments; the last one is usually shorter."""
        return math.ceil(duration_seconds / self.chunk_duration_seconds)

    def ensure_fits(self, duration_seconds: float) -> None:
        """Reject plans whose segment indices would outgrow the zero padding."""
        estimated = self.estimated_segment_count(duration_seconds)
        if estimated > self.max_segments:
            raise SegmentOverflowError(
                f"Splitting {duration_seconds:.1f}s into {self.chunk_duration_seconds:.3f}s "
                f"segments needs {estimated} files, more than the {self.max_segments} "
                f"a {self.index_width}-digit index allows. Increase the chunk size."
            )
