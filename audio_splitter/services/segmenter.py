"""Cut one probed source into size-bounded segments with ffmpeg.

The segment length is derived from the target chunk size and the source
bitrate, so segment sizes are estimates: variable bitrate and keyframe
alignment make individual files drift from the target.
"""

import logging
import mimetypes
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from audio_splitter.core.audio_metadata import SourceMedia
from audio_splitter.core.errors import EngineUnavailable, FilesystemAccessError
from audio_splitter.core.ffmpeg_client import FfmpegClient
from audio_splitter.core.ffprobe_client import FfprobeClient
from audio_splitter.core.items import Attachment, OutputItem
from audio_splitter.core.scratch import ScratchArea, uuid_token
from audio_splitter.core.split_plan import BYTES_PER_MB, MemoryMode, SplitOptions, SplitPlan

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class SegmentFile:
    """One emitted segment with its payload."""

    filename: str
    size: int
    original_file: str
    duration: float
    data: bytes
    mime_type: str

    @property
    def size_in_mb(self) -> float:
        return self.size / BYTES_PER_MB

    def to_json(self) -> dict:
        return {
            "filename": self.filename,
            "size": self.size,
            "sizeInMB": self.size_in_mb,
            "originalFile": self.original_file,
            "duration": self.duration,
        }

    def to_output_item(self) -> OutputItem:
        return OutputItem(
            json=self.to_json(),
            attachment=Attachment(data=self.data, filename=self.filename, mime_type=self.mime_type),
        )


class Segmenter:
    """Probe, plan, split and collect segments for a single source."""

    def __init__(
        self,
        ffprobe: FfprobeClient,
        ffmpeg: FfmpegClient,
        scratch_root: Path,
        token_factory: Callable[[], str] = uuid_token,
        index_width: int = 3,
        read_block_size: int = 64 * 1024,
    ) -> None:
        self._ffprobe = ffprobe
        self._ffmpeg = ffmpeg
        self._scratch_root = scratch_root
        self._token_factory = token_factory
        self._index_width = index_width
        self._read_block_size = read_block_size

    def ensure_engine_available(self) -> None:
        """Fail fast when ffmpeg or ffprobe cannot be run."""
        if not self._ffmpeg.is_available():
            raise EngineUnavailable(
                "FFmpeg is required for this tool to work but was not found. Please install FFmpeg."
            )
        if not self._ffprobe.is_available():
            raise EngineUnavailable(
                "ffprobe is required for this tool to work but was not found. Please install FFmpeg."
            )

    def probe(self, path: Path, mime_type: str | None = None, name: str | None = None) -> SourceMedia:
        """Read duration and bitrate of ``path`` with ffprobe."""
        metadata =self._ffprobe.read_metadata(path)
        return SourceMedia.from_metadata(path, metadata, mime_type=mime_type, name=name)

    def plan(self, source: SourceMedia, options: SplitOptions) -> SplitPlan:
        """Build the plan and reject it when the index width cannot hold every segment."""
        plan = SplitPlan.build(source, options, index_width=self._index_width)
        plan.ensure_fits(source.duration_seconds)

        if plan.output_extension != source.extension and not options.transcode:
            logger.warning(
                "Stream-copying %s into a %s container; the segments may not be playable. "
                "Enable transcode to re-encode.",
                source.original_name,
                plan.output_extension,
            )
        logger.debug(
            "Plan for %s: bitrate=%d bps, segment=%.3fs, ~%d segments",
            source.original_name,
            source.bitrate_bps,
            plan.chunk_duration_seconds,
            plan.estimated_segment_count(source.duration_seconds),
        )
        return plan

    def split(self, source: SourceMedia, options: SplitOptions) -> list[SegmentFile]:
        """Split ``source`` and return its segments in chronological order."""
        plan = self.plan(source, options)
        low_memory = options.memory_mode is MemoryMode.LOW_MEMORY

        with ScratchArea(self._scratch_root, token_factory=self._token_factory) as scratch:
            logger.debug("Splitting audio file %s into %s", source.path, scratch.path)
            self._ffmpeg.segment(
                source.path,
                plan.chunk_duration_seconds,
                scratch.path / plan.output_pattern,
                stream_copy=not options.transcode,
                low_memory=low_memory,
            )

            segments: list[SegmentFile] = []
            for segment_path in self._collect(scratch.path, plan):
                scratch.track(segment_path)
                segments.append(self._read_segment(segment_path, plan, source, low_memory))

        logger.debug("Produced %d segments from %s", len(segments), source.original_name)
        return segments

    def _collect(self, directory: Path, plan: SplitPlan) -> list[Path]:
        """Produced files in index order; zero padding makes name order numeric."""
        return sorted(
            (p for p in directory.iterdir() if p.is_file() and p.name.startswith(plan.filename_prefix)),
            key=lambda p: p.name,
        )

    def _read_segment(
        self,
        path: Path,
        plan: SplitPlan,
        source: SourceMedia,
        low_memory: bool,
    ) -> SegmentFile:
        """Load one produced file into memory as a segment record."""
        try:
            size = path.stat().st_size
            data = self._read_blocks(path) if low_memory else path.read_bytes()
        except OSError as exc:
            raise FilesystemAccessError(f"Cannot read segment {path.name}: {exc}") from exc

        return SegmentFile(
            filename=path.name,
            size=size,
            original_file=source.original_name,
            duration=plan.chunk_duration_seconds,
            data=data,
            mime_type=self._mime_type(path.name, plan, source),
        )

    def _read_blocks(self, path: Path) -> bytes:
        """Read in fixed-size blocks for low-memory mode."""
        blocks: list[bytes] = []
        with path.open("rb") as f:
            for block in iter(lambda: f.read(self._read_block_size), b""):
                blocks.append(block)
        return b"".join(blocks)

    def _mime_type(self, filename: str, plan: SplitPlan, source: SourceMedia) -> str:
        """Keep the input's MIME type when the container is unchanged, otherwise guess it."""
        if source.mime_type and plan.output_extension == source.extension:
            return source.mime_type
        guessed, _ = mimetypes.guess_type(filename)
        return guessed or source.mime_type or DEFAULT_MIME_TYPE
