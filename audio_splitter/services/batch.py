import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from audio_splitter.core.config import Settings
from audio_splitter.core.errors import EngineUnavailable, SegmentationError
from audio_splitter.core.ffmpeg_client import FfmpegClient
from audio_splitter.core.ffprobe_client import FfprobeClient
from audio_splitter.core.file_storage import TempFileStorage
from audio_splitter.core.file_validation import FileValidator
from audio_splitter.core.items import Item, OutputItem, SplitConfig
from audio_splitter.core.scratch import remove_path
from audio_splitter.services.segmenter import Segmenter
from audio_splitter.services.source_resolver import ResolvedSource, SourceResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemFailure:
    """A per-item error, reported with the item's position in the batch."""

    index: int
    message: str


@dataclass
class BatchResult:
    """Output items of every successful item plus the per-item failures."""

    items: list[OutputItem] = field(default_factory=list)
    failures: list[ItemFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class BatchProcessor:
    """Split every item of a batch in order, isolating per-item failures."""

    def __init__(self, segmenter: Segmenter, resolver: SourceResolver) -> None:
        self._segmenter = segmenter
        self._resolver = resolver

    def process(self, items: Iterable[Item], config: SplitConfig) -> BatchResult:
        """Run the batch; raises only when the engine itself is missing."""
        self._segmenter.ensure_engine_available()

        result = BatchResult()
        for index, item in enumerate(items):
            try:
                outputs = self.process_item(item, config)
            except EngineUnavailable:
                raise
            except SegmentationError as exc:
                message = f"Failed to split audio: {exc}"
                logger.error("Item %d: %s", index, message)
                result.failures.append(ItemFailure(index=index, message=message))
                continue
            result.items.extend(outputs)
        return result

    def process_item(self, item: Item, config: SplitConfig) -> list[OutputItem]:
        """Resolve, probe and split one item, releasing its input afterwards."""
        source = self._resolver.resolve(self._resolver.input_from_item(item, config))

        succeeded = False
        try:
            media = self._segmenter.probe(source.path, mime_type=source.mime_type, name=source.name)
            segments = self._segmenter.split(media, config.split_options())
            succeeded = True
        finally:
            self._release_input(source, config, succeeded)

        return [segment.to_output_item() for segment in segments]

    def _release_input(self, source: ResolvedSource, config: SplitConfig, succeeded: bool) -> None:
        """Remove materialized inputs; remove the caller's file only after a successful split."""
        if source.is_temporary:
            warning = remove_path(source.path)
            if warning is not None:
                logger.warning(str(warning))
            return

        if not source.is_caller_owned:
            return

        if not config.should_delete_original:
            logger.debug("Original file %s was not deleted as per settings", source.path)
            return

        if not succeeded:
            return

        warning = remove_path(source.path)
        if warning is None:
            logger.info("Successfully deleted the original file: %s", source.path)
        else:
            logger.warning("Failed to clean up file: %s - %s", source.path, warning.reason)


def create_batch_processor(cfg: Settings) -> BatchProcessor:
    """Wire ffmpeg/ffprobe clients, storage and validation from settings."""
    segmenter = Segmenter(
        ffprobe=FfprobeClient(cfg.ffprobe_executable, timeout=cfg.engine_timeout_seconds),
        ffmpeg=FfmpegClient(cfg.ffmpeg_executable, timeout=cfg.engine_timeout_seconds),
        scratch_root=cfg.scratch_root(),
        index_width=cfg.segment_index_width,
        read_block_size=cfg.read_block_size,
    )
    resolver = SourceResolver(TempFileStorage(cfg), FileValidator(cfg.max_upload_mb))
    return BatchProcessor(segmenter, resolver)
