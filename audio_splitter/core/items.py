from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Union

from audio_splitter.core.split_plan import SplitOptions


@dataclass(frozen=True)
class Attachment:
    """Binary payload carried by an item, in memory or already on disk."""

    data: bytes | None = None
    filename: str | None = None
    mime_type: str | None = None
    file_path: Path | None = None


@dataclass(frozen=True)
class PathRef:
    """A plain filesystem path supplied by the caller."""

    path: Path


SourceInput = Union[Attachment, PathRef]


@dataclass
class Item:
    """One unit of batch input: JSON fields plus named attachments."""

    json: dict[str, Any] = field(default_factory=dict)
    binary: dict[str, Attachment] = field(default_factory=dict)


@dataclass(frozen=True)
class OutputItem:
    """One emitted segment: its JSON record and its binary payload."""

    json: dict[str, Any]
    attachment: Attachment


class InputType(str, Enum):
    BINARY_DATA = "binaryData"
    FILE_PATH = "filePath"


class SplitConfig(SplitOptions):
    """Split options plus where each item's source comes from."""

    input_type: InputType = InputType.BINARY_DATA
    binary_property_name: str = "data"
    file_path_field: str = "fileName"
    delete_original: bool = False

    @property
    def should_delete_original(self) -> bool:
        # Only caller-owned paths may be deleted on request.
        return self.input_type is InputType.FILE_PATH and self.delete_original

    def split_options(self) -> SplitOptions:
        return SplitOptions(
            chunk_size_mb=self.chunk_size_mb,
            output_prefix=self.output_prefix,
            output_format=self.output_format,
            memory_mode=self.memory_mode,
            transcode=self.transcode,
        )
