import logging
from dataclasses import dataclass
from pathlib import Path

from audio_splitter.core.errors import NoSourceData
from audio_splitter.core.file_storage import TempFileStorage
from audio_splitter.core.file_validation import FileValidator
from audio_splitter.core.items import Attachment, InputType, Item, PathRef, SourceInput, SplitConfig

logger = logging.getLogger(__name__)

DEFAULT_INPUT_NAME = "input.mp3"


@dataclass(frozen=True)
class ResolvedSource:
    """A concrete, readable input file and who owns it."""

    path: Path
    name: str
    mime_type: str | None = None
    is_temporary: bool = False
    is_caller_owned: bool = False


def looks_like_path(value: str) -> bool:
    """True for absolute POSIX paths and Windows drive paths."""
    return value.startswith("/") or ":\\" in value


class SourceResolver:
    """Turn item inputs into files on disk, materializing in-memory payloads."""

    def __init__(self, storage: TempFileStorage, validator: FileValidator) -> None:
        self._storage = storage
        self._validator = validator

    def input_from_item(self, item: Item, config: SplitConfig) -> SourceInput:
        """Pick the attachment or path an item points at."""
        if config.input_type is InputType.BINARY_DATA:
            attachment = item.binary.get(config.binary_property_name)
            if attachment is None:
                raise NoSourceData(
                    f'No binary data property "{config.binary_property_name}" exists on item!'
                )
            return attachment

        field_name = config.file_path_field
        if looks_like_path(field_name):
            logger.debug("Using field name as direct path: %s", field_name)
            return PathRef(Path(field_name))

        value = item.json.get(field_name)
        if value:
            logger.debug("Using value from field %s: %s", field_name, value)
            return PathRef(Path(str(value)))

        raise NoSourceData(f'No file path found in the property "{field_name}"!')

    def resolve(self, source: SourceInput) -> ResolvedSource:
        """Return a readable file for the source, writing in-memory data to storage."""
        if isinstance(source, PathRef):
            path = self._validator.ensure_readable(source.path)
            return ResolvedSource(path=path, name=path.name, is_caller_owned=True)

        if isinstance(source, Attachment):
            return self._resolve_attachment(source)

        raise NoSourceData(f"Unsupported source input: {type(source).__name__}")

    def _resolve_attachment(self, attachment: Attachment) -> ResolvedSource:
        if attachment.data is None and attachment.file_path is not None:
            path = self._validator.ensure_readable(Path(attachment.file_path))
            return ResolvedSource(
                path=path,
                name=attachment.filename or path.name,
                mime_type=attachment.mime_type,
            )

        if attachment.data:
            name = attachment.filename or DEFAULT_INPUT_NAME
            path = self._storage.save(filename=name, content=attachment.data)
            logger.debug("Materialized %s to %s", name, path)
            return ResolvedSource(
                path=path,
                name=Path(name).name,
                mime_type=attachment.mime_type,
                is_temporary=True,
            )

        raise NoSourceData(
            "No usable binary data found! The data must either be stored in a file or as raw bytes."
        )
