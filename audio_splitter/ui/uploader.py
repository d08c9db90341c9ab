from pathlib import Path

import streamlit as st
from pydantic import ValidationError

from audio_splitter.core.config import Settings
from audio_splitter.core.errors import EngineUnavailable
from audio_splitter.core.file_validation import FileValidator
from audio_splitter.core.items import Attachment, InputType, Item, SplitConfig
from audio_splitter.core.split_plan import MemoryMode, OutputFormat
from audio_splitter.services.batch import BatchProcessor, BatchResult
from audio_splitter.services.cleanup import CleanupService


class FileUploader:
    """Render the upload + split parameters form and run the split."""

    def __init__(
        self,
        config: Settings,
        processor: BatchProcessor,
        validator: FileValidator,
        cleanup: CleanupService,
    ) -> None:
        """Initialize uploader with the batch processor, validation, and cleanup."""
        self._config = config
        self._processor = processor
        self._validator = validator
        self._cleanup = cleanup

    def render(self) -> BatchResult | None:
        """Render the form and return the split result once it has run."""
        self._render_clear_temp()

        uploaded_file = st.file_uploader(
            label="Upload an audio file",
            type=None,
            accept_multiple_files=False,
        )
        config = self._render_parameters()

        if uploaded_file is None or config is None:
            return None
        if not st.button("Split audio"):
            return None

        content = uploaded_file.read()
        if not self._validate(uploaded_file.name, len(content)):
            return None

        item = Item(
            binary={
                config.binary_property_name: Attachment(
                    data=content,
                    filename=uploaded_file.name,
                    mime_type=uploaded_file.type,
                )
            }
        )
        return self._run(item, config)

    def _render_clear_temp(self) -> None:
        """Render a button to clear leftovers of interrupted runs."""
        if st.button("Clear temp files"):
            deleted = self._cleanup.delete_all()
            st.success(f"Temporary files cleared ({deleted} removed)")

    def _render_parameters(self) -> SplitConfig | None:
        """Render split parameters and validate them into a config."""
        col1, col2 = st.columns(2)

        with col1:
            chunk_size_mb = st.number_input(
                "Chunk size (MB)",
                min_value=0.1,
                value=float(self._config.default_chunk_size_mb),
                step=1.0,
            )
            output_prefix = st.text_input("Output prefix", value=self._config.default_output_prefix)

        with col2:
            output_format = st.selectbox(
                "Output format",
                options=[f.value for f in OutputFormat],
                index=0,
            )
            memory_mode = st.radio(
                "Memory management",
                options=[m.value for m in MemoryMode],
                horizontal=True,
            )

        transcode = st.checkbox(
            "Re-encode when the output format differs from the input",
            value=False,
        )

        try:
            return SplitConfig(
                input_type=InputType.BINARY_DATA,
                chunk_size_mb=chunk_size_mb,
                output_prefix=output_prefix,
                output_format=output_format,
                memory_mode=memory_mode,
                transcode=transcode,
            )
        except ValidationError as exc:
            st.error(f"Invalid parameters: {exc.errors()[0]['msg']}")
            return None

    def _validate(self, filename: str, size_bytes: int) -> bool:
        """Check extension and size before anything touches the disk."""
        if not self._validator.validate_extension(Path(filename)):
            st.error("Unsupported audio format")
            return False
        if not self._validator.validate_size(size_bytes):
            st.error("File is too large")
            return False
        return True

    def _run(self, item: Item, config: SplitConfig) -> BatchResult | None:
        """Split the uploaded item and surface per-item failures."""
        with st.spinner("Splitting..."):
            try:
                result = self._processor.process([item], config)
            except EngineUnavailable as exc:
                st.error(str(exc))
                return None

        for failure in result.failures:
            st.error(failure.message)
        return result
