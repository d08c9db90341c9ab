import streamlit as st

from audio_splitter.core.config import Settings
from audio_splitter.core.file_validation import FileValidator
from audio_splitter.services.batch import create_batch_processor
from audio_splitter.services.cleanup import CleanupService
from audio_splitter.ui.results_view import ResultsView
from audio_splitter.ui.uploader import FileUploader


class AppLayout:
    """Render the Streamlit UI layout."""

    def __init__(self, config: Settings) -> None:
        """Initialize layout with configuration."""
        self._config = config
        self._cleanup = CleanupService(
            scratch_root=config.scratch_root(),
            uploads_dir=config.temp_dir(),
        )
        self._uploader = FileUploader(
            config=config,
            processor=create_batch_processor(config),
            validator=FileValidator(config.max_upload_mb),
            cleanup=self._cleanup,
        )
        self._results = ResultsView()
        self._result_key = "split_result"

    def configure_page(self) -> None:
        """Configure Streamlit page settings."""
        st.set_page_config(
            page_title=self._config.app_title,
            page_icon=self._config.app_icon,
            layout=self._config.page_layout,
        )

    def render(self) -> None:
        """Render full application layout."""
        st.title(f"{self._config.app_icon} {self._config.app_title}")
        st.caption("Upload an audio file and cut it into chunks of roughly equal size.")
        self._cleanup.delete_older_than_hours(self._config.stale_scratch_hours)

        result = self._uploader.render()
        # Download buttons rerun the script, so keep the last result around.
        if result is not None:
            st.session_state[self._result_key] = result

        last = st.session_state.get(self._result_key)
        if last is not None:
            self._results.render(last.items)
