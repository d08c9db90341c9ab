from audio_splitter.core.config import settings
from audio_splitter.core.log_config import configure_logging
from audio_splitter.ui.layout import AppLayout


def main() -> None:
    """Streamlit entry point: ``streamlit run audio_splitter/main.py``."""
    configure_logging(settings.log_level)
    layout = AppLayout(settings)
    layout.configure_page()
    layout.render()


main()
