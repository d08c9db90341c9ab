import pandas as pd
import streamlit as st

from audio_splitter.core.items import OutputItem


class ResultsView:
    """Render produced segments as a table with download buttons."""

    def render(self, items: list[OutputItem]) -> None:
        """Show a summary table and one download button per segment."""
        if not items:
            st.caption("No segments produced.")
            return

        st.subheader("Segments")
        st.success(f"{len(items)} segments from {items[0].json['originalFile']}")

        df = self._to_frame(items)
        st.dataframe(df, use_container_width=True, hide_index=True)

        for item in items:
            attachment = item.attachment
            st.download_button(
                label=f"Download {attachment.filename}",
                data=attachment.data,
                file_name=attachment.filename,
                mime=attachment.mime_type,
                key=f"download_{attachment.filename}",
            )

    def _to_frame(self, items: list[OutputItem]) -> pd.DataFrame:
        """Build a display table from the segment records."""
        df = pd.DataFrame([item.json for item in items])
        df["sizeInMB"] = df["sizeInMB"].round(2)
        df["duration"] = df["duration"].round(3)
        return df[["filename", "sizeInMB", "duration", "size", "originalFile"]]
