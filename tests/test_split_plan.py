from pathlib import Path

import pytest
from pydantic import ValidationError

from audio_splitter.core.audio_metadata import SourceMedia
from audio_splitter.core.errors import SegmentOverflowError
from audio_splitter.core.split_plan import (
    MemoryMode,
    OutputFormat,
    SplitOptions,
    SplitPlan,
    compute_chunk_duration,
    select_output_extension,
)


def _source(duration: float = 60.0, bitrate: int = 1_000_000, name: str = "track.mp3") -> SourceMedia:
    return SourceMedia(
        path=Path("/data") / name,
        size_bytes=int(duration * bitrate / 8),
        duration_seconds=duration,
        bitrate_bps=bitrate,
    )


def test_chunk_duration_from_size_and_bitrate():
    assert compute_chunk_duration(10, 128_000) == pytest.approx(655.36)


def test_chunk_duration_is_clamped_to_one_second():
    assert compute_chunk_duration(0.001, 320_000) == 1.0
    assert compute_chunk_duration(1, 10**12) == 1.0


def test_chunk_duration_rejects_non_positive_bitrate():
    with pytest.raises(ValueError):
        compute_chunk_duration(10, 0)


def test_sixty_second_source_at_one_megabit_yields_eight_segments():
    plan = SplitPlan.build(_source(), SplitOptions(chunk_size_mb=1))

    assert plan.chunk_size_bytes == 1024 * 1024
    assert plan.chunk_duration_seconds == pytest.approx(8.388608)
    assert plan.estimated_segment_count(60.0) == 8


def test_output_extension_follows_format():
    assert select_output_extension(".MP3", OutputFormat.SAME) == ".mp3"
    assert select_output_extension(".mp3", OutputFormat.WAV) == ".wav"
    assert select_output_extension(".wav", OutputFormat.M4A) == ".m4a"


def test_segment_names_sort_chronologically():
    plan = SplitPlan.build(_source(), SplitOptions(output_prefix="segment"))

    names = [plan.segment_filename(i) for i in range(1000)]

    assert names[0] == "track_segment_000.mp3"
    assert names[1] == "track_segment_001.mp3"
    assert names[-1] == "track_segment_999.mp3"
    assert sorted(names) == names
    assert plan.output_pattern == "track_segment_%03d.mp3"


def test_wider_index_changes_pattern():
    plan = SplitPlan.build(_source(), SplitOptions(), index_width=5)

    assert plan.output_pattern == "track_segment_%05d.mp3"
    assert plan.segment_filename(42) == "track_segment_00042.mp3"
    assert plan.max_segments == 100_000


def test_plan_rejects_index_overflow():
    # 8 Mbit/s with 1 MB chunks gives ~1.05s segments.
    source = _source(duration=2000.0, bitrate=8_000_000)
    plan = SplitPlan.build(source, SplitOptions(chunk_size_mb=1))

    with pytest.raises(SegmentOverflowError, match="3-digit index"):
        plan.ensure_fits(source.duration_seconds)


def test_plan_accepts_exactly_max_segments():
    source = _source(duration=1000.0, bitrate=10**12)
    plan = SplitPlan.build(source, SplitOptions(chunk_size_mb=1))

    assert plan.chunk_duration_seconds == 1.0
    plan.ensure_fits(source.duration_seconds)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"chunk_size_mb": 0},
        {"chunk_size_mb": -1},
        {"output_prefix": "   "},
        {"output_format": "flac"},
        {"memory_mode": "tiny"},
    ],
)
def test_split_options_reject_invalid_values(kwargs):
    with pytest.raises(ValidationError):
        SplitOptions(**kwargs)


def test_split_options_parse_wire_values():
    options = SplitOptions(output_format="m4a", memory_mode="lowMemory", output_prefix=" part ")

    assert options.output_format is OutputFormat.M4A
    assert options.memory_mode is MemoryMode.LOW_MEMORY
    assert options.output_prefix == "part"


def test_percent_in_names_is_escaped_for_the_muxer():
    plan = SplitPlan.build(_source(name="100%_mix.mp3"), SplitOptions(output_prefix="part%d"))

    assert plan.output_pattern == "100%%_mix_part%%d_%03d.mp3"
    assert plan.filename_prefix == "100%_mix_part%d_"
    assert plan.output_pattern % 7 == plan.segment_filename(7) == "100%_mix_part%d_007.mp3"
