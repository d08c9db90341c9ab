from pathlib import Path

from audio_splitter.core.config import Settings
from audio_splitter.core.items import InputType, SplitConfig
from audio_splitter.core.split_plan import OutputFormat


def test_settings_read_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SEGMENT_INDEX_WIDTH", "4")
    monkeypatch.setenv("ENGINE_TIMEOUT_SECONDS", "90")

    cfg = Settings()

    assert cfg.segment_index_width == 4
    assert cfg.engine_timeout_seconds == 90.0
    assert cfg.temp_dir() == Path(tmp_path) / "uploads"
    assert cfg.scratch_root() == Path(tmp_path) / "scratch"


def test_split_config_defaults_match_tool_defaults():
    config = SplitConfig()

    assert config.input_type is InputType.BINARY_DATA
    assert config.binary_property_name == "data"
    assert config.file_path_field == "fileName"
    assert config.chunk_size_mb == 10
    assert config.output_prefix == "segment"
    assert config.output_format is OutputFormat.SAME


def test_delete_original_applies_to_file_paths_only():
    assert SplitConfig(input_type="filePath", delete_original=True).should_delete_original
    assert not SplitConfig(input_type="binaryData", delete_original=True).should_delete_original
    assert not SplitConfig(input_type="filePath").should_delete_original


def test_split_options_drop_source_fields():
    options = SplitConfig(chunk_size_mb=5, output_prefix="part", transcode=True).split_options()

    assert options.chunk_size_mb == 5
    assert options.output_prefix == "part"
    assert options.transcode is True
    assert not hasattr(options, "input_type")
