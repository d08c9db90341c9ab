from __future__ import annotations

import itertools
import math
from pathlib import Path

import pytest

from audio_splitter.core.audio_metadata import AudioMetadata
from audio_splitter.core.config import Settings
from audio_splitter.core.errors import EngineExecutionError, ProbeError
from audio_splitter.core.file_storage import TempFileStorage
from audio_splitter.core.file_validation import FileValidator
from audio_splitter.services.batch import BatchProcessor
from audio_splitter.services.segmenter import Segmenter
from audio_splitter.services.source_resolver import SourceResolver


class FakeProbe:
    """Stand-in for FfprobeClient keyed by file name."""

    def __init__(self, duration: float = 60.0, bitrate: int | None = 1_000_000) -> None:
        self.duration = duration
        self.bitrate = bitrate
        self.failing: set[str] = set()
        self.available = True
        self.calls: list[Path] = []

    def is_available(self) -> bool:
        return self.available

    def read_metadata(self, file_path: Path) -> AudioMetadata:
        self.calls.append(file_path)
        if file_path.name in self.failing:
            raise ProbeError("Missing or invalid duration from ffprobe")
        return AudioMetadata(
            duration_seconds=self.duration,
            codec_name="mp3",
            bitrate_bps=self.bitrate,
            sample_rate_hz=44100,
            channels=2,
        )


class FakeEngine:
    """Stand-in for FfmpegClient that writes one file per segment."""

    def __init__(self, probe: FakeProbe) -> None:
        self.probe = probe
        self.available = True
        self.fail_with: str | None = None
        self.extra_files: list[str] = []
        self.calls: list[dict] = []

    def is_available(self) -> bool:
        return self.available

    def segment(
        self,
        input_path: Path,
        segment_seconds: float,
        output_pattern: Path,
        stream_copy: bool = True,
        low_memory: bool = False,
    ) -> None:
        self.calls.append(
            {
                "input_path": input_path,
                "segment_seconds": segment_seconds,
                "output_pattern": output_pattern,
                "stream_copy": stream_copy,
                "low_memory": low_memory,
            }
        )
        count = math.ceil(self.probe.duration / segment_seconds)
        # Written out of order to show collection sorts by name.
        for index in reversed(range(count)):
            target = Path(str(output_pattern) % index)
            target.write_bytes(f"segment-{index}|".encode() * (index + 1))
        for name in self.extra_files:
            (output_pattern.parent / name).write_bytes(b"noise")
        if self.fail_with:
            raise EngineExecutionError(f"FFmpeg error: {self.fail_with}")


@pytest.fixture
def probe() -> FakeProbe:
    return FakeProbe()


@pytest.fixture
def engine(probe: FakeProbe) -> FakeEngine:
    return FakeEngine(probe)


@pytest.fixture
def scratch_root(tmp_path: Path) -> Path:
    return tmp_path / "scratch"


@pytest.fixture
def segmenter(probe: FakeProbe, engine: FakeEngine, scratch_root: Path) -> Segmenter:
    counter = itertools.count()
    return Segmenter(
        ffprobe=probe,
        ffmpeg=engine,
        scratch_root=scratch_root,
        token_factory=lambda: f"t{next(counter)}",
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(data_dir=str(tmp_path / "data"))


@pytest.fixture
def resolver(settings: Settings) -> SourceResolver:
    return SourceResolver(TempFileStorage(settings), FileValidator(settings.max_upload_mb))


@pytest.fixture
def processor(segmenter: Segmenter, resolver: SourceResolver) -> BatchProcessor:
    return BatchProcessor(segmenter, resolver)


@pytest.fixture
def audio_file(tmp_path: Path) -> Path:
    path = tmp_path / "inputs" / "track.mp3"
    path.parent.mkdir(parents=True)
    path.write_bytes(b"\xff\xfb" * 1000)
    return path
