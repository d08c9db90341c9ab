import logging
import subprocess
from pathlib import Path

from audio_splitter.core.errors import EngineExecutionError, EngineUnavailable

logger = logging.getLogger(__name__)


class FfmpegClient:
    """Cut audio files into sequential segments with the ffmpeg segment muxer."""

    def __init__(self, executable: str = "ffmpeg", timeout: float | None = None) -> None:
        """Initialize the client with an ffmpeg executable name/path."""
        self._executable = executable
        self._timeout = timeout

    def is_available(self) -> bool:
        """Return True if ffmpeg is callable."""
        try:
            self._run(["-version"])
            return True
        except (EngineUnavailable, EngineExecutionError):
            return False

    def build_segment_args(
        self,
        input_path: Path,
        segment_seconds: float,
        output_pattern: Path,
        stream_copy: bool = True,
        low_memory: bool = False,
    ) -> list[str]:
        """Build ffmpeg arguments for a full-length segment split."""
        args = ["-hide_banner", "-loglevel", "error", "-y"]
        if low_memory:
            args.append("-nostdin")
        args += [
            "-i",
            str(input_path),
            "-f",
            "segment",
            "-segment_time",
            str(segment_seconds),
            "-reset_timestamps",
            "1",
        ]
        if stream_copy:
            args += ["-c", "copy"]
        if low_memory:
            args += ["-max_muxing_queue_size", "1024"]
        args.append(str(output_pattern))
        return args

    def segment(
        self,
        input_path: Path,
        segment_seconds: float,
        output_pattern: Path,
        stream_copy: bool = True,
        low_memory: bool = False,
    ) -> None:
        """Split ``input_path`` into files named by ``output_pattern``."""
        args = self.build_segment_args(
            input_path,
            segment_seconds,
            output_pattern,
            stream_copy=stream_copy,
            low_memory=low_memory,
        )
        logger.debug("Running %s %s", self._executable, " ".join(args))
        self._run(args)

    def _run(self, args: list[str]) -> str:
        """Execute ffmpeg and return stdout."""
        cmd = [self._executable, *args]
        try:
            completed = subprocess.run(
                cmd,
                check=True,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                stdin=subprocess.DEVNULL,
                timeout=self._timeout,
            )
            return completed.stdout.strip()
        except FileNotFoundError as exc:
            raise EngineUnavailable(
                "FFmpeg is required but was not found. Please install FFmpeg."
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise EngineExecutionError(f"FFmpeg error: timed out after {exc.timeout}s") from exc
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
            raise EngineExecutionError(f"FFmpeg error: {stderr}") from exc
