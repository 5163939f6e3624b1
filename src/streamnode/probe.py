"""
Source probe - Resolution and framerate of the live source stream.

The resolution engine only needs two integers per pass; this module
supplies them either from fixed values or from ffprobe on the stream URL.
Resolution is the frame height, matching the "1080p" naming of tokens.
"""

import logging
import subprocess
from dataclasses import dataclass
from fractions import Fraction
from typing import Protocol

logger = logging.getLogger(__name__)


class ProbeError(RuntimeError):
    """Raised when the source stream cannot be probed."""


class SourceProbe(Protocol):
    """Read accessors sampled once per resolution pass."""

    def current_resolution(self) -> int: ...

    def current_framerate(self) -> int: ...


@dataclass
class StaticSourceProbe:
    """Probe with fixed values (command line flags, tests)."""

    resolution: int
    framerate: int

    def current_resolution(self) -> int:
        return self.resolution

    def current_framerate(self) -> int:
        return self.framerate


def parse_frame_rate(value: str) -> int:
    """
    Parse an ffprobe frame rate ("30/1", "30000/1001", "25") to a whole number.

    Raises:
        ValueError: If the value is not a positive rate
    """
    rate = Fraction(value.strip())
    if rate <= 0:
        raise ValueError(f"Invalid frame rate: {value!r}")
    return max(1, round(rate))


class FfprobeSourceProbe:
    """
    Probe a live stream with ffprobe.

    Each call to probe() runs ffprobe once and caches the values read by
    current_resolution() and current_framerate(). Cached values are reused
    until probe() is called again, so call it before each later pass.
    """

    def __init__(self, url: str, ffprobe: str = "ffprobe", timeout: float = 10):
        self.url = url
        self.ffprobe = ffprobe
        self.timeout = timeout
        self._resolution: int | None = None
        self._framerate: int | None = None

    def _run(self) -> str:
        cmd = [
            self.ffprobe,
            "-v",
            "error",
            "-select_streams",
            "v:0",
            "-show_entries",
            "stream=height,avg_frame_rate,r_frame_rate",
            "-of",
            "default=noprint_wrappers=1",
            self.url,
        ]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout, check=True)
        except FileNotFoundError as err:
            raise ProbeError(f"{self.ffprobe} not found - please install ffmpeg") from err
        except subprocess.TimeoutExpired as err:
            raise ProbeError(f"Timed out probing {self.url} after {self.timeout}s") from err
        except subprocess.CalledProcessError as err:
            raise ProbeError(f"ffprobe failed for {self.url}: {err.stderr.strip()}") from err
        return result.stdout

    def probe(self) -> tuple[int, int]:
        """
        Probe the stream and return (resolution, framerate).

        Raises:
            ProbeError: If ffprobe fails or reports no usable video stream
        """
        entries = {}
        for line in self._run().splitlines():
            key, sep, value = line.partition("=")
            if sep:
                entries[key.strip()] = value.strip()

        if "height" not in entries:
            raise ProbeError(f"No video stream found in {self.url}")

        try:
            resolution = int(entries["height"])
        except ValueError as err:
            raise ProbeError(f"Invalid height from ffprobe: {entries['height']!r}") from err

        framerate = None
        # avg_frame_rate is "0/0" for some live sources
        for key in ("avg_frame_rate", "r_frame_rate"):
            try:
                framerate = parse_frame_rate(entries.get(key, ""))
                break
            except (ValueError, ZeroDivisionError):
                continue

        if resolution <= 0 or framerate is None:
            raise ProbeError(f"Could not determine resolution/framerate of {self.url}")

        logger.info(f"Source stream {self.url}: {resolution}p{framerate}")
        self._resolution = resolution
        self._framerate = framerate
        return resolution, framerate

    def current_resolution(self) -> int:
        if self._resolution is None:
            self.probe()
        return self._resolution

    def current_framerate(self) -> int:
        if self._framerate is None:
            self.probe()
        return self._framerate
