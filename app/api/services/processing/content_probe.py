import json
from dataclasses import dataclass
from typing import Dict, Any, Optional

from loguru import logger as custom_logger

from app.api.services.processing.command_runner import CommandError, run_command
from app.api.services.processing.interfaces import IContentProbe
from app.core.config import FFPROBE_BIN, PROBE_TIMEOUT

LANDSCAPE = "16:9"
PORTRAIT = "9:16"
OTHER = "other"

RATIO_PREFIXES = {
    LANDSCAPE: "landscape",
    PORTRAIT: "portrait",
    OTHER: "other",
}


@dataclass
class StreamGeometry:
    width: int
    height: int
    codec_name: Optional[str] = None

    @property
    def aspect_ratio(self) -> str:
        return classify_aspect_ratio(self.width, self.height)

    @property
    def prefix(self) -> str:
        return ratio_to_prefix(self.aspect_ratio)


def classify_aspect_ratio(width: int, height: int) -> str:
    """Integer ratio match, same rounding as ``16 * h / 9`` on ints."""
    if width <= 0 or height <= 0:
        return OTHER
    if width == 16 * height // 9:
        return LANDSCAPE
    if height == 16 * width // 9:
        return PORTRAIT
    return OTHER


def ratio_to_prefix(ratio: str) -> str:
    return RATIO_PREFIXES.get(ratio, RATIO_PREFIXES[OTHER])


class ContentProbe(IContentProbe):
    """Read stream geometry with ffprobe."""

    def __init__(self, ffprobe_bin: str = FFPROBE_BIN, timeout: float = PROBE_TIMEOUT):
        self.ffprobe_bin = ffprobe_bin
        self.timeout = timeout

    def _build_command(self, file_path: str):
        return [
            self.ffprobe_bin,
            "-v", "error",
            "-print_format", "json",
            "-show_streams",
            file_path,
        ]

    async def probe(self, file_path: str) -> Dict[str, Any]:
        """
        Probe a local media file.

        Args:
            file_path: Path of the file to inspect

        Returns:
            {'success': bool, 'data': StreamGeometry, 'error': str}
        """
        try:
            result = await run_command(self._build_command(file_path), self.timeout)
        except CommandError as e:
            custom_logger.error(f"ffprobe failed to run: {str(e)}")
            return {'success': False, 'data': None, 'error': str(e)}

        if not result.ok:
            custom_logger.error(f"ffprobe exited with {result.returncode}: {result.stderr_tail()}")
            return {'success': False, 'data': None, 'error': f'ffprobe exited with status {result.returncode}'}

        try:
            geometry = self.parse_output(result.stdout)
        except ValueError as e:
            custom_logger.error(f"Unusable ffprobe output for {file_path}: {str(e)}")
            return {'success': False, 'data': None, 'error': str(e)}

        custom_logger.info(
            f"Probed {file_path}: {geometry.width}x{geometry.height} -> {geometry.aspect_ratio}"
        )
        return {'success': True, 'data': geometry, 'error': None}

    @staticmethod
    def parse_output(stdout: bytes) -> StreamGeometry:
        """Pick the first video stream out of ``ffprobe -show_streams`` JSON."""
        try:
            info = json.loads(stdout)
        except (TypeError, json.JSONDecodeError) as e:
            raise ValueError(f"ffprobe output is not JSON: {e}") from e

        streams = info.get("streams") if isinstance(info, dict) else None
        if not streams:
            raise ValueError("ffprobe reported no streams")

        streams = [s for s in streams if isinstance(s, dict)] if isinstance(streams, list) else []
        video_streams = [s for s in streams if s.get("codec_type") == "video"]
        candidates = video_streams or [s for s in streams if "width" in s and "height" in s]
        if not candidates:
            raise ValueError("ffprobe reported no video stream")

        stream = candidates[0]
        try:
            width = int(stream.get("width", 0))
            height = int(stream.get("height", 0))
        except (TypeError, ValueError) as e:
            raise ValueError(f"invalid stream geometry: {e}") from e

        return StreamGeometry(width=width, height=height, codec_name=stream.get("codec_name"))
