from pathlib import Path
from typing import Dict, Any

from loguru import logger as custom_logger

from app.api.services.processing.command_runner import CommandError, run_command
from app.api.services.processing.interfaces import IRemuxer
from app.core.config import FFMPEG_BIN, REMUX_TIMEOUT

OUTPUT_SUFFIX = ".processing"


class Remuxer(IRemuxer):
    """Move the moov atom to the front of an MP4 without re-encoding."""

    def __init__(self, ffmpeg_bin: str = FFMPEG_BIN, timeout: float = REMUX_TIMEOUT):
        self.ffmpeg_bin = ffmpeg_bin
        self.timeout = timeout

    @staticmethod
    def output_path_for(file_path: str) -> str:
        return f"{file_path}{OUTPUT_SUFFIX}"

    def _build_command(self, file_path: str, output_path: str):
        return [
            self.ffmpeg_bin,
            "-y",
            "-i", file_path,
            "-c", "copy",
            "-movflags", "faststart",
            "-f", "mp4",
            output_path,
        ]

    async def remux(self, file_path: str) -> Dict[str, Any]:
        """
        Remux a local MP4 for fast start.

        Args:
            file_path: Input file, left untouched

        Returns:
            {'success': bool, 'data': {'output_path', 'size'}, 'error': str}
        """
        output_path = self.output_path_for(file_path)

        try:
            result = await run_command(self._build_command(file_path, output_path), self.timeout)
        except CommandError as e:
            custom_logger.error(f"ffmpeg failed to run: {str(e)}")
            self._cleanup_files(output_path)
            return {'success': False, 'data': None, 'error': str(e)}

        if not result.ok:
            custom_logger.error(f"ffmpeg exited with {result.returncode}: {result.stderr_tail()}")
            self._cleanup_files(output_path)
            return {'success': False, 'data': None, 'error': f'ffmpeg exited with status {result.returncode}'}

        output = Path(output_path)
        if not output.exists():
            custom_logger.error(f"ffmpeg reported success but wrote nothing: {output_path}")
            return {'success': False, 'data': None, 'error': 'Processed file not created'}

        size = output.stat().st_size
        if size == 0:
            custom_logger.error(f"ffmpeg produced an empty file: {output_path}")
            self._cleanup_files(output_path)
            return {'success': False, 'data': None, 'error': 'Processed file is empty'}

        custom_logger.info(f"Remuxed for fast start: {output_path} ({size:,} bytes)")
        return {
            'success': True,
            'data': {
                'output_path': output_path,
                'size': size
            },
            'error': None
        }

    def _cleanup_files(self, *file_paths):
        """Cleanup temp files"""
        for file_path in file_paths:
            if file_path and Path(file_path).exists():
                try:
                    Path(file_path).unlink()
                    custom_logger.debug(f"Cleaned up: {file_path}")
                except OSError as e:
                    custom_logger.warning(f"Cleanup failed {file_path}: {str(e)}")
