import shutil
import subprocess
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from app.api.services.processing.command_runner import CommandLaunchError, CommandResult
from app.api.services.processing.content_probe import ContentProbe
from app.api.services.processing.remuxer import Remuxer

FFMPEG_AVAILABLE = shutil.which("ffmpeg") is not None and shutil.which("ffprobe") is not None

RUN_COMMAND = "app.api.services.processing.remuxer.run_command"


def fake_ffmpeg(output: bytes = b"remuxed", returncode: int = 0):
    """run_command stand-in that writes ``output`` to the last argument."""
    async def _run(cmd, timeout):
        Path(cmd[-1]).write_bytes(output)
        return CommandResult(returncode=returncode, stdout=b"", stderr=b"ffmpeg log")
    return _run


@pytest.fixture
def source(tmp_path) -> Path:
    path = tmp_path / "tubely-upload-abc.mp4"
    path.write_bytes(b"original-bytes")
    return path


async def test_remux_writes_to_sibling_path_with_stream_copy(source):
    with patch(RUN_COMMAND, AsyncMock(side_effect=fake_ffmpeg())) as run:
        outcome = await Remuxer(ffmpeg_bin="ffmpeg", timeout=7).remux(str(source))

    assert outcome['success'] is True
    output_path = outcome['data']['output_path']
    assert output_path == f"{source}.processing"
    assert output_path != str(source)
    assert outcome['data']['size'] == len(b"remuxed")
    assert source.read_bytes() == b"original-bytes"

    cmd, timeout = run.call_args.args
    assert cmd == ["ffmpeg", "-y", "-i", str(source), "-c", "copy", "-movflags", "faststart",
                   "-f", "mp4", output_path]
    assert timeout == 7


async def test_remux_nonzero_exit_fails_and_removes_partial_output(source):
    with patch(RUN_COMMAND, AsyncMock(side_effect=fake_ffmpeg(b"partial", returncode=1))):
        outcome = await Remuxer().remux(str(source))

    assert outcome['success'] is False
    assert outcome['data'] is None
    assert not Path(f"{source}.processing").exists()


async def test_remux_empty_output_fails(source):
    with patch(RUN_COMMAND, AsyncMock(side_effect=fake_ffmpeg(b""))):
        outcome = await Remuxer().remux(str(source))

    assert outcome['success'] is False
    assert outcome['error'] == 'Processed file is empty'
    assert not Path(f"{source}.processing").exists()


async def test_remux_missing_output_fails(source):
    result = CommandResult(returncode=0, stdout=b"", stderr=b"")
    with patch(RUN_COMMAND, AsyncMock(return_value=result)):
        outcome = await Remuxer().remux(str(source))

    assert outcome['success'] is False
    assert outcome['data'] is None


async def test_remux_launch_failure(source):
    with patch(RUN_COMMAND, AsyncMock(side_effect=CommandLaunchError("Failed to launch ffmpeg"))):
        outcome = await Remuxer().remux(str(source))

    assert outcome['success'] is False


# =============================================================================
# Real ffmpeg
# =============================================================================

@pytest.mark.skipif(not FFMPEG_AVAILABLE, reason="ffmpeg/ffprobe not installed")
async def test_remux_is_stable_on_already_remuxed_file(tmp_path):
    source = tmp_path / "synthetic.mp4"
    subprocess.run(
        ["ffmpeg", "-y", "-v", "error", "-f", "lavfi", "-i", "testsrc=size=1280x720:rate=10",
         "-t", "1", "-pix_fmt", "yuv420p", str(source)],
        check=True,
    )

    first = await Remuxer().remux(str(source))
    assert first['success'] is True
    second = await Remuxer().remux(first['data']['output_path'])
    assert second['success'] is True

    first_size = first['data']['size']
    second_size = second['data']['size']
    assert abs(first_size - second_size) <= max(1024, first_size // 100)

    probe = ContentProbe()
    first_probe = await probe.probe(first['data']['output_path'])
    second_probe = await probe.probe(second['data']['output_path'])
    assert first_probe['data'].aspect_ratio == second_probe['data'].aspect_ratio == "16:9"
