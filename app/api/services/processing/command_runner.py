import asyncio
from dataclasses import dataclass
from typing import Sequence

from loguru import logger as custom_logger


class CommandError(Exception):
    pass


class CommandLaunchError(CommandError):
    pass


class CommandTimeoutError(CommandError):
    pass


@dataclass
class CommandResult:
    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def stderr_tail(self, limit: int = 500) -> str:
        return self.stderr.decode("utf-8", errors="ignore")[-limit:]


async def run_command(cmd: Sequence[str], timeout: float) -> CommandResult:
    """Run an external tool without blocking the event loop.

    The child is killed and reaped if it outlives ``timeout``.
    """
    custom_logger.debug(f"Running: {' '.join(cmd)}")
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise CommandLaunchError(f"Failed to launch {cmd[0]}: {e}") from e

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        await _kill(process)
        raise CommandTimeoutError(f"{cmd[0]} timed out after {timeout:.0f}s")
    except asyncio.CancelledError:
        custom_logger.warning(f"{cmd[0]} cancelled, killing pid {process.pid}")
        await _kill(process)
        raise

    return CommandResult(returncode=process.returncode, stdout=stdout, stderr=stderr)


async def _kill(process: asyncio.subprocess.Process):
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
    await process.wait()
