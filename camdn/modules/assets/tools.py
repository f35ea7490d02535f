"""Async wrapper around the external media tools (ffprobe, ffmpeg)."""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from typing import Awaitable, Callable, Sequence

from .exceptions import ToolError


@dataclass(frozen=True, slots=True)
class ToolOutput:
    stdout: str
    stderr: str


CommandRunner = Callable[[Sequence[str], float], Awaitable[ToolOutput]]


async def run_tool(cmd: Sequence[str], timeout: float) -> ToolOutput:
    """Run ``cmd`` without a shell and return its decoded output.

    Raises ``ToolError`` when the binary is missing, the process exits
    non-zero, or it outlives ``timeout`` seconds (the process is killed).
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            close_fds=os.name != "nt",
        )
    except OSError as exc:
        raise ToolError(f"{cmd[0]} could not be started: {exc}") from exc

    try:
        stdout_b, stderr_b = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError as exc:
        try:
            process.kill()
        except ProcessLookupError:
            pass
        await process.wait()
        raise ToolError(f"{cmd[0]} timed out after {timeout}s") from exc

    stdout = (stdout_b or b"").decode("utf-8", errors="replace")
    stderr = (stderr_b or b"").decode("utf-8", errors="replace")
    if process.returncode != 0:
        raise ToolError(f"{cmd[0]} exited with {process.returncode}: {stderr.strip()}")
    return ToolOutput(stdout=stdout, stderr=stderr)
