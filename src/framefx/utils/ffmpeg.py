"""Thin subprocess wrapper around the ffmpeg / ffprobe executables."""

from __future__ import annotations

import logging
import subprocess

logger = logging.getLogger(__name__)

INSTALL_HINT = (
    "Please install FFmpeg:\n"
    "  Ubuntu/Debian: sudo apt install ffmpeg\n"
    "  macOS: brew install ffmpeg\n"
    "  Windows: choco install ffmpeg"
)


def run_tool(
    cmd: list[str],
    timeout: float,
    error_cls: type[Exception],
) -> subprocess.CompletedProcess:
    """Run an ffmpeg-family command and return the completed process.

    Launch failures (missing or unrunnable executables) and timeouts are
    translated into ``error_cls``. Output is decoded leniently.
    A non-zero exit status is returned to the caller untouched, since
    each stage decides for itself whether that is fatal.

    Args:
        cmd: Full command line; ``cmd[0]`` is the executable name.
        timeout: Timeout in seconds.
        error_cls: Exception type raised on launch failure or timeout.

    Returns:
        The completed process with captured text output.
    """
    tool = cmd[0]
    logger.debug(f"Running: {' '.join(cmd)}")

    try:
        return subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            # Metadata tags are echoed to stderr as raw bytes in any encoding.
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise error_cls(f"{tool} not found. {INSTALL_HINT}") from e
    except subprocess.TimeoutExpired as e:
        raise error_cls(f"{tool} timed out after {timeout:.0f}s") from e
    except (OSError, UnicodeDecodeError) as e:
        raise error_cls(f"{tool} could not be run: {e}") from e


def stderr_tail(result: subprocess.CompletedProcess, lines: int = 5) -> str:
    """Return the last few lines of a process's stderr for error messages."""
    stderr = (result.stderr or "").strip()
    return "\n".join(stderr.splitlines()[-lines:])
