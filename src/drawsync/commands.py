"""External process launches: the drawing converter and the file opener.

All OS-specific branching lives in build_command(). Launches are
fire-and-forget: the child is detached, its output discarded, and its exit
status never collected. A converter that fails leaves a stale image and
drawsync carries on regardless.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

RENDER = "render"
OPEN = "open"

WINDOWS = "windows"
DARWIN = "darwin"
POSIX = "posix"


@dataclass(frozen=True)
class Command:
    """A program plus its argument list."""

    program: str
    args: tuple[str, ...] = ()

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]


def current_platform() -> str:
    """Map sys.platform onto the platform tags build_command() understands."""
    if sys.platform.startswith("win"):
        return WINDOWS
    if sys.platform == "darwin":
        return DARWIN
    return POSIX


def build_command(
    operation: str,
    target: Path | str,
    platform: str,
    program: str | None = None,
    extra_args: tuple[str, ...] | list[str] = (),
) -> Command:
    """Describe the process to launch for an operation on a target file.

    Args:
        operation: RENDER (run the converter) or OPEN (open with the
            associated application).
        target: File the operation applies to.
        platform: WINDOWS, DARWIN or POSIX.
        program: Converter command for RENDER; overrides the system opener
            for OPEN.
        extra_args: Arguments placed before the target.

    Returns:
        Command ready for launch_detached().
    """
    target = str(target)

    if operation == RENDER:
        if not program:
            raise ValueError("render needs a converter program")
        if platform == WINDOWS:
            # npm-style shims (.cmd) only resolve through the command shell
            return Command("cmd", ("/c", program, *extra_args, target))
        return Command(program, (*extra_args, target))

    if operation == OPEN:
        if program:
            return Command(program, (*extra_args, target))
        if platform == WINDOWS:
            return Command("cmd", ("/c", "start", "", target))
        if platform == DARWIN:
            return Command("open", (target,))
        return Command("xdg-open", (target,))

    raise ValueError(f"Unknown operation: {operation}")


def launch_detached(command: Command) -> None:
    """Start command in the background and return immediately.

    Raises:
        OSError: If the program cannot be started at all.
    """
    kwargs: dict = {
        "stdin": subprocess.DEVNULL,
        "stdout": subprocess.DEVNULL,
        "stderr": subprocess.DEVNULL,
        "close_fds": True,
    }
    if sys.platform.startswith("win"):
        kwargs["creationflags"] = (
            subprocess.DETACHED_PROCESS | subprocess.CREATE_NEW_PROCESS_GROUP
        )
    else:
        kwargs["start_new_session"] = True

    proc = subprocess.Popen(command.argv, **kwargs)
    logger.debug("Launched %s (pid %s)", " ".join(command.argv), proc.pid)


def request_render(
    drawing_path: Path | str,
    platform: str,
    converter: str,
    extra_args: tuple[str, ...] | list[str] = (),
) -> None:
    """Ask the external converter to (re)generate the image for a drawing."""
    launch_detached(build_command(RENDER, drawing_path, platform, converter, extra_args))


def open_in_editor(
    path: Path | str,
    platform: str,
    opener: str | None = None,
) -> None:
    """Open a file with its associated application (or the given opener)."""
    launch_detached(build_command(OPEN, path, platform, opener))
