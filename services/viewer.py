# Opens downloaded media with the desktop's default viewer.
#
# Linux: xdg-open, macOS: open. Anywhere else opening is a no-op unless a
# command is configured explicitly (viewer.command).

from __future__ import annotations

import asyncio
import shlex
import sys
from pathlib import Path

import services.logger as log

l = log.get_logger()

_PLATFORM_COMMANDS = {
    "linux": "xdg-open",
    "darwin": "open",
}


def default_command(platform: str | None = None) -> str | None:
    platform = platform or sys.platform
    for prefix, command in _PLATFORM_COMMANDS.items():
        if platform.startswith(prefix):
            return command
    return None


class ViewerLauncher:

    def __init__(self, command: str = "", enabled: bool = True):
        self.enabled = enabled
        self._argv = shlex.split(command) if command else None
        if self._argv is None:
            default = default_command()
            self._argv = [default] if default else None

    async def open(self, local_path: Path | str) -> None:
        """Run the viewer on *local_path* and wait for the launcher to exit."""
        if not self.enabled or self._argv is None:
            l.debug(f"viewer: not opening {local_path} (no viewer for {sys.platform})")
            return
        try:
            proc = await asyncio.create_subprocess_exec(
                *self._argv,
                str(local_path),
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
            code = await proc.wait()
        except OSError as e:
            l.warning(f"viewer: failed to launch {self._argv[0]!r} for {local_path}: {e}")
            return
        if code != 0:
            l.warning(f"viewer: {self._argv[0]!r} exited with {code} for {local_path}")
