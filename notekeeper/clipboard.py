"""Clipboard writing as an ordered chain of strategies.

The first strategy that succeeds wins. A failed strategy is logged and the
next one is tried; when all of them fail the chain reports ``False``.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
import sys
from typing import Optional, Sequence

from notekeeper.errors import ClipboardError
from notekeeper.ports import ClipboardStrategy

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0  # seconds

# Candidate copy commands, in order of preference per platform
_COMMANDS: dict[str, list[list[str]]] = {
    "darwin": [["pbcopy"]],
    "win32": [["clip"]],
    "linux": [
        ["wl-copy"],
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
    ],
}


class CommandClipboard:
    """Pipes text into the platform's clipboard command."""

    name = "command"

    def __init__(
        self,
        commands: Optional[Sequence[Sequence[str]]] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._timeout = timeout
        if commands is None:
            commands = _COMMANDS.get(sys.platform, _COMMANDS["linux"])
        self._commands = [list(c) for c in commands]

    def _resolve(self) -> list[str]:
        for command in self._commands:
            if shutil.which(command[0]):
                return command
        raise ClipboardError("No clipboard command found on PATH")

    async def write_text(self, text: str) -> None:
        command = self._resolve()
        proc = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
        # xclip and wl-copy fork a child that keeps serving the selection, so
        # only stdin is piped and only the parent's exit is awaited.
        proc.stdin.write(text.encode("utf-8"))
        await proc.stdin.drain()
        proc.stdin.close()
        try:
            returncode = await asyncio.wait_for(proc.wait(), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            proc.kill()
            raise ClipboardError(f"{command[0]} did not exit within {self._timeout}s") from exc
        if returncode != 0:
            raise ClipboardError(f"{command[0]} exited with {returncode}")


class TkClipboard:
    """Legacy fallback: select-and-copy through a hidden Tk window."""

    name = "tk"

    @staticmethod
    def _copy(text: str) -> None:
        try:
            import tkinter
        except ImportError as exc:
            raise ClipboardError(f"tkinter unavailable: {exc}") from exc

        try:
            root = tkinter.Tk()
        except tkinter.TclError as exc:
            raise ClipboardError(f"Cannot open display: {exc}") from exc
        try:
            root.withdraw()
            root.clipboard_clear()
            root.clipboard_append(text)
            root.update()
        finally:
            root.destroy()

    async def write_text(self, text: str) -> None:
        await asyncio.to_thread(self._copy, text)


class ClipboardChain:
    """Tries each strategy in order until one succeeds."""

    def __init__(self, strategies: Sequence[ClipboardStrategy]) -> None:
        self._strategies = list(strategies)

    @property
    def strategies(self) -> list[ClipboardStrategy]:
        return list(self._strategies)

    async def copy(self, text: str) -> bool:
        for strategy in self._strategies:
            try:
                await strategy.write_text(text)
            except Exception as exc:
                logger.warning("Clipboard strategy '%s' failed: %s", strategy.name, exc)
                continue
            logger.info("Copied %d chars via '%s'", len(text), strategy.name)
            return True

        logger.error("All clipboard strategies failed")
        return False


def default_chain() -> ClipboardChain:
    """System copy command first, Tk selection second."""
    return ClipboardChain([CommandClipboard(), TkClipboard()])
