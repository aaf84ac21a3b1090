"""Runs brew subcommands as asyncio subprocesses."""

from __future__ import annotations

import asyncio
import logging
import os
import subprocess
from collections.abc import AsyncIterator

from brewdeck.exceptions import BrewCommandError, BrewNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_BREW_PATH = "brew"

# Keep brew from running its own auto-update in the middle of an operation
# and from emitting ANSI color codes into captured output.
BREW_ENV_OVERRIDES = {
    "HOMEBREW_NO_AUTO_UPDATE": "1",
    "HOMEBREW_NO_COLOR": "1",
    "HOMEBREW_NO_EMOJI": "1",
    "HOMEBREW_NO_ENV_HINTS": "1",
}


class BrewExecutor:
    """Spawns the brew binary and captures its output.

    Example:
        executor = BrewExecutor()
        output = await executor.run("list", "--formula", "--versions")
    """

    def __init__(self, brew_path: str = DEFAULT_BREW_PATH) -> None:
        self.brew_path = brew_path

    def _env(self) -> dict[str, str]:
        env = dict(os.environ)
        env.update(BREW_ENV_OVERRIDES)
        return env

    async def run_raw(self, *args: str) -> tuple[int, str, str]:
        """Run brew and return ``(returncode, stdout, stderr)`` without judging the exit code.

        Raises:
            BrewNotFoundError: If the brew executable cannot be started.
        """
        logger.debug("Running: %s %s", self.brew_path, " ".join(args))
        try:
            proc = await asyncio.create_subprocess_exec(
                self.brew_path,
                *args,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=self._env(),
            )
        except FileNotFoundError as e:
            raise BrewNotFoundError(self.brew_path, cause=e) from e

        stdout, stderr = await proc.communicate()
        returncode = proc.returncode if proc.returncode is not None else -1
        return (
            returncode,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )

    async def run(self, *args: str) -> str:
        """Run brew and return its stdout.

        Raises:
            BrewCommandError: If brew exits non-zero. The message reads
                ``brew <subcommand> failed: <stderr>``.
            BrewNotFoundError: If the brew executable cannot be started.
        """
        returncode, stdout, stderr = await self.run_raw(*args)
        if returncode != 0:
            raise command_error(args, returncode, stderr)
        return stdout

    async def stream(self, *args: str) -> AsyncIterator[str]:
        """Run brew and yield output lines as they are produced.

        stderr is merged into stdout so warnings arrive in order with progress.

        Raises:
            BrewCommandError: After the last line, if brew exited non-zero.
            BrewNotFoundError: If the brew executable cannot be started.
        """
        logger.debug("Streaming: %s %s", self.brew_path, " ".join(args))
        try:
            proc = await asyncio.create_subprocess_exec(
                self.brew_path,
                *args,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                env=self._env(),
            )
        except FileNotFoundError as e:
            raise BrewNotFoundError(self.brew_path, cause=e) from e

        assert proc.stdout is not None
        last_line = ""
        while True:
            raw = await proc.stdout.readline()
            if not raw:
                break
            line = raw.decode("utf-8", errors="replace").rstrip("\n")
            if line.strip():
                last_line = line
            yield line

        returncode = await proc.wait()
        if returncode != 0:
            raise command_error(args, returncode, last_line)


def command_error(args: tuple[str, ...] | list[str], returncode: int, stderr: str) -> BrewCommandError:
    """Build the error for a failed brew invocation."""
    subcommand = args[0] if args else ""
    detail = stderr.strip() or f"exit status {returncode}"
    return BrewCommandError(
        f"brew {subcommand} failed: {detail}",
        command=" ".join(args),
        returncode=returncode,
        stderr=stderr,
    )
