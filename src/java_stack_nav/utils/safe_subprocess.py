"""Safe subprocess wrapper for external filter commands.

This module provides a wrapper around external tools (such as the
``retrace`` deobfuscator) that:
- Never uses shell=True
- Feeds input on stdin and captures stdout/stderr as text
- Runs the blocking call in a worker thread so the event loop stays free
- Enforces a timeout only when one is configured
"""

from __future__ import annotations

import asyncio
import shutil
import subprocess
from dataclasses import dataclass

import structlog

from java_stack_nav.utils.async_helpers import NavigatorError

log = structlog.get_logger()


class CommandError(NavigatorError):
    """Base exception for external command errors."""


class CommandNotFoundError(CommandError):
    """Raised when the command binary cannot be found."""


class CommandTimeoutError(CommandError):
    """Raised when a command times out."""


@dataclass
class CommandResult:
    """Result of an external command execution."""

    stdout: str
    stderr: str
    return_code: int
    command: list[str]

    @property
    def success(self) -> bool:
        """Return True if the command succeeded."""
        return self.return_code == 0


class SafeCommandRunner:
    """Runs one external command with text on stdin.

    Example:
        runner = SafeCommandRunner("retrace")
        result = await runner.run(["mapping.txt"], input_text=trace)
        print(result.stdout)
    """

    def __init__(self, command: str, timeout: float | None = None) -> None:
        """Initialize the runner.

        Args:
            command: Command name (looked up on PATH) or path to a binary.
            timeout: Timeout in seconds, or None to wait indefinitely.
        """
        self._command = command
        self._timeout = timeout

    @property
    def command(self) -> str:
        return self._command

    def _resolve_command(self) -> str:
        """Find the command binary.

        Raises:
            CommandNotFoundError: If the command is not on PATH.
        """
        resolved = shutil.which(self._command)
        if not resolved:
            raise CommandNotFoundError(f"Command not found: {self._command}")
        return resolved

    async def run(self, args: list[str], input_text: str = "") -> CommandResult:
        """Run the command.

        Args:
            args: Arguments after the command name.
            input_text: Text written to the command's stdin.

        Returns:
            CommandResult with stdout, stderr, and return code.

        Raises:
            CommandNotFoundError: If the command cannot be found or started.
            CommandTimeoutError: If a timeout is configured and exceeded.
        """
        cmd = [self._resolve_command(), *args]

        log.debug("executing_command", command=cmd, timeout=self._timeout)

        def run_sync() -> subprocess.CompletedProcess[str]:
            return subprocess.run(
                cmd,
                input=input_text,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                shell=False,  # CRITICAL: Never use shell=True
            )

        try:
            proc = await asyncio.to_thread(run_sync)
        except subprocess.TimeoutExpired as e:
            msg = f"Command timed out after {self._timeout}s: {cmd}"
            log.error("command_timeout", command=cmd, timeout=self._timeout)
            raise CommandTimeoutError(msg) from e
        except OSError as e:
            msg = f"Could not run {cmd[0]}: {e}"
            log.error("command_failed_to_start", command=cmd, error=str(e))
            raise CommandNotFoundError(msg) from e

        result = CommandResult(
            stdout=proc.stdout,
            stderr=proc.stderr,
            return_code=proc.returncode,
            command=cmd,
        )

        if not result.success:
            log.warning(
                "command_exited_with_error",
                command=cmd,
                return_code=result.return_code,
                stderr=result.stderr,
            )

        return result
