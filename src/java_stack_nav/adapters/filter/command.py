"""TextFilter implementation backed by an external command."""

from __future__ import annotations

import structlog

from java_stack_nav.utils.safe_subprocess import CommandError, SafeCommandRunner

log = structlog.get_logger()


class CommandTextFilter:
    """Pipes text through a command such as ProGuard/R8 ``retrace``.

    The command is invoked as ``<command> <mapping_file>`` with the text on
    stdin; whatever it prints on stdout is the filtered text.

    Example:
        text_filter = CommandTextFilter("retrace")
        clear_text = await text_filter.filter_text(obfuscated, "mapping.txt")
    """

    def __init__(self, command: str = "retrace", timeout: float | None = None) -> None:
        self._runner = SafeCommandRunner(command, timeout=timeout)

    @property
    def command(self) -> str:
        return self._runner.command

    async def filter_text(self, text: str, mapping_file: str) -> str:
        """Run the command over text, returning its output or "" on failure."""
        try:
            result = await self._runner.run([mapping_file], input_text=text)
        except CommandError as e:
            log.error("filter_command_failed", command=self.command, error=str(e))
            return ""

        return result.stdout
