"""Deobfuscation of stack traces through an external mapping filter."""

from __future__ import annotations

import structlog

from java_stack_nav.adapters.text.lines import ArrayTextSource
from java_stack_nav.core.assembler import FrameAssembler
from java_stack_nav.interfaces.filter import TextFilter
from java_stack_nav.models.frame import FrameSequence, frames_to_text
from java_stack_nav.utils.async_helpers import DeobfuscationError, StackTraceParseError

log = structlog.get_logger()


class Deobfuscator:
    """Round-trips frames through a deobfuscation filter.

    The frames are written back out as canonical ``at class.method(file:line)``
    lines, filtered with a mapping file, and the output is parsed again as a
    fresh stack trace.

    Example:
        deobfuscator = Deobfuscator(CommandTextFilter("retrace"))
        frames = await deobfuscator.deobfuscate(frames, "mapping.txt")
    """

    def __init__(self, text_filter: TextFilter, assembler: FrameAssembler | None = None) -> None:
        self._filter = text_filter
        self._assembler = assembler or FrameAssembler()

    async def deobfuscate_text(self, text: str, mapping_file: str) -> str:
        """Filter raw text with a mapping file.

        Raises:
            DeobfuscationError: If the filter produced no output
        """
        log.debug("deobfuscating_text", mapping_file=mapping_file, text=text)

        output = await self._filter.filter_text(text, mapping_file)
        if not output:
            raise DeobfuscationError(f"Deobfuscation with {mapping_file} produced no output")

        log.debug("deobfuscated_text", text=output)
        return output

    async def deobfuscate(self, frames: FrameSequence, mapping_file: str) -> FrameSequence:
        """Deobfuscate a frame sequence.

        The result may have a different number of frames than the input when
        the mapping expands or merges inlined methods.

        Args:
            frames: Frames to deobfuscate, innermost first
            mapping_file: Mapping file for the filter

        Returns:
            The deobfuscated frames

        Raises:
            DeobfuscationError: If the filter output is empty or holds no frames
        """
        output = await self.deobfuscate_text(frames_to_text(frames), mapping_file)

        try:
            trace = self._assembler.assemble(ArrayTextSource.from_string(output), 1)
        except StackTraceParseError as e:
            log.debug("deobfuscated_text_unparseable", text=output)
            raise DeobfuscationError(f"Could not parse deobfuscated stack trace: {e}") from e

        log.debug(
            "stack_trace_deobfuscated",
            frames_before=len(frames),
            frames_after=len(trace.frames),
        )
        return trace.frames
