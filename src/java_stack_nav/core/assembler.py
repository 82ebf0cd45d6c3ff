"""Assembly of whole stack traces from line-addressable text.

This module implements the FrameAssembler class that finds the stack trace
block around a line of text and turns it into a frame sequence. It supports:
- Frames hard-wrapped across two physical lines
- "Caused by:" chains, reordered so the innermost cause comes first
- "... N more" elision markers
- Locating the next and previous stack trace in a buffer
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import structlog

from java_stack_nav.core.frame_grammar import parse_line
from java_stack_nav.core.reducer import reduce_frames
from java_stack_nav.interfaces.text_source import TextSource
from java_stack_nav.models.frame import AssembledTrace, Frame
from java_stack_nav.utils.async_helpers import StackTraceParseError

log = structlog.get_logger()


@dataclass(frozen=True)
class ParsedLine:
    """A frame together with the physical lines it was read from."""

    frame: Frame
    first_line: int
    last_line: int

    def covers(self, line: int) -> bool:
        return self.first_line <= line <= self.last_line


class FrameAssembler:
    """Assembles frame sequences from stack trace text.

    Responsibilities:
    - Parse single lines, joining hard-wrapped frames
    - Discover the extent of the block around an anchor line
    - Flatten cause chains into one innermost-first sequence
    - Find neighbouring stack trace blocks

    Example:
        assembler = FrameAssembler()
        trace = assembler.assemble(ArrayTextSource.from_string(text), anchor_line=3)
        print(trace.frames[trace.cursor_index - 1])
    """

    CAUSED_BY_PATTERN = re.compile(r"Caused by:")
    MORE_PATTERN = re.compile(r"\.\.\. \d+ more")

    def is_caused_by_line(self, text: str) -> bool:
        """Check if a line starts a "Caused by" section."""
        return self.CAUSED_BY_PATTERN.search(text) is not None

    def is_more_line(self, text: str) -> bool:
        """Check if a line is a "... N more" elision marker."""
        return self.MORE_PATTERN.search(text) is not None

    def is_continuation_line(self, text: str) -> bool:
        """Check if a non-frame line still belongs to the current block."""
        return self.is_caused_by_line(text) or self.is_more_line(text)

    def parse_at(self, source: TextSource, line: int) -> ParsedLine | None:
        """Parse the frame on a physical line.

        When the line does not parse on its own it is joined with the line
        above, then with the line below, to recover frames that were wrapped
        by a terminal. A neighbour is only used if it does not parse alone.

        Args:
            source: Text to read from
            line: 1-based line number

        Returns:
            The frame and the line range it spans, or None
        """
        text = source.get_line(line)
        frame = parse_line(text)
        if frame is not None:
            return ParsedLine(frame, line, line)

        if line > 1:
            above = source.get_line(line - 1)
            if parse_line(above) is None:
                frame = parse_line(above + text)
                if frame is not None:
                    log.debug("wrapped_frame_joined", first_line=line - 1, last_line=line)
                    return ParsedLine(frame, line - 1, line)

        if line < source.line_count:
            below = source.get_line(line + 1)
            if parse_line(below) is None:
                frame = parse_line(text + below)
                if frame is not None:
                    log.debug("wrapped_frame_joined", first_line=line, last_line=line + 1)
                    return ParsedLine(frame, line, line + 1)

        return None

    def find_first_frame_line(self, source: TextSource, start_line: int = 1) -> int | None:
        """Find the first line at or after ``start_line`` holding a frame."""
        for line in range(start_line, source.line_count + 1):
            parsed = self.parse_at(source, line)
            if parsed is not None:
                return parsed.first_line
        return None

    def find_block_start(self, source: TextSource, anchor_line: int) -> int | None:
        """Find the first line of the stack trace block containing a line.

        Scans upward from the anchor across frames and continuation markers.
        If nothing above the anchor parses but the anchor sits on a marker,
        the first frame below it is used instead.

        Args:
            source: Text to read from
            anchor_line: 1-based line to start from

        Returns:
            The first line of the block, or None if there is no block
        """
        line = anchor_line
        beginning: int | None = None

        while line >= 1:
            parsed = self.parse_at(source, line)
            if parsed is not None:
                beginning = parsed.first_line
                line = parsed.first_line - 1
            elif self.is_continuation_line(source.get_line(line)):
                line -= 1
            else:
                break

        if beginning is not None:
            return beginning

        # Anchor on a marker line with no frames above it
        line = anchor_line
        while line <= source.line_count and self.is_continuation_line(source.get_line(line)):
            line += 1
            if line <= source.line_count:
                parsed = self.parse_at(source, line)
                if parsed is not None:
                    return parsed.first_line

        return None

    def assemble(self, source: TextSource, anchor_line: int) -> AssembledTrace:
        """Assemble the stack trace block containing a line.

        Each "Caused by" section is placed ahead of the frames collected so
        far, so the result reads innermost call first. Adjacent duplicate
        frames are collapsed.

        Args:
            source: Text to read from
            anchor_line: 1-based line inside (or at the start of) the block

        Returns:
            The reduced frames, the index of the frame under the anchor line
            and the physical extent of the block

        Raises:
            StackTraceParseError: If no stack trace is found around the line
        """
        if source.line_count < 1 or not 1 <= anchor_line <= source.line_count:
            raise StackTraceParseError(f"Line {anchor_line} is outside the text")

        first_line = self.find_block_start(source, anchor_line)
        if first_line is None:
            raise StackTraceParseError("No stack trace found")

        frames: list[Frame] = []
        insert_at = 0
        previous: Frame | None = None
        anchor_frame: Frame | None = None
        last_line = first_line
        line = first_line

        while line <= source.line_count:
            parsed = self.parse_at(source, line)

            if parsed is not None:
                if not parsed.frame.same_location(previous):
                    frames.insert(insert_at, parsed.frame)
                    insert_at += 1
                    previous = parsed.frame

                if parsed.covers(anchor_line):
                    anchor_frame = parsed.frame

                last_line = parsed.last_line
                line = parsed.last_line + 1
                continue

            text = source.get_line(line)
            if self.is_caused_by_line(text):
                insert_at = 0
                previous = None
            elif not self.is_more_line(text):
                break

            last_line = line
            line += 1

        assert frames, "assembled block must contain a frame"

        reduced = reduce_frames(frames)

        cursor_index: int | None = None
        if anchor_frame is not None:
            cursor_index = next(
                index
                for index, frame in enumerate(reduced, start=1)
                if frame.same_location(anchor_frame)
            )

        log.debug(
            "stack_trace_assembled",
            frames_count=len(reduced),
            cursor_index=cursor_index,
            first_line=first_line,
            last_line=last_line,
        )

        return AssembledTrace(
            frames=reduced,
            cursor_index=cursor_index,
            first_line=first_line,
            last_line=last_line,
        )

    def find_next_block(self, source: TextSource, line: int) -> int | None:
        """Find the first line of the stack trace after the one at a line.

        Args:
            source: Text to read from
            line: 1-based line, inside a block or between blocks

        Returns:
            First line of the next block, or None if there is none
        """
        current = line

        # Skip past the end of the current block
        while current <= source.line_count:
            if self.is_continuation_line(source.get_line(current)):
                current += 1
                continue
            parsed = self.parse_at(source, current)
            if parsed is None:
                break
            current = parsed.last_line + 1

        while current <= source.line_count:
            if not self.is_continuation_line(source.get_line(current)):
                parsed = self.parse_at(source, current)
                if parsed is not None:
                    return parsed.first_line
            current += 1

        return None

    def find_previous_block(self, source: TextSource, line: int) -> int | None:
        """Find the first line of the stack trace before the one at a line.

        Args:
            source: Text to read from
            line: 1-based line, inside a block or between blocks

        Returns:
            First line of the previous block, or None if there is none
        """
        current = line

        # Skip past the beginning of the current block
        while current >= 1:
            if self.is_continuation_line(source.get_line(current)):
                current -= 1
                continue
            parsed = self.parse_at(source, current)
            if parsed is None:
                break
            current = parsed.first_line - 1

        log.debug("searching_previous_stack_trace", from_line=current)

        last_frame_line: int | None = None
        while current >= 1:
            if not self.is_continuation_line(source.get_line(current)):
                parsed = self.parse_at(source, current)
                if parsed is not None:
                    last_frame_line = parsed.first_line
                    break
            current -= 1

        if last_frame_line is None:
            return None

        first_frame_line = last_frame_line
        current = last_frame_line

        while current >= 1:
            if self.is_continuation_line(source.get_line(current)):
                current -= 1
                continue
            parsed = self.parse_at(source, current)
            if parsed is None:
                break
            first_frame_line = parsed.first_line
            current = parsed.first_line - 1

        return first_frame_line
