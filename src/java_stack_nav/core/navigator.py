"""Stateful navigation over a loaded stack trace.

This module implements the Navigator class: it holds at most one frame
sequence and a 1-based cursor into it. Frame 1 is the innermost call (the
"bottom"); frame N is the outermost call (the "top").

Loading always replaces the whole state. A failed load leaves the previous
state untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from java_stack_nav.adapters.text.lines import ArrayTextSource
from java_stack_nav.core.assembler import FrameAssembler
from java_stack_nav.core.exporters import jump_to_frame
from java_stack_nav.models.frame import Frame, FrameSequence
from java_stack_nav.utils.async_helpers import (
    DeobfuscationError,
    NoStackTraceLoadedError,
    StackTraceParseError,
)

if TYPE_CHECKING:
    from java_stack_nav.core.deobfuscator import Deobfuscator
    from java_stack_nav.core.resolver import Resolver
    from java_stack_nav.interfaces.editor import Editor
    from java_stack_nav.interfaces.sinks import JumpSink
    from java_stack_nav.interfaces.text_source import TextSource

log = structlog.get_logger()


class Navigator:
    """Holds the loaded stack trace and moves a cursor over it.

    Responsibilities:
    - Load a trace from the cursor, a register, or literal text
    - Deobfuscate freshly loaded traces when a mapping file is selected
    - Keep the cursor within ``[1, len(frames)]``
    - Resolve and jump to the frame under the cursor after every move

    Example:
        navigator = Navigator(editor, resolver, jump)
        await navigator.load(None)
        await navigator.step_toward_top()
    """

    def __init__(
        self,
        editor: Editor,
        resolver: Resolver,
        jump: JumpSink,
        deobfuscator: Deobfuscator | None = None,
        assembler: FrameAssembler | None = None,
    ) -> None:
        """Initialize the Navigator in the empty state.

        Args:
            editor: Source of the cursor context and registers
            resolver: Resolves frames to files before jumping
            jump: Sink that opens files
            deobfuscator: Used on load when a mapping file is set
            assembler: FrameAssembler to parse with
        """
        self._editor = editor
        self._resolver = resolver
        self._jump = jump
        self._deobfuscator = deobfuscator
        self._assembler = assembler or FrameAssembler()
        self._frames: FrameSequence | None = None
        self._cursor = 0
        self.mapping_file: str | None = None

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def frames(self) -> FrameSequence | None:
        """The loaded frames, or None while empty."""
        return self._frames

    @property
    def cursor(self) -> int:
        """1-based cursor, 0 while empty."""
        return self._cursor

    @property
    def is_loaded(self) -> bool:
        return self._frames is not None

    @property
    def current_frame(self) -> Frame:
        """The frame under the cursor.

        Raises:
            NoStackTraceLoadedError: If nothing is loaded
        """
        frames = self._require_frames()
        return frames[self._cursor - 1]

    def _require_frames(self) -> FrameSequence:
        if self._frames is None:
            raise NoStackTraceLoadedError("No Java stack trace loaded for navigation")

        assert len(self._frames) >= 1
        assert 1 <= self._cursor <= len(self._frames)
        return self._frames

    def _install(self, frames: FrameSequence, cursor: int) -> None:
        assert len(frames) >= 1
        assert 1 <= cursor <= len(frames)
        self._frames = frames
        self._cursor = cursor

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def _deobfuscate_if_needed(
        self, frames: FrameSequence, cursor: int
    ) -> tuple[FrameSequence, int]:
        if self.mapping_file is None or self._deobfuscator is None:
            return frames, cursor

        try:
            deobfuscated = await self._deobfuscator.deobfuscate(frames, self.mapping_file)
        except DeobfuscationError as e:
            log.warning("deobfuscation_skipped", mapping_file=self.mapping_file, error=str(e))
            return frames, cursor

        if len(deobfuscated) != len(frames):
            cursor = 1
        return deobfuscated, cursor

    async def load_from_cursor_context(self) -> FrameSequence:
        """Load the stack trace around the editor cursor.

        The cursor is placed on the frame under the editor cursor, or on 1.

        Raises:
            StackTraceParseError: If there is no stack trace at the cursor
        """
        source: TextSource = self._editor.text()
        trace = self._assembler.assemble(source, self._editor.cursor_line)
        frames, cursor = await self._deobfuscate_if_needed(trace.frames, trace.cursor_index or 1)
        self._install(frames, cursor)
        log.debug("stack_trace_loaded", source="cursor", frames_count=len(frames), cursor=cursor)
        return frames

    async def load_from_text(self, text: str) -> FrameSequence:
        """Load the first stack trace found in some text.

        Raises:
            StackTraceParseError: If the text holds no stack trace
        """
        source = ArrayTextSource.from_string(text)
        first_line = self._assembler.find_first_frame_line(source)
        if first_line is None:
            raise StackTraceParseError("Could not load stack trace from supplied text")

        trace = self._assembler.assemble(source, first_line)
        frames, _ = await self._deobfuscate_if_needed(trace.frames, 1)
        self._install(frames, 1)
        log.debug("stack_trace_loaded", source="text", frames_count=len(frames))
        return frames

    async def load_from_named_source(self, name: str) -> FrameSequence:
        """Load the first stack trace found in a named register.

        Raises:
            ValueError: If the name is not a single character
            StackTraceParseError: If the register holds no stack trace
        """
        if len(name) != 1:
            raise ValueError(f"Invalid register name {name!r}")

        try:
            return await self.load_from_text(self._editor.get_register(name))
        except StackTraceParseError as e:
            raise StackTraceParseError(f"Could not load stack trace from register {name}") from e

    async def load(self, selector: str | None) -> FrameSequence:
        """Load a stack trace as chosen by a command argument.

        Args:
            selector: A single character names a register, longer text is
                parsed directly, empty or None uses the editor cursor

        Raises:
            StackTraceParseError: If no stack trace was found
        """
        if selector and len(selector) == 1:
            return await self.load_from_named_source(selector)
        if selector:
            return await self.load_from_text(selector)
        return await self.load_from_cursor_context()

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    async def _move_to(self, position: int) -> Frame:
        frames = self._require_frames()
        assert 1 <= position <= len(frames)

        self._cursor = position
        frame = frames[position - 1]

        log.debug("stack_trace_cursor_moved", cursor=position, frames_count=len(frames))
        await jump_to_frame(frame, self._resolver, self._jump)
        return frame

    async def goto_current(self) -> Frame:
        """Jump to the frame under the cursor again."""
        self._require_frames()
        return await self._move_to(self._cursor)

    async def goto_top(self) -> Frame:
        """Move to the outermost frame."""
        return await self._move_to(len(self._require_frames()))

    async def goto_bottom(self) -> Frame:
        """Move to the innermost frame."""
        self._require_frames()
        return await self._move_to(1)

    async def step_toward_top(self) -> Frame:
        """Move one frame outward, staying put at the top."""
        frames = self._require_frames()
        if self._cursor == len(frames):
            log.info("at_top_of_stack_trace")
            return await self._move_to(self._cursor)
        return await self._move_to(self._cursor + 1)

    async def step_toward_bottom(self) -> Frame:
        """Move one frame inward, staying put at the bottom."""
        self._require_frames()
        if self._cursor == 1:
            log.info("at_bottom_of_stack_trace")
            return await self._move_to(1)
        return await self._move_to(self._cursor - 1)

    async def goto_index(self, index: int) -> Frame:
        """Move to an absolute 1-based frame index.

        Raises:
            ValueError: If the index is out of range
        """
        frames = self._require_frames()
        if not 1 <= index <= len(frames):
            raise ValueError(f"Frame index {index} outside 1..{len(frames)}")
        return await self._move_to(index)

    def sync_cursor(self, index: int) -> None:
        """Set the cursor without jumping, after the user picked a frame."""
        frames = self._require_frames()
        if not 1 <= index <= len(frames):
            raise ValueError(f"Frame index {index} outside 1..{len(frames)}")
        self._cursor = index
