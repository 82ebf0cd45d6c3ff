"""User commands for navigating Java stack traces in an editor.

This module implements the StackTraceCommands class, the boundary between the
editor and the navigation core. Each command runs to completion as one task;
every failure is reported through the log and turned into a False result,
never raised to the editor.

Commands taking a ``selector`` accept a single-character register name,
literal stack trace text, or None/"" for the text around the cursor.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import TYPE_CHECKING

import structlog

from java_stack_nav.adapters.filter.command import CommandTextFilter
from java_stack_nav.core.assembler import FrameAssembler
from java_stack_nav.core.deobfuscator import Deobfuscator
from java_stack_nav.core.exporters import jump_to_frame, to_diagnostic_items, to_pick_items
from java_stack_nav.core.navigator import Navigator
from java_stack_nav.core.resolver import Resolver
from java_stack_nav.models.frame import Frame
from java_stack_nav.utils.async_helpers import NavigatorError

if TYPE_CHECKING:
    from java_stack_nav.config.schema import NavigatorConfig
    from java_stack_nav.interfaces.editor import Editor
    from java_stack_nav.interfaces.provider import SymbolProvider
    from java_stack_nav.interfaces.sinks import (
        DiagnosticsSink,
        FilePrompt,
        JumpSink,
        PickerSink,
    )

log = structlog.get_logger()


class StackTraceCommands:
    """Binds the navigation core to one editing context.

    Responsibilities:
    - Own the Navigator, Resolver and Deobfuscator for the context
    - Remember the selected obfuscation mapping file
    - Report failures as log events at the boundary

    Example:
        commands = StackTraceCommands(
            editor, resolver, deobfuscator, jump, quickfix, picker, prompt
        )
        await commands.go_to_current(None)
        await commands.go_up()
    """

    def __init__(
        self,
        editor: Editor,
        resolver: Resolver,
        deobfuscator: Deobfuscator,
        jump: JumpSink,
        diagnostics: DiagnosticsSink,
        picker: PickerSink,
        file_prompt: FilePrompt,
        mappings_dir: str | None = None,
    ) -> None:
        """Initialize the commands for an editing context.

        Args:
            editor: The editor the commands act on
            resolver: Resolves frames to files
            deobfuscator: Deobfuscates traces with a mapping file
            jump: Sink that opens files
            diagnostics: Diagnostics (quickfix) list sink
            picker: Pick list sink
            file_prompt: Prompt used to choose a mapping file
            mappings_dir: Directory the mapping file prompt starts in
        """
        self._editor = editor
        self._resolver = resolver
        self._deobfuscator = deobfuscator
        self._jump = jump
        self._diagnostics = diagnostics
        self._picker = picker
        self._file_prompt = file_prompt
        self._mappings_dir = mappings_dir
        self._assembler = FrameAssembler()
        self.navigator = Navigator(
            editor,
            resolver,
            jump,
            deobfuscator=deobfuscator,
            assembler=self._assembler,
        )

    @property
    def mapping_file(self) -> str | None:
        """The selected obfuscation mapping file."""
        return self.navigator.mapping_file

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    async def _load(self, selector: str | None) -> bool:
        try:
            await self.navigator.load(selector)
        except (NavigatorError, ValueError) as e:
            log.error("stack_trace_load_failed", selector=selector, error=str(e))
            return False
        return True

    async def _navigate(self, move: Callable[[], Awaitable[Frame]]) -> bool:
        try:
            await move()
        except NavigatorError as e:
            log.error("stack_trace_navigation_failed", error=str(e))
            return False
        return True

    async def go_to_current(self, selector: str | None = None) -> bool:
        """Load a trace and jump to the frame under the cursor."""
        if not await self._load(selector):
            return False
        return await self._navigate(self.navigator.goto_current)

    async def go_to_bottom(self, selector: str | None = None) -> bool:
        """Load a trace and jump to its innermost frame."""
        if not await self._load(selector):
            return False
        return await self._navigate(self.navigator.goto_bottom)

    async def go_to_top(self, selector: str | None = None) -> bool:
        """Load a trace and jump to its outermost frame."""
        if not await self._load(selector):
            return False
        return await self._navigate(self.navigator.goto_top)

    async def go_up(self) -> bool:
        """Jump one frame toward the top of the loaded trace."""
        return await self._navigate(self.navigator.step_toward_top)

    async def go_down(self) -> bool:
        """Jump one frame toward the bottom of the loaded trace."""
        return await self._navigate(self.navigator.step_toward_bottom)

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    async def send_to_diagnostics(self, selector: str | None = None) -> bool:
        """Load a trace and replace the diagnostics list with its frames."""
        if not await self._load(selector):
            return False

        frames = self.navigator.frames
        assert frames is not None

        try:
            items = await to_diagnostic_items(frames, self._resolver)
        except NavigatorError as e:
            log.error("diagnostics_export_failed", error=str(e))
            return False

        self._diagnostics.set_items(items)
        log.info("stack_trace_sent_to_diagnostics", items_count=len(items))
        return True

    async def pick(self, selector: str | None = None) -> bool:
        """Load a trace and let the user pick a frame to jump to."""
        if not await self._load(selector):
            return False

        frames = self.navigator.frames
        assert frames is not None

        try:
            if len(frames) == 1:
                await jump_to_frame(frames[0], self._resolver, self._jump)
                return True

            items = await to_pick_items(frames, self._resolver)
        except NavigatorError as e:
            log.error("stack_trace_pick_failed", error=str(e))
            return False

        choice = await self._picker.pick(items, self.navigator.cursor)
        if choice is None:
            log.debug("stack_trace_pick_cancelled")
            return False

        self._jump.go_to(choice.path, choice.line_number)

        # Another command may have loaded a different trace meanwhile
        if self.navigator.frames is frames:
            self.navigator.sync_cursor(choice.index)

        return True

    # -------------------------------------------------------------------------
    # Deobfuscation
    # -------------------------------------------------------------------------

    async def select_mapping_file(self, path: str | None = None) -> bool:
        """Select the obfuscation mapping file, prompting when no path is given."""
        if path:
            self.navigator.mapping_file = path
            log.debug("mapping_file_selected", path=path)
            return True

        chosen = await self._file_prompt.pick_file("Obfuscation File: ", self._mappings_dir)
        if not chosen:
            log.debug("mapping_file_selection_cancelled")
            return False

        self.navigator.mapping_file = chosen
        log.debug("mapping_file_selected", path=chosen)
        return True

    def forget_mapping_file(self) -> None:
        """Stop deobfuscating loaded traces."""
        self.navigator.mapping_file = None

    async def deobfuscate(self, register: str | None = None) -> bool:
        """Deobfuscate a register in place, or the trace around the cursor.

        Args:
            register: Single-character register name, or None for the cursor
        """
        if register and len(register) > 1:
            log.error("invalid_register_name", register=register)
            return False

        if self.mapping_file is None and not await self.select_mapping_file():
            log.debug("no_mapping_file_selected")
            return False

        mapping_file = self.mapping_file
        assert mapping_file is not None

        try:
            if register:
                text = self._editor.get_register(register)
                deobfuscated = await self._deobfuscator.deobfuscate_text(text, mapping_file)
                self._editor.set_register(register, deobfuscated)
                log.info("register_deobfuscated", register=register)
                return True

            source = self._editor.text()
            trace = self._assembler.assemble(source, self._editor.cursor_line)
            assert trace.last_line >= trace.first_line

            log.debug(
                "deobfuscating_block",
                first_line=trace.first_line,
                last_line=trace.last_line,
            )
            text = "".join(
                source.get_line(line) + "\n"
                for line in range(trace.first_line, trace.last_line + 1)
            )
            deobfuscated = await self._deobfuscator.deobfuscate_text(text, mapping_file)
            self._editor.replace_lines(trace.first_line, trace.last_line, deobfuscated)
        except NavigatorError as e:
            log.error("deobfuscation_failed", register=register, error=str(e))
            return False

        return True

    # -------------------------------------------------------------------------
    # Buffer movement
    # -------------------------------------------------------------------------

    def go_to_next_stack_trace(self) -> bool:
        """Move the editor cursor to the start of the next stack trace."""
        line = self._assembler.find_next_block(self._editor.text(), self._editor.cursor_line)
        if line is None:
            log.error("no_next_stack_trace")
            return False
        self._editor.set_cursor_line(line)
        return True

    def go_to_previous_stack_trace(self) -> bool:
        """Move the editor cursor to the start of the previous stack trace."""
        line = self._assembler.find_previous_block(self._editor.text(), self._editor.cursor_line)
        if line is None:
            log.error("no_previous_stack_trace")
            return False
        self._editor.set_cursor_line(line)
        return True

    @property
    def current_frame(self) -> Frame | None:
        """The frame under the navigator cursor, if a trace is loaded."""
        if not self.navigator.is_loaded:
            return None
        return self.navigator.current_frame


def create_commands(
    config: NavigatorConfig,
    editor: Editor,
    providers: Callable[[], Iterable[SymbolProvider]],
    jump: JumpSink,
    diagnostics: DiagnosticsSink,
    picker: PickerSink,
    file_prompt: FilePrompt,
) -> StackTraceCommands:
    """Create StackTraceCommands wired from configuration.

    Args:
        config: Navigator configuration
        editor: The editor the commands act on
        providers: Returns the symbol providers available right now
        jump: Sink that opens files
        diagnostics: Diagnostics list sink
        picker: Pick list sink
        file_prompt: Prompt used to choose a mapping file

    Returns:
        Configured StackTraceCommands
    """
    stack_trace = config.stack_trace
    resolver = Resolver(providers, allowed_providers=config.resolver.allowed_providers)
    text_filter = CommandTextFilter(
        stack_trace.deobfuscate_command,
        timeout=stack_trace.filter_timeout,
    )
    mappings_dir = stack_trace.obfuscation_mappings_dir

    return StackTraceCommands(
        editor=editor,
        resolver=resolver,
        deobfuscator=Deobfuscator(text_filter),
        jump=jump,
        diagnostics=diagnostics,
        picker=picker,
        file_prompt=file_prompt,
        mappings_dir=str(mappings_dir) if mappings_dir else None,
    )
