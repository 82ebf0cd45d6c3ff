"""Core business logic components.

This module exports the main business logic classes:
- FrameAssembler: Finds stack trace blocks and assembles frame sequences
- Navigator: Holds the loaded trace and moves a cursor over it
- Resolver: Maps frames to source files through symbol providers
- Deobfuscator: Round-trips frames through a mapping filter
- StackTraceCommands: Editor commands wrapping all of the above
"""

from java_stack_nav.core.assembler import FrameAssembler
from java_stack_nav.core.commands import StackTraceCommands, create_commands
from java_stack_nav.core.deobfuscator import Deobfuscator
from java_stack_nav.core.frame_grammar import parse_line
from java_stack_nav.core.navigator import Navigator
from java_stack_nav.core.reducer import reduce_frames, unique_frames
from java_stack_nav.core.resolver import ResolutionCache, Resolver, get_resolution_cache

__all__ = [
    "Deobfuscator",
    "FrameAssembler",
    "Navigator",
    "ResolutionCache",
    "Resolver",
    "StackTraceCommands",
    "create_commands",
    "get_resolution_cache",
    "parse_line",
    "reduce_frames",
    "unique_frames",
]
