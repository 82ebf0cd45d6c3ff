"""Adapters turning frames into jump, diagnostics and pick-list actions."""

from __future__ import annotations

import structlog

from java_stack_nav.core.reducer import unique_frames
from java_stack_nav.core.resolver import Resolver
from java_stack_nav.interfaces.sinks import JumpSink
from java_stack_nav.models.frame import Frame, FrameSequence
from java_stack_nav.models.items import DiagnosticItem, PickItem
from java_stack_nav.utils.async_helpers import ExportError, ResolutionError

log = structlog.get_logger()


async def jump_to_frame(frame: Frame, resolver: Resolver, jump: JumpSink) -> str:
    """Resolve a frame and move the user to it.

    Returns:
        The path jumped to

    Raises:
        ResolutionError: If the frame cannot be resolved
    """
    log.debug(
        "jumping_to_frame",
        class_name=frame.class_name,
        file_name=frame.file_name,
        line_number=frame.line_number,
    )
    path = await resolver.resolve(frame)
    jump.go_to(path, frame.line_number)
    return path


async def _resolve_or_none(frame: Frame, resolver: Resolver) -> str | None:
    try:
        return await resolver.resolve(frame)
    except ResolutionError as e:
        log.debug("frame_not_exported", class_name=frame.class_name, reason=str(e))
        return None


async def to_diagnostic_items(frames: FrameSequence, resolver: Resolver) -> list[DiagnosticItem]:
    """Convert frames to diagnostics list entries.

    Repeated frames are dropped and frames that cannot be resolved are
    omitted.

    Raises:
        ExportError: If no frame could be converted
    """
    items: list[DiagnosticItem] = []

    for _, frame in unique_frames(frames):
        path = await _resolve_or_none(frame, resolver)
        if path is None:
            continue
        items.append(
            DiagnosticItem(
                path=path,
                line_number=frame.line_number,
                label=frame.class_name,
            )
        )

    if not items:
        raise ExportError("Could not convert stack trace to diagnostics list items")

    return items


def format_pick_label(frame: Frame, width: int) -> str:
    """Render ``class.method`` padded to ``width``, then ``file:line``."""
    padding = " " * (width - len(frame.qualified_method) + 2)
    location = str(frame.line_number)
    if frame.file_name:
        location = f"{frame.file_name}:{location}"
    return f"{frame.qualified_method}{padding}{location}"


async def to_pick_items(frames: FrameSequence, resolver: Resolver) -> list[PickItem]:
    """Convert frames to pick list entries.

    Each item remembers the 1-based index of its frame in ``frames`` so a
    selection can be mapped back to a cursor position.

    Raises:
        ExportError: If no frame could be converted
    """
    resolved: list[tuple[int, Frame, str]] = []

    for index, frame in unique_frames(frames):
        path = await _resolve_or_none(frame, resolver)
        if path is not None:
            resolved.append((index, frame, path))

    if not resolved:
        raise ExportError("Could not convert stack trace to pick list items")

    width = max(len(frame.qualified_method) for _, frame, _ in resolved)

    return [
        PickItem(
            path=path,
            line_number=frame.line_number,
            label=format_pick_label(frame, width),
            frame=frame,
            index=index,
        )
        for index, frame, path in resolved
    ]
