"""Deduplication of assembled frame sequences."""

from __future__ import annotations

from collections.abc import Iterable

from java_stack_nav.models.frame import Frame, FrameSequence


def reduce_frames(frames: Iterable[Frame]) -> FrameSequence:
    """Collapse runs of consecutive identical frames into one.

    Identity is ``Frame.same_location``: class, file and line. The first
    frame of each run is kept.

    Args:
        frames: Frames in sequence order

    Returns:
        The frames with adjacent repeats removed
    """
    reduced: list[Frame] = []

    for frame in frames:
        if not reduced or not frame.same_location(reduced[-1]):
            reduced.append(frame)

    return tuple(reduced)


def unique_frames(frames: Iterable[Frame]) -> list[tuple[int, Frame]]:
    """Drop every frame already seen earlier in the sequence.

    Args:
        frames: Frames in sequence order

    Returns:
        ``(index, frame)`` pairs for first occurrences, with 1-based indexes
        into the original sequence
    """
    seen: list[Frame] = []
    result: list[tuple[int, Frame]] = []

    for index, frame in enumerate(frames, start=1):
        if any(frame.same_location(previous) for previous in seen):
            continue
        seen.append(frame)
        result.append((index, frame))

    return result
