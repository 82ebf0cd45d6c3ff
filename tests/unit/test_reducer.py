"""Tests for frame sequence reduction."""

import pytest

from java_stack_nav.core.reducer import reduce_frames, unique_frames
from java_stack_nav.models.frame import Frame

A = Frame("x.A", "a", "A.java", 1)
A_OTHER_METHOD = Frame("x.A", "other", "A.java", 1)
B = Frame("x.B", "b", "B.java", 2)
C = Frame("x.C", "c", "C.java", 3)


class TestReduceFrames:
    """Tests for reduce_frames."""

    def test_collapses_runs(self) -> None:
        assert reduce_frames([A, A, B, B, B, A]) == (A, B, A)

    def test_keeps_first_of_run(self) -> None:
        """Test that the method name of the first frame in a run survives."""
        assert reduce_frames([A, A_OTHER_METHOD, B]) == (A, B)

    def test_empty(self) -> None:
        assert reduce_frames([]) == ()

    @pytest.mark.parametrize(
        "frames",
        [
            [],
            [A],
            [A, A, A],
            [A, B, A, B],
            [C, C, B, A, A, C],
        ],
    )
    def test_idempotent(self, frames: list[Frame]) -> None:
        """Test reduce(reduce(s)) == reduce(s)."""
        once = reduce_frames(frames)
        assert reduce_frames(once) == once


class TestUniqueFrames:
    """Tests for unique_frames."""

    def test_drops_non_adjacent_repeats(self) -> None:
        """Test that repeats are dropped with their original indexes kept."""
        assert unique_frames([A, B, A, C, B]) == [(1, A), (2, B), (4, C)]

    def test_method_name_ignored(self) -> None:
        assert unique_frames([A, B, A_OTHER_METHOD]) == [(1, A), (2, B)]
