"""Tests for FrameAssembler functionality."""

import pytest

from java_stack_nav.adapters.text.lines import ArrayTextSource
from java_stack_nav.core.assembler import FrameAssembler
from java_stack_nav.models.frame import Frame
from java_stack_nav.utils.async_helpers import StackTraceParseError


@pytest.fixture
def assembler() -> FrameAssembler:
    """Create a FrameAssembler instance."""
    return FrameAssembler()


class TestLineClassification:
    """Tests for the continuation line predicates."""

    def test_caused_by_line(self, assembler: FrameAssembler) -> None:
        assert assembler.is_caused_by_line("Caused by: java.io.IOException: nope")
        assert not assembler.is_caused_by_line("\tat a.B.c(B.java:1)")

    def test_more_line(self, assembler: FrameAssembler) -> None:
        assert assembler.is_more_line("\t... 12 more")
        assert not assembler.is_more_line("\t... more")

    def test_continuation_line(self, assembler: FrameAssembler) -> None:
        assert assembler.is_continuation_line("Caused by: x")
        assert assembler.is_continuation_line("    ... 3 more")
        assert not assembler.is_continuation_line("Some unrelated log line")


class TestParseAt:
    """Tests for parsing physical lines, including wrapped frames."""

    def test_single_line(self, assembler: FrameAssembler, simple_trace: str) -> None:
        """Test that a complete frame line spans only itself."""
        parsed = assembler.parse_at(ArrayTextSource.from_string(simple_trace), 2)
        assert parsed is not None
        assert parsed.frame == Frame("com.example.app.Service", "process", "Service.java", 42)
        assert (parsed.first_line, parsed.last_line) == (2, 2)

    def test_wrapped_first_half(self, assembler: FrameAssembler, wrapped_trace: str) -> None:
        """Test that the first half of a wrapped frame joins with the line below."""
        parsed = assembler.parse_at(ArrayTextSource.from_string(wrapped_trace), 2)
        assert parsed is not None
        assert parsed.frame == Frame("com.example.app.Service", "process", "Service.java", 42)
        assert (parsed.first_line, parsed.last_line) == (2, 3)

    def test_wrapped_second_half(self, assembler: FrameAssembler, wrapped_trace: str) -> None:
        """Test that the second half of a wrapped frame joins with the line above."""
        parsed = assembler.parse_at(ArrayTextSource.from_string(wrapped_trace), 3)
        assert parsed is not None
        assert parsed.frame.method_name == "process"
        assert (parsed.first_line, parsed.last_line) == (2, 3)

    def test_does_not_join_parseable_neighbour(self, assembler: FrameAssembler) -> None:
        """Test that a line is never joined with a neighbour that is a frame by itself."""
        source = ArrayTextSource(["\tat a.B.c(B.java:1)", "garbage", "\tat a.B.d(B.java:2)"])
        assert assembler.parse_at(source, 2) is None

    def test_non_frame(self, assembler: FrameAssembler, simple_trace: str) -> None:
        assert assembler.parse_at(ArrayTextSource.from_string(simple_trace), 1) is None


class TestAssemble:
    """Tests for assembling a whole block."""

    def test_simple_trace(self, assembler: FrameAssembler, simple_trace: str) -> None:
        """Test frames, cursor and extent of a plain trace."""
        trace = assembler.assemble(ArrayTextSource.from_string(simple_trace), 3)

        assert [frame.class_name for frame in trace.frames] == [
            "com.example.app.Service",
            "com.example.app.Controller",
            "com.example.app.Main",
        ]
        assert trace.cursor_index == 2
        assert (trace.first_line, trace.last_line) == (2, 4)

    def test_anchor_outside_block_raises(
        self, assembler: FrameAssembler, simple_trace: str
    ) -> None:
        """Test that an anchor on a line outside any block fails."""
        with pytest.raises(StackTraceParseError):
            assembler.assemble(ArrayTextSource.from_string(simple_trace), 1)

    def test_caused_by_placed_first(self, assembler: FrameAssembler) -> None:
        """Test that two frames, a cause and one more frame assemble cause first."""
        text = "\n".join(
            [
                "\tat com.example.A.one(A.java:1)",
                "\tat com.example.B.two(B.java:2)",
                "Caused by: java.lang.Error",
                "\tat com.example.C.three(C.java:3)",
            ]
        )
        trace = assembler.assemble(ArrayTextSource.from_string(text), 1)

        assert len(trace.frames) == 3
        assert [frame.class_name for frame in trace.frames] == [
            "com.example.C",
            "com.example.A",
            "com.example.B",
        ]

    def test_nested_causes(self, assembler: FrameAssembler) -> None:
        """Test that each later cause goes ahead of everything collected so far."""
        text = "\n".join(
            [
                "\tat x.Outer.a(Outer.java:1)",
                "Caused by: java.lang.Error",
                "\tat x.Middle.b(Middle.java:2)",
                "\t... 1 more",
                "Caused by: java.lang.Error",
                "\tat x.Inner.c(Inner.java:3)",
                "\t... 2 more",
            ]
        )
        trace = assembler.assemble(ArrayTextSource.from_string(text), 1)
        assert [frame.class_name for frame in trace.frames] == ["x.Inner", "x.Middle", "x.Outer"]
        assert trace.last_line == 7

    def test_caused_by_fixture(self, assembler: FrameAssembler, caused_by_trace: str) -> None:
        """Test the cursor lands on the cause frame under the anchor."""
        trace = assembler.assemble(ArrayTextSource.from_string(caused_by_trace), 5)

        assert trace.frames[0] == Frame("com.example.io.Reader", "read", "Reader.java", 99)
        assert len(trace.frames) == 3
        assert trace.cursor_index == 1
        assert (trace.first_line, trace.last_line) == (2, 6)

    def test_anchor_on_caused_by_line(
        self, assembler: FrameAssembler, caused_by_trace: str
    ) -> None:
        """Test that an anchor on a marker line loads the block without a cursor frame."""
        trace = assembler.assemble(ArrayTextSource.from_string(caused_by_trace), 4)
        assert len(trace.frames) == 3
        assert trace.cursor_index is None

    def test_leading_marker_line(self, assembler: FrameAssembler) -> None:
        """Test that a block starting with a marker line is found from the marker."""
        source = ArrayTextSource(["Caused by: java.lang.Error", "\tat x.Y.z(Y.java:4)"])
        trace = assembler.assemble(source, 1)
        assert trace.frames == (Frame("x.Y", "z", "Y.java", 4),)

    def test_wrapped_trace(self, assembler: FrameAssembler, wrapped_trace: str) -> None:
        """Test that a wrapped frame is assembled once, with its neighbours."""
        trace = assembler.assemble(ArrayTextSource.from_string(wrapped_trace), 4)

        assert [frame.method_name for frame in trace.frames] == ["process", "main"]
        assert trace.cursor_index == 2
        assert trace.first_line == 2

    def test_constructor_frame_inside_trace(self, assembler: FrameAssembler) -> None:
        """Test that constructor frames do not cut the block short."""
        source = ArrayTextSource.from_string(
            "java.lang.IllegalArgumentException: bad size\n"
            "\tat com.example.Widget.check(Widget.java:10)\n"
            "\tat com.example.Widget.<init>(Widget.java:5)\n"
            "\tat com.example.Widget.<clinit>(Widget.java:2)\n"
            "\tat com.example.Main.main(Main.java:3)\n"
        )
        trace = assembler.assemble(source, 2)

        assert [(frame.class_name, frame.method_name) for frame in trace.frames] == [
            ("com.example.Widget", "check"),
            ("com.example.Widget", "<init>"),
            ("com.example.Widget", "<clinit>"),
            ("com.example.Main", "main"),
        ]
        assert (trace.first_line, trace.last_line) == (2, 5)

    def test_crlf_wrapped_trace(self, assembler: FrameAssembler, wrapped_trace: str) -> None:
        """Test that a wrapped frame in CRLF text is still joined."""
        source = ArrayTextSource.from_string(wrapped_trace.replace("\n", "\r\n"))
        trace = assembler.assemble(source, 4)
        assert [frame.method_name for frame in trace.frames] == ["process", "main"]

    def test_adjacent_duplicates_collapsed(self, assembler: FrameAssembler) -> None:
        """Test that repeated frames from recursion collapse into one."""
        source = ArrayTextSource(
            [
                "\tat x.Rec.go(Rec.java:9)",
                "\tat x.Rec.go(Rec.java:9)",
                "\tat x.Rec.go(Rec.java:9)",
                "\tat x.Main.main(Main.java:2)",
            ]
        )
        trace = assembler.assemble(source, 3)
        assert len(trace.frames) == 2
        assert trace.cursor_index == 1

    def test_no_trace(self, assembler: FrameAssembler) -> None:
        """Test that text without frames raises StackTraceParseError."""
        with pytest.raises(StackTraceParseError, match="No stack trace found"):
            assembler.assemble(ArrayTextSource(["hello", "world"]), 1)

    def test_anchor_out_of_range(self, assembler: FrameAssembler, simple_trace: str) -> None:
        with pytest.raises(StackTraceParseError):
            assembler.assemble(ArrayTextSource.from_string(simple_trace), 99)


class TestBlockSearch:
    """Tests for finding neighbouring stack traces."""

    def test_find_first_frame_line(self, assembler: FrameAssembler, multiple_traces: str) -> None:
        source = ArrayTextSource.from_string(multiple_traces)
        assert assembler.find_first_frame_line(source) == 3
        assert assembler.find_first_frame_line(source, 5) == 10

    def test_find_first_frame_line_none(self, assembler: FrameAssembler) -> None:
        assert assembler.find_first_frame_line(ArrayTextSource(["nothing here"])) is None

    def test_find_next_block(self, assembler: FrameAssembler, multiple_traces: str) -> None:
        """Test that the next block is found from inside the current one."""
        source = ArrayTextSource.from_string(multiple_traces)
        assert assembler.find_next_block(source, 3) == 10
        assert assembler.find_next_block(source, 4) == 10

    def test_find_next_block_from_before(
        self, assembler: FrameAssembler, multiple_traces: str
    ) -> None:
        source = ArrayTextSource.from_string(multiple_traces)
        assert assembler.find_next_block(source, 1) == 3

    def test_find_next_block_at_end(self, assembler: FrameAssembler, multiple_traces: str) -> None:
        source = ArrayTextSource.from_string(multiple_traces)
        assert assembler.find_next_block(source, 10) is None

    def test_find_previous_block(self, assembler: FrameAssembler, multiple_traces: str) -> None:
        """Test that the previous block's first frame line is returned."""
        source = ArrayTextSource.from_string(multiple_traces)
        assert assembler.find_previous_block(source, 11) == 3
        assert assembler.find_previous_block(source, 8) == 3

    def test_find_previous_block_at_start(
        self, assembler: FrameAssembler, multiple_traces: str
    ) -> None:
        source = ArrayTextSource.from_string(multiple_traces)
        assert assembler.find_previous_block(source, 4) is None
