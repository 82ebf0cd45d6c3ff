"""Tests for the frame line grammar."""

import pytest

from java_stack_nav.core.frame_grammar import (
    FILE_PRODUCTIONS,
    METHOD_PRODUCTIONS,
    QUALIFIER_PRODUCTIONS,
    match_call_site,
    outer_class_name,
    parse_line,
)
from java_stack_nav.models.frame import Frame


class TestParseLine:
    """Tests for parse_line on lines printed by the JVM."""

    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            (
                "           at com.example.MyClass.doSomething(MyClass.java:100)",
                Frame("com.example.MyClass", "doSomething", "MyClass.java", 100),
            ),
            (
                "           at com.example.MyClass.<init>(MyClass.java:1234)",
                Frame("com.example.MyClass", "<init>", "MyClass.java", 1234),
            ),
            (
                "some text to ignore           at com.example.MyClass.doSomething(MyClass.java:100)"
                " more text to ignore\n",
                Frame("com.example.MyClass", "doSomething", "MyClass.java", 100),
            ),
            (
                "at java.base/java.lang.Thread.dumpStack(Thread.java:1383)",
                Frame("java.lang.Thread", "dumpStack", "Thread.java", 1383),
            ),
            (
                "    at com.example.SomeClass$NestedClass.someMethod(Unknown Source)",
                Frame("com.example.SomeClass", "someMethod", "Unknown Source", 1),
            ),
            (
                "    at com.example.SomeClass$NestedClass.someMethod(SomeClass.java)",
                Frame("com.example.SomeClass", "someMethod", "SomeClass.java", 1),
            ),
            (
                "    at java.base/java.util.ArrayList$Itr.checkForComodification(Unknown Source)",
                Frame("java.util.ArrayList", "checkForComodification", "Unknown Source", 1),
            ),
            (
                "    at java.base/java.util.Collections$UnmodifiableCollection$1.next(Native Method)",
                Frame("java.util.Collections", "next", "Native Method", 1),
            ),
            (
                "        at com.example.MyClass.lambda$0(MyClass.java:596)",
                Frame("com.example.MyClass", "lambda$0", "MyClass.java", 596),
            ),
        ],
    )
    def test_parses_frame_lines(self, line: str, expected: Frame) -> None:
        """Test that each printed frame shape is recovered exactly."""
        assert parse_line(line) == expected

    def test_rejects_plain_text(self) -> None:
        """Test that ordinary text is not a frame."""
        assert parse_line("This is not a stack trace") is None

    def test_rejects_text_without_marker(self) -> None:
        """Test that a call site without the "at" marker is not a frame."""
        assert parse_line("com.example.MyClass.run(MyClass.java:1)") is None

    def test_rejects_exception_header(self) -> None:
        """Test that the exception header line is not a frame."""
        header = 'Exception in thread "main" java.lang.IllegalStateException: boom'
        assert parse_line(header) is None

    def test_rejects_caused_by_line(self) -> None:
        """Test that a "Caused by" line is not a frame."""
        assert parse_line("Caused by: java.io.IOException: inner failure") is None

    def test_rejects_non_numeric_line(self) -> None:
        """Test that a location with a non-numeric line is rejected."""
        assert parse_line("at com.example.MyClass.run(MyClass.java:abc)") is None

    def test_rejects_empty_line(self) -> None:
        """Test that an empty line is not a frame."""
        assert parse_line("") is None

    def test_skips_marker_inside_noise(self) -> None:
        """Test that an earlier "at " that is not a frame is skipped."""
        line = "look at this: at com.example.MyClass.run(MyClass.java:7)"
        assert parse_line(line) == Frame("com.example.MyClass", "run", "MyClass.java", 7)

    def test_zero_line_number_becomes_one(self) -> None:
        """Test that a ":0" location is read as a missing line number."""
        frame = parse_line("\tat com.example.Gen.run(Gen.java:0)")
        assert frame == Frame("com.example.Gen", "run", "Gen.java", 1)

    def test_constructor_call_site(self) -> None:
        """Test that the constructor marker is matched as the method name."""
        call_site = match_call_site("\tat com.example.Widget$Part.<init>(Widget.java:5)")
        assert call_site is not None
        assert call_site.class_name == "com.example.Widget$Part"
        assert call_site.method_name == "<init>"


class TestMethodProductions:
    """Tests for the method name alternatives."""

    @pytest.mark.parametrize(
        "method_name",
        [
            "<clinit>",
            "lambda$static$3",
            "lambda$12",
            "lambda$handle$0",
            "access$000",
            "run",
        ],
    )
    def test_method_shapes(self, method_name: str) -> None:
        """Test that every supported method shape is accepted verbatim."""
        frame = parse_line(f"\tat com.example.Worker.{method_name}(Worker.java:5)")
        assert frame is not None
        assert frame.method_name == method_name
        assert frame.class_name == "com.example.Worker"

    def test_production_order(self) -> None:
        """Test that the production tables are tried in a fixed order."""
        assert [p.name for p in QUALIFIER_PRODUCTIONS] == ["none", "module"]
        assert [p.name for p in METHOD_PRODUCTIONS] == [
            "constructor",
            "static_lambda",
            "lambda",
            "named_lambda",
            "identifier",
            "synthetic",
        ]
        assert [p.name for p in FILE_PRODUCTIONS] == [
            "file_name",
            "unknown_source",
            "native_method",
        ]


class TestModuleQualifiers:
    """Tests for stripping JDK 9+ module and class loader qualifiers."""

    @pytest.mark.parametrize(
        "qualifier",
        [
            "java.base/",
            "java.base@17.0.2/",
            "app//",
            "com.foo.loader/foo@9.0/",
            "com.foo.loader//",
        ],
    )
    def test_qualifier_stripped(self, qualifier: str) -> None:
        """Test that module and loader prefixes do not leak into the class name."""
        frame = parse_line(f"\tat {qualifier}com.example.Widget.draw(Widget.java:33)")
        assert frame == Frame("com.example.Widget", "draw", "Widget.java", 33)

    def test_call_site_keeps_qualifier(self) -> None:
        """Test that the raw call site remembers what was stripped."""
        call_site = match_call_site("at java.base@11/java.lang.Thread$State.run(Thread.java:834)")
        assert call_site is not None
        assert call_site.qualifier == "java.base@11/"
        assert call_site.class_name == "java.lang.Thread$State"
        assert call_site.to_frame().class_name == "java.lang.Thread"


class TestOuterClassName:
    """Tests for outer_class_name."""

    def test_nested_class(self) -> None:
        assert outer_class_name("a.b.Outer$Inner$1") == "a.b.Outer"

    def test_plain_class(self) -> None:
        assert outer_class_name("a.b.Outer") == "a.b.Outer"


class TestSerializationRoundTrip:
    """Tests that canonical frame lines parse back unchanged."""

    @pytest.mark.parametrize(
        "frame",
        [
            Frame("com.example.Service", "process", "Service.java", 42),
            Frame("org.acme.Util", "<init>", "Util.java", 1),
            Frame("org.acme.Util", "lambda$static$2", "Util.kt", 77),
        ],
    )
    def test_round_trip(self, frame: Frame) -> None:
        """Test parse(to_line(frame)) == frame for frames with a real file."""
        assert parse_line(frame.to_line()) == frame
