"""Data models for Java stack trace frames."""

from dataclasses import dataclass

UNKNOWN_SOURCE = "Unknown Source"
NATIVE_METHOD = "Native Method"


@dataclass(frozen=True)
class Frame:
    """A single ``at class.method(file:line)`` entry of a Java stack trace."""

    class_name: str  # Outer class only, e.g. "com.example.MyClass"
    method_name: str  # e.g. "doSomething", "<init>", "lambda$0"
    file_name: str | None  # e.g. "MyClass.java", "Unknown Source"
    line_number: int = 1

    @property
    def qualified_method(self) -> str:
        """Class and method joined the way Java prints them."""
        return f"{self.class_name}.{self.method_name}"

    def same_location(self, other: "Frame | None") -> bool:
        """
        Identity used for deduplication.

        Two frames are the same when class, file and line agree. The method
        name is not part of the identity.
        """
        if other is None:
            return False
        return (
            self.class_name == other.class_name
            and self.file_name == other.file_name
            and self.line_number == other.line_number
        )

    def to_line(self) -> str:
        """Render the frame in canonical form, without a trailing newline."""
        return f"at {self.class_name}.{self.method_name}({self.file_name}:{self.line_number})"


FrameSequence = tuple[Frame, ...]


def frames_to_text(frames: FrameSequence) -> str:
    """Serialize frames back into stack trace text, one line per frame."""
    return "".join(frame.to_line() + "\n" for frame in frames)


@dataclass(frozen=True)
class AssembledTrace:
    """A stack trace block assembled from text."""

    frames: FrameSequence  # Innermost call first
    cursor_index: int | None  # 1-based index of the frame under the anchor line
    first_line: int  # First physical line of the block
    last_line: int  # Last physical line of the block

    def __post_init__(self) -> None:
        if not self.frames:
            raise ValueError("Assembled trace has no frames")
