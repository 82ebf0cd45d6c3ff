"""Data models handed to the UI sinks."""

from dataclasses import dataclass

from .frame import Frame


@dataclass(frozen=True)
class DiagnosticItem:
    """One entry in a diagnostics (quickfix) list."""

    path: str
    line_number: int
    label: str
    column: int = 1
    severity: str = "E"


@dataclass(frozen=True)
class PickItem:
    """One entry in a pick list."""

    path: str
    line_number: int
    label: str
    frame: Frame
    index: int  # 1-based position in the sequence the item came from
