"""Grammar for a single Java stack trace frame line.

A frame line looks like::

    at [module/]<class>.<method>(<file>[:<line>])

with arbitrary text allowed before the ``at`` marker and after the closing
parenthesis. The grammar is written as explicit, ordered production tables
rather than one large regular expression:

- qualifier productions: none, then module (``java.base/``, ``java.base@17/``,
  ``app//``, ``app/mod/``)
- method productions: constructor marker, lambda markers, plain identifier,
  synthetic identifier
- file productions: dotted file name, ``Unknown Source``, ``Native Method``

The first combination that accepts the whole call site wins.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from java_stack_nav.models.frame import NATIVE_METHOD, UNKNOWN_SOURCE, Frame

AT_MARKER = "at "

# <qualified name>(<location>) directly after the marker
CALL_SITE_PATTERN = re.compile(r"(?P<qualified>[\w.$/@<>\-]+)\((?P<location>[^()]*)\)")

CLASS_NAME_PATTERN = re.compile(r"[\w$]+(?:\.[\w$]+)*")
LINE_NUMBER_PATTERN = re.compile(r"\d+")


@dataclass(frozen=True)
class Production:
    """A named alternative of the grammar."""

    name: str
    pattern: re.Pattern[str]

    def accepts(self, text: str) -> bool:
        return self.pattern.fullmatch(text) is not None


QUALIFIER_PRODUCTIONS: tuple[Production, ...] = (
    Production("none", re.compile(r"")),
    Production(
        "module",
        re.compile(
            r"(?:[\w.$\-]*/)?"  # class loader name, may be empty ("app//")
            r"[\w.]+(?:@[\w.\-]+)?/"  # module name with optional version
            r"|[\w.$\-]+//"  # class loader without a named module
        ),
    ),
)

METHOD_PRODUCTIONS: tuple[Production, ...] = (
    Production("constructor", re.compile(r"<\w+>")),
    Production("static_lambda", re.compile(r"lambda\$static\$\d+")),
    Production("lambda", re.compile(r"lambda\$\d+")),
    Production("named_lambda", re.compile(r"lambda\$\w+\$\d+")),
    Production("identifier", re.compile(r"\w+")),
    Production("synthetic", re.compile(r"[\w$]+")),
)

FILE_PRODUCTIONS: tuple[Production, ...] = (
    Production("file_name", re.compile(r"[\w.\-]+")),
    Production("unknown_source", re.compile(re.escape(UNKNOWN_SOURCE))),
    Production("native_method", re.compile(re.escape(NATIVE_METHOD))),
)


@dataclass(frozen=True)
class CallSite:
    """Raw pieces of a matched frame, before the class name is reduced."""

    qualifier: str
    class_name: str  # Verbatim, may contain "$" nested class suffixes
    method_name: str
    file_name: str
    line_number: int | None

    def to_frame(self) -> Frame:
        """Build the Frame, keeping only the outer class name."""
        return Frame(
            class_name=outer_class_name(self.class_name),
            method_name=self.method_name,
            file_name=self.file_name,
            line_number=self.line_number if self.line_number is not None else 1,
        )


def outer_class_name(class_name: str) -> str:
    """Return the portion of a class name before its first ``$``."""
    return class_name.split("$", 1)[0]


def _first_production(productions: tuple[Production, ...], text: str) -> Production | None:
    for production in productions:
        if production.accepts(text):
            return production
    return None


def _split_location(location: str) -> tuple[str, int | None] | None:
    """Split ``File.java:12`` into file and line, validating the file part."""
    file_name, separator, line_text = location.rpartition(":")
    if not separator:
        file_name, line_text = location, ""
    elif not LINE_NUMBER_PATTERN.fullmatch(line_text):
        return None

    if _first_production(FILE_PRODUCTIONS, file_name) is None:
        return None

    # Line numbers are positive; ":0" is treated like a missing line
    return file_name, (int(line_text) or None) if line_text else None


def _split_qualified(qualified: str, qualifier: Production) -> tuple[str, str, str] | None:
    """Split ``[module/]pkg.Class.method`` into qualifier, class and method."""
    if qualifier.name == "none":
        prefix, rest = "", qualified
        if "/" in rest:
            return None
    else:
        slash = qualified.rfind("/")
        if slash < 0:
            return None
        prefix, rest = qualified[: slash + 1], qualified[slash + 1 :]
        if not qualifier.accepts(prefix):
            return None

    class_name, dot, method_name = rest.rpartition(".")
    if not dot or not CLASS_NAME_PATTERN.fullmatch(class_name):
        return None

    if _first_production(METHOD_PRODUCTIONS, method_name) is None:
        return None

    return prefix, class_name, method_name


def match_call_site(text: str) -> CallSite | None:
    """Find the first frame shaped call site in a line of text.

    Args:
        text: A line of text, possibly with surrounding noise

    Returns:
        The raw call site, or None if the text holds no frame
    """
    start = text.find(AT_MARKER)

    while start >= 0:
        match = CALL_SITE_PATTERN.match(text, start + len(AT_MARKER))

        if match:
            location = _split_location(match.group("location"))

            if location is not None:
                for qualifier in QUALIFIER_PRODUCTIONS:
                    pieces = _split_qualified(match.group("qualified"), qualifier)
                    if pieces is not None:
                        prefix, class_name, method_name = pieces
                        file_name, line_number = location
                        return CallSite(
                            qualifier=prefix,
                            class_name=class_name,
                            method_name=method_name,
                            file_name=file_name,
                            line_number=line_number,
                        )

        start = text.find(AT_MARKER, start + 1)

    return None


def parse_line(text: str) -> Frame | None:
    """Parse one line of text into a Frame.

    Args:
        text: The line to parse

    Returns:
        The parsed Frame, or None if the line is not a stack trace frame

    Example:
        >>> parse_line("    at a.B.run(B.java:12)")
        Frame(class_name='a.B', method_name='run', file_name='B.java', line_number=12)
    """
    if AT_MARKER not in text:
        return None

    call_site = match_call_site(text)
    if call_site is None:
        return None

    return call_site.to_frame()
