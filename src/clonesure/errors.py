"""Error types raised while lexing and parsing closure literals.

Every error points at the offending span of the original closure text so the
invoking toolchain can report it at the call site.
"""

from __future__ import annotations

from clonesure.types import SourceLoc, Span


class ClosureSyntaxError(ValueError):
    """Base class for all errors raised on malformed closure literals.

    Attributes:
        kind: Short error kind name (e.g. "MalformedCapture").
        message: Human readable description.
        span: Offending span in `source`.
        source: The closure text being transformed.
    """

    kind = "SyntaxError"

    def __init__(self, message: str, span: Span, source: str) -> None:
        self.message = message
        self.span = span
        self.source = source
        super().__init__(f"{self.location}: {self.kind}: {message}")

    @property
    def location(self) -> SourceLoc:
        return SourceLoc.from_offset(self.source, self.span.start)

    def render(self, filename: str = "<input>") -> str:
        """Render a compiler-style diagnostic with a caret under the span."""
        loc = self.location
        lines = self.source.split("\n")
        line_text = lines[loc.line - 1] if loc.line - 1 < len(lines) else ""

        # Carets stop at the end of the first line of a multi-line span
        width = max(1, min(len(self.span), len(line_text) - loc.column + 1))
        gutter = " " * len(str(loc.line))
        return "\n".join([
            f"{filename}:{loc}: error[{self.kind}]: {self.message}",
            f"{gutter} |",
            f"{loc.line} | {line_text}",
            f"{gutter} | {' ' * (loc.column - 1)}{'^' * width}",
        ])


class LexError(ClosureSyntaxError):
    """Text that cannot be split into tokens."""

    kind = "InvalidToken"


class ParseError(ClosureSyntaxError):
    """Base class for parser errors."""


class MalformedCapture(ParseError):
    """Capture marker not followed by `[mut] identifier`."""

    kind = "MalformedCapture"


class DuplicateCapture(ParseError):
    """Same identifier captured twice in one parameter list."""

    kind = "DuplicateCapture"


class UnterminatedParamList(ParseError):
    """No closing `|` for the parameter list."""

    kind = "UnterminatedParamList"


class MissingBody(ParseError):
    """Nothing usable as a body after the parameter list."""

    kind = "MissingBody"


class UnexpectedToken(ParseError):
    """A token that does not fit the closure grammar at its position."""

    kind = "UnexpectedToken"
