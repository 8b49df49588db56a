"""Data model shared by the lexer, parser and generator.

Every opaque piece of a closure (parameters, return type, body) is kept as a
`Span` into the original source and only sliced out at emission time.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Span:
    """Half-open range of character offsets into the source text."""

    start: int
    end: int

    def slice(self, source: str) -> str:
        """Return the text covered by this span."""
        return source[self.start : self.end]

    def join(self, other: Span) -> Span:
        """Smallest span covering both `self` and `other`."""
        return Span(min(self.start, other.start), max(self.end, other.end))

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class SourceLoc:
    """1-based line/column position, as shown to users."""

    line: int
    column: int

    @classmethod
    def from_offset(cls, source: str, offset: int) -> SourceLoc:
        """Compute the line/column of `offset` within `source`."""
        offset = max(0, min(offset, len(source)))
        line = source.count("\n", 0, offset) + 1
        line_start = source.rfind("\n", 0, offset) + 1
        return cls(line, offset - line_start + 1)

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


class TokenKind(Enum):
    """Lexical categories produced by the lexer."""

    IDENT = "ident"
    KEYWORD = "keyword"
    LIFETIME = "lifetime"
    LITERAL = "literal"
    PUNCT = "punct"
    OPEN = "open"
    CLOSE = "close"


@dataclass(frozen=True)
class Token:
    """A single lexical token with its source span."""

    kind: TokenKind
    text: str
    span: Span

    def is_punct(self, text: str) -> bool:
        return self.kind is TokenKind.PUNCT and self.text == text

    def is_keyword(self, text: str) -> bool:
        return self.kind is TokenKind.KEYWORD and self.text == text


@dataclass(frozen=True)
class CaptureEntry:
    """A variable cloned from the environment before the closure is built.

    Attributes:
        name: Identifier of the captured variable.
        mutable: Whether the local clone is bound with `let mut`.
        span: Source span of the whole `@ [mut] name` entry.
    """

    name: str
    mutable: bool
    span: Span


@dataclass(frozen=True)
class PassThroughParam:
    """An ordinary closure parameter, relocated verbatim."""

    span: Span

    def text(self, source: str) -> str:
        return self.span.slice(source)


@dataclass(frozen=True)
class ClosureSpec:
    """Structured form of one annotated closure literal.

    Attributes:
        source: The original closure text all spans point into.
        explicit_move: Whether the literal started with `move`.
        captures: Capture entries, in source order.
        params: Pass-through parameters, in source order.
        return_type: Span of the return type after `->`, if any.
        body: Span of the closure body.
    """

    source: str
    explicit_move: bool
    captures: tuple[CaptureEntry, ...]
    params: tuple[PassThroughParam, ...]
    return_type: Span | None
    body: Span

    @property
    def param_texts(self) -> list[str]:
        return [param.text(self.source) for param in self.params]

    @property
    def capture_names(self) -> list[str]:
        return [capture.name for capture in self.captures]

    @property
    def return_type_text(self) -> str | None:
        if self.return_type is None:
            return None
        return self.return_type.slice(self.source)

    @property
    def body_text(self) -> str:
        return self.body.slice(self.source)
