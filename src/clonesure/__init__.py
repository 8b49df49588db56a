"""clonesure: expand closures that clone their captures.

`|@mut a, @b, c| body` becomes a block that clones `a` (mutably) and `b`, then
evaluates to `move |c| body`.
"""

from __future__ import annotations

from clonesure.errors import (
    ClosureSyntaxError,
    DuplicateCapture,
    LexError,
    MalformedCapture,
    MissingBody,
    ParseError,
    UnexpectedToken,
    UnterminatedParamList,
)
from clonesure.expander import expand
from clonesure.generator import generate
from clonesure.lexer import tokenize
from clonesure.options import ExpandOptions, load_options
from clonesure.parser import parse, parse_closure
from clonesure.types import CaptureEntry, ClosureSpec, PassThroughParam, Span

__all__ = [
    "CaptureEntry",
    "ClosureSpec",
    "ClosureSyntaxError",
    "DuplicateCapture",
    "ExpandOptions",
    "LexError",
    "MalformedCapture",
    "MissingBody",
    "ParseError",
    "PassThroughParam",
    "Span",
    "UnexpectedToken",
    "UnterminatedParamList",
    "expand",
    "generate",
    "load_options",
    "parse",
    "parse_closure",
    "tokenize",
]
