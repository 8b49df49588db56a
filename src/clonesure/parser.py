"""Parser for annotated closure literals.

Grammar:

    closure       := [ "move" ] "|" param_list "|" [ "->" return_type ] body
    param_list    := capture_entry* plain_param*     (comma separated)
    capture_entry := "@" [ "mut" ] identifier
    plain_param   := tokens up to the next top-level "," or "|"

Capture entries are only recognized as a leading run. Once an entry that does
not start with `@` is seen, every following entry is an opaque parameter, even
one that starts with `@`.
"""

from __future__ import annotations

import logging

from clonesure.errors import (
    DuplicateCapture,
    MalformedCapture,
    MissingBody,
    UnexpectedToken,
    UnterminatedParamList,
)
from clonesure.lexer import tokenize
from clonesure.types import (
    CaptureEntry,
    ClosureSpec,
    PassThroughParam,
    Span,
    Token,
    TokenKind,
)

logger = logging.getLogger(__name__)

MATCHING_OPEN = {")": "(", "]": "[", "}": "{"}


def parse_closure(source: str) -> ClosureSpec:
    """Lex and parse a closure literal.

    Args:
        source: Text of one closure literal, e.g. ``|@mut a, b| a + b``.

    Returns:
        The structured closure.

    Raises:
        ClosureSyntaxError: If the text is not a valid annotated closure.
    """
    return parse(tokenize(source), source)


def parse(tokens: list[Token], source: str) -> ClosureSpec:
    """Parse lexed tokens of a closure literal into a ClosureSpec."""
    pos = 0
    explicit_move = False
    if tokens and tokens[0].is_keyword("move"):
        explicit_move = True
        pos = 1

    if pos >= len(tokens) or not tokens[pos].is_punct("|"):
        msg = "expected `|` to open the closure parameter list"
        raise UnexpectedToken(msg, _span_at(tokens, pos, source), source)

    open_pipe = tokens[pos]
    entries, close_idx = _split_entries(tokens, pos + 1, open_pipe, source)
    captures, params = _classify_entries(entries, source)

    return_type, body = _parse_tail(tokens, close_idx + 1, source)

    logger.debug(
        "Parsed closure: move=%s captures=%s params=%d return_type=%s",
        explicit_move,
        [("mut " if c.mutable else "") + c.name for c in captures],
        len(params),
        return_type is not None,
    )
    return ClosureSpec(
        source=source,
        explicit_move=explicit_move,
        captures=tuple(captures),
        params=tuple(params),
        return_type=return_type,
        body=body,
    )


# =============================================================================
# Parameter list
# =============================================================================


def _split_entries(
    tokens: list[Token], pos: int, open_pipe: Token, source: str
) -> tuple[list[list[Token]], int]:
    """Split the parameter list into comma-separated entries.

    Returns the entries and the index of the closing `|`.
    """
    entries: list[list[Token]] = []
    commas: list[Token] = []
    current: list[Token] = []
    # Open brackets; generics are tracked separately, and only outside
    # brackets, since a stray `<`/`>` must not swallow the closing pipe.
    brackets: list[str] = []
    angles = 0

    while pos < len(tokens):
        tok = tokens[pos]
        if not brackets:
            if tok.is_punct("|"):
                entries.append(current)
                return _drop_empty_entries(entries, commas, source), pos
            if tok.is_punct(",") and angles == 0:
                entries.append(current)
                commas.append(tok)
                current = []
                pos += 1
                continue

        if tok.kind is TokenKind.OPEN:
            brackets.append(tok.text)
        elif tok.kind is TokenKind.CLOSE:
            if not brackets or brackets[-1] != MATCHING_OPEN[tok.text]:
                msg = f"unmatched `{tok.text}` in closure parameter list"
                raise UnexpectedToken(msg, tok.span, source)
            brackets.pop()
        elif not brackets and tok.is_punct("<"):
            angles += 1
        elif not brackets and tok.is_punct(">") and angles > 0:
            angles -= 1

        current.append(tok)
        pos += 1

    msg = "closure parameter list is never closed with `|`"
    raise UnterminatedParamList(msg, open_pipe.span, source)


def _drop_empty_entries(
    entries: list[list[Token]], commas: list[Token], source: str
) -> list[list[Token]]:
    # `||` has a single empty entry; a trailing comma leaves one at the end
    if not entries[-1]:
        entries = entries[:-1]
    for idx, entry in enumerate(entries):
        if not entry:
            msg = "expected a parameter before `,`"
            raise UnexpectedToken(msg, commas[idx].span, source)
    return entries


def _classify_entries(
    entries: list[list[Token]], source: str
) -> tuple[list[CaptureEntry], list[PassThroughParam]]:
    captures: list[CaptureEntry] = []
    params: list[PassThroughParam] = []
    seen: set[str] = set()

    for entry in entries:
        if not params and entry[0].is_punct("@"):
            capture = _parse_capture(entry, source)
            # `r#a` and `a` name the same variable
            key = capture.name.removeprefix("r#")
            if key in seen:
                msg = f"`{key}` is captured more than once"
                raise DuplicateCapture(msg, capture.span, source)
            seen.add(key)
            captures.append(capture)
        else:
            params.append(PassThroughParam(_entry_span(entry)))

    return captures, params


def _parse_capture(entry: list[Token], source: str) -> CaptureEntry:
    """Parse `@ [mut] name` from the tokens of one entry."""
    rest = entry[1:]
    mutable = bool(rest) and rest[0].is_keyword("mut")
    if mutable:
        rest = rest[1:]
    marker = "@mut" if mutable else "@"

    if not rest:
        msg = f"expected a variable name after `{marker}`"
        raise MalformedCapture(msg, _entry_span(entry), source)

    name = rest[0]
    if name.kind is not TokenKind.IDENT or name.text == "_":
        msg = f"expected a variable name after `{marker}`, found `{name.text}`"
        raise MalformedCapture(msg, name.span, source)

    if len(rest) > 1:
        extra = Span(rest[1].span.start, rest[-1].span.end)
        msg = f"captured variable `{name.text}` cannot have a pattern or type"
        raise MalformedCapture(msg, extra, source)

    return CaptureEntry(name=name.text, mutable=mutable, span=_entry_span(entry))


# =============================================================================
# Return type and body
# =============================================================================


def _parse_tail(
    tokens: list[Token], pos: int, source: str
) -> tuple[Span | None, Span]:
    close_pipe = tokens[pos - 1]
    if pos >= len(tokens):
        msg = "expected a closure body after the parameter list"
        raise MissingBody(msg, close_pipe.span, source)

    if not tokens[pos].is_punct("->"):
        _check_balanced(tokens, pos, source)
        return None, Span(tokens[pos].span.start, tokens[-1].span.end)

    arrow = tokens[pos]
    type_start = pos + 1
    brace = _find_body_brace(tokens, type_start)
    if brace == type_start or type_start >= len(tokens):
        msg = "expected a return type after `->`"
        raise UnexpectedToken(msg, arrow.span, source)
    if brace is None:
        msg = "a closure with a return type needs a `{ ... }` body"
        raise MissingBody(msg, Span(arrow.span.start, tokens[-1].span.end), source)

    body_end = _matching_close(tokens, brace)
    if body_end is None:
        msg = "closure body is never closed with `}`"
        raise MissingBody(msg, tokens[brace].span, source)
    if body_end + 1 < len(tokens):
        extra = tokens[body_end + 1]
        msg = f"unexpected `{extra.text}` after the closure body"
        raise UnexpectedToken(msg, extra.span, source)

    return_type = Span(tokens[type_start].span.start, tokens[brace - 1].span.end)
    body = Span(tokens[brace].span.start, tokens[body_end].span.end)
    return return_type, body


def _find_body_brace(tokens: list[Token], pos: int) -> int | None:
    """Index of the first `{` outside any brackets or generics of the type.

    Generics are only counted outside brackets; inside them `<` may be an
    operator, as in `[u8; 1 << 2]`.
    """
    depth = 0
    angles = 0
    for idx in range(pos, len(tokens)):
        tok = tokens[idx]
        if tok.kind is TokenKind.OPEN:
            if depth == 0 and angles == 0 and tok.text == "{":
                return idx
            depth += 1
        elif tok.kind is TokenKind.CLOSE:
            depth = max(0, depth - 1)
        elif depth == 0 and tok.is_punct("<"):
            angles += 1
        elif depth == 0 and tok.is_punct(">") and angles > 0:
            angles -= 1
    return None


def _matching_close(tokens: list[Token], pos: int) -> int | None:
    depth = 0
    for idx in range(pos, len(tokens)):
        tok = tokens[idx]
        if tok.kind is TokenKind.OPEN:
            depth += 1
        elif tok.kind is TokenKind.CLOSE:
            depth -= 1
            if depth == 0:
                return idx
    return None


def _check_balanced(tokens: list[Token], pos: int, source: str) -> None:
    """Reject a body whose delimiters do not pair up."""
    opened: list[Token] = []
    for tok in tokens[pos:]:
        if tok.kind is TokenKind.OPEN:
            opened.append(tok)
        elif tok.kind is TokenKind.CLOSE:
            if not opened or opened[-1].text != MATCHING_OPEN[tok.text]:
                msg = f"unmatched `{tok.text}` in closure body"
                raise UnexpectedToken(msg, tok.span, source)
            opened.pop()
    if opened:
        msg = f"closure body is never closed: unclosed `{opened[-1].text}`"
        raise MissingBody(msg, opened[-1].span, source)


# =============================================================================
# Helpers
# =============================================================================


def _entry_span(entry: list[Token]) -> Span:
    return Span(entry[0].span.start, entry[-1].span.end)


def _span_at(tokens: list[Token], pos: int, source: str) -> Span:
    if pos < len(tokens):
        return tokens[pos].span
    end = len(source)
    return Span(end, end)
