"""Lexer for closure literals.

Splits closure text into the tokens the parser needs. Only enough of the host
grammar is recognized to keep strings, comments and delimiters from confusing
the parameter scanner; everything else is opaque punctuation.
"""

from __future__ import annotations

import logging

from clonesure.errors import LexError
from clonesure.types import Span, Token, TokenKind

logger = logging.getLogger(__name__)

KEYWORDS = frozenset({
    "as", "async", "await", "break", "const", "continue", "crate", "dyn",
    "else", "enum", "extern", "false", "fn", "for", "if", "impl", "in", "let",
    "loop", "match", "mod", "move", "mut", "pub", "ref", "return", "self",
    "Self", "static", "struct", "super", "trait", "true", "type", "unsafe",
    "use", "where", "while",
})  # fmt: skip

# Longest first
MULTI_PUNCT = ("..=", "...", "->", "=>", "::", "..")
SINGLE_PUNCT = frozenset("+-*/%^!&|=<>@.,;:#$?~")
OPEN_DELIMS = frozenset("([{")
CLOSE_DELIMS = frozenset(")]}")


def tokenize(source: str) -> list[Token]:
    """Split `source` into tokens.

    Raises:
        LexError: On unterminated literals or comments, or on characters
            outside the lexical grammar.
    """
    tokens: list[Token] = []
    pos = 0
    n = len(source)

    while pos < n:
        ch = source[pos]

        if ch.isspace():
            pos += 1
            continue

        if source.startswith("//", pos):
            newline = source.find("\n", pos)
            pos = n if newline == -1 else newline + 1
            continue

        if source.startswith("/*", pos):
            pos = _skip_block_comment(source, pos)
            continue

        start = pos
        prefix_end = _literal_prefix_end(source, pos)
        if prefix_end is not None:
            pos = _scan_prefixed_literal(source, pos, prefix_end)
            tokens.append(Token(TokenKind.LITERAL, source[start:pos], Span(start, pos)))
        elif source.startswith("r#", pos) and _is_ident_start(_peek(source, pos + 2)):
            pos = _scan_ident(source, pos + 2)
            tokens.append(Token(TokenKind.IDENT, source[start:pos], Span(start, pos)))
        elif _is_ident_start(ch):
            pos = _scan_ident(source, pos)
            text = source[start:pos]
            kind = TokenKind.KEYWORD if text in KEYWORDS else TokenKind.IDENT
            tokens.append(Token(kind, text, Span(start, pos)))
        elif ch.isdigit():
            pos = _scan_number(source, pos)
            tokens.append(Token(TokenKind.LITERAL, source[start:pos], Span(start, pos)))
        elif ch == '"':
            pos = _scan_quoted(source, pos, '"')
            tokens.append(Token(TokenKind.LITERAL, source[start:pos], Span(start, pos)))
        elif ch == "'":
            pos, kind = _scan_quote_or_lifetime(source, pos)
            tokens.append(Token(kind, source[start:pos], Span(start, pos)))
        elif ch in OPEN_DELIMS:
            pos += 1
            tokens.append(Token(TokenKind.OPEN, ch, Span(start, pos)))
        elif ch in CLOSE_DELIMS:
            pos += 1
            tokens.append(Token(TokenKind.CLOSE, ch, Span(start, pos)))
        else:
            punct = next((p for p in MULTI_PUNCT if source.startswith(p, pos)), None)
            if punct is None and ch in SINGLE_PUNCT:
                punct = ch
            if punct is None:
                msg = f"unexpected character {ch!r}"
                raise LexError(msg, Span(pos, pos + 1), source)
            pos += len(punct)
            tokens.append(Token(TokenKind.PUNCT, punct, Span(start, pos)))

    logger.debug("Lexed %d tokens", len(tokens))
    return tokens


# =============================================================================
# Scanners
# =============================================================================


def _peek(source: str, pos: int) -> str:
    return source[pos] if pos < len(source) else ""


def _is_ident_start(ch: str) -> bool:
    return ch == "_" or ch.isalpha()


def _is_ident_continue(ch: str) -> bool:
    return ch == "_" or ch.isalnum()


def _scan_ident(source: str, pos: int) -> int:
    pos += 1
    while pos < len(source) and _is_ident_continue(source[pos]):
        pos += 1
    return pos


def _scan_number(source: str, pos: int) -> int:
    n = len(source)
    while pos < n and _is_ident_continue(source[pos]):
        pos += 1
    # Fractional part, but not the start of a `..` range
    if _peek(source, pos) == "." and _peek(source, pos + 1).isdigit():
        pos += 1
        while pos < n and _is_ident_continue(source[pos]):
            pos += 1
    # Signed exponent: the `e` was already consumed above
    if (
        source[pos - 1] in "eE"
        and _peek(source, pos) in ("+", "-")
        and _peek(source, pos + 1).isdigit()
    ):
        pos += 1
        while pos < n and _is_ident_continue(source[pos]):
            pos += 1
    return pos


def _scan_quoted(source: str, pos: int, quote: str) -> int:
    """Scan an escaped string or char literal starting at the opening quote."""
    start = pos
    pos += 1
    n = len(source)
    while pos < n:
        ch = source[pos]
        if ch == "\\":
            pos += 2
            continue
        if ch == quote:
            return pos + 1
        pos += 1
    kind = "string" if quote == '"' else "character"
    msg = f"unterminated {kind} literal"
    raise LexError(msg, Span(start, n), source)


def _scan_quote_or_lifetime(source: str, pos: int) -> tuple[int, TokenKind]:
    nxt = _peek(source, pos + 1)
    if nxt == "\\":
        return _scan_quoted(source, pos, "'"), TokenKind.LITERAL
    if nxt and nxt != "'" and _peek(source, pos + 2) == "'":
        return pos + 3, TokenKind.LITERAL
    if _is_ident_start(nxt):
        return _scan_ident(source, pos + 1), TokenKind.LIFETIME
    msg = "unterminated character literal"
    raise LexError(msg, Span(pos, pos + 1), source)


def _literal_prefix_end(source: str, pos: int) -> int | None:
    """Return the end of a `b`/`c`/`r`/`br`/`cr` literal prefix at `pos`, if any."""
    for prefix in ("br", "cr", "b", "c", "r"):
        if not source.startswith(prefix, pos):
            continue
        end = pos + len(prefix)
        nxt = _peek(source, end)
        if prefix.endswith("r"):
            # r"..." or r#"..."#, but not the raw identifier r#name
            hashes = end
            while _peek(source, hashes) == "#":
                hashes += 1
            if _peek(source, hashes) == '"':
                return end
        elif nxt == '"' or (prefix == "b" and nxt == "'"):
            return end
    return None


def _scan_prefixed_literal(source: str, pos: int, prefix_end: int) -> int:
    if source[prefix_end - 1] != "r":
        return _scan_quoted(source, prefix_end, source[prefix_end])

    hashes = 0
    while _peek(source, prefix_end + hashes) == "#":
        hashes += 1
    terminator = '"' + "#" * hashes
    body_start = prefix_end + hashes + 1
    end = source.find(terminator, body_start)
    if end == -1:
        msg = "unterminated raw string literal"
        raise LexError(msg, Span(pos, len(source)), source)
    return end + len(terminator)


def _skip_block_comment(source: str, pos: int) -> int:
    start = pos
    depth = 0
    n = len(source)
    while pos < n:
        if source.startswith("/*", pos):
            depth += 1
            pos += 2
        elif source.startswith("*/", pos):
            depth -= 1
            pos += 2
            if depth == 0:
                return pos
        else:
            pos += 1
    msg = "unterminated block comment"
    raise LexError(msg, Span(start, start + 2), source)
