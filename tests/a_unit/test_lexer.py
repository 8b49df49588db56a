"""Unit tests for the closure lexer."""

from __future__ import annotations

import pytest

from clonesure.errors import LexError
from clonesure.lexer import tokenize
from clonesure.types import Span, TokenKind


def texts(source: str) -> list[str]:
    return [tok.text for tok in tokenize(source)]


def kinds(source: str) -> list[TokenKind]:
    return [tok.kind for tok in tokenize(source)]


class TestTokenize:
    """Tests for token recognition."""

    def test_simple_closure(self) -> None:
        assert texts("|@mut a, b| a + b") == [
            "|", "@", "mut", "a", ",", "b", "|", "a", "+", "b",
        ]  # fmt: skip

    def test_keywords_and_identifiers(self) -> None:
        assert kinds("move mut s1 self") == [
            TokenKind.KEYWORD,
            TokenKind.KEYWORD,
            TokenKind.IDENT,
            TokenKind.KEYWORD,
        ]

    def test_empty_param_list_is_two_pipes(self) -> None:
        assert texts("|| x") == ["|", "|", "x"]

    def test_arrow_is_one_token(self) -> None:
        assert texts("-> Vec<u8>") == ["->", "Vec", "<", "u8", ">"]

    def test_multi_char_punct(self) -> None:
        assert texts("a::b 0..=9 x..y") == [
            "a", "::", "b", "0", "..=", "9", "x", "..", "y",
        ]  # fmt: skip

    def test_delimiters(self) -> None:
        assert kinds("([{}])") == [TokenKind.OPEN] * 3 + [TokenKind.CLOSE] * 3

    def test_spans_point_into_source(self) -> None:
        source = "  |@s1|  s1"
        tokens = tokenize(source)
        assert tokens[2].span == Span(4, 6)
        assert tokens[2].span.slice(source) == "s1"


class TestLiterals:
    """Tests for literals that may contain delimiter characters."""

    def test_string_with_pipe_and_comma(self) -> None:
        tokens = tokenize('"a|b, c"')
        assert len(tokens) == 1
        assert tokens[0].kind is TokenKind.LITERAL

    def test_string_with_escaped_quote(self) -> None:
        assert texts(r'"say \"hi\"" x') == [r'"say \"hi\""', "x"]

    def test_raw_string(self) -> None:
        assert texts('r#"a "quoted" |"# x') == ['r#"a "quoted" |"#', "x"]

    def test_byte_string_and_byte_char(self) -> None:
        assert kinds("b\"ab\" b'x'") == [TokenKind.LITERAL, TokenKind.LITERAL]

    def test_raw_identifier(self) -> None:
        tokens = tokenize("r#type")
        assert tokens[0].kind is TokenKind.IDENT
        assert tokens[0].text == "r#type"

    def test_char_literal_vs_lifetime(self) -> None:
        assert kinds("'|' 'a '\\n'") == [
            TokenKind.LITERAL,
            TokenKind.LIFETIME,
            TokenKind.LITERAL,
        ]

    def test_numbers(self) -> None:
        assert texts("1_000u32 0xff 1.5e-3") == ["1_000u32", "0xff", "1.5e-3"]

    def test_tuple_field_access(self) -> None:
        assert texts("t.0") == ["t", ".", "0"]

    def test_identifier_starting_with_literal_prefix(self) -> None:
        assert kinds("break crate rust bytes") == [
            TokenKind.KEYWORD,
            TokenKind.KEYWORD,
            TokenKind.IDENT,
            TokenKind.IDENT,
        ]


class TestComments:
    """Tests for comment skipping."""

    def test_line_comment(self) -> None:
        assert texts("a // | , @\nb") == ["a", "b"]

    def test_nested_block_comment(self) -> None:
        assert texts("a /* x /* | */ , */ b") == ["a", "b"]


class TestLexErrors:
    """Tests for lexical errors."""

    def test_unterminated_string(self) -> None:
        with pytest.raises(LexError, match="unterminated string"):
            tokenize('|a| "abc')

    def test_unterminated_block_comment(self) -> None:
        with pytest.raises(LexError, match="unterminated block comment"):
            tokenize("|a| /* a")

    def test_unterminated_raw_string(self) -> None:
        with pytest.raises(LexError, match="unterminated raw string"):
            tokenize('r#"abc"')

    def test_unexpected_character(self) -> None:
        with pytest.raises(LexError) as excinfo:
            tokenize("|a| `a`")
        assert excinfo.value.kind == "InvalidToken"
        assert excinfo.value.span == Span(4, 5)
