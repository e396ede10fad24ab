"""
Tests for the tokenizer: token kinds and the source spans attached to them.
"""

import pytest

from cssbaseline.css import Lexer, Position
from cssbaseline.css.tokens import (
    AtKeyword, BadString, CDC, Colon, Comment, Delim, Dimension, EOF, Function,
    Hash, Ident, LCurlyBracket, Number, Percentage, RCurlyBracket, Semicolon,
    String, Url, Whitespace,
)


def tokens(source):
    return [t for t in Lexer(source).process() if not isinstance(t, (Whitespace, EOF))]


class TestTokenKinds:
    def test_rule(self):
        kinds = [type(t) for t in tokens("a { color: red; }")]
        assert kinds == [Ident, LCurlyBracket, Ident, Colon, Ident, Semicolon, RCurlyBracket]

    def test_at_keyword_keeps_case(self):
        (token, *_) = tokens("@MEDIA screen")
        assert isinstance(token, AtKeyword)
        assert token.raw == "MEDIA"

    def test_function_token(self):
        (token, *_) = tokens("color-mix(in srgb)")
        assert isinstance(token, Function)
        assert token.raw == "color-mix"

    def test_custom_property_is_ident(self):
        (token,) = tokens("--foo")
        assert isinstance(token, Ident)
        assert token.raw == "--foo"

    def test_vendor_prefixed_ident(self):
        (token,) = tokens("-moz-transition")
        assert isinstance(token, Ident)
        assert token.raw == "-moz-transition"

    @pytest.mark.parametrize("source, kind, value", [
        ("12", Number, 12),
        ("0.25", Number, 0.25),
        ("-3", Number, -3),
        ("1e3", Number, 1000.0),
        ("20%", Percentage, 20),
        ("100px", Dimension, 100),
        (".5em", Dimension, 0.5),
    ])
    def test_numbers(self, source, kind, value):
        (token,) = tokens(source)
        assert type(token) is kind
        assert token.value == value

    def test_dimension_unit(self):
        (token,) = tokens("10px")
        assert token.unit == "px"
        assert token.raw == "10px"

    def test_hash(self):
        (token,) = tokens("#a29bfe")
        assert isinstance(token, Hash)
        assert token.raw == "a29bfe"

    def test_delims(self):
        assert [t.raw for t in tokens("& . > +")] == ["&", ".", ">", "+"]
        assert all(isinstance(t, Delim) for t in tokens("& . > +"))

    def test_string(self):
        (token,) = tokens('"*"')
        assert isinstance(token, String)
        assert token.raw == "*"

    def test_string_escape(self):
        (token,) = tokens(r'"\41 b"')
        assert token.raw == "Ab"

    def test_unclosed_string_is_bad(self):
        lexer = Lexer("'abc\n")
        (token, *_) = lexer.process()
        assert isinstance(token, BadString)
        assert len(lexer.errors) == 1

    def test_url(self):
        (token,) = tokens("url(foo.png)")
        assert isinstance(token, Url)
        assert token.raw == "foo.png"

    def test_quoted_url_is_function(self):
        (token, *_) = tokens('url("foo.png")')
        assert isinstance(token, Function)

    def test_comment(self):
        lexer = Lexer("/* note */a")
        (comment, ident, _) = lexer.process()
        assert isinstance(comment, Comment)
        assert comment.text == " note "
        assert ident.raw == "a"

    def test_unclosed_comment_records_error(self):
        lexer = Lexer("a /* never closed")
        lexer.process()
        assert [e.message for e in lexer.errors] == ["Comment not closed"]

    def test_cdc(self):
        (token,) = tokens("-->")
        assert isinstance(token, CDC)


class TestPositions:
    def test_single_line(self):
        prop = tokens("a { accent-color: bar }")[2]
        assert prop.start == Position(1, 5)
        assert prop.end == Position(1, 17)

    def test_at_keyword_span_includes_marker(self):
        (token, *_) = tokens("@property --foo {}")
        assert token.start == Position(1, 1)
        assert token.end == Position(1, 10)

    def test_function_name_end(self):
        (token, *_) = tokens("has(+ h2)")
        assert token.end == Position(1, 5)
        assert token.name_end == Position(1, 4)

    def test_lines_and_tabs(self):
        source = "a {\n\tcolor: red;\n}"
        color = tokens(source)[2]
        assert color.start == Position(2, 2)
        assert color.end == Position(2, 7)

    def test_carriage_returns_count_as_one_line(self):
        color = tokens("a {\r\n  color: red;\r\n}")[2]
        assert color.start == Position(2, 3)

    def test_eof_position(self):
        eof = Lexer("a\nbc").process()[-1]
        assert isinstance(eof, EOF)
        assert eof.start == Position(2, 3)
