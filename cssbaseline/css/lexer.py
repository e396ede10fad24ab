""" CSS LEXING
https://www.w3.org/TR/css-syntax-3/#tokenizing-and-parsing

Every token carries the half-open span it was read from so the analyzer can
anchor diagnostics without re-reading the source.

@        | at-rule
:        | pseudo-class
::       | pseudo-element
.        | class
#        | id
*        | any
keyword  | element tag
function | function name and params
"""

from __future__ import annotations
from bisect import bisect_right
import logging
import re
from typing import Literal
from cssbaseline.css.tokens import *

REPLACEMENT_CHAR = '�'
logger = logging.getLogger(__name__)

class Check:
    @staticmethod
    def letter(current: str | None) -> bool:
        return current is not None and current.isascii() and current.isalpha()

    @staticmethod
    def non_ascii(current: str | None) -> bool:
        return current is not None and ord(current) >= ord('\u0080')

    @staticmethod
    def ident_start(current: str | None) -> bool:
        return current is not None and (Check.letter(current) or Check.non_ascii(current) or current == "_")

    @staticmethod
    def digit(current: str | None) -> bool:
        return current is not None and current in "0123456789"

    @staticmethod
    def whitespace(current: str | None) -> bool:
        return current is not None and current in '\t\n '

    @staticmethod
    def hex(current: str | None) -> bool:
        return current is not None and current in '0123456789abcdefABCDEF'

    @staticmethod
    def ident(current: str | None) -> bool:
        return current is not None and (Check.ident_start(current) or Check.digit(current) or current == "-")

    @staticmethod
    def escape(current: str | None, next: str | None) -> bool:
        return current == "\\" and next is not None and next != "\n"

    @staticmethod
    def non_printable(current: str | None) -> bool:
        if current is None:
            return False
        o = ord(current)
        return (
            o in range(0x00, 0x09)
            or o == 0x0B
            or o in range(0x0E, 0x20)
            or o == 0x7F
        )

    @staticmethod
    def starts_with_ident(first: str | None, second: str | None, third: str | None) -> bool:
        if first == "-":
            return Check.ident_start(second) or second == "-" or Check.escape(second, third)
        elif Check.ident_start(first):
            return True
        elif first == "\\":
            return Check.escape(first, second)
        return False

    @staticmethod
    def starts_with_number(first: str | None, second: str | None, third: str | None) -> bool:
        if first is None:
            return False
        if first in "+-":
            if Check.digit(second):
                return True
            return second == "." and Check.digit(third)
        elif first == ".":
            return Check.digit(second)
        return Check.digit(first)


RETURNS = re.compile("\r\n|\f|\r")
CHARSET = re.compile(rb'@charset "([^"]+)";')
# Code points that are always a token of their own.
PUNCTUATION: dict[str, type[Token]] = {
    "(": LParantheses,
    ")": RParantheses,
    "[": LSquareBracket,
    "]": RSquareBracket,
    "{": LCurlyBracket,
    "}": RCurlyBracket,
    ",": Comma,
    ":": Colon,
    ";": Semicolon,
}


class Lexer:
    def __init__(self, source: str) -> None:
        self.source: str = RETURNS.sub("\n", source).replace('\u0000', REPLACEMENT_CHAR)
        self.index = 0
        self.errors: list[ParseError] = []
        self._lines_ = [0] + [m.end() for m in re.finditer("\n", self.source)]

    @staticmethod
    def get_css(path: str) -> str:
        """Read a stylesheet honoring a leading `@charset` rule.

        The rule itself is kept in the returned text so that source positions
        still line up with the file.
        """
        with open(path, "rb") as f:
            data = f.read()
        if (charset := CHARSET.match(data)) is not None:
            return data.decode(charset.group(1).decode("ascii").lower())
        return data.decode("utf-8-sig")

    def position(self, index: int) -> Position:
        """Translate an offset into the source into a 1-based line and column."""
        line = bisect_right(self._lines_, index)
        return Position(line, index - self._lines_[line - 1] + 1)

    def __iter__(self):
        return self

    def __next__(self):
        next = self.consume()
        if isinstance(next, EOF):
            raise StopIteration
        return next

    def process(self) -> list[Token]:
        """Tokenize the entire source at once, ending with an EOF token."""
        tokens = [token for token in self]
        end = self.position(len(self.source))
        tokens.append(EOF().at(end, end))
        return tokens

    def peek(self, amount: int = 1) -> str | None:
        """The code point `amount` places ahead of the current one."""
        if self.index + amount - 1 < len(self.source):
            return self.source[self.index + amount - 1]
        return None

    def next(self) -> str | None:
        if self.index < len(self.source):
            self.index += 1
            return self.source[self.index - 1]
        return None

    def reconsume(self):
        self.index -= 1

    def error(self, message: str):
        error = ParseError(message, self.position(self.index))
        logger.debug("lexer error: %s", error)
        self.errors.append(error)

    def _consume_comment_(self) -> Comment:
        start = self.index - 1
        close = self.source.find("*/", self.index + 1)
        if close == -1:
            self.error("Comment not closed")
            self.index = len(self.source)
        else:
            self.index = close + 2
        return Comment(self.source[start:self.index])

    def _consume_whitespace_(self, current: str) -> Whitespace:
        whitespace = Whitespace(current)
        while Check.whitespace(self.peek()):
            whitespace.raw += self.next()
        return whitespace

    def _consume_string_(self, ending: str) -> String | BadString:
        string = String()
        while True:
            next = self.next()
            if next is None:
                self.error("String was not closed")
                return string
            elif next == ending:
                return string
            elif next == "\n":
                self.error("String literal not closed")
                self.reconsume()
                return BadString(string.raw)
            elif next == "\\":
                if self.peek() is None:
                    continue
                elif self.peek() == "\n":
                    self.next()
                else:
                    string.raw += self._consume_escape_()
            else:
                string.raw += next

    def _consume_escape_(self) -> str:
        """Consume an escaped code point. The backslash is already consumed."""
        next = self.next()
        if next is None:
            self.error("Escape at end of input")
            return REPLACEMENT_CHAR

        if Check.hex(next):
            output = next
            while Check.hex(self.peek()) and len(output) < 6:
                output += self.next()
            if Check.whitespace(self.peek()):
                self.next()
            value = int(output, 16)
            if value == 0 or value > 0x10FFFF or 0xD800 <= value <= 0xDFFF:
                return REPLACEMENT_CHAR
            return chr(value)
        return next

    def _consume_ident_(self) -> str:
        result = ''
        while self.peek() is not None:
            next = self.next()
            if Check.ident(next):
                result += next
            elif Check.escape(next, self.peek()):
                result += self._consume_escape_()
            else:
                self.reconsume()
                return result
        return result

    def _consume_hash_(self, current: str) -> Hash | Delim:
        if Check.ident(self.peek()) or Check.escape(self.peek(), self.peek(2)):
            hasht = Hash()
            if Check.starts_with_ident(self.peek(), self.peek(2), self.peek(3)):
                hasht.type = "id"
            hasht.raw = self._consume_ident_()
            return hasht
        return Delim(current)

    def _consume_number_(self) -> tuple[int | float, Literal['integer', 'number'], str]:
        """Consume a number from the code points. Returning a numeric value, a type
        of either integer or number, and the raw text.
        """
        _type: Literal['integer', 'number'] = 'integer'
        raw = ''
        if (peek := self.peek()) is not None and peek in "-+":
            raw += self.next()

        while Check.digit(self.peek()):
            raw += self.next()

        if self.peek() == "." and Check.digit(self.peek(2)):
            raw += self.next() + self.next()
            _type = "number"
            while Check.digit(self.peek()):
                raw += self.next()

        if (peek := self.peek()) is not None and peek in "Ee":
            sign = self.peek(2)
            if Check.digit(sign) or (sign is not None and sign in "-+" and Check.digit(self.peek(3))):
                _type = "number"
                raw += self.next() + self.next()
                while Check.digit(self.peek()):
                    raw += self.next()

        if _type == "integer":
            return int(raw), _type, raw
        return float(raw), _type, raw

    def _consume_numeric_(self) -> Number | Percentage | Dimension:
        """Consume code points and produce a Number, Percentage, or Dimension token."""
        number = self._consume_number_()
        if Check.starts_with_ident(self.peek(), self.peek(2), self.peek(3)):
            dim = Dimension(number[0], number[1], '', number[2])
            dim.unit = self._consume_ident_()
            dim.raw += dim.unit
            return dim
        elif self.peek() == "%":
            self.next()
            return Percentage(*number)
        return Number(*number)

    def _consume_remnant_bad_url_(self):
        while True:
            next = self.next()
            if next is None or next == ")":
                return
            elif Check.escape(next, self.peek()):
                self._consume_escape_()

    def _consume_url_(self) -> Url | BadUrl:
        url = Url()
        while Check.whitespace(self.peek()):
            self.next()

        while True:
            next = self.next()
            if next is None:
                self.error("Url not closed")
                return url
            elif next == ")":
                return url
            elif Check.whitespace(next):
                while Check.whitespace(self.peek()):
                    self.next()
                if self.peek() is None:
                    self.error("Url not closed")
                    return url
                elif self.peek() == ")":
                    self.next()
                    return url
                self._consume_remnant_bad_url_()
                return BadUrl(url.raw)
            elif next in '\'"(' or Check.non_printable(next):
                self.error("Invalid character in url")
                self._consume_remnant_bad_url_()
                return BadUrl(url.raw)
            elif next == "\\":
                if Check.escape(next, self.peek()):
                    url.raw += self._consume_escape_()
                else:
                    self.error("Invalid backslash in url")
                    self._consume_remnant_bad_url_()
                    return BadUrl(url.raw)
            else:
                url.raw += next

    def _consume_ident_like_(self) -> Ident | Function | Url | BadUrl:
        ident = self._consume_ident_()
        if ident.lower() == "url" and self.peek() == "(":
            self.next()
            while Check.whitespace(self.peek()) and Check.whitespace(self.peek(2)):
                self.next()
            two = (self.peek() or '') + (self.peek(2) or '')
            one = self.peek() or ''
            if (len(two) == 2 and Check.whitespace(two[0]) and two[1] in '\'"') or one in ('"', "'"):
                return Function(ident)
            return self._consume_url_()
        elif self.peek() == "(":
            self.next()
            return Function(ident)
        return Ident(ident)

    def consume(self) -> Token:
        """Consume code points and return the next token."""
        start = self.index
        token = self._consume_token_()
        return token.at(self.position(start), self.position(self.index))

    def _consume_token_(self) -> Token:
        next = self.next()
        if next is None:
            return EOF()
        elif next == "/" and self.peek() == "*":
            return self._consume_comment_()
        elif next in '"\'':
            return self._consume_string_(next)
        elif next == '#':
            return self._consume_hash_(next)
        elif next in "+-." and Check.starts_with_number(next, self.peek(), self.peek(2)):
            self.reconsume()
            return self._consume_numeric_()
        elif next == "-":
            if self.source.startswith("->", self.index):
                self.index += 2
                return CDC('-->')
            elif Check.starts_with_ident(next, self.peek(), self.peek(2)):
                self.reconsume()
                return self._consume_ident_like_()
            return Delim(next)
        elif next == "<" and self.source.startswith("!--", self.index):
            self.index += 3
            return CDO('<!--')
        elif next == "@":
            if Check.starts_with_ident(self.peek(), self.peek(2), self.peek(3)):
                return AtKeyword(self._consume_ident_())
            return Delim(next)
        elif next == "\\":
            if Check.escape(next, self.peek()):
                self.reconsume()
                return self._consume_ident_like_()
            self.error("Invalid backslash")
            return Delim(next)
        elif Check.digit(next):
            self.reconsume()
            return self._consume_numeric_()
        elif Check.ident_start(next):
            self.reconsume()
            return self._consume_ident_like_()
        elif Check.whitespace(next):
            return self._consume_whitespace_(next)
        elif next in PUNCTUATION:
            return PUNCTUATION[next](next)
        return Delim(next)

class ParseError(Exception):
    """Malformed stylesheet syntax."""
    def __init__(self, message: str, position: Position | None = None) -> None:
        self.message = message
        self.position = position
        super().__init__(message if position is None else f"{message} at {position}")
