"""Tokens produced by `cssbaseline.css.lexer.Lexer`.

Each token keeps the text it was built from in `raw` (without delimiters such
as the quotes of a string or the `@` of an at-keyword) and the half-open span
it covers in the source.
"""

from __future__ import annotations
from typing import ClassVar, Literal, NamedTuple

__all__ = [
    "Position",
    "Token",
    "Ident",
    "Function",
    "AtKeyword",
    "Hash",
    "String",
    "BadString",
    "Url",
    "BadUrl",

    "Delim",
    "Colon",
    "Semicolon",
    "Comma",

    "Bracket",
    "LCurlyBracket",
    "LSquareBracket",
    "LParantheses",
    "RCurlyBracket",
    "RSquareBracket",
    "RParantheses",

    "Numeric",
    "Number",
    "Percentage",
    "Dimension",

    "Comment",
    "Whitespace",
    "CDC",
    "CDO",
    "EOF"
]

NumericType = Literal['integer', 'number']


class Position(NamedTuple):
    """1-based line and column of a code point in the source."""
    line: int = 1
    column: int = 1

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


class Token:
    raw: str
    start: Position
    end: Position

    def __init__(self, raw: str = ''):
        self.raw = raw
        self.start = self.end = Position()

    def at(self, start: Position, end: Position) -> Token:
        """Attach the half-open source span of the token."""
        self.start, self.end = start, end
        return self

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.raw!r} @ {self.start})'

    def __str__(self) -> str:
        return self.raw


class Ident(Token): pass

class Function(Token):
    """`name(`. The arguments follow as separate tokens."""

    def __str__(self) -> str:
        return f"{self.raw}("

    @property
    def name_end(self) -> Position:
        """End of the function name, excluding the opening parenthesis."""
        return Position(self.end.line, self.end.column - 1)

class AtKeyword(Token):
    def __str__(self) -> str:
        return f"@{self.raw}"

class Hash(Token):
    def __init__(self, raw: str = '', *, type: Literal['id', 'unrestricted'] = 'unrestricted'):
        super().__init__(raw)
        self.type = type

    def __str__(self) -> str:
        return f"#{self.raw}"

class String(Token):
    def __str__(self) -> str:
        return repr(self.raw)

class BadString(Token): pass

class Url(Token):
    def __str__(self) -> str:
        return f"url({self.raw})"

class BadUrl(Token): pass


class Delim(Token):
    """A single code point that starts no other token."""

    def __init__(self, raw: str):
        if len(raw) != 1:
            raise ValueError(f"A delimiter is exactly one code point, got {raw!r}")
        super().__init__(raw)

class Colon(Delim): pass
class Semicolon(Delim): pass
class Comma(Delim): pass


class Bracket(Token):
    """An opening or closing bracket. `alt` is the class of its partner."""
    partner: ClassVar[str]

    @property
    def alt(self) -> type[Bracket]:
        return globals()[self.partner]

class LCurlyBracket(Bracket): partner = "RCurlyBracket"
class RCurlyBracket(Bracket): partner = "LCurlyBracket"
class LSquareBracket(Bracket): partner = "RSquareBracket"
class RSquareBracket(Bracket): partner = "LSquareBracket"
class LParantheses(Bracket): partner = "RParantheses"
class RParantheses(Bracket): partner = "LParantheses"


class Numeric(Token):
    """Numbers, percentages and dimensions. `value` excludes any `%` or unit."""
    value: int | float
    type: NumericType

    def __init__(self, value: int | float, type: NumericType, raw: str):
        super().__init__(raw)
        self.value = value
        self.type = type

class Number(Numeric): pass

class Percentage(Number):
    def __str__(self) -> str:
        return f"{self.raw}%"

class Dimension(Numeric):
    def __init__(self, value: int | float, type: NumericType, unit: str, raw: str):
        super().__init__(value, type, raw)
        self.unit = unit


class Comment(Token):
    @property
    def text(self) -> str:
        return self.raw.removeprefix("/*").removesuffix("*/")

class Whitespace(Token): pass
class CDO(Token): pass
class CDC(Token): pass
class EOF(Token): pass
