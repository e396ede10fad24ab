""" CSS Parser
https://www.w3.org/TR/css-syntax-3/#parsing

Produces the syntax tree walked by the analyzer. Nodes keep the spans of the
tokens they were built from; nothing downstream re-reads the source text.

In strict mode the first syntax error raises `ParseError`. In tolerant mode
errors are collected on the stylesheet and the construct that failed is kept
as a `Raw` node.
"""

from __future__ import annotations
import logging
from typing import Union
from typing_extensions import TypeAliasType

from cssbaseline.css.lexer import Lexer, ParseError
from cssbaseline.css.tokens import *

logger = logging.getLogger(__name__)

class FunctionBlock:
    token: Function
    value: list[Component]
    end: Position
    def __init__(self, token: Function, value: list | None = None) -> None:
        self.token = token
        self.value = value or []
        self.end = token.end

    @property
    def name(self) -> str:
        return self.token.raw

    @property
    def start(self) -> Position:
        return self.token.start

    def __repr__(self) -> str:
        return f"Function({self.name!r}, {self.value})"

class Block:
    token: LCurlyBracket | LSquareBracket | LParantheses
    value: list[Component]
    end: Position
    def __init__(self, token: LCurlyBracket | LSquareBracket | LParantheses) -> None:
        self.token = token
        self.value = []
        self.end = token.end

    @property
    def start(self) -> Position:
        return self.token.start

    def __repr__(self) -> str:
        return f"Block({self.token.raw!r}, {self.value})"

Component = TypeAliasType("Component", Union[Token, FunctionBlock, Block])

class Declaration:
    token: Ident
    important: bool
    value: list[Component]
    def __init__(self, token: Ident, value: list | None = None):
        self.token = token
        self.value = value or []
        self.important = False

    @property
    def name(self) -> str:
        return self.token.raw

    @property
    def start(self) -> Position:
        return self.token.start

    def __repr__(self) -> str:
        return f"Decl({'!, ' if self.important else ''}{self.name!r}, {self.value})"

class Raw:
    """Component values the parser could not make sense of."""
    value: list[Component]
    error: ParseError
    def __init__(self, value: list[Component], error: ParseError) -> None:
        self.value = value
        self.error = error

    def __repr__(self) -> str:
        return f"Raw({self.value})"

class QualifiedRule:
    prelude: list[Component]
    block: Block | None
    children: list[Node]
    def __init__(self, prelude: list[Component] | None = None, block: Block | None = None) -> None:
        self.prelude = prelude or []
        self.block = block
        self.children = []

    def __repr__(self) -> str:
        return f"QualifiedRule(prelude={self.prelude}, children={self.children})"

class AtRule:
    token: AtKeyword
    prelude: list[Component]
    block: Block | None
    children: list[Node]
    def __init__(self, token: AtKeyword, prelude: list | None = None, block: Block | None = None) -> None:
        self.token = token
        self.prelude = prelude or []
        self.block = block
        self.children = []

    @property
    def name(self) -> str:
        return self.token.raw

    @property
    def start(self) -> Position:
        return self.token.start

    def __repr__(self) -> str:
        block = "None" if self.block is None else "{...}"
        return f"AtRule({self.name!r}, prelude={self.prelude}, block={block})"

Node = TypeAliasType("Node", Union[Declaration, QualifiedRule, AtRule, Raw])

class Stylesheet:
    rules: list[QualifiedRule | AtRule | Raw]
    errors: list[ParseError]
    def __init__(self, rules: list | None = None, location: str | None = None) -> None:
        self.rules = rules or []
        self.errors = []
        self._location_ = location

    @property
    def href(self) -> str | None:
        return self._location_

    def __repr__(self) -> str:
        sep = "\n  "
        return f"""Stylesheet(
  {sep.join(repr(rule) for rule in self.rules)}
)"""

Tokens = list[Token] | str | list[Component]

class Parse:
    @staticmethod
    def normalize(_input_: Tokens, errors: list[ParseError] | None = None) -> list[Token] | list[Component]:
        """Turn the input into a list of tokens or component values, without comments."""
        if isinstance(_input_, str):
            lexer = Lexer(_input_)
            tokens = lexer.process()
            if errors is not None:
                errors.extend(lexer.errors)
            _input_ = tokens
        if isinstance(_input_, list):
            return [token for token in _input_ if not isinstance(token, Comment)]
        raise TypeError(
            "Unexpected input to parse. Expected string, list of tokens, or list of component values."
        )

    @staticmethod
    def parse_stylesheet(source: Tokens, url: str | None = None, *, tolerant: bool = False) -> Stylesheet:
        stylesheet = Stylesheet(location=url)
        parser = Parser(source, tolerant=tolerant, errors=stylesheet.errors)
        stylesheet.rules = parser.consume_rule_list(True)
        logger.debug(
            "parsed %s: %d rules, %d errors",
            url or "<string>", len(stylesheet.rules), len(stylesheet.errors)
        )
        return stylesheet


class Parser:
    # List of css tokens, return input
    # List of css component values, return input
    # string, tokenize result, and return final
    def __init__(self, tokens: Tokens, *, tolerant: bool = False, errors: list[ParseError] | None = None) -> None:
        self.errors: list[ParseError] = errors if errors is not None else []
        self.tolerant = tolerant
        self.tokens: list[Token] | list[Component] = Parse.normalize(tokens, self.errors)
        self.index = 0
        if not tolerant and len(self.errors) > 0:
            raise self.errors[0]

    def peek(self, amount: int = 1) -> Token | Component:
        if self.index + amount - 1 < len(self.tokens):
            return self.tokens[self.index + amount - 1]
        return EOF()

    def reconsume(self):
        self.index -= 1

    def next(self) -> Token | Component:
        if self.index < len(self.tokens):
            self.index += 1
            return self.tokens[self.index - 1]
        return EOF()

    def skip_whitespace(self):
        while isinstance(self.peek(), Whitespace):
            self.next()

    def error(self, message: str, position: Position | None = None) -> ParseError:
        error = ParseError(message, position)
        if not self.tolerant:
            raise error
        logger.warning("%s", error)
        self.errors.append(error)
        return error

    def nested(self, components: list[Component]) -> Parser:
        """A parser over the contents of a block, sharing mode and error list."""
        return Parser(components, tolerant=self.tolerant, errors=self.errors)

    def consume_block(self, opening: LCurlyBracket | LSquareBracket | LParantheses) -> Block:
        block = Block(opening)
        while True:
            next = self.next()
            if isinstance(next, opening.alt):
                block.end = next.end
                return block
            elif isinstance(next, EOF):
                if len(block.value) > 0:
                    block.end = block.value[-1].end
                self.error("Block was not closed", opening.start)
                return block
            else:
                self.reconsume()
                block.value.append(self.consume_component_value())

    def consume_function(self, function: Function) -> FunctionBlock:
        fblock = FunctionBlock(function)
        while True:
            next = self.next()
            if isinstance(next, RParantheses):
                fblock.end = next.end
                return fblock
            elif isinstance(next, EOF):
                if len(fblock.value) > 0:
                    fblock.end = fblock.value[-1].end
                self.error("Function was not closed", function.start)
                return fblock
            else:
                self.reconsume()
                fblock.value.append(self.consume_component_value())

    def consume_component_value(self) -> Component:
        next = self.next()
        if isinstance(next, (LCurlyBracket, LSquareBracket, LParantheses)):
            return self.consume_block(next)
        elif isinstance(next, Function):
            return self.consume_function(next)
        return next

    def consume_at_rule(self) -> AtRule:
        at_rule = AtRule(self.next())

        while True:
            next = self.next()
            if isinstance(next, Semicolon):
                return at_rule
            elif isinstance(next, EOF):
                return at_rule
            elif isinstance(next, LCurlyBracket):
                at_rule.block = self.consume_block(next)
                break
            elif isinstance(next, Block) and isinstance(next.token, LCurlyBracket):
                at_rule.block = next
                break
            else:
                self.reconsume()
                at_rule.prelude.append(self.consume_component_value())

        at_rule.children = self.nested(at_rule.block.value).consume_style_block()
        return at_rule

    def consume_qualified_rule(self) -> QualifiedRule | Raw | None:
        qrule = QualifiedRule()
        while True:
            next = self.next()
            if isinstance(next, EOF):
                if len(qrule.prelude) == 0:
                    return None
                error = self.error("Qualified rule is not closed", qrule.prelude[0].start)
                return Raw(qrule.prelude, error)
            elif isinstance(next, LCurlyBracket):
                qrule.block = self.consume_block(next)
                break
            elif isinstance(next, Block) and isinstance(next.token, LCurlyBracket):
                qrule.block = next
                break
            else:
                self.reconsume()
                qrule.prelude.append(self.consume_component_value())

        qrule.children = self.nested(qrule.block.value).consume_style_block()
        return qrule

    def consume_rule_list(self, top_level: bool = False) -> list[QualifiedRule | AtRule | Raw]:
        rules = []
        while True:
            next = self.next()
            if isinstance(next, Whitespace):
                continue
            elif isinstance(next, EOF):
                return rules
            elif isinstance(next, (CDO, CDC)):
                if top_level: continue
                self.reconsume()
                if (rule := self.consume_qualified_rule()) is not None:
                    rules.append(rule)
            elif isinstance(next, AtKeyword):
                self.reconsume()
                rules.append(self.consume_at_rule())
            else:
                self.reconsume()
                if (rule := self.consume_qualified_rule()) is not None:
                    rules.append(rule)

    def consume_declaration(self, components: list[Component]) -> Declaration | Raw:
        """Build a declaration from the component values between two semicolons."""
        parser = self.nested(components)
        parser.skip_whitespace()
        name = parser.next()
        if not isinstance(name, Ident):
            error = self.error("Expected a property name", components[0].start)
            return Raw(components, error)

        decl = Declaration(name)
        parser.skip_whitespace()
        if not isinstance(parser.peek(), Colon):
            error = self.error("Expected a colon", name.end)
            return Raw(components, error)
        parser.next()
        parser.skip_whitespace()

        while not isinstance(parser.peek(), EOF):
            decl.value.append(parser.next())
        while len(decl.value) > 0 and isinstance(decl.value[-1], Whitespace):
            decl.value.pop()

        if (
            len(decl.value) >= 2
            and isinstance(decl.value[-2], Delim) and decl.value[-2].raw == "!"
            and isinstance(decl.value[-1], Ident) and decl.value[-1].raw.lower() == "important"
        ):
            decl.value = decl.value[:-2]
            decl.important = True
            while len(decl.value) > 0 and isinstance(decl.value[-1], Whitespace):
                decl.value.pop()

        if len(decl.value) == 0 and not decl.name.startswith("--"):
            error = self.error(f"Missing value for {decl.name!r}", name.end)
            return Raw(components, error)
        return decl

    def consume_style_block(self) -> list[Node]:
        """Consume the contents of a `{}` block: declarations mixed with nested rules."""
        children = []
        while True:
            next = self.next()
            if isinstance(next, (Whitespace, Semicolon)):
                continue
            elif isinstance(next, EOF):
                return children
            elif isinstance(next, AtKeyword):
                self.reconsume()
                children.append(self.consume_at_rule())
                continue

            self.reconsume()
            temp: list = []
            custom = isinstance(next, Ident) and next.raw.startswith("--")
            rule = None
            while not isinstance(self.peek(), (EOF, Semicolon)):
                value = self.consume_component_value()
                if not custom and isinstance(value, Block) and isinstance(value.token, LCurlyBracket):
                    rule = QualifiedRule(temp, value)
                    break
                temp.append(value)

            if rule is not None:
                rule.children = self.nested(rule.block.value).consume_style_block()
                children.append(rule)
            else:
                children.append(self.consume_declaration(temp))
