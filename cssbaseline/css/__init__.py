"""
References:
    - [syntax](https://www.w3.org/TR/css-syntax-3/)
    - [nesting](https://developer.chrome.com/articles/css-nesting/)
    - [pseudo classes+functions](https://developer.mozilla.org/en-US/docs/Web/CSS/Pseudo-classes)
    - [@media](https://developer.mozilla.org/en-US/docs/Web/CSS/@media)
    - [@supports](https://developer.mozilla.org/en-US/docs/Web/CSS/@supports)

<at-rule/>
<ruleset>
    <selector/> <block>
        <property/>: <value/>;
        <variable/>: <anything/>;
        <nested-rule/>
    </block>
</ruleset>
"""

from cssbaseline.css.lexer import Lexer, ParseError
from cssbaseline.css.parser import (
    AtRule,
    Block,
    Component,
    Declaration,
    FunctionBlock,
    Node,
    Parse,
    Parser,
    QualifiedRule,
    Raw,
    Stylesheet,
)
from cssbaseline.css.tokens import Position

__all__ = [
    "AtRule",
    "Block",
    "Component",
    "Declaration",
    "FunctionBlock",
    "Lexer",
    "Node",
    "Parse",
    "ParseError",
    "Parser",
    "Position",
    "QualifiedRule",
    "Raw",
    "Stylesheet",
]
