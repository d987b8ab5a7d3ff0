from __future__ import annotations

from pathlib import Path
from typing import Iterator, List

from lark import Lark, Token

_GRAMMAR_PATH = Path(__file__).with_name("tokens.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

I64_MAX = 2**63 - 1


def _int_literal_value(text: str) -> int:
    # Digits outside ASCII or values past i64 degrade to zero instead of failing the lex pass.
    if not text.isascii():
        return 0
    value = int(text)
    if value > I64_MAX:
        return 0
    return value


def _numeric_prefix_length(text: str) -> int:
    length = 0
    while length < len(text) and text[length].isnumeric():
        length += 1
    return length


class LiteralPostLex:
    """Post-lexer that turns raw Lark tokens into Xeno tokens.

    `INT_LIT` tokens get their integer value and `STRAY` characters become
    one-character `NAME` tokens, so the lexer never rejects input. A `NAME`
    that starts with a non-decimal numeric character such as `²` is split into
    an `INT_LIT` for the numeric run and a `NAME` for the rest.
    """

    always_accept = ()

    def process(self, stream: Iterator[Token]) -> Iterator[Token]:
        for token in stream:
            if token.type == "INT_LIT":
                yield Token.new_borrow_pos("INT_LIT", _int_literal_value(str(token)), token)
            elif token.type == "NAME" and token[0].isnumeric():
                cut = _numeric_prefix_length(token)
                yield Token.new_borrow_pos("INT_LIT", _int_literal_value(token[:cut]), token)
                if cut < len(token):
                    yield Token.new_borrow_pos("NAME", str(token[cut:]), token)
            elif token.type == "STRAY":
                yield Token.new_borrow_pos("NAME", str(token), token)
            else:
                yield token


_LEXER = Lark(
    _GRAMMAR_SRC,
    parser="lalr",
    lexer="basic",
    start="start",
    maybe_placeholders=False,
    postlex=LiteralPostLex(),
)


def tokenize(source: str) -> List[Token]:
    """Scan `source` into tokens, always terminated by a single `EOF` token."""
    tokens = list(_LEXER.lex(source))
    tokens.append(Token("EOF", ""))
    return tokens
