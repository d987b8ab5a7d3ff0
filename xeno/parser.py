from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from lark import Token

from .ast import (
    ArrayLiteral,
    Call,
    DataDef,
    DataRef,
    Expr,
    ExprStmt,
    FileContent,
    FunctionDef,
    Index,
    IntLiteral,
    LetStmt,
    Name,
    Param,
    ReturnStmt,
    Stmt,
    Type,
)
from .errors import XenoError
from .lexer import tokenize

_PUNCTUATION = {
    "LPAR": "(",
    "RPAR": ")",
    "LBRACE": "{",
    "RBRACE": "}",
    "LSQB": "[",
    "RSQB": "]",
    "COMMA": ",",
    "SEMICOLON": ";",
    "COLON": ":",
    "EQUAL": "=",
    "DOT": ".",
}

_KEYWORDS = {"FN": "fn", "LET": "let", "RETURN": "return", "INT": "int"}

_EOF = Token("EOF", "")


class ParseError(XenoError, ValueError):
    """First syntax defect found in a source file; parsing stops there."""


def describe_kind(kind: str) -> str:
    if kind in _PUNCTUATION:
        return f"'{_PUNCTUATION[kind]}'"
    if kind in _KEYWORDS:
        return f"'{_KEYWORDS[kind]}'"
    if kind == "NAME":
        return "identifier"
    if kind == "INT_LIT":
        return "integer literal"
    if kind == "EOF":
        return "end of input"
    return kind


def describe_token(token: Token) -> str:
    if token.type == "NAME":
        return f"identifier '{token.value}'"
    if token.type == "INT_LIT":
        return f"integer literal {token.value}"
    return describe_kind(token.type)


class Parser:
    """Recursive-descent parser over the token list produced by `tokenize`."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        self.tokens = list(tokens)
        self.pos = 0

    def _current(self) -> Token:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return _EOF

    def _at(self, *kinds: str) -> bool:
        return self._current().type in kinds

    def _advance(self) -> Token:
        token = self._current()
        self.pos += 1
        return token

    def _fail(self, expected: str) -> ParseError:
        return ParseError(f"expected {expected}, got {describe_token(self._current())}")

    def _expect(self, kind: str) -> Token:
        if not self._at(kind):
            raise self._fail(describe_kind(kind))
        return self._advance()

    def _expect_name(self, what: str) -> str:
        if not self._at("NAME"):
            raise self._fail(what)
        return self._advance().value

    def parse_file(self) -> FileContent:
        if self._at("LET"):
            return self.parse_data()
        if self._at("FN"):
            return self.parse_function()
        raise self._fail("fn or let")

    # Functions

    def parse_function(self) -> FunctionDef:
        self._expect("FN")
        name = self._expect_name("function name")
        self._expect("LPAR")
        params = self._parse_params()
        self._expect("RPAR")
        self._expect("LBRACE")
        body, return_expr = self._parse_block()
        self._expect("RBRACE")
        return FunctionDef(name=name, params=params, body=body, return_expr=return_expr)

    def _parse_params(self) -> List[Param]:
        params: List[Param] = []
        if self._at("RPAR"):
            return params
        while True:
            name = self._expect_name("parameter name")
            self._expect("COLON")
            params.append(Param(name=name, type=self._parse_type()))
            if not self._at("COMMA"):
                break
            self._advance()
        return params

    def _parse_type(self) -> Type:
        if not self._at("INT"):
            raise self._fail("type")
        self._advance()
        if self._at("LSQB"):
            self._advance()
            self._expect("RSQB")
            return Type.INT_ARRAY
        return Type.INT

    def _parse_block(self) -> Tuple[List[Stmt], Optional[Expr]]:
        stmts: List[Stmt] = []
        while not self._at("RBRACE", "EOF"):
            if self._at("LET"):
                stmts.append(self._parse_let())
            elif self._at("RETURN"):
                self._advance()
                value = self.parse_expr()
                self._expect("SEMICOLON")
                # Later statements are still parsed; the interpreter stops at the first return.
                stmts.append(ReturnStmt(value=value))
            else:
                value = self.parse_expr()
                if not self._at("SEMICOLON"):
                    return stmts, value
                self._advance()
                stmts.append(ExprStmt(value=value))
        return stmts, None

    def _parse_let(self) -> LetStmt:
        self._expect("LET")
        name = self._expect_name("variable name")
        self._expect("COLON")
        ty = self._parse_type()
        self._expect("EQUAL")
        value = self.parse_expr()
        self._expect("SEMICOLON")
        return LetStmt(name=name, type=ty, value=value)

    # Expressions

    def parse_expr(self) -> Expr:
        expr = self._parse_primary()
        while True:
            if self._at("LPAR"):
                if not isinstance(expr, Name):
                    raise ParseError("only identifiers can be called")
                self._advance()
                args = self._parse_expr_list("RPAR")
                self._expect("RPAR")
                expr = Call(func=expr.ident, args=args)
            elif self._at("LSQB"):
                self._advance()
                index = self.parse_expr()
                self._expect("RSQB")
                expr = Index(value=expr, index=index)
            else:
                return expr

    def _parse_primary(self) -> Expr:
        token = self._current()
        if token.type == "INT_LIT":
            self._advance()
            return IntLiteral(value=token.value)
        if token.type == "DOT":
            self._advance()
            return DataRef(ident=self._expect_name("field name after '.'"))
        if token.type == "NAME":
            self._advance()
            return Name(ident=token.value)
        if token.type == "LSQB":
            self._advance()
            elements = self._parse_expr_list("RSQB")
            self._expect("RSQB")
            return ArrayLiteral(elements=elements)
        if token.type == "LPAR":
            self._advance()
            inner = self.parse_expr()
            self._expect("RPAR")
            return inner
        raise self._fail("expression")

    def _parse_expr_list(self, closer: str) -> List[Expr]:
        items: List[Expr] = []
        if self._at(closer):
            return items
        while True:
            items.append(self.parse_expr())
            if not self._at("COMMA"):
                return items
            self._advance()

    # Data tables

    def parse_data(self) -> DataDef:
        entries: List[Tuple[str, int]] = []
        # Anything other than `let` ends the table without error.
        while self._at("LET"):
            self._advance()
            name = self._expect_name("variable name")
            self._expect("COLON")
            self._expect("INT")
            self._expect("EQUAL")
            if not self._at("INT_LIT"):
                raise self._fail("integer value")
            value = self._advance().value
            self._expect("SEMICOLON")
            entries.append((name, value))
        return DataDef(entries=entries)


def parse_tokens(tokens: Sequence[Token]) -> FileContent:
    try:
        return Parser(tokens).parse_file()
    except RecursionError:
        raise ParseError("expression nested too deeply") from None


def parse(source: str) -> FileContent:
    """Lex and parse one source file into a function or a data table."""
    return parse_tokens(tokenize(source))
