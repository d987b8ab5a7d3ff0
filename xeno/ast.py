from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union


class Type(Enum):
    """Declared type of a parameter or let-binding. Recorded, never checked."""

    INT = "int"
    INT_ARRAY = "int[]"


@dataclass
class Param:
    name: str
    type: Type


class Expr:
    pass


@dataclass
class IntLiteral(Expr):
    value: int


@dataclass
class ArrayLiteral(Expr):
    elements: List[Expr]


@dataclass
class Name(Expr):
    ident: str


@dataclass
class DataRef(Expr):
    """`.name`; resolved exactly like a `Name` at evaluation time."""

    ident: str


@dataclass
class Call(Expr):
    func: str
    args: List[Expr]


@dataclass
class Index(Expr):
    value: Expr
    index: Expr


class Stmt:
    pass


@dataclass
class LetStmt(Stmt):
    name: str
    type: Type
    value: Expr


@dataclass
class ExprStmt(Stmt):
    value: Expr


@dataclass
class ReturnStmt(Stmt):
    value: Expr


@dataclass
class FunctionDef:
    name: str
    params: List[Param]
    body: List[Stmt]
    return_expr: Optional[Expr] = None


@dataclass
class DataDef:
    entries: List[Tuple[str, int]] = field(default_factory=list)


# A parsed source file is exactly one function or one data table.
FileContent = Union[FunctionDef, DataDef]
