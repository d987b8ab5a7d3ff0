"""
xeno: front-end and tree-walking evaluator for the Xeno expression language.

Modules:
  lexer:  source text -> tokens
  ast:    function and data-table nodes
  parser: tokens -> one function or one data table
  interp: scoped evaluation of a function against argument values
"""

from .errors import XenoError
from .interp import EvalError, Environment, Interpreter, evaluate
from .parser import ParseError, parse

__all__ = [
    "Environment",
    "EvalError",
    "Interpreter",
    "ParseError",
    "XenoError",
    "evaluate",
    "parse",
]
