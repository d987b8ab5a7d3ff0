from __future__ import annotations

import copy
from typing import Dict, Iterable, List, Optional, Sequence, Union

from . import ast
from .errors import XenoError
from .parser import parse

Value = Union[int, List["Value"]]

I64_MIN = -(2**63)
I64_MAX = 2**63 - 1
_U64_MASK = 2**64 - 1


class EvalError(XenoError, RuntimeError):
    """Failure while evaluating a function; no partial result is produced."""


class ReturnSignal(Exception):
    def __init__(self, value: Value) -> None:
        self.value = value


def check_value(value: object) -> Value:
    """Validate a host value before it enters the interpreter."""
    if isinstance(value, bool):
        raise EvalError(f"unsupported value {value!r}")
    if isinstance(value, int):
        if not I64_MIN <= value <= I64_MAX:
            raise EvalError(f"integer {value} does not fit in 64 bits")
        return value
    if isinstance(value, (list, tuple)):
        return [check_value(item) for item in value]
    raise EvalError(f"unsupported value {value!r}")


class Environment:
    """Global bindings plus a stack of local scopes, one per active call."""

    def __init__(self) -> None:
        self.globals: Dict[str, Value] = {}
        self.scopes: List[Dict[str, Value]] = []

    def push_scope(self) -> None:
        self.scopes.append({})

    def pop_scope(self) -> None:
        self.scopes.pop()

    def set_global(self, name: str, value: Value) -> None:
        self.globals[name] = copy.deepcopy(value)

    def assign(self, name: str, value: Value) -> None:
        target = self.scopes[-1] if self.scopes else self.globals
        target[name] = copy.deepcopy(value)

    def lookup(self, name: str) -> Optional[Value]:
        for scope in reversed(self.scopes):
            if name in scope:
                return copy.deepcopy(scope[name])
        if name in self.globals:
            return copy.deepcopy(self.globals[name])
        return None


class Interpreter:
    def __init__(self, env: Environment | None = None) -> None:
        self.env = env or Environment()

    def bind_global(self, name: str, value: Value) -> None:
        self.env.set_global(name, check_value(value))

    def load_data(self, data: ast.DataDef) -> None:
        for name, value in data.entries:
            self.env.set_global(name, value)

    def call(self, func: ast.FunctionDef, args: Sequence[Value]) -> Value:
        if len(args) != len(func.params):
            raise EvalError(
                f"function {func.name} expects {len(func.params)} arguments, got {len(args)}"
            )
        values = [check_value(arg) for arg in args]
        self.env.push_scope()
        try:
            for param, value in zip(func.params, values):
                self.env.assign(param.name, value)
            result: Value = 0
            try:
                try:
                    self._execute_block(func.body)
                except ReturnSignal as signal:
                    result = signal.value
                # The trailing expression wins over an explicit return.
                if func.return_expr is not None:
                    result = self._eval_expr(func.return_expr)
            except RecursionError:
                raise EvalError("expression nested too deeply") from None
            return result
        finally:
            self.env.pop_scope()

    def _execute_block(self, statements: List[ast.Stmt]) -> None:
        for stmt in statements:
            self._exec_stmt(stmt)

    def _exec_stmt(self, stmt: ast.Stmt) -> None:
        if isinstance(stmt, ast.LetStmt):
            value = self._eval_expr(stmt.value)
            self.env.assign(stmt.name, value)
            return
        if isinstance(stmt, ast.ExprStmt):
            self._eval_expr(stmt.value)
            return
        if isinstance(stmt, ast.ReturnStmt):
            raise ReturnSignal(self._eval_expr(stmt.value))
        raise EvalError(f"unsupported statement {stmt}")

    def _eval_expr(self, expr: ast.Expr) -> Value:
        if isinstance(expr, ast.IntLiteral):
            return expr.value
        if isinstance(expr, ast.ArrayLiteral):
            return [self._eval_expr(elem) for elem in expr.elements]
        if isinstance(expr, ast.Name):
            value = self.env.lookup(expr.ident)
            if value is None:
                raise EvalError(f"undefined variable: {expr.ident}")
            return value
        if isinstance(expr, ast.DataRef):
            value = self.env.lookup(expr.ident)
            if value is None:
                raise EvalError(f"undefined data field: {expr.ident}")
            return value
        if isinstance(expr, ast.Call):
            raise EvalError(f"function calls not yet supported in evaluation: {expr.func}")
        if isinstance(expr, ast.Index):
            return self._eval_index(expr)
        raise EvalError(f"unsupported expression {expr}")

    def _eval_index(self, expr: ast.Index) -> Value:
        base = self._eval_expr(expr.value)
        index = self._eval_expr(expr.index)
        if not isinstance(base, list) or not isinstance(index, int):
            raise EvalError("array indexing requires array and int")
        position = index & _U64_MASK
        if position >= len(base):
            raise EvalError(f"array index out of bounds: {position}")
        return base[position]


def evaluate(
    source: str,
    args: Sequence[Value] = (),
    data_sources: Iterable[str] = (),
) -> Value:
    """Parse a function file, load the given data files as globals, and call it."""
    func = parse(source)
    if not isinstance(func, ast.FunctionDef):
        raise XenoError("expected a function file, got a data file")
    interp = Interpreter()
    for data_source in data_sources:
        data = parse(data_source)
        if not isinstance(data, ast.DataDef):
            raise XenoError(f"expected a data file, got function {data.name}")
        interp.load_data(data)
    return interp.call(func, args)
