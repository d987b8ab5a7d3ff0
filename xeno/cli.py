from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from enum import Enum
from pathlib import Path
from typing import List

from . import ast
from .errors import XenoError
from .interp import Interpreter, Value
from .lexer import tokenize
from .parser import parse


def _node_to_json(node: object) -> object:
    if isinstance(node, Enum):
        return node.value
    if dataclasses.is_dataclass(node):
        out = {"kind": type(node).__name__}
        for f in dataclasses.fields(node):
            out[f.name] = _node_to_json(getattr(node, f.name))
        return out
    if isinstance(node, (list, tuple)):
        return [_node_to_json(item) for item in node]
    return node


def _read_source(ap: argparse.ArgumentParser, path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        ap.error(f"cannot read {path}: {exc.strerror}")
    except UnicodeDecodeError as exc:
        ap.error(f"cannot read {path}: not valid UTF-8 ({exc.reason} at byte {exc.start})")


def _parse_arg(ap: argparse.ArgumentParser, text: str) -> Value:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        ap.error(f"argument {text!r} is not an integer or a JSON array")


def cmd_run(ap: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    content = parse(_read_source(ap, args.source))
    if not isinstance(content, ast.FunctionDef):
        raise XenoError(f"{args.source} is a data file, not a function")
    interp = Interpreter()
    for data_path in args.data:
        data = parse(_read_source(ap, data_path))
        if not isinstance(data, ast.DataDef):
            raise XenoError(f"{data_path} is a function, not a data file")
        interp.load_data(data)
    call_args: List[Value] = [_parse_arg(ap, text) for text in args.arg]
    print(json.dumps(interp.call(content, call_args)))
    return 0


def cmd_parse(ap: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    content = parse(_read_source(ap, args.source))
    print(json.dumps(_node_to_json(content), indent=2))
    return 0


def cmd_tokens(ap: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    for token in tokenize(_read_source(ap, args.source)):
        print(f"{token.type} {token.value}".rstrip())
    return 0


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="xeno", description="xeno: parse and evaluate Xeno source files")
    sub = ap.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Evaluate a function file and print its result as JSON")
    run.add_argument("source", type=Path, help="Function source file")
    run.add_argument(
        "--data",
        type=Path,
        action="append",
        default=[],
        help="Data file whose entries become globals (repeatable)",
    )
    run.add_argument(
        "--arg",
        action="append",
        default=[],
        help="Argument value as JSON, e.g. 3 or '[1, 2]' (repeatable, in parameter order)",
    )
    run.set_defaults(handler=cmd_run)

    dump = sub.add_parser("parse", help="Print the parsed file as JSON")
    dump.add_argument("source", type=Path, help="Source file")
    dump.set_defaults(handler=cmd_parse)

    toks = sub.add_parser("tokens", help="Print the token stream, one token per line")
    toks.add_argument("source", type=Path, help="Source file")
    toks.set_defaults(handler=cmd_tokens)

    args = ap.parse_args(argv)
    try:
        return args.handler(ap, args)
    except XenoError as exc:
        print(f"xeno: error: {exc.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
