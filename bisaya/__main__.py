"""CLI entry point for the Bisaya++ interpreter.

Usage:
    python -m bisaya [-v|-vv|-vvv] <program_file>
    python -m bisaya --tokens <program_file>
    python -m bisaya [-v...] --emit-ast <program_file>
    python -m bisaya [-v...] --ast <ast_json_file>
    python -m bisaya --check-grammar <program_file>

Options:
  -v               Increase debug verbosity (can be repeated)
  --tokens         Print the token stream of the given program
  --emit-ast       Parse the given program and emit an AST JSON file
  --ast            Execute a previously emitted AST JSON file
  --check-grammar  Validate the program against the reference Lark grammar

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.

Exit status is 0 on success, 65 when the program fails to scan or parse
(nothing is executed), and 1 on a runtime error or a missing file.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .ast_json import ast_from_obj, ast_to_obj
from .diagnostics import Diagnostics
from .errors import BisayaError, BisayaRuntimeError, LexError, ParseError
from .grammar import check_syntax
from .interpreter import Interpreter, parse_program
from .lexer import Lexer

EXIT_SYNTAX = 65
EXIT_RUNTIME = 1


def read_source(path: str) -> str:
    program_file = Path(path)
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(EXIT_RUNTIME)
    with open(program_file, 'r', encoding='utf-8') as f:
        return f.read()


def compile_or_exit(source: str):
    try:
        return parse_program(source)
    except (LexError, ParseError) as e:
        print(e, file=sys.stderr)
        sys.exit(EXIT_SYNTAX)


def execute(program, debug_level: int) -> None:
    interpreter = Interpreter(debug_level=debug_level)
    try:
        interpreter.interpret(program)
    except BisayaRuntimeError as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(EXIT_RUNTIME)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog='bisaya', description="Bisaya++ language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--tokens', metavar='BPP_FILE', help='print the token stream of the given program')
    group.add_argument('--emit-ast', metavar='BPP_FILE', help='emit AST JSON for the given program')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    group.add_argument('--check-grammar', metavar='BPP_FILE', help='validate the program against the reference grammar')
    parser.add_argument('program', nargs='?', help='Bisaya++ program file (.bpp) to execute')
    args = parser.parse_args(argv)

    # Token dump mode
    if args.tokens:
        diagnostics = Diagnostics()
        tokens = Lexer(read_source(args.tokens), diagnostics).scan_tokens()
        for token in tokens:
            print(token.describe())
        if diagnostics.had_error:
            print(diagnostics.format(), file=sys.stderr)
            sys.exit(EXIT_SYNTAX)
        return

    # Reference grammar check
    if args.check_grammar:
        diagnostics = Diagnostics()
        tokens = Lexer(read_source(args.check_grammar), diagnostics).scan_tokens()
        if diagnostics.had_error:
            print(diagnostics.format(), file=sys.stderr)
            sys.exit(EXIT_SYNTAX)
        try:
            check_syntax(tokens)
        except BisayaError as e:
            print(e, file=sys.stderr)
            sys.exit(EXIT_SYNTAX)
        print(f"{args.check_grammar}: syntax OK")
        return

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        program = compile_or_exit(read_source(args.emit_ast))
        obj = ast_to_obj(program)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(EXIT_RUNTIME)
        try:
            with open(ast_path, 'r', encoding='utf-8') as f:
                program = ast_from_obj(json.load(f))
        except (KeyError, ValueError) as e:
            print(f"Error: malformed AST file {ast_path}: {e}", file=sys.stderr)
            sys.exit(EXIT_RUNTIME)
        execute(program, args.v)
        return

    # Default: execute source file
    if not args.program:
        parser.error('missing program file; or use --tokens/--emit-ast/--ast/--check-grammar')
    program = compile_or_exit(read_source(args.program))
    execute(program, args.v)


if __name__ == '__main__':
    main()
