"""
Lox CLI Entrypoint.

This module provides the command-line interface for running Lox source code.

Features:
    - Read source from `.lox` files or inline strings.
    - Scan, parse and interpret the program.
    - Dump the token stream (`--tokens`) or the AST (`--ast`) instead of running.
    - Launch an interactive REPL.

Example usage:
    lox hello.lox
    lox -s "print 1 + 2;"
    lox hello.lox --ast
    lox --repl --verbose

Exit codes follow the sysexits convention:
    0   success
    64  usage error (bad file name)
    65  syntax error (lexical or grammar)
    70  runtime error

Functions:
    run_lox(source, is_string=False, tokens=False, ast=False) -> int:
        Executes the pipeline (scan -> parse -> interpret) and returns an exit code.

    main() -> None:
        Parses CLI arguments and invokes the appropriate action.
"""

import argparse
import sys

from loxlang.emitters.ast_printer import AstPrinter
from loxlang.lox_errors import ErrorReporter
from loxlang.lox_interpreter import Interpreter
from loxlang.lox_parser import Parser
from loxlang.lox_scanner import Scanner

EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_SOFTWARE = 70


def run_lox(
    source: str,
    is_string: bool = False,
    tokens: bool = False,
    ast: bool = False,
) -> int:
    """
    Run the Lox pipeline on a file or an inline program.

    Args:
        source (str): Lox source code, or a path to a `.lox` file.
        is_string (bool): If True, treats `source` as code instead of a path.
        tokens (bool): Print the token stream and stop.
        ast (bool): Print the parsed program and stop.

    Returns:
        int: Process exit code.

    Raises:
        ValueError: If `is_string` is False and the path does not end with '.lox'.
    """
    if not is_string and not source.endswith(".lox"):
        raise ValueError("Only .lox files are supported.")
    # 1. Read source
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    reporter = ErrorReporter()

    # 2. Scanning
    scanned = Scanner(source, reporter).scan_tokens()
    if tokens:
        for tok in scanned:
            print(tok)
        return EX_DATAERR if reporter.had_error else EX_OK

    # 3. Parsing
    statements = Parser(scanned, reporter).parse()
    if ast:
        print(AstPrinter().print_program(statements))
    if reporter.had_error:
        return EX_DATAERR
    if ast:
        return EX_OK

    # 4. Interpreting
    Interpreter(reporter).interpret(statements)
    if reporter.had_runtime_error:
        return EX_SOFTWARE
    return EX_OK


def main() -> None:
    """
    Entry point for the Lox CLI.

    - No arguments, or `--repl`: start the REPL.
    - Otherwise run the given file (or inline source with `-s`) and exit with
      the pipeline's exit code.
    """
    if len(sys.argv) == 1:
        # No args passed: open REPL instead
        from loxlang.lox_repl import start_repl

        start_repl()
        return
    parser = argparse.ArgumentParser(prog="lox")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument("--tokens", action="store_true", help="Print tokens and exit")
    parser.add_argument("--ast", action="store_true", help="Print the parsed AST and exit")
    parser.add_argument(
        "--repl",
        action="store_true",
        help="Launch interactive REPL",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Verbose REPL mode (if --repl)"
    )

    args = parser.parse_args()

    if args.repl or args.source is None:
        from loxlang.lox_repl import start_repl

        start_repl(verbose=args.verbose)
        return

    try:
        code = run_lox(
            source=args.source,
            is_string=args.string,
            tokens=args.tokens,
            ast=args.ast,
        )
    except (ValueError, OSError) as e:
        print(f"lox: {e}", file=sys.stderr)
        code = EX_USAGE
    sys.exit(code)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
