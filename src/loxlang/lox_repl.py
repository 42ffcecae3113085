import io
import traceback

from loxlang import lox_ast as ast
from loxlang.emitters.ast_printer import AstPrinter
from loxlang.lox_constants import TokenType
from loxlang.lox_errors import ErrorReporter, LoxRuntimeError
from loxlang.lox_interpreter import Interpreter, stringify
from loxlang.lox_parser import Parser
from loxlang.lox_scanner import Scanner


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def brace_depth(src: str) -> int:
    """Open minus closed braces, ignoring any inside strings or comments."""
    tokens = Scanner(src, ErrorReporter(quiet=True)).scan_tokens()
    return sum(
        1 if tok.type == TokenType.LEFT_BRACE else -1
        for tok in tokens
        if tok.type in (TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE)
    )


def read_source() -> str | None:
    """Reads one input, continuing with `... ` until braces balance. None means exit."""
    src_lines: list[str] = []
    while True:
        prompt = ">>> " if not src_lines else "... "
        line = input(prompt)
        if line.strip() in ("exit", "quit") and not src_lines:
            return None
        src_lines.append(line)
        if brace_depth("\n".join(src_lines)) <= 0:
            break
    return "\n".join(src_lines).strip()


def run_source(
    src: str, interpreter: Interpreter, reporter: ErrorReporter, verbose: bool = False
) -> None:
    """Scans, parses and runs one REPL input against the session interpreter."""
    reporter.reset()
    tokens = Scanner(src, reporter).scan_tokens()
    statements = Parser(tokens, reporter).parse()
    if reporter.had_error:
        return

    if verbose:
        print(f"[ast] >>> {AstPrinter().print_program(statements)}")

    # A lone expression statement echoes its value.
    if len(statements) == 1 and isinstance(statements[0], ast.Expression):
        try:
            value = interpreter.evaluate(statements[0].expression)
        except LoxRuntimeError as e:
            reporter.runtime_error(e)
            return
        print(stringify(value))
        return

    interpreter.interpret(statements)


def start_repl(verbose: bool = False) -> None:
    print("Lox REPL. Type 'exit' or 'quit' to leave.")
    reporter = ErrorReporter()
    interpreter = Interpreter(reporter)

    while True:
        try:
            src = read_source()
            if src is None:
                print("Exiting Lox REPL.")
                return
            if not src or src.startswith("//"):
                continue
            if src.lower() == "verbose-mode":
                verbose = not verbose
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue
            try:
                run_source(src, interpreter, reporter, verbose)
            except RecursionError:
                print_traceback()

        except (KeyboardInterrupt, EOFError):
            print("\nExiting Lox REPL.")
            break


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
