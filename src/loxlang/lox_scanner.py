"""
Lexical analyzer for the Lox programming language.

This module converts raw source text into a flat list of tokens:

Classes:
    Token: Immutable record of a token's type, raw lexeme, literal value and line.
    Scanner: Walks the source once and produces the token list.

Features:
    - Skips whitespace and `//` line comments
    - One-character lookahead for `!=`, `==`, `<=`, `>=`
    - Recognizes:
        * Identifiers and reserved keywords
        * Numbers (always stored as float literals)
        * Strings (may span lines, no escape sequences)
        * Single-character punctuation and operators

Errors:
    The scanner never raises. Unexpected characters and unterminated strings
    are reported through the `ErrorReporter` and scanning continues.

Example:
    >>> Scanner("print 1;").scan_tokens()
    [Token(PRINT, 'print', None, 1), Token(NUMBER, '1', 1.0, 1), Token(SEMICOLON, ';', None, 1), Token(EOF, '', None, 1)]
"""

from __future__ import annotations

from dataclasses import dataclass

from loxlang.lox_constants import KEYWORDS, TokenType
from loxlang.lox_errors import ErrorReporter


@dataclass(frozen=True)
class Token:
    """A single lexical token.

    Attributes:
        type (TokenType): The token kind.
        lexeme (str): The exact source text of the token.
        literal (str | float | None): Evaluated value for STRING and NUMBER tokens.
        line (int): The 1-based line the token ends on.
    """

    type: TokenType
    lexeme: str
    literal: str | float | None = None
    line: int = 1

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.lexeme!r}, {self.literal!r}, {self.line})"

    def __str__(self) -> str:
        return f"{self.type.name} {self.lexeme} {self.literal}"


# Single characters that never start a longer token.
SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    ";": TokenType.SEMICOLON,
    "*": TokenType.STAR,
}

# first char -> (type when followed by '=', type otherwise)
CHAINED_TOKENS: dict[str, tuple[TokenType, TokenType]] = {
    "!": (TokenType.BANG_EQUAL, TokenType.BANG),
    "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    "<": (TokenType.LESS_EQUAL, TokenType.LESS),
    ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
}


def is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def is_alpha(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch == "_"


def is_alpha_numeric(ch: str) -> bool:
    return is_alpha(ch) or is_digit(ch)


class Scanner:
    """Lexical analyzer for Lox source text.

    Attributes:
        source (str): The full program text.
        reporter (ErrorReporter | None): Receives lexical diagnostics.
        tokens (list[Token]): Tokens produced so far.
        start (int): Index of the first character of the token being scanned.
        current (int): Index of the next unread character.
        line (int): Current 1-based line number.
    """

    def __init__(self, source: str, reporter: ErrorReporter | None = None) -> None:
        self.source = source
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.tokens: list[Token] = []
        self.start = 0
        self.current = 0
        self.line = 1

    def scan_tokens(self) -> list[Token]:
        """Scans the whole source and returns the tokens, terminated by EOF."""
        while not self.is_at_end():
            self.start = self.current
            self.scan_token()
        self.tokens.append(Token(TokenType.EOF, "", None, self.line))
        return self.tokens

    def scan_token(self) -> None:
        ch = self.advance()

        if ch in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[ch])
        elif ch in CHAINED_TOKENS:
            chained, plain = CHAINED_TOKENS[ch]
            self.add_token(chained if self.match("=") else plain)
        elif ch == "/":
            if self.match("/"):
                self.skip_comment()
            else:
                self.add_token(TokenType.SLASH)
        elif ch in " \r\t":
            pass
        elif ch == "\n":
            self.line += 1
        elif ch == '"':
            self.string()
        elif is_digit(ch):
            self.number()
        elif is_alpha(ch):
            self.identifier()
        else:
            self.reporter.report(self.line, f"Unexpected character: {ch}.")

    def skip_comment(self) -> None:
        """Advances to the end of the line; the newline itself is left for scan_token."""
        while self.peek() != "\n" and not self.is_at_end():
            self.advance()

    def string(self) -> None:
        while self.peek() != '"' and not self.is_at_end():
            if self.peek() == "\n":
                self.line += 1
            self.advance()

        if self.is_at_end():
            self.reporter.report(self.line, "Unterminated string.")
            return

        # closing quote
        self.advance()
        self.add_token(TokenType.STRING, self.source[self.start + 1 : self.current - 1])

    def number(self) -> None:
        while is_digit(self.peek()):
            self.advance()

        # A trailing '.' without a digit after it is not part of the number.
        if self.peek() == "." and is_digit(self.peek_next()):
            self.advance()
            while is_digit(self.peek()):
                self.advance()

        self.add_token(TokenType.NUMBER, float(self.source[self.start : self.current]))

    def identifier(self) -> None:
        while is_alpha_numeric(self.peek()):
            self.advance()
        text = self.source[self.start : self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def add_token(self, type_: TokenType, literal: str | float | None = None) -> None:
        text = self.source[self.start : self.current]
        self.tokens.append(Token(type_, text, literal, self.line))

    def match(self, expected: str) -> bool:
        """Consumes the next character only if it equals `expected`."""
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def advance(self) -> str:
        ch = self.source[self.current]
        self.current += 1
        return ch

    def peek(self) -> str:
        """Returns the next character without consuming it, or "" at end of input."""
        return "" if self.is_at_end() else self.source[self.current]

    def peek_next(self) -> str:
        index = self.current + 1
        return "" if index >= len(self.source) else self.source[index]

    def is_at_end(self) -> bool:
        return self.current >= len(self.source)


def scan(source: str, reporter: ErrorReporter | None = None) -> list[Token]:
    """Convenience wrapper: scans `source` and returns its tokens."""
    return Scanner(source, reporter).scan_tokens()


__all__ = ["Scanner", "Token", "scan"]
