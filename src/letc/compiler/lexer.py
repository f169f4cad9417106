"""
letc Lexer (Tokenizer)
======================

This module converts source text into a stream of tokens for the parser.

Token Categories
----------------
- Numbers: decimal integer literals, optionally negative (-42)
- Identifiers: a letter followed by letters, digits or underscores
- Keyword: let
- Operators: ++ (increment), -- (decrement), = (assign)
- Delimiters: ( ) ;

A leading '-' belongs to a number only when a digit follows it
directly. '--' is always the decrement operator, so "5--" is the
number 5 followed by a decrement. A lone '+' or '-' is an error, as
is a number running straight into a letter ("123a").

Example Usage
-------------
>>> from letc.compiler.lexer import tokenize
>>> for token in tokenize("let x = 420; x++"):
...     print(token)
Token(LET, 'let', 1:1)
Token(IDENTIFIER, 'x', 1:5)
Token(ASSIGN, '=', 1:7)
Token(NUMBER, 420, 1:9)
Token(LINE_END, ';', 1:12)
Token(IDENTIFIER, 'x', 1:14)
Token(INCREMENT, '++', 1:15)
Token(EOF, 1:17)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional
import string

from letc.errors import SourceLocation
from letc.compiler.errors import LexError, InvalidCharacterError


# Signed 64-bit range of the accumulator
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Closed set of lexical unit kinds."""

    EOF = auto()            # End of input (structural)

    NUMBER = auto()         # Integer literal
    IDENTIFIER = auto()     # Variable name
    LET = auto()            # let

    INCREMENT = auto()      # ++
    DECREMENT = auto()      # --
    ASSIGN = auto()         # =

    LPAREN = auto()         # (
    RPAREN = auto()         # )
    LINE_END = auto()       # ;


KEYWORDS: dict[str, TokenType] = {
    "let": TokenType.LET,
}

# Single-character tokens
SIMPLE_TOKENS: dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "=": TokenType.ASSIGN,
    ";": TokenType.LINE_END,
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from source text.

    Attributes:
        type: The TokenType classification
        value: int for numbers, the name for identifiers, the lexeme for
               operators and delimiters, None for EOF
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    type: TokenType
    value: str | int | None
    line: int = 1
    column: int = 1
    filename: str = "<input>"

    def __repr__(self) -> str:
        if self.value is not None:
            if isinstance(self.value, int):
                return f"Token({self.type.name}, {self.value}, {self.line}:{self.column})"
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def describe(self) -> str:
        """Human-readable form used in parser error messages."""
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.NUMBER:
            return f"number {self.value}"
        if self.type == TokenType.IDENTIFIER:
            return f"identifier '{self.value}'"
        return f"'{self.value}'"


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes letc source text.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    The token stream always ends with a single EOF token.
    """

    DIGITS = string.digits

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename

        # Current position in source
        self._pos = 0
        self._line = 1
        self._column = 1

        # Track line start position for error reporting
        self._line_start_pos = 0

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source.

        Raises:
            LexError: If invalid input is encountered
        """
        while True:
            self._skip_whitespace()
            if self._at_end():
                break
            yield self._scan_token()

        yield self._make_token(TokenType.EOF, None, self._line, self._column)

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Character at current position + offset, or '' past the end."""
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume and return the current character, tracking line/column."""
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    def _is_digit(self, char: str) -> bool:
        return char != "" and char in self.DIGITS

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _make_token(
        self,
        token_type: TokenType,
        value: str | int | None,
        line: int,
        column: int,
    ) -> Token:
        return Token(
            type=token_type,
            value=value,
            line=line,
            column=column,
            filename=self.filename,
        )

    def _current_source_line(self) -> str:
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end]

    def _error(
        self,
        message: str,
        line: int,
        column: int,
        hint: Optional[str] = None,
    ) -> LexError:
        """Create a LexError pointing at the given position."""
        return LexError(
            message,
            SourceLocation(self.filename, line, column),
            hint=hint,
            source_line=self._current_source_line(),
        )

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _skip_whitespace(self) -> None:
        while not self._at_end() and self._peek().isspace():
            self._advance()

    def _scan_token(self) -> Token:
        start_line = self._line
        start_column = self._column

        char = self._peek()

        if self._is_digit(char):
            return self._scan_number(start_line, start_column)

        if char == "-":
            return self._scan_minus(start_line, start_column)

        if char == "+":
            return self._scan_plus(start_line, start_column)

        if char in SIMPLE_TOKENS:
            self._advance()
            return self._make_token(SIMPLE_TOKENS[char], char, start_line, start_column)

        if char.isalpha():
            return self._scan_identifier(start_line, start_column)

        raise InvalidCharacterError(
            char,
            SourceLocation(self.filename, start_line, start_column),
            source_line=self._current_source_line(),
        )

    def _scan_number(
        self,
        start_line: int,
        start_column: int,
        negative: bool = False,
    ) -> Token:
        """Scan a run of digits; the '-' sign has already been consumed."""
        digits = []
        while self._is_digit(self._peek()):
            digits.append(self._advance())

        text = ("-" if negative else "") + "".join(digits)

        # "123a" is neither a number nor an identifier
        if self._peek().isalpha():
            raise self._error(
                f"invalid number '{text}' followed by '{self._peek()}'",
                self._line,
                self._column,
                hint="identifiers must start with a letter",
            )

        value = int(text)
        if not INT64_MIN <= value <= INT64_MAX:
            raise self._error(
                f"number '{text}' does not fit in 64 bits",
                start_line,
                start_column,
            )

        return self._make_token(TokenType.NUMBER, value, start_line, start_column)

    def _scan_minus(self, start_line: int, start_column: int) -> Token:
        """Scan '--' or a negative number."""
        self._advance()  # consume '-'

        if self._peek() == "-":
            self._advance()
            return self._make_token(TokenType.DECREMENT, "--", start_line, start_column)

        if self._is_digit(self._peek()):
            return self._scan_number(start_line, start_column, negative=True)

        raise self._error(
            "invalid token '-'",
            start_line,
            start_column,
            hint="expected '--' or a number",
        )

    def _scan_plus(self, start_line: int, start_column: int) -> Token:
        """Scan '++'."""
        self._advance()  # consume '+'

        if self._peek() == "+":
            self._advance()
            return self._make_token(TokenType.INCREMENT, "++", start_line, start_column)

        raise self._error(
            "invalid token '+'",
            start_line,
            start_column,
            hint="expected '++'",
        )

    def _scan_identifier(self, start_line: int, start_column: int) -> Token:
        """Scan an identifier or the 'let' keyword."""
        chars = []
        while self._peek() and (self._peek().isalnum() or self._peek() == "_"):
            chars.append(self._advance())

        name = "".join(chars)

        if name in KEYWORDS:
            return self._make_token(KEYWORDS[name], name, start_line, start_column)

        return self._make_token(TokenType.IDENTIFIER, name, start_line, start_column)


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize(source: str, filename: str = "<input>") -> list[Token]:
    """
    Tokenize source text into a list ending with an EOF token.

    Raises:
        LexError: If the source contains invalid input
    """
    return list(Lexer(source, filename).tokenize())
