"""
Compiler Error Hierarchy
========================

This module defines the exception hierarchy for the letc compiler.
All exceptions inherit from CompileError, which itself inherits from
the base LetcError for consistent error handling across the package.

Exception Hierarchy
-------------------
CompileError (base for all compiler errors)
├── LexError - tokenizer errors
│   └── InvalidCharacterError - unexpected character
├── ParseError - parser errors
│   ├── UnexpectedTokenError - token does not fit the grammar
│   └── MissingTokenError - required token absent
├── UnboundIdentifierError - identifier with no enclosing binding
└── CodeGenError - code generation errors

Error Message Format
--------------------
    prog.let:1:12: error: unbound identifier 'y'
        let x = 1; y
                   ^
    hint: did you mean 'x'?

The first error raised aborts the pipeline; there is no recovery.
"""

from typing import Optional

from letc.errors import LetcError, SourceLocation


# =============================================================================
# Base Compiler Exception
# =============================================================================

class CompileError(LetcError):
    """
    Base exception for all compiler errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with location, source context, and hint."""
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Lexer Errors
# =============================================================================

class LexError(CompileError):
    """
    Error while tokenizing source text.

    Examples:
        - A lone '+' or '-'
        - A number immediately followed by a letter (123a)
        - A number that does not fit in 64 bits
    """
    pass


class InvalidCharacterError(LexError):
    """Character that cannot start any token."""

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"invalid character '{char}'",
            location=location,
            source_line=source_line,
        )


# =============================================================================
# Parser Errors
# =============================================================================

class ParseError(CompileError):
    """
    Error while parsing a token stream.

    Examples:
        - Missing ')' after a parenthesised expression
        - Malformed let clause (no identifier, '=' or ';')
        - Tokens left over after a complete expression
    """
    pass


class UnexpectedTokenError(ParseError):
    """Token that doesn't match the expected grammar rule."""

    def __init__(
        self,
        found: str,
        expected: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.found = found
        self.expected = expected

        hint = None
        if expected:
            hint = f"expected {expected}"

        super().__init__(
            f"unexpected {found}",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class MissingTokenError(ParseError):
    """Required token (like ';' or ')') not found where expected."""

    def __init__(
        self,
        expected: str,
        found: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.expected = expected
        self.found = found
        message = f"expected {expected}"
        if found:
            message += f", found {found}"
        super().__init__(
            message,
            location=location,
            source_line=source_line,
        )


# =============================================================================
# Semantic Errors
# =============================================================================

class UnboundIdentifierError(CompileError):
    """
    Reference to an identifier with no visible binding.

    Similarly-named bound identifiers are offered as a hint to help
    catch typos.
    """

    def __init__(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_names: Optional[list[str]] = None,
    ):
        self.name = name
        self.similar_names = similar_names or []

        hint = None
        if self.similar_names:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_names[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"unbound identifier '{name}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class CodeGenError(CompileError):
    """Internal code generation failure, e.g. an unknown AST node."""
    pass
