"""
letc Error Hierarchy
====================

This module defines the base of the exception hierarchy for letc.
All exceptions inherit from LetcError, allowing callers to catch every
letc-related error with a single except clause if desired.

Exception Hierarchy
-------------------
LetcError (base)
├── CompileError (letc.compiler.errors) - lexing, parsing, code generation
└── ToolchainError - assembler or linker failure
    └── ProgramError - the built executable failed

Design Philosophy
-----------------
Compiler errors capture source location information (filename, line,
column) so that messages point at the offending character. Toolchain
errors carry the external command and its captured output instead,
since the failure happened outside letc.
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class LetcError(Exception):
    """
    Base exception for all letc errors.

        try:
            compile_source("let x = 1; y")
        except LetcError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Toolchain Exceptions
# =============================================================================

class ToolchainError(LetcError):
    """
    Failure of an external tool (assembler, linker) or of the built program.

    Attributes:
        message: The error description
        command: The command line that was run, if any
        stdout: Captured standard output
        stderr: Captured standard error
        return_code: Process exit status, if the process ran
    """

    def __init__(
        self,
        message: str,
        command: Optional[list[str]] = None,
        stdout: str = "",
        stderr: str = "",
        return_code: Optional[int] = None,
    ):
        self.message = message
        self.command = command
        self.stdout = stdout
        self.stderr = stderr
        self.return_code = return_code
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        if self.command:
            parts.append(f"command: {' '.join(self.command)}")
        if self.return_code is not None:
            parts.append(f"exit status: {self.return_code}")
        if self.stderr.strip():
            parts.append(self.stderr.strip())
        return "\n".join(parts)


class ProgramError(ToolchainError):
    """
    A built program crashed, timed out or printed something other than
    an integer. The assembler and linker succeeded.
    """
    pass
