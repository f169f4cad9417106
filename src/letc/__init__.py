"""
letc - A Tiny Let-Expression Compiler for x86-64
================================================

letc compiles a minimal expression language to assembly for a machine
model with one accumulator register (rax) and stack-relative storage
addressed from rsp.

    let x = 420; let y = x++; y--

Main Components
---------------
- **compiler**: lexer, parser, code generator and renderer
    Turns source text into an instruction list and assembly text

- **toolchain**: nasm / clang driver
    Assembles, links against a C runtime stub, and runs programs

- **cli**: the `letc` command (compile, build, run)

Quick Start
-----------
    >>> from letc import compile_source
    >>> print(compile_source("420--"))
    mov rax, 420
    dec rax

Or use the command-line tool:
    $ letc compile prog.let
    $ letc run prog.let
"""

__version__ = "0.1.0"

# =============================================================================
# Public API Exports
# =============================================================================

from letc.errors import LetcError, SourceLocation, ToolchainError, ProgramError
from letc.compiler import (
    LetCompiler,
    CompilerOptions,
    CompilerResult,
    compile_source,
    compile_program,
    CompileError,
    LexError,
    ParseError,
    UnboundIdentifierError,
    tokenize,
    parse,
    parse_source,
    compile_expression,
    render,
    AsmSyntax,
)

__all__ = [
    "__version__",
    # Errors
    "LetcError",
    "SourceLocation",
    "ToolchainError",
    "ProgramError",
    "CompileError",
    "LexError",
    "ParseError",
    "UnboundIdentifierError",
    # Compiler
    "LetCompiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_source",
    "compile_program",
    "tokenize",
    "parse",
    "parse_source",
    "compile_expression",
    "render",
    "AsmSyntax",
]
