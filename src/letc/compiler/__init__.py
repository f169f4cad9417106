"""
letc Compiler
=============

Compiles a tiny expression language to x86-64 assembly for a
single-accumulator, stack-addressed machine model.

The language has integer literals, postfix ++ and --, identifiers and
let bindings:

    let x = 420; let y = x++; y--

Pipeline
--------
    Source → Lexer → Parser → AST → Code Generator → Renderer → Assembly

Usage
-----
>>> from letc.compiler import compile_source
>>> print(compile_source("let x = 420; x++"))
mov rax, 420
mov rsp + -1, rax
mov rax, rsp + -1
inc rax
"""

from letc.compiler.driver import (
    LetCompiler,
    CompilerOptions,
    CompilerResult,
    compile_source,
    compile_program,
)
from letc.compiler.errors import (
    CompileError,
    LexError,
    InvalidCharacterError,
    ParseError,
    UnexpectedTokenError,
    MissingTokenError,
    UnboundIdentifierError,
    CodeGenError,
)
from letc.compiler.lexer import Lexer, Token, TokenType, tokenize
from letc.compiler.parser import Parser, parse, parse_source
from letc.compiler.ast import (
    Expression,
    NumberLiteral,
    IncrementExpression,
    DecrementExpression,
    IdentifierExpression,
    LetExpression,
    ASTPrinter,
)
from letc.compiler.environment import Environment
from letc.compiler.instructions import (
    Register,
    Constant,
    Registry,
    RegistryOffset,
    Instruction,
    Inc,
    Dec,
    Mov,
    Add,
    Sub,
)
from letc.compiler.codegen import CodeGenerator, compile_expression
from letc.compiler.render import AsmSyntax, frame_size, render, render_program

__all__ = [
    # Main API
    "LetCompiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_source",
    "compile_program",
    # Errors
    "CompileError",
    "LexError",
    "InvalidCharacterError",
    "ParseError",
    "UnexpectedTokenError",
    "MissingTokenError",
    "UnboundIdentifierError",
    "CodeGenError",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    # Parser
    "Parser",
    "parse",
    "parse_source",
    # AST Nodes
    "Expression",
    "NumberLiteral",
    "IncrementExpression",
    "DecrementExpression",
    "IdentifierExpression",
    "LetExpression",
    "ASTPrinter",
    # Code generation
    "Environment",
    "Register",
    "Constant",
    "Registry",
    "RegistryOffset",
    "Instruction",
    "Inc",
    "Dec",
    "Mov",
    "Add",
    "Sub",
    "CodeGenerator",
    "compile_expression",
    # Rendering
    "AsmSyntax",
    "render",
    "render_program",
    "frame_size",
]
