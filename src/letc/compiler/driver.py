"""
letc Compiler Main Module
=========================

Runs the complete compilation pipeline:

    Source → Lex → Parse → Generate → Render → Assembly

Usage
-----
Command line:
    $ letc compile prog.let -o prog.asm

Programmatic:
    >>> from letc.compiler import compile_source
    >>> print(compile_source("420--"))
    mov rax, 420
    dec rax

Error Handling
--------------
The first error aborts the pipeline and is raised unchanged. Nothing is
rendered unless every earlier stage succeeded, so callers never see a
partial program.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from letc.compiler.lexer import Token, tokenize
from letc.compiler.parser import Parser
from letc.compiler.ast import Expression
from letc.compiler.environment import Environment
from letc.compiler.codegen import CodeGenerator
from letc.compiler.instructions import Instruction
from letc.compiler.render import AsmSyntax, frame_size, render, render_program


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        syntax: Operand spelling for the rendered assembly
        emit_prelude: Wrap the body in the section/_start prelude and the
                      trailing ret, producing a complete assembly file.
                      With NASM syntax the program also reserves a stack
                      frame for its slots.
    """
    syntax: AsmSyntax = AsmSyntax.PLAIN
    emit_prelude: bool = False


@dataclass
class CompilerResult:
    """
    Result of a successful compilation. Failures raise instead of
    returning a result.

    Attributes:
        filename: Source filename
        tokens: Tokens produced by the lexer
        ast: Parsed expression tree
        environment: Final slot bindings
        instructions: Generated instruction list
        assembly: Rendered assembly text
    """
    filename: str = ""
    tokens: list[Token] = field(default_factory=list)
    ast: Optional[Expression] = None
    environment: Optional[Environment] = None
    instructions: list[Instruction] = field(default_factory=list)
    assembly: str = ""


class LetCompiler:
    """
    Main interface for compiling letc source.

    Example:
        compiler = LetCompiler()
        result = compiler.compile_file("prog.let")
        print(result.assembly)
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(self, source: str, filename: str = "<input>") -> CompilerResult:
        """
        Compile source text to assembly.

        Raises:
            CompileError: From whichever stage fails first
        """
        result = CompilerResult(filename=filename)
        source_lines = source.splitlines()

        # Stage 1: Lexical analysis
        result.tokens = tokenize(source, filename)

        # Stage 2: Parsing
        result.ast = Parser(result.tokens, source_lines).parse()

        # Stage 3: Code generation
        result.environment = Environment()
        generator = CodeGenerator(result.environment, source_lines)
        result.instructions = generator.generate(result.ast)

        # Stage 4: Rendering
        if self.options.emit_prelude:
            # A complete nasm program reserves its slots instead of
            # writing below rsp
            frame = 0
            if self.options.syntax == AsmSyntax.NASM:
                frame = frame_size(len(result.environment))
            result.assembly = render_program(result.instructions, self.options.syntax, frame)
        else:
            result.assembly = render(result.instructions, self.options.syntax)

        return result

    def compile_file(self, filepath: str | Path) -> CompilerResult:
        """
        Compile a source file to assembly.

        Raises:
            CompileError: If compilation fails
            FileNotFoundError: If source file not found
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding="utf-8")
        return self.compile_source(source, str(path))


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_source(
    source: str,
    filename: str = "<input>",
    syntax: AsmSyntax = AsmSyntax.PLAIN,
) -> str:
    """Compile source text to the instruction body's assembly text."""
    options = CompilerOptions(syntax=syntax, emit_prelude=False)
    return LetCompiler(options).compile_source(source, filename).assembly


def compile_program(
    source: str,
    filename: str = "<input>",
    syntax: AsmSyntax = AsmSyntax.NASM,
) -> str:
    """Compile source text to a complete assembly file, prelude included."""
    options = CompilerOptions(syntax=syntax, emit_prelude=True)
    return LetCompiler(options).compile_source(source, filename).assembly
