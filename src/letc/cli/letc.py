"""
letc - Command-Line Interface
=============================

Usage Examples
--------------
Compile to assembly (writes prog.asm):
    $ letc compile prog.let

Dump tokens or the syntax tree:
    $ letc compile --tokens prog.let
    $ letc compile --ast prog.let

Complete nasm source with prelude:
    $ letc compile --syntax nasm --prelude prog.let -o prog.asm

Build a native executable (needs nasm and clang):
    $ letc build prog.let -o prog

Build, run and print the result:
    $ letc run prog.let
    419

Exit Codes
----------
0 - Success
1 - Compile error (lexing, parsing, unbound identifier)
2 - Invalid arguments or file not found
3 - Internal error
4 - Assembler or linker missing or failed
5 - The built program crashed or printed something unexpected
"""

import logging
import tempfile
from pathlib import Path
from typing import Optional

import click

from letc import __version__
from letc.compiler import ASTPrinter, AsmSyntax, CompilerOptions, LetCompiler
from letc.toolchain import ToolchainConfig, build_executable, run_executable
from letc.cli.errors import handle_cli_exception

logger = logging.getLogger(__name__)


# =============================================================================
# CLI Context
# =============================================================================

class Context:
    """Shared options for all subcommands."""

    def __init__(self) -> None:
        self.verbose: bool = False

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.WARNING
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


def read_source(path: Path) -> str:
    """Read a source file as UTF-8."""
    return path.read_text(encoding="utf-8")


# =============================================================================
# Command Group
# =============================================================================

@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
@click.version_option(version=__version__, prog_name="letc")
@pass_context
def main(ctx: Context, verbose: bool) -> None:
    """
    letc - compile let-expressions to x86-64 assembly.

    \b
    Language:
        420            integer literal
        e++  e--       postfix increment / decrement
        let x = e; b   bind x to e inside b
        (e)            grouping
    """
    ctx.verbose = verbose
    ctx.setup_logging()


# =============================================================================
# compile
# =============================================================================

@main.command("compile")
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output assembly file (default: input.asm)",
)
@click.option(
    "--syntax",
    type=click.Choice([s.value for s in AsmSyntax], case_sensitive=False),
    default=AsmSyntax.PLAIN.value,
    show_default=True,
    help="Operand syntax: 'plain' listing or nasm-compatible",
)
@click.option(
    "--prelude/--no-prelude",
    default=False,
    help="Wrap the output in the section/_start prelude and ret",
)
@click.option("--tokens", is_flag=True, help="Print tokens and exit")
@click.option("--ast", is_flag=True, help="Print the syntax tree and exit")
@pass_context
def compile_command(
    ctx: Context,
    input_file: Path,
    output: Optional[Path],
    syntax: str,
    prelude: bool,
    tokens: bool,
    ast: bool,
) -> None:
    """
    Compile INPUT_FILE to assembly text.
    """
    if output is None:
        output = input_file.with_suffix(".asm")

    options = CompilerOptions(
        syntax=AsmSyntax(syntax.lower()),
        emit_prelude=prelude,
    )

    try:
        source = read_source(input_file)
        result = LetCompiler(options).compile_source(source, str(input_file))

        if tokens:
            for token in result.tokens:
                click.echo(repr(token))
            return

        if ast:
            click.echo(ASTPrinter().print(result.ast))
            return

        text = result.assembly
        if text and not text.endswith("\n"):
            text += "\n"
        output.write_text(text, encoding="utf-8")

        if ctx.verbose:
            click.echo(f"Tokenized: {len(result.tokens)} tokens")
            click.echo(f"Generated: {len(result.instructions)} instructions")
            click.echo(f"Stack slots: {len(result.environment)}")

        click.echo(f"Compiled {input_file} -> {output}")

    except Exception as e:
        handle_cli_exception(e, ctx.verbose, "Compilation")


# =============================================================================
# build
# =============================================================================

@main.command("build")
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output executable (default: input name without suffix)",
)
@click.option(
    "--build-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for intermediate .asm/.obj files",
)
@pass_context
def build_command(
    ctx: Context,
    input_file: Path,
    output: Optional[Path],
    build_dir: Optional[Path],
) -> None:
    """
    Build INPUT_FILE into a native executable with nasm and clang.
    """
    if output is None:
        output = input_file.with_suffix("")

    config = ToolchainConfig.from_env()
    if build_dir is not None:
        config.build_dir = build_dir

    try:
        source = read_source(input_file)
        exe = build_executable(source, output, config, filename=str(input_file))
        click.echo(f"Built {input_file} -> {exe}")
    except Exception as e:
        handle_cli_exception(e, ctx.verbose, "Build")


# =============================================================================
# run
# =============================================================================

@main.command("run")
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@pass_context
def run_command(ctx: Context, input_file: Path) -> None:
    """
    Build INPUT_FILE in a temporary directory, run it and print the result.
    """
    config = ToolchainConfig.from_env()

    try:
        source = read_source(input_file)
        with tempfile.TemporaryDirectory(prefix="letc_") as tmp:
            config.build_dir = Path(tmp)
            exe = build_executable(
                source, Path(tmp) / input_file.stem, config, filename=str(input_file)
            )
            value = run_executable(exe, config)
        click.echo(str(value))
    except Exception as e:
        handle_cli_exception(e, ctx.verbose, "Run")


if __name__ == "__main__":
    main()
