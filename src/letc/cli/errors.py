"""
CLI Error Reporting
===================

Maps letc failures onto messages and exit codes for the `letc` command.

Each stage of the pipeline fails differently:

- compile errors already carry file:line:col, the source line and a
  caret, so they are printed as-is;
- assembler and linker failures are about an external tool, so the
  report shows the command that ran, its exit status and what it wrote
  to stderr;
- a failure of the built program gets its own exit code, so scripts can
  tell "letc rejected the source" from "the program it built crashed".
"""

import shlex
import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from letc.errors import ProgramError, ToolchainError
from letc.compiler.errors import CompileError


class ExitCode(IntEnum):
    """Exit codes of the letc command."""
    SUCCESS = 0
    COMPILE_ERROR = 1    # Source rejected by the lexer, parser or code generator
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error
    TOOLCHAIN_ERROR = 4  # nasm or clang missing, failing or timing out
    PROGRAM_ERROR = 5    # The built executable crashed or printed garbage


def report_toolchain_error(
    error: ToolchainError,
    verbose: bool = False,
    error_type: str | None = None,
) -> None:
    """
    Print a toolchain failure: message, command, exit status and stderr.

    Captured stdout is only shown with --verbose.
    """
    prefix = f"{error_type} error: " if error_type else "Error: "
    click.echo(f"{prefix}{error.message}", err=True)

    if error.command:
        click.echo(f"  command: {shlex.join(error.command)}", err=True)
    if error.return_code is not None:
        click.echo(f"  exit status: {error.return_code}", err=True)

    for line in error.stderr.strip().splitlines():
        click.echo(f"  stderr: {line}", err=True)

    if verbose:
        for line in error.stdout.strip().splitlines():
            click.echo(f"  stdout: {line}", err=True)


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Report an exception and exit with the matching exit code.

    Args:
        error: The exception that was raised
        verbose: Show tracebacks for internal errors and tool stdout
        error_type: Prefix for toolchain messages (e.g., "Build", "Run")

    Raises:
        SystemExit: Always
    """
    if isinstance(error, CompileError):
        click.echo(str(error), err=True)
        sys.exit(ExitCode.COMPILE_ERROR)

    elif isinstance(error, ProgramError):
        report_toolchain_error(error, verbose, error_type)
        sys.exit(ExitCode.PROGRAM_ERROR)

    elif isinstance(error, ToolchainError):
        report_toolchain_error(error, verbose, error_type)
        sys.exit(ExitCode.TOOLCHAIN_ERROR)

    elif isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
