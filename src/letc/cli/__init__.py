"""
letc Command-Line Interface
===========================

The `letc` command groups three tools:

- **compile**: source to assembly text (or tokens / AST dumps)
- **build**: source to native executable via nasm and clang
- **run**: build, execute and print the resulting value

Implemented as a Click application with help for every subcommand.
"""

__all__ = ["letc"]
