"""
letc Native Toolchain
=====================

Assembles compiled programs with nasm, links them against a small C
runtime stub with clang, and runs the result.

Usage
-----
>>> from pathlib import Path
>>> from letc.toolchain import build_executable, run_executable
>>> exe = build_executable("420--", Path("build/prog"))
>>> run_executable(exe)
419
"""

from letc.toolchain.config import ToolchainConfig, RUNTIME_STUB
from letc.toolchain.build import (
    object_format,
    assembler_command,
    linker_command,
    assemble,
    link,
    build_executable,
    run_executable,
)

__all__ = [
    "ToolchainConfig",
    "RUNTIME_STUB",
    "object_format",
    "assembler_command",
    "linker_command",
    "assemble",
    "link",
    "build_executable",
    "run_executable",
]
