"""
Toolchain Configuration
=======================

Settings for the external assembler and linker. Configuration can come
from:
- Default values (defined here)
- Environment variables (ToolchainConfig.from_env)

Environment variables (all optional):
    LETC_NASM: Assembler executable (default: nasm)
    LETC_CC: C compiler used as the linker (default: clang)
    LETC_BUILD_DIR: Directory for intermediate files (default: build)
    LETC_TIMEOUT: Seconds to wait for each external command (default: 60)
"""

from dataclasses import dataclass, field
from pathlib import Path
import logging
import os

logger = logging.getLogger(__name__)

# Native stub that calls the compiled entry point and prints rax
RUNTIME_STUB = Path(__file__).parent / "runtime" / "main.c"


@dataclass
class ToolchainConfig:
    """
    Configuration for assembling, linking and running programs.

    Attributes:
        assembler: nasm executable
        linker: C compiler driver used to link against the runtime stub
        runtime_stub: C source providing main()
        build_dir: Where intermediate .asm/.obj files are written
        timeout: Seconds allowed for each external command
    """
    assembler: str = "nasm"
    linker: str = "clang"
    runtime_stub: Path = field(default_factory=lambda: RUNTIME_STUB)
    build_dir: Path = field(default_factory=lambda: Path("build"))
    timeout: float = 60.0

    @classmethod
    def from_env(cls) -> "ToolchainConfig":
        """Create a ToolchainConfig with environment variable overrides."""
        config = cls()

        if assembler := os.environ.get("LETC_NASM"):
            config.assembler = assembler

        if linker := os.environ.get("LETC_CC"):
            config.linker = linker

        if build_dir := os.environ.get("LETC_BUILD_DIR"):
            config.build_dir = Path(build_dir)

        if timeout := os.environ.get("LETC_TIMEOUT"):
            try:
                config.timeout = float(timeout)
            except ValueError:
                logger.warning(f"Ignoring invalid LETC_TIMEOUT value {timeout!r}")

        return config
