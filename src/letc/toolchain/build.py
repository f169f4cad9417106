"""
Native Build Pipeline
=====================

Drives the external tools that turn compiled assembly into a native
executable:

    ┌──────────┐      ┌──────────┐      ┌──────────┐      ┌──────────┐
    │ .let src │─────▶│ .asm file│─────▶│ .obj file│─────▶│executable│
    │          │ letc │          │ nasm │          │clang │ + main.c │
    └──────────┘      └──────────┘      └──────────┘      └──────────┘

Object Formats
--------------
| Host    | nasm -f  | Entry symbol  |
|---------|----------|---------------|
| Windows | win64    | letc_start    |
| Linux   | elf64    | letc_start    |
| macOS   | macho64  | _letc_start   |

The generated program defines _start. Linking it as-is would collide
with the C runtime's own _start, so nasm is run with --prefix to rename
it to the symbol the runtime stub calls.

Compilation always finishes before any file is written, so a compile
error never leaves a partial .asm behind for the assembler.
"""

from pathlib import Path
from typing import Optional
import logging
import platform
import subprocess

from letc.errors import ProgramError, ToolchainError
from letc.compiler.driver import CompilerOptions, LetCompiler
from letc.compiler.render import AsmSyntax
from letc.toolchain.config import ToolchainConfig

logger = logging.getLogger(__name__)


# host system -> (nasm object format, symbol prefix)
OBJECT_FORMATS: dict[str, tuple[str, str]] = {
    "Windows": ("win64", "letc"),
    "Linux": ("elf64", "letc"),
    "Darwin": ("macho64", "_letc"),
}


def _host_entry(system: Optional[str]) -> tuple[str, str]:
    system = system or platform.system()
    try:
        return OBJECT_FORMATS[system]
    except KeyError:
        raise ToolchainError(f"Unsupported operating system: {system}") from None


def object_format(system: Optional[str] = None) -> str:
    """
    nasm object format for a host system (default: the running one).

    Raises:
        ToolchainError: If the system is not Windows, Linux or macOS
    """
    return _host_entry(system)[0]


def assembler_command(
    asm_path: Path,
    obj_path: Path,
    config: ToolchainConfig,
    system: Optional[str] = None,
) -> list[str]:
    """Build the nasm command line."""
    fmt, prefix = _host_entry(system)
    return [config.assembler, "-f", fmt, "--prefix", prefix, str(asm_path), "-o", str(obj_path)]


def linker_command(
    obj_path: Path,
    exe_path: Path,
    config: ToolchainConfig,
    system: Optional[str] = None,
) -> list[str]:
    """Build the clang command line that links the object with the runtime stub."""
    cmd = [
        config.linker,
        "-g",
        "-m64",
        "-o", str(exe_path),
        str(config.runtime_stub),
        str(obj_path),
    ]
    if (system or platform.system()) == "Windows":
        cmd.extend(["-Xlinker", "/subsystem:console"])
    return cmd


def _run(
    cmd: list[str],
    config: ToolchainConfig,
    what: str,
    error: type[ToolchainError] = ToolchainError,
) -> subprocess.CompletedProcess:
    """
    Run an external command, raising error (a ToolchainError) on any failure.
    """
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=config.timeout,
        )
    except FileNotFoundError:
        raise error(f"{cmd[0]} not found - is it installed?", command=cmd) from None
    except subprocess.TimeoutExpired:
        raise error(f"{what} timed out after {config.timeout}s", command=cmd) from None

    if result.returncode != 0:
        raise error(
            f"{what} failed",
            command=cmd,
            stdout=result.stdout,
            stderr=result.stderr,
            return_code=result.returncode,
        )

    return result


def assemble(
    asm_path: Path,
    obj_path: Path,
    config: Optional[ToolchainConfig] = None,
) -> Path:
    """
    Assemble a .asm file into an object file.

    Raises:
        ToolchainError: If nasm is missing or fails
    """
    config = config or ToolchainConfig.from_env()
    obj_path.parent.mkdir(parents=True, exist_ok=True)
    _run(assembler_command(asm_path, obj_path, config), config, "Assembly")
    logger.info(f"Assembled {asm_path} -> {obj_path}")
    return obj_path


def link(
    obj_path: Path,
    exe_path: Path,
    config: Optional[ToolchainConfig] = None,
) -> Path:
    """
    Link an object file with the runtime stub into an executable.

    Raises:
        ToolchainError: If the linker is missing or fails
    """
    config = config or ToolchainConfig.from_env()
    exe_path.parent.mkdir(parents=True, exist_ok=True)
    _run(linker_command(obj_path, exe_path, config), config, "Linking")
    logger.info(f"Linked {obj_path} -> {exe_path}")
    return exe_path


def build_executable(
    source: str,
    exe_path: Path,
    config: Optional[ToolchainConfig] = None,
    filename: str = "<input>",
) -> Path:
    """
    Compile source text and build it into a native executable.

    Intermediate files go to config.build_dir, named after exe_path.

    Raises:
        CompileError: If the source does not compile (nothing is written)
        ToolchainError: If assembling or linking fails
    """
    config = config or ToolchainConfig.from_env()

    compiler = LetCompiler(CompilerOptions(syntax=AsmSyntax.NASM, emit_prelude=True))
    assembly = compiler.compile_source(source, filename).assembly

    config.build_dir.mkdir(parents=True, exist_ok=True)
    asm_path = config.build_dir / f"{exe_path.stem}.asm"
    obj_path = config.build_dir / f"{exe_path.stem}.obj"

    asm_path.write_text(assembly, encoding="utf-8")
    logger.debug(f"Wrote {len(assembly)} bytes to {asm_path}")

    assemble(asm_path, obj_path, config)
    return link(obj_path, exe_path, config)


def run_executable(exe_path: Path, config: Optional[ToolchainConfig] = None) -> int:
    """
    Run a built program and return the accumulator value it prints.

    Raises:
        ProgramError: If the program fails or prints something unexpected
    """
    config = config or ToolchainConfig.from_env()
    result = _run([str(exe_path)], config, "Program", ProgramError)

    output = result.stdout.strip()
    try:
        return int(output)
    except ValueError:
        raise ProgramError(
            f"Program printed {output!r}, expected an integer",
            command=[str(exe_path)],
            stdout=result.stdout,
            stderr=result.stderr,
            return_code=result.returncode,
        ) from None
