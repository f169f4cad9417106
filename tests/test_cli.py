"""
CLI Test Suite
==============

Tests for the letc command using Click's test runner.
"""

from pathlib import Path

import pytest
from click.testing import CliRunner

from letc import __version__
from letc.cli.errors import ExitCode
from letc.cli.letc import main
from letc.toolchain import build as build_module


@pytest.fixture
def runner():
    return CliRunner()


def write_source(name: str, text: str) -> Path:
    path = Path(name)
    path.write_text(text)
    return path


# =============================================================================
# Group
# =============================================================================

class TestMain:

    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "compile" in result.output
        assert "build" in result.output
        assert "run" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


# =============================================================================
# compile
# =============================================================================

class TestCompile:

    def test_compile_default_output(self, runner):
        with runner.isolated_filesystem():
            write_source("prog.let", "let x = 420; x++")
            result = runner.invoke(main, ["compile", "prog.let"])
            assert result.exit_code == 0
            assert "Compiled prog.let -> prog.asm" in result.output
            assert Path("prog.asm").read_text() == (
                "mov rax, 420\n"
                "mov rsp + -1, rax\n"
                "mov rax, rsp + -1\n"
                "inc rax\n"
            )

    def test_compile_output_option(self, runner):
        with runner.isolated_filesystem():
            write_source("prog.let", "420--")
            result = runner.invoke(main, ["compile", "prog.let", "-o", "out.s"])
            assert result.exit_code == 0
            assert Path("out.s").read_text() == "mov rax, 420\ndec rax\n"

    def test_compile_nasm_with_prelude(self, runner):
        with runner.isolated_filesystem():
            write_source("prog.let", "let x = 1; x")
            result = runner.invoke(
                main, ["compile", "--syntax", "nasm", "--prelude", "prog.let"]
            )
            assert result.exit_code == 0
            text = Path("prog.asm").read_text()
            assert text.startswith("section .text\nglobal _start\n_start:\n")
            assert "_start:\nsub rsp, 16\n" in text
            assert "mov qword [rsp + 8], rax" in text
            assert text.endswith("add rsp, 16\nret\n")

    def test_tokens(self, runner):
        with runner.isolated_filesystem():
            write_source("prog.let", "420--")
            result = runner.invoke(main, ["compile", "--tokens", "prog.let"])
            assert result.exit_code == 0
            assert result.output.splitlines() == [
                "Token(NUMBER, 420, 1:1)",
                "Token(DECREMENT, '--', 1:4)",
                "Token(EOF, 1:6)",
            ]
            assert not Path("prog.asm").exists()

    def test_ast(self, runner):
        with runner.isolated_filesystem():
            write_source("prog.let", "(7)++")
            result = runner.invoke(main, ["compile", "--ast", "prog.let"])
            assert result.exit_code == 0
            assert result.output == "Increment\n  Number 7\n"

    def test_verbose_stats(self, runner):
        with runner.isolated_filesystem():
            write_source("prog.let", "let x = 1; let y = 2; y")
            result = runner.invoke(main, ["-v", "compile", "prog.let"])
            assert result.exit_code == 0
            assert "Stack slots: 2" in result.output

    def test_compile_error(self, runner):
        with runner.isolated_filesystem():
            write_source("prog.let", "let x = 1; y")
            result = runner.invoke(main, ["compile", "prog.let"])
            assert result.exit_code == ExitCode.COMPILE_ERROR
            assert "prog.let:1:12: error: unbound identifier 'y'" in result.output
            assert not Path("prog.asm").exists()

    def test_missing_input(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["compile", "missing.let"])
            assert result.exit_code == ExitCode.INVALID_ARGS

    def test_bad_syntax_choice(self, runner):
        with runner.isolated_filesystem():
            write_source("prog.let", "1")
            result = runner.invoke(main, ["compile", "--syntax", "att", "prog.let"])
            assert result.exit_code == ExitCode.INVALID_ARGS

    def test_long_postfix_chain(self, runner):
        with runner.isolated_filesystem():
            write_source("prog.let", "5" + "++" * 1500)
            result = runner.invoke(main, ["compile", "prog.let"])
            assert result.exit_code == 0, result.output
            assert len(Path("prog.asm").read_text().splitlines()) == 1501

    def test_deep_parentheses(self, runner):
        with runner.isolated_filesystem():
            write_source("prog.let", "(" * 600 + "5" + ")" * 600)
            result = runner.invoke(main, ["compile", "prog.let"])
            assert result.exit_code == ExitCode.COMPILE_ERROR
            assert "nested too deeply" in result.output
            assert "Internal error" not in result.output


# =============================================================================
# build / run (stubbed toolchain)
# =============================================================================

class FakeToolchain:
    """Stands in for subprocess.run: tools succeed, programs print a value."""

    def __init__(self, value="419"):
        self.value = value
        self.commands = []

    def __call__(self, cmd, **kwargs):
        import subprocess

        self.commands.append(cmd)
        stdout = "" if cmd[0] in ("nasm", "clang") else f"{self.value}\n"
        return subprocess.CompletedProcess(cmd, 0, stdout, "")


class TestBuild:

    def test_build(self, runner, monkeypatch):
        fake = FakeToolchain()
        monkeypatch.setattr(build_module.subprocess, "run", fake)
        monkeypatch.delenv("LETC_NASM", raising=False)
        monkeypatch.delenv("LETC_CC", raising=False)
        with runner.isolated_filesystem():
            write_source("prog.let", "420--")
            result = runner.invoke(main, ["build", "prog.let", "--build-dir", "out"])
            assert result.exit_code == 0, result.output
            assert "Built prog.let -> prog" in result.output
            assert Path("out/prog.asm").exists()
            assert [cmd[0] for cmd in fake.commands] == ["nasm", "clang"]

    def test_build_compile_error(self, runner, monkeypatch):
        fake = FakeToolchain()
        monkeypatch.setattr(build_module.subprocess, "run", fake)
        with runner.isolated_filesystem():
            write_source("prog.let", "420 +")
            result = runner.invoke(main, ["build", "prog.let"])
            assert result.exit_code == ExitCode.COMPILE_ERROR
            assert fake.commands == []

    def test_build_missing_assembler(self, runner, monkeypatch):
        def missing(cmd, **kwargs):
            raise FileNotFoundError(cmd[0])

        monkeypatch.setattr(build_module.subprocess, "run", missing)
        monkeypatch.delenv("LETC_NASM", raising=False)
        with runner.isolated_filesystem():
            write_source("prog.let", "1")
            result = runner.invoke(main, ["build", "prog.let", "--build-dir", "out"])
            assert result.exit_code == ExitCode.TOOLCHAIN_ERROR
            assert "Build error: nasm not found" in result.output
            assert "  command: nasm -f" in result.output

    def test_build_assembler_failure_shows_stderr(self, runner, monkeypatch):
        import subprocess

        def reject(cmd, **kwargs):
            return subprocess.CompletedProcess(
                cmd, 1, "listing", "prog.asm:4: error: invalid combination of opcode\n"
            )

        monkeypatch.setattr(build_module.subprocess, "run", reject)
        monkeypatch.delenv("LETC_NASM", raising=False)
        with runner.isolated_filesystem():
            write_source("prog.let", "1")
            result = runner.invoke(main, ["build", "prog.let", "--build-dir", "out"])
            assert result.exit_code == ExitCode.TOOLCHAIN_ERROR
            assert "Build error: Assembly failed" in result.output
            assert "  exit status: 1" in result.output
            assert "  stderr: prog.asm:4: error: invalid combination of opcode" in result.output
            assert "stdout:" not in result.output

    def test_build_failure_verbose_shows_stdout(self, runner, monkeypatch):
        import subprocess

        def reject(cmd, **kwargs):
            return subprocess.CompletedProcess(cmd, 1, "listing", "")

        monkeypatch.setattr(build_module.subprocess, "run", reject)
        with runner.isolated_filesystem():
            write_source("prog.let", "1")
            result = runner.invoke(main, ["-v", "build", "prog.let", "--build-dir", "out"])
            assert result.exit_code == ExitCode.TOOLCHAIN_ERROR
            assert "  stdout: listing" in result.output


class TestRun:

    def test_run_prints_value(self, runner, monkeypatch):
        monkeypatch.setattr(build_module.subprocess, "run", FakeToolchain("419"))
        monkeypatch.delenv("LETC_NASM", raising=False)
        monkeypatch.delenv("LETC_CC", raising=False)
        with runner.isolated_filesystem():
            write_source("prog.let", "420--")
            result = runner.invoke(main, ["run", "prog.let"])
            assert result.exit_code == 0, result.output
            assert result.output.strip() == "419"

    def test_run_program_failure(self, runner, monkeypatch):
        import subprocess

        def crash(cmd, **kwargs):
            code = 0 if cmd[0] in ("nasm", "clang") else 139
            return subprocess.CompletedProcess(cmd, code, "", "")

        monkeypatch.setattr(build_module.subprocess, "run", crash)
        monkeypatch.delenv("LETC_NASM", raising=False)
        monkeypatch.delenv("LETC_CC", raising=False)
        with runner.isolated_filesystem():
            write_source("prog.let", "1")
            result = runner.invoke(main, ["run", "prog.let"])
            assert result.exit_code == ExitCode.PROGRAM_ERROR
            assert "Run error: Program failed" in result.output
            assert "  exit status: 139" in result.output
