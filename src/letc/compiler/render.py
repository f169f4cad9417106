"""
Assembly Renderer
=================

Turns an instruction list into assembly text, one instruction per line:

    mov rax, 420
    mov rsp + -1, rax
    mov rax, rsp + -1
    inc rax

Syntaxes
--------
PLAIN
    The compatible listing format. Stack slots render as
    "<register> + <offset>" with the offset's own sign, so slot 1 is
    "rsp + -1". This is what render() produces by default.

NASM
    Text that nasm accepts. Stack slots become 8-byte memory operands
    with a normalised sign, so slot 1 is "qword [rsp - 8]". The build
    toolchain uses this syntax.

Stack Frames
------------
render_program() adds the fixed prelude and epilogue that turn the
instruction body into a complete source file. With a non-zero frame
(NASM only) the program reserves its slots before the body and releases
them before ret, and slot operands are rebased onto the lowered rsp:

    _start:
    sub rsp, 16
    mov rax, 420
    mov qword [rsp + 8], rax
    add rsp, 16
    ret

Without a frame the slots sit below rsp, which is only safe inside the
System V red zone and never on Win64.

Frames are not stack-probed. On Windows a frame over one page (more
than 512 slots) can skip the guard page.
"""

from enum import Enum

from letc.compiler.instructions import (
    Arg,
    Constant,
    Instruction,
    Registry,
    RegistryOffset,
)


# Bytes per stack slot in NASM syntax
SLOT_SIZE = 8

# rsp stays 16-byte aligned relative to entry
FRAME_ALIGNMENT = 16

PRELUDE = "section .text\nglobal _start\n_start:\n"
EPILOGUE = "ret\n"


class AsmSyntax(Enum):
    """Operand spelling used by the renderer."""
    PLAIN = "plain"
    NASM = "nasm"


def frame_size(slots: int) -> int:
    """Bytes to reserve below rsp for the given number of stack slots."""
    size = slots * SLOT_SIZE
    return (size + FRAME_ALIGNMENT - 1) // FRAME_ALIGNMENT * FRAME_ALIGNMENT


def render_arg(arg: Arg, syntax: AsmSyntax = AsmSyntax.PLAIN, frame: int = 0) -> str:
    """
    Render a single operand.

    frame is the number of bytes the program has subtracted from rsp;
    NASM slot operands are rebased by it.
    """
    if isinstance(arg, Constant):
        return str(arg.value)

    if isinstance(arg, Registry):
        return arg.register.mnemonic

    if isinstance(arg, RegistryOffset):
        if syntax == AsmSyntax.NASM:
            displacement = arg.offset * SLOT_SIZE + frame
            if displacement == 0:
                return f"qword [{arg.register.mnemonic}]"
            sign = "-" if displacement < 0 else "+"
            return f"qword [{arg.register.mnemonic} {sign} {abs(displacement)}]"
        return f"{arg.register.mnemonic} + {arg.offset}"

    raise TypeError(f"not an operand: {arg!r}")


def render_instruction(
    instruction: Instruction,
    syntax: AsmSyntax = AsmSyntax.PLAIN,
    frame: int = 0,
) -> str:
    """Render one instruction as '<mnemonic> <op>, <op>'."""
    operands = ", ".join(render_arg(arg, syntax, frame) for arg in instruction.operands)
    return f"{instruction.mnemonic} {operands}"


def render(
    instructions: list[Instruction],
    syntax: AsmSyntax = AsmSyntax.PLAIN,
    frame: int = 0,
) -> str:
    """
    Render instructions as newline-joined assembly text.

    An empty list renders as the empty string.

    Raises:
        ValueError: If a frame is requested for the PLAIN syntax
    """
    if frame and syntax != AsmSyntax.NASM:
        raise ValueError("stack frames are only supported for NASM syntax")
    return "\n".join(render_instruction(i, syntax, frame) for i in instructions)


def render_program(
    instructions: list[Instruction],
    syntax: AsmSyntax = AsmSyntax.PLAIN,
    frame: int = 0,
) -> str:
    """Render a complete assembly file: prelude, frame setup, body, ret."""
    body = render(instructions, syntax, frame)
    if body:
        body += "\n"
    if frame:
        body = f"sub rsp, {frame}\n{body}add rsp, {frame}\n"
    return f"{PRELUDE}{body}{EPILOGUE}"
