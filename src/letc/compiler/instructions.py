"""
Abstract Machine Instructions
=============================

The code generator targets a single-accumulator machine whose only
other storage is memory addressed relative to the stack pointer.

Registers
---------
| Register | Usage                                   |
|----------|-----------------------------------------|
| RAX      | Accumulator, holds the current value    |
| RSP      | Stack pointer, base for let-bound slots |

Operands
--------
- Constant(value): immediate 64-bit integer
- Registry(register): a register
- RegistryOffset(register, offset): memory at register + offset, used
  only for stack slots (offset = -slot)

Instructions
------------
Inc(arg), Dec(arg), Mov(dest, src), Add(dest, src), Sub(dest, src).
A program is a plain list of instructions with no jumps or labels;
execution order is list order.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


# =============================================================================
# Registers
# =============================================================================

class Register(Enum):
    """Closed set of registers the generator uses."""
    RAX = "rax"     # Accumulator
    RSP = "rsp"     # Stack pointer

    @property
    def mnemonic(self) -> str:
        return self.value


# =============================================================================
# Operands
# =============================================================================

@dataclass(frozen=True)
class Constant:
    """Immediate integer operand."""
    value: int


@dataclass(frozen=True)
class Registry:
    """Register operand."""
    register: Register


@dataclass(frozen=True)
class RegistryOffset:
    """Register-relative memory operand addressing a stack slot."""
    register: Register
    offset: int


Arg = Union[Constant, Registry, RegistryOffset]

ACCUMULATOR = Registry(Register.RAX)


def stack_slot(slot: int) -> RegistryOffset:
    """Operand for let-bound slot n (1-based), i.e. rsp + -n."""
    return RegistryOffset(Register.RSP, -slot)


# =============================================================================
# Instructions
# =============================================================================

@dataclass(frozen=True)
class Instruction:
    """Base class for all instructions."""

    mnemonic = ""

    @property
    def operands(self) -> tuple:
        raise NotImplementedError


@dataclass(frozen=True)
class Inc(Instruction):
    """arg += 1"""
    arg: Arg
    mnemonic = "inc"

    @property
    def operands(self) -> tuple:
        return (self.arg,)


@dataclass(frozen=True)
class Dec(Instruction):
    """arg -= 1"""
    arg: Arg
    mnemonic = "dec"

    @property
    def operands(self) -> tuple:
        return (self.arg,)


@dataclass(frozen=True)
class Mov(Instruction):
    """dest = src"""
    dest: Arg
    src: Arg
    mnemonic = "mov"

    @property
    def operands(self) -> tuple:
        return (self.dest, self.src)


@dataclass(frozen=True)
class Add(Instruction):
    """dest += src"""
    dest: Arg
    src: Arg
    mnemonic = "add"

    @property
    def operands(self) -> tuple:
        return (self.dest, self.src)


@dataclass(frozen=True)
class Sub(Instruction):
    """dest -= src"""
    dest: Arg
    src: Arg
    mnemonic = "sub"

    @property
    def operands(self) -> tuple:
        return (self.dest, self.src)
