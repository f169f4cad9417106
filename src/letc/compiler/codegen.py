"""
Code Generator
==============

This module turns an expression tree into a straight-line list of
abstract machine instructions.

Code Generation Strategy
------------------------
Every expression leaves its value in the accumulator (RAX). The only
other storage is one stack slot per let binding, addressed relative to
RSP. A let stores its value into its slot right after computing it, so
no value ever has to outlive the accumulator otherwise, and there is
no register allocation to do.

| Expression        | Instructions                                  |
|-------------------|-----------------------------------------------|
| n                 | mov rax, n                                    |
| e++               | <e>; inc rax                                  |
| e--               | <e>; dec rax                                  |
| x                 | mov rax, [rsp - slot(x)]                      |
| let x = v; b      | <v>; mov [rsp - slot], rax; <b>               |

Usage
-----
>>> from letc.compiler.parser import parse_source
>>> from letc.compiler.codegen import compile_expression
>>> compile_expression(parse_source("let x = 420; x++"))
[Mov(dest=Registry(register=<Register.RAX: 'rax'>), src=Constant(value=420)), ...]
"""

from dataclasses import dataclass
from typing import Optional

from letc.compiler.ast import (
    Expression,
    NumberLiteral,
    IncrementExpression,
    DecrementExpression,
    IdentifierExpression,
    LetExpression,
)
from letc.compiler.environment import Environment
from letc.compiler.errors import CodeGenError
from letc.compiler.instructions import (
    ACCUMULATOR,
    Constant,
    Dec,
    Inc,
    Instruction,
    Mov,
    stack_slot,
)


@dataclass(frozen=True)
class _Binding:
    """Work item: bind name to slot and spill the accumulator into it."""
    name: str
    slot: int


class CodeGenerator:
    """
    Generates instructions from an expression tree.

    The environment is mutated as let bindings are compiled and is
    meant for a single compilation.

    Attributes:
        env: Name to stack-slot mapping
    """

    def __init__(
        self,
        env: Optional[Environment] = None,
        source_lines: Optional[list[str]] = None,
    ):
        """
        Args:
            env: Environment to compile in (a fresh one if None)
            source_lines: Original source lines for error context
        """
        self.env = env if env is not None else Environment()
        self.source_lines = source_lines or []

    def generate(self, expr: Expression) -> list[Instruction]:
        """
        Compile an expression.

        The tree is walked with an explicit work stack rather than by
        recursion, so long postfix chains and long let sequences compile
        regardless of the interpreter's recursion limit.

        Raises:
            UnboundIdentifierError: If an identifier has no visible binding
        """
        output: list[Instruction] = []
        work: list = [expr]

        while work:
            item = work.pop()

            if isinstance(item, Instruction):
                output.append(item)
            elif isinstance(item, _Binding):
                self.env.bind(item.name, item.slot)
                output.append(Mov(stack_slot(item.slot), ACCUMULATOR))
            else:
                self._gen_expression(item, output, work)

        return output

    def _gen_expression(
        self,
        expr: Expression,
        output: list[Instruction],
        work: list,
    ) -> None:
        """
        Emit code for a leaf, or push the pieces of a compound node.

        Items pushed onto work run in reverse order of pushing.
        """
        if isinstance(expr, NumberLiteral):
            output.append(Mov(ACCUMULATOR, Constant(expr.value)))

        elif isinstance(expr, IncrementExpression):
            work.append(Inc(ACCUMULATOR))
            work.append(expr.operand)

        elif isinstance(expr, DecrementExpression):
            work.append(Dec(ACCUMULATOR))
            work.append(expr.operand)

        elif isinstance(expr, IdentifierExpression):
            slot = self.env.lookup(
                expr.name,
                location=expr.location,
                source_line=self._get_source_line(expr),
            )
            output.append(Mov(ACCUMULATOR, stack_slot(slot)))

        elif isinstance(expr, LetExpression):
            # The slot is claimed before the value is compiled, but the
            # name only becomes visible to the body.
            slot = self.env.reserve()
            work.append(expr.body)
            work.append(_Binding(expr.name, slot))
            work.append(expr.value)

        else:
            raise CodeGenError(f"unknown expression node '{expr.__class__.__name__}'")

    def _get_source_line(self, expr: Expression) -> Optional[str]:
        location = getattr(expr, "location", None)
        if location is not None and 0 < location.line <= len(self.source_lines):
            return self.source_lines[location.line - 1]
        return None


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_expression(
    expr: Expression,
    env: Optional[Environment] = None,
) -> list[Instruction]:
    """
    Compile an expression tree into instructions.

    Args:
        expr: Root of the tree
        env: Environment to compile in; a fresh one if None

    Raises:
        UnboundIdentifierError: If an identifier has no visible binding
    """
    return CodeGenerator(env).generate(expr)
