"""
letc Abstract Syntax Tree (AST) Definitions
===========================================

This module defines the expression nodes produced by the parser and
consumed by the code generator.

Node Set
--------
Expression (base)
├── NumberLiteral - 64-bit integer constant
├── IncrementExpression - operand ++
├── DecrementExpression - operand --
├── IdentifierExpression - reference to a let-bound name
└── LetExpression - let name = value; body

The set is closed: EXPRESSION_TYPES lists every concrete node class and
the code generator handles each one explicitly.

Design Notes
------------
- Nodes are frozen dataclasses; a tree is immutable after parsing
- Each node owns its children, so the tree is finite and acyclic
- The optional source location is excluded from equality, so the
  trees for "(5)" and "5" compare equal
"""

from dataclasses import dataclass, field
from typing import Optional

from letc.errors import SourceLocation


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class Expression:
    """Base class for all expression nodes."""


@dataclass(frozen=True)
class NumberLiteral(Expression):
    """
    Integer constant.

    Attributes:
        value: Signed 64-bit value
    """
    value: int
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class IncrementExpression(Expression):
    """Postfix increment: operand ++"""
    operand: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class DecrementExpression(Expression):
    """Postfix decrement: operand --"""
    operand: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class IdentifierExpression(Expression):
    """
    Reference to a let-bound name.

    Attributes:
        name: Identifier name
    """
    name: str
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class LetExpression(Expression):
    """
    Binding: let name = value; body

    The name is visible in body only, not in its own value.

    Attributes:
        name: The bound identifier
        value: Expression whose result is stored in the new stack slot
        body: Expression evaluated with the binding in scope
    """
    name: str
    value: Expression
    body: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


EXPRESSION_TYPES = (
    NumberLiteral,
    IncrementExpression,
    DecrementExpression,
    IdentifierExpression,
    LetExpression,
)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter:
    """
    Pretty printer for AST debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(ast))

    Output for "let x = 1; x++":
        Let x
          Value:
            Number 1
          Body:
            Increment
              Identifier x
    """

    def __init__(self):
        self.output: list[str] = []

    def print(self, node: Expression) -> str:
        """Print the AST and return as string."""
        self.output = []

        # (node or heading text, indent level); popped in reverse push order
        pending: list[tuple[Expression | str, int]] = [(node, 0)]
        while pending:
            item, level = pending.pop()
            if isinstance(item, str):
                self._emit(item, level)
            else:
                self._visit(item, level, pending)

        return "\n".join(self.output)

    def _emit(self, text: str, level: int) -> None:
        indent = "  " * level
        self.output.append(f"{indent}{text}")

    def _visit(self, node: Expression, level: int, pending: list) -> None:
        if isinstance(node, NumberLiteral):
            self._emit(f"Number {node.value}", level)
        elif isinstance(node, IdentifierExpression):
            self._emit(f"Identifier {node.name}", level)
        elif isinstance(node, (IncrementExpression, DecrementExpression)):
            self._emit("Increment" if isinstance(node, IncrementExpression) else "Decrement", level)
            pending.append((node.operand, level + 1))
        elif isinstance(node, LetExpression):
            self._emit(f"Let {node.name}", level)
            pending.append((node.body, level + 2))
            pending.append(("Body:", level + 1))
            pending.append((node.value, level + 2))
            pending.append(("Value:", level + 1))
        else:
            self._emit(f"<unknown {node.__class__.__name__}>", level)
