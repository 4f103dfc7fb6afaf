"""
AST node definitions for the TickScript indicator language.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union


class ASTNode:
    """Base class for all AST nodes."""
    pass


# ==============
# Expressions
# ==============

@dataclass(frozen=True)
class NumberLiteral(ASTNode):
    """
    Numeric literal, e.g. 20, 2.5.
    """
    value: float


@dataclass(frozen=True)
class StringLiteral(ASTNode):
    """
    String literal with the surrounding quotes removed.
    """
    value: str


@dataclass(frozen=True)
class BooleanLiteral(ASTNode):
    value: bool


@dataclass(frozen=True)
class Variable(ASTNode):
    """
    Reference to a declared variable, a declared series or a caller parameter.

    Examples:
        length
        sma_line
    """
    name: str


@dataclass(frozen=True)
class FunctionCall(ASTNode):
    """
    Call of a built-in function.

    Examples:
        close()
        sma(close(), 20)
        bb_upper(close(), 20, 2)
    """
    name: str
    args: Tuple["Expression", ...] = ()


@dataclass(frozen=True)
class BinaryOp(ASTNode):
    """
    Binary operation node.

    Unary '-' and '!' are represented with an implicit zero on the left:
        -x   -> BinaryOp(NumberLiteral(0), '-', x)
        !x   -> BinaryOp(NumberLiteral(0), '!', x)

    Logical operators are normalised to 'and' / 'or' whether they were
    written as keywords or as '&&' / '||'.
    """
    left: "Expression"
    op: str
    right: "Expression"


@dataclass(frozen=True)
class SeriesAccess(ASTNode):
    """
    Positional access into a declared series.

    Examples:
        sma_line[0]   -> oldest bar
        sma_line[n]   -> bar at position n
    """
    name: str
    index: "Expression"


Expression = Union[
    NumberLiteral,
    StringLiteral,
    BooleanLiteral,
    Variable,
    FunctionCall,
    BinaryOp,
    SeriesAccess,
]


# ==============
# Statements
# ==============

@dataclass(frozen=True)
class StudyDeclaration(ASTNode):
    """
    Descriptive script header; has no computational effect.

    Example:
        study("Simple Moving Average", shorttitle="SMA", overlay=true)
    """
    title: str = ""
    short_title: str = ""
    overlay: bool = False


@dataclass(frozen=True)
class VariableDeclaration(ASTNode):
    """
    Scalar binding, e.g. ``length = 20``.
    """
    name: str
    expression: Expression


@dataclass(frozen=True)
class SeriesDeclaration(ASTNode):
    """
    Series binding, e.g. ``sma_line = sma(close(), length)``.
    """
    name: str
    expression: Expression


@dataclass(frozen=True)
class PlotStatement(ASTNode):
    """
    Marks an expression's series as the script output. The last one executed wins.
    """
    expression: Expression


Statement = Union[StudyDeclaration, VariableDeclaration, SeriesDeclaration, PlotStatement]
