"""
Series/scalar kind inference.

Decides whether an expression yields a full series or a single scalar, based
on the built-in table and on which names are currently bound to series. The
parser uses it to classify declarations during its forward pass; the
evaluator uses it to pick scalar or series evaluation for each operand.
"""

from __future__ import annotations

from enum import Enum
from typing import Container

from .ast_nodes import (
    BinaryOp,
    BooleanLiteral,
    FunctionCall,
    NumberLiteral,
    SeriesAccess,
    StringLiteral,
    Variable,
)
from .functions import ResultKind, lookup


class ExprKind(Enum):
    SCALAR = "scalar"
    SERIES = "series"


def infer_kind(expr, series_names: Container[str]) -> ExprKind:
    """
    Infer the kind of ``expr`` given the names currently bound to series.

    - literals and series index access are scalar
    - a variable is a series iff it names a declared series
    - a call takes its kind from the built-in table; element-wise helpers
      (abs, max, min) follow their arguments; unknown functions are scalar
    - a binary operation is a series when either operand is
    """
    if isinstance(expr, (NumberLiteral, StringLiteral, BooleanLiteral, SeriesAccess)):
        return ExprKind.SCALAR

    if isinstance(expr, Variable):
        return ExprKind.SERIES if expr.name in series_names else ExprKind.SCALAR

    if isinstance(expr, FunctionCall):
        builtin = lookup(expr.name)
        if builtin is None or builtin.result is ResultKind.SCALAR:
            return ExprKind.SCALAR
        if builtin.result is ResultKind.SERIES:
            return ExprKind.SERIES
        if any(infer_kind(arg, series_names) is ExprKind.SERIES for arg in expr.args):
            return ExprKind.SERIES
        return ExprKind.SCALAR

    if isinstance(expr, BinaryOp):
        if infer_kind(expr.left, series_names) is ExprKind.SERIES:
            return ExprKind.SERIES
        return infer_kind(expr.right, series_names)

    raise TypeError(f"Not an expression node: {expr!r}")


def is_series_expression(expr, series_names: Container[str]) -> bool:
    return infer_kind(expr, series_names) is ExprKind.SERIES
