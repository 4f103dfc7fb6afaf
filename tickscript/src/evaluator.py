"""
Tree-walking evaluator for parsed TickScript statements.

Statements run once, in order. Scalar expressions resolve to numbers, strings
or booleans; series expressions resolve to float pandas Series aligned with the
input bars. Scalars are broadcast wherever a series is expected.

Main entry point:
- Evaluator().execute(statements, bars, parameters) -> ExecutionResult
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import numpy as np
import pandas as pd
from loguru import logger

from .ast_nodes import (
    BinaryOp,
    BooleanLiteral,
    FunctionCall,
    NumberLiteral,
    PlotStatement,
    SeriesAccess,
    SeriesDeclaration,
    StringLiteral,
    StudyDeclaration,
    Variable,
    VariableDeclaration,
)
from .config import EngineSettings
from .context import BarsLike, EvaluationContext
from .errors import (
    DivisionByZeroError,
    DSLError,
    IndexOutOfBoundsError,
    InvalidArgumentsError,
    InvalidOperandsError,
    ResourceLimitError,
    UndefinedFunctionError,
    UndefinedSeriesError,
    UndefinedVariableError,
    UnknownOperatorError,
)
from .functions import Builtin, Param, ResultKind, lookup
from .inference import ExprKind, infer_kind


# ==============
# Operators
# ==============

def _divide(left, right):
    if np.any(np.asarray(right) == 0):
        raise DivisionByZeroError()
    return left / right


ARITHMETIC_OPERATORS = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": _divide,
}

COMPARISON_OPERATORS = {
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
    "==": operator.eq,
    "!=": operator.ne,
    "and": lambda left, right: (left != 0) & (right != 0),
    "or": lambda left, right: (left != 0) | (right != 0),
    # unary '!' carries an implicit zero on the left
    "!": lambda _left, right: right == 0,
}


def _as_number(value: Any) -> float:
    if isinstance(value, (bool, int, float, np.number)):
        return float(value)
    raise InvalidOperandsError(f"expected a number, got {type(value).__name__} {value!r}")


def _as_length(value: Any) -> int:
    number = _as_number(value)
    if not number.is_integer() or number < 1:
        raise InvalidArgumentsError(f"length must be a whole number >= 1, got {value!r}")
    return int(number)


def _broadcast(value: float, length: int) -> pd.Series:
    return pd.Series(value, index=pd.RangeIndex(length), dtype=float)


@dataclass
class ExecutionResult:
    """
    Outcome of one script execution.

    ``series`` holds the last plotted series (empty when nothing was plotted
    or evaluation failed); ``error`` holds the failure, if any.
    """
    series: pd.Series
    error: Optional[DSLError] = None
    title: str = ""
    short_title: str = ""
    overlay: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def values(self) -> list[float]:
        return [float(v) for v in self.series.tolist()]

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


class Evaluator:
    """
    Stateless statement executor; every run gets its own EvaluationContext,
    so one Evaluator and one parsed script may be shared across runs.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or EngineSettings()

    # --- statements ---

    def execute(self, statements, bars: BarsLike, parameters: Optional[Mapping[str, Any]] = None) -> ExecutionResult:
        """Run ``statements`` over ``bars``; runtime errors are returned, not raised."""
        context = EvaluationContext.create(bars, parameters)
        try:
            plotted = self.run(statements, context)
        except DSLError as exc:
            logger.warning("TickScript execution failed ({}): {}", exc.kind, exc)
            plotted, error = pd.Series([], dtype=float), exc
        else:
            error = None
        return ExecutionResult(
            series=plotted,
            error=error,
            title=context.study_title,
            short_title=context.study_short_title,
            overlay=context.overlay,
        )

    def run(self, statements, context: EvaluationContext) -> pd.Series:
        """Run ``statements`` against ``context`` and return the last plotted series."""
        self._check_limits(statements, context)
        plotted = pd.Series([], dtype=float)

        for statement in statements:
            if isinstance(statement, StudyDeclaration):
                context.study_title = statement.title
                context.study_short_title = statement.short_title
                context.overlay = statement.overlay
            elif isinstance(statement, VariableDeclaration):
                context.variables[statement.name] = self.evaluate_expression(statement.expression, context)
                context.series.pop(statement.name, None)
            elif isinstance(statement, SeriesDeclaration):
                context.series[statement.name] = self._evaluate_as_series(statement.expression, context)
                context.variables.pop(statement.name, None)
            elif isinstance(statement, PlotStatement):
                plotted = self._evaluate_as_series(statement.expression, context)
            else:
                raise TypeError(f"Not a statement node: {statement!r}")

        return plotted

    def _check_limits(self, statements, context: EvaluationContext) -> None:
        if len(statements) > self.settings.max_statements:
            raise ResourceLimitError(
                f"{len(statements)} statements exceeds the limit of {self.settings.max_statements}"
            )
        if context.bar_count > self.settings.max_bars:
            raise ResourceLimitError(f"{context.bar_count} bars exceeds the limit of {self.settings.max_bars}")

    def _evaluate_as_series(self, expr, context: EvaluationContext) -> pd.Series:
        if infer_kind(expr, context.series) is ExprKind.SCALAR:
            return _broadcast(_as_number(self.evaluate_expression(expr, context)), context.bar_count)
        return self.evaluate_series_expression(expr, context)

    # --- scalar expressions ---

    def evaluate_expression(self, expr, context: EvaluationContext) -> Any:
        """Evaluate ``expr`` to a single number, string or boolean."""
        if isinstance(expr, (NumberLiteral, StringLiteral, BooleanLiteral)):
            return expr.value

        if isinstance(expr, Variable):
            if expr.name in context.variables:
                return context.variables[expr.name]
            if expr.name in context.parameters:
                return context.parameters[expr.name]
            raise UndefinedVariableError(expr.name)

        if isinstance(expr, FunctionCall):
            builtin = self._lookup(expr)
            if builtin.result is ResultKind.SERIES:
                raise InvalidOperandsError(f"{expr.name}() produces a series, not a scalar")
            args = self._evaluate_args(builtin, expr.args, context)
            value = builtin.func(context, *args)
            if builtin.result is ResultKind.ELEMENTWISE:
                return float(value)
            return value

        if isinstance(expr, BinaryOp):
            left = self.evaluate_expression(expr.left, context)
            right = self.evaluate_expression(expr.right, context)
            return self._apply_scalar(expr.op, left, right)

        if isinstance(expr, SeriesAccess):
            series = context.series.get(expr.name)
            if series is None:
                raise UndefinedSeriesError(expr.name)
            index = _as_number(self.evaluate_expression(expr.index, context))
            if not index.is_integer():
                raise InvalidOperandsError(f"series index must be a whole number, got {index}")
            position = int(index)
            if not 0 <= position < len(series):
                raise IndexOutOfBoundsError(f"index {position} outside [0, {len(series)}) for {expr.name!r}")
            return float(series.iloc[position])

        raise TypeError(f"Not an expression node: {expr!r}")

    def _apply_scalar(self, op: str, left: Any, right: Any) -> Any:
        if op in ARITHMETIC_OPERATORS:
            return float(ARITHMETIC_OPERATORS[op](_as_number(left), _as_number(right)))
        if op in COMPARISON_OPERATORS:
            return bool(COMPARISON_OPERATORS[op](_as_number(left), _as_number(right)))
        raise UnknownOperatorError(op)

    # --- series expressions ---

    def evaluate_series_expression(self, expr, context: EvaluationContext) -> pd.Series:
        """Evaluate ``expr`` to a float series with one value per input bar."""
        n = context.bar_count

        if isinstance(expr, Variable):
            if expr.name in context.series:
                return context.series[expr.name]
            if expr.name in context.variables:
                return _broadcast(_as_number(context.variables[expr.name]), n)
            if expr.name in context.parameters:
                return _broadcast(_as_number(context.parameters[expr.name]), n)
            raise UndefinedSeriesError(expr.name)

        if isinstance(expr, FunctionCall):
            builtin = self._lookup(expr)
            if builtin.result is ResultKind.SERIES:
                args = self._evaluate_args(builtin, expr.args, context)
                return builtin.func(context, *args).astype(float)
            if builtin.result is ResultKind.ELEMENTWISE:
                if not builtin.accepts(len(expr.args)):
                    raise self._arity_error(builtin, len(expr.args))
                operands = [self._operand(arg, context) for arg in expr.args]
                self._check_aligned(*operands)
                return self._to_series(builtin.func(context, *operands), n)
            return _broadcast(_as_number(self.evaluate_expression(expr, context)), n)

        if isinstance(expr, BinaryOp):
            left = self._operand(expr.left, context)
            right = self._operand(expr.right, context)
            return self._apply_series(expr.op, left, right, n)

        return _broadcast(_as_number(self.evaluate_expression(expr, context)), n)

    def _operand(self, expr, context: EvaluationContext):
        if infer_kind(expr, context.series) is ExprKind.SERIES:
            return self.evaluate_series_expression(expr, context)
        return _as_number(self.evaluate_expression(expr, context))

    @staticmethod
    def _check_aligned(*operands) -> None:
        lengths = {len(o) for o in operands if isinstance(o, pd.Series)}
        if len(lengths) > 1:
            raise InvalidOperandsError(f"series lengths differ: {sorted(lengths)}")

    @staticmethod
    def _to_series(value, length: int) -> pd.Series:
        if isinstance(value, pd.Series):
            return value.astype(float)
        return _broadcast(_as_number(value), length)

    def _apply_series(self, op: str, left, right, length: int) -> pd.Series:
        self._check_aligned(left, right)

        if op in ARITHMETIC_OPERATORS:
            return self._to_series(ARITHMETIC_OPERATORS[op](left, right), length)

        if op in COMPARISON_OPERATORS:
            left_s = self._to_series(left, length)
            right_s = self._to_series(right, length)
            defined = right_s.notna() if op == "!" else left_s.notna() & right_s.notna()
            raw = COMPARISON_OPERATORS[op](left_s, right_s)
            return raw.astype(float).where(defined)

        raise UnknownOperatorError(op)

    # --- built-in calls ---

    @staticmethod
    def _lookup(expr: FunctionCall) -> Builtin:
        builtin = lookup(expr.name)
        if builtin is None:
            raise UndefinedFunctionError(expr.name)
        return builtin

    @staticmethod
    def _arity_error(builtin: Builtin, argc: int) -> InvalidArgumentsError:
        if builtin.min_args == len(builtin.params):
            expected = str(len(builtin.params))
        else:
            expected = f"{builtin.min_args} to {len(builtin.params)}"
        return InvalidArgumentsError(f"{builtin.name}() takes {expected} arguments, got {argc}")

    def _evaluate_args(self, builtin: Builtin, args, context: EvaluationContext) -> list:
        if not builtin.accepts(len(args)):
            raise self._arity_error(builtin, len(args))

        values = []
        for param, arg in zip(builtin.params, args):
            if param is Param.SERIES:
                values.append(self.evaluate_series_expression(arg, context))
            elif param is Param.LENGTH:
                values.append(_as_length(self.evaluate_expression(arg, context)))
            elif param is Param.NUMBER:
                values.append(_as_number(self.evaluate_expression(arg, context)))
            elif param is Param.STRING:
                value = self.evaluate_expression(arg, context)
                if not isinstance(value, str):
                    raise InvalidOperandsError(f"{builtin.name}() expects a string, got {value!r}")
                values.append(value)
            else:
                values.append(self.evaluate_expression(arg, context))
        return values
