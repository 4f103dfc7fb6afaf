from tickscript.src.ast_nodes import (
    BinaryOp,
    FunctionCall,
    NumberLiteral,
    SeriesAccess,
    StringLiteral,
    Variable,
)
from tickscript.src.functions import BUILTINS, ResultKind
from tickscript.src.inference import ExprKind, infer_kind


def test_literals_are_scalar():
    assert infer_kind(NumberLiteral(1.0), set()) is ExprKind.SCALAR
    assert infer_kind(StringLiteral("a"), set()) is ExprKind.SCALAR


def test_variables_follow_declared_series():
    assert infer_kind(Variable("basis"), {"basis"}) is ExprKind.SERIES
    assert infer_kind(Variable("basis"), set()) is ExprKind.SCALAR


def test_binary_op_is_series_if_either_side_is():
    left_scalar = BinaryOp(NumberLiteral(2.0), "*", FunctionCall("close"))
    assert infer_kind(left_scalar, set()) is ExprKind.SERIES


def test_series_access_is_scalar():
    assert infer_kind(SeriesAccess("s", NumberLiteral(0.0)), {"s"}) is ExprKind.SCALAR


def test_unknown_function_is_scalar():
    assert infer_kind(FunctionCall("nope", ()), set()) is ExprKind.SCALAR


def test_elementwise_follow_arguments():
    assert infer_kind(FunctionCall("abs", (NumberLiteral(1.0),)), set()) is ExprKind.SCALAR
    assert infer_kind(FunctionCall("max", (NumberLiteral(1.0), Variable("s"))), {"s"}) is ExprKind.SERIES


def test_builtin_table_covers_language_vocabulary():
    expected = {
        "close", "open", "high", "low", "volume", "hl2", "hlc3", "ohlc4",
        "sma", "ema", "rsi", "macd", "stdev", "highest", "lowest",
        "bb_upper", "bb_lower", "bb_middle",
        "macd_line", "macd_signal", "macd_histogram",
        "abs", "max", "min", "input",
    }
    assert set(BUILTINS) == expected
    for name in ("abs", "max", "min"):
        assert BUILTINS[name].result is ResultKind.ELEMENTWISE
    assert BUILTINS["input"].result is ResultKind.SCALAR
