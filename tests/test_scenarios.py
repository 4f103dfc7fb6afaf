import math

from tickscript.src.context import Bar
from tickscript.src.engine import TickScriptEngine


def bars_from_closes(closes):
    return [Bar(timestamp=i, open=c, high=c, low=c, close=c, volume=100.0) for i, c in enumerate(closes)]


def test_simple_moving_average_scenario():
    source = 'study("SMA", shorttitle="SMA", overlay=true)\nlength = 3\nsma_line = sma(close(), length)\nplot(sma_line)'
    result = TickScriptEngine().execute_script(source, bars_from_closes([1, 2, 3, 4, 5]))
    assert result.ok
    values = result.values
    assert len(values) == 5
    assert math.isnan(values[0]) and math.isnan(values[1])
    assert values[2:] == [2.0, 3.0, 4.0]
    assert (result.title, result.short_title, result.overlay) == ("SMA", "SMA", True)


def test_undefined_reference_scenario():
    engine = TickScriptEngine()
    source = "plot(undefined_name)"
    assert engine.validate(source).is_valid
    result = engine.execute_script(source, bars_from_closes([1, 2, 3]))
    assert result.values == []
    assert result.error.kind == "UndefinedVariable"
    assert result.error.name == "undefined_name"


def test_validation_failure_scenario():
    result = TickScriptEngine().validate("study(")
    assert not result.is_valid
    assert "Expected ')'" in result.error


def test_last_plot_wins_scenario():
    source = "plot(close())\nplot(close() * 3)"
    result = TickScriptEngine().execute_script(source, bars_from_closes([1, 2]))
    assert result.values == [3.0, 6.0]


def test_division_by_zero_scenario():
    engine = TickScriptEngine()
    result = engine.execute_script("plot(1/0)", bars_from_closes([1, 2]))
    assert result.error.kind == "DivisionByZero"
    result = engine.execute_script("plot(close() / (close() - 2))", bars_from_closes([1, 2]))
    assert result.error.kind == "DivisionByZero"


def test_sma_of_constant_is_constant():
    result = TickScriptEngine().execute_script("plot(sma(close(), 4))", bars_from_closes([42.0] * 10))
    assert result.values[3:] == [42.0] * 7


def test_ema_boundary():
    result = TickScriptEngine().execute_script("plot(ema(close(), 10))", bars_from_closes([3.5, 9.0, 1.0]))
    assert result.values[0] == 3.5
